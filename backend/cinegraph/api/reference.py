"""
Reference API — /genres, /mpa
─────────────────────────────
Read-only lookups over the seeded vocabularies.

Endpoints:
  GET /genres            — All genres
  GET /genres/{genre_id} — One genre
  GET /mpa               — All MPA ratings
  GET /mpa/{mpa_id}      — One MPA rating
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cinegraph.db.session import get_db
from cinegraph.schemas.reference import GenreResponse, MpaResponse
from cinegraph.services import reference_service

genres_router = APIRouter()
mpa_router = APIRouter()


@genres_router.get("", response_model=list[GenreResponse])
def list_genres(db: Session = Depends(get_db)) -> list[dict]:
    return reference_service.list_genres(db)


@genres_router.get("/{genre_id}", response_model=GenreResponse)
def get_genre(genre_id: int, db: Session = Depends(get_db)) -> dict:
    return reference_service.get_genre(db, genre_id)


@mpa_router.get("", response_model=list[MpaResponse])
def list_mpa(db: Session = Depends(get_db)) -> list[dict]:
    return reference_service.list_mpa(db)


@mpa_router.get("/{mpa_id}", response_model=MpaResponse)
def get_mpa(mpa_id: int, db: Session = Depends(get_db)) -> dict:
    return reference_service.get_mpa(db, mpa_id)
