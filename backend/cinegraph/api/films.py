"""
Films API — /films
──────────────────
Film catalog: CRUD, likes, popularity, search and per-director listings.

Endpoints:
  POST   /films                            — Create a film
  PUT    /films                            — Replace a film
  GET    /films                            — All films
  GET    /films/popular                    — Most liked films (count, genre_id, year)
  GET    /films/common                     — Films liked by both users
  GET    /films/search                     — Search by title and/or director
  GET    /films/director/{director_id}     — A director's films (sort_by=year|likes)
  GET    /films/{film_id}                  — One film
  DELETE /films/{film_id}                  — Delete a film
  PUT    /films/{film_id}/like/{user_id}   — Like a film
  DELETE /films/{film_id}/like/{user_id}   — Remove a like
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from cinegraph.core.config import settings
from cinegraph.db.session import get_db
from cinegraph.deps.catalog import get_catalog
from cinegraph.schemas.films import FilmCreateRequest, FilmResponse, FilmUpdateRequest
from cinegraph.services import film_service
from cinegraph.services.catalog_index import CatalogIndex

router = APIRouter()


@router.post("", response_model=FilmResponse, status_code=status.HTTP_201_CREATED)
def create_film(
    payload: FilmCreateRequest,
    db: Session = Depends(get_db),
    catalog: CatalogIndex = Depends(get_catalog),
) -> dict:
    return film_service.create_film(db, catalog, payload)


@router.put("", response_model=FilmResponse)
def update_film(
    payload: FilmUpdateRequest,
    db: Session = Depends(get_db),
    catalog: CatalogIndex = Depends(get_catalog),
) -> dict:
    return film_service.update_film(db, catalog, payload)


@router.get("", response_model=list[FilmResponse])
def list_films(db: Session = Depends(get_db)) -> list[dict]:
    return film_service.list_films(db)


@router.get("/popular", response_model=list[FilmResponse])
def get_popular_films(
    count: int = Query(settings.DEFAULT_POPULAR_COUNT),
    genre_id: int | None = Query(None),
    year: int | None = Query(None),
    db: Session = Depends(get_db),
) -> list[dict]:
    return film_service.get_popular_films(db, count, genre_id=genre_id, year=year)


@router.get("/common", response_model=list[FilmResponse])
def get_common_films(
    user_id: int = Query(...),
    friend_id: int = Query(...),
    db: Session = Depends(get_db),
) -> list[dict]:
    return film_service.get_common_films(db, user_id, friend_id)


@router.get("/search", response_model=list[FilmResponse])
def search_films(
    query: str = Query(...),
    by: list[str] = Query([]),
    db: Session = Depends(get_db),
    catalog: CatalogIndex = Depends(get_catalog),
) -> list[dict]:
    """Case-insensitive search. ``by`` may be repeated or comma-separated."""
    return film_service.search_films(db, catalog, query, by)


@router.get("/director/{director_id}", response_model=list[FilmResponse])
def get_films_by_director(
    director_id: int,
    sort_by: str = Query(film_service.SORT_BY_YEAR),
    db: Session = Depends(get_db),
) -> list[dict]:
    return film_service.get_films_by_director(db, director_id, sort_by)


@router.get("/{film_id}", response_model=FilmResponse)
def get_film(film_id: int, db: Session = Depends(get_db)) -> dict:
    return film_service.get_film(db, film_id)


@router.delete("/{film_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_film(
    film_id: int,
    db: Session = Depends(get_db),
    catalog: CatalogIndex = Depends(get_catalog),
) -> None:
    film_service.remove_film(db, catalog, film_id)


@router.put("/{film_id}/like/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def add_like(film_id: int, user_id: int, db: Session = Depends(get_db)) -> None:
    film_service.add_like(db, film_id, user_id)


@router.delete("/{film_id}/like/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_like(film_id: int, user_id: int, db: Session = Depends(get_db)) -> None:
    film_service.remove_like(db, film_id, user_id)
