"""
Directors API — /directors
──────────────────────────
Endpoints:
  POST   /directors                — Create a director
  PUT    /directors                — Rename a director
  GET    /directors                — All directors
  GET    /directors/{director_id}  — One director
  DELETE /directors/{director_id}  — Delete a director
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cinegraph.db.session import get_db
from cinegraph.schemas.reference import DirectorCreateRequest, DirectorResponse, DirectorUpdateRequest
from cinegraph.services import reference_service

router = APIRouter()


@router.post("", response_model=DirectorResponse, status_code=status.HTTP_201_CREATED)
def create_director(payload: DirectorCreateRequest, db: Session = Depends(get_db)) -> dict:
    return reference_service.create_director(db, payload)


@router.put("", response_model=DirectorResponse)
def update_director(payload: DirectorUpdateRequest, db: Session = Depends(get_db)) -> dict:
    return reference_service.update_director(db, payload)


@router.get("", response_model=list[DirectorResponse])
def list_directors(db: Session = Depends(get_db)) -> list[dict]:
    return reference_service.list_directors(db)


@router.get("/{director_id}", response_model=DirectorResponse)
def get_director(director_id: int, db: Session = Depends(get_db)) -> dict:
    return reference_service.get_director(db, director_id)


@router.delete("/{director_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_director(director_id: int, db: Session = Depends(get_db)) -> None:
    reference_service.remove_director(db, director_id)
