"""
Reviews API — /reviews
──────────────────────
Film reviews and their usefulness votes.

Endpoints:
  POST   /reviews                              — Create a review
  PUT    /reviews                              — Edit content/polarity
  GET    /reviews                              — Most useful reviews (film_id, count)
  GET    /reviews/{review_id}                  — One review
  DELETE /reviews/{review_id}                  — Delete a review
  PUT    /reviews/{review_id}/like/{user_id}    — Mark useful
  DELETE /reviews/{review_id}/like/{user_id}    — Withdraw a like
  PUT    /reviews/{review_id}/dislike/{user_id} — Mark not useful
  DELETE /reviews/{review_id}/dislike/{user_id} — Withdraw a dislike
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from cinegraph.core.config import settings
from cinegraph.db.session import get_db
from cinegraph.schemas.reviews import ReviewCreateRequest, ReviewResponse, ReviewUpdateRequest
from cinegraph.services import review_service

router = APIRouter()


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(payload: ReviewCreateRequest, db: Session = Depends(get_db)) -> dict:
    return review_service.create_review(db, payload)


@router.put("", response_model=ReviewResponse)
def update_review(payload: ReviewUpdateRequest, db: Session = Depends(get_db)) -> dict:
    return review_service.update_review(db, payload)


@router.get("", response_model=list[ReviewResponse])
def get_reviews(
    film_id: int | None = Query(None),
    count: int = Query(settings.DEFAULT_REVIEWS_COUNT),
    db: Session = Depends(get_db),
) -> list[dict]:
    return review_service.get_reviews(db, film_id=film_id, count=count)


@router.get("/{review_id}", response_model=ReviewResponse)
def get_review(review_id: int, db: Session = Depends(get_db)) -> dict:
    return review_service.get_review(db, review_id)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(review_id: int, db: Session = Depends(get_db)) -> None:
    review_service.delete_review(db, review_id)


# ── Votes ─────────────────────────────────────────────────────────────────────

@router.put("/{review_id}/like/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def add_like(review_id: int, user_id: int, db: Session = Depends(get_db)) -> None:
    review_service.add_like(db, review_id, user_id)


@router.delete("/{review_id}/like/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_like(review_id: int, user_id: int, db: Session = Depends(get_db)) -> None:
    review_service.remove_like(db, review_id, user_id)


@router.put("/{review_id}/dislike/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def add_dislike(review_id: int, user_id: int, db: Session = Depends(get_db)) -> None:
    review_service.add_dislike(db, review_id, user_id)


@router.delete("/{review_id}/dislike/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_dislike(review_id: int, user_id: int, db: Session = Depends(get_db)) -> None:
    review_service.remove_dislike(db, review_id, user_id)
