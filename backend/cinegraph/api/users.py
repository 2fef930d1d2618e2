"""
Users API — /users
──────────────────
Profiles, the friendship graph, activity feed and recommendations.

Endpoints:
  POST   /users                                   — Register a user
  PUT    /users                                   — Replace a user
  GET    /users                                   — All users
  GET    /users/{user_id}                         — One user
  DELETE /users/{user_id}                         — Delete a user
  PUT    /users/{user_id}/friends/{friend_id}     — Add a friend
  DELETE /users/{user_id}/friends/{friend_id}     — Remove a friend
  GET    /users/{user_id}/friends                 — Confirmed friends
  GET    /users/{user_id}/friends/common/{other_id} — Friends in common
  GET    /users/{user_id}/feed                    — Activity feed
  GET    /users/{user_id}/recommendations         — Film recommendations
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cinegraph.db.session import get_db
from cinegraph.schemas.feed import FeedEventResponse
from cinegraph.schemas.films import FilmResponse
from cinegraph.schemas.users import UserCreateRequest, UserResponse, UserUpdateRequest
from cinegraph.services import (
    feed_service,
    friendship_service,
    recommendation_service,
    user_service,
)

router = APIRouter()


# ── Profiles ──────────────────────────────────────────────────────────────────

@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreateRequest, db: Session = Depends(get_db)) -> dict:
    return user_service.create_user(db, payload)


@router.put("", response_model=UserResponse)
def update_user(payload: UserUpdateRequest, db: Session = Depends(get_db)) -> dict:
    return user_service.update_user(db, payload)


@router.get("", response_model=list[UserResponse])
def list_users(db: Session = Depends(get_db)) -> list[dict]:
    return user_service.list_users(db)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)) -> dict:
    return user_service.get_user(db, user_id)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_user(user_id: int, db: Session = Depends(get_db)) -> None:
    user_service.remove_user(db, user_id)


# ── Friends ───────────────────────────────────────────────────────────────────

@router.put("/{user_id}/friends/{friend_id}", status_code=status.HTTP_204_NO_CONTENT)
def add_friend(user_id: int, friend_id: int, db: Session = Depends(get_db)) -> None:
    friendship_service.add_friend(db, user_id, friend_id)


@router.delete("/{user_id}/friends/{friend_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_friend(user_id: int, friend_id: int, db: Session = Depends(get_db)) -> None:
    """Always 204: removing a friendship that is not there is a silent no-op."""
    friendship_service.remove_friend(db, user_id, friend_id)


@router.get("/{user_id}/friends", response_model=list[UserResponse])
def list_friends(user_id: int, db: Session = Depends(get_db)) -> list[dict]:
    return friendship_service.list_friends(db, user_id)


@router.get("/{user_id}/friends/common/{other_id}", response_model=list[UserResponse])
def list_common_friends(user_id: int, other_id: int, db: Session = Depends(get_db)) -> list[dict]:
    return friendship_service.list_common_friends(db, user_id, other_id)


# ── Feed & recommendations ────────────────────────────────────────────────────

@router.get("/{user_id}/feed", response_model=list[FeedEventResponse])
def get_feed(user_id: int, db: Session = Depends(get_db)) -> list[dict]:
    return feed_service.get_user_feed(db, user_id)


@router.get("/{user_id}/recommendations", response_model=list[FilmResponse])
def get_recommendations(user_id: int, db: Session = Depends(get_db)) -> list[dict]:
    return recommendation_service.get_recommendations(db, user_id)
