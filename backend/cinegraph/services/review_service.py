"""
Film review business logic and the usefulness ledger.

A review's usefulness is never stored: it is the number of likes minus the
number of dislikes, computed at read time from review_likes and
review_dislikes. A user may like and dislike the same review at once; the
two votes simply cancel out.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Query, Session

from cinegraph.core.errors import NotFoundError, raise_if_invalid
from cinegraph.db.models import EventType, OperationType, Review, ReviewDislike, ReviewLike
from cinegraph.schemas.reviews import ReviewCreateRequest, ReviewUpdateRequest
from cinegraph.services import feed_service
from cinegraph.services.validators import (
    check_count,
    get_film_or_raise,
    get_review_or_raise,
    get_user_or_raise,
    validate_review_fields,
)

logger = logging.getLogger(__name__)


def useful_subquery():
    """Correlated likes − dislikes for the Review row in the enclosing query."""
    likes = (
        select(func.count(ReviewLike.user_id))
        .where(ReviewLike.review_id == Review.id)
        .correlate(Review)
        .scalar_subquery()
    )
    dislikes = (
        select(func.count(ReviewDislike.user_id))
        .where(ReviewDislike.review_id == Review.id)
        .correlate(Review)
        .scalar_subquery()
    )
    return likes - dislikes


def _reviews_with_useful(db: Session) -> tuple[Query, object]:
    useful = useful_subquery().label("useful")
    return db.query(Review, useful), useful


def _build_review_dict(review: Review, useful: int) -> dict:
    return {
        "review_id": review.id,
        "content": review.content,
        "is_positive": review.is_positive,
        "user_id": review.user_id,
        "film_id": review.film_id,
        "useful": int(useful or 0),
    }


def _useful_of(db: Session, review_id: int) -> int:
    query, _ = _reviews_with_useful(db)
    row = query.filter(Review.id == review_id).one()
    return row.useful


# ── CRUD ─────────────────────────────────────────────────────────────────────


def create_review(db: Session, payload: ReviewCreateRequest) -> dict:
    raise_if_invalid(validate_review_fields(payload.content))
    get_film_or_raise(db, payload.film_id)
    get_user_or_raise(db, payload.user_id)

    review = Review(
        film_id=payload.film_id,
        user_id=payload.user_id,
        content=payload.content,
        is_positive=payload.is_positive,
    )
    db.add(review)
    db.flush()

    feed_service.add_event(db, review.user_id, review.id, EventType.REVIEW, OperationType.ADD)
    db.commit()
    db.refresh(review)

    logger.info("review_created", extra={"review_id": review.id, "film_id": review.film_id})
    return _build_review_dict(review, 0)


def update_review(db: Session, payload: ReviewUpdateRequest) -> dict:
    """Change content and polarity. Author and film stay as stored."""
    raise_if_invalid(validate_review_fields(payload.content))
    review = get_review_or_raise(db, payload.review_id)

    review.content = payload.content
    review.is_positive = payload.is_positive
    db.add(review)

    feed_service.add_event(db, review.user_id, review.id, EventType.REVIEW, OperationType.UPDATE)
    db.commit()
    db.refresh(review)

    logger.info("review_updated", extra={"review_id": review.id})
    return _build_review_dict(review, _useful_of(db, review.id))


def delete_review(db: Session, review_id: int) -> None:
    review = get_review_or_raise(db, review_id)

    feed_service.add_event(db, review.user_id, review.id, EventType.REVIEW, OperationType.REMOVE)
    db.delete(review)
    db.commit()
    logger.info("review_removed", extra={"review_id": review_id})


def get_review(db: Session, review_id: int) -> dict:
    review = get_review_or_raise(db, review_id)
    return _build_review_dict(review, _useful_of(db, review_id))


def get_reviews(db: Session, film_id: int | None = None, count: int = 10) -> list[dict]:
    """
    The *count* most useful reviews, optionally for one film only.
    Ties are broken by review id ascending.
    """
    check_count(count)
    if film_id is not None:
        get_film_or_raise(db, film_id)

    query, useful = _reviews_with_useful(db)
    if film_id is not None:
        query = query.filter(Review.film_id == film_id)

    rows = query.order_by(useful.desc(), Review.id.asc()).limit(count).all()
    return [_build_review_dict(review, review_useful) for review, review_useful in rows]


# ── Votes ────────────────────────────────────────────────────────────────────


def _add_vote(db: Session, model, review_id: int, user_id: int) -> None:
    get_review_or_raise(db, review_id)
    get_user_or_raise(db, user_id)

    if db.get(model, (review_id, user_id)) is None:
        db.add(model(review_id=review_id, user_id=user_id))
        db.commit()


def _remove_vote(db: Session, model, kind: str, review_id: int, user_id: int) -> None:
    get_review_or_raise(db, review_id)
    get_user_or_raise(db, user_id)

    vote = db.get(model, (review_id, user_id))
    if vote is None:
        raise NotFoundError(
            kind,
            f"User {user_id} has no {kind.lower()} on review {review_id}",
        )
    db.delete(vote)
    db.commit()


def add_like(db: Session, review_id: int, user_id: int) -> None:
    _add_vote(db, ReviewLike, review_id, user_id)
    logger.info("review_liked", extra={"review_id": review_id, "user_id": user_id})


def remove_like(db: Session, review_id: int, user_id: int) -> None:
    _remove_vote(db, ReviewLike, "Like", review_id, user_id)
    logger.info("review_like_removed", extra={"review_id": review_id, "user_id": user_id})


def add_dislike(db: Session, review_id: int, user_id: int) -> None:
    _add_vote(db, ReviewDislike, review_id, user_id)
    logger.info("review_disliked", extra={"review_id": review_id, "user_id": user_id})


def remove_dislike(db: Session, review_id: int, user_id: int) -> None:
    _remove_vote(db, ReviewDislike, "Dislike", review_id, user_id)
    logger.info("review_dislike_removed", extra={"review_id": review_id, "user_id": user_id})
