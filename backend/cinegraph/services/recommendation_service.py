"""
Film recommendations from overlapping likes.

Two set steps over the film_likes relation:
  1. similar users, via a self-join on film_id: everyone else who liked at least
     one film the target user liked;
  2. candidates: films those users liked, anti-joined against the target
     user's own likes.
There is no scoring: the result is the candidate set, ordered by film id.
"""
import logging

from sqlalchemy.orm import Session, aliased

from cinegraph.db.models import FilmLike
from cinegraph.services.film_service import get_films_by_ids
from cinegraph.services.validators import get_user_or_raise

logger = logging.getLogger(__name__)


def find_similar_users(db: Session, user_id: int) -> set[int]:
    mine = aliased(FilmLike)
    theirs = aliased(FilmLike)
    rows = (
        db.query(theirs.user_id)
        .join(mine, mine.film_id == theirs.film_id)
        .filter(mine.user_id == user_id, theirs.user_id != user_id)
        .distinct()
        .all()
    )
    return {row.user_id for row in rows}


def find_recommended_film_ids(db: Session, user_id: int, similar_users: set[int]) -> set[int]:
    if not similar_users:
        return set()

    own = aliased(FilmLike)
    rows = (
        db.query(FilmLike.film_id)
        .outerjoin(own, (own.film_id == FilmLike.film_id) & (own.user_id == user_id))
        .filter(FilmLike.user_id.in_(similar_users), own.user_id.is_(None))
        .distinct()
        .all()
    )
    return {row.film_id for row in rows}


def get_recommendations(db: Session, user_id: int) -> list[dict]:
    get_user_or_raise(db, user_id)

    similar_users = find_similar_users(db, user_id)
    film_ids = find_recommended_film_ids(db, user_id, similar_users)
    logger.info(
        "recommendations_computed",
        extra={
            "user_id": user_id,
            "similar_users": len(similar_users),
            "films": len(film_ids),
        },
    )
    return get_films_by_ids(db, film_ids)
