"""
Reference data — genres, MPA ratings and directors.

Genres and MPA ratings are a fixed, seeded vocabulary with stable ids; only
directors are editable.
"""
import logging

from sqlalchemy.orm import Session

from cinegraph.core.errors import raise_if_invalid
from cinegraph.db.models import Director, Genre, MpaRating
from cinegraph.schemas.reference import DirectorCreateRequest, DirectorUpdateRequest
from cinegraph.services.validators import (
    get_director_or_raise,
    get_genre_or_raise,
    get_mpa_or_raise,
    validate_director_fields,
)

logger = logging.getLogger(__name__)

DEFAULT_GENRES = [
    (1, "Comedy"),
    (2, "Drama"),
    (3, "Animation"),
    (4, "Thriller"),
    (5, "Documentary"),
    (6, "Action"),
]

DEFAULT_MPA_RATINGS = [
    (1, "G"),
    (2, "PG"),
    (3, "PG-13"),
    (4, "R"),
    (5, "NC-17"),
]


def _named(row) -> dict:
    return {"id": row.id, "name": row.name}


def seed_reference_data(db: Session) -> None:
    """Insert any missing default genre or MPA rating. Safe to call repeatedly."""
    inserted = 0
    for genre_id, name in DEFAULT_GENRES:
        if db.get(Genre, genre_id) is None:
            db.add(Genre(id=genre_id, name=name))
            inserted += 1
    for mpa_id, name in DEFAULT_MPA_RATINGS:
        if db.get(MpaRating, mpa_id) is None:
            db.add(MpaRating(id=mpa_id, name=name))
            inserted += 1
    db.commit()
    if inserted:
        logger.info("reference_data_seeded", extra={"rows": inserted})


# ── Genres / MPA ─────────────────────────────────────────────────────────────


def get_genre(db: Session, genre_id: int) -> dict:
    return _named(get_genre_or_raise(db, genre_id))


def list_genres(db: Session) -> list[dict]:
    return [_named(genre) for genre in db.query(Genre).order_by(Genre.id.asc()).all()]


def get_mpa(db: Session, mpa_id: int) -> dict:
    return _named(get_mpa_or_raise(db, mpa_id))


def list_mpa(db: Session) -> list[dict]:
    return [_named(mpa) for mpa in db.query(MpaRating).order_by(MpaRating.id.asc()).all()]


# ── Directors ────────────────────────────────────────────────────────────────


def get_director(db: Session, director_id: int) -> dict:
    return _named(get_director_or_raise(db, director_id))


def list_directors(db: Session) -> list[dict]:
    return [_named(director) for director in db.query(Director).order_by(Director.id.asc()).all()]


def create_director(db: Session, payload: DirectorCreateRequest) -> dict:
    raise_if_invalid(validate_director_fields(payload.name))

    director = Director(name=payload.name)
    db.add(director)
    db.commit()
    db.refresh(director)

    logger.info("director_created", extra={"director_id": director.id})
    return _named(director)


def update_director(db: Session, payload: DirectorUpdateRequest) -> dict:
    """Rename a director. The search index picks the new name up on the next film update."""
    raise_if_invalid(validate_director_fields(payload.name))
    director = get_director_or_raise(db, payload.id)

    director.name = payload.name
    db.add(director)
    db.commit()
    db.refresh(director)
    return _named(director)


def remove_director(db: Session, director_id: int) -> None:
    director = get_director_or_raise(db, director_id)
    db.delete(director)
    db.commit()
    logger.info("director_removed", extra={"director_id": director_id})
