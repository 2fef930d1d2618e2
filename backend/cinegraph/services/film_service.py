"""
Film business logic — CRUD, likes, popularity ranking and catalog search.

Every read that returns films goes through _films_with_likes(), which
attaches the like count as a correlated subquery, so the same ordering
(likes DESC, id ASC) backs the popular list, search results and common
films.
"""
import logging
from collections.abc import Iterable

from sqlalchemy import extract, func, select
from sqlalchemy.orm import Query, Session, selectinload

from cinegraph.core.errors import IncorrectParameterError, raise_if_invalid
from cinegraph.db.models import Director, EventType, Film, FilmLike, Genre, OperationType
from cinegraph.schemas.films import FilmCreateRequest, FilmUpdateRequest
from cinegraph.services import feed_service
from cinegraph.services.catalog_index import CatalogIndex
from cinegraph.services.validators import (
    check_count,
    get_director_or_raise,
    get_film_or_raise,
    get_genre_or_raise,
    get_mpa_or_raise,
    get_user_or_raise,
    validate_film_fields,
)

logger = logging.getLogger(__name__)

SORT_BY_YEAR = "year"
SORT_BY_LIKES = "likes"
DIRECTOR_SORTS = (SORT_BY_YEAR, SORT_BY_LIKES)


# ── Helpers ──────────────────────────────────────────────────────────────────


def like_count_subquery():
    """Correlated COUNT of likes for the Film row in the enclosing query."""
    return (
        select(func.count(FilmLike.user_id))
        .where(FilmLike.film_id == Film.id)
        .correlate(Film)
        .scalar_subquery()
    )


def _films_with_likes(db: Session) -> tuple[Query, object]:
    likes = like_count_subquery().label("likes")
    query = db.query(Film, likes).options(
        selectinload(Film.mpa),
        selectinload(Film.genres),
        selectinload(Film.directors),
    )
    return query, likes


def _named(row) -> dict:
    return {"id": row.id, "name": row.name}


def build_film_dict(film: Film, likes: int) -> dict:
    return {
        "id": film.id,
        "name": film.name,
        "description": film.description,
        "release_date": film.release_date,
        "duration": film.duration,
        "mpa": _named(film.mpa) if film.mpa is not None else None,
        "genres": [_named(genre) for genre in film.genres],
        "directors": [_named(director) for director in film.directors],
        "likes": int(likes or 0),
    }


def _count_likes(db: Session, film_id: int) -> int:
    return (
        db.query(func.count(FilmLike.user_id))
        .filter(FilmLike.film_id == film_id)
        .scalar()
    ) or 0


def _unique_ids(refs: Iterable) -> list[int]:
    """Collapse duplicate references, ascending by id."""
    return sorted({ref.id for ref in refs})


def _validate_payload(payload: FilmCreateRequest) -> None:
    raise_if_invalid(
        validate_film_fields(
            payload.name,
            payload.description,
            payload.release_date,
            payload.duration,
        )
    )


def _apply_payload(db: Session, film: Film, payload: FilmCreateRequest) -> None:
    """
    Copy every mutable field from *payload* onto *film*, replacing genres and
    directors wholesale. References are checked before anything is assigned.
    """
    mpa = get_mpa_or_raise(db, payload.mpa.id) if payload.mpa is not None else None
    genres = [get_genre_or_raise(db, genre_id) for genre_id in _unique_ids(payload.genres)]
    directors = [
        get_director_or_raise(db, director_id)
        for director_id in _unique_ids(payload.directors)
    ]

    film.name = payload.name
    film.description = payload.description
    film.release_date = payload.release_date
    film.duration = payload.duration
    film.mpa = mpa
    film.genres = genres
    film.directors = directors


# ── CRUD ─────────────────────────────────────────────────────────────────────


def create_film(db: Session, catalog: CatalogIndex, payload: FilmCreateRequest) -> dict:
    """Insert the film row and its MPA/genre/director links in one commit."""
    _validate_payload(payload)
    film = Film()
    _apply_payload(db, film, payload)

    db.add(film)
    db.commit()
    db.refresh(film)

    catalog.upsert(film)
    logger.info("film_created", extra={"film_id": film.id})
    return build_film_dict(film, 0)


def update_film(db: Session, catalog: CatalogIndex, payload: FilmUpdateRequest) -> dict:
    _validate_payload(payload)
    film = get_film_or_raise(db, payload.id)
    _apply_payload(db, film, payload)

    db.add(film)
    db.commit()
    db.refresh(film)

    catalog.upsert(film)
    logger.info("film_updated", extra={"film_id": film.id})
    return build_film_dict(film, _count_likes(db, film.id))


def get_film(db: Session, film_id: int) -> dict:
    film = get_film_or_raise(db, film_id)
    return build_film_dict(film, _count_likes(db, film_id))


def list_films(db: Session) -> list[dict]:
    query, _ = _films_with_likes(db)
    rows = query.order_by(Film.id.asc()).all()
    return [build_film_dict(film, likes) for film, likes in rows]


def remove_film(db: Session, catalog: CatalogIndex, film_id: int) -> None:
    """Delete a film; likes, links and reviews go with it via FK cascade."""
    film = get_film_or_raise(db, film_id)
    db.delete(film)
    db.commit()

    catalog.remove(film_id)
    logger.info("film_removed", extra={"film_id": film_id})


# ── Likes ────────────────────────────────────────────────────────────────────


def add_like(db: Session, film_id: int, user_id: int) -> None:
    """Like a film. Liking twice keeps a single like."""
    get_film_or_raise(db, film_id)
    get_user_or_raise(db, user_id)

    if db.get(FilmLike, (film_id, user_id)) is None:
        db.add(FilmLike(film_id=film_id, user_id=user_id))
    feed_service.add_event(db, user_id, film_id, EventType.LIKE, OperationType.ADD)
    db.commit()


def remove_like(db: Session, film_id: int, user_id: int) -> bool:
    """Remove a like. Returns False (and logs nothing to the feed) if absent."""
    get_film_or_raise(db, film_id)
    get_user_or_raise(db, user_id)

    like = db.get(FilmLike, (film_id, user_id))
    if like is None:
        return False

    db.delete(like)
    feed_service.add_event(db, user_id, film_id, EventType.LIKE, OperationType.REMOVE)
    db.commit()
    return True


# ── Popularity ───────────────────────────────────────────────────────────────


def get_popular_films(
    db: Session,
    count: int = 10,
    *,
    genre_id: int | None = None,
    year: int | None = None,
) -> list[dict]:
    """
    Top *count* films by like count, optionally restricted to a genre and/or
    a release year. Ties keep storage order (film id ascending).
    """
    check_count(count)
    if genre_id is not None:
        get_genre_or_raise(db, genre_id)

    query, likes = _films_with_likes(db)
    if genre_id is not None:
        query = query.filter(Film.genres.any(Genre.id == genre_id))
    if year is not None:
        query = query.filter(extract("year", Film.release_date) == year)

    rows = query.order_by(likes.desc(), Film.id.asc()).limit(count).all()
    return [build_film_dict(film, film_likes) for film, film_likes in rows]


def get_films_by_ids(db: Session, film_ids: Iterable[int]) -> list[dict]:
    """Hydrate the given films, ordered by id."""
    ids = list(film_ids)
    if not ids:
        return []

    query, _ = _films_with_likes(db)
    rows = query.filter(Film.id.in_(ids)).order_by(Film.id.asc()).all()
    return [build_film_dict(film, film_likes) for film, film_likes in rows]


def get_films_by_ids_by_popularity(db: Session, film_ids: Iterable[int]) -> list[dict]:
    ids = list(film_ids)
    if not ids:
        return []

    query, likes = _films_with_likes(db)
    rows = (
        query
        .filter(Film.id.in_(ids))
        .order_by(likes.desc(), Film.id.asc())
        .all()
    )
    return [build_film_dict(film, film_likes) for film, film_likes in rows]


def get_common_films(db: Session, user_id: int, other_user_id: int) -> list[dict]:
    """Films liked by both users, most popular first."""
    get_user_or_raise(db, user_id)
    get_user_or_raise(db, other_user_id)

    liked_by_user = select(FilmLike.film_id).where(FilmLike.user_id == user_id)
    liked_by_other = select(FilmLike.film_id).where(FilmLike.user_id == other_user_id)

    query, likes = _films_with_likes(db)
    rows = (
        query
        .filter(Film.id.in_(liked_by_user), Film.id.in_(liked_by_other))
        .order_by(likes.desc(), Film.id.asc())
        .all()
    )
    return [build_film_dict(film, film_likes) for film, film_likes in rows]


def get_films_by_director(db: Session, director_id: int, sort_by: str = SORT_BY_YEAR) -> list[dict]:
    """
    A director's films, by release date ascending (``year``) or by like
    count ascending (``likes``).
    """
    get_director_or_raise(db, director_id)

    query, likes = _films_with_likes(db)
    query = query.filter(Film.directors.any(Director.id == director_id))

    if sort_by == SORT_BY_YEAR:
        query = query.order_by(Film.release_date.asc(), Film.id.asc())
    elif sort_by == SORT_BY_LIKES:
        query = query.order_by(likes.asc(), Film.id.asc())
    else:
        raise IncorrectParameterError(
            "sort_by",
            f"Unsupported sort {sort_by!r}. Use one of: {', '.join(DIRECTOR_SORTS)}",
        )

    return [build_film_dict(film, film_likes) for film, film_likes in query.all()]


# ── Search ───────────────────────────────────────────────────────────────────


def search_films(
    db: Session,
    catalog: CatalogIndex,
    query: str,
    by: Iterable[str] | None = None,
) -> list[dict]:
    """Case-insensitive substring search over titles and/or directors, by popularity."""
    film_ids = catalog.search(query, by)
    return get_films_by_ids_by_popularity(db, film_ids)
