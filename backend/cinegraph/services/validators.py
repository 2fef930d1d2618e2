"""
Field validation and existence checks shared by every service.

Field validators return a list of FieldError (empty when the input is fine)
instead of raising, so callers can collect every problem at once and decide
when to fail. Existence helpers return the row or raise NotFoundError; they
always run before the first write of an operation.
"""
import logging
import re
from datetime import date

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import Session

from cinegraph.core.errors import FieldError, IncorrectParameterError, NotFoundError
from cinegraph.db.models import Director, Film, Genre, MpaRating, Review, User

logger = logging.getLogger(__name__)

CINEMA_BIRTHDAY = date(1895, 12, 28)
MAX_DESCRIPTION_LENGTH = 200
MAX_REVIEW_LENGTH = 5000
# Signed 32-bit INTEGER primary keys
MIN_ID = -(2**31)
MAX_ID = 2**31 - 1

_WHITESPACE = re.compile(r"\s")


# ── Field validators ─────────────────────────────────────────────────────────


def validate_film_fields(
    name: str | None,
    description: str | None,
    release_date: date | None,
    duration: int | None,
) -> list[FieldError]:
    errors: list[FieldError] = []
    if name is None or not name.strip():
        errors.append(FieldError("Film", "name", "Name must not be blank"))
    if description is not None and len(description) > MAX_DESCRIPTION_LENGTH:
        errors.append(
            FieldError(
                "Film",
                "description",
                f"Description is longer than {MAX_DESCRIPTION_LENGTH} characters: {len(description)}",
            )
        )
    if release_date is None:
        errors.append(FieldError("Film", "release_date", "Release date is required"))
    elif release_date < CINEMA_BIRTHDAY:
        errors.append(
            FieldError(
                "Film",
                "release_date",
                f"Release date must be on or after {CINEMA_BIRTHDAY.isoformat()}: {release_date.isoformat()}",
            )
        )
    if duration is None or duration <= 0:
        errors.append(FieldError("Film", "duration", f"Duration must be positive: {duration}"))
    return errors


def validate_user_fields(
    email: str | None,
    login: str | None,
    birthday: date | None,
) -> list[FieldError]:
    errors: list[FieldError] = []
    if email is None or not email.strip():
        errors.append(FieldError("User", "email", "Email must not be blank"))
    else:
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError as exc:
            errors.append(FieldError("User", "email", f"Email is not valid: {email!r}: {exc}"))
    if login is None or not login.strip():
        errors.append(FieldError("User", "login", "Login must not be blank"))
    elif _WHITESPACE.search(login):
        errors.append(FieldError("User", "login", f"Login must not contain spaces: {login!r}"))
    if birthday is None:
        errors.append(FieldError("User", "birthday", "Birthday is required"))
    elif birthday > date.today():
        errors.append(
            FieldError("User", "birthday", f"Birthday must not be in the future: {birthday.isoformat()}")
        )
    return errors


def resolve_user_name(login: str, name: str | None) -> str:
    """Display name, falling back to the login when blank or absent."""
    if name is None or not name.strip():
        logger.warning("user_name_blank_login_used", extra={"login": login})
        return login
    return name


def validate_review_fields(content: str | None) -> list[FieldError]:
    if content is None or not content.strip():
        return [FieldError("Review", "content", "Content must not be blank")]
    if len(content) > MAX_REVIEW_LENGTH:
        return [
            FieldError(
                "Review",
                "content",
                f"Content is longer than {MAX_REVIEW_LENGTH} characters: {len(content)}",
            )
        ]
    return []


def validate_director_fields(name: str | None) -> list[FieldError]:
    if name is None or not name.strip():
        return [FieldError("Director", "name", "Name must not be blank")]
    return []


def check_count(count: int, parameter: str = "count") -> None:
    if count < 1:
        raise IncorrectParameterError(parameter, f"'{parameter}' must be at least 1: {count}")


# ── Existence checks ─────────────────────────────────────────────────────────


def _get_row(db: Session, model, row_id: int):
    """Primary-key lookup; ids outside the INTEGER column range cannot exist."""
    if not MIN_ID <= row_id <= MAX_ID:
        return None
    return db.get(model, row_id)


def get_user_or_raise(db: Session, user_id: int) -> User:
    user = _get_row(db, User, user_id)
    if user is None:
        raise NotFoundError("User", f"User with id {user_id} does not exist")
    return user


def get_film_or_raise(db: Session, film_id: int) -> Film:
    film = _get_row(db, Film, film_id)
    if film is None:
        raise NotFoundError("Film", f"Film with id {film_id} does not exist")
    return film


def get_review_or_raise(db: Session, review_id: int) -> Review:
    review = _get_row(db, Review, review_id)
    if review is None:
        raise NotFoundError("Review", f"Review with id {review_id} does not exist")
    return review


def get_genre_or_raise(db: Session, genre_id: int) -> Genre:
    genre = _get_row(db, Genre, genre_id)
    if genre is None:
        raise NotFoundError("Genre", f"Genre with id {genre_id} does not exist")
    return genre


def get_mpa_or_raise(db: Session, mpa_id: int) -> MpaRating:
    mpa = _get_row(db, MpaRating, mpa_id)
    if mpa is None:
        raise NotFoundError("Mpa", f"MPA rating with id {mpa_id} does not exist")
    return mpa


def get_director_or_raise(db: Session, director_id: int) -> Director:
    director = _get_row(db, Director, director_id)
    if director is None:
        raise NotFoundError("Director", f"Director with id {director_id} does not exist")
    return director
