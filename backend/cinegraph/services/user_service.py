"""
User business logic — registration, profile updates, lookup and removal.
"""
import logging

from sqlalchemy.orm import Session

from cinegraph.core.errors import raise_if_invalid
from cinegraph.db.models import User
from cinegraph.schemas.users import UserCreateRequest, UserUpdateRequest
from cinegraph.services.validators import get_user_or_raise, resolve_user_name, validate_user_fields

logger = logging.getLogger(__name__)


def build_user_dict(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "login": user.login,
        "name": user.name,
        "birthday": user.birthday,
    }


def _validate(payload: UserCreateRequest) -> None:
    raise_if_invalid(validate_user_fields(payload.email, payload.login, payload.birthday))


def create_user(db: Session, payload: UserCreateRequest) -> dict:
    _validate(payload)

    user = User(
        email=payload.email,
        login=payload.login,
        name=resolve_user_name(payload.login, payload.name),
        birthday=payload.birthday,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("user_created", extra={"user_id": user.id})
    return build_user_dict(user)


def update_user(db: Session, payload: UserUpdateRequest) -> dict:
    _validate(payload)
    user = get_user_or_raise(db, payload.id)

    user.email = payload.email
    user.login = payload.login
    user.name = resolve_user_name(payload.login, payload.name)
    user.birthday = payload.birthday

    db.add(user)
    db.commit()
    db.refresh(user)
    return build_user_dict(user)


def get_user(db: Session, user_id: int) -> dict:
    return build_user_dict(get_user_or_raise(db, user_id))


def list_users(db: Session) -> list[dict]:
    return [build_user_dict(user) for user in db.query(User).order_by(User.id.asc()).all()]


def remove_user(db: Session, user_id: int) -> None:
    """Delete a user; friendships, likes, reviews and feed go with it."""
    user = get_user_or_raise(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("user_removed", extra={"user_id": user_id})
