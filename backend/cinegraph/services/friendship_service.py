"""
Friendship graph — directed edges with a confirmation status.

add_friend(u, v) writes u→v CONFIRMED and, if v has no edge toward u yet,
v→u PENDING. Friends of u are the targets of u's CONFIRMED edges, so the
relation is asymmetric until v adds u back.

remove_friend(u, v) has two outcomes depending on the pair's state:
  * mutual (both CONFIRMED): only u→v is demoted to PENDING; v keeps u.
  * one-way (u→v CONFIRMED, v→u PENDING): both rows are deleted.
Any other state (an edge missing, or u→v still PENDING) is reported as
"not removed" without raising and without a feed event.
"""
import logging

from sqlalchemy import func, select, union_all
from sqlalchemy.orm import Session

from cinegraph.core.errors import FieldError, raise_if_invalid
from cinegraph.db.models import EventType, Friendship, FriendshipStatus, OperationType, User
from cinegraph.services import feed_service
from cinegraph.services.user_service import build_user_dict
from cinegraph.services.validators import get_user_or_raise

logger = logging.getLogger(__name__)


def _edge(db: Session, user_id: int, friend_id: int) -> Friendship | None:
    return db.get(Friendship, (user_id, friend_id))


def get_friendship_status(db: Session, user_id: int, friend_id: int) -> FriendshipStatus | None:
    """Status of the user_id → friend_id edge, or None if there is no edge."""
    edge = _edge(db, user_id, friend_id)
    return FriendshipStatus(edge.status) if edge is not None else None


def add_friend(db: Session, user_id: int, friend_id: int) -> None:
    get_user_or_raise(db, user_id)
    get_user_or_raise(db, friend_id)
    if user_id == friend_id:
        raise_if_invalid([FieldError("Friendship", "friend_id", "A user cannot befriend themselves")])

    own = _edge(db, user_id, friend_id)
    if own is None:
        db.add(Friendship(user_id=user_id, friend_id=friend_id, status=FriendshipStatus.CONFIRMED))
    else:
        own.status = FriendshipStatus.CONFIRMED

    # The reciprocal edge is only created, never downgraded: if friend_id
    # already confirmed user_id, the pair becomes mutual.
    if _edge(db, friend_id, user_id) is None:
        db.add(Friendship(user_id=friend_id, friend_id=user_id, status=FriendshipStatus.PENDING))

    feed_service.add_event(db, user_id, friend_id, EventType.FRIEND, OperationType.ADD)
    db.commit()
    logger.info("friend_added", extra={"user_id": user_id, "friend_id": friend_id})


def remove_friend(db: Session, user_id: int, friend_id: int) -> bool:
    """Returns True when the friendship was removed, False for the silent no-op."""
    get_user_or_raise(db, user_id)
    get_user_or_raise(db, friend_id)

    own = _edge(db, user_id, friend_id)
    reverse = _edge(db, friend_id, user_id)

    if own is None or reverse is None or own.status == FriendshipStatus.PENDING:
        logger.info(
            "friend_not_removed",
            extra={"user_id": user_id, "friend_id": friend_id},
        )
        return False

    if reverse.status == FriendshipStatus.CONFIRMED:
        own.status = FriendshipStatus.PENDING
    else:
        db.delete(own)
        db.delete(reverse)

    feed_service.add_event(db, user_id, friend_id, EventType.FRIEND, OperationType.REMOVE)
    db.commit()
    logger.info("friend_removed", extra={"user_id": user_id, "friend_id": friend_id})
    return True


def list_friends(db: Session, user_id: int) -> list[dict]:
    get_user_or_raise(db, user_id)

    confirmed_targets = select(Friendship.friend_id).where(
        Friendship.user_id == user_id,
        Friendship.status == FriendshipStatus.CONFIRMED,
    )
    users = (
        db.query(User)
        .filter(User.id.in_(confirmed_targets))
        .order_by(User.id.asc())
        .all()
    )
    return [build_user_dict(user) for user in users]


def list_common_friends(db: Session, user_id: int, other_id: int) -> list[dict]:
    """
    Users both sides have CONFIRMED. Both target lists are concatenated
    with UNION ALL and grouped; a target seen more than once is common.
    """
    get_user_or_raise(db, user_id)
    get_user_or_raise(db, other_id)

    targets = union_all(
        select(Friendship.user_id, Friendship.friend_id).where(
            Friendship.user_id == user_id,
            Friendship.status == FriendshipStatus.CONFIRMED,
        ),
        select(Friendship.user_id, Friendship.friend_id).where(
            Friendship.user_id == other_id,
            Friendship.status == FriendshipStatus.CONFIRMED,
        ),
    ).subquery()

    common_ids = (
        select(targets.c.friend_id)
        .group_by(targets.c.friend_id)
        .having(func.count(targets.c.user_id) > 1)
    )
    users = (
        db.query(User)
        .filter(User.id.in_(common_ids))
        .order_by(User.id.asc())
        .all()
    )
    return [build_user_dict(user) for user in users]
