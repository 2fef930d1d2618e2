"""
Activity feed — append-only log of friend/like/review actions.
"""
import logging
import time

from sqlalchemy.orm import Session

from cinegraph.db.models import EventType, FeedEvent, OperationType
from cinegraph.services.validators import get_user_or_raise

logger = logging.getLogger(__name__)


def _now_millis() -> int:
    return int(time.time() * 1000)


def _build_event_dict(event: FeedEvent) -> dict:
    return {
        "event_id": event.event_id,
        "timestamp": event.timestamp,
        "user_id": event.user_id,
        "event_type": event.event_type.value,
        "operation": event.operation.value,
        "entity_id": event.entity_id,
    }


def add_event(
    db: Session,
    user_id: int,
    entity_id: int,
    event_type: EventType,
    operation: OperationType,
) -> None:
    """
    Append an event inside the caller's transaction.

    Flushes so the event id is assigned, but never commits: the event lands
    together with the mutation that produced it, or not at all. The actors
    are expected to be validated already.
    """
    event = FeedEvent(
        timestamp=_now_millis(),
        user_id=user_id,
        event_type=event_type,
        operation=operation,
        entity_id=entity_id,
    )
    db.add(event)
    db.flush()
    logger.info(
        "feed_event_added",
        extra={
            "user_id": user_id,
            "entity_id": entity_id,
            "event_type": event_type.value,
            "operation": operation.value,
        },
    )


def get_user_feed(db: Session, user_id: int) -> list[dict]:
    """Return every event the user performed, oldest first."""
    get_user_or_raise(db, user_id)

    rows = (
        db.query(FeedEvent)
        .filter(FeedEvent.user_id == user_id)
        .order_by(FeedEvent.event_id.asc())
        .all()
    )
    return [_build_event_dict(event) for event in rows]
