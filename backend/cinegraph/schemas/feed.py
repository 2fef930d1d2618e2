from pydantic import BaseModel

from cinegraph.db.models import EventType, OperationType


class FeedEventResponse(BaseModel):
    """One entry of a user's activity feed."""

    event_id: int
    timestamp: int
    user_id: int
    event_type: EventType
    operation: OperationType
    entity_id: int
