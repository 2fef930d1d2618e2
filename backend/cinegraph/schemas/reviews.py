"""
Review request/response schemas.
"""
from pydantic import BaseModel


class ReviewCreateRequest(BaseModel):
    """Create a review of a film."""

    content: str
    is_positive: bool
    user_id: int
    film_id: int


class ReviewUpdateRequest(BaseModel):
    """Author and film are fixed at creation; only the text and polarity change."""

    review_id: int
    content: str
    is_positive: bool


class ReviewResponse(BaseModel):
    """A single review with its usefulness score."""

    review_id: int
    content: str
    is_positive: bool
    user_id: int
    film_id: int
    useful: int = 0
