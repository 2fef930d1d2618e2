"""
Film request/response schemas.

Only shapes and types live here. Domain rules (release date floor,
description length, positive duration) are checked by
cinegraph.services.validators so they produce INVALID_FIELDS errors.
"""
from datetime import date

from pydantic import BaseModel


class ReferenceId(BaseModel):
    """Reference to an MPA rating, genre or director by id."""

    id: int


class NamedReference(BaseModel):
    id: int
    name: str


class FilmCreateRequest(BaseModel):
    name: str
    description: str | None = None
    release_date: date
    duration: int
    mpa: ReferenceId | None = None
    genres: list[ReferenceId] = []
    directors: list[ReferenceId] = []


class FilmUpdateRequest(FilmCreateRequest):
    """Full replacement of a film's mutable fields."""

    id: int


class FilmResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    release_date: date
    duration: int
    mpa: NamedReference | None = None
    genres: list[NamedReference] = []
    directors: list[NamedReference] = []
    likes: int = 0
