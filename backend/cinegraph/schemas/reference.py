"""
Genre, MPA rating and director schemas.
"""
from pydantic import BaseModel


class GenreResponse(BaseModel):
    id: int
    name: str


class MpaResponse(BaseModel):
    id: int
    name: str


class DirectorCreateRequest(BaseModel):
    name: str


class DirectorUpdateRequest(DirectorCreateRequest):
    id: int


class DirectorResponse(BaseModel):
    id: int
    name: str
