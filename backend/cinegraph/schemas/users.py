"""
User request/response schemas.
"""
from datetime import date

from pydantic import BaseModel


class UserCreateRequest(BaseModel):
    email: str
    login: str
    name: str | None = None
    birthday: date


class UserUpdateRequest(UserCreateRequest):
    id: int


class UserResponse(BaseModel):
    id: int
    email: str
    login: str
    name: str
    birthday: date
