"""
Domain error taxonomy.

Services raise these; main.py translates each kind to an HTTP response in
one place. Nothing below the API layer knows about status codes.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """One failed structural constraint on an input field."""

    entity: str
    field: str
    message: str


class DomainError(Exception):
    """Base class for every error the service layer raises on purpose."""

    code = "DOMAIN_ERROR"


class NotFoundError(DomainError):
    """A referenced film/user/review/genre/MPA/director id does not exist."""

    def __init__(self, entity: str, message: str) -> None:
        super().__init__(message)
        self.entity = entity

    @property
    def code(self) -> str:  # type: ignore[override]
        return f"{self.entity.upper()}_NOT_FOUND"


class InvalidFieldError(DomainError):
    """One or more fields failed validation. Carries every failure found."""

    code = "INVALID_FIELDS"

    def __init__(self, errors: list[FieldError]) -> None:
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in errors))
        self.errors = errors


class IncorrectParameterError(DomainError):
    """A recognised query parameter carries an unsupported value."""

    code = "INCORRECT_PARAMETER"

    def __init__(self, parameter: str, message: str) -> None:
        super().__init__(message)
        self.parameter = parameter


def raise_if_invalid(errors: list[FieldError]) -> None:
    """Turn a non-empty validation result into an InvalidFieldError."""
    if errors:
        raise InvalidFieldError(errors)
