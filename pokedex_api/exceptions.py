"""Error taxonomy for the Pokedex API.

Domain errors describe caller mistakes (bad input, bad credentials, bad
token); infrastructure errors describe an unavailable collaborator. Every
error carries a stable ``code`` and the HTTP status the API boundary maps it
to. Messages are safe to show to callers.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Optional


class PokedexError(Exception):
    code: str = "error"
    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    message: str = "Internal error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.detail = message or self.message
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.detail}


class DomainError(PokedexError):
    status = HTTPStatus.BAD_REQUEST


class InvalidInputError(DomainError):
    code = "invalid_input"
    message = "Username and password must not be empty"


class InvalidCredentialsError(DomainError):
    # One message for unknown user and wrong password.
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "Invalid username or password"

    def __init__(self) -> None:
        super().__init__()


class UnauthenticatedError(DomainError):
    code = "unauthenticated"
    status = HTTPStatus.UNAUTHORIZED
    message = "Missing, invalid or expired token"


class UsernameTakenError(DomainError):
    code = "username_taken"
    status = HTTPStatus.CONFLICT
    message = "Username already registered"


class NotFoundError(DomainError):
    code = "not_found"
    status = HTTPStatus.NOT_FOUND
    message = "Resource not found"


class InfrastructureError(PokedexError):
    code = "infrastructure_error"
    status = HTTPStatus.SERVICE_UNAVAILABLE
    message = "Service temporarily unavailable"


class StorageUnavailableError(InfrastructureError):
    code = "storage_unavailable"
    message = "Storage is unavailable"


class ReferenceDataUnavailableError(InfrastructureError):
    code = "reference_data_unavailable"
    message = "Reference data provider is unavailable"
