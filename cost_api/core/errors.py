"""
Error taxonomy shared by the cost service, its stores and the HTTP layer.

Every failure surfaced to a caller is one of the four subclasses of
CostServiceError below. The HTTP layer maps each to its own status code so
clients can tell a bad request from a missing user or a broken dependency.
"""

from __future__ import annotations

from typing import Any, Sequence

from pydantic import ValidationError as PydanticValidationError


class CostServiceError(Exception):
    """Base exception for cost service errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CostServiceError):
    """Raised when request input is malformed or out of range."""

    status_code = 400

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> ValidationError:
        return cls.from_errors(exc.errors())

    @classmethod
    def from_errors(cls, errors: Sequence[Any]) -> ValidationError:
        parts = []
        for error in errors:
            field = ".".join(str(loc) for loc in error["loc"]) or "request"
            parts.append(f"{field}: {error['msg']}")
        return cls("; ".join(parts) or "Invalid request")


class MonthPassedError(ValidationError):
    """Raised when a cost is dated in a month that has already fully elapsed."""

    def __init__(self, message: str = "month passed"):
        super().__init__(message)


class UserNotFound(CostServiceError):
    """Raised when the user directory answers that the user does not exist."""

    status_code = 404

    def __init__(self, owner_id: int):
        super().__init__("User does not exist")
        self.owner_id = owner_id


class UpstreamUnavailable(CostServiceError):
    """Raised when the user directory cannot give a well-formed answer."""

    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class StorageError(CostServiceError):
    """Raised when reading from or writing to persistence fails."""

    status_code = 500
