"""Domain exceptions shared by services, CRUD helpers and routers.

Each error carries a machine readable ``code`` and the HTTP status the API
answers with. ``app.main`` registers a single handler that renders them.
"""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(eq=False)
class AppError(Exception):
    code: str
    message: str = ""
    status_code: int = 500
    details: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.message:
            self.message = self.code

    def __str__(self) -> str:  # pragma: no cover - human readable message
        return self.message

    def to_dict(self) -> dict:
        payload = {"detail": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


@dataclass(eq=False)
class ValidationError(AppError):
    """Missing or malformed input, correctable by the user."""

    status_code: int = 400


@dataclass(eq=False)
class AuthenticationError(AppError):
    """Missing, invalid or expired credential."""

    code: str = "unauthorized"
    message: str = "Unauthorized"
    status_code: int = 401


@dataclass(eq=False)
class AuthorizationError(AppError):
    """Valid identity lacking the required role."""

    code: str = "forbidden"
    message: str = "Forbidden"
    status_code: int = 403


@dataclass(eq=False)
class NotFoundError(AppError):
    status_code: int = 404


@dataclass(eq=False)
class ConflictError(AppError):
    """Duplicate unique key (email, user + word, user + badge)."""

    status_code: int = 409


@dataclass(eq=False)
class TransientStoreError(AppError):
    """Database timeout or unavailability; safe for the client to retry."""

    code: str = "store_unavailable"
    message: str = "Storage temporarily unavailable"
    status_code: int = 503
