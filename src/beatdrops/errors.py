"""Domain exceptions shared by the repositories, services and routers.

Every exception carries a :class:`ErrorKind` discriminant and a structured
payload so callers branch on type and fields, never on message text.
"""

import enum
from dataclasses import dataclass
from typing import ClassVar


class ErrorKind(enum.StrEnum):
    """Discriminant for :class:`BeatdropsError` subclasses."""

    VALIDATION_FAILED = "validation_failed"
    AUTH_FAILED = "auth_failed"
    NOT_FOUND = "not_found"
    UPSTREAM_AUTH = "upstream_auth"
    LOOKUP_FAILED = "lookup_failed"
    STORE_ERROR = "store_error"


@dataclass(frozen=True, slots=True)
class FieldError:
    """A single field-level validation failure."""

    field: str
    reason: str


class BeatdropsError(Exception):
    """Base exception for domain errors."""

    kind: ClassVar[ErrorKind]


class ValidationFailed(BeatdropsError):
    """One or more fields failed validation."""

    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        fields = ", ".join(e.field for e in errors)
        super().__init__(f"Validation failed for: {fields}")


class AuthFailed(BeatdropsError):
    """Credentials did not match a user."""

    kind = ErrorKind.AUTH_FAILED
    field: ClassVar[str]
    reason: ClassVar[str]

    def __init__(self) -> None:
        super().__init__(self.reason)


class IncorrectEmail(AuthFailed):
    """No user is registered with the given email."""

    field = "email"
    reason = "Email is not registered."


class IncorrectPassword(AuthFailed):
    """The email exists but the password hash did not match."""

    field = "password"
    reason = "Password is incorrect."


class NotFound(BeatdropsError):
    """A requested resource does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str, identifier: object) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier!r} not found")


class UpstreamAuthError(BeatdropsError):
    """A Spotify token exchange failed."""

    kind = ErrorKind.UPSTREAM_AUTH

    def __init__(self, action: str, detail: str) -> None:
        self.action = action
        self.detail = detail
        super().__init__(f"Spotify token request failed during {action}: {detail}")


class LookupFailed(BeatdropsError):
    """A song search found nothing usable or could not be completed."""

    kind = ErrorKind.LOOKUP_FAILED

    def __init__(self, title: str, artist: str, detail: str) -> None:
        self.title = title
        self.artist = artist
        self.detail = detail
        super().__init__(f"Lookup failed for {title!r} by {artist!r}: {detail}")


class StoreError(BeatdropsError):
    """The database rejected or failed an operation."""

    kind = ErrorKind.STORE_ERROR

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Store error: {detail}")
