"""Error hierarchy for the attachment protocol."""

from __future__ import annotations

from enum import StrEnum

FILE_NOT_UPLOADED_MESSAGE = "File not found in storage. Please upload the file first."


class HealthTrackError(Exception):
    """Base exception for attachment protocol errors.

    Compatible with error-as-value pattern: instances can be returned as values
    instead of raised. Preserves stack traces via exception chaining.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.__cause__ = cause


class ValidationError(HealthTrackError):
    """Malformed client input (names the offending field)."""

    def __init__(self, message: str, *, field: str) -> None:
        super().__init__(message)
        self.field = field


class NotFoundResource(StrEnum):
    TRACK = "track"
    EVENT = "event"
    OBJECT = "object"


class NotFoundError(HealthTrackError):
    """Owning record absent, or object absent from storage at confirmation time."""

    def __init__(
        self,
        message: str,
        *,
        resource: NotFoundResource,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.resource = resource

    @classmethod
    def track(cls) -> NotFoundError:
        return cls("Track not found", resource=NotFoundResource.TRACK)

    @classmethod
    def event(cls) -> NotFoundError:
        return cls("Event not found", resource=NotFoundResource.EVENT)

    @classmethod
    def object_not_uploaded(cls, cause: Exception | None = None) -> NotFoundError:
        return cls(FILE_NOT_UPLOADED_MESSAGE, resource=NotFoundResource.OBJECT, cause=cause)


class UpstreamStorageError(HealthTrackError):
    """Object store call failed (signing, network, service error)."""

    def __init__(self, operation: str, key: str | None, cause: Exception) -> None:
        super().__init__(f"Storage {operation} failed for key {key!r}", cause=cause)
        self.operation = operation
        self.key = key


class PersistenceError(HealthTrackError):
    """Database read or write failed."""

    def __init__(self, operation: str, cause: Exception) -> None:
        super().__init__(f"Database {operation} failed", cause=cause)
        self.operation = operation
