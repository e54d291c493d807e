"""Centralized enums for type safety and IDE support."""

from enum import StrEnum


class EventType(StrEnum):
    """Kinds of events recorded on a health track."""

    NOTE = "NOTE"
    APPOINTMENT = "APPOINTMENT"
    RESULT = "RESULT"
    LETTER = "LETTER"
    FEELING = "FEELING"
    EXERCISE = "EXERCISE"


class AttachmentState(StrEnum):
    """Attachment states observable by the domain.

    AUTHORIZED and UPLOADED exist only on the client between issuance and
    confirmation, so they are never stored.
    """

    NONE = "none"
    CONFIRMED = "confirmed"
