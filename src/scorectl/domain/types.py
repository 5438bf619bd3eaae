"""Record kinds, account roles, and competition states."""

from __future__ import annotations

from enum import StrEnum


class RecordKind(StrEnum):
    """The five persisted record kinds."""

    SUPERVISOR = "supervisor"
    CONTESTANT = "contestant"
    COMPETITION = "competition"
    SCORE = "score"
    USER = "user"


class Role(StrEnum):
    """Account roles, ordered viewer < editor < admin."""

    VIEWER = "viewer"
    EDITOR = "editor"
    ADMIN = "admin"


class CompetitionStatus(StrEnum):
    """Competition state derived from today's date and the scoring window."""

    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    ENDED = "ended"
