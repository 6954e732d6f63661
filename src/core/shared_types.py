"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    RUNNING = "running"
    SOLVED = "solved"
    # NOTE no core flow moves a board into FAILED. Only an explicit rule (guess limit, time limit) calling Board.mark_failed would.
    FAILED = "failed"


class Feedback(StrEnum):
    """Per-letter evaluation of a guess. Values are the strings stored in snapshots."""

    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"


class SeedType(StrEnum):
    DAILY = "daily"
    FIVE_MINUTES = "5min"


class MessageKind(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    WARN = "warn"
