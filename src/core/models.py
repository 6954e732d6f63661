"""
Boundary layer data model(s).

These objects are used to communicate between the Service, the Board (domain layer) and the persistence layer.
(Decouples the snapshot format stored in the key-value store from the live Board object that owns a running clock)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make BoardModel easier to read
ModeKey = str
SeedKey = str


@dataclass
class GuessModel:
    """One submitted guess and its per-letter feedback (stored as plain strings)."""

    word: str
    feedback: list[str]


@dataclass
class BoardModel:
    """Transport-safe snapshot of a board.

    Excludes the key state (recomputed from the guesses) and the monotonic reference instant (meaningless after a restart).
    """

    mode_key: ModeKey
    mode_label: str
    seed_key: SeedKey
    answer: str
    status: str
    started_at_iso: str
    last_active_iso: str
    elapsed_ms: float
    final_ms: Optional[float] = None
    current_guess: str = ""
    has_started: bool = False
    guesses: list[GuessModel] = field(default_factory=list)

    @property
    def board_id(self) -> str:
        return board_id(self.mode_key, self.seed_key)


def board_id(mode_key: ModeKey, seed_key: SeedKey) -> str:
    """Canonical identity of a board."""
    return f"{mode_key}.{seed_key}"
