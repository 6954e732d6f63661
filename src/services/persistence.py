"""
Throttled persistence of board snapshots.

Boards change many times per second while their clock ticks, but a write to durable storage is comparatively expensive.
SaveThrottle bounds how often a non-forced save goes through; PersistenceGateway turns boards into JSON snapshots and back.
"""

import json
import logging
import math
from typing import Any, Optional, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from src.core.exceptions import RepositoryError
from src.core.models import BoardModel, GuessModel
from src.core.shared_types import Feedback, Status
from src.db.repository import KeyValueStore
from src.puzzle.board import Board
from src.puzzle.clock import TimeSource, monotonic_ms
from src.puzzle.modes import MAX_LEN, MIN_LEN

logger = logging.getLogger(__name__)

STORAGE_PREFIX = "speedle.board"
DEFAULT_SAVE_INTERVAL_MS = 700


def storage_key(mode_key: str, seed_key: str) -> str:
    return f"{STORAGE_PREFIX}.{mode_key}.{seed_key}"


class SaveThrottle:
    """Rate limiter: last write instant + minimum interval. Forced calls always pass (and count as a write)."""

    def __init__(self, interval_ms: float = DEFAULT_SAVE_INTERVAL_MS, time_source: TimeSource = monotonic_ms) -> None:
        self.interval_ms = interval_ms
        self._now = time_source
        self.last_write_ms: Optional[float] = None

    def allow(self, force: bool = False) -> bool:
        now = self._now()
        if not force and self.last_write_ms is not None and (now - self.last_write_ms) < self.interval_ms:
            return False
        self.last_write_ms = now
        return True

    def reset(self) -> None:
        self.last_write_ms = None


# --- STORED SNAPSHOT FORMAT ---
# feedback names written by older browser clients
LEGACY_FEEDBACK = {"good": Feedback.CORRECT, "bad": Feedback.ABSENT}


class StoredGuess(BaseModel):
    word: str
    fb: list[Feedback]

    @field_validator("fb", mode="before")
    @classmethod
    def map_legacy_feedback(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [LEGACY_FEEDBACK.get(fb, fb) if isinstance(fb, str) else fb for fb in value]


class StoredBoard(BaseModel):
    """
    JSON layout of a snapshot (camelCase keys, shared with browser-side clients).

    Only the answer is strictly validated; everything else is repaired to a sensible default,
    so an older or partially written record still yields a playable board.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    mode_key: str = Field(alias="modeKey")
    mode_label: str = Field(default="", alias="modeLabel")
    seed_key: str = Field(alias="seedKey")
    answer: str
    status: Status = Status.RUNNING
    started_at_iso: str = Field(default="", alias="startedAtISO")
    last_active_iso: str = Field(default="", alias="lastActiveISO")
    elapsed_ms: float = Field(default=0.0, alias="elapsedMs")
    final_ms: Optional[float] = Field(default=None, alias="finalMs")
    current_guess: str = Field(default="", alias="currentGuess")
    has_started: Optional[bool] = Field(default=None, alias="hasStarted")
    guesses: list[StoredGuess] = Field(default_factory=list)

    @field_validator("answer", mode="before")
    @classmethod
    def validate_answer(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("answer must be a string")
        if not MIN_LEN <= len(value) <= MAX_LEN:
            raise ValueError(f"answer length must be within {MIN_LEN}-{MAX_LEN}")
        return value

    @field_validator("elapsed_ms", mode="before")
    @classmethod
    def coerce_elapsed(cls, value: Any) -> float:
        try:
            elapsed = float(value)
        except (TypeError, ValueError):
            return 0.0
        return elapsed if math.isfinite(elapsed) and elapsed >= 0 else 0.0

    @field_validator("final_ms", mode="before")
    @classmethod
    def coerce_final(cls, value: Any) -> Optional[float]:
        if value is None:
            return None
        try:
            final = float(value)
        except (TypeError, ValueError):
            return None
        return max(0.0, final) if math.isfinite(final) else None

    @field_validator("current_guess", mode="before")
    @classmethod
    def coerce_current_guess(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("has_started", mode="before")
    @classmethod
    def coerce_has_started(cls, value: Any) -> Optional[bool]:
        return value if isinstance(value, bool) else None

    @field_validator("guesses", mode="before")
    @classmethod
    def coerce_guesses(cls, value: Any) -> list[Any]:
        return value if isinstance(value, list) else []

    @model_validator(mode="after")
    def validate_guess_lengths(self) -> Self:
        for guess in self.guesses:
            if len(guess.word) != len(self.answer) or len(guess.fb) != len(self.answer):
                raise ValueError(f"guess {guess.word!r} does not match the answer length")
        return self

    def to_model(self) -> BoardModel:
        has_started = self.has_started
        if has_started is None:
            has_started = self.elapsed_ms > 0 or len(self.guesses) > 0
        return BoardModel(
            mode_key=self.mode_key,
            mode_label=self.mode_label,
            seed_key=self.seed_key,
            answer=self.answer,
            status=self.status.value,
            started_at_iso=self.started_at_iso,
            last_active_iso=self.last_active_iso,
            elapsed_ms=self.elapsed_ms,
            final_ms=self.final_ms,
            current_guess=self.current_guess,
            has_started=has_started,
            guesses=[GuessModel(word=g.word, feedback=[fb.value for fb in g.fb]) for g in self.guesses],
        )

    @classmethod
    def from_model(cls, model: BoardModel) -> Self:
        return cls(
            mode_key=model.mode_key,
            mode_label=model.mode_label,
            seed_key=model.seed_key,
            answer=model.answer,
            status=model.status,
            started_at_iso=model.started_at_iso,
            last_active_iso=model.last_active_iso,
            elapsed_ms=model.elapsed_ms,
            final_ms=model.final_ms,
            current_guess=model.current_guess,
            has_started=model.has_started,
            guesses=[StoredGuess(word=g.word, fb=g.feedback) for g in model.guesses],
        )


class PersistenceGateway:
    """Read / write board snapshots through a KeyValueStore."""

    def __init__(self, store: KeyValueStore, throttle: Optional[SaveThrottle] = None) -> None:
        self.store = store
        self.throttle = throttle or SaveThrottle()

    def save(self, board: Board, force: bool = False) -> bool:
        """Write the snapshot unless a write happened less than one throttle window ago. Returns True if written."""
        if not self.throttle.allow(force=force):
            return False
        return self.write(board.to_model())

    def save_now(self, board: Board) -> bool:
        """For transitions that must survive an abrupt exit: guess submitted, solved, paused, created."""
        self.throttle.reset()
        return self.save(board, force=True)

    def write(self, model: BoardModel) -> bool:
        payload = StoredBoard.from_model(model).model_dump(mode="json", by_alias=True)
        try:
            self.store.set_item(storage_key(model.mode_key, model.seed_key), json.dumps(payload))
        except RepositoryError as exc:
            logger.error("Could not save board %s: %s", model.board_id, exc)
            return False
        return True

    def load(self, mode_key: str, seed_key: str) -> BoardModel | None:
        """The stored snapshot, or None when missing / unreadable (the caller then creates a fresh board)."""
        key = storage_key(mode_key, seed_key)
        try:
            raw = self.store.get_item(key)
        except RepositoryError as exc:
            logger.warning("Could not read %s, starting a fresh board: %s", key, exc)
            return None
        if not raw:
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding %s: not valid JSON", key)
            return None
        if not isinstance(data, dict):
            logger.warning("Discarding %s: not a JSON object", key)
            return None

        try:
            stored = StoredBoard.model_validate(data)
        except ValidationError as exc:
            logger.warning("Discarding %s: %d validation error(s)", key, exc.error_count())
            return None
        return stored.to_model()
