"""
The Board class is the entrypoint into the domain layer for the service layer.
It owns one puzzle session: the answer, the guesses, the in-progress guess and the clock.
It knows nothing about storage, scheduling or which board is on screen; the registry/session decide when to pause or resume it.
"""

import logging
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Self

from src.core.exceptions import GameStateError, InvalidGuessError
from src.core.models import BoardModel, GuessModel, board_id
from src.core.shared_types import Feedback, Status
from src.puzzle.clock import Clock
from src.puzzle.formatting import (
    build_copy_text,
    build_header_copy_text,
    format_mmss,
)
from src.puzzle.modes import Mode, get_mode, is_valid_guess_for_mode
from src.puzzle.scoring import KeyState, aggregate_key_state, merge_key_state, score
from src.puzzle.words import normalise_word

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    """Same shape as a JavaScript Date.toISOString(), e.g. '2026-10-19T08:15:00.123Z'."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Guess:
    word: str
    feedback: list[Feedback]


@dataclass(frozen=True)
class Tile:
    """One cell of the grid. state is '' for letters that have not been submitted yet."""

    letter: str
    state: str


@dataclass(frozen=True)
class GuessOutcome:
    guess: Guess
    started_clock: bool
    solved: bool


@dataclass
class Board:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    mode: Mode
    seed_key: str
    answer: str
    clock: Clock
    status: Status = Status.RUNNING
    has_started: bool = False
    started_at_iso: str = field(default_factory=utc_now_iso)
    last_active_iso: str = field(default_factory=utc_now_iso)
    current_guess: str = ""
    guesses: list[Guess] = field(default_factory=list)
    key_state: KeyState = field(default_factory=dict)
    mode_label: str = ""

    def __post_init__(self) -> None:
        if not self.mode_label:
            self.mode_label = self.mode.label

    @classmethod
    def new_board(cls, mode: Mode, seed_key: str, answer: str, clock: Optional[Clock] = None) -> Self:
        """A fresh board: running, not started, clock frozen at 0."""
        answer = normalise_word(answer)
        if not mode.allows_length(len(answer)):
            # fallback word for an empty pool, the board must still be playable
            logger.warning("Answer length %d does not fit mode %r", len(answer), mode.key)
        return cls(mode=mode, seed_key=seed_key, answer=answer, clock=clock or Clock())

    @classmethod
    def from_model(cls, model: BoardModel, clock: Optional[Clock] = None) -> Self:
        """Reconstitute a board from a snapshot. The result is always paused, whatever the stored status."""

        # Validation
        if model.status not in {status.value for status in Status}:
            raise GameStateError(
                f"Invalid status: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )
        status = Status(model.status)

        guesses = [
            Guess(word=g.word, feedback=[Feedback(fb) for fb in g.feedback])
            for g in model.guesses
        ]
        for guess in guesses:
            if len(guess.feedback) != len(model.answer):
                raise GameStateError(f"Feedback for {guess.word!r} does not match answer length.")

        clock = clock or Clock()
        if status == Status.RUNNING:
            clock.restore(model.elapsed_ms)
        else:
            final_ms = model.final_ms if model.final_ms is not None else model.elapsed_ms
            clock.restore(model.elapsed_ms, final_ms)

        return cls(
            mode=get_mode(model.mode_key),
            mode_label=model.mode_label,
            seed_key=model.seed_key,
            answer=model.answer,
            clock=clock,
            status=status,
            has_started=model.has_started,
            started_at_iso=model.started_at_iso,
            last_active_iso=model.last_active_iso,
            current_guess=model.current_guess[: len(model.answer)],
            guesses=guesses,
            key_state=aggregate_key_state(guesses),
        )

    def to_model(self) -> BoardModel:
        """Encode back into the snapshot format the Service / persistence layers use"""

        return BoardModel(
            mode_key=self.mode.key,
            mode_label=self.mode_label,
            seed_key=self.seed_key,
            answer=self.answer,
            status=self.status.value,
            started_at_iso=self.started_at_iso,
            last_active_iso=self.last_active_iso,
            elapsed_ms=self.clock.sample(),
            final_ms=self.clock.final_ms,
            current_guess=self.current_guess,
            has_started=self.has_started,
            guesses=[
                GuessModel(word=g.word, feedback=[fb.value for fb in g.feedback])
                for g in self.guesses
            ],
        )

    # --- identity / state ---
    @property
    def id(self) -> str:
        return board_id(self.mode.key, self.seed_key)

    @property
    def mode_key(self) -> str:
        return self.mode.key

    @property
    def is_running(self) -> bool:
        return self.status == Status.RUNNING

    @property
    def is_finished(self) -> bool:
        return self.status in (Status.SOLVED, Status.FAILED)

    @property
    def is_live(self) -> bool:
        """Only a running, started board whose clock has been resumed is allowed to tick."""
        return self.is_running and self.has_started and self.clock.is_live

    @property
    def elapsed_ms(self) -> float:
        """Last known elapsed time (refreshed by tick / pause, authoritative while paused)."""
        return self.clock.elapsed_ms

    @property
    def final_ms(self) -> Optional[float]:
        return self.clock.final_ms

    # --- input (no-ops outside of a running board) ---
    def append_char(self, char: str) -> bool:
        if not self.is_running:
            return False
        if len(char) != 1 or char not in string.ascii_letters:
            return False
        if len(self.current_guess) >= len(self.answer):
            return False
        self.current_guess += char.lower()
        return True

    def backspace(self) -> bool:
        if not self.is_running or not self.current_guess:
            return False
        self.current_guess = self.current_guess[:-1]
        return True

    def clear_guess(self) -> bool:
        if not self.is_running or not self.current_guess:
            return False
        self.current_guess = ""
        return True

    def submit_guess(self, guess_set: set[str] | frozenset[str]) -> GuessOutcome:
        """
        Submit the in-progress guess.
        ----
        1. Reject (InvalidGuessError, board unchanged) if it has the wrong length or is not a playable word
        2. Start the clock on the first accepted guess
        3. Score, append to the history, update the key state
        4. Finalize the board if the guess is the answer
        """
        if not self.is_running:
            raise GameStateError(f"Board {self.id} is not running. status: {self.status}")

        word = normalise_word(self.current_guess)
        if len(word) != len(self.answer):
            raise InvalidGuessError(f"Must be {len(self.answer)} letters")
        if not is_valid_guess_for_mode(word, self.mode, guess_set):
            raise InvalidGuessError("Not in list")

        started_clock = False
        if not self.has_started:
            self.has_started = True
            self.clock.start()
            started_clock = True

        guess = Guess(word=word, feedback=score(word, self.answer))
        self.guesses.append(guess)
        merge_key_state(self.key_state, guess.word, guess.feedback)
        self.current_guess = ""
        self.touch()

        solved = word == self.answer
        if solved:
            self.finalize_solved()
        return GuessOutcome(guess=guess, started_clock=started_clock, solved=solved)

    # --- clock control ---
    def tick(self) -> float:
        """Advance the cached elapsed time. Does nothing unless the board is live."""
        if not self.is_live:
            return self.elapsed_ms
        self.touch()
        return self.clock.sample()

    def pause(self) -> None:
        if not self.is_running:
            return
        if self.has_started:
            self.clock.pause()
        else:
            self.clock.restore(0)
        self.touch()

    def resume(self) -> None:
        if not self.is_running:
            return
        if self.has_started:
            self.clock.resume(self.clock.sample())
        else:
            # stays frozen at 0 until the first accepted guess
            self.clock.restore(0)
        self.touch()

    def finalize_solved(self) -> None:
        self.status = Status.SOLVED
        self.clock.finalize()
        self.touch()
        logger.info("Board %s solved in %.0f ms with %d guesses", self.id, self.final_ms, len(self.guesses))

    def mark_failed(self) -> None:
        """Hook for an explicit losing rule (guess limit, time limit). Nothing in the engine calls it by itself."""
        if not self.is_running:
            return
        self.status = Status.FAILED
        self.clock.finalize()
        self.touch()
        logger.info("Board %s failed after %d guesses", self.id, len(self.guesses))

    def touch(self) -> None:
        self.last_active_iso = utc_now_iso()

    # --- read-only views for the presentation collaborator ---
    @property
    def can_enter(self) -> bool:
        return self.is_running and len(self.current_guess) == len(self.answer)

    @property
    def can_clear(self) -> bool:
        return self.is_running and len(self.current_guess) > 0

    def grid_rows(self) -> list[list[Tile]]:
        rows = [
            [Tile(letter=ch, state=fb.value) for ch, fb in zip(g.word.upper(), g.feedback)]
            for g in self.guesses
        ]
        if self.is_running:
            current = self.current_guess.upper()
            rows.append(
                [Tile(letter=current[i] if i < len(current) else "", state="") for i in range(len(self.answer))]
            )
        return rows

    def time_text(self) -> str:
        if self.is_running:
            return format_mmss(self.elapsed_ms)
        return format_mmss(self.final_ms if self.final_ms is not None else self.elapsed_ms)

    def header_seed(self) -> str:
        return f"{self.mode_label} · {self.seed_key}"

    def copy_text(self) -> str:
        return build_copy_text(self.mode_label, self.seed_key, self.elapsed_ms, self.final_ms, len(self.guesses))

    def header_copy_text(self) -> str:
        return build_header_copy_text(
            self.mode.key, self.mode_label, self.seed_key, self.status, self.final_ms, len(self.guesses)
        )
