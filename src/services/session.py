"""Orchestration of communication from the presentation layer to the boards, the clock ticking and persistence (and the reverse direction)."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from src.api.models import (
    BoardView,
    CharRequest,
    LoadWordsRequest,
    MessageView,
    ModeButtonView,
    SessionView,
    SwitchModeRequest,
    TileView,
    VisibilityRequest,
)
from src.core.config import Settings
from src.core.exceptions import ExportError, InvalidGuessError, SessionNotReadyError
from src.core.shared_types import MessageKind, Status
from src.puzzle.board import Board
from src.puzzle.clock import Clock
from src.puzzle.formatting import format_mmss
from src.puzzle.modes import MODES
from src.puzzle.words import WordPools
from src.services.persistence import PersistenceGateway
from src.services.registry import BoardRegistry, ClockFactory
from src.services.seed_clock import SeedClock
from src.services.ticker import Handle, Scheduler, Ticker

logger = logging.getLogger(__name__)

# Delivers the result text somewhere (clipboard, share sheet ...). Raises ExportError on failure.
Exporter = Callable[[str], None]


@dataclass
class Message:
    text: str = ""
    kind: MessageKind = MessageKind.INFO
    auto_fade: bool = False


class SpeedleSession:
    """Orchestration of layers for one player session."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        scheduler: Scheduler,
        settings: Optional[Settings] = None,
        seed_clock: Optional[SeedClock] = None,
        clock_factory: ClockFactory = Clock,
    ) -> None:
        self.settings = settings or Settings()
        self.gateway = gateway
        self.scheduler = scheduler
        self.seed_clock = seed_clock or SeedClock()
        self.registry = BoardRegistry(gateway, self.seed_clock, WordPools(), clock_factory)
        self.files_ready = False
        self.message = Message()
        self._message_handle: Optional[Handle] = None

        self.ticker = Ticker(
            scheduler,
            action=self.tick,
            is_alive=self._current_is_live,
            interval_ms=self.settings.tick_interval_ms,
        )
        self.seed_ticker = Ticker(
            scheduler,
            action=self.refresh_seeds,
            is_alive=lambda: self.files_ready,
            interval_ms=self.settings.seed_refresh_ms,
        )

    @property
    def current_board(self) -> Optional[Board]:
        return self.registry.current_board

    # -- lifecycle ---
    def load_word_pools(self, request: LoadWordsRequest) -> None:
        """Word lists arrived. Until this is called every board operation raises SessionNotReadyError."""
        self.registry.pools = WordPools.from_lines(request.guess_words, request.answer_words)
        self.files_ready = True

    def start(self) -> SessionView:
        """Show the daily board and keep the seed labels fresh."""
        self._require_ready()
        self.refresh_seeds()
        self.seed_ticker.start()
        return self.show_board(SwitchModeRequest(mode_key=MODES[0].key))

    def close(self) -> None:
        """Player is leaving for good: freeze the clock, stop all scheduled work."""
        self.handle_before_unload()
        self.ticker.stop()
        self.seed_ticker.stop()
        self._cancel_message_fade()

    # -- mode switching ---
    def show_board(self, request: SwitchModeRequest) -> SessionView:
        """Pause the board on screen, show the requested mode's board and only resume that one."""
        self._require_ready()
        self.ticker.stop()
        self.clear_message()

        board = self.registry.switch_to(request.mode_key)
        if board.status == Status.RUNNING:
            self.set_message(f"Length: {len(board.answer)}")
        elif board.status == Status.SOLVED:
            self.set_message(self._solved_text(board), MessageKind.SUCCESS)
        else:
            self.set_message(f"Finished · Answer: {board.answer.upper()}", MessageKind.WARN)

        self._start_ticking_if_live(board)
        return self.view()

    # -- player input ---
    def add_char(self, request: CharRequest) -> SessionView:
        board = self._require_board()
        board.append_char(request.char)
        return self.view()

    def backspace(self) -> SessionView:
        self._require_board().backspace()
        return self.view()

    def clear_guess(self) -> SessionView:
        self._require_board().clear_guess()
        return self.view()

    def submit(self) -> SessionView:
        """Submit the in-progress guess. Rejections become a fading warning, the board is left untouched."""
        board = self._require_board()
        if not board.is_running:
            return self.view()

        try:
            outcome = board.submit_guess(self.registry.pools.guess_set)
        except InvalidGuessError as exc:
            self.set_message(str(exc), MessageKind.WARN, auto_fade=True)
            return self.view()

        if outcome.started_clock:
            self._start_ticking_if_live(board)
        self.gateway.save_now(board)

        if outcome.solved:
            self.ticker.stop()
            self.set_message(self._solved_text(board), MessageKind.SUCCESS)
        return self.view()

    # -- presence ---
    def handle_visibility(self, request: VisibilityRequest) -> SessionView:
        board = self.current_board
        if board is None or not board.is_running:
            return self.view()

        if request.hidden:
            self.ticker.stop()
            self.registry.pause(board)
        else:
            self.registry.resume(board)
            self._start_ticking_if_live(board)
        return self.view()

    def handle_before_unload(self) -> None:
        board = self.current_board
        if board is None or not board.is_running:
            return
        self.ticker.stop()
        self.registry.pause(board)

    # -- scheduled work ---
    def tick(self) -> None:
        """Advance the live board's elapsed time; saves are throttled."""
        board = self.current_board
        if board is None or not board.is_live:
            return
        board.tick()
        self.gateway.save(board)

    def refresh_seeds(self) -> bool:
        return self.seed_clock.refresh()

    # -- export ---
    def copy_result(self, exporters: Sequence[Exporter], detailed: bool = False) -> SessionView:
        """
        Hand the result of a solved board to the first exporter that works.
        ----
        detailed=False: one line summary (header), detailed=True: multi-line result.
        Exporter failures never touch the board; if all of them fail the player gets a warning.
        """
        board = self.current_board
        if board is None or board.status != Status.SOLVED:
            return self.view()

        text = board.copy_text() if detailed else board.header_copy_text()
        for exporter in exporters:
            try:
                exporter(text)
            except ExportError as exc:
                logger.warning("Exporter %r failed: %s", exporter, exc)
                continue
            self.set_message("Copied result" if detailed else "Result copied", MessageKind.SUCCESS)
            return self.view()

        self.set_message("Copy failed", MessageKind.WARN)
        return self.view()

    # -- messaging ---
    def set_message(self, text: str, kind: MessageKind = MessageKind.INFO, auto_fade: bool = False) -> None:
        self._cancel_message_fade()
        self.message = Message(text=text, kind=kind, auto_fade=auto_fade)
        if auto_fade:
            self._message_handle = self.scheduler.call_later(
                self.settings.message_fade_ms / 1000, self._fade_message
            )

    def clear_message(self) -> None:
        self._cancel_message_fade()
        self.message = Message()

    def _fade_message(self) -> None:
        self._message_handle = None
        self.message = Message()

    def _cancel_message_fade(self) -> None:
        if self._message_handle is not None:
            self._message_handle.cancel()
            self._message_handle = None

    # -- views ---
    def view(self) -> SessionView:
        board = self.current_board
        active_key = board.mode_key if board else MODES[0].key
        return SessionView(
            ready=self.files_ready,
            board=self._board_view(board) if board else None,
            modes=[
                ModeButtonView(
                    key=mode.key,
                    label=mode.label,
                    under_text=self.seed_clock.under_text_for_mode(mode),
                    active=mode.key == active_key,
                )
                for mode in MODES
            ],
            message=MessageView(text=self.message.text, kind=self.message.kind, auto_fade=self.message.auto_fade),
        )

    def _board_view(self, board: Board) -> BoardView:
        return BoardView(
            board_id=board.id,
            mode_key=board.mode_key,
            mode_label=board.mode_label,
            seed_key=board.seed_key,
            status=board.status,
            word_length=len(board.answer),
            guess_count=len(board.guesses),
            time_text=board.time_text(),
            header_seed=board.header_seed(),
            header_copy_text=board.header_copy_text(),
            rows=[[TileView(letter=t.letter, state=t.state) for t in row] for row in board.grid_rows()],
            key_state={letter: fb.value for letter, fb in board.key_state.items()},
            can_enter=board.can_enter,
            can_clear=board.can_clear,
            is_finished=board.is_finished,
        )

    # -- Internal helpers --
    def _current_is_live(self) -> bool:
        board = self.current_board
        return board is not None and board.is_live

    def _start_ticking_if_live(self, board: Board) -> None:
        if board is self.current_board and board.is_live:
            self.ticker.start()
        else:
            self.ticker.stop()

    def _solved_text(self, board: Board) -> str:
        return f"Solved in {format_mmss(board.final_ms)} · {len(board.guesses)} guesses"

    def _require_ready(self) -> None:
        if not self.files_ready:
            raise SessionNotReadyError("Word lists are not loaded yet.")

    def _require_board(self) -> Board:
        """Attempt to find the board on screen and raise error if there is none."""
        self._require_ready()
        board = self.current_board
        if board is None:
            raise SessionNotReadyError("No board is shown yet. Call start() first.")
        return board
