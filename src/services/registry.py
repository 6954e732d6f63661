"""
Creates, loads and caches boards keyed by (mode, seed key), and tracks which one is on screen.

One registry per session, owned by the session controller. The registry is the only place where the displayed
board changes, so it is also the only place that has to guarantee at most one clock is live.
"""

import logging
from typing import Callable, Optional

from src.core.exceptions import GameStateError
from src.core.models import board_id
from src.puzzle.board import Board
from src.puzzle.clock import Clock
from src.puzzle.modes import Mode, get_mode, pool_for_mode
from src.puzzle.seeding import pick_seeded_word
from src.puzzle.words import WordPools
from src.services.persistence import PersistenceGateway
from src.services.seed_clock import SeedClock

logger = logging.getLogger(__name__)

ClockFactory = Callable[[], Clock]


def word_seed(mode_key: str, seed_key: str) -> str:
    """Seed string fed to the word picker."""
    return f"{mode_key}:{seed_key}"


class BoardRegistry:
    """Board cache + the pointer to the currently displayed board."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        seed_clock: SeedClock,
        pools: WordPools,
        clock_factory: ClockFactory = Clock,
    ) -> None:
        self.gateway = gateway
        self.seed_clock = seed_clock
        self.pools = pools
        self.clock_factory = clock_factory
        self.boards: dict[str, Board] = {}
        self.current_board_id: str = ""

    @property
    def current_board(self) -> Optional[Board]:
        return self.boards.get(self.current_board_id)

    def ensure(self, mode_key: str) -> Board:
        """
        Board for the mode's current seed key.
        ----
        1. cached instance, if any
        2. stored snapshot (reconstituted paused)
        3. a fresh board, saved right away
        """
        mode = get_mode(mode_key)
        seed_key = self.seed_clock.seed_key_for_mode(mode)
        key = board_id(mode.key, seed_key)

        if key in self.boards:
            return self.boards[key]

        board = self._load(mode, seed_key) or self._create(mode, seed_key)
        self.boards[key] = board
        return board

    def switch_to(self, mode_key: str) -> Board:
        """Pause whatever is on screen, then show (and resume) the mode's current board."""
        current = self.current_board
        if current is not None and current.is_running:
            self.pause(current)

        board = self.ensure(mode_key)
        self.current_board_id = board.id
        if board.is_running:
            self.resume(board)
        return board

    def pause(self, board: Board) -> None:
        """Freeze the board's clock and save it immediately."""
        if not board.is_running:
            return
        board.pause()
        self.gateway.save_now(board)

    def resume(self, board: Board) -> None:
        """Resume the board's clock. Refuses to run two clocks at once."""
        if not board.is_running:
            return
        for other in self.boards.values():
            if other is not board and other.is_live:
                raise GameStateError(f"Cannot resume {board.id}: {other.id} is still live.")
        board.resume()
        self.gateway.save(board, force=True)

    def _load(self, mode: Mode, seed_key: str) -> Optional[Board]:
        model = self.gateway.load(mode.key, seed_key)
        if model is None:
            return None
        if model.board_id != board_id(mode.key, seed_key):
            logger.warning("Discarding stored board %s: identity does not match its key", model.board_id)
            return None
        try:
            board = Board.from_model(model, self.clock_factory())
        except GameStateError as exc:
            logger.warning("Discarding stored board %s: %s", model.board_id, exc)
            return None
        logger.info("Board %s restored (%s, %d guesses)", board.id, board.status, len(board.guesses))
        return board

    def _create(self, mode: Mode, seed_key: str) -> Board:
        pool = pool_for_mode(mode, self.pools.answers)
        if not pool:
            logger.warning("No answer candidates for mode %r, using the fallback word", mode.key)
        answer = pick_seeded_word(word_seed(mode.key, seed_key), pool)
        board = Board.new_board(mode, seed_key, answer, self.clock_factory())
        self.gateway.save_now(board)
        logger.info("Board %s created", board.id)
        return board
