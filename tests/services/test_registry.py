"""Unit tests for src/services/registry.py"""

import json

import pytest

from src.core.exceptions import GameStateError
from src.core.shared_types import Status
from src.puzzle.board import Board
from src.puzzle.seeding import pick_seeded_word
from src.puzzle.words import WordPools
from src.services.persistence import storage_key
from src.services.registry import BoardRegistry, word_seed

ANSWERS = ["cat", "tree", "bolt", "apple", "angle", "plead", "crane", "giraffe", "elephant"]
GUESSES = ANSWERS + ["dog", "cow", "slate", "trace", "penguin", "antelope"]


@pytest.fixture
def pools() -> WordPools:
    return WordPools.from_lines(GUESSES, ANSWERS)


@pytest.fixture
def registry(gateway, seed_clock, pools, clock_factory) -> BoardRegistry:
    return BoardRegistry(gateway, seed_clock, pools, clock_factory)


def solve_wrong_then_keep_going(board: Board, guess_set) -> None:
    """Submit any playable word that is not the answer, so the board starts without being solved."""
    word = next(w for w in sorted(guess_set) if len(w) == len(board.answer) and w != board.answer)
    for ch in word:
        board.append_char(ch)
    board.submit_guess(guess_set)


# --- ensure ---
def test_ensure_creates_board_with_seeded_answer(registry: BoardRegistry, mock_store) -> None:
    board = registry.ensure("medium")
    assert board.id == "medium.2026-10-19 08:15"
    assert board.answer == pick_seeded_word(word_seed("medium", "2026-10-19 08:15"), ["apple", "angle", "plead", "crane"])
    assert len(board.answer) == 5
    # created boards are written immediately
    assert mock_store.get_item(storage_key("medium", "2026-10-19 08:15")) is not None


@pytest.mark.parametrize("mode_key, lengths", [("short", {3, 4}), ("long", {7, 8, 9}), ("daily", set(range(3, 10)))])
def test_answer_length_follows_mode(registry: BoardRegistry, mode_key: str, lengths: set[int]) -> None:
    assert len(registry.ensure(mode_key).answer) in lengths


def test_ensure_returns_cached_instance(registry: BoardRegistry, mock_store) -> None:
    first = registry.ensure("daily")
    writes = mock_store.writes
    assert registry.ensure("daily") is first
    assert mock_store.writes == writes


def test_unknown_mode_falls_back_to_daily(registry: BoardRegistry) -> None:
    assert registry.ensure("nightly").id == "daily.2026-10-19"


def test_ensure_loads_stored_board_paused(gateway, seed_clock, pools, clock_factory, fake_time) -> None:
    first = BoardRegistry(gateway, seed_clock, pools, clock_factory)
    board = first.switch_to("medium")
    solve_wrong_then_keep_going(board, pools.guess_set)
    fake_time.advance(8000)
    first.pause(board)

    # a new session (page reload / app restart)
    second = BoardRegistry(gateway, seed_clock, pools, clock_factory)
    restored = second.ensure("medium")
    assert restored is not board
    assert restored.status == Status.RUNNING
    assert restored.has_started
    assert not restored.is_live
    assert restored.elapsed_ms == pytest.approx(8000)
    assert restored.key_state == board.key_state


def test_corrupt_record_replaced_by_fresh_board(registry: BoardRegistry, mock_store) -> None:
    mock_store.set_item(storage_key("daily", "2026-10-19"), "{broken")
    board = registry.ensure("daily")
    assert board.guesses == []
    assert json.loads(mock_store.get_item(storage_key("daily", "2026-10-19")))["answer"] == board.answer


def test_record_with_foreign_identity_discarded(registry: BoardRegistry, mock_store) -> None:
    record = {"modeKey": "long", "seedKey": "2026-10-19 08:15", "answer": "giraffe"}
    mock_store.set_item(storage_key("medium", "2026-10-19 08:15"), json.dumps(record))
    board = registry.ensure("medium")
    assert board.mode_key == "medium"
    assert len(board.answer) == 5


def test_empty_pool_uses_fallback_word(gateway, seed_clock, clock_factory) -> None:
    registry = BoardRegistry(gateway, seed_clock, WordPools(), clock_factory)
    assert registry.ensure("daily").answer == "speed"


# --- switching ---
def test_switch_marks_current(registry: BoardRegistry) -> None:
    board = registry.switch_to("short")
    assert registry.current_board is board
    assert registry.current_board_id == "short.2026-10-19 08:15"


def test_switch_pauses_previous_board(registry: BoardRegistry, pools: WordPools, fake_time) -> None:
    a = registry.switch_to("medium")
    solve_wrong_then_keep_going(a, pools.guess_set)
    fake_time.advance(5000)

    b = registry.switch_to("long")
    assert not a.is_live
    assert a.elapsed_ms == pytest.approx(5000)

    # time spent on board B is not counted on board A, and B (not started) stays at 0
    fake_time.advance(20_000)
    assert a.tick() == pytest.approx(5000)
    assert b.elapsed_ms == 0
    assert not b.is_live

    registry.switch_to("medium")
    assert a.is_live
    fake_time.advance(2000)
    assert a.tick() == pytest.approx(7000)


def test_switch_resumes_started_target_from_frozen_value(registry: BoardRegistry, pools: WordPools, fake_time) -> None:
    a = registry.switch_to("medium")
    solve_wrong_then_keep_going(a, pools.guess_set)
    fake_time.advance(3000)
    b = registry.switch_to("short")
    solve_wrong_then_keep_going(b, pools.guess_set)
    fake_time.advance(1000)

    registry.switch_to("medium")
    assert not b.is_live
    assert b.elapsed_ms == pytest.approx(1000)
    assert a.tick() == pytest.approx(3000)


def test_at_most_one_live_clock(registry: BoardRegistry, pools: WordPools) -> None:
    for mode_key in ["daily", "short", "medium", "long"]:
        board = registry.switch_to(mode_key)
        solve_wrong_then_keep_going(board, pools.guess_set)
    for mode_key in ["short", "daily", "long", "medium", "medium"]:
        registry.switch_to(mode_key)
        assert sum(b.is_live for b in registry.boards.values()) == 1


def test_resume_refuses_second_live_clock(registry: BoardRegistry, pools: WordPools) -> None:
    a = registry.switch_to("medium")
    solve_wrong_then_keep_going(a, pools.guess_set)
    b = registry.ensure("short")
    solve_wrong_then_keep_going(b, pools.guess_set)  # started outside switch_to: live too
    with pytest.raises(GameStateError):
        registry.resume(a)


def test_pause_saves_immediately(registry: BoardRegistry, pools: WordPools, mock_store, fake_time) -> None:
    board = registry.switch_to("medium")
    solve_wrong_then_keep_going(board, pools.guess_set)
    fake_time.advance(4000)
    writes = mock_store.writes
    registry.pause(board)
    assert mock_store.writes == writes + 1
    stored = json.loads(mock_store.get_item(storage_key("medium", "2026-10-19 08:15")))
    assert stored["elapsedMs"] == pytest.approx(4000)
