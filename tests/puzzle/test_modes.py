"""Unit tests for src/puzzle/modes.py and src/puzzle/words.py"""

import pytest

from src.core.shared_types import SeedType
from src.puzzle.modes import MODES, get_mode, is_valid_guess_for_mode, pool_for_mode
from src.puzzle.words import WordPools, normalise_words

ANSWERS = ["cat", "tree", "apple", "banana", "giraffe", "elephants"]


def test_modes_cover_all_lengths() -> None:
    assert [m.key for m in MODES] == ["daily", "short", "medium", "long"]
    assert get_mode("daily").seed_type == SeedType.DAILY
    assert all(m.seed_type == SeedType.FIVE_MINUTES for m in MODES[1:])


def test_unknown_mode_falls_back_to_daily() -> None:
    assert get_mode("nightly") is MODES[0]


@pytest.mark.parametrize(
    "mode_key, expected",
    [
        ("daily", ANSWERS),
        ("short", ["cat", "tree"]),
        ("medium", ["apple", "banana"]),
        ("long", ["giraffe", "elephants"]),
    ],
)
def test_pool_for_mode(mode_key: str, expected: list[str]) -> None:
    assert pool_for_mode(get_mode(mode_key), ANSWERS) == expected


@pytest.mark.parametrize(
    "word, mode_key, valid",
    [
        ("apple", "medium", True),
        ("apple", "short", False),  # wrong length for the mode
        ("apples", "medium", False),  # not in the guess set
        ("Apple", "medium", False),  # not normalised
        ("ap1le", "medium", False),
        ("apple\n", "medium", False),
    ],
)
def test_is_valid_guess_for_mode(word: str, mode_key: str, valid: bool) -> None:
    assert is_valid_guess_for_mode(word, get_mode(mode_key), {"apple", "cat"}) is valid


def test_normalise_words() -> None:
    lines = ["Apple\r", "  apple ", "", "it", "toolongwords", "can't", "Tree", "éclair", "cat"]
    assert normalise_words(lines) == ["apple", "tree", "cat"]


def test_word_pools_from_lines() -> None:
    pools = WordPools.from_lines(["Apple", "tree", "apple"], ["TREE", "x"])
    assert pools.guess_set == frozenset({"apple", "tree"})
    assert pools.answers == ("tree",)
