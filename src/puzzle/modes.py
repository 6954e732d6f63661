"""The puzzle variants. Each mode fixes an allowed word length range and how often its seed rolls over."""

import re
from dataclasses import dataclass
from typing import Iterable

from src.core.shared_types import SeedType

MIN_LEN = 3
MAX_LEN = 9

ALPHABETIC = re.compile(r"[a-z]+")


@dataclass(frozen=True)
class Mode:
    key: str
    label: str
    seed_type: SeedType
    min_len: int
    max_len: int

    def allows_length(self, length: int) -> bool:
        return self.min_len <= length <= self.max_len


MODES: tuple[Mode, ...] = (
    Mode("daily", "Daily", SeedType.DAILY, 3, 9),
    Mode("short", "Short", SeedType.FIVE_MINUTES, 3, 4),
    Mode("medium", "Medium", SeedType.FIVE_MINUTES, 5, 6),
    Mode("long", "Long", SeedType.FIVE_MINUTES, 7, 9),
)

MODES_BY_KEY: dict[str, Mode] = {mode.key: mode for mode in MODES}


def get_mode(mode_key: str) -> Mode:
    """Unknown keys fall back to the first mode (daily)."""
    return MODES_BY_KEY.get(mode_key, MODES[0])


def pool_for_mode(mode: Mode, answers: Iterable[str]) -> list[str]:
    """Answer candidates whose length fits the mode, in their original order."""
    return [word for word in answers if mode.allows_length(len(word))]


def is_valid_guess_for_mode(word: str, mode: Mode, guess_set: set[str] | frozenset[str]) -> bool:
    if not ALPHABETIC.fullmatch(word):
        return False
    if not MIN_LEN <= len(word) <= MAX_LEN:
        return False
    if not mode.allows_length(len(word)):
        return False
    return word in guess_set
