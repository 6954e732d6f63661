"""
Word collections supplied by the word-pool collaborator.

Reading the files is not done here; callers hand over the raw lines and get back normalised collections.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Self

from src.puzzle.modes import ALPHABETIC, MAX_LEN, MIN_LEN

logger = logging.getLogger(__name__)


def normalise_word(word: str | None) -> str:
    return str(word or "").strip().lower()


def normalise_words(lines: Iterable[str]) -> list[str]:
    """Lowercase, alphabetic only, length 3-9, de-duplicated. First occurrence keeps its position."""
    out: list[str] = []
    seen: set[str] = set()
    for raw in lines:
        word = normalise_word(raw)
        if not word or not ALPHABETIC.fullmatch(word):
            continue
        if not MIN_LEN <= len(word) <= MAX_LEN:
            continue
        if word in seen:
            continue
        seen.add(word)
        out.append(word)
    return out


@dataclass(frozen=True)
class WordPools:
    guess_set: frozenset[str] = field(default_factory=frozenset)
    answers: tuple[str, ...] = ()

    @classmethod
    def from_lines(cls, guess_lines: Iterable[str], answer_lines: Iterable[str]) -> Self:
        guesses = normalise_words(guess_lines)
        answers = normalise_words(answer_lines)
        logger.info("Word pools ready: %d guessable words, %d answer candidates", len(guesses), len(answers))
        return cls(guess_set=frozenset(guesses), answers=tuple(answers))
