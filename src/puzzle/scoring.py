"""Scoring a guess against the answer, and folding guesses into a per-letter key state."""

from collections import Counter
from typing import Iterable, Protocol

from src.core.exceptions import InvalidGuessError
from src.core.shared_types import Feedback

FEEDBACK_RANK: dict[Feedback, int] = {
    Feedback.ABSENT: 0,
    Feedback.PRESENT: 1,
    Feedback.CORRECT: 2,
}

KeyState = dict[str, Feedback]


class ScoredGuess(Protocol):
    word: str
    feedback: list[Feedback]


def score(guess: str, answer: str) -> list[Feedback]:
    """
    Two-pass scoring.
    ----
    1. Exact matches are marked correct. Letters of the answer that were not matched exactly go into a remainder count.
    2. Left to right, every other position consumes one remaining occurrence of its letter (present) or gets absent.

    A letter is never marked correct/present more often than it occurs in the answer.
    """
    if len(guess) != len(answer):
        raise InvalidGuessError(f"Must be {len(answer)} letters")

    result = [Feedback.ABSENT] * len(answer)
    remaining: Counter[str] = Counter()

    for i, (g, a) in enumerate(zip(guess, answer)):
        if g == a:
            result[i] = Feedback.CORRECT
        else:
            remaining[a] += 1

    for i, g in enumerate(guess):
        if result[i] == Feedback.CORRECT:
            continue
        if remaining[g] > 0:
            result[i] = Feedback.PRESENT
            remaining[g] -= 1

    return result


def merge_key_state(key_state: KeyState, word: str, feedback: Iterable[Feedback]) -> KeyState:
    """Fold one guess into an existing key state (in place). Known letters are only ever upgraded."""
    for letter, new in zip(word.upper(), feedback):
        new = Feedback(new)
        previous = key_state.get(letter)
        if previous is None or FEEDBACK_RANK[new] > FEEDBACK_RANK[previous]:
            key_state[letter] = new
    return key_state


def aggregate_key_state(guesses: Iterable[ScoredGuess]) -> KeyState:
    """Recompute the key state from the full guess history."""
    key_state: KeyState = {}
    for guess in guesses:
        merge_key_state(key_state, guess.word, guess.feedback)
    return key_state
