"""
Deterministic word selection.

Every player computing the same seed string on the same word pool gets the same secret word,
so nothing here may touch global random state or any other source of entropy.
"""

from typing import Sequence

FALLBACK_WORD = "speed"

_UINT32_MASK = 0xFFFFFFFF
_FNV_OFFSET_BASIS = 2166136261
_FNV_PRIME = 16777619
_MULBERRY_INCREMENT = 0x6D2B79F5


def _utf16_code_units(text: str) -> list[int]:
    """Characters outside the BMP count as two units (surrogate pair) so hashes match browser-side clients."""
    encoded = text.encode("utf-16-le")
    return [int.from_bytes(encoded[i : i + 2], "little") for i in range(0, len(encoded), 2)]


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiplication."""
    return (a * b) & _UINT32_MASK


def hash_string_to_seed(seed: str) -> int:
    """FNV-1a fold of a string into an unsigned 32-bit integer."""
    h = _FNV_OFFSET_BASIS
    for unit in _utf16_code_units(seed):
        h ^= unit
        h = _imul(h, _FNV_PRIME)
    return h


class SeededRandom:
    """mulberry32: small counter-based PRNG. Same seed, same sequence of floats in [0, 1)."""

    def __init__(self, seed: int) -> None:
        self._state = seed & _UINT32_MASK

    def next_float(self) -> float:
        self._state = (self._state + _MULBERRY_INCREMENT) & _UINT32_MASK
        a = self._state
        t = _imul(a ^ (a >> 15), 1 | a)
        t ^= (t + _imul(t ^ (t >> 7), 61 | t)) & _UINT32_MASK
        return ((t ^ (t >> 14)) & _UINT32_MASK) / 4294967296

    def __call__(self) -> float:
        return self.next_float()


def pick_seeded_word(seed_string: str, pool: Sequence[str]) -> str:
    """Pick one word from the pool. An empty pool degrades to a fixed fallback word instead of failing."""
    if not pool:
        return FALLBACK_WORD
    rng = SeededRandom(hash_string_to_seed(seed_string))
    index = int(rng() * len(pool))
    return pool[index]
