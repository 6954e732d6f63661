"""Text shown to the player: timers and shareable results."""

import math
from datetime import date
from typing import Optional

from src.core.shared_types import Status

APP_NAME = "Speedle"


def _whole_seconds(ms: Optional[float]) -> int:
    if not ms or not math.isfinite(ms):
        return 0
    return max(0, int(ms // 1000))


def format_mmss(ms: Optional[float]) -> str:
    """'MM:SS', floored, never negative."""
    seconds = _whole_seconds(ms)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def format_mss(ms: Optional[float]) -> str:
    """'M:SS' (minutes not padded), used in the one line result."""
    seconds = _whole_seconds(ms)
    return f"{seconds // 60}:{seconds % 60:02d}"


def daily_seed_text(seed_key: str) -> str:
    """'2026-10-19' -> '19 Oct'. Anything that is not an ISO date is returned unchanged."""
    try:
        day = date.fromisoformat(seed_key)
    except ValueError:
        return seed_key
    return day.strftime("%d %b")


def build_copy_text(
    mode_label: str,
    seed_key: str,
    elapsed_ms: float,
    final_ms: Optional[float],
    guess_count: int,
) -> str:
    time_text = format_mmss(final_ms if final_ms is not None else elapsed_ms)
    return f"{APP_NAME}\nMode: {mode_label}\nSeed: {seed_key}\nTime: {time_text}\nGuesses: {guess_count}"


def build_header_copy_text(
    mode_key: str,
    mode_label: str,
    seed_key: str,
    status: Status,
    final_ms: Optional[float],
    guess_count: int,
) -> str:
    """One line summary of a solved board. Empty for boards that are not solved."""
    if status != Status.SOLVED:
        return ""
    seed_text = daily_seed_text(seed_key) if mode_key == "daily" else seed_key
    return f"{mode_label} {APP_NAME} {seed_text} solved in {format_mss(final_ms)} ({guess_count} guesses)"
