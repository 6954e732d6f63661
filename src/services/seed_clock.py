"""Seed keys: which puzzle instance each mode is showing right now (local calendar date, or a 5-minute window)."""

import logging
from datetime import datetime
from typing import Callable

from src.core.shared_types import SeedType
from src.puzzle.modes import Mode

logger = logging.getLogger(__name__)

WallClock = Callable[[], datetime]


def daily_key(moment: datetime) -> str:
    """'YYYY-MM-DD' of the local date."""
    return f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"


def five_minute_block_key(moment: datetime) -> str:
    """'YYYY-MM-DD HH:MM' with the minutes floored to a multiple of 5."""
    floored = (moment.minute // 5) * 5
    return f"{daily_key(moment)} {moment.hour:02d}:{floored:02d}"


def time_only_from_block_key(block_key: str) -> str:
    parts = str(block_key).split(" ")
    return parts[1] if len(parts) == 2 else ""


class SeedClock:
    """Caches the current daily / 5-minute keys. Call refresh() periodically (at least once per second)."""

    def __init__(self, now: WallClock = datetime.now) -> None:
        self._now = now
        self.daily_date = ""
        self.five_minute_key = ""
        self.refresh()

    def refresh(self) -> bool:
        """Recompute both keys. True when either of them rolled over."""
        moment = self._now()
        daily, block = daily_key(moment), five_minute_block_key(moment)
        changed = (daily, block) != (self.daily_date, self.five_minute_key)
        if changed and self.daily_date:
            logger.info("Seed keys rolled over: %s / %s", daily, block)
        self.daily_date, self.five_minute_key = daily, block
        return changed

    def seed_key_for_mode(self, mode: Mode) -> str:
        if mode.seed_type == SeedType.DAILY:
            return self.daily_date
        return self.five_minute_key

    def under_text_for_mode(self, mode: Mode) -> str:
        """Short label shown under the mode button: the date, or just the HH:MM of the window."""
        if mode.seed_type == SeedType.DAILY:
            return self.daily_date
        return time_only_from_block_key(self.five_minute_key)
