"""Runtime settings, read from environment variables."""

import logging
import os
from dataclasses import dataclass
from typing import Self

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///speedle.db"
    # Minimum time between two non-forced writes of a board snapshot
    save_interval_ms: int = 700
    tick_interval_ms: int = 100
    seed_refresh_ms: int = 1000
    message_fade_ms: int = 2200
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Self:
        return cls(
            database_url=os.environ.get("SPEEDLE_DATABASE_URL", cls.database_url),
            save_interval_ms=_env_int("SPEEDLE_SAVE_INTERVAL_MS", cls.save_interval_ms),
            tick_interval_ms=_env_int("SPEEDLE_TICK_INTERVAL_MS", cls.tick_interval_ms),
            seed_refresh_ms=_env_int("SPEEDLE_SEED_REFRESH_MS", cls.seed_refresh_ms),
            message_fade_ms=_env_int("SPEEDLE_MESSAGE_FADE_MS", cls.message_fade_ms),
            log_level=os.environ.get("SPEEDLE_LOG_LEVEL", cls.log_level).upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging once for the application (tests rely on pytest's caplog instead)."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
