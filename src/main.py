"""Wiring: settings -> logging -> storage -> session controller."""

from typing import Optional

from src.core.config import Settings, configure_logging
from src.db.database import build_engine, open_session
from src.db.sql_repository import SQLKeyValueStore
from src.services.persistence import PersistenceGateway, SaveThrottle
from src.services.session import SpeedleSession
from src.services.ticker import Scheduler


def create_session(scheduler: Scheduler, settings: Optional[Settings] = None) -> SpeedleSession:
    """
    Build a ready-to-load session.

    With asyncio: create_session(asyncio.get_running_loop()), then load_word_pools(...) and start().
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    store = SQLKeyValueStore(open_session(build_engine(settings)))
    gateway = PersistenceGateway(store, SaveThrottle(settings.save_interval_ms))
    return SpeedleSession(gateway, scheduler, settings)
