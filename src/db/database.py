"""Generate database session"""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import Settings
from src.db.schema import Base


def build_engine(settings: Settings) -> Engine:
    engine = create_engine(settings.database_url)
    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return engine


def open_session(engine: Engine) -> Session:
    """One long-lived session per player session: writes are small, synchronous and serialized by the event loop."""
    return sessionmaker(bind=engine)()
