"""Implementation of KeyValueStore using SQLAlchemy"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.db.schema import DBKeyValue

logger = logging.getLogger(__name__)


class SQLKeyValueStore:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_item(self, key: str) -> str | None:
        """Get the stored string, if the key exists."""
        record = self._fetch(key)
        if record:
            return record.value
        return None

    def set_item(self, key: str, value: str) -> None:
        """Create or overwrite the value stored under key."""
        record = self._fetch(key)
        if record is None:
            self.db.add(DBKeyValue(key=key, value=value))
        else:
            record.value = value
        self._commit()

    def _fetch(self, key: str) -> DBKeyValue | None:
        query = select(DBKeyValue).where(DBKeyValue.key == key)
        try:
            return self.db.scalar(query)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Read from key-value store failed: %s", exc)
            raise RepositoryError("Could not read from the key-value store.") from exc

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Write to key-value store failed: %s", exc)
            raise RepositoryError("Could not write to the key-value store.") from exc
