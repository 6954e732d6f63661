"""Protocol repository (a SQL table today, could be a browser-style localStorage or a plain dict tomorrow)"""

from typing import Protocol


class KeyValueStore(Protocol):
    """Durable flat key -> string storage."""

    def get_item(self, key: str) -> str | None:
        """Get the stored string, if the key exists. Raises RepositoryError if the storage cannot be read."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Create or overwrite the value stored under key. Raises RepositoryError if the write fails."""
        ...
