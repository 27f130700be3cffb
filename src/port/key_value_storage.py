"""Port for device-local key/value persistence."""

from typing import Protocol


class KeyValueStorage(Protocol):
    """String values addressed by a fixed key, durable across restarts."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store a value. May raise OSError (e.g. disk full)."""
        ...

    def remove_item(self, key: str) -> None:
        ...
