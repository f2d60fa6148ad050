"""Key-value persistence interface."""

from typing import Protocol


class KeyValueStore(Protocol):
    """Interface for a text store keyed by a namespace key."""

    def read(self, key: str) -> str | None:
        """Read the value for a key. Returns None if not found."""
        ...

    def write(self, key: str, value: str) -> None:
        """Replace the value for a key atomically."""
        ...
