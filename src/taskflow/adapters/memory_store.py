"""In-process key-value storage adapter."""


class MemoryKeyValueStore:
    """Implements KeyValueStore protocol with a plain dict. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.values: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.values.get(key)

    def write(self, key: str, value: str) -> None:
        self.values[key] = value
