"""Key-value store collaborators used to persist the single save slot."""
from __future__ import annotations

from typing import Dict, Protocol


class KeyValueStore(Protocol):
    """Opaque string slot storage; the game never needs more than this."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Dictionary-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)
