"""Service layer exports."""

from .errors import SaveLoadError, StorageError
from .game_service import GameService, GameView
from .save_service import STORAGE_KEY, SaveService
from .storage import InMemoryKeyValueStore, KeyValueStore

__all__ = [
    "GameService",
    "GameView",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "STORAGE_KEY",
    "SaveLoadError",
    "SaveService",
    "StorageError",
]
