"""Service-layer exceptions."""


class SaveLoadError(Exception):
    """Raised when a persisted save cannot be upgraded into the current shape."""


class StorageError(Exception):
    """Raised when the key-value store backing the save slot fails."""
