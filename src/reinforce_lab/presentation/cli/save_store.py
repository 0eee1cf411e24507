"""File-system key-value store backing the save slot."""
from __future__ import annotations

import re
from pathlib import Path

from reinforce_lab.presentation.cli import config
from reinforce_lab.services.errors import StorageError

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileKeyValueStore:
    """Stores each key as ``<key>.json`` text under a directory."""

    def __init__(self, base_dir: Path | str | None = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else config.get_save_dir()

    def get(self, key: str) -> str | None:
        path = self._key_path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"Unable to read save file: {path}") from exc

    def set(self, key: str, value: str) -> None:
        path = self._key_path(key)
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(value, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Unable to write save file: {path}") from exc

    def remove(self, key: str) -> None:
        path = self._key_path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise StorageError(f"Unable to delete save file: {path}") from exc

    def _key_path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._base_dir / f"{key}.json"
