"""Key-value stores holding JSON documents as text."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol


class KeyValueStore(Protocol):
    """Process-wide synchronous key-value store. Last write wins."""

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value under a key, replacing any previous one."""

    def delete(self, key: str) -> None:
        """Remove a key if present."""

    def keys(self) -> list[str]:
        """Return every stored key."""


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store."""

    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value."""
        self.values[key] = value

    def delete(self, key: str) -> None:
        """Remove a key."""
        self.values.pop(key, None)

    def keys(self) -> list[str]:
        """Return every stored key."""
        return list(self.values)


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Store that keeps one ``<key>.json`` file per key in a directory."""

    root: Path

    def get(self, key: str) -> str | None:
        """Return the file contents for a key."""
        path = self._path(key)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        """Write the value to the key's file."""
        self.root.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")

    def delete(self, key: str) -> None:
        """Remove the key's file."""
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        """Return keys of all files in the directory."""
        if not self.root.is_dir():
            return []
        return sorted(path.stem for path in self.root.glob("*.json"))

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}.json"
