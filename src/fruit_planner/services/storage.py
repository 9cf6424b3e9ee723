"""Local key-value storage for the auth token and cached user data."""

from dataclasses import dataclass
from typing import Protocol

AUTH_TOKEN_KEY = "@auth_token"
USER_DATA_KEY = "@user_data"


class KeyValueStore(Protocol):
    """Device storage interface."""

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value under a key."""

    def delete(self, key: str) -> None:
        """Remove a key if present."""


@dataclass
class InMemoryStore(KeyValueStore):
    """Process-local store used when no device storage is wired in."""

    _entries: dict[str, str]

    def __init__(self) -> None:
        self._entries = {}

    def get(self, key: str) -> str | None:
        """Return the stored value."""
        return self._entries.get(key)

    def set(self, key: str, value: str) -> None:
        """Store the value."""
        self._entries[key] = value

    def delete(self, key: str) -> None:
        """Remove the value."""
        self._entries.pop(key, None)
