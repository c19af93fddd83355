from __future__ import annotations

from typing import Any, Protocol

"""Session-scoped key-value store.

The orchestrator never holds state of its own; every call receives the store
and the session id to read from / write to. Two keys are used per session:
``TABLE_KEY`` (current Table) and ``CONFIG_KEY`` (current TemplateConfig).
"""

__all__ = [
    "CONFIG_KEY",
    "InMemorySessionStore",
    "SessionStore",
    "TABLE_KEY",
]

TABLE_KEY = "excelData"
CONFIG_KEY = "templateConfig"


class SessionStore(Protocol):
    def get(self, session_id: str, key: str) -> Any | None: ...

    def put(self, session_id: str, key: str, value: Any) -> None: ...

    def remove(self, session_id: str, key: str) -> None: ...


class InMemorySessionStore:
    """Dict-backed store. No locking: one request per session at a time."""

    def __init__(self) -> None:
        self._data: dict[tuple[str, str], Any] = {}

    def get(self, session_id: str, key: str) -> Any | None:
        return self._data.get((session_id, key))

    def put(self, session_id: str, key: str, value: Any) -> None:
        self._data[(session_id, key)] = value

    def remove(self, session_id: str, key: str) -> None:
        self._data.pop((session_id, key), None)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._data)
