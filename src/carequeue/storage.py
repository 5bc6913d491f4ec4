"""
Persistence, clock and id collaborators.

Every table is a JSON list stored under a fixed key of a string key-value
store. Tables are loaded whole, mutated and saved whole; a table that cannot
be decoded is treated as empty.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Process-local store, used by tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Durable store keeping all keys in one JSON object on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Store file %s is unreadable; starting empty", self.path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Store file %s does not hold an object; starting empty", self.path)
            return {}
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp.replace(self.path)


def load_table(store: KeyValueStore, key: str, decode: Callable[[Dict[str, Any]], T]) -> List[T]:
    raw = store.get(key)
    if not raw:
        return []
    try:
        rows = json.loads(raw)
        if not isinstance(rows, list):
            raise TypeError(f"expected a list, got {type(rows).__name__}")
        return [decode(row) for row in rows]
    except (ValueError, TypeError, KeyError) as exc:
        logger.warning("Discarding malformed table %r: %s", key, exc)
        return []


def save_table(store: KeyValueStore, key: str, rows: List[Any]) -> None:
    store.set(key, json.dumps([row.to_dict() for row in rows]))


class Clock:
    """Wall clock, timezone-naive."""

    def now(self) -> datetime:
        return datetime.now()

    def today(self) -> date:
        return self.now().date()


class FixedClock(Clock):
    """Clock pinned to a moment; `advance` moves it forward."""

    def __init__(self, moment: datetime):
        self.moment = moment

    def now(self) -> datetime:
        return self.moment

    def advance(self, **delta: float) -> None:
        self.moment = self.moment + timedelta(**delta)


def new_id() -> str:
    return uuid.uuid4().hex
