"""LocalStorage rows as typed key/value entries."""

import math
from dataclasses import dataclass, replace

from .constants import TABLE_NAME
from .db import Store


def coerce_value(raw):
    """Interpret a stored value as a number when it looks like one.

    Integer text becomes int, other finite numeric text becomes float,
    anything else (JSON blobs, blank strings, NULL) is returned unchanged.
    """
    if raw is None or isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return raw
    if not isinstance(raw, str):
        return raw
    text = raw.strip()
    if not text or '_' in text:
        return raw
    try:
        return int(text)
    except ValueError:
        pass
    try:
        num = float(text)
    except ValueError:
        return raw
    return num if math.isfinite(num) else raw


def to_stored(value):
    """Render a value the way it is persisted (decimal text)."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Entry:
    """One setting: its value at load time and its value after edits."""

    key: str
    original_value: object
    current_value: object

    @property
    def is_modified(self) -> bool:
        return self.current_value != self.original_value

    def with_value(self, value) -> 'Entry':
        return replace(self, current_value=value)


def get_storage_entries(store: Store) -> list[tuple[str, object]]:
    """Read every LocalStorage row as (key, value) in storage order."""
    rows = store.exec_read(f'SELECT Key, Value FROM {TABLE_NAME}')
    return [(key, coerce_value(value)) for key, value in rows]


def build_entries(pairs) -> tuple[Entry, ...]:
    """Snapshot (key, value) pairs as unmodified entries."""
    return tuple(Entry(key, value, value) for key, value in pairs)


def find_entry(entries, key: str) -> Entry | None:
    for entry in entries:
        if entry.key == key:
            return entry
    return None


def current_value(entries, key: str, default=None):
    entry = find_entry(entries, key)
    return entry.current_value if entry is not None else default
