"""Editing session over one LocalStorage.db.

Front ends (CLI, TUI) talk to the engine only through this module:

    load_store(data)                      -> LoadResult(entries, error)
    change_value(key, value, entries, pending)
                                          -> (entries, pending)
    download_original(data)               -> bytes
    download_modified(data, pending)      -> ExportResult(data, error)

Errors come back as messages, never as exceptions. `Session` bundles the
same calls with the state they need:

    empty -> loaded -> editing -> exported
                          ^          |
                          +----------+   (exporting does not end editing)
"""

import sqlite3
from typing import NamedTuple

from .db import OpenError, open_store
from .entries import Entry, build_entries, find_entry, get_storage_entries
from .patch import ExportError, export_patched
from .resolver import resolve_change
from .schema import validate_storage_table

STATE_EMPTY = 'empty'
STATE_LOADED = 'loaded'
STATE_EDITING = 'editing'
STATE_EXPORTED = 'exported'


class LoadResult(NamedTuple):
    entries: tuple
    error: str | None = None


class ExportResult(NamedTuple):
    data: bytes | None
    error: str | None = None


def load_store(data: bytes) -> LoadResult:
    """Open, validate and read a LocalStorage.db image."""
    try:
        store = open_store(data)
    except OpenError as e:
        return LoadResult((), str(e))

    with store:
        error = validate_storage_table(store)
        if error is not None:
            return LoadResult((), error.message)
        try:
            pairs = get_storage_entries(store)
        except sqlite3.Error as e:
            return LoadResult((), f'Failed to read settings: {e}')
    return LoadResult(build_entries(pairs))


def change_value(key: str, value, entries, pending: dict | None = None):
    """Apply one user edit and everything it cascades to.

    Returns new (entries, pending); the inputs are left untouched. Both
    outputs come from the same change set, and keys with no entry are left
    out of both.
    """
    changes = resolve_change(key, value, entries)
    known = {entry.key for entry in entries}
    changes = {k: v for k, v in changes.items() if k in known}

    new_entries = tuple(
        entry.with_value(changes[entry.key]) if entry.key in changes else entry
        for entry in entries
    )
    new_pending = dict(pending or {})
    new_pending.update(changes)
    return new_entries, new_pending


def download_original(original_bytes: bytes) -> bytes:
    return bytes(original_bytes)


def download_modified(original_bytes: bytes, pending: dict,
                      enforce_frame_rate: bool = True) -> ExportResult:
    try:
        return ExportResult(export_patched(original_bytes, pending, enforce_frame_rate))
    except ExportError as e:
        return ExportResult(None, str(e))


class Session:
    """One file-in/file-out editing session held in memory."""

    def __init__(self):
        self.state = STATE_EMPTY
        self.original_bytes: bytes | None = None
        self.entries: tuple[Entry, ...] = ()
        self.pending: dict = {}
        self.error: str | None = None

    @property
    def is_loaded(self) -> bool:
        return self.state != STATE_EMPTY

    def load(self, data: bytes) -> str | None:
        """Load a database image. Returns an error message or None.

        A failed load keeps whatever was loaded before.
        """
        result = load_store(data)
        if result.error is not None:
            self.error = result.error
            return result.error
        self.original_bytes = bytes(data)
        self.entries = result.entries
        self.pending = {}
        self.error = None
        self.state = STATE_LOADED
        return None

    def _require_loaded(self) -> None:
        if not self.is_loaded:
            raise RuntimeError('No database loaded')

    def entry(self, key: str) -> Entry | None:
        return find_entry(self.entries, key)

    def change(self, key: str, value) -> dict:
        """Edit one setting. Returns the change set that was applied."""
        self._require_loaded()
        touched = resolve_change(key, value, self.entries)
        self.entries, self.pending = change_value(key, value, self.entries, self.pending)
        self.state = STATE_EDITING
        return {k: self.pending[k] for k in touched if k in self.pending}

    def changes(self) -> list[Entry]:
        """Entries whose current value differs from the loaded value."""
        return [entry for entry in self.entries if entry.is_modified]

    def export_original(self) -> bytes:
        self._require_loaded()
        return download_original(self.original_bytes)

    def export_modified(self, enforce_frame_rate: bool = True) -> ExportResult:
        self._require_loaded()
        result = download_modified(self.original_bytes, self.pending, enforce_frame_rate)
        if result.error is None:
            self.state = STATE_EXPORTED
        else:
            self.error = result.error
        return result
