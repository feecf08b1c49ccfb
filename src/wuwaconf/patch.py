"""Build the modified LocalStorage.db from the original bytes.

Every export starts from a fresh copy of the original bytes, so the
original stays downloadable and repeated exports of the same changes give
identical output.

Setting CustomFrameRate to 120 also:
  - installs a trigger that snaps CustomFrameRate back to 120 whenever the
    client rewrites it
  - writes MenuData / PlayMenuInfo so the in-game menu shows the 120 FPS
    option as selected

Moving a file that was exported at 120 to another frame rate drops the
trigger and removes those MenuData / PlayMenuInfo rows again.
"""

import sqlite3

from .constants import (
    TABLE_NAME, KEY_FRAME_RATE, FRAME_RATE_UNLOCKED,
    FRAME_RATE_TRIGGER, FRAME_RATE_TRIGGER_SQL, SYNTHETIC_RECORDS,
)
from .db import Store, OpenError, open_store
from .entries import to_stored
from .schema import validate_storage_table


class ExportError(Exception):
    """The modified database could not be built."""


def drop_frame_rate_trigger(store: Store) -> None:
    store.exec_write(f'DROP TRIGGER IF EXISTS {FRAME_RATE_TRIGGER}')


def create_frame_rate_trigger(store: Store) -> None:
    drop_frame_rate_trigger(store)
    store.exec_write(FRAME_RATE_TRIGGER_SQL)


def update_value(store: Store, key: str, value) -> int:
    """Set one setting's stored value. Returns rows affected (0 if absent)."""
    return store.exec_write(
        f'UPDATE {TABLE_NAME} SET Value = ? WHERE Key = ?',
        (to_stored(value), key))


def upsert_value(store: Store, key: str, value) -> None:
    """Update `key` if present, insert it otherwise.

    Call inside Store.transaction() so the existence check and the write
    happen as one unit.
    """
    stored = to_stored(value)
    exists = store.exec_read(
        f'SELECT 1 FROM {TABLE_NAME} WHERE Key = ? LIMIT 1', (key,))
    if exists:
        store.exec_write(
            f'UPDATE {TABLE_NAME} SET Value = ? WHERE Key = ?', (stored, key))
    else:
        store.exec_write(
            f'INSERT INTO {TABLE_NAME} (Key, Value) VALUES (?, ?)', (key, stored))


def wants_unlocked_frame_rate(pending: dict) -> bool:
    return pending.get(KEY_FRAME_RATE) == FRAME_RATE_UNLOCKED


def clear_synthetic_records(store: Store) -> int:
    """Delete MenuData / PlayMenuInfo rows left by an earlier 120 FPS export.

    Only rows holding exactly the payloads written here are removed; menu
    state the client wrote itself is kept. Returns rows deleted.
    """
    deleted = 0
    for key, payload in SYNTHETIC_RECORDS:
        deleted += store.exec_write(
            f'DELETE FROM {TABLE_NAME} WHERE Key = ? AND Value = ?', (key, payload))
    return deleted


def apply_changes(store: Store, pending: dict, enforce_frame_rate: bool = True) -> None:
    """Write pending changes (and 120 FPS enforcement) into `store`."""
    with store.transaction():
        # A file patched earlier may still carry the trigger; it would undo
        # any new frame rate, so clear it before writing.
        if KEY_FRAME_RATE in pending:
            drop_frame_rate_trigger(store)

        for key, value in pending.items():
            update_value(store, key, value)

        if enforce_frame_rate and wants_unlocked_frame_rate(pending):
            create_frame_rate_trigger(store)
            for key, payload in SYNTHETIC_RECORDS:
                upsert_value(store, key, payload)
        elif KEY_FRAME_RATE in pending and not wants_unlocked_frame_rate(pending):
            # Menu rows from an earlier 120 FPS export no longer apply.
            clear_synthetic_records(store)


def export_patched(original_bytes: bytes, pending: dict,
                   enforce_frame_rate: bool = True) -> bytes:
    """Return a new database image with `pending` applied.

    Raises ExportError if the original cannot be reopened or a write fails.
    """
    try:
        store = open_store(original_bytes)
    except OpenError as e:
        raise ExportError(str(e)) from e

    with store:
        error = validate_storage_table(store)
        if error is not None:
            raise ExportError(error.message) from error
        try:
            apply_changes(store, pending, enforce_frame_rate)
            return store.export_bytes()
        except (sqlite3.Error, TypeError, ValueError) as e:
            raise ExportError(f'Failed to write changes: {e}') from e
