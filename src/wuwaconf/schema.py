"""LocalStorage table validation.

Checks, in order, stopping at the first failure:
  1. exactly one table named LocalStorage (case-sensitive)
  2. that table has a `key` and a `value` column (case-insensitive)
"""

import sqlite3

from .constants import TABLE_NAME, KEY_COLUMN, VALUE_COLUMN
from .db import Store

MISSING_TABLE = 'MissingTable'
MISSING_KEY_COLUMN = 'MissingKeyColumn'
MISSING_VALUE_COLUMN = 'MissingValueColumn'
MISSING_BOTH_COLUMNS = 'MissingBothColumns'
NOT_A_VALID_STORE = 'NotAValidStore'

SCHEMA_MESSAGES = {
    MISSING_TABLE: f'Missing {TABLE_NAME} table',
    MISSING_KEY_COLUMN: f'Invalid table schema: Missing "{KEY_COLUMN}" column',
    MISSING_VALUE_COLUMN: f'Invalid table schema: Missing "{VALUE_COLUMN}" column',
    MISSING_BOTH_COLUMNS: (f'Invalid table schema: Missing both "{KEY_COLUMN}" '
                           f'and "{VALUE_COLUMN}" columns'),
    NOT_A_VALID_STORE: 'Error validating database. Is it actually a Wuthering Waves LocalStorage.db?',
}


class SchemaError(Exception):
    """Store opened but does not have the LocalStorage(Key, Value) shape."""

    def __init__(self, kind: str, message: str | None = None):
        self.kind = kind
        super().__init__(message or SCHEMA_MESSAGES[kind])

    @property
    def message(self) -> str:
        return str(self)


def validate_storage_table(store: Store) -> SchemaError | None:
    """Return a SchemaError describing the first problem, or None if valid."""
    try:
        if store.table_names().count(TABLE_NAME) != 1:
            return SchemaError(MISSING_TABLE)

        columns = [name.lower() for name in store.column_names(TABLE_NAME)]
    except sqlite3.Error as e:
        return SchemaError(NOT_A_VALID_STORE,
                           f'{SCHEMA_MESSAGES[NOT_A_VALID_STORE]} ({e})')

    has_key = KEY_COLUMN in columns
    has_value = VALUE_COLUMN in columns
    if not has_key and not has_value:
        return SchemaError(MISSING_BOTH_COLUMNS)
    if not has_key:
        return SchemaError(MISSING_KEY_COLUMN)
    if not has_value:
        return SchemaError(MISSING_VALUE_COLUMN)
    return None
