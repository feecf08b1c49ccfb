"""Tests for LocalStorage table validation."""

import pytest

from wuwaconf.db import open_store
from wuwaconf.schema import (
    SchemaError, validate_storage_table,
    MISSING_TABLE, MISSING_KEY_COLUMN, MISSING_VALUE_COLUMN,
    MISSING_BOTH_COLUMNS, NOT_A_VALID_STORE,
)


def _validate(data):
    with open_store(data) as store:
        return validate_storage_table(store)


class TestValidateStorageTable:
    def test_valid(self, sample_db_bytes):
        assert _validate(sample_db_bytes) is None

    def test_missing_table(self, make_db):
        data = make_db(rows=(), ddl='CREATE TABLE Settings (Key TEXT, Value TEXT)')
        error = _validate(data)
        assert isinstance(error, SchemaError)
        assert error.kind == MISSING_TABLE

    def test_table_name_case_sensitive(self, make_db):
        data = make_db(rows=(), ddl='CREATE TABLE localstorage (Key TEXT, Value TEXT)')
        assert _validate(data).kind == MISSING_TABLE

    def test_missing_key_column(self, make_db):
        data = make_db(rows=(), ddl='CREATE TABLE LocalStorage (Name TEXT, Value TEXT)')
        assert _validate(data).kind == MISSING_KEY_COLUMN

    def test_missing_value_column(self, make_db):
        data = make_db(rows=(), ddl='CREATE TABLE LocalStorage (Key TEXT, Data TEXT)')
        assert _validate(data).kind == MISSING_VALUE_COLUMN

    def test_missing_both_columns(self, make_db):
        data = make_db(rows=(), ddl='CREATE TABLE LocalStorage (a TEXT, b TEXT)')
        assert _validate(data).kind == MISSING_BOTH_COLUMNS

    @pytest.mark.parametrize('ddl', [
        'CREATE TABLE LocalStorage (key TEXT, value TEXT)',
        'CREATE TABLE LocalStorage (KEY TEXT PRIMARY KEY, VALUE TEXT)',
    ])
    def test_column_names_case_insensitive(self, make_db, ddl):
        assert _validate(make_db(rows=(), ddl=ddl)) is None

    def test_extra_tables_allowed(self, make_db):
        data = make_db(rows=(), ddl='CREATE TABLE LocalStorage (Key TEXT, Value TEXT)')
        with open_store(data) as store:
            store.exec_write('CREATE TABLE Other (x)')
            assert validate_storage_table(store) is None

    def test_closed_store_not_valid(self, sample_db_bytes):
        store = open_store(sample_db_bytes)
        store.close()
        error = validate_storage_table(store)
        assert error.kind == NOT_A_VALID_STORE


class TestSchemaError:
    def test_message(self):
        error = SchemaError(MISSING_TABLE)
        assert error.message == 'Missing LocalStorage table'
        assert str(error) == error.message

    def test_custom_message(self):
        error = SchemaError(NOT_A_VALID_STORE, 'broken')
        assert error.kind == NOT_A_VALID_STORE
        assert error.message == 'broken'
