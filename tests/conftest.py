"""Shared fixtures: synthesized LocalStorage.db images."""

import os
import sqlite3

import pytest

from wuwaconf.entries import Entry

LOCAL_STORAGE_DDL = 'CREATE TABLE LocalStorage (Key TEXT, Value TEXT)'

SAMPLE_ROWS = [
    ('CustomFrameRate', '60'),
    ('RayTracing', '0'),
    ('RayTracedReflection', '0'),
    ('RayTracedGI', '0'),
    ('XessEnable', '1'),
    ('XessQuality', '1'),
    ('PlayerName', 'Rover'),
    ('MenuData', '{"___MetaType___":"___Map___","Content":[[11,2]]}'),
]


def build_db_bytes(path, rows=SAMPLE_ROWS, ddl=LOCAL_STORAGE_DDL,
                   insert='INSERT INTO LocalStorage (Key, Value) VALUES (?, ?)',
                   journal_mode=None) -> bytes:
    """Create a SQLite file at `path` and return its bytes."""
    conn = sqlite3.connect(path)
    try:
        if journal_mode:
            conn.execute(f'PRAGMA journal_mode={journal_mode}')
        if ddl:
            conn.execute(ddl)
        if rows:
            conn.executemany(insert, rows)
        conn.commit()
    finally:
        conn.close()
    with open(path, 'rb') as f:
        return f.read()


@pytest.fixture
def tmp_dir(tmp_path):
    return str(tmp_path)


@pytest.fixture
def make_db(tmp_path):
    """Factory: make_db(rows=..., ddl=..., name=...) -> database bytes."""
    counter = iter(range(1000))

    def _make(rows=SAMPLE_ROWS, ddl=LOCAL_STORAGE_DDL, name=None, **kwargs):
        path = tmp_path / (name or f'db{next(counter)}.db')
        return build_db_bytes(str(path), rows, ddl, **kwargs)

    return _make


@pytest.fixture
def sample_db_bytes(make_db):
    return make_db(name='sample.db')


@pytest.fixture
def sample_db_file(tmp_dir, sample_db_bytes):
    path = os.path.join(tmp_dir, 'LocalStorage.db')
    with open(path, 'wb') as f:
        f.write(sample_db_bytes)
    return path


@pytest.fixture
def sample_entries():
    return (
        Entry('CustomFrameRate', 60, 60),
        Entry('RayTracing', 0, 0),
        Entry('RayTracedReflection', 0, 0),
        Entry('RayTracedGI', 0, 0),
        Entry('XessEnable', 1, 1),
        Entry('XessQuality', 1, 1),
    )
