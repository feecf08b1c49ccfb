"""Tests for the settings editor (data logic, no terminal needed)."""

import os

from wuwaconf.constants import ORIGINAL_FILENAME
from wuwaconf.db import open_store
from wuwaconf.session import Session
from wuwaconf.tui.settings_editor import SettingsEditor


def _editor(data, **kwargs):
    session = Session()
    session.load(data)
    return SettingsEditor(session, 'LocalStorage.db', **kwargs)


def _select(editor, key):
    editor.selected_index = editor.keys.index(key)


class TestSettingsEditor:
    def test_name(self, sample_db_bytes):
        assert _editor(sample_db_bytes).name == 'Settings'

    def test_rows_for_known_keys(self, sample_db_bytes):
        editor = _editor(sample_db_bytes)
        rows = editor.rows()
        assert len(rows) == 6
        assert rows[0][:3] == ('Custom Frame Rate', '60', '60')

    def test_initially_clean(self, sample_db_bytes):
        assert not _editor(sample_db_bytes).is_dirty

    def test_move_clamps(self, sample_db_bytes):
        editor = _editor(sample_db_bytes)
        editor.move(-1)
        assert editor.selected_index == 0
        editor.move(100)
        assert editor.selected_index == len(editor.keys) - 1

    def test_step_frame_rate(self, sample_db_bytes):
        editor = _editor(sample_db_bytes)
        assert editor.step(10)
        assert editor.session.entry('CustomFrameRate').current_value == 70
        assert editor.is_dirty

    def test_step_at_limit_no_change(self, make_db):
        editor = _editor(make_db(rows=[('CustomFrameRate', '120')]))
        assert not editor.step(1)
        assert not editor.is_dirty

    def test_step_float_frame_rate(self, make_db):
        editor = _editor(make_db(rows=[('CustomFrameRate', '60.0')]))
        assert editor.step(1)
        assert editor.session.entry('CustomFrameRate').current_value == 61

    def test_ray_tracing_cascades(self, sample_db_bytes):
        editor = _editor(sample_db_bytes)
        _select(editor, 'RayTracing')
        editor.step(1)
        assert editor.session.entry('XessEnable').current_value == 0
        assert 'XessEnable=0' in editor.message

    def test_locked_row_refuses(self, sample_db_bytes):
        editor = _editor(sample_db_bytes)
        _select(editor, 'RayTracedGI')
        assert not editor.step(1)
        assert 'requires Ray Tracing' in editor.message
        locked = [row[4] for row in editor.rows()]
        assert locked == [False, False, True, True, False, False]

    def test_reset_selected(self, sample_db_bytes):
        editor = _editor(sample_db_bytes)
        _select(editor, 'RayTracing')
        editor.step(1)
        assert editor.reset_selected()
        assert editor.session.entry('RayTracing').current_value == 0
        assert editor.session.entry('XessEnable').current_value == 1

    def test_save_with_callback(self, sample_db_bytes):
        saved = []
        editor = _editor(sample_db_bytes, save_callback=saved.append)
        editor.step(5)
        assert editor.save()
        assert not editor.is_dirty
        with open_store(saved[0]) as store:
            rows = store.exec_read(
                "SELECT Value FROM LocalStorage WHERE Key = 'CustomFrameRate'")
        assert rows == [('65',)]

    def test_save_to_file_with_backup(self, sample_db_file, sample_db_bytes):
        session = Session()
        session.load(sample_db_bytes)
        editor = SettingsEditor(session, sample_db_file, backup=True)
        editor.step(1)
        editor.save()
        editor.step(1)
        editor.save()
        with open(sample_db_file + '.bak', 'rb') as f:
            assert f.read() == sample_db_bytes
        with open(sample_db_file, 'rb') as f:
            data = f.read()
        with open_store(data) as store:
            rows = store.exec_read(
                "SELECT Value FROM LocalStorage WHERE Key = 'CustomFrameRate'")
        assert rows == [('62',)]

    def test_backup_uses_loaded_bytes(self, sample_db_file, sample_db_bytes):
        session = Session()
        session.load(sample_db_bytes)
        with open(sample_db_file, 'wb') as f:
            f.write(b'rewritten by the client')
        editor = SettingsEditor(session, sample_db_file, backup=True)
        editor.step(1)
        assert editor.save()
        with open(sample_db_file + '.bak', 'rb') as f:
            assert f.read() == sample_db_bytes

    def test_save_original_to_file(self, sample_db_file, sample_db_bytes, tmp_dir):
        session = Session()
        session.load(sample_db_bytes)
        editor = SettingsEditor(session, sample_db_file)
        editor.step(1)
        path = editor.save_original()
        assert path == os.path.join(tmp_dir, ORIGINAL_FILENAME)
        with open(path, 'rb') as f:
            assert f.read() == sample_db_bytes
        assert editor.is_dirty
        assert 'Original saved' in editor.message

    def test_save_original_with_callback(self, sample_db_bytes):
        saved = []
        editor = _editor(sample_db_bytes, save_callback=saved.append)
        editor.save_original()
        assert saved == [sample_db_bytes]

    def test_no_known_settings(self, make_db):
        editor = _editor(make_db(rows=[('PlayerName', 'Rover')]))
        assert editor.keys == []
        assert editor.selected_key is None
        assert not editor.step(1)
        assert not editor.reset_selected()
