"""Full-screen editor for LocalStorage.db graphics settings.

One row per known setting, with its original and current value. Locked
rows (XeSS while Ray Tracing is on, RT features while it is off) are shown
dimmed and refuse edits. Saving writes the modified database; the loaded
file's bytes are kept in the session so every save starts from them.
`o` writes the loaded file, unchanged, as LocalStorage_Original.db beside
the output.
"""

from ..constants import KNOWN_KEYS, KEY_FRAME_RATE, ORIGINAL_FILENAME
from ..fileutil import backup_file, sibling_path, write_bytes
from ..settings import SETTINGS, describe, is_locked, lock_reason, step_value

PAGE_STEP = 10

STYLE = {
    'palette-header': 'bold',
    'palette-selected': 'reverse',
    'palette-normal': '',
    'palette-locked': 'fg:ansibrightblack',
    'palette-modified': 'fg:ansigreen bold',
    'status': 'reverse',
    'status-dirty': 'reverse fg:ansiyellow',
    'help-key': 'bold',
    'help-text': '',
}


class SettingsEditor:
    """Cursor and edit state over a loaded Session.

    Everything except build_ui() works without a terminal.
    """

    def __init__(self, session, path: str, output: str | None = None,
                 backup: bool = False, save_callback=None):
        self.session = session
        self.path = path
        self.output = output
        self.backup = backup
        self.save_callback = save_callback
        self.keys = [k for k in KNOWN_KEYS if session.entry(k) is not None]
        self.selected_index = 0
        self.dirty = False
        self.message = ''
        self._backed_up = False

    @property
    def name(self):
        return 'Settings'

    @property
    def is_dirty(self):
        return self.dirty

    @property
    def selected_key(self) -> str | None:
        if not self.keys:
            return None
        return self.keys[self.selected_index]

    def move(self, delta: int) -> None:
        if self.keys:
            self.selected_index = max(0, min(len(self.keys) - 1,
                                             self.selected_index + delta))

    def _edit(self, key: str, value) -> bool:
        if is_locked(key, self.session.entries):
            self.message = lock_reason(key)
            return False
        if value == self.session.entry(key).current_value:
            return False
        changes = self.session.change(key, value)
        self.dirty = True
        self.message = ', '.join(f'{k}={v}' for k, v in changes.items())
        return True

    def step(self, delta: int) -> bool:
        """Step the selected setting. Returns True if anything changed."""
        key = self.selected_key
        if key is None:
            return False
        current = self.session.entry(key).current_value
        return self._edit(key, step_value(key, current, delta))

    def reset_selected(self) -> bool:
        """Put the selected setting back to its loaded value."""
        key = self.selected_key
        if key is None:
            return False
        return self._edit(key, self.session.entry(key).original_value)

    def rows(self) -> list[tuple]:
        """(label, original, current, modified, locked) per visible setting."""
        rows = []
        for key in self.keys:
            entry = self.session.entry(key)
            rows.append((
                SETTINGS[key].label,
                describe(key, entry.original_value),
                describe(key, entry.current_value),
                entry.is_modified,
                is_locked(key, self.session.entries),
            ))
        return rows

    def save(self) -> bool:
        result = self.session.export_modified()
        if result.error:
            self.message = f'Save failed: {result.error}'
            return False
        if self.save_callback:
            self.save_callback(result.data)
        else:
            if self.backup and not self._backed_up:
                backup_file(self.path, self.session.export_original())
                self._backed_up = True
            write_bytes(self.output or self.path, result.data)
        self.dirty = False
        self.message = f'Saved to {self.output or self.path}'
        return True

    def save_original(self) -> str:
        """Write the loaded bytes next to the output. Returns the path."""
        path = sibling_path(self.output or self.path, ORIGINAL_FILENAME)
        data = self.session.export_original()
        if self.save_callback:
            self.save_callback(data)
        else:
            write_bytes(path, data)
        self.message = f'Original saved to {path}'
        return path

    def build_ui(self):
        from prompt_toolkit.layout import HSplit, Window, FormattedTextControl
        from prompt_toolkit.layout.controls import UIControl, UIContent
        from prompt_toolkit.key_binding import KeyBindings

        editor = self

        class SettingsListControl(UIControl):
            def create_content(self, width, height):
                lines = []
                lines.append([('class:palette-header',
                               f' {"Setting":<32} {"Original":>10} {"Current":>10}'.ljust(width))])
                lines.append([('class:palette-header',
                               ' ' + '-' * (width - 2) + ' ')])
                for i, (label, orig, cur, modified, locked) in enumerate(editor.rows()):
                    text = f' {label:<32} {orig:>10} {cur:>10}'
                    if locked:
                        text += '  (locked)'
                    if i == editor.selected_index:
                        style = 'class:palette-selected'
                    elif locked:
                        style = 'class:palette-locked'
                    elif modified:
                        style = 'class:palette-modified'
                    else:
                        style = 'class:palette-normal'
                    lines.append([(style, text.ljust(width))])
                if not editor.keys:
                    lines.append([('', ' (no known settings in this file)')])
                return UIContent(
                    get_line=lambda i: lines[i] if i < len(lines) else [],
                    line_count=len(lines),
                )

        def get_status():
            dirty = ' [MODIFIED]' if editor.dirty else ''
            key = editor.selected_key
            hint = SETTINGS[key].hint if key else ''
            return [
                ('class:status', ' Settings'),
                ('class:status-dirty' if editor.dirty else 'class:status', dirty),
                ('class:status', f' | {editor.message or hint} '),
            ]

        def get_help():
            return [
                ('class:help-key', ' Up/Down'), ('class:help-text', '=select '),
                ('class:help-key', 'Left/Right'), ('class:help-text', '=change '),
                ('class:help-key', 'PgUp/PgDn'), ('class:help-text', f'=fps +/-{PAGE_STEP} '),
                ('class:help-key', 'r'), ('class:help-text', '=reset '),
                ('class:help-key', 's'), ('class:help-text', '=save '),
                ('class:help-key', 'o'), ('class:help-text', '=save original '),
                ('class:help-key', 'q'), ('class:help-text', '=quit '),
            ]

        settings_list = Window(content=SettingsListControl(), wrap_lines=False)
        status_bar = Window(content=FormattedTextControl(get_status), height=1)
        help_bar = Window(content=FormattedTextControl(get_help), height=1)
        root = HSplit([settings_list, status_bar, help_bar])

        kb = KeyBindings()

        @kb.add('up')
        def _up(event):
            editor.message = ''
            editor.move(-1)

        @kb.add('down')
        def _down(event):
            editor.message = ''
            editor.move(1)

        @kb.add('left')
        def _dec(event):
            editor.step(-1)

        @kb.add('right')
        def _inc(event):
            editor.step(1)

        @kb.add('pageup')
        def _page_up(event):
            if editor.selected_key == KEY_FRAME_RATE:
                editor.step(PAGE_STEP)

        @kb.add('pagedown')
        def _page_down(event):
            if editor.selected_key == KEY_FRAME_RATE:
                editor.step(-PAGE_STEP)

        @kb.add('r')
        def _reset(event):
            editor.reset_selected()

        @kb.add('s')
        def _save(event):
            editor.save()

        @kb.add('o')
        def _save_original(event):
            editor.save_original()

        @kb.add('q')
        @kb.add('c-c')
        def _quit(event):
            event.app.exit()

        return root, kb


def run_editor(session, path: str, output: str | None = None,
               backup: bool = False) -> None:
    """Run the settings editor full-screen until the user quits."""
    from prompt_toolkit import Application
    from prompt_toolkit.layout import Layout
    from prompt_toolkit.styles import Style

    editor = SettingsEditor(session, path, output=output, backup=backup)
    root, kb = editor.build_ui()
    app = Application(
        layout=Layout(root),
        key_bindings=kb,
        style=Style.from_dict(STYLE),
        full_screen=True,
    )
    app.run()
    if editor.dirty:
        print("Unsaved changes discarded.")
