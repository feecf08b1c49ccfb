"""Unified CLI for wuwaconf: Wuthering Waves LocalStorage.db editor.

    wuwaconf view <LocalStorage.db> [--all] [--json]
    wuwaconf edit <LocalStorage.db> --fps 120 --ray-tracing off --backup
    wuwaconf edit <LocalStorage.db> --keep-original -o out/
    wuwaconf tui  <LocalStorage.db>
"""

import argparse
import os
import sys

from . import __version__
from .constants import (
    KNOWN_KEYS, KEY_FRAME_RATE, KEY_RAY_TRACING, KEY_RT_REFLECTION, KEY_RT_GI,
    KEY_XESS_ENABLE, KEY_XESS_QUALITY, FRAME_RATE_UNLOCKED, FRAME_RATE_TRIGGER,
    ORIGINAL_FILENAME, MODIFIED_FILENAME,
)
from .fileutil import backup_file, read_bytes, sibling_path, write_bytes
from .json_export import export_json
from .session import Session
from .settings import SETTINGS, describe, is_locked, lock_reason, parse_input

# Flag -> setting, in the order edits are applied. RayTracing goes first so
# its cascade is in place before the flags it locks or unlocks are checked.
EDIT_FLAGS = (
    ('ray_tracing', KEY_RAY_TRACING),
    ('rt_reflection', KEY_RT_REFLECTION),
    ('rt_gi', KEY_RT_GI),
    ('xess', KEY_XESS_ENABLE),
    ('xess_quality', KEY_XESS_QUALITY),
    ('fps', KEY_FRAME_RATE),
)


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def load_session(path: str) -> Session:
    """Read and load a LocalStorage.db, exiting with an error on failure."""
    if not os.path.isfile(path):
        _fail(f"File not found: {path}")
    session = Session()
    error = session.load(read_bytes(path))
    if error:
        _fail(error)
    return session


def output_path(args) -> str:
    """Where the modified database is written.

    `--output` may name a file or an existing directory (which gets
    LocalStorage_Modified.db); without it the input file is overwritten.
    """
    if not args.output:
        return args.file
    if os.path.isdir(args.output):
        return os.path.join(args.output, MODIFIED_FILENAME)
    return args.output


def original_path(args) -> str:
    return sibling_path(output_path(args), ORIGINAL_FILENAME)


def _short(value, width: int = 60) -> str:
    text = str(value)
    if len(text) > width:
        text = text[:width - 3] + '...'
    return text


def print_changes(session: Session) -> None:
    changed = session.changes()
    if not changed:
        print("  (no changes)")
        return
    print(f"  {'Key':<22} {'Original':>10} {'Current':>10}")
    print(f"  {'-'*22} {'-'*10} {'-'*10}")
    for entry in changed:
        print(f"  {entry.key:<22} {_short(entry.original_value, 10):>10} "
              f"{_short(entry.current_value, 10):>10}")


def cmd_view(args) -> None:
    """Show the graphics settings (or every entry with --all)."""
    session = load_session(args.file)
    entries = session.entries if args.all else [
        e for e in (session.entry(k) for k in KNOWN_KEYS) if e is not None]

    if args.json:
        result = {
            'file': os.path.basename(args.file),
            'entries': {e.key: e.original_value for e in entries},
        }
        export_json(result, args.output)
        return

    print(f"\n=== LocalStorage: {os.path.basename(args.file)} "
          f"({len(session.entries)} entries) ===\n")
    for entry in entries:
        setting = SETTINGS.get(entry.key)
        if setting is None:
            print(f"  {entry.key:<32} {_short(entry.original_value)}")
            continue
        label = describe(entry.key, entry.original_value)
        lock = '  (locked)' if is_locked(entry.key, session.entries) else ''
        print(f"  {setting.label:<32} {label}{lock}")
    missing = [k for k in KNOWN_KEYS if session.entry(k) is None]
    if missing and not args.all:
        print(f"\n  Not present in file: {', '.join(missing)}")
    print()


def cmd_edit(args) -> None:
    """Apply setting changes and write the modified database."""
    session = load_session(args.file)

    modified = False
    for attr, key in EDIT_FLAGS:
        raw = getattr(args, attr, None)
        if raw is None:
            continue
        if session.entry(key) is None:
            _fail(f"{key} is not present in {args.file}")
        try:
            value = parse_input(key, raw)
        except ValueError as e:
            _fail(str(e))
        if is_locked(key, session.entries):
            _fail(lock_reason(key))
        if key == KEY_FRAME_RATE and str(value) != str(raw).strip():
            print(f"  Frame rate {raw} clamped to {value}")
        session.change(key, value)
        modified = True

    if args.keep_original and not args.dry_run:
        path = original_path(args)
        write_bytes(path, session.export_original())
        print(f"  Original: {path}")

    if not modified:
        print("No modifications specified.")
        return

    print(f"\n=== Changes to {os.path.basename(args.file)} ===\n")
    print_changes(session)
    print()

    if args.dry_run:
        print("  (dry run, no file written)")
        return

    enforce = not args.no_enforce
    result = session.export_modified(enforce_frame_rate=enforce)
    if result.error:
        _fail(f"{result.error} (original file left untouched)")

    if args.backup:
        bak_path = backup_file(args.file, session.export_original())
        print(f"  Backup: {bak_path}")

    output = output_path(args)
    write_bytes(output, result.data)
    print(f"  Written: {output}")
    if enforce and session.pending.get(KEY_FRAME_RATE) == FRAME_RATE_UNLOCKED:
        print(f"  Frame rate locked at {FRAME_RATE_UNLOCKED} "
              f"(trigger {FRAME_RATE_TRIGGER})")


def cmd_tui(args) -> None:
    """Open the interactive settings editor."""
    session = load_session(args.file)
    from .tui.settings_editor import run_editor
    run_editor(session, args.file, output=output_path(args), backup=args.backup)


def register_parser(subparsers) -> None:
    p_view = subparsers.add_parser('view', help='Show graphics settings')
    p_view.add_argument('file', help='LocalStorage.db path')
    p_view.add_argument('--all', action='store_true', help='Show every entry')
    p_view.add_argument('--json', action='store_true', help='Output as JSON')
    p_view.add_argument('--output', '-o', help='Output file (for --json)')

    p_edit = subparsers.add_parser('edit', help='Change graphics settings')
    p_edit.add_argument('file', help='LocalStorage.db path')
    p_edit.add_argument('--fps', help='Custom frame rate (30-120)')
    p_edit.add_argument('--ray-tracing', help='Ray tracing: off, low, medium, high (or 0-3)')
    p_edit.add_argument('--rt-reflection', help='Ray traced reflections: on/off')
    p_edit.add_argument('--rt-gi', help='Ray traced global illumination: on/off')
    p_edit.add_argument('--xess', help='XeSS: on/off')
    p_edit.add_argument('--xess-quality', help='XeSS quality: 0 or 1')
    p_edit.add_argument('--no-enforce', action='store_true',
                        help='Do not lock 120 FPS with a trigger')
    p_edit.add_argument('--output', '-o', help='Output file or directory (default: overwrite)')
    p_edit.add_argument('--backup', action='store_true', help='Create .bak backup')
    p_edit.add_argument('--dry-run', action='store_true', help='Show changes only')
    p_edit.add_argument('--keep-original', action='store_true',
                        help=f'Also write the untouched file as {ORIGINAL_FILENAME}')

    p_tui = subparsers.add_parser('tui', help='Interactive settings editor')
    p_tui.add_argument('file', help='LocalStorage.db path')
    p_tui.add_argument('--output', '-o', help='Output file or directory (default: overwrite)')
    p_tui.add_argument('--backup', action='store_true', help='Create .bak backup')


def dispatch(args) -> None:
    if args.command == 'view':
        cmd_view(args)
    elif args.command == 'edit':
        cmd_edit(args)
    elif args.command == 'tui':
        cmd_tui(args)
    else:
        print("Usage: wuwaconf {view|edit|tui} ...", file=sys.stderr)
        sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog='wuwaconf',
        description='Wuthering Waves - LocalStorage.db settings editor',
    )
    parser.add_argument('--version', action='version', version=f'wuwaconf {__version__}')
    subparsers = parser.add_subparsers(dest='command', help='Command to run')
    register_parser(subparsers)

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(0)
    dispatch(args)


if __name__ == '__main__':
    main()
