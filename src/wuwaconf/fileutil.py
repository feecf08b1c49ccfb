"""File helpers shared by the CLI and TUI."""

import os
from pathlib import Path


def backup_file(path: str, data: bytes) -> str:
    """Write `data` (the file as it was loaded) to `path.bak`.

    Returns the backup path.
    """
    bak_path = path + '.bak'
    write_bytes(bak_path, data)
    return bak_path


def sibling_path(path: str, name: str) -> str:
    """Path of `name` in the same directory as `path`."""
    return os.path.join(os.path.dirname(os.path.abspath(path)), name)


def read_bytes(path: str) -> bytes:
    with open(path, 'rb') as f:
        return f.read()


def write_bytes(path: str, data: bytes) -> None:
    parent = Path(path).parent
    parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'wb') as f:
        f.write(data)
