"""wuwaconf: Wuthering Waves LocalStorage.db settings editor."""

__version__ = '1.0.0'
