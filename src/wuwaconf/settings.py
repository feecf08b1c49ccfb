"""Editable graphics settings: input parsing, limits, labels, lock state."""

import math

from .constants import (
    KEY_FRAME_RATE, KEY_RAY_TRACING, KEY_RT_REFLECTION, KEY_RT_GI,
    KEY_XESS_ENABLE, KEY_XESS_QUALITY,
    FRAME_RATE_MIN, FRAME_RATE_MAX, RAY_TRACING_OFF,
    RAY_TRACING_LEVELS, RAY_TRACING_CODES, BOOL_LABELS, BOOL_CODES,
    XESS_QUALITY_LEVELS,
)
from .entries import current_value

KIND_RANGE = 'range'
KIND_ENUM = 'enum'
KIND_BOOL = 'bool'


class Setting:
    """Description of one editable setting."""

    def __init__(self, key: str, label: str, kind: str,
                 minimum: int = 0, maximum: int = 1,
                 options: dict | None = None, hint: str = ''):
        self.key = key
        self.label = label
        self.kind = kind
        self.minimum = minimum
        self.maximum = maximum
        self.options = options or {}
        self.hint = hint

    def __repr__(self) -> str:
        return f'Setting({self.key!r}, {self.kind})'


SETTINGS = {
    KEY_FRAME_RATE: Setting(
        KEY_FRAME_RATE, 'Custom Frame Rate', KIND_RANGE,
        FRAME_RATE_MIN, FRAME_RATE_MAX,
        hint=f'Any value between {FRAME_RATE_MIN} and {FRAME_RATE_MAX}.'),
    KEY_RAY_TRACING: Setting(
        KEY_RAY_TRACING, 'Ray Tracing', KIND_ENUM, 0, 3, RAY_TRACING_LEVELS,
        hint='If not off, XessEnable and XessQuality are set to 0.'),
    KEY_RT_REFLECTION: Setting(
        KEY_RT_REFLECTION, 'Ray Traced Reflections', KIND_BOOL, options=BOOL_LABELS,
        hint='Only available while Ray Tracing is on.'),
    KEY_RT_GI: Setting(
        KEY_RT_GI, 'Ray Traced Global Illumination', KIND_BOOL, options=BOOL_LABELS,
        hint='Only available while Ray Tracing is on.'),
    KEY_XESS_ENABLE: Setting(
        KEY_XESS_ENABLE, 'XeSS Enable', KIND_BOOL, options=BOOL_LABELS,
        hint='Unavailable while Ray Tracing is on.'),
    KEY_XESS_QUALITY: Setting(
        KEY_XESS_QUALITY, 'XeSS Quality', KIND_ENUM, 0, 1, XESS_QUALITY_LEVELS,
        hint='Unavailable while Ray Tracing is on.'),
}


def clamp_frame_rate(value: int) -> int:
    return max(FRAME_RATE_MIN, min(FRAME_RATE_MAX, value))


def parse_input(key: str, text) -> int:
    """Convert user input for a known setting into its stored int value.

    Accepts digits, enum names (`high`) and boolean words (`on`, `false`).
    Frame rates are clamped into range; other out-of-range input raises
    ValueError.
    """
    setting = SETTINGS.get(key)
    if setting is None:
        raise ValueError(f'Unknown setting: {key}')
    if isinstance(text, bool):
        text = int(text)
    word = str(text).strip().lower()

    if setting.kind == KIND_BOOL:
        if word not in BOOL_CODES:
            raise ValueError(f'{setting.label}: expected on/off, got {text!r}')
        return BOOL_CODES[word]

    if setting.kind == KIND_ENUM and key == KEY_RAY_TRACING and word in RAY_TRACING_CODES:
        return RAY_TRACING_CODES[word]

    try:
        value = int(word)
    except ValueError:
        raise ValueError(f'{setting.label}: not a number: {text!r}') from None

    if setting.kind == KIND_RANGE:
        return clamp_frame_rate(value)
    if value not in setting.options:
        valid = ', '.join(f'{code}={name}' for code, name in setting.options.items())
        raise ValueError(f'{setting.label}: {value} out of range ({valid})')
    return value


def describe(key: str, value) -> str:
    """Human-readable label for a setting value."""
    setting = SETTINGS.get(key)
    if setting is None or setting.kind == KIND_RANGE:
        return str(value)
    return setting.options.get(value, str(value))


def is_locked(key: str, entries) -> bool:
    """True when the current RayTracing level makes `key` uneditable."""
    rt = current_value(entries, KEY_RAY_TRACING, RAY_TRACING_OFF)
    rt_on = rt != RAY_TRACING_OFF
    if key in (KEY_XESS_ENABLE, KEY_XESS_QUALITY):
        return rt_on
    if key in (KEY_RT_REFLECTION, KEY_RT_GI):
        return not rt_on
    return False


def lock_reason(key: str) -> str:
    if key in (KEY_XESS_ENABLE, KEY_XESS_QUALITY):
        return f'{SETTINGS[key].label} cannot be changed while Ray Tracing is on'
    return f'{SETTINGS[key].label} requires Ray Tracing to be on'


def step_value(key: str, value, delta: int) -> int:
    """Next value when stepping a setting by `delta` from the keyboard.

    Frame rate clamps at its limits; enums and booleans wrap around.
    Whole-number floats (`60.0`) step like ints, and a fractional frame
    rate steps from its integer part. Anything else non-numeric restarts
    from the setting's minimum.
    """
    setting = SETTINGS[key]
    if (isinstance(value, float) and math.isfinite(value)
            and (value.is_integer() or setting.kind == KIND_RANGE)):
        value = int(value)
    if not isinstance(value, int) or isinstance(value, bool):
        return setting.minimum
    if setting.kind == KIND_RANGE:
        return clamp_frame_rate(value + delta)
    codes = sorted(setting.options)
    if value not in codes:
        return codes[0]
    return codes[(codes.index(value) + delta) % len(codes)]
