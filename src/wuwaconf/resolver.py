"""Setting dependency rules.

Changing RayTracing cascades to the settings that depend on it:

  RayTracing -> 0     RayTracedReflection = 0, RayTracedGI = 0,
                      XessEnable / XessQuality back to their load-time values
  RayTracing -> 1..3  XessEnable = 0, XessQuality = 0 (XeSS and RT exclude
                      each other)

The restore uses each entry's original value, not whatever it held before
the toggle, so toggling RT on and off returns XeSS to the file's baseline.
Every other key changes alone.
"""

from .constants import (
    KEY_RAY_TRACING, RAY_TRACING_OFF,
    KEY_RT_REFLECTION, KEY_RT_GI, KEY_XESS_ENABLE, KEY_XESS_QUALITY,
)
from .entries import find_entry

XESS_KEYS = (KEY_XESS_ENABLE, KEY_XESS_QUALITY)
RT_FEATURE_KEYS = (KEY_RT_REFLECTION, KEY_RT_GI)


def resolve_change(key: str, value, entries) -> dict:
    """Return the full set of changes implied by setting `key` to `value`.

    Pure: `entries` is only read, for original values to restore.
    """
    changes = {key: value}
    if key != KEY_RAY_TRACING:
        return changes

    if value == RAY_TRACING_OFF:
        for dep in RT_FEATURE_KEYS:
            changes[dep] = 0
        for dep in XESS_KEYS:
            entry = find_entry(entries, dep)
            if entry is not None:
                changes[dep] = entry.original_value
    else:
        for dep in XESS_KEYS:
            changes[dep] = 0
    return changes
