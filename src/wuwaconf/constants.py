"""Wuthering Waves LocalStorage.db constants.

LocalStorage.db lives in `Wuthering Waves Game/Client/Saved/LocalStorage/`.
It is a SQLite database with a single table:

  LocalStorage(Key TEXT, Value TEXT)   one row per client setting

Values are persisted as text; numeric settings are stored as their decimal
string form.
"""

import json

# ============================================================================
# Table layout
# ============================================================================

TABLE_NAME = 'LocalStorage'
KEY_COLUMN = 'key'
VALUE_COLUMN = 'value'

ORIGINAL_FILENAME = 'LocalStorage_Original.db'
MODIFIED_FILENAME = 'LocalStorage_Modified.db'

# SQLite header: bytes 18/19 are the file format write/read versions
# (1 = rollback journal, 2 = WAL).
SQLITE_HEADER_MAGIC = b'SQLite format 3\x00'
SQLITE_HEADER_SIZE = 100
SQLITE_WRITE_VERSION_OFFSET = 18
SQLITE_READ_VERSION_OFFSET = 19
SQLITE_VERSION_LEGACY = 1
SQLITE_VERSION_WAL = 2

# ============================================================================
# Known settings
# ============================================================================

KEY_FRAME_RATE = 'CustomFrameRate'
KEY_RAY_TRACING = 'RayTracing'
KEY_RT_REFLECTION = 'RayTracedReflection'
KEY_RT_GI = 'RayTracedGI'
KEY_XESS_ENABLE = 'XessEnable'
KEY_XESS_QUALITY = 'XessQuality'

KEY_MENU_DATA = 'MenuData'
KEY_PLAY_MENU_INFO = 'PlayMenuInfo'

# Display order for view/preview tables
KNOWN_KEYS = (
    KEY_FRAME_RATE,
    KEY_RAY_TRACING,
    KEY_RT_REFLECTION,
    KEY_RT_GI,
    KEY_XESS_ENABLE,
    KEY_XESS_QUALITY,
)

FRAME_RATE_MIN = 30
FRAME_RATE_MAX = 120
FRAME_RATE_UNLOCKED = 120

RAY_TRACING_OFF = 0
RAY_TRACING_LEVELS = {
    0: 'Off',
    1: 'Low',
    2: 'Medium',
    3: 'High',
}
RAY_TRACING_CODES = {name.lower(): code for code, name in RAY_TRACING_LEVELS.items()}

BOOL_LABELS = {0: 'Off', 1: 'On'}
BOOL_CODES = {
    '0': 0, 'off': 0, 'false': 0, 'no': 0, 'disable': 0, 'disabled': 0,
    '1': 1, 'on': 1, 'true': 1, 'yes': 1, 'enable': 1, 'enabled': 1,
}

XESS_QUALITY_LEVELS = {0: '0', 1: '1'}

# ============================================================================
# 120 FPS enforcement
# ============================================================================

FRAME_RATE_TRIGGER = 'prevent_custom_frame_rate_update'

# Trigger DDL cannot take bound parameters; every name here is a fixed
# identifier or literal from this module.
FRAME_RATE_TRIGGER_SQL = (
    f'CREATE TRIGGER {FRAME_RATE_TRIGGER} '
    f'AFTER UPDATE OF Value ON {TABLE_NAME} '
    f"WHEN NEW.Key = '{KEY_FRAME_RATE}' "
    f'BEGIN '
    f"UPDATE {TABLE_NAME} SET Value = '{FRAME_RATE_UNLOCKED}' "
    f"WHERE Key = '{KEY_FRAME_RATE}'; "
    f'END'
)

# Graphics menu option ids -> values, as the client serializes its settings
# menu state. Option 11 is the frame rate slot; index 3 selects 120 FPS.
MENU_FRAME_RATE_OPTION = 11
MENU_FRAME_RATE_120_INDEX = 3
MENU_OPTIONS = (
    (1, 100), (2, 100), (3, 100), (4, 100),
    (5, 0), (6, 0), (7, -0.4658685302734375),
    (10, 3), (MENU_FRAME_RATE_OPTION, MENU_FRAME_RATE_120_INDEX),
    (20, 0), (21, 0), (22, 0), (23, 0), (24, 0), (25, 0),
    (51, 1), (52, 1), (53, 0), (54, 3), (55, 1), (56, 2),
    (57, 1), (58, 1), (59, 1), (61, 0), (62, 0), (63, 1), (64, 1),
    (69, 100), (70, 100), (79, 1), (82, 1), (83, 1),
    (89, 50), (90, 50), (91, 50), (92, 50), (93, 1),
    (100, 30), (102, 1), (104, 50), (106, 0.3),
    (121, 1), (122, 1), (132, 1),
)

MENU_DATA_PAYLOAD = json.dumps(
    {'___MetaType___': '___Map___',
     'Content': [[opt, val] for opt, val in MENU_OPTIONS]},
    separators=(',', ':'),
)
PLAY_MENU_INFO_PAYLOAD = json.dumps(
    {str(opt): val for opt, val in MENU_OPTIONS},
    separators=(',', ':'),
)

SYNTHETIC_RECORDS = (
    (KEY_MENU_DATA, MENU_DATA_PAYLOAD),
    (KEY_PLAY_MENU_INFO, PLAY_MENU_INFO_PAYLOAD),
)
