from __future__ import annotations

import enum

from .device.hwtypes import AdjustmentFlags, NormalizedKeyEvent
from .keytables import KeyTables


@enum.unique
class Column(enum.IntEnum):
    KEY_NAME = 0
    VK_NAME = 1
    VIRTUAL_KEY = 2
    MAKE_CODE = 3
    FLAGS = 4
    KEY_CODE_NAME = 5
    KEY_CODE = 6


@enum.unique
class DisplayFormat(enum.Enum):
    DEFAULT = "default"
    DEC = "dec"
    HEX = "hex"
    BIN = "bin"
    SML = "sml"
    RAY = "ray"
    GLFW = "glfw"


NOT_APPLICABLE = "N/A"

DEFAULT_COLUMN_FORMATS = {
    Column.KEY_NAME: DisplayFormat.DEFAULT,
    Column.VK_NAME: DisplayFormat.DEFAULT,
    Column.VIRTUAL_KEY: DisplayFormat.HEX,
    Column.MAKE_CODE: DisplayFormat.HEX,
    Column.FLAGS: DisplayFormat.BIN,
    Column.KEY_CODE_NAME: DisplayFormat.GLFW,
    Column.KEY_CODE: DisplayFormat.DEC,
}


def format_byte(value: int, display_format: DisplayFormat) -> str:
    match display_format:
        case DisplayFormat.HEX:
            return f"{value:#04x}"
        case DisplayFormat.BIN:
            return f"{value:#010b}"
    return f"{value}"


def format_key_code(key_code: int, display_format: DisplayFormat) -> str:
    # Non-positive ids mean the key has no canonical code.
    if display_format is DisplayFormat.HEX:
        return f"{key_code:#05x}" if key_code > 0 else NOT_APPLICABLE
    return f"{key_code}"


def format_cell(event: NormalizedKeyEvent, column: Column, display_format: DisplayFormat, tables: KeyTables) -> str:
    match column:
        case Column.KEY_NAME:
            return tables.lookup_vkey(event).key_name
        case Column.VK_NAME:
            return tables.lookup_vkey(event).vk_name
        case Column.VIRTUAL_KEY:
            return format_byte(event.virtual_key, display_format)
        case Column.MAKE_CODE:
            return format_byte(event.make_code, display_format)
        case Column.FLAGS:
            return format_byte(event.flags, display_format)
        case Column.KEY_CODE_NAME:
            key_codes = tables.lookup_scan_code(event)
            match display_format:
                case DisplayFormat.SML:
                    return key_codes.sfml
                case DisplayFormat.RAY:
                    return key_codes.raylib
            return key_codes.glfw
        case Column.KEY_CODE:
            return format_key_code(tables.lookup_scan_code(event).key_code, display_format)
    raise ValueError(f"Unknown column {column!r}")


def highlighted_columns(event: NormalizedKeyEvent) -> frozenset[Column]:
    "Columns showing values that were synthesized rather than reported by the keyboard."
    if AdjustmentFlags.VIRTUAL_KEY_ADJUSTED in event.adjustments:
        return frozenset({Column.VK_NAME, Column.VIRTUAL_KEY})
    if AdjustmentFlags.MAKE_CODE_MAPPED in event.adjustments:
        return frozenset({Column.MAKE_CODE})
    return frozenset()
