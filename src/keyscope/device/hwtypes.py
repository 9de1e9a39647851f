from __future__ import annotations

import enum

import msgspec

from .keyboard_consts import EXTENDED_LOOKUP_BIT, RawKeyFlags


class AdjustmentFlags(enum.IntFlag):
    # The make code was missing and had to be recovered from the virtual key.
    MAKE_CODE_MAPPED = 0b0000_0001
    VIRTUAL_KEY_ADJUSTED = 0b0000_0010
    # Look the key up in the 0x1xx rows of the scan code table.
    EXTENDED_LOOKUP = 0b1000_0000


class ScanCodeSequence(enum.Enum):
    NONE = enum.auto()
    E0 = enum.auto()
    E1 = enum.auto()


class RawKeyboard(msgspec.Struct, frozen=True):
    make_code: int
    flags: int
    virtual_key: int

    @property
    def is_key_down(self):
        return (self.flags & RawKeyFlags.BREAK) == 0


class NormalizedKeyEvent(msgspec.Struct, frozen=True):
    make_code: int
    flags: int
    virtual_key: int
    adjustments: AdjustmentFlags = AdjustmentFlags(0)

    @property
    def is_key_down(self):
        return (self.flags & RawKeyFlags.BREAK) == 0

    @property
    def lookup_code(self):
        return self.make_code | (EXTENDED_LOOKUP_BIT if AdjustmentFlags.EXTENDED_LOOKUP in self.adjustments else 0)

    @classmethod
    def from_raw(cls, raw: RawKeyboard, adjustments: AdjustmentFlags = AdjustmentFlags(0)):
        "Build an event from a raw record, truncating every field to a byte."
        return cls(
            make_code=raw.make_code & 0xFF,
            flags=raw.flags & 0xFF,
            virtual_key=raw.virtual_key & 0xFF,
            adjustments=AdjustmentFlags(adjustments & 0xFF),
        )
