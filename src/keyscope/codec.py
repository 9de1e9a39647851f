from .device.hwtypes import AdjustmentFlags, NormalizedKeyEvent

# Byte offsets within the packed word, lowest first.
MAKE_CODE_SHIFT = 0
FLAGS_SHIFT = 8
VIRTUAL_KEY_SHIFT = 16
ADJUSTMENTS_SHIFT = 24


def pack(event: NormalizedKeyEvent) -> int:
    return (
        (event.make_code & 0xFF) << MAKE_CODE_SHIFT
        | (event.flags & 0xFF) << FLAGS_SHIFT
        | (event.virtual_key & 0xFF) << VIRTUAL_KEY_SHIFT
        | (int(event.adjustments) & 0xFF) << ADJUSTMENTS_SHIFT
    )


def unpack(word: int) -> NormalizedKeyEvent:
    """Rebuild an event from a word produced by pack().

    Any 32-bit value is accepted; bits above the fourth byte are ignored. Whether the key
    is down is not stored, it is read back from the flags byte.
    """
    return NormalizedKeyEvent(
        make_code=(word >> MAKE_CODE_SHIFT) & 0xFF,
        flags=(word >> FLAGS_SHIFT) & 0xFF,
        virtual_key=(word >> VIRTUAL_KEY_SHIFT) & 0xFF,
        adjustments=AdjustmentFlags((word >> ADJUSTMENTS_SHIFT) & 0xFF),
    )
