# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import pytest

from keyscope.commontypes import TranslationError
from keyscope.device.hwtypes import AdjustmentFlags, NormalizedKeyEvent, RawKeyboard, ScanCodeSequence
from keyscope.device.keyboard_consts import RawKeyFlags, VirtualKey
from keyscope.device.normalizer import ScanCodeNormalizer, disambiguate_virtual_key
from keyscope.device.translate import us_layout_translator

VK_A = ord("A")


class FakeTranslator:
    def __init__(self, mapping=None, fail=False):
        self.mapping = mapping or {}
        self.fail = fail
        self.calls = []

    def __call__(self, virtual_key):
        self.calls.append(virtual_key)
        if self.fail:
            raise TranslationError(virtual_key)
        return self.mapping.get(virtual_key, 0)


@pytest.fixture
def normalizer():
    return ScanCodeNormalizer(FakeTranslator({VK_A: 0x1E}))


def test_plain_key(normalizer: ScanCodeNormalizer):
    event = normalizer.normalize(RawKeyboard(make_code=0x1E, flags=0, virtual_key=VK_A))
    assert event == NormalizedKeyEvent(make_code=0x1E, flags=0, virtual_key=VK_A, adjustments=AdjustmentFlags(0))
    assert event.is_key_down
    assert event.lookup_code == 0x01E


def test_key_release(normalizer: ScanCodeNormalizer):
    event = normalizer.normalize(RawKeyboard(make_code=0x1E, flags=RawKeyFlags.BREAK, virtual_key=VK_A))
    assert not event.is_key_down
    assert event.flags == RawKeyFlags.BREAK


def test_overrun_is_suppressed_without_touching_pending(normalizer: ScanCodeNormalizer):
    assert normalizer.normalize(RawKeyboard(make_code=0xFF, flags=0, virtual_key=0xFF)) is None
    assert normalizer.pending is ScanCodeSequence.NONE

    assert normalizer.normalize(RawKeyboard(make_code=0x1D, flags=RawKeyFlags.E1, virtual_key=VirtualKey.VK_PAUSE)) is None
    assert normalizer.pending is ScanCodeSequence.E1
    assert normalizer.normalize(RawKeyboard(make_code=0xFF, flags=0, virtual_key=0xFF)) is None
    assert normalizer.normalize(RawKeyboard(make_code=0xFF, flags=RawKeyFlags.E0, virtual_key=0xFF)) is None
    assert normalizer.pending is ScanCodeSequence.E1


def test_pause_break_sequence(normalizer: ScanCodeNormalizer):
    assert normalizer.normalize(RawKeyboard(make_code=0x1D, flags=RawKeyFlags.E1, virtual_key=VirtualKey.VK_PAUSE)) is None
    event = normalizer.normalize(RawKeyboard(make_code=0x45, flags=0, virtual_key=VirtualKey.VK_NUMLOCK))
    assert event.virtual_key == VirtualKey.VK_PAUSE
    assert AdjustmentFlags.VIRTUAL_KEY_ADJUSTED in event.adjustments
    assert AdjustmentFlags.EXTENDED_LOOKUP not in event.adjustments
    assert event.lookup_code == 0x045
    assert normalizer.pending is ScanCodeSequence.NONE


def test_numlock_without_prefix(normalizer: ScanCodeNormalizer):
    event = normalizer.normalize(RawKeyboard(make_code=0x45, flags=0, virtual_key=VirtualKey.VK_NUMLOCK))
    assert event.virtual_key == VirtualKey.VK_NUMLOCK
    assert event.adjustments == AdjustmentFlags.EXTENDED_LOOKUP
    assert event.lookup_code == 0x145


def test_pending_e1_is_consumed_by_any_complete_key(normalizer: ScanCodeNormalizer):
    normalizer.normalize(RawKeyboard(make_code=0x1D, flags=RawKeyFlags.E1, virtual_key=VirtualKey.VK_PAUSE))
    normalizer.normalize(RawKeyboard(make_code=0x1E, flags=0, virtual_key=VK_A))
    assert normalizer.pending is ScanCodeSequence.NONE
    event = normalizer.normalize(RawKeyboard(make_code=0x45, flags=0, virtual_key=VirtualKey.VK_NUMLOCK))
    assert event.virtual_key == VirtualKey.VK_NUMLOCK


def test_fake_left_shift_is_suppressed(normalizer: ScanCodeNormalizer):
    assert normalizer.normalize(RawKeyboard(make_code=0x2A, flags=RawKeyFlags.E0, virtual_key=VirtualKey.VK_SHIFT)) is None
    assert normalizer.pending is ScanCodeSequence.E0
    assert (
        normalizer.normalize(RawKeyboard(make_code=0x2A, flags=RawKeyFlags.E0 | RawKeyFlags.BREAK, virtual_key=VirtualKey.VK_SHIFT))
        is None
    )
    event = normalizer.normalize(RawKeyboard(make_code=0x48, flags=RawKeyFlags.E0, virtual_key=VirtualKey.VK_UP))
    assert event.virtual_key == VirtualKey.VK_UP
    assert event.adjustments == AdjustmentFlags.EXTENDED_LOOKUP
    assert event.lookup_code == 0x148
    assert normalizer.pending is ScanCodeSequence.NONE


@pytest.mark.parametrize(
    "make_code,expected",
    (
        (0x2A, VirtualKey.VK_LSHIFT),
        (0x36, VirtualKey.VK_RSHIFT),
    ),
)
def test_shift_disambiguation(normalizer: ScanCodeNormalizer, make_code, expected):
    event = normalizer.normalize(RawKeyboard(make_code=make_code, flags=0, virtual_key=VirtualKey.VK_SHIFT))
    assert event.virtual_key == expected
    assert event.adjustments == AdjustmentFlags.VIRTUAL_KEY_ADJUSTED


@pytest.mark.parametrize(
    "virtual_key,make_code,right_hand",
    (
        (VirtualKey.VK_CONTROL, 0x1D, VirtualKey.VK_RCONTROL),
        (VirtualKey.VK_MENU, 0x38, VirtualKey.VK_RMENU),
    ),
)
def test_extended_control_and_alt(normalizer: ScanCodeNormalizer, virtual_key, make_code, right_hand):
    event = normalizer.normalize(RawKeyboard(make_code=make_code, flags=RawKeyFlags.E0, virtual_key=virtual_key))
    assert event.virtual_key == right_hand
    assert event.adjustments == AdjustmentFlags.VIRTUAL_KEY_ADJUSTED | AdjustmentFlags.EXTENDED_LOOKUP

    event = normalizer.normalize(RawKeyboard(make_code=make_code, flags=0, virtual_key=virtual_key))
    assert event.virtual_key == virtual_key
    assert event.adjustments == AdjustmentFlags(0)


def test_disambiguation_table_leaves_other_keys_alone():
    assert disambiguate_virtual_key(VK_A, 0x1E, True) is None
    assert disambiguate_virtual_key(VirtualKey.VK_SHIFT, 0x1E, False) is None
    assert disambiguate_virtual_key(VirtualKey.VK_LSHIFT, 0x2A, False) is None
    assert disambiguate_virtual_key(VirtualKey.VK_CONTROL, 0x1D, False) is None


def test_missing_make_code_is_recovered():
    translator = FakeTranslator({VK_A: 0x1E})
    normalizer = ScanCodeNormalizer(translator)
    event = normalizer.normalize(RawKeyboard(make_code=0, flags=0, virtual_key=VK_A))
    assert translator.calls == [VK_A]
    assert event.make_code == 0x1E
    assert event.adjustments == AdjustmentFlags.MAKE_CODE_MAPPED


def test_recovered_make_code_is_truncated():
    normalizer = ScanCodeNormalizer(FakeTranslator({VirtualKey.VK_RCONTROL: 0xE01D}))
    event = normalizer.normalize(RawKeyboard(make_code=0, flags=RawKeyFlags.E0, virtual_key=VirtualKey.VK_RCONTROL))
    assert event.make_code == 0x1D
    assert event.adjustments == AdjustmentFlags.MAKE_CODE_MAPPED | AdjustmentFlags.EXTENDED_LOOKUP


def test_unrecoverable_make_code_is_dropped():
    normalizer = ScanCodeNormalizer(FakeTranslator())
    assert normalizer.normalize(RawKeyboard(make_code=0, flags=0, virtual_key=0xE8)) is None


def test_translation_failure_counts_as_zero():
    normalizer = ScanCodeNormalizer(FakeTranslator({VK_A: 0x1E}, fail=True))
    normalizer.normalize(RawKeyboard(make_code=0x1D, flags=RawKeyFlags.E1, virtual_key=VirtualKey.VK_PAUSE))
    assert normalizer.normalize(RawKeyboard(make_code=0, flags=0, virtual_key=VK_A)) is None
    # the pending sequence was consumed before the record was dropped
    assert normalizer.pending is ScanCodeSequence.NONE


def test_fields_are_truncated_to_bytes(normalizer: ScanCodeNormalizer):
    event = normalizer.normalize(RawKeyboard(make_code=0x11E, flags=0x0100 | RawKeyFlags.BREAK, virtual_key=0x0141))
    assert event == NormalizedKeyEvent(make_code=0x1E, flags=RawKeyFlags.BREAK, virtual_key=VK_A)
    assert not event.is_key_down


def test_passthrough_keeps_fragments(normalizer: ScanCodeNormalizer):
    raw = RawKeyboard(make_code=0x1D, flags=RawKeyFlags.E1, virtual_key=VirtualKey.VK_PAUSE)
    event = normalizer.passthrough(raw)
    assert event == NormalizedKeyEvent(make_code=0x1D, flags=RawKeyFlags.E1, virtual_key=VirtualKey.VK_PAUSE)
    assert normalizer.pending is ScanCodeSequence.NONE

    event = normalizer.passthrough(RawKeyboard(make_code=0x1D, flags=RawKeyFlags.E0, virtual_key=VirtualKey.VK_CONTROL))
    assert event.virtual_key == VirtualKey.VK_CONTROL
    assert event.adjustments == AdjustmentFlags.EXTENDED_LOOKUP


def test_reset_discards_pending(normalizer: ScanCodeNormalizer):
    normalizer.normalize(RawKeyboard(make_code=0x1D, flags=RawKeyFlags.E1, virtual_key=VirtualKey.VK_PAUSE))
    normalizer.reset()
    event = normalizer.normalize(RawKeyboard(make_code=0x45, flags=0, virtual_key=VirtualKey.VK_NUMLOCK))
    assert event.adjustments == AdjustmentFlags.EXTENDED_LOOKUP


def test_normalizers_are_independent():
    first = ScanCodeNormalizer(FakeTranslator())
    second = ScanCodeNormalizer(FakeTranslator())
    first.normalize(RawKeyboard(make_code=0x1D, flags=RawKeyFlags.E1, virtual_key=VirtualKey.VK_PAUSE))
    assert first.pending is ScanCodeSequence.E1
    assert second.pending is ScanCodeSequence.NONE


@pytest.mark.parametrize(
    "virtual_key,scan_code",
    (
        (VK_A, 0x1E),
        (ord("1"), 0x02),
        (ord("M"), 0x32),
        (VirtualKey.VK_NUMLOCK, 0xE045),
        (VirtualKey.VK_RCONTROL, 0xE01D),
        (0xE8, 0),
    ),
)
def test_us_layout_translator(virtual_key, scan_code):
    assert us_layout_translator(virtual_key) == scan_code
