# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import typing

from ..commontypes import TranslationError
from .hwtypes import AdjustmentFlags, NormalizedKeyEvent, RawKeyboard, ScanCodeSequence
from .keyboard_consts import (
    FAKE_LEFT_SHIFT_MAKE_CODE,
    KEYBOARD_OVERRUN_MAKE_CODE,
    PAUSE_OR_NUMLOCK_MAKE_CODE,
    RIGHT_SHIFT_MAKE_CODE,
    RawKeyFlags,
    VirtualKey,
)
from .translate import Translator, platform_translator

logger = logging.getLogger(__name__)


def initial_adjustments(raw: RawKeyboard) -> AdjustmentFlags:
    if raw.flags & RawKeyFlags.E0:
        return AdjustmentFlags.EXTENDED_LOOKUP
    return AdjustmentFlags(0)


def disambiguate_virtual_key(virtual_key: int, make_code: int, is_e0: bool) -> typing.Optional[VirtualKey]:
    """Return the handed virtual key for a generic Shift/Control/Alt, or None if it stays as reported.

    Without the E0 prefix, Control and Alt are the left-hand keys and are left alone.
    """
    match virtual_key:
        case VirtualKey.VK_SHIFT if make_code == FAKE_LEFT_SHIFT_MAKE_CODE:
            return VirtualKey.VK_LSHIFT
        case VirtualKey.VK_SHIFT if make_code == RIGHT_SHIFT_MAKE_CODE:
            return VirtualKey.VK_RSHIFT
        case VirtualKey.VK_CONTROL if is_e0:
            return VirtualKey.VK_RCONTROL
        case VirtualKey.VK_MENU if is_e0:
            return VirtualKey.VK_RMENU
    return None


class ScanCodeNormalizer:
    """Turns raw keyboard records into normalized key events.

    Records must be fed in the order they arrived; an E1 or fake-shift E0 fragment is
    remembered until the next complete record consumes it. One instance per input stream,
    and callers sharing an instance across threads must serialize calls themselves.
    """

    _pending: ScanCodeSequence

    def __init__(self, translator: typing.Optional[Translator] = None):
        self.translator = translator if translator is not None else platform_translator()
        self._pending = ScanCodeSequence.NONE

    @property
    def pending(self):
        return self._pending

    def reset(self):
        self._pending = ScanCodeSequence.NONE

    def _translate(self, virtual_key: int) -> int:
        try:
            return self.translator(virtual_key)
        except TranslationError:
            logger.debug("Translation failed for virtual key %#04x", virtual_key, exc_info=True)
            return 0

    def passthrough(self, raw: RawKeyboard) -> NormalizedKeyEvent:
        return NormalizedKeyEvent.from_raw(raw, initial_adjustments(raw))

    def normalize(self, raw: RawKeyboard) -> typing.Optional[NormalizedKeyEvent]:
        if raw.make_code == KEYBOARD_OVERRUN_MAKE_CODE:
            logger.debug("Dropping keyboard overrun %r", raw)
            return None

        if raw.flags & RawKeyFlags.E1:
            self._pending = ScanCodeSequence.E1
            return None

        is_e0 = bool(raw.flags & RawKeyFlags.E0)
        if is_e0 and raw.make_code == FAKE_LEFT_SHIFT_MAKE_CODE:
            self._pending = ScanCodeSequence.E0
            return None

        consumed, self._pending = self._pending, ScanCodeSequence.NONE

        make_code = raw.make_code
        virtual_key = raw.virtual_key
        adjustments = initial_adjustments(raw)

        if make_code == 0:
            # flags are still reliable even when the make code is missing
            make_code = self._translate(virtual_key)
            if make_code == 0:
                logger.debug("Dropping %r: no make code for virtual key", raw)
                return None
            adjustments |= AdjustmentFlags.MAKE_CODE_MAPPED

        if make_code == PAUSE_OR_NUMLOCK_MAKE_CODE:
            if consumed is ScanCodeSequence.E1:
                virtual_key = VirtualKey.VK_PAUSE
                adjustments |= AdjustmentFlags.VIRTUAL_KEY_ADJUSTED
            else:
                adjustments |= AdjustmentFlags.EXTENDED_LOOKUP

        handed = disambiguate_virtual_key(virtual_key, make_code, is_e0)
        if handed is not None:
            virtual_key = handed
            adjustments |= AdjustmentFlags.VIRTUAL_KEY_ADJUSTED

        return NormalizedKeyEvent.from_raw(
            RawKeyboard(make_code=make_code, flags=raw.flags, virtual_key=virtual_key),
            adjustments,
        )
