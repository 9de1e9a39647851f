from __future__ import annotations

import functools
import logging
import sys
import typing

from ..commontypes import TranslationError
from .keyboard_consts import VirtualKey

logger = logging.getLogger(__name__)

# Returns the scan code for a virtual key, with 0xE0 or 0xE1 in the high byte for
# extended keys; raises TranslationError if the platform call fails.
Translator = typing.Callable[[int], int]

MAPVK_VK_TO_VSC_EX = 4

WIN32_CDEF = """
unsigned int MapVirtualKeyW(unsigned int uCode, unsigned int uMapType);
"""

# What MapVirtualKeyW(vk, MAPVK_VK_TO_VSC_EX) reports for a US layout. Letters and digits
# are filled in below.
US_VK_TO_SCAN_CODE: dict[int, int] = {
    VirtualKey.VK_BACK: 0x0E,
    VirtualKey.VK_TAB: 0x0F,
    VirtualKey.VK_RETURN: 0x1C,
    VirtualKey.VK_SHIFT: 0x2A,
    VirtualKey.VK_CONTROL: 0x1D,
    VirtualKey.VK_MENU: 0x38,
    VirtualKey.VK_PAUSE: 0xE11D,
    VirtualKey.VK_CAPITAL: 0x3A,
    VirtualKey.VK_ESCAPE: 0x01,
    VirtualKey.VK_SPACE: 0x39,
    VirtualKey.VK_PRIOR: 0xE049,
    VirtualKey.VK_NEXT: 0xE051,
    VirtualKey.VK_END: 0xE04F,
    VirtualKey.VK_HOME: 0xE047,
    VirtualKey.VK_LEFT: 0xE04B,
    VirtualKey.VK_UP: 0xE048,
    VirtualKey.VK_RIGHT: 0xE04D,
    VirtualKey.VK_DOWN: 0xE050,
    VirtualKey.VK_SNAPSHOT: 0xE037,
    VirtualKey.VK_INSERT: 0xE052,
    VirtualKey.VK_DELETE: 0xE053,
    VirtualKey.VK_LWIN: 0xE05B,
    VirtualKey.VK_RWIN: 0xE05C,
    VirtualKey.VK_APPS: 0xE05D,
    VirtualKey.VK_NUMPAD0: 0x52,
    VirtualKey.VK_NUMPAD1: 0x4F,
    VirtualKey.VK_NUMPAD2: 0x50,
    VirtualKey.VK_NUMPAD3: 0x51,
    VirtualKey.VK_NUMPAD4: 0x4B,
    VirtualKey.VK_NUMPAD5: 0x4C,
    VirtualKey.VK_NUMPAD6: 0x4D,
    VirtualKey.VK_NUMPAD7: 0x47,
    VirtualKey.VK_NUMPAD8: 0x48,
    VirtualKey.VK_NUMPAD9: 0x49,
    VirtualKey.VK_MULTIPLY: 0x37,
    VirtualKey.VK_ADD: 0x4E,
    VirtualKey.VK_SUBTRACT: 0x4A,
    VirtualKey.VK_DECIMAL: 0x53,
    VirtualKey.VK_DIVIDE: 0xE035,
    VirtualKey.VK_F1: 0x3B,
    VirtualKey.VK_F2: 0x3C,
    VirtualKey.VK_F3: 0x3D,
    VirtualKey.VK_F4: 0x3E,
    VirtualKey.VK_F5: 0x3F,
    VirtualKey.VK_F6: 0x40,
    VirtualKey.VK_F7: 0x41,
    VirtualKey.VK_F8: 0x42,
    VirtualKey.VK_F9: 0x43,
    VirtualKey.VK_F10: 0x44,
    VirtualKey.VK_F11: 0x57,
    VirtualKey.VK_F12: 0x58,
    VirtualKey.VK_NUMLOCK: 0xE045,
    VirtualKey.VK_SCROLL: 0x46,
    VirtualKey.VK_LSHIFT: 0x2A,
    VirtualKey.VK_RSHIFT: 0x36,
    VirtualKey.VK_LCONTROL: 0x1D,
    VirtualKey.VK_RCONTROL: 0xE01D,
    VirtualKey.VK_LMENU: 0x38,
    VirtualKey.VK_RMENU: 0xE038,
    VirtualKey.VK_OEM_1: 0x27,
    VirtualKey.VK_OEM_PLUS: 0x0D,
    VirtualKey.VK_OEM_COMMA: 0x33,
    VirtualKey.VK_OEM_MINUS: 0x0C,
    VirtualKey.VK_OEM_PERIOD: 0x34,
    VirtualKey.VK_OEM_2: 0x35,
    VirtualKey.VK_OEM_3: 0x29,
    VirtualKey.VK_OEM_4: 0x1A,
    VirtualKey.VK_OEM_5: 0x2B,
    VirtualKey.VK_OEM_6: 0x1B,
    VirtualKey.VK_OEM_7: 0x28,
    VirtualKey.VK_OEM_102: 0x56,
}
US_VK_TO_SCAN_CODE.update(zip(b"1234567890", range(0x02, 0x0C)))
US_VK_TO_SCAN_CODE.update(zip(b"QWERTYUIOP", range(0x10, 0x1A)))
US_VK_TO_SCAN_CODE.update(zip(b"ASDFGHJKL", range(0x1E, 0x27)))
US_VK_TO_SCAN_CODE.update(zip(b"ZXCVBNM", range(0x2C, 0x33)))


def us_layout_translator(virtual_key: int) -> int:
    return US_VK_TO_SCAN_CODE.get(virtual_key, 0)


class Win32Translator:
    def __init__(self):
        from cffi import FFI

        self.ffi = FFI()
        self.ffi.cdef(WIN32_CDEF)
        self.user32 = self.ffi.dlopen("user32.dll")

    def __call__(self, virtual_key: int) -> int:
        try:
            result = self.user32.MapVirtualKeyW(virtual_key, MAPVK_VK_TO_VSC_EX)
        except OSError as exc:
            raise TranslationError(virtual_key) from exc
        return result & 0xFFFF


@functools.cache
def platform_translator() -> Translator:
    if sys.platform == "win32":
        try:
            return Win32Translator()
        except OSError:
            logger.warning("Could not load user32.dll; falling back to the US layout table", exc_info=True)
    return us_layout_translator
