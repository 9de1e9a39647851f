# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections.abc
import functools
import importlib.resources
import logging
import pathlib
import re
import types
import typing

import msgspec

from .device.hwtypes import NormalizedKeyEvent

logger = logging.getLogger(__name__)

SCAN_CODE_FALLBACK = 0x000
VIRTUAL_KEY_FALLBACK = 0xFF

DECIMAL_PREFIX = re.compile(r"\s*([+-]?)(\d*)")
HEX_PREFIX = re.compile(r"\s*([+-]?)(?:0[xX](?=[0-9A-Fa-f]))?([0-9A-Fa-f]*)")


class KeyCodes(msgspec.Struct, frozen=True):
    key_code: int
    sfml: str
    raylib: str
    glfw: str


class VirtualKeyNames(msgspec.Struct, frozen=True):
    vk_name: str
    key_name: str


EMPTY_KEY_CODES = KeyCodes(key_code=0, sfml="", raylib="", glfw="")
EMPTY_VIRTUAL_KEY_NAMES = VirtualKeyNames(vk_name="", key_name="")


def parse_integer(text: str, base: int) -> tuple[int, bool]:
    """Parse the leading number in text the way strtol does.

    Returns the value (0 if there are no digits at all) and whether the whole field was
    consumed.
    """
    matcher = HEX_PREFIX if base == 16 else DECIMAL_PREFIX
    m = matcher.match(text)
    sign, digits = m.group(1), m.group(2)
    if not digits:
        return 0, False
    value = int(digits, base)
    if sign == "-":
        value = -value
    return value, m.end() == len(text)


def split_lines(text: str) -> collections.abc.Iterator[tuple[int, str]]:
    for lineno, line in enumerate(text.split("\n"), start=1):
        line = line.rstrip()
        if line:
            yield lineno, line


def split_once(text: str, separator: str) -> tuple[str, str]:
    head, _, tail = text.partition(separator)
    return head, tail


V = typing.TypeVar("V")


def store(table: dict[int, V], key: int, key_ok: bool, entry: V):
    # Later lines replace earlier ones, except that a key which did not parse cleanly
    # never replaces an existing entry.
    key &= 0xFFFF
    if key_ok or key not in table:
        table[key] = entry


def load_scan_code_table(text: str) -> typing.Mapping[int, KeyCodes]:
    table: dict[int, KeyCodes] = {}
    for lineno, line in split_lines(text):
        scan_code_text, rest = split_once(line, "=")
        key_code_text, rest = split_once(rest, ",")
        sfml, rest = split_once(rest, ",")
        raylib, glfw = split_once(rest, ",")
        scan_code, scan_code_ok = parse_integer(scan_code_text, 16)
        key_code, key_code_ok = parse_integer(key_code_text, 10)
        if not (scan_code_ok and key_code_ok):
            logger.warning("Malformed scan code mapping on line %d: %r", lineno, line)
        store(table, scan_code, scan_code_ok, KeyCodes(key_code=key_code, sfml=sfml, raylib=raylib, glfw=glfw))
    return types.MappingProxyType(table)


def load_vkey_table(text: str) -> typing.Mapping[int, VirtualKeyNames]:
    table: dict[int, VirtualKeyNames] = {}
    for lineno, line in split_lines(text):
        vkey_text, rest = split_once(line, "=")
        vk_name, key_name = split_once(rest, ",")
        vkey, vkey_ok = parse_integer(vkey_text, 16)
        if not vkey_ok:
            logger.warning("Malformed virtual key mapping on line %d: %r", lineno, line)
        store(table, vkey, vkey_ok, VirtualKeyNames(vk_name=vk_name, key_name=key_name))
    return types.MappingProxyType(table)


class KeyTables:
    """Read-only scan code and virtual key tables.

    Built once and safe to share between threads.
    """

    scan_codes: typing.Mapping[int, KeyCodes]
    virtual_keys: typing.Mapping[int, VirtualKeyNames]

    def __init__(self, scan_codes: typing.Mapping[int, KeyCodes], virtual_keys: typing.Mapping[int, VirtualKeyNames]):
        self.scan_codes = scan_codes
        self.virtual_keys = virtual_keys
        if SCAN_CODE_FALLBACK not in scan_codes:
            logger.warning("Scan code table has no fallback row %#05x", SCAN_CODE_FALLBACK)
        if VIRTUAL_KEY_FALLBACK not in virtual_keys:
            logger.warning("Virtual key table has no fallback row %#04x", VIRTUAL_KEY_FALLBACK)

    @classmethod
    def from_text(cls, scan_code_text: str, vkey_text: str):
        return cls(load_scan_code_table(scan_code_text), load_vkey_table(vkey_text))

    @classmethod
    def load(cls, scan_code_path: pathlib.Path, vkey_path: pathlib.Path):
        return cls.from_text(scan_code_path.read_text(encoding="utf-8"), vkey_path.read_text(encoding="utf-8"))

    @classmethod
    @functools.cache
    def load_default(cls):
        data = importlib.resources.files("keyscope") / "data"
        return cls.from_text(
            (data / "scancodes.txt").read_text(encoding="utf-8"),
            (data / "vkeys.txt").read_text(encoding="utf-8"),
        )

    def lookup_scan_code(self, event: NormalizedKeyEvent) -> KeyCodes:
        found = self.scan_codes.get(event.lookup_code)
        if found is None:
            return self.scan_codes.get(SCAN_CODE_FALLBACK, EMPTY_KEY_CODES)
        return found

    def lookup_vkey(self, event: NormalizedKeyEvent) -> VirtualKeyNames:
        found = self.virtual_keys.get(event.virtual_key)
        if found is None:
            return self.virtual_keys.get(VIRTUAL_KEY_FALLBACK, EMPTY_VIRTUAL_KEY_NAMES)
        return found
