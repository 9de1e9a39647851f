from __future__ import annotations

import logging
import typing

from . import codec
from .device.hwtypes import NormalizedKeyEvent, RawKeyboard
from .device.normalizer import ScanCodeNormalizer
from .display import Column, format_cell, highlighted_columns
from .keytables import KeyTables
from .settings import Settings

logger = logging.getLogger(__name__)


class EventLog:
    """Rows of keyboard events, each stored as a packed word.

    Display code only ever sees the packed words; everything shown for a row is
    recomputed from the word and the key tables.
    """

    rows: list[int]

    def __init__(self, tables: KeyTables, settings: Settings, normalizer: typing.Optional[ScanCodeNormalizer] = None):
        self.tables = tables
        self.settings = settings
        self.normalizer = normalizer if normalizer is not None else ScanCodeNormalizer()
        self.rows = []

    def __len__(self):
        return len(self.rows)

    def record(self, raw: RawKeyboard) -> typing.Optional[int]:
        if self.settings.adjust_input:
            event = self.normalizer.normalize(raw)
        else:
            event = self.normalizer.passthrough(raw)
        if event is None:
            return None
        word = codec.pack(event)
        logger.debug("Packed %r as %#010x", raw, word)
        self.add_packed(word)
        return word

    def add_packed(self, word: int):
        self.rows.append(word & 0xFFFFFFFF)

    def event(self, row: int) -> NormalizedKeyEvent:
        return codec.unpack(self.rows[row])

    def cell(self, row: int, column: Column) -> str:
        return format_cell(self.event(row), column, self.settings.format_for(column), self.tables)

    def row_cells(self, row: int) -> list[str]:
        return [self.cell(row, column) for column in Column]

    def highlighted(self, row: int) -> frozenset[Column]:
        return highlighted_columns(self.event(row))

    def clear(self):
        self.rows.clear()
        self.normalizer.reset()
