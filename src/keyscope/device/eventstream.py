# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import abc
from contextlib import aclosing, asynccontextmanager
from typing import Any, AsyncIterable, cast

import trio

from .. import codec
from .hwtypes import NormalizedKeyEvent, RawKeyboard
from .normalizer import ScanCodeNormalizer


class Section(abc.ABC):
    @abc.abstractmethod
    async def pump(self, source: trio.MemoryReceiveChannel[Any], sink: trio.MemorySendChannel[Any]): ...


# stage 1: reassemble prefixed sequences; fragments and overruns produce nothing
class Normalize(Section):
    def __init__(self, normalizer: ScanCodeNormalizer, adjust: bool = True):
        self.normalizer = normalizer
        self.adjust = adjust

    async def pump(self, source: trio.MemoryReceiveChannel[RawKeyboard], sink: trio.MemorySendChannel[NormalizedKeyEvent]):
        async with aclosing(source), aclosing(sink):
            async for raw in source:
                if not self.adjust:
                    await sink.send(self.normalizer.passthrough(raw))
                    continue
                event = self.normalizer.normalize(raw)
                if event is not None:
                    await sink.send(event)


# stage 2: pack into the 32-bit word stored per row
class Pack(Section):
    async def pump(self, source: trio.MemoryReceiveChannel[NormalizedKeyEvent], sink: trio.MemorySendChannel[int]):
        async with aclosing(source), aclosing(sink):
            async for event in source:
                await sink.send(codec.pack(event))


@asynccontextmanager
async def pump_all(first_source: AsyncIterable[Any], *sections: Section):
    async with trio.open_nursery() as nursery:
        section_input = first_source
        for section in sections:
            section_send_channel, section_receive_channel = trio.open_memory_channel(0)
            nursery.start_soon(section.pump, section_input, section_send_channel)
            section_input = section_receive_channel
        yield section_input
        nursery.cancel_scope.cancel()


@asynccontextmanager
async def make_eventstream(
    raw_event_channel: trio.MemoryReceiveChannel[RawKeyboard],
    normalizer: ScanCodeNormalizer,
    adjust: bool = True,
):
    async with pump_all(raw_event_channel, Normalize(normalizer, adjust), Pack()) as eventstream:
        yield cast(trio.MemoryReceiveChannel[int], eventstream)
