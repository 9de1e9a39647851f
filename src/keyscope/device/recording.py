# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import collections.abc
import pathlib

import msgspec
import trio

from ..commontypes import RecordingError
from .hwtypes import RawKeyboard

recording_decoder = msgspec.json.Decoder(list[RawKeyboard])
recording_encoder = msgspec.json.Encoder()


def load_recording(path: pathlib.Path) -> list[RawKeyboard]:
    try:
        return recording_decoder.decode(path.read_bytes())
    except msgspec.DecodeError as exc:
        raise RecordingError(f"{path} is not a keyboard recording: {exc}") from exc


def save_recording(events: collections.abc.Iterable[RawKeyboard], path: pathlib.Path):
    path.write_bytes(recording_encoder.encode(list(events)))


class Replayer:
    def __init__(self, events: collections.abc.Sequence[RawKeyboard]):
        self.events = events

    @classmethod
    def from_path(cls, path: pathlib.Path):
        return cls(load_recording(path))

    async def run(self, channel: trio.MemorySendChannel[RawKeyboard], *, task_status=trio.TASK_STATUS_IGNORED):
        task_status.started()
        async with channel:
            for event in self.events:
                await channel.send(event)
