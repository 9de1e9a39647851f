import argparse
import logging
import pathlib
import sys

import trio

from .commontypes import KeyscopeError
from .device.hwtypes import AdjustmentFlags, NormalizedKeyEvent
from .device.eventstream import make_eventstream
from .device.normalizer import ScanCodeNormalizer
from .device.recording import Replayer
from .display import Column, format_cell
from .eventlog import EventLog
from .settings import Settings

logger = logging.getLogger(__name__)


def hex_int(value: str):
    return int(value, 16)


def load_settings(path):
    if path is None:
        return Settings()
    return Settings.load(path)


def configure_logging(verbose: bool):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


def print_log(log: EventLog):
    print("\t".join(column.name for column in Column))
    for row in range(len(log)):
        highlighted = log.highlighted(row)
        cells = [f"*{cell}" if column in highlighted else cell for column, cell in zip(Column, log.row_cells(row))]
        print("\t".join(cells))


async def replay(log: EventLog, replayer: Replayer):
    async with trio.open_nursery() as nursery:
        raw_send_channel, raw_receive_channel = trio.open_memory_channel(0)
        await nursery.start(replayer.run, raw_send_channel)
        async with make_eventstream(raw_receive_channel, log.normalizer, log.settings.adjust_input) as eventstream:
            async for word in eventstream:
                log.add_packed(word)


replay_parser = argparse.ArgumentParser(description="Normalize a recorded keyboard session and print the event log.")
replay_parser.add_argument("recording", type=pathlib.Path)
replay_parser.add_argument("--settings", type=pathlib.Path)
replay_parser.add_argument("--no-adjust", action="store_true", help="show raw records without normalization")
replay_parser.add_argument("-v", "--verbose", action="store_true")


def replay_cli(argv=None):
    args = replay_parser.parse_args(argv)
    configure_logging(args.verbose)
    try:
        settings = load_settings(args.settings)
        if args.no_adjust:
            settings.adjust_input = False
        replayer = Replayer.from_path(args.recording)
        log = EventLog(settings.tables(), settings, ScanCodeNormalizer())
    except (KeyscopeError, OSError) as exc:
        logger.debug("Startup failed", exc_info=True)
        print(f"keyscope-replay: {exc}", file=sys.stderr)
        return 1
    trio.run(replay, log, replayer)
    print_log(log)
    return 0


lookup_parser = argparse.ArgumentParser(description="Look up a scan code and virtual key in the key tables.")
lookup_parser.add_argument("make_code", type=hex_int)
lookup_parser.add_argument("virtual_key", type=hex_int, nargs="?", default=0xFF)
lookup_parser.add_argument("--extended", action="store_true", help="use the 0x1xx row for the make code")
lookup_parser.add_argument("--settings", type=pathlib.Path)
lookup_parser.add_argument("-v", "--verbose", action="store_true")


def lookup_cli(argv=None):
    args = lookup_parser.parse_args(argv)
    configure_logging(args.verbose)
    try:
        settings = load_settings(args.settings)
        tables = settings.tables()
    except (KeyscopeError, OSError) as exc:
        print(f"keyscope-lookup: {exc}", file=sys.stderr)
        return 1
    event = NormalizedKeyEvent(
        make_code=args.make_code & 0xFF,
        flags=0,
        virtual_key=args.virtual_key & 0xFF,
        adjustments=AdjustmentFlags.EXTENDED_LOOKUP if args.extended else AdjustmentFlags(0),
    )
    for column in Column:
        print(f"{column.name}: {format_cell(event, column, settings.format_for(column), tables)}")
    return 0
