#!/usr/bin/env python3
"""
Decode a configuration journal and print its entries.

Usage:
    mct journal.txt
    mct --format english < journal.txt
"""

import argparse
import asyncio
import logging
import signal
import sys
from collections.abc import AsyncIterable, Iterable
from pathlib import Path
from typing import BinaryIO, TextIO

from mct.journal.config import ENVIRONMENTS, ProjectConfig, get_config
from mct.journal.decoder.channel import EntryChannel
from mct.journal.decoder.decoder import read_from
from mct.journal.decoder.renderer import format_table, render_entry, render_row
from mct.journal.decoder.streams import open_line_reader
from mct.journal.errors import DecodeCancelledError, JournalError

BANNER = "Miek's Configuration Tool"

logger = logging.getLogger(__name__)


async def print_journal(
    stream: Iterable[bytes] | AsyncIterable[bytes],
    cfg: ProjectConfig,
    out: TextIO,
    cancel: asyncio.Event | None = None,
) -> None:
    """Decode ``stream`` and write every entry to ``out``.

    English output is written as entries arrive; the table is written once
    the whole journal has decoded, so a bad journal prints no rows.
    """
    cancel = cancel or asyncio.Event()
    encoding = cfg.decoder.encoding
    entries = EntryChannel(cfg.decoder.queue_maxsize)
    rows: list[list[str]] = []

    async def consume() -> None:
        async for entry in entries:
            if cfg.output_format == "english":
                print(render_entry(entry, encoding), file=out, flush=True)
            else:
                rows.append(render_row(entry, encoding))

    consumer = asyncio.ensure_future(consume())
    try:
        await read_from(stream, entries, cancel, encoding)
    finally:
        await consumer

    for line in format_table(rows):
        print(line, file=out)


async def _run(stream: BinaryIO, cfg: ProjectConfig) -> None:
    cancel = asyncio.Event()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel.set)
    except (NotImplementedError, RuntimeError):
        # Not available on this platform; Ctrl-C raises KeyboardInterrupt instead.
        pass
    try:
        async with open_line_reader(stream) as lines:
            await print_journal(lines, cfg, sys.stdout, cancel)
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except (NotImplementedError, RuntimeError):
            pass


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Decode a configuration journal (command && action [&& revert] per line)"
    )
    parser.add_argument(
        "file",
        nargs="?",
        type=Path,
        help="Journal file to decode (default: standard input)",
    )
    parser.add_argument(
        "--format",
        choices=["table", "english"],
        help="Output format (default: from configuration, else table)",
    )
    parser.add_argument(
        "--env",
        choices=ENVIRONMENTS,
        help="Configuration environment (default: $MCT_ENV or local)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to the YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (default: from configuration, else WARNING)",
    )

    args = parser.parse_args(argv)

    try:
        cfg = get_config(env=args.env, config_path=args.config)
        updates = {}
        if args.format:
            updates["output_format"] = args.format
        if args.log_level:
            updates["log_level"] = args.log_level
        if updates:
            cfg = ProjectConfig.model_validate({**cfg.model_dump(), **updates})
    except ValueError as err:
        parser.error(str(err))

    logging.basicConfig(
        level=cfg.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.debug("Using %s configuration: %s", cfg.env, cfg.model_dump())

    print(BANNER, flush=True)

    if args.file is not None and not args.file.exists():
        print(f"error: journal file does not exist: {args.file}", file=sys.stderr)
        return 1

    try:
        if args.file is None:
            asyncio.run(_run(sys.stdin.buffer, cfg))
        else:
            with open(args.file, "rb") as stream:
                asyncio.run(_run(stream, cfg))
    except (DecodeCancelledError, KeyboardInterrupt):
        print("error: interrupted", file=sys.stderr)
        return 130
    except JournalError as err:
        print(f"error: {err}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
