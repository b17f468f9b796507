# mct/journal/decoder/decoder.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import (AsyncIterable, AsyncIterator, Awaitable, Iterable,
                             Iterator)

from mct.journal.entities.entry import Entry
from mct.journal.errors import (DecodeCancelledError, EmptyLineError,
                                JournalDecodeError, JournalLineError)

from .channel import EntryChannel
from .parser import parse_entry

logger = logging.getLogger(__name__)

Line = bytes | bytearray | memoryview | str


def _line_bytes(line: Line, encoding: str) -> bytes:
    if isinstance(line, str):
        return line.encode(encoding)
    return bytes(line)


def decode_entry(line: Line, encoding: str = "utf-8") -> Entry:
    """Entrypoint: decode one journal line into an Entry.

    Args:
      line      the raw line, with or without its line terminator
      encoding  used only when ``line`` is a ``str``

    Raises:
      EmptyLineError      the line is blank
      MissingActionError  a non-REM line has no "&&"
      UnknownInstructionError, EmptyClauseError for a malformed REM line
      ParseCommandError, ParseActionError, ParseRevertError otherwise

    """
    raw = _line_bytes(line, encoding).strip()
    if not raw:
        raise EmptyLineError()
    return parse_entry(raw)


def iter_entries(stream: Iterable[Line], encoding: str = "utf-8") -> Iterator[tuple[int, Entry]]:
    """Decode ``stream`` lazily, yielding ``(lineno, entry)`` pairs.

    Stops at the first bad line with a JournalLineError.
    """
    for lineno, line in enumerate(stream, start=1):
        try:
            entry = decode_entry(line, encoding)
        except JournalDecodeError as err:
            raise JournalLineError(lineno, _line_bytes(line, encoding), err) from err
        yield lineno, entry


def decode_journal(data: bytes | str, encoding: str = "utf-8") -> list[Entry]:
    """Decode a whole in-memory journal."""
    raw = _line_bytes(data, encoding)
    return [entry for _, entry in iter_entries(raw.splitlines(), encoding)]


# -----------------------------------------------------------------------------
# Streaming
# -----------------------------------------------------------------------------

_EOF = object()


async def _until_cancelled(aw: Awaitable, cancel: asyncio.Event, lineno: int):
    """Await ``aw`` unless ``cancel`` is set first, in which case ``aw`` is abandoned."""
    work = asyncio.ensure_future(aw)
    stop = asyncio.ensure_future(cancel.wait())
    try:
        done, _ = await asyncio.wait({work, stop}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (work, stop):
            if not task.done():
                task.cancel()
    if work in done:
        return work.result()
    raise DecodeCancelledError(lineno)


async def _next_line(lines: AsyncIterator[Line]):
    try:
        return await anext(lines)
    except StopAsyncIteration:
        return _EOF


async def _aiter_lines(
    stream: Iterable[Line] | AsyncIterable[Line], cancel: asyncio.Event | None
) -> AsyncIterator[Line]:
    if not isinstance(stream, AsyncIterable):
        for line in stream:
            yield line
        return

    # Waiting on an async source is a suspension point, so it honours cancel.
    lines = aiter(stream)
    lineno = 1
    while True:
        if cancel is None:
            line = await _next_line(lines)
        else:
            line = await _until_cancelled(_next_line(lines), cancel, lineno)
        if line is _EOF:
            return
        yield line
        lineno += 1


async def _handoff(entries: EntryChannel, entry: Entry, cancel: asyncio.Event | None, lineno: int) -> None:
    if cancel is not None and cancel.is_set():
        raise DecodeCancelledError(lineno)

    if cancel is None or not entries.full():
        await entries.send(entry)
        return

    # The channel is full: wait for room, or for the caller to give up.
    await _until_cancelled(entries.send(entry), cancel, lineno)


async def read_from(
    stream: Iterable[Line] | AsyncIterable[Line],
    entries: EntryChannel,
    cancel: asyncio.Event | None = None,
    encoding: str = "utf-8",
) -> int:
    """Read a journal from ``stream``, sending each parsed entry to ``entries``.

    ``entries`` is closed when read_from returns, whatever the outcome. A bad
    line raises JournalLineError and nothing after it is sent. Setting
    ``cancel`` makes the next handoff raise DecodeCancelledError; the entry
    that was about to be sent is dropped. With an async ``stream``, a pending
    wait for the next line is abandoned as soon as ``cancel`` is set.

    A plain iterable is read inline, so a blocking one (such as a terminal)
    holds up the event loop; see ``streams.open_line_reader``.

    Returns the number of entries sent.
    """
    lineno = 0
    sent = 0
    try:
        async for line in _aiter_lines(stream, cancel):
            lineno += 1
            try:
                entry = decode_entry(line, encoding)
            except JournalDecodeError as err:
                logger.warning("Journal decode failed at line %d: %s", lineno, err)
                raise JournalLineError(lineno, _line_bytes(line, encoding), err) from err
            await _handoff(entries, entry, cancel, lineno)
            sent += 1
            logger.debug("Line %d: %s", lineno, entry.command.instruction.value)
    except DecodeCancelledError as err:
        logger.warning("Journal decode cancelled at line %s after %d entries", err.lineno, sent)
        raise
    finally:
        entries.close()

    logger.info("Decoded %d entries", sent)
    return sent


async def decode_stream(
    stream: Iterable[Line] | AsyncIterable[Line],
    maxsize: int = 0,
    cancel: asyncio.Event | None = None,
    encoding: str = "utf-8",
) -> list[Entry]:
    """Run read_from together with a consumer and collect every entry."""
    entries = EntryChannel(maxsize)
    collected: list[Entry] = []

    async def drain() -> None:
        async for entry in entries:
            collected.append(entry)

    consumer = asyncio.ensure_future(drain())
    try:
        await read_from(stream, entries, cancel, encoding)
    finally:
        await consumer
    return collected
