from __future__ import annotations

import asyncio
import io

import pytest

from mct.journal.decoder.channel import EntryChannel
from mct.journal.decoder.decoder import (decode_journal, decode_stream,
                                         iter_entries, read_from)
from mct.journal.decoder.defs import Instruction
from mct.journal.errors import (DecodeCancelledError, EmptyLineError,
                                JournalLineError, MissingActionError,
                                ParseCommandError)


async def _drain(entries: EntryChannel) -> list:
    return [entry async for entry in entries]


def test_decode_journal(journal_lines: list[bytes]) -> None:
    entries = decode_journal(b"".join(journal_lines))
    assert [e.command.instruction for e in entries] == [
        Instruction.REM,
        Instruction.MKDIR,
        Instruction.COPY,
        Instruction.EXEC,
    ]


def test_decode_journal_crlf() -> None:
    entries = decode_journal("MKDIR /a && NOP\r\nRM /a && NOP\r\n")
    assert [e.command.args for e in entries] == [(b"/a",), (b"/a",)]


def test_iter_entries_reports_line_number() -> None:
    stream = io.BytesIO(b"MKDIR /a && NOP\n\nRM /a && NOP\n")
    decoded = iter_entries(stream)
    assert next(decoded)[0] == 1
    with pytest.raises(JournalLineError) as excinfo:
        next(decoded)
    assert excinfo.value.lineno == 2
    assert excinfo.value.line == b"\n"
    assert isinstance(excinfo.value.cause, EmptyLineError)
    assert str(excinfo.value) == "parse entry (line 2): empty line"


@pytest.mark.asyncio
async def test_read_from_sends_every_entry(journal_lines: list[bytes]) -> None:
    entries = EntryChannel()
    sent = await read_from(io.BytesIO(b"".join(journal_lines)), entries)
    assert sent == 4
    assert entries.closed
    received = await _drain(entries)
    assert len(received) == 4
    assert received[1].revert.instruction is Instruction.RM


@pytest.mark.asyncio
async def test_read_from_async_source(journal_lines: list[bytes]) -> None:
    async def source():
        for line in journal_lines:
            await asyncio.sleep(0)
            yield line

    assert len(await decode_stream(source())) == 4


@pytest.mark.asyncio
async def test_read_from_stops_at_first_error() -> None:
    lines = [b"MKDIR /a && NOP", b"RM /a && NOP", b"MKDIR /b", b"RM /b && NOP"]
    entries = EntryChannel()
    with pytest.raises(JournalLineError) as excinfo:
        await read_from(lines, entries)
    assert excinfo.value.lineno == 3
    assert isinstance(excinfo.value.__cause__, MissingActionError)
    assert entries.closed
    received = await _drain(entries)
    assert [e.command.args for e in received] == [(b"/a",), (b"/a",)]


@pytest.mark.asyncio
async def test_read_from_blank_line_is_an_error() -> None:
    entries = EntryChannel()
    with pytest.raises(JournalLineError) as excinfo:
        await read_from([b"MKDIR /a && NOP", b"   ", b"RM /a && NOP"], entries)
    assert isinstance(excinfo.value.cause, EmptyLineError)
    assert len(await _drain(entries)) == 1


@pytest.mark.asyncio
async def test_read_from_empty_stream() -> None:
    entries = EntryChannel()
    assert await read_from([], entries) == 0
    assert await _drain(entries) == []


@pytest.mark.asyncio
async def test_cancelled_before_first_handoff() -> None:
    cancel = asyncio.Event()
    cancel.set()
    entries = EntryChannel()
    with pytest.raises(DecodeCancelledError) as excinfo:
        await read_from([b"MKDIR /a && NOP"], entries, cancel)
    assert excinfo.value.lineno == 1
    assert entries.closed
    assert await _drain(entries) == []


@pytest.mark.asyncio
async def test_cancelled_after_first_line() -> None:
    cancel = asyncio.Event()

    def source():
        yield b"MKDIR /a && NOP"
        cancel.set()
        yield b"RM /a && NOP"
        yield b"RM /b && NOP"

    entries = EntryChannel()
    with pytest.raises(DecodeCancelledError) as excinfo:
        await read_from(source(), entries, cancel)
    assert excinfo.value.lineno == 2
    received = await _drain(entries)
    assert [e.command.instruction for e in received] == [Instruction.MKDIR]


@pytest.mark.asyncio
async def test_cancellation_wins_over_parse_of_pending_line() -> None:
    # A cancelled stream reports cancellation, not errors of later lines.
    cancel = asyncio.Event()

    def source():
        yield b"MKDIR /a && NOP"
        cancel.set()
        yield b"MKDIR /b && NOP"
        yield b"not a valid line"

    with pytest.raises(DecodeCancelledError):
        await decode_stream(source(), cancel=cancel)


@pytest.mark.asyncio
async def test_cancel_while_waiting_on_full_channel() -> None:
    cancel = asyncio.Event()
    entries = EntryChannel(maxsize=1)
    lines = [b"MKDIR /a && NOP", b"MKDIR /b && NOP", b"MKDIR /c && NOP"]

    producer = asyncio.ensure_future(read_from(lines, entries, cancel))
    for _ in range(5):
        await asyncio.sleep(0)
    assert not producer.done()
    assert entries.full()

    cancel.set()
    with pytest.raises(DecodeCancelledError) as excinfo:
        await producer
    assert excinfo.value.lineno == 2
    received = await _drain(entries)
    assert [e.command.args for e in received] == [(b"/a",)]


@pytest.mark.asyncio
async def test_bounded_channel_applies_backpressure() -> None:
    lines = [f"MKDIR /d{i} && NOP".encode() for i in range(20)]
    entries = EntryChannel(maxsize=2)
    received = []

    async def slow_consumer():
        async for entry in entries:
            assert entries.qsize() <= 2
            received.append(entry)
            await asyncio.sleep(0)

    consumer = asyncio.ensure_future(slow_consumer())
    assert await read_from(lines, entries, asyncio.Event()) == 20
    await consumer
    assert [e.command.args[0] for e in received] == [f"/d{i}".encode() for i in range(20)]


@pytest.mark.asyncio
async def test_decode_stream_propagates_wrapped_error() -> None:
    with pytest.raises(JournalLineError) as excinfo:
        await decode_stream([b"MKDIR /a && NOP", b"FOO && NOP"], maxsize=1)
    assert excinfo.value.lineno == 2
    assert isinstance(excinfo.value.cause, ParseCommandError)


@pytest.mark.asyncio
async def test_read_from_logs_summary(caplog, journal_lines: list[bytes]) -> None:
    caplog.set_level("INFO", logger="mct.journal.decoder.decoder")
    await decode_stream(journal_lines)
    assert "Decoded 4 entries" in caplog.text


@pytest.mark.asyncio
async def test_cancel_while_waiting_for_next_line() -> None:
    cancel = asyncio.Event()
    never = asyncio.Event()

    async def source():
        yield b"MKDIR /a && NOP"
        await never.wait()
        yield b"RM /a && NOP"

    entries = EntryChannel()
    producer = asyncio.ensure_future(read_from(source(), entries, cancel))
    first = await entries.receive()
    assert first.command.args == (b"/a",)
    for _ in range(5):
        await asyncio.sleep(0)
    assert not producer.done()

    cancel.set()
    with pytest.raises(DecodeCancelledError) as excinfo:
        await asyncio.wait_for(producer, timeout=5)
    assert excinfo.value.lineno == 2
    assert entries.closed
