from __future__ import annotations

import asyncio
import io
import os
import sys
from pathlib import Path

import pytest

from mct.journal.decoder.channel import EntryChannel
from mct.journal.decoder.decoder import decode_stream, read_from
from mct.journal.decoder.streams import open_line_reader
from mct.journal.errors import DecodeCancelledError

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX pipes")


@pytest.mark.asyncio
async def test_stream_without_descriptor_is_passed_through() -> None:
    stream = io.BytesIO(b"RM /x && NOP\n")
    async with open_line_reader(stream) as lines:
        assert lines is stream


@pytest.mark.asyncio
async def test_regular_file_is_read_line_by_line(tmp_path: Path, journal_lines: list[bytes]) -> None:
    path = tmp_path / "journal.txt"
    path.write_bytes(b"".join(journal_lines))
    with open(path, "rb") as stream:
        async with open_line_reader(stream) as lines:
            entries = await decode_stream(lines)
    assert len(entries) == len(journal_lines)
    assert entries[1].command.args == (b"/etc/coredns",)


@posix_only
@pytest.mark.asyncio
async def test_pipe_entries_arrive_before_end_of_input() -> None:
    r, w = os.pipe()
    with os.fdopen(r, "rb") as src, os.fdopen(w, "wb", buffering=0) as sink:
        sink.write(b"MKDIR /a && NOP\n")
        entries = EntryChannel()
        async with open_line_reader(src) as lines:
            producer = asyncio.ensure_future(read_from(lines, entries, asyncio.Event()))
            first = await asyncio.wait_for(entries.receive(), timeout=5)
            assert first.command.args == (b"/a",)
            assert not producer.done()

            sink.write(b"RM /a && NOP")
            sink.close()
            assert await asyncio.wait_for(producer, timeout=5) == 2
        second = await entries.receive()
        assert second.command.args == (b"/a",)
        assert os.get_blocking(src.fileno())


@posix_only
@pytest.mark.asyncio
async def test_cancel_while_waiting_for_pipe_input() -> None:
    # The writer stays open and silent: only cancellation can end the read.
    r, w = os.pipe()
    with os.fdopen(r, "rb") as src, os.fdopen(w, "wb", buffering=0) as sink:
        sink.write(b"MKDIR /a && NOP\n")
        cancel = asyncio.Event()
        entries = EntryChannel()
        async with open_line_reader(src) as lines:
            producer = asyncio.ensure_future(read_from(lines, entries, cancel))
            await asyncio.wait_for(entries.receive(), timeout=5)
            await asyncio.sleep(0.05)
            assert not producer.done()

            cancel.set()
            with pytest.raises(DecodeCancelledError) as excinfo:
                await asyncio.wait_for(producer, timeout=5)
        assert excinfo.value.lineno == 2
        assert entries.closed
        assert os.get_blocking(src.fileno())
