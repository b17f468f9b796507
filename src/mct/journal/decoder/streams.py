"""Async line sources for the stream decoder.

``read_from`` only gives cancellation a chance while it is suspended, and a
plain file object suspends nothing: reading the next line from a terminal or
a pipe blocks the whole event loop, signal handlers included.
``open_line_reader`` wraps such a stream so that waiting for input is an
``await``.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import stat
from collections.abc import AsyncIterator
from typing import BinaryIO

logger = logging.getLogger(__name__)

# Longest line the pipe reader accepts.
LINE_LIMIT = 1 << 20


def _is_stream_device(fd: int) -> bool:
    mode = os.fstat(fd).st_mode
    return stat.S_ISFIFO(mode) or stat.S_ISCHR(mode) or stat.S_ISSOCK(mode)


async def _thread_lines(stream: BinaryIO) -> AsyncIterator[bytes]:
    while True:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            return
        yield line


async def _connect_pipe(fd: int) -> tuple[asyncio.ReadTransport, asyncio.StreamReader]:
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader(limit=LINE_LIMIT)
    pipe = os.fdopen(os.dup(fd), "rb", buffering=0)
    try:
        transport, _ = await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), pipe)
    except BaseException:
        pipe.close()
        raise
    return transport, reader


@contextlib.asynccontextmanager
async def open_line_reader(stream):
    """Yield a line source for ``stream`` that read_from can abandon.

    Pipes, terminals and sockets are read through an asyncio pipe transport
    on a duplicate of their descriptor. The descriptor's blocking flag is
    restored on exit. Regular files are read a line at a time on a worker
    thread. Streams without a file descriptor (lists, ``io.BytesIO``, async
    iterables) are yielded unchanged.
    """
    try:
        fd = stream.fileno()
    except (AttributeError, OSError, ValueError):
        yield stream
        return

    transport = None
    was_blocking = os.get_blocking(fd)
    if _is_stream_device(fd):
        try:
            transport, reader = await _connect_pipe(fd)
        except (NotImplementedError, OSError, ValueError) as err:
            logger.debug("Pipe transport unavailable for fd %d, reading on a thread: %s", fd, err)
            os.set_blocking(fd, was_blocking)

    if transport is None:
        yield _thread_lines(stream)
        return

    try:
        yield reader
    finally:
        transport.close()
        # Let the transport release its descriptor.
        await asyncio.sleep(0)
        os.set_blocking(fd, was_blocking)
