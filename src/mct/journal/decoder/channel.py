"""A closable, optionally bounded channel of decoded entries."""

from __future__ import annotations

import asyncio

from mct.journal.entities.entry import Entry
from mct.journal.errors import ChannelClosedError

_CLOSED = object()


class EntryChannel:
    """Queue-backed handoff between a stream decoder and its consumer.

    ``maxsize`` bounds the number of undelivered entries (0 means unbounded);
    ``send`` waits while the channel is full. After ``close()`` the consumer
    still receives everything sent before it, then iteration stops.
    """

    def __init__(self, maxsize: int = 0):
        if maxsize < 0:
            raise ValueError(f"maxsize must be >= 0, got {maxsize}")
        self.maxsize = maxsize
        # The queue itself is unbounded so close() never blocks; capacity is
        # enforced by the semaphore.
        self._queue: asyncio.Queue = asyncio.Queue()
        self._slots = asyncio.Semaphore(maxsize) if maxsize else None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def qsize(self) -> int:
        """Number of entries sent but not yet received."""
        size = self._queue.qsize()
        return size - 1 if self._closed and size else size

    def full(self) -> bool:
        """True when a send would have to wait for the consumer."""
        return self._slots is not None and self._slots.locked()

    async def send(self, entry: Entry) -> None:
        if self._closed:
            raise ChannelClosedError("send on closed channel")
        if self._slots is not None:
            await self._slots.acquire()
            if self._closed:
                self._slots.release()
                raise ChannelClosedError("send on closed channel")
        self._queue.put_nowait(entry)

    def close(self) -> None:
        if self._closed:
            raise ChannelClosedError("close of closed channel")
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def receive(self) -> Entry:
        """Wait for the next entry. Raises ChannelClosedError once drained."""
        item = await self._queue.get()
        if item is _CLOSED:
            # Leave the marker for any other waiting receiver.
            self._queue.put_nowait(_CLOSED)
            raise ChannelClosedError("channel closed")
        if self._slots is not None:
            self._slots.release()
        return item

    def __aiter__(self):
        return self

    async def __anext__(self) -> Entry:
        try:
            return await self.receive()
        except ChannelClosedError:
            raise StopAsyncIteration from None
