"""Producer/consumer channel for streamed response fragments.

The transport runs as a producer task that pushes ``StreamChunk`` objects
into a ``FragmentChannel``; the stream accumulator consumes them until the
completion sentinel. A transport failure travels through the channel and is
raised on the consumer side, so both halves see one ordered sequence of
events. Closing the channel early cancels the producer.
"""

import asyncio
from dataclasses import dataclass
from typing import AsyncIterator

from .logging import get_logger
from .types import StreamChunk

logger = get_logger(__name__)


class _EndOfStream:
    """Completion sentinel."""


_END = _EndOfStream()


@dataclass
class _Failure:
    error: BaseException


class FragmentChannel:
    """Ordered single-producer, single-consumer queue of stream chunks.

    Usage:
        channel = FragmentChannel()
        channel.attach(asyncio.create_task(produce(channel)))
        async for chunk in channel:
            ...
        await channel.aclose()
    """

    def __init__(self, maxsize: int = 0):
        self._queue: asyncio.Queue[StreamChunk | _EndOfStream | _Failure] = asyncio.Queue(maxsize)
        self._producer: asyncio.Task | None = None
        self._finished = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def attach(self, producer: asyncio.Task) -> None:
        """Register the task feeding this channel so ``aclose`` can cancel it."""
        self._producer = producer

    async def send(self, chunk: StreamChunk) -> None:
        if self._finished:
            raise RuntimeError("send() after the channel was finished")
        await self._queue.put(chunk)

    async def finish(self) -> None:
        """Mark the end of the stream."""
        if not self._finished:
            self._finished = True
            await self._queue.put(_END)

    async def fail(self, error: BaseException) -> None:
        """End the stream with an error the consumer will raise."""
        if not self._finished:
            self._finished = True
            await self._queue.put(_Failure(error))

    async def aclose(self) -> None:
        """Stop consuming; cancels the producer if it is still running."""
        self._closed = True
        producer = self._producer
        if producer is not None and not producer.done():
            producer.cancel()
            try:
                await producer
            except asyncio.CancelledError:
                logger.debug("stream producer cancelled")

    def __aiter__(self) -> AsyncIterator[StreamChunk]:
        return self

    async def __anext__(self) -> StreamChunk:
        if self._closed:
            raise StopAsyncIteration
        item = await self._queue.get()
        if isinstance(item, _EndOfStream):
            self._closed = True
            raise StopAsyncIteration
        if isinstance(item, _Failure):
            self._closed = True
            raise item.error
        return item


async def pump(source: AsyncIterator[StreamChunk], channel: FragmentChannel) -> None:
    """Copy every chunk from ``source`` into ``channel``, then finish it.

    Exceptions raised by ``source`` are forwarded through the channel;
    cancellation is not, it belongs to whoever closed the channel.
    """
    try:
        async for chunk in source:
            await channel.send(chunk)
    except asyncio.CancelledError:
        raise
    except Exception as e:
        await channel.fail(e)
    else:
        await channel.finish()
