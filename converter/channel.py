import asyncio

_CLOSED = object()


class ChannelClosed(Exception):
    """Raised when sending on a channel that has been closed."""


class HandOffChannel:
    """
    Single-slot hand-off between one producer and one consumer.

    send() returns only after the consumer has received the item, so the
    producer never runs ahead of the consumer. Items arrive in the order they
    were sent. close() marks the end of the stream; the consumer sees it as
    the end of `async for`.
    """

    def __init__(self):
        self._queue = asyncio.Queue(maxsize=1)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, item):
        if self._closed:
            raise ChannelClosed("send on closed channel")
        await self._queue.put(item)
        # Rendezvous: wait until receive() has taken the item.
        await self._queue.join()

    async def close(self):
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_CLOSED)

    async def receive(self):
        """Return the next item, or raise StopAsyncIteration once closed."""
        item = await self._queue.get()
        self._queue.task_done()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item

    def __aiter__(self):
        return self

    async def __anext__(self):
        return await self.receive()
