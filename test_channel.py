import asyncio

import pytest

from converter.channel import ChannelClosed, HandOffChannel


def test_items_arrive_in_order():
    async def scenario():
        channel = HandOffChannel()

        async def produce():
            for i in range(20):
                await channel.send(i)
            await channel.close()

        producer = asyncio.create_task(produce())
        received = [item async for item in channel]
        await producer
        return received

    assert asyncio.run(scenario()) == list(range(20))


def test_send_waits_for_receiver():
    async def scenario():
        channel = HandOffChannel()
        sender = asyncio.create_task(channel.send({"A": "1"}))
        await asyncio.sleep(0.01)
        blocked = not sender.done()

        item = await channel.receive()
        await asyncio.wait_for(sender, timeout=1)
        return blocked, item

    blocked, item = asyncio.run(scenario())
    assert blocked
    assert item == {"A": "1"}


def test_close_ends_iteration():
    async def scenario():
        channel = HandOffChannel()
        await channel.close()
        await channel.close()
        return [item async for item in channel], channel.closed

    items, closed = asyncio.run(scenario())
    assert items == []
    assert closed


def test_send_after_close():
    async def scenario():
        channel = HandOffChannel()
        await channel.close()
        await channel.send("late")

    with pytest.raises(ChannelClosed):
        asyncio.run(scenario())
