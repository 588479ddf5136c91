"""Tests for PriceStream -- single-slot lifecycle and price update delivery.

Uses an in-memory connection double instead of a real websocket.
"""

import asyncio
import json
from typing import Any

import pytest
from websockets.exceptions import ConnectionClosedError, InvalidURI

from marketfeed.config import StreamSettings
from marketfeed.market_data.price_stream import PriceStream
from marketfeed.models import PriceUpdate

_END = object()


class FakeConnection:
    """Async-iterable connection fed through push()."""

    def __init__(self, url: str, events: list[str]) -> None:
        self.url = url
        self._events = events
        self._queue: asyncio.Queue = asyncio.Queue()
        self.close_calls = 0

    def push(self, frame: Any) -> None:
        self._queue.put_nowait(frame)

    def __aiter__(self) -> "FakeConnection":
        return self

    async def __anext__(self) -> Any:
        item = await self._queue.get()
        if item is _END:
            raise StopAsyncIteration
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self) -> None:
        self.close_calls += 1
        self._events.append(f"close {self.url}")


class FakeConnector:
    """Stands in for websockets.connect and records every call."""

    def __init__(self) -> None:
        self.events: list[str] = []
        self.connections: list[FakeConnection] = []
        self.kwargs: list[dict] = []

    async def __call__(self, url: str, **kwargs: Any) -> FakeConnection:
        self.events.append(f"open {url}")
        self.kwargs.append(kwargs)
        connection = FakeConnection(url, self.events)
        self.connections.append(connection)
        return connection


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def stream(connector: FakeConnector) -> PriceStream:
    return PriceStream(
        StreamSettings(open_timeout=1.0, ping_interval=15.0, close_timeout=1.0),
        base_url="wss://stream.example.test:9443",
        connect=connector,
    )


def _frame(symbol: str, price: str) -> str:
    return json.dumps(
        {"stream": f"{symbol.lower()}@ticker", "data": {"s": symbol, "c": price}}
    )


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_open_subscribes_lowercased_channels(
        self, stream: PriceStream, connector: FakeConnector
    ) -> None:
        handle = await stream.open(["BTCUSDT", "ETHUSDT"])
        assert handle is not None
        assert handle.streams == ("btcusdt@ticker", "ethusdt@ticker")
        assert handle.url == (
            "wss://stream.example.test:9443/stream?streams=btcusdt@ticker/ethusdt@ticker"
        )
        assert connector.kwargs[0] == {
            "open_timeout": 1.0,
            "ping_interval": 15.0,
            "close_timeout": 1.0,
        }
        await stream.close()

    @pytest.mark.asyncio
    async def test_reopen_closes_previous_first(
        self, stream: PriceStream, connector: FakeConnector
    ) -> None:
        first = await stream.open(["BTCUSDT", "ETHUSDT"])
        second = await stream.open(["SOLUSDT"])

        assert first is not None and second is not None
        assert not first.is_open
        assert second.is_open
        assert stream.handle is second
        assert second.streams == ("solusdt@ticker",)
        assert connector.connections[0].close_calls == 1
        assert connector.connections[1].close_calls == 0
        first_url, second_url = first.url, second.url
        assert connector.events == [
            f"open {first_url}",
            f"close {first_url}",
            f"open {second_url}",
        ]
        await stream.close()

    @pytest.mark.asyncio
    async def test_close_twice_is_noop(
        self, stream: PriceStream, connector: FakeConnector
    ) -> None:
        await stream.open(["BTCUSDT"])
        await stream.close()
        await stream.close()
        assert stream.handle is None
        assert connector.connections[0].close_calls == 1

    @pytest.mark.asyncio
    async def test_close_without_open(self, stream: PriceStream) -> None:
        await stream.close()
        assert stream.handle is None

    @pytest.mark.asyncio
    async def test_empty_symbols_rejected(
        self, stream: PriceStream, connector: FakeConnector
    ) -> None:
        handle = await stream.open(["BTCUSDT"])
        with pytest.raises(ValueError):
            await stream.open([])
        assert stream.handle is handle
        await stream.close()

    @pytest.mark.asyncio
    async def test_connect_failure_leaves_no_handle(self) -> None:
        async def failing_connect(url: str, **kwargs: Any) -> None:
            raise InvalidURI(url, "bad uri")

        stream = PriceStream(StreamSettings(), connect=failing_connect)
        assert await stream.open(["BTCUSDT"]) is None
        assert stream.handle is None

    @pytest.mark.asyncio
    async def test_context_manager_closes(self, connector: FakeConnector) -> None:
        async with PriceStream(StreamSettings(), connect=connector) as stream:
            await stream.open(["BTCUSDT"])
        assert stream.handle is None
        assert connector.connections[0].close_calls == 1


class TestUpdates:
    @pytest.mark.asyncio
    async def test_message_produces_one_update(
        self, stream: PriceStream, connector: FakeConnector
    ) -> None:
        received: list[PriceUpdate] = []
        got_one = asyncio.Event()

        def listener(update: PriceUpdate) -> None:
            received.append(update)
            got_one.set()

        stream.subscribe(listener)
        await stream.open(["BTCUSDT"])
        connector.connections[0].push(json.dumps({"data": {"s": "BTCUSDT", "c": "65000.12"}}))

        await asyncio.wait_for(got_one.wait(), timeout=1.0)
        assert received == [PriceUpdate(symbol="BTCUSDT", price=65000.12)]
        await stream.close()

    def test_handle_message_without_data_is_ignored(self, stream: PriceStream) -> None:
        received: list[PriceUpdate] = []
        stream.subscribe(received.append)
        assert stream.handle_message(json.dumps({"result": None, "id": 1})) is None
        assert received == []

    def test_bad_json_is_dropped(self, stream: PriceStream) -> None:
        received: list[PriceUpdate] = []
        stream.subscribe(received.append)
        assert stream.handle_message("{not json") is None
        assert received == []

    def test_unparseable_price_is_zero(self, stream: PriceStream) -> None:
        update = stream.handle_message(_frame("BTCUSDT", "??"))
        assert update == PriceUpdate(symbol="BTCUSDT", price=0.0)

    def test_every_listener_notified(self, stream: PriceStream) -> None:
        first: list[PriceUpdate] = []
        second: list[PriceUpdate] = []
        stream.subscribe(first.append)
        stream.subscribe(second.append)
        stream.handle_message(_frame("ETHUSDT", "3200.5"))
        assert first == second == [PriceUpdate(symbol="ETHUSDT", price=3200.5)]

    def test_unsubscribe_stops_delivery(self, stream: PriceStream) -> None:
        received: list[PriceUpdate] = []
        unsubscribe = stream.subscribe(received.append)
        unsubscribe()
        unsubscribe()
        stream.handle_message(_frame("BTCUSDT", "1"))
        assert received == []

    def test_failing_listener_does_not_block_others(self, stream: PriceStream) -> None:
        received: list[PriceUpdate] = []

        def broken(update: PriceUpdate) -> None:
            raise RuntimeError("listener bug")

        stream.subscribe(broken)
        stream.subscribe(received.append)
        stream.handle_message(_frame("BTCUSDT", "2"))
        assert received == [PriceUpdate(symbol="BTCUSDT", price=2.0)]

    @pytest.mark.asyncio
    async def test_dropped_connection_stops_without_reconnect(
        self, stream: PriceStream, connector: FakeConnector
    ) -> None:
        handle = await stream.open(["BTCUSDT"])
        assert handle is not None and handle.reader is not None
        connector.connections[0].push(ConnectionClosedError(None, None))

        await asyncio.wait_for(handle.reader, timeout=1.0)
        assert len(connector.connections) == 1
        assert not handle.is_open
        assert stream.handle is handle
        await stream.close()
        assert stream.handle is None

    @pytest.mark.asyncio
    async def test_reader_crash_still_closes_connection(
        self, stream: PriceStream, connector: FakeConnector
    ) -> None:
        handle = await stream.open(["BTCUSDT"])
        assert handle is not None and handle.reader is not None
        connector.connections[0].push(RuntimeError("transport bug"))

        await asyncio.wait_for(handle.reader, timeout=1.0)
        assert not handle.is_open

        await stream.close()
        assert stream.handle is None
        assert connector.connections[0].close_calls == 1

    @pytest.mark.asyncio
    async def test_reopen_after_reader_crash_keeps_one_connection(
        self, stream: PriceStream, connector: FakeConnector
    ) -> None:
        first = await stream.open(["BTCUSDT"])
        assert first is not None and first.reader is not None
        connector.connections[0].push(RuntimeError("transport bug"))
        await asyncio.wait_for(first.reader, timeout=1.0)

        second = await stream.open(["ETHUSDT"])
        assert second is not None and second.is_open
        assert connector.connections[0].close_calls == 1
        assert stream.handle is second
        await stream.close()

    @pytest.mark.asyncio
    async def test_deeply_nested_frame_is_dropped(
        self, stream: PriceStream, connector: FakeConnector
    ) -> None:
        received: list[PriceUpdate] = []
        got_one = asyncio.Event()

        def listener(update: PriceUpdate) -> None:
            received.append(update)
            got_one.set()

        stream.subscribe(listener)
        handle = await stream.open(["BTCUSDT"])
        assert handle is not None
        connection = connector.connections[0]
        connection.push("[" * 100000 + "]" * 100000)
        connection.push(_frame("BTCUSDT", "65000.12"))

        await asyncio.wait_for(got_one.wait(), timeout=1.0)
        assert handle.is_open
        assert received == [PriceUpdate(symbol="BTCUSDT", price=65000.12)]

        await stream.close()
        assert connection.close_calls == 1
