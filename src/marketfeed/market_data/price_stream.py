"""Live last-price stream over Binance's combined ticker stream.

A PriceStream owns at most one websocket connection. open() always closes
the previous connection before connecting again, close() is idempotent,
and both are serialized by an asyncio.Lock. The stream is bound to one
event loop; it must not be driven from several threads.

Updates are pushed to listeners registered with subscribe(). Delivery is
fire-and-forget: nothing is buffered for listeners that subscribe later.
There is no reconnect. A dropped connection is logged and stays silent
until open() is called again.
"""

import asyncio
import json
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from marketfeed.config import StreamSettings
from marketfeed.exchange.types import to_float
from marketfeed.logging import get_logger
from marketfeed.market_data.streams import (
    DEFAULT_STREAM_URL,
    combined_stream_url,
    ticker_channels,
)
from marketfeed.models import PriceUpdate

logger = get_logger(__name__)

PriceListener = Callable[[PriceUpdate], None]


@dataclass
class StreamHandle:
    """The live connection plus the task reading from it."""

    url: str
    streams: tuple[str, ...]
    connection: Any = field(repr=False)
    reader: asyncio.Task | None = field(default=None, repr=False)  # type: ignore[type-arg]
    closed: bool = False

    @property
    def is_open(self) -> bool:
        """False once closed, dropped by the server, or the reader has stopped."""
        return not self.closed


class PriceStream:
    """Single-slot owner of the ticker stream connection.

    Args:
        settings: Websocket timeouts and ping interval.
        base_url: Stream host, e.g. wss://stream.binance.com:9443.
        connect: Connection factory, websockets.connect unless overridden.
    """

    def __init__(
        self,
        settings: StreamSettings,
        base_url: str = DEFAULT_STREAM_URL,
        connect: Callable[..., Any] = websockets.connect,
    ) -> None:
        self._settings = settings
        self._base_url = base_url
        self._connect = connect
        self._handle: StreamHandle | None = None
        self._listeners: list[PriceListener] = []
        self._lock = asyncio.Lock()

    @property
    def handle(self) -> StreamHandle | None:
        """The active handle, or None when no stream is open."""
        return self._handle

    async def __aenter__(self) -> "PriceStream":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def subscribe(self, listener: PriceListener) -> Callable[[], None]:
        """Register a listener for price updates.

        Returns:
            A callable that removes the listener. Calling it twice is harmless.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def open(self, symbols: Iterable[str]) -> StreamHandle | None:
        """Replace the current stream with one covering `symbols`.

        Returns:
            The new handle, or None if the connection could not be established.

        Raises:
            ValueError: If no symbols are given. The current stream is left as is.
        """
        streams = ticker_channels(symbols)
        if not streams:
            raise ValueError("open() needs at least one symbol")

        url = combined_stream_url(streams, self._base_url)

        async with self._lock:
            await self._close_locked()

            try:
                connection = await self._connect(
                    url,
                    open_timeout=self._settings.open_timeout,
                    ping_interval=self._settings.ping_interval,
                    close_timeout=self._settings.close_timeout,
                )
            except (OSError, asyncio.TimeoutError, WebSocketException):
                logger.warning("price_stream_connect_failed", url=url, exc_info=True)
                return None

            handle = StreamHandle(url=url, streams=streams, connection=connection)
            handle.reader = asyncio.create_task(self._read(handle))
            self._handle = handle

        logger.info("price_stream_opened", streams=len(streams))
        return handle

    async def close(self) -> None:
        """Close the active stream, if any."""
        async with self._lock:
            await self._close_locked()

    async def _close_locked(self) -> None:
        handle = self._handle
        if handle is None:
            return
        self._handle = None
        handle.closed = True

        try:
            if handle.reader is not None:
                handle.reader.cancel()
                try:
                    await handle.reader
                except asyncio.CancelledError:
                    pass
                except Exception:
                    logger.warning("price_stream_reader_failed", exc_info=True)
        finally:
            await handle.connection.close()
        logger.info("price_stream_closed", streams=len(handle.streams))

    async def _read(self, handle: StreamHandle) -> None:
        try:
            async for raw in handle.connection:
                self.handle_message(raw)
        except ConnectionClosed as e:
            logger.warning("price_stream_dropped", url=handle.url, reason=str(e))
        except Exception:
            logger.warning(
                "price_stream_reader_failed", url=handle.url, exc_info=True
            )
        else:
            logger.info("price_stream_ended", url=handle.url)
        finally:
            handle.closed = True

    def handle_message(self, raw: str | bytes) -> PriceUpdate | None:
        """Turn one combined-stream frame into a published PriceUpdate.

        Frames without a data payload (subscription acks, etc.) are ignored.
        """
        try:
            message = json.loads(raw)
        except (TypeError, ValueError, RecursionError):
            logger.warning("price_stream_bad_frame", exc_info=True)
            return None

        payload = message.get("data") if isinstance(message, dict) else None
        if not payload or not isinstance(payload, dict):
            return None

        update = PriceUpdate(
            symbol=str(payload.get("s", "")),
            price=to_float(payload.get("c")),
        )
        self._publish(update)
        return update

    def _publish(self, update: PriceUpdate) -> None:
        for listener in list(self._listeners):
            try:
                listener(update)
            except Exception:
                logger.warning(
                    "price_listener_failed", symbol=update.symbol, exc_info=True
                )
