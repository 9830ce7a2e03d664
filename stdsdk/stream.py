"""Duplex byte stream over a WebSocket connection.

Two pump tasks run per connection:
- outbound: reads chunks from a local byte source and sends each as a text
  frame. End of input sends a going-away close; a read error sends an
  internal-error close carrying the error text.
- inbound: queues each received text frame for the local reader in arrival
  order. Normal and going-away closes end the stream silently; any other
  failure appends an ``ERROR: <message>`` line before the stream ends.

The frame queue is bounded: when the reader falls behind, the inbound pump
stops receiving until frames are consumed.

Pump reads have no timeout of their own. Call ``close()`` to stop both pumps
and the connection; otherwise they run until input ends or the socket closes.
A blocking ``read()`` already running in a worker thread is left to finish.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import AsyncIterator

from websockets.asyncio.client import ClientConnection
from websockets.exceptions import ConnectionClosedOK
from websockets.frames import CloseCode

from .errors import UnencodableTypeError
from .options import Body

_LOGGER = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 10 * 1024
DEFAULT_MAX_QUEUED_FRAMES = 64


async def iter_chunks(
    source: Body, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> AsyncIterator[bytes]:
    """Yield byte chunks from bytes, a file-like object, or an async iterable.

    A coroutine ``read()`` is awaited; a plain ``read()`` runs in a worker
    thread so it never blocks the event loop.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        data = bytes(source)
        for start in range(0, len(data), chunk_size):
            yield data[start : start + chunk_size]
        return

    read = getattr(source, "read", None)
    if callable(read):
        while True:
            if inspect.iscoroutinefunction(read):
                chunk = await read(chunk_size)
            else:
                chunk = await asyncio.to_thread(read, chunk_size)
                if inspect.isawaitable(chunk):
                    chunk = await chunk
            if not chunk:
                return
            yield bytes(chunk)

    if hasattr(source, "__aiter__"):
        async for chunk in source:  # type: ignore[union-attr]
            if chunk:
                yield bytes(chunk)
        return

    raise UnencodableTypeError(source, "body")


class WebsocketStream:
    """Byte stream view over a message-framed WebSocket connection.

    Usage:
        stream = await client.websocket("/apps/web/logs", opts)
        async with stream:
            async for chunk in stream:
                sys.stdout.buffer.write(chunk)
    """

    def __init__(
        self,
        ws: ClientConnection,
        source: Body,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_queued_frames: int = DEFAULT_MAX_QUEUED_FRAMES,
    ) -> None:
        self._ws = ws
        self._source = source
        self._chunk_size = chunk_size
        # None marks the end of the stream
        self._frames: asyncio.Queue[bytes | None] = asyncio.Queue(
            maxsize=max_queued_frames
        )
        self._pending = bytearray()
        self._finished = False
        self._eof = False
        self._error: BaseException | None = None
        self._outbound_task: asyncio.Task[None] | None = None
        self._inbound_task: asyncio.Task[None] | None = None

    def start(self) -> None:
        """Launch the outbound and inbound pumps."""
        if self._outbound_task is not None:
            return
        self._outbound_task = asyncio.create_task(self._pump_outbound())
        self._inbound_task = asyncio.create_task(self._pump_inbound())

    # -------------------------------------------------------------------------
    # Public API: reading
    # -------------------------------------------------------------------------

    async def read(self, n: int = -1) -> bytes:
        """Read up to ``n`` bytes; ``-1`` reads until the stream ends."""
        if n == 0:
            return b""
        if n < 0:
            while await self._fill():
                pass
            return self._take(len(self._pending))
        if not self._pending:
            await self._fill()
        return self._take(n)

    async def readline(self) -> bytes:
        """Read up to and including the next newline, or the rest of the stream."""
        while b"\n" not in self._pending:
            if not await self._fill():
                return self._take(len(self._pending))
        return self._take(self._pending.index(b"\n") + 1)

    async def readexactly(self, n: int) -> bytes:
        while len(self._pending) < n:
            if not await self._fill():
                partial = self._take(len(self._pending))
                raise asyncio.IncompleteReadError(partial, n)
        return self._take(n)

    def at_eof(self) -> bool:
        if self._pending:
            return False
        return self._eof or (self._finished and self._frames.empty())

    def exception(self) -> BaseException | None:
        """Return the error that ended the stream abnormally, if any."""
        return self._error

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._iter_chunks()

    async def _iter_chunks(self) -> AsyncIterator[bytes]:
        while True:
            chunk = await self.read(self._chunk_size)
            if not chunk:
                return
            yield chunk

    async def _fill(self) -> bool:
        """Move the next queued frame into the pending bytes.

        Returns False once the stream has ended.
        """
        if self._eof:
            return False
        if self._finished and self._frames.empty():
            self._eof = True
            return False
        frame = await self._frames.get()
        if frame is None:
            self._eof = True
            return False
        self._pending += frame
        return True

    def _take(self, n: int) -> bytes:
        data = bytes(self._pending[:n])
        del self._pending[:n]
        return data

    # -------------------------------------------------------------------------
    # Public API: lifecycle
    # -------------------------------------------------------------------------

    async def close(self) -> None:
        """Stop both pumps and close the connection."""
        for task in (self._outbound_task, self._inbound_task):
            if task is not None and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        await self._ws.close()
        self._finish()

    async def wait_closed(self) -> None:
        """Wait for both pumps to finish on their own."""
        tasks = [t for t in (self._outbound_task, self._inbound_task) if t is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def __aenter__(self) -> WebsocketStream:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Internal: pumps
    # -------------------------------------------------------------------------

    async def _pump_outbound(self) -> None:
        """Forward local input to the socket as text frames."""
        sent = 0
        try:
            async for chunk in iter_chunks(self._source, self._chunk_size):
                await self._ws.send(chunk, text=True)
                sent += len(chunk)
        except asyncio.CancelledError:
            raise
        except Exception as err:
            _LOGGER.warning("Stream input failed after %d bytes: %s", sent, err)
            await self._ws.close(code=CloseCode.INTERNAL_ERROR, reason=str(err))
            return

        _LOGGER.debug("Stream input finished after %d bytes", sent)
        await self._ws.close(code=CloseCode.GOING_AWAY)

    async def _pump_inbound(self) -> None:
        """Queue text frames from the socket for the local reader."""
        try:
            async for message in self._ws:
                if isinstance(message, str) and message:
                    await self._frames.put(message.encode())
        except asyncio.CancelledError:
            raise
        except ConnectionClosedOK:
            pass
        except Exception as err:
            _LOGGER.warning("Stream closed abnormally: %s", err)
            self._error = err
            await self._frames.put(f"ERROR: {err}\n".encode())
        finally:
            _LOGGER.debug("Stream output finished")
            self._finish()

    def _finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        # A full queue needs no marker: the reader sees the end once it drains.
        try:
            self._frames.put_nowait(None)
        except asyncio.QueueFull:
            pass
