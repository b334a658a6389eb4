"""Route-based websocket client using a hex-length-prefixed JSON framing."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

log = logging.getLogger(__name__)

RECONNECT_DELAY = 3.0

RouteCallback = Callable[[int, str], Awaitable[Any]]
BigPayloadCallback = Callable[[int, str, str], Awaitable[Any]]

_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")
_I16_MIN, _I16_MAX = -(2**15), 2**15 - 1


class FrameError(ValueError):
    """Raised when an incoming frame cannot be decoded."""


@dataclass(frozen=True)
class Frame:
    """An incoming message: result code, JSON payload, route and trailing payload."""

    code: int
    payload: str
    route: str
    big_payload: str = ""


def encode_frame(uid: str, route: str, payload: str, big_payload: str) -> str:
    """Build an outgoing frame: hex byte length (at least 4 digits), JSON, big payload."""
    body = json.dumps({"t": uid, "r": route, "p": payload}, separators=(",", ":"), ensure_ascii=False)
    return f"{len(body.encode('utf-8')):04x}{body}{big_payload}"


def decode_frame(text: str) -> Frame:
    """Parse an incoming frame; raise FrameError if it is malformed."""
    data = text.encode("utf-8")
    if len(data) < 4:
        raise FrameError("frame shorter than its length prefix")
    prefix = data[:4]
    if not all(byte in _HEX_DIGITS for byte in prefix):
        raise FrameError(f"invalid length prefix {prefix!r}")
    json_end = 4 + int(prefix, 16)
    if len(data) < json_end:
        raise FrameError("frame shorter than its declared length")
    try:
        body = json.loads(data[4:json_end].decode("utf-8"))
        big_payload = data[json_end:].decode("utf-8")
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise FrameError(f"invalid frame body: {exc}") from exc
    if not isinstance(body, dict):
        raise FrameError("frame body is not an object")
    code, payload, route = body.get("c"), body.get("p"), body.get("r")
    if not isinstance(code, int) or isinstance(code, bool) or not _I16_MIN <= code <= _I16_MAX:
        raise FrameError("field 'c' must be a 16-bit integer")
    if not isinstance(payload, str):
        raise FrameError("field 'p' must be a string")
    if not isinstance(route, str):
        raise FrameError("field 'r' must be a string")
    return Frame(code=code, payload=payload, route=route, big_payload=big_payload)


class WsClient:
    """Dispatches incoming frames to route handlers and sends framed requests."""

    def __init__(self, uid: str, url: str) -> None:
        self.uid = uid
        self.url = url
        self._routes: dict[str, RouteCallback] = {}
        self._big_routes: dict[str, BigPayloadCallback] = {}
        self._outbox: asyncio.Queue[str] | None = None
        self._tasks: set[asyncio.Task[Any]] = set()

    def route(self, api: str, callback: RouteCallback) -> None:
        """Handle frames on ``api`` that carry no big payload."""
        self._routes[api] = callback

    def route_big_payload(self, api: str, callback: BigPayloadCallback) -> None:
        """Handle frames on ``api`` that carry a big payload."""
        self._big_routes[api] = callback

    def _spawn(self, coro: Awaitable[Any]) -> asyncio.Task[Any]:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def dispatch(self, text: str) -> asyncio.Task[Any] | None:
        """Schedule the handler for a raw frame; None if malformed or unrouted."""
        try:
            frame = decode_frame(text)
        except FrameError as exc:
            log.debug("dropping frame: %s", exc)
            return None
        if frame.big_payload:
            big_cb = self._big_routes.get(frame.route)
            if big_cb is None:
                return None
            return self._spawn(big_cb(frame.code, frame.payload, frame.big_payload))
        callback = self._routes.get(frame.route)
        if callback is None:
            return None
        return self._spawn(callback(frame.code, frame.payload))

    def start(self) -> asyncio.Task[None]:
        """Connect in the background, reconnecting after every close or failure."""
        return self._spawn(self._run())

    async def _run(self) -> None:
        while True:
            outbox: asyncio.Queue[str] = asyncio.Queue()
            try:
                async with websockets.connect(self.url) as ws:
                    self._outbox = outbox
                    pump = asyncio.ensure_future(self._pump(ws, outbox))
                    try:
                        async for message in ws:
                            if isinstance(message, str):
                                self.dispatch(message)
                    finally:
                        pump.cancel()
                        self._outbox = None
            except (OSError, WebSocketException) as exc:
                log.error("WebSocket error: %s", exc)
            await asyncio.sleep(RECONNECT_DELAY)

    @staticmethod
    async def _pump(ws: Any, outbox: asyncio.Queue[str]) -> None:
        while True:
            message = await outbox.get()
            try:
                await ws.send(message)
            except ConnectionClosed:
                pass

    async def send(self, route: str, payload: str) -> None:
        """Send a frame without a big payload."""
        await self.send_big_payload(route, payload, "")

    async def send_big_payload(self, route: str, payload: str, big_payload: str) -> None:
        """Send a frame; it is dropped while no connection is open."""
        message = encode_frame(self.uid, route, payload, big_payload)
        if self._outbox is not None:
            self._outbox.put_nowait(message)