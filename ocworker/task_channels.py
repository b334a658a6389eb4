"""Message channels and task spawning for cooperative asyncio workers."""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Any, Awaitable, Callable, Iterable, TypeVar

T = TypeVar("T")

TASK_COUNT = 10

_BACKGROUND: set[asyncio.Future[Any]] = set()


class _Channel:
    """Unbounded channel; not bound to any particular event loop."""

    def __init__(self) -> None:
        self._items: deque[Any] = deque()
        self._waiters: deque[asyncio.Future[None]] = deque()

    def _wake(self) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return

    def put(self, item: Any) -> None:
        self._items.append(item)
        self._wake()

    def get_nowait(self) -> Any:
        return self._items.popleft()

    def __bool__(self) -> bool:
        return bool(self._items)

    async def get(self) -> Any:
        while not self._items:
            waiter = asyncio.get_running_loop().create_future()
            self._waiters.append(waiter)
            try:
                await waiter
            except asyncio.CancelledError:
                if waiter in self._waiters:
                    self._waiters.remove(waiter)
                elif self._items:
                    self._wake()
                raise
        return self._items.popleft()


class AsyncChannelPool:
    """A set of unbounded channels, one per task index."""

    def __init__(self, size: int = TASK_COUNT) -> None:
        self._channels = [_Channel() for _ in range(size)]

    def __len__(self) -> int:
        return len(self._channels)

    def _channel(self, thread_id: int) -> _Channel:
        if not 0 <= thread_id < len(self._channels):
            raise IndexError(f"no channel with index {thread_id}")
        return self._channels[thread_id]

    def send(self, thread_id: int, msg: Any) -> None:
        """Queue ``msg`` for the task with index ``thread_id``."""
        self._channel(thread_id).put(msg)

    async def recv(self, thread_id: int) -> Any:
        """Wait for the next message on ``thread_id``."""
        return await self._channel(thread_id).get()

    def try_recv(self, thread_id: int) -> Any | None:
        """Return the next message if one is queued, else None."""
        channel = self._channel(thread_id)
        return channel.get_nowait() if channel else None


_POOL = AsyncChannelPool()


def send_msg(thread_id: int, msg: Any) -> None:
    """Send ``msg`` on the shared pool."""
    _POOL.send(thread_id, msg)


async def recv_msg(thread_id: int, expected_type: type[T]) -> T | None:
    """Wait for a message; return it if it has the expected type, else None."""
    msg = await _POOL.recv(thread_id)
    return msg if isinstance(msg, expected_type) else None


def try_recv_msg(thread_id: int, expected_type: type[T]) -> T | None:
    """Non-blocking receive; None when empty or of another type."""
    msg = _POOL.try_recv(thread_id)
    return msg if isinstance(msg, expected_type) else None


def spawn_task(task: Awaitable[Any]) -> asyncio.Future[Any]:
    """Schedule an awaitable on the running loop and keep it alive until done."""
    asyncio.get_running_loop()
    future = asyncio.ensure_future(task)
    _BACKGROUND.add(future)
    future.add_done_callback(_BACKGROUND.discard)
    return future


async def _call(func: Callable[[], Any]) -> Any:
    return func()


def spawn_all(tasks: Iterable[Callable[[], Any]]) -> list[asyncio.Future[Any]]:
    """Schedule each plain callable to run on the running loop."""
    return [spawn_task(_call(func)) for func in tasks]