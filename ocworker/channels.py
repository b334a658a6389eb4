"""Fixed pool of thread-safe message channels addressed by worker index."""

from __future__ import annotations

import queue
import threading
from typing import Any, Callable, Iterable, TypeVar

T = TypeVar("T")

THREAD_COUNT = 10


class ChannelPool:
    """A set of unbounded FIFO channels, one per worker index."""

    def __init__(self, size: int = THREAD_COUNT) -> None:
        self._queues: list[queue.SimpleQueue[Any]] = [queue.SimpleQueue() for _ in range(size)]

    def __len__(self) -> int:
        return len(self._queues)

    def _channel(self, thread_id: int) -> queue.SimpleQueue[Any]:
        if not 0 <= thread_id < len(self._queues):
            raise IndexError(f"no channel with index {thread_id}")
        return self._queues[thread_id]

    def send(self, thread_id: int, value: Any) -> None:
        """Queue ``value`` on the channel of ``thread_id``."""
        self._channel(thread_id).put(value)

    def recv(self, thread_id: int, expected_type: type[T]) -> T | None:
        """Block until a message arrives; return it if it has the expected type, else None."""
        value = self._channel(thread_id).get()
        return value if isinstance(value, expected_type) else None

    def try_recv(self, thread_id: int, expected_type: type[T]) -> T | None:
        """Return the next message without blocking, or None if empty or of another type."""
        try:
            value = self._channel(thread_id).get_nowait()
        except queue.Empty:
            return None
        return value if isinstance(value, expected_type) else None


_POOL = ChannelPool()


def send_msg(thread_id: int, msg: Any) -> None:
    """Send ``msg`` on the shared pool."""
    _POOL.send(thread_id, msg)


def recv_msg(thread_id: int, expected_type: type[T]) -> T | None:
    """Blocking receive from the shared pool."""
    return _POOL.recv(thread_id, expected_type)


def try_recv_msg(thread_id: int, expected_type: type[T]) -> T | None:
    """Non-blocking receive from the shared pool."""
    return _POOL.try_recv(thread_id, expected_type)


class ThreadManager:
    """Runs each task on its own thread; ``join`` waits for all of them."""

    def __init__(self, tasks: Iterable[Callable[[], Any]]) -> None:
        self._errors: list[BaseException] = []
        self._lock = threading.Lock()
        self._threads = [threading.Thread(target=self._run, args=(task,)) for task in tasks]
        for thread in self._threads:
            thread.start()

    def _run(self, task: Callable[[], Any]) -> None:
        try:
            task()
        except BaseException as exc:  # re-raised from join()
            with self._lock:
                self._errors.append(exc)

    def join(self) -> None:
        """Wait for every thread; re-raise the first failure of a task."""
        for thread in self._threads:
            thread.join()
        if self._errors:
            raise self._errors[0]