"""Thread-safe containers guarded by a lock and a condition variable."""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Deque, Dict, Generic, Hashable, Optional, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


def _deadline(timeout: Optional[float]) -> Optional[float]:
    return None if timeout is None else time.monotonic() + timeout


def _remaining(deadline: Optional[float]) -> Optional[float]:
    if deadline is None:
        return None
    return max(0.0, deadline - time.monotonic())


class ConcurrentDeque(Generic[T]):
    """A double-ended queue that may be shared between threads."""

    def __init__(self) -> None:
        self._items: Deque[T] = deque()
        self._condition = threading.Condition(threading.Lock())

    def __len__(self) -> int:
        with self._condition:
            return len(self._items)

    def clear(self) -> None:
        """Remove every item."""
        with self._condition:
            self._items.clear()

    def contains(self, item: T) -> bool:
        """Return True if ``item`` is in the deque."""
        with self._condition:
            return item in self._items

    def __contains__(self, item: object) -> bool:
        return self.contains(item)  # type: ignore[arg-type]

    def erase(self, item: T) -> bool:
        """Remove the first occurrence of ``item``; return True if one was found."""
        with self._condition:
            try:
                self._items.remove(item)
            except ValueError:
                return False
            return True

    def erase_all(self, item: T) -> bool:
        """Remove every occurrence of ``item``. Always returns True."""
        with self._condition:
            kept = [existing for existing in self._items if existing != item]
            self._items.clear()
            self._items.extend(kept)
        return True

    def push_back(self, item: T, unique: bool = False) -> bool:
        """Append ``item``; with ``unique`` set, only if it is not present yet.

        Returns True if the item was appended.
        """
        with self._condition:
            if unique and item in self._items:
                return False
            self._items.append(item)
            self._condition.notify()
        return True

    def empty(self) -> bool:
        """Return True if the deque holds nothing."""
        with self._condition:
            return not self._items

    def try_pop_front(self) -> T:
        """Remove and return the first item, raising IndexError if empty."""
        with self._condition:
            if not self._items:
                raise IndexError("pop from an empty deque")
            return self._items.popleft()

    def wait_and_pop_front(self, timeout: Optional[float] = None) -> T:
        """Block until an item is available, then remove and return it.

        Raises TimeoutError if ``timeout`` seconds pass first.
        """
        deadline = _deadline(timeout)
        with self._condition:
            while not self._items:
                if not self._condition.wait(_remaining(deadline)) and not self._items:
                    raise TimeoutError("no item arrived in time")
            return self._items.popleft()


class ConcurrentMap(Generic[K, V]):
    """A mapping that may be shared between threads."""

    def __init__(self) -> None:
        self._items: Dict[K, V] = {}
        self._condition = threading.Condition(threading.Lock())

    def __len__(self) -> int:
        with self._condition:
            return len(self._items)

    def clear(self) -> None:
        """Remove every entry."""
        with self._condition:
            self._items.clear()

    def contains(self, key: K) -> bool:
        """Return True if ``key`` has a value."""
        with self._condition:
            return key in self._items

    def __contains__(self, key: object) -> bool:
        return self.contains(key)  # type: ignore[arg-type]

    def erase(self, key: K) -> bool:
        """Remove ``key``; return True if it was present."""
        with self._condition:
            return self._items.pop(key, _MISSING) is not _MISSING

    def push(self, key: K, value: V) -> None:
        """Store ``value`` under ``key``, replacing any earlier value."""
        with self._condition:
            self._items[key] = value
            # Waiters wait for specific keys, so wake them all.
            self._condition.notify_all()

    def empty(self) -> bool:
        """Return True if the map holds nothing."""
        with self._condition:
            return not self._items

    def get(self, key: K) -> V:
        """Return the value under ``key``, raising KeyError if absent."""
        with self._condition:
            return self._items[key]

    def try_pop(self, key: K) -> V:
        """Remove and return the value under ``key``, raising KeyError if absent."""
        with self._condition:
            return self._items.pop(key)

    def wait_and_pop(self, key: K, timeout: Optional[float] = None) -> V:
        """Block until ``key`` has a value, then remove and return it.

        Raises TimeoutError if ``timeout`` seconds pass first.
        """
        deadline = _deadline(timeout)
        with self._condition:
            while key not in self._items:
                if not self._condition.wait(_remaining(deadline)) and key not in self._items:
                    raise TimeoutError(f"no value for {key!r} arrived in time")
            return self._items.pop(key)


class ConcurrentQueue(Generic[T]):
    """A first-in first-out queue that may be shared between threads."""

    def __init__(self) -> None:
        self._items: Deque[T] = deque()
        self._condition = threading.Condition(threading.Lock())

    def __len__(self) -> int:
        with self._condition:
            return len(self._items)

    def push(self, item: T) -> None:
        """Append ``item`` to the back of the queue."""
        with self._condition:
            self._items.append(item)
            self._condition.notify()

    def empty(self) -> bool:
        """Return True if the queue holds nothing."""
        with self._condition:
            return not self._items

    def try_pop(self) -> T:
        """Remove and return the front item, raising IndexError if empty."""
        with self._condition:
            if not self._items:
                raise IndexError("pop from an empty queue")
            return self._items.popleft()

    def wait_and_pop(self, timeout: Optional[float] = None) -> T:
        """Block until an item is available, then remove and return it.

        Raises TimeoutError if ``timeout`` seconds pass first.
        """
        deadline = _deadline(timeout)
        with self._condition:
            while not self._items:
                if not self._condition.wait(_remaining(deadline)) and not self._items:
                    raise TimeoutError("no item arrived in time")
            return self._items.popleft()


_MISSING = object()