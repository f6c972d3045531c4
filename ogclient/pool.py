"""A bounded pool of reusable objects."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class CachePool(Generic[T]):
    """Keeps at most ``max_size`` idle objects for reuse.

    ``get`` hands out the most recently returned object, or a new one from
    ``factory`` when none is idle. ``put`` discards the object when the pool
    is already full.
    """

    def __init__(self, factory: Callable[[], T], max_size: int) -> None:
        if max_size < 0:
            raise ValueError(f"max_size must not be negative: {max_size}")
        self._factory = factory
        self._max_size = max_size
        self._items: list[T] = []
        self._lock = threading.Lock()

    @property
    def max_size(self) -> int:
        return self._max_size

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def get(self) -> T:
        """Return an idle object, or create a new one."""
        with self._lock:
            if self._items:
                return self._items.pop()
        return self._factory()

    def put(self, item: T) -> None:
        """Return an object to the pool; it is dropped if the pool is full."""
        with self._lock:
            if len(self._items) < self._max_size:
                self._items.append(item)