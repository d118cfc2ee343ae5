"""A fixed-size ring buffer and a single-producer single-consumer queue over it."""

from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class Ring(Generic[T]):
    """Fixed-size circular buffer holding at most ``size - 1`` items."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("ring size must be at least 1")
        self._size = size
        self._buffer: List[Optional[T]] = [None] * size
        self._head = 0
        self._tail = 0

    @property
    def size(self) -> int:
        return self._size

    @property
    def head(self) -> int:
        """Index of the next item to be popped."""
        return self._head

    @property
    def tail(self) -> int:
        """Index of the slot the next push writes to."""
        return self._tail

    def __len__(self) -> int:
        return (self._tail - self._head) % self._size

    def push(self, item: T) -> bool:
        """Store ``item`` at the tail; return False if the ring is full."""
        following = (self._tail + 1) % self._size
        if following == self._head:
            return False
        self._buffer[self._tail] = item
        self._tail = following
        return True

    def pop(self) -> Optional[T]:
        """Remove and return the item at the head, or None if empty."""
        if self._head == self._tail:
            return None
        item = self._buffer[self._head]
        self._head = (self._head + 1) % self._size
        return item


class SpscQueue(Generic[T]):
    """Single-producer single-consumer queue backed by a Ring."""

    def __init__(self, size: int) -> None:
        self.ring: Ring[T] = Ring(size)

    def __len__(self) -> int:
        return len(self.ring)

    def push(self, item: T) -> bool:
        """Enqueue ``item``; return False if the queue is full."""
        return self.ring.push(item)

    def pop(self) -> Optional[T]:
        """Dequeue the oldest item, or None if the queue is empty."""
        return self.ring.pop()