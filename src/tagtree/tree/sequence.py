"""Append-only storage used for a node's children and attributes."""

from typing import Generic, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class GrowableSequence(Generic[T]):
    """Index-stable, append-only sequence with doubling capacity.

    Items are never removed or reordered, so an index handed out once keeps
    pointing at the same item for the lifetime of the sequence. The only way to
    drop items is ``release()``, which teardown uses to let go of the whole
    sequence at once.
    """

    __slots__ = ("_slots", "_length")

    def __init__(self) -> None:
        self._slots: List[Optional[T]] = [None]
        self._length = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def length(self) -> int:
        return self._length

    def __len__(self) -> int:
        return self._length

    def append(self, item: T) -> None:
        """Store ``item`` after the last one, doubling capacity when full."""
        if self._length >= len(self._slots):
            self._slots.extend([None] * len(self._slots))
        self._slots[self._length] = item
        self._length += 1

    def at(self, index: int) -> Optional[T]:
        """Return the item at ``index``, or None when there is no such item."""
        if index < 0 or not index < self._length:
            return None
        return self._slots[index]

    def __iter__(self) -> Iterator[T]:
        for index in range(self._length):
            yield self._slots[index]  # type: ignore[misc]

    def release(self) -> None:
        """Drop every stored reference and shrink back to the initial capacity."""
        self._slots = [None]
        self._length = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}(length={self._length}, capacity={self.capacity})"
