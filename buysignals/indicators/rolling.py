"""
Fixed-size rolling window and the window arithmetic every indicator uses.

Each indicator instance owns its windows; a window is never shared between
indicators.
"""
from collections import deque
from typing import Deque, Generic, Iterable, Iterator, List, Optional, Sequence, TypeVar

import pandas as pd

T = TypeVar("T")


class RollingWindow(Generic[T]):
    """
    Fixed-capacity FIFO buffer.

    Pushing onto a full window evicts (and returns) the oldest element.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"RollingWindow capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._items: Deque[T] = deque(maxlen=capacity)

    def push(self, item: T) -> Optional[T]:
        """Append item; return the evicted element if the window was full."""
        evicted = self._items[0] if self.is_full else None
        self._items.append(item)
        return evicted

    @property
    def is_full(self) -> bool:
        return len(self._items) == self.capacity

    @property
    def latest(self) -> Optional[T]:
        return self._items[-1] if self._items else None

    def values(self) -> List[T]:
        """Snapshot of the window, oldest first."""
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"RollingWindow(capacity={self.capacity}, items={list(self._items)!r})"


def mean(window: Iterable[float]) -> float:
    """
    Arithmetic mean of all elements held.

    Summed left to right (oldest first) so results match a plain slice sum.
    The caller is responsible for only asking once the window is at size.
    """
    values = list(window)
    return sum(values) / len(values)


def min_of(window: Iterable[float]) -> float:
    return min(window)


def max_of(window: Iterable[float]) -> float:
    return max(window)


def rank(values: Sequence[float]) -> List[float]:
    """
    Descending rank of each element (1 = largest).

    Tied values share the average of the ranks they span, e.g. two values
    tied for 2nd and 3rd both get 2.5.
    """
    ranks = pd.Series(values, dtype="float64").rank(ascending=False, method="average")
    return ranks.tolist()


def rank_first(values: Sequence[float]) -> List[float]:
    """
    Descending rank without tie handling.

    Ties are ranked in order of appearance (earlier element gets the smaller
    rank). Kept for comparison with older RCI output; RCI uses rank().
    """
    ranks = pd.Series(values, dtype="float64").rank(ascending=False, method="first")
    return ranks.tolist()
