from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


def wraparound_get(items: Sequence[T], index: int) -> T:
    """
    Circular indexing: index n is items[0], index -1 is items[n-1].
    items must be non-empty.
    """
    n = len(items)
    return items[((index % n) + n) % n]
