"""Small helpers shared across the package."""

from __future__ import annotations

import functools
import os
from collections.abc import Sequence
from typing import TypeVar

__all__ = ["slice_middle", "known_parallelism"]

T = TypeVar("T")


def slice_middle(items: Sequence[T]) -> Sequence[T]:
    """Return the middle value, or the two middle values for even lengths."""
    length = len(items)
    if length == 0:
        return items[:0]
    if length % 2 == 0:
        return items[length // 2 - 1 : length // 2 + 1]
    return items[length // 2 : length // 2 + 1]


@functools.lru_cache(maxsize=None)
def known_parallelism() -> int:
    """Return the number of CPUs available to this process, cached."""
    getaffinity = getattr(os, "sched_getaffinity", None)
    if getaffinity is not None:
        try:
            count = len(getaffinity(0))
        except OSError:
            count = 0
        if count > 0:
            return count
    return os.cpu_count() or 1