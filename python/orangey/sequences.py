"""Infinite lazy sequences over generator draws and peeks."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, Generic, TypeVar

import numpy as np

T = TypeVar("T")


class DrawSequence(Generic[T]):
    """Consuming sequence: every `next()` runs the draw on the live generator."""

    def __init__(self, draw: Callable[[], T]) -> None:
        self._draw = draw

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        return self._draw()


class PeekSequence(Generic[T]):
    """Non-consuming sequence: `next()` peeks at offset 0, 1, 2, ...

    The generator is read live, so offsets are relative to its state at the
    time of each call.
    """

    def __init__(self, peek: Callable[[int], T], *, start: int = 0) -> None:
        if start < 0:
            raise ValueError("start offset must be non-negative")
        self._peek = peek
        self._offset = int(start)

    @property
    def offset(self) -> int:
        return self._offset

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        delta = self._offset
        self._offset += 1
        return self._peek(delta)


def take(
    sequence: Iterator[Any],
    size: int | tuple[int, ...],
    dtype: Any = np.float64,
) -> np.ndarray:
    """Fill an array of shape `size` from the next values of `sequence`."""
    shape = (size,) if isinstance(size, int) else tuple(size)
    arr = np.empty(shape, dtype=dtype)
    flat = arr.reshape(-1)
    for i in range(flat.size):
        flat[i] = next(sequence)
    return arr
