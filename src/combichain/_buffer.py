from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Sequence
from typing import Self, override

import more_itertools as mit

from . import _size_hint as sh
from ._core import Pipeable, get_config
from ._results import NONE, Option, Some

logger = logging.getLogger(__name__)


class Buffer[T](ABC, Pipeable):
    """Indexed access to the values of a source.

    Concrete kinds are selected by calling their own `from_source` constructor,
    so the way values are stored is fixed when the buffer is built.
    """

    __slots__ = ()

    @classmethod
    @abstractmethod
    def from_source(cls, source: Iterable[T]) -> Self:
        """Build the buffer from its source."""
        ...

    @abstractmethod
    def get(self, index: int) -> Option[T]:
        """Return the value at **index**, or `NONE` if the source is shorter."""
        ...


class SizedBuffer[T](Buffer[T]):
    """A buffer whose total length is known without pulling anything."""

    __slots__ = ()

    @abstractmethod
    def __len__(self) -> int: ...


class SeqBuffer[T](SizedBuffer[T]):
    """A view over an existing `Sequence`, including `range`, without copying.

    Example:
    ```python
    >>> import combichain as cc
    >>> buf = cc.SeqBuffer.from_source(range(10, 20, 5))
    >>> buf.get(1), buf.get(2)
    (Some(value=15), NONE)

    ```
    """

    __slots__ = ("_inner",)

    def __init__(self, data: Sequence[T]) -> None:
        self._inner = data

    @override
    @classmethod
    def from_source(cls, source: Iterable[T]) -> SeqBuffer[T]:
        if not isinstance(source, Sequence):
            msg = f"SeqBuffer needs a Sequence, got {type(source).__name__}"
            raise TypeError(msg)
        return cls(source)

    def __len__(self) -> int:
        return len(self._inner)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({get_config().iter_repr(self._inner)})"

    @override
    def get(self, index: int) -> Option[T]:
        if 0 <= index < len(self._inner):
            return Some(self._inner[index])
        return NONE


class EagerBuffer[T](SeqBuffer[T]):
    """Drains its source into an owned tuple as soon as it is built.

    This is the reference behaviour lazy buffering must be indistinguishable from.
    """

    __slots__ = ()

    def __init__(self, data: Iterable[T]) -> None:
        super().__init__(tuple(data))

    @override
    @classmethod
    def from_source(cls, source: Iterable[T]) -> EagerBuffer[T]:
        return cls(source)


class LazyBuffer[T](Buffer[T]):
    """Memoizes a forward-only producer, pulling only as far as reads require.

    The cache is append-only: once stored, an index keeps its value for the
    lifetime of the buffer. End-of-data is recorded the first time it is
    observed and the producer is never pulled again afterwards.

    `len()` is the number of cached values, not the length of the source.

    Iterating the buffer restarts from index 0 every time, which turns a
    single-pass producer into a restartable one.

    Args:
        source (Iterator[T]): The producer to pull from.

    Example:
    ```python
    >>> import combichain as cc
    >>> buf = cc.LazyBuffer.from_source(iter("abcdef"))
    >>> buf.get(2)
    Some(value='c')
    >>> len(buf)
    3
    >>> buf.get(0), len(buf)
    (Some(value='a'), 3)
    >>> buf
    LazyBuffer('a', 'b', 'c', exhausted=False)

    ```
    """

    __slots__ = ("_cache", "_exhausted", "_source")

    def __init__(self, source: Iterator[T]) -> None:
        self._source = source
        self._cache: list[T] = []
        self._exhausted = False

    @override
    @classmethod
    def from_source(cls, source: Iterable[T]) -> LazyBuffer[T]:
        return cls(iter(source))

    def __len__(self) -> int:
        return len(self._cache)

    def __repr__(self) -> str:
        items = get_config().iter_repr(self._cache)
        prefix = f"{items}, " if self._cache else ""
        return f"{self.__class__.__name__}({prefix}exhausted={self._exhausted})"

    def __getitem__(self, index: int) -> T:
        """Read an already-cached value, never pulling the producer."""
        return self._cache[index]

    def __iter__(self) -> Iterator[T]:
        return _Cursor(self)

    def is_exhausted(self) -> bool:
        return self._exhausted

    def get_next(self) -> bool:
        """Pull one more value into the cache.

        Returns:
            bool: `False` once the producer has run out.
        """
        if self._exhausted:
            return False
        try:
            self._cache.append(next(self._source))
        except StopIteration:
            self._exhausted = True
            logger.debug("producer exhausted after %d values", len(self._cache))
            return False
        return True

    def prefill(self, length: int) -> None:
        """Pull until at least **length** values are cached, or the producer ends."""
        while len(self._cache) < length and self.get_next():
            pass

    @override
    def get(self, index: int) -> Option[T]:
        """Return the value at **index**, pulling the producer up to it if needed.

        Args:
            index (int): Position in the source, counted from 0.

        Returns:
            Option[T]: The value, or `NONE` if the producer ends before **index**.

        Example:
        ```python
        >>> import combichain as cc
        >>> pulled = []
        >>> def producer():
        ...     for x in range(100):
        ...         pulled.append(x)
        ...         yield x
        >>> buf = cc.LazyBuffer.from_source(producer())
        >>> buf.get(3).unwrap()
        3
        >>> pulled
        [0, 1, 2, 3]

        ```
        """
        if index < 0:
            return NONE
        self.prefill(index + 1)
        if index < len(self._cache):
            return Some(self._cache[index])
        return NONE

    def count_remaining(self) -> int:
        """Drain the producer without caching, returning how many values were left."""
        if self._exhausted:
            return 0
        remaining = mit.ilen(self._source)
        self._exhausted = True
        return remaining

    def size_hint(self) -> sh.SizeHint:
        """Bounds on the total length of the source, cached values included."""
        if self._exhausted:
            return sh.SizeHint.exact(len(self._cache))
        return sh.add(sh.SizeHint.exact(len(self._cache)), sh.hint_of(self._source))


class _Cursor[T](Iterator[T]):
    """Independent forward position over a `LazyBuffer`."""

    __slots__ = ("_buffer", "_pos")

    def __init__(self, buffer: LazyBuffer[T]) -> None:
        self._buffer = buffer
        self._pos = 0

    def __next__(self) -> T:
        match self._buffer.get(self._pos):
            case Some(value):
                self._pos += 1
                return value
            case _:
                raise StopIteration

    def size_hint(self) -> sh.SizeHint:
        total = self._buffer.size_hint()
        return sh.SizeHint(
            sh.saturating_sub(total.lower, self._pos),
            total.upper.map(lambda hi: sh.saturating_sub(hi, self._pos)),
        )
