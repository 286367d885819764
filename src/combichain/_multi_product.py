from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from functools import reduce

import cytoolz as cz
import more_itertools as mit

from . import _size_hint as sh
from ._buffer import LazyBuffer
from ._core import Pipeable, get_config
from ._results import NONE, Option, Some

logger = logging.getLogger(__name__)

_MISSING = object()


def _restartable[T](data: Iterable[T]) -> Iterable[T]:
    # a single-pass iterator is its own iter(); buffer it so it can be replayed
    if iter(data) is data:
        return LazyBuffer.from_source(data)
    return data


@dataclass(slots=True)
class Digit[T]:
    """One position of the odometer: a live cursor and the source it restarts from."""

    source: Iterable[T]
    cursor: Iterator[T] = field(init=False)

    def __post_init__(self) -> None:
        self.cursor = iter(self.source)

    def pull(self) -> Option[T]:
        value = next(self.cursor, _MISSING)
        return NONE if value is _MISSING else Some(value)  # type: ignore[arg-type]

    def reset(self) -> None:
        self.cursor = iter(self.source)

    def live_hint(self) -> sh.SizeHint:
        return sh.hint_of(self.cursor)

    def total_hint(self) -> sh.SizeHint:
        return sh.hint_of(self.source)


class MultiProduct[T](Pipeable, Iterator[tuple[T, ...]]):
    """Cartesian product of several sources, enumerated as an odometer.

    The rightmost digit moves fastest. When a digit runs out it is restarted
    from its source and the digit on its left moves once (the carry).
    The product is exhausted when the carry runs past the leftmost digit.

    If any source is empty, the product is empty. A product of no sources holds
    exactly one tuple, the empty one.

    Args:
        digits (list[Digit[T]]): One digit per source, leftmost first.

    Example:
    ```python
    >>> import combichain as cc
    >>> prod = cc.multi_cartesian_product([[1, 2], "xyz"])
    >>> prod.next()
    Some(value=(1, 'x'))
    >>> prod.size_hint()
    SizeHint(lower=5, upper=Some(value=5))
    >>> list(prod)
    [(1, 'y'), (1, 'z'), (2, 'x'), (2, 'y'), (2, 'z')]

    ```
    """

    __slots__ = ("_current", "_digits", "_done")

    def __init__(self, digits: list[Digit[T]]) -> None:
        self._digits = digits
        self._current: Option[list[T]] = NONE
        self._done = False

    def __repr__(self) -> str:
        current = self._current.map(get_config().iter_repr).unwrap_or("")
        return f"{self.__class__.__name__}(digits={len(self._digits)}, current=({current}))"

    def __next__(self) -> tuple[T, ...]:
        match self.next():
            case Some(values):
                return values
            case _:
                raise StopIteration

    def in_progress(self) -> bool:
        """Whether a tuple has been produced and more may follow."""
        return self._current.is_some() and not self._done

    def current(self) -> Option[tuple[T, ...]]:
        """The most recently produced tuple, `NONE` before the first and after the last."""
        if self._done:
            return NONE
        return self._current.map(tuple)

    def next(self) -> Option[tuple[T, ...]]:
        self._advance()
        return self.current()

    def _advance(self) -> None:
        if self._done:
            return
        match self._current:
            case Some(current):
                if not self._iterate_last(current):
                    self._done = True
            case _:
                self._current = self._initial_iteration()
                if self._current.is_none():
                    logger.debug("empty factor, the product is empty")
                    self._done = True

    def _initial_iteration(self) -> Option[list[T]]:
        values: list[T] = []
        for digit in self._digits:
            match digit.pull():
                case Some(value):
                    values.append(value)
                case _:
                    return NONE
        return Some(values)

    def _iterate_last(self, current: list[T]) -> bool:
        """Move the odometer one step, updating **current** in place.

        Returns:
            bool: `False` if no tuple is left.
        """
        for pos in reversed(range(len(self._digits))):
            match self._digits[pos].pull():
                case Some(value):
                    current[pos] = value
                    return self._carry_reset(current, pos + 1)
                case _:
                    continue
        return False

    def _carry_reset(self, current: list[T], start: int) -> bool:
        for pos in range(start, len(self._digits)):
            digit = self._digits[pos]
            digit.reset()
            match digit.pull():
                case Some(value):
                    current[pos] = value
                case _:
                    # a restarted source that yields nothing was empty from the start
                    return False
        return True

    def size_hint(self) -> sh.SizeHint:
        """Bounds on the number of tuples left, without advancing.

        Before the first tuple, this is the product of every source's size.
        Afterwards, the digits are read as a mixed-radix number: each digit's
        remaining values weighted by the full sizes of the digits on its right.
        """
        if self._done:
            return sh.SizeHint.exact(0)
        if not self.in_progress():
            return reduce(
                lambda acc, d: sh.mul(acc, d.live_hint()),
                self._digits,
                sh.SizeHint.exact(1),
            )
        return reduce(
            lambda acc, d: sh.add(sh.mul(acc, d.total_hint()), d.live_hint()),
            self._digits,
            sh.SizeHint.exact(0),
        )

    def count(self) -> int:
        """Consume the iterator, returning the exact number of tuples left.

        Example:
        ```python
        >>> import combichain as cc
        >>> prod = cc.multi_cartesian_product([range(10), range(10), range(10)])
        >>> _ = prod.next(), prod.next()
        >>> prod.count()
        998

        ```
        """
        if self._done:
            return 0
        if not self.in_progress():
            count = reduce(lambda acc, d: acc * mit.ilen(d.cursor), self._digits, 1)
        else:
            count = reduce(
                lambda acc, d: acc * mit.ilen(iter(d.source)) + mit.ilen(d.cursor),
                self._digits,
                0,
            )
        self._done = True
        return count

    def last(self) -> Option[tuple[T, ...]]:
        """Consume the iterator, returning its final tuple.

        The final tuple is made of the last value of every source, provided at
        least one tuple is still to come.

        Example:
        ```python
        >>> import combichain as cc
        >>> cc.multi_cartesian_product([[1, 2], "xyz"]).last()
        Some(value=(2, 'z'))
        >>> cc.multi_cartesian_product([[1, 2], []]).last()
        NONE

        ```
        """
        if self._done:
            return NONE
        if self.in_progress():
            # anything left iff some live cursor still holds a value
            left = [mit.ilen(d.cursor) for d in self._digits]
            self._done = True
            if not any(left):
                return NONE
            sources = [iter(d.source) for d in self._digits]
        else:
            self._done = True
            sources = [d.cursor for d in self._digits]
        lasts = [mit.last(src, _MISSING) for src in sources]
        if any(value is _MISSING for value in lasts):
            return NONE
        return Some(tuple(lasts))


def multi_cartesian_product[T](iterables: Iterable[Iterable[T]]) -> MultiProduct[T]:
    """Return the cartesian product of several iterables, lazily.

    Every source must be restartable, since the odometer runs through it once
    per value of the sources on its left. Re-iterable containers are restarted
    with `iter()`, single-pass iterators are wrapped in a `LazyBuffer` and
    replayed from it.

    Args:
        iterables (Iterable[Iterable[T]]): The sources, leftmost varying slowest.

    Returns:
        MultiProduct[T]: An iterator of tuples with one value per source.

    Raises:
        TypeError: If one of the sources is not iterable.

    Example:
    ```python
    >>> import combichain as cc
    >>> list(cc.multi_cartesian_product([iter("ab"), range(2)]))
    [('a', 0), ('a', 1), ('b', 0), ('b', 1)]
    >>> list(cc.multi_cartesian_product([]))
    [()]

    ```
    """
    digits: list[Digit[T]] = []
    for position, data in enumerate(iterables):
        if not cz.itertoolz.isiterable(data):
            msg = f"product factor {position} is not iterable: {data!r}"
            raise TypeError(msg)
        digits.append(Digit(_restartable(data)))
    return MultiProduct(digits)
