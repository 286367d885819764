from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import TypeIs

from . import _size_hint as sh
from ._buffer import Buffer, LazyBuffer, SeqBuffer, SizedBuffer
from ._core import Pipeable
from ._permutation_state import PermutationState
from ._results import NONE, Ok, Option, Some

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Unprobed:
    """Built from a producer, nothing pulled yet."""

    k: int


@dataclass(slots=True, frozen=True)
class GrowingUnknown:
    """At least `min_n` values exist, the total is not known yet."""

    k: int
    min_n: int


@dataclass(slots=True, frozen=True)
class Known:
    """The total length is known, enumeration is driven by `state`."""

    state: PermutationState


@dataclass(slots=True, frozen=True)
class Degenerate:
    """Fewer than k values exist."""


type FrontState = Unprobed | GrowingUnknown | Known | Degenerate


def _is_sequence[T](data: Iterable[T]) -> TypeIs[Sequence[T]]:
    return isinstance(data, Sequence)


def _check_k(k: int) -> None:
    if k < 0:
        msg = f"k must be non-negative, got {k}"
        raise ValueError(msg)


class Permutations[T](Pipeable, Iterator[tuple[T, ...]]):
    """Lazy k-permutations of the values of a buffer.

    Values are distinguished by position, not by equality.

    When the input length is unknown, permutations are produced before the
    input is fully read: as long as the producer keeps yielding, the next
    permutation is the first k - 1 values followed by the newest one, which
    is also what the full enumeration would produce at that point.
    Once the producer runs out, a `PermutationState` of the now known length is
    replayed past the permutations already emitted and takes over.

    Instances are built through `permutations`, `Permutations.from_iter` or
    `Permutations.from_buffer`.

    Args:
        vals (Buffer[T]): Where values are read from.
        state (FrontState): Initial state of the enumeration.
    """

    __slots__ = ("_state", "_vals")

    def __init__(self, vals: Buffer[T], state: FrontState) -> None:
        self._vals = vals
        self._state = state

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._state!r})"

    @classmethod
    def from_iter(cls, source: Iterable[T], k: int) -> Permutations[T]:
        """Permutations of a producer of unknown length.

        Nothing is pulled until the first permutation is requested.

        Example:
        ```python
        >>> import combichain as cc
        >>> perms = cc.Permutations.from_iter((x for x in "abc"), 2)
        >>> perms.size_hint()
        SizeHint(lower=0, upper=NONE)
        >>> perms.next()
        Some(value=('a', 'b'))

        ```
        """
        _check_k(k)
        return cls(LazyBuffer.from_source(source), Unprobed(k))

    @classmethod
    def from_buffer(cls, buffer: SizedBuffer[T], k: int) -> Permutations[T]:
        """Permutations of a buffer whose length is already known."""
        _check_k(k)
        return cls(buffer, Known(PermutationState(len(buffer), k)))

    @property
    def state(self) -> FrontState:
        return self._state

    def __next__(self) -> tuple[T, ...]:
        match self.next():
            case Some(perm):
                return perm
            case _:
                raise StopIteration

    def next(self) -> Option[tuple[T, ...]]:
        """Advance and return the next permutation, or `NONE` once exhausted."""
        self._advance()
        match self._state:
            case GrowingUnknown(k, min_n):
                return Some(self._assemble((*range(k - 1), min_n - 1)))
            case Known(state):
                return state.current().map(self._assemble)
            case _:
                return NONE

    def _advance(self) -> None:
        match self._state:
            case Unprobed(0):
                # the empty tuple is the only permutation, whatever the input
                state = PermutationState(0, 0)
                state.advance()
                self._state = Known(state)
            case Unprobed(k):
                if self._vals.get(k - 1).is_none():
                    logger.debug("fewer than %d values, no permutations", k)
                    self._state = Degenerate()
                else:
                    self._state = GrowingUnknown(k, k)
            case GrowingUnknown(k, min_n):
                if self._vals.get(min_n).is_some():
                    self._state = GrowingUnknown(k, min_n + 1)
                else:
                    self._state = Known(self._replay(min_n, k))
            case Known(state):
                state.advance()
            case Degenerate():
                pass

    @staticmethod
    def _replay(n: int, k: int) -> PermutationState:
        # The growing phase emitted the permutations whose first k - 1 slots are
        # the identity, i.e. those with last slot k - 1, k, ..., n - 1.
        emitted = n - k + 1
        state = PermutationState(n, k)
        # the first advance seeds the state on the first of them, the next `emitted` land just past the last
        for _ in range(emitted + 1):
            state.advance()
        logger.debug("input length resolved to %d, replayed %d permutations", n, emitted)
        return state

    def _assemble(self, indices: Sequence[int]) -> tuple[T, ...]:
        values = tuple(
            opt.unwrap() for opt in map(self._vals.get, indices) if opt.is_some()
        )
        assert len(values) == len(indices), "permutation length mismatch"
        return values

    def size_hint(self) -> sh.SizeHint:
        """Bounds on the number of permutations left, without pulling the input.

        While the input length is unknown, only a lower bound is given,
        derived from the values buffered so far.

        Example:
        ```python
        >>> import combichain as cc
        >>> perms = cc.permutations(iter("abcd"), 2)
        >>> _ = perms.next()
        >>> perms.size_hint()
        SizeHint(lower=1, upper=NONE)
        >>> perms = cc.permutations("abcd", 2)
        >>> _ = perms.next()
        >>> perms.size_hint()
        SizeHint(lower=11, upper=Some(value=11))

        ```
        """
        match self._state:
            case Known(state):
                return state.size_hint()
            case Degenerate():
                return sh.SizeHint.exact(0)
            case Unprobed(0):
                return sh.SizeHint.exact(1)
            case Unprobed(k):
                return self._growing_hint(k, 0)
            case GrowingUnknown(k, min_n):
                return self._growing_hint(k, min_n - k + 1)

    def _growing_hint(self, k: int, emitted: int) -> sh.SizeHint:
        match PermutationState(len(self._lazy()), k).remaining():
            case Ok(count):
                lower = count
            case _:
                lower = sh.SizeHint.overflowed().lower
        return sh.SizeHint(sh.saturating_sub(lower, emitted), NONE)

    def count(self) -> int:
        """Consume the iterator, returning how many permutations were left.

        The input is drained to learn its length. The count is exact.

        Example:
        ```python
        >>> import combichain as cc
        >>> perms = cc.permutations(iter(range(5)), 3)
        >>> _ = perms.next(), perms.next()
        >>> perms.count()
        58
        >>> perms.next()
        NONE

        ```
        """
        match self._state:
            case Known(state):
                count = state.exact_remaining()
            case Degenerate():
                count = 0
            case Unprobed(0):
                count = 1
            case Unprobed(k):
                count = math.perm(self._source_len(), k)
            case GrowingUnknown(k, min_n):
                count = math.perm(self._source_len(), k) - (min_n - k + 1)
        self._state = Degenerate()
        return count

    def _lazy(self) -> LazyBuffer[T]:
        vals = self._vals
        assert isinstance(vals, LazyBuffer), "unknown length outside of a LazyBuffer"
        return vals

    def _source_len(self) -> int:
        vals = self._lazy()
        return len(vals) + vals.count_remaining()


def permutations[T](data: Iterable[T], k: int) -> Permutations[T]:
    """Return all k-permutations of **data**, lazily.

    Sequences (lists, tuples, strings, ranges...) are read in place and their
    length is known upfront.
    Any other iterable is pulled only as far as the permutations requested so far need.

    Args:
        data (Iterable[T]): Values to permute.
        k (int): Length of each permutation.

    Returns:
        Permutations[T]: An iterator of tuples of length **k**.

    Raises:
        ValueError: If **k** is negative.

    Example:
    ```python
    >>> import combichain as cc
    >>> list(cc.permutations("abc", 2))
    [('a', 'b'), ('a', 'c'), ('b', 'a'), ('b', 'c'), ('c', 'a'), ('c', 'b')]
    >>> list(cc.permutations(iter([1, 2]), 0))
    [()]
    >>> list(cc.permutations((x for x in [1, 2]), 3))
    []

    ```
    """
    _check_k(k)
    if _is_sequence(data):
        return Permutations.from_buffer(SeqBuffer(data), k)
    return Permutations.from_iter(data, k)
