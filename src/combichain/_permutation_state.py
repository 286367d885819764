"""Index-space odometer enumerating the k-permutations of `range(n)`.

The enumeration is the cycle-counter method of Python's own reference
`itertools.permutations`, run in place over an owned index list:

- `indices` holds all n positions, the first k of which are the current permutation.
- `cycles[i]` counts how many more candidates output slot i will cycle through.

The values never appear here, which keeps the state reusable for any buffer kind.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from . import _size_hint as sh
from ._core import Pipeable, get_config
from ._results import NONE, Err, Ok, Option, Result, Some


@dataclass(slots=True, frozen=True)
class Stopped:
    """Not started yet."""

    n: int
    k: int


@dataclass(slots=True)
class Ongoing:
    """Mid-enumeration. `indices[:len(cycles)]` is the current permutation."""

    indices: list[int]
    cycles: list[int]


@dataclass(slots=True, frozen=True)
class Empty:
    """No permutations left, either because k > n or because all were produced."""


type IndexState = Stopped | Ongoing | Empty


def _exact_add(a: int, b: int) -> Option[int]:
    return Some(a + b)


def _exact_mul(a: int, b: int) -> Option[int]:
    return Some(a * b)


class PermutationState(Pipeable, Iterator[tuple[int, ...]]):
    """The k-permutations of `range(n)`, as tuples of indices.

    Args:
        n (int): Number of positions to choose from.
        k (int): Length of each permutation.

    Example:
    ```python
    >>> import combichain as cc
    >>> list(cc.PermutationState(3, 2))
    [(0, 1), (0, 2), (1, 0), (1, 2), (2, 0), (2, 1)]
    >>> list(cc.PermutationState(0, 0))
    [()]
    >>> list(cc.PermutationState(2, 3))
    []

    ```
    """

    __slots__ = ("_state",)

    def __init__(self, n: int, k: int) -> None:
        if n < 0 or k < 0:
            msg = f"n and k must be non-negative, got n={n}, k={k}"
            raise ValueError(msg)
        self._state: IndexState = Stopped(n, k)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._state!r})"

    def __next__(self) -> tuple[int, ...]:
        match self.next():
            case Some(indices):
                return indices
            case _:
                raise StopIteration

    @property
    def state(self) -> IndexState:
        return self._state

    def next(self) -> Option[tuple[int, ...]]:
        """Advance, then return the new current permutation."""
        self.advance()
        return self.current()

    def advance(self) -> None:
        """Move to the next permutation in place.

        From `Stopped`, seeds the identity permutation. From `Ongoing`, scans the
        output slots right to left: a slot whose counter is spent rotates its
        index to the end and resets, the first slot with a live counter swaps
        and stops the scan. When every slot is spent the enumeration is over.
        """
        match self._state:
            case Stopped(n, k) if k > n:
                self._state = Empty()
            case Stopped(n, k):
                self._state = Ongoing(
                    indices=list(range(n)),
                    cycles=list(range(n - 1, n - k - 1, -1)),
                )
            case Ongoing(indices, cycles):
                n = len(indices)
                for i in reversed(range(len(cycles))):
                    if cycles[i] == 0:
                        cycles[i] = n - i - 1
                        indices.append(indices.pop(i))
                    else:
                        j = n - cycles[i]
                        indices[i], indices[j] = indices[j], indices[i]
                        cycles[i] -= 1
                        return
                self._state = Empty()
            case Empty():
                pass

    def current(self) -> Option[tuple[int, ...]]:
        match self._state:
            case Ongoing(indices, cycles):
                return Some(tuple(indices[: len(cycles)]))
            case _:
                return NONE

    def remaining(self) -> Result[int, sh.CountOverflowError]:
        """Count the permutations still to come, without advancing.

        The count is checked against the configured word: if it does not fit,
        an `Err` is returned instead of a truncated number.

        Returns:
            Result[int, CountOverflowError]: The exact count, or the overflow.

        Example:
        ```python
        >>> import combichain as cc
        >>> state = cc.PermutationState(4, 2)
        >>> state.remaining()
        Ok(value=12)
        >>> state.advance()
        >>> state.remaining()
        Ok(value=11)
        >>> cc.PermutationState(21, 21).remaining().is_err()
        True

        ```
        """
        match self._count(sh.checked_add, sh.checked_mul):
            case Some(count):
                return Ok(count)
            case _:
                return Err(sh.CountOverflowError(get_config().max_count()))

    def exact_remaining(self) -> int:
        """Same as `remaining`, with no word bound."""
        return self._count(_exact_add, _exact_mul).unwrap()

    def size_hint(self) -> sh.SizeHint:
        match self.remaining():
            case Ok(count):
                return sh.SizeHint.exact(count)
            case _:
                return sh.SizeHint.overflowed()

    def _count(
        self,
        add: Callable[[int, int], Option[int]],
        mul: Callable[[int, int], Option[int]],
    ) -> Option[int]:
        match self._state:
            case Stopped(n, k) if k > n:
                return Some(0)
            case Stopped(n, k):
                # falling factorial n * (n - 1) * ... * (n - k + 1)
                count: Option[int] = Some(1)
                for factor in range(n - k + 1, n + 1):
                    count = count.and_then(lambda acc, f=factor: mul(acc, f))
                    if count.is_none():
                        break
                return count
            case Ongoing(indices, cycles):
                # cycles read as a mixed-radix number, slot i having radix n - i
                n = len(indices)
                count = Some(0)
                for i, c in enumerate(cycles):
                    count = count.and_then(lambda acc, r=n - i: mul(acc, r)).and_then(
                        lambda acc, c=c: add(acc, c)
                    )
                    if count.is_none():
                        break
                return count
            case Empty():
                return Some(0)
