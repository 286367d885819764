"""Size-hint arithmetic bounded by the configured machine word.

Python integers never overflow, but counts of combinatorial families grow so
fast that callers still need to know when an exact figure stops being useful.
Every count here is checked against `Config.max_count()`: checked operations
return `NONE` past that bound, saturating ones clamp to it.
"""

from __future__ import annotations

import operator
from typing import Any, NamedTuple

from ._core import get_config
from ._results import NONE, Option, Some


class CountOverflowError(ArithmeticError):
    """An exact count does not fit in the configured word."""

    def __init__(self, bound: int) -> None:
        super().__init__(f"count exceeds {bound}")
        self.bound = bound


class SizeHint(NamedTuple):
    """Bounds on the number of items an iterator has left.

    `upper` is `NONE` when no exact upper bound is known or representable.
    """

    lower: int
    upper: Option[int]

    @staticmethod
    def exact(count: int) -> SizeHint:
        return SizeHint(count, Some(count))

    @staticmethod
    def unknown() -> SizeHint:
        return SizeHint(0, NONE)

    @staticmethod
    def overflowed() -> SizeHint:
        return SizeHint(get_config().max_count(), NONE)

    def is_exact(self) -> bool:
        """
        Example:
        ```python
        >>> from combichain import SizeHint
        >>> SizeHint.exact(3).is_exact()
        True
        >>> SizeHint.unknown().is_exact()
        False

        ```
        """
        return self.upper.map(lambda hi: hi == self.lower).unwrap_or(False)


def _bounded(value: int) -> Option[int]:
    return Some(value) if value <= get_config().max_count() else NONE


def checked_add(a: int, b: int) -> Option[int]:
    return _bounded(a + b)


def checked_mul(a: int, b: int) -> Option[int]:
    return _bounded(a * b)


def saturating_add(a: int, b: int) -> int:
    return min(a + b, get_config().max_count())


def saturating_mul(a: int, b: int) -> int:
    return min(a * b, get_config().max_count())


def saturating_sub(a: int, b: int) -> int:
    return max(a - b, 0)


def add(a: SizeHint, b: SizeHint) -> SizeHint:
    """Hint of two iterators chained one after the other.

    Example:
    ```python
    >>> from combichain import SizeHint
    >>> from combichain import _size_hint as sh
    >>> sh.add(SizeHint.exact(2), SizeHint.exact(3))
    SizeHint(lower=5, upper=Some(value=5))
    >>> sh.add(SizeHint.exact(2), SizeHint.unknown())
    SizeHint(lower=2, upper=NONE)

    ```
    """
    lower = saturating_add(a.lower, b.lower)
    upper = a.upper.and_then(lambda x: b.upper.and_then(lambda y: checked_add(x, y)))
    return SizeHint(lower, upper)


def mul(a: SizeHint, b: SizeHint) -> SizeHint:
    """Hint of the product of two iterators.

    A known zero on either side makes the product exactly zero.

    Example:
    ```python
    >>> from combichain import SizeHint
    >>> from combichain import _size_hint as sh
    >>> sh.mul(SizeHint.exact(0), SizeHint.unknown())
    SizeHint(lower=0, upper=Some(value=0))
    >>> sh.mul(SizeHint.exact(2**40), SizeHint.exact(2**40)).upper
    NONE

    ```
    """
    lower = saturating_mul(a.lower, b.lower)
    match a.upper, b.upper:
        case Some(x), Some(y):
            upper = checked_mul(x, y)
        case Some(0), _:
            upper = Some(0)
        case _, Some(0):
            upper = Some(0)
        case _:
            upper = NONE
    return SizeHint(lower, upper)


def hint_of(obj: Any) -> SizeHint:
    """Derive a `SizeHint` for an arbitrary iterable or iterator.

    Objects exposing their own `size_hint()` are trusted first, then `len()`,
    then `operator.length_hint`, which builtin iterators report exactly.
    Anything else, such as a generator, is unknown.

    Example:
    ```python
    >>> from combichain._size_hint import hint_of
    >>> hint_of(iter([1, 2, 3]))
    SizeHint(lower=3, upper=Some(value=3))
    >>> hint_of(x for x in "abc")
    SizeHint(lower=0, upper=NONE)

    ```
    """
    size_hint = getattr(obj, "size_hint", None)
    if callable(size_hint):
        return size_hint()
    try:
        return SizeHint.exact(len(obj))
    except TypeError:
        pass
    hint = operator.length_hint(obj, -1)
    return SizeHint.unknown() if hint < 0 else SizeHint.exact(hint)
