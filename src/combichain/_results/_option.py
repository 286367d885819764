from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Never, TypeIs

if TYPE_CHECKING:
    from ._result import Result


class OptionUnwrapError(RuntimeError): ...


class Option[T](ABC):
    """A value that may be absent.

    Buffers return an `Option` from indexed reads, and engines from `next()`,
    so running out of data is an ordinary value rather than an exception.
    """

    __slots__ = ()

    @abstractmethod
    def is_some(self) -> TypeIs[Some[T]]:  # type: ignore[misc]
        """
        Returns `True` if the option holds a value.

        Example:
            ```python
            >>> import combichain as cc
            >>> buf = cc.LazyBuffer.from_source(iter("ab"))
            >>> buf.get(1).is_some()
            True
            >>> buf.get(2).is_some()
            False

            ```
        """
        ...

    @abstractmethod
    def is_none(self) -> TypeIs[NoneOption]:  # type: ignore[misc]
        """Returns `True` if the option is `NONE`."""
        ...

    @abstractmethod
    def unwrap(self) -> T:
        """
        Returns the contained value.

        Raises:
            OptionUnwrapError: If the option is `NONE`.

        Example:
            ```python
            >>> import combichain as cc
            >>> cc.Some("x").unwrap()
            'x'
            >>> cc.NONE.unwrap()
            Traceback (most recent call last):
                ...
            combichain._results._option.OptionUnwrapError: called `unwrap` on a `None`

            ```
        """
        ...

    def expect(self, msg: str) -> T:
        """
        Returns the contained value, or raises `OptionUnwrapError` carrying **msg**.

        Args:
            msg: The message to include in the exception if the option is `NONE`.

        Returns:
            The contained value.

        Raises:
            OptionUnwrapError: If the option is `NONE`.
        """
        if self.is_some():
            return self.unwrap()
        msg = f"{msg} (called `expect` on a `None`)"
        raise OptionUnwrapError(msg)

    def unwrap_or(self, default: T) -> T:
        """
        Returns the contained value or **default**.

        Example:
            ```python
            >>> import combichain as cc
            >>> buf = cc.LazyBuffer.from_source(iter([10, 20]))
            >>> buf.get(5).unwrap_or(-1)
            -1

            ```
        """
        return self.unwrap() if self.is_some() else default

    def map[U](self, f: Callable[[T], U]) -> Option[U]:
        """
        Applies **f** to a contained value, leaving `NONE` untouched.

        Example:
            ```python
            >>> import combichain as cc
            >>> cc.permutations("ab", 2).next().map("".join)
            Some(value='ab')
            >>> cc.permutations("ab", 3).next().map("".join)
            NONE

            ```
        """
        if self.is_some():
            return Some(f(self.unwrap()))
        return NONE

    def and_then[U](self, f: Callable[[T], Option[U]]) -> Option[U]:
        """
        Calls **f** with the contained value, or returns `NONE`.

        This is how checked arithmetic steps are chained: the first overflow
        short-circuits the rest of the computation.

        Example:
            ```python
            >>> import combichain as cc
            >>> from combichain._size_hint import checked_mul
            >>> cc.Some(6).and_then(lambda x: checked_mul(x, 7))
            Some(value=42)
            >>> cc.Some(2**63).and_then(lambda x: checked_mul(x, 2))
            NONE

            ```
        """
        if self.is_some():
            return f(self.unwrap())
        return NONE

    def ok_or[E](self, err: E) -> Result[T, E]:
        """
        Converts to `Ok(value)`, or to `Err(err)` when the option is `NONE`.

        Args:
            err: The error value to use if the option is `NONE`.

        Returns:
            Result[T, E]: The converted result.
        """
        from ._result import Err, Ok

        if self.is_some():
            return Ok(self.unwrap())
        return Err(err)


@dataclass(slots=True)
class Some[T](Option[T]):
    value: T

    def is_some(self) -> TypeIs[Some[T]]:  # type: ignore[misc]
        return True

    def is_none(self) -> TypeIs[NoneOption]:  # type: ignore[misc]
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(slots=True)
class NoneOption(Option[Any]):
    """Option variant representing the absence of a value."""

    def __repr__(self) -> str:
        return "NONE"

    def is_some(self) -> TypeIs[Some[Any]]:  # type: ignore[misc]
        return False

    def is_none(self) -> TypeIs[NoneOption]:  # type: ignore[misc]
        return True

    def unwrap(self) -> Never:
        raise OptionUnwrapError("called `unwrap` on a `None`")


NONE: Option[Any] = NoneOption()
"""Singleton instance representing the absence of a value."""
