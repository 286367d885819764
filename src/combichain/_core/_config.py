from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any

from ._format import items_repr


@dataclass(slots=True, frozen=True)
class Config:
    """Global settings of the combinatorial engines.

    Args:
        word_bits (int): Width of the machine word exact counts are checked against.
            Counts above `2 ** word_bits - 1` are reported as overflowing.
        max_repr_items (int): Maximum number of buffered items shown by `repr`.
    """

    word_bits: int = 64
    max_repr_items: int = 20

    def max_count(self) -> int:
        """Largest count representable in the configured word."""
        return (1 << self.word_bits) - 1

    def iter_repr(self, v: Iterable[Any]) -> str:
        return items_repr(v, self.max_repr_items)


_CONFIG = Config()


def get_config() -> Config:
    """Return the active `Config`.

    Example:
    ```python
    >>> import combichain as cc
    >>> cc.get_config().max_count() == 2**64 - 1
    True

    ```
    """
    return _CONFIG


def set_config(**changes: Any) -> Config:
    """Replace fields of the active `Config`, returning the previous one.

    Args:
        **changes (Any): Fields to override, as accepted by `dataclasses.replace`.

    Returns:
        Config: The configuration that was active before the call.

    Example:
    ```python
    >>> import combichain as cc
    >>> previous = cc.set_config(word_bits=8)
    >>> cc.get_config().max_count()
    255
    >>> _ = cc.set_config(word_bits=previous.word_bits)

    ```
    """
    global _CONFIG  # noqa: PLW0603
    previous = _CONFIG
    _CONFIG = replace(_CONFIG, **changes)
    return previous
