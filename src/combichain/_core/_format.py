from collections.abc import Iterable, Sized
from pprint import pformat
from typing import Any

import cytoolz as cz


def items_repr(
    v: Iterable[Any],
    max_items: int = 20,
    width: int = 80,
    *,
    compact: bool = True,
) -> str:
    truncated = list(cz.itertoolz.take(max_items, v))
    suffix = ", ..." if isinstance(v, Sized) and len(v) > max_items else ""
    return pformat(truncated, width=width, compact=compact)[1:-1] + suffix
