"""Tests for bounded size-hint arithmetic and the configuration it reads."""

import pytest

import combichain as cc
from combichain import _size_hint as sh

MAX = 2**64 - 1


def test_checked_arithmetic() -> None:
    assert sh.checked_add(MAX - 1, 1) == cc.Some(MAX)
    assert sh.checked_add(MAX, 1).is_none()
    assert sh.checked_mul(2**32, 2**32 - 1).is_some()
    assert sh.checked_mul(2**32, 2**32).is_none()


def test_saturating_arithmetic() -> None:
    assert sh.saturating_add(MAX, 5) == MAX
    assert sh.saturating_mul(MAX, 2) == MAX
    assert sh.saturating_sub(3, 5) == 0


def test_add_hints() -> None:
    assert sh.add(cc.SizeHint.exact(MAX), cc.SizeHint.exact(1)) == cc.SizeHint(MAX, cc.NONE)
    assert sh.add(cc.SizeHint(1, cc.NONE), cc.SizeHint.exact(2)) == cc.SizeHint(3, cc.NONE)


def test_mul_hints() -> None:
    assert sh.mul(cc.SizeHint.exact(3), cc.SizeHint.exact(4)) == cc.SizeHint.exact(12)
    assert sh.mul(cc.SizeHint.unknown(), cc.SizeHint.exact(0)) == cc.SizeHint.exact(0)
    assert sh.mul(cc.SizeHint(2, cc.NONE), cc.SizeHint.exact(3)) == cc.SizeHint(6, cc.NONE)


def test_hint_of() -> None:
    it = iter([1, 2, 3])
    next(it)
    assert sh.hint_of(it) == cc.SizeHint.exact(2)
    assert sh.hint_of({"a": 1}) == cc.SizeHint.exact(1)
    assert sh.hint_of(range(10)) == cc.SizeHint.exact(10)
    assert sh.hint_of(x for x in range(3)) == cc.SizeHint.unknown()
    buf = cc.LazyBuffer.from_source([1, 2])
    assert sh.hint_of(buf) == buf.size_hint()


def test_size_hint_helpers() -> None:
    assert cc.SizeHint.exact(2).is_exact()
    assert not cc.SizeHint(2, cc.Some(3)).is_exact()
    assert cc.SizeHint.overflowed() == cc.SizeHint(MAX, cc.NONE)


@pytest.mark.usefixtures("restore_config")
def test_configured_word() -> None:
    """The counting bound follows the active config."""
    previous = cc.set_config(word_bits=16)
    assert previous.word_bits == 64
    assert cc.get_config().max_count() == 2**16 - 1
    assert sh.checked_mul(256, 256).is_none()
    assert sh.checked_mul(255, 257) == cc.Some(2**16 - 1)


@pytest.mark.usefixtures("restore_config")
def test_repr_truncation() -> None:
    cc.set_config(max_repr_items=3)
    buf = cc.LazyBuffer.from_source(range(10))
    buf.get(5)
    assert repr(buf) == "LazyBuffer(0, 1, 2, ..., exhausted=False)"


def test_config_is_frozen() -> None:
    with pytest.raises(AttributeError):
        cc.get_config().word_bits = 8  # type: ignore[misc]
