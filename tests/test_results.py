"""Tests for Option and Result, as returned by the engines."""

import pytest

import combichain as cc


def _first(data: str, k: int) -> cc.Option[tuple[str, ...]]:
    return cc.permutations(iter(data), k).next()


def test_option_pattern_matching() -> None:
    """Engine outputs match on `Some` and fall through on `NONE`."""
    match _first("ab", 2):
        case cc.Some(value):
            assert value == ("a", "b")
        case _:
            pytest.fail("expected a permutation")

    match _first("ab", 3):
        case cc.Some(value):
            pytest.fail(f"unexpected permutation {value!r}")
        case _:
            pass


def test_result_pattern_matching() -> None:
    """Bounded counts match on `Ok` or `Err`."""
    match cc.PermutationState(6, 3).remaining():
        case cc.Ok(count):
            assert count == 120
        case cc.Err(error):
            pytest.fail(f"unexpected overflow {error}")

    match cc.PermutationState(25, 25).remaining():
        case cc.Ok(count):
            pytest.fail(f"unexpected count {count}")
        case cc.Err(error):
            assert isinstance(error, cc.CountOverflowError)
            assert error.bound == cc.get_config().max_count()


def test_option_unwrap() -> None:
    assert cc.Some(3).unwrap() == 3
    with pytest.raises(cc.OptionUnwrapError):
        cc.NONE.unwrap()
    with pytest.raises(cc.OptionUnwrapError, match="no permutation"):
        _first("a", 2).expect("no permutation")


def test_option_combinators() -> None:
    assert cc.Some(2).map(lambda x: x + 1) == cc.Some(3)
    assert cc.NONE.map(lambda x: x + 1) is cc.NONE
    assert cc.Some(2).and_then(lambda _: cc.NONE).is_none()
    assert cc.NONE.unwrap_or(5) == 5
    assert cc.Some(1).ok_or("missing") == cc.Ok(1)
    assert cc.NONE.ok_or("missing") == cc.Err("missing")
    assert repr(cc.NONE) == "NONE"


def test_result_unwrap() -> None:
    assert cc.Ok(1).unwrap() == 1
    assert cc.Err("e").unwrap_err() == "e"
    with pytest.raises(cc.ResultUnwrapError):
        cc.Ok(1).unwrap_err()
    with pytest.raises(cc.ResultUnwrapError, match="called `unwrap` on Err"):
        cc.Err("e").unwrap()


def test_result_conversions() -> None:
    assert cc.Ok(1).ok() == cc.Some(1)
    assert cc.Ok(1).err().is_none()
    assert cc.Err("e").err() == cc.Some("e")
    assert cc.Err("e").ok().is_none()
    assert cc.Err("e").unwrap_or(0) == 0
    assert cc.Err("e").map(lambda x: x + 1) == cc.Err("e")
