"""Tests for coro._vendor value types."""


import pytest

from coro._vendor import NOTHING, Err, FrozenDict, Nothing, Ok


def test_ok_accessors():
    result = Ok(3)

    assert not result.is_err()
    assert result.ok() == 3
    assert result.err() is None
    assert result.unwrap() == 3


def test_err_accessors():
    boom = ValueError("boom")
    result = Err(boom)

    assert result.is_err()
    assert result.ok() is None
    assert result.err() is boom


def test_err_unwrap_raises_stored_error():
    boom = KeyError("missing")

    with pytest.raises(KeyError) as excinfo:
        Err(boom).unwrap()

    assert excinfo.value is boom


def test_err_can_hold_an_interruption():
    stop = KeyboardInterrupt()

    assert Err(stop).err() is stop


def test_ok_of_none_is_a_success():
    # a successful body may legitimately return None
    assert not Ok(None).is_err()
    assert Ok(None).unwrap() is None


def test_nothing_is_a_falsy_singleton():
    assert Nothing() is NOTHING
    assert not NOTHING
    assert repr(NOTHING) == "Nothing()"


def test_frozendict_is_immutable():
    view = FrozenDict({1: "a"})

    with pytest.raises(TypeError):
        view[2] = "b"  # type: ignore[index]
