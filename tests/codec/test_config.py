import pytest

from runecode import decode, encode
from runecode.ast import FunctionLiteral, Number
from runecode.config import (
    MAX_SAFE_DEPTH,
    DecodeLimits,
    load_decode_limits,
)
from runecode.errors import RecursionLimitExceeded


def test_defaults_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("RUNECODE_MAX_DEPTH", raising=False)
    monkeypatch.delenv("RUNECODE_MAX_LENGTH", raising=False)
    assert load_decode_limits() == DecodeLimits()


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RUNECODE_MAX_DEPTH", "3")
    monkeypatch.setenv("RUNECODE_MAX_LENGTH", "0x100")
    limits = load_decode_limits()
    assert limits.max_depth == 3
    assert limits.max_length == 0x100


def test_decoder_uses_environment_limits(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RUNECODE_MAX_DEPTH", "1")
    node = FunctionLiteral([FunctionLiteral([Number(1.0)])])
    with pytest.raises(RecursionLimitExceeded):
        decode(encode(node))


def test_invalid_environment_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RUNECODE_MAX_DEPTH", "deep")
    with pytest.raises(ValueError, match="RUNECODE_MAX_DEPTH"):
        load_decode_limits()


def test_limits_are_bounded() -> None:
    with pytest.raises(ValueError):
        DecodeLimits(max_depth=MAX_SAFE_DEPTH + 1)
    with pytest.raises(ValueError):
        DecodeLimits(max_depth=-1)
    with pytest.raises(ValueError):
        DecodeLimits(max_length=-1)
