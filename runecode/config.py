from __future__ import annotations

from dataclasses import dataclass
import os

DEFAULT_MAX_DEPTH = 64
DEFAULT_MAX_LENGTH = 1 << 24
# Each nesting level costs a few Python frames in the decoder.
MAX_SAFE_DEPTH = 200


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip(), 0)
    except ValueError:
        raise ValueError(f"{name} must be an integer (got {raw!r})") from None


@dataclass(frozen=True)
class DecodeLimits:
    max_depth: int = DEFAULT_MAX_DEPTH
    max_length: int = DEFAULT_MAX_LENGTH

    def __post_init__(self) -> None:
        if not 0 <= self.max_depth <= MAX_SAFE_DEPTH:
            raise ValueError(
                f"max_depth must be between 0 and {MAX_SAFE_DEPTH} (got {self.max_depth})"
            )
        if self.max_length < 0:
            raise ValueError(f"max_length must be non-negative (got {self.max_length})")


def load_decode_limits() -> DecodeLimits:
    return DecodeLimits(
        max_depth=_env_int("RUNECODE_MAX_DEPTH", DEFAULT_MAX_DEPTH),
        max_length=_env_int("RUNECODE_MAX_LENGTH", DEFAULT_MAX_LENGTH),
    )


__all__ = ["DecodeLimits", "load_decode_limits", "MAX_SAFE_DEPTH"]
