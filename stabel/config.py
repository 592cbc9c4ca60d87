"""Transpiler options and their environment defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

DEFAULT_STACK_SIZE = 255

_FALSE_WORDS = {"0", "false", "no", "off"}


def _env_flag(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() not in _FALSE_WORDS


def _env_int(name: str, value: Optional[str], default: int) -> int:
    if value is None or value.strip() == "":
        return default
    try:
        return int(value, 10)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer value, got '{value}'") from exc


@dataclass(frozen=True)
class TranspileOptions:
    stack_size: int = DEFAULT_STACK_SIZE
    trace_comments: bool = True
    strict_blocks: bool = True

    def __post_init__(self) -> None:
        if self.stack_size < 1:
            raise ValueError("stack_size must be at least 1")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TranspileOptions":
        """Build options from STABEL_STACK_SIZE, STABEL_TRACE and STABEL_STRICT_BLOCKS."""
        env = os.environ if environ is None else environ
        return cls(
            stack_size=_env_int("STABEL_STACK_SIZE", env.get("STABEL_STACK_SIZE"), DEFAULT_STACK_SIZE),
            trace_comments=_env_flag(env.get("STABEL_TRACE"), True),
            strict_blocks=_env_flag(env.get("STABEL_STRICT_BLOCKS"), True),
        )

    def override(self, **changes: Any) -> "TranspileOptions":
        """Return a copy with every non-None value in ``changes`` applied."""
        return replace(self, **{key: value for key, value in changes.items() if value is not None})


__all__ = ["TranspileOptions", "DEFAULT_STACK_SIZE"]
