from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from flowmark.errors import ConfigurationError
from flowmark.shapes import Direction

DEFAULT_INDENT = "  "


@dataclass(slots=True, frozen=True)
class FlowchartConfig:
    indent: str = DEFAULT_INDENT
    default_direction: Direction = Direction.TD

    @classmethod
    def from_env(cls, *, environ: Mapping[str, str] | None = None) -> FlowchartConfig:
        """Build a config from FLOWMARK_* variables in the environment."""
        env = os.environ if environ is None else environ
        return cls(
            indent=_indent_from_env(env.get("FLOWMARK_INDENT")),
            default_direction=_direction_from_env(env.get("FLOWMARK_DIRECTION")),
        )


def _indent_from_env(raw: str | None) -> str:
    if not raw:
        return DEFAULT_INDENT
    try:
        width = int(raw)
    except ValueError:
        raise ConfigurationError(
            f"FLOWMARK_INDENT must be a number of spaces, got {raw!r}"
        ) from None
    if width < 1:
        raise ConfigurationError(f"FLOWMARK_INDENT must be positive, got {width}")
    return " " * width


def _direction_from_env(raw: str | None) -> Direction:
    if not raw:
        return Direction.TD
    try:
        return Direction(raw.strip().upper())
    except ValueError:
        choices = ", ".join(direction.value for direction in Direction)
        raise ConfigurationError(
            f"FLOWMARK_DIRECTION must be one of {choices}, got {raw!r}"
        ) from None
