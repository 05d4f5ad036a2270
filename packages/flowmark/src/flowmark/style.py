"""Style value objects for nodes, class definitions and links."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(slots=True)
class NodeStyle:
    fill: str | None = None
    stroke: str | None = None
    stroke_width: str | None = None
    color: str | None = None
    stroke_dasharray: str | Sequence[float] | None = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.fill:
            parts.append(f"fill:{self.fill}")
        if self.stroke:
            parts.append(f"stroke:{self.stroke}")
        if self.stroke_width:
            parts.append(f"stroke-width:{self.stroke_width}")
        if self.color:
            parts.append(f"color:{self.color}")
        if self.stroke_dasharray:
            parts.append(f"stroke-dasharray:{_format_dasharray(self.stroke_dasharray)}")
        return ",".join(parts)


@dataclass(slots=True)
class LinkStyle:
    stroke: str | None = None
    stroke_width: str | None = None
    color: str | None = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.stroke:
            parts.append(f"stroke:{self.stroke}")
        if self.stroke_width:
            parts.append(f"stroke-width:{self.stroke_width}")
        if self.color:
            parts.append(f"color:{self.color}")
        return ",".join(parts)


def format_style(style: str | NodeStyle | LinkStyle) -> str:
    """Resolve a raw style string or a structured style to its text form."""
    if isinstance(style, str):
        return style
    return str(style)


def _format_dasharray(value: str | Sequence[float]) -> str:
    if isinstance(value, str):
        return value
    return " ".join(_format_number(item) for item in value)


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
