"""Nodes, links and class bindings of a flowchart."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from flowmark.shapes import LinkType, NodeShape
from flowmark.style import LinkStyle, NodeStyle, format_style

_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9\-_!#$]+")


def derive_id(text: str) -> str:
    return _UNSAFE_ID_CHARS.sub("", text)


@dataclass(slots=True)
class ChartNode:
    label: str = ""
    shape: NodeShape = NodeShape.RECT_ROUND
    node_id: str = ""
    class_name: str | None = None

    @property
    def id(self) -> str:
        # Derived once from the label, then fixed for the node's lifetime.
        if not self.node_id and self.label:
            self.node_id = derive_id(self.label)
        return self.node_id

    def __str__(self) -> str:
        suffix = f":::{self.class_name}" if self.class_name else ""
        return f"{self.id}{self.shape.wrap(self.label)}{suffix}"


# A node is referenced either by a literal identifier or by the node itself.
NodeRef = str | ChartNode


def node_id(ref: NodeRef) -> str:
    if isinstance(ref, ChartNode):
        return ref.id
    return ref


@dataclass(slots=True)
class Link:
    src: NodeRef
    dest: NodeRef
    text: str | None = None
    kind: LinkType = LinkType.ARROW
    style: str | LinkStyle | None = None

    def set_style(self, style: str | LinkStyle) -> Link:
        self.style = style
        return self

    @property
    def has_style(self) -> bool:
        return self.style is not None

    def format_style(self, index: int) -> str:
        if self.style is None:
            return ""
        return f"linkStyle {index} {format_style(self.style)};"

    def __str__(self) -> str:
        label = f"|{self.text}|" if self.text else ""
        return f"{node_id(self.src)} {self.kind.value} {label}{node_id(self.dest)}"


@dataclass(slots=True)
class ClassDef:
    class_names: str | Sequence[str]
    style: str | NodeStyle

    @property
    def names(self) -> list[str]:
        if isinstance(self.class_names, str):
            return [self.class_names]
        return list(self.class_names)

    def __str__(self) -> str:
        return f"classDef {','.join(self.names)} {format_style(self.style)}"


@dataclass(slots=True)
class ClassAttachment:
    nodes: NodeRef | Sequence[NodeRef]
    class_name: str

    @property
    def node_ids(self) -> list[str]:
        if isinstance(self.nodes, (str, ChartNode)):
            return [node_id(self.nodes)]
        return [node_id(node) for node in self.nodes]

    def __str__(self) -> str:
        return f"class {','.join(self.node_ids)} {self.class_name};"
