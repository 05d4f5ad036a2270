"""Flowchart container and its serializer.

A top-level chart and a nested subgraph are the same ``Chart`` type; they
differ only in their framing, which decides the header and footer lines.
Link indices are global: every link statement in the document, however
deeply nested, takes the next number in document order.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from flowmark.config import DEFAULT_INDENT, FlowchartConfig
from flowmark.errors import SubgraphIdentifierError
from flowmark.model import ChartNode, ClassAttachment, ClassDef, Link, NodeRef, node_id
from flowmark.shapes import Direction, LinkType
from flowmark.style import LinkStyle, format_style

_UNSAFE_SUBGRAPH_ID_CHARS = re.compile(r"[^A-Za-z0-9\-_]+")


@dataclass(slots=True, frozen=True)
class RootFraming:
    def header(self, chart: Chart, indent: str, unit: str) -> list[str]:
        lines: list[str] = []
        if chart.title:
            lines.append(f"{indent}---")
            lines.append(f"{indent}title: {chart.title}")
            lines.append(f"{indent}---")
        lines.append(f"{indent}flowchart {chart.direction.value}")
        return lines

    def footer(self, indent: str) -> list[str]:
        return [""]


@dataclass(slots=True, frozen=True)
class SubgraphFraming:
    id: str

    def header(self, chart: Chart, indent: str, unit: str) -> list[str]:
        return [
            f"{indent}subgraph {self.id} [{chart.title or ''}]",
            f"{indent}{unit}direction {chart.direction.value}",
        ]

    def footer(self, indent: str) -> list[str]:
        return [f"{indent}end"]


Framing = RootFraming | SubgraphFraming


@dataclass(slots=True)
class Chart:
    title: str | None = None
    direction: Direction = Direction.TD
    framing: Framing = field(default_factory=RootFraming)
    nodes: list[ChartNode] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    subgraphs: list[Chart] = field(default_factory=list)
    class_defs: list[ClassDef] = field(default_factory=list)
    class_attachments: list[ClassAttachment] = field(default_factory=list)
    positional_link_styles: list[tuple[int, str | LinkStyle]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.direction = Direction(self.direction)

    @classmethod
    def from_config(cls, config: FlowchartConfig, title: str | None = None) -> Chart:
        return cls(title=title, direction=config.default_direction)

    @classmethod
    def subgraph(
        cls,
        title: str | None = None,
        direction: Direction | str | None = None,
        *,
        subgraph_id: str | None = None,
        config: FlowchartConfig | None = None,
    ) -> Chart:
        """Create a nested container, identified explicitly or by its title."""
        if direction is None:
            direction = (config or FlowchartConfig()).default_direction
        framing = SubgraphFraming(_resolve_subgraph_id(title, subgraph_id))
        return cls(title=title, direction=direction, framing=framing)

    def as_subgraph(self, subgraph_id: str | None = None) -> Chart:
        """Reframe this chart as a nested container, keeping its contents."""
        if subgraph_id is not None or not self.is_subgraph:
            self.framing = SubgraphFraming(_resolve_subgraph_id(self.title, subgraph_id))
        return self

    @classmethod
    def parse(cls, source: str) -> Chart:
        from flowmark.parser.parser import parse_flowchart

        return parse_flowchart(source)

    @property
    def is_subgraph(self) -> bool:
        return isinstance(self.framing, SubgraphFraming)

    @property
    def id(self) -> str | None:
        if isinstance(self.framing, SubgraphFraming):
            return self.framing.id
        return None

    # --- Construction ---

    def add_node(self, node: ChartNode | str) -> Chart:
        if isinstance(node, str):
            node = ChartNode(node)
        self.nodes.append(node)
        return self

    def add_nodes(self, nodes: Iterable[ChartNode | str]) -> Chart:
        for node in nodes:
            self.add_node(node)
        return self

    def add_link(self, link: Link) -> Chart:
        self.links.append(link)
        return self

    def add_link_between(
        self,
        src: NodeRef,
        dest: NodeRef,
        text: str | None = None,
        kind: LinkType = LinkType.ARROW,
    ) -> Chart:
        return self.add_link(Link(node_id(src), node_id(dest), text=text, kind=kind))

    def add_class_def(self, class_def: ClassDef) -> Chart:
        self.class_defs.append(class_def)
        return self

    def attach_class(self, nodes: NodeRef | Iterable[NodeRef], class_name: str) -> Chart:
        if not isinstance(nodes, (str, ChartNode)):
            nodes = list(nodes)
        self.class_attachments.append(ClassAttachment(nodes, class_name))
        return self

    def add_link_style(self, link: int | Link, style: str | LinkStyle) -> Chart:
        """Style a link object inline, or the link at an absolute document index."""
        if isinstance(link, Link):
            link.set_style(style)
        else:
            self.positional_link_styles.append((link, style))
        return self

    def add_subgraph(self, subgraph: Chart) -> Chart:
        """Nest a chart; a top-level chart is reframed using its title as id."""
        subgraph.as_subgraph()
        self.subgraphs.append(subgraph)
        return self

    # --- Traversal ---

    def iter_links(self) -> Iterator[Link]:
        """Yield every link in the tree in document (link index) order."""
        yield from self.links
        for subgraph in self.subgraphs:
            yield from subgraph.iter_links()

    @property
    def link_count(self) -> int:
        return sum(1 for _ in self.iter_links())

    # --- Serialization ---

    def to_text(self, config: FlowchartConfig | None = None) -> str:
        unit = (config or FlowchartConfig()).indent
        text, _ = self.render(unit=unit)
        return text

    def render(
        self, indent: str = "", link_index: int = 0, *, unit: str = DEFAULT_INDENT
    ) -> tuple[str, int]:
        """Render this chart and return the text with the next free link index."""
        body, next_index = self._render_body(indent + unit, link_index, unit)
        lines = self.framing.header(self, indent, unit)
        lines.append(body)
        lines.extend(self.framing.footer(indent))
        return "\n".join(lines), next_index

    def _render_body(self, indent: str, link_index: int, unit: str) -> tuple[str, int]:
        lines = [f"{indent}{node}" for node in self.nodes]

        for link in self.links:
            lines.append(f"{indent}{link}")
            if link.has_style:
                lines.append(f"{indent}{link.format_style(link_index)}")
            link_index += 1

        for subgraph in self.subgraphs:
            text, link_index = subgraph.render(indent, link_index, unit=unit)
            lines.append(text)

        lines.extend(f"{indent}{class_def}" for class_def in self.class_defs)
        lines.extend(f"{indent}{attachment}" for attachment in self.class_attachments)

        for position, style in self.positional_link_styles:
            lines.append(f"{indent}linkStyle {position} {format_style(style)};")

        return "\n".join(lines), link_index

    def __str__(self) -> str:
        return self.to_text()


def _resolve_subgraph_id(title: str | None, subgraph_id: str | None) -> str:
    resolved = subgraph_id or _UNSAFE_SUBGRAPH_ID_CHARS.sub("", title or "")
    if not resolved:
        raise SubgraphIdentifierError(
            f"Subgraph {title!r} needs an explicit id or a title with identifier characters"
        )
    return resolved
