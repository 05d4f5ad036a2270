import logging
from dataclasses import dataclass, field

from flowmark.chart import Chart
from flowmark.errors import (
    DirectionError,
    FrontMatterError,
    SubgraphDirectionError,
    UnclosedSubgraphError,
    UnexpectedEndError,
    UnsupportedLineError,
)
from flowmark.model import ChartNode, ClassDef, Link
from flowmark.parser.lexer import (
    CLASS_ATTACHMENT_RE,
    CLASS_DEF_RE,
    CLASS_SEPARATOR,
    DIRECTION_RE,
    END_TOKEN,
    FLOWCHART_RE,
    FRONT_MATTER_FENCE,
    LINK_RE,
    LINK_STYLE_RE,
    NODE_ID_RE,
    SUBGRAPH_RE,
    TITLE_RE,
    Line,
    lex,
)
from flowmark.shapes import SHAPE_PRIORITY, Direction, LinkType

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ParseState:
    """Link bookkeeping shared by every level of the recursive descent."""

    next_link_index: int = 0
    links_by_index: dict[int, Link] = field(default_factory=dict)
    last_link_index: int | None = None

    def register_link(self, link: Link) -> int:
        index = self.next_link_index
        self.links_by_index[index] = link
        self.last_link_index = index
        self.next_link_index += 1
        return index


class FlowchartParser:
    def __init__(self, source: str):
        self._lines = lex(source)
        self._index = 0

    def parse(self) -> Chart:
        self._skip_blank()
        title = self._parse_front_matter()
        self._skip_blank()
        chart = Chart(title=title, direction=self._parse_header())

        state = ParseState()
        self._parse_body(chart, state, nested=False)
        logger.debug(
            "Parsed flowchart: %d top-level nodes, %d links, %d subgraphs",
            len(chart.nodes),
            state.next_link_index,
            len(chart.subgraphs),
        )
        return chart

    def _parse_front_matter(self) -> str | None:
        if self._at_end() or self._peek().text != FRONT_MATTER_FENCE:
            return None

        opening = self._consume()
        title = None
        while not self._at_end() and self._peek().text != FRONT_MATTER_FENCE:
            match = TITLE_RE.match(self._consume().text)
            if match:
                title = match.group(1)

        if self._at_end():
            raise FrontMatterError(
                f"Front matter opened at line {opening.number} is missing its closing ---",
                line_number=opening.number,
            )
        self._consume()
        return title

    def _parse_header(self) -> Direction:
        if self._at_end():
            raise DirectionError("Missing flowchart declaration")

        line = self._consume()
        match = FLOWCHART_RE.match(line.text)
        if not match:
            raise DirectionError(
                f"Invalid flowchart declaration at line {line.number}: {line.text!r}",
                line_number=line.number,
            )
        return Direction(match.group(1))

    def _parse_body(self, chart: Chart, state: ParseState, nested: bool) -> bool:
        """Parse statements into chart; return True when stopped by an end line."""
        after_link = False

        while not self._at_end():
            line = self._consume()
            if line.blank:
                continue

            if line.text == END_TOKEN:
                if not nested:
                    raise UnexpectedEndError(
                        f"Unexpected 'end' at line {line.number} outside of a subgraph",
                        line_number=line.number,
                    )
                return True

            after_link = self._parse_statement(line, chart, state, after_link)

        return False

    def _parse_statement(
        self, line: Line, chart: Chart, state: ParseState, after_link: bool
    ) -> bool:
        text = line.text

        match = SUBGRAPH_RE.match(text)
        if match:
            chart.add_subgraph(self._parse_subgraph(line, match.group(1), match.group(2), state))
            return False

        match = CLASS_DEF_RE.match(text)
        if match:
            names = match.group(1)
            class_names = [name.strip() for name in names.split(",")] if "," in names else names
            chart.add_class_def(ClassDef(class_names, (match.group(2) or "").strip()))
            return False

        match = CLASS_ATTACHMENT_RE.match(text)
        if match:
            nodes = [item.strip() for item in match.group(1).split(",")]
            chart.attach_class(nodes[0] if len(nodes) == 1 else nodes, match.group(2))
            return False

        match = LINK_STYLE_RE.match(text)
        if match:
            style = match.group(2).strip().removesuffix(";")
            self._apply_link_style(chart, state, int(match.group(1)), style, after_link)
            return False

        match = LINK_RE.match(text)
        if match:
            src, kind, label, dest = match.groups()
            link = Link(src, dest, text=label, kind=LinkType(kind))
            chart.add_link(link)
            state.register_link(link)
            return True

        node = parse_node(text)
        if node is not None:
            chart.add_node(node)
            return False

        raise UnsupportedLineError(
            f"Unsupported flowchart line {line.number}: {text!r}", line_number=line.number
        )

    def _parse_subgraph(
        self, opening: Line, subgraph_id: str, title: str | None, state: ParseState
    ) -> Chart:
        self._skip_blank()
        if self._at_end():
            raise SubgraphDirectionError(
                f"Subgraph {subgraph_id!r} at line {opening.number} is missing direction and body",
                line_number=opening.number,
            )

        line = self._consume()
        match = DIRECTION_RE.match(line.text)
        if not match:
            raise SubgraphDirectionError(
                f"Subgraph {subgraph_id!r} is missing a valid direction line "
                f"(line {line.number}: {line.text!r})",
                line_number=line.number,
            )

        subgraph = Chart.subgraph(title or "", match.group(1), subgraph_id=subgraph_id)
        logger.debug("Opened subgraph %s at line %d", subgraph_id, opening.number)

        if not self._parse_body(subgraph, state, nested=True):
            raise UnclosedSubgraphError(
                f"Subgraph {subgraph_id!r} opened at line {opening.number} is missing closing 'end'",
                line_number=opening.number,
            )
        return subgraph

    def _apply_link_style(
        self, chart: Chart, state: ParseState, index: int, style: str, after_link: bool
    ) -> None:
        # A style directly after the link it numbers is read back as that link's
        # own style; anything else stays a positional override.
        link = state.links_by_index.get(index)
        if after_link and state.last_link_index == index and link is not None and not link.has_style:
            link.set_style(style)
            return

        logger.debug("Positional linkStyle %d recorded on %s", index, chart.id or "root")
        chart.add_link_style(index, style)

    def _skip_blank(self) -> None:
        while not self._at_end() and self._peek().blank:
            self._index += 1

    def _at_end(self) -> bool:
        return self._index >= len(self._lines)

    def _peek(self) -> Line:
        return self._lines[self._index]

    def _consume(self) -> Line:
        line = self._lines[self._index]
        self._index += 1
        return line


def parse_node(text: str) -> ChartNode | None:
    """Parse ``id<open>label<close>[:::class]``, or return None."""
    content = text
    class_name = None
    separator = text.rfind(CLASS_SEPARATOR)
    if separator >= 0:
        content = text[:separator]
        class_name = text[separator + len(CLASS_SEPARATOR) :].strip()
        if not class_name:
            return None

    match = NODE_ID_RE.match(content)
    if not match:
        return None

    identifier, rest = match.groups()
    for shape in SHAPE_PRIORITY:
        label = shape.unwrap(rest)
        if label is not None:
            return ChartNode(label, shape, identifier, class_name)
    return None


def parse_flowchart(source: str) -> Chart:
    return FlowchartParser(source).parse()
