import logging

import pytest

from flowmark.chart import Chart
from flowmark.errors import (
    DirectionError,
    FlowchartError,
    FrontMatterError,
    SubgraphDirectionError,
    UnclosedSubgraphError,
    UnexpectedEndError,
    UnsupportedLineError,
)
from flowmark.model import ChartNode
from flowmark.parser.parser import parse_flowchart, parse_node
from flowmark.shapes import Direction, LinkType, NodeShape


def test_parser_reads_front_matter_header_nodes_and_links():
    source = """
    ---
    title: Orders
    ---
    flowchart LR
      user(user)
      api{{API gateway}}:::edge
      user --> |calls|api
      api --- db
      db ~~~ cache
    """

    chart = parse_flowchart(source)

    assert chart.title == "Orders"
    assert chart.direction is Direction.LR
    assert chart.nodes[0] == ChartNode("user", NodeShape.RECT_ROUND, "user")
    assert chart.nodes[1] == ChartNode("API gateway", NodeShape.HEXAGON, "api", "edge")
    assert [(link.src, link.kind, link.text, link.dest) for link in chart.links] == [
        ("user", LinkType.ARROW, "calls", "api"),
        ("api", LinkType.OPEN, None, "db"),
        ("db", LinkType.INVISIBLE, None, "cache"),
    ]


def test_parser_without_front_matter_title():
    chart = Chart.parse("---\n---\nflowchart BT\n")

    assert chart.title is None
    assert chart.direction is Direction.BT
    assert chart.nodes == []


def test_parser_accepts_crlf_and_loose_link_spacing():
    chart = parse_flowchart("flowchart TD\r\n  a -->|go| b\r\n")

    assert str(chart.links[0]) == "a --> |go|b"


def test_parser_builds_nested_subgraphs():
    source = """flowchart TD
  subgraph outer [Outer Group]
    direction LR
    a(a)
    subgraph inner
      direction RL
      b(b)
    end
  end
"""

    chart = parse_flowchart(source)

    outer = chart.subgraphs[0]
    inner = outer.subgraphs[0]
    assert outer.id == "outer"
    assert outer.title == "Outer Group"
    assert outer.direction is Direction.LR
    assert inner.id == "inner"
    assert inner.title == ""
    assert inner.direction is Direction.RL
    assert [node.id for node in inner.nodes] == ["b"]


def test_parser_reads_class_definitions_and_attachments():
    source = """flowchart TD
  classDef warn,error fill:#f00,color:#fff
  classDef ok fill:#0f0;
  class a,b warn;
  class c ok
"""

    chart = parse_flowchart(source)

    assert chart.class_defs[0].names == ["warn", "error"]
    assert chart.class_defs[0].style == "fill:#f00,color:#fff"
    assert chart.class_defs[1].class_names == "ok"
    assert chart.class_defs[1].style == "fill:#0f0;"
    assert chart.class_attachments[0].node_ids == ["a", "b"]
    assert chart.class_attachments[0].class_name == "warn"
    assert chart.class_attachments[1].nodes == "c"


class TestShapeParsing:
    @pytest.mark.parametrize(
        "line,shape,label",
        [
            ("n(x)", NodeShape.RECT_ROUND, "x"),
            ("n([x])", NodeShape.STADIUM, "x"),
            ("n[[x]]", NodeShape.SUBROUTINE, "x"),
            ("n[(x)]", NodeShape.CYLINDER, "x"),
            ("n((x))", NodeShape.CIRCLE, "x"),
            ("n>x]", NodeShape.ASYMMETRIC, "x"),
            ("n{x}", NodeShape.RHOMBUS, "x"),
            ("n{{x}}", NodeShape.HEXAGON, "x"),
            ("n{{}}", NodeShape.HEXAGON, ""),
        ],
    )
    def test_each_shape(self, line, shape, label):
        node = parse_node(line)

        assert node is not None
        assert node.shape is shape
        assert node.label == label
        assert node.id == "n"

    @pytest.mark.parametrize("label", ["a}b", "}", "{x}", "a}}b", " spaced } out "])
    def test_double_brace_wins_over_single_brace(self, label):
        node = parse_node(f"hex{{{{{label}}}}}")

        assert node.shape is NodeShape.HEXAGON
        assert node.label == label

    def test_class_suffix_uses_rightmost_separator(self):
        node = parse_node("n(a:::b):::cls")

        assert node.label == "a:::b"
        assert node.class_name == "cls"

    @pytest.mark.parametrize("line", ["n(x):::", "n(x):::   ", "(x)", "n", "n<x>", "n(x]"])
    def test_malformed_nodes_are_rejected(self, line):
        assert parse_node(line) is None


class TestLinkStyleAttribution:
    def test_style_right_after_its_link_attaches_inline(self):
        chart = parse_flowchart("flowchart TD\n  a --> b\n  linkStyle 0 color:red;\n")

        assert chart.links[0].style == "color:red"
        assert chart.positional_link_styles == []

    def test_style_for_an_earlier_link_is_positional(self):
        chart = parse_flowchart(
            "flowchart TD\n  a --> b\n  b --> c\n  linkStyle 0 color:red;\n"
        )

        assert chart.links[0].style is None
        assert chart.positional_link_styles == [(0, "color:red")]

    def test_second_style_for_same_link_is_positional(self):
        chart = parse_flowchart(
            "flowchart TD\n  a --> b\n  linkStyle 0 color:red;\n  linkStyle 0 color:blue;\n"
        )

        assert chart.links[0].style == "color:red"
        assert chart.positional_link_styles == [(0, "color:blue")]

    def test_positional_style_lands_on_the_container_that_declares_it(self):
        source = """flowchart TD
  a --> b
  subgraph g [G]
    direction TD
    c --> d
    e --> f
    linkStyle 1 stroke:#000;
  end
  linkStyle 2 stroke:#111;
"""

        chart = parse_flowchart(source)

        group = chart.subgraphs[0]
        assert group.positional_link_styles == [(1, "stroke:#000")]
        assert chart.positional_link_styles == [(2, "stroke:#111")]
        assert all(link.style is None for link in chart.iter_links())

    def test_link_indices_continue_through_nesting(self):
        source = """flowchart TD
  a --> b
  linkStyle 0 color:red;
  subgraph g [G]
    direction TD
    c --> d
    linkStyle 1 color:green;
    subgraph h [H]
      direction TD
      e --> f
      linkStyle 2 color:blue;
    end
  end
"""

        chart = parse_flowchart(source)

        styles = [link.style for link in chart.iter_links()]
        assert styles == ["color:red", "color:green", "color:blue"]

    def test_trailing_semicolon_is_stripped_once(self):
        chart = parse_flowchart("flowchart TD\n  a --> b\n  linkStyle 0 color:red;;\n")

        assert chart.links[0].style == "color:red;"

    def test_positional_override_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="flowmark.parser.parser"):
            parse_flowchart("flowchart TD\n  a(a)\n  linkStyle 5 color:red;\n")

        assert "Positional linkStyle 5" in caplog.text


class TestParseErrors:
    def test_unclosed_front_matter(self):
        with pytest.raises(FrontMatterError) as excinfo:
            parse_flowchart("---\ntitle: x\nflowchart TD\n")

        assert excinfo.value.line_number == 1

    @pytest.mark.parametrize("source", ["", "\n\n", "---\n---\n"])
    def test_missing_flowchart_declaration(self, source):
        with pytest.raises(DirectionError):
            parse_flowchart(source)

    @pytest.mark.parametrize("header", ["flowchart XY", "graph TD", "flowchart", "a(a)"])
    def test_malformed_flowchart_declaration(self, header):
        with pytest.raises(DirectionError, match="Invalid flowchart declaration"):
            parse_flowchart(f"{header}\n")

    def test_subgraph_without_direction_line(self):
        source = "flowchart TD\n  subgraph s [S]\n\n    a(a)\n  end\n"

        with pytest.raises(SubgraphDirectionError) as excinfo:
            parse_flowchart(source)

        assert not isinstance(excinfo.value, UnsupportedLineError)
        assert excinfo.value.line_number == 4

    def test_subgraph_at_end_of_input(self):
        with pytest.raises(SubgraphDirectionError, match="missing direction and body"):
            parse_flowchart("flowchart TD\n  subgraph s\n")

    def test_subgraph_without_end(self):
        with pytest.raises(UnclosedSubgraphError) as excinfo:
            parse_flowchart("flowchart TD\n  subgraph s [S]\n    direction LR\n    a(a)\n")

        assert excinfo.value.line_number == 2

    def test_end_at_top_level(self):
        with pytest.raises(UnexpectedEndError) as excinfo:
            parse_flowchart("flowchart TD\n  a(a)\nend\n")

        assert excinfo.value.line_number == 3

    @pytest.mark.parametrize("line", ["???", "a(x):::", "a -->", "direction LR"])
    def test_unsupported_line(self, line):
        with pytest.raises(UnsupportedLineError) as excinfo:
            parse_flowchart(f"flowchart TD\n  {line}\n")

        assert excinfo.value.line_number == 2
        assert line in str(excinfo.value)

    def test_all_parse_errors_are_value_errors(self):
        with pytest.raises(FlowchartError):
            parse_flowchart("flowchart TD\n  ???\n")
        with pytest.raises(ValueError):
            parse_flowchart("flowchart TD\n  ???\n")
