from flowmark.chart import Chart, RootFraming, SubgraphFraming
from flowmark.config import FlowchartConfig
from flowmark.errors import FlowchartError
from flowmark.model import ChartNode, ClassAttachment, ClassDef, Link, derive_id
from flowmark.parser.parser import parse_flowchart
from flowmark.shapes import Direction, LinkType, NodeShape
from flowmark.style import LinkStyle, NodeStyle

__all__ = [
    "Chart",
    "ChartNode",
    "ClassAttachment",
    "ClassDef",
    "Direction",
    "FlowchartConfig",
    "FlowchartError",
    "Link",
    "LinkStyle",
    "LinkType",
    "NodeShape",
    "NodeStyle",
    "RootFraming",
    "SubgraphFraming",
    "derive_id",
    "parse_flowchart",
]
