import re
from dataclasses import dataclass

from flowmark.shapes import Direction

_DIRECTIONS = "|".join(direction.value for direction in Direction)

FRONT_MATTER_FENCE = "---"
END_TOKEN = "end"
CLASS_SEPARATOR = ":::"

TITLE_RE = re.compile(r"^title:\s*(.*)$")
FLOWCHART_RE = re.compile(rf"^flowchart\s+({_DIRECTIONS})$")
DIRECTION_RE = re.compile(rf"^direction\s+({_DIRECTIONS})$")
SUBGRAPH_RE = re.compile(r"^subgraph\s+([^\s\[]+)\s*(?:\[(.*)\])?$")
CLASS_DEF_RE = re.compile(r"^classDef\s+(\S+)(?:\s+(.*))?$")
CLASS_ATTACHMENT_RE = re.compile(r"^class\s+(\S+)\s+([^\s;]+);?$")
LINK_STYLE_RE = re.compile(r"^linkStyle\s+(\d+)\s+(.+)$")
LINK_RE = re.compile(r"^(\S+)\s+(-->|---|~~~)\s*(?:\|([^|]+)\|)?\s*(\S+)$")
NODE_ID_RE = re.compile(r"^([A-Za-z0-9\-_!#$]+)(.+)$")


@dataclass(slots=True, frozen=True)
class Line:
    number: int
    text: str

    @property
    def blank(self) -> bool:
        return not self.text


def lex(source: str) -> list[Line]:
    """Split source into stripped lines numbered from 1."""
    raw_lines = source.replace("\r\n", "\n").split("\n")
    return [Line(number, raw.strip()) for number, raw in enumerate(raw_lines, start=1)]
