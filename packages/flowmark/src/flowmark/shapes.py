from enum import Enum


class Direction(str, Enum):
    TD = "TD"
    TB = "TB"
    LR = "LR"
    RL = "RL"
    BT = "BT"


class NodeShape(Enum):
    RECT_ROUND = ("(", ")")
    STADIUM = ("([", "])")
    SUBROUTINE = ("[[", "]]")
    CYLINDER = ("[(", ")]")
    CIRCLE = ("((", "))")
    ASYMMETRIC = (">", "]")
    RHOMBUS = ("{", "}")
    HEXAGON = ("{{", "}}")

    @property
    def opening(self) -> str:
        return self.value[0]

    @property
    def closing(self) -> str:
        return self.value[1]

    def wrap(self, label: str) -> str:
        return f"{self.opening}{label}{self.closing}"

    def unwrap(self, text: str) -> str | None:
        """Return the label framed by this shape's delimiters, or None."""
        if len(text) < len(self.opening) + len(self.closing):
            return None
        if text.startswith(self.opening) and text.endswith(self.closing):
            return text[len(self.opening) : len(text) - len(self.closing)]
        return None


# Double delimiters contain their single forms, so they are tried first.
SHAPE_PRIORITY: tuple[NodeShape, ...] = (
    NodeShape.HEXAGON,
    NodeShape.CIRCLE,
    NodeShape.SUBROUTINE,
    NodeShape.CYLINDER,
    NodeShape.STADIUM,
    NodeShape.RHOMBUS,
    NodeShape.RECT_ROUND,
    NodeShape.ASYMMETRIC,
)


class LinkType(str, Enum):
    ARROW = "-->"
    OPEN = "---"
    INVISIBLE = "~~~"
