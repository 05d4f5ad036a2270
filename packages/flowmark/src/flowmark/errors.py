"""Error hierarchy for building and parsing flowchart markup."""

from __future__ import annotations


class FlowchartError(ValueError):
    """Base error for all flowmark errors."""

    def __init__(self, message: str, *, line_number: int | None = None):
        super().__init__(message)
        self.line_number = line_number


# --- Parse errors ---


class FrontMatterError(FlowchartError):
    """Front matter block opened with --- but never closed."""


class DirectionError(FlowchartError):
    """Missing or malformed flowchart direction declaration."""


class SubgraphDirectionError(DirectionError):
    """Subgraph not followed by a valid direction line."""


class UnclosedSubgraphError(FlowchartError):
    """Input ended before a subgraph's closing end."""


class UnexpectedEndError(FlowchartError):
    """An end token with no open subgraph."""


class UnsupportedLineError(FlowchartError):
    """Line matches none of the known statement grammars."""


# --- Construction errors ---


class SubgraphIdentifierError(FlowchartError):
    """Subgraph has neither an explicit id nor a title to derive one from."""


class ConfigurationError(FlowchartError):
    """Invalid flowmark configuration."""
