"""Error types raised by the graph core."""

from __future__ import annotations


class ArchGraphError(Exception):
    """Base class for failures raised by archgraph itself."""


class RecordFormatError(ArchGraphError):
    """A raw record dict is missing a required field."""


class GraphValidationError(ArchGraphError):
    """A (merged) graph has edges pointing at unknown nodes.

    ``invalid_edges`` holds ``(edge_id, missing_source, missing_target)``
    tuples; a missing endpoint is the unknown id, a known one is ``None``.
    """

    def __init__(self, graph_name: str, invalid_edges: list[tuple[str, str | None, str | None]]):
        self.graph_name = graph_name
        self.invalid_edges = invalid_edges
        super().__init__(
            f"Graph '{graph_name}' is invalid due to the following edges: "
            + "; ".join(_describe(e) for e in invalid_edges)
        )


class LayerConfigurationError(ArchGraphError):
    """Layer labels do not form a chain with exactly one root layer."""


def _describe(invalid: tuple[str, str | None, str | None]) -> str:
    edge_id, source, target = invalid
    if source is not None and target is not None:
        return f"Edge '{edge_id}': unknown source '{source}' and target '{target}'"
    if source is not None:
        return f"Edge '{edge_id}': unknown source '{source}'"
    return f"Edge '{edge_id}': unknown target '{target}'"
