"""Union of independently built views and validation of the result."""

from __future__ import annotations

from typing import List, Optional, Tuple

from archgraph.errors import GraphValidationError
from archgraph.logging import get_logger
from archgraph.models import Graph

_LOG = get_logger("processing.merge")


def merge_graphs(*graphs: Graph) -> Graph:
    """Union nodes and edges by id; the first graph to carry an id wins."""
    merged = Graph(name=f"Merged graph of '{', '.join(g.name for g in graphs)}'")
    for graph in graphs:
        for node in graph.nodes.values():
            merged.add_node(node)
    for graph in graphs:
        for edge in graph.edges.values():
            merged.add_edge(edge)
    return merged


def find_invalid_edges(graph: Graph) -> List[Tuple[str, Optional[str], Optional[str]]]:
    """Edges with an unknown endpoint as (edge id, unknown source, unknown target)."""
    invalid: List[Tuple[str, Optional[str], Optional[str]]] = []
    for edge in graph.edges.values():
        missing_source = None if edge.source in graph.nodes else edge.source
        missing_target = None if edge.target in graph.nodes else edge.target
        if missing_source is not None or missing_target is not None:
            invalid.append((edge.id, missing_source, missing_target))
    return invalid


def validate_graph(graph: Graph) -> None:
    """Raise GraphValidationError naming every edge that points at an unknown node."""
    invalid = find_invalid_edges(graph)
    if not invalid:
        return
    error = GraphValidationError(graph.name, invalid)
    _LOG.error("%s", error)
    raise error


def merge_and_validate(*graphs: Graph) -> Graph:
    """Merge one or more views into a single validated graph."""
    if not graphs:
        raise ValueError("merge_and_validate() needs at least one graph")
    graph = graphs[0] if len(graphs) == 1 else merge_graphs(*graphs)
    validate_graph(graph)
    _LOG.debug("%s: %d nodes, %d edges", graph.name, len(graph.nodes), len(graph.edges))
    return graph
