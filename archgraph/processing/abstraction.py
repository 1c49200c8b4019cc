"""Depth-bounded abstraction of pre-processed paths into a property graph.

Containment chains deeper than the cutoff are cut off and every node below
the cut collapses onto the container at the cut. The collapse is collected
in one explicit id -> id table first and applied in a single rewrite pass,
so the produced node and edge sets do not depend on record order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from archgraph.config import Range
from archgraph.logging import get_logger
from archgraph.models import Direction, Edge, EdgeRecord, Graph, Node

from .chunks import ChunkedPath
from .preprocess import PreProcessor

_LOG = get_logger("processing.abstraction")

AbstractionMap = Dict[str, str]


@dataclass(frozen=True, slots=True)
class AbstractionOptions:
    """How one view is abstracted.

    ``max_depth`` None disables the cutoff. ``outgoing`` chooses whether the
    neighbor filter counts dependencies (True) or dependents (False).
    """

    max_depth: Optional[int] = None
    self_edges: bool = True
    neighbor_range: Range = field(default_factory=Range)
    outgoing: bool = True


@dataclass(slots=True)
class AbstractionResult:
    graph: Graph
    abstraction_map: AbstractionMap
    lifted: Dict[str, Node]


@dataclass(slots=True)
class _Truncated:
    path: ChunkedPath
    source_chain: List[EdgeRecord]
    dependency_edges: List[EdgeRecord]
    target_chain: List[EdgeRecord]

    def all_edges(self) -> List[EdgeRecord]:
        return [*self.source_chain, *self.dependency_edges, *self.target_chain]


def _cut(chain: List[EdgeRecord], start: int) -> Tuple[List[EdgeRecord], List[EdgeRecord]]:
    start = max(0, min(start, len(chain)))
    return chain[:start], chain[start:]


def truncate_path(path: ChunkedPath, max_depth: int) -> Tuple[_Truncated, List[Tuple[int, List[EdgeRecord]]]]:
    """Cut a path's containment chains at max_depth.

    The selected-side chain loses everything from ``max_depth`` onward; the
    other chain loses the same number of its deepest edges. Returns the
    truncated path and the deleted runs with the chain position they start at.
    """
    selected = path.selected_chain
    other = path.other_chain
    excess = max(0, len(selected) - max_depth)
    kept_selected, deleted_selected = _cut(selected, max_depth)
    kept_other, deleted_other = _cut(other, len(other) - excess)
    runs = [
        (len(kept_selected), deleted_selected),
        (len(kept_other), deleted_other),
    ]
    if path.direction is Direction.DEPENDENCY:
        truncated = _Truncated(path, kept_selected, list(path.dependency_edges), kept_other)
    else:
        truncated = _Truncated(path, kept_other, list(path.dependency_edges), kept_selected)
    return truncated, [r for r in runs if r[1]]


def close_map(chosen: Mapping[str, str]) -> AbstractionMap:
    """Follow every target to its final value so the map is idempotent."""
    closed: AbstractionMap = {}
    for source in chosen:
        target = chosen[source]
        seen = {source}
        while target in chosen and target not in seen:
            seen.add(target)
            target = chosen[target]
        if target != source:
            closed[source] = target
    return closed


def build_abstraction_map(paths: Iterable[ChunkedPath], max_depth: int) -> AbstractionMap:
    """Map every collapsed node id onto the container it collapses into.

    Each deleted edge's end node maps to the start node of the first edge of
    its deleted run. When paths disagree, the candidate at the shallowest
    chain position wins, then the smallest id.
    """
    candidates: Dict[str, Set[Tuple[int, str]]] = {}
    for path in paths:
        _truncated, runs = truncate_path(path, max_depth)
        for position, run in runs:
            target = run[0].start_id
            for edge in run:
                candidates.setdefault(edge.end_id, set()).add((position, target))
    chosen = {node_id: min(options)[1] for node_id, options in candidates.items()}
    return close_map(chosen)


def apply_map(node_id: str, abstraction_map: Mapping[str, str]) -> str:
    return abstraction_map.get(node_id, node_id)


def rewrite_edge(edge: EdgeRecord, abstraction_map: Mapping[str, str]) -> EdgeRecord:
    return edge.with_endpoints(apply_map(edge.start_id, abstraction_map), apply_map(edge.end_id, abstraction_map))


def merge_duplicate_edges(edges: Iterable[Edge]) -> List[Edge]:
    """Merge edges with the same source, target and kind; weights add up.

    The first edge seen for a pair keeps its id and attributes.
    """
    merged: Dict[Tuple[str, str, bool], Edge] = {}
    for edge in edges:
        key = (edge.source, edge.target, edge.is_containment)
        existing = merged.get(key)
        if existing is None:
            merged[key] = edge.copy()
        else:
            existing.weight += edge.weight
    return list(merged.values())


def filter_nodes_by_edges(nodes: Iterable[Node], edges: Iterable[Edge]) -> List[Node]:
    """Only keep the nodes that are the start or end point of an edge."""
    on_edges: Set[str] = set()
    for edge in edges:
        on_edges.add(edge.source)
        on_edges.add(edge.target)
    return [n for n in nodes if n.id in on_edges]


def filter_self_edges(edges: Iterable[Edge]) -> List[Edge]:
    return [e for e in edges if e.source != e.target]


def replace_containment_with_parents(nodes: List[Node], edges: List[Edge]) -> Tuple[List[Node], List[Edge]]:
    """Turn containment edges into ``parent`` pointers and drop them from the edge list."""
    by_id = {n.id: n for n in nodes}
    dependency_edges: List[Edge] = []
    for edge in edges:
        if not edge.is_containment:
            dependency_edges.append(edge)
            continue
        child = by_id.get(edge.target)
        if child is not None:
            child.parent = edge.source
    return nodes, dependency_edges


def neighbor_step(path: _Truncated, outgoing: bool) -> Optional[Tuple[str, str]]:
    """(anchor, neighbor) of the dependency edge next to the selected side, or None.

    ``outgoing`` anchors the edge at its start node, otherwise at its end node.
    """
    if not path.dependency_edges:
        return None
    edge = path.dependency_edges[0]
    if outgoing:
        return edge.start_id, edge.end_id
    return edge.end_id, edge.start_id


def filter_by_neighbor_count(paths: List[_Truncated], outgoing: bool, bounds: Range) -> List[_Truncated]:
    """Drop paths whose anchor has a distinct-neighbor count outside ``bounds``."""
    if bounds.is_open:
        return paths
    neighbors: Dict[str, Set[str]] = {}
    for path in paths:
        step = neighbor_step(path, outgoing)
        if step is not None:
            neighbors.setdefault(step[0], set()).add(step[1])
    kept: List[_Truncated] = []
    for path in paths:
        step = neighbor_step(path, outgoing)
        count = len(neighbors.get(step[0], ())) if step is not None else 0
        if bounds.contains(count):
            kept.append(path)
    return kept


class AbstractionEngine:
    """Builds one abstracted view from a ``PreProcessor``.

    ``context_nodes`` are nodes known from other views; edges may point at
    them even when this record set never returned them as source or target.
    """

    def __init__(self, preprocessor: PreProcessor, context_nodes: Optional[Mapping[str, Node]] = None):
        self.original = preprocessor
        self.context_nodes: Dict[str, Node] = dict(context_nodes or {})

    def _known_nodes(self) -> List[Node]:
        known = dict(self.context_nodes)
        known.update(self.original.nodes)
        return list(known.values())

    def _rewrite(self, abstraction_map: AbstractionMap, max_depth: Optional[int]) -> List[_Truncated]:
        rewritten: List[_Truncated] = []
        for path in self.original.paths:
            if max_depth is None:
                truncated = _Truncated(path, list(path.source_chain), list(path.dependency_edges), list(path.target_chain))
            else:
                truncated, _runs = truncate_path(path, max_depth)
            truncated.dependency_edges = [rewrite_edge(e, abstraction_map) for e in truncated.dependency_edges]
            truncated.source_chain = [rewrite_edge(e, abstraction_map) for e in truncated.source_chain]
            truncated.target_chain = [rewrite_edge(e, abstraction_map) for e in truncated.target_chain]
            rewritten.append(truncated)
        return rewritten

    @staticmethod
    def collect_edges(paths: Iterable[_Truncated]) -> List[Edge]:
        """All edges of the paths with weight 1, each raw edge id once."""
        seen: Set[str] = set()
        edges: List[Edge] = []
        for path in paths:
            for record in path.all_edges():
                if record.element_id in seen:
                    continue
                seen.add(record.element_id)
                if record.is_containment and record.start_id == record.end_id:
                    continue
                edges.append(Edge.from_record(record))
        return edges

    def format_to_graph(self, name: str, options: Optional[AbstractionOptions] = None) -> AbstractionResult:
        options = options or AbstractionOptions()
        abstraction_map: AbstractionMap = {}
        if options.max_depth is not None:
            abstraction_map = build_abstraction_map(self.original.paths, options.max_depth)

        paths = self._rewrite(abstraction_map, options.max_depth)
        paths = filter_by_neighbor_count(paths, options.outgoing, options.neighbor_range)

        edges = merge_duplicate_edges(self.collect_edges(paths))
        candidates = [n.copy() for n in self._known_nodes() if n.id not in abstraction_map]
        nodes = filter_nodes_by_edges(candidates, edges)
        nodes, edges = replace_containment_with_parents(nodes, edges)
        if not options.self_edges:
            edges = filter_self_edges(edges)

        graph = Graph.from_elements(name, nodes, edges)
        lifted = {
            collapsed: graph.nodes[target].copy(lifted_from=collapsed)
            for collapsed, target in abstraction_map.items()
            if target in graph.nodes
        }
        _LOG.debug(
            "%s: %d paths -> %d nodes, %d edges (%d collapsed ids)",
            name,
            len(paths),
            len(graph.nodes),
            len(graph.edges),
            len(abstraction_map),
        )
        return AbstractionResult(graph=graph, abstraction_map=abstraction_map, lifted=lifted)
