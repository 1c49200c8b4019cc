"""Pre-processing of raw path records.

Collects the distinct nodes of a record set and turns every record into a
``ChunkedPath``. Several records can describe the same dependency sequence
with ancestor chains of different length (one per ancestor level the query
matched); only the longest chain per sequence is kept so that a relationship
is not counted once per ancestor.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from archgraph.logging import get_logger
from archgraph.models import Direction, Node, PathRecord

from .chunks import ChunkedPath

_LOG = get_logger("processing.preprocess")


def collect_nodes(records: Iterable[PathRecord], selected_id: Optional[str] = None) -> Dict[str, Node]:
    """Distinct source/target nodes keyed by id; the first occurrence wins."""
    nodes: Dict[str, Node] = {}
    for record in records:
        for raw in (record.source, record.target):
            if raw.element_id not in nodes:
                nodes[raw.element_id] = Node.from_record(raw, selected_id)
    return nodes


def keep_longest_paths(paths: List[ChunkedPath]) -> List[ChunkedPath]:
    longest: Dict[str, int] = {}
    for path in paths:
        depth = len(path.other_chain)
        if depth > longest.get(path.dependency_key, -1):
            longest[path.dependency_key] = depth
    return [p for p in paths if len(p.other_chain) == longest[p.dependency_key]]


class PreProcessor:
    """Holds the distinct nodes and the chunked, deduplicated paths of one record set."""

    def __init__(
        self,
        records: Iterable[PathRecord],
        selected_id: Optional[str] = None,
        direction: Direction = Direction.DEPENDENCY,
    ):
        records = list(records)
        self.direction = direction
        self.selected_id = selected_id
        self.nodes: Dict[str, Node] = collect_nodes(records, selected_id)
        chunked = [ChunkedPath.from_record(r, direction) for r in records]
        self.paths: List[ChunkedPath] = keep_longest_paths(chunked)
        _LOG.debug(
            "preprocess: %d records, %d nodes, %d paths kept (%s)",
            len(records),
            len(self.nodes),
            len(self.paths),
            direction.value,
        )

    def restrict_dependency_depth(self, max_depth: int) -> None:
        """Drop paths whose dependency chunk is longer than max_depth."""
        self.paths = [p for p in self.paths if len(p.dependency_edges) <= max_depth]

    def restrict_relations(self, domain_id: str, *, internal: bool) -> None:
        """Keep only internal (same domain) or only external relationships."""
        self.paths = [
            p for p in self.paths
            if (p.dependency_side_top_id == domain_id) == internal
        ]
