"""Decomposition of a traversal path into containment/dependency chunks.

The query layer lists the edges of every relation path starting at the
selected node, whatever the direction:

    selected -CONTAINS*-> module -DEPENDS*- module <-CONTAINS*- other end

so its edges split into three contiguous runs: the leading containment
chain below the selected node, the dependency chunk and the trailing
containment chain of the other side. For dependencies the selected node is
the record's source, for dependents it is the record's target. Both chains
are stored top-down, whatever order the query listed them in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from archgraph.models import Direction, EdgeRecord, PathRecord


def selected_end_id(path: PathRecord, direction: Direction) -> str:
    if direction is Direction.DEPENDENCY:
        return path.source.element_id
    return path.target.element_id


def find_turn_index(edges: Sequence[EdgeRecord], selected_id: str) -> int:
    """Split point of a containment-only path.

    The traversal walks a continuous chain down from the selected node and
    then turns around; the turn is the first edge that no longer starts
    where the previous one ended. A path that does not start at the
    selected node has no leading chain. Returns the index of the first
    trailing edge.
    """
    if not edges or edges[0].start_id != selected_id:
        return 0
    for i in range(1, len(edges)):
        if edges[i].start_id != edges[i - 1].end_id:
            return i
    return len(edges)


def top_down(chain: List[EdgeRecord]) -> List[EdgeRecord]:
    """Order a containment chain from the outermost container downwards."""
    if len(chain) >= 2 and chain[0].start_id == chain[1].end_id:
        return list(reversed(chain))
    return list(chain)


def split_chunks(
    path: PathRecord,
    direction: Direction,
) -> Tuple[List[EdgeRecord], List[EdgeRecord], List[EdgeRecord]]:
    """Return (selected-side containment, dependency chunk, other-side containment) in path order."""
    edges = list(path.edges)
    lead = 0
    while lead < len(edges) and edges[lead].is_containment:
        lead += 1
    if lead == len(edges):
        turn = find_turn_index(edges, selected_end_id(path, direction))
        return edges[:turn], [], edges[turn:]
    trail = len(edges)
    while trail > lead and edges[trail - 1].is_containment:
        trail -= 1
    return edges[:lead], edges[lead:trail], edges[trail:]


@dataclass(slots=True)
class ChunkedPath:
    """A path record together with its three chunks.

    ``source_chain`` hangs below the record's source and ``target_chain``
    below its target; both are ordered top-down, i.e. from the outermost
    container towards the module.
    """

    record: PathRecord
    direction: Direction
    source_chain: List[EdgeRecord]
    dependency_edges: List[EdgeRecord]
    target_chain: List[EdgeRecord]

    @classmethod
    def from_record(cls, record: PathRecord, direction: Direction = Direction.DEPENDENCY) -> "ChunkedPath":
        selected, dependency, other = split_chunks(record, direction)
        if direction is Direction.DEPENDENCY:
            source_chain, target_chain = selected, other
        else:
            source_chain, target_chain = other, selected
        return cls(
            record=record,
            direction=direction,
            source_chain=top_down(source_chain),
            dependency_edges=dependency,
            target_chain=top_down(target_chain),
        )

    @property
    def source_depth(self) -> int:
        return len(self.source_chain)

    @property
    def target_depth(self) -> int:
        return len(self.target_chain)

    @property
    def dependency_key(self) -> str:
        """Identifies the dependency sequence this path stands for."""
        return ",".join(e.element_id for e in self.dependency_edges)

    @property
    def selected_chain(self) -> List[EdgeRecord]:
        if self.direction is Direction.DEPENDENCY:
            return self.source_chain
        return self.target_chain

    @property
    def other_chain(self) -> List[EdgeRecord]:
        if self.direction is Direction.DEPENDENCY:
            return self.target_chain
        return self.source_chain

    @property
    def dependency_side_top_id(self) -> str:
        """Outermost container on the non-selected side of the path."""
        if self.direction is Direction.DEPENDENCY:
            return self.target_chain[0].start_id if self.target_chain else self.record.target.element_id
        return self.source_chain[0].start_id if self.source_chain else self.record.source.element_id

    def all_edges(self) -> List[EdgeRecord]:
        return [*self.source_chain, *self.dependency_edges, *self.target_chain]
