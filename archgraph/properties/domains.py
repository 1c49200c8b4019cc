"""Per-domain dependency counts.

All paths are abstracted at depth 0, so every module collapses onto its
domain and each remaining edge is a weighted domain-to-domain relationship.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from archgraph.models import Node, PathRecord
from archgraph.processing import AbstractionEngine, AbstractionOptions, PreProcessor


@dataclass(slots=True)
class DomainSummary:
    node: Node
    nr_outgoing_dependencies: int = 0
    nr_incoming_dependencies: int = 0
    nr_internal_dependencies: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = self.node.to_dict()
        data.update({
            "nrOutgoingDependencies": self.nr_outgoing_dependencies,
            "nrIncomingDependencies": self.nr_incoming_dependencies,
            "nrInternalDependencies": self.nr_internal_dependencies,
        })
        return data


def summarize_domains(records: Iterable[PathRecord]) -> List[DomainSummary]:
    result = AbstractionEngine(PreProcessor(records)).format_to_graph(
        "All domains",
        AbstractionOptions(max_depth=0, self_edges=True),
    )
    graph = result.graph
    summaries = {node_id: DomainSummary(node=node) for node_id, node in graph.nodes.items()}
    for edge in graph.edges.values():
        if edge.source == edge.target:
            if edge.source in summaries:
                summaries[edge.source].nr_internal_dependencies += edge.weight
            continue
        if edge.source in summaries:
            summaries[edge.source].nr_outgoing_dependencies += edge.weight
        if edge.target in summaries:
            summaries[edge.target].nr_incoming_dependencies += edge.weight
    return list(summaries.values())
