"""Projection of raw dependency cycles onto the rendered graph.

The cycle finder works on the full, unabstracted dependency graph. Its
cycles are rewritten through the same abstraction as the rendered graph,
self-steps created by that rewrite are collapsed, cycles that touch no
rendered edge are dropped and cycles that became identical are merged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from archgraph.logging import get_logger
from archgraph.models import CycleRecord, Edge, Graph, Node

from .models import CycleStep, DependencyCycle, Violations, cycle_key, raw_steps

_LOG = get_logger("violations.cycles")


@dataclass(slots=True)
class ProjectionContext:
    """Everything the projector needs to know about the rendered graph.

    ``lifted`` maps collapsed ids to the node created when lifting them,
    ``abstraction_map`` is the combined id -> id table of all views and
    ``nodes`` is a registry of every node seen while building the views.
    """

    graph: Graph
    abstraction_map: Mapping[str, str] = field(default_factory=dict)
    lifted: Mapping[str, Node] = field(default_factory=dict)
    nodes: Mapping[str, Node] = field(default_factory=dict)
    _by_endpoints: Dict[Tuple[str, str], Edge] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        for edge in self.graph.edges.values():
            self._by_endpoints.setdefault((edge.source, edge.target), edge)

    def rendered_edge(self, edge_id: str) -> Optional[Edge]:
        return self.graph.edges.get(edge_id)

    def edge_between(self, source: str, target: str) -> Optional[Edge]:
        return self._by_endpoints.get((source, target))

    def _known(self, node_id: str) -> Optional[Node]:
        return self.graph.nodes.get(node_id) or self.nodes.get(node_id)

    def resolve_node(self, node_id: str, fallback: Node) -> Node:
        """Rendered stand-in for a raw node.

        A node created by lifting wins, then the abstraction map, then the
        node itself.
        """
        lifted = self.lifted.get(node_id)
        if lifted is not None:
            return lifted
        mapped = self.abstraction_map.get(node_id)
        if mapped is not None:
            node = self._known(mapped)
            if node is not None:
                return node
        return self._known(node_id) or fallback


class ViolationProjector:
    def __init__(self, context: ProjectionContext):
        self.context = context

    def project_step(self, step: CycleStep) -> CycleStep:
        existing = self.context.rendered_edge(step.id)
        if existing is not None:
            return CycleStep(
                id=existing.id,
                source=existing.source,
                target=existing.target,
                source_node=self.context.resolve_node(existing.source, step.source_node),
                target_node=self.context.resolve_node(existing.target, step.target_node),
            )
        source_node = self.context.resolve_node(step.source, step.source_node)
        target_node = self.context.resolve_node(step.target, step.target_node)
        rendered = self.context.edge_between(source_node.id, target_node.id)
        return CycleStep(
            id=rendered.id if rendered is not None else step.id,
            source=source_node.id,
            target=target_node.id,
            source_node=source_node,
            target_node=target_node,
        )

    @staticmethod
    def collapse_self_steps(steps: List[CycleStep]) -> List[CycleStep]:
        """Remove self-steps; a cycle made of self-steps only keeps its first one."""
        if steps and all(s.is_self_step for s in steps):
            return steps[:1]
        return [s for s in steps if not s.is_self_step]

    def is_realized(self, cycle: DependencyCycle) -> bool:
        return any(self.context.rendered_edge(s.id) is not None for s in cycle.path)

    def project_cycle(self, cycle: CycleRecord) -> DependencyCycle:
        steps = [self.project_step(s) for s in raw_steps(cycle)]
        anchor = steps[0].source_node if steps else self.context.resolve_node(
            cycle.anchor.element_id, Node.from_record(cycle.anchor)
        )
        path = self.collapse_self_steps(steps)
        return DependencyCycle(
            id=cycle_key(anchor.id, path),
            anchor=anchor,
            path=path,
            length=cycle.length,
            actual_cycles=[cycle],
        )

    def project(self, cycles: Iterable[CycleRecord], node_ids: Optional[Iterable[str]] = None) -> Violations:
        allowed = set(node_ids) if node_ids is not None else None
        merged: Dict[str, DependencyCycle] = {}
        total = 0
        for cycle in cycles:
            if allowed is not None and cycle.anchor.element_id not in allowed:
                continue
            total += 1
            projected = self.project_cycle(cycle)
            if not self.is_realized(projected):
                continue
            existing = merged.get(projected.id)
            if existing is None:
                merged[projected.id] = projected
            else:
                existing.actual_cycles.extend(projected.actual_cycles)

        for projected in merged.values():
            for step in projected.path:
                edge = self.context.rendered_edge(step.id)
                if edge is not None:
                    edge.dependency_cycle = True
        _LOG.debug("cycles: %d raw -> %d rendered", total, len(merged))
        return Violations(dependency_cycles=list(merged.values()))


def extract_and_abstract_dependency_cycles(
    cycles: Iterable[CycleRecord],
    context: ProjectionContext,
    node_ids: Optional[Iterable[str]] = None,
) -> Violations:
    """Project raw cycles onto the rendered graph described by ``context``."""
    return ViolationProjector(context).project(cycles, node_ids)
