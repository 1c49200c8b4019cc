"""Request-level composition: views -> merged graph -> projected violations.

The record source is the query layer of the surrounding system. Its
failures are not caught here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

from archgraph.config import QueryOptions
from archgraph.logging import get_logger
from archgraph.models import CycleRecord, Direction, Graph, Node, PathRecord
from archgraph.processing import AbstractionEngine, AbstractionOptions, AbstractionResult, PreProcessor, merge_and_validate
from archgraph.violations import ProjectionContext, Violations, extract_and_abstract_dependency_cycles

_LOG = get_logger("visualization")


@runtime_checkable
class GraphRecordSource(Protocol):
    """Query layer contract.

    Each method returns the complete record set of one traversal; the core
    never streams and never retries.
    """

    def parents(self, node_id: str) -> List[PathRecord]:
        """Containment paths from the node (source) up to each ancestor (target)."""
        ...

    def children(self, node_id: str, depth: int) -> List[PathRecord]:
        """Containment paths from the node down to ``depth`` levels."""
        ...

    def dependencies(self, options: QueryOptions) -> List[PathRecord]:
        """Paths from the node (source) to each ancestor of a module it depends on (target).

        Edges run from the node down to one of its modules, along the
        dependencies, then down from the target to the dependency.
        """
        ...

    def dependents(self, options: QueryOptions) -> List[PathRecord]:
        """Paths from each ancestor of a depending module (source) to the node (target).

        Edges are listed in the same order as for dependencies: from the node
        down to one of its modules, along the dependencies backwards, then
        down from the source to the depending module.
        """
        ...

    def cycles(self, node_ids: Optional[List[str]] = None) -> List[CycleRecord]:
        """Elementary dependency cycles, optionally anchored at node_ids."""
        ...


class StaticRecordSource:
    """Record source over pre-fetched record lists, e.g. a JSON dump."""

    def __init__(
        self,
        parents: Iterable[PathRecord] = (),
        children: Iterable[PathRecord] = (),
        dependencies: Iterable[PathRecord] = (),
        dependents: Iterable[PathRecord] = (),
        cycles: Iterable[CycleRecord] = (),
    ):
        self._parents = list(parents)
        self._children = list(children)
        self._dependencies = list(dependencies)
        self._dependents = list(dependents)
        self._cycles = list(cycles)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "StaticRecordSource":
        def paths(key: str) -> List[PathRecord]:
            return [PathRecord.from_dict(r) for r in raw.get(key) or ()]

        return cls(
            parents=paths("parents"),
            children=paths("children"),
            dependencies=paths("dependencies"),
            dependents=paths("dependents"),
            cycles=[CycleRecord.from_dict(c) for c in raw.get("cycles") or ()],
        )

    def parents(self, node_id: str) -> List[PathRecord]:
        return self._parents

    def children(self, node_id: str, depth: int) -> List[PathRecord]:
        return self._children

    def dependencies(self, options: QueryOptions) -> List[PathRecord]:
        return self._dependencies

    def dependents(self, options: QueryOptions) -> List[PathRecord]:
        return self._dependents

    def cycles(self, node_ids: Optional[List[str]] = None) -> List[CycleRecord]:
        if node_ids is None:
            return self._cycles
        allowed = set(node_ids)
        return [c for c in self._cycles if c.anchor.element_id in allowed]


def outermost_ancestor_id(parents: List[PathRecord], node_id: str) -> str:
    """Id of the farthest container on the parents paths, or node_id without one."""
    farthest = max(parents, key=lambda p: len(p.edges), default=None)
    if farthest is None or not farthest.edges:
        return node_id
    return farthest.target.element_id


@dataclass(slots=True)
class GraphWithViolations:
    graph: Graph
    violations: Violations

    def to_dict(self) -> Dict[str, Any]:
        return {"graph": self.graph.to_dict(), "violations": self.violations.to_dict()}


class GraphVisualizationService:
    def __init__(self, source: GraphRecordSource):
        self.source = source

    def _relation_view(
        self,
        records: List[PathRecord],
        name: str,
        direction: Direction,
        options: QueryOptions,
        domain_id: str,
        context_nodes: Dict[str, Node],
        registry: Dict[str, Node],
    ) -> AbstractionResult:
        pre = PreProcessor(records, options.id, direction)
        pre.restrict_dependency_depth(options.dependency_depth)
        if options.only_internal_relations:
            pre.restrict_relations(domain_id, internal=True)
        elif options.only_external_relations:
            pre.restrict_relations(domain_id, internal=False)
        for node_id, node in pre.nodes.items():
            registry.setdefault(node_id, node)
        neighbor_range = options.dependency_range if direction is Direction.DEPENDENCY else options.dependent_range
        return AbstractionEngine(pre, context_nodes).format_to_graph(
            name,
            AbstractionOptions(
                max_depth=options.layer_depth,
                self_edges=options.self_edges,
                neighbor_range=neighbor_range,
                outgoing=direction is Direction.DEPENDENCY,
            ),
        )

    def _containment_view(self, records: List[PathRecord], name: str, selected_id: str, registry: Dict[str, Node]) -> AbstractionResult:
        pre = PreProcessor(records, selected_id)
        for node_id, node in pre.nodes.items():
            registry.setdefault(node_id, node)
        return AbstractionEngine(pre).format_to_graph(name)

    def get_graph_from_selected_node(self, options: QueryOptions) -> GraphWithViolations:
        registry: Dict[str, Node] = {}
        parents = self.source.parents(options.id)
        domain_id = options.domain_id or outermost_ancestor_id(parents, options.id)
        results: List[AbstractionResult] = [
            self._containment_view(parents, "All parents", options.id, registry),
            self._containment_view(
                self.source.children(options.id, options.layer_depth),
                "All sublayers and modules",
                options.id,
                registry,
            ),
        ]
        context_nodes: Dict[str, Node] = {}
        for result in results:
            context_nodes.update(result.graph.nodes)

        if options.show_dependencies:
            results.append(self._relation_view(
                self.source.dependencies(options),
                "All dependencies and their parents",
                Direction.DEPENDENCY,
                options,
                domain_id,
                context_nodes,
                registry,
            ))
        if options.show_dependents:
            results.append(self._relation_view(
                self.source.dependents(options),
                "All dependents and their parents",
                Direction.DEPENDENT,
                options,
                domain_id,
                context_nodes,
                registry,
            ))

        graph = merge_and_validate(*(r.graph for r in results))

        abstraction_map: Dict[str, str] = {}
        lifted: Dict[str, Node] = {}
        for result in results:
            for collapsed, target in result.abstraction_map.items():
                abstraction_map.setdefault(collapsed, target)
            for collapsed, node in result.lifted.items():
                lifted.setdefault(collapsed, node)

        context = ProjectionContext(graph=graph, abstraction_map=abstraction_map, lifted=lifted, nodes=registry)
        violations = extract_and_abstract_dependency_cycles(self.source.cycles(), context)
        _LOG.info(
            "graph for %s: %d nodes, %d edges, %d dependency cycles",
            options.id,
            len(graph.nodes),
            len(graph.edges),
            len(violations.dependency_cycles),
        )
        return GraphWithViolations(graph=graph, violations=violations)
