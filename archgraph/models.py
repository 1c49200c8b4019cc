"""Data models for raw traversal records and the rendered property graph.

Raw records (``NodeRecord``, ``EdgeRecord``, ``PathRecord``, ``CycleRecord``)
mirror what the query layer hands in. Rendered elements (``Node``, ``Edge``,
``Graph``) only carry the fixed attribute set the renderer reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from .errors import RecordFormatError

CONTAINS = "CONTAINS"
CONTAINS_INTERACTION = "contains"


class Direction(str, Enum):
    """Which side of a path holds the selected node."""

    DEPENDENCY = "dependency"
    DEPENDENT = "dependent"


def _require(raw: Dict[str, Any], key: str, kind: str) -> Any:
    value = raw.get(key)
    if value is None or value == "":
        raise RecordFormatError(f"{kind} record without '{key}': {raw!r}")
    return value


@dataclass(frozen=True, slots=True)
class NodeRecord:
    element_id: str
    labels: tuple[str, ...] = ()
    name: str = ""
    kind: str = ""
    color: str = ""
    depth: int = 0

    @property
    def layer(self) -> str:
        return self.labels[0] if self.labels else ""

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "NodeRecord":
        props = raw.get("properties") or {}
        depth = props.get("depth")
        return cls(
            element_id=str(_require(raw, "elementId", "Node")),
            labels=tuple(raw.get("labels") or ()),
            name=props.get("simpleName") or "",
            kind=props.get("kind") or "",
            color=props.get("color") or "",
            depth=int(depth) if depth is not None else 0,
        )


@dataclass(frozen=True, slots=True)
class EdgeRecord:
    element_id: str
    start_id: str
    end_id: str
    type: str

    @property
    def is_containment(self) -> bool:
        return self.type == CONTAINS

    def with_endpoints(self, start_id: str, end_id: str) -> "EdgeRecord":
        if start_id == self.start_id and end_id == self.end_id:
            return self
        return replace(self, start_id=start_id, end_id=end_id)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "EdgeRecord":
        return cls(
            element_id=str(_require(raw, "elementId", "Edge")),
            start_id=str(_require(raw, "startNodeElementId", "Edge")),
            end_id=str(_require(raw, "endNodeElementId", "Edge")),
            type=str(_require(raw, "type", "Edge")),
        )


@dataclass(frozen=True, slots=True)
class PathRecord:
    """One traversal result: source node, target node and the edges between."""

    source: NodeRecord
    target: NodeRecord
    edges: tuple[EdgeRecord, ...] = ()

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "PathRecord":
        return cls(
            source=NodeRecord.from_dict(_require(raw, "source", "Path")),
            target=NodeRecord.from_dict(_require(raw, "target", "Path")),
            edges=tuple(EdgeRecord.from_dict(e) for e in raw.get("edges") or ()),
        )


@dataclass(frozen=True, slots=True)
class CycleSegment:
    edge: EdgeRecord
    start: NodeRecord
    end: NodeRecord


@dataclass(frozen=True, slots=True)
class CycleRecord:
    """Elementary cycle as returned by the cycle-finding collaborator."""

    anchor: NodeRecord
    segments: tuple[CycleSegment, ...] = ()

    @property
    def length(self) -> int:
        return len(self.segments)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "CycleRecord":
        segments = tuple(
            CycleSegment(
                edge=EdgeRecord.from_dict(_require(s, "edge", "Cycle segment")),
                start=NodeRecord.from_dict(_require(s, "start", "Cycle segment")),
                end=NodeRecord.from_dict(_require(s, "end", "Cycle segment")),
            )
            for s in raw.get("segments") or ()
        )
        return cls(anchor=NodeRecord.from_dict(_require(raw, "anchor", "Cycle")), segments=segments)


@dataclass(slots=True)
class Node:
    id: str
    label: str = ""
    kind: str = ""
    layer: str = ""
    color: str = ""
    depth: int = 0
    selected: bool = False
    parent: Optional[str] = None
    lifted_from: Optional[str] = None

    @classmethod
    def from_record(cls, record: NodeRecord, selected_id: Optional[str] = None) -> "Node":
        return cls(
            id=record.element_id,
            label=record.name,
            kind=record.kind,
            layer=record.layer,
            color=record.color,
            depth=record.depth,
            selected=selected_id is not None and record.element_id == selected_id,
        )

    def copy(self, **changes: Any) -> "Node":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "properties": {
                "kind": self.kind,
                "layer": self.layer,
                "color": self.color,
                "depth": self.depth,
                "selected": self.selected,
            },
        }
        if self.parent is not None:
            data["parent"] = self.parent
        return data


@dataclass(slots=True)
class Edge:
    id: str
    source: str
    target: str
    interaction: str
    weight: int = 1
    dependency_cycle: bool = False

    @property
    def is_containment(self) -> bool:
        return self.interaction == CONTAINS_INTERACTION

    @classmethod
    def from_record(cls, record: EdgeRecord) -> "Edge":
        return cls(
            id=record.element_id,
            source=record.start_id,
            target=record.end_id,
            interaction=record.type.lower(),
        )

    def copy(self, **changes: Any) -> "Edge":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "interaction": self.interaction,
            "properties": {"weight": self.weight},
            "violations": {"dependencyCycle": self.dependency_cycle},
        }


@dataclass(slots=True)
class Graph:
    """Labelled property graph; nodes and edges are keyed by id."""

    name: str
    nodes: Dict[str, Node] = field(default_factory=dict)
    edges: Dict[str, Edge] = field(default_factory=dict)

    @classmethod
    def from_elements(cls, name: str, nodes: Iterable[Node], edges: Iterable[Edge]) -> "Graph":
        graph = cls(name=name)
        for node in nodes:
            graph.add_node(node)
        for edge in edges:
            graph.add_edge(edge)
        return graph

    def add_node(self, node: Node) -> None:
        self.nodes.setdefault(node.id, node)

    def add_edge(self, edge: Edge) -> None:
        self.edges.setdefault(edge.id, edge)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "nodes": [n.to_dict() for n in self.nodes.values()],
            "edges": [e.to_dict() for e in self.edges.values()],
        }

