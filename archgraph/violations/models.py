"""Violation data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from archgraph.models import CycleRecord, Node


@dataclass(slots=True)
class CycleStep:
    """One edge of a cycle with its denormalized endpoint nodes."""

    id: str
    source: str
    target: str
    source_node: Node
    target_node: Node

    @property
    def is_self_step(self) -> bool:
        return self.source == self.target

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "sourceNode": self.source_node.to_dict(),
            "targetNode": self.target_node.to_dict(),
        }


def raw_steps(cycle: CycleRecord) -> List[CycleStep]:
    return [
        CycleStep(
            id=s.edge.element_id,
            source=s.edge.start_id,
            target=s.edge.end_id,
            source_node=Node.from_record(s.start),
            target_node=Node.from_record(s.end),
        )
        for s in cycle.segments
    ]


def cycle_key(anchor_id: str, steps: List[CycleStep]) -> str:
    return f"{anchor_id}--{'-'.join(s.id for s in steps)}"


def raw_cycle_to_dict(cycle: CycleRecord) -> Dict[str, Any]:
    steps = raw_steps(cycle)
    return {
        "id": cycle_key(cycle.anchor.element_id, steps),
        "anchor": Node.from_record(cycle.anchor).to_dict(),
        "path": [s.to_dict() for s in steps],
        "length": cycle.length,
    }


@dataclass(slots=True)
class DependencyCycle:
    """A cycle re-expressed at the granularity of the rendered graph.

    ``actual_cycles`` are the raw cycles that collapsed onto this one.
    """

    id: str
    anchor: Node
    path: List[CycleStep]
    length: int
    actual_cycles: List[CycleRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "anchor": self.anchor.to_dict(),
            "path": [s.to_dict() for s in self.path],
            "length": self.length,
            "actualCycles": [raw_cycle_to_dict(c) for c in self.actual_cycles],
        }


@dataclass(slots=True)
class Violations:
    dependency_cycles: List[DependencyCycle] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"dependencyCycles": [c.to_dict() for c in self.dependency_cycles]}
