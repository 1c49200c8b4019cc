"""Layer summary: the containment hierarchy of node labels, top to bottom.

Labels look like ``Layer_ClassA_ClassB``: the part before the first
underscore names the layer, the rest are classes of that layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from archgraph.errors import LayerConfigurationError


@dataclass(slots=True)
class LayerRecord:
    """Labels of a container node and of a node it contains."""

    from_labels: Sequence[str]
    to_labels: Sequence[str]

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "LayerRecord":
        return cls(from_labels=list(raw.get("from") or ()), to_labels=list(raw.get("to") or ()))


@dataclass(slots=True)
class GraphLayer:
    label: str
    classes: List[str] = field(default_factory=list)
    parent_label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"label": self.label, "classes": list(self.classes)}
        if self.parent_label is not None:
            data["parentLabel"] = self.parent_label
        return data


def extract_layer(labels: Sequence[str]) -> Tuple[str, List[str]]:
    if not labels:
        return "", []
    label, *classes = labels[0].split("_")
    return label, classes


def summarize_layers(records: Iterable[LayerRecord]) -> List[GraphLayer]:
    """Collect layers with their classes and sort them from the root downwards.

    Raises LayerConfigurationError unless exactly one layer has no parent.
    """
    layers: Dict[str, GraphLayer] = {}
    for record in records:
        from_label, from_classes = extract_layer(record.from_labels)
        to_label, to_classes = extract_layer(record.to_labels)
        from_layer = layers.setdefault(from_label, GraphLayer(label=from_label))
        to_layer = layers.setdefault(to_label, GraphLayer(label=to_label))
        if to_label != from_label:
            to_layer.parent_label = from_label
        for layer, classes in ((from_layer, from_classes), (to_layer, to_classes)):
            for c in classes:
                if c not in layer.classes:
                    layer.classes.append(c)

    if not layers:
        return []
    roots = [layer for layer in layers.values() if layer.parent_label is None]
    if len(roots) != 1:
        names = ", ".join(layer.label for layer in roots) or "none"
        raise LayerConfigurationError(f"Expected exactly one top layer without a parent, found: {names}")

    children: Dict[str, GraphLayer] = {}
    for layer in layers.values():
        if layer.parent_label is not None:
            children.setdefault(layer.parent_label, layer)

    ordered = [roots[0]]
    seen = {roots[0].label}
    current = children.get(roots[0].label)
    while current is not None and current.label not in seen:
        ordered.append(current)
        seen.add(current.label)
        current = children.get(current.label)
    return ordered
