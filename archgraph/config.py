"""Per-request options and their environment defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_LAYER_DEPTH = 1
DEFAULT_DEPENDENCY_DEPTH = 1


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name, "").strip().lower()
    if not value:
        return default
    return value in ("1", "true", "yes", "on")


@dataclass(frozen=True, slots=True)
class Range:
    """Inclusive bounds on a distinct-neighbor count; either side optional."""

    min: Optional[int] = None
    max: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return not self.min and not self.max

    def contains(self, value: int) -> bool:
        if self.min and value < self.min:
            return False
        if self.max and value > self.max:
            return False
        return True


@dataclass(frozen=True, slots=True)
class QueryOptions:
    """Options of one graph request.

    ``layer_depth`` is the containment cutoff used by the abstraction,
    ``dependency_depth`` bounds the length of the dependency chunk of a path.
    ``domain_id`` names the selected node's domain for the internal/external
    restriction; when unset it is the outermost ancestor returned by the
    parents query, or the selected id for a top-level node.
    """

    id: str
    layer_depth: int = DEFAULT_LAYER_DEPTH
    dependency_depth: int = DEFAULT_DEPENDENCY_DEPTH
    only_internal_relations: bool = False
    only_external_relations: bool = False
    show_dependencies: bool = True
    show_dependents: bool = False
    dependency_range: Range = field(default_factory=Range)
    dependent_range: Range = field(default_factory=Range)
    self_edges: bool = True
    domain_id: Optional[str] = None


def load_query_options(node_id: str, **overrides) -> QueryOptions:
    """Build QueryOptions from ARCHGRAPH_* env defaults plus explicit overrides."""
    defaults = {
        "layer_depth": _env_int("ARCHGRAPH_LAYER_DEPTH", DEFAULT_LAYER_DEPTH),
        "dependency_depth": _env_int("ARCHGRAPH_DEPENDENCY_DEPTH", DEFAULT_DEPENDENCY_DEPTH),
        "self_edges": _env_bool("ARCHGRAPH_SELF_EDGES", True),
    }
    defaults.update({k: v for k, v in overrides.items() if v is not None})
    return QueryOptions(id=node_id, **defaults)
