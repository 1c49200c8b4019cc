"""Architecture violations projected onto the rendered graph."""

from .cycles import ProjectionContext, ViolationProjector, extract_and_abstract_dependency_cycles
from .models import CycleStep, DependencyCycle, Violations

__all__ = [
    "CycleStep",
    "DependencyCycle",
    "ProjectionContext",
    "ViolationProjector",
    "Violations",
    "extract_and_abstract_dependency_cycles",
]
