"""Path pre-processing, abstraction and merging."""

from .abstraction import AbstractionEngine, AbstractionOptions, AbstractionResult, build_abstraction_map
from .chunks import ChunkedPath, split_chunks
from .merge import merge_and_validate, merge_graphs, validate_graph
from .preprocess import PreProcessor

__all__ = [
    "AbstractionEngine",
    "AbstractionOptions",
    "AbstractionResult",
    "ChunkedPath",
    "PreProcessor",
    "build_abstraction_map",
    "merge_and_validate",
    "merge_graphs",
    "split_chunks",
    "validate_graph",
]
