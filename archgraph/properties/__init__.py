"""Domain and layer summaries of the whole architecture graph."""

from .domains import DomainSummary, summarize_domains
from .layers import GraphLayer, LayerRecord, summarize_layers

__all__ = ["DomainSummary", "GraphLayer", "LayerRecord", "summarize_domains", "summarize_layers"]
