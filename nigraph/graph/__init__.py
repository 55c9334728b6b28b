"""Extraction of signals defined on the nodes of a voxel graph."""

from .extraction import check_registration, extract_graph_signals
from .transformer import GraphSignalExtractor

__all__ = [
    "GraphSignalExtractor",
    "check_registration",
    "extract_graph_signals",
]
