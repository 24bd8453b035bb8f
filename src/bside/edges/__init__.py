"""Edge classification used to assist triangle growth."""

from bside.edges.detector import (
    EDGE_MODES,
    NO_EDGE_ASSIST,
    EdgeAssist,
    detect_edges,
    validate_stencil,
)

__all__ = ["EDGE_MODES", "NO_EDGE_ASSIST", "EdgeAssist", "detect_edges", "validate_stencil"]
