"""Topological sorting of directed graphs read from adjacency lists."""

__all__ = [
    "CycleDetected",
    "DanglingEdgeError",
    "DuplicatePolicy",
    "DuplicateVertexError",
    "GraphStore",
    "InDegrees",
    "Ordering",
    "ParseError",
    "SeedOrder",
    "SortReport",
    "SortResult",
    "StaleInDegreesError",
    "TopoSortEngine",
    "TopographError",
    "Vertex",
    "VertexNotFoundError",
    "build_sort_report",
    "emit_order",
    "export_report",
]

from ._errors import (
    DanglingEdgeError,
    DuplicateVertexError,
    ParseError,
    StaleInDegreesError,
    TopographError,
    VertexNotFoundError,
)
from ._graph import (
    CycleDetected,
    DuplicatePolicy,
    GraphStore,
    InDegrees,
    Ordering,
    SeedOrder,
    SortResult,
    TopoSortEngine,
    Vertex,
    emit_order,
)
from ._report import SortReport, build_sort_report, export_report
