"""Graph module providing the vertex store and the topological sort engine.

This module contains:
- GraphStore[T]: Vertices and adjacency lists read from an adjacency-list text
- TopoSortEngine[T]: Kahn's algorithm over a GraphStore
"""

from ._engine import CycleDetected, InDegrees, Ordering, SeedOrder, SortResult, TopoSortEngine, emit_order
from ._store import DuplicatePolicy, GraphStore, Vertex

__all__ = [
    "CycleDetected",
    "DuplicatePolicy",
    "GraphStore",
    "InDegrees",
    "Ordering",
    "SeedOrder",
    "SortResult",
    "TopoSortEngine",
    "Vertex",
    "emit_order",
]
