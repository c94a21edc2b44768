"""Topological sorting of a GraphStore with Kahn's in-degree method."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING

from topograph._errors import DanglingEdgeError, StaleInDegreesError, VertexNotFoundError

from ._algorithms import kahn_order

if TYPE_CHECKING:
    from typing import TextIO

    from ._store import GraphStore

logger = logging.getLogger(__name__)


class SeedOrder(StrEnum):
    """Order in which the initial in-degree-0 vertices are queued."""

    INSERTION = "insertion"
    SORTED = "sorted"


@dataclass(frozen=True, slots=True, eq=False)
class InDegrees[T: Hashable]:
    """In-degree of every vertex of one graph revision.

    Only ``TopoSortEngine.compute_in_degrees`` produces these, so holding one
    proves the in-degree pass ran before the sort.
    """

    graph: GraphStore[T]
    revision: int
    counts: Mapping[T, int]

    def __getitem__(self, label: T) -> int:
        try:
            return self.counts[label]
        except KeyError:
            raise VertexNotFoundError(label) from None


@dataclass(frozen=True, slots=True)
class Ordering[T: Hashable]:
    """A topological order: every edge points from an earlier to a later label."""

    labels: tuple[T, ...]
    _ranks: Mapping[T, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        ranks = {label: position for position, label in enumerate(self.labels, start=1)}
        object.__setattr__(self, "_ranks", MappingProxyType(ranks))

    def rank(self, label: T) -> int:
        """1-based position of ``label`` in the order, in O(1)."""
        try:
            return self._ranks[label]
        except KeyError:
            raise VertexNotFoundError(label) from None

    def __iter__(self) -> Iterator[T]:
        return iter(self.labels)

    def __len__(self) -> int:
        return len(self.labels)


@dataclass(frozen=True, slots=True)
class CycleDetected[T: Hashable]:
    """Verdict that no topological order exists.

    Attributes:
        sorted_count: Number of vertices popped before the queue ran dry.
        unresolved: Vertices whose in-degree never reached 0. Empty when the
            shortfall comes only from dropped duplicate vertex lines.

    """

    sorted_count: int
    unresolved: tuple[T, ...]


type SortResult[T: Hashable] = Ordering[T] | CycleDetected[T]


class TopoSortEngine[T: Hashable]:
    """Computes in-degrees and topological orders for one GraphStore.

    Example:
        >>> from topograph import GraphStore
        >>> graph = GraphStore.from_lines(["A B C", "B C", "C"])
        >>> engine = TopoSortEngine(graph)
        >>> engine.topological_sort(engine.compute_in_degrees())
        Ordering(labels=('A', 'B', 'C'))

    """

    def __init__(self, graph: GraphStore[T], *, seed_order: SeedOrder = SeedOrder.INSERTION) -> None:
        self.graph = graph
        self.seed_order = seed_order

    def compute_in_degrees(self) -> InDegrees[T]:
        """Reset and recount the in-degree of every vertex in O(V+E).

        Also resets every vertex rank to 0.

        Raises:
            DanglingEdgeError: If an edge targets a label that is not a vertex.

        """
        vertices = list(self.graph.for_each_vertex())
        for vertex in vertices:
            for target in vertex.adjacency:
                if target not in self.graph:
                    raise DanglingEdgeError(vertex.label, target)

        for vertex in vertices:
            vertex.in_degree = 0
            vertex.rank = 0
        for vertex in vertices:
            for target in vertex.adjacency:
                self.graph.lookup(target).in_degree += 1

        counts = {vertex.label: vertex.in_degree for vertex in vertices}
        logger.debug("Computed in-degrees for %d vertices", len(counts))
        return InDegrees(self.graph, self.graph.revision, MappingProxyType(counts))

    def topological_sort(self, in_degrees: InDegrees[T]) -> SortResult[T]:
        """Order the graph by repeatedly removing a vertex of in-degree 0.

        The snapshot itself is left untouched, so sorting the same snapshot
        again gives the same result. On success each vertex's ``rank`` is set
        to its 1-based position.

        Args:
            in_degrees: Result of ``compute_in_degrees`` for the current graph.

        Returns:
            An ``Ordering`` of all vertices, or ``CycleDetected`` if fewer than
            ``graph.size()`` vertices could be removed.

        Raises:
            StaleInDegreesError: If the snapshot belongs to another graph or to
                an earlier revision of this one.

        """
        if in_degrees.graph is not self.graph:
            msg = "In-degrees were computed for a different graph"
            raise StaleInDegreesError(msg)
        if in_degrees.revision != self.graph.revision:
            msg = (
                f"In-degrees were computed for revision {in_degrees.revision}, "
                f"graph is at revision {self.graph.revision}"
            )
            raise StaleInDegreesError(msg)

        vertices = list(self.graph.for_each_vertex())
        adjacency = {vertex.label: vertex.adjacency for vertex in vertices}
        indegree = dict(in_degrees.counts)
        seed = [vertex.label for vertex in vertices if indegree[vertex.label] == 0]
        if self.seed_order is SeedOrder.SORTED:
            seed.sort()  # type: ignore[call-arg]
        logger.debug("Seeding queue with %d in-degree 0 vertices", len(seed))

        order = kahn_order(adjacency, indegree, seed)

        for vertex in vertices:
            vertex.in_degree = indegree[vertex.label]

        if len(order) != self.graph.size():
            unresolved = tuple(vertex.label for vertex in vertices if indegree[vertex.label] > 0)
            logger.debug("Cycle detected: %d of %d vertices sorted", len(order), self.graph.size())
            return CycleDetected(len(order), unresolved)

        for rank, label in enumerate(order, start=1):
            self.graph.lookup(label).rank = rank
        return Ordering(tuple(order))

    def run(self) -> SortResult[T]:
        """Compute in-degrees and sort in one step."""
        return self.topological_sort(self.compute_in_degrees())


def emit_order(output: TextIO, ordering: Ordering, *, with_trailing_newline: bool = True) -> None:
    """Write the labels of ``ordering`` separated by single spaces.

    Raises:
        TypeError: If given a ``CycleDetected`` verdict or any non-``Ordering``.

    """
    if not isinstance(ordering, Ordering):
        msg = f"Expected an Ordering, got {type(ordering).__name__}"
        raise TypeError(msg)
    output.write(" ".join(str(label) for label in ordering))
    if with_trailing_newline:
        output.write("\n")
