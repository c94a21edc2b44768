"""Vertex container built from a line-oriented adjacency list."""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from topograph._errors import DuplicateVertexError, ParseError, VertexNotFoundError

if TYPE_CHECKING:
    from typing import TextIO

logger = logging.getLogger(__name__)


class DuplicatePolicy(StrEnum):
    """What to do when a vertex label appears on more than one input line."""

    KEEP_FIRST = "keep-first"
    REJECT = "reject"
    OVERWRITE = "overwrite"
    MERGE = "merge"


@dataclass(slots=True)
class Vertex[T: Hashable]:
    """A labelled vertex and its outgoing edges.

    Attributes:
        label: Unique label of the vertex.
        adjacency: Labels of edge targets, in input order. Duplicates and
            self-loops are kept.
        in_degree: Number of incoming edges, set by the sort engine.
        rank: 1-based position in the last topological order, 0 if unassigned.

    """

    label: T
    adjacency: list[T] = field(default_factory=list)
    in_degree: int = 0
    rank: int = 0

    def __str__(self) -> str:
        return f"{self.label} :" + "".join(f" {target}" for target in self.adjacency)


class GraphStore[T: Hashable]:
    """Directed graph owning its vertices, keyed by label.

    Vertices are iterated in insertion order, which makes graph dumps and the
    in-degree-0 seed of the sort reproducible across runs.

    ``vertex_count`` counts parsed vertex lines rather than distinct labels.
    Under ``DuplicatePolicy.KEEP_FIRST`` a dropped duplicate still counts, so
    such a graph can never be fully ordered.
    """

    def __init__(
        self,
        *,
        parse_label: Callable[[str], T] = str,  # type: ignore[assignment]
        duplicates: DuplicatePolicy = DuplicatePolicy.KEEP_FIRST,
    ) -> None:
        self._vertices: dict[T, Vertex[T]] = {}
        self._parse_label = parse_label
        self.duplicates = duplicates
        self.vertex_count = 0
        self.revision = 0

    @classmethod
    def from_lines(
        cls,
        lines: Iterable[str],
        *,
        parse_label: Callable[[str], T] = str,  # type: ignore[assignment]
        duplicates: DuplicatePolicy = DuplicatePolicy.KEEP_FIRST,
    ) -> GraphStore[T]:
        """Create a store and build it from ``lines``.

        Example:
            >>> graph = GraphStore.from_lines(["A B C", "B C", "C"])
            >>> graph.lookup("A").adjacency
            ['B', 'C']

        """
        graph = cls(parse_label=parse_label, duplicates=duplicates)
        graph.build(lines)
        return graph

    def build(self, lines: Iterable[str]) -> GraphStore[T]:
        """Read one vertex per line until a blank line or the end of input.

        The first whitespace-separated token of a line is the vertex label,
        the remaining tokens are the targets of its outgoing edges. Lines
        holding only whitespace are skipped. Lines after the first blank line
        are left unread.

        Args:
            lines: Input lines, with or without line terminators.

        Returns:
            The store itself.

        Raises:
            ParseError: If a token cannot be converted to a label.
            DuplicateVertexError: If a label repeats under ``DuplicatePolicy.REJECT``.

        """
        self.revision += 1
        for line_number, line in enumerate(lines, start=1):
            text = line.rstrip("\r\n")
            if not text:
                logger.debug("Blank line %d ends the graph description", line_number)
                break
            tokens = text.split()
            if not tokens:
                continue
            label, *adjacency = (self._convert(token, line_number) for token in tokens)
            self._insert(Vertex(label, adjacency), line_number)
        logger.debug("Built graph with %d vertices", self.vertex_count)
        return self

    def _convert(self, token: str, line_number: int) -> T:
        try:
            return self._parse_label(token)
        except ValueError as e:
            raise ParseError(line_number, token, str(e)) from e

    def _insert(self, vertex: Vertex[T], line_number: int) -> None:
        existing = self._vertices.get(vertex.label)
        if existing is None:
            self._vertices[vertex.label] = vertex
            self.vertex_count += 1
            return

        match self.duplicates:
            case DuplicatePolicy.REJECT:
                raise DuplicateVertexError(vertex.label, line_number)
            case DuplicatePolicy.OVERWRITE:
                existing.adjacency = vertex.adjacency
            case DuplicatePolicy.MERGE:
                existing.adjacency.extend(vertex.adjacency)
            case DuplicatePolicy.KEEP_FIRST:
                self.vertex_count += 1
                logger.warning(
                    "Line %d: duplicate vertex %r dropped along with its %d edge(s)",
                    line_number,
                    vertex.label,
                    len(vertex.adjacency),
                )

    def lookup(self, label: T) -> Vertex[T]:
        """Get the vertex with the given label.

        Raises:
            VertexNotFoundError: If no vertex has this label.

        """
        try:
            return self._vertices[label]
        except KeyError:
            raise VertexNotFoundError(label) from None

    def size(self) -> int:
        """Number of vertex lines successfully parsed."""
        return self.vertex_count

    def for_each_vertex(self) -> Iterator[Vertex[T]]:
        """Iterate over the vertices in insertion order."""
        yield from self._vertices.values()

    def labels(self) -> list[T]:
        return list(self._vertices)

    def edge_count(self) -> int:
        return sum(len(vertex.adjacency) for vertex in self._vertices.values())

    def successors(self) -> dict[T, list[T]]:
        """Plain mapping from each label to a copy of its adjacency list."""
        return {label: list(vertex.adjacency) for label, vertex in self._vertices.items()}

    def display(self, output: TextIO) -> None:
        """Write one ``label : target1 target2 ...`` line per vertex."""
        for vertex in self._vertices.values():
            output.write(f"{vertex}\n")

    def __len__(self) -> int:
        return self.vertex_count

    def __contains__(self, label: object) -> bool:
        return label in self._vertices

    def __repr__(self) -> str:
        return f"GraphStore(vertices={len(self._vertices)}, vertex_count={self.vertex_count})"
