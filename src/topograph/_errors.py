"""Exceptions raised while building and sorting graphs."""


class TopographError(Exception):
    """Base class for all graph construction and sorting errors."""


class ParseError(TopographError, ValueError):
    """A line of the adjacency-list input could not be parsed."""

    def __init__(self, line_number: int, token: str, reason: str) -> None:
        self.line_number = line_number
        self.token = token
        msg = f"Line {line_number}: cannot parse label {token!r} ({reason})"
        super().__init__(msg)


class DuplicateVertexError(TopographError, ValueError):
    """A vertex label was defined on more than one line."""

    def __init__(self, label: object, line_number: int) -> None:
        self.label = label
        self.line_number = line_number
        msg = f"Line {line_number}: vertex {label!r} is already defined"
        super().__init__(msg)


class VertexNotFoundError(TopographError, KeyError):
    """Lookup of a label that is not a vertex of the graph."""

    def __init__(self, label: object) -> None:
        self.label = label
        super().__init__(label)

    def __str__(self) -> str:
        return f"Vertex {self.label!r} not found in graph"


class DanglingEdgeError(TopographError, ValueError):
    """An adjacency list references a label that was never defined as a vertex."""

    def __init__(self, source: object, target: object) -> None:
        self.source = source
        self.target = target
        msg = f"Vertex {source!r} has an edge to undefined vertex {target!r}"
        super().__init__(msg)


class StaleInDegreesError(TopographError, RuntimeError):
    """In-degrees were computed for another graph or an older revision of it."""
