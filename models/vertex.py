"""
Vertex and edge records for the Resource Allocation Graph Deadlock Detector.

Both records are immutable and carry graph identity only. Layout state
(positions, pinned coordinates, velocities) belongs to whatever renders the
graph and is joined to these records by id.
"""

from dataclasses import dataclass
from enum import Enum


class VertexKind(Enum):
    """Kinds of vertices in a resource allocation graph."""
    PROCESS = "PROCESS"
    RESOURCE = "RESOURCE"

    @property
    def prefix(self) -> str:
        """Letter used when generating ids for this kind."""
        return "P" if self is VertexKind.PROCESS else "R"

    @classmethod
    def parse(cls, value) -> "VertexKind":
        """Accept a VertexKind or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        return cls(str(value).upper())


@dataclass(frozen=True)
class Vertex:
    """
    A process or resource in the graph.

    Attributes:
        id: Identifier, unique among the live vertices of a graph
        kind: PROCESS or RESOURCE
    """
    id: str
    kind: VertexKind

    @property
    def is_process(self) -> bool:
        return self.kind is VertexKind.PROCESS

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class Edge:
    """
    A directed edge between a process and a resource.

    RESOURCE -> PROCESS is an allocation (the resource is held by the process).
    PROCESS -> RESOURCE is a request (the process waits for the resource).

    Attributes:
        id: Edge identifier (unique)
        source: Id of the source vertex
        target: Id of the target vertex
    """
    id: str
    source: str
    target: str

    def __str__(self) -> str:
        return f"{self.source} -> {self.target}"
