"""
Resource Allocation Graph model for the Resource Allocation Graph Deadlock Detector.

Maintains a consistent set of process/resource vertices and the allocation and
request edges between them, rejecting structurally invalid mutations.
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from models.vertex import Edge, Vertex, VertexKind


class GraphError(Exception):
    """Base class for graph mutation errors."""
    pass


class InvalidEdge(GraphError):
    """Raised when an edge has a missing endpoint or joins two vertices of the same kind."""
    pass


class DuplicateVertex(GraphError):
    """Raised when an explicit vertex id is already in use."""
    pass


@dataclass(frozen=True)
class GraphSnapshot:
    """
    Read-only copy of a graph at one point in time.

    Vertices and edges are immutable records held in tuples, so a snapshot
    never changes when the graph it was taken from is edited afterwards.
    The snapshot itself is frozen and its cached adjacency matrix is read-only.

    Attributes:
        vertices: Vertices in insertion order
        edges: Edges in insertion order
    """
    vertices: Tuple[Vertex, ...] = ()
    edges: Tuple[Edge, ...] = ()

    _kinds: Optional[Dict[str, VertexKind]] = field(default=None, repr=False, compare=False)
    _adjacency_matrix: Optional[np.ndarray] = field(default=None, repr=False, compare=False)

    def kind_of(self, vertex_id: str) -> Optional[VertexKind]:
        """Kind of the given vertex, or None if it is not in the snapshot."""
        if self._kinds is None:
            object.__setattr__(self, "_kinds", {v.id: v.kind for v in self.vertices})
        return self._kinds.get(vertex_id)

    @property
    def processes(self) -> List[str]:
        return [v.id for v in self.vertices if v.kind is VertexKind.PROCESS]

    @property
    def resources(self) -> List[str]:
        return [v.id for v in self.vertices if v.kind is VertexKind.RESOURCE]

    @property
    def allocations(self) -> List[Edge]:
        """Edges whose source is a resource (resource held by process)."""
        return [e for e in self.edges if self.kind_of(e.source) is VertexKind.RESOURCE]

    @property
    def requests(self) -> List[Edge]:
        """Edges whose source is a process (process waiting for resource)."""
        return [e for e in self.edges if self.kind_of(e.source) is VertexKind.PROCESS]

    @property
    def adjacency_matrix(self) -> np.ndarray:
        """
        Get adjacency matrix [V][V] in vertex order.
        Parallel edges collapse to a single 1.
        """
        if self._adjacency_matrix is None:
            self._build_adjacency_matrix()
        return self._adjacency_matrix

    def _build_adjacency_matrix(self) -> None:
        index = {v.id: i for i, v in enumerate(self.vertices)}
        matrix = np.zeros((len(self.vertices), len(self.vertices)), dtype=int)
        for edge in self.edges:
            if edge.source in index and edge.target in index:
                matrix[index[edge.source]][index[edge.target]] = 1
        matrix.flags.writeable = False
        object.__setattr__(self, "_adjacency_matrix", matrix)

    def display(self) -> str:
        """
        Generate readable string representation of the graph.

        Returns:
            Formatted string listing vertices, allocations and requests
        """
        output = []
        output.append("\n" + "="*60)
        output.append("RESOURCE ALLOCATION GRAPH")
        output.append("="*60)

        output.append(f"\nProcesses: {', '.join(self.processes) or '(none)'}")
        output.append(f"Resources: {', '.join(self.resources) or '(none)'}")

        output.append("\nAllocations (held by):")
        for edge in self.allocations:
            output.append(f"  {edge.source} -> {edge.target}  [{edge.id}]")
        if not self.allocations:
            output.append("  (none)")

        output.append("\nRequests (waiting for):")
        for edge in self.requests:
            output.append(f"  {edge.source} -> {edge.target}  [{edge.id}]")
        if not self.requests:
            output.append("  (none)")

        output.append("\n" + "="*60)
        return "\n".join(output)


class ResourceAllocationGraph:
    """
    Mutable resource allocation graph.

    Invariants:
        - every edge joins a PROCESS and a RESOURCE (either direction)
        - every edge endpoint is a live vertex
        - at most one edge per ordered (source, target) pair

    Vertex and edge order follow insertion order; it is stable but only
    meant for display and reproducible detection.
    """

    def __init__(self):
        self._vertices: Dict[str, Vertex] = {}
        self._edges: Dict[str, Edge] = {}
        self._pairs: Dict[Tuple[str, str], str] = {}
        self._counters: Dict[VertexKind, int] = {kind: 0 for kind in VertexKind}
        self._edge_counter = 0

    @property
    def vertices(self) -> List[Vertex]:
        return list(self._vertices.values())

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges.values())

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, vertex_id: str) -> bool:
        return vertex_id in self._vertices

    def get_vertex(self, vertex_id: str) -> Optional[Vertex]:
        return self._vertices.get(vertex_id)

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        return self._edges.get(edge_id)

    def kind_of(self, vertex_id: str) -> Optional[VertexKind]:
        vertex = self._vertices.get(vertex_id)
        return vertex.kind if vertex else None

    def incident_edges(self, vertex_id: str) -> List[Edge]:
        """All edges that have the vertex as source or target."""
        return [
            e for e in self._edges.values()
            if e.source == vertex_id or e.target == vertex_id
        ]

    def find_edge(self, source_id: str, target_id: str) -> Optional[Edge]:
        edge_id = self._pairs.get((source_id, target_id))
        return self._edges[edge_id] if edge_id is not None else None

    def add_vertex(self, kind, vertex_id: Optional[str] = None) -> Vertex:
        """
        Create a vertex of the given kind.

        Args:
            kind: VertexKind (or its name)
            vertex_id: Explicit id; generated when omitted

        Returns:
            The new vertex

        Raises:
            DuplicateVertex: If vertex_id names a live vertex
        """
        kind = VertexKind.parse(kind)

        if vertex_id is None:
            vertex_id = self._generate_vertex_id(kind)
        elif vertex_id in self._vertices:
            raise DuplicateVertex(f"Vertex id '{vertex_id}' is already in use")

        vertex = Vertex(id=vertex_id, kind=kind)
        self._vertices[vertex_id] = vertex
        return vertex

    def add_process(self, vertex_id: Optional[str] = None) -> Vertex:
        return self.add_vertex(VertexKind.PROCESS, vertex_id)

    def add_resource(self, vertex_id: Optional[str] = None) -> Vertex:
        return self.add_vertex(VertexKind.RESOURCE, vertex_id)

    def remove_vertex(self, vertex_id: str) -> List[Edge]:
        """
        Remove a vertex together with every edge that references it.
        Removing an absent id is a no-op.

        Returns:
            The edges removed along with the vertex
        """
        if vertex_id not in self._vertices:
            return []

        removed = self.incident_edges(vertex_id)
        for edge in removed:
            self.remove_edge(edge.id)
        del self._vertices[vertex_id]
        return removed

    def add_edge(self, source_id: str, target_id: str, edge_id: Optional[str] = None) -> Optional[Edge]:
        """
        Connect two vertices.

        A PROCESS -> RESOURCE edge is a request, RESOURCE -> PROCESS an allocation.
        Connecting a pair that is already connected in the same direction is
        ignored and returns None.

        Args:
            source_id: Id of the source vertex
            target_id: Id of the target vertex
            edge_id: Explicit edge id; generated when omitted

        Returns:
            The new edge, or None if the pair was already connected

        Raises:
            InvalidEdge: If an endpoint is missing, both endpoints have the
                same kind, or edge_id is already in use
        """
        source = self._vertices.get(source_id)
        target = self._vertices.get(target_id)

        if source is None or target is None:
            missing = source_id if source is None else target_id
            raise InvalidEdge(f"Cannot connect {source_id} -> {target_id}: vertex '{missing}' not found")

        if source.kind is target.kind:
            raise InvalidEdge(
                f"Cannot connect {source_id} -> {target_id}: "
                f"edges must be between a process and a resource"
            )

        if self.find_edge(source_id, target_id) is not None:
            return None

        if edge_id is None:
            edge_id = self._generate_edge_id()
        elif edge_id in self._edges:
            raise InvalidEdge(f"Edge id '{edge_id}' is already in use")

        edge = Edge(id=edge_id, source=source_id, target=target_id)
        self._edges[edge_id] = edge
        self._pairs[(source_id, target_id)] = edge_id
        return edge

    def remove_edge(self, edge_id: str) -> Optional[Edge]:
        """Remove an edge; returns it, or None if it was absent."""
        edge = self._edges.pop(edge_id, None)
        if edge is not None:
            del self._pairs[(edge.source, edge.target)]
        return edge

    def snapshot(self) -> GraphSnapshot:
        """Copy the current vertices and edges into a GraphSnapshot."""
        return GraphSnapshot(
            vertices=tuple(self._vertices.values()),
            edges=tuple(self._edges.values())
        )

    def _generate_vertex_id(self, kind: VertexKind) -> str:
        # <prefix><counter>-<last 4 digits of the clock>, re-drawn until unused
        while True:
            self._counters[kind] += 1
            candidate = f"{kind.prefix}{self._counters[kind]}-{_time_suffix()}"
            if candidate not in self._vertices:
                return candidate

    def _generate_edge_id(self) -> str:
        while True:
            self._edge_counter += 1
            candidate = f"e{self._edge_counter}-{_time_suffix()}"
            if candidate not in self._edges:
                return candidate

    def __repr__(self) -> str:
        return f"ResourceAllocationGraph(vertices={len(self._vertices)}, edges={len(self._edges)})"


def _time_suffix() -> str:
    return str(time.time_ns() // 1_000_000)[-4:]


def create_default_graph() -> ResourceAllocationGraph:
    """
    Build the starting graph: two processes, two resources and a wait chain.

    R1 is held by P1, P1 waits for R2, R2 is held by P2. No cycle, so the
    default state is safe until P2 requests R1.
    """
    graph = ResourceAllocationGraph()
    graph.add_process("P1")
    graph.add_process("P2")
    graph.add_resource("R1")
    graph.add_resource("R2")

    graph.add_edge("R1", "P1", "e1")
    graph.add_edge("P1", "R2", "e2")
    graph.add_edge("R2", "P2", "e3")
    return graph
