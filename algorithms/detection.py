"""
Deadlock Detection Algorithm for the Resource Allocation Graph Deadlock Detector.

Implements cycle-based deadlock detection on a resource allocation graph
for single-instance resource systems.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from models.vertex import VertexKind


# Per-vertex DFS states
UNVISITED = 0
IN_PROGRESS = 1
DONE = 2


@dataclass(frozen=True)
class DeadlockResult:
    """
    Outcome of one detection run.

    Attributes:
        has_deadlock: True if the graph contains a cycle
        cycle: Witness cycle in path order; the edge from the last vertex
            back to the first is implied. Empty when there is no deadlock.
        involved_processes: Process ids on the cycle, in cycle order
        involved_resources: Resource ids on the cycle, in cycle order
    """
    has_deadlock: bool
    cycle: Tuple[str, ...] = ()
    involved_processes: Tuple[str, ...] = ()
    involved_resources: Tuple[str, ...] = ()

    def cycle_edges(self) -> List[Tuple[str, str]]:
        """(source, target) pairs along the cycle, including the closing pair."""
        if not self.cycle:
            return []
        return [
            (self.cycle[i], self.cycle[(i + 1) % len(self.cycle)])
            for i in range(len(self.cycle))
        ]

    def describe(self) -> str:
        """Cycle as 'P1 -> R2 -> P2 -> R1 -> P1', or a safe-state note."""
        if not self.has_deadlock:
            return "No cycle - system is in a safe state"
        return " -> ".join(self.cycle + (self.cycle[0],))

    def to_dict(self) -> Dict:
        return {
            'has_deadlock': self.has_deadlock,
            'cycle': list(self.cycle),
            'involved_processes': list(self.involved_processes),
            'involved_resources': list(self.involved_resources),
        }


def detect_deadlock(graph) -> DeadlockResult:
    """
    Detect deadlock by searching the graph for a directed cycle.

    Algorithm (Single-Instance Resources):
    1. Number the vertices in insertion order and build adjacency lists in
       edge insertion order (parallel edges collapse, unknown endpoints skipped)
    2. Status[v] = UNVISITED for every vertex
    3. For each UNVISITED root, run an iterative DFS over an explicit stack of
       (vertex, next edge position) pairs; a vertex is IN_PROGRESS while it is
       on the stack and DONE once all its edges are explored
    4. Reaching an IN_PROGRESS neighbour closes a cycle: the witness is the
       stack from that neighbour up to the current vertex. Stop at the first one.
    5. If every root is exhausted, there is no deadlock

    ASSUMPTION: every resource has exactly one instance. Under that model a
    cycle is both necessary and sufficient for deadlock. With multi-instance
    resources a cycle is only necessary, and a Work/Finish style safety check
    would be required instead. No such check is performed here.

    The graph is only read. Roots and neighbours are visited in insertion
    order, so repeated calls on an unchanged graph return the same witness.

    Time Complexity: O(V + E)

    Args:
        graph: ResourceAllocationGraph or GraphSnapshot (anything exposing
            `vertices` and `edges`)

    Returns:
        DeadlockResult for the graph

    References:
        Silberschatz, A., Galvin, P. B., & Gagne, G. (2018).
        Operating System Concepts (10th ed.). Chapter 7: Deadlocks.
    """
    vertices = list(graph.vertices)
    edges = list(graph.edges)

    index = {v.id: i for i, v in enumerate(vertices)}
    adjacency = _build_adjacency(index, edges)

    status = np.full(len(vertices), UNVISITED, dtype=np.int8)
    cycle_indices: List[int] = []

    for root in range(len(vertices)):
        if status[root] != UNVISITED:
            continue
        # Isolated or sink vertices cannot be on a cycle
        if not adjacency[root]:
            status[root] = DONE
            continue

        cycle_indices = _search_from(root, adjacency, status)
        if cycle_indices:
            break

    if not cycle_indices:
        return DeadlockResult(has_deadlock=False)

    cycle = tuple(vertices[i].id for i in cycle_indices)
    kinds = {v.id: v.kind for v in vertices}

    return DeadlockResult(
        has_deadlock=True,
        cycle=cycle,
        involved_processes=tuple(v for v in cycle if kinds[v] is VertexKind.PROCESS),
        involved_resources=tuple(v for v in cycle if kinds[v] is VertexKind.RESOURCE)
    )


def _build_adjacency(index: Dict[str, int], edges) -> List[List[int]]:
    """Adjacency lists by vertex index, first occurrence of each neighbour kept."""
    adjacency: List[List[int]] = [[] for _ in index]
    seen = set()

    for edge in edges:
        source = index.get(edge.source)
        target = index.get(edge.target)
        if source is None or target is None:
            continue
        if (source, target) in seen:
            continue
        seen.add((source, target))
        adjacency[source].append(target)

    return adjacency


def _search_from(root: int, adjacency: List[List[int]], status: np.ndarray) -> List[int]:
    """
    Iterative DFS from root.

    Returns:
        Vertex indices of the first cycle found, or an empty list
    """
    stack: List[List[int]] = [[root, 0]]
    position_on_path = {root: 0}
    status[root] = IN_PROGRESS

    while stack:
        frame = stack[-1]
        node, next_edge = frame

        if next_edge >= len(adjacency[node]):
            # All edges explored - backtrack
            status[node] = DONE
            del position_on_path[node]
            stack.pop()
            continue

        frame[1] += 1
        neighbor = adjacency[node][next_edge]

        if status[neighbor] == UNVISITED:
            status[neighbor] = IN_PROGRESS
            position_on_path[neighbor] = len(stack)
            stack.append([neighbor, 0])
        elif status[neighbor] == IN_PROGRESS:
            start = position_on_path[neighbor]
            return [f[0] for f in stack[start:]]
        # DONE: fully explored, cannot close a new cycle

    return []
