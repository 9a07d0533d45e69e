"""
Graph Model Tests

Tests vertex/edge mutations and the structural invariants of the
resource allocation graph.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from models.graph import (
    DuplicateVertex,
    InvalidEdge,
    ResourceAllocationGraph,
    create_default_graph,
)
from models.vertex import VertexKind


def test_add_vertices():
    """Explicit and generated vertex ids."""
    print("\n" + "="*60)
    print("TEST 1: Add Vertices")
    print("="*60)

    graph = ResourceAllocationGraph()
    p1 = graph.add_process("P1")
    r1 = graph.add_vertex("resource", "R1")

    assert p1.kind is VertexKind.PROCESS
    assert r1.kind is VertexKind.RESOURCE
    assert [v.id for v in graph.vertices] == ["P1", "R1"]

    generated = [graph.add_process() for _ in range(20)]
    ids = [v.id for v in generated]
    print(f"  Generated: {ids[:3]} ...")
    assert len(set(ids)) == 20, "Generated ids must be unique"
    assert all(v.startswith("P") and "-" in v for v in ids)
    assert graph.add_resource().id.startswith("R")

    print("  ✓ Vertices added")


def test_duplicate_vertex_id_rejected():
    graph = ResourceAllocationGraph()
    graph.add_process("P1")

    with pytest.raises(DuplicateVertex):
        graph.add_resource("P1")

    assert len(graph) == 1
    assert graph.kind_of("P1") is VertexKind.PROCESS


def test_generated_id_skips_live_ids():
    """A generated id never collides with a vertex that is already present."""
    graph = ResourceAllocationGraph()
    first = graph.add_process()
    graph.remove_vertex(first.id)
    graph.add_process(first.id)

    second = graph.add_process()
    assert second.id != first.id
    assert len(graph) == 2


def test_add_edge_validation():
    """Edges must join a process and a resource that both exist."""
    print("\n" + "="*60)
    print("TEST 2: Edge Validation")
    print("="*60)

    graph = create_default_graph()
    before = graph.edges

    with pytest.raises(InvalidEdge):
        graph.add_edge("P1", "P2")
    with pytest.raises(InvalidEdge):
        graph.add_edge("R1", "R2")
    with pytest.raises(InvalidEdge):
        graph.add_edge("P1", "R9")
    with pytest.raises(InvalidEdge):
        graph.add_edge("X", "R1")

    assert graph.edges == before, "Rejected edges must leave the graph unchanged"
    print("  ✓ Same-kind and dangling edges rejected")

    request = graph.add_edge("P2", "R1")
    assert request is not None
    assert (request.source, request.target) == ("P2", "R1")
    assert len(graph.edges) == 4
    print("  ✓ Request edge P2 -> R1 added")


def test_duplicate_connect_is_ignored():
    graph = create_default_graph()

    assert graph.add_edge("R1", "P1") is None
    assert len(graph.edges) == 3

    # Opposite direction is a different pair
    assert graph.add_edge("P1", "R1") is not None
    assert len(graph.edges) == 4


def test_explicit_edge_id_in_use():
    graph = create_default_graph()

    with pytest.raises(InvalidEdge):
        graph.add_edge("P2", "R1", "e1")
    assert graph.find_edge("P2", "R1") is None


def test_remove_vertex_cascades():
    """Removing a vertex removes exactly its incident edges."""
    print("\n" + "="*60)
    print("TEST 3: Cascading Removal")
    print("="*60)

    graph = create_default_graph()
    graph.add_edge("P2", "R1", "e4")

    incident = {e.id for e in graph.incident_edges("R2")}
    others = {e.id for e in graph.edges} - incident

    removed = graph.remove_vertex("R2")
    print(f"  Removed edges: {[str(e) for e in removed]}")

    assert {e.id for e in removed} == incident == {"e2", "e3"}
    assert {e.id for e in graph.edges} == others
    assert "R2" not in graph
    assert all(e.source != "R2" and e.target != "R2" for e in graph.edges)
    print("  ✓ Exactly the incident edges were removed")


def test_remove_absent_is_noop():
    graph = create_default_graph()

    assert graph.remove_vertex("P9") == []
    assert graph.remove_edge("e99") is None
    assert len(graph) == 4
    assert len(graph.edges) == 3

    graph.remove_vertex("P1")
    assert graph.remove_vertex("P1") == []


def test_snapshot_is_isolated():
    """Edits after a snapshot do not show up in it."""
    graph = create_default_graph()
    snapshot = graph.snapshot()

    graph.add_edge("P2", "R1")
    graph.remove_vertex("P1")

    assert [v.id for v in snapshot.vertices] == ["P1", "P2", "R1", "R2"]
    assert len(snapshot.edges) == 3


def test_snapshot_is_read_only():
    import dataclasses

    graph = create_default_graph()
    snapshot = graph.snapshot()
    assert snapshot.kind_of("P1") is VertexKind.PROCESS

    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.vertices = ()

    matrix = snapshot.adjacency_matrix
    with pytest.raises(ValueError):
        matrix[0][0] = 1
    assert snapshot.adjacency_matrix.sum() == 3
    assert [str(e) for e in snapshot.allocations] == ["R1 -> P1", "R2 -> P2"]


def test_snapshot_partitions():
    snapshot = create_default_graph().snapshot()

    assert snapshot.processes == ["P1", "P2"]
    assert snapshot.resources == ["R1", "R2"]
    assert [str(e) for e in snapshot.allocations] == ["R1 -> P1", "R2 -> P2"]
    assert [str(e) for e in snapshot.requests] == ["P1 -> R2"]
    assert snapshot.kind_of("R1") is VertexKind.RESOURCE
    assert snapshot.kind_of("nope") is None


def test_adjacency_matrix():
    snapshot = create_default_graph().snapshot()
    matrix = snapshot.adjacency_matrix

    print(f"  Matrix:\n{matrix}")
    assert matrix.shape == (4, 4)
    # Order: P1, P2, R1, R2
    assert matrix[2][0] == 1, "R1 -> P1"
    assert matrix[0][3] == 1, "P1 -> R2"
    assert matrix[3][1] == 1, "R2 -> P2"
    assert matrix.sum() == 3


def test_display():
    output = create_default_graph().snapshot().display()
    assert "Processes: P1, P2" in output
    assert "R1 -> P1" in output
    assert "P1 -> R2" in output


def main():
    """Run all graph model tests."""
    print("\n" + "="*70)
    print(" "*20 + "GRAPH MODEL TESTS")
    print("="*70)

    try:
        test_add_vertices()
        test_duplicate_vertex_id_rejected()
        test_generated_id_skips_live_ids()
        test_add_edge_validation()
        test_duplicate_connect_is_ignored()
        test_explicit_edge_id_in_use()
        test_remove_vertex_cascades()
        test_remove_absent_is_noop()
        test_snapshot_is_isolated()
        test_snapshot_is_read_only()
        test_snapshot_partitions()
        test_adjacency_matrix()
        test_display()

        print("\n✅ ALL GRAPH MODEL TESTS PASSED\n")
        return 0

    except AssertionError as e:
        print(f"\n❌ TEST FAILED: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
