"""
Scenario Loader for the Resource Allocation Graph Deadlock Detector.

Loads and validates JSON graph files into a ResourceAllocationGraph.
"""

import json
from typing import Dict, List

from models.graph import GraphError, ResourceAllocationGraph
from models.vertex import VertexKind


class GraphLoadError(Exception):
    """Exception raised when a graph file cannot be loaded or is invalid."""
    pass


def load_scenario(file_path: str) -> ResourceAllocationGraph:
    """
    Load a graph from a JSON file.

    Format:
        {
            "description": "optional text",
            "vertices": [{"id": "P1", "kind": "PROCESS"}, ...],
            "edges": [{"id": "e1", "source": "R1", "target": "P1"}, ...]
        }

    Args:
        file_path: Path to scenario JSON file

    Returns:
        Graph built from the file

    Raises:
        GraphLoadError: If file cannot be loaded or is invalid
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise GraphLoadError(f"Scenario file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise GraphLoadError(f"Invalid JSON in scenario file: {e}")

    return load_graph(data)


def load_graph(data: Dict) -> ResourceAllocationGraph:
    """
    Build a graph from already-parsed scenario data.

    Raises:
        GraphLoadError: If the data is invalid
    """
    if not isinstance(data, dict):
        raise GraphLoadError("Scenario must be a JSON object")
    if 'vertices' not in data:
        raise GraphLoadError("Scenario missing 'vertices' field")

    graph = ResourceAllocationGraph()
    _load_vertices(graph, data['vertices'])
    _load_edges(graph, data.get('edges', []))
    return graph


def _load_vertices(graph: ResourceAllocationGraph, vertex_data: List[Dict]) -> None:
    for vertex in vertex_data:
        if 'id' not in vertex:
            raise GraphLoadError("Vertex missing 'id' field")
        if 'kind' not in vertex:
            raise GraphLoadError(f"Vertex {vertex['id']} missing 'kind' field")

        try:
            kind = VertexKind.parse(vertex['kind'])
        except ValueError:
            raise GraphLoadError(f"Vertex {vertex['id']}: unknown kind '{vertex['kind']}'")

        try:
            graph.add_vertex(kind, str(vertex['id']))
        except GraphError as e:
            raise GraphLoadError(f"VALIDATION FAILED: {e}")


def _load_edges(graph: ResourceAllocationGraph, edge_data: List[Dict]) -> None:
    """
    Load edges, validating endpoints and kinds through the graph itself.
    Duplicate (source, target) pairs are dropped like any other repeat connect.
    """
    for edge in edge_data:
        for required in ('source', 'target'):
            if required not in edge:
                raise GraphLoadError(f"Edge missing '{required}' field: {edge}")

        edge_id = edge.get('id')
        try:
            graph.add_edge(
                str(edge['source']),
                str(edge['target']),
                str(edge_id) if edge_id is not None else None
            )
        except GraphError as e:
            raise GraphLoadError(f"VALIDATION FAILED: {e}")


def get_scenario_description(file_path: str) -> str:
    """
    Get description from scenario file without full loading.

    Args:
        file_path: Path to scenario JSON file

    Returns:
        Description string, or empty string if not present
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return ''
    if not isinstance(data, dict):
        return ''
    return data.get('description', '')
