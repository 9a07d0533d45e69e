#!/usr/bin/env python3
"""
Resource Allocation Graph Deadlock Detector
Main entry point for the detection session.

Educational tool for reasoning about deadlock in single-instance
resource allocation graphs.
"""

import argparse
import sys
from typing import List, Optional

from models.graph import GraphError, ResourceAllocationGraph, create_default_graph
from models.vertex import Edge, Vertex, VertexKind
from algorithms.detection import DeadlockResult, detect_deadlock
from analysis.advisor import SAFE_STATE_MESSAGE, Advisor, advise, explain_locally
from analysis.events import EventLog, EventType
from utils.logger import SessionLogger
from utils.scenario_loader import GraphLoadError, get_scenario_description, load_scenario


class DeadlockSession:
    """
    Owns one editable graph together with its latest detection result.

    Edits go through the session one at a time; detection always runs on a
    snapshot, so a result never reflects a half-applied edit.
    """

    def __init__(
        self,
        graph: Optional[ResourceAllocationGraph] = None,
        advisor: Advisor = explain_locally,
        logger: Optional[SessionLogger] = None
    ):
        self.graph = graph if graph is not None else create_default_graph()
        self.advisor = advisor
        self.logger = logger or SessionLogger(quiet=True)
        self.event_log = EventLog()
        self.result: Optional[DeadlockResult] = None
        self.advice = ""

    def add_process(self, vertex_id: Optional[str] = None) -> Vertex:
        return self._add_vertex(VertexKind.PROCESS, vertex_id)

    def add_resource(self, vertex_id: Optional[str] = None) -> Vertex:
        return self._add_vertex(VertexKind.RESOURCE, vertex_id)

    def _add_vertex(self, kind: VertexKind, vertex_id: Optional[str]) -> Vertex:
        vertex = self.graph.add_vertex(kind, vertex_id)
        self._invalidate()
        self.logger.log_edit("Added", vertex.id, vertex.kind.value.lower())
        self.event_log.add(EventType.VERTEX_ADDED, vertex.id, vertex.kind.value.lower())
        return vertex

    def connect(self, source_id: str, target_id: str) -> Optional[Edge]:
        """
        Add an allocation or request edge.

        Returns:
            The new edge, or None if the pair was already connected

        Raises:
            InvalidEdge: If the edge is illegal; the graph is left unchanged
        """
        label = f"{source_id} -> {target_id}"
        try:
            edge = self.graph.add_edge(source_id, target_id)
        except GraphError as e:
            self.logger.log_rejection(source_id, target_id, str(e))
            self.event_log.add(EventType.EDGE_REJECTED, label, reason=str(e))
            raise

        if edge is None:
            self.logger.log(f"Connect {label} - already connected, ignored", "debug")
            self.event_log.add(EventType.EDGE_IGNORED, label)
            return None

        self._invalidate()
        relation = "request" if self.graph.get_vertex(source_id).is_process else "allocation"
        self.logger.log_edit("Connected", label, relation)
        self.event_log.add(EventType.EDGE_ADDED, label, f"{relation}, {edge.id}")
        return edge

    def remove_node(self, vertex_id: str) -> List[Edge]:
        """Remove a vertex and its edges; absent ids are ignored."""
        if vertex_id not in self.graph:
            self.logger.log(f"Remove {vertex_id} - not found, ignored", "debug")
            return []

        removed = self.graph.remove_vertex(vertex_id)
        self._invalidate()
        self.logger.log_edit("Removed", vertex_id, f"{len(removed)} edge(s)")
        self.event_log.add(EventType.VERTEX_REMOVED, vertex_id, f"{len(removed)} edge(s)")
        return removed

    def remove_edge(self, edge_id: str) -> Optional[Edge]:
        edge = self.graph.remove_edge(edge_id)
        if edge is None:
            self.logger.log(f"Disconnect {edge_id} - not found, ignored", "debug")
            return None

        self._invalidate()
        self.logger.log_edit("Disconnected", str(edge), edge.id)
        self.event_log.add(EventType.EDGE_REMOVED, f"{edge} [{edge.id}]")
        return edge

    def reset(self) -> None:
        """Restore the default graph and clear any previous result."""
        self.graph = create_default_graph()
        self._invalidate()
        self.logger.log("Reset to default graph")
        self.event_log.add(EventType.RESET)

    def _invalidate(self) -> None:
        """Drop the result and advice of an earlier graph state."""
        self.result = None
        self.advice = ""

    def run_detection(self) -> DeadlockResult:
        """
        Detect deadlock on a snapshot of the current graph.

        When a deadlock is found the advisor is run as well; otherwise the
        advice is the fixed safe-state message.
        """
        snapshot = self.graph.snapshot()
        self.logger.log_graph(snapshot.display())

        result = detect_deadlock(snapshot)
        self.result = result

        self.logger.log_detection(result.has_deadlock, list(result.cycle))
        self.event_log.add(EventType.DETECTION, message=result.describe())

        if result.has_deadlock:
            self.logger.log(f"  Processes in deadlock: {list(result.involved_processes)}")
            self.logger.log(f"  Resources in deadlock: {list(result.involved_resources)}")
            self.advice = advise(snapshot, result, self.advisor, self.logger)
        else:
            self.advice = SAFE_STATE_MESSAGE

        return result

    def explain(self) -> str:
        """Advisory text for the current graph, re-running detection after any edit."""
        if self.result is None:
            self.run_detection()
        if not self.result.has_deadlock:
            return advise(self.graph.snapshot(), self.result, self.advisor, self.logger)
        return self.advice


def run_session(
    scenario_path: Optional[str],
    connects: List[List[str]],
    disconnects: List[str],
    removals: List[str],
    explain: bool,
    verbose: bool,
    log_file: Optional[str] = None
) -> int:
    """
    Load a graph, apply edits and report the detection result.

    Edit Ordering:
    1. Remove nodes (cascade to their edges)
    2. Remove edges
    3. Add edges in the order given

    Args:
        scenario_path: Path to graph JSON file (default graph if None)
        connects: [source, target] pairs to connect
        disconnects: Edge ids to remove
        removals: Vertex ids to remove
        explain: Print advisory text
        verbose: Enable verbose logging
        log_file: Optional log file path

    Returns:
        Exit status (0 ok, 1 error)
    """
    logger = SessionLogger(verbose=verbose, log_file=log_file)

    try:
        if scenario_path:
            try:
                graph = load_scenario(scenario_path)
            except GraphLoadError as e:
                logger.log(f"Failed to load scenario: {e}", "error")
                return 1
            logger.log(f"Scenario: {scenario_path}")
            description = get_scenario_description(scenario_path)
            if description:
                logger.log(f"  {description}")
        else:
            graph = create_default_graph()
            logger.log("Scenario: default graph")

        session = DeadlockSession(graph=graph, logger=logger)

        for vertex_id in removals:
            session.remove_node(vertex_id)
        for edge_id in disconnects:
            session.remove_edge(edge_id)
        for source_id, target_id in connects:
            try:
                session.connect(source_id, target_id)
            except GraphError:
                return 1

        logger.log(f"\n{'='*60}")
        session.run_detection()
        logger.log(f"{'='*60}")

        if explain:
            logger.log("")
            logger.log(session.explain())

        if verbose:
            logger.log("\nSession History:", "debug")
            logger.log(session.event_log.display(), "debug")

        return 0
    finally:
        logger.close()


def main():
    """Main entry point for the detector."""
    parser = argparse.ArgumentParser(
        description='Resource Allocation Graph Deadlock Detector'
    )
    parser.add_argument(
        '--scenario',
        type=str,
        default=None,
        help='Path to graph JSON file (default: built-in two-process graph)'
    )
    parser.add_argument(
        '--connect',
        nargs=2,
        action='append',
        default=[],
        metavar=('SOURCE', 'TARGET'),
        help='Add an edge before detection (repeatable)'
    )
    parser.add_argument(
        '--disconnect',
        action='append',
        default=[],
        metavar='EDGE_ID',
        help='Remove an edge before detection (repeatable)'
    )
    parser.add_argument(
        '--remove',
        action='append',
        default=[],
        metavar='VERTEX_ID',
        help='Remove a vertex and its edges before detection (repeatable)'
    )
    parser.add_argument(
        '--explain',
        action='store_true',
        help='Print an explanation and recovery suggestions'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='Also write the log to this file'
    )

    args = parser.parse_args()

    return run_session(
        args.scenario,
        args.connect,
        args.disconnect,
        args.remove,
        args.explain,
        args.verbose,
        args.log_file
    )


if __name__ == '__main__':
    sys.exit(main())
