"""
Event Model for the Resource Allocation Graph Deadlock Detector.

Defines event types for tracking graph edits and detection runs in a session.
"""

from dataclasses import dataclass
from enum import Enum


class EventType(Enum):
    """Types of events in a session."""
    VERTEX_ADDED = "vertex_added"
    VERTEX_REMOVED = "vertex_removed"
    EDGE_ADDED = "edge_added"
    EDGE_REJECTED = "edge_rejected"
    EDGE_IGNORED = "edge_ignored"
    EDGE_REMOVED = "edge_removed"
    DETECTION = "detection"
    RESET = "reset"


@dataclass
class GraphEvent:
    """
    Represents a single event in a session.

    Attributes:
        sequence: Position of the event in the session (0-based)
        event_type: Type of event
        subject: Vertex id, edge id or edge label the event concerns
        message: Human-readable description
        reason: Reason for a rejection (if applicable)
    """
    sequence: int
    event_type: EventType
    subject: str = ""
    message: str = ""
    reason: str = ""

    def __str__(self) -> str:
        """Format event for logging."""
        base = f"#{self.sequence}"

        if self.event_type == EventType.VERTEX_ADDED:
            return f"{base}: added {self.subject} ({self.message})"
        elif self.event_type == EventType.VERTEX_REMOVED:
            return f"{base}: removed {self.subject} ({self.message})"
        elif self.event_type == EventType.EDGE_ADDED:
            return f"{base}: connected {self.subject} ({self.message})"
        elif self.event_type == EventType.EDGE_REJECTED:
            return f"{base}: connect {self.subject} - REJECTED ({self.reason})"
        elif self.event_type == EventType.EDGE_IGNORED:
            return f"{base}: connect {self.subject} - IGNORED (already connected)"
        elif self.event_type == EventType.EDGE_REMOVED:
            return f"{base}: disconnected {self.subject}"
        elif self.event_type == EventType.DETECTION:
            return f"{base}: detection - {self.message}"
        else:
            return f"{base}: {self.event_type.value} {self.message}".rstrip()


@dataclass
class EventLog:
    """Collection of session events."""
    events: list = None

    def __post_init__(self):
        if self.events is None:
            self.events = []

    def add(self, event_type: EventType, subject: str = "", message: str = "", reason: str = "") -> GraphEvent:
        """Append an event with the next sequence number."""
        event = GraphEvent(
            sequence=len(self.events),
            event_type=event_type,
            subject=subject,
            message=message,
            reason=reason
        )
        self.events.append(event)
        return event

    def get_events_by_type(self, event_type: EventType) -> list:
        """Get all events of a specific type."""
        return [e for e in self.events if e.event_type == event_type]

    def display(self) -> str:
        """Format all events for display."""
        return "\n".join(str(event) for event in self.events)
