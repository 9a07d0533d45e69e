"""
Advisory text for the Resource Allocation Graph Deadlock Detector.

Turns a graph snapshot and its detection result into an explanation of why
the state is (or is not) deadlocked and how it could be recovered.

The text generator is injected: anything callable as
``advisor(snapshot, result) -> str``. `explain_locally` is the offline
default; `prompt_advisor` adapts a remote text-generation client. The
advisor only reads its inputs and never mutates the graph.
"""

from typing import Callable, List, Optional

from models.graph import GraphSnapshot
from models.vertex import VertexKind
from algorithms.detection import DeadlockResult


Advisor = Callable[[GraphSnapshot, DeadlockResult], str]

SAFE_STATE_MESSAGE = "No deadlock detected. The system is in a safe state."
EMPTY_ANALYSIS_MESSAGE = "No analysis could be generated."
SERVICE_ERROR_MESSAGE = (
    "Error connecting to the advisory service. "
    "Please ensure it is available and configured correctly."
)


def build_prompt(snapshot: GraphSnapshot, result: DeadlockResult) -> str:
    """
    Build the prompt sent to a text-generation service.

    Args:
        snapshot: Graph state that was analysed
        result: Detection result for that state

    Returns:
        Prompt text
    """
    allocations = [f"{e.source} -> {e.target}" for e in snapshot.allocations]
    requests = [f"{e.source} -> {e.target}" for e in snapshot.requests]

    verdict = "YES" if result.has_deadlock else "NO"
    state = "a deadlock (Circular Wait)" if result.has_deadlock else "safe"

    lines = [
        "Act as an Operating Systems Expert. Analyze the following Resource Allocation Graph (RAG) state:",
        "",
        "System State:",
        f"- Processes: {', '.join(snapshot.processes)}",
        f"- Resources: {', '.join(snapshot.resources)}",
        f"- Current Allocations (Held by): {', '.join(allocations)}",
        f"- Current Requests (Waiting for): {', '.join(requests)}",
        "",
        "Detection Result:",
        f"- Deadlock Detected: {verdict}",
    ]
    if result.has_deadlock:
        lines.append(f"- Cycle Involved: {result.describe()}")

    lines += [
        "",
        "Task:",
        f"1. Explain clearly why this state is {state}.",
        "2. If a deadlock exists, suggest 3 specific strategies to recover "
        "(e.g., which process to kill, which resource to preempt).",
        "3. Keep the tone educational but technical.",
        "4. Format the output with clear headings. Use Markdown.",
    ]
    return "\n".join(lines)


def prompt_advisor(send: Callable[[str], Optional[str]]) -> Advisor:
    """
    Wrap a prompt -> text client as an Advisor.

    Args:
        send: Callable that submits a prompt and returns generated text

    Returns:
        Advisor that builds the prompt and delegates to `send`
    """
    def advisor(snapshot: GraphSnapshot, result: DeadlockResult) -> str:
        return send(build_prompt(snapshot, result))

    return advisor


def explain_locally(snapshot: GraphSnapshot, result: DeadlockResult) -> str:
    """
    Deterministic Markdown explanation that needs no external service.

    Args:
        snapshot: Graph state that was analysed
        result: Detection result for that state

    Returns:
        Markdown text
    """
    if not result.has_deadlock:
        return "\n".join([
            "## Safe State",
            "",
            f"The graph has {len(snapshot.processes)} process(es), "
            f"{len(snapshot.resources)} resource(s), {len(snapshot.allocations)} allocation(s) "
            f"and {len(snapshot.requests)} request(s), but no circular wait.",
            "Every waiting process can eventually obtain its resource once the holder releases it.",
        ])

    output: List[str] = ["## Deadlock Detected (Circular Wait)", ""]
    output.append(f"Cycle: `{result.describe()}`")
    output.append("")

    # Walk the cycle and spell out each hold/wait relation
    for source, target in result.cycle_edges():
        if snapshot.kind_of(source) is VertexKind.RESOURCE:
            output.append(f"- {source} is held by {target}")
        else:
            output.append(f"- {source} is waiting for {target}")

    output.append("")
    output.append(
        "Each process on the cycle holds a resource the next one needs, and with a single "
        "instance per resource none of them can proceed."
    )

    output += ["", "## Recovery Strategies", ""]
    victim = result.involved_processes[0]
    held = _held_by(snapshot, victim, result)
    output.append(
        f"1. **Terminate a process**: abort {victim} and release "
        f"{', '.join(held) if held else 'its resources'}."
    )
    resource = result.involved_resources[0]
    holder = next((t for s, t in result.cycle_edges() if s == resource), None)
    output.append(
        f"2. **Preempt a resource**: take {resource} away from {holder} and give it to a waiting process."
    )
    output.append(
        f"3. **Roll back**: return {', '.join(result.involved_processes)} to a checkpoint "
        "taken before the circular wait formed."
    )
    return "\n".join(output)


def _held_by(snapshot: GraphSnapshot, process_id: str, result: DeadlockResult) -> List[str]:
    return [
        e.source for e in snapshot.allocations
        if e.target == process_id and e.source in result.involved_resources
    ]


def advise(snapshot: GraphSnapshot, result: DeadlockResult, advisor: Advisor = explain_locally, logger=None) -> str:
    """
    Run the advisor, turning any failure into a readable message.

    Args:
        snapshot: Graph state that was analysed
        result: Detection result for that state
        advisor: Text generator to use
        logger: Optional SessionLogger for failures

    Returns:
        Advisory text; never raises
    """
    try:
        text = advisor(snapshot, result)
    except Exception as e:
        if logger:
            logger.log(f"Advisory service error: {e}", "error")
        return SERVICE_ERROR_MESSAGE

    return text or EMPTY_ANALYSIS_MESSAGE
