"""
Logger utility for the Resource Allocation Graph Deadlock Detector.

Provides edit-by-edit session logging with verbosity levels.
"""

from typing import List, Optional
from datetime import datetime


class SessionLogger:
    """
    Logger for graph edits and detection results.

    Format: "Connect P2 -> R1 - ADDED (request)" / "Detection: DEADLOCK [P1 -> R2 -> P2 -> R1 -> P1]"
    """

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None, quiet: bool = False):
        """
        Initialize logger.

        Args:
            verbose: Enable verbose output
            log_file: Optional file path for logging
            quiet: Suppress console output (file output is unaffected)
        """
        self.verbose = verbose
        self.quiet = quiet
        self.log_file = log_file
        self.file_handle = None

        if self.log_file:
            self.file_handle = open(self.log_file, 'w', encoding='utf-8')
            self._write_header()

    def _write_header(self) -> None:
        """Write log file header."""
        if self.file_handle:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            self.file_handle.write(f"Deadlock Detection Log - {timestamp}\n")
            self.file_handle.write("="*60 + "\n\n")

    def log(self, message: str, level: str = "info") -> None:
        """
        Log a message.

        Args:
            message: Message to log
            level: Log level (info, debug, warning, error)
        """
        if level == "debug" and not self.verbose:
            return

        formatted = self._format_message(message, level)

        if not self.quiet:
            print(formatted)

        if self.file_handle:
            self.file_handle.write(formatted + "\n")
            self.file_handle.flush()

    def _format_message(self, message: str, level: str) -> str:
        """Format message with level prefix."""
        if level == "error":
            return f"[ERROR] {message}"
        elif level == "warning":
            return f"[WARNING] {message}"
        elif level == "debug":
            return f"[DEBUG] {message}"
        else:
            return message

    def log_edit(self, action: str, subject: str, detail: str = "") -> None:
        """Log an accepted graph edit."""
        message = f"{action} {subject}"
        if detail:
            message += f" ({detail})"
        self.log(message)

    def log_rejection(self, source_id: str, target_id: str, reason: str) -> None:
        self.log(f"Connect {source_id} -> {target_id} - REJECTED ({reason})", "warning")

    def log_detection(self, has_deadlock: bool, cycle: List[str]) -> None:
        """
        Log a detection result.

        Args:
            has_deadlock: Detection verdict
            cycle: Witness cycle (empty if none)
        """
        if has_deadlock:
            path = " -> ".join(list(cycle) + [cycle[0]])
            self.log(f"Detection: DEADLOCK DETECTED - circular wait [{path}]")
        else:
            self.log("Detection: no deadlock - system is in a safe state")

    def log_graph(self, graph_str: str) -> None:
        """Log a graph listing (verbose only)."""
        if self.verbose:
            self.log(f"Graph State:\n{graph_str}", "debug")

    def close(self) -> None:
        """Close log file if open."""
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None

    def __del__(self):
        """Cleanup on destruction."""
        self.close()
