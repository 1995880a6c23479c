"""Console output formatting utilities for sparsedep."""

from __future__ import annotations

import sys
import threading
from typing import Optional, Sequence


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug
        # stages run nodes on a thread pool
        self._lock = threading.Lock()

    def _out(self, *lines: str, err: bool = False) -> None:
        stream = sys.stderr if err else sys.stdout
        with self._lock:
            for line in lines:
                print(line, file=stream)

    def print_build_started(self, build_root: str, build_file: str, node_count: int) -> None:
        """Print build start information."""
        self._out("\nBUILD STARTED", f"Build root: {build_root}", f"Build file: {build_file}", f"Steps: {node_count}", "")

    def print_stage(self, index: int, names: Sequence[str]) -> None:
        self._out(f"=== Stage {index}: {list(names)} ===")

    def print_node_done(self, name: str, status: str) -> None:
        self._out(f"✓ {name} ({status})")

    def print_node_failed(self, name: str) -> None:
        self._out(f"✗ Step failed: {name}")

    def print_phase(self, step: str, phase: str) -> None:
        """Print phase start message."""
        self._out(f"[{step}] PHASE: {phase}")

    def print_skipped(self, step: str, reason: str) -> None:
        self._out(f"[{step}] STATUS: skipped ({reason})")

    def print_run(self, argv: Sequence[str], cwd: str) -> None:
        """Print the exact command line, debug mode only."""
        if self.debug:
            quoted = " ".join(f'"{arg}"' for arg in argv)
            self._out(f"[RUN] {quoted} (cwd={cwd})", err=True)

    def print_failure(
        self,
        name: str,
        phase: str,
        condition: str,
        cmd: Optional[str] = None,
    ) -> None:
        """
        Print external process failure.

        Args:
            name: Step name
            phase: Phase that failed (e.g. "Git Pull")
            condition: Observed exit condition ("exit code 128", "terminated by signal 9")
            cmd: Optional command line
        """
        lines = [f"STEP FAILED: {name}", f"Phase: {phase}", f"Condition: {condition}"]
        if cmd and self.debug:
            lines.append(f"Command: {cmd}")
        self._out(*lines, err=True)

    def print_results(self, results: dict[str, str]) -> None:
        """Print final results summary."""
        lines = ["", "=" * 40, "RESULTS", "=" * 40]
        for name, status in results.items():
            status_display = status.upper() if status != "ok" else "SUCCESS"
            lines.append(f"  {name}: {status_display}")
        self._out(*lines)

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        lines = [f"\nERROR: {title}", message]
        for detail in details or []:
            lines.append(f"  {detail}")
        if suggestion:
            lines.append(f"\n{suggestion}")
        self._out(*lines, err=True)

    def print_exception(self, exc: BaseException) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exception(type(exc), exc, exc.__traceback__)
        else:
            self._out(f"Error: {exc}", err=True)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        self._out(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            self._out(f"[DEBUG] {message}", err=True)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
