"""Console output formatting utilities for reconkit."""

from __future__ import annotations

import sys
from typing import Mapping, Optional


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_header(self, title: str) -> None:
        """Print a section header."""
        print(f"\n{title}")
        print("-" * len(title))

    def print_run_started(
        self,
        platform: str,
        dest_dir: str,
        tool_count: int,
    ) -> None:
        """Print run start information."""
        print("\nRUN STARTED")
        print(f"Platform: {platform}")
        print(f"Publish to: {dest_dir}")
        print(f"Tools: {tool_count}")
        print()

    def print_command(self, name: str, command: str) -> None:
        """Print the command about to run."""
        print(f"STEP: {name}")
        self.print_debug(command)

    def print_tool_status(self, name: str, status: str, location: Optional[str] = None) -> None:
        if location:
            print(f"  {name}: {status} ({location})")
        else:
            print(f"  {name}: {status}")

    def print_warning(self, message: str) -> None:
        print(f"Warning: {message}")

    def print_results(self, results: Mapping[str, str], details: Optional[Mapping[str, str]] = None) -> None:
        """Print final results summary, with the recorded detail per tool when present."""
        print("\n" + "=" * 40)
        print("RESULTS")
        print("=" * 40)
        for tool, status in results.items():
            detail = (details or {}).get(tool)
            if detail:
                print(f"  {tool}: {status.upper()} ({detail})")
            else:
                print(f"  {tool}: {status.upper()}")

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
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: Exception) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


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
