# errors.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

class ReconkitError(Exception):
    """Base for failures that end a run with an actionable message."""

    title = "Provisioning failed"
    suggestion: Optional[str] = None


@dataclass
class CommandFailure(ReconkitError):
    step: str
    cmd: str
    exit_code: int
    output: str = ""

    title = "Command failed"

    def __str__(self) -> str:
        return f"step '{self.step}' failed (exit={self.exit_code}): {self.cmd}"


@dataclass
class UnsupportedPlatformError(ReconkitError):
    platform: str
    message: str
    suggestion: Optional[str] = None

    title = "Unsupported platform"

    def __str__(self) -> str:
        return f"{self.message} (platform={self.platform})"


@dataclass
class InstallError(ReconkitError):
    """
    A package or toolchain install command failed.

    Raised for required dependencies only; individual tool fetches record
    a failed outcome instead.
    """
    step: str
    message: str
    cmd: Optional[str] = None
    exit_code: Optional[int] = None
    suggestion: Optional[str] = None
    output: str = ""

    title = "Installation failed"

    def __str__(self) -> str:
        lines = [f"{self.step}: {self.message}"]
        if self.cmd:
            lines.append(f"cmd={self.cmd}")
        if self.exit_code is not None:
            lines.append(f"exit_code={self.exit_code}")
        return "\n".join(lines)

    @classmethod
    def from_failure(cls, failure: CommandFailure, message: str, suggestion: Optional[str] = None) -> "InstallError":
        return cls(
            step=failure.step,
            message=message,
            cmd=failure.cmd,
            exit_code=failure.exit_code,
            suggestion=suggestion,
            output=failure.output,
        )


@dataclass
class VerificationError(ReconkitError):
    missing: List[str] = field(default_factory=list)
    hint: str = ""

    title = "Tools missing from PATH"

    @property
    def suggestion(self) -> str:  # type: ignore[override]
        return self.hint

    def __str__(self) -> str:
        return f"{len(self.missing)} tool(s) not found in PATH: {', '.join(self.missing)}"
