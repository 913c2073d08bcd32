# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class PlatformTag(Enum):
    """Package family of the host."""
    DEBIAN = "debian-like"
    REDHAT = "redhat-like"
    MACOS = "macos"
    UNSUPPORTED = "unsupported"


class Outcome(Enum):
    INSTALLED = "installed"
    ALREADY_PRESENT = "already-present"
    FETCH_FAILED = "fetch-failed"
    PUBLISH_FAILED = "publish-failed"
    VERIFY_FAILED = "verify-failed"


class Stage(Enum):
    START = "start"
    DETECTED = "detected"
    PACKAGES_INSTALLED = "packages-installed"
    TOOLCHAIN_READY = "toolchain-ready"
    TOOLS_FETCHED = "tools-fetched"
    PUBLISHED = "published"
    VERIFIED = "verified"
    FAILED = "failed"


@dataclass(frozen=True)
class ToolSpec:
    """A Go tool fetched with `go install <module>@<version>`."""
    name: str
    module: str
    version: str = "latest"
    description: str = ""

    @property
    def fetch_locator(self) -> str:
        return f"{self.module}@{self.version}"


@dataclass(frozen=True)
class ToolResult:
    name: str
    outcome: Outcome
    detail: str = ""


@dataclass
class RunReport:
    """
    Outcome of one provisioning run.

    `results` keeps the latest outcome per tool, in tool order.
    `details` carries the reason or location recorded with that outcome.
    `located` maps each verified tool to the path it resolved to.
    """
    stage: Stage = Stage.START
    platform: Optional[PlatformTag] = None
    results: Dict[str, Outcome] = field(default_factory=dict)
    details: Dict[str, str] = field(default_factory=dict)
    missing: List[str] = field(default_factory=list)
    located: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.stage is Stage.VERIFIED and not self.missing

    def record(self, result: ToolResult) -> None:
        self.results[result.name] = result.outcome
        self.details[result.name] = result.detail
