# pipeline.py
from __future__ import annotations

from typing import Iterable, List, Optional

from .detect import detect
from .errors import ReconkitError, VerificationError
from .model import Outcome, RunReport, Stage, ToolResult, ToolSpec
from .platforms import ensure_toolchain, install_packages
from .runner import CommandRunner
from .settings import Settings
from .tools import fetch_tools, publish, remediation_hint, resolve_go_bin, select_tools, verify
from .ui.console import Console, get_console


class Bootstrap:
    """
    One provisioning run:

        START -> DETECTED -> PACKAGES_INSTALLED -> TOOLCHAIN_READY
              -> TOOLS_FETCHED -> PUBLISHED -> VERIFIED | FAILED

    Dependency failures (platform, packages, toolchain) abort the run.
    Fetch and publish failures are recorded and left for the verifier,
    which is the single gate deciding success. Nothing is rolled back.
    """

    def __init__(
        self,
        settings: Settings,
        runner: CommandRunner,
        *,
        tools: Optional[Iterable[str]] = None,
        kernel: Optional[str] = None,
        skip_packages: bool = False,
        skip_installed: bool = False,
        console: Optional[Console] = None,
    ):
        self.settings = settings
        self.runner = runner
        self.specs: List[ToolSpec] = select_tools(tools)
        self.kernel = kernel
        self.skip_packages = skip_packages
        self.skip_installed = skip_installed
        self.console = console or get_console()
        self.report = RunReport()

    @property
    def tool_names(self) -> List[str]:
        return [s.name for s in self.specs]

    def _advance(self, stage: Stage) -> None:
        self.report.stage = stage
        self.console.print_debug(f"stage -> {stage.value}")

    def run(self) -> RunReport:
        try:
            self._run()
        except ReconkitError:
            self.report.stage = Stage.FAILED
            raise
        return self.report

    def _run(self) -> None:
        console = self.console
        report = self.report

        console.print_header("Detecting OS")
        report.platform = detect(self.kernel, self.settings.os_release)
        console.print_info(f"Detected OS: {report.platform.value}")
        self._advance(Stage.DETECTED)

        console.print_run_started(
            platform=report.platform.value,
            dest_dir=str(self.settings.dest_dir),
            tool_count=len(self.specs),
        )

        console.print_header("Installing dependencies")
        if self.skip_packages:
            console.print_info("Skipping OS package installation.")
        else:
            install_packages(report.platform, self.runner)
        self._advance(Stage.PACKAGES_INSTALLED)

        console.print_header("Checking Go toolchain")
        ensure_toolchain(report.platform, self.runner)
        self._advance(Stage.TOOLCHAIN_READY)

        console.print_header("Installing Go-based tools")
        for result in fetch_tools(self.specs, self.runner, skip_present=self.skip_installed):
            report.record(result)
        self._advance(Stage.TOOLS_FETCHED)

        console.print_header("Publishing binaries")
        go_bin = resolve_go_bin(self.runner, self.settings.go_bin)
        fetched = [name for name, outcome in report.results.items() if outcome is Outcome.INSTALLED]
        for result in publish(fetched, go_bin, self.settings.dest_dir, self.runner):
            report.record(result)
        self._advance(Stage.PUBLISHED)

        console.print_header("Verifying")
        try:
            report.located = verify(
                self.tool_names,
                self.settings.search_path,
                hint=remediation_hint(go_bin, self.settings.dest_dir),
            )
        except VerificationError as e:
            report.missing = list(e.missing)
            for name in e.missing:
                if report.results.get(name) in (Outcome.INSTALLED, Outcome.ALREADY_PRESENT):
                    report.record(ToolResult(name, Outcome.VERIFY_FAILED, "not found in PATH"))
            raise
        self._advance(Stage.VERIFIED)
