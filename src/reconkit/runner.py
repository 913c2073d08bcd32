# runner.py
from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple

from .errors import CommandFailure
from .ui.console import Console, get_console


@dataclass(frozen=True)
class Command:
    """A single external command (step) of a provisioning run."""
    name: str
    argv: Tuple[str, ...]
    privileged: bool = False
    env: Dict[str, str] = field(default_factory=dict)

    @property
    def display(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True)
class CommandResult:
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def cmd(name: str, *argv: str, privileged: bool = False, env: Optional[Dict[str, str]] = None) -> Command:
    """Create a command step."""
    return Command(name=name, argv=tuple(argv), privileged=privileged, env=env or {})


# ----------------------------------------------------------------------
# Execution primitives
# ----------------------------------------------------------------------

class CommandRunner:
    """
    Executes commands and resolves binaries on the execution path.

    Subclasses implement `run` and `which`. Everything that touches the
    host package database or toolchain goes through one of these, so tests
    can swap in a fake.
    """

    def run(self, command: Command, *, capture: bool = False) -> CommandResult:
        raise NotImplementedError

    def which(self, binary: str) -> Optional[str]:
        raise NotImplementedError

    def check(self, command: Command, *, capture: bool = False) -> CommandResult:
        """Run a command and raise CommandFailure on a non-zero exit."""
        result = self.run(command, capture=capture)
        if not result.ok:
            raise CommandFailure(
                step=command.name,
                cmd=command.display,
                exit_code=result.exit_code,
                output=(result.stderr or result.stdout)[-4000:],
            )
        return result


class SubprocessRunner(CommandRunner):
    def __init__(
        self,
        *,
        use_sudo: bool = True,
        search_path: Sequence[str] = (),
        console: Optional[Console] = None,
    ):
        self.use_sudo = use_sudo
        self.search_path = tuple(search_path)
        self.console = console or get_console()

    def _argv(self, command: Command) -> list[str]:
        argv = list(command.argv)
        if command.privileged and self.use_sudo:
            argv = ["sudo", *argv]
        return argv

    def _env(self, command: Command) -> Dict[str, str]:
        env = os.environ.copy()
        if self.search_path:
            env["PATH"] = os.pathsep.join(self.search_path)
        env.update(command.env)
        return env

    def run(self, command: Command, *, capture: bool = False) -> CommandResult:
        argv = self._argv(command)
        self.console.print_command(command.name, " ".join(argv))

        try:
            proc = subprocess.run(
                argv,
                env=self._env(command),
                text=True,
                capture_output=capture,
            )
        except FileNotFoundError:
            # 127 mirrors the shell's "command not found"
            return CommandResult(exit_code=127, stderr=f"{argv[0]}: command not found")

        self.console.print_debug(f"{command.name} exited with {proc.returncode}")
        return CommandResult(
            exit_code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )

    def which(self, binary: str) -> Optional[str]:
        path = os.pathsep.join(self.search_path) if self.search_path else None
        return shutil.which(binary, path=path)
