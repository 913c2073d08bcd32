from __future__ import annotations

import stat
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

from reconkit.runner import Command, CommandResult, CommandRunner
from reconkit.ui.console import Console, set_console


class FakeRunner(CommandRunner):
    """
    Records commands instead of running them.

    `present` is the set of binaries `which` resolves. `fail_when` decides
    per command whether it exits non-zero. `on_run` lets a test simulate
    side effects (e.g. apt installing go, go install writing a binary).
    """

    def __init__(
        self,
        present: Optional[set[str]] = None,
        fail_when: Optional[Callable[[Command], bool]] = None,
        on_run: Optional[Callable[["FakeRunner", Command], None]] = None,
        outputs: Optional[Dict[str, str]] = None,
    ):
        self.present = set(present or ())
        self.fail_when = fail_when or (lambda c: False)
        self.on_run = on_run
        self.outputs = outputs or {}
        self.commands: List[Command] = []

    @property
    def argvs(self) -> List[tuple]:
        return [c.argv for c in self.commands]

    def run(self, command: Command, *, capture: bool = False) -> CommandResult:
        self.commands.append(command)
        if self.fail_when(command):
            return CommandResult(exit_code=1, stderr=f"{command.argv[0]}: simulated failure")
        if self.on_run is not None:
            self.on_run(self, command)
        return CommandResult(exit_code=0, stdout=self.outputs.get(command.name, ""))

    def which(self, binary: str) -> Optional[str]:
        return f"/usr/bin/{binary}" if binary in self.present else None


def make_executable(directory: Path, name: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def write_os_release(path: Path, **fields: str) -> Path:
    path.write_text("".join(f'{k}="{v}"\n' for k, v in fields.items()))
    return path


@pytest.fixture(autouse=True)
def console():
    c = Console(debug=False)
    set_console(c)
    return c


@pytest.fixture
def debian_release(tmp_path):
    return write_os_release(tmp_path / "os-release", ID="ubuntu", ID_LIKE="debian", NAME="Ubuntu")

