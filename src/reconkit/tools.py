# tools.py
from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from .errors import VerificationError
from .model import Outcome, ToolResult, ToolSpec
from .runner import CommandRunner, cmd
from .ui.console import get_console

TOOL_SPECS: Dict[str, ToolSpec] = {
    "subfinder": ToolSpec(
        name="subfinder",
        module="github.com/projectdiscovery/subfinder/v2/cmd/subfinder",
        description="Passive subdomain enumeration.",
    ),
    "assetfinder": ToolSpec(
        name="assetfinder",
        module="github.com/tomnomnom/assetfinder",
        description="Related domain and subdomain discovery.",
    ),
    "dnsx": ToolSpec(
        name="dnsx",
        module="github.com/projectdiscovery/dnsx/cmd/dnsx",
        description="Multi-purpose DNS resolution toolkit.",
    ),
    "naabu": ToolSpec(
        name="naabu",
        module="github.com/projectdiscovery/naabu/v2/cmd/naabu",
        description="Fast port scanner.",
    ),
    "httpx": ToolSpec(
        name="httpx",
        module="github.com/projectdiscovery/httpx/cmd/httpx",
        description="HTTP probing toolkit.",
    ),
}


def select_tools(names: Optional[Iterable[str]] = None) -> List[ToolSpec]:
    """Specs for `names` in canonical order (all tools when empty)."""
    wanted = set(names or ())
    if not wanted:
        return list(TOOL_SPECS.values())
    unknown = sorted(wanted - set(TOOL_SPECS))
    if unknown:
        raise ValueError(f"Unknown tool(s): {', '.join(unknown)}")
    return [spec for name, spec in TOOL_SPECS.items() if name in wanted]


def resolve_go_bin(runner: CommandRunner, override: Optional[Path] = None) -> Path:
    """
    Directory where `go install` drops binaries.

    GOBIN when set, else the first GOPATH entry's bin/, else ~/go/bin.
    """
    if override is not None:
        return override

    result = runner.run(cmd("go env", "go", "env", "GOBIN", "GOPATH"), capture=True)
    if result.ok:
        lines = result.stdout.splitlines() + ["", ""]
        gobin, gopath = lines[0].strip(), lines[1].strip()
        if gobin:
            return Path(gobin)
        if gopath:
            return Path(gopath.split(os.pathsep)[0]) / "bin"
    return Path.home() / "go" / "bin"


# ----------------------------------------------------------------------
# Fetch
# ----------------------------------------------------------------------

def fetch_tools(
    specs: Sequence[ToolSpec],
    runner: CommandRunner,
    *,
    skip_present: bool = False,
) -> List[ToolResult]:
    """
    `go install` each spec, one after another.

    A failing fetch is recorded and the remaining specs are still attempted.
    """
    console = get_console()
    results: List[ToolResult] = []

    for spec in specs:
        if skip_present:
            location = runner.which(spec.name)
            if location:
                console.print_info(f"{spec.name} already present at {location}, skipping")
                results.append(ToolResult(spec.name, Outcome.ALREADY_PRESENT, location))
                continue

        console.print_info(f"Installing {spec.name}...")
        result = runner.run(cmd(f"install {spec.name}", "go", "install", spec.fetch_locator))
        if result.ok:
            results.append(ToolResult(spec.name, Outcome.INSTALLED))
        else:
            detail = (result.stderr.strip().splitlines() or [f"exit={result.exit_code}"])[-1]
            console.print_warning(f"{spec.name} failed to install: {detail}")
            results.append(ToolResult(spec.name, Outcome.FETCH_FAILED, detail))

    return results


# ----------------------------------------------------------------------
# Publish
# ----------------------------------------------------------------------

def publish(
    names: Sequence[str],
    src_dir: str | Path,
    dst_dir: str | Path,
    runner: CommandRunner,
) -> List[ToolResult]:
    """
    Copy built binaries from src_dir into dst_dir (overwriting).

    Missing sources are warned about and recorded, never raised.
    """
    console = get_console()
    src = Path(src_dir)
    dst = Path(dst_dir)
    results: List[ToolResult] = []

    console.print_info(f"Copying installed binaries to {dst}...")
    for name in names:
        binary = src / name
        if not binary.is_file():
            console.print_warning(f"{name} not found in {src}")
            results.append(ToolResult(name, Outcome.PUBLISH_FAILED, f"{binary} missing"))
            continue

        result = runner.run(cmd(f"publish {name}", "cp", str(binary), f"{dst}/", privileged=True))
        if result.ok:
            console.print_info(f"{name} copied to {dst}")
            results.append(ToolResult(name, Outcome.INSTALLED, str(dst / name)))
        else:
            console.print_warning(f"could not copy {name} to {dst} (exit={result.exit_code})")
            results.append(ToolResult(name, Outcome.PUBLISH_FAILED, f"cp exit={result.exit_code}"))

    return results


# ----------------------------------------------------------------------
# Verify
# ----------------------------------------------------------------------

def remediation_hint(go_bin: Optional[Path], dest_dir: Optional[Path]) -> str:
    go_dir = str(go_bin) if go_bin else "$(go env GOPATH)/bin"
    dest = str(dest_dir) if dest_dir else "/usr/local/bin"
    return (
        f"Please ensure that your Go bin directory (typically {go_dir}) is in your PATH, "
        f"or that the binaries have been copied to {dest}."
    )


def verify(
    names: Sequence[str],
    search_path: Sequence[str],
    *,
    hint: Optional[str] = None,
) -> Dict[str, str]:
    """
    Resolve every name on search_path.

    Returns name -> resolved location. Raises VerificationError listing
    every name that did not resolve.
    """
    console = get_console()
    path = os.pathsep.join(search_path)
    located: Dict[str, str] = {}
    missing: List[str] = []

    console.print_info("Verifying that all tools are installed and available in PATH...")
    for name in names:
        location = shutil.which(name, path=path) if path else None
        if location:
            located[name] = location
            console.print_tool_status(name, "found", location)
        else:
            missing.append(name)
            console.print_tool_status(name, "not found in PATH")

    if missing:
        raise VerificationError(missing=missing, hint=hint or remediation_hint(None, None))

    console.print_info("All binaries are present.")
    return located
