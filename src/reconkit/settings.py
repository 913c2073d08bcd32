from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple

DEFAULT_DEST_DIR = "/usr/local/bin"
DEFAULT_OS_RELEASE = "/etc/os-release"

_SUDO_VALUES = {"1": True, "0": False, "auto": None}


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


@dataclass(frozen=True)
class Settings:
    """Run configuration; CLI flags override these via dataclasses.replace."""
    dest_dir: Path = Path(DEFAULT_DEST_DIR)
    go_bin: Optional[Path] = None
    os_release: Path = Path(DEFAULT_OS_RELEASE)
    use_sudo: bool = True
    search_path: Tuple[str, ...] = ()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        sudo_raw = env.get("RECONKIT_SUDO", "").strip().lower() or "auto"
        if sudo_raw not in _SUDO_VALUES:
            raise ValueError(f"RECONKIT_SUDO must be one of 1, 0, auto (got {sudo_raw!r})")
        use_sudo = _SUDO_VALUES[sudo_raw]
        if use_sudo is None:
            use_sudo = not _is_root()

        go_bin = env.get("RECONKIT_GO_BIN")
        path = env.get("PATH", "")

        return cls(
            dest_dir=Path(env.get("RECONKIT_DEST_DIR", DEFAULT_DEST_DIR)),
            go_bin=Path(go_bin) if go_bin else None,
            os_release=Path(env.get("RECONKIT_OS_RELEASE", DEFAULT_OS_RELEASE)),
            use_sudo=use_sudo,
            search_path=tuple(p for p in path.split(os.pathsep) if p),
        )
