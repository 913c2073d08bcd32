# detect.py
# Maps host identity (kernel name + /etc/os-release) to a package family.

from __future__ import annotations

import platform
from pathlib import Path
from typing import Dict, Optional

from .errors import UnsupportedPlatformError
from .model import PlatformTag

DISTRO_FAMILIES: Dict[str, PlatformTag] = {
    "ubuntu": PlatformTag.DEBIAN,
    "debian": PlatformTag.DEBIAN,
    "kali": PlatformTag.DEBIAN,
    "rhel": PlatformTag.REDHAT,
    "centos": PlatformTag.REDHAT,
    "fedora": PlatformTag.REDHAT,
    "redhat": PlatformTag.REDHAT,
}


def parse_os_release(path: str | Path) -> Dict[str, str]:
    """
    Parse an os-release file into a dict.

    Lines look like `ID="ubuntu"`; blank lines and `#` comments are skipped.
    """
    info: Dict[str, str] = {}
    for line in Path(path).read_text(encoding="utf-8", errors="replace").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        info[key.strip()] = value.strip().strip('"').strip("'")
    return info


def family_for(info: Dict[str, str]) -> Optional[PlatformTag]:
    """Resolve ID first, then each ID_LIKE token in order."""
    distro_id = info.get("ID", "").lower()
    if distro_id in DISTRO_FAMILIES:
        return DISTRO_FAMILIES[distro_id]
    for part in info.get("ID_LIKE", "").lower().split():
        if part in DISTRO_FAMILIES:
            return DISTRO_FAMILIES[part]
    return None


def detect(kernel: Optional[str] = None, os_release: str | Path = "/etc/os-release") -> PlatformTag:
    """
    Return the package family of the host.

    Args:
        kernel: Kernel name as reported by `uname -s` (defaults to platform.system()).
        os_release: Distribution identifier file read on Linux.

    Raises:
        UnsupportedPlatformError: the host does not map to a known family.
    """
    kernel = kernel if kernel is not None else platform.system()

    if kernel == "Darwin":
        return PlatformTag.MACOS

    if kernel != "Linux":
        raise UnsupportedPlatformError(
            platform=kernel or "unknown",
            message=f"Unsupported OS: {kernel}",
            suggestion="Supported hosts: Debian/Ubuntu/Kali, RHEL/CentOS/Fedora, macOS.",
        )

    release = Path(os_release)
    if not release.is_file():
        raise UnsupportedPlatformError(
            platform=kernel,
            message="Cannot detect Linux distribution",
            suggestion=f"{release} is missing; install the distribution's os-release file or pass --os-release.",
        )

    info = parse_os_release(release)
    tag = family_for(info)
    if tag is None:
        distro = info.get("ID") or "unknown"
        raise UnsupportedPlatformError(
            platform=distro,
            message=f"Unsupported OS: {distro}",
            suggestion="Supported distributions: ubuntu, debian, kali, rhel, centos, fedora.",
        )
    return tag
