# platforms.py
from __future__ import annotations

from typing import Dict, Optional, Tuple

from .errors import CommandFailure, InstallError, UnsupportedPlatformError
from .model import PlatformTag
from .runner import Command, CommandRunner, cmd
from .ui.console import get_console

TOOLCHAIN_BINARY = "go"

DEBIAN_PACKAGES: Tuple[str, ...] = (
    "jq", "curl", "unzip", "sed", "python3", "libpcap-dev", "whois", "dnsutils", "openssl",
)
REDHAT_PACKAGES: Tuple[str, ...] = (
    "jq", "curl", "unzip", "sed", "python3", "libpcap-devel", "whois", "bind-utils", "openssl",
)
MACOS_PACKAGES: Tuple[str, ...] = (
    "jq", "curl", "unzip", "gnu-sed", "python3", "libpcap", "whois", "bind", "openssl",
)

REDHAT_EXTRA_REPO = "epel-release"
GO_INSTALL_HINT = "Install Go manually from https://go.dev/doc/install and re-run."


class Platform:
    """
    Install capability of one package family.

    `packages` is the batch installed by `install_packages`; `toolchain_package`
    is the family's name for the Go toolchain.
    """
    tag: PlatformTag
    packages: Tuple[str, ...] = ()
    toolchain_package: str = ""

    def install_packages(self, runner: CommandRunner) -> None:
        raise NotImplementedError

    def install_toolchain(self, runner: CommandRunner) -> None:
        raise NotImplementedError

    def _required(self, runner: CommandRunner, command: Command, message: str) -> None:
        try:
            runner.check(command)
        except CommandFailure as e:
            raise InstallError.from_failure(
                e,
                message,
                suggestion=f"Fix the error above and re-run, or run manually:\n  {command.display}",
            ) from e


class AptPlatform(Platform):
    tag = PlatformTag.DEBIAN
    packages = DEBIAN_PACKAGES
    toolchain_package = "golang-go"

    def install_packages(self, runner: CommandRunner) -> None:
        get_console().print_info("Using apt-get for installation...")
        self._required(runner, cmd("apt-get update", "apt-get", "update", privileged=True),
                       "Package index refresh failed")
        self._required(
            runner,
            cmd("apt-get install", "apt-get", "install", "-y", *self.packages, privileged=True),
            "Dependency installation failed",
        )

    def install_toolchain(self, runner: CommandRunner) -> None:
        self._required(
            runner,
            cmd("install go", "apt-get", "install", "-y", self.toolchain_package, privileged=True),
            "Go installation failed",
        )


class RedHatPlatform(Platform):
    tag = PlatformTag.REDHAT
    packages = REDHAT_PACKAGES
    toolchain_package = "golang"

    def package_manager(self, runner: CommandRunner) -> str:
        """dnf when available, yum otherwise."""
        return "dnf" if runner.which("dnf") else "yum"

    def install_packages(self, runner: CommandRunner) -> None:
        console = get_console()
        pm = self.package_manager(runner)
        console.print_info(f"Using {pm} for installation...")

        # epel-release stays best-effort; base packages may still install without it
        extra = cmd(f"{pm} install {REDHAT_EXTRA_REPO}", pm, "install", "-y", REDHAT_EXTRA_REPO, privileged=True)
        result = runner.run(extra)
        if not result.ok:
            console.print_warning(
                f"{REDHAT_EXTRA_REPO} could not be installed (exit={result.exit_code}); continuing"
            )

        self._required(
            runner,
            cmd(f"{pm} install", pm, "install", "-y", *self.packages, privileged=True),
            "Dependency installation failed",
        )

    def install_toolchain(self, runner: CommandRunner) -> None:
        pm = self.package_manager(runner)
        self._required(
            runner,
            cmd("install go", pm, "install", "-y", self.toolchain_package, privileged=True),
            "Go installation failed",
        )


class BrewPlatform(Platform):
    tag = PlatformTag.MACOS
    packages = MACOS_PACKAGES
    toolchain_package = "go"

    def _require_brew(self, runner: CommandRunner) -> None:
        if not runner.which("brew"):
            raise InstallError(
                step="brew",
                message="Homebrew is not installed.",
                suggestion="Install Homebrew from https://brew.sh/ and try again.",
            )

    def install_packages(self, runner: CommandRunner) -> None:
        get_console().print_info("Using Homebrew for installation...")
        self._require_brew(runner)
        self._required(runner, cmd("brew update", "brew", "update"), "Homebrew update failed")
        self._required(
            runner,
            cmd("brew install", "brew", "install", *self.packages),
            "Dependency installation failed",
        )

    def install_toolchain(self, runner: CommandRunner) -> None:
        self._require_brew(runner)
        self._required(runner, cmd("install go", "brew", "install", self.toolchain_package),
                       "Go installation failed")


PLATFORMS: Dict[PlatformTag, Platform] = {
    p.tag: p for p in (AptPlatform(), RedHatPlatform(), BrewPlatform())
}


def platform_for(tag: PlatformTag, suggestion: Optional[str] = None) -> Platform:
    handler = PLATFORMS.get(tag)
    if handler is None:
        raise UnsupportedPlatformError(
            platform=tag.value,
            message=f"No installer for platform {tag.value}",
            suggestion=suggestion,
        )
    return handler


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------

def install_packages(tag: PlatformTag, runner: CommandRunner) -> None:
    """Install the family's dependency list. Any failing command aborts the run."""
    platform_for(tag).install_packages(runner)


def ensure_toolchain(tag: PlatformTag, runner: CommandRunner) -> bool:
    """
    Make sure `go` resolves on the execution path.

    Returns True if an install was performed, False if Go was already present.
    """
    console = get_console()
    if runner.which(TOOLCHAIN_BINARY):
        console.print_info("Go is already installed.")
        return False

    console.print_info("Go is not installed. Installing Go...")
    platform_for(tag, suggestion=GO_INSTALL_HINT).install_toolchain(runner)
    return True
