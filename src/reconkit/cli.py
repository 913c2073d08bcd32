# cli.py
from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import click

from reconkit.detect import detect
from reconkit.errors import ReconkitError
from reconkit.pipeline import Bootstrap
from reconkit.runner import CommandRunner, SubprocessRunner
from reconkit.settings import Settings
from reconkit.tools import TOOL_SPECS, remediation_hint, select_tools, verify
from reconkit.ui.console import Console, get_console, set_console

tool_option = click.option(
    "--tool",
    "tools",
    multiple=True,
    type=click.Choice(sorted(TOOL_SPECS)),
    help="Only process this tool (repeatable; default: all).",
)


def load_settings() -> Settings:
    console = get_console()
    try:
        return Settings.from_env()
    except ValueError as e:
        console.print_error("Invalid configuration", str(e))
        sys.exit(1)


def fail(exc: ReconkitError) -> None:
    """Print an actionable error block and exit non-zero."""
    console = get_console()
    details = []
    output = getattr(exc, "output", "")
    if output:
        details.append(output.strip().splitlines()[-1])
    console.print_error(exc.title, str(exc), details=details or None, suggestion=exc.suggestion)
    sys.exit(1)


def make_runner(ctx: click.Context, settings: Settings) -> CommandRunner:
    runner = ctx.obj.get("runner")
    if runner is not None:
        return runner
    return SubprocessRunner(use_sudo=settings.use_sudo, search_path=settings.search_path)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """reconkit: provision Go-based recon tools on this host."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.option("--dest", default=None, type=click.Path(path_type=Path), help="Directory binaries are copied into")
@click.option("--go-bin", default=None, type=click.Path(path_type=Path), help="Go bin directory (defaults to go env)")
@click.option("--os-release", default=None, type=click.Path(path_type=Path), help="os-release file to read on Linux")
@click.option("--skip-packages", is_flag=True, default=False, help="Do not install OS packages")
@click.option("--skip-installed", is_flag=True, default=False, help="Do not refetch tools already on PATH")
@click.option("--sudo/--no-sudo", default=None, help="Prefix privileged commands with sudo (default: unless root)")
@tool_option
@click.pass_context
def install(ctx, dest, go_bin, os_release, skip_packages, skip_installed, sudo, tools):
    """Install dependencies, Go and the recon tools, then verify them."""
    console = get_console()
    settings = load_settings()

    overrides = {}
    if dest is not None:
        overrides["dest_dir"] = dest
    if go_bin is not None:
        overrides["go_bin"] = go_bin
    if os_release is not None:
        overrides["os_release"] = os_release
    if sudo is not None:
        overrides["use_sudo"] = sudo
    settings = replace(settings, **overrides)

    bootstrap = Bootstrap(
        settings,
        make_runner(ctx, settings),
        tools=tools,
        kernel=ctx.obj.get("kernel"),
        skip_packages=skip_packages,
        skip_installed=skip_installed,
    )

    try:
        report = bootstrap.run()
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except ReconkitError as e:
        if bootstrap.report.results:
            console.print_results(
                {k: v.value for k, v in bootstrap.report.results.items()},
                bootstrap.report.details,
            )
        fail(e)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)

    console.print_results({k: v.value for k, v in report.results.items()}, report.details)
    console.print_info("\nInstallation complete.")
    console.print_info(f"If you still have issues, verify that {settings.dest_dir} is in your PATH.")


@cli.command()
@tool_option
def check(tools):
    """Verify the recon tools resolve on PATH."""
    settings = load_settings()
    names = [s.name for s in select_tools(tools)]
    try:
        verify(names, settings.search_path, hint=remediation_hint(settings.go_bin, settings.dest_dir))
    except ReconkitError as e:
        fail(e)


@cli.command(name="detect")
@click.option("--os-release", default=None, type=click.Path(path_type=Path), help="os-release file to read on Linux")
@click.pass_context
def detect_cmd(ctx, os_release):
    """Print the detected platform family."""
    settings = load_settings()
    try:
        tag = detect(ctx.obj.get("kernel"), os_release or settings.os_release)
    except ReconkitError as e:
        fail(e)
    else:
        get_console().print_info(tag.value)


@cli.command(name="tools")
def list_tools():
    """List the tools reconkit provisions."""
    console = get_console()
    for spec in TOOL_SPECS.values():
        console.print_info(f"{spec.name:12s} {spec.fetch_locator}")
        console.print_info(f"{'':12s} {spec.description}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
