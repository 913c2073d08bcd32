import shutil

import pytest

from conftest import FakeRunner, make_executable, write_os_release
from reconkit.errors import InstallError, VerificationError
from reconkit.model import Outcome, PlatformTag, Stage
from reconkit.pipeline import Bootstrap
from reconkit.settings import Settings
from reconkit.tools import TOOL_SPECS

NAMES = list(TOOL_SPECS)


def simulate_host(gobin, dest):
    """Side effects of the real commands: go appears, binaries get built and copied."""
    def on_run(runner, command):
        argv = command.argv
        if argv[-1] in ("golang-go", "golang", "go") and "install" in argv:
            runner.present.add("go")
        elif argv[:2] == ("go", "install"):
            name = command.name.split()[-1]
            make_executable(gobin, name)
        elif argv[0] == "cp":
            dest.mkdir(parents=True, exist_ok=True)
            shutil.copy2(argv[1], dest)
    return on_run


@pytest.fixture
def host(tmp_path):
    gobin = tmp_path / "go" / "bin"
    dest = tmp_path / "usr-local-bin"
    settings = Settings(
        dest_dir=dest,
        os_release=write_os_release(tmp_path / "os-release", ID="debian"),
        use_sudo=False,
        search_path=(str(dest),),
    )
    return settings, gobin, dest


def test_scenario_a_debian_fresh_host(host):
    settings, gobin, dest = host
    runner = FakeRunner(on_run=simulate_host(gobin, dest), outputs={"go env": f"{gobin}\n\n"})

    report = Bootstrap(settings, runner, kernel="Linux").run()

    assert report.ok
    assert report.stage is Stage.VERIFIED
    assert report.platform is PlatformTag.DEBIAN
    assert report.missing == []
    assert report.results == {name: Outcome.INSTALLED for name in NAMES}
    assert ("apt-get", "install", "-y", "golang-go") in runner.argvs
    assert sorted(p.name for p in dest.iterdir()) == sorted(NAMES)


def test_scenario_b_macos_without_homebrew(host):
    settings, gobin, dest = host
    runner = FakeRunner(present=set())
    bootstrap = Bootstrap(settings, runner, kernel="Darwin")

    with pytest.raises(InstallError) as exc:
        bootstrap.run()

    assert "Install Homebrew" in exc.value.suggestion
    assert bootstrap.report.stage is Stage.FAILED
    assert bootstrap.report.platform is PlatformTag.MACOS
    assert runner.commands == []


def test_scenario_c_one_fetch_fails(host):
    settings, gobin, dest = host
    runner = FakeRunner(
        on_run=simulate_host(gobin, dest),
        fail_when=lambda c: c.name == "install naabu",
        present={"go"},
        outputs={"go env": f"{gobin}\n\n"},
    )
    bootstrap = Bootstrap(settings, runner, kernel="Linux")

    with pytest.raises(VerificationError) as exc:
        bootstrap.run()

    report = bootstrap.report
    assert exc.value.missing == ["naabu"]
    assert report.missing == ["naabu"]
    assert report.stage is Stage.FAILED
    assert report.results["naabu"] is Outcome.FETCH_FAILED
    assert [n for n, o in report.results.items() if o is Outcome.INSTALLED] == [
        "subfinder", "assetfinder", "dnsx", "httpx",
    ]
    assert len([a for a in runner.argvs if a[0] == "cp"]) == 4
    assert str(gobin) in exc.value.hint


def test_toolchain_present_skips_install(host):
    settings, gobin, dest = host
    runner = FakeRunner(on_run=simulate_host(gobin, dest), present={"go"}, outputs={"go env": f"{gobin}\n\n"})
    Bootstrap(settings, runner, kernel="Linux", skip_packages=True).run()
    assert not any(a[0] == "apt-get" for a in runner.argvs)


def test_package_failure_stops_before_toolchain(host):
    settings, gobin, dest = host
    runner = FakeRunner(fail_when=lambda c: c.argv[:2] == ("apt-get", "update"))
    bootstrap = Bootstrap(settings, runner, kernel="Linux")
    with pytest.raises(InstallError):
        bootstrap.run()
    assert runner.argvs == [("apt-get", "update")]
    assert bootstrap.report.results == {}


def test_published_but_not_on_path_is_verify_failed(tmp_path):
    gobin = tmp_path / "gobin"
    dest = tmp_path / "dest"
    settings = Settings(
        dest_dir=dest,
        go_bin=gobin,
        os_release=write_os_release(tmp_path / "os-release", ID="fedora"),
        use_sudo=False,
        search_path=(str(tmp_path / "elsewhere"),),
    )
    runner = FakeRunner(on_run=simulate_host(gobin, dest), present={"go", "dnf"})
    bootstrap = Bootstrap(settings, runner, kernel="Linux", tools=["httpx"])

    with pytest.raises(VerificationError):
        bootstrap.run()

    assert bootstrap.report.results == {"httpx": Outcome.VERIFY_FAILED}
    assert bootstrap.report.platform is PlatformTag.REDHAT


def test_skip_installed_tools_are_not_published(host):
    settings, gobin, dest = host
    make_executable(dest, "httpx")
    runner = FakeRunner(
        on_run=simulate_host(gobin, dest),
        present={"go", "httpx"},
        outputs={"go env": f"{gobin}\n\n"},
    )
    report = Bootstrap(settings, runner, kernel="Linux", skip_packages=True, skip_installed=True).run()
    assert report.results["httpx"] is Outcome.ALREADY_PRESENT
    assert ("cp", str(gobin / "httpx"), f"{dest}/") not in runner.argvs
    assert report.ok


def test_report_keeps_failure_details(host):
    settings, gobin, dest = host
    runner = FakeRunner(
        on_run=simulate_host(gobin, dest),
        fail_when=lambda c: c.name == "install dnsx",
        present={"go"},
        outputs={"go env": f"{gobin}\n\n"},
    )
    bootstrap = Bootstrap(settings, runner, kernel="Linux", skip_packages=True)
    with pytest.raises(VerificationError):
        bootstrap.run()
    assert bootstrap.report.details["dnsx"] == "go: simulated failure"
    assert bootstrap.report.details["httpx"] == str(dest / "httpx")


def test_verify_failed_tools_carry_a_reason(tmp_path):
    gobin = tmp_path / "gobin"
    settings = Settings(
        dest_dir=tmp_path / "dest",
        go_bin=gobin,
        os_release=write_os_release(tmp_path / "os-release", ID="debian"),
        use_sudo=False,
        search_path=(str(tmp_path / "elsewhere"),),
    )
    runner = FakeRunner(on_run=simulate_host(gobin, tmp_path / "dest"), present={"go"})
    bootstrap = Bootstrap(settings, runner, kernel="Linux", tools=["dnsx"], skip_packages=True)
    with pytest.raises(VerificationError):
        bootstrap.run()
    assert bootstrap.report.details == {"dnsx": "not found in PATH"}
