"""Unit tests for the CLI — option parsing, passthrough and the fast path.

Process replacement (``os.execvp``) and the colored run are stubbed so
the tests can observe which path was taken and with which arguments.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from ninjacolor.cli import app as app_module
from ninjacolor.cli.app import app, normalize_argv
from ninjacolor.cli.commands import run_cmd as run_module
from ninjacolor.models.options import ColorMode, WrapperOptions

runner = CliRunner()


class _Exec(Exception):
    def __init__(self, argv: list[str]) -> None:
        super().__init__(argv)
        self.argv = argv


@pytest.fixture
def execs(monkeypatch: pytest.MonkeyPatch) -> list[list[str]]:
    """Record exec calls; each one ends the command like a real exec."""
    calls: list[list[str]] = []

    def _fake_execvp(file: str, argv: list[str]) -> None:
        calls.append(list(argv))
        raise SystemExit(0)

    monkeypatch.setattr(run_module.os, "execvp", _fake_execvp)
    monkeypatch.delenv("NINJACOLOR_NINJA", raising=False)
    return calls


@pytest.fixture
def colored_runs(monkeypatch: pytest.MonkeyPatch) -> list[tuple[list[str], WrapperOptions]]:
    """Replace the pty run with a recorder returning exit code 7."""
    runs: list[tuple[list[str], WrapperOptions]] = []

    def _fake_run_colored(argv, options, config, output) -> int:
        runs.append((argv, options))
        return 7

    monkeypatch.setattr(run_module, "run_colored", _fake_run_colored)
    return runs


# ---------------------------------------------------------------------------
# Test: argv normalization
# ---------------------------------------------------------------------------


class TestNormalizeArgv:
    def test_bare_color_means_always(self):
        assert normalize_argv(["--color", "all"]) == ["--color=always", "all"]

    def test_short_help(self):
        assert normalize_argv(["-h"]) == ["--help"]

    def test_explicit_values_untouched(self):
        assert normalize_argv(["--color=never", "-C", "out"]) == ["--color=never", "-C", "out"]

    def test_after_double_dash_untouched(self):
        assert normalize_argv(["--", "--color", "-h"]) == ["--", "--color", "-h"]


# ---------------------------------------------------------------------------
# Test: fast path
# ---------------------------------------------------------------------------


class TestFastPath:
    def test_never_execs_ninja_directly(self, execs, colored_runs):
        result = runner.invoke(app, ["--color=never", "-C", "out", "all"])
        assert result.exit_code == 0
        assert execs == [["ninja", "-C", "out", "all"]]
        assert colored_runs == []

    def test_auto_without_tty_execs_ninja(self, execs, colored_runs):
        # CliRunner's stdout is not a terminal
        result = runner.invoke(app, ["-j4", "-k0", "target"])
        assert result.exit_code == 0
        assert execs == [["ninja", "-j4", "-k0", "target"]]
        assert colored_runs == []

    def test_configured_ninja_binary(self, execs, colored_runs, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("NINJACOLOR_NINJA", "samu")
        runner.invoke(app, ["--color=never"])
        assert execs == [["samu"]]

    def test_unknown_long_options_passed_through(self, execs, colored_runs):
        runner.invoke(app, ["--color=never", "--version"])
        assert execs == [["ninja", "--version"]]

    def test_double_dash_kept_for_ninja(self, execs, colored_runs):
        result = runner.invoke(app, ["--color=never", "--", "-weird-target"])
        assert result.exit_code == 0
        assert execs == [["ninja", "--", "-weird-target"]]

    def test_own_options_after_double_dash_not_parsed(self, execs, colored_runs):
        runner.invoke(app, ["--color=never", "-C", "out", "--", "--nogcc", "--help"])
        assert execs == [["ninja", "-C", "out", "--", "--nogcc", "--help"]]


# ---------------------------------------------------------------------------
# Test: colored path
# ---------------------------------------------------------------------------


class TestColoredPath:
    def test_always_runs_colored_and_exits_with_child_code(self, execs, colored_runs):
        result = runner.invoke(app, ["--color=always", "-C", "out"])
        assert result.exit_code == 7
        assert execs == []
        argv, options = colored_runs[0]
        assert argv == ["ninja", "-C", "out"]
        assert options.color is ColorMode.ALWAYS
        assert options.diagnostics is True
        assert options.tee is None

    def test_bare_color_via_main(self, execs, colored_runs):
        result = runner.invoke(app, normalize_argv(["--color", "all"]))
        assert result.exit_code == 7
        assert colored_runs[0][0] == ["ninja", "all"]

    def test_nogcc_and_tee(self, execs, colored_runs, tmp_path: Path):
        log = tmp_path / "build.log"
        result = runner.invoke(app, ["--color=always", "--nogcc", f"--tee={log}", "all"])
        assert result.exit_code == 7
        _, options = colored_runs[0]
        assert options.diagnostics is False
        assert options.tee == log
        assert options.passthrough == ["all"]

    def test_double_dash_in_colored_passthrough(self, execs, colored_runs):
        runner.invoke(app, ["--color=always", "--", "-weird-target"])
        argv, options = colored_runs[0]
        assert argv == ["ninja", "--", "-weird-target"]
        assert options.passthrough == ["--", "-weird-target"]

    def test_mirror_open_failure_is_fatal(self, execs, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("NINJACOLOR_PREFERENCES", str(tmp_path / "absent"))
        bad = tmp_path / "no-such-dir" / "build.log"
        result = runner.invoke(app, ["--color=always", f"--tee={bad}"])
        assert result.exit_code == 1

    def test_invalid_color_value_rejected(self, execs, colored_runs):
        result = runner.invoke(app, ["--color=sometimes"])
        assert result.exit_code != 0
        assert execs == []
        assert colored_runs == []


# ---------------------------------------------------------------------------
# Test: help
# ---------------------------------------------------------------------------


class TestHelp:
    def test_help_prints_usage_then_delegates(self, execs, colored_runs):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "--tee" in result.output
        assert "--nogcc" in result.output
        assert execs == [["ninja", "--help"]]

    def test_main_entry_point_normalizes(self, monkeypatch: pytest.MonkeyPatch):
        seen: dict[str, object] = {}

        def _fake_app(args, prog_name):
            seen["args"] = args
            seen["prog_name"] = prog_name

        monkeypatch.setattr(app_module, "app", _fake_app)
        app_module.main(["--color", "-h"])
        assert seen == {"args": ["--color=always", "--help"], "prog_name": "ninjacolor"}
