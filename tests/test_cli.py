from __future__ import annotations

import json
import textwrap
from pathlib import Path

from click.testing import CliRunner

from microut import __version__
from microut.cli.main import cli, main


def _write_suite(tmp_path: Path, name: str = "test_numbers.py") -> Path:
    module = tmp_path / name
    module.write_text(
        textwrap.dedent(
            """
            from microut import TestSuite, test_case


            class Numbers(TestSuite):
                @test_case
                def adds(self):
                    self.check(1 + 1 == 2)

                @test_case
                def reads_arguments(self):
                    self.check_equal(self.global_context.arguments, ("--fast",))

                @test_case
                def subtracts(self):
                    self.check(3 - 1 == 1)
            """
        ),
        encoding="utf-8",
    )
    return module


def test_cli_help_short_flag() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["-h"])
    assert result.exit_code == 0
    assert "Usage:" in result.output
    assert "run" in result.output


def test_cli_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == f"microut {__version__}"


def test_cli_run_module_reports_failures(tmp_path, isolated_default_manager) -> None:
    module = _write_suite(tmp_path)
    result = CliRunner().invoke(cli, ["run", "--module", str(module), "--no-color", "--", "--fast"])
    lines = result.output.splitlines()
    assert result.exit_code == 1, result.output
    assert [line.split(" ", 1)[0] for line in lines] == ["OK", "OK", "FAIL", "OK"]
    assert lines[2].startswith("FAIL Numbers::subtracts, subtracts() at ")
    assert lines[2].endswith(" - self.check(3 - 1 == 1)")


def test_cli_run_always_succeed_and_case_filter(tmp_path, isolated_default_manager) -> None:
    module = _write_suite(tmp_path)
    result = CliRunner().invoke(
        cli,
        ["run", "-m", str(module), "--case", "subtracts", "--always-succeed", "--no-color"],
    )
    assert result.exit_code == 0, result.output
    assert [line.split(" ", 1)[0] for line in result.output.splitlines()] == ["FAIL", "OK"]


def test_cli_json_report_from_config(tmp_path, isolated_default_manager) -> None:
    module = _write_suite(tmp_path)
    config = tmp_path / "microut.yaml"
    config.write_text(
        textwrap.dedent(
            f"""
            modules: ["{module.name}"]
            arguments: ["--fast"]
            report:
              format: json
              path: report.json
              color: false
            """
        ),
        encoding="utf-8",
    )
    result = CliRunner().invoke(cli, ["run", "--config", str(config)])
    assert result.exit_code == 1, result.output
    payload = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
    assert payload["summary"]["total"] == 4
    assert payload["summary"]["fail"] == 1


def test_cli_bad_config_is_reported(tmp_path, isolated_default_manager) -> None:
    config = tmp_path / "microut.yaml"
    config.write_text("report: {format: xml}\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["run", "--config", str(config)])
    assert result.exit_code != 0
    assert "schema validation failed" in result.output


def test_cli_missing_module_is_reported(tmp_path, isolated_default_manager) -> None:
    result = CliRunner().invoke(cli, ["run", "--module", str(tmp_path / "absent.py")])
    assert result.exit_code != 0
    assert "Test module not found" in result.output


def test_cli_unwritable_report_path_is_reported(tmp_path, isolated_default_manager) -> None:
    module = _write_suite(tmp_path, "test_unwritable.py")
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    result = CliRunner().invoke(
        cli,
        ["run", "-m", str(module), "--no-color", "--report", "json", "--report-path", str(blocker / "r.json")],
    )
    assert result.exit_code == 1
    assert not isinstance(result.exception, RuntimeError)
    assert "Failed to write JSON report" in result.output


def test_cli_summary_flag(tmp_path, isolated_default_manager) -> None:
    module = _write_suite(tmp_path, "test_summary.py")
    result = CliRunner().invoke(cli, ["run", "-m", str(module), "--no-color", "--summary", "--", "--fast"])
    assert result.exit_code == 1, result.output
    assert result.output.splitlines()[-1] == (
        "Summary: total=4 success=3 fail=1 error=0 exception=0 warning=0 exit=1"
    )


def test_cli_list(tmp_path, isolated_default_manager) -> None:
    module = _write_suite(tmp_path, "test_listed.py")
    result = CliRunner().invoke(cli, ["list", "--module", str(module)])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "Numbers"
    assert [line.split()[0] for line in lines[1:]] == ["adds", "reads_arguments", "subtracts"]


def test_main_returns_exit_status(tmp_path, isolated_default_manager, capsys) -> None:
    module = _write_suite(tmp_path, "test_main.py")
    assert main(["run", "-m", str(module), "--no-color", "--always-succeed"]) == 0
