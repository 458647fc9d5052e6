"""CLI entry point for microut."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from microut import __version__, bootstrap
from microut import run as run_suites
from microut.config import RunConfig, load_config
from microut.core.manager import default_manager
from microut.utils import load_module


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class CliState:
    """Holds global CLI state."""

    def __init__(self, verbose: bool) -> None:
        self.verbose = verbose


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"microut {__version__}")
    raise click.exceptions.Exit()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the microut version and exit.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Top level CLI group for microut."""

    bootstrap()
    ctx.obj = CliState(verbose=verbose)


@cli.command(context_settings={"ignore_unknown_options": True})
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML configuration file.",
)
@click.option(
    "--module",
    "-m",
    "modules",
    multiple=True,
    help="Module name or .py file declaring suites (repeatable).",
)
@click.option("--suite", "suite_filters", type=str, help="Comma-separated suite name filters (supports globs).")
@click.option("--case", "case_filters", type=str, help="Comma-separated case name filters (supports globs).")
@click.option(
    "--report",
    "report_format",
    type=click.Choice(["terminal", "json"]),
    help="Report format (terminal by default).",
)
@click.option("--report-path", type=click.Path(dir_okay=False), help="When --report json, write to this path.")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
@click.option("--progress", is_flag=True, help="Print suite and case names as they start.")
@click.option("--summary", is_flag=True, help="Print per-severity counts after the records.")
@click.option("--always-succeed", is_flag=True, help="Exit with status 0 even when cases fail.")
@click.option("--debug-log", type=click.Path(dir_okay=False), help="Write debug logging to this file.")
@click.argument("arguments", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def run(
    state: CliState,
    config_path: Optional[str],
    modules: Tuple[str, ...],
    suite_filters: Optional[str],
    case_filters: Optional[str],
    report_format: Optional[str],
    report_path: Optional[str],
    no_color: bool,
    progress: bool,
    summary: bool,
    always_succeed: bool,
    debug_log: Optional[str],
    arguments: Tuple[str, ...],
) -> None:
    """Run the registered suites; extra ARGUMENTS are handed to the suites."""

    try:
        config = load_config(config_path) if config_path else RunConfig()
        config = config.merged(
            modules=tuple(config.modules) + modules,
            suites=_split_csv(suite_filters) or None,
            cases=_split_csv(case_filters) or None,
            report_format=report_format,
            report_path=Path(report_path) if report_path else None,
            color=False if no_color else None,
            progress=True if progress else None,
            summary=True if summary else None,
            always_succeed=True if always_succeed else None,
            verbose=True if state.verbose else None,
            debug_log=Path(debug_log) if debug_log else None,
        )
        exit_code = run_suites(arguments or None, manager=default_manager(), config=config)
    except Exception as exc:
        raise click.ClickException(str(exc)) from exc
    raise click.exceptions.Exit(exit_code)


@cli.command(name="list")
@click.option("--module", "-m", "modules", multiple=True, help="Module name or .py file declaring suites.")
def list_cases(modules: Tuple[str, ...]) -> None:
    """List registered suites and their cases without running them."""

    try:
        for target in modules:
            load_module(target)
    except (ValueError, ImportError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc
    for suite in default_manager().suites():
        click.echo(suite.name)
        for case in suite.cases:
            click.echo(f"  {case.name} ({case.source_file}:{case.source_line})")


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="microut", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


def _split_csv(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return tuple()
    parts = [part.strip() for part in value.split(",") if part.strip()]
    return tuple(parts)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
