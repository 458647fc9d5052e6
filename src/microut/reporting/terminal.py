"""Terminal reporter rendering one line per result record."""
from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import click
from colorama import init as colorama_init

from microut.config.models import RunConfig
from microut.core.models import CaseDescriptor, ResultRecord, Severity

from .base import Reporter

if TYPE_CHECKING:  # pragma: no cover
    from microut.core.suite import TestSuite


SEVERITY_COLORS = {
    Severity.SUCCESS: "green",
    Severity.FAIL: "red",
    Severity.ERROR: "red",
    Severity.EXCEPTION: "magenta",
    Severity.WARNING: "yellow",
}


class TerminalReporter(Reporter):
    """Human-readable reporter that writes to stdout."""

    def __init__(self, *, use_color: bool = True, progress: bool = False, summary: bool = False) -> None:
        self._use_color = use_color
        self._progress = progress
        self._summary = summary

    def on_start(self, suites: Sequence["TestSuite"], config: RunConfig) -> None:
        if self._use_color:
            colorama_init()
        if self._progress:
            cases = sum(len(suite.cases) for suite in suites)
            click.echo(self._styled(f"Starting run: {len(suites)} suite(s), {cases} case(s)", "cyan"))

    def on_suite_start(self, suite: "TestSuite") -> None:
        if self._progress:
            click.echo(f"run: {suite.name}")

    def on_case_start(self, suite: "TestSuite", case: CaseDescriptor) -> None:
        if self._progress:
            click.echo(f" - {case.name}")

    def on_complete(self, records: Sequence[ResultRecord], exit_code: int) -> None:
        for record in records:
            click.echo(self.format_record(record))
        if self._summary:
            counts = {severity: 0 for severity in Severity}
            for record in records:
                counts[record.severity] += 1
            text = " ".join(f"{severity.value}={counts[severity]}" for severity in Severity)
            click.echo(self._styled(f"Summary: total={len(records)} {text} exit={exit_code}", "cyan"))

    def format_record(self, record: ResultRecord) -> str:
        line = record.describe()
        label = record.severity.label
        return self._styled(label, SEVERITY_COLORS[record.severity]) + line[len(label):]

    def _styled(self, text: str, color: str) -> str:
        if not self._use_color:
            return text
        return click.style(text, fg=color)
