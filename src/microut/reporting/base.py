"""Reporter interface definitions."""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

from microut.config.models import RunConfig
from microut.core.models import CaseDescriptor, ResultRecord

if TYPE_CHECKING:  # pragma: no cover
    from microut.core.suite import TestSuite


class Reporter:
    """Interface for output renderers.

    Only :meth:`on_complete` is mandatory; progress callbacks default to
    doing nothing.
    """

    def on_start(self, suites: Sequence["TestSuite"], config: RunConfig) -> None:
        return None

    def on_suite_start(self, suite: "TestSuite") -> None:
        return None

    def on_case_start(self, suite: "TestSuite", case: CaseDescriptor) -> None:
        return None

    def on_complete(self, records: Sequence[ResultRecord], exit_code: int) -> None:  # pragma: no cover
        raise NotImplementedError


class ReportManager:
    """Dispatches lifecycle callbacks to multiple reporters."""

    def __init__(self, reporters: Sequence[Reporter]) -> None:
        self._reporters = list(reporters)

    def start(self, suites: Sequence["TestSuite"], config: RunConfig) -> None:
        for reporter in self._reporters:
            reporter.on_start(suites, config)

    def suite_started(self, suite: "TestSuite") -> None:
        for reporter in self._reporters:
            reporter.on_suite_start(suite)

    def case_started(self, suite: "TestSuite", case: CaseDescriptor) -> None:
        for reporter in self._reporters:
            reporter.on_case_start(suite, case)

    def complete(self, records: Sequence[ResultRecord], exit_code: int) -> None:
        for reporter in self._reporters:
            reporter.on_complete(records, exit_code)

    def reporters(self) -> List[Reporter]:
        return list(self._reporters)
