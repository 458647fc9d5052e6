from __future__ import annotations

from typing import List, Sequence

import pytest

from microut import SuiteManager, set_default_manager
from microut.core.models import ResultRecord
from microut.reporting import Reporter


class CollectingReporter(Reporter):
    """Keeps everything the manager reports, for assertions in tests."""

    def __init__(self) -> None:
        self.events: List[tuple] = []
        self.records: List[ResultRecord] = []
        self.exit_code: int | None = None

    def on_start(self, suites, config) -> None:
        self.events.append(("start", tuple(suite.name for suite in suites)))

    def on_suite_start(self, suite) -> None:
        self.events.append(("suite", suite.name))

    def on_case_start(self, suite, case) -> None:
        self.events.append(("case", suite.name, case.name))

    def on_complete(self, records: Sequence[ResultRecord], exit_code: int) -> None:
        self.records = list(records)
        self.exit_code = exit_code


@pytest.fixture
def manager() -> SuiteManager:
    return SuiteManager(name="test manager")


@pytest.fixture
def collector() -> CollectingReporter:
    return CollectingReporter()


@pytest.fixture
def isolated_default_manager():
    """Swap the process-wide manager for a fresh one during the test."""

    fresh = SuiteManager()
    previous = set_default_manager(fresh)
    try:
        yield fresh
    finally:
        set_default_manager(previous)
