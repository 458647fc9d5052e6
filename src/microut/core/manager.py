"""Suite manager: suite registration, sequential execution and result collection."""
from __future__ import annotations

import fnmatch
import logging
import threading
import traceback
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from microut.config.models import RunConfig
from microut.reporting import ReportManager, Reporter, build_reporters

from .assertions import AssertionPipeline
from .models import CaseDescriptor, GlobalContext, ResultRecord, Severity
from .signals import FatalAbort, FrameworkUsageError

if TYPE_CHECKING:  # pragma: no cover
    from .suite import TestSuite

logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """Suite currently executing; the suite holds its current case."""

    suite: Optional["TestSuite"] = None

    @property
    def case(self) -> Optional[CaseDescriptor]:
        if self.suite is None:
            return None
        return self.suite.current_case


class SuiteManager:
    """Owns the registered suites and collects results for one process."""

    def __init__(self, name: str = "Default microut manager") -> None:
        self.name = name
        self.context = RunContext()
        self.global_context = GlobalContext()
        self.assertions = AssertionPipeline(self)
        self._suites: List["TestSuite"] = []
        self._results: List[ResultRecord] = []
        self._lock = threading.Lock()
        self._config = RunConfig()
        self._reporting = ReportManager([])
        self._running = False

    def add_suite(self, suite: "TestSuite") -> None:
        if any(existing is suite for existing in self._suites):
            return
        logger.debug("registered suite %s", suite.name)
        self._suites.append(suite)

    def suites(self) -> Tuple["TestSuite", ...]:
        return tuple(self._suites)

    def run(
        self,
        config: Optional[RunConfig] = None,
        *,
        reporters: Optional[Sequence[Reporter]] = None,
    ) -> int:
        """Run every registered suite in registration order and report.

        Returns the exit status computed by :meth:`report`.
        """

        if self._running:
            raise FrameworkUsageError("run() called while a run is already in progress")
        self._config = config or RunConfig()
        self.global_context = GlobalContext(arguments=tuple(self._config.arguments))
        self._reporting = ReportManager(reporters if reporters is not None else build_reporters(self._config))
        with self._lock:
            self._results = []
        selected = self._select_suites()
        self._running = True
        try:
            self._reporting.start(selected, self._config)
            for suite in selected:
                self.context.suite = suite
                self._reporting.suite_started(suite)
                suite.run(self._config.cases)
        except FatalAbort as signal:
            logger.warning("run aborted: %s", signal.message)
        except Exception as exc:
            logger.exception("run driver failed")
            self._append(_driver_failure(exc, self.context.suite, self.name))
        finally:
            self.context.suite = None
            self._running = False
        return self.report()

    def add_result(self, record: ResultRecord) -> None:
        """Append ``record``; safe to call from any thread while a suite runs."""

        if self.context.suite is None:
            raise FrameworkUsageError("add_result() called while no suite is running")
        self._append(record)

    def report(self) -> int:
        """Hand every collected record to the reporters and return the exit status.

        The status is 1 when a fail, error or exception was recorded, unless the
        run was configured with ``always_succeed``.
        """

        records = self.results()
        exit_code = self.exit_status(records)
        self._reporting.complete(records, exit_code)
        return exit_code

    def exit_status(self, records: Sequence[ResultRecord]) -> int:
        if self._config.always_succeed:
            return 0
        return 1 if any(record.severity.is_failure for record in records) else 0

    def current_suite(self) -> "TestSuite":
        suite = self.context.suite
        if suite is None:
            raise FrameworkUsageError("no suite is running")
        return suite

    def current_case(self) -> CaseDescriptor:
        case = self.current_suite().current_case
        if case is None:
            raise FrameworkUsageError("no test case is running")
        return case

    def results(self) -> Tuple[ResultRecord, ...]:
        return tuple(self._results)

    def summary(self) -> Dict[Severity, int]:
        counts = {severity: 0 for severity in Severity}
        for record in self._results:
            counts[record.severity] += 1
        return counts

    def notify_case_start(self, suite: "TestSuite", case: CaseDescriptor) -> None:
        self._reporting.case_started(suite, case)

    def _select_suites(self) -> List["TestSuite"]:
        patterns = self._config.suites
        if not patterns:
            return list(self._suites)
        return [
            suite for suite in self._suites if any(fnmatch.fnmatchcase(suite.name, p) for p in patterns)
        ]

    def _append(self, record: ResultRecord) -> None:
        with self._lock:
            self._results.append(record)


def _driver_failure(exc: Exception, suite: Optional["TestSuite"], manager_name: str) -> ResultRecord:
    frames = traceback.extract_tb(exc.__traceback__)
    frame = frames[-1] if frames else None
    return ResultRecord(
        severity=Severity.EXCEPTION,
        source_file=frame.filename if frame else "<unknown>",
        source_line=(frame.lineno or 0) if frame else 0,
        suite=suite.name if suite is not None else manager_name,
        case="<run>",
        function=frame.name if frame else None,
        message=f"{type(exc).__name__}: {exc}",
    )


_default_manager: Optional[SuiteManager] = None
_default_lock = threading.Lock()


def default_manager() -> SuiteManager:
    """Return the process-wide manager, creating it on first use."""

    global _default_manager
    with _default_lock:
        if _default_manager is None:
            _default_manager = SuiteManager()
        return _default_manager


def set_default_manager(manager: Optional[SuiteManager]) -> Optional[SuiteManager]:
    """Replace the process-wide manager and return the previous one."""

    global _default_manager
    with _default_lock:
        previous, _default_manager = _default_manager, manager
        return previous
