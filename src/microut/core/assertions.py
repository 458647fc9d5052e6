"""Assertion pipeline turning failed conditions into result records."""
from __future__ import annotations

import linecache
import sys
from typing import TYPE_CHECKING, Any, NoReturn, Optional, Tuple

from .models import ResultRecord, Severity
from .signals import CaseAbort, FatalAbort

if TYPE_CHECKING:  # pragma: no cover
    from .manager import SuiteManager


class AssertionPipeline:
    """Evaluates assertions on behalf of the suites bound to one manager.

    Every call needs a running suite, whatever the outcome of the condition;
    outside a run it raises :class:`FrameworkUsageError`.

    Every public method takes a ``stacklevel`` argument with the same meaning
    as in :func:`warnings.warn`: ``1`` attributes the failure to the direct
    caller, higher values skip wrapper frames.
    """

    def __init__(self, manager: "SuiteManager") -> None:
        self._manager = manager

    def check(self, condition: Any, message: Optional[str] = None, *, stacklevel: int = 1) -> bool:
        """Record a ``fail`` when ``condition`` is false and keep going."""

        self._manager.current_suite()
        if condition:
            return True
        self._report(Severity.FAIL, message, stacklevel)
        return False

    def require(self, condition: Any, message: Optional[str] = None, *, stacklevel: int = 1) -> None:
        """Record a ``fail`` and end the current case when ``condition`` is false."""

        self._manager.current_suite()
        if condition:
            return
        text = self._report(Severity.FAIL, message, stacklevel)
        raise CaseAbort(text)

    def check_equal(
        self, actual: Any, expected: Any, message: Optional[str] = None, *, stacklevel: int = 1
    ) -> bool:
        self._manager.current_suite()
        if actual == expected:
            return True
        self._report(Severity.FAIL, _mismatch(actual, expected, message), stacklevel)
        return False

    def require_equal(
        self, actual: Any, expected: Any, message: Optional[str] = None, *, stacklevel: int = 1
    ) -> None:
        self._manager.current_suite()
        if actual == expected:
            return
        text = self._report(Severity.FAIL, _mismatch(actual, expected, message), stacklevel)
        raise CaseAbort(text)

    def warn(self, condition: Any, message: Optional[str] = None, *, stacklevel: int = 1) -> bool:
        """Record a ``warning`` when ``condition`` is false."""

        self._manager.current_suite()
        if condition:
            return True
        self._report(Severity.WARNING, message, stacklevel)
        return False

    def fatal(self, message: str) -> NoReturn:
        """Abort the whole run.

        The suite records the ``error`` when the signal reaches its case loop.
        """

        self._manager.current_suite()
        raise FatalAbort(message)

    def _report(self, severity: Severity, message: Optional[str], stacklevel: int) -> str:
        suite = self._manager.current_suite()
        filename, lineno, function, expression = _call_site(stacklevel + 2)
        text = _compose(expression, message)
        self._manager.add_result(
            ResultRecord(
                severity=severity,
                source_file=filename,
                source_line=lineno,
                suite=suite.name,
                case=suite.active_label(),
                function=function,
                message=text,
            )
        )
        return text


def _call_site(depth: int) -> Tuple[str, int, str, str]:
    frame = sys._getframe(depth)
    code = frame.f_code
    lineno = frame.f_lineno
    expression = linecache.getline(code.co_filename, lineno, frame.f_globals).strip()
    return code.co_filename, lineno, code.co_name, expression


def _compose(expression: str, message: Optional[str]) -> str:
    if expression and message:
        return f"{expression} ({message})"
    return message or expression or "assertion failed"


def _mismatch(actual: Any, expected: Any, message: Optional[str]) -> str:
    text = f"expected {expected!r}, got {actual!r}"
    if message:
        text = f"{message}: {text}"
    return text
