"""Control signals used to unwind a running case or the whole run."""
from __future__ import annotations

import enum


class SignalKind(enum.Enum):
    """Scope of an abort signal."""

    CASE_ABORT = "case_abort"
    FATAL_ABORT = "fatal_abort"


class AbortSignal(BaseException):
    """Unwinds test code up to the suite's per-case catch point.

    Derives from ``BaseException`` so that ``except Exception`` blocks inside
    test bodies do not swallow it.
    """

    kind: SignalKind = SignalKind.CASE_ABORT

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    @property
    def is_fatal(self) -> bool:
        return self.kind is SignalKind.FATAL_ABORT


class CaseAbort(AbortSignal):
    """Ends the current case only."""

    kind = SignalKind.CASE_ABORT


class FatalAbort(AbortSignal):
    """Ends the entire run."""

    kind = SignalKind.FATAL_ABORT


class FrameworkUsageError(FatalAbort):
    """Raised when the framework API is used outside of a run."""
