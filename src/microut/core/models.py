"""Core dataclasses shared across microut subsystems."""
from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple


CaseBody = Callable[..., Any]


class Severity(enum.Enum):
    """Classification of a recorded outcome."""

    SUCCESS = "success"
    FAIL = "fail"
    ERROR = "error"
    EXCEPTION = "exception"
    WARNING = "warning"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_failure(self) -> bool:
        return self in (Severity.FAIL, Severity.ERROR, Severity.EXCEPTION)


_LABELS = {
    Severity.SUCCESS: "OK",
    Severity.FAIL: "FAIL",
    Severity.ERROR: "ERROR",
    Severity.EXCEPTION: "EXCEPTION",
    Severity.WARNING: "WARNING",
}


@dataclass(frozen=True, eq=False)
class CaseDescriptor:
    """A declared test case bound to its runnable body.

    Two descriptors are the same case when they wrap the same body object,
    whatever their other fields say.
    """

    identity: CaseBody
    name: str
    source_file: str
    source_line: int

    @classmethod
    def from_function(cls, func: CaseBody, name: Optional[str] = None) -> "CaseDescriptor":
        code = getattr(func, "__code__", None)
        return cls(
            identity=func,
            name=name or getattr(func, "__name__", repr(func)),
            source_file=code.co_filename if code else "<unknown>",
            source_line=code.co_firstlineno if code else 0,
        )

    def same_case(self, other: "CaseDescriptor") -> bool:
        return self.identity is other.identity

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CaseDescriptor):
            return NotImplemented
        return self.same_case(other)

    def __hash__(self) -> int:
        return id(self.identity)


@dataclass(frozen=True)
class ResultRecord:
    """Outcome of one executed case or one assertion within it."""

    severity: Severity
    source_file: str
    source_line: int
    suite: str
    case: str
    function: Optional[str] = None
    message: Optional[str] = None
    thread_id: int = field(default_factory=threading.get_ident)
    thread_name: str = field(default_factory=lambda: threading.current_thread().name)

    @property
    def passed(self) -> bool:
        return not self.severity.is_failure

    def describe(self) -> str:
        """Render the record as a single report line."""

        text = f"{self.severity.label} {self.suite}::{self.case}"
        if self.function:
            text += f", {self.function}()"
        text += f" at {self.source_file}, line {self.source_line}"
        if self.message:
            text += f" - {self.message}"
        return text


@dataclass(frozen=True)
class GlobalContext:
    """Read-only data shared with every suite during a run."""

    arguments: Tuple[str, ...] = tuple()
