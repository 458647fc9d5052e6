"""Run configuration model."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional, Sequence

REPORT_FORMATS = ("terminal", "json")


@dataclass(frozen=True)
class RunConfig:
    """Options accepted by :meth:`SuiteManager.run`."""

    arguments: Sequence[str] = field(default_factory=tuple)
    suites: Sequence[str] = field(default_factory=tuple)
    cases: Sequence[str] = field(default_factory=tuple)
    modules: Sequence[str] = field(default_factory=tuple)
    report_format: str = "terminal"
    report_path: Optional[Path] = None
    color: bool = True
    progress: bool = False
    summary: bool = False
    always_succeed: bool = False
    verbose: bool = False
    debug_log: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.report_format not in REPORT_FORMATS:
            raise ValueError(
                f"report_format must be one of {', '.join(REPORT_FORMATS)}, got {self.report_format!r}"
            )
        if self.report_format == "json" and self.report_path is None:
            raise ValueError("report_path is required when report_format is 'json'")

    def merged(self, **overrides: Any) -> "RunConfig":
        """Return a copy with every override that is not ``None`` applied."""

        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)
