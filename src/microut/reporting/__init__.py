"""Reporting exports."""
from typing import List

from microut.config.models import RunConfig

from .base import ReportManager, Reporter
from .json_reporter import JsonReporter
from .terminal import TerminalReporter


def build_reporters(config: RunConfig) -> List[Reporter]:
    """Return the reporters selected by ``config``."""

    reporters: List[Reporter] = [
        TerminalReporter(use_color=config.color, progress=config.progress, summary=config.summary)
    ]
    if config.report_format == "json" and config.report_path is not None:
        reporters.append(JsonReporter(path=str(config.report_path)))
    return reporters


__all__ = [
    "ReportManager",
    "Reporter",
    "JsonReporter",
    "TerminalReporter",
    "build_reporters",
]
