"""JSON reporter emitting structured run results."""
from __future__ import annotations

import datetime as dt
import json
import pathlib
import time
from typing import TYPE_CHECKING, Any, Dict, Sequence

import click
from jsonschema import validate

from microut.config.models import RunConfig
from microut.core.models import ResultRecord, Severity

from .base import Reporter
from .schema import JSON_SCHEMA_V1, SCHEMA_VERSION

if TYPE_CHECKING:  # pragma: no cover
    from microut.core.suite import TestSuite


class JsonReporter(Reporter):
    """Writes results to a JSON file validated against the schema."""

    def __init__(self, path: str) -> None:
        self._path = pathlib.Path(path)
        self._suites: list[str] = []
        self._start_time = time.perf_counter()

    def on_start(self, suites: Sequence["TestSuite"], config: RunConfig) -> None:
        self._suites = [suite.name for suite in suites]
        self._start_time = time.perf_counter()

    def on_complete(self, records: Sequence[ResultRecord], exit_code: int) -> None:
        payload = build_payload(records, exit_code, self._suites, time.perf_counter() - self._start_time)
        validate(instance=payload, schema=JSON_SCHEMA_V1)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            raise RuntimeError(f"Failed to write JSON report to {self._path}: {exc}") from exc
        click.echo(f"JSON report written to {self._path}")


def build_payload(
    records: Sequence[ResultRecord], exit_code: int, suites: Sequence[str], duration: float
) -> Dict[str, Any]:
    summary: Dict[str, Any] = {
        "total": len(records),
        "exit_code": exit_code,
        "duration_s": duration,
        "suites": list(suites),
    }
    for severity in Severity:
        summary[severity.value] = sum(1 for record in records if record.severity is severity)
    return {
        "schema_version": SCHEMA_VERSION,
        "generated_at": dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "summary": summary,
        "records": [_record_to_dict(record) for record in records],
    }


def _record_to_dict(record: ResultRecord) -> Dict[str, Any]:
    return {
        "severity": record.severity.value,
        "suite": record.suite,
        "case": record.case,
        "function": record.function,
        "file": record.source_file,
        "line": record.source_line,
        "message": record.message,
        "thread_id": record.thread_id,
        "thread_name": record.thread_name,
    }
