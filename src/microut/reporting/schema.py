"""JSON schema definition for reporter output."""
from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

SEVERITY_VALUES = ["success", "fail", "error", "exception", "warning"]

JSON_SCHEMA_V1 = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "microut report",
    "type": "object",
    "required": ["schema_version", "generated_at", "summary", "records"],
    "properties": {
        "schema_version": {"type": "string"},
        "generated_at": {"type": "string", "format": "date-time"},
        "summary": {
            "type": "object",
            "required": ["total", "exit_code", "duration_s", "suites"] + SEVERITY_VALUES,
            "properties": {
                "total": {"type": "integer"},
                "exit_code": {"type": "integer"},
                "duration_s": {"type": "number"},
                "suites": {"type": "array", "items": {"type": "string"}},
                **{severity: {"type": "integer"} for severity in SEVERITY_VALUES},
            },
        },
        "records": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["severity", "suite", "case", "file", "line", "thread_id"],
                "properties": {
                    "severity": {"enum": SEVERITY_VALUES},
                    "suite": {"type": "string"},
                    "case": {"type": "string"},
                    "function": {"type": ["string", "null"]},
                    "file": {"type": "string"},
                    "line": {"type": "integer", "minimum": 0},
                    "message": {"type": ["string", "null"]},
                    "thread_id": {"type": "integer"},
                    "thread_name": {"type": "string"},
                },
            },
        },
    },
}
