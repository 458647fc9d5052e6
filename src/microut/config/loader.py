"""YAML loader and validation for run configuration files."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from jsonschema import Draft7Validator

from .models import REPORT_FORMATS, RunConfig

_STRING_LIST = {"type": "array", "items": {"type": "string"}}

CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "microut configuration",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "arguments": _STRING_LIST,
        "suites": _STRING_LIST,
        "cases": _STRING_LIST,
        "modules": _STRING_LIST,
        "report": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "format": {"enum": list(REPORT_FORMATS)},
                "path": {"type": "string", "minLength": 1},
                "color": {"type": "boolean"},
                "progress": {"type": "boolean"},
                "summary": {"type": "boolean"},
            },
        },
        "always_succeed": {"type": "boolean"},
        "verbose": {"type": "boolean"},
        "debug_log": {"type": "string", "minLength": 1},
    },
}

_validator = Draft7Validator(CONFIG_SCHEMA)


def load_config(path: str) -> RunConfig:
    """Load and validate a configuration file."""

    config_path = Path(path).expanduser().resolve()
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc
    return parse_config(raw, base=config_path.parent)


def parse_config(raw: Any, base: Optional[Path] = None) -> RunConfig:
    """Build a :class:`RunConfig` from an already-parsed mapping."""

    if not isinstance(raw, Mapping):
        raise ValueError("Configuration must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ValueError(f"Configuration schema validation failed: {messages}")
    base = base or Path.cwd()
    report = raw.get("report") or {}
    return RunConfig(
        arguments=tuple(raw.get("arguments", ())),
        suites=tuple(raw.get("suites", ())),
        cases=tuple(raw.get("cases", ())),
        modules=tuple(_resolve_module(item, base) for item in raw.get("modules", ())),
        report_format=report.get("format", "terminal"),
        report_path=_resolve_path(report.get("path"), base),
        color=bool(report.get("color", True)),
        progress=bool(report.get("progress", False)),
        summary=bool(report.get("summary", False)),
        always_succeed=bool(raw.get("always_succeed", False)),
        verbose=bool(raw.get("verbose", False)),
        debug_log=_resolve_path(raw.get("debug_log"), base),
    )


def _resolve_path(value: Optional[str], base: Path) -> Optional[Path]:
    if not value:
        return None
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base / path
    return path


def _resolve_module(value: str, base: Path) -> str:
    # dotted module names are left alone; file paths are made absolute
    if value.endswith(".py"):
        return str(_resolve_path(value, base))
    return value
