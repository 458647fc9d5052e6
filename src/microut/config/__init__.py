"""Run configuration loading."""

from .loader import CONFIG_SCHEMA, load_config, parse_config
from .models import REPORT_FORMATS, RunConfig

__all__ = [
    "CONFIG_SCHEMA",
    "REPORT_FORMATS",
    "RunConfig",
    "load_config",
    "parse_config",
]
