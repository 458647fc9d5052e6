"""microut package initialization."""
from __future__ import annotations

import importlib
import logging
import os
from typing import Any, Optional, Sequence

from .config import RunConfig, load_config
from .core import (
    AbortSignal,
    CaseAbort,
    CaseDescriptor,
    FatalAbort,
    FrameworkUsageError,
    GlobalContext,
    ResultRecord,
    Severity,
)
from .core.manager import SuiteManager, default_manager, set_default_manager
from .core.suite import TestSuite, setup, teardown, test_case
from .utils import import_string, load_module
from .verbose import setup_logger
from .version import __version__

__all__ = [
    "__version__",
    "AbortSignal",
    "CaseAbort",
    "CaseDescriptor",
    "FatalAbort",
    "FrameworkUsageError",
    "GlobalContext",
    "ResultRecord",
    "RunConfig",
    "Severity",
    "SuiteManager",
    "TestSuite",
    "bootstrap",
    "default_manager",
    "load_config",
    "main",
    "run",
    "set_default_manager",
    "setup",
    "teardown",
    "test_case",
]

logger = logging.getLogger(__name__)

_BOOTSTRAPPED = False


def bootstrap() -> None:
    """Initialize microut (idempotent)."""

    global _BOOTSTRAPPED
    if _BOOTSTRAPPED:
        return
    _load_plugins()
    _BOOTSTRAPPED = True


def _load_plugins() -> None:
    plugin_env = os.environ.get("MICROUT_PLUGINS")
    if not plugin_env:
        return
    for item in plugin_env.split(","):
        entry = item.strip()
        if not entry:
            continue
        logger.debug("loading plugin %s", entry)
        if ":" in entry:
            import_string(entry)()
            continue
        module = importlib.import_module(entry)
        register = getattr(module, "register", None)
        if callable(register):
            register()


def run(
    arguments: Optional[Sequence[str]] = None,
    *,
    manager: Optional[SuiteManager] = None,
    config: Optional[RunConfig] = None,
    **options: Any,
) -> int:
    """Run every registered suite and return the process exit status.

    ``options`` override fields of ``config`` (see :class:`RunConfig`).
    """

    bootstrap()
    config = (config or RunConfig()).merged(
        arguments=tuple(arguments) if arguments is not None else None, **options
    )
    setup_logger(config.debug_log, verbose=config.verbose)
    for target in config.modules:
        load_module(target)
    return (manager or default_manager()).run(config)


def main(argv: Optional[list[str]] = None) -> int:
    """Process entry point: parse ``argv`` and run the registered suites."""

    from .cli.main import main as cli_main

    return cli_main(argv)
