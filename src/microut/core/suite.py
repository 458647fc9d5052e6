"""Test suite base class and the declaration decorators."""
from __future__ import annotations

import contextlib
import fnmatch
import logging
import traceback
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional, Sequence, Tuple

from microut.registry import CaseRegistry

from .assertions import AssertionPipeline
from .models import CaseBody, CaseDescriptor, GlobalContext, ResultRecord, Severity
from .signals import AbortSignal

if TYPE_CHECKING:  # pragma: no cover
    from .manager import SuiteManager

logger = logging.getLogger(__name__)

_CASE_ATTR = "__microut_case__"
_HOOK_ATTR = "__microut_hook__"

SETUP = "setup"
TEARDOWN = "teardown"

UNHANDLED_MESSAGE = "Unhandled exception"


def test_case(func: Optional[CaseBody] = None, *, name: Optional[str] = None) -> Any:
    """Mark a suite method as a test case.

    Usable bare (``@test_case``) or with an explicit name
    (``@test_case(name="parses empty input")``).
    """

    def mark(target: CaseBody) -> CaseBody:
        setattr(target, _CASE_ATTR, name or target.__name__)
        return target

    if func is not None:
        return mark(func)
    return mark


test_case.__test__ = False  # type: ignore[attr-defined]


def setup(func: CaseBody) -> CaseBody:
    """Mark a suite method as the hook run once before the suite's cases."""

    setattr(func, _HOOK_ATTR, SETUP)
    return func


def teardown(func: CaseBody) -> CaseBody:
    """Mark a suite method as the hook run once after the suite's cases."""

    setattr(func, _HOOK_ATTR, TEARDOWN)
    return func


class TestSuite:
    """Base class for declared suites.

    Subclassing registers the suite: its cases are collected into a fresh
    :class:`CaseRegistry` and one instance is added to the suite manager.
    Class keywords: ``name`` overrides the suite name, ``manager`` binds the
    suite to an explicit :class:`SuiteManager` and ``register=False`` declares
    an abstract base that is not run by itself.
    """

    __test__ = False

    suite_name: str = ""
    cases: CaseRegistry
    manager: Optional["SuiteManager"] = None
    setup_hook: Optional[CaseBody] = None
    teardown_hook: Optional[CaseBody] = None

    def __init_subclass__(
        cls,
        name: Optional[str] = None,
        manager: Optional["SuiteManager"] = None,
        register: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        cls.suite_name = name or cls.__name__
        if manager is not None:
            cls.manager = manager
        cls.setup_hook, cls.teardown_hook = _collect_hooks(cls)
        cls.cases = CaseRegistry()
        for attr_name, func in _collect_cases(cls):
            cls.cases.register(CaseDescriptor.from_function(func, getattr(func, _CASE_ATTR, attr_name)))
        if register:
            if cls.manager is None:
                from .manager import default_manager

                cls.manager = default_manager()
            cls.manager.add_suite(cls())

    def __init__(self) -> None:
        self.current_case: Optional[CaseDescriptor] = None
        self._phase: Optional[str] = None

    @classmethod
    def register_case(cls, func: CaseBody, name: Optional[str] = None) -> CaseDescriptor:
        """Register ``func(suite)`` as an extra case of this suite."""

        return cls.cases.register(CaseDescriptor.from_function(func, name))

    @property
    def name(self) -> str:
        return self.suite_name

    @property
    def global_context(self) -> GlobalContext:
        return self._bound_manager().global_context

    @property
    def assertions(self) -> AssertionPipeline:
        return self._bound_manager().assertions

    def active_label(self) -> str:
        """Name used to attribute records emitted right now."""

        if self.current_case is not None:
            return self.current_case.name
        if self._phase is not None:
            return f"<{self._phase}>"
        return "<suite>"

    def check(self, condition: Any, message: Optional[str] = None) -> bool:
        return self.assertions.check(condition, message, stacklevel=2)

    def require(self, condition: Any, message: Optional[str] = None) -> None:
        self.assertions.require(condition, message, stacklevel=2)

    def check_equal(self, actual: Any, expected: Any, message: Optional[str] = None) -> bool:
        return self.assertions.check_equal(actual, expected, message, stacklevel=2)

    def require_equal(self, actual: Any, expected: Any, message: Optional[str] = None) -> None:
        self.assertions.require_equal(actual, expected, message, stacklevel=2)

    def warn(self, condition: Any, message: Optional[str] = None) -> bool:
        return self.assertions.warn(condition, message, stacklevel=2)

    def fatal(self, message: str) -> None:
        self.assertions.fatal(message)

    def run(self, patterns: Sequence[str] = ()) -> None:
        """Execute setup, every registered case and teardown.

        ``patterns`` optionally restricts the cases to those whose name
        matches one of the glob patterns.
        """

        logger.debug("run: %s", self.name)
        manager = self._bound_manager()
        try:
            with self._fixture() as ready:
                if not ready:
                    return
                for descriptor in self.cases:
                    if patterns and not any(fnmatch.fnmatchcase(descriptor.name, p) for p in patterns):
                        continue
                    manager.notify_case_start(self, descriptor)
                    self._run_case(descriptor)
        finally:
            self.current_case = None

    def _run_case(self, descriptor: CaseDescriptor) -> None:
        logger.debug(" - %s", descriptor.name)
        self.current_case = descriptor
        try:
            completed = self._invoke(descriptor.identity, descriptor.source_file, descriptor.source_line)
        finally:
            self.current_case = None
        if completed:
            self._emit(Severity.SUCCESS, descriptor.name, descriptor.source_file, descriptor.source_line)

    @contextlib.contextmanager
    def _fixture(self) -> Iterator[bool]:
        if not self._run_hook(self.setup_hook, SETUP):
            yield False
            return
        try:
            yield True
        finally:
            self._run_hook(self.teardown_hook, TEARDOWN)

    def _run_hook(self, hook: Optional[CaseBody], phase: str) -> bool:
        if hook is None:
            return True
        code = hook.__code__
        self._phase = phase
        try:
            return self._invoke(hook, code.co_filename, code.co_firstlineno)
        finally:
            self._phase = None

    def _invoke(self, body: CaseBody, source_file: str, source_line: int) -> bool:
        """Call ``body`` with per-case fault isolation.

        Returns ``True`` when the body completed normally. Fatal signals are
        recorded and re-raised; every other failure is recorded and absorbed.
        """

        label = self.active_label()
        try:
            body(self)
        except AbortSignal as signal:
            if signal.is_fatal:
                logger.debug("fatal signal in %s::%s: %s", self.name, label, signal.message)
                self._emit(Severity.ERROR, label, source_file, source_line, message=signal.message)
                raise
            logger.debug("case aborted: %s::%s", self.name, label)
            return False
        except Exception as exc:
            filename, lineno, function = _raise_site(exc, source_file, source_line)
            self._emit(
                Severity.EXCEPTION,
                label,
                filename,
                lineno,
                function=function,
                message=f"{type(exc).__name__}: {exc}",
            )
            return False
        except KeyboardInterrupt:
            raise
        except BaseException:
            self._emit(Severity.EXCEPTION, label, source_file, source_line, message=UNHANDLED_MESSAGE)
            return False
        return True

    def _emit(
        self,
        severity: Severity,
        case: str,
        source_file: str,
        source_line: int,
        *,
        function: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        self._bound_manager().add_result(
            ResultRecord(
                severity=severity,
                source_file=source_file,
                source_line=source_line,
                suite=self.name,
                case=case,
                function=function,
                message=message,
            )
        )

    def _bound_manager(self) -> "SuiteManager":
        if self.manager is None:
            raise RuntimeError(f"Suite '{self.name}' is not bound to a suite manager")
        return self.manager


def _collect_cases(cls: type) -> Tuple[Tuple[str, CaseBody], ...]:
    # base classes first; an override keeps the slot of the name it replaces
    collected: Dict[str, CaseBody] = {}
    for klass in reversed(cls.__mro__):
        for attr_name, value in vars(klass).items():
            if callable(value) and hasattr(value, _CASE_ATTR):
                collected[attr_name] = value
            elif attr_name in collected:
                del collected[attr_name]
    return tuple(collected.items())


def _collect_hooks(cls: type) -> Tuple[Optional[CaseBody], Optional[CaseBody]]:
    hooks: Dict[str, Optional[CaseBody]] = {SETUP: None, TEARDOWN: None}
    for klass in reversed(cls.__mro__):
        declared: Dict[str, CaseBody] = {}
        for attr_name, value in vars(klass).items():
            phase = getattr(value, _HOOK_ATTR, None) if callable(value) else None
            if phase is None:
                continue
            if phase in declared and declared[phase] is not value:
                raise TypeError(f"{klass.__name__} declares more than one {phase} hook")
            declared[phase] = value
        hooks.update(declared)
    return hooks[SETUP], hooks[TEARDOWN]


def _raise_site(exc: BaseException, source_file: str, source_line: int) -> Tuple[str, int, Optional[str]]:
    frames = traceback.extract_tb(exc.__traceback__)
    if not frames:
        return source_file, source_line, None
    frame = frames[-1]
    return frame.filename, frame.lineno or source_line, frame.name


