from __future__ import annotations

import pytest

import microut
from microut import FatalAbort, Severity, TestSuite, test_case
from microut.core.suite import UNHANDLED_MESSAGE


def _outcomes(records):
    return [(record.case, record.severity.value) for record in records]


def test_cases_are_collected_in_declaration_order(manager) -> None:
    class Ordered(TestSuite, manager=manager):
        @test_case
        def zeta(self) -> None:
            pass

        @test_case
        def alpha(self) -> None:
            pass

        @test_case(name="named case")
        def middle(self) -> None:
            pass

        def helper(self) -> None:
            pass

    (suite,) = manager.suites()
    assert isinstance(suite, Ordered)
    assert suite.name == "Ordered"
    assert suite.cases.names() == ("zeta", "alpha", "named case")


def test_aliased_case_registers_once(manager) -> None:
    class Aliased(TestSuite, manager=manager):
        @test_case
        def first(self) -> None:
            pass

        second = first

    assert len(Aliased.cases) == 1


def test_inherited_cases_come_first_and_overrides_keep_their_slot(manager) -> None:
    class Base(TestSuite, manager=manager, register=False):
        @test_case
        def shared(self) -> None:
            self.calls.append("base.shared")

        @test_case
        def replaced(self) -> None:
            self.calls.append("base.replaced")

    class Derived(Base, name="derived suite"):
        calls: list = []

        @test_case
        def own(self) -> None:
            self.calls.append("own")

        @test_case
        def replaced(self) -> None:
            self.calls.append("derived.replaced")

    (suite,) = manager.suites()
    assert suite.name == "derived suite"
    assert Derived.cases.names() == ("shared", "replaced", "own")
    exit_code = manager.run(reporters=[])
    assert exit_code == 0
    assert Derived.calls == ["base.shared", "derived.replaced", "own"]


def test_register_false_keeps_suite_out_of_manager(manager) -> None:
    class Abstract(TestSuite, manager=manager, register=False):
        @test_case
        def anything(self) -> None:
            pass

    assert manager.suites() == ()


def test_setup_cases_teardown_run_once_in_order(manager) -> None:
    calls = []

    class Bracketed(TestSuite, manager=manager):
        @microut.setup
        def prepare(self) -> None:
            calls.append("setup")

        @microut.teardown
        def cleanup(self) -> None:
            calls.append("teardown")

        @test_case
        def one(self) -> None:
            calls.append("one")

        @test_case
        def two(self) -> None:
            calls.append("two")
            raise RuntimeError("boom")

        @test_case
        def three(self) -> None:
            calls.append("three")
            self.require(False)

        @test_case
        def four(self) -> None:
            calls.append("four")

    manager.run(reporters=[])
    assert calls == ["setup", "one", "two", "three", "four", "teardown"]


def test_case_abort_ends_only_that_case(manager) -> None:
    calls = []

    class Aborting(TestSuite, manager=manager):
        @microut.teardown
        def cleanup(self) -> None:
            calls.append("teardown")

        @test_case
        def stops_early(self) -> None:
            self.require(1 > 2, "impossible")
            calls.append("unreachable")

        @test_case
        def keeps_going(self) -> None:
            calls.append("keeps_going")

    manager.run(reporters=[])
    assert calls == ["keeps_going", "teardown"]
    assert _outcomes(manager.results()) == [
        ("stops_early", "fail"),
        ("keeps_going", "success"),
    ]


def test_exception_in_case_is_recorded_and_isolated(manager) -> None:
    class Raising(TestSuite, manager=manager):
        @test_case
        def explodes(self) -> None:
            raise ValueError("bad value")

        @test_case
        def after(self) -> None:
            pass

    manager.run(reporters=[])
    first, second = manager.results()
    assert first.severity is Severity.EXCEPTION
    assert first.case == "explodes"
    assert first.message == "ValueError: bad value"
    assert first.function == "explodes"
    assert first.source_file.endswith("test_suite.py")
    assert second.severity is Severity.SUCCESS


def test_exception_caught_by_test_code_does_not_swallow_abort(manager) -> None:
    class Guarded(TestSuite, manager=manager):
        @test_case
        def guarded(self) -> None:
            try:
                self.require(False, "must stop")
            except Exception:
                self.check(False, "abort was swallowed")
            raise AssertionError("unreachable")

    manager.run(reporters=[])
    assert _outcomes(manager.results()) == [("guarded", "fail")]
    assert "must stop" in manager.results()[0].message


def test_unrecognized_raised_value_is_reported_as_unhandled(manager) -> None:
    class Exiting(TestSuite, manager=manager):
        @test_case
        def exits(self) -> None:
            raise SystemExit(3)

    manager.run(reporters=[])
    (record,) = manager.results()
    assert record.severity is Severity.EXCEPTION
    assert record.message == UNHANDLED_MESSAGE


def test_keyboard_interrupt_is_not_absorbed(manager) -> None:
    class Interrupted(TestSuite, manager=manager):
        @test_case
        def interrupted(self) -> None:
            raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        manager.run(reporters=[])
    assert manager.context.suite is None


def test_fatal_signal_records_error_and_propagates_after_teardown(manager) -> None:
    calls = []

    class Fatal(TestSuite, manager=manager):
        @microut.teardown
        def cleanup(self) -> None:
            calls.append("teardown")

        @test_case
        def dies(self) -> None:
            self.fatal("cannot continue")

        @test_case
        def never(self) -> None:
            calls.append("never")

    (suite,) = manager.suites()
    manager.context.suite = suite
    try:
        with pytest.raises(FatalAbort):
            suite.run()
    finally:
        manager.context.suite = None
    assert calls == ["teardown"]
    (record,) = manager.results()
    assert record.severity is Severity.ERROR
    assert record.case == "dies"
    assert record.message == "cannot continue"


def test_setup_failure_skips_cases_and_teardown(manager) -> None:
    calls = []

    class BrokenSetup(TestSuite, manager=manager):
        @microut.setup
        def prepare(self) -> None:
            raise OSError("no fixture")

        @microut.teardown
        def cleanup(self) -> None:
            calls.append("teardown")

        @test_case
        def case(self) -> None:
            calls.append("case")

    manager.run(reporters=[])
    assert calls == []
    (record,) = manager.results()
    assert record.case == "<setup>"
    assert record.severity is Severity.EXCEPTION
    assert record.message == "OSError: no fixture"


def test_teardown_failure_is_recorded(manager) -> None:
    class BrokenTeardown(TestSuite, manager=manager):
        @microut.teardown
        def cleanup(self) -> None:
            raise RuntimeError("leak")

        @test_case
        def case(self) -> None:
            pass

    manager.run(reporters=[])
    assert _outcomes(manager.results()) == [("case", "success"), ("<teardown>", "exception")]


def test_two_setup_hooks_in_one_class_are_rejected(manager) -> None:
    with pytest.raises(TypeError) as exc:

        class TwoSetups(TestSuite, manager=manager, register=False):
            @microut.setup
            def first(self) -> None:
                pass

            @microut.setup
            def second(self) -> None:
                pass

    assert "more than one setup hook" in str(exc.value)


def test_register_case_adds_an_external_body_once(manager) -> None:
    calls = []

    class Open(TestSuite, manager=manager):
        pass

    def external(suite) -> None:
        calls.append(suite.name)

    Open.register_case(external, name="external")
    Open.register_case(external)
    assert Open.cases.names() == ("external",)
    manager.run(reporters=[])
    assert calls == ["Open"]


def test_current_case_tracks_running_case_only(manager) -> None:
    seen = []

    class Tracking(TestSuite, manager=manager):
        @microut.setup
        def prepare(self) -> None:
            seen.append(self.current_case)

        @test_case
        def tracked(self) -> None:
            seen.append(manager.current_case().name)

    manager.run(reporters=[])
    (suite,) = manager.suites()
    assert seen == [None, "tracked"]
    assert suite.current_case is None


def test_case_patterns_filter_cases(manager) -> None:
    calls = []

    class Filtered(TestSuite, manager=manager):
        @test_case
        def parse_ok(self) -> None:
            calls.append("parse_ok")

        @test_case
        def render_ok(self) -> None:
            calls.append("render_ok")

    (suite,) = manager.suites()
    manager.context.suite = suite
    try:
        suite.run(patterns=("parse_*",))
    finally:
        manager.context.suite = None
    assert calls == ["parse_ok"]
