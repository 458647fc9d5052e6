"""Suite with setup/teardown and three cases; run with ``microut run -m examples/basic/my_suite.py --progress``."""
from microut import TestSuite, setup, teardown, test_case


class MySuite(TestSuite):
    @setup
    def prepare(self):
        print("setup")

    @teardown
    def cleanup(self):
        print("teardown")

    @test_case
    def test1(self):
        print("Running test1")

    @test_case
    def test2(self):
        print("Running test2")
        self.check(len("abc") == 4, "length is counted in characters")

    @test_case
    def test3(self):
        print("Running test3")
        self.require_equal(sorted([3, 1, 2]), [1, 2, 3])
