"""Assertions reported from worker threads."""
from concurrent.futures import ThreadPoolExecutor

from microut import TestSuite, test_case


class ThreadedSuite(TestSuite):
    @test_case
    def squares_in_parallel(self):
        with ThreadPoolExecutor(max_workers=4) as executor:
            for value, square in zip(range(8), executor.map(lambda v: v * v, range(8))):
                self.check_equal(square, value ** 2)

    @test_case
    def checks_from_workers(self):
        def verify(value):
            self.warn(value % 2 == 0, f"{value} is odd")

        with ThreadPoolExecutor(max_workers=2) as executor:
            list(executor.map(verify, range(4)))
