"""Loaded with MICROUT_PLUGINS=plugin; registers a suite from ``register()``."""
from microut import TestSuite, test_case


def register() -> None:
    class PluginSuite(TestSuite, name="plugin"):
        @test_case
        def loaded(self):
            self.check(True)
