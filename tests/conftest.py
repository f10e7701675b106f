"""Pytest configuration and shared fixtures for the erbkit test suite."""

import os
from typing import Callable

import pytest
from hypothesis import Phase, Verbosity, settings

from erbkit.ast import ParseResult
from erbkit.options import FormatterOptions
from erbkit.parsers import parse

# Hypothesis profiles; select with HYPOTHESIS_PROFILE
settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=50)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")


@pytest.fixture
def parse_template() -> Callable[[str], ParseResult]:
    """Provide a parser that asserts the template parsed cleanly.

    Returns
    -------
    callable
        Function taking template text and returning its ParseResult

    """

    def _parse(source: str) -> ParseResult:
        result = parse(source)
        assert result.success, [error.message for error in result.errors]
        return result

    return _parse


@pytest.fixture
def narrow_options() -> FormatterOptions:
    """Provide formatter options with a short line budget."""
    return FormatterOptions(max_line_length=20)
