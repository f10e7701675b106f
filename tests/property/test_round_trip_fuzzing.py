#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Property-based tests for lossless reprinting and formatter stability.

These tests use Hypothesis to generate templates and check the invariants
that every caller depends on: the identity printer reproduces any input,
and formatting formatted output changes nothing.
"""
import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from erbkit.format import format_string
from erbkit.parsers import parse
from erbkit.printers import IdentityPrinter

FRAGMENTS = [
    "<div>",
    "</div>",
    "<p class='a  b'>",
    "</p>",
    "<br/>",
    "<input disabled>",
    "<%= name %>",
    "<% if a %>",
    "<% else %>",
    "<% end %>",
    "<%# note %>",
    "<!-- c -->",
    "<script>a < b</script>",
    "text",
    " ",
    "\n",
    "\r\n",
    "\t",
    "<",
    ">",
    "%>",
]

WELL_FORMED_FRAGMENTS = [
    "<p>a</p>",
    "<div><p>b</p></div>",
    "<%= x %>",
    "\n",
    "\n\n",
    "hello ",
    "<br>",
    "<span>s</span>",
    "<% if y %><p>c</p><% end %>",
]


@pytest.mark.fuzzing
class TestIdentityRoundTrip:
    """Reprinting an unmodified tree reproduces the input exactly."""

    @given(st.lists(st.sampled_from(FRAGMENTS), max_size=20))
    @settings(suppress_health_check=[HealthCheck.too_slow])
    def test_fragment_sequences(self, fragments: list[str]) -> None:
        """Test arbitrary, often malformed, fragment sequences."""
        source = "".join(fragments)

        assert IdentityPrinter.print_node(parse(source).value) == source

    @given(st.text(alphabet="<>/%=#-\"' abdiv\n\r", max_size=60))
    @settings(suppress_health_check=[HealthCheck.too_slow])
    def test_markup_alphabet(self, source: str) -> None:
        """Test raw text over the characters that drive the tokenizer."""
        assert IdentityPrinter.print_node(parse(source).value) == source


@pytest.mark.fuzzing
class TestFormatterStability:
    """Formatting is idempotent on templates that parse cleanly."""

    @given(st.lists(st.sampled_from(WELL_FORMED_FRAGMENTS), max_size=12))
    @settings(suppress_health_check=[HealthCheck.too_slow])
    def test_idempotent(self, fragments: list[str]) -> None:
        """Test format(format(x)) == format(x)."""
        once = format_string("".join(fragments))

        assert format_string(once) == once

    @given(st.lists(st.sampled_from(WELL_FORMED_FRAGMENTS), min_size=1, max_size=12))
    @settings(suppress_health_check=[HealthCheck.too_slow])
    def test_output_shape(self, fragments: list[str]) -> None:
        """Test that output lines carry no trailing whitespace and end with one newline."""
        formatted = format_string("".join(fragments))

        if formatted:
            assert formatted.endswith("\n")
            assert not formatted.endswith("\n\n")
        assert all(line == line.rstrip() for line in formatted.split("\n"))
