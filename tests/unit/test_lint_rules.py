#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the built-in lint rules and their fixes."""
import pytest

from erbkit.lint import LintContext, fix_source
from erbkit.lint.offense import FixSafety, Severity
from erbkit.lint.rules import (
    ERBNoEmptyTags,
    ERBNoExtraNewline,
    ERBNoTrailingWhitespace,
    ERBRequireTrailingNewline,
    ERBRequireWhitespaceInsideTags,
    HTMLAttributeDoubleQuotes,
    HTMLAttributeValuesRequireQuotes,
    HTMLBooleanAttributesNoValue,
    HTMLNoSelfClosing,
    HTMLTagNameLowercase,
)
from erbkit.parsers import parse


def check(rule, source: str):
    return rule.check(parse(source), LintContext(source=source))


def fix(rule, source: str, include_unsafe: bool = False) -> str:
    return fix_source(source, rules=[rule], include_unsafe=include_unsafe).source


@pytest.mark.unit
class TestHTMLTagNameLowercase:
    """Test the lowercase tag name rule."""

    def test_reports_uppercase_open_tag(self) -> None:
        """Test detection and location."""
        diagnostics = check(HTMLTagNameLowercase(), "<DIV>hello</DIV>")

        assert len(diagnostics) == 1
        assert diagnostics[0].message == "Tag name 'DIV' should be lowercase"
        assert diagnostics[0].location.start.column == 1
        assert diagnostics[0].severity is Severity.WARNING

    def test_lowercase_is_clean(self) -> None:
        """Test no diagnostics for lowercase names."""
        assert check(HTMLTagNameLowercase(), "<div><span>x</span></div>") == []

    def test_fix_lowercases_both_tags(self) -> None:
        """Test that open and close tag names are both fixed."""
        assert fix(HTMLTagNameLowercase(), "<DIV>hello</DIV>") == "<div>hello</div>"

    def test_fix_nested(self) -> None:
        """Test fixing nested uppercase elements in one run."""
        assert fix(HTMLTagNameLowercase(), "<UL><LI>a</LI></UL>") == "<ul><li>a</li></ul>"


@pytest.mark.unit
class TestHTMLNoSelfClosing:
    """Test the self-closing rule."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("<br/>\n", "<br>\n"),
            ("<br />\n", "<br>\n"),
            ('<img src="a.png" />\n', '<img src="a.png">\n'),
            ("<div />\n", "<div></div>\n"),
            ('<span class="x"/>\n', '<span class="x"></span>\n'),
        ],
    )
    def test_fix(self, source: str, expected: str) -> None:
        """Test void and non-void fixes."""
        assert fix(HTMLNoSelfClosing(), source) == expected

    def test_messages(self) -> None:
        """Test the void and non-void messages."""
        void, regular = check(HTMLNoSelfClosing(), "<br/><div/>")

        assert void.message == "Use `<br>` instead of self-closing `<br />`"
        assert regular.message == "Use `<div></div>` instead of self-closing `<div />`"
        assert void.severity is Severity.ERROR

    def test_plain_void_is_clean(self) -> None:
        """Test that void elements without a slash pass."""
        assert check(HTMLNoSelfClosing(), "<br><input>") == []


@pytest.mark.unit
class TestHTMLAttributeValuesRequireQuotes:
    """Test the quoted values rule."""

    def test_reports_unquoted(self) -> None:
        """Test detection."""
        diagnostics = check(HTMLAttributeValuesRequireQuotes(), '<div class=foo id="x" hidden></div>')

        assert [d.message for d in diagnostics] == ["Attribute value for 'class' should be quoted"]

    def test_fix_adds_double_quotes(self) -> None:
        """Test the default quote."""
        assert fix(HTMLAttributeValuesRequireQuotes(), "<div class=foo></div>\n") == '<div class="foo"></div>\n'

    def test_fix_uses_single_quotes_around_double_quote(self) -> None:
        """Test that a value containing a double quote gets single quotes."""
        assert fix(HTMLAttributeValuesRequireQuotes(), '<div title=a"b></div>') == "<div title='a\"b'></div>"

    def test_fix_keeps_erb_value(self) -> None:
        """Test quoting a value made of an ERB tag."""
        assert fix(HTMLAttributeValuesRequireQuotes(), "<a href=<%= url %>>x</a>") == '<a href="<%= url %>">x</a>'


@pytest.mark.unit
class TestHTMLAttributeDoubleQuotes:
    """Test the double quote rule."""

    def test_fix(self) -> None:
        """Test single quotes become double quotes."""
        assert fix(HTMLAttributeDoubleQuotes(), "<div class='foo'></div>\n") == '<div class="foo"></div>\n'

    def test_value_with_double_quote_is_allowed(self) -> None:
        """Test the exception for values containing a double quote."""
        assert check(HTMLAttributeDoubleQuotes(), "<div title='say \"hi\"'></div>") == []

    def test_double_quoted_is_clean(self) -> None:
        """Test that double quotes pass."""
        assert check(HTMLAttributeDoubleQuotes(), '<div class="a"></div>') == []


@pytest.mark.unit
class TestHTMLBooleanAttributesNoValue:
    """Test the boolean attribute rule."""

    def test_reports_value(self) -> None:
        """Test detection and message."""
        diagnostics = check(HTMLBooleanAttributesNoValue(), '<input Disabled="disabled" type="text">')

        assert len(diagnostics) == 1
        assert diagnostics[0].message == "Boolean attribute `Disabled` should not have a value. Use `disabled` instead."

    def test_fix_is_unsafe(self) -> None:
        """Test that the fix is withheld unless unsafe fixes are requested."""
        assert HTMLBooleanAttributesNoValue.fix_safety is FixSafety.UNSAFE
        result = fix_source('<input disabled="disabled">\n', rules=[HTMLBooleanAttributesNoValue()])

        assert result.source == '<input disabled="disabled">\n'
        assert len(result.unfixed) == 1
        assert result.fixed == []

    def test_fix_with_unsafe(self) -> None:
        """Test the fix when unsafe fixes are included."""
        source = '<input disabled="disabled">\n'

        assert fix(HTMLBooleanAttributesNoValue(), source, include_unsafe=True) == "<input disabled>\n"

    def test_bare_boolean_is_clean(self) -> None:
        """Test that boolean attributes without a value pass."""
        assert check(HTMLBooleanAttributesNoValue(), '<input type="checkbox" checked>') == []


@pytest.mark.unit
class TestERBRequireWhitespaceInsideTags:
    """Test the delimiter whitespace rule."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("<%=name%>\n", "<%= name %>\n"),
            ("<%= name%>\n", "<%= name %>\n"),
            ("<%if x%>a<% end %>\n", "<% if x %>a<% end %>\n"),
            ("<% if x %>a<%end%>\n", "<% if x %>a<% end %>\n"),
            ("<% if x %>a<%else%>b<% end %>\n", "<% if x %>a<% else %>b<% end %>\n"),
        ],
    )
    def test_fix(self, source: str, expected: str) -> None:
        """Test content tags, control tags and scalar slot tags."""
        assert fix(ERBRequireWhitespaceInsideTags(), source) == expected

    @pytest.mark.parametrize("source", ["<%= name %>", "<%#comment%>", "<% %>", "<%= x -%>", "<%=\nx\n%>"])
    def test_clean(self, source: str) -> None:
        """Test tags that need no fix."""
        assert check(ERBRequireWhitespaceInsideTags(), source) == []


@pytest.mark.unit
class TestERBNoEmptyTags:
    """Test the empty tag rule."""

    def test_fix_removes_tag(self) -> None:
        """Test that empty tags are removed."""
        assert fix(ERBNoEmptyTags(), "<p><% %></p>\n") == "<p></p>\n"
        assert fix(ERBNoEmptyTags(), "a<%=  %>b") == "ab"

    def test_content_is_clean(self) -> None:
        """Test that tags with code pass."""
        assert check(ERBNoEmptyTags(), "<%= x %>") == []


@pytest.mark.unit
class TestERBNoExtraNewline:
    """Test the blank line limit."""

    def test_two_blank_lines_allowed(self) -> None:
        """Test the limit itself."""
        assert check(ERBNoExtraNewline(), "a\n\n\nb\n") == []

    def test_reports_excess(self) -> None:
        """Test the reported span and message."""
        (diagnostic,) = check(ERBNoExtraNewline(), "a\n\n\n\n\nb\n")

        assert diagnostic.fix.start_offset == 4
        assert diagnostic.fix.end_offset == 6
        assert diagnostic.message == "Extra blank line detected. Remove 2 blank lines to keep at most 2 in a row"

    def test_fix(self) -> None:
        """Test removal of the excess."""
        assert fix(ERBNoExtraNewline(), "a\n\n\n\n\nb\n") == "a\n\n\nb\n"

    def test_fix_matches_guard(self) -> None:
        """Test that the span must still hold newlines."""
        rule = ERBNoExtraNewline()

        assert rule.apply_fix("a\n\n\n\n\nb\n", 4, 6) == "a\n\n\nb\n"
        assert rule.apply_fix("a\n\n\nb\n", 4, 6) is None


@pytest.mark.unit
class TestERBNoTrailingWhitespace:
    """Test the trailing whitespace rule."""

    def test_fix(self) -> None:
        """Test removal of spaces and tabs."""
        assert fix(ERBNoTrailingWhitespace(), "a  \nb\n") == "a\nb\n"
        assert fix(ERBNoTrailingWhitespace(), "a\nb\t") == "a\nb"

    def test_crlf_is_kept(self) -> None:
        """Test that CRLF line endings survive."""
        assert fix(ERBNoTrailingWhitespace(), "a \r\nb") == "a\r\nb"

    def test_location(self) -> None:
        """Test the diagnostic position."""
        (diagnostic,) = check(ERBNoTrailingWhitespace(), "ok\nab  \n")

        assert diagnostic.location.start.line == 2
        assert diagnostic.location.start.column == 2


@pytest.mark.unit
class TestERBRequireTrailingNewline:
    """Test the final newline rule."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("a", "a\n"),
            ("a\n\n\n", "a\n"),
            ("a\n", "a\n"),
            ("", ""),
        ],
    )
    def test_fix(self, source: str, expected: str) -> None:
        """Test missing and repeated final newlines."""
        assert fix(ERBRequireTrailingNewline(), source) == expected

    def test_messages(self) -> None:
        """Test the two messages."""
        assert check(ERBRequireTrailingNewline(), "a")[0].message == "File must end with a newline"
        assert check(ERBRequireTrailingNewline(), "a\n\n")[0].message == "File must end with exactly one newline"

    def test_whitespace_only_file(self) -> None:
        """Test that a file of newlines is not reported."""
        assert check(ERBRequireTrailingNewline(), "\n\n") == []
