#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the formatting decision engine and layout printer."""
import pytest

from erbkit.ast import HTMLElementNode, NodeCollector
from erbkit.format import ElementAnalysis, FormatPrinter
from erbkit.format.analysis import PRESERVED_ANALYSIS
from erbkit.options import FormatterOptions
from erbkit.parsers import parse


def fmt(source: str, **options) -> str:
    result = parse(source)
    assert result.success, [error.message for error in result.errors]
    return FormatPrinter(FormatterOptions(**options)).render(result)


def _element(source: str, name: str) -> HTMLElementNode:
    result = parse(source)
    collector = NodeCollector(lambda n: isinstance(n, HTMLElementNode) and n.name == name)
    collector.visit(result.value)
    return collector.collected[0]


@pytest.mark.unit
class TestElementAnalysis:
    """Test the three-way layout decision."""

    def test_fully_inline(self) -> None:
        """Test the fully_inline and block_content properties."""
        assert ElementAnalysis(True, True, True).fully_inline
        assert not ElementAnalysis(True, False, False).fully_inline
        assert ElementAnalysis(True, False, False).block_content

    def test_short_element_is_inline(self) -> None:
        """Test an element that fits on one line."""
        printer = FormatPrinter()
        div = _element("<div><span>A</span></div>", "div")

        assert printer.analyzer.analyze(div) == ElementAnalysis(True, True, True)

    def test_overflowing_element_breaks_content(self) -> None:
        """Test an element whose one-line form exceeds the budget."""
        printer = FormatPrinter(FormatterOptions(max_line_length=20))
        div = _element("<div><span>A</span></div>", "div")

        assert printer.analyzer.analyze(div) == ElementAnalysis(True, False, False)

    def test_block_child_breaks_content(self) -> None:
        """Test that a block-level child forces block content."""
        printer = FormatPrinter()
        div = _element("<div><span>A</span><p>B</p></div>", "div")

        assert printer.analyzer.analyze(div).block_content

    def test_blank_line_between_children_breaks_content(self) -> None:
        """Test that a blank line separating children forces block content."""
        printer = FormatPrinter()
        div = _element("<div><b>a</b>\n\n<b>b</b></div>", "div")

        assert printer.analyzer.analyze(div).block_content

    def test_content_preserving_element(self) -> None:
        """Test that pre elements are never reflowed."""
        printer = FormatPrinter()
        pre = _element("<pre>x</pre>", "pre")

        assert printer.analyzer.analyze(pre) is PRESERVED_ANALYSIS

    def test_control_flow_in_open_tag(self) -> None:
        """Test that a conditional attribute breaks the open tag."""
        printer = FormatPrinter()
        div = _element('<div <% if a %>class="x"<% end %>>y</div>', "div")

        assert printer.analyzer.analyze(div) == ElementAnalysis(False, False, False)

    def test_void_element(self) -> None:
        """Test that void elements have trivially inline content."""
        printer = FormatPrinter()
        img = _element('<img src="a.png">', "img")

        assert printer.analyzer.analyze(img) == ElementAnalysis(True, True, True)

    def test_long_void_open_tag(self) -> None:
        """Test a void element whose open tag overflows."""
        printer = FormatPrinter(FormatterOptions(max_line_length=20))
        img = _element('<img src="a-very-long-path.png" alt="x">', "img")

        assert printer.analyzer.analyze(img) == ElementAnalysis(False, True, True)

    def test_void_set_comes_from_options(self) -> None:
        """Test that a non-default void set decides which elements are void."""
        printer = FormatPrinter(FormatterOptions(void_elements=frozenset({"img"})))

        assert printer.analyzer.is_void(_element('<img src="a.png">', "img"))
        assert not printer.analyzer.is_void(_element("<br>", "br"))
        assert printer.analyzer.is_void(_element("<div/>", "div"))

    def test_analysis_is_memoized(self) -> None:
        """Test that repeated analysis returns the cached decision."""
        printer = FormatPrinter()
        div = _element("<div>x</div>", "div")

        first = printer.analyzer.analyze(div)

        assert printer.analyzer.analyze(div) is first
        printer.analyzer.clear()
        assert printer.analyzer.analyze(div) == first


@pytest.mark.unit
class TestElementLayout:
    """Test element output."""

    def test_nested_inline_fits(self) -> None:
        """Test that a short nested element stays on one line."""
        assert fmt("<div><span>A</span></div>") == "<div><span>A</span></div>\n"

    def test_nested_inline_overflows(self) -> None:
        """Test that an overflowing element moves its content to an indented line."""
        assert fmt("<div><span>A</span></div>", max_line_length=20) == "<div>\n  <span>A</span>\n</div>\n"

    def test_block_child_moves_to_own_line(self) -> None:
        """Test that a non-inline child is printed on an indented line."""
        assert fmt("<div><p>Hi</p></div>") == "<div>\n  <p>Hi</p>\n</div>\n"

    def test_mixed_inline_and_block_children(self) -> None:
        """Test inline and block siblings each on their own line."""
        assert fmt("<div><span>A</span><p>B</p></div>") == "<div>\n  <span>A</span>\n  <p>B</p>\n</div>\n"

    def test_reindents_nested_blocks(self) -> None:
        """Test that nested block elements are indented per level."""
        source = "<div>\n<p>a</p>\n        <p>b</p>\n</div>"

        assert fmt(source) == "<div>\n  <p>a</p>\n  <p>b</p>\n</div>\n"

    def test_indent_width(self) -> None:
        """Test a custom indent width."""
        assert fmt("<div><p>a</p><p>b</p></div>", indent_width=4) == "<div>\n    <p>a</p>\n    <p>b</p>\n</div>\n"

    def test_text_whitespace_is_collapsed(self) -> None:
        """Test that text runs collapse and inner padding is trimmed."""
        assert fmt("<p>  Hello    world  </p>") == "<p>Hello world</p>\n"

    def test_empty_element(self) -> None:
        """Test an element without content."""
        assert fmt("<div></div>") == "<div></div>\n"

    def test_void_elements(self) -> None:
        """Test void elements, with and without the self-closing slash."""
        assert fmt("<br/>") == "<br>\n"
        assert fmt('<input type="text"  disabled>') == '<input type="text" disabled>\n'

    def test_self_closed_non_void(self) -> None:
        """Test that a self-closed regular element keeps its slash."""
        assert fmt('<div  class="x"/>') == '<div class="x" />\n'

    def test_long_open_tag_is_split(self) -> None:
        """Test that an overflowing open tag puts one attribute per line."""
        source = '<div class="alpha" id="beta">x</div>'
        expected = '<div\n  class="alpha"\n  id="beta"\n>\n  x\n</div>\n'

        assert fmt(source, max_line_length=20) == expected

    def test_conditional_attribute(self) -> None:
        """Test an open tag holding ERB control flow."""
        source = '<div <% if a %>class="x"<% end %>>y</div>'
        expected = '<div\n  <% if a %>\n    class="x"\n  <% end %>\n>\n  y\n</div>\n'

        assert fmt(source) == expected


@pytest.mark.unit
class TestAttributes:
    """Test attribute normalization."""

    def test_single_quotes_become_double(self) -> None:
        """Test quote normalization."""
        assert fmt("<p id='a'>x</p>") == '<p id="a">x</p>\n'

    def test_unquoted_value_gets_quotes(self) -> None:
        """Test unquoted values."""
        assert fmt("<p id=a>x</p>") == '<p id="a">x</p>\n'

    def test_value_with_double_quote_keeps_single_quotes(self) -> None:
        """Test that a value containing a double quote stays single-quoted."""
        assert fmt("<p title='say \"hi\"'>x</p>") == "<p title='say \"hi\"'>x</p>\n"

    def test_class_whitespace_is_collapsed(self) -> None:
        """Test token-list attributes."""
        assert fmt('<p class="  a\n   b ">x</p>') == '<p class="a b">x</p>\n'

    def test_other_attribute_whitespace_is_kept(self) -> None:
        """Test that non token-list values keep their spacing."""
        assert fmt('<p title="a  b">x</p>') == '<p title="a  b">x</p>\n'

    def test_erb_in_attribute_value(self) -> None:
        """Test that ERB in values is normalized."""
        assert fmt('<a href="<%=url%>">x</a>') == '<a href="<%= url %>">x</a>\n'


@pytest.mark.unit
class TestFlow:
    """Test text flow and blank lines."""

    def test_blank_line_is_kept(self) -> None:
        """Test that one blank line between blocks survives."""
        assert fmt("<p>a</p>\n\n<p>b</p>") == "<p>a</p>\n\n<p>b</p>\n"

    def test_blank_lines_collapse(self) -> None:
        """Test that several blank lines collapse into one."""
        assert fmt("<p>a</p>\n\n\n\n<p>b</p>") == "<p>a</p>\n\n<p>b</p>\n"

    def test_leading_and_trailing_blank_lines_removed(self) -> None:
        """Test document edges."""
        assert fmt("\n\n<p>a</p>\n\n\n") == "<p>a</p>\n"

    def test_text_wraps_at_budget(self) -> None:
        """Test greedy wrapping of long text."""
        source = "<div>" + " ".join(["word"] * 8) + "<p>x</p></div>"

        assert fmt(source, max_line_length=20) == (
            "<div>\n  word word word\n  word word word\n  word word\n  <p>x</p>\n</div>\n"
        )

    def test_adjacent_inline_pieces_are_glued(self) -> None:
        """Test that no space is inserted where the source had none."""
        assert fmt("<div>(<%= count %>)<p>x</p></div>") == "<div>\n  (<%= count %>)\n  <p>x</p>\n</div>\n"

    def test_empty_document(self) -> None:
        """Test that an empty or blank template formats to nothing."""
        assert fmt("") == ""
        assert fmt("  \n\n ") == ""


@pytest.mark.unit
class TestPreservedContent:
    """Test content-preserving elements."""

    def test_pre_body_is_verbatim(self) -> None:
        """Test that pre bodies are untouched."""
        assert fmt("<pre>\n  a\n     b</pre>") == "<pre>\n  a\n     b</pre>\n"

    def test_script_line_endings_are_normalized(self) -> None:
        """Test CRLF inside script bodies."""
        assert fmt("<script>\r\nvar a = 1;\r\n</script>") == "<script>\nvar a = 1;\n</script>\n"

    def test_preserved_open_tag_is_normalized(self) -> None:
        """Test the open tag of a preserved element."""
        assert fmt("<textarea  name='a'> x </textarea>") == '<textarea name="a"> x </textarea>\n'

    def test_pre_keeps_trailing_whitespace(self) -> None:
        """Test that only the end of a preserved body is trimmed."""
        assert fmt("<pre>a   \nb</pre>") == "<pre>a   \nb</pre>\n"

    def test_raw_text_is_reindented_not_reflowed(self) -> None:
        """Test a script body printed when scripts are not preserved."""
        source = "<script>\n    if (a) {\n      b(); // c\n    }\n</script>"
        expected = "<script>\n  if (a) {\n    b(); // c\n  }\n</script>\n"
        options = {"content_preserving_elements": frozenset({"pre"})}

        assert fmt(source, **options) == expected
        assert fmt(expected, **options) == expected

    def test_short_raw_text_keeps_its_spacing(self) -> None:
        """Test that single-line raw text is not collapsed."""
        assert fmt("<title>A  &  B</title>") == "<title>A  &  B</title>\n"


@pytest.mark.unit
class TestERB:
    """Test ERB tag normalization and control flow layout."""

    def test_output_tag_spacing(self) -> None:
        """Test one space inside each delimiter."""
        assert fmt("<%=   user.name   %>") == "<%= user.name %>\n"

    def test_empty_tag(self) -> None:
        """Test an empty tag."""
        assert fmt("<%   %>") == "<% %>\n"

    def test_comment_is_verbatim(self) -> None:
        """Test ERB comments."""
        assert fmt("<%#   keep   this %>") == "<%#   keep   this %>\n"

    def test_if_else(self) -> None:
        """Test branch bodies are indented under their tags."""
        source = "<% if a %><p>x</p><% else %><p>y</p><% end %>"
        expected = "<% if a %>\n  <p>x</p>\n<% else %>\n  <p>y</p>\n<% end %>\n"

        assert fmt(source) == expected

    def test_case_when(self) -> None:
        """Test case statements."""
        source = "<% case k %>\n<% when 1 %>one<% when 2 %>two<% end %>"
        expected = "<% case k %>\n<% when 1 %>\n  one\n<% when 2 %>\n  two\n<% end %>\n"

        assert fmt(source) == expected

    def test_block_inside_element(self) -> None:
        """Test a block nested in an element."""
        source = "<ul><% items.each do |i| %><li><%= i %></li><% end %></ul>"
        expected = "<ul>\n  <% items.each do |i| %>\n    <li><%= i %></li>\n  <% end %>\n</ul>\n"

        assert fmt(source) == expected

    def test_heredoc_keeps_newline(self) -> None:
        """Test that heredoc content ends with a newline before the delimiter."""
        assert fmt("<%= <<~TEXT %>") == "<%= <<~TEXT\n%>\n"


@pytest.mark.unit
class TestVerbatimNodes:
    """Test comments, doctypes and CDATA."""

    def test_html_comment(self) -> None:
        """Test that HTML comments are printed as written."""
        assert fmt("<div><!--  note  --><p>x</p></div>") == "<div>\n  <!--  note  -->\n  <p>x</p>\n</div>\n"

    def test_doctype(self) -> None:
        """Test the doctype declaration."""
        assert fmt("<!DOCTYPE html>\n<p>x</p>") == "<!DOCTYPE html>\n<p>x</p>\n"

    def test_comment_trailing_whitespace_is_trimmed(self) -> None:
        """Test that every line of a multi-line comment loses trailing blanks."""
        assert fmt("<!-- a   \nb -->") == "<!-- a\nb -->\n"

    def test_nested_multiline_comment(self) -> None:
        """Test a multi-line comment nested in an element."""
        assert fmt("<div><!-- a  \n  b --></div>") == "<div>\n  <!-- a\n  b -->\n</div>\n"
