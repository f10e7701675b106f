#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the linter, rule registry and two-phase autofixer."""
from typing import ClassVar

import pytest

from erbkit.ast import HTMLElementNode
from erbkit.exceptions import RuleError
from erbkit.lint import (
    PARSE_ERROR_RULE,
    Autofixer,
    Diagnostic,
    FixDescriptor,
    FixSafety,
    LintContext,
    Linter,
    LintResult,
    RuleRegistry,
    Severity,
    SourceRule,
    VisitorRule,
    fix_source,
)
from erbkit.lint.rules import (
    ERBNoExtraNewline,
    ERBNoTrailingWhitespace,
    HTMLAttributeDoubleQuotes,
    HTMLBooleanAttributesNoValue,
    HTMLTagNameLowercase,
)
from erbkit.options import LinterOptions
from erbkit.parsers import parse


class _ExplodingFix(VisitorRule):
    rule_name: ClassVar[str] = "exploding-fix"
    fix_safety: ClassVar[FixSafety] = FixSafety.SAFE

    def visit_html_element_node(self, node: HTMLElementNode) -> None:
        self.add_diagnostic_with_fix("element", node)
        super().visit_html_element_node(node)

    def autofix(self, node, root) -> bool:
        raise ValueError("cannot fix")


class _ExplodingCheck(SourceRule):
    rule_name: ClassVar[str] = "exploding-check"

    def check_source(self, source: str) -> None:
        raise KeyError("broken rule")


class _ReportOnly(VisitorRule):
    rule_name: ClassVar[str] = "report-only"

    def visit_html_element_node(self, node: HTMLElementNode) -> None:
        self.add_diagnostic_with_fix("element", node)
        super().visit_html_element_node(node)


def _lint(rules, source: str):
    parse_result = parse(source)
    result = Linter(rules).lint(parse_result)
    return parse_result, result.diagnostics


@pytest.mark.unit
class TestFixDescriptor:
    """Test fix descriptor validation and safety."""

    def test_exactly_one_payload(self) -> None:
        """Test that a descriptor needs a node or a span but not both."""
        rule = ERBNoExtraNewline()
        node = parse("x").value

        with pytest.raises(ValueError):
            FixDescriptor(rule=rule)
        with pytest.raises(ValueError):
            FixDescriptor(rule=rule, node=node, start_offset=0, end_offset=1)
        with pytest.raises(ValueError):
            FixDescriptor(rule=rule, start_offset=0)

    def test_inverted_span(self) -> None:
        """Test span validation."""
        with pytest.raises(ValueError):
            FixDescriptor(rule=ERBNoExtraNewline(), start_offset=5, end_offset=2)

    def test_kinds(self) -> None:
        """Test structural and textual flags."""
        textual = FixDescriptor(rule=ERBNoExtraNewline(), start_offset=1, end_offset=1)
        structural = FixDescriptor(rule=HTMLTagNameLowercase(), node=parse("x").value)

        assert textual.is_textual and not textual.is_structural
        assert structural.is_structural and not structural.is_textual

    def test_admitted(self) -> None:
        """Test safety tiers."""
        safe = FixDescriptor(rule=HTMLTagNameLowercase(), node=parse("x").value)
        unsafe = FixDescriptor(rule=HTMLBooleanAttributesNoValue(), node=parse("x").value)

        assert safe.admitted()
        assert not unsafe.admitted()
        assert unsafe.admitted(include_unsafe=True)

    def test_rule_without_fix_reports_no_descriptor(self) -> None:
        """Test that rules declaring no fix never attach one."""
        _, diagnostics = _lint([_ReportOnly()], "<p>x</p>")

        assert diagnostics[0].fix is None
        assert not diagnostics[0].fixable(include_unsafe=True)


@pytest.mark.unit
class TestDiagnostic:
    """Test diagnostic serialization."""

    def test_to_dict(self) -> None:
        """Test the serialized shape."""
        _, diagnostics = _lint([HTMLTagNameLowercase()], "<P>x</P>")

        assert diagnostics[0].to_dict() == {
            "rule": "html-tag-name-lowercase",
            "message": "Tag name 'P' should be lowercase",
            "severity": "warning",
            "location": {"start": {"line": 1, "column": 1}, "end": {"line": 1, "column": 2}},
            "fixable": True,
            "safety": "safe",
        }


@pytest.mark.unit
class TestLintContext:
    """Test offset conversion."""

    def test_position_from_offset(self) -> None:
        """Test line and column computation and clamping."""
        context = LintContext(source="ab\ncd")

        assert (context.position_from_offset(0).line, context.position_from_offset(0).column) == (1, 0)
        assert (context.position_from_offset(3).line, context.position_from_offset(3).column) == (2, 0)
        assert (context.position_from_offset(99).line, context.position_from_offset(99).column) == (2, 2)


@pytest.mark.unit
class TestLinter:
    """Test rule execution."""

    def test_diagnostics_sorted_by_position(self) -> None:
        """Test document order across rules."""
        result = Linter().lint(parse("<DIV class=x>a</DIV>"))

        assert [d.rule_name for d in result.diagnostics] == [
            "html-tag-name-lowercase",
            "html-attribute-values-require-quotes",
            "erb-require-trailing-newline",
        ]

    def test_parse_errors_replace_rule_diagnostics(self) -> None:
        """Test that a broken template only yields parse-error diagnostics."""
        result = Linter().lint(parse("<DIV>"))

        assert [d.rule_name for d in result.diagnostics] == [PARSE_ERROR_RULE]
        assert result.diagnostics[0].severity is Severity.ERROR
        assert result.diagnostics[0].fix is None

    def test_rule_failure_raises_rule_error(self) -> None:
        """Test that an exception in a rule is wrapped."""
        with pytest.raises(RuleError) as exc_info:
            Linter([_ExplodingCheck()]).lint(parse("x"))

        assert exc_info.value.rule_name == "exploding-check"
        assert isinstance(exc_info.value.original_error, KeyError)

    def test_rules_reset_between_files(self) -> None:
        """Test that a rule does not carry diagnostics into the next file."""
        linter = Linter([HTMLTagNameLowercase()])
        linter.lint(parse("<P>x</P>"))

        assert linter.lint(parse("<p>x</p>")).diagnostics == []

    def test_lint_result_counts(self) -> None:
        """Test severity counts and fixable filtering."""
        result = Linter().lint(parse('<input disabled="disabled"/>'))

        assert isinstance(result, LintResult)
        assert result.error_count == 3
        assert result.warning_count == 0
        assert len(result.fixable()) == 2
        assert len(result.fixable(include_unsafe=True)) == 3

    def test_options_select_rules(self) -> None:
        """Test disabled rules and severity overrides through options."""
        options = LinterOptions(
            disabled_rules=("erb-require-trailing-newline",),
            severity_overrides={"html-tag-name-lowercase": "error"},
        )
        result = Linter(options=options).lint(parse("<P>x</P>"))

        assert [d.rule_name for d in result.diagnostics] == ["html-tag-name-lowercase"]
        assert result.diagnostics[0].severity is Severity.ERROR


@pytest.mark.unit
class TestRuleRegistry:
    """Test rule registration and selection."""

    def test_builtin_order(self) -> None:
        """Test that HTML rules come before ERB rules."""
        assert RuleRegistry.with_builtins().names() == [
            "html-tag-name-lowercase",
            "html-no-self-closing",
            "html-attribute-values-require-quotes",
            "html-attribute-double-quotes",
            "html-boolean-attributes-no-value",
            "erb-require-whitespace-inside-tags",
            "erb-no-empty-tags",
            "erb-no-extra-newline",
            "erb-no-trailing-whitespace",
            "erb-require-trailing-newline",
        ]

    def test_build_rules_enabled_subset(self) -> None:
        """Test that enabled_rules limits the set."""
        rules = RuleRegistry.with_builtins().build_rules(LinterOptions(enabled_rules=("erb-no-empty-tags",)))

        assert [rule.rule_name for rule in rules] == ["erb-no-empty-tags"]

    def test_build_rules_unknown_name(self) -> None:
        """Test that options naming an unknown rule raise."""
        with pytest.raises(RuleError) as exc_info:
            RuleRegistry.with_builtins().build_rules(LinterOptions(disabled_rules=("no-such-rule",)))

        assert exc_info.value.rule_name == "no-such-rule"

    def test_severity_override(self) -> None:
        """Test severities passed to rule instances."""
        options = LinterOptions(
            enabled_rules=("erb-no-empty-tags",), severity_overrides={"erb-no-empty-tags": "hint"}
        )
        (rule,) = RuleRegistry.with_builtins().build_rules(options)

        assert rule.severity is Severity.HINT

    def test_register_custom_rule(self) -> None:
        """Test custom rules and validation."""
        registry = RuleRegistry()
        registry.register(_ReportOnly)

        assert registry.get("report-only") is _ReportOnly
        assert registry.unregister("report-only") is True
        assert registry.unregister("report-only") is False
        with pytest.raises(RuleError):
            registry.register(str)  # type: ignore[arg-type]


@pytest.mark.unit
class TestAutofixer:
    """Test the two-phase fix pipeline."""

    def test_default_fixes(self) -> None:
        """Test structural and textual fixes in one run."""
        result = fix_source("<DIV>hello</DIV>")

        assert result.source == "<div>hello</div>\n"
        assert [d.rule_name for d in result.fixed] == ["html-tag-name-lowercase", "erb-require-trailing-newline"]
        assert result.unfixed == []
        assert result.changed

    def test_clean_template_keeps_bytes(self) -> None:
        """Test that nothing is reprinted when nothing is fixed."""
        source = "<p  class=\"a\">x</p>\n"
        result = fix_source(source)

        assert result.source == source
        assert not result.changed

    def test_reapplied_offset_fix_fails_verification(self) -> None:
        """Test that a span is checked against the current text."""
        source = "a\n\n\n\n\nb\n"
        parse_result, diagnostics = _lint([ERBNoExtraNewline()], source)
        (diagnostic,) = diagnostics

        result = Autofixer(parse_result, [diagnostic, diagnostic]).apply()

        assert result.source == "a\n\n\nb\n"
        assert result.fixed == [diagnostic]
        assert result.unfixed == [diagnostic]

    def test_shifted_offsets_are_not_recomputed(self) -> None:
        """Test that a span moved by an earlier edit is skipped, not retried."""
        result = fix_source("a  \nb\t\nc", rules=[ERBNoTrailingWhitespace()])

        assert result.source == "a\nb\t\nc"
        assert len(result.fixed) == 1
        assert len(result.unfixed) == 1

    def test_same_rule_spans_need_repeated_runs(self) -> None:
        """Test that one run fixes the first of several shifted spans and later runs converge."""
        source = "a  \nb  \nc  \n"
        result = fix_source(source, rules=[ERBNoTrailingWhitespace()])

        assert result.source == "a\nb  \nc  \n"
        assert len(result.fixed) == 1
        assert len(result.unfixed) == 2

        runs = 1
        while result.changed:
            result = fix_source(result.source, rules=[ERBNoTrailingWhitespace()])
            runs += 1

        assert result.source == "a\nb\nc\n"
        assert result.unfixed == []
        assert runs == 4

    def test_stale_node_reference_is_unfixed(self) -> None:
        """Test that a fix targeting a replaced node is skipped."""
        result = fix_source(
            "<input disabled='disabled'>",
            rules=[HTMLAttributeDoubleQuotes(), HTMLBooleanAttributesNoValue()],
            include_unsafe=True,
        )

        assert result.source == '<input disabled="disabled">'
        assert [d.rule_name for d in result.fixed] == ["html-attribute-double-quotes"]
        assert [d.rule_name for d in result.unfixed] == ["html-boolean-attributes-no-value"]

    def test_parse_failure_changes_nothing(self) -> None:
        """Test that a template with parse errors is returned unchanged."""
        result = fix_source("<div>  \n")

        assert result.source == "<div>  \n"
        assert result.fixed == []
        assert [d.rule_name for d in result.unfixed] == [PARSE_ERROR_RULE]

    def test_unsafe_fix_through_options(self) -> None:
        """Test that options can enable unsafe fixes."""
        result = fix_source('<input disabled="disabled">\n', options=LinterOptions(include_unsafe=True))

        assert result.source == "<input disabled>\n"

    def test_withheld_fixes_are_unfixed(self) -> None:
        """Test that unsafe fixes land in unfixed by default."""
        result = fix_source('<input disabled="disabled">\n')

        assert [d.rule_name for d in result.unfixed] == ["html-boolean-attributes-no-value"]

    def test_fix_procedure_error(self) -> None:
        """Test that an exception in a fix procedure is wrapped."""
        with pytest.raises(RuleError) as exc_info:
            fix_source("<p>x</p>", rules=[_ExplodingFix()])

        assert exc_info.value.rule_name == "exploding-fix"

    def test_offsets_recorded_before_structural_fixes(self) -> None:
        """Test that a span invalidated by a longer reprint waits for the next run."""
        first = fix_source("<DIV class=x><%=name%></DIV>")

        assert first.source == '<div class="x"><%= name %></div>'
        assert [d.rule_name for d in first.unfixed] == ["erb-require-trailing-newline"]

        second = fix_source(first.source)

        assert second.source == '<div class="x"><%= name %></div>\n'
        assert Linter().lint(parse(second.source)).diagnostics == []
