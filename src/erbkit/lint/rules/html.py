#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/lint/rules/html.py
"""Lint rules for HTML structure."""

from __future__ import annotations

from typing import ClassVar

from erbkit.ast.nodes import HTMLAttributeNode, HTMLElementNode, LiteralNode, ParseResult, WhitespaceNode
from erbkit.ast.replacement import build_close_tag, build_quote_token, copy_node, copy_token, rebuild, replace
from erbkit.ast.utils import attribute_name
from erbkit.constants import BOOLEAN_ATTRIBUTES, VOID_ELEMENTS
from erbkit.lint.offense import FixSafety, Severity
from erbkit.lint.rules.base import VisitorRule


def _literal_content(value_children: list) -> str:
    return "".join(child.content for child in value_children if isinstance(child, LiteralNode))


class HTMLTagNameLowercase(VisitorRule):
    """Tag names must be lowercase in both the open and the close tag."""

    rule_name: ClassVar[str] = "html-tag-name-lowercase"
    description: ClassVar[str] = "Enforce lowercase tag names"
    default_severity: ClassVar[Severity] = Severity.WARNING
    fix_safety: ClassVar[FixSafety] = FixSafety.SAFE

    def visit_html_element_node(self, node: HTMLElementNode) -> None:
        names = [node.tag_name.value if node.tag_name is not None else ""]
        if node.close_tag is not None and node.close_tag.tag_name is not None:
            names.append(node.close_tag.tag_name.value)

        offending = next((name for name in names if name != name.lower()), None)
        if offending is not None:
            self.add_diagnostic_with_fix(
                f"Tag name '{offending}' should be lowercase",
                node,
                location=node.tag_name.location if node.tag_name is not None else None,
            )
        super().visit_html_element_node(node)

    def autofix(self, node: HTMLElementNode, root: ParseResult) -> bool:  # type: ignore[override]
        if not isinstance(node, HTMLElementNode) or node.open_tag is None or node.open_tag.tag_name is None:
            return False

        open_name = node.open_tag.tag_name
        new_open_tag = copy_node(node.open_tag, tag_name=copy_token(open_name, value=open_name.value.lower()))

        new_close_tag = node.close_tag
        if node.close_tag is not None and node.close_tag.tag_name is not None:
            close_name = node.close_tag.tag_name
            new_close_tag = copy_node(node.close_tag, tag_name=copy_token(close_name, value=close_name.value.lower()))

        new_element = copy_node(
            node,
            open_tag=new_open_tag,
            tag_name=new_open_tag.tag_name,
            close_tag=new_close_tag,
        )
        return replace(root, node, new_element)


class HTMLNoSelfClosing(VisitorRule):
    """Elements must not use ``/>``.

    Void elements drop the slash; other elements get an explicit close tag.
    """

    rule_name: ClassVar[str] = "html-no-self-closing"
    description: ClassVar[str] = "Disallow self-closing syntax for HTML elements"
    default_severity: ClassVar[Severity] = Severity.ERROR
    fix_safety: ClassVar[FixSafety] = FixSafety.SAFE

    def visit_html_element_node(self, node: HTMLElementNode) -> None:
        if node.open_tag is not None and node.open_tag.self_closing:
            name = node.tag_name.value if node.tag_name is not None else ""
            if node.name in VOID_ELEMENTS:
                message = f"Use `<{name}>` instead of self-closing `<{name} />`"
            else:
                message = f"Use `<{name}></{name}>` instead of self-closing `<{name} />`"
            self.add_diagnostic_with_fix(message, node, location=node.open_tag.tag_closing.location)
        super().visit_html_element_node(node)

    def autofix(self, node: HTMLElementNode, root: ParseResult) -> bool:  # type: ignore[override]
        open_tag = node.open_tag if isinstance(node, HTMLElementNode) else None
        if open_tag is None or open_tag.tag_closing is None or not open_tag.self_closing:
            return False

        children = list(open_tag.children)
        while children and isinstance(children[-1], WhitespaceNode):
            children.pop()

        is_void = node.name in VOID_ELEMENTS
        new_open_tag = copy_node(
            open_tag,
            tag_closing=copy_token(open_tag.tag_closing, value=">"),
            children=children,
            is_void=is_void,
        )
        if is_void:
            return rebuild(root, open_tag, new_open_tag)

        new_element = copy_node(
            node,
            open_tag=new_open_tag,
            close_tag=build_close_tag(node.tag_name.value if node.tag_name is not None else node.name),
            is_void=False,
        )
        return replace(root, node, new_element)


class HTMLAttributeValuesRequireQuotes(VisitorRule):
    """Attribute values must be quoted."""

    rule_name: ClassVar[str] = "html-attribute-values-require-quotes"
    description: ClassVar[str] = "Require quotes around attribute values"
    default_severity: ClassVar[Severity] = Severity.WARNING
    fix_safety: ClassVar[FixSafety] = FixSafety.SAFE

    def visit_html_attribute_node(self, node: HTMLAttributeNode) -> None:
        if node.value is not None and not node.value.quoted:
            self.add_diagnostic_with_fix(f"Attribute value for '{attribute_name(node) or ''}' should be quoted", node)
        super().visit_html_attribute_node(node)

    def autofix(self, node: HTMLAttributeNode, root: ParseResult) -> bool:  # type: ignore[override]
        value = node.value if isinstance(node, HTMLAttributeNode) else None
        if value is None or value.quoted:
            return False

        quote = "'" if '"' in _literal_content(value.children) else '"'
        new_value = copy_node(
            value,
            open_quote=build_quote_token(location=value.location, quote=quote),
            close_quote=build_quote_token(location=value.location, quote=quote),
            quoted=True,
        )
        return replace(root, node, copy_node(node, value=new_value))


class HTMLAttributeDoubleQuotes(VisitorRule):
    """Quoted attribute values should use double quotes.

    Values whose text contains a double quote are left single-quoted.
    """

    rule_name: ClassVar[str] = "html-attribute-double-quotes"
    description: ClassVar[str] = "Prefer double quotes for attribute values"
    default_severity: ClassVar[Severity] = Severity.WARNING
    fix_safety: ClassVar[FixSafety] = FixSafety.SAFE

    @staticmethod
    def _single_quoted(node: HTMLAttributeNode) -> bool:
        value = node.value
        if value is None or not value.quoted or value.open_quote is None:
            return False
        return value.open_quote.value == "'" and '"' not in _literal_content(value.children)

    def visit_html_attribute_node(self, node: HTMLAttributeNode) -> None:
        if self._single_quoted(node):
            self.add_diagnostic_with_fix(
                f"Attribute '{attribute_name(node) or ''}' should use double quotes", node
            )
        super().visit_html_attribute_node(node)

    def autofix(self, node: HTMLAttributeNode, root: ParseResult) -> bool:  # type: ignore[override]
        if not isinstance(node, HTMLAttributeNode) or not self._single_quoted(node):
            return False

        value = node.value
        new_value = copy_node(
            value,
            open_quote=copy_token(value.open_quote, value='"'),
            close_quote=copy_token(value.close_quote, value='"') if value.close_quote is not None else None,
        )
        return replace(root, node, copy_node(node, value=new_value))


class HTMLBooleanAttributesNoValue(VisitorRule):
    """Boolean attributes should be written without a value.

    The fix is unsafe: a value computed by ERB may evaluate to something
    other than the attribute name, and dropping it changes the output.
    """

    rule_name: ClassVar[str] = "html-boolean-attributes-no-value"
    description: ClassVar[str] = "Boolean attributes should not have values"
    default_severity: ClassVar[Severity] = Severity.ERROR
    fix_safety: ClassVar[FixSafety] = FixSafety.UNSAFE

    def visit_html_attribute_node(self, node: HTMLAttributeNode) -> None:
        name = attribute_name(node)
        if name is not None and name.lower() in BOOLEAN_ATTRIBUTES and node.value is not None:
            self.add_diagnostic_with_fix(
                f"Boolean attribute `{name}` should not have a value. Use `{name.lower()}` instead.", node
            )
        super().visit_html_attribute_node(node)

    def autofix(self, node: HTMLAttributeNode, root: ParseResult) -> bool:  # type: ignore[override]
        if not isinstance(node, HTMLAttributeNode) or node.value is None:
            return False
        return replace(root, node, copy_node(node, equals=None, value=None))


HTML_RULES: tuple[type[VisitorRule], ...] = (
    HTMLTagNameLowercase,
    HTMLNoSelfClosing,
    HTMLAttributeValuesRequireQuotes,
    HTMLAttributeDoubleQuotes,
    HTMLBooleanAttributesNoValue,
)
