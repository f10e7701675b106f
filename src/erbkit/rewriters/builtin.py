#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/rewriters/builtin.py
"""Built-in rewriters.

Built-ins are opt-in: the formatter only runs a rewriter whose name appears
in ``FormatterOptions.pre_rewriters`` or ``post_rewriters``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar

from erbkit.ast.nodes import DocumentNode, HTMLAttributeNode, HTMLAttributeValueNode, Node
from erbkit.ast.replacement import build_literal_node, copy_node, rebuild
from erbkit.ast.utils import attribute_name, literal_text
from erbkit.ast.visitors import NodeCollector
from erbkit.rewriters.base import ASTRewriter

if TYPE_CHECKING:
    from erbkit.format.context import FormatContext

logger = logging.getLogger(__name__)

# Utility prefix to category; lower numbers sort first
CLASS_GROUPS: dict[str, int] = {
    # Layout
    **dict.fromkeys(
        [
            "aspect", "block", "box", "break", "clear", "collapse", "columns", "container",
            "contents", "flex", "float", "flow", "grid", "hidden", "inline", "invisible",
            "isolation", "list", "object", "overflow", "overscroll", "table", "truncate", "visible",
        ],
        0,
    ),
    # Position
    **dict.fromkeys(
        ["absolute", "bottom", "fixed", "inset", "left", "relative", "right", "static", "sticky", "top", "z"], 1
    ),
    # Sizing
    **dict.fromkeys(["h", "max", "min", "size", "w"], 2),
    # Flexbox and grid
    **dict.fromkeys(
        ["auto", "basis", "col", "content", "gap", "grow", "items", "justify", "order", "place", "row", "self", "shrink"],
        3,
    ),
    # Spacing
    **dict.fromkeys(
        ["m", "mb", "me", "ml", "mr", "ms", "mt", "mx", "my", "p", "pb", "pe", "pl", "pr", "ps", "pt", "px", "py", "space"],
        4,
    ),
    # Typography
    **dict.fromkeys(
        [
            "accent", "align", "antialiased", "capitalize", "caret", "decoration", "font", "hyphens",
            "indent", "italic", "leading", "lowercase", "normal", "not", "overline", "placeholder",
            "subpixel", "tab", "text", "tracking", "underline", "uppercase", "whitespace", "word",
        ],
        5,
    ),
    # Backgrounds
    **dict.fromkeys(["bg", "from", "gradient", "to", "via"], 6),
    # Borders
    **dict.fromkeys(["border", "divide", "outline", "ring", "rounded"], 7),
    # Effects
    **dict.fromkeys(["mix", "opacity", "shadow"], 8),
    # Filters
    **dict.fromkeys(
        ["backdrop", "blur", "brightness", "contrast", "drop", "filter", "grayscale", "hue", "invert", "saturate", "sepia"],
        9,
    ),
    # Transitions and animation
    **dict.fromkeys(["animate", "delay", "duration", "ease", "transition"], 10),
    # Transforms
    **dict.fromkeys(["origin", "rotate", "scale", "skew", "transform", "translate"], 11),
    # Interactivity
    **dict.fromkeys(["appearance", "cursor", "pointer", "resize", "scroll", "select", "snap", "touch", "will"], 12),
    # SVG
    **dict.fromkeys(["fill", "stroke"], 13),
    # Accessibility
    "sr": 14,
}

UNKNOWN_GROUP = 999


def tailwind_sort_key(class_name: str) -> tuple[int, int, str]:
    """Return the sort key for one class name.

    Variant prefixes (``hover:``, ``md:``...) are stripped to find the
    utility group; variant classes sort after base classes of the same group.
    """
    variant, _, utility = class_name.rpartition(":")
    prefix = utility.lstrip("-").split("-", 1)[0]
    return CLASS_GROUPS.get(prefix, UNKNOWN_GROUP), 1 if variant else 0, class_name


def sort_classes(classes: str) -> str:
    """Sort a whitespace-separated class list and join it with single spaces."""
    return " ".join(sorted(classes.split(), key=tailwind_sort_key))


class TailwindClassSorter(ASTRewriter):
    """Sort static ``class`` attribute values by Tailwind utility group.

    Values containing ERB are left untouched. Sorted values are spliced in
    as new value nodes; the original nodes are not modified.
    """

    name: ClassVar[str] = "tailwind-class-sorter"
    description: ClassVar[str] = "Sort Tailwind CSS classes by recommended order"

    @staticmethod
    def _is_class_attribute(node: Node) -> bool:
        if not isinstance(node, HTMLAttributeNode) or node.value is None:
            return False
        name = attribute_name(node)
        return name is not None and name.lower() == "class"

    def rewrite(self, target: DocumentNode, context: FormatContext) -> DocumentNode:
        collector = NodeCollector(self._is_class_attribute)
        collector.visit(target)

        sorted_count = 0
        for attribute in collector.collected:
            if self._sort_attribute(target, attribute):
                sorted_count += 1

        if sorted_count:
            logger.debug(f"Sorted {sorted_count} class attribute(s) in {context.file_path or '<template>'}")
        return target

    def _sort_attribute(self, root: DocumentNode, attribute: HTMLAttributeNode) -> bool:
        value = attribute.value
        text = literal_text(value.children) if value is not None else None
        if value is None or text is None:
            return False

        sorted_text = sort_classes(text)
        if sorted_text == " ".join(text.split()):
            return False

        new_value: HTMLAttributeValueNode = copy_node(value, children=[build_literal_node(sorted_text)])
        return rebuild(root, value, new_value)


BUILTIN_REWRITERS: tuple[type[ASTRewriter], ...] = (TailwindClassSorter,)
