#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/printers/context.py
"""Output accumulation state shared by the printers.

The context holds the lines under construction, the indent level, the
inline/block mode flag and a stack of open tag names. :meth:`PrintContext.capture`
runs a nested render into a scratch buffer, which the formatter uses to
measure a rendering before committing to a layout.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator

from erbkit.constants import DEFAULT_INDENT_WIDTH


class PrintContext:
    """Transient printer state.

    Parameters
    ----------
    indent_width : int, default 2
        Spaces per indent level

    Attributes
    ----------
    lines : list of str
        Output lines under construction; the last entry is the current line
    indent_level : int
        Current nesting depth
    inline_mode : bool
        True while rendering into the current line instead of new lines
    tag_stack : list of str
        Names of the elements currently being printed, outermost first

    """

    def __init__(self, indent_width: int = DEFAULT_INDENT_WIDTH) -> None:
        self.indent_width = indent_width
        self.lines: list[str] = []
        self.indent_level = 0
        self.inline_mode = False
        self.tag_stack: list[str] = []

    @property
    def indent(self) -> str:
        """Return the whitespace prefix for the current indent level."""
        return " " * (self.indent_level * self.indent_width)

    def write(self, text: str) -> None:
        """Append ``text`` to the current line."""
        if self.lines:
            self.lines[-1] += text
        else:
            self.lines.append(text)

    def push_line(self, text: str = "") -> None:
        """Start a new line holding ``text`` at the current indent.

        Blank text produces an empty line with no indentation.
        """
        if text.strip():
            self.lines.append(self.indent + text)
        else:
            self.lines.append("")

    def write_or_push(self, text: str) -> None:
        """Append in inline mode, otherwise start a new indented line."""
        if self.inline_mode:
            self.write(text)
        else:
            self.push_line(text)

    def blank_line(self) -> None:
        """Add a separating blank line unless one was just added."""
        if self.lines and self.lines[-1] != "":
            self.lines.append("")

    def indent_in(self) -> None:
        """Increase the indent level by one."""
        self.indent_level += 1

    def dedent(self) -> None:
        """Decrease the indent level by one."""
        self.indent_level = max(0, self.indent_level - 1)

    @contextmanager
    def indented(self) -> Iterator[None]:
        """Render the block one indent level deeper."""
        self.indent_in()
        try:
            yield
        finally:
            self.dedent()

    @contextmanager
    def inline(self, enabled: bool = True) -> Iterator[None]:
        """Render the block with ``inline_mode`` set to ``enabled``."""
        previous = self.inline_mode
        self.inline_mode = enabled
        try:
            yield
        finally:
            self.inline_mode = previous

    def enter_tag(self, tag_name: str) -> None:
        """Push ``tag_name`` on the tag stack."""
        self.tag_stack.append(tag_name)

    def exit_tag(self) -> str | None:
        """Pop the innermost tag name."""
        return self.tag_stack.pop() if self.tag_stack else None

    def inside_tag(self, tag_name: str) -> bool:
        """Return True when ``tag_name`` is open anywhere on the stack."""
        return tag_name in self.tag_stack

    def capture(self, render: Callable[[], None]) -> list[str]:
        """Run ``render`` against a scratch buffer and return its lines.

        The outer lines and inline mode are restored afterwards, even when
        ``render`` raises. Indent level and tag stack are shared with the
        nested render so measurements reflect the real nesting depth.

        Parameters
        ----------
        render : callable
            Zero-argument function that writes into this context

        Returns
        -------
        list of str
            The lines written by ``render``

        """
        saved_lines = self.lines
        saved_inline = self.inline_mode
        saved_indent = self.indent_level
        saved_depth = len(self.tag_stack)
        self.lines = []
        try:
            render()
            return self.lines
        finally:
            self.lines = saved_lines
            self.inline_mode = saved_inline
            self.indent_level = saved_indent
            del self.tag_stack[saved_depth:]

    def output(self) -> str:
        """Return the buffer joined with newlines."""
        return "\n".join(self.lines)

    def reset(self) -> None:
        """Clear all state."""
        self.lines = []
        self.indent_level = 0
        self.inline_mode = False
        self.tag_stack.clear()
