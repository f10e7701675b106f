#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/format/formatter.py
"""Single-template formatting pipeline.

Processing pipeline::

    source -> parse -> document
           -> pre rewriters (AST) -> document
           -> FormatPrinter -> text
           -> post rewriters (string) -> text
           -> FormatResult

A template with parse errors, or one carrying the ignore directive, is
returned unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from erbkit.ast.nodes import DocumentNode
from erbkit.exceptions import ParsingError, RewriterError
from erbkit.format.context import FormatContext
from erbkit.format.ignore import has_format_ignore_directive
from erbkit.format.printer import FormatPrinter
from erbkit.format.result import FormatResult
from erbkit.options.formatter import FormatterOptions
from erbkit.options.parser import ParserOptions
from erbkit.parsers.erb import ERBParser
from erbkit.rewriters.base import ASTRewriter, BaseRewriter, StringRewriter
from erbkit.rewriters.registry import RewriterRegistry

logger = logging.getLogger(__name__)


class Formatter:
    """Format HTML+ERB templates.

    Parameters
    ----------
    options : FormatterOptions or None
        Layout options and rewriter names
    rewriters : sequence of BaseRewriter or None
        Rewriter instances to run in addition to those named in ``options``
    registry : RewriterRegistry or None
        Catalog used to resolve rewriter names; built-ins only when omitted

    Raises
    ------
    RewriterError
        If a rewriter named in ``options`` is not registered, or is
        configured for the wrong phase

    Examples
    --------
        >>> formatter = Formatter(FormatterOptions(indent_width=4))
        >>> result = formatter.format("<div><p>Hi</p></div>")
        >>> result.formatted
        '<div>\\n    <p>Hi</p>\\n</div>\\n'

    """

    def __init__(
        self,
        options: Optional[FormatterOptions] = None,
        rewriters: Optional[Sequence[BaseRewriter]] = None,
        registry: Optional[RewriterRegistry] = None,
    ) -> None:
        self.options = options or FormatterOptions()
        self.registry = registry or RewriterRegistry.with_builtins()
        self.pre_rewriters: list[ASTRewriter] = [
            self._resolve(name, ASTRewriter) for name in self.options.pre_rewriters  # type: ignore[misc]
        ]
        self.post_rewriters: list[StringRewriter] = [
            self._resolve(name, StringRewriter) for name in self.options.post_rewriters  # type: ignore[misc]
        ]
        for rewriter in rewriters or ():
            if isinstance(rewriter, ASTRewriter):
                self.pre_rewriters.append(rewriter)
            elif isinstance(rewriter, StringRewriter):
                self.post_rewriters.append(rewriter)
            else:
                raise RewriterError(f"Not a rewriter instance: {rewriter!r}")

    def _resolve(self, name: str, base: type[BaseRewriter]) -> BaseRewriter:
        rewriter = self.registry.create(name)
        if not isinstance(rewriter, base):
            raise RewriterError(
                f"Rewriter '{name}' runs in the '{rewriter.phase}' phase and cannot be used here",
                rewriter_name=name,
            )
        return rewriter

    def format(self, source: str, file_path: Optional[str] = None, force: bool = False) -> FormatResult:
        """Format one template.

        Parameters
        ----------
        source : str
            Template text
        file_path : str or None
            Path used in messages and diffs
        force : bool, default False
            Format even when the ignore directive is present

        Returns
        -------
        FormatResult
            The outcome; never raises for template problems

        """
        parser_options = ParserOptions(track_whitespace=True, void_elements=self.options.void_elements)
        parse_result = ERBParser(parser_options).parse(source)

        if parse_result.failed:
            first = parse_result.errors[0]
            location = f"{file_path or '<template>'}:{first.location.start.line}:{first.location.start.column}"
            error = ParsingError(f"Failed to parse {location}: {first.message}", errors=parse_result.errors)
            logger.info(f"Skipping formatting: {error}")
            return FormatResult(original=source, formatted=source, file_path=file_path, error=error)

        document = parse_result.value
        if not force and has_format_ignore_directive(document):
            logger.debug(f"Formatter ignore directive found in {file_path or '<template>'}")
            return FormatResult(original=source, formatted=source, file_path=file_path, ignored=True)

        context = FormatContext(source=source, options=self.options, file_path=file_path)
        try:
            document = self._apply_pre_rewriters(document, context)
            formatted = FormatPrinter(self.options).render(document)
            formatted = self._apply_post_rewriters(formatted, context)
        except Exception as e:
            logger.error(f"Formatting failed for {file_path or '<template>'}: {e}")
            return FormatResult(original=source, formatted=source, file_path=file_path, error=e)

        return FormatResult(original=source, formatted=formatted, file_path=file_path)

    def _apply_pre_rewriters(self, document: DocumentNode, context: FormatContext) -> DocumentNode:
        for rewriter in self.pre_rewriters:
            logger.debug(f"Applying pre rewriter: {rewriter.name}")
            document = rewriter.rewrite(document, context)
        return document

    def _apply_post_rewriters(self, formatted: str, context: FormatContext) -> str:
        for rewriter in self.post_rewriters:
            logger.debug(f"Applying post rewriter: {rewriter.name}")
            formatted = rewriter.rewrite(formatted, context)
        return formatted


def format_string(source: str, options: Optional[FormatterOptions] = None, **kwargs: Any) -> str:
    """Format ``source`` and return the text.

    Parameters
    ----------
    source : str
        Template text
    options : FormatterOptions or None
        Base options
    **kwargs
        Option overrides, e.g. ``indent_width=4``

    Returns
    -------
    str
        Formatted text; the input unchanged when it is ignored

    Raises
    ------
    ErbKitError
        If the template cannot be parsed or a rewriter fails

    """
    options = options or FormatterOptions()
    if kwargs:
        options = options.create_updated(**kwargs)

    result = Formatter(options).format(source)
    if result.error is not None:
        raise result.error
    return result.formatted
