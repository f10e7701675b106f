#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/erbkit/parsers/base.py
"""Base classes for template parsers.

This module defines the abstract base class for parsers that turn template
text into a :class:`~erbkit.ast.nodes.ParseResult`.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from erbkit.ast.nodes import ParseResult
from erbkit.exceptions import InvalidOptionsError, ValidationError
from erbkit.options.parser import ParserOptions

logger = logging.getLogger(__name__)

TemplateInput = Union[str, bytes, Path]


class BaseParser(ABC):
    """Abstract base class for template parsers.

    Parameters
    ----------
    options : ParserOptions or None, default = None
        Parsing options. If None, default options are used.

    Examples
    --------
    Creating a custom parser:

        >>> class MyParser(BaseParser):
        ...     def parse(self, input_data):
        ...         source = self._load_text_content(input_data)
        ...         return ParseResult(value=DocumentNode(), source=source)

    """

    def __init__(self, options: ParserOptions | None = None):
        """Initialize the parser with optional configuration."""
        self._validate_options_type(options, ParserOptions, type(self).__name__)
        self.options: ParserOptions = options or ParserOptions()

    @staticmethod
    def _validate_options_type(options: ParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                component_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, input_data: TemplateInput) -> ParseResult:
        """Parse template input into a ParseResult.

        Parameters
        ----------
        input_data : str, bytes or Path
            Template text, UTF-8 bytes, or a path to a template file

        Returns
        -------
        ParseResult
            Root node, parse errors and the original source

        Raises
        ------
        ParsingError
            If strict parsing is enabled and the template has errors
        ValidationError
            If input data is of an unsupported type

        """
        raise NotImplementedError

    @staticmethod
    def _load_text_content(input_data: TemplateInput) -> str:
        """Load template text from the supported input types.

        A ``str`` is always treated as template text, never as a path.

        Raises
        ------
        ValidationError
            If the input type is unsupported or bytes are not valid UTF-8

        """
        if isinstance(input_data, str):
            return input_data
        if isinstance(input_data, Path):
            with open(input_data, "rb") as f:
                input_data = f.read()
        if isinstance(input_data, bytes):
            try:
                return input_data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ValidationError(
                    "Template bytes are not valid UTF-8",
                    parameter_name="input_data",
                    original_error=e,
                ) from e
        raise ValidationError(
            f"Unsupported input type: {type(input_data).__name__}",
            parameter_name="input_data",
            parameter_value=input_data,
        )
