"""erbkit - formatting, linting and autofixing for HTML+ERB templates.

erbkit parses ERB templates into an immutable syntax tree that keeps every
byte of the source, and builds three tools on top of it:

- a lossless reprinter that turns any tree back into exactly its source,
- a formatter that decides, element by element, whether a tag, its body
  and its close tag fit on one line or break into an indented block,
- a linter whose rules can repair what they find, through a two-phase
  pipeline of tree replacements followed by text edits.

Key Features
------------
- Identity-preserving node replacement on immutable trees
- Formatter ignore directive (``<%# erbkit:formatter ignore %>``)
- Safe/unsafe fix tiers, with unsafe fixes applied only on request
- Pluggable rewriters run before and after formatting, via entry points
- Configuration from ``.erbkit.yml``, ``.erbkit.toml`` or ``pyproject.toml``

Examples
--------
Format a template:

    >>> from erbkit import format_string
    >>> format_string("<div><span>A</span></div>")
    '<div><span>A</span></div>\\n'

Fix lint offenses:

    >>> from erbkit import fix_source
    >>> fix_source("<DIV>hello</DIV>\\n").source
    '<div>hello</div>\\n'

Reprint a parsed tree unchanged:

    >>> from erbkit import IdentityPrinter, parse
    >>> IdentityPrinter.print(parse("<p class='x'>hi</p>").value)
    "<p class='x'>hi</p>"

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "erbkit requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "0.3.0"

from erbkit.config import find_config_file, load_config, load_options, options_from_config
from erbkit.exceptions import (
    ConfigurationError,
    ErbKitError,
    InvalidOptionsError,
    ParsingError,
    PrintError,
    RewriterError,
    RuleError,
    ValidationError,
)
from erbkit.format import Formatter, FormatResult, format_string
from erbkit.lint import Autofixer, AutofixResult, Linter, LintResult, RuleRegistry, fix_source
from erbkit.options import FormatterOptions, LinterOptions, ParserOptions
from erbkit.parsers import parse
from erbkit.printers import IdentityPrinter
from erbkit.rewriters import RewriterRegistry

__all__ = [
    "__version__",
    # Parsing and printing
    "parse",
    "IdentityPrinter",
    # Formatting
    "Formatter",
    "FormatResult",
    "format_string",
    "RewriterRegistry",
    # Linting
    "Linter",
    "LintResult",
    "Autofixer",
    "AutofixResult",
    "RuleRegistry",
    "fix_source",
    # Options and configuration
    "FormatterOptions",
    "LinterOptions",
    "ParserOptions",
    "find_config_file",
    "load_config",
    "load_options",
    "options_from_config",
    # Exceptions
    "ErbKitError",
    "ValidationError",
    "InvalidOptionsError",
    "ConfigurationError",
    "ParsingError",
    "PrintError",
    "RewriterError",
    "RuleError",
]
