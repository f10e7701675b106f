#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the erbkit library.

This module defines the exception classes raised while parsing, printing,
formatting and fixing templates. Recoverable conditions inside the fix
pipeline (stale node references, offset drift) are reported as unfixed
diagnostics rather than raised.

Exception Hierarchy
-------------------
- ErbKitError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for a component)

  - ConfigurationError (config file loading and validation)

  - ParsingError (template parsing failures in strict mode)

  - PrintError (printing a tree that carries parse errors)

  - RewriterError (rewriter registration and execution failures)

  - RuleError (lint rule registration and fix procedure defects)

"""

from typing import Any


class ErbKitError(Exception):
    """Base exception class for all erbkit-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(ErbKitError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when a component receives the wrong options class.

    Parameters
    ----------
    component_name : str
        Name of the component that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        component_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{component_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.component_name = component_name
        self.expected_type = expected_type
        self.received_type = received_type


class ConfigurationError(ErbKitError):
    """Exception raised when a configuration file cannot be loaded or is invalid.

    Parameters
    ----------
    message : str
        Description of the configuration problem
    config_path : str, optional
        Path of the offending configuration file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, config_path: str | None = None, original_error: Exception | None = None):
        """Initialize the configuration error."""
        super().__init__(message, original_error=original_error)
        self.config_path = config_path


class ParsingError(ErbKitError):
    """Exception raised when a template cannot be parsed cleanly.

    Only raised when strict parsing is requested; the default parser mode
    records errors on the tree instead.

    Parameters
    ----------
    message : str
        Description of the parsing error
    errors : list, optional
        The parse errors collected from the tree
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, errors: list[Any] | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error=original_error)
        self.errors = errors or []


class PrintError(ErbKitError):
    """Exception raised when a printer is asked to print a tree with parse errors.

    Parameters
    ----------
    message : str
        Description of the printing problem
    errors : list, optional
        The parse errors that prevented printing

    """

    def __init__(self, message: str, errors: list[Any] | None = None):
        """Initialize the print error."""
        super().__init__(message)
        self.errors = errors or []


class RewriterError(ErbKitError):
    """Exception raised for rewriter registration or execution failures.

    Parameters
    ----------
    message : str
        Description of the rewriter failure
    rewriter_name : str, optional
        Name of the rewriter involved
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, rewriter_name: str | None = None, original_error: Exception | None = None):
        """Initialize the rewriter error."""
        super().__init__(message, original_error=original_error)
        self.rewriter_name = rewriter_name


class RuleError(ErbKitError):
    """Exception raised for lint rule registration failures and fix procedure defects.

    Parameters
    ----------
    message : str
        Description of the rule failure
    rule_name : str, optional
        Name of the rule involved
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, rule_name: str | None = None, original_error: Exception | None = None):
        """Initialize the rule error."""
        super().__init__(message, original_error=original_error)
        self.rule_name = rule_name
