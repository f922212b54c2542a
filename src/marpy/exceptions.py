#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the marpy library.

This module defines specialized exception classes for the error conditions
that can occur while constructing a renderer or rendering a deck.

Exception Hierarchy
-------------------
- MarpyError (base exception)

  - ConfigurationError (fatal, raised during construction)
    - ThemeError (invalid or duplicate theme stylesheets)

  - RenderingError (fatal, raised during a render call)
    - StyleMinificationError (CSS could not be minified)

Recoverable conditions, such as an unrecognized highlighting language, are
handled where they occur and never surface as exceptions.

"""

from __future__ import annotations


class MarpyError(Exception):
    """Base exception class for all marpy-specific errors.

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


class ConfigurationError(MarpyError):
    """Exception raised when a renderer cannot be constructed.

    A plugin that fails while registering its rules, or a theme that cannot
    be registered, aborts construction with this error. No partially
    configured renderer is returned to the caller.

    Parameters
    ----------
    message : str
        Description of the configuration error
    component : str, optional
        Name of the plugin or subsystem that failed
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, component: str | None = None, original_error: Exception | None = None):
        """Initialize the configuration error with the failing component."""
        super().__init__(message, original_error=original_error)
        self.component = component


class ThemeError(ConfigurationError):
    """Exception raised for invalid or duplicate theme stylesheets.

    Parameters
    ----------
    message : str
        Description of the theme error
    theme_name : str, optional
        Name of the offending theme, when known
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, theme_name: str | None = None, original_error: Exception | None = None):
        """Initialize the theme error."""
        super().__init__(message, component="theme", original_error=original_error)
        self.theme_name = theme_name


class RenderingError(MarpyError):
    """Exception raised when a render call cannot produce output."""


class StyleMinificationError(RenderingError):
    """Exception raised when the assembled stylesheet cannot be minified.

    The unminified stylesheet is never returned in place of a failed
    minification.

    Parameters
    ----------
    message : str
        Description of the failure
    line : int, optional
        Line of the offending CSS, as reported by the parser
    column : int, optional
        Column of the offending CSS, as reported by the parser

    """

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        """Initialize the minification error with the parse position."""
        super().__init__(message)
        self.line = line
        self.column = column


__all__ = [
    "ConfigurationError",
    "MarpyError",
    "RenderingError",
    "StyleMinificationError",
    "ThemeError",
]
