#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/highlight.py
"""Syntax highlighting for fenced code blocks.

The markdown processor calls :func:`highlight` for every fenced code block.
The returned markup is placed inside ``<pre><code>`` by the processor; an
empty string tells the processor to fall back to escaping the raw code.

Highlighting is backed by Pygments. Token classes follow the short Pygments
names (``k``, ``s``, ``c`` ...) which the bundled themes style.
"""

from __future__ import annotations

import logging

from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

# Keep the code exactly as written: no stripping, no trailing newline added
_LEXER_OPTIONS = {"stripnl": False, "ensurenl": False}

_FORMATTER = HtmlFormatter(nowrap=True)


def get_lexer(lang: str) -> Lexer | None:
    """Return the Pygments lexer registered for ``lang``, or None.

    Parameters
    ----------
    lang : str
        Language name or alias, as written after the opening code fence

    Returns
    -------
    Lexer or None
        Lexer instance, or None when Pygments does not know the language

    """
    try:
        return get_lexer_by_name(lang, **_LEXER_OPTIONS)
    except ClassNotFound:
        return None


def detect_lexer(code: str) -> Lexer:
    """Guess the lexer for ``code``, falling back to plain text."""
    try:
        return guess_lexer(code, **_LEXER_OPTIONS)
    except ClassNotFound:
        logger.debug("No lexer matched code block, highlighting as plain text")
        return TextLexer(**_LEXER_OPTIONS)


def highlight(code: str, lang: str | None = None, attrs: str = "") -> str:
    """Highlight a code block.

    Parameters
    ----------
    code : str
        Source code of the block
    lang : str or None
        Language hint. An empty hint triggers automatic detection.
    attrs : str, default ""
        Remaining fence info after the language name; accepted so the function
        can be used directly as the markdown-it ``highlight`` callback

    Returns
    -------
    str
        Highlighted markup. Empty when ``lang`` names a language Pygments
        does not recognize, or when ``code`` is empty.

    Notes
    -----
    Errors raised by Pygments while highlighting a recognized language are
    not caught.

    Examples
    --------
    >>> highlight("x = 1", "nonexistent-lang")
    ''
    >>> highlight("", "")
    ''

    """
    if not code:
        return ""

    if lang:
        lexer = get_lexer(lang)
        if lexer is None:
            logger.debug("Unrecognized highlight language: %s", lang)
            return ""
    else:
        lexer = detect_lexer(code)

    return pygments_highlight(code, lexer, _FORMATTER)


__all__ = ["detect_lexer", "get_lexer", "highlight"]
