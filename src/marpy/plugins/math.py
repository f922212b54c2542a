#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/plugins/math.py
"""Math typesetting plugin.

``$...$`` and ``$$...$$`` are parsed by the ``dollarmath`` plugin of
mdit-py-plugins. With the ``mathml`` library the TeX source is converted to
MathML by latex2mathml while rendering; with ``mathjax`` it is emitted in
``\\(...\\)`` / ``\\[...\\]`` delimiters for a client-side typesetter.
"""

from __future__ import annotations

import html
import logging
from functools import partial
from typing import Any, Mapping

from latex2mathml.converter import convert as latex_to_mathml
from markdown_it import MarkdownIt
from mdit_py_plugins.dollarmath import dollarmath_plugin

from marpy.constants import MathLib
from marpy.options.marp import MarpOptions

logger = logging.getLogger(__name__)

MATHML_CSS = """math[display="block"] {
  display: block;
  margin: 0.5em auto;
  text-align: center;
}
.math.block {
  overflow-x: auto;
}
.math-error {
  color: #cc0000;
}"""


def render_math(content: str, config: Mapping[str, Any], lib: MathLib = "mathml") -> str:
    """Render TeX source.

    Parameters
    ----------
    content : str
        TeX source without delimiters
    config : mapping
        Render flags from the math parser; ``display_mode`` selects block math
    lib : {"mathml", "mathjax"}, default "mathml"
        Output format

    Returns
    -------
    str
        HTML markup. TeX that cannot be converted is rendered escaped inside
        ``<code class="math-error">``.

    Examples
    --------
    >>> render_math("x", {"display_mode": False}, lib="mathjax")
    '\\\\(x\\\\)'

    """
    display = bool(config.get("display_mode", False))

    if lib == "mathjax":
        return html.escape(f"\\[{content}\\]" if display else f"\\({content}\\)")

    try:
        return latex_to_mathml(content, display="block" if display else "inline")
    except Exception as exc:
        logger.warning("Failed to convert TeX to MathML (%s): %r", exc.__class__.__name__, content)
        return f'<code class="math-error">{html.escape(content)}</code>'


def markdown(md: MarkdownIt, options: MarpOptions) -> None:
    """Register math syntax when enabled."""
    math = options.math
    if not math.enabled:
        logger.debug("Math syntax disabled")
        return

    md.use(dollarmath_plugin, double_inline=True, renderer=partial(render_math, lib=math.lib))


def css(options: MarpOptions) -> str:
    """Return MathML styles when MathML output is active, else an empty string."""
    if options.math.enabled and options.math.lib == "mathml":
        return MATHML_CSS
    return ""
