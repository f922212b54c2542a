#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/plugins/fitting.py
"""Auto-fitting headers.

A heading containing the ``<!-- fit -->`` comment is wrapped in an SVG whose
view box the browser runtime sizes to the heading text, so the text scales
to the slide width::

    # <!-- fit --> Large title

Fitting is applied only when the slide theme declares it in its
``@auto-scaling`` metadata, either as ``true`` or as a comma separated list
including ``fittingHeader``.

"""

from __future__ import annotations

from typing import Any, Sequence

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

from marpy.constants import FITTING_COMMENT
from marpy.engine.directives import COMMENT_TOKEN, ENV_THEME
from marpy.engine.theme import Theme
from marpy.options.marp import MarpOptions

FITTING_OPEN = "marp_fitting_open"
FITTING_CLOSE = "marp_fitting_close"

FITTING_CSS = """svg[data-marp-fitting="svg"] {
  display: block;
  max-height: 100%;
  max-width: 100%;
}
svg[data-marp-fitting="svg"] > foreignObject {
  height: 100%;
  width: 100%;
}
svg[data-marp-fitting="svg"] > foreignObject > [data-marp-fitting-svg-content] {
  display: table;
  white-space: nowrap;
}"""


def _is_fit_comment(token: Token) -> bool:
    return token.type == COMMENT_TOKEN and token.content.strip() == FITTING_COMMENT


def theme_fits_headers(theme: Theme | None) -> bool:
    """Check the ``auto-scaling`` metadata of a theme for header fitting."""
    if theme is None:
        return False
    features = {feature.strip() for feature in str(theme.meta.get("auto-scaling", "")).split(",")}
    return "true" in features or "fittingHeader" in features


def mark_fitting_headings(state: StateCore) -> None:
    """Core rule wrapping the content of ``<!-- fit -->`` headings."""
    if not theme_fits_headers(state.env.get(ENV_THEME)):
        return

    tokens = state.tokens
    for index, token in enumerate(tokens[:-1]):
        if token.type != "heading_open":
            continue
        inline = tokens[index + 1]
        if inline.type != "inline" or not inline.children:
            continue
        if not any(_is_fit_comment(child) for child in inline.children):
            continue

        children = [child for child in inline.children if not _is_fit_comment(child)]
        if children and children[0].type == "text":
            children[0].content = children[0].content.lstrip()
        token.attrSet("data-marp-fitting", "")
        inline.children = [Token(FITTING_OPEN, "", 0), *children, Token(FITTING_CLOSE, "", 0)]


def render_fitting_open(self: Any, tokens: Sequence[Token], idx: int, options: Any, env: Any) -> str:
    return (
        '<svg data-marp-fitting="svg" preserveAspectRatio="xMinYMin meet">'
        "<foreignObject><span data-marp-fitting-svg-content>"
    )


def render_fitting_close(self: Any, tokens: Sequence[Token], idx: int, options: Any, env: Any) -> str:
    return "</span></foreignObject></svg>"


def markdown(md: MarkdownIt, options: MarpOptions) -> None:
    """Register header fitting."""
    md.core.ruler.push("marp_fitting", mark_fitting_headings)
    md.add_render_rule(FITTING_OPEN, render_fitting_open)
    md.add_render_rule(FITTING_CLOSE, render_fitting_close)


def css(options: MarpOptions) -> str:
    """Return the fitting styles; they do not depend on configuration."""
    return FITTING_CSS
