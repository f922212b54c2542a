#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/plugins/html.py
"""Raw HTML allowlist plugin.

When the ``html`` markdown option is a tag allowlist, the raw HTML blocks and
inline tags of a document are filtered through
:class:`marpy.utils.html_filter.AllowlistFilter`. They are sanitized together
and in document order, so an element opened in one block and closed in
another is treated as one element. True allows all HTML unchanged, and False
lets the markdown processor escape it, so neither needs a rule.
"""

from __future__ import annotations

import logging
from typing import Iterator, Mapping

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

from marpy.options.marp import MarpOptions
from marpy.utils.html_filter import AllowlistFilter

logger = logging.getLogger(__name__)


def _html_tokens(tokens: list[Token]) -> Iterator[Token]:
    for token in tokens:
        if token.type == "html_block":
            yield token
        elif token.type == "inline" and token.children:
            yield from (child for child in token.children if child.type == "html_inline")


def markdown(md: MarkdownIt, options: MarpOptions) -> None:
    """Filter raw HTML through the configured allowlist."""
    policy = md.options.get("html")
    if not isinstance(policy, Mapping):
        logger.debug("Raw HTML policy is %r, allowlist filter not registered", policy)
        return

    html_filter = AllowlistFilter(policy)

    def marp_html_filter(state: StateCore) -> None:
        tokens = list(_html_tokens(state.tokens))
        for token, content in zip(tokens, html_filter.clean_pieces([token.content for token in tokens])):
            token.content = content

    md.core.ruler.push("marp_html_filter", marp_html_filter)
