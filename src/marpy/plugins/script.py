#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/plugins/script.py
"""Browser runtime script.

Appends a ``<script>`` element after the slides. The runtime sizes
auto-fitting headings once the page is laid out. It is either embedded
from the bundled ``assets/browser.js`` or referenced by URL.
"""

from __future__ import annotations

import html
import logging
from functools import lru_cache
from importlib import resources
from typing import Any, Sequence

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

from marpy.options.marp import MarpOptions, ScriptOptions

logger = logging.getLogger(__name__)

SCRIPT_TOKEN = "marp_script"


@lru_cache(maxsize=1)
def browser_script() -> str:
    """Return the bundled browser runtime source."""
    return (resources.files("marpy.plugins") / "assets" / "browser.js").read_text(encoding="utf-8")


def render_script_tag(options: ScriptOptions) -> str:
    """Render the ``<script>`` element for the configured source.

    Examples
    --------
    >>> render_script_tag(ScriptOptions(source="cdn", src="https://example.com/r.js", nonce="abc"))
    '<script src="https://example.com/r.js" defer nonce="abc"></script>'

    """
    nonce = f' nonce="{html.escape(options.nonce, quote=True)}"' if options.nonce else ""
    if options.source == "cdn":
        return f'<script src="{html.escape(options.src or "", quote=True)}" defer{nonce}></script>'
    return f"<script{nonce}>{browser_script()}</script>"


def make_script_rule(options: ScriptOptions) -> Any:
    """Build the core rule appending the script token."""

    def marp_script(state: StateCore) -> None:
        if state.inlineMode:
            return
        token = Token(SCRIPT_TOKEN, "script", 0)
        token.block = True
        token.meta = {"script": options}
        state.tokens.append(token)

    return marp_script


def render_script(self: Any, tokens: Sequence[Token], idx: int, options: Any, env: Any) -> str:
    return render_script_tag(tokens[idx].meta["script"])


def markdown(md: MarkdownIt, options: MarpOptions) -> None:
    """Register the runtime script when enabled."""
    if not options.script.enabled:
        logger.debug("Browser runtime script disabled")
        return

    md.core.ruler.push(SCRIPT_TOKEN, make_script_rule(options.script))
    md.add_render_rule(SCRIPT_TOKEN, render_script)
