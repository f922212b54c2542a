#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/plugins/emoji.py
"""Emoji plugin.

Converts ``:shortcode:`` notation and, optionally, unicode emoji in text.
Shortcodes are resolved with the ``emoji`` package using its alias names
(GitHub style, e.g. ``:+1:`` and ``:smile:``).

In twemoji mode each emoji renders as an ``<img>`` pointing at the twemoji
SVG for its codepoints, and :func:`css` supplies the sizing styles.
"""

from __future__ import annotations

import html
import logging
import re
from typing import Any, Sequence

import emoji as emoji_lib
from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

from marpy.constants import TWEMOJI_BASE_URL, TWEMOJI_EXTENSION
from marpy.options.marp import EmojiOptions, MarpOptions

logger = logging.getLogger(__name__)

EMOJI_TOKEN = "marp_emoji"

_SHORTCODE = re.compile(r":[A-Za-z0-9_+\-]+:")
_ZWJ = "200d"
_VARIATION_SELECTOR = "fe0f"

EMOJI_CSS = """img[data-marp-twemoji] {
  background: transparent;
  height: 1em;
  margin: 0 .05em 0 .1em;
  vertical-align: -.1em;
  width: 1em;
}"""


def twemoji_url(char: str) -> str:
    """Return the twemoji image URL for an emoji.

    Variation selectors are dropped unless the emoji is a ZWJ sequence,
    matching twemoji's file naming.

    Examples
    --------
    >>> twemoji_url("\\u2764\\ufe0f").rsplit("/", 1)[-1]
    '2764.svg'

    """
    codepoints = [f"{ord(c):x}" for c in char]
    if _ZWJ not in codepoints:
        codepoints = [c for c in codepoints if c != _VARIATION_SELECTOR]
    return f"{TWEMOJI_BASE_URL}{'-'.join(codepoints)}{TWEMOJI_EXTENSION}"


def render_twemoji(char: str) -> str:
    """Render an emoji as a twemoji image element."""
    return (
        f'<img class="emoji" draggable="false" alt="{html.escape(char)}" '
        f'src="{twemoji_url(char)}" data-marp-twemoji="">'
    )


def _emoji_token(char: str, twemoji: bool) -> Token:
    token = Token(EMOJI_TOKEN, "", 0)
    token.content = char
    token.meta = {"twemoji": twemoji}
    return token


def _text_token(template: Token, content: str) -> Token:
    token = Token("text", "", 0)
    token.content = content
    token.level = template.level
    return token


def _split_unicode(text: str, options: EmojiOptions, template: Token) -> list[Token]:
    if options.unicode != "twemoji":
        return [_text_token(template, text)]

    tokens: list[Token] = []
    position = 0
    for found in emoji_lib.emoji_list(text):
        if found["match_start"] > position:
            tokens.append(_text_token(template, text[position : found["match_start"]]))
        tokens.append(_emoji_token(found["emoji"], twemoji=True))
        position = found["match_end"]
    if position < len(text):
        tokens.append(_text_token(template, text[position:]))
    return tokens


def _split_text(token: Token, options: EmojiOptions) -> list[Token]:
    text = token.content
    tokens: list[Token] = []
    position = 0

    if options.shortcode:
        search_from = 0
        while match := _SHORTCODE.search(text, search_from):
            char = emoji_lib.emojize(match.group(0), language="alias")
            if char == match.group(0):
                # the closing colon may open the next shortcode
                search_from = match.end() - 1
                continue
            if match.start() > position:
                tokens.extend(_split_unicode(text[position : match.start()], options, token))
            tokens.append(_emoji_token(char, twemoji=options.shortcode == "twemoji"))
            position = search_from = match.end()

    if position < len(text):
        tokens.extend(_split_unicode(text[position:], options, token))
    return tokens


def make_emoji_rule(options: EmojiOptions) -> Any:
    """Build the core rule replacing emoji in text tokens."""

    def marp_emoji(state: StateCore) -> None:
        for token in state.tokens:
            if token.type != "inline" or not token.children:
                continue
            children: list[Token] = []
            for child in token.children:
                if child.type == "text" and child.content:
                    children.extend(_split_text(child, options))
                else:
                    children.append(child)
            token.children = children

    return marp_emoji


def render_emoji(self: Any, tokens: Sequence[Token], idx: int, options: Any, env: Any) -> str:
    token = tokens[idx]
    if token.meta.get("twemoji"):
        return render_twemoji(token.content)
    return html.escape(token.content)


def markdown(md: MarkdownIt, options: MarpOptions) -> None:
    """Register emoji conversion."""
    emoji_options = options.emoji
    if not emoji_options.shortcode and emoji_options.unicode != "twemoji":
        logger.debug("Emoji conversion disabled")
        return

    md.core.ruler.push(EMOJI_TOKEN, make_emoji_rule(emoji_options))
    md.add_render_rule(EMOJI_TOKEN, render_emoji)


def css(options: EmojiOptions) -> str:
    """Return the styles needed by twemoji images, or an empty string."""
    return EMOJI_CSS if options.uses_twemoji else ""
