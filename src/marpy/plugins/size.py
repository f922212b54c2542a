#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/plugins/size.py
"""``size`` global directive.

Themes declare slide size presets with ``@size`` metadata::

    /* @size 4:3 960px 720px */

``size: 4:3`` in front matter then switches every slide, and the packed
stylesheet, to that preset. Unknown presets are ignored.
"""

from __future__ import annotations

import logging
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore

from marpy.engine.directives import ENV_GLOBAL_DIRECTIVES, ENV_SLIDE_SIZE, ENV_THEME
from marpy.engine.theme import Theme, parse_size
from marpy.options.marp import MarpOptions

logger = logging.getLogger(__name__)

ENV_SIZE_PRESET = "marp_size_preset"


def find_size_preset(theme: Theme, name: str) -> tuple[int, int] | None:
    """Look up a ``@size`` preset of ``theme`` by name.

    Later presets with the same name win.

    Returns
    -------
    tuple or None
        ``(width, height)`` in pixels, or None when no preset matches

    """
    found = None
    for value in theme.meta.get("size", ()):
        parsed = parse_size(value)
        if parsed is None:
            logger.debug("Ignoring malformed @size metadata in theme %s: %r", theme.name, value)
            continue
        preset, width, height = parsed
        if preset == name:
            found = (width, height)
    return found


def apply_size(state: StateCore) -> None:
    """Core rule resolving the ``size`` directive against the theme."""
    if state.inlineMode:
        return

    env: Any = state.env
    size = env.get(ENV_GLOBAL_DIRECTIVES, {}).get("size")
    theme: Theme | None = env.get(ENV_THEME)
    if size is None or theme is None:
        return

    preset = find_size_preset(theme, str(size))
    if preset is None:
        logger.debug("Theme %s has no size preset %r", theme.name, size)
        return

    env[ENV_SLIDE_SIZE] = preset
    env[ENV_SIZE_PRESET] = str(size)


def markdown(md: MarkdownIt, options: MarpOptions) -> None:
    """Register the ``size`` directive."""
    md.core.ruler.push("marp_size", apply_size)
