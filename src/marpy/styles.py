#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/styles.py
"""Stylesheet assembly for the Marp renderer.

Plugin styles are prepended to the ``before`` section of the theme pack
options in the order emoji, fitting, math. Each one goes in front of what is
already there, so the packed stylesheet starts with::

    math, fitting, emoji, <original before>, theme, container, after

The packed stylesheet is optionally minified by
:func:`marpy.utils.css_minify.minify_css`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from marpy.engine.theme import PackOptions
from marpy.plugins import emoji, fitting, math
from marpy.utils.css_minify import minify_css

if TYPE_CHECKING:
    from marpy.marp import Marp

logger = logging.getLogger(__name__)


def prepend_style(pack: PackOptions, css: str) -> PackOptions:
    """Return ``pack`` with ``css`` placed in front of ``before``.

    Empty ``css`` leaves the options unchanged.

    Examples
    --------
    >>> prepend_style(PackOptions(before="b{}"), "a{}").before
    'a{}\\nb{}'

    """
    if not css:
        return pack
    return pack.create_updated(before=f"{css}\n{pack.before}")


def assemble_pack_options(base: PackOptions, marp: Marp) -> PackOptions:
    """Add plugin styles to the theme pack options.

    Parameters
    ----------
    base : PackOptions
        Pack options computed by the engine
    marp : Marp
        Renderer whose configuration selects the plugin styles

    Returns
    -------
    PackOptions
        New options; ``base`` is not modified

    """
    pack = prepend_style(base, emoji.css(marp.options.emoji))
    pack = prepend_style(pack, fitting.css(marp.options))
    pack = prepend_style(pack, math.css(marp.options))
    return pack


def finalize_styles(css: str, minify: bool) -> str:
    """Minify the packed stylesheet when ``minify`` is set.

    Raises
    ------
    StyleMinificationError
        If minification is requested and the stylesheet is invalid

    """
    if not minify:
        return css
    return minify_css(css)


__all__ = ["assemble_pack_options", "finalize_styles", "prepend_style"]
