#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/plugins/__init__.py
"""Markdown plugins of the Marp renderer.

Plugins are registered in a fixed order, which decides how their rules
interleave: ``html``, ``emoji``, ``math``, ``fitting``, ``size``, ``script``.
Each plugin module exposes ``markdown(md, options)``.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from markdown_it import MarkdownIt

from marpy.exceptions import ConfigurationError
from marpy.options.marp import MarpOptions
from marpy.plugins import emoji, fitting, html, math, script, size

logger = logging.getLogger(__name__)

MarkdownPlugin = Callable[[MarkdownIt, MarpOptions], None]

MARKDOWN_PLUGINS: tuple[tuple[str, MarkdownPlugin], ...] = (
    ("html", html.markdown),
    ("emoji", emoji.markdown),
    ("math", math.markdown),
    ("fitting", fitting.markdown),
    ("size", size.markdown),
    ("script", script.markdown),
)


def apply_markdown_plugins(
    md: MarkdownIt,
    options: MarpOptions,
    plugins: Sequence[tuple[str, MarkdownPlugin]] = MARKDOWN_PLUGINS,
) -> MarkdownIt:
    """Register plugins on a markdown processor, in order.

    Parameters
    ----------
    md : MarkdownIt
        Markdown processor
    options : MarpOptions
        Resolved configuration, passed to every plugin
    plugins : sequence of (name, plugin), optional
        Plugins to register; defaults to :data:`MARKDOWN_PLUGINS`

    Returns
    -------
    MarkdownIt
        The same processor

    Raises
    ------
    ConfigurationError
        If a plugin fails to register. Plugins after the failing one are not
        registered.

    """
    for name, plugin in plugins:
        try:
            md.use(plugin, options)
        except Exception as exc:
            raise ConfigurationError(
                f"Failed to register markdown plugin '{name}': {exc}",
                component=name,
                original_error=exc,
            ) from exc
        logger.debug("Registered markdown plugin: %s", name)
    return md


__all__ = ["MARKDOWN_PLUGINS", "MarkdownPlugin", "apply_markdown_plugins"]
