#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/marp.py
"""The Marp renderer.

:class:`Marp` extends the slide engine with Marp's defaults: the bundled
``default``, ``gaia`` and ``uncover`` themes, emoji, math, auto-fitting
headers, size presets, the browser runtime, syntax highlighting and CSS
minification.

Examples
--------
>>> marp = Marp(script=False)
>>> result = marp.render("# Hello :wave:")
>>> result.theme
'default'

"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from markdown_it import MarkdownIt

from marpy.constants import (
    ALWAYS_ENABLED_RULES,
    BUILTIN_THEMES,
    DEFAULT_HTML_ALLOWLIST,
    THEME_META_TYPE,
)
from marpy.engine import EngineExtension, PackOptions, RenderResult, SlideEngine, ThemeSet
from marpy.exceptions import ThemeError
from marpy.highlight import highlight
from marpy.options.marp import MarpOptions, resolve_options
from marpy.plugins import apply_markdown_plugins
from marpy.styles import assemble_pack_options, finalize_styles
from marpy.themes import load_builtin_theme

logger = logging.getLogger(__name__)


class Marp(EngineExtension):
    """Render Marp Markdown into slide HTML and CSS.

    Parameters
    ----------
    options : mapping or MarpOptions, optional
        Caller options; see :func:`marpy.options.resolve_options`
    **kwargs : Any
        Option overrides applied over ``options``

    Attributes
    ----------
    html : mapping
        Read-only default raw HTML allowlist. Only ``<br>`` is allowed,
        without attributes.
    options : MarpOptions
        Resolved configuration

    Raises
    ------
    ConfigurationError
        If a markdown plugin fails to register or a bundled theme is invalid
    ThemeError
        If the ``theme`` option names no registered theme

    """

    html: Mapping[str, Any] = DEFAULT_HTML_ALLOWLIST

    def __init__(self, options: Mapping[str, Any] | MarpOptions | None = None, **kwargs: Any):
        """Resolve options and build the markdown processor and theme registry."""
        self.options: MarpOptions = resolve_options(options, **kwargs)
        self._engine = SlideEngine(self.options, extension=self)
        self._engine.markdown.enable(list(ALWAYS_ENABLED_RULES))
        logger.debug("Marp renderer ready with themes: %s", ", ".join(self.theme_set.names))

    @property
    def markdown(self) -> MarkdownIt:
        """The configured markdown processor."""
        return self._engine.markdown

    @property
    def theme_set(self) -> ThemeSet:
        """Registered themes."""
        return self._engine.theme_set

    def highlighter(self, code: str, lang: str | None = None, attrs: str = "") -> str:
        """Highlight fenced code; see :func:`marpy.highlight.highlight`."""
        return highlight(code, lang, attrs)

    def render(self, markdown: str) -> RenderResult:
        """Render a Markdown document into slide HTML and CSS.

        Parameters
        ----------
        markdown : str
            Markdown source

        Returns
        -------
        RenderResult
            Slide HTML, stylesheet, comments and the theme name

        Raises
        ------
        StyleMinificationError
            If CSS minification is enabled and the assembled stylesheet is invalid

        """
        return self._engine.render(markdown)

    def render_theme_style(self, theme: str | None = None) -> str:
        """Return the final stylesheet for a theme without rendering Markdown."""
        return self._engine.render_style(theme)

    # Engine hook points

    def apply_markdown_plugins(self, md: MarkdownIt) -> None:
        apply_markdown_plugins(md, self.options)

    def setup_theme_set(self, theme_set: ThemeSet) -> None:
        theme_set.meta_type = THEME_META_TYPE
        for name in BUILTIN_THEMES:
            theme_set.add(load_builtin_theme(name))

        fallback = theme_set.get(self.options.theme)
        if fallback is None:
            raise ThemeError(f"Unknown theme: {self.options.theme}", theme_name=self.options.theme)
        theme_set.default = fallback

    def theme_set_pack_options(self, base: PackOptions) -> PackOptions:
        return assemble_pack_options(base, self)

    def render_style(self, css: str) -> str:
        return finalize_styles(css, self.options.minify_css)


__all__ = ["Marp"]
