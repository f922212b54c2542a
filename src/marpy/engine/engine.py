#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/engine/engine.py
"""Base slide rendering engine.

:class:`SlideEngine` turns Markdown into slide HTML and a theme stylesheet.
Behaviour beyond plain slides is supplied by an :class:`EngineExtension`,
which the engine calls at four fixed points:

1. ``apply_markdown_plugins`` once, after the engine's own markdown rules
2. ``setup_theme_set`` once, after the theme registry is created
3. ``theme_set_pack_options`` on every render, to adjust how the theme is packed
4. ``render_style`` on every render, to post-process the packed stylesheet

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.front_matter import front_matter_plugin

from marpy.constants import CONTAINER_CLASS, DEFAULT_SLIDE_HEIGHT, DEFAULT_SLIDE_WIDTH
from marpy.engine.directives import (
    ENV_COMMENTS,
    ENV_GLOBAL_DIRECTIVES,
    ENV_SLIDE_SIZE,
    ENV_THEME,
    SLIDE_CLOSE,
    SLIDE_OPEN,
    comments_plugin,
    make_directives_rule,
    make_slide_rule,
)
from marpy.engine.theme import PackOptions, Theme, ThemeSet
from marpy.options.marp import MarpOptions

logger = logging.getLogger(__name__)

SVG_OPEN = "marpit_inline_svg_open"
SVG_CLOSE = "marpit_inline_svg_close"
SVG_CONTENT_OPEN = "marpit_inline_svg_content_open"
SVG_CONTENT_CLOSE = "marpit_inline_svg_content_close"


@dataclass(frozen=True)
class RenderResult:
    """Output of a render call.

    Parameters
    ----------
    html : str
        Slide markup wrapped in the container element
    css : str
        Final stylesheet
    comments : list of list of str
        Plain (non-directive) comments, one list per slide
    theme : str or None
        Name of the theme used for the stylesheet

    """

    html: str
    css: str
    comments: list[list[str]] = field(default_factory=list)
    theme: str | None = None


class EngineExtension(ABC):
    """Hook points through which a renderer customizes :class:`SlideEngine`."""

    @abstractmethod
    def apply_markdown_plugins(self, md: MarkdownIt) -> None:
        """Register additional rules on the markdown processor."""

    @abstractmethod
    def setup_theme_set(self, theme_set: ThemeSet) -> None:
        """Declare theme metadata and register themes."""

    @abstractmethod
    def theme_set_pack_options(self, base: PackOptions) -> PackOptions:
        """Return the options used to pack the theme stylesheet."""

    @abstractmethod
    def render_style(self, css: str) -> str:
        """Post-process the packed stylesheet."""


class PassthroughExtension(EngineExtension):
    """Extension that leaves every hook point unchanged."""

    def apply_markdown_plugins(self, md: MarkdownIt) -> None:
        pass

    def setup_theme_set(self, theme_set: ThemeSet) -> None:
        pass

    def theme_set_pack_options(self, base: PackOptions) -> PackOptions:
        return base

    def render_style(self, css: str) -> str:
        return css


def _wrap_inline_svg(state: Any) -> None:
    if state.inlineMode:
        return

    wrapped: list[Token] = []
    for token in state.tokens:
        if token.type == SLIDE_OPEN:
            wrapped.append(Token(SVG_OPEN, "svg", 1, block=True))
            wrapped.append(Token(SVG_CONTENT_OPEN, "foreignObject", 1, block=True))
            wrapped.append(token)
        elif token.type == SLIDE_CLOSE:
            wrapped.append(token)
            wrapped.append(Token(SVG_CONTENT_CLOSE, "foreignObject", -1, block=True))
            wrapped.append(Token(SVG_CLOSE, "svg", -1, block=True))
        else:
            wrapped.append(token)
    state.tokens = wrapped


def _slide_size(env: Any) -> tuple[int, int]:
    return env.get(ENV_SLIDE_SIZE, (DEFAULT_SLIDE_WIDTH, DEFAULT_SLIDE_HEIGHT))


def _render_svg_open(self: Any, tokens: Sequence[Token], idx: int, options: Any, env: Any) -> str:
    width, height = _slide_size(env)
    return f'<svg data-marpit-svg="" viewBox="0 0 {width} {height}">'


def _render_svg_content_open(self: Any, tokens: Sequence[Token], idx: int, options: Any, env: Any) -> str:
    width, height = _slide_size(env)
    return f'<foreignObject width="{width}" height="{height}">'


class SlideEngine:
    """Render Markdown into slides.

    Parameters
    ----------
    options : MarpOptions
        Resolved configuration
    extension : EngineExtension, optional
        Hook implementation; defaults to :class:`PassthroughExtension`

    Examples
    --------
    >>> from marpy.options import resolve_options
    >>> engine = SlideEngine(resolve_options(inline_svg=False))
    >>> engine.markdown.render("# Title").startswith("<section")
    True

    """

    def __init__(self, options: MarpOptions, extension: EngineExtension | None = None):
        """Build the markdown processor and theme registry."""
        self.options = options
        self.extension = extension or PassthroughExtension()
        self.theme_set = ThemeSet()
        self.markdown = self._build_markdown()
        self.extension.apply_markdown_plugins(self.markdown)
        self.extension.setup_theme_set(self.theme_set)

    def _build_markdown(self) -> MarkdownIt:
        md = MarkdownIt(self.options.markdown_preset, dict(self.options.markdown))

        md.use(front_matter_plugin)
        md.use(comments_plugin)
        md.core.ruler.after("inline", "marpit_slide", make_slide_rule(self.options.loose_yaml))
        md.core.ruler.after(
            "marpit_slide", "marpit_directives", make_directives_rule(self.theme_set, self.options.loose_yaml)
        )
        if self.options.inline_svg:
            md.core.ruler.after("marpit_directives", "marpit_inline_svg", _wrap_inline_svg)
            md.add_render_rule(SVG_OPEN, _render_svg_open)
            md.add_render_rule(SVG_CONTENT_OPEN, _render_svg_content_open)
        return md

    def render(self, markdown: str) -> RenderResult:
        """Render a Markdown document.

        Parameters
        ----------
        markdown : str
            Markdown source

        Returns
        -------
        RenderResult
            Slide HTML, the final stylesheet and collected comments

        """
        env: dict[str, Any] = {}
        tokens = self.markdown.parse(markdown, env)
        body = self.markdown.renderer.render(tokens, self.markdown.options, env)
        html = f'<div class="{CONTAINER_CLASS}">{body}</div>'

        theme: Theme | None = env.get(ENV_THEME)
        theme_name = theme.name if theme else None
        css = self.render_style(theme_name, env)

        logger.debug("Rendered %d slide(s) with theme %s", len(env.get(ENV_COMMENTS, [])), theme_name)
        return RenderResult(html=html, css=css, comments=env.get(ENV_COMMENTS, []), theme=theme_name)

    def render_style(self, theme: str | None, env: dict[str, Any] | None = None) -> str:
        """Build the final stylesheet for ``theme``.

        Parameters
        ----------
        theme : str or None
            Theme name; unknown names fall back to the default theme
        env : dict, optional
            Render environment of the document, for slide size overrides and
            the ``style`` directive, which is appended after the theme

        """
        env = env or {}
        base = PackOptions(inline_svg=self.options.inline_svg)
        if ENV_SLIDE_SIZE in env:
            width, height = env[ENV_SLIDE_SIZE]
            base = base.create_updated(width=width, height=height)
        style = env.get(ENV_GLOBAL_DIRECTIVES, {}).get("style")
        if style:
            base = base.create_updated(after=str(style))

        pack_options = self.extension.theme_set_pack_options(base)
        packed = self.theme_set.pack(theme, pack_options)
        return self.extension.render_style(packed)


__all__ = [
    "EngineExtension",
    "PassthroughExtension",
    "RenderResult",
    "SlideEngine",
]
