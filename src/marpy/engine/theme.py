#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/engine/theme.py
"""Theme stylesheets and the theme registry.

A theme is a plain CSS stylesheet carrying metadata in comments::

    /*
     * @theme gaia
     * @auto-scaling true
     * @size 4:3 960px 720px
     */
    section { width: 1280px; height: 720px; }

``@theme`` names the theme and is always recognized. Other keys are only
collected when declared in :attr:`ThemeSet.meta_type`: ``str`` keeps the last
value, ``list`` keeps every value in order.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

import tinycss2

from marpy.constants import CONTAINER_CLASS, DEFAULT_SLIDE_HEIGHT, DEFAULT_SLIDE_WIDTH
from marpy.exceptions import RenderingError, ThemeError
from marpy.options.base import CloneFrozenMixin

logger = logging.getLogger(__name__)

_META_LINE = re.compile(r"^@([\w-]+)\s+(.+?)\s*$")


@dataclass(frozen=True)
class Theme:
    """A parsed theme stylesheet.

    Parameters
    ----------
    name : str
        Theme name from the ``@theme`` metadata
    css : str
        Theme stylesheet
    meta : mapping
        Custom metadata declared by the registry's ``meta_type``
    width : int
        Slide width in pixels
    height : int
        Slide height in pixels

    """

    name: str
    css: str
    meta: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    width: int = DEFAULT_SLIDE_WIDTH
    height: int = DEFAULT_SLIDE_HEIGHT

    @classmethod
    def from_css(cls, css: str, meta_type: Mapping[str, type] | None = None) -> Theme:
        """Parse a theme stylesheet.

        Parameters
        ----------
        css : str
            Theme stylesheet
        meta_type : mapping, optional
            Custom metadata keys and their value kind (``str`` or ``list``)

        Returns
        -------
        Theme
            Parsed theme

        Raises
        ------
        ThemeError
            If the stylesheet has no ``@theme`` name

        """
        meta_type = meta_type or {}
        nodes = tinycss2.parse_stylesheet(css, skip_comments=False, skip_whitespace=True)

        name: str | None = None
        meta: dict[str, Any] = {}
        width, height = DEFAULT_SLIDE_WIDTH, DEFAULT_SLIDE_HEIGHT

        for node in nodes:
            if node.type == "comment":
                for key, value in _iter_meta(node.value):
                    if key == "theme":
                        name = value
                    elif meta_type.get(key) is list:
                        meta.setdefault(key, []).append(value)
                    elif meta_type.get(key) is str:
                        meta[key] = value
            elif node.type == "qualified-rule" and tinycss2.serialize(node.prelude).strip() == "section":
                width, height = _section_size(node, width, height)

        if not name:
            raise ThemeError("Theme stylesheet has no @theme metadata")

        frozen_meta = {key: tuple(value) if isinstance(value, list) else value for key, value in meta.items()}
        return cls(name=name, css=css, meta=MappingProxyType(frozen_meta), width=width, height=height)


def _iter_meta(comment: str) -> Iterator[tuple[str, str]]:
    for line in comment.splitlines():
        match = _META_LINE.match(line.strip().lstrip("*!").strip())
        if match:
            yield match.group(1), match.group(2)


def _section_size(rule: Any, width: int, height: int) -> tuple[int, int]:
    for decl in tinycss2.parse_declaration_list(rule.content, skip_comments=True, skip_whitespace=True):
        if decl.type != "declaration" or decl.lower_name not in ("width", "height"):
            continue
        values = [token for token in decl.value if token.type not in ("whitespace", "comment")]
        if len(values) == 1 and values[0].type == "dimension" and values[0].lower_unit == "px":
            if decl.lower_name == "width":
                width = int(values[0].value)
            else:
                height = int(values[0].value)
    return width, height


def parse_size(value: str) -> tuple[str, int, int] | None:
    """Parse a ``@size`` metadata value such as ``"4:3 960px 720px"``.

    Returns
    -------
    tuple or None
        ``(name, width, height)``, or None when the value is malformed

    """
    parts = value.split()
    if len(parts) != 3:
        return None
    name, raw_width, raw_height = parts
    try:
        return name, int(float(raw_width.removesuffix("px"))), int(float(raw_height.removesuffix("px")))
    except ValueError:
        return None


@dataclass(frozen=True)
class PackOptions(CloneFrozenMixin):
    """Options for packing a theme into the final stylesheet.

    Parameters
    ----------
    before : str
        CSS placed ahead of the theme stylesheet
    after : str
        CSS placed after the theme and container styles
    inline_svg : bool
        Emit container styles for inline SVG slides
    width : int or None
        Slide width override in pixels
    height : int or None
        Slide height override in pixels

    """

    before: str = ""
    after: str = ""
    inline_svg: bool = True
    width: Optional[int] = None
    height: Optional[int] = None


class ThemeSet:
    """Registry of themes available to a renderer.

    Examples
    --------
    >>> theme_set = ThemeSet()
    >>> theme = theme_set.add("/* @theme plain */ section { color: red; }")
    >>> theme_set.default = theme
    >>> theme_set.get("missing", fallback=True).name
    'plain'

    """

    def __init__(self, meta_type: Mapping[str, type] | None = None):
        """Initialize an empty registry."""
        self._themes: dict[str, Theme] = {}
        self._meta_type: Mapping[str, type] = MappingProxyType(dict(meta_type or {}))
        self.default: Theme | None = None

    @property
    def meta_type(self) -> Mapping[str, type]:
        """Custom metadata recognized when parsing theme stylesheets."""
        return self._meta_type

    @meta_type.setter
    def meta_type(self, value: Mapping[str, type]) -> None:
        self._meta_type = MappingProxyType(dict(value))

    def __contains__(self, name: object) -> bool:
        return name in self._themes

    def __iter__(self) -> Iterator[Theme]:
        return iter(self._themes.values())

    def __len__(self) -> int:
        return len(self._themes)

    @property
    def names(self) -> list[str]:
        """Registered theme names in registration order."""
        return list(self._themes)

    def add(self, css: str) -> Theme:
        """Parse and register a theme stylesheet.

        Raises
        ------
        ThemeError
            If the stylesheet is not a valid theme, or a theme with the same
            name is already registered

        """
        return self.add_theme(Theme.from_css(css, self._meta_type))

    def add_theme(self, theme: Theme) -> Theme:
        """Register an already parsed theme."""
        if theme.name in self._themes:
            raise ThemeError(f"Theme '{theme.name}' is already registered", theme_name=theme.name)
        self._themes[theme.name] = theme
        logger.debug("Registered theme: %s", theme.name)
        return theme

    def get(self, name: str | None, fallback: bool = False) -> Theme | None:
        """Look up a theme by name.

        Parameters
        ----------
        name : str or None
            Theme name
        fallback : bool, default False
            Return the default theme when ``name`` is missing or unknown

        """
        theme = self._themes.get(name) if name else None
        if theme is None and fallback:
            if name:
                logger.debug("Unknown theme '%s', using default theme", name)
            return self.default
        return theme

    def pack(self, name: str | None, options: PackOptions | None = None) -> str:
        """Build the stylesheet for a theme.

        The result is ``before``, the theme stylesheet, the slide container
        styles and ``after``, in that order.

        Raises
        ------
        RenderingError
            If neither ``name`` nor a default theme is available

        """
        options = options or PackOptions()
        theme = self.get(name, fallback=True)
        if theme is None:
            raise RenderingError(f"Theme '{name}' is not registered and no default theme is set")

        width = options.width or theme.width
        height = options.height or theme.height

        parts = [options.before, theme.css, _container_css(width, height, options.inline_svg), options.after]
        return "\n".join(part for part in parts if part)


def _container_css(width: int, height: int, inline_svg: bool) -> str:
    if inline_svg:
        section = f"div.{CONTAINER_CLASS} > svg > foreignObject > section"
    else:
        section = f"div.{CONTAINER_CLASS} > section"

    css = (
        f"{section} {{ width: {width}px; height: {height}px; box-sizing: border-box; "
        "overflow: hidden; position: relative; scroll-snap-align: center center; }\n"
        f"{section}[data-marpit-pagination]::after {{ content: attr(data-marpit-pagination); "
        "position: absolute; right: 30px; bottom: 21px; }"
    )
    if inline_svg:
        css += f"\ndiv.{CONTAINER_CLASS} > svg {{ display: block; height: auto; width: 100%; }}"
    return css


__all__ = ["PackOptions", "Theme", "ThemeSet", "parse_size"]
