#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/engine/__init__.py
"""Slide engine: slide splitting, directives, themes and style packing."""

from marpy.engine.directives import (
    COMMENT_TOKEN,
    ENV_COMMENTS,
    ENV_GLOBAL_DIRECTIVES,
    ENV_SLIDE_SIZE,
    ENV_THEME,
)
from marpy.engine.engine import EngineExtension, PassthroughExtension, RenderResult, SlideEngine
from marpy.engine.theme import PackOptions, Theme, ThemeSet, parse_size

__all__ = [
    "COMMENT_TOKEN",
    "ENV_COMMENTS",
    "ENV_GLOBAL_DIRECTIVES",
    "ENV_SLIDE_SIZE",
    "ENV_THEME",
    "EngineExtension",
    "PackOptions",
    "PassthroughExtension",
    "RenderResult",
    "SlideEngine",
    "Theme",
    "ThemeSet",
    "parse_size",
]
