#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/themes/__init__.py
"""Bundled theme stylesheets."""

from __future__ import annotations

from importlib import resources

from marpy.constants import BUILTIN_THEMES
from marpy.exceptions import ThemeError


def load_builtin_theme(name: str) -> str:
    """Return the stylesheet of a bundled theme.

    Parameters
    ----------
    name : str
        One of ``default``, ``gaia`` or ``uncover``

    Raises
    ------
    ThemeError
        If no bundled theme has that name

    """
    if name not in BUILTIN_THEMES:
        raise ThemeError(f"Unknown built-in theme: {name}", theme_name=name)
    return (resources.files(__name__) / f"{name}.css").read_text(encoding="utf-8")


__all__ = ["load_builtin_theme"]
