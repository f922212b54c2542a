#  Copyright (c) 2025 Tom Villani, Ph.D.
"""marpy - Markdown presentation slides rendered to HTML and CSS.

marpy turns Markdown into slide decks. Slides are separated by ``---``,
configured through directives in front matter or HTML comments, and styled
by CSS themes.

Key Features
------------
- Bundled ``default``, ``gaia`` and ``uncover`` themes with size presets
- Emoji shortcodes rendered as twemoji images or unicode characters
- TeX math rendered as MathML, or kept for MathJax
- Auto-fitting headers with ``<!-- fit -->``
- Pygments syntax highlighting for fenced code
- Raw HTML filtered through a tag allowlist
- Minified output stylesheet

Examples
--------
    >>> from marpy import Marp
    >>> marp = Marp(script=False)
    >>> result = marp.render("# Hello\\n\\n---\\n\\n## World")
    >>> result.html.count("<section")
    2

Options can be given as a mapping, as keywords, or both:

    >>> marp = Marp({"emoji": {"shortcode": "native"}}, minify_css=False)

"""

from marpy.exceptions import (
    ConfigurationError,
    MarpyError,
    RenderingError,
    StyleMinificationError,
    ThemeError,
)
from marpy.highlight import highlight
from marpy.marp import Marp
from marpy.options import EmojiOptions, MarpOptions, MathOptions, ScriptOptions, resolve_options

__version__ = "0.3.0"

__all__ = [
    "ConfigurationError",
    "EmojiOptions",
    "Marp",
    "MarpOptions",
    "MarpyError",
    "MathOptions",
    "RenderingError",
    "ScriptOptions",
    "StyleMinificationError",
    "ThemeError",
    "__version__",
    "highlight",
    "resolve_options",
]
