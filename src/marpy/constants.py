#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for marpy.

This module centralizes the hardcoded values and default configuration
constants used across marpy. Constants are organized by category:

1. Type Definitions - All Literal types and type aliases
2. Rendering Defaults - Flags applied when the caller omits them
3. Markdown Processor - Options and rule names for markdown-it
4. Themes - Metadata schema and slide dimensions
5. Plugins - Emoji, math and script settings
6. Security Constants - URL scheme checks for raw HTML
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Literal, Mapping, Sequence, Union

# =============================================================================
# Type Definitions - All Literal Types and Type Aliases
# =============================================================================

EmojiProvider = Literal["twemoji", "native"]
EmojiMode = Union[EmojiProvider, bool]
MathLib = Literal["mathml", "mathjax"]
ScriptSource = Literal["inline", "cdn"]

AttributeRule = Union[bool, Callable[[str], str]]
TagRule = Union[Sequence[str], Mapping[str, AttributeRule]]
HtmlAllowlist = Mapping[str, TagRule]
HtmlPolicy = Union[bool, HtmlAllowlist]

# =============================================================================
# Rendering Defaults
# =============================================================================

DEFAULT_INLINE_SVG = True
DEFAULT_LOOSE_YAML = True
DEFAULT_MATH_ENABLED = True
DEFAULT_MINIFY_CSS = True
DEFAULT_SCRIPT_ENABLED = True

# Only line breaks are allowed when the caller does not configure raw HTML
DEFAULT_HTML_ALLOWLIST: Mapping[str, tuple[str, ...]] = MappingProxyType({"br": ()})

# camelCase option names accepted alongside their snake_case equivalents
OPTION_ALIASES: dict[str, str] = {
    "inlineSVG": "inline_svg",
    "looseYAML": "loose_yaml",
    "minifyCSS": "minify_css",
}

# =============================================================================
# Markdown Processor
# =============================================================================

DEFAULT_MARKDOWN_PRESET = "commonmark"
DEFAULT_MARKDOWN_BREAKS = True
DEFAULT_MARKDOWN_LINKIFY = True

# Rules enabled on the processor after construction regardless of configuration
ALWAYS_ENABLED_RULES: tuple[str, ...] = ("table", "linkify", "strikethrough")

# =============================================================================
# Themes
# =============================================================================

BUILTIN_THEMES: tuple[str, ...] = ("default", "gaia", "uncover")
DEFAULT_THEME_NAME = "default"

DEFAULT_SLIDE_WIDTH = 1280
DEFAULT_SLIDE_HEIGHT = 720

# Custom theme metadata recognized in ``/* @key value */`` comments
THEME_META_TYPE: Mapping[str, type] = MappingProxyType(
    {
        "auto-scaling": str,
        "size": list,
    }
)

CONTAINER_CLASS = "marpit"

# =============================================================================
# Directives
# =============================================================================

GLOBAL_DIRECTIVES: frozenset[str] = frozenset({"theme", "style", "headingDivider", "size"})
LOCAL_DIRECTIVES: frozenset[str] = frozenset({"class", "paginate", "backgroundColor", "color"})

# =============================================================================
# Plugins
# =============================================================================

DEFAULT_EMOJI_PROVIDER: EmojiProvider = "twemoji"
TWEMOJI_BASE_URL = "https://cdn.jsdelivr.net/gh/jdecked/twemoji@15.1.0/assets/svg/"
TWEMOJI_EXTENSION = ".svg"

DEFAULT_MATH_LIB: MathLib = "mathml"

DEFAULT_SCRIPT_SOURCE: ScriptSource = "inline"

FITTING_COMMENT = "fit"

# =============================================================================
# Security Constants
# =============================================================================

DANGEROUS_SCHEMES = {
    "javascript:",
    "vbscript:",
    "data:text/html",
    "data:text/javascript",
    "data:application/javascript",
    "data:application/x-javascript",
}

URL_ATTRIBUTES: frozenset[str] = frozenset({"href", "src", "action", "formaction", "xlink:href"})

# Schemes kept in URL attributes; relative URLs are always kept
URL_PROTOCOLS: frozenset[str] = frozenset({"http", "https", "mailto", "tel", "ftp", "data"})
