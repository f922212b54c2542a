#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/options/marp.py
"""Configuration options for the Marp renderer.

This module defines the immutable configuration record consumed by
:class:`marpy.Marp` and the pure resolver that builds it from caller input.

Examples
--------
Defaults only:

    >>> options = resolve_options()
    >>> options.minify_css, options.emoji.shortcode
    (True, 'twemoji')

camelCase names are accepted alongside snake_case ones:

    >>> resolve_options({"minifyCSS": False}).minify_css
    False

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Mapping, Optional

from marpy.constants import (
    DEFAULT_EMOJI_PROVIDER,
    DEFAULT_HTML_ALLOWLIST,
    DEFAULT_INLINE_SVG,
    DEFAULT_LOOSE_YAML,
    DEFAULT_MARKDOWN_BREAKS,
    DEFAULT_MARKDOWN_LINKIFY,
    DEFAULT_MARKDOWN_PRESET,
    DEFAULT_MATH_ENABLED,
    DEFAULT_MATH_LIB,
    DEFAULT_MINIFY_CSS,
    DEFAULT_SCRIPT_ENABLED,
    DEFAULT_SCRIPT_SOURCE,
    DEFAULT_THEME_NAME,
    OPTION_ALIASES,
    EmojiMode,
    HtmlPolicy,
    MathLib,
    ScriptSource,
)
from marpy.highlight import highlight
from marpy.options.base import CloneFrozenMixin

logger = logging.getLogger(__name__)

_MATH_LIBS = ("mathml", "mathjax")
_SCRIPT_SOURCES = ("inline", "cdn")


@dataclass(frozen=True)
class EmojiOptions(CloneFrozenMixin):
    """Emoji conversion modes.

    Parameters
    ----------
    shortcode : {"twemoji", "native"} or bool, default "twemoji"
        How ``:shortcode:`` notation is converted. ``"twemoji"`` renders an
        image from the twemoji CDN, ``"native"`` (or True) inserts the unicode
        character, False leaves the shortcode as text.
    unicode : {"twemoji", "native"} or bool, default "twemoji"
        How unicode emoji already in the text are rendered. ``"twemoji"``
        replaces them with images, anything else leaves them untouched.

    """

    shortcode: EmojiMode = field(
        default=DEFAULT_EMOJI_PROVIDER,
        metadata={"help": "Conversion mode for :shortcode: emoji"},
    )
    unicode: EmojiMode = field(
        default=DEFAULT_EMOJI_PROVIDER,
        metadata={"help": "Conversion mode for unicode emoji"},
    )

    @property
    def uses_twemoji(self) -> bool:
        """Whether either mode renders twemoji images."""
        return self.shortcode == "twemoji" or self.unicode == "twemoji"


@dataclass(frozen=True)
class MathOptions(CloneFrozenMixin):
    """Math typesetting options.

    Parameters
    ----------
    enabled : bool, default True
        Parse ``$...$`` and ``$$...$$`` as math
    lib : {"mathml", "mathjax"}, default "mathml"
        ``"mathml"`` converts TeX to MathML while rendering. ``"mathjax"``
        keeps TeX in ``\\(...\\)`` / ``\\[...\\]`` delimiters for a client-side
        typesetter.

    """

    enabled: bool = field(default=DEFAULT_MATH_ENABLED, metadata={"help": "Enable math syntax"})
    lib: MathLib = field(default=DEFAULT_MATH_LIB, metadata={"help": "Math rendering library"})

    def __post_init__(self) -> None:
        """Validate the math library name.

        Raises
        ------
        ValueError
            If ``lib`` is not a supported library.

        """
        if self.lib not in _MATH_LIBS:
            raise ValueError(f"math lib must be one of {_MATH_LIBS}, got {self.lib!r}")


@dataclass(frozen=True)
class ScriptOptions(CloneFrozenMixin):
    """Browser runtime script options.

    Parameters
    ----------
    enabled : bool, default True
        Append the runtime script to rendered HTML
    source : {"inline", "cdn"}, default "inline"
        Embed the bundled runtime, or reference it by URL
    nonce : str or None, default None
        ``nonce`` attribute for Content-Security-Policy
    src : str or None, default None
        Script URL, required when ``source`` is ``"cdn"``

    """

    enabled: bool = field(default=DEFAULT_SCRIPT_ENABLED, metadata={"help": "Append the browser runtime"})
    source: ScriptSource = field(default=DEFAULT_SCRIPT_SOURCE, metadata={"help": "Script source: inline or cdn"})
    nonce: Optional[str] = field(default=None, metadata={"help": "CSP nonce for the script element"})
    src: Optional[str] = field(default=None, metadata={"help": "Script URL for the cdn source"})

    def __post_init__(self) -> None:
        """Validate the script source.

        Raises
        ------
        ValueError
            If ``source`` is unknown, or ``"cdn"`` is used without ``src``.

        """
        if self.source not in _SCRIPT_SOURCES:
            raise ValueError(f"script source must be one of {_SCRIPT_SOURCES}, got {self.source!r}")
        if self.source == "cdn" and not self.src:
            raise ValueError("script source 'cdn' requires a src URL")


@dataclass(frozen=True)
class MarpOptions(CloneFrozenMixin):
    """Fully resolved renderer configuration.

    Instances are normally produced by :func:`resolve_options`, which
    guarantees that ``emoji``, ``math``, ``script`` and ``html`` are concrete
    values rather than None.

    Parameters
    ----------
    inline_svg : bool, default True
        Wrap each slide in an ``<svg><foreignObject>`` container
    loose_yaml : bool, default True
        Accept unquoted directive values that strict YAML rejects
    math : MathOptions
        Math typesetting options
    minify_css : bool, default True
        Minify the assembled stylesheet
    script : ScriptOptions
        Browser runtime script options
    emoji : EmojiOptions
        Emoji conversion modes
    html : bool or mapping
        Raw HTML policy. True allows every tag, False disables raw HTML,
        a mapping allows the listed tags and attributes.
    theme : str, default "default"
        Theme used by documents without a ``theme`` directive
    markdown_preset : str, default "commonmark"
        markdown-it preset name
    markdown : mapping
        Options passed to the markdown processor
    extra : mapping
        Unrecognized caller options, kept untouched

    """

    inline_svg: bool = field(default=DEFAULT_INLINE_SVG, metadata={"help": "Wrap slides in inline SVG"})
    loose_yaml: bool = field(default=DEFAULT_LOOSE_YAML, metadata={"help": "Lenient YAML for directives"})
    math: MathOptions = field(default_factory=MathOptions, metadata={"help": "Math options"})
    minify_css: bool = field(default=DEFAULT_MINIFY_CSS, metadata={"help": "Minify the output stylesheet"})
    script: ScriptOptions = field(default_factory=ScriptOptions, metadata={"help": "Browser runtime options"})
    emoji: EmojiOptions = field(default_factory=EmojiOptions, metadata={"help": "Emoji conversion modes"})
    html: HtmlPolicy = field(
        default_factory=lambda: _copy_html_policy(DEFAULT_HTML_ALLOWLIST),
        metadata={"help": "Raw HTML policy (bool or tag allowlist)"},
    )
    theme: str = field(default=DEFAULT_THEME_NAME, metadata={"help": "Fallback theme name"})
    markdown_preset: str = field(default=DEFAULT_MARKDOWN_PRESET, metadata={"help": "markdown-it preset"})
    markdown: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}),
        metadata={"help": "markdown-it processor options"},
    )
    extra: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}),
        metadata={"help": "Unrecognized options passed through untouched"},
    )


def _copy_html_policy(policy: Any) -> Any:
    if isinstance(policy, Mapping):
        return {
            tag: list(rule) if isinstance(rule, (list, tuple)) else dict(rule) if isinstance(rule, Mapping) else rule
            for tag, rule in policy.items()
        }
    return policy


def _resolve_emoji(value: Any) -> EmojiOptions:
    if isinstance(value, EmojiOptions):
        return value
    if isinstance(value, Mapping):
        return EmojiOptions(
            shortcode=value.get("shortcode", DEFAULT_EMOJI_PROVIDER),
            unicode=value.get("unicode", DEFAULT_EMOJI_PROVIDER),
        )
    return EmojiOptions()


def _resolve_math(value: Any) -> MathOptions:
    if isinstance(value, MathOptions):
        return value
    if isinstance(value, bool):
        return MathOptions(enabled=value)
    if isinstance(value, Mapping):
        known = {f.name for f in fields(MathOptions)}
        return MathOptions(**{k: v for k, v in value.items() if k in known})
    return MathOptions()


def _resolve_script(value: Any) -> ScriptOptions:
    if isinstance(value, ScriptOptions):
        return value
    if isinstance(value, bool):
        return ScriptOptions(enabled=value)
    if isinstance(value, Mapping):
        known = {f.name for f in fields(ScriptOptions)}
        return ScriptOptions(**{k: v for k, v in value.items() if k in known})
    return ScriptOptions()


def _normalize_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    return {OPTION_ALIASES.get(key, key): value for key, value in raw.items()}


def resolve_options(user: Mapping[str, Any] | MarpOptions | None = None, **kwargs: Any) -> MarpOptions:
    """Merge caller options with the built-in defaults.

    Parameters
    ----------
    user : mapping, MarpOptions or None
        Caller options. A ``MarpOptions`` instance is already resolved and is
        returned as-is when no keyword overrides are given.
    **kwargs : Any
        Additional options, applied over ``user``

    Returns
    -------
    MarpOptions
        Fully specified configuration

    Notes
    -----
    Resolution is pure: the same input always yields an equal result and the
    caller's objects are not modified. Markdown processor options always
    contain ``breaks``, ``linkify``, the ``highlight`` callback and the
    resolved ``html`` policy; a mapping given as ``markdown`` overrides them
    key by key, any other ``markdown`` value is ignored.

    """
    if isinstance(user, MarpOptions):
        if not kwargs:
            return user
        raw = {f.name: getattr(user, f.name) for f in fields(MarpOptions) if f.name != "extra"}
        raw["markdown"] = {key: value for key, value in user.markdown.items() if key != "html"}
        raw.update(user.extra)
    else:
        raw = dict(user or {})
    raw.update(kwargs)
    raw = _normalize_keys(raw)

    html = raw.pop("html", None)
    html_policy = _copy_html_policy(DEFAULT_HTML_ALLOWLIST if html is None else html)

    markdown_overrides = raw.pop("markdown", None)
    markdown: dict[str, Any] = {
        "breaks": DEFAULT_MARKDOWN_BREAKS,
        "linkify": DEFAULT_MARKDOWN_LINKIFY,
        "highlight": highlight,
        "html": html_policy,
    }
    if isinstance(markdown_overrides, Mapping):
        markdown.update(markdown_overrides)
    elif markdown_overrides is not None:
        logger.debug("Ignoring non-mapping markdown option: %r", markdown_overrides)

    resolved = MarpOptions(
        inline_svg=raw.pop("inline_svg", DEFAULT_INLINE_SVG),
        loose_yaml=raw.pop("loose_yaml", DEFAULT_LOOSE_YAML),
        math=_resolve_math(raw.pop("math", None)),
        minify_css=raw.pop("minify_css", DEFAULT_MINIFY_CSS),
        script=_resolve_script(raw.pop("script", None)),
        emoji=_resolve_emoji(raw.pop("emoji", None)),
        html=html_policy,
        theme=raw.pop("theme", DEFAULT_THEME_NAME),
        markdown_preset=raw.pop("markdown_preset", DEFAULT_MARKDOWN_PRESET),
        markdown=MappingProxyType(markdown),
        extra=MappingProxyType(raw),
    )
    return resolved


__all__ = [
    "EmojiOptions",
    "MarpOptions",
    "MathOptions",
    "ScriptOptions",
    "resolve_options",
]
