#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for marpy.

All option classes are frozen dataclasses. Use :func:`resolve_options` to
build a complete :class:`MarpOptions` from caller input.
"""

from marpy.options.base import CloneFrozenMixin
from marpy.options.marp import EmojiOptions, MarpOptions, MathOptions, ScriptOptions, resolve_options

__all__ = [
    "CloneFrozenMixin",
    "EmojiOptions",
    "MarpOptions",
    "MathOptions",
    "ScriptOptions",
    "resolve_options",
]
