"""Shared base for marpy's frozen option records.

Renderer options, plugin options and theme pack options are frozen
dataclasses; changes are made by cloning.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Clone a frozen dataclass with some fields replaced.

    Examples
    --------
    >>> from marpy.options import ScriptOptions
    >>> ScriptOptions().create_updated(nonce="abc").nonce
    'abc'

    """

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            Copy with the given fields replaced; the original is unchanged

        """
        return replace(self, **kwargs)
