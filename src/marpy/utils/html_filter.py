#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/utils/html_filter.py
"""Allowlist filtering for raw HTML.

Raw HTML written in Markdown is filtered against a tag allowlist such as
``{"br": [], "img": ["src", "alt"], "a": {"href": True}}``:

- Tags missing from the allowlist are escaped and appear as text.
- A list of names keeps only those attributes, and True keeps all of them.
- A mapping keeps an attribute when its rule is True, or passes the value
  through the rule when it is callable; the result replaces the value, and a
  None or False result drops the attribute.
- URL attributes pointing at a dangerous scheme are always dropped.
- HTML comments are removed.

Sanitizing is done by bleach. Callable rules are applied afterwards on a
BeautifulSoup tree, since bleach attribute filters can only keep or drop.
"""

from __future__ import annotations

import html
import logging
import re
from typing import Any, Mapping, Sequence

import bleach
from bleach.css_sanitizer import CSSSanitizer
from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from marpy.constants import DANGEROUS_SCHEMES, URL_ATTRIBUTES, URL_PROTOCOLS

logger = logging.getLogger(__name__)

_URL_NOISE = re.compile(r"[\x00-\x20]")

# Separates the raw HTML pieces of one document while they are sanitized together
_PIECE_SEPARATOR = "\ue000"

_SERIALIZER = HTMLFormatter(entity_substitution=EntitySubstitution.substitute_xml, void_element_close_prefix=None)


def is_url_scheme_dangerous(url: str) -> bool:
    """Check if a URL uses a dangerous scheme.

    Whitespace and control characters are ignored, as browsers ignore them
    when resolving the scheme.

    Examples
    --------
    >>> is_url_scheme_dangerous("https://example.com")
    False
    >>> is_url_scheme_dangerous(" java\\tscript:alert(1)")
    True
    >>> is_url_scheme_dangerous("/relative/path")
    False

    """
    if not url or not url.strip():
        return False

    url_lower = _URL_NOISE.sub("", html.unescape(url)).lower()
    return any(url_lower.startswith(scheme) for scheme in DANGEROUS_SCHEMES)


def is_url_safe(url: str) -> bool:
    """Check if a URL is safe (no dangerous schemes).

    >>> is_url_safe("javascript:alert('xss')")
    False

    """
    return not is_url_scheme_dangerous(url)


def _is_url_attribute_safe(name: str, value: str) -> bool:
    return name not in URL_ATTRIBUTES or not is_url_scheme_dangerous(value)


class AllowlistFilter:
    """Sanitize raw HTML against a tag allowlist.

    Parameters
    ----------
    allowlist : mapping
        Tag names mapped to their attribute rule: a list of attribute names,
        True for every attribute, or a mapping of attribute names to True,
        False or a callable transforming the value. Tags mapped to False are
        not allowed.

    Examples
    --------
    >>> AllowlistFilter({"img": ["src"]}).clean('<img src="a.png" onerror="x()">')
    '<img src="a.png">'
    >>> AllowlistFilter({"br": []}).clean("<script>")
    '&lt;script&gt;'

    """

    def __init__(self, allowlist: Mapping[str, Any]):
        """Build the bleach cleaner for ``allowlist``."""
        self.rules: dict[str, Any] = {
            tag.lower(): rule for tag, rule in allowlist.items() if rule is not None and rule is not False
        }
        self._transforms = {
            tag: {name: rule for name, rule in attrs.items() if callable(rule)}
            for tag, attrs in self.rules.items()
            if isinstance(attrs, Mapping) and any(callable(rule) for rule in attrs.values())
        }
        self._cleaner = bleach.Cleaner(
            tags=frozenset(self.rules),
            attributes=self._keep_attribute,
            protocols=URL_PROTOCOLS,
            strip=False,
            strip_comments=True,
            css_sanitizer=CSSSanitizer(),
        )

    def _keep_attribute(self, tag: str, name: str, value: str) -> bool:
        rule = self.rules.get(tag)
        if rule is True:
            allowed = True
        elif isinstance(rule, Mapping):
            attr_rule = rule.get(name, False)
            allowed = attr_rule is True or callable(attr_rule)
        else:
            allowed = rule is not None and name in rule

        if allowed and not _is_url_attribute_safe(name, value):
            logger.debug("Dropped unsafe %s attribute on <%s>", name, tag)
            return False
        return allowed

    def _apply_transforms(self, cleaned: str) -> str:
        soup = BeautifulSoup(cleaned, "html.parser", multi_valued_attributes=None)
        for tag_name, transforms in self._transforms.items():
            for element in soup.find_all(tag_name):
                for name, transform in transforms.items():
                    if name not in element.attrs:
                        continue
                    transformed = transform(element.attrs[name] or "")
                    if transformed is None or transformed is False or not _is_url_attribute_safe(
                        name, str(transformed)
                    ):
                        del element.attrs[name]
                    else:
                        element.attrs[name] = str(transformed)
        return soup.decode(formatter=_SERIALIZER)

    def clean(self, content: str) -> str:
        """Sanitize one HTML fragment.

        Unclosed allowed tags are closed at the end of the fragment.
        """
        cleaned = self._cleaner.clean(content)
        if self._transforms:
            cleaned = self._apply_transforms(cleaned)
        return cleaned

    def clean_pieces(self, pieces: Sequence[str]) -> list[str]:
        """Sanitize consecutive pieces of raw HTML as one fragment.

        A tag opened in one piece and closed in a later one stays paired, as
        it would in the rendered document.

        Returns
        -------
        list of str
            One sanitized string per input piece
        """
        if not pieces:
            return []
        joined = _PIECE_SEPARATOR.join(piece.replace(_PIECE_SEPARATOR, "") for piece in pieces)
        return self.clean(joined).split(_PIECE_SEPARATOR)


def filter_html(content: str, allowlist: Mapping[str, Any]) -> str:
    """Filter an HTML fragment against an allowlist.

    Examples
    --------
    >>> filter_html("a<br>b<b>c</b>", {"br": []})
    'a<br>b&lt;b&gt;c&lt;/b&gt;'

    """
    return AllowlistFilter(allowlist).clean(content)


__all__ = ["AllowlistFilter", "filter_html", "is_url_safe", "is_url_scheme_dangerous"]
