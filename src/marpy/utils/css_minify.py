#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/utils/css_minify.py
"""Lossless CSS minification.

The stylesheet is parsed with tinycss2 and written back compactly. Three
passes are applied while serializing, always in this order:

1. :func:`normalize_whitespace` - declaration values and block layout
2. :func:`minify_params` - at-rule parameters such as media queries
3. :func:`minify_selectors` - selectors of style rules

Only syntax is compacted. Rules, declarations and selectors keep their order
and names, and top-level comments are preserved. Duplicate selectors within
one selector list are dropped.

Examples
--------
>>> minify_css("a  >  b , a > b { color : red ; margin: 0 auto; }")
'a>b{color:red;margin:0 auto}'
>>> minify_css("@media screen and ( max-width : 10px ) { p { color: red } }")
'@media screen and (max-width:10px){p{color:red}}'

"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable, Sequence

import tinycss2
from tinycss2.serializer import serialize_identifier

from marpy.exceptions import StyleMinificationError

logger = logging.getLogger(__name__)

# At-rules whose block holds rules rather than declarations
_RULE_LIST_AT_RULES = frozenset(
    {
        "media",
        "supports",
        "document",
        "-moz-document",
        "layer",
        "container",
        "scope",
        "starting-style",
        "keyframes",
        "-webkit-keyframes",
        "-moz-keyframes",
    }
)

_VALUE_TIGHT = frozenset({","})
_PARAM_TIGHT = frozenset({",", ":"})
_SELECTOR_TIGHT = frozenset({",", ">", "+", "~", "||"})

_SAFE_IDENT = re.compile(r"^-?[A-Za-z_][A-Za-z0-9_-]*$")

TokenSerializer = Callable[[Any], str]


def _check(node: Any) -> None:
    if node.type == "error":
        raise StyleMinificationError(
            f"Invalid CSS at {node.source_line}:{node.source_column}: {node.message}",
            line=node.source_line,
            column=node.source_column,
        )


def _is_tight(token: Any, tight: frozenset[str]) -> bool:
    return token.type == "literal" and token.value in tight


def _join(tokens: Iterable[Any], tight: frozenset[str], serialize: TokenSerializer) -> str:
    """Serialize component values, collapsing whitespace.

    Whitespace and comments between two tokens become one space, or nothing
    when either neighbour is a literal in ``tight``. Leading and trailing
    whitespace is dropped.
    """
    parts: list[str] = []
    previous = None
    pending_space = False
    for token in tokens:
        if token.type in ("whitespace", "comment"):
            pending_space = True
            continue
        if pending_space and previous is not None and not _is_tight(previous, tight) and not _is_tight(token, tight):
            parts.append(" ")
        pending_space = False
        parts.append(serialize(token))
        previous = token
    return "".join(parts)


def _serializer(tight: frozenset[str]) -> TokenSerializer:
    def serialize(token: Any) -> str:
        if token.type == "function":
            return f"{serialize_identifier(token.name)}({_join(token.arguments, tight, serialize)})"
        if token.type == "() block":
            return f"({_join(token.content, tight, serialize)})"
        if token.type == "[] block":
            return f"[{_join(token.content, tight, serialize)}]"
        if token.type == "{} block":
            return f"{{{_join(token.content, tight, serialize)}}}"
        return tinycss2.serialize([token])

    return serialize


_serialize_value = _serializer(_VALUE_TIGHT)
_serialize_param = _serializer(_PARAM_TIGHT)


def normalize_whitespace(tokens: Sequence[Any]) -> str:
    """Serialize a declaration value with collapsed whitespace.

    >>> import tinycss2
    >>> normalize_whitespace(tinycss2.parse_component_value_list("  rgba( 0 , 0 , 0 , .5 )  1px "))
    'rgba(0,0,0,.5) 1px'

    """
    return _join(tokens, _VALUE_TIGHT, _serialize_value)


def minify_params(tokens: Sequence[Any]) -> str:
    """Serialize at-rule parameters compactly."""
    return _join(tokens, _PARAM_TIGHT, _serialize_param)


def _split_selector_list(tokens: Sequence[Any]) -> list[list[Any]]:
    selectors: list[list[Any]] = [[]]
    for token in tokens:
        if token.type == "literal" and token.value == ",":
            selectors.append([])
        else:
            selectors[-1].append(token)
    return selectors


def _serialize_attribute_selector(tokens: Sequence[Any]) -> str:
    significant = [token for token in tokens if token.type not in ("whitespace", "comment")]
    parts: list[str] = []
    for index, token in enumerate(significant):
        if token.type == "string" and _SAFE_IDENT.match(token.value):
            text = token.value
        else:
            text = tinycss2.serialize([token])
        if index and token.type == "ident" and significant[index - 1].type in ("ident", "string"):
            parts.append(" ")
        parts.append(text)
    return f"[{''.join(parts)}]"


def _serialize_selector_token(token: Any) -> str:
    if token.type == "[] block":
        return _serialize_attribute_selector(token.content)
    if token.type == "function":
        return f"{serialize_identifier(token.name)}({minify_selectors(token.arguments)})"
    if token.type == "() block":
        return f"({minify_selectors(token.content)})"
    return tinycss2.serialize([token])


def minify_selectors(tokens: Sequence[Any]) -> str:
    """Serialize a selector list compactly, dropping duplicate selectors.

    >>> import tinycss2
    >>> minify_selectors(tinycss2.parse_component_value_list('h1 ,  a[href="x"] > b , h1'))
    'h1,a[href=x]>b'

    """
    selectors: list[str] = []
    for selector in _split_selector_list(tokens):
        text = _join(selector, _SELECTOR_TIGHT, _serialize_selector_token)
        if text and text not in selectors:
            selectors.append(text)
    return ",".join(selectors)


def _minify_declaration(declaration: Any) -> str:
    name = serialize_identifier(declaration.name)
    if declaration.name.startswith("--"):
        value = tinycss2.serialize(declaration.value).strip()
    else:
        value = normalize_whitespace(declaration.value)
    important = "!important" if declaration.important else ""
    return f"{name}:{value}{important}"


def _minify_declarations(content: Sequence[Any]) -> str:
    items = tinycss2.parse_blocks_contents(content, skip_comments=True, skip_whitespace=True)
    parts: list[str] = []
    for index, item in enumerate(items):
        _check(item)
        if item.type == "declaration":
            text = _minify_declaration(item)
            parts.append(text if index == len(items) - 1 else f"{text};")
        else:
            parts.append(_minify_node(item, nested=True))
    return "".join(parts)


def _minify_rules(content: Sequence[Any]) -> str:
    return "".join(
        _minify_node(rule)
        for rule in tinycss2.parse_rule_list(content, skip_comments=True, skip_whitespace=True)
    )


def _minify_node(node: Any, nested: bool = False) -> str:
    """Serialize one rule. Conditional at-rules nested in a style rule hold declarations."""
    _check(node)

    if node.type == "comment":
        return f"/*{node.value}*/"

    if node.type == "qualified-rule":
        return f"{minify_selectors(node.prelude)}{{{_minify_declarations(node.content)}}}"

    if node.type == "at-rule":
        params = minify_params(node.prelude)
        head = f"@{serialize_identifier(node.at_keyword)}" + (f" {params}" if params else "")
        if node.content is None:
            return f"{head};"
        if node.lower_at_keyword in _RULE_LIST_AT_RULES and not nested:
            return f"{head}{{{_minify_rules(node.content)}}}"
        return f"{head}{{{_minify_declarations(node.content)}}}"

    return tinycss2.serialize([node])


def minify_css(css: str) -> str:
    """Minify a stylesheet.

    Parameters
    ----------
    css : str
        Stylesheet to minify

    Returns
    -------
    str
        Minified stylesheet. Minifying the result again returns it unchanged.

    Raises
    ------
    StyleMinificationError
        If the stylesheet contains a syntax error

    """
    nodes = tinycss2.parse_stylesheet(css, skip_comments=False, skip_whitespace=True)
    minified = "".join(_minify_node(node) for node in nodes)
    logger.debug("Minified stylesheet from %d to %d characters", len(css), len(minified))
    return minified


__all__ = ["minify_css", "minify_params", "minify_selectors", "normalize_whitespace"]
