#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/engine/directives.py
"""Comments, front matter and directives.

Directives are ``key: value`` pairs written in YAML front matter or in HTML
comments::

    ---
    theme: gaia
    paginate: true
    ---

    <!-- _class: lead -->

Local directives (``class``, ``paginate``, ``backgroundColor``, ``color``)
apply to the slide they appear on and every following slide; prefixing the
key with ``_`` limits it to that slide. ``theme``, ``size``, ``style`` and
``headingDivider`` are global. ``style`` is appended to the theme stylesheet,
and ``headingDivider`` starts a new slide at top-level headings of the given
levels. Unknown keys are ignored, and comments that hold no known directive
are kept as plain comments.

HTML comments are recognized whatever the raw HTML policy is, so directives
keep working when raw HTML is disabled.

"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Callable, MutableMapping, Sequence

import yaml
from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock
from markdown_it.rules_core import StateCore
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token

from marpy.constants import DEFAULT_SLIDE_HEIGHT, DEFAULT_SLIDE_WIDTH, GLOBAL_DIRECTIVES, LOCAL_DIRECTIVES

if TYPE_CHECKING:
    from marpy.engine.theme import ThemeSet

logger = logging.getLogger(__name__)

# Keys of the per-render environment shared between engine rules and plugins
ENV_COMMENTS = "marpit_comments"
ENV_GLOBAL_DIRECTIVES = "marpit_global_directives"
ENV_THEME = "marpit_theme"
ENV_SLIDE_SIZE = "marpit_slide_size"

COMMENT_TOKEN = "marpit_comment"
SLIDE_OPEN = "marpit_slide_open"
SLIDE_CLOSE = "marpit_slide_close"

_LOOSE_LINE = re.compile(r"^(\s*_?[A-Za-z][\w-]*\s*:[ \t]+)(.+?)\s*$")
_DIRECTIVE_KEYS = GLOBAL_DIRECTIVES | LOCAL_DIRECTIVES
_YAML_INDICATORS = "!&*[]{}%@`,?"

_INT_TAG = "tag:yaml.org,2002:int"
_FLOAT_TAG = "tag:yaml.org,2002:float"


class DirectiveLoader(yaml.SafeLoader):
    """Safe YAML loader that reads base 60 numbers such as ``4:3`` as strings."""


DirectiveLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in (_INT_TAG, _FLOAT_TAG)]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
DirectiveLoader.add_implicit_resolver(
    _INT_TAG,
    re.compile(r"^(?:[-+]?0b[0-1_]+|[-+]?0[0-7_]+|[-+]?(?:0|[1-9][0-9_]*)|[-+]?0x[0-9a-fA-F_]+)$"),
    list("-+0123456789"),
)
DirectiveLoader.add_implicit_resolver(
    _FLOAT_TAG,
    re.compile(
        r"^(?:[-+]?(?:[0-9][0-9_]*)\.[0-9_]*(?:[eE][-+][0-9]+)?"
        r"|\.[0-9][0-9_]*(?:[eE][-+][0-9]+)?"
        r"|[-+]?\.(?:inf|Inf|INF)"
        r"|\.(?:nan|NaN|NAN))$"
    ),
    list("-+0123456789."),
)


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _needs_quotes(value: str) -> bool:
    return ":" in value or "#" in value or value[0] in _YAML_INDICATORS


def loosen_yaml(text: str) -> str:
    """Quote directive values so strict YAML reads them as plain strings.

    Only values of known directives are rewritten, and only when they contain
    a colon or a hash, or start with a YAML indicator character. Quoted values
    are left alone.

    Examples
    --------
    >>> loosen_yaml("backgroundColor: #fff")
    'backgroundColor: "#fff"'

    """
    lines = []
    for line in text.splitlines():
        match = _LOOSE_LINE.match(line)
        if match and match.group(1).strip().rstrip(":").strip().lstrip("_") in _DIRECTIVE_KEYS:
            value = match.group(2)
            if value[0] not in "\"'" and _needs_quotes(value):
                line = match.group(1) + _quote(value)
        lines.append(line)
    return "\n".join(lines)


def parse_directives(text: str, loose: bool = False) -> dict[str, Any] | None:
    """Parse comment or front matter text as a directive mapping.

    Keys that are not known directives are dropped.

    Returns
    -------
    dict or None
        The directives, or None when the text is not a YAML mapping holding
        at least one known directive

    """
    try:
        data = yaml.load(loosen_yaml(text) if loose else text, Loader=DirectiveLoader)
    except yaml.YAMLError as exc:
        logger.debug("Not a directive comment (%s): %r", exc.__class__.__name__, text)
        return None
    if not isinstance(data, dict):
        return None
    directives = {
        key: value for key, value in data.items() if isinstance(key, str) and key.lstrip("_") in _DIRECTIVE_KEYS
    }
    return directives or None


def comment_block(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    """Block rule turning a standalone ``<!-- ... -->`` into a comment token."""
    pos = state.bMarks[startLine] + state.tShift[startLine]
    if state.sCount[startLine] - state.blkIndent >= 4:
        return False
    if not state.src.startswith("<!--", pos):
        return False

    close = state.src.find("-->", pos + 4)
    if close < 0:
        return False
    end = close + 3

    line = startLine
    while line < endLine and state.eMarks[line] < end:
        line += 1
    if line >= endLine or state.src[end : state.eMarks[line]].strip():
        return False

    if silent:
        return True

    token = state.push(COMMENT_TOKEN, "", 0)
    token.content = state.src[pos + 4 : close].strip()
    token.map = [startLine, line + 1]
    token.block = True
    state.line = line + 1
    return True


def comment_inline(state: StateInline, silent: bool) -> bool:
    """Inline rule turning ``<!-- ... -->`` into a comment token."""
    pos = state.pos
    if not state.src.startswith("<!--", pos):
        return False

    close = state.src.find("-->", pos + 4)
    if close < 0 or close + 3 > state.posMax:
        return False

    if not silent:
        token = state.push(COMMENT_TOKEN, "", 0)
        token.content = state.src[pos + 4 : close].strip()
    state.pos = close + 3
    return True


def _heading_divider_levels(value: Any) -> frozenset[int]:
    """Heading levels that start a new slide for a ``headingDivider`` value.

    A number ``n`` selects levels 1 to ``n``; a list selects its levels.

    >>> sorted(_heading_divider_levels(2))
    [1, 2]
    >>> sorted(_heading_divider_levels([1, 3]))
    [1, 3]

    """
    if isinstance(value, bool):
        return frozenset()
    if isinstance(value, int):
        return frozenset(range(1, min(value, 6) + 1))
    if isinstance(value, list):
        return frozenset(level for level in value if isinstance(level, int) and not isinstance(level, bool))
    return frozenset()


def _find_heading_divider(tokens: Sequence[Token], loose_yaml: bool) -> frozenset[int]:
    value = None
    for token in tokens:
        if token.type in ("front_matter", COMMENT_TOKEN):
            candidates = [token]
        elif token.type == "inline" and token.children:
            candidates = [child for child in token.children if child.type == COMMENT_TOKEN]
        else:
            continue
        for candidate in candidates:
            directives = parse_directives(candidate.content, loose_yaml) or {}
            if "headingDivider" in directives:
                value = directives["headingDivider"]
    return _heading_divider_levels(value)


def make_slide_rule(loose_yaml: bool) -> Callable[[StateCore], None]:
    """Build the core rule wrapping slides in sections.

    Top-level ``---`` rulers separate slides. When a ``headingDivider``
    directive is present, top-level headings of the selected levels also
    start a new slide, unless they already open one.
    """

    def split_slides(state: StateCore) -> None:
        if state.inlineMode:
            return

        divider_levels = _find_heading_divider(state.tokens, loose_yaml)
        slides: list[Token] = []
        index = 0
        has_content = False

        def open_slide() -> Token:
            token = Token(SLIDE_OPEN, "section", 1)
            token.attrSet("id", str(index + 1))
            token.meta = {"marpit_slide": index}
            token.block = True
            return token

        def close_slide() -> Token:
            token = Token(SLIDE_CLOSE, "section", -1)
            token.block = True
            return token

        slides.append(open_slide())
        for token in state.tokens:
            is_ruler = token.type == "hr" and token.level == 0
            is_divider = (
                token.type == "heading_open"
                and token.level == 0
                and has_content
                and int(token.tag[1:]) in divider_levels
            )
            if is_ruler or is_divider:
                slides.append(close_slide())
                index += 1
                slides.append(open_slide())
                has_content = False
                if is_ruler:
                    continue
            token.meta = {**(token.meta or {}), "marpit_slide": index}
            slides.append(token)
            if token.type not in ("front_matter", COMMENT_TOKEN):
                has_content = True
        slides.append(close_slide())

        state.tokens = slides

    return split_slides


def _iter_comments(tokens: Sequence[Token]) -> Any:
    for token in tokens:
        if token.type == COMMENT_TOKEN:
            yield token, token.meta.get("marpit_slide", 0)
        elif token.type == "inline" and token.children:
            slide = token.meta.get("marpit_slide", 0)
            for child in token.children:
                if child.type == COMMENT_TOKEN:
                    yield child, slide


def _truthy(value: Any) -> bool:
    return value is True or (isinstance(value, str) and value.strip().lower() == "true")


def make_directives_rule(theme_set: ThemeSet, loose_yaml: bool) -> Callable[[StateCore], None]:
    """Build the core rule that parses and applies directives.

    The rule stores global directives, the resolved theme, the slide size and
    per-slide plain comments in the render environment.
    """

    def apply_directives(state: StateCore) -> None:
        if state.inlineMode:
            return

        env: MutableMapping[str, Any] = state.env
        slide_openers = [token for token in state.tokens if token.type == SLIDE_OPEN]
        global_directives: dict[str, Any] = {}
        local_directives: list[dict[str, Any]] = [{} for _ in slide_openers]
        spot_directives: list[dict[str, Any]] = [{} for _ in slide_openers]
        comments: list[list[str]] = [[] for _ in slide_openers]

        def assign(directives: dict[str, Any], slide: int) -> None:
            for key, value in directives.items():
                if key.startswith("_") and key[1:] in LOCAL_DIRECTIVES:
                    spot_directives[slide][key[1:]] = value
                elif key in LOCAL_DIRECTIVES:
                    local_directives[slide][key] = value
                else:
                    global_directives[key] = value

        for token in state.tokens:
            if token.type == "front_matter":
                directives = parse_directives(token.content, loose_yaml)
                if directives:
                    assign(directives, 0)

        for token, slide in _iter_comments(state.tokens):
            directives = parse_directives(token.content, loose_yaml)
            if directives is None:
                token.meta = {**token.meta, "marpit_comment_kind": "comment"}
                if token.content:
                    comments[slide].append(token.content)
            else:
                token.meta = {**token.meta, "marpit_comment_kind": "directive"}
                assign(directives, slide)

        inherited: dict[str, Any] = {}
        for index, opener in enumerate(slide_openers):
            inherited.update(local_directives[index])
            applied = {**inherited, **spot_directives[index]}

            if applied.get("class"):
                opener.attrSet("class", str(applied["class"]))
            if _truthy(applied.get("paginate")):
                opener.attrSet("data-marpit-pagination", str(index + 1))
                opener.attrSet("data-marpit-pagination-total", str(len(slide_openers)))

            styles = []
            if applied.get("backgroundColor"):
                styles.append(f"background-color:{applied['backgroundColor']};")
            if applied.get("color"):
                styles.append(f"color:{applied['color']};")
            if styles:
                opener.attrSet("style", "".join(styles))

        theme_name = global_directives.get("theme")
        theme = theme_set.get(str(theme_name) if theme_name else None, fallback=True)
        if theme is not None:
            for opener in slide_openers:
                opener.attrSet("data-theme", theme.name)

        env[ENV_GLOBAL_DIRECTIVES] = global_directives
        env[ENV_THEME] = theme
        env[ENV_SLIDE_SIZE] = (theme.width, theme.height) if theme else (DEFAULT_SLIDE_WIDTH, DEFAULT_SLIDE_HEIGHT)
        env[ENV_COMMENTS] = comments

    return apply_directives


def render_nothing(self: Any, tokens: Sequence[Token], idx: int, options: Any, env: Any) -> str:
    """Render rule for tokens that produce no output."""
    return ""


def comments_plugin(md: MarkdownIt) -> None:
    """Recognize HTML comments independently of the raw HTML policy."""
    md.block.ruler.before(
        "html_block", COMMENT_TOKEN, comment_block, {"alt": ["paragraph", "reference", "blockquote"]}
    )
    md.inline.ruler.before("html_inline", COMMENT_TOKEN, comment_inline)
    md.add_render_rule(COMMENT_TOKEN, render_nothing)


__all__ = [
    "COMMENT_TOKEN",
    "ENV_COMMENTS",
    "ENV_GLOBAL_DIRECTIVES",
    "ENV_SLIDE_SIZE",
    "ENV_THEME",
    "SLIDE_CLOSE",
    "SLIDE_OPEN",
    "comments_plugin",
    "loosen_yaml",
    "make_directives_rule",
    "make_slide_rule",
    "parse_directives",
]
