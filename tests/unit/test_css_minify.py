#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the CSS minifier.

Besides fixed examples, property tests check that minification is a fixed
point and keeps every selector and declaration in order.
"""

import re

import pytest
import tinycss2
from hypothesis import given
from hypothesis import strategies as st

from marpy.exceptions import StyleMinificationError
from marpy.themes import load_builtin_theme
from marpy.utils.css_minify import minify_css


def squash(text):
    """Drop whitespace and quotes, which minification may remove."""
    return re.sub(r"[\s\"']", "", text)


def rule_summary(css):
    """Return (selector, [(name, value, important)]) pairs for every style rule."""
    summary = []
    for rule in tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True):
        if rule.type != "qualified-rule":
            continue
        selector = squash(tinycss2.serialize(rule.prelude))
        declarations = [
            (decl.lower_name, squash(tinycss2.serialize(decl.value)), decl.important)
            for decl in tinycss2.parse_declaration_list(rule.content, skip_comments=True, skip_whitespace=True)
            if decl.type == "declaration"
        ]
        summary.append((selector, declarations))
    return summary


@pytest.mark.unit
class TestMinifyCss:
    """Test suite for minify_css()."""

    def test_whitespace_collapsed(self):
        """Test that whitespace inside rules is removed or collapsed."""
        css = "section  {\n  margin :  0   auto ;\n  color: red;\n}\n"
        assert minify_css(css) == "section{margin:0 auto;color:red}"

    def test_commas_tightened(self):
        """Test that whitespace around commas in values is dropped."""
        assert minify_css("a { font-family: Arial , sans-serif; }") == "a{font-family:Arial,sans-serif}"

    def test_function_arguments(self):
        """Test that function arguments are compacted."""
        assert minify_css("a { color: rgba( 0 , 0 , 0 , .5 ); }") == "a{color:rgba(0,0,0,.5)}"

    def test_important_kept(self):
        """Test that !important survives minification."""
        assert minify_css("a { color: red !important; }") == "a{color:red!important}"

    def test_custom_property_value_verbatim(self):
        """Test that custom property values are only trimmed."""
        assert minify_css("a { --gap:  1px  2px ; }") == "a{--gap:1px  2px}"

    def test_selectors_minified(self):
        """Test that combinators and selector lists are compacted."""
        css = "section  >  h1 ,  section + p ,  a ~ b { color: red }"
        assert minify_css(css) == "section>h1,section+p,a~b{color:red}"

    def test_descendant_combinator_kept(self):
        """Test that descendant whitespace becomes a single space."""
        assert minify_css("div   .note   p { color: red }") == "div .note p{color:red}"

    def test_duplicate_selectors_dropped(self):
        """Test that repeated selectors in one list are removed."""
        assert minify_css("h1, h2, h1 { color: red }") == "h1,h2{color:red}"

    def test_attribute_selector_unquoted(self):
        """Test that identifier-safe attribute values lose their quotes."""
        assert minify_css('img[data-marp-fitting="svg"] { display: block }') == (
            "img[data-marp-fitting=svg]{display:block}"
        )

    def test_attribute_selector_with_spaces_keeps_quotes(self):
        """Test that values needing quotes keep them."""
        assert minify_css('a[title="a b"] { color: red }') == 'a[title="a b"]{color:red}'

    def test_at_rule_params(self):
        """Test that media query parameters are compacted."""
        css = "@media screen and ( max-width : 100px ) {\n  p { color: red; }\n}"
        assert minify_css(css) == "@media screen and (max-width:100px){p{color:red}}"

    def test_statement_at_rule(self):
        """Test that block-less at-rules keep their terminator."""
        assert minify_css('@import url("a.css")  screen ;') == '@import url("a.css") screen;'

    def test_declaration_at_rule(self):
        """Test that at-rules with declaration blocks are compacted."""
        css = "@font-face { font-family: X ; src: url(x.woff) }"
        assert minify_css(css) == "@font-face{font-family:X;src:url(x.woff)}"

    def test_top_level_comments_kept(self):
        """Test that top-level comments, such as theme metadata, survive."""
        assert minify_css("/* @theme t */\na { color: red }") == "/* @theme t */a{color:red}"

    def test_comments_inside_rules_dropped(self):
        """Test that comments inside declaration blocks are removed."""
        assert minify_css("a { /* note */ color: red }") == "a{color:red}"

    def test_empty_stylesheet(self):
        """Test that empty input yields empty output."""
        assert minify_css("") == ""
        assert minify_css("   \n") == ""

    def test_rule_order_preserved(self):
        """Test that rules are never reordered."""
        assert minify_css("b { x: 1 } a { x: 2 } b { x: 3 }") == "b{x:1}a{x:2}b{x:3}"

    def test_nested_rules(self):
        """Test that nested style rules are minified in place."""
        assert minify_css("a { color: red; & b { color: blue } }") == "a{color:red;& b{color:blue}}"
        assert minify_css("a {\n  color: red;\n  > li { margin : 0 }\n}") == "a{color:red;>li{margin:0}}"

    def test_nested_conditional_rule(self):
        """Test that a media query nested in a style rule keeps its declarations."""
        css = "a { color: red; @media ( min-width : 10px ) { color: blue } }"
        assert minify_css(css) == "a{color:red;@media (min-width:10px){color:blue}}"

    def test_invalid_declaration_raises(self):
        """Test that syntax errors raise StyleMinificationError."""
        with pytest.raises(StyleMinificationError) as exc_info:
            minify_css("a {\n  color red;\n}")
        assert exc_info.value.line == 2

    @pytest.mark.parametrize("theme", ["default", "gaia", "uncover"])
    def test_bundled_themes(self, theme):
        """Test that bundled themes minify losslessly and idempotently."""
        css = load_builtin_theme(theme)
        minified = minify_css(css)
        assert minify_css(minified) == minified
        assert rule_summary(minified) == rule_summary(css)
        assert f"@theme {theme}" in minified


selectors = st.sampled_from(
    ["section", "h1", "a:hover", "div > p", "ul li", ".lead", "#main", "img[alt]", 'a[href="x"]', "p + p"]
)
properties = st.sampled_from(["color", "margin", "padding", "font-family", "width"])
values = st.sampled_from(["red", "0 auto", "1px 2px", "Arial, sans-serif", "rgba(0, 0, 0, .5)", "calc(1px + 2%)"])
spaces = st.sampled_from(["", " ", "  ", "\n", "\t "])


@st.composite
def stylesheets(draw):
    """Generate small stylesheets with random whitespace."""
    rules = []
    for _ in range(draw(st.integers(min_value=1, max_value=4))):
        rule_selectors = draw(st.lists(selectors, min_size=1, max_size=3, unique=True))
        declarations = draw(st.lists(st.tuples(properties, values), min_size=1, max_size=4))
        space = draw(spaces)
        body = ";".join(f"{space}{name}{space}:{space}{value}{space}" for name, value in declarations)
        rules.append(f"{(space + ',' + space).join(rule_selectors)}{space}{{{body}}}")
    return "\n".join(rules)


@pytest.mark.unit
class TestMinifyProperties:
    """Property tests for minify_css()."""

    @given(stylesheets())
    def test_minification_is_idempotent(self, css):
        """Test that minifying minified CSS returns it unchanged."""
        minified = minify_css(css)
        assert minify_css(minified) == minified

    @given(stylesheets())
    def test_minification_keeps_rules(self, css):
        """Test that selectors and declarations keep their content and order."""
        assert rule_summary(minify_css(css)) == rule_summary(css)

    @given(stylesheets())
    def test_minified_is_not_longer(self, css):
        """Test that minification never grows the stylesheet."""
        assert len(minify_css(css)) <= len(css)
