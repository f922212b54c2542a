#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for stylesheet assembly."""

from unittest.mock import patch

import pytest

from marpy import Marp
from marpy.engine import PackOptions
from marpy.exceptions import StyleMinificationError
from marpy.plugins.emoji import EMOJI_CSS
from marpy.plugins.fitting import FITTING_CSS
from marpy.plugins.math import MATHML_CSS
from marpy.styles import assemble_pack_options, finalize_styles, prepend_style
from marpy.utils.css_minify import minify_css


@pytest.mark.unit
class TestPrependStyle:
    """Test suite for prepend_style()."""

    def test_prepends_with_newline(self):
        """Test that CSS goes in front of the existing before section."""
        assert prepend_style(PackOptions(before="b{}"), "a{}").before == "a{}\nb{}"

    def test_empty_css_leaves_options_unchanged(self):
        """Test that empty CSS does not modify the options."""
        pack = PackOptions(before="b{}")
        assert prepend_style(pack, "") is pack

    def test_original_options_not_modified(self):
        """Test that a new options object is returned."""
        pack = PackOptions(before="b{}")
        prepend_style(pack, "a{}")
        assert pack.before == "b{}"


@pytest.mark.unit
class TestAssemblePackOptions:
    """Test the plugin stylesheet order."""

    def test_order_math_fitting_emoji_prior(self, marp):
        """Test that the before section reads math, fitting, emoji, prior content."""
        pack = assemble_pack_options(PackOptions(before="/* prior */"), marp)

        positions = [pack.before.index(css) for css in (MATHML_CSS, FITTING_CSS, EMOJI_CSS, "/* prior */")]
        assert positions == sorted(positions)
        assert pack.before == f"{MATHML_CSS}\n{FITTING_CSS}\n{EMOJI_CSS}\n/* prior */"

    def test_empty_fragments_contribute_nothing(self):
        """Test that disabled plugins leave the remaining order intact."""
        marp = Marp(script=False, math=False, emoji={"shortcode": "native", "unicode": "native"})
        pack = assemble_pack_options(PackOptions(before="/* prior */"), marp)
        assert pack.before == f"{FITTING_CSS}\n/* prior */"

    def test_mathjax_contributes_no_css(self):
        """Test that MathJax output does not add MathML styles."""
        marp = Marp(script=False, math={"lib": "mathjax"})
        pack = assemble_pack_options(PackOptions(), marp)
        assert MATHML_CSS not in pack.before
        assert pack.before.startswith(FITTING_CSS)

    def test_other_pack_fields_kept(self, marp):
        """Test that assembly only touches the before section."""
        base = PackOptions(after="z{}", inline_svg=False, width=960, height=720)
        pack = assemble_pack_options(base, marp)
        assert (pack.after, pack.inline_svg, pack.width, pack.height) == ("z{}", False, 960, 720)


@pytest.mark.unit
class TestFinalizeStyles:
    """Test the optional minification step."""

    def test_minify_disabled_returns_input(self):
        """Test that disabled minification returns the CSS unchanged."""
        css = "a  {  color : red  }"
        assert finalize_styles(css, minify=False) is css

    def test_minify_enabled(self):
        """Test that enabled minification compacts the CSS."""
        assert finalize_styles("a  {  color : red  }", minify=True) == "a{color:red}"

    def test_minification_errors_propagate(self):
        """Test that a failing minifier does not fall back to unminified CSS."""
        with pytest.raises(StyleMinificationError):
            finalize_styles("a { color red }", minify=True)


@pytest.mark.unit
class TestRenderedStyles:
    """Test the stylesheet produced by the renderer."""

    def test_unminified_equals_minified_order(self):
        """Test that disabling minification only skips the minify step."""
        minified = Marp(script=False).render_theme_style()
        unminified = Marp(script=False, minify_css=False).render_theme_style()
        assert minify_css(unminified) == minified

    def test_plugin_css_precedes_theme(self):
        """Test that plugin styles come before the theme stylesheet."""
        css = Marp(script=False, minify_css=False).render_theme_style("gaia")
        assert css.index(MATHML_CSS) < css.index(FITTING_CSS) < css.index(EMOJI_CSS) < css.index("@theme gaia")

    def test_minify_not_called_when_disabled(self):
        """Test that the minifier is bypassed when disabled."""
        with patch("marpy.styles.minify_css") as mock_minify:
            Marp(script=False, minify_css=False).render("# Title")
        mock_minify.assert_not_called()
