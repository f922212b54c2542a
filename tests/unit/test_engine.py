#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the slide engine and its extension hooks."""

import pytest

from marpy.engine import EngineExtension, PackOptions, PassthroughExtension, RenderResult, SlideEngine
from marpy.exceptions import RenderingError
from marpy.options import resolve_options

PLAIN_THEME = "/* @theme plain */\nsection { color: red; }"


class RecordingExtension(EngineExtension):
    """Extension recording every hook call."""

    def __init__(self):
        self.calls = []

    def apply_markdown_plugins(self, md):
        self.calls.append("apply_markdown_plugins")

    def setup_theme_set(self, theme_set):
        self.calls.append("setup_theme_set")
        theme_set.default = theme_set.add(PLAIN_THEME)

    def theme_set_pack_options(self, base):
        self.calls.append("theme_set_pack_options")
        return base.create_updated(after="/* after */")

    def render_style(self, css):
        self.calls.append("render_style")
        return css.upper()


@pytest.mark.unit
class TestEngineHooks:
    """Test the four extension hook points."""

    def test_construction_hooks_called_once_in_order(self, plain_options):
        """Test that markdown plugins are applied before themes are set up."""
        extension = RecordingExtension()
        SlideEngine(plain_options, extension)
        assert extension.calls == ["apply_markdown_plugins", "setup_theme_set"]

    def test_render_hooks_called_per_render(self, plain_options):
        """Test that style hooks run on every render."""
        extension = RecordingExtension()
        engine = SlideEngine(plain_options, extension)
        engine.render("# One")
        engine.render("# Two")
        assert extension.calls[2:] == ["theme_set_pack_options", "render_style"] * 2

    def test_style_hooks_shape_css(self, plain_options):
        """Test that pack options and style post-processing are applied."""
        engine = SlideEngine(plain_options, RecordingExtension())
        css = engine.render("# One").css
        assert css.endswith("/* AFTER */")
        assert "@THEME PLAIN" in css

    def test_extension_is_abstract(self):
        """Test that all four hooks must be implemented."""
        with pytest.raises(TypeError):
            EngineExtension()  # type: ignore[abstract]

    def test_passthrough_extension(self):
        """Test that the passthrough extension leaves values unchanged."""
        extension = PassthroughExtension()
        base = PackOptions(before="a{}")
        assert extension.theme_set_pack_options(base) is base
        assert extension.render_style("a{}") == "a{}"

    def test_render_without_theme_raises(self, plain_options):
        """Test that rendering styles requires a theme."""
        with pytest.raises(RenderingError):
            SlideEngine(plain_options).render("# One")


@pytest.mark.unit
class TestEngineRender:
    """Test rendered output."""

    def test_render_result(self, plain_options):
        """Test the structure of a render result."""
        engine = SlideEngine(plain_options, RecordingExtension())
        result = engine.render("# One\n\n---\n\n# Two")
        assert isinstance(result, RenderResult)
        assert result.html.startswith('<div class="marpit">')
        assert result.html.count("<section") == 2
        assert result.theme == "plain"
        assert result.comments == [[], []]

    def test_inline_svg_wrapping(self):
        """Test that slides are wrapped in svg and foreignObject."""
        options = resolve_options(script=False, math=False)
        engine = SlideEngine(options, RecordingExtension())
        html = engine.render("# One").html
        assert '<svg data-marpit-svg="" viewBox="0 0 1280 720">' in html
        assert '<foreignObject width="1280" height="720">' in html
        assert html.index("<svg") < html.index("<foreignObject") < html.index("<section")
        assert "</section>\n</foreignObject>\n</svg>" in html

    def test_inline_svg_disabled(self, plain_options):
        """Test that sections are emitted directly without inline SVG."""
        html = SlideEngine(plain_options, RecordingExtension()).render("# One").html
        assert "<svg" not in html
        assert '<section id="1"' in html

    def test_inline_render_has_no_slides(self, plain_options):
        """Test that inline rendering does not create sections."""
        engine = SlideEngine(plain_options, RecordingExtension())
        assert engine.markdown.renderInline("*one*") == "<em>one</em>"
