#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the browser runtime script plugin."""

import pytest

from marpy import Marp
from marpy.options import ScriptOptions
from marpy.plugins.script import browser_script, render_script_tag


@pytest.mark.unit
class TestRenderScriptTag:
    """Test suite for render_script_tag()."""

    def test_inline_script(self):
        """Test that the inline source embeds the bundled runtime."""
        tag = render_script_tag(ScriptOptions())
        assert tag == f"<script>{browser_script()}</script>"
        assert "data-marp-fitting" in browser_script()

    def test_inline_script_with_nonce(self):
        """Test that the nonce attribute is added."""
        assert render_script_tag(ScriptOptions(nonce="abc")).startswith('<script nonce="abc">')

    def test_cdn_script(self):
        """Test that the cdn source references the URL."""
        options = ScriptOptions(source="cdn", src="https://example.com/r.js?a=1&b=2")
        assert render_script_tag(options) == '<script src="https://example.com/r.js?a=1&amp;b=2" defer></script>'

    def test_nonce_escaped(self):
        """Test that the nonce cannot break out of the attribute."""
        assert 'nonce="a&quot;b"' in render_script_tag(ScriptOptions(nonce='a"b'))


@pytest.mark.unit
class TestScriptRendering:
    """Test the script in rendered output."""

    def test_script_appended_once(self):
        """Test that the runtime follows the slides."""
        html = Marp().render("# One\n\n---\n\n# Two").html
        assert html.count("<script>") == 1
        assert html.index("</section>") < html.index("<script>")

    def test_script_disabled(self, marp):
        """Test that script=False omits the runtime."""
        assert "<script" not in marp.render("# One").html

    def test_script_options_mapping(self):
        """Test that script options are read from a mapping."""
        html = Marp(script={"source": "cdn", "src": "/runtime.js"}).render("# One").html
        assert '<script src="/runtime.js" defer></script>' in html
