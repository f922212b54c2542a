#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the code highlighting dispatcher."""

from unittest.mock import patch

import pytest
from hypothesis import given
from hypothesis import strategies as st

from marpy.highlight import detect_lexer, get_lexer, highlight


@pytest.mark.unit
class TestHighlight:
    """Test suite for highlight()."""

    def test_known_language_is_highlighted(self):
        """Test that a recognized language produces token markup."""
        result = highlight("def f():\n    return 1\n", "python")
        assert '<span class="k">def</span>' in result
        assert "<pre" not in result

    def test_language_aliases(self):
        """Test that Pygments aliases are accepted."""
        assert highlight("x = 1", "py") != ""

    def test_unknown_language_returns_empty(self):
        """Test that an unknown language yields empty markup."""
        assert highlight("print(1)", "nonexistent-lang") == ""

    @given(st.text())
    def test_unknown_language_never_raises(self, code):
        """Test that any code with an unknown language yields empty markup."""
        assert highlight(code, "nonexistent-lang") == ""

    @given(st.text(max_size=200))
    def test_empty_language_always_returns_string(self, code):
        """Test that auto-detection always returns a string."""
        assert isinstance(highlight(code, ""), str)

    def test_empty_code(self):
        """Test that empty code yields empty markup."""
        assert highlight("", "") == ""
        assert highlight("", "python") == ""

    def test_markup_is_escaped(self):
        """Test that highlighted output escapes HTML in the code."""
        result = highlight("<script>alert(1)</script>", "text")
        assert "<script>" not in result
        assert "&lt;script&gt;" in result

    def test_code_kept_verbatim(self):
        """Test that leading and trailing newlines are preserved."""
        result = highlight("\nx\n\n", "text")
        assert result == "\nx\n\n"

    def test_recognized_language_faults_propagate(self):
        """Test that library errors for a recognized language are not swallowed."""
        with patch("marpy.highlight.pygments_highlight", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError, match="boom"):
                highlight("x = 1", "python")

    def test_attrs_accepted(self):
        """Test that fence attributes do not change the result."""
        assert highlight("x = 1", "python", "{.numberLines}") == highlight("x = 1", "python")


@pytest.mark.unit
class TestLexerLookup:
    """Test lexer lookup helpers."""

    def test_get_lexer_unknown(self):
        """Test that unknown names return None."""
        assert get_lexer("nonexistent-lang") is None

    def test_get_lexer_known(self):
        """Test that known names return a lexer."""
        assert get_lexer("python").name == "Python"

    def test_detect_lexer_always_returns_lexer(self):
        """Test that detection falls back to a lexer for any input."""
        assert detect_lexer("@@@ ??? !!!") is not None


@pytest.mark.unit
class TestMarpHighlighter:
    """Test highlighting through the renderer."""

    def test_highlighter_matches_dispatcher(self, marp):
        """Test that the renderer exposes the dispatcher."""
        assert marp.highlighter("x = 1", "python") == highlight("x = 1", "python")
        assert marp.highlighter("x = 1", "no-such-language") == ""

    def test_fenced_code_highlighted(self, marp):
        """Test that fenced code blocks use the dispatcher."""
        html = marp.render("```python\nimport os\n```").html
        assert '<pre><code class="language-python">' in html
        assert '<span class="kn">import</span>' in html

    def test_unknown_fence_language_escaped(self, marp):
        """Test that unrecognized languages fall back to escaped code."""
        html = marp.render("```no-such-language\n<b>\n```").html
        assert "&lt;b&gt;" in html
