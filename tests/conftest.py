"""Pytest configuration and shared fixtures for the marpy test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from marpy import Marp
from marpy.options import resolve_options

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "security: Tests of raw HTML filtering and URL safety")


@pytest.fixture
def marp() -> Marp:
    """Provide a renderer with the runtime script disabled.

    Returns
    -------
    Marp
        Renderer with default options except ``script=False``.

    """
    return Marp(script=False)


@pytest.fixture
def plain_options():
    """Provide options with every optional feature switched off."""
    return resolve_options(
        inline_svg=False,
        script=False,
        math=False,
        minify_css=False,
        emoji={"shortcode": False, "unicode": False},
    )


@pytest.fixture
def sample_deck() -> str:
    """Provide a small slide deck exercising directives and plugins.

    Returns
    -------
    str
        Markdown source of a three slide deck.

    """
    return """---
theme: gaia
paginate: true
---

# <!-- fit --> Welcome :wave:

<!-- speaker note -->

---

<!-- _class: lead -->

## Math

Euler: $e^{i\\pi} + 1 = 0$

---

```python
def hello():
    return "world"
```
"""
