#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marpy/utils/__init__.py
"""Utility helpers for CSS minification and HTML filtering."""
