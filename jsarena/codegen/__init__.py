"""
jsarena Code Generation Package

Re-serializes a parsed tree to source text, pretty-printed or minified.
"""

from .generator import Generator, render

__all__ = [
    "Generator",
    "render",
]
