"""
jsarena Package

A parser for a JavaScript-like language that builds an arena-backed syntax
tree and reports every lexical and syntax error of an input in one pass.

Architecture:
    jsarena/
    ├── lexer/           # Pull-based tokenization
    ├── parser/          # Operator table, tree arena, recursive descent parser
    ├── codegen/         # Source re-serialization
    └── diagnostics.py   # Error collection and display

Example:
    >>> from jsarena import parse, render
    >>> result = parse("var foo = 100;")
    >>> result.ok
    True
    >>> render(result, minify=True)
    'var foo=100;'
"""

__version__ = "0.1.0"

from .lexer import Lexer, Token, TokenType, Span, SourceLocation, SourceError, LexerError
from .parser import Parser, ParseResult, ParseError, InternalParserError, parse
from .codegen import render
from .diagnostics import Diagnostics, format_error, format_errors

__all__ = [
    # Entry points
    "parse",
    "render",
    "format_error",
    "format_errors",

    # Core classes
    "Lexer",
    "Parser",
    "ParseResult",
    "Diagnostics",
    "Token",
    "TokenType",
    "Span",
    "SourceLocation",

    # Errors
    "SourceError",
    "LexerError",
    "ParseError",
    "InternalParserError",

    # Version info
    "__version__",
]
