"""
jsarena Lexer Package

Implements a pull-based tokenizer for a JavaScript-like language.

Key Features:
- Reserved words matched by exact lexeme
- Binary/octal/hexadecimal literals evaluated at lex time
- Strings with escape validation, template literals with substitutions
- Maximal-munch punctuators
- Error recovery: every malformed token is reported and replaced
- Zero-copy tokens addressed by offset spans
"""

from .tokens import Token, TokenType, Span, SourceLocation
from .lexer import Lexer, unescape
from .errors import Diagnostic, ErrorKind, SourceError, LexerError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "Span",
    "SourceLocation",
    "Diagnostic",
    "ErrorKind",
    "SourceError",
    "LexerError",
    "unescape",
]
