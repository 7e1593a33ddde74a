"""
Token definitions for the jsarena lexer.

This module defines all token types the lexer can produce:
- Reserved words
- Literals (numbers, strings, template chunks)
- Identifiers
- Operators and punctuation

Tokens never copy their text out of the source buffer; they carry a
half-open ``[start, end)`` offset pair and are sliced on demand.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional


class TokenType(Enum):
    """
    Enumeration of all token types.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of input
    INVALID = auto()                # Unrecognized character (already reported)

    # ========================================================================
    # Literals
    # ========================================================================
    NUMBER = auto()                 # 100, 3.14, .5, 1e10
    INTEGER = auto()                # 0b1100100, 0o144, 0x64
    STRING = auto()                 # "hello", 'world'

    # Template literals, split around ${ } substitutions
    TEMPLATE = auto()               # `no substitutions`
    TEMPLATE_HEAD = auto()          # `head ${
    TEMPLATE_MIDDLE = auto()        # } middle ${
    TEMPLATE_TAIL = auto()          # } tail`

    # ========================================================================
    # Identifiers and Keywords
    # ========================================================================
    IDENTIFIER = auto()

    VAR = auto()
    LET = auto()
    CONST = auto()
    FUNCTION = auto()
    RETURN = auto()
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    TRUE = auto()
    FALSE = auto()
    NULL = auto()
    UNDEFINED = auto()
    THIS = auto()
    CLASS = auto()
    EXTENDS = auto()

    # ========================================================================
    # Operators
    # ========================================================================

    # Arithmetic
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    STAR = auto()                   # *
    SLASH = auto()                  # /
    PERCENT = auto()                # %
    STAR_STAR = auto()              # **
    PLUS_PLUS = auto()              # ++
    MINUS_MINUS = auto()            # --

    # Assignment
    ASSIGN = auto()                 # =
    PLUS_ASSIGN = auto()            # +=
    MINUS_ASSIGN = auto()           # -=
    STAR_ASSIGN = auto()            # *=
    SLASH_ASSIGN = auto()           # /=
    PERCENT_ASSIGN = auto()         # %=
    STAR_STAR_ASSIGN = auto()       # **=
    SHL_ASSIGN = auto()             # <<=
    SHR_ASSIGN = auto()             # >>=
    USHR_ASSIGN = auto()            # >>>=
    AMP_ASSIGN = auto()             # &=
    PIPE_ASSIGN = auto()            # |=
    CARET_ASSIGN = auto()           # ^=

    # Comparison
    EQUAL = auto()                  # ==
    NOT_EQUAL = auto()              # !=
    STRICT_EQUAL = auto()           # ===
    STRICT_NOT_EQUAL = auto()       # !==
    LESS = auto()                   # <
    LESS_EQUAL = auto()             # <=
    GREATER = auto()                # >
    GREATER_EQUAL = auto()          # >=

    # Logical
    AND_AND = auto()                # &&
    PIPE_PIPE = auto()              # ||
    BANG = auto()                   # !

    # Bitwise
    AMP = auto()                    # &
    PIPE = auto()                   # |
    CARET = auto()                  # ^
    TILDE = auto()                  # ~
    SHL = auto()                    # <<
    SHR = auto()                    # >>
    USHR = auto()                   # >>>

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACKET = auto()           # [
    RIGHT_BRACKET = auto()          # ]
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }

    SEMICOLON = auto()              # ;
    COMMA = auto()                  # ,
    DOT = auto()                    # .
    COLON = auto()                  # :
    QUESTION = auto()               # ?
    FAT_ARROW = auto()              # =>


@dataclass(frozen=True)
class Span:
    """Half-open ``[start, end)`` offset range into the source text."""
    start: int
    end: int

    def slice(self, source: str) -> str:
        return source[self.start:self.end]

    def contains(self, other: 'Span') -> bool:
        return self.start <= other.start and other.end <= self.end

    def __len__(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a line/column location in the source code.

    Only computed when a diagnostic is displayed; the parser itself works
    exclusively with offsets.
    """
    filename: str
    line: int
    column: int
    offset: int

    @classmethod
    def from_offset(cls, source: str, offset: int, filename: str = "<input>") -> 'SourceLocation':
        offset = max(0, min(offset, len(source)))
        line = source.count('\n', 0, offset) + 1
        line_start = source.rfind('\n', 0, offset) + 1
        return cls(filename, line, offset - line_start + 1, offset)

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token.

    ``value`` carries the semantic payload where one is computed at lex
    time: the integer for ``INTEGER`` tokens and the raw chunk ``Span`` for
    template tokens. Everything else is recovered by slicing the source.
    """
    type: TokenType
    start: int
    end: int
    value: Any = None
    newline_before: bool = False    # A line terminator precedes this token

    @property
    def span(self) -> Span:
        return Span(self.start, self.end)

    def text(self, source: str) -> str:
        return source[self.start:self.end]

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.type.name}@{self.start}..{self.end}({self.value!r})"
        return f"{self.type.name}@{self.start}..{self.end}"

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a reserved word."""
        return self.type in KEYWORD_TOKENS

    @property
    def is_identifier(self) -> bool:
        return self.type == TokenType.IDENTIFIER


# Lookup tables used by the lexer for keyword and punctuator recognition

KEYWORDS = {
    "var": TokenType.VAR,
    "let": TokenType.LET,
    "const": TokenType.CONST,
    "function": TokenType.FUNCTION,
    "return": TokenType.RETURN,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "null": TokenType.NULL,
    "undefined": TokenType.UNDEFINED,
    "this": TokenType.THIS,
    "class": TokenType.CLASS,
    "extends": TokenType.EXTENDS,
}

KEYWORD_TOKENS = frozenset(KEYWORDS.values())

PUNCTUATORS = {
    # Four characters
    ">>>=": TokenType.USHR_ASSIGN,

    # Three characters
    "===": TokenType.STRICT_EQUAL,
    "!==": TokenType.STRICT_NOT_EQUAL,
    "**=": TokenType.STAR_STAR_ASSIGN,
    "<<=": TokenType.SHL_ASSIGN,
    ">>=": TokenType.SHR_ASSIGN,
    ">>>": TokenType.USHR,

    # Two characters
    "=>": TokenType.FAT_ARROW,
    "==": TokenType.EQUAL,
    "!=": TokenType.NOT_EQUAL,
    "<=": TokenType.LESS_EQUAL,
    ">=": TokenType.GREATER_EQUAL,
    "&&": TokenType.AND_AND,
    "||": TokenType.PIPE_PIPE,
    "++": TokenType.PLUS_PLUS,
    "--": TokenType.MINUS_MINUS,
    "**": TokenType.STAR_STAR,
    "<<": TokenType.SHL,
    ">>": TokenType.SHR,
    "+=": TokenType.PLUS_ASSIGN,
    "-=": TokenType.MINUS_ASSIGN,
    "*=": TokenType.STAR_ASSIGN,
    "/=": TokenType.SLASH_ASSIGN,
    "%=": TokenType.PERCENT_ASSIGN,
    "&=": TokenType.AMP_ASSIGN,
    "|=": TokenType.PIPE_ASSIGN,
    "^=": TokenType.CARET_ASSIGN,

    # Single characters
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "=": TokenType.ASSIGN,
    "<": TokenType.LESS,
    ">": TokenType.GREATER,
    "!": TokenType.BANG,
    "&": TokenType.AMP,
    "|": TokenType.PIPE,
    "^": TokenType.CARET,
    "~": TokenType.TILDE,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    ":": TokenType.COLON,
    "?": TokenType.QUESTION,
}

# Longest punctuator first, for maximal munch
PUNCTUATOR_LENGTHS = sorted({len(p) for p in PUNCTUATORS}, reverse=True)

# Digits accepted after each radix prefix
RADIX_DIGITS = {
    'b': (2, frozenset("01")),
    'o': (8, frozenset("01234567")),
    'x': (16, frozenset("0123456789abcdefABCDEF")),
}
