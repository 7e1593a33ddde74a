"""
Error handling for the jsarena lexer.

Provides the diagnostic record shared by the lexer and the parser, the
common exception base both raise, and factories for the lexical errors.
"""

from enum import Enum
from typing import Optional, List
from dataclasses import dataclass

from .tokens import Span


class ErrorKind(Enum):
    """Which stage detected the problem."""
    LEXICAL = "lexical"
    SYNTAX = "syntax"


@dataclass(frozen=True)
class Diagnostic:
    """A user-facing error description anchored at a source span."""
    message: str
    span: Span
    kind: ErrorKind
    severity: str = "error"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        code = f"[{self.code}]" if self.code else ""
        result = f"{self.severity}{code}: {self.message} at {self.span}"
        if self.help_text:
            result += f"\n  help: {self.help_text}"
        return result


class SourceError(Exception):
    """
    Base class for recoverable errors in the input text.

    Raised inside the lexer/parser and caught at token or statement
    granularity; callers receive them as data in ``ParseResult.errors``.
    """

    kind = ErrorKind.SYNTAX

    def __init__(
        self,
        message: str,
        span: Span,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            span=span,
            kind=self.kind,
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def span(self) -> Span:
        return self.diagnostic.span

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        return str(self.diagnostic)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.code}, {self.message!r}, {self.span})"


class LexerError(SourceError):
    """A malformed token: bad literal, unterminated string, stray character."""

    kind = ErrorKind.LEXICAL


# Common error codes for categorization
ERROR_CODES = {
    "L001": "Invalid character",
    "L002": "Unterminated string literal",
    "L003": "Invalid numeric literal",
    "L006": "Invalid escape sequence",
    "L011": "Unterminated template literal",
    "L012": "Unterminated block comment",
}


def create_invalid_character_error(char: str, span: Span) -> LexerError:
    """Create an error for an invalid character."""
    if char.isprintable():
        help_text = f"The character '{char}' cannot start a token."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return LexerError(
        message=f"Invalid character: '{char}'",
        span=span,
        code="L001",
        help_text=help_text
    )


def create_unterminated_string_error(quote: str, span: Span) -> LexerError:
    """Create an error for an unterminated string literal."""
    return LexerError(
        message="Unterminated string literal",
        span=span,
        code="L002",
        help_text=f"String literals must be closed with a matching {quote} quote on the same line.",
        suggestions=[f"Add a closing {quote} quote", "Escape line breaks with a backslash"]
    )


def create_invalid_number_error(lexeme: str, span: Span, reason: str) -> LexerError:
    """Create an error for an invalid numeric literal."""
    return LexerError(
        message=f"Invalid numeric literal: '{lexeme}'",
        span=span,
        code="L003",
        help_text=reason
    )


def create_invalid_escape_error(sequence: str, span: Span) -> LexerError:
    return LexerError(
        message=f"Invalid escape sequence: '{sequence}'",
        span=span,
        code="L006",
        help_text="Hexadecimal escapes need exactly two digits, unicode escapes four or a {...} code point."
    )


def create_unterminated_template_error(span: Span) -> LexerError:
    return LexerError(
        message="Unterminated template literal",
        span=span,
        code="L011",
        help_text="Template literals must be closed with a backtick."
    )


def create_unterminated_comment_error(span: Span) -> LexerError:
    return LexerError(
        message="Unterminated block comment",
        span=span,
        code="L012",
        help_text="Block comments must be closed with '*/'."
    )
