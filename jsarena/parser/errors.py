"""
Error handling for the jsarena parser.

Syntax errors are recoverable and end up in the diagnostics batch;
``InternalParserError`` signals a broken parser invariant and is never
caught by the parser itself.
"""

from typing import Union

from ..lexer.tokens import Token, TokenType, Span, KEYWORDS, PUNCTUATORS
from ..lexer.errors import SourceError, ErrorKind


class ParseError(SourceError):
    """
    Exception raised when the parser meets a token that cannot start or
    continue the current production.
    """

    kind = ErrorKind.SYNTAX


class NestingTooDeepError(ParseError):
    """Raised when brackets, operators or statements nest past the parser's limit."""


class InternalParserError(Exception):
    """
    A parser bug: out-of-range arena index, inverted or escaping span,
    patch of a slot that was never reserved.
    """


class SyntaxErrorRecovery:
    """
    Resynchronization rules used after a syntax error.

    The parser skips tokens until one of these can plausibly resume parsing
    at statement granularity.
    """

    # Consumed when reached, then parsing resumes after it
    TERMINATORS = frozenset({
        TokenType.SEMICOLON,
    })

    # Parsing resumes at these without consuming them
    STATEMENT_BOUNDARIES = frozenset({
        TokenType.LEFT_BRACE,
        TokenType.RIGHT_BRACE,
        TokenType.VAR,
        TokenType.LET,
        TokenType.CONST,
        TokenType.FUNCTION,
        TokenType.CLASS,
        TokenType.RETURN,
        TokenType.IF,
        TokenType.WHILE,
        TokenType.EOF,
    })

    # Bracket pairs kept balanced when a too-deeply nested statement is skipped
    OPENERS = frozenset({
        TokenType.LEFT_PAREN,
        TokenType.LEFT_BRACKET,
        TokenType.LEFT_BRACE,
        TokenType.TEMPLATE_HEAD,
    })

    CLOSERS = frozenset({
        TokenType.RIGHT_PAREN,
        TokenType.RIGHT_BRACKET,
        TokenType.RIGHT_BRACE,
        TokenType.TEMPLATE_TAIL,
    })

    SUGGESTIONS = {
        TokenType.SEMICOLON: "Add a semicolon ';' to end the statement",
        TokenType.RIGHT_PAREN: "Add a closing parenthesis ')'",
        TokenType.RIGHT_BRACKET: "Add a closing bracket ']'",
        TokenType.RIGHT_BRACE: "Add a closing brace '}'",
        TokenType.LEFT_BRACE: "Add an opening brace '{' to start a block",
        TokenType.COLON: "Add a colon ':' to complete the conditional expression",
        TokenType.IDENTIFIER: "Use a name that is not a reserved word",
    }

    @staticmethod
    def suggest_missing_token(expected: TokenType) -> list:
        suggestion = SyntaxErrorRecovery.SUGGESTIONS.get(expected)
        return [suggestion] if suggestion else []


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P003": "Missing semicolon",
    "P005": "Invalid expression",
    "P010": "Unexpected end of input",
    "P011": "Nesting too deep",
}


_TOKEN_TYPE_TEXT = {token_type: f"'{text}'" for text, token_type in {**PUNCTUATORS, **KEYWORDS}.items()}
_TOKEN_TYPE_TEXT[TokenType.IDENTIFIER] = "an identifier"


def describe_token_type(token_type: TokenType) -> str:
    return _TOKEN_TYPE_TEXT.get(token_type, token_type.name.lower())


def describe_token(token: Token, source: str) -> str:
    """Human name for a token: its text, or a placeholder for EOF."""
    if token.type == TokenType.EOF:
        return "end of input"
    return f"'{token.text(source)}'"


def create_unexpected_token_error(expected: Union[TokenType, str], found: Token,
                                  source: str) -> ParseError:
    """Create an error for an unexpected token."""
    expected_str = describe_token_type(expected) if isinstance(expected, TokenType) else expected
    if found.type == TokenType.EOF:
        return create_unexpected_eof_error(expected_str, found.span)

    suggestions = SyntaxErrorRecovery.suggest_missing_token(expected) \
        if isinstance(expected, TokenType) else []

    return ParseError(
        message=f"Unexpected token {describe_token(found, source)}, expected {expected_str}",
        span=found.span,
        code="P001",
        help_text=f"The parser expected {expected_str} at this position.",
        suggestions=suggestions
    )


def create_missing_semicolon_error(found: Token, source: str) -> ParseError:
    return ParseError(
        message=f"Expected ';' before {describe_token(found, source)}",
        span=found.span,
        code="P003",
        help_text="Statements on the same line must be separated by ';'.",
        suggestions=SyntaxErrorRecovery.suggest_missing_token(TokenType.SEMICOLON)
    )


def create_invalid_expression_error(found: Token, source: str) -> ParseError:
    """Create an error for a token that cannot start an expression."""
    if found.type == TokenType.EOF:
        return create_unexpected_eof_error("an expression", found.span)

    return ParseError(
        message=f"Unexpected token {describe_token(found, source)} in expression",
        span=found.span,
        code="P005",
        help_text="An expression cannot start with this token.",
        suggestions=["Check the expression syntax", "Ensure all operators have operands"]
    )


def create_unexpected_eof_error(expected: str, span: Span) -> ParseError:
    """Create an error for unexpected end of input."""
    return ParseError(
        message=f"Unexpected end of input, expected {expected}",
        span=span,
        code="P010",
        help_text=f"The parser reached the end of the input while expecting {expected}.",
        suggestions=[f"Add the missing {expected}", "Check for incomplete statements"]
    )


def create_nesting_too_deep_error(found: Token, limit: int) -> NestingTooDeepError:
    """Create an error for input nested past the parser's depth limit."""
    return NestingTooDeepError(
        message=f"Nesting too deep: more than {limit} levels",
        span=found.span,
        code="P011",
        help_text=f"Expressions and statements may nest at most {limit} levels deep.",
        suggestions=["Split the expression into smaller statements"]
    )
