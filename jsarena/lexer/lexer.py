"""
jsarena Lexer - turns source text into tokens, one pull at a time.

The parser drives the lexer through ``next_token()``; nothing is lexed
ahead of demand. Malformed literals are reported into ``errors`` and a
best-effort token is still returned, so a single bad token never stops
the parse.
"""

import logging
import unicodedata
from typing import List

from .tokens import (
    Token, TokenType, Span, KEYWORDS, PUNCTUATORS, PUNCTUATOR_LENGTHS, RADIX_DIGITS
)
from .errors import (
    LexerError, create_invalid_character_error, create_unterminated_string_error,
    create_invalid_number_error, create_invalid_escape_error,
    create_unterminated_template_error, create_unterminated_comment_error
)

logger = logging.getLogger(__name__)

LINE_TERMINATORS = frozenset("\n\r\u2028\u2029")
HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
MAX_KEYWORD_LENGTH = max(len(keyword) for keyword in KEYWORDS)

SINGLE_ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    'b': '\b',
    'f': '\f',
    'v': '\v',
    '0': '\0',
}


class Lexer:
    """
    Pull-based lexical analyzer.

    Keeps a stack of open ``${`` substitutions so that the ``}`` closing a
    substitution resumes the surrounding template literal instead of being
    returned as a brace.
    """

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source text
            filename: Name of source used when diagnostics are displayed
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.errors: List[LexerError] = []

        # One brace counter per open template substitution
        self._template_braces: List[int] = []
        self._newline_before = False

    def tokenize(self) -> List[Token]:
        """
        Lex the remaining input.

        Returns:
            List of tokens ending with the EOF token
        """
        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                return tokens

    def next_token(self) -> Token:
        """Lex and return the next token; EOF is returned repeatedly at the end."""
        self._newline_before = False
        self._skip_whitespace_and_comments()

        start = self.pos
        if start >= len(self.source):
            return self._make(TokenType.EOF, start)

        try:
            return self._lex_token()
        except LexerError as e:
            self._report(e)
            if self.pos == start:
                self.pos += 1
            return self._make(TokenType.INVALID, start)

    def has_errors(self) -> bool:
        """Check if lexer encountered any errors."""
        return len(self.errors) > 0

    def _lex_token(self) -> Token:
        start = self.pos
        current_char = self.source[start]

        # String literals
        if current_char == '"' or current_char == "'":
            return self._lex_string(current_char)

        # Template literals
        if current_char == '`':
            self.pos += 1
            return self._lex_template_chunk(start, opening=True)

        # Numbers
        if _is_digit(current_char) or (current_char == '.' and _is_digit(self._peek())):
            return self._lex_number()

        # Identifiers and keywords
        if _is_identifier_start(current_char):
            return self._lex_identifier_or_keyword()

        # Braces inside a template substitution
        if self._template_braces:
            if current_char == '}':
                if self._template_braces[-1] == 0:
                    self._template_braces.pop()
                    self.pos += 1
                    return self._lex_template_chunk(start, opening=False)
                self._template_braces[-1] -= 1
            elif current_char == '{':
                self._template_braces[-1] += 1

        # Operators and punctuation, longest first
        for length in PUNCTUATOR_LENGTHS:
            candidate = self.source[start:start + length]
            if len(candidate) == length and candidate in PUNCTUATORS:
                self.pos += length
                return self._make(PUNCTUATORS[candidate], start)

        raise create_invalid_character_error(current_char, Span(start, start + 1))

    def _lex_identifier_or_keyword(self) -> Token:
        """Lex an identifier; reserved words get their own token type."""
        start = self.pos
        self.pos += 1

        while _is_identifier_continue(self._current()):
            self.pos += 1

        token_type = TokenType.IDENTIFIER
        if self.pos - start <= MAX_KEYWORD_LENGTH:
            token_type = KEYWORDS.get(self.source[start:self.pos], TokenType.IDENTIFIER)

        return self._make(token_type, start)

    def _lex_number(self) -> Token:
        """Lex a decimal/float literal, or dispatch on a radix prefix."""
        start = self.pos

        if self.source[start] == '0' and self._peek().lower() in RADIX_DIGITS:
            return self._lex_radix_integer()

        self._consume_digits()
        if self._current() == '.':
            self.pos += 1
            self._consume_digits()

        if self._current() in ('e', 'E'):
            self.pos += 1
            if self._current() in ('+', '-'):
                self.pos += 1
            if not self._consume_digits():
                self._report(create_invalid_number_error(
                    self.source[start:self.pos],
                    Span(start, self.pos),
                    "The exponent has no digits"
                ))

        if _is_identifier_continue(self._current()):
            suffix_start = self.pos
            while _is_identifier_continue(self._current()):
                self.pos += 1
            self._report(create_invalid_number_error(
                self.source[start:self.pos],
                Span(suffix_start, self.pos),
                "An identifier cannot start immediately after a numeric literal"
            ))

        return self._make(TokenType.NUMBER, start)

    def _lex_radix_integer(self) -> Token:
        """Lex a 0b/0o/0x literal and evaluate it once."""
        start = self.pos
        base, valid_digits = RADIX_DIGITS[self._peek().lower()]
        self.pos += 2

        digits_start = self.pos
        while _is_identifier_continue(self._current()):
            self.pos += 1

        raw_digits = self.source[digits_start:self.pos]
        digits = raw_digits.replace('_', '')
        valid_count = 0
        while valid_count < len(digits) and digits[valid_count] in valid_digits:
            valid_count += 1

        if not digits:
            self._report(create_invalid_number_error(
                self.source[start:self.pos],
                Span(start, self.pos),
                f"Expected base {base} digits after the prefix"
            ))
        elif valid_count != len(digits):
            self._report(create_invalid_number_error(
                self.source[start:self.pos],
                Span(start, self.pos),
                f"'{digits[valid_count]}' is not a valid base {base} digit"
            ))
        elif raw_digits.startswith('_') or raw_digits.endswith('_') or '__' in raw_digits:
            self._report(create_invalid_number_error(
                self.source[start:self.pos],
                Span(start, self.pos),
                "Numeric separators '_' are only allowed between digits"
            ))

        # Best effort: the valid leading digits
        value = int(digits[:valid_count], base) if valid_count else 0
        return self._make(TokenType.INTEGER, start, value)

    def _consume_digits(self) -> bool:
        """Consume decimal digits with single '_' separators between them."""
        consumed = False
        while True:
            current_char = self._current()
            if _is_digit(current_char):
                consumed = True
                self.pos += 1
            elif current_char == '_' and consumed and _is_digit(self._peek()):
                self.pos += 1
            else:
                return consumed

    def _lex_string(self, quote: str) -> Token:
        """Lex a quoted string; the token keeps the raw span, quotes included."""
        start = self.pos
        self.pos += 1

        while self.pos < len(self.source):
            current_char = self.source[self.pos]
            if current_char == quote:
                self.pos += 1
                return self._make(TokenType.STRING, start)
            if current_char in LINE_TERMINATORS:
                break
            if current_char == '\\':
                self._scan_escape_sequence()
            else:
                self.pos += 1

        self._report(create_unterminated_string_error(quote, Span(start, self.pos)))
        return self._make(TokenType.STRING, start)

    def _lex_template_chunk(self, start: int, opening: bool) -> Token:
        """
        Lex one raw template chunk, starting right after '`' or the '}'
        that closed a substitution.
        """
        chunk_start = self.pos

        while self.pos < len(self.source):
            current_char = self.source[self.pos]
            if current_char == '`':
                chunk = Span(chunk_start, self.pos)
                self.pos += 1
                token_type = TokenType.TEMPLATE if opening else TokenType.TEMPLATE_TAIL
                return self._make(token_type, start, chunk)
            if current_char == '$' and self._peek() == '{':
                chunk = Span(chunk_start, self.pos)
                self.pos += 2
                self._template_braces.append(0)
                token_type = TokenType.TEMPLATE_HEAD if opening else TokenType.TEMPLATE_MIDDLE
                return self._make(token_type, start, chunk)
            if current_char == '\\':
                self._scan_escape_sequence()
            else:
                self.pos += 1

        self._report(create_unterminated_template_error(Span(start, self.pos)))
        token_type = TokenType.TEMPLATE if opening else TokenType.TEMPLATE_TAIL
        return self._make(token_type, start, Span(chunk_start, self.pos))

    def _scan_escape_sequence(self):
        """Step over an escape sequence, reporting malformed hex/unicode forms."""
        escape_start = self.pos
        self.pos += 1  # Skip backslash
        if self.pos >= len(self.source):
            return

        escape_char = self.source[self.pos]
        self.pos += 1

        if escape_char == '\r' and self._current() == '\n':
            self.pos += 1
        elif escape_char == 'x':
            if not self._consume_hex(2):
                self._report_escape(escape_start)
        elif escape_char == 'u':
            if self._current() == '{':
                close = self.source.find('}', self.pos)
                digits = self.source[self.pos + 1:close] if close != -1 else ""
                if digits and all(c in HEX_DIGITS for c in digits) and int(digits, 16) <= 0x10FFFF:
                    self.pos = close + 1
                else:
                    self._report_escape(escape_start)
            elif not self._consume_hex(4):
                self._report_escape(escape_start)

    def _consume_hex(self, count: int) -> bool:
        digits = self.source[self.pos:self.pos + count]
        if len(digits) == count and all(c in HEX_DIGITS for c in digits):
            self.pos += count
            return True
        return False

    def _report_escape(self, escape_start: int):
        self._report(create_invalid_escape_error(
            self.source[escape_start:self.pos],
            Span(escape_start, self.pos)
        ))

    def _skip_whitespace_and_comments(self):
        """Skip whitespace and comments, noting whether a line break was crossed."""
        source = self.source
        while self.pos < len(source):
            current_char = source[self.pos]

            if current_char in LINE_TERMINATORS:
                self._newline_before = True
                self.pos += 1
                continue

            if current_char.isspace() or current_char == '\ufeff':
                self.pos += 1
                continue

            # Line comments //
            if source.startswith('//', self.pos):
                while self.pos < len(source) and source[self.pos] not in LINE_TERMINATORS:
                    self.pos += 1
                continue

            # Block comments /* */
            if source.startswith('/*', self.pos):
                close = source.find('*/', self.pos + 2)
                end = len(source) if close == -1 else close + 2
                if any(c in LINE_TERMINATORS for c in source[self.pos:end]):
                    self._newline_before = True
                if close == -1:
                    self._report(create_unterminated_comment_error(Span(self.pos, end)))
                self.pos = end
                continue

            break

    def _make(self, token_type: TokenType, start: int, value=None) -> Token:
        return Token(token_type, start, self.pos, value, self._newline_before)

    def _report(self, error: LexerError):
        logger.debug("lexical error %s at %s: %s", error.code, error.span, error.message)
        self.errors.append(error)

    def _current(self) -> str:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return '\0'

    def _peek(self, offset: int = 1) -> str:
        """Peek at character ahead without advancing."""
        peek_pos = self.pos + offset
        if peek_pos < len(self.source):
            return self.source[peek_pos]
        return '\0'


def _is_digit(char: str) -> bool:
    return '0' <= char <= '9'


def _is_identifier_start(char: str) -> bool:
    """Check if character can start an identifier."""
    return (char.isalpha() or char == '_' or char == '$' or
            unicodedata.category(char) in ('Lu', 'Ll', 'Lt', 'Lm', 'Lo', 'Nl'))


def _is_identifier_continue(char: str) -> bool:
    """Check if character can continue an identifier."""
    return (char.isalnum() or char == '_' or char == '$' or
            unicodedata.category(char) in ('Lu', 'Ll', 'Lt', 'Lm', 'Lo', 'Nl', 'Mn', 'Mc', 'Nd', 'Pc'))


def _is_hex(text: str) -> bool:
    return bool(text) and all(c in HEX_DIGITS for c in text)


def unescape(raw: str) -> str:
    """
    Cook the raw text between string or template delimiters.

    Malformed escapes (already reported by the lexer) are kept literally.
    """
    parts = []
    i = 0
    while i < len(raw):
        char = raw[i]
        if char != '\\' or i + 1 >= len(raw):
            parts.append(char)
            i += 1
            continue

        escape_char = raw[i + 1]
        i += 2
        if escape_char in SINGLE_ESCAPES:
            parts.append(SINGLE_ESCAPES[escape_char])
        elif escape_char == 'x' and len(raw[i:i + 2]) == 2 and _is_hex(raw[i:i + 2]):
            parts.append(chr(int(raw[i:i + 2], 16)))
            i += 2
        elif escape_char == 'u' and raw[i:i + 1] == '{':
            close = raw.find('}', i)
            digits = raw[i + 1:close] if close != -1 else ""
            if _is_hex(digits) and int(digits, 16) <= 0x10FFFF:
                parts.append(chr(int(digits, 16)))
                i = close + 1
            else:
                parts.append('u')
        elif escape_char == 'u' and len(raw[i:i + 4]) == 4 and _is_hex(raw[i:i + 4]):
            parts.append(chr(int(raw[i:i + 4], 16)))
            i += 4
        elif escape_char == '\r':
            if raw[i:i + 1] == '\n':
                i += 1
        elif escape_char in LINE_TERMINATORS:
            pass  # Line continuation
        else:
            parts.append(escape_char)

    return ''.join(parts)
