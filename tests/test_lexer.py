"""
Test suite for the jsarena lexer.

Tests cover:
- Reserved word and identifier classification
- Numeric literals in every base, including malformed ones
- Strings, escapes and template literals
- Maximal-munch punctuators
- Comments, line-break tracking and error recovery
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from jsarena.lexer import Lexer, TokenType, Span, unescape


def lex(source):
    lexer = Lexer(source)
    return lexer.tokenize(), lexer.errors


def types(source):
    tokens, _ = lex(source)
    return [token.type for token in tokens]


class TestIdentifiersAndKeywords(unittest.TestCase):
    """Test cases for names and reserved words."""

    def test_reserved_words(self):
        source = "var let const function return if else while true false null undefined this class extends"
        self.assertEqual(types(source), [
            TokenType.VAR, TokenType.LET, TokenType.CONST, TokenType.FUNCTION,
            TokenType.RETURN, TokenType.IF, TokenType.ELSE, TokenType.WHILE,
            TokenType.TRUE, TokenType.FALSE, TokenType.NULL, TokenType.UNDEFINED,
            TokenType.THIS, TokenType.CLASS, TokenType.EXTENDS, TokenType.EOF,
        ])

    def test_keyword_prefix_is_identifier(self):
        self.assertEqual(types("varx iff classes"), [TokenType.IDENTIFIER] * 3 + [TokenType.EOF])

    def test_identifier_characters(self):
        tokens, errors = lex("$el _private café x1")
        self.assertEqual(errors, [])
        self.assertEqual([t.text("$el _private café x1") for t in tokens[:-1]],
                         ["$el", "_private", "café", "x1"])
        self.assertTrue(all(t.is_identifier for t in tokens[:-1]))

    def test_token_classification(self):
        tokens, _ = lex("if x 1 'a' `b` null +")
        self.assertEqual([t.is_keyword for t in tokens[:-1]],
                         [True, False, False, False, False, True, False])
        self.assertEqual([t.is_identifier for t in tokens[:-1]],
                         [False, True, False, False, False, False, False])

    def test_span_helpers(self):
        self.assertTrue(Span(0, 10).contains(Span(3, 3)))
        self.assertFalse(Span(2, 5).contains(Span(1, 4)))
        self.assertEqual(len(Span(2, 5)), 3)
        self.assertEqual(Span(4, 7).slice("var foo = 1;"), "foo")

    def test_tokens_carry_offsets(self):
        tokens, _ = lex("  foo")
        self.assertEqual(tokens[0].span, Span(2, 5))
        self.assertEqual(tokens[1].type, TokenType.EOF)
        self.assertEqual(tokens[1].span, Span(5, 5))


class TestNumbers(unittest.TestCase):
    """Test cases for numeric literals."""

    def test_radix_prefixes(self):
        for source in ("0b1100100", "0o144", "0x64", "0B1100100", "0O144", "0X64"):
            tokens, errors = lex(source)
            self.assertEqual(errors, [], source)
            self.assertEqual(tokens[0].type, TokenType.INTEGER, source)
            self.assertEqual(tokens[0].value, 100, source)

    def test_radix_values_match_int(self):
        for prefix, base in (("0b", 2), ("0o", 8), ("0x", 16)):
            for digits in ("0", "1", "10", "111", "1010"):
                tokens, _ = lex(prefix + digits)
                self.assertEqual(tokens[0].value, int(digits, base))

    def test_hex_digits_any_case(self):
        tokens, _ = lex("0xFf")
        self.assertEqual(tokens[0].value, 255)

    def test_bad_radix_digit(self):
        tokens, errors = lex("0b102")
        self.assertEqual(tokens[0].type, TokenType.INTEGER)
        self.assertEqual(tokens[0].span, Span(0, 5))
        self.assertEqual(tokens[0].value, 2)
        self.assertEqual([e.code for e in errors], ["L003"])

    def test_radix_separators(self):
        tokens, errors = lex("0x6_4")
        self.assertEqual(errors, [])
        self.assertEqual(tokens[0].value, 100)

        for source in ("0x_64", "0x64_", "0x6__4", "0b_1"):
            tokens, errors = lex(source)
            self.assertEqual([e.code for e in errors], ["L003"], source)
            self.assertEqual(errors[0].span, Span(0, len(source)), source)
            self.assertEqual(tokens[0].type, TokenType.INTEGER, source)
        self.assertEqual(lex("0x_64")[0][0].value, 100)

    def test_missing_radix_digits(self):
        tokens, errors = lex("0x")
        self.assertEqual(tokens[0].value, 0)
        self.assertEqual([e.code for e in errors], ["L003"])

    def test_decimal_forms(self):
        for source in ("100", "3.14", ".5", "1e10", "2.5E-3", "1_000", "7."):
            tokens, errors = lex(source)
            self.assertEqual(errors, [], source)
            self.assertEqual(tokens[0].type, TokenType.NUMBER, source)
            self.assertEqual(tokens[0].span, Span(0, len(source)), source)

    def test_exponent_without_digits(self):
        _, errors = lex("1e")
        self.assertEqual([e.code for e in errors], ["L003"])

    def test_identifier_after_number(self):
        tokens, errors = lex("3in")
        self.assertEqual(tokens[0].type, TokenType.NUMBER)
        self.assertEqual(tokens[0].span, Span(0, 3))
        self.assertEqual([e.code for e in errors], ["L003"])
        self.assertEqual(errors[0].span, Span(1, 3))

    def test_member_access_after_identifier(self):
        self.assertEqual(types("a.b"), [TokenType.IDENTIFIER, TokenType.DOT,
                                        TokenType.IDENTIFIER, TokenType.EOF])


class TestStrings(unittest.TestCase):
    """Test cases for string literals."""

    def test_both_quotes(self):
        tokens, errors = lex("\"hello\" 'world'")
        self.assertEqual(errors, [])
        self.assertEqual(tokens[0].type, TokenType.STRING)
        self.assertEqual(tokens[0].span, Span(0, 7))
        self.assertEqual(tokens[1].span, Span(8, 15))

    def test_escaped_quote(self):
        tokens, errors = lex(r"'it\'s'")
        self.assertEqual(errors, [])
        self.assertEqual(tokens[0].span, Span(0, 7))

    def test_unterminated_at_eof(self):
        tokens, errors = lex('"abc')
        self.assertEqual(tokens[0].type, TokenType.STRING)
        self.assertEqual([e.code for e in errors], ["L002"])

    def test_unterminated_at_line_break(self):
        tokens, errors = lex('"ab\ncd"')
        self.assertEqual(tokens[0].span, Span(0, 3))
        self.assertIn("L002", [e.code for e in errors])

    def test_line_continuation(self):
        _, errors = lex("'a\\\nb'")
        self.assertEqual(errors, [])

    def test_bad_hex_escape(self):
        tokens, errors = lex(r"'\x4G'")
        self.assertEqual(tokens[0].type, TokenType.STRING)
        self.assertEqual([e.code for e in errors], ["L006"])

    def test_bad_unicode_escape(self):
        _, errors = lex(r"'\u{110000}'")
        self.assertEqual([e.code for e in errors], ["L006"])

    def test_unescape(self):
        self.assertEqual(unescape(r"a\nb\x41B\u{43}"), "a\nbABC")
        self.assertEqual(unescape(r"it\'s"), "it's")
        self.assertEqual(unescape("a\\\nb"), "ab")

    def test_unescape_keeps_malformed(self):
        self.assertEqual(unescape(r"\x4G"), "x4G")


class TestTemplates(unittest.TestCase):
    """Test cases for template literals."""

    def test_plain_template(self):
        tokens, errors = lex("`abc`")
        self.assertEqual(errors, [])
        self.assertEqual(tokens[0].type, TokenType.TEMPLATE)
        self.assertEqual(tokens[0].value, Span(1, 4))

    def test_substitutions(self):
        source = "`a${b}c`"
        tokens, errors = lex(source)
        self.assertEqual(errors, [])
        self.assertEqual([t.type for t in tokens], [
            TokenType.TEMPLATE_HEAD, TokenType.IDENTIFIER, TokenType.TEMPLATE_TAIL, TokenType.EOF
        ])
        self.assertEqual(tokens[0].value, Span(1, 2))
        self.assertEqual(tokens[2].value, Span(6, 7))
        self.assertEqual(tokens[2].span, Span(5, 8))

    def test_middle_chunks(self):
        self.assertEqual(types("`${a}-${b}`"), [
            TokenType.TEMPLATE_HEAD, TokenType.IDENTIFIER, TokenType.TEMPLATE_MIDDLE,
            TokenType.IDENTIFIER, TokenType.TEMPLATE_TAIL, TokenType.EOF
        ])

    def test_braces_inside_substitution(self):
        self.assertEqual(types("`${{}}`"), [
            TokenType.TEMPLATE_HEAD, TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
            TokenType.TEMPLATE_TAIL, TokenType.EOF
        ])

    def test_unterminated_template(self):
        _, errors = lex("`abc")
        self.assertEqual([e.code for e in errors], ["L011"])


class TestPunctuators(unittest.TestCase):
    """Test cases for operators and punctuation."""

    def test_maximal_munch(self):
        self.assertEqual(types(">>>= >>> >>= >> => == === = ++ + -- - ** **="), [
            TokenType.USHR_ASSIGN, TokenType.USHR, TokenType.SHR_ASSIGN, TokenType.SHR,
            TokenType.FAT_ARROW, TokenType.EQUAL, TokenType.STRICT_EQUAL, TokenType.ASSIGN,
            TokenType.PLUS_PLUS, TokenType.PLUS, TokenType.MINUS_MINUS, TokenType.MINUS,
            TokenType.STAR_STAR, TokenType.STAR_STAR_ASSIGN, TokenType.EOF,
        ])

    def test_without_spaces(self):
        self.assertEqual(types("a=>b"), [TokenType.IDENTIFIER, TokenType.FAT_ARROW,
                                         TokenType.IDENTIFIER, TokenType.EOF])
        self.assertEqual(types("a+++b"), [TokenType.IDENTIFIER, TokenType.PLUS_PLUS,
                                          TokenType.PLUS, TokenType.IDENTIFIER, TokenType.EOF])


class TestTrivia(unittest.TestCase):
    """Test cases for whitespace, comments and recovery."""

    def test_comments_are_skipped(self):
        tokens, errors = lex("a // note\nb /* x */ c")
        self.assertEqual(errors, [])
        self.assertEqual([t.type for t in tokens], [TokenType.IDENTIFIER] * 3 + [TokenType.EOF])
        self.assertFalse(tokens[0].newline_before)
        self.assertTrue(tokens[1].newline_before)
        self.assertFalse(tokens[2].newline_before)

    def test_multiline_block_comment_counts_as_line_break(self):
        tokens, _ = lex("a /*\n*/ b")
        self.assertTrue(tokens[1].newline_before)

    def test_unterminated_block_comment(self):
        tokens, errors = lex("a /* never closed")
        self.assertEqual(tokens[-1].type, TokenType.EOF)
        self.assertEqual([e.code for e in errors], ["L012"])

    def test_invalid_character(self):
        tokens, errors = lex("a @ b")
        self.assertEqual([t.type for t in tokens], [
            TokenType.IDENTIFIER, TokenType.INVALID, TokenType.IDENTIFIER, TokenType.EOF
        ])
        self.assertEqual(tokens[1].span, Span(2, 3))
        self.assertEqual([e.code for e in errors], ["L001"])

    def test_eof_is_repeated(self):
        lexer = Lexer("a")
        lexer.next_token()
        self.assertEqual(lexer.next_token().type, TokenType.EOF)
        self.assertEqual(lexer.next_token().type, TokenType.EOF)
        self.assertFalse(lexer.has_errors())


if __name__ == '__main__':
    unittest.main()
