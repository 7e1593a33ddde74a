"""
jsarena Parser Implementation

Recursive descent over statements with precedence climbing for binary
operators. Tokens are pulled from the lexer on demand and buffered, so the
parser can snapshot its cursor and rewind when an arrow-function parameter
list turns out to be a parenthesized expression.

Every node is allocated into an ``Arena``. Syntax errors are raised from
deep inside the grammar and caught once per statement; the parser then
skips to a plausible statement boundary and carries on, so a single call
reports every independent error in the input.
"""

import logging
from contextlib import contextmanager
from dataclasses import fields, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from ..lexer.tokens import Token, TokenType, Span, KEYWORD_TOKENS
from ..lexer.lexer import Lexer, unescape
from ..lexer.errors import SourceError
from ..diagnostics import Diagnostics
from .arena import Arena
from .ast_nodes import (
    Index, Indices, Node, Item, Value, ValueKind, VariableDeclarationKind,
    UNDEFINED, NULL, TRUE, FALSE,
    Identifier, This, ValueExpr, ArrayExpr, SequenceExpr, MemberExpr, CallExpr,
    BinaryExpr, PrefixExpr, PostfixExpr, ConditionalExpr, TemplateExpr, ArrowExpr,
    FunctionExpr, ClassExpr, ClassMethod, ClassProperty, VariableDeclarator,
    EmptyStatement, ExpressionStatement, DeclarationStatement, FunctionStatement,
    ClassStatement, ReturnStatement, BlockStatement, IfStatement, WhileStatement,
    Invalid,
)
from .errors import (
    ParseError, SyntaxErrorRecovery, create_unexpected_token_error,
    create_missing_semicolon_error, create_invalid_expression_error,
    NestingTooDeepError, create_nesting_too_deep_error,
)
from .operators import Precedence, BINARY_OPERATORS, PREFIX_OPERATORS, POSTFIX_OPERATORS

logger = logging.getLogger(__name__)

# Statements and binary or prefix expressions count one level each
MAX_NESTING_DEPTH = 64


DECLARATION_KINDS = {
    TokenType.VAR: VariableDeclarationKind.VAR,
    TokenType.LET: VariableDeclarationKind.LET,
    TokenType.CONST: VariableDeclarationKind.CONST,
}

LITERAL_VALUES = {
    TokenType.UNDEFINED: UNDEFINED,
    TokenType.NULL: NULL,
    TokenType.TRUE: TRUE,
    TokenType.FALSE: FALSE,
}


class ParseResult:
    """
    Outcome of one parse call.

    Owns the source text, the arena and the diagnostics batch. The tree is
    always present; when ``errors`` is non-empty it may contain ``Invalid``
    nodes standing in for the fragments that could not be parsed.
    """

    def __init__(self, source: str, arena: Arena, body: Indices,
                 errors: List[SourceError], filename: str = "<input>"):
        self.source = source
        self.arena = arena
        self.body = body
        self.errors = errors
        self.filename = filename

    @property
    def ok(self) -> bool:
        return not self.errors

    def node(self, index: Index) -> Node:
        return self.arena.get(index)

    def item(self, index: Index) -> Item:
        return self.arena.get(index).item

    def text(self, index: Index) -> str:
        """Source text covered by a node."""
        return self.arena.get(index).span.slice(self.source)

    def statements(self) -> List[Node]:
        return [self.arena.get(index) for index in self.body]

    def dump(self, index: Optional[Index] = None):
        """
        Span-free nested rendering of a subtree.

        With no index, dumps the whole program as a list of statements.
        Two trees are structurally equal when their dumps compare equal.
        """
        if index is None:
            return [self.dump(statement) for statement in self.body]

        node = self.arena.get(index)
        result = {"type": type(node.item).__name__}
        if isinstance(node.item, Identifier):
            result["name"] = node.span.slice(self.source)
        for field in fields(node.item):
            result[field.name] = self._dump_field(getattr(node.item, field.name))
        return result

    def _dump_field(self, value):
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, tuple):
            return [self.dump(child) for child in value]
        if isinstance(value, Enum):
            return value.name
        if isinstance(value, Value):
            return {"kind": value.kind.name, "value": self._literal(value)}
        return self.dump(value)

    def _literal(self, value: Value):
        if value.kind is ValueKind.INTEGER:
            return value.integer
        if value.span is None:
            return None

        text = value.span.slice(self.source)
        if value.kind is ValueKind.NUMBER:
            try:
                return float(text.replace('_', ''))
            except ValueError:
                return None
        if value.kind is ValueKind.STRING:
            raw = text[1:]
            if len(text) > 1 and raw.endswith(text[0]):
                raw = raw[:-1]
            return unescape(raw)
        return text

    def __repr__(self) -> str:
        return f"ParseResult({self.filename!r}, statements={len(self.body)}, errors={len(self.errors)})"


class Parser:
    """
    jsarena parser.

    One instance parses one source text; it owns its lexer, token buffer,
    arena and diagnostics.
    """

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the parser.

        Args:
            source: Source text
            filename: Name of source used when diagnostics are displayed
        """
        self.source = source
        self.filename = filename
        self.lexer = Lexer(source, filename)
        self.arena = Arena()
        self.diagnostics = Diagnostics()

        self._tokens: List[Token] = []
        self.current = 0
        self._depth = 0

        self._init_parsing_tables()

    def _init_parsing_tables(self):
        """Initialize the statement and primary-expression dispatch tables."""

        # Statement parsers, by leading token; anything else is an expression statement
        self.statement_parsers: Dict[TokenType, Callable[[], Index]] = {
            TokenType.SEMICOLON: self._parse_empty_statement,
            TokenType.VAR: self._parse_declaration_statement,
            TokenType.LET: self._parse_declaration_statement,
            TokenType.CONST: self._parse_declaration_statement,
            TokenType.FUNCTION: self._parse_function_statement,
            TokenType.CLASS: self._parse_class_statement,
            TokenType.RETURN: self._parse_return_statement,
            TokenType.IF: self._parse_if_statement,
            TokenType.WHILE: self._parse_while_statement,
            TokenType.LEFT_BRACE: self._parse_block_statement,
        }

        # Prefix parsers (tokens that can start a primary expression)
        self.prefix_parsers: Dict[TokenType, Callable[[], Index]] = {
            # Names
            TokenType.IDENTIFIER: self._parse_identifier,
            TokenType.THIS: self._parse_this,

            # Literals
            TokenType.UNDEFINED: self._parse_keyword_literal,
            TokenType.NULL: self._parse_keyword_literal,
            TokenType.TRUE: self._parse_keyword_literal,
            TokenType.FALSE: self._parse_keyword_literal,
            TokenType.NUMBER: self._parse_number_literal,
            TokenType.INTEGER: self._parse_integer_literal,
            TokenType.STRING: self._parse_string_literal,
            TokenType.TEMPLATE: self._parse_template_literal,
            TokenType.TEMPLATE_HEAD: self._parse_template_literal,

            # Grouping
            TokenType.LEFT_PAREN: self._parse_grouping,
            TokenType.LEFT_BRACKET: self._parse_array_literal,

            # Function and class expressions
            TokenType.FUNCTION: self._parse_function_expression,
            TokenType.CLASS: self._parse_class_expression,

            # Already reported by the lexer
            TokenType.INVALID: self._parse_invalid_token,
        }

    def parse(self) -> ParseResult:
        """
        Parse the whole source text.

        Returns:
            ParseResult with the tree and every lexical and syntax error,
            ordered by position
        """
        body = []
        while not self._check(TokenType.EOF):
            body.append(self._parse_statement())

        if self.lexer.has_errors():
            logger.debug("%d lexical errors in %s", len(self.lexer.errors), self.filename)
            self.diagnostics.extend(self.lexer.errors)
        return ParseResult(self.source, self.arena, tuple(body),
                           self.diagnostics.sorted(), self.filename)

    # Statements

    def _parse_statement(self) -> Index:
        """Parse one statement, recovering from any syntax error inside it."""
        start_cursor = self.current
        start = self._peek().start
        statement_parser = self.statement_parsers.get(self._peek().type,
                                                      self._parse_expression_statement)
        try:
            with self._nested():
                return statement_parser()
        except NestingTooDeepError as e:
            # Unwind to the outermost statement and drop all of it
            if self._depth > 0:
                raise
            self._record(e)
            self._skip_nested_statement(start_cursor)
        except ParseError as e:
            self._record(e)
            self._synchronize(start_cursor)

        end = self._previous_end()
        return self.arena.allocate(Span(min(start, end), end), Invalid())

    def _parse_empty_statement(self) -> Index:
        token = self._advance()
        return self.arena.allocate(token.span, EmptyStatement())

    def _parse_expression_statement(self) -> Index:
        start = self._peek().start
        expression = self._parse_expression()
        self._consume_terminator()
        return self.arena.allocate(self._span_from(start), ExpressionStatement(expression))

    def _parse_declaration_statement(self) -> Index:
        """Parse ``var|let|const name (= value)? (, name (= value)?)* ;``."""
        start_token = self._advance()
        kind = DECLARATION_KINDS[start_token.type]

        declarators = [self._parse_variable_declarator()]
        while self._match(TokenType.COMMA):
            declarators.append(self._parse_variable_declarator())

        self._consume_terminator()
        return self.arena.allocate(
            self._span_from(start_token.start),
            DeclarationStatement(kind, tuple(declarators))
        )

    def _parse_variable_declarator(self) -> Index:
        name = self._parse_binding_identifier()
        start = self.arena.get(name).span.start

        value = None
        if self._match(TokenType.ASSIGN):
            value = self._parse_assignment()

        return self.arena.allocate(self._span_from(start), VariableDeclarator(name, value))

    def _parse_function_statement(self) -> Index:
        """Parse ``function name (params) { body }``; the name is mandatory here."""
        start_token = self._advance()
        slot = self.arena.reserve_placeholder(start_token.start)
        try:
            name = self._parse_binding_identifier()
            params, body = self._parse_function_rest()
        except ParseError:
            self.arena.patch(slot, self._span_from(start_token.start), Invalid())
            raise

        self.arena.patch(slot, self._span_from(start_token.start),
                         FunctionStatement(name, params, body))
        return slot

    def _parse_class_statement(self) -> Index:
        """Parse ``class Name (extends Base)? { members }``."""
        start_token = self._advance()
        slot = self.arena.reserve_placeholder(start_token.start)
        try:
            name = self._parse_binding_identifier()
            extends, members = self._parse_class_tail()
        except ParseError:
            self.arena.patch(slot, self._span_from(start_token.start), Invalid())
            raise

        self.arena.patch(slot, self._span_from(start_token.start),
                         ClassStatement(name, extends, members))
        return slot

    def _parse_return_statement(self) -> Index:
        start_token = self._advance()

        value = None
        if not self._at_statement_end():
            value = self._parse_expression()

        self._consume_terminator()
        return self.arena.allocate(self._span_from(start_token.start), ReturnStatement(value))

    def _parse_if_statement(self) -> Index:
        """Parse an if statement; ``else if`` nests in the alternate slot."""
        start_token = self._advance()
        test = self._parse_condition()
        consequent = self._parse_statement()

        alternate = None
        if self._match(TokenType.ELSE):
            alternate = self._parse_statement()

        return self.arena.allocate(
            self._span_from(start_token.start),
            IfStatement(test, consequent, alternate)
        )

    def _parse_while_statement(self) -> Index:
        start_token = self._advance()
        test = self._parse_condition()
        body = self._parse_statement()
        return self.arena.allocate(self._span_from(start_token.start), WhileStatement(test, body))

    def _parse_block_statement(self) -> Index:
        start = self._peek().start
        body = self._parse_braced_statements()
        return self.arena.allocate(self._span_from(start), BlockStatement(body))

    def _parse_condition(self) -> Index:
        self._consume(TokenType.LEFT_PAREN)
        test = self._parse_expression()
        self._consume(TokenType.RIGHT_PAREN)
        return test

    def _parse_braced_statements(self) -> Indices:
        """
        Parse ``{ statement* }``.

        A missing ``}`` at end of input is reported but not raised, so the
        statements already parsed are kept.
        """
        self._consume(TokenType.LEFT_BRACE)

        body = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._check(TokenType.EOF):
            body.append(self._parse_statement())

        if not self._match(TokenType.RIGHT_BRACE):
            self._record(create_unexpected_token_error(TokenType.RIGHT_BRACE, self._peek(), self.source))
        return tuple(body)

    # Functions and classes

    def _parse_function_rest(self) -> Tuple[Indices, Indices]:
        """Parse the parameter list and body shared by every function form."""
        params = self._parse_formal_parameters()
        body = self._parse_braced_statements()
        return params, body

    def _parse_formal_parameters(self) -> Indices:
        self._consume(TokenType.LEFT_PAREN)

        params = []
        while not self._check(TokenType.RIGHT_PAREN):
            params.append(self._parse_binding_identifier())
            if not self._match(TokenType.COMMA):
                break

        self._consume(TokenType.RIGHT_PAREN)
        return tuple(params)

    def _parse_class_tail(self) -> Tuple[Optional[Index], Indices]:
        """Parse the optional ``extends`` clause and the class body."""
        extends = None
        if self._match(TokenType.EXTENDS):
            extends = self._parse_binding_identifier()

        self._consume(TokenType.LEFT_BRACE)

        members = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._check(TokenType.EOF):
            if self._match(TokenType.SEMICOLON):
                continue
            members.append(self._parse_class_member())

        self._consume(TokenType.RIGHT_BRACE)
        return extends, tuple(members)

    def _parse_class_member(self) -> Index:
        """Parse a method ``name(params) { body }`` or a property ``name (= value)?;``."""
        start = self._peek().start

        is_static = False
        if self._at_static_modifier():
            self._advance()
            is_static = True

        name = self._parse_property_name()

        if self._check(TokenType.LEFT_PAREN):
            params, body = self._parse_function_rest()
            return self.arena.allocate(self._span_from(start),
                                       ClassMethod(name, params, body, is_static))

        value = None
        if self._match(TokenType.ASSIGN):
            value = self._parse_assignment()
        self._consume_terminator()
        return self.arena.allocate(self._span_from(start), ClassProperty(name, value, is_static))

    def _at_static_modifier(self) -> bool:
        token = self._peek()
        if not token.is_identifier or token.text(self.source) != "static":
            return False
        following = self._peek(1).type
        return following == TokenType.IDENTIFIER or following in KEYWORD_TOKENS

    # Expressions

    def _parse_expression(self) -> Index:
        """Parse a comma-separated sequence; a single element is returned as is."""
        start = self._peek().start
        expression = self._parse_assignment()
        if not self._check(TokenType.COMMA):
            return expression

        expressions = [expression]
        while self._match(TokenType.COMMA):
            expressions.append(self._parse_assignment())
        return self.arena.allocate(self._span_from(start), SequenceExpr(tuple(expressions)))

    def _parse_assignment(self) -> Index:
        """Parse an assignment-level expression, including ``test ? a : b``."""
        start = self._peek().start
        test = self._parse_binary(Precedence.ASSIGNMENT)
        if not self._match(TokenType.QUESTION):
            return test

        with self._nested():
            consequent = self._parse_assignment()
            self._consume(TokenType.COLON)
            alternate = self._parse_assignment()
        return self.arena.allocate(self._span_from(start),
                                   ConditionalExpr(test, consequent, alternate))

    def _parse_binary(self, min_precedence: int) -> Index:
        """
        Precedence climbing.

        Consumes binary operators binding at least as tightly as
        ``min_precedence``. The right operand of a left-associative operator
        is parsed one level tighter, so equal-precedence chains group left
        first; right-associative operators recurse at their own level.
        """
        start = self._peek().start
        with self._nested():
            left = self._parse_prefix()

            while True:
                operator = BINARY_OPERATORS.get(self._peek().type)
                if operator is None or operator.precedence < min_precedence:
                    return left
                self._advance()

                if operator.is_assignment:
                    right = self._parse_assignment()
                else:
                    right = self._parse_binary(operator.next_precedence)

                left = self.arena.allocate(self._span_from(start), BinaryExpr(operator, left, right))

    def _parse_prefix(self) -> Index:
        operator = PREFIX_OPERATORS.get(self._peek().type)
        if operator is None:
            return self._parse_postfix()

        with self._nested():
            start_token = self._advance()
            operand = self._parse_prefix()
        return self.arena.allocate(self._span_from(start_token.start), PrefixExpr(operator, operand))

    def _parse_postfix(self) -> Index:
        """Parse a primary followed by member accesses, calls and one ``++``/``--``."""
        start = self._peek().start
        expression = self._parse_primary()

        while True:
            if self._match(TokenType.DOT):
                name = self._parse_property_name()
                expression = self.arena.allocate(self._span_from(start),
                                                 MemberExpr(expression, name))
            elif self._match(TokenType.LEFT_BRACKET):
                key = self._parse_expression()
                self._consume(TokenType.RIGHT_BRACKET)
                expression = self.arena.allocate(self._span_from(start),
                                                 MemberExpr(expression, key, computed=True))
            elif self._check(TokenType.LEFT_PAREN):
                arguments = self._parse_arguments()
                expression = self.arena.allocate(self._span_from(start),
                                                 CallExpr(expression, arguments))
            else:
                break

        # A line break before ++/-- makes it the prefix of the next statement
        operator = POSTFIX_OPERATORS.get(self._peek().type)
        if operator is not None and not self._peek().newline_before:
            self._advance()
            expression = self.arena.allocate(self._span_from(start),
                                             PostfixExpr(operator, expression))
        return expression

    def _parse_arguments(self) -> Indices:
        self._consume(TokenType.LEFT_PAREN)

        arguments = []
        while not self._check(TokenType.RIGHT_PAREN):
            arguments.append(self._parse_assignment())
            if not self._match(TokenType.COMMA):
                break

        self._consume(TokenType.RIGHT_PAREN)
        return tuple(arguments)

    def _parse_primary(self) -> Index:
        prefix_parser = self.prefix_parsers.get(self._peek().type)
        if prefix_parser is None:
            raise create_invalid_expression_error(self._peek(), self.source)
        return prefix_parser()

    # Primary expressions

    def _parse_identifier(self) -> Index:
        """Parse an identifier, or a one-parameter arrow function ``name => body``."""
        token = self._advance()
        identifier = self.arena.allocate(token.span, Identifier())
        if self._check(TokenType.FAT_ARROW):
            return self._parse_arrow_function(token.start, (identifier,))
        return identifier

    def _parse_this(self) -> Index:
        token = self._advance()
        return self.arena.allocate(token.span, This())

    def _parse_keyword_literal(self) -> Index:
        token = self._advance()
        return self.arena.allocate(token.span, ValueExpr(LITERAL_VALUES[token.type]))

    def _parse_number_literal(self) -> Index:
        token = self._advance()
        return self.arena.allocate(token.span, ValueExpr(Value(ValueKind.NUMBER, span=token.span)))

    def _parse_integer_literal(self) -> Index:
        token = self._advance()
        return self.arena.allocate(token.span, ValueExpr(Value(ValueKind.INTEGER, integer=token.value)))

    def _parse_string_literal(self) -> Index:
        token = self._advance()
        return self.arena.allocate(token.span, ValueExpr(Value(ValueKind.STRING, span=token.span)))

    def _parse_template_literal(self) -> Index:
        """Parse a template literal, alternating raw chunks and substitutions."""
        token = self._advance()
        start = token.start
        quasis = [self._allocate_template_chunk(token)]
        expressions = []

        while token.type in (TokenType.TEMPLATE_HEAD, TokenType.TEMPLATE_MIDDLE):
            expressions.append(self._parse_expression())
            token = self._peek()
            if token.type not in (TokenType.TEMPLATE_MIDDLE, TokenType.TEMPLATE_TAIL):
                raise create_unexpected_token_error("'}' closing the substitution", token, self.source)
            self._advance()
            quasis.append(self._allocate_template_chunk(token))

        return self.arena.allocate(self._span_from(start),
                                   TemplateExpr(tuple(quasis), tuple(expressions)))

    def _allocate_template_chunk(self, token: Token) -> Index:
        chunk = token.value
        return self.arena.allocate(chunk, ValueExpr(Value(ValueKind.TEMPLATE_CHUNK, span=chunk)))

    def _parse_grouping(self) -> Index:
        """
        Parse ``(`` as either an arrow parameter list or a parenthesized
        expression.

        A parenthesized binary expression is re-allocated with its
        ``parenthesized`` flag set and a span covering the parentheses.
        """
        start_token = self._peek()
        names = self._scan_arrow_parameters()
        if names is not None:
            params = tuple(self.arena.allocate(name.span, Identifier()) for name in names)
            return self._parse_arrow_function(start_token.start, params)

        self._advance()
        expression = self._parse_expression()
        self._consume(TokenType.RIGHT_PAREN)

        item = self.arena.get(expression).item
        if isinstance(item, BinaryExpr):
            return self.arena.allocate(self._span_from(start_token.start),
                                       replace(item, parenthesized=True))
        return expression

    def _scan_arrow_parameters(self) -> Optional[List[Token]]:
        """
        Speculatively match ``( [name (, name)*] ) =>`` over tokens only.

        On success the cursor is left on ``=>`` and the name tokens are
        returned; otherwise the cursor is restored and None is returned.
        Nothing is allocated either way.
        """
        snapshot = self._snapshot()
        self._advance()

        names = []
        while self._check(TokenType.IDENTIFIER):
            names.append(self._advance())
            if not self._match(TokenType.COMMA):
                break

        if self._match(TokenType.RIGHT_PAREN) and self._check(TokenType.FAT_ARROW):
            return names

        logger.debug("no arrow parameter list at offset %d, reparsing as expression",
                     self._tokens[snapshot].start)
        self._restore(snapshot)
        return None

    def _parse_arrow_function(self, start: int, params: Indices) -> Index:
        """Parse ``=> body``; an expression body is wrapped as an expression statement."""
        self._consume(TokenType.FAT_ARROW)

        body_start = self._peek().start
        if self._check(TokenType.LEFT_BRACE):
            statements = self._parse_braced_statements()
            body = self.arena.allocate(self._span_from(body_start), BlockStatement(statements))
        else:
            expression = self._parse_assignment()
            body = self.arena.allocate(self._span_from(body_start), ExpressionStatement(expression))

        return self.arena.allocate(self._span_from(start), ArrowExpr(params, body))

    def _parse_array_literal(self) -> Index:
        start_token = self._advance()

        elements = []
        while not self._check(TokenType.RIGHT_BRACKET):
            elements.append(self._parse_assignment())
            if not self._match(TokenType.COMMA):
                break

        self._consume(TokenType.RIGHT_BRACKET)
        return self.arena.allocate(self._span_from(start_token.start), ArrayExpr(tuple(elements)))

    def _parse_function_expression(self) -> Index:
        start_token = self._advance()

        name = None
        if self._check(TokenType.IDENTIFIER):
            name = self._parse_binding_identifier()

        params, body = self._parse_function_rest()
        return self.arena.allocate(self._span_from(start_token.start),
                                   FunctionExpr(name, params, body))

    def _parse_class_expression(self) -> Index:
        start_token = self._advance()

        name = None
        if self._check(TokenType.IDENTIFIER):
            name = self._parse_binding_identifier()

        extends, members = self._parse_class_tail()
        return self.arena.allocate(self._span_from(start_token.start),
                                   ClassExpr(name, extends, members))

    def _parse_invalid_token(self) -> Index:
        token = self._advance()
        return self.arena.allocate(token.span, Invalid())

    # Names

    def _parse_binding_identifier(self) -> Index:
        token = self._consume(TokenType.IDENTIFIER)
        return self.arena.allocate(token.span, Identifier())

    def _parse_property_name(self) -> Index:
        """Property names after ``.`` and in class bodies may be reserved words."""
        token = self._peek()
        if not (token.is_identifier or token.is_keyword):
            raise create_unexpected_token_error("a property name", token, self.source)
        self._advance()
        return self.arena.allocate(token.span, Identifier())

    # Statement termination

    def _at_statement_end(self) -> bool:
        token = self._peek()
        return (token.type in (TokenType.SEMICOLON, TokenType.RIGHT_BRACE, TokenType.EOF)
                or token.newline_before)

    def _consume_terminator(self):
        """
        Consume ``;``, or accept the end of the statement at ``}``, at end of
        input or before a token on a new line.
        """
        token = self._peek()
        if token.type == TokenType.SEMICOLON:
            self._advance()
            return
        if token.type in (TokenType.RIGHT_BRACE, TokenType.EOF) or token.newline_before:
            return
        raise create_missing_semicolon_error(token, self.source)

    # Error recovery

    def _record(self, error: SourceError):
        logger.debug("syntax error %s at %s: %s", error.code, error.span, error.message)
        self.diagnostics.add(error)

    def _synchronize(self, start_cursor: int):
        """
        Skip tokens until a statement can plausibly start.

        A terminator is consumed; a boundary token is left for the next
        statement. At least one token is always consumed (unless at EOF).
        """
        while True:
            token_type = self._peek().type
            if token_type in SyntaxErrorRecovery.TERMINATORS:
                self._advance()
                break
            if token_type in SyntaxErrorRecovery.STATEMENT_BOUNDARIES:
                break
            self._advance()

        if self.current == start_cursor:
            self._advance()

        logger.debug("resynchronized at offset %d", self._peek().start)

    @contextmanager
    def _nested(self):
        """Count one nesting level; past the limit, fail before recursing further."""
        self._depth += 1
        try:
            if self._depth > MAX_NESTING_DEPTH:
                raise create_nesting_too_deep_error(self._peek(), MAX_NESTING_DEPTH)
            yield
        finally:
            self._depth -= 1

    def _skip_nested_statement(self, start_cursor: int):
        """
        Skip a whole top-level statement that nested too deeply.

        Brackets are kept balanced, so the skip ends at the first ';' or '}'
        outside any of them, or at end of input.
        """
        self._restore(start_cursor)
        depth = 0
        while not self._check(TokenType.EOF):
            token_type = self._advance().type
            if token_type in SyntaxErrorRecovery.OPENERS:
                depth += 1
            elif token_type in SyntaxErrorRecovery.CLOSERS:
                depth = max(depth - 1, 0)
            if depth == 0 and token_type in (TokenType.SEMICOLON, TokenType.RIGHT_BRACE):
                break

        logger.debug("skipped too deeply nested statement, resuming at offset %d",
                     self._peek().start)

    # Token buffer

    def _peek(self, offset: int = 0) -> Token:
        """Return a token ahead of the cursor, lexing it on first use."""
        index = self.current + offset
        while index >= len(self._tokens):
            if self._tokens and self._tokens[-1].type == TokenType.EOF:
                return self._tokens[-1]
            self._tokens.append(self.lexer.next_token())
        return self._tokens[index]

    def _advance(self) -> Token:
        """Consume and return the current token; EOF is never consumed."""
        token = self._peek()
        if token.type != TokenType.EOF:
            self.current += 1
        return token

    def _check(self, token_type: TokenType) -> bool:
        return self._peek().type == token_type

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _consume(self, token_type: TokenType) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()
        raise create_unexpected_token_error(token_type, self._peek(), self.source)

    def _snapshot(self) -> int:
        return self.current

    def _restore(self, snapshot: int):
        self.current = snapshot

    def _previous_end(self) -> int:
        if self.current == 0:
            return 0
        return self._tokens[self.current - 1].end

    def _span_from(self, start: int) -> Span:
        return Span(start, self._previous_end())


def parse(source: str, filename: str = "<input>") -> ParseResult:
    """
    Convenience function to parse a source string.

    Args:
        source: Source text
        filename: Filename for error reporting

    Returns:
        ParseResult; check ``result.ok`` or ``result.errors``
    """
    return Parser(source, filename).parse()
