"""
jsarena Parser Package

Implements a recursive descent parser with precedence climbing for a
JavaScript-like language. Produces an arena-backed syntax tree in which
nodes refer to each other by index.

Key Features:
- Precedence climbing driven by a static operator table
- Speculative arrow-function detection over tokens only
- Parenthesization preserved on binary expressions
- Statement-level error recovery with batched diagnostics
"""

from .ast_nodes import (
    Index, Node, Item, Value, ValueKind, VariableDeclarationKind,
    Identifier, This, ValueExpr, ArrayExpr, SequenceExpr, MemberExpr, CallExpr,
    BinaryExpr, PrefixExpr, PostfixExpr, ConditionalExpr, TemplateExpr, ArrowExpr,
    FunctionExpr, ClassExpr, ClassMethod, ClassProperty, VariableDeclarator,
    EmptyStatement, ExpressionStatement, DeclarationStatement, FunctionStatement,
    ClassStatement, ReturnStatement, BlockStatement, IfStatement, WhileStatement,
    Invalid, Reserved,
)
from .arena import Arena
from .operators import OperatorKind, Precedence, Associativity, Arity
from .parser import Parser, ParseResult, parse
from .errors import ParseError, NestingTooDeepError, InternalParserError

__all__ = [
    # Core parser
    "Parser", "ParseResult", "parse", "Arena",

    # Operators
    "OperatorKind", "Precedence", "Associativity", "Arity",

    # Tree
    "Index", "Node", "Item", "Value", "ValueKind", "VariableDeclarationKind",
    "Identifier", "This", "ValueExpr", "ArrayExpr", "SequenceExpr", "MemberExpr",
    "CallExpr", "BinaryExpr", "PrefixExpr", "PostfixExpr", "ConditionalExpr",
    "TemplateExpr", "ArrowExpr", "FunctionExpr", "ClassExpr", "ClassMethod",
    "ClassProperty", "VariableDeclarator",
    "EmptyStatement", "ExpressionStatement", "DeclarationStatement",
    "FunctionStatement", "ClassStatement", "ReturnStatement", "BlockStatement",
    "IfStatement", "WhileStatement", "Invalid", "Reserved",

    # Error handling
    "ParseError", "NestingTooDeepError", "InternalParserError",
]
