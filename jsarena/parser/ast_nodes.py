"""
Syntax tree node vocabulary.

A node is a ``Span`` plus an ``Item``. ``Item`` is a closed union of small
frozen dataclasses, one per syntax kind; every reference to a
sub-construct is an arena ``Index`` (or a tuple of them), never an owned
object. Consumers dispatch on the item's type.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Iterator, NewType, Optional, Tuple, Union, get_args

from ..lexer.tokens import Span
from .operators import OperatorKind


Index = NewType("Index", int)

Indices = Tuple[Index, ...]


class ValueKind(Enum):
    UNDEFINED = "undefined"
    NULL = "null"
    TRUE = "true"
    FALSE = "false"
    NUMBER = "number"                   # decimal/float, kept as source text
    INTEGER = "integer"                 # 0b/0o/0x, evaluated at lex time
    STRING = "string"                   # quoted, escapes left in place
    TEMPLATE_CHUNK = "template_chunk"   # raw piece of a template literal


@dataclass(frozen=True)
class Value:
    """Literal value; text-backed kinds keep a span, integers keep the number."""
    kind: ValueKind
    span: Optional[Span] = None
    integer: Optional[int] = None


UNDEFINED = Value(ValueKind.UNDEFINED)
NULL = Value(ValueKind.NULL)
TRUE = Value(ValueKind.TRUE)
FALSE = Value(ValueKind.FALSE)


class VariableDeclarationKind(Enum):
    VAR = "var"
    LET = "let"
    CONST = "const"


# ============================================================================
# Identifiers
# ============================================================================

@dataclass(frozen=True)
class Identifier:
    """A name; its text is the node's span sliced out of the source."""


@dataclass(frozen=True)
class This:
    pass


# ============================================================================
# Expressions
# ============================================================================

@dataclass(frozen=True)
class ValueExpr:
    value: Value


@dataclass(frozen=True)
class ArrayExpr:
    elements: Indices


@dataclass(frozen=True)
class SequenceExpr:
    expressions: Indices


@dataclass(frozen=True)
class MemberExpr:
    object: Index
    property: Index
    computed: bool = False      # obj[expr] rather than obj.name


@dataclass(frozen=True)
class CallExpr:
    callee: Index
    arguments: Indices


@dataclass(frozen=True)
class BinaryExpr:
    operator: OperatorKind
    left: Index
    right: Index
    parenthesized: bool = False


@dataclass(frozen=True)
class PrefixExpr:
    operator: OperatorKind
    operand: Index


@dataclass(frozen=True)
class PostfixExpr:
    operator: OperatorKind
    operand: Index


@dataclass(frozen=True)
class ConditionalExpr:
    test: Index
    consequent: Index
    alternate: Index


@dataclass(frozen=True)
class TemplateExpr:
    quasis: Indices             # always one more than expressions
    expressions: Indices


@dataclass(frozen=True)
class ArrowExpr:
    params: Indices
    body: Index                 # BlockStatement or ExpressionStatement


@dataclass(frozen=True)
class FunctionExpr:
    name: Optional[Index]
    params: Indices
    body: Indices


@dataclass(frozen=True)
class ClassExpr:
    name: Optional[Index]
    extends: Optional[Index]
    body: Indices


# ============================================================================
# Class members
# ============================================================================

@dataclass(frozen=True)
class ClassMethod:
    name: Index
    params: Indices
    body: Indices
    is_static: bool = False


@dataclass(frozen=True)
class ClassProperty:
    name: Index
    value: Optional[Index]
    is_static: bool = False


# ============================================================================
# Declarations and statements
# ============================================================================

@dataclass(frozen=True)
class VariableDeclarator:
    name: Index
    value: Optional[Index]


@dataclass(frozen=True)
class EmptyStatement:
    pass


@dataclass(frozen=True)
class ExpressionStatement:
    expression: Index


@dataclass(frozen=True)
class DeclarationStatement:
    kind: VariableDeclarationKind
    declarators: Indices


@dataclass(frozen=True)
class FunctionStatement:
    name: Index
    params: Indices
    body: Indices


@dataclass(frozen=True)
class ClassStatement:
    name: Index
    extends: Optional[Index]
    body: Indices


@dataclass(frozen=True)
class ReturnStatement:
    value: Optional[Index]


@dataclass(frozen=True)
class BlockStatement:
    body: Indices


@dataclass(frozen=True)
class IfStatement:
    test: Index
    consequent: Index
    alternate: Optional[Index]


@dataclass(frozen=True)
class WhileStatement:
    test: Index
    body: Index


# ============================================================================
# Recovery
# ============================================================================

@dataclass(frozen=True)
class Invalid:
    """Stands in for a fragment that could not be parsed."""


@dataclass(frozen=True)
class Reserved:
    """A slot handed out by ``Arena.reserve_placeholder`` and not patched yet."""


Item = Union[
    Identifier, This,
    ValueExpr, ArrayExpr, SequenceExpr, MemberExpr, CallExpr, BinaryExpr,
    PrefixExpr, PostfixExpr, ConditionalExpr, TemplateExpr, ArrowExpr,
    FunctionExpr, ClassExpr,
    ClassMethod, ClassProperty,
    VariableDeclarator,
    EmptyStatement, ExpressionStatement, DeclarationStatement, FunctionStatement,
    ClassStatement, ReturnStatement, BlockStatement, IfStatement, WhileStatement,
    Invalid, Reserved,
]

ITEM_TYPES = get_args(Item)

STATEMENT_TYPES = (
    EmptyStatement, ExpressionStatement, DeclarationStatement, FunctionStatement,
    ClassStatement, ReturnStatement, BlockStatement, IfStatement, WhileStatement,
)


@dataclass(frozen=True)
class Node:
    span: Span
    item: Item


def child_indices(item: Item) -> Iterator[Index]:
    """Yield every index an item refers to, in field order."""
    for field in fields(item):
        value = getattr(item, field.name)
        if isinstance(value, tuple):
            yield from value
        elif isinstance(value, int) and not isinstance(value, bool):
            yield value
