"""
Operator table.

Every binary, prefix and postfix operator with its lexeme, precedence,
associativity and arity. Pure data: the parser's precedence climb reads
these tables and nothing else.
"""

from enum import Enum, IntEnum
from typing import Dict

from ..lexer.tokens import TokenType, PUNCTUATORS


class Precedence(IntEnum):
    """Operator precedence levels, loosest first."""
    NONE = 0
    ASSIGNMENT = 1      # =, +=, -=, etc.
    LOGICAL_OR = 2      # ||
    LOGICAL_AND = 3     # &&
    BITWISE_OR = 4      # |
    BITWISE_XOR = 5     # ^
    BITWISE_AND = 6     # &
    EQUALITY = 7        # ==, !=, ===, !==
    RELATIONAL = 8      # <, <=, >, >=
    SHIFT = 9           # <<, >>, >>>
    ADDITIVE = 10       # +, -
    MULTIPLICATIVE = 11 # *, /, %
    EXPONENT = 12       # **
    PREFIX = 13         # !, ~, +, -, ++, --
    POSTFIX = 14        # ++, --


class Associativity(Enum):
    LEFT = "left"
    RIGHT = "right"


class Arity(Enum):
    BINARY = "binary"
    PREFIX = "prefix"
    POSTFIX = "postfix"


_L = Associativity.LEFT
_R = Associativity.RIGHT


class OperatorKind(Enum):
    """
    Operator vocabulary.

    Assignment operators are ordinary binary operators at the lowest
    precedence; there is no separate assignment node.
    """

    # Assignment
    ASSIGN = ("=", Precedence.ASSIGNMENT, _R, Arity.BINARY)
    ADD_ASSIGN = ("+=", Precedence.ASSIGNMENT, _R, Arity.BINARY)
    SUBTRACT_ASSIGN = ("-=", Precedence.ASSIGNMENT, _R, Arity.BINARY)
    MULTIPLY_ASSIGN = ("*=", Precedence.ASSIGNMENT, _R, Arity.BINARY)
    DIVIDE_ASSIGN = ("/=", Precedence.ASSIGNMENT, _R, Arity.BINARY)
    REMAINDER_ASSIGN = ("%=", Precedence.ASSIGNMENT, _R, Arity.BINARY)
    EXPONENT_ASSIGN = ("**=", Precedence.ASSIGNMENT, _R, Arity.BINARY)
    BIT_SHIFT_LEFT_ASSIGN = ("<<=", Precedence.ASSIGNMENT, _R, Arity.BINARY)
    BIT_SHIFT_RIGHT_ASSIGN = (">>=", Precedence.ASSIGNMENT, _R, Arity.BINARY)
    UNSIGNED_BIT_SHIFT_RIGHT_ASSIGN = (">>>=", Precedence.ASSIGNMENT, _R, Arity.BINARY)
    BITWISE_AND_ASSIGN = ("&=", Precedence.ASSIGNMENT, _R, Arity.BINARY)
    BITWISE_OR_ASSIGN = ("|=", Precedence.ASSIGNMENT, _R, Arity.BINARY)
    BITWISE_XOR_ASSIGN = ("^=", Precedence.ASSIGNMENT, _R, Arity.BINARY)

    # Logical
    LOGICAL_OR = ("||", Precedence.LOGICAL_OR, _L, Arity.BINARY)
    LOGICAL_AND = ("&&", Precedence.LOGICAL_AND, _L, Arity.BINARY)

    # Bitwise
    BITWISE_OR = ("|", Precedence.BITWISE_OR, _L, Arity.BINARY)
    BITWISE_XOR = ("^", Precedence.BITWISE_XOR, _L, Arity.BINARY)
    BITWISE_AND = ("&", Precedence.BITWISE_AND, _L, Arity.BINARY)

    # Equality and comparison
    EQUALITY = ("==", Precedence.EQUALITY, _L, Arity.BINARY)
    INEQUALITY = ("!=", Precedence.EQUALITY, _L, Arity.BINARY)
    STRICT_EQUALITY = ("===", Precedence.EQUALITY, _L, Arity.BINARY)
    STRICT_INEQUALITY = ("!==", Precedence.EQUALITY, _L, Arity.BINARY)
    LESSER = ("<", Precedence.RELATIONAL, _L, Arity.BINARY)
    LESSER_EQUALS = ("<=", Precedence.RELATIONAL, _L, Arity.BINARY)
    GREATER = (">", Precedence.RELATIONAL, _L, Arity.BINARY)
    GREATER_EQUALS = (">=", Precedence.RELATIONAL, _L, Arity.BINARY)

    # Shifts
    BIT_SHIFT_LEFT = ("<<", Precedence.SHIFT, _L, Arity.BINARY)
    BIT_SHIFT_RIGHT = (">>", Precedence.SHIFT, _L, Arity.BINARY)
    UNSIGNED_BIT_SHIFT_RIGHT = (">>>", Precedence.SHIFT, _L, Arity.BINARY)

    # Arithmetic
    ADDITION = ("+", Precedence.ADDITIVE, _L, Arity.BINARY)
    SUBTRACTION = ("-", Precedence.ADDITIVE, _L, Arity.BINARY)
    MULTIPLICATION = ("*", Precedence.MULTIPLICATIVE, _L, Arity.BINARY)
    DIVISION = ("/", Precedence.MULTIPLICATIVE, _L, Arity.BINARY)
    REMAINDER = ("%", Precedence.MULTIPLICATIVE, _L, Arity.BINARY)
    EXPONENT = ("**", Precedence.EXPONENT, _R, Arity.BINARY)

    # Prefix
    LOGICAL_NOT = ("!", Precedence.PREFIX, _R, Arity.PREFIX)
    BITWISE_NOT = ("~", Precedence.PREFIX, _R, Arity.PREFIX)
    PLUS = ("+", Precedence.PREFIX, _R, Arity.PREFIX)
    MINUS = ("-", Precedence.PREFIX, _R, Arity.PREFIX)
    INCREMENT = ("++", Precedence.PREFIX, _R, Arity.PREFIX)
    DECREMENT = ("--", Precedence.PREFIX, _R, Arity.PREFIX)

    # Postfix
    POST_INCREMENT = ("++", Precedence.POSTFIX, _L, Arity.POSTFIX)
    POST_DECREMENT = ("--", Precedence.POSTFIX, _L, Arity.POSTFIX)

    def __init__(self, lexeme: str, precedence: Precedence,
                 associativity: Associativity, arity: Arity):
        self.lexeme = lexeme
        self.precedence = precedence
        self.associativity = associativity
        self.arity = arity

    @property
    def is_assignment(self) -> bool:
        return self.arity is Arity.BINARY and self.precedence == Precedence.ASSIGNMENT

    @property
    def next_precedence(self) -> int:
        """Minimum precedence for the right operand of this binary operator."""
        if self.associativity is Associativity.LEFT:
            return self.precedence + 1
        return self.precedence

    def __repr__(self) -> str:
        return f"<OperatorKind.{self.name} {self.lexeme!r}>"


def _by_token(arity: Arity) -> Dict[TokenType, OperatorKind]:
    return {PUNCTUATORS[op.lexeme]: op for op in OperatorKind if op.arity is arity}


BINARY_OPERATORS = _by_token(Arity.BINARY)
PREFIX_OPERATORS = _by_token(Arity.PREFIX)
POSTFIX_OPERATORS = _by_token(Arity.POSTFIX)
