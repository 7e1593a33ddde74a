"""
Source generator for jsarena syntax trees.

Turns a ``ParseResult`` back into source text. The tree is only read.
Parentheses around binary expressions come from their ``parenthesized``
flag; any other child is wrapped when its own binding is looser than its
position requires.
"""

from typing import Callable, Dict, Iterable

from ..parser.ast_nodes import (
    Index, Item, ValueKind,
    Identifier, This, ValueExpr, ArrayExpr, SequenceExpr, MemberExpr, CallExpr,
    BinaryExpr, PrefixExpr, PostfixExpr, ConditionalExpr, TemplateExpr, ArrowExpr,
    FunctionExpr, ClassExpr, ClassMethod, ClassProperty, VariableDeclarator,
    EmptyStatement, ExpressionStatement, DeclarationStatement, FunctionStatement,
    ClassStatement, ReturnStatement, BlockStatement, IfStatement, WhileStatement,
    Invalid,
)
from ..parser.errors import InternalParserError
from ..parser.operators import Associativity, Precedence
from ..parser.parser import ParseResult

INDENT = "    "

# Member access and calls bind tighter than any operator
MEMBER = Precedence.POSTFIX + 1
PRIMARY = MEMBER + 1

BINDING = {
    SequenceExpr: Precedence.NONE,
    ConditionalExpr: Precedence.ASSIGNMENT,
    ArrowExpr: Precedence.ASSIGNMENT,
    PrefixExpr: Precedence.PREFIX,
    PostfixExpr: Precedence.POSTFIX,
    MemberExpr: MEMBER,
    CallExpr: MEMBER,
}


class Generator:
    """
    Renders statements and expressions from an arena.

    Pretty output puts one statement per line with four-space indentation;
    minified output drops every space that is not needed to separate tokens.
    """

    def __init__(self, result: ParseResult, minify: bool = False):
        self.result = result
        self.source = result.source
        self.minify = minify
        self.depth = 0

        self._space = "" if minify else " "
        self._comma = "," if minify else ", "

        self.expression_generators: Dict[type, Callable[[Index, Item], str]] = {
            Identifier: self._generate_identifier,
            This: lambda index, item: "this",
            ValueExpr: self._generate_value,
            ArrayExpr: self._generate_array,
            SequenceExpr: self._generate_sequence,
            MemberExpr: self._generate_member,
            CallExpr: self._generate_call,
            BinaryExpr: self._generate_binary,
            PrefixExpr: self._generate_prefix,
            PostfixExpr: self._generate_postfix,
            ConditionalExpr: self._generate_conditional,
            TemplateExpr: self._generate_template,
            ArrowExpr: self._generate_arrow,
            FunctionExpr: self._generate_function_expression,
            ClassExpr: self._generate_class_expression,
            Invalid: self._generate_invalid,
        }

    def generate(self) -> str:
        """Render the whole program."""
        statements = [self._generate_statement(index) for index in self.result.body]
        if self.minify:
            return "".join(statements)
        return "".join(statement + "\n" for statement in statements)

    # Statements

    def _generate_statement(self, index: Index) -> str:
        """Render a statement; lines after the first carry their own indentation."""
        item = self.result.item(index)

        if isinstance(item, ExpressionStatement):
            return self._generate_expression(item.expression, leading=True) + ";"
        elif isinstance(item, DeclarationStatement):
            declarators = self._comma.join(self._generate_declarator(d) for d in item.declarators)
            return f"{item.kind.value} {declarators};"
        elif isinstance(item, FunctionStatement):
            return f"function {self._name(item.name)}{self._function_rest(item.params, item.body)}"
        elif isinstance(item, ClassStatement):
            return f"class {self._name(item.name)}{self._class_rest(item.extends, item.body)}"
        elif isinstance(item, ReturnStatement):
            if item.value is None:
                return "return;"
            return self._keyword("return", self._generate_expression(item.value)) + ";"
        elif isinstance(item, BlockStatement):
            return self._braced(item.body, self._generate_statement)
        elif isinstance(item, IfStatement):
            return self._generate_if(item)
        elif isinstance(item, WhileStatement):
            test = self._generate_expression(item.test)
            return f"while{self._space}({test}){self._space}{self._generate_statement(item.body)}"
        elif isinstance(item, EmptyStatement):
            return ";"
        elif isinstance(item, Invalid):
            return self.result.text(index)
        raise InternalParserError(f"cannot render {type(item).__name__} at node {index}")

    def _generate_if(self, item: IfStatement) -> str:
        test = self._generate_expression(item.test)
        text = f"if{self._space}({test}){self._space}{self._generate_statement(item.consequent)}"
        if item.alternate is not None:
            if not self.minify:
                text += " "
            text += self._keyword("else", self._generate_statement(item.alternate))
        return text

    def _generate_declarator(self, index: Index) -> str:
        item: VariableDeclarator = self.result.item(index)
        name = self._name(item.name)
        if item.value is None:
            return name
        return f"{name}{self._operator('=')}{self._generate_expression(item.value, Precedence.ASSIGNMENT)}"

    def _generate_class_member(self, index: Index) -> str:
        item = self.result.item(index)
        prefix = "static " if item.is_static else ""

        if isinstance(item, ClassMethod):
            return f"{prefix}{self._name(item.name)}{self._function_rest(item.params, item.body)}"
        if isinstance(item, ClassProperty):
            if item.value is None:
                return f"{prefix}{self._name(item.name)};"
            value = self._generate_expression(item.value, Precedence.ASSIGNMENT)
            return f"{prefix}{self._name(item.name)}{self._operator('=')}{value};"
        raise InternalParserError(f"cannot render class member {type(item).__name__}")

    def _braced(self, indices: Iterable[Index], render: Callable[[Index], str]) -> str:
        indices = list(indices)
        if not indices:
            return "{}"
        if self.minify:
            return "{" + "".join(render(index) for index in indices) + "}"

        self.depth += 1
        lines = [INDENT * self.depth + render(index) for index in indices]
        self.depth -= 1
        return "{\n" + "\n".join(lines) + "\n" + INDENT * self.depth + "}"

    def _function_rest(self, params, body) -> str:
        params = self._comma.join(self._name(param) for param in params)
        return f"({params}){self._space}{self._braced(body, self._generate_statement)}"

    def _class_rest(self, extends, members) -> str:
        heritage = f" extends {self._name(extends)}" if extends is not None else ""
        return f"{heritage}{self._space}{self._braced(members, self._generate_class_member)}"

    # Expressions

    def _generate_expression(self, index: Index, min_binding: int = Precedence.NONE,
                             leading: bool = False) -> str:
        """
        Render an expression in a position that needs at least ``min_binding``.

        ``leading`` marks positions where the text may begin a statement, so
        a function or class expression there is parenthesized.
        """
        item = self.result.item(index)
        generator = self.expression_generators.get(type(item))
        if generator is None:
            raise InternalParserError(f"cannot render {type(item).__name__} at node {index}")
        text = generator(index, item)

        if isinstance(item, BinaryExpr):
            wrap = item.parenthesized
        else:
            wrap = (BINDING.get(type(item), PRIMARY) < min_binding
                    or (leading and isinstance(item, (FunctionExpr, ClassExpr))))
        return f"({text})" if wrap else text

    def _generate_identifier(self, index: Index, item: Identifier) -> str:
        return self.result.text(index)

    def _generate_value(self, index: Index, item: ValueExpr) -> str:
        value = item.value
        if value.kind is ValueKind.INTEGER:
            return hex(value.integer)
        if value.span is None:
            return value.kind.value
        return value.span.slice(self.source)

    def _generate_array(self, index: Index, item: ArrayExpr) -> str:
        elements = self._comma.join(self._generate_expression(e, Precedence.ASSIGNMENT)
                                    for e in item.elements)
        return f"[{elements}]"

    def _generate_sequence(self, index: Index, item: SequenceExpr) -> str:
        first, *rest = item.expressions
        parts = [self._generate_expression(first, Precedence.ASSIGNMENT, leading=True)]
        parts.extend(self._generate_expression(e, Precedence.ASSIGNMENT) for e in rest)
        return self._comma.join(parts)

    def _generate_member(self, index: Index, item: MemberExpr) -> str:
        target = self._generate_expression(item.object, MEMBER, leading=True)
        if item.computed:
            return f"{target}[{self._generate_expression(item.property)}]"

        # 1.x would lex as a malformed number
        object_item = self.result.item(item.object)
        if isinstance(object_item, ValueExpr) and object_item.value.kind is ValueKind.NUMBER:
            target = f"({target})"
        return f"{target}.{self._name(item.property)}"

    def _generate_call(self, index: Index, item: CallExpr) -> str:
        callee = self._generate_expression(item.callee, MEMBER, leading=True)
        arguments = self._comma.join(self._generate_expression(a, Precedence.ASSIGNMENT)
                                     for a in item.arguments)
        return f"{callee}({arguments})"

    def _generate_binary(self, index: Index, item: BinaryExpr) -> str:
        operator = item.operator
        left_binding = operator.precedence
        if operator.associativity is Associativity.RIGHT:
            left_binding += 1
        left = self._generate_expression(item.left, left_binding, leading=True)
        right = self._generate_expression(item.right, operator.next_precedence)
        return f"{left}{self._operator(operator.lexeme, right)}{right}"

    def _generate_prefix(self, index: Index, item: PrefixExpr) -> str:
        operand = self._generate_expression(item.operand, Precedence.PREFIX)
        lexeme = item.operator.lexeme
        if lexeme[-1] in "+-" and operand.startswith(lexeme[-1]):
            return f"{lexeme} {operand}"
        return lexeme + operand

    def _generate_postfix(self, index: Index, item: PostfixExpr) -> str:
        return self._generate_expression(item.operand, MEMBER, leading=True) + item.operator.lexeme

    def _generate_conditional(self, index: Index, item: ConditionalExpr) -> str:
        test = self._generate_expression(item.test, Precedence.LOGICAL_OR, leading=True)
        consequent = self._generate_expression(item.consequent, Precedence.ASSIGNMENT)
        alternate = self._generate_expression(item.alternate, Precedence.ASSIGNMENT)
        return f"{test}{self._operator('?')}{consequent}{self._operator(':')}{alternate}"

    def _generate_template(self, index: Index, item: TemplateExpr) -> str:
        parts = ["`", self._chunk(item.quasis[0])]
        for expression, quasi in zip(item.expressions, item.quasis[1:]):
            parts.append("${" + self._generate_expression(expression) + "}")
            parts.append(self._chunk(quasi))
        parts.append("`")
        return "".join(parts)

    def _generate_arrow(self, index: Index, item: ArrowExpr) -> str:
        if len(item.params) == 1:
            params = self._name(item.params[0])
        else:
            params = "(" + self._comma.join(self._name(p) for p in item.params) + ")"

        body = self.result.item(item.body)
        if isinstance(body, BlockStatement):
            body_text = self._braced(body.body, self._generate_statement)
        else:
            body_text = self._generate_expression(body.expression, Precedence.ASSIGNMENT)
        return f"{params}{self._operator('=>')}{body_text}"

    def _generate_function_expression(self, index: Index, item: FunctionExpr) -> str:
        name = f" {self._name(item.name)}" if item.name is not None else ""
        return f"function{name}{self._function_rest(item.params, item.body)}"

    def _generate_class_expression(self, index: Index, item: ClassExpr) -> str:
        name = f" {self._name(item.name)}" if item.name is not None else ""
        return f"class{name}{self._class_rest(item.extends, item.body)}"

    def _generate_invalid(self, index: Index, item: Invalid) -> str:
        return self.result.text(index)

    # Helpers

    def _name(self, index: Index) -> str:
        return self.result.text(index)

    def _chunk(self, index: Index) -> str:
        return self.result.item(index).value.span.slice(self.source)

    def _operator(self, lexeme: str, right: str = "") -> str:
        """Spaced operator; minified, spaced only where ``a - -b`` would fuse."""
        if not self.minify:
            return f" {lexeme} "
        if lexeme[-1] in "+-" and right.startswith(lexeme[-1]):
            return lexeme + " "
        return lexeme

    def _keyword(self, keyword: str, text: str) -> str:
        if self.minify and text and not (text[0].isalnum() or text[0] in "_$"):
            return keyword + text
        return f"{keyword} {text}"


def render(result: ParseResult, minify: bool = False) -> str:
    """
    Render a parsed program back to source text.

    Args:
        result: Outcome of ``parse``
        minify: Drop optional whitespace

    Returns:
        Source text that parses back to a structurally equal tree
    """
    return Generator(result, minify).generate()
