"""Abstract syntax tree of the source language."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Iterable, Optional

from siilang.front.types import (
    Declarator,
    TypeKind,
    default_type,
    normalize_parameter_declaration,
    normalize_variable_declaration,
)


class NodeKind(Enum):
    """What a syntax tree node stands for."""

    EMPTY = auto()
    MUL = auto()
    DIV = auto()
    ADD = auto()
    SUB = auto()
    EQUAL = auto()
    NOT_EQUAL = auto()
    LESS_THAN = auto()
    LESS_EQUAL = auto()
    ASSIGN = auto()
    INTEGER = auto()
    IDENTIFIER = auto()
    NEG = auto()
    GET_ADDRESS = auto()
    IF_ELSE = auto()
    FOR_LOOP = auto()
    DO_WHILE = auto()
    WHILE_LOOP = auto()
    COMPOUND_STATEMENT = auto()
    VARIABLE_DECLARATION = auto()
    FUNCTION_DECLARATION = auto()
    DECLARATION_STATEMENT = auto()
    RETURN = auto()


class ASTNode:
    """Base of all nodes; equality is structural and ignores ``lex_info``."""

    kind: NodeKind
    lex_info: Any = None

    def accept(self, visitor: Any) -> Any:
        """Hand this node to ``visitor.visit``."""
        return visitor.visit(self)


@dataclass
class EmptyNode(ASTNode):
    """A node standing for nothing, such as an empty expression."""

    kind: NodeKind = field(default=NodeKind.EMPTY, init=False)


@dataclass
class BinaryOperationNode(ASTNode):
    """An operation with a left and a right operand."""

    lhs: ASTNode
    rhs: ASTNode
    kind: NodeKind


@dataclass
class UnaryOperationNode(ASTNode):
    """An operation on a single operand."""

    operand: ASTNode
    kind: NodeKind


@dataclass
class GetAddressNode(UnaryOperationNode):
    """Taking the address of an operand."""

    kind: NodeKind = field(default=NodeKind.GET_ADDRESS, init=False)


@dataclass
class LiteralNode(ASTNode):
    """An integer literal or an identifier."""

    literal: str
    kind: NodeKind


@dataclass
class IfElseNode(ASTNode):
    """A conditional statement with an optional else branch."""

    expression: ASTNode
    if_statement: ASTNode
    else_statement: Optional[ASTNode] = None
    kind: NodeKind = field(default=NodeKind.IF_ELSE, init=False)


@dataclass
class ForLoopNode(ASTNode):
    """A ``for`` loop."""

    init_expression: ASTNode
    condition_expression: ASTNode
    increment_expression: ASTNode
    statement: ASTNode
    kind: NodeKind = field(default=NodeKind.FOR_LOOP, init=False)


@dataclass
class DoWhileNode(ASTNode):
    """A ``do ... while`` loop."""

    statement: ASTNode
    condition_expression: ASTNode
    kind: NodeKind = field(default=NodeKind.DO_WHILE, init=False)


@dataclass
class WhileLoopNode(ASTNode):
    """A ``while`` loop."""

    condition_expression: ASTNode
    statement: ASTNode
    kind: NodeKind = field(default=NodeKind.WHILE_LOOP, init=False)


@dataclass
class CompoundStatementNode(ASTNode):
    """A braced block of statements."""

    children: list = field(default_factory=list)
    kind: NodeKind = field(default=NodeKind.COMPOUND_STATEMENT, init=False)


class DeclarationNode(ASTNode):
    """Base of nodes that declare a name through a declarator."""

    declarator: Declarator


@dataclass
class VariableDeclarationNode(DeclarationNode):
    """A variable with an optional initializer."""

    declarator: Declarator
    initializer: Optional[ASTNode] = None
    kind: NodeKind = field(default=NodeKind.VARIABLE_DECLARATION, init=False)


@dataclass
class FunctionDeclarationNode(DeclarationNode):
    """A function declaration, or a definition when ``body`` is set.

    Old-style parameter declarations are kept until normalization and take
    no part in equality.
    """

    declarator: Declarator
    declaration_statement_list: list = field(default_factory=list, compare=False)
    body: Optional[ASTNode] = None
    kind: NodeKind = field(default=NodeKind.FUNCTION_DECLARATION, init=False)


@dataclass
class DeclarationStatementNode(ASTNode):
    """A statement declaring one or more names."""

    declaration_list: list = field(default_factory=list)
    kind: NodeKind = field(default=NodeKind.DECLARATION_STATEMENT, init=False)


@dataclass
class ReturnNode(ASTNode):
    """A ``return`` statement."""

    result: ASTNode
    kind: NodeKind = field(default=NodeKind.RETURN, init=False)


def empty() -> EmptyNode:
    """Return an empty node."""
    return EmptyNode()


def multiply(lhs: ASTNode, rhs: ASTNode) -> BinaryOperationNode:
    return BinaryOperationNode(lhs, rhs, NodeKind.MUL)


def divide(lhs: ASTNode, rhs: ASTNode) -> BinaryOperationNode:
    return BinaryOperationNode(lhs, rhs, NodeKind.DIV)


def add(lhs: ASTNode, rhs: ASTNode) -> BinaryOperationNode:
    return BinaryOperationNode(lhs, rhs, NodeKind.ADD)


def subtract(lhs: ASTNode, rhs: ASTNode) -> BinaryOperationNode:
    return BinaryOperationNode(lhs, rhs, NodeKind.SUB)


def equal(lhs: ASTNode, rhs: ASTNode) -> BinaryOperationNode:
    return BinaryOperationNode(lhs, rhs, NodeKind.EQUAL)


def not_equal(lhs: ASTNode, rhs: ASTNode) -> BinaryOperationNode:
    return BinaryOperationNode(lhs, rhs, NodeKind.NOT_EQUAL)


def less_than(lhs: ASTNode, rhs: ASTNode) -> BinaryOperationNode:
    return BinaryOperationNode(lhs, rhs, NodeKind.LESS_THAN)


def less_equal(lhs: ASTNode, rhs: ASTNode) -> BinaryOperationNode:
    return BinaryOperationNode(lhs, rhs, NodeKind.LESS_EQUAL)


def assign(lhs: ASTNode, rhs: ASTNode) -> BinaryOperationNode:
    return BinaryOperationNode(lhs, rhs, NodeKind.ASSIGN)


def integer(literal: str) -> LiteralNode:
    """Return an integer literal node."""
    return LiteralNode(literal, NodeKind.INTEGER)


def identifier(name: str) -> LiteralNode:
    """Return an identifier node."""
    return LiteralNode(name, NodeKind.IDENTIFIER)


def negative(operand: ASTNode) -> UnaryOperationNode:
    """Return the arithmetic negation of ``operand``."""
    return UnaryOperationNode(operand, NodeKind.NEG)


def if_else(
    expression: ASTNode,
    if_statement: ASTNode,
    else_statement: Optional[ASTNode] = None,
) -> IfElseNode:
    return IfElseNode(expression, if_statement, else_statement)


def for_loop(
    init_expression: ASTNode,
    condition_expression: ASTNode,
    increment_expression: ASTNode,
    statement: ASTNode,
) -> ForLoopNode:
    return ForLoopNode(init_expression, condition_expression, increment_expression, statement)


def do_while(statement: ASTNode, condition_expression: ASTNode) -> DoWhileNode:
    return DoWhileNode(statement, condition_expression)


def while_loop(condition_expression: ASTNode, statement: ASTNode) -> WhileLoopNode:
    return WhileLoopNode(condition_expression, statement)


def compound_statement(children: Iterable[ASTNode]) -> CompoundStatementNode:
    return CompoundStatementNode(list(children))


def variable_declaration(
    declarator: Declarator, initializer: Optional[ASTNode] = None
) -> VariableDeclarationNode:
    return VariableDeclarationNode(declarator, initializer)


def declaration_statement(declaration_list: Iterable[DeclarationNode]) -> DeclarationStatementNode:
    return DeclarationStatementNode(list(declaration_list))


def function_declaration(
    declarator: Declarator,
    declaration_statement_list: Iterable[DeclarationStatementNode] = (),
    body: Optional[CompoundStatementNode] = None,
) -> FunctionDeclarationNode:
    return FunctionDeclarationNode(declarator, list(declaration_statement_list), body)


def get_address(operand: ASTNode) -> GetAddressNode:
    return GetAddressNode(operand)


def return_statement(operand: ASTNode) -> ReturnNode:
    return ReturnNode(operand)


def declaration(declarator: Declarator, initializer: Optional[ASTNode] = None) -> DeclarationNode:
    """Create a variable or function declaration according to the declarator's type."""
    if declarator.type is None:
        raise ValueError("Expect type for a declaration")
    if declarator.type.kind is TypeKind.FUNCTION:
        if initializer is not None:
            raise ValueError("illegal initializer (only variables can be initialized)")
        return function_declaration(declarator, [], None)
    return variable_declaration(declarator, initializer)


def _normalize_variable_declaration(node: VariableDeclarationNode) -> VariableDeclarationNode:
    declarator = node.declarator
    declarator.type = normalize_variable_declaration(declarator.type)
    return variable_declaration(declarator, node.initializer)


def _fill_old_style_parameters(parameters: list, declarations: list) -> None:
    by_name: dict = {}
    for parameter in parameters:
        if parameter.identifier:
            if parameter.identifier in by_name:
                raise ValueError("Redefinition of parameter:" + parameter.identifier)
            by_name[parameter.identifier] = parameter

    for declaration_node in declarations:
        inner = declaration_node.declarator
        if inner.type is None:
            raise ValueError("Declaration in declaration list should be typed")
        if not inner.identifier:
            raise ValueError("Declaration does not declare a parameter")
        target = by_name.get(inner.identifier)
        if target is None:
            raise ValueError(f"Parameter named '{inner.identifier}' is missing")
        target.type = inner.type

    for parameter in by_name.values():
        if parameter.type is None:
            parameter.type = default_type()


def _normalize_function_declaration(node: FunctionDeclarationNode) -> FunctionDeclarationNode:
    declarator = node.declarator
    function_type = declarator.type
    if function_type is None or function_type.kind is not TypeKind.FUNCTION:
        raise ValueError("Creating a declarator on a type not function")
    if function_type.return_type is None:
        function_type.return_type = default_type()

    return_kind = function_type.return_type.kind
    if return_kind is TypeKind.FUNCTION:
        raise ValueError("Function cannot return function type")
    if return_kind is TypeKind.ARRAY:
        raise ValueError("Function cannot return array type")

    parameters = function_type.parameter_types
    typed_flags = {parameter.type is not None for parameter in parameters}
    if len(typed_flags) > 1:
        raise ValueError("Some parameter has type but some not")
    parameters_typed = typed_flags == {True}

    declarations = [
        declaration_node
        for statement in node.declaration_statement_list
        for declaration_node in statement.declaration_list
    ]
    if parameters_typed:
        if declarations:
            raise ValueError(
                "old-style parameter declarations in prototyped function definition"
            )
    else:
        _fill_old_style_parameters(parameters, declarations)

    declarator.type = normalize_parameter_declaration(function_type)
    return FunctionDeclarationNode(declarator, [], node.body)


def normalize_declaration(node: ASTNode) -> DeclarationNode:
    """Normalize the types of a declaration, returning a new node."""
    if not isinstance(node, DeclarationNode):
        raise TypeError("Expect a declaration node")
    if node.declarator.type is None:
        raise ValueError("Expect type for a declaration")
    if node.declarator.type.kind is TypeKind.FUNCTION:
        if not isinstance(node, FunctionDeclarationNode):
            raise TypeError("Function type declared by a non-function declaration")
        return _normalize_function_declaration(node)
    if not isinstance(node, VariableDeclarationNode):
        raise TypeError("Variable type declared by a non-variable declaration")
    return _normalize_variable_declaration(node)