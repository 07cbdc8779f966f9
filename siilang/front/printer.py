"""Indented, human-readable dump of a syntax tree."""

from __future__ import annotations

from contextlib import contextmanager
from functools import singledispatchmethod
from typing import Any, Iterator

from siilang.front.ast import (
    ASTNode,
    BinaryOperationNode,
    CompoundStatementNode,
    DeclarationStatementNode,
    DoWhileNode,
    EmptyNode,
    ForLoopNode,
    FunctionDeclarationNode,
    IfElseNode,
    LiteralNode,
    NodeKind,
    ReturnNode,
    UnaryOperationNode,
    VariableDeclarationNode,
    WhileLoopNode,
)

_BINARY_OPERATORS = {
    NodeKind.MUL: "*",
    NodeKind.DIV: "/",
    NodeKind.ADD: "+",
    NodeKind.SUB: "-",
    NodeKind.EQUAL: "==",
    NodeKind.NOT_EQUAL: "!=",
    NodeKind.LESS_THAN: "<",
    NodeKind.LESS_EQUAL: "<=",
}

_BINARY_KINDS = frozenset(_BINARY_OPERATORS) | {NodeKind.ASSIGN}

_UNARY_OPERATORS = {
    NodeKind.NEG: "-",
    NodeKind.GET_ADDRESS: "&",
}


class ASTPrintVisitor:
    """Collects one line per node, each child indented under its parent."""

    def __init__(self, indent_unit: str = "  ") -> None:
        self._unit = indent_unit
        self._level = 0
        self._lines: list[str] = []

    @property
    def text(self) -> str:
        """Everything printed so far, one node per line."""
        return "".join(line + "\n" for line in self._lines)

    def _emit(self, text: str) -> None:
        self._lines.append(self._unit * self._level + text)

    @contextmanager
    def _nested(self) -> Iterator[None]:
        self._level += 1
        try:
            yield
        finally:
            self._level -= 1

    def _child(self, node: Any) -> None:
        node.accept(self)

    @singledispatchmethod
    def visit(self, node: Any) -> None:
        """Print ``node`` and, indented below it, its children."""
        raise TypeError(f"Cannot print node of type {type(node).__name__}")

    @visit.register(EmptyNode)
    def _visit_empty(self, node: EmptyNode) -> None:
        self._emit("EmptyNode: ")

    @visit.register(BinaryOperationNode)
    def _visit_binary(self, node: BinaryOperationNode) -> None:
        if node.kind not in _BINARY_KINDS:
            raise ValueError(f"Unknow type of BinaryOperationNode {node.kind.name}")
        self._emit("BinaryOperationNode: " + _BINARY_OPERATORS.get(node.kind, ""))
        with self._nested():
            self._child(node.lhs)
            self._child(node.rhs)

    @visit.register(UnaryOperationNode)
    def _visit_unary(self, node: UnaryOperationNode) -> None:
        operator = _UNARY_OPERATORS.get(node.kind)
        if operator is None:
            raise ValueError(f"Unknow type of UnaryOperationNode {node.kind.name}")
        self._emit("UnaryOperationNode: " + operator)
        with self._nested():
            self._child(node.operand)

    @visit.register(LiteralNode)
    def _visit_literal(self, node: LiteralNode) -> None:
        if node.kind is NodeKind.INTEGER:
            self._emit("LiteralNode:  int " + node.literal)
        elif node.kind is NodeKind.IDENTIFIER:
            self._emit("LiteralNode:  identifier " + node.literal)
        else:
            raise ValueError(f"Unknow type of LiteralNode {node.kind.name}")

    @visit.register(IfElseNode)
    def _visit_if_else(self, node: IfElseNode) -> None:
        self._emit("IfElseNode: ")
        with self._nested():
            self._child(node.expression)
            self._child(node.if_statement)
            if node.else_statement is not None:
                self._child(node.else_statement)

    @visit.register(ForLoopNode)
    def _visit_for(self, node: ForLoopNode) -> None:
        self._emit("ForLoopNode: ")
        with self._nested():
            self._child(node.init_expression)
            self._child(node.condition_expression)
            self._child(node.increment_expression)
            self._child(node.statement)

    @visit.register(DoWhileNode)
    def _visit_do_while(self, node: DoWhileNode) -> None:
        self._emit("DoWhileNode: ")
        with self._nested():
            self._child(node.statement)
            self._child(node.condition_expression)

    @visit.register(WhileLoopNode)
    def _visit_while(self, node: WhileLoopNode) -> None:
        self._emit("WhileLoopNode: ")
        with self._nested():
            self._child(node.condition_expression)
            self._child(node.statement)

    @visit.register(CompoundStatementNode)
    def _visit_compound(self, node: CompoundStatementNode) -> None:
        self._emit("CompoundStatementNode: ")
        with self._nested():
            for child in node.children:
                self._child(child)

    @visit.register(VariableDeclarationNode)
    def _visit_variable(self, node: VariableDeclarationNode) -> None:
        self._emit("VariableDeclarationNode: ")
        with self._nested():
            self._emit("Declarator: " + node.declarator.to_string())
            if node.initializer is not None:
                self._child(node.initializer)

    @visit.register(FunctionDeclarationNode)
    def _visit_function(self, node: FunctionDeclarationNode) -> None:
        self._emit("FunctionDeclarationNode: ")
        with self._nested():
            self._emit("Declarator: " + node.declarator.to_string())
            for statement in node.declaration_statement_list:
                self.visit(statement)
            if node.body is not None:
                self.visit(node.body)

    @visit.register(DeclarationStatementNode)
    def _visit_declaration_statement(self, node: DeclarationStatementNode) -> None:
        self._emit("DeclarationStatementNode: ")
        with self._nested():
            for declaration in node.declaration_list:
                self._child(declaration)

    @visit.register(ReturnNode)
    def _visit_return(self, node: ReturnNode) -> None:
        self._emit("ReturnNode: ")
        with self._nested():
            if node.result is not None:
                self._child(node.result)


def format_ast(node: ASTNode) -> str:
    """Return the printed form of the tree rooted at ``node``."""
    visitor = ASTPrintVisitor()
    node.accept(visitor)
    return visitor.text