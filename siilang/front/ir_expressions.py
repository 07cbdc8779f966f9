"""Lowering of expressions to IR codes."""

from __future__ import annotations

from typing import Optional

from siilang.front.ast import (
    ASTNode,
    BinaryOperationNode,
    LiteralNode,
    NodeKind,
    UnaryOperationNode,
)
from siilang.front.context import ContextManager, SymbolKind, VariableSymbol
from siilang.ir.builder import CodeBuilder
from siilang.ir.types import IntegerType, integer
from siilang.ir.values import Value, constant

_BINARY_APPENDERS = {
    NodeKind.MUL: CodeBuilder.append_multiply,
    NodeKind.DIV: CodeBuilder.append_divide,
    NodeKind.ADD: CodeBuilder.append_add,
    NodeKind.SUB: CodeBuilder.append_sub,
    NodeKind.EQUAL: CodeBuilder.append_equal,
    NodeKind.NOT_EQUAL: CodeBuilder.append_not_equal,
    NodeKind.LESS_THAN: CodeBuilder.append_less_than,
    NodeKind.LESS_EQUAL: CodeBuilder.append_less_equal,
}


class ExpressionGenerator:
    """Turns expression nodes into codes, resolving names through scopes."""

    def __init__(self, ctx_manager: ContextManager) -> None:
        self.ctx_manager = ctx_manager

    def rvalue(self, node: ASTNode, builder: CodeBuilder) -> Optional[Value]:
        """Emit the codes computing ``node`` and return its value.

        An empty node has no value and yields ``None``.
        """
        kind = node.kind
        if kind is NodeKind.EMPTY:
            return None
        if kind in _BINARY_APPENDERS:
            assert isinstance(node, BinaryOperationNode)
            left = self.rvalue(node.lhs, builder)
            right = self.rvalue(node.rhs, builder)
            return _BINARY_APPENDERS[kind](builder, left, right)
        if kind is NodeKind.NEG:
            assert isinstance(node, UnaryOperationNode)
            return builder.append_neg(self.rvalue(node.operand, builder))
        if kind is NodeKind.GET_ADDRESS:
            assert isinstance(node, UnaryOperationNode)
            return self.lvalue(node.operand, builder).address
        if kind is NodeKind.INTEGER:
            assert isinstance(node, LiteralNode)
            return constant(node.literal, integer(32))
        if kind is NodeKind.IDENTIFIER:
            return builder.append_load(self.lvalue(node, builder).address)
        if kind is NodeKind.ASSIGN:
            return self._assign(node, builder)
        raise ValueError(f"Type of AST Node {kind.name} is not a rvalue node")

    def lvalue(self, node: ASTNode, builder: CodeBuilder) -> VariableSymbol:
        """Resolve ``node`` to the variable it names."""
        if node.kind is not NodeKind.IDENTIFIER:
            raise ValueError(f"Type of AST Node {node.kind.name} is not a lvalue node")
        assert isinstance(node, LiteralNode)
        return self._lookup_variable(node.literal)

    def format_condition(self, value: Value, builder: CodeBuilder) -> Value:
        """Return ``value`` as a one-bit condition, comparing integers with zero."""
        if value.type == integer(1):
            return value
        if isinstance(value.type, IntegerType):
            return builder.append_not_equal(value, constant("0", value.type))
        raise TypeError("condition type error")

    def _lookup_variable(self, identifier: str) -> VariableSymbol:
        ctx = self.ctx_manager.symbol_ctx
        symbol = None
        while ctx is not None:
            symbol = ctx.symbol_table.find(identifier)
            if symbol is not None:
                break
            ctx = ctx.father
        if isinstance(symbol, VariableSymbol) and symbol.kind is SymbolKind.VARIABLE:
            return symbol
        raise ValueError(f"Use of undeclared identifier '{identifier}'")

    def _assign(self, node: ASTNode, builder: CodeBuilder) -> Value:
        assert isinstance(node, BinaryOperationNode)
        if node.lhs.kind is not NodeKind.IDENTIFIER:
            raise ValueError("Expect Identifier on the left of assignment")
        right = self.rvalue(node.rhs, builder)
        left = self.lvalue(node.lhs, builder)
        builder.append_store(right, left.address)
        return right