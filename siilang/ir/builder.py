"""Incremental construction of IR code lists."""

from __future__ import annotations

from typing import Optional

from siilang.ir.codes import (
    Alloca,
    BinaryOperation,
    Code,
    CodeKind,
    ConditionBranch,
    FunctionDefinition,
    Goto,
    Load,
    Nope,
    Return,
    Store,
    UnaryOperation,
)
from siilang.ir.types import Type, get_aim_type, integer
from siilang.ir.values import FunctionValue, Label, Value


class CodeBuilder:
    """Collects codes, attaching pending labels and hoisting allocas."""

    def __init__(self) -> None:
        self._allocas: list[Code] = []
        self._codes: list[Code] = []
        self._pending_label: Optional[Label] = None

    def _append(self, code: Code) -> None:
        if self._pending_label is not None:
            self._pending_label.dest_code = code
            code.label = self._pending_label
            self._pending_label = None
        self._codes.append(code)

    def _binary(self, kind: CodeKind, left: Value, right: Value, type: Optional[Type]) -> BinaryOperation:
        code = BinaryOperation(kind, left, right, type)
        self._append(code)
        return code

    def _comparison(self, kind: CodeKind, left: Value, right: Value, message: str) -> BinaryOperation:
        if left.type != right.type:
            raise TypeError(message)
        return self._binary(kind, left, right, integer(1))

    def append_multiply(self, left: Value, right: Value) -> BinaryOperation:
        return self._binary(CodeKind.MUL, left, right, left.type)

    def append_divide(self, left: Value, right: Value) -> BinaryOperation:
        return self._binary(CodeKind.DIV, left, right, left.type)

    def append_add(self, left: Value, right: Value) -> BinaryOperation:
        return self._binary(CodeKind.ADD, left, right, left.type)

    def append_sub(self, left: Value, right: Value) -> BinaryOperation:
        return self._binary(CodeKind.SUB, left, right, left.type)

    def append_neg(self, operand: Value) -> UnaryOperation:
        code = UnaryOperation(CodeKind.NEG, operand)
        self._append(code)
        return code

    def append_equal(self, left: Value, right: Value) -> BinaryOperation:
        return self._binary(CodeKind.EQUAL, left, right, integer(1))

    def append_not_equal(self, left: Value, right: Value) -> BinaryOperation:
        return self._comparison(CodeKind.NOT_EQUAL, left, right, "Not equal must be of same type")

    def append_less_than(self, left: Value, right: Value) -> BinaryOperation:
        return self._comparison(CodeKind.LESS_THAN, left, right, "Less than must be of same type")

    def append_less_equal(self, left: Value, right: Value) -> BinaryOperation:
        return self._comparison(CodeKind.LESS_EQUAL, left, right, "Less equal must be of same type")

    def append_condition_branch(self, condition: Value, true_label: Label, false_label: Label) -> ConditionBranch:
        if condition.type != integer(1):
            raise TypeError("Condition branch must be of type bool")
        code = ConditionBranch(condition, true_label, false_label)
        self._append(code)
        return code

    def append_goto(self, label: Optional[Label]) -> Goto:
        code = Goto(label)
        self._append(code)
        return code

    def append_label(self, label: Label) -> None:
        """Mark the next appended code with ``label``.

        A label still waiting for a code receives a jump to the new one.
        """
        if self._pending_label is not None:
            self.append_goto(label)
        self._pending_label = label

    def append_nope(self) -> Nope:
        code = Nope()
        self._append(code)
        return code

    def append_function(self, func: FunctionValue) -> FunctionDefinition:
        code = FunctionDefinition(func)
        self._append(code)
        return code

    def append_alloca(self, size: int, type: Type) -> Alloca:
        code = Alloca(size, type)
        self._allocas.append(code)
        return code

    def append_load(self, source_address: Value) -> Load:
        code = Load(source_address)
        self._append(code)
        return code

    def append_return(self, value: Value) -> Return:
        code = Return(value)
        self._append(code)
        return code

    def append_store(self, source: Value, dest_address: Value) -> Store:
        if get_aim_type(dest_address.type) != source.type:
            raise TypeError("Store must be of same type")
        code = Store(source, dest_address)
        self._append(code)
        return code

    def finish(self) -> list[Code]:
        """Return all allocas followed by the other codes."""
        if self._pending_label is not None:
            self.append_nope()
        return [*self._allocas, *self._codes]