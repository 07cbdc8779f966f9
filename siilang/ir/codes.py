"""Instructions of the intermediate representation."""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, Optional

from siilang.ir.types import Type, get_aim_type, pointer
from siilang.ir.values import (
    FunctionValue,
    IDAllocator,
    Label,
    Use,
    Value,
    ValueKind,
    undef,
)


class CodeKind(Enum):
    """The operation a code performs."""

    MUL = auto()
    DIV = auto()
    ADD = auto()
    SUB = auto()
    NEG = auto()
    EQUAL = auto()
    NOT_EQUAL = auto()
    LESS_THAN = auto()
    LESS_EQUAL = auto()
    CONDITION_BRANCH = auto()
    GOTO = auto()
    NOPE = auto()
    FUNCTION_DEFINITION = auto()
    ALLOCA = auto()
    LOAD = auto()
    STORE = auto()
    PHI = auto()
    RETURN = auto()


_BINARY_OPERATORS = {
    CodeKind.MUL: " * ",
    CodeKind.DIV: " / ",
    CodeKind.ADD: " + ",
    CodeKind.SUB: " - ",
    CodeKind.EQUAL: " == ",
    CodeKind.NOT_EQUAL: " != ",
    CodeKind.LESS_THAN: " < ",
    CodeKind.LESS_EQUAL: " <= ",
}

_UNARY_OPERATORS = {CodeKind.NEG: "-"}


class Code(Value):
    """A single instruction; it is itself a value when it produces one."""

    def __init__(self, code_kind: CodeKind, type: Optional[Type] = None) -> None:
        super().__init__(ValueKind.CODE, type)
        self.code_kind = code_kind
        self.label: Optional[Label] = None
        self.group: Any = None

    def _use(self, value: Optional[Value]) -> Use:
        return Use(self, value)

    def to_string(self, id_allocator: IDAllocator) -> str:
        """Render the instruction, preceded by its label line if any."""
        if self.label is not None:
            return self.label.to_string(id_allocator) + ":\n"
        return ""


class BinaryOperation(Code):
    """An arithmetic or comparison operation on two operands."""

    def __init__(self, code_kind: CodeKind, lhs: Value, rhs: Value, type: Optional[Type]) -> None:
        super().__init__(code_kind, type)
        self.lhs = self._use(lhs)
        self.rhs = self._use(rhs)

    def to_string(self, id_allocator: IDAllocator) -> str:
        prefix = super().to_string(id_allocator)
        try:
            operator = _BINARY_OPERATORS[self.code_kind]
        except KeyError:
            raise ValueError(f"Unknown code kind: {self.code_kind.name}") from None
        return (
            f"{prefix}  {id_allocator.alloc(self)} = "
            f"{id_allocator.alloc(self.lhs.value)}{operator}"
            f"{id_allocator.alloc(self.rhs.value)};"
        )


class UnaryOperation(Code):
    """An operation on one operand."""

    def __init__(self, code_kind: CodeKind, operand: Value) -> None:
        super().__init__(code_kind, operand.type)
        self.operand = self._use(operand)

    def to_string(self, id_allocator: IDAllocator) -> str:
        prefix = super().to_string(id_allocator)
        try:
            operator = _UNARY_OPERATORS[self.code_kind]
        except KeyError:
            raise ValueError(f"Unknown code kind: {self.code_kind.name}") from None
        return (
            f"{prefix}  {id_allocator.alloc(self)} = "
            f"{operator}{id_allocator.alloc(self.operand.value)};"
        )


class ConditionBranch(Code):
    """Jump to one of two labels depending on a condition."""

    def __init__(self, condition: Value, true_label: Label, false_label: Label) -> None:
        super().__init__(CodeKind.CONDITION_BRANCH)
        self.condition = self._use(condition)
        self.true_label = self._use(true_label)
        self.false_label = self._use(false_label)

    def to_string(self, id_allocator: IDAllocator) -> str:
        return (
            f"{super().to_string(id_allocator)}  if "
            f"{id_allocator.alloc(self.condition.value)} goto "
            f"{id_allocator.alloc(self.true_label.value)} else "
            f"{id_allocator.alloc(self.false_label.value)};"
        )


class Goto(Code):
    """An unconditional jump; the target may be set later."""

    def __init__(self, label: Optional[Label] = None) -> None:
        super().__init__(CodeKind.GOTO)
        self.dest_label: Optional[Use] = self._use(label) if label is not None else None

    def set_dest(self, label: Label) -> None:
        """Point this jump at ``label``."""
        if self.dest_label is not None:
            self.dest_label.remove_from_parent()
        self.dest_label = self._use(label)

    def to_string(self, id_allocator: IDAllocator) -> str:
        if self.dest_label is None or self.dest_label.value is None:
            raise ValueError("Goto has no destination")
        return (
            f"{super().to_string(id_allocator)}  goto "
            f"{id_allocator.alloc(self.dest_label.value)};"
        )


class Nope(Code):
    """An instruction that does nothing."""

    def __init__(self) -> None:
        super().__init__(CodeKind.NOPE)

    def to_string(self, id_allocator: IDAllocator) -> str:
        return super().to_string(id_allocator) + "  nope;"


class FunctionDefinition(Code):
    """Definition of a function in the enclosing code list."""

    def __init__(self, function: FunctionValue) -> None:
        super().__init__(CodeKind.FUNCTION_DEFINITION)
        self.function = function

    def to_string(self, id_allocator: IDAllocator) -> str:
        return super().to_string(id_allocator) + self.function.to_string(id_allocator)


class Alloca(Code):
    """Reserve stack memory; its value is a pointer to ``allocated_type``."""

    def __init__(self, size: int, allocated_type: Type) -> None:
        super().__init__(CodeKind.ALLOCA, pointer(allocated_type))
        self.size = size

    def to_string(self, id_allocator: IDAllocator) -> str:
        return (
            f"{super().to_string(id_allocator)}  {id_allocator.alloc(self)}"
            f" = alloca size {self.size};"
        )


class Load(Code):
    """Read a value through an address."""

    def __init__(self, src: Value) -> None:
        super().__init__(CodeKind.LOAD, get_aim_type(src.type))
        self.src = self._use(src)

    def to_string(self, id_allocator: IDAllocator) -> str:
        return (
            f"{super().to_string(id_allocator)}  {id_allocator.alloc(self)}"
            f" = load {id_allocator.alloc(self.src.value)};"
        )


class Store(Code):
    """Write a value through an address."""

    def __init__(self, src: Value, dest: Value) -> None:
        super().__init__(CodeKind.STORE)
        self.src = self._use(src)
        self.dest = self._use(dest)

    def to_string(self, id_allocator: IDAllocator) -> str:
        return (
            f"{super().to_string(id_allocator)}  store "
            f"{id_allocator.alloc(self.src.value)} to "
            f"{id_allocator.alloc(self.dest.value)};"
        )


class Phi(Code):
    """Merge of one variable's values from each predecessor."""

    def __init__(self, variable_address: Value, count: int) -> None:
        value_type = get_aim_type(variable_address.type)
        super().__init__(CodeKind.PHI, value_type)
        self.variable = variable_address
        self.src_list = [self._use(undef(value_type)) for _ in range(count)]

    def replace_src(self, index: int, value: Value) -> None:
        """Make the source at ``index`` read ``value``."""
        self.src_list[index].remove_from_parent()
        self.src_list[index] = self._use(value)

    def to_string(self, id_allocator: IDAllocator) -> str:
        sources = ", ".join(id_allocator.alloc(use.value) for use in self.src_list)
        return (
            f"{super().to_string(id_allocator)}  {id_allocator.alloc(self)}"
            f" = phi( {sources} );"
        )


class Return(Code):
    """Return a value from the function."""

    def __init__(self, result: Value) -> None:
        super().__init__(CodeKind.RETURN)
        self.result = self._use(result)

    def to_string(self, id_allocator: IDAllocator) -> str:
        return (
            f"{super().to_string(id_allocator)}  return "
            f"{id_allocator.alloc(self.result.value)};"
        )