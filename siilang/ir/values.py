"""Values of the intermediate representation and their uses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Optional

from siilang.ir.types import Type

if TYPE_CHECKING:
    from siilang.ir.codes import Code


class ValueKind(Enum):
    """What a value is."""

    CONSTANT = auto()
    UNDEF = auto()
    PARAMETER = auto()
    LABEL = auto()
    FUNCTION = auto()
    CODE = auto()


class Value:
    """Anything that can be an operand. Identity is the object itself."""

    def __init__(self, kind: ValueKind, type: Optional[Type] = None) -> None:
        self.kind = kind
        self.type = type
        self.users: list[Use] = []

    def to_string(self, id_allocator: "IDAllocator") -> str:
        """Render this value as an operand."""
        return id_allocator.alloc(self)


class Use:
    """A reference from a code to a value it reads."""

    __slots__ = ("user", "value")

    def __init__(self, user: Optional["Code"], value: Optional[Value]) -> None:
        self.user = user
        self.value = value
        if value is not None:
            value.users.append(self)

    def remove_from_parent(self) -> None:
        """Detach this use from the value's list of users."""
        if self.value is not None and self in self.value.users:
            self.value.users.remove(self)


def new_use(user: Optional["Code"], value: Optional[Value]) -> Use:
    """Create a use of ``value`` by ``user``."""
    return Use(user, value)


class ConstantValue(Value):
    """A literal constant."""

    def __init__(self, literal: str, type: Optional[Type]) -> None:
        super().__init__(ValueKind.CONSTANT, type)
        self.literal = literal

    def to_string(self, id_allocator: "IDAllocator") -> str:
        return self.literal


class UndefValue(Value):
    """An undefined value of a given type."""

    def __init__(self, type: Optional[Type]) -> None:
        super().__init__(ValueKind.UNDEF, type)

    def to_string(self, id_allocator: "IDAllocator") -> str:
        return "undef"


class ParameterValue(Value):
    """A formal parameter of a function."""

    def __init__(self, type: Optional[Type]) -> None:
        super().__init__(ValueKind.PARAMETER, type)


class Label(Value):
    """A jump target; ``dest_code`` is the code it marks."""

    def __init__(self) -> None:
        super().__init__(ValueKind.LABEL, None)
        self.dest_code: Optional["Code"] = None


@dataclass(eq=False)
class FunctionContext:
    """Per-function state: its type and parameters."""

    function_type: Optional[Type] = None
    parameters: list = field(default_factory=list)


class FunctionValue(Value):
    """A function with its code list (``None`` for a declaration)."""

    def __init__(
        self,
        codes: Optional[list],
        ctx: Optional[FunctionContext],
        name: str,
        type: Optional[Type],
    ) -> None:
        super().__init__(ValueKind.FUNCTION, type)
        self.codes = codes
        self.ctx = ctx
        self.name = name

    def to_string(self, id_allocator: "IDAllocator") -> str:
        parameters = self.ctx.parameters if self.ctx is not None else []
        header = "@" + self.name + "("
        header += ", ".join(id_allocator.alloc(p) for p in parameters)
        header += "):\n"
        body = "\n".join(code.to_string(id_allocator) for code in self.codes or [])
        return header + body


def constant(literal: str, type: Optional[Type]) -> ConstantValue:
    """Create a constant value."""
    return ConstantValue(literal, type)


def undef(type: Optional[Type]) -> UndefValue:
    """Create an undefined value."""
    return UndefValue(type)


class IDAllocator:
    """Hands out stable printable names for values."""

    def __init__(self) -> None:
        self._ids: dict[Any, int] = {}

    def _id_of(self, value: Value) -> int:
        return self._ids.setdefault(value, len(self._ids))

    def alloc(self, value: Value) -> str:
        """Return the printable name of ``value``."""
        if value.kind is ValueKind.CONSTANT:
            return value.literal  # type: ignore[attr-defined]
        if value.kind is ValueKind.UNDEF:
            return "undef"
        if value.kind is ValueKind.LABEL:
            return "Label." + str(self._id_of(value))
        return "%" + str(self._id_of(value))