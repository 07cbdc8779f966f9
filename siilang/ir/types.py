"""Types of the intermediate representation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, Iterable, Optional


class TypeKind(Enum):
    """The family a type belongs to."""

    INT = auto()
    POINTER = auto()
    ARRAY = auto()
    FUNCTION = auto()


class Type:
    """Base of all IR types; equality is structural."""

    __slots__ = ()
    kind: ClassVar[TypeKind]


@dataclass(frozen=True)
class IntegerType(Type):
    """An integer of a fixed number of bits."""

    num_bits: int
    kind: ClassVar[TypeKind] = TypeKind.INT


@dataclass(frozen=True)
class PointerType(Type):
    """A pointer; ``offset_limit`` of ``None`` means the offset is unbounded."""

    aim_type: Type
    offset_limit: Optional[int] = None
    kind: ClassVar[TypeKind] = TypeKind.POINTER


@dataclass(frozen=True)
class ArrayType(Type):
    """A fixed-length array of elements of one type."""

    element_type: Type
    element_count: int
    kind: ClassVar[TypeKind] = TypeKind.ARRAY


@dataclass(frozen=True)
class FunctionType(Type):
    """A function signature."""

    return_type: Type
    parameter_types: tuple = ()
    kind: ClassVar[TypeKind] = TypeKind.FUNCTION

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameter_types", tuple(self.parameter_types))


def integer(num_bits: int) -> IntegerType:
    """Return the integer type of ``num_bits`` bits."""
    return IntegerType(num_bits)


def pointer(aim_type: Type, offset_limit: Optional[int] = None) -> PointerType:
    """Return a pointer to ``aim_type``."""
    return PointerType(aim_type, offset_limit)


def array(element_type: Type, element_count: int) -> ArrayType:
    """Return an array of ``element_count`` elements of ``element_type``."""
    return ArrayType(element_type, element_count)


def function(return_type: Type, parameter_types: Iterable[Type] = ()) -> FunctionType:
    """Return a function type."""
    return FunctionType(return_type, tuple(parameter_types))


def get_aim_type(pointer_type: Type) -> Type:
    """Return the type a pointer type points to."""
    if not isinstance(pointer_type, PointerType):
        raise ValueError("Type is not an address type")
    return pointer_type.aim_type