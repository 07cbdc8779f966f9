"""Types of the source language and their lowering to IR types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar, Iterable, Optional

from siilang.ir import types as ir


class TypeKind(Enum):
    """The family a source type belongs to."""

    INT = auto()
    POINTER = auto()
    ARRAY = auto()
    FUNCTION = auto()


@dataclass
class Type:
    """A source type; a plain ``Type`` is a basic type such as ``int``."""

    kind: TypeKind

    def to_string(self, current: str = "") -> str:
        """Render the type wrapped around the declarator text ``current``."""
        if self.kind is TypeKind.INT:
            return "int " + current
        raise ValueError("Unknown type in Type.to_string")


@dataclass
class PointerType(Type):
    """A pointer; ``offset_limit`` of ``None`` means unlimited."""

    OFFSET_UNLIMIT: ClassVar[Optional[int]] = None

    kind: TypeKind = field(default=TypeKind.POINTER, init=False)
    aim_type: Optional[Type] = None
    offset_limit: Optional[int] = None

    def to_string(self, current: str = "") -> str:
        return self.aim_type.to_string("(*" + current + ")")


@dataclass
class ArrayType(Type):
    """An array; ``element_count`` may be ``ELEMENT_COUNT_UNKNOWN``."""

    ELEMENT_COUNT_UNKNOWN: ClassVar[int] = -1

    kind: TypeKind = field(default=TypeKind.ARRAY, init=False)
    element_type: Optional[Type] = None
    element_count: int = -1

    def to_string(self, current: str = "") -> str:
        return self.element_type.to_string(f"{current}[{self.element_count}]")


@dataclass
class FunctionType(Type):
    """A function type; parameters are declarators."""

    kind: TypeKind = field(default=TypeKind.FUNCTION, init=False)
    return_type: Optional[Type] = None
    parameter_types: list = field(default_factory=list)

    def to_string(self, current: str = "") -> str:
        parameters = ",".join(p.to_string() for p in self.parameter_types)
        return f"({self.return_type.to_string('')}({current})({parameters}))"


@dataclass
class Declarator:
    """A declared name together with its type."""

    type: Optional[Type]
    identifier: str = ""

    def to_string(self) -> str:
        """Render the declaration in source-like form."""
        return self.type.to_string(self.identifier)


def default_type() -> Type:
    """The type assumed when none is written: ``int``."""
    return basic(TypeKind.INT)


def basic(kind: TypeKind) -> Type:
    """Return the basic type of ``kind``."""
    return Type(kind)


def pointer(aim_type: Type, offset_limit: Optional[int] = None) -> PointerType:
    """Return a pointer to ``aim_type``."""
    return PointerType(aim_type=aim_type, offset_limit=offset_limit)


def array(element_type: Type, element_count: int) -> ArrayType:
    """Return an array of ``element_type``."""
    return ArrayType(element_type=element_type, element_count=element_count)


def function(return_type: Optional[Type], parameters: Iterable[Declarator] = ()) -> FunctionType:
    """Return a function type."""
    return FunctionType(return_type=return_type, parameter_types=list(parameters))


def _normalize_pointer(type: PointerType) -> Type:
    return pointer(normalize_parameter_declaration(type.aim_type), type.offset_limit)


def _normalize_array(type: ArrayType, force_count: bool) -> Type:
    if force_count and type.element_count == ArrayType.ELEMENT_COUNT_UNKNOWN:
        raise ValueError("Size of array not specified")
    element = type.element_type
    if element.kind is TypeKind.ARRAY:
        return array(_normalize_array(element, True), type.element_count)
    if element.kind is TypeKind.FUNCTION:
        raise ValueError("Element of array cannot be function")
    return array(normalize_parameter_declaration(element), type.element_count)


def _normalize_parameter(parameter: Declarator) -> Declarator:
    if parameter.type is None:
        raise ValueError("Parameter has no type")
    original = parameter.type
    new_type = normalize_parameter_declaration(original)
    if original.kind is TypeKind.FUNCTION:
        new_type = pointer(new_type, PointerType.OFFSET_UNLIMIT)
    elif original.kind is TypeKind.ARRAY:
        limit = None
        if original.element_count != ArrayType.ELEMENT_COUNT_UNKNOWN:
            limit = original.element_count
        new_type = pointer(original.element_type, limit)
    return Declarator(new_type, parameter.identifier)


def _normalize_function(type: FunctionType) -> Type:
    return_type = type.return_type
    if return_type is None:
        raise ValueError("Function has no return type")
    if return_type.kind is TypeKind.ARRAY:
        raise ValueError("Function cannot return a array")
    if return_type.kind is TypeKind.FUNCTION:
        raise ValueError("Function cannot return a function")
    return function(
        normalize_parameter_declaration(return_type),
        [_normalize_parameter(p) for p in type.parameter_types],
    )


def normalize_parameter_declaration(type: Type) -> Type:
    """Return ``type`` with array and function parameters turned into pointers."""
    if type.kind is TypeKind.POINTER:
        return _normalize_pointer(type)
    if type.kind is TypeKind.ARRAY:
        return _normalize_array(type, False)
    if type.kind is TypeKind.FUNCTION:
        return _normalize_function(type)
    return type


def normalize_variable_declaration(type: Type) -> Type:
    """Normalize the type of a variable, which needs a sized array."""
    if type.kind is TypeKind.ARRAY and type.element_count == ArrayType.ELEMENT_COUNT_UNKNOWN:
        raise ValueError("Definition of variable with array type needs an explicit size")
    return normalize_parameter_declaration(type)


def size_of(type: Type) -> int:
    """Return the storage size of a type in bytes."""
    if type.kind is TypeKind.INT:
        return 4
    if type.kind is TypeKind.POINTER:
        return 8
    raise ValueError("Unsupport type for SizeOf")


def to_ir_type(type: Type) -> ir.Type:
    """Lower a source type to an IR type."""
    if type.kind is TypeKind.INT:
        return ir.integer(32)
    if type.kind is TypeKind.POINTER:
        return ir.pointer(to_ir_type(type.aim_type), type.offset_limit)
    if type.kind is TypeKind.ARRAY:
        return ir.array(to_ir_type(type.element_type), type.element_count)
    return ir.function(
        to_ir_type(type.return_type),
        [to_ir_type(p.type) for p in type.parameter_types],
    )