"""Symbols, scopes and per-function state used while generating IR."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from siilang.front.types import Type
from siilang.ir.types import Type as IRType
from siilang.ir.values import FunctionContext, FunctionValue, Value


class SymbolKind(Enum):
    """What a symbol names."""

    VARIABLE = auto()
    FUNCTION = auto()


class Symbol:
    """A named entity with a source type."""

    kind: SymbolKind

    def __init__(self, type: Optional[Type]) -> None:
        self.type = type


class VariableSymbol(Symbol):
    """A variable; ``address`` is the IR value holding its storage."""

    kind = SymbolKind.VARIABLE

    def __init__(self, type: Optional[Type], address: Value) -> None:
        super().__init__(type)
        self.address = address


class FunctionSymbol(Symbol):
    """A function; ``func`` has codes only once it is defined."""

    kind = SymbolKind.FUNCTION

    def __init__(self, type: Optional[Type], func: FunctionValue) -> None:
        super().__init__(type)
        self.func = func


class SymbolTable:
    """Maps names to the symbols of one scope."""

    def __init__(self) -> None:
        self._symbols: dict[str, Symbol] = {}

    def find(self, identifier: str) -> Optional[Symbol]:
        """Return the symbol named ``identifier`` or ``None``."""
        return self._symbols.get(identifier)

    def push(self, name: str, symbol: Symbol) -> None:
        """Add ``symbol``, allowing a function definition to follow its declaration."""
        old = self.find(name)
        if old is None:
            self._symbols[name] = symbol
            return
        if old.kind is not symbol.kind:
            raise ValueError(f"Redefine of {name} as a different kind of symbol.")
        if isinstance(old, FunctionSymbol) and isinstance(symbol, FunctionSymbol):
            if symbol.func.codes is not None:
                if old.func.codes is None:
                    self._symbols[name] = symbol
                else:
                    raise ValueError(f"Redefinition of {name}")
            return
        if old.type != symbol.type:
            raise ValueError(f"Redefinition of {name} with different type.")
        raise ValueError(f"Redefinition of {name}")


@dataclass(eq=False)
class SymbolContext:
    """A scope: its symbols, the enclosing scope and the nested ones."""

    father: Optional["SymbolContext"] = None
    children: list = field(default_factory=list)
    symbol_table: SymbolTable = field(default_factory=SymbolTable)


class ContextManager:
    """Tracks the current scope and the function being generated."""

    def __init__(self) -> None:
        self.root_symbol_ctx = SymbolContext()
        self._current_symbol_ctx = self.root_symbol_ctx
        self._current_function_ctx: Optional[FunctionContext] = None

    @property
    def symbol_ctx(self) -> SymbolContext:
        """The innermost open scope."""
        return self._current_symbol_ctx

    @property
    def function_ctx(self) -> Optional[FunctionContext]:
        """State of the function being generated, if any."""
        return self._current_function_ctx

    def push_symbol_ctx(self) -> SymbolContext:
        """Open a nested scope and make it current."""
        new_ctx = SymbolContext(father=self._current_symbol_ctx)
        self._current_symbol_ctx.children.append(new_ctx)
        self._current_symbol_ctx = new_ctx
        return new_ctx

    def pop_symbol_ctx(self) -> None:
        """Close the current scope, returning to the enclosing one."""
        father = self._current_symbol_ctx.father
        if father is None:
            raise RuntimeError("Cannot leave the outermost symbol context")
        self._current_symbol_ctx = father

    def append_variable(self, name: str, variable: Symbol) -> None:
        """Declare a variable in the current scope."""
        self._current_symbol_ctx.symbol_table.push(name, variable)

    def append_function(self, name: str, function: Symbol) -> None:
        """Declare a function in the outermost scope."""
        self.root_symbol_ctx.symbol_table.push(name, function)

    def enter_function(self, type: IRType) -> FunctionContext:
        """Start generating a function of IR type ``type``."""
        self._current_function_ctx = FunctionContext(function_type=type)
        return self._current_function_ctx

    def leave_function(self) -> Optional[FunctionContext]:
        """Finish the current function and return its state."""
        result = self._current_function_ctx
        self._current_function_ctx = None
        return result