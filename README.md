# siilang

`siilang` is a library of compiler building blocks for a small C-like
language. It has no dependencies outside the standard library and supports
Python 3.10 and later.

## What is in it

Front end, `siilang.front`:

- `siilang.front.types` – source types (`Type`, `PointerType`, `ArrayType`,
  `FunctionType`) and `Declarator`; `normalize_parameter_declaration` and
  `normalize_variable_declaration` check declarations and turn array and
  function parameters into pointers; `size_of` and `to_ir_type` lower types.
- `siilang.front.ast` – syntax tree nodes with structural equality, and
  constructors such as `add`, `assign`, `if_else`, `while_loop`,
  `declaration` and `normalize_declaration` (which also resolves old-style
  parameter declarations).
- `siilang.front.context` – `SymbolTable`, nested `SymbolContext` scopes and
  a `ContextManager` that tracks the current scope and function.
- `siilang.front.diagnose` – `DiagnoseHandler`, which formats a message with
  the source line and a caret under the column.
- `siilang.front.printer` – `format_ast` and `ASTPrintVisitor`, an indented
  dump of a tree.
- `siilang.front.ir_expressions` – `ExpressionGenerator`, which lowers
  expression nodes to IR codes.

Intermediate representation, `siilang.ir`:

- `siilang.ir.types` – structurally compared IR types.
- `siilang.ir.values` – values, constants, labels, uses, `FunctionValue`,
  `FunctionContext` and the `IDAllocator` that names values when printing.
- `siilang.ir.codes` – instructions (arithmetic, comparisons, branches,
  `Alloca`, `Load`, `Store`, `Phi`, `Return`, …), each with `to_string`.
- `siilang.ir.builder` – `CodeBuilder`, which appends codes, attaches
  pending labels and puts allocas first in `finish()`.
- `siilang.ir.function` – `build_function`, which splits a flat code list
  into `BasicGroup`s linked by their predecessors and successors, and
  `Function.to_string()`.

## Examples

IR types compare by structure:

```python
from siilang.ir import types

assert types.integer(32) == types.integer(32)
assert types.pointer(types.integer(32)) != types.integer(32)
```

Printing a syntax tree:

```python
from siilang.front import ast
from siilang.front.printer import format_ast

print(format_ast(ast.add(ast.integer("1"), ast.identifier("x"))), end="")
# BinaryOperationNode: +
#   LiteralNode:  int 1
#   LiteralNode:  identifier x
```

Lowering an expression and building a function:

```python
from siilang.front import ast
from siilang.front import types as front_types
from siilang.front.context import ContextManager, VariableSymbol
from siilang.front.ir_expressions import ExpressionGenerator
from siilang.ir import types
from siilang.ir.builder import CodeBuilder
from siilang.ir.function import build_function

builder = CodeBuilder()
slot = builder.append_alloca(4, types.integer(32))

ctx = ContextManager()
ctx.append_variable("x", VariableSymbol(front_types.default_type(), slot))
generator = ExpressionGenerator(ctx)

total = generator.rvalue(ast.assign(ast.identifier("x"), ast.integer("1")), builder)
builder.append_return(generator.rvalue(ast.identifier("x"), builder))

func = build_function(builder.finish(), None, "main")
print(func.to_string())
```

## Errors

Problems are raised, not returned: the builder raises `TypeError` for
operands of mismatched types, malformed declarations, redefinitions and
undeclared identifiers raise `ValueError`, and an error-level diagnostic
raises `siilang.front.diagnose.DiagnosticError`. Warning and info
diagnostics return their formatted text.

## What it does not do

- There is no lexer or parser: syntax trees are built with the constructors
  in `siilang.front.ast`.
- Only expressions are lowered to IR; there is no lowering of statements,
  declarations or whole functions.
- There are no dominator trees, no SSA construction and no optimisation
  passes. `Phi` codes exist, but nothing places them.
- There is no command-line program.