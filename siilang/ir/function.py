"""Functions as graphs of basic groups."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from siilang.ir.codes import Code, CodeKind, Goto
from siilang.ir.values import FunctionContext, IDAllocator, Label


@dataclass(eq=False)
class BasicGroup:
    """A straight-line run of codes with its control-flow neighbours."""

    codes: list = field(default_factory=list)
    follows: list = field(default_factory=list)
    precedes: list = field(default_factory=list)
    label: Optional[Label] = None

    def to_string(self, id_allocator: IDAllocator) -> str:
        """Render the group header, its predecessors and its codes."""
        header = self.label.to_string(id_allocator) + ":          ; pred: "
        if self.precedes:
            header += ", ".join(
                group.label.to_string(id_allocator) for group in self.precedes
            )
            header += ";"
        lines = [header]
        lines.extend(code.to_string(id_allocator) for code in self.codes)
        return "".join(line + "\n" for line in lines)


@dataclass(eq=False)
class Function:
    """A function body split into basic groups, reachable from ``entry``."""

    entry: Optional[BasicGroup] = None
    basic_groups: list = field(default_factory=list)
    ctx: Optional[FunctionContext] = None
    name: str = ""

    def to_string(self) -> str:
        """Render every group reachable from the entry, depth first."""
        id_allocator = IDAllocator()
        visited: set = set()
        parts = ["Function " + self.name + "\n"]

        def traverse(group: BasicGroup) -> None:
            if group in visited:
                return
            visited.add(group)
            parts.append(group.to_string(id_allocator) + "\n")
            for follow in group.follows:
                traverse(follow)

        if self.entry is not None:
            traverse(self.entry)
        return "".join(parts)


def _link(source: BasicGroup, target: BasicGroup) -> None:
    source.follows.append(target)
    target.precedes.append(source)


class _FunctionBuilder:
    def __init__(self, codes: list, ctx: Optional[FunctionContext]) -> None:
        self._codes = list(codes)
        self._ctx = ctx
        self._code_to_index: dict = {}
        self._label_to_group: dict = {}
        self._groups: list[BasicGroup] = []

    def _index_of_label(self, label: Label) -> int:
        try:
            return self._code_to_index[label.dest_code]
        except KeyError:
            raise ValueError("Jump to a label outside of the function") from None

    def _group_from(self, start: int) -> BasicGroup:
        first = self._codes[start]
        if first.label is None:
            raise ValueError(
                "Building a basic group with a non-label code at the beginning."
            )
        existing = self._label_to_group.get(first.label)
        if existing is not None:
            return existing
        result = BasicGroup()
        self._label_to_group[first.label] = result

        for line in range(start, len(self._codes)):
            current: Code = self._codes[line]
            if line != start and current.label is not None:
                result.codes.append(Goto(current.label))
                _link(result, self._group_from(line))
                break
            result.codes.append(current)
            if current.code_kind is CodeKind.GOTO:
                if current.dest_label is None or current.dest_label.value is None:
                    raise ValueError("Goto has no destination")
                target = self._index_of_label(current.dest_label.value)
                _link(result, self._group_from(target))
                break
            if current.code_kind is CodeKind.CONDITION_BRANCH:
                true_index = self._index_of_label(current.true_label.value)
                _link(result, self._group_from(true_index))
                false_index = self._index_of_label(current.false_label.value)
                _link(result, self._group_from(false_index))
                break

        self._groups.append(result)
        return result

    def build(self, name: str) -> Function:
        func = Function()
        entry = BasicGroup()
        self._groups.append(entry)
        func.entry = entry

        first_non_alloca = 0
        for index, code in enumerate(self._codes):
            if code in self._code_to_index:
                raise ValueError("Code already exists in Function.")
            self._code_to_index[code] = index
            if code.code_kind is CodeKind.ALLOCA:
                if index != first_non_alloca:
                    raise ValueError("Alloca must be continuous on the head of codes")
                first_non_alloca = index + 1
                entry.codes.append(code)

        if first_non_alloca != len(self._codes):
            first_code = self._codes[first_non_alloca]
            if first_code.label is None:
                first_code.label = Label()
                first_code.label.dest_code = first_code
            entry.codes.append(Goto(first_code.label))
            _link(entry, self._group_from(first_non_alloca))

        entry.label = Label()
        for group in self._groups[1:]:
            if group.label is None:
                head = group.codes[0]
                if head.label is None:
                    raise ValueError(
                        "Label is not set on the first code of a basic group"
                    )
                group.label = head.label
                head.label = None

        for group in self._groups:
            for code in group.codes:
                code.group = group

        func.basic_groups = self._groups
        func.ctx = self._ctx
        func.name = name
        return func


def build_function(codes: list, ctx: Optional[FunctionContext], name: str) -> Function:
    """Split a flat code list into a graph of basic groups."""
    return _FunctionBuilder(codes, ctx).build(name)