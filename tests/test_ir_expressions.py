import pytest

from siilang.front import ast
from siilang.front import types as ft
from siilang.front.context import ContextManager, FunctionSymbol, VariableSymbol
from siilang.front.ir_expressions import ExpressionGenerator
from siilang.ir import types as ir
from siilang.ir.builder import CodeBuilder
from siilang.ir.codes import BinaryOperation, CodeKind, Load, Store, UnaryOperation
from siilang.ir.values import ConstantValue, FunctionValue, IDAllocator, constant


@pytest.fixture
def setup():
    manager = ContextManager()
    builder = CodeBuilder()
    generator = ExpressionGenerator(manager)
    return manager, builder, generator


def _declare(manager, builder, name):
    address = builder.append_alloca(4, ir.integer(32))
    manager.append_variable(name, VariableSymbol(ft.default_type(), address))
    return address


def test_integer_literal_is_constant(setup):
    _, builder, gen = setup
    value = gen.rvalue(ast.integer("42"), builder)
    assert isinstance(value, ConstantValue)
    assert value.literal == "42"
    assert value.type == ir.integer(32)
    assert builder.finish() == []


def test_empty_yields_none(setup):
    _, builder, gen = setup
    assert gen.rvalue(ast.empty(), builder) is None


def test_identifier_loads_from_address(setup):
    manager, builder, gen = setup
    address = _declare(manager, builder, "x")
    value = gen.rvalue(ast.identifier("x"), builder)
    assert isinstance(value, Load)
    assert value.src.value is address
    assert value.type == ir.integer(32)


def test_add_produces_binary_code(setup):
    _, builder, gen = setup
    value = gen.rvalue(ast.add(ast.integer("1"), ast.integer("2")), builder)
    assert isinstance(value, BinaryOperation)
    assert value.code_kind is CodeKind.ADD
    assert value.to_string(IDAllocator()) == "  %0 = 1 + 2;"


@pytest.mark.parametrize(
    "factory, kind, bits",
    [
        (ast.multiply, CodeKind.MUL, 32),
        (ast.divide, CodeKind.DIV, 32),
        (ast.subtract, CodeKind.SUB, 32),
        (ast.equal, CodeKind.EQUAL, 1),
        (ast.not_equal, CodeKind.NOT_EQUAL, 1),
        (ast.less_than, CodeKind.LESS_THAN, 1),
        (ast.less_equal, CodeKind.LESS_EQUAL, 1),
    ],
)
def test_binary_kinds_and_types(setup, factory, kind, bits):
    _, builder, gen = setup
    value = gen.rvalue(factory(ast.integer("1"), ast.integer("2")), builder)
    assert value.code_kind is kind
    assert value.type == ir.integer(bits)


def test_negation(setup):
    _, builder, gen = setup
    value = gen.rvalue(ast.negative(ast.integer("3")), builder)
    assert isinstance(value, UnaryOperation)
    assert value.operand.value.literal == "3"


def test_get_address_returns_alloca(setup):
    manager, builder, gen = setup
    address = _declare(manager, builder, "x")
    assert gen.rvalue(ast.get_address(ast.identifier("x")), builder) is address


def test_assign_stores_and_returns_right(setup):
    manager, builder, gen = setup
    address = _declare(manager, builder, "x")
    value = gen.rvalue(ast.assign(ast.identifier("x"), ast.integer("5")), builder)
    assert value.literal == "5"
    stores = [code for code in builder.finish() if isinstance(code, Store)]
    assert len(stores) == 1
    assert stores[0].src.value is value
    assert stores[0].dest.value is address


def test_assign_requires_identifier(setup):
    _, builder, gen = setup
    with pytest.raises(ValueError):
        gen.rvalue(ast.assign(ast.integer("1"), ast.integer("2")), builder)


def test_undeclared_identifier(setup):
    _, builder, gen = setup
    with pytest.raises(ValueError, match="undeclared identifier 'y'"):
        gen.rvalue(ast.identifier("y"), builder)


def test_function_symbol_is_not_a_variable(setup):
    manager, builder, gen = setup
    func = FunctionValue(None, None, "f", None)
    manager.append_function("f", FunctionSymbol(ft.function(ft.default_type(), []), func))
    with pytest.raises(ValueError):
        gen.lvalue(ast.identifier("f"), builder)


def test_lvalue_of_non_identifier(setup):
    _, builder, gen = setup
    with pytest.raises(ValueError):
        gen.lvalue(ast.integer("1"), builder)


def test_statement_is_not_rvalue(setup):
    _, builder, gen = setup
    with pytest.raises(ValueError):
        gen.rvalue(ast.if_else(ast.integer("1"), ast.empty()), builder)


def test_outer_scope_visible_and_inner_shadows(setup):
    manager, builder, gen = setup
    outer = _declare(manager, builder, "x")
    manager.push_symbol_ctx()
    assert gen.lvalue(ast.identifier("x"), builder).address is outer
    inner = _declare(manager, builder, "x")
    assert gen.lvalue(ast.identifier("x"), builder).address is inner
    manager.pop_symbol_ctx()
    assert gen.lvalue(ast.identifier("x"), builder).address is outer


def test_format_condition_keeps_bool(setup):
    _, builder, gen = setup
    cond = gen.rvalue(ast.less_than(ast.integer("1"), ast.integer("2")), builder)
    assert gen.format_condition(cond, builder) is cond


def test_format_condition_compares_int_with_zero(setup):
    _, builder, gen = setup
    value = constant("7", ir.integer(32))
    result = gen.format_condition(value, builder)
    assert result.code_kind is CodeKind.NOT_EQUAL
    assert result.lhs.value is value
    assert result.rhs.value.literal == "0"
    assert result.type == ir.integer(1)


def test_format_condition_rejects_pointer(setup):
    _, builder, gen = setup
    value = constant("p", ir.pointer(ir.integer(32)))
    with pytest.raises(TypeError):
        gen.format_condition(value, builder)