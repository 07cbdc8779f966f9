import pytest

from siilang.ir import types, values


def test_constant_renders_literal():
    ids = values.IDAllocator()
    c = values.constant("42", types.integer(32))
    assert c.to_string(ids) == "42"
    assert ids.alloc(c) == "42"
    assert c.kind is values.ValueKind.CONSTANT


def test_undef_renders_undef():
    ids = values.IDAllocator()
    u = values.undef(types.integer(32))
    assert u.to_string(ids) == "undef"
    assert ids.alloc(u) == "undef"


def test_label_names_are_stable_and_distinct():
    ids = values.IDAllocator()
    a, b = values.Label(), values.Label()
    name_a = ids.alloc(a)
    assert name_a.startswith("Label.")
    assert ids.alloc(a) == name_a
    assert a.to_string(ids) == name_a
    assert ids.alloc(b) != name_a


def test_parameter_names_use_percent():
    ids = values.IDAllocator()
    p = values.ParameterValue(types.integer(32))
    name = ids.alloc(p)
    assert name.startswith("%")
    assert name[1:].isdigit()
    assert p.to_string(ids) == name


def test_distinct_values_get_distinct_names():
    ids = values.IDAllocator()
    params = [values.ParameterValue(types.integer(32)) for _ in range(5)]
    names = [ids.alloc(p) for p in params]
    assert len(set(names)) == 5


def test_new_use_registers_user():
    v = values.ParameterValue(types.integer(32))
    use = values.new_use(None, v)
    assert use.value is v
    assert v.users == [use]


def test_remove_from_parent_detaches():
    v = values.ParameterValue(types.integer(32))
    first = values.new_use(None, v)
    second = values.new_use(None, v)
    first.remove_from_parent()
    assert v.users == [second]


def test_function_value_header():
    i32 = types.integer(32)
    ctx = values.FunctionContext(types.function(i32, [i32, i32]))
    ctx.parameters.extend([values.ParameterValue(i32), values.ParameterValue(i32)])
    func = values.FunctionValue(None, ctx, "f", ctx.function_type)
    assert func.to_string(values.IDAllocator()) == "@f(%0, %1):\n"


def test_function_context_defaults():
    ctx = values.FunctionContext()
    assert ctx.parameters == []
    assert ctx.function_type is None


@pytest.mark.parametrize("literal", ["0", "7", "-3"])
def test_constant_keeps_type(literal):
    c = values.constant(literal, types.integer(32))
    assert c.type == types.integer(32)
    assert c.literal == literal