import pytest

from siilang.ir import codes, types, values
from siilang.ir.builder import CodeBuilder

I32 = types.integer(32)
BOOL = types.integer(1)


def _const(text, type_=I32):
    return values.constant(text, type_)


@pytest.mark.parametrize(
    "method, kind",
    [
        ("append_multiply", codes.CodeKind.MUL),
        ("append_divide", codes.CodeKind.DIV),
        ("append_add", codes.CodeKind.ADD),
        ("append_sub", codes.CodeKind.SUB),
    ],
)
def test_arithmetic_takes_left_type(method, kind):
    builder = CodeBuilder()
    code = getattr(builder, method)(_const("1"), _const("2"))
    assert code.code_kind is kind
    assert code.type == I32
    assert builder.finish() == [code]


@pytest.mark.parametrize(
    "method", ["append_equal", "append_not_equal", "append_less_than", "append_less_equal"]
)
def test_comparisons_yield_bool(method):
    code = getattr(CodeBuilder(), method)(_const("1"), _const("2"))
    assert code.type == BOOL


@pytest.mark.parametrize("method", ["append_not_equal", "append_less_than", "append_less_equal"])
def test_comparisons_reject_mixed_types(method):
    with pytest.raises(TypeError):
        getattr(CodeBuilder(), method)(_const("1"), _const("1", BOOL))


def test_equal_does_not_check_types():
    code = CodeBuilder().append_equal(_const("1"), _const("1", BOOL))
    assert code.code_kind is codes.CodeKind.EQUAL


def test_neg_keeps_operand_type():
    code = CodeBuilder().append_neg(_const("1"))
    assert code.type == I32
    assert code.code_kind is codes.CodeKind.NEG


def test_allocas_come_first():
    builder = CodeBuilder()
    add = builder.append_add(_const("1"), _const("2"))
    alloca = builder.append_alloca(4, I32)
    assert builder.finish() == [alloca, add]
    assert alloca.type == types.pointer(I32)


def test_store_and_load_types():
    builder = CodeBuilder()
    alloca = builder.append_alloca(4, I32)
    store = builder.append_store(_const("7"), alloca)
    load = builder.append_load(alloca)
    assert store.dest.value is alloca
    assert load.type == I32


def test_store_type_mismatch():
    builder = CodeBuilder()
    alloca = builder.append_alloca(4, I32)
    with pytest.raises(TypeError):
        builder.append_store(_const("1", BOOL), alloca)


def test_store_to_non_address():
    with pytest.raises(ValueError):
        CodeBuilder().append_store(_const("1"), _const("2"))


def test_condition_branch_requires_bool():
    builder = CodeBuilder()
    with pytest.raises(TypeError):
        builder.append_condition_branch(_const("1"), values.Label(), values.Label())
    branch = builder.append_condition_branch(_const("1", BOOL), values.Label(), values.Label())
    assert branch.code_kind is codes.CodeKind.CONDITION_BRANCH


def test_label_attaches_to_next_code():
    builder = CodeBuilder()
    label = values.Label()
    builder.append_label(label)
    ret = builder.append_return(_const("0"))
    assert ret.label is label
    assert label.dest_code is ret


def test_consecutive_labels_insert_goto():
    builder = CodeBuilder()
    first, second = values.Label(), values.Label()
    builder.append_label(first)
    builder.append_label(second)
    nope = builder.append_nope()
    result = builder.finish()
    assert len(result) == 2
    goto = result[0]
    assert goto.code_kind is codes.CodeKind.GOTO
    assert goto.label is first
    assert goto.dest_label.value is second
    assert nope.label is second


def test_finish_flushes_pending_label_with_nope():
    builder = CodeBuilder()
    label = values.Label()
    builder.append_label(label)
    result = builder.finish()
    assert len(result) == 1
    assert result[0].code_kind is codes.CodeKind.NOPE
    assert result[0].label is label


def test_goto_can_be_completed_later():
    builder = CodeBuilder()
    goto = builder.append_goto(None)
    end = values.Label()
    goto.set_dest(end)
    ids = values.IDAllocator()
    assert goto.to_string(ids) == "  goto " + ids.alloc(end) + ";"


def test_append_function():
    ctx = values.FunctionContext(types.function(I32, []))
    func = values.FunctionValue([], ctx, "g", ctx.function_type)
    builder = CodeBuilder()
    definition = builder.append_function(func)
    assert definition.function is func
    assert builder.finish() == [definition]