import pytest
import dent
from dent.errors import (
    DentError,
    DentSyntaxError,
    FunctionArityOrTypeError,
    ImportCycleError,
    ImportIOError,
    LexError,
    ReleasedHandleError,
    UnknownFunctionError,
)


@pytest.mark.parametrize("cls", [
    LexError, DentSyntaxError, FunctionArityOrTypeError, ImportIOError, ReleasedHandleError,
])
def test_taxonomy_shares_a_base(cls):
    assert issubclass(cls, DentError)


def test_error_str_formats():
    assert str(DentError("boom")) == "boom"
    assert str(DentError("boom", path="a.dent")) == "a.dent: boom"
    assert str(DentError("boom", path="a.dent", line=3, column=4)) == "a.dent:3:4: boom"
    assert str(DentError("boom", line=1, column=2)) == "<buffer>:1:2: boom"


def test_unknown_function_carries_name():
    with pytest.raises(UnknownFunctionError) as ei:
        dent.parse("[\n  @nothing ]")
    assert ei.value.name == "nothing"
    assert (ei.value.line, ei.value.column) == (2, 4)


def test_cycle_error_carries_chain():
    err = ImportCycleError(["a.dent", "b.dent", "a.dent"])
    assert err.chain == ["a.dent", "b.dent", "a.dent"]
    assert "a.dent -> b.dent -> a.dent" in str(err)


def test_parse_aborts_without_partial_result():
    # The error in the last element aborts everything parsed before it.
    with pytest.raises(FunctionArityOrTypeError):
        dent.parse("{ a: [ 1 2 3 ] b: @merge [ 1 ] }")


def test_failed_parse_leaves_engine_usable():
    with pytest.raises(DentSyntaxError):
        dent.parse("{")
    assert dent.parse("{ ok: true }").root["ok"].as_bool() is True
