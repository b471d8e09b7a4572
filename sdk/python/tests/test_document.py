import pytest
import dent
from dent import accessors as api
from dent.accessors import AccessError
from dent.document import Document
from dent.errors import (
    DentSyntaxError,
    FunctionArityOrTypeError,
    LexError,
    ReleasedHandleError,
    UnknownFunctionError,
)
from dent.types import Kind

MARIO = "{ name: Mario skills: [ jumps grows ] age: 35 alive: true height: 1.55 }"


@pytest.fixture
def doc():
    d = api.parse(MARIO)
    yield d
    if not d.released:
        api.free(d)


# --- the boundary accessors ---

def test_navigate_mario(doc):
    root = doc.root
    assert api.as_str(api.get_index(api.get(root, "skills"), 1)) == "grows"
    assert api.as_int(api.get(root, "age")) == 35
    assert api.as_bool(api.get(root, "alive")) is True
    assert api.as_float(api.get(root, "height")) == 1.55


def test_get_not_found(doc):
    assert api.get(doc.root, "missing") is AccessError.NOT_FOUND


def test_get_on_non_dict(doc):
    assert api.get(api.get(doc.root, "skills"), "x") is AccessError.TYPE_MISMATCH


def test_get_index_out_of_range(doc):
    skills = api.get(doc.root, "skills")
    assert api.get_index(skills, 2) is AccessError.OUT_OF_RANGE
    assert api.get_index(skills, -1) is AccessError.OUT_OF_RANGE


def test_get_index_on_non_list(doc):
    assert api.get_index(doc.root, 0) is AccessError.TYPE_MISMATCH


def test_get_index_rejects_bool(doc):
    skills = api.get(doc.root, "skills")
    assert api.get_index(skills, True) is AccessError.TYPE_MISMATCH
    assert api.get_index(skills, False) is AccessError.TYPE_MISMATCH


def test_predicates_are_total(doc):
    root = doc.root
    checks = [api.is_none, api.is_str, api.is_bool, api.is_int, api.is_float, api.is_list, api.is_dict]
    expected = {
        "name": api.is_str,
        "skills": api.is_list,
        "age": api.is_int,
        "alive": api.is_bool,
        "height": api.is_float,
    }
    for key, match in expected.items():
        node = api.get(root, key)
        assert [check(node) for check in checks] == [check is match for check in checks]
    assert api.is_dict(root)


def test_none_predicate():
    d = api.parse("# empty")
    assert api.is_none(d.root)
    assert d.root.kind is Kind.NONE
    api.free(d)


def test_strict_extraction(doc):
    root = doc.root
    name, age, alive, height = (api.get(root, k) for k in ("name", "age", "alive", "height"))
    assert api.as_int(name) is AccessError.TYPE_MISMATCH
    assert api.as_str(age) is AccessError.TYPE_MISMATCH
    assert api.as_float(age) is AccessError.TYPE_MISMATCH
    assert api.as_int(alive) is AccessError.TYPE_MISMATCH
    assert api.as_int(height) is AccessError.TYPE_MISMATCH
    assert api.as_bool(name) is AccessError.TYPE_MISMATCH


def test_numeric_looking_string_is_not_coerced():
    d = api.parse('{ n: "35" }')
    n = api.get(d.root, "n")
    assert api.is_str(n)
    assert api.as_str(n) == "35"
    assert api.as_int(n) is AccessError.TYPE_MISMATCH
    api.free(d)


def test_as_str_resolves_escapes():
    d = api.parse(r'[ "say \"hi\"\n" plain ]')
    assert api.as_str(api.get_index(d.root, 0)) == 'say "hi"\n'
    assert api.as_str(api.get_index(d.root, 1)) == "plain"
    api.free(d)


def test_length_and_is_empty(doc):
    root = doc.root
    assert api.length(root) == 5
    assert api.length(api.get(root, "skills")) == 2
    assert api.length(api.get(root, "name")) == 5
    assert api.length(api.get(root, "age")) is AccessError.TYPE_MISMATCH
    assert api.is_empty(root) is False
    assert api.is_empty(api.get(root, "alive")) is AccessError.TYPE_MISMATCH
    empty = api.parse('[ [ ] { } "" ]')
    assert [api.is_empty(api.get_index(empty.root, i)) for i in range(3)] == [True, True, True]
    api.free(empty)


def test_to_str_and_free_str(doc):
    text = api.to_str(api.get(doc.root, "skills"))
    assert text == "[ jumps grows ]"
    api.free_str(text)


def test_parse_failure_returns_none():
    assert api.parse("[ 1 2") is None
    assert isinstance(api.last_error(), DentSyntaxError)
    assert api.parse("@frobnicate 1 2") is None
    assert isinstance(api.last_error(), UnknownFunctionError)
    d = api.parse("1")
    assert api.last_error() is None
    api.free(d)


def test_parse_failure_in_host_function_returns_none():
    dent.register_function("first", lambda args, ctx: args[0])
    assert api.parse("@first") is None
    assert isinstance(api.last_error(), FunctionArityOrTypeError)
    assert isinstance(api.last_error().__cause__, IndexError)


def test_parse_file_failure_returns_none(tmp_path):
    assert api.parse_file(tmp_path / "missing.dent") is None
    assert api.last_error() is not None


def test_parse_bytes_buffer():
    d = api.parse(b"[ caf\xc3\xa9 ]")
    assert api.as_str(api.get_index(d.root, 0)) == "café"
    api.free(d)
    assert api.parse(memoryview(b"{ a: 1 }")).root.value == {"a": 1}


def test_parse_bad_utf8():
    with pytest.raises(LexError, match="UTF-8"):
        dent.parse(b"[ \xff ]")


# --- ownership ---

def test_free_invalidates_borrowed_nodes(doc):
    name = api.get(doc.root, "name")
    skills = api.get(doc.root, "skills")
    api.free(doc)
    assert doc.released
    with pytest.raises(ReleasedHandleError):
        api.as_str(name)
    with pytest.raises(ReleasedHandleError):
        api.get_index(skills, 0)
    with pytest.raises(ReleasedHandleError):
        api.is_str(name)
    with pytest.raises(ReleasedHandleError):
        doc.root


def test_double_free_is_rejected(doc):
    api.free(doc)
    with pytest.raises(ReleasedHandleError):
        api.free(doc)


def test_context_manager_frees():
    with dent.parse("[ 1 ]") as d:
        node = d.root[0]
        assert node.as_int() == 1
    assert d.released
    with pytest.raises(ReleasedHandleError):
        node.as_int()


def test_context_manager_after_manual_free():
    with dent.parse("[ 1 ]") as d:
        d.free()
    assert d.released


def test_strings_outlive_the_document(doc):
    name = api.as_str(api.get(doc.root, "name"))
    text = api.to_str(doc.root)
    api.free(doc)
    assert name == "Mario"
    assert text.startswith("{ name: Mario")


def test_to_python_is_a_copy(doc):
    copy = doc.root.to_python()
    copy["skills"].append("flies")
    assert api.length(api.get(doc.root, "skills")) == 2


# --- Node conveniences ---

def test_node_indexing(doc):
    root = doc.root
    assert root["skills"][0].as_str() == "jumps"
    with pytest.raises(KeyError):
        root["missing"]
    with pytest.raises(IndexError):
        root["skills"][5]
    with pytest.raises(TypeError):
        root["age"]["x"]
    with pytest.raises(TypeError):
        root[1.5]


def test_node_method_failures_are_none(doc):
    root = doc.root
    assert root.get("missing") is None
    assert root.get_index(0) is None
    assert root["age"].as_str() is None
    assert root["age"].len() is None
    assert root["age"].is_empty() is None


def test_node_iteration(doc):
    root = doc.root
    assert list(root) == ["name", "skills", "age", "alive", "height"]
    assert root.keys() == ["name", "skills", "age", "alive", "height"]
    assert [n.as_str() for n in root["skills"]] == ["jumps", "grows"]
    assert [(k, n.kind) for k, n in root.items()][:2] == [("name", Kind.STR), ("skills", Kind.LIST)]
    assert len(root["skills"]) == 2


def test_node_equality_keeps_kinds_apart():
    d = dent.parse("[ 1 1.0 true ]")
    one, one_f, true = d.root
    assert one == 1
    assert one != one_f
    assert one != true
    assert true == True  # noqa: E712
    d.free()


def test_scalar_nodes_are_truthy(doc):
    assert doc.root["age"]
    assert doc.root.get("age")


def test_document_repr():
    d = Document([1], path="x.dent")
    assert repr(d) == "<Document x.dent list>"
    d.free()
    assert repr(d) == "<Document x.dent released>"
