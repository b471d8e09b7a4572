import pytest
import dent
from dent.serializer import format_float, format_str, to_text
from dent.types import values_equal


def roundtrip(value):
    text = to_text(value)
    return dent.parse(text).root.value, text


@pytest.mark.parametrize("value", [
    {"name": "Mario", "skills": ["jumps", "grows"], "age": 35, "alive": True},
    [1, -2, 3.5, -0.0, 1e300, 2.5e-10, True, False],
    ["true", "false", "35", "-1", "1.5", "1e5", "11.", "99999999999999999999"],
    ["", " ", "two words", "tab\there", "line\nbreak", 'quote"d', "back\\slash", "\x01"],
    ["a:b", "[x]", "{y}", "@z", "#c", "café", "-", "a.b.c"],
    {"": 1, "two words": 2, "1": 3, "true": 4, "a:b": 5},
    {"nested": {"deep": [[], {}, [[1]], {"x": {"y": []}}]}},
    [9223372036854775807, -9223372036854775808],
    ["nb\xa0sp", "v\x0bt", "f\x0cf"],
])
def test_roundtrip(value):
    parsed, text = roundtrip(value)
    assert values_equal(parsed, value), text


def test_roundtrip_of_parsed_tree():
    src = """
    {
      title: "Dent \\"guide\\""
      tags: [ a "b c" 3 4.0 false ]
      empty: { }
    }
    """
    tree = dent.parse(src).root.value
    assert values_equal(dent.parse(to_text(tree)).root.value, tree)


def test_overflowing_float_literal_roundtrips():
    tree = dent.parse("[ 1e999 -1e999 ]").root.value
    assert tree == ["1e999", "-1e999"]
    assert values_equal(dent.parse(to_text(tree)).root.value, tree)


def test_canonical_form():
    tree = dent.parse("{ a: [ 1 2.0 x ] b: { c: true } d: \"e f\" }").root
    assert tree.to_str() == '{ a: [ 1 2.0 x ] b: { c: true } d: "e f" }'


def test_empty_containers():
    assert to_text([]) == "[ ]"
    assert to_text({}) == "{ }"


def test_strings_bare_only_when_unambiguous():
    assert format_str("Mario") == "Mario"
    assert format_str("true") == '"true"'
    assert format_str("42") == '"42"'
    assert format_str("4.2e1") == '"4.2e1"'
    assert format_str("") == '""'
    assert format_str("a b") == '"a b"'


def test_float_format():
    assert format_float(1.0) == "1.0"
    assert format_float(1e20) == "1e+20"
    assert format_float(0.1) == "0.1"


def test_top_level_none_is_empty_document():
    assert to_text(None) == ""
    assert dent.parse(to_text(None)).root.is_none()


def test_nested_none_has_no_literal():
    assert to_text([None]) == "[ none ]"
