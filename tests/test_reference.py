import pytest

from tinyvariant.reference import JsonVariant
from tinyvariant.variant import RawString, VariantData


@pytest.fixture
def root():
    return JsonVariant(VariantData())


def test_unbound_reference():
    ref = JsonVariant()
    assert ref.is_unbound()
    assert ref.is_null()
    assert ref.set(1) is False
    assert ref.add(1) is False
    assert ref.size() == 0
    assert ref.as_(int) == 0
    assert ref.as_(str) is None
    assert ref.to_array().is_unbound()


def test_bound_null_is_not_unbound(root):
    assert root.is_null()
    assert not root.is_unbound()
    assert not root


@pytest.mark.parametrize(
    "value, kind",
    [(42, int), (-7, int), (1.5, float), ("hello", str), (True, bool), (False, bool)],
)
def test_set_and_as_round_trip(root, value, kind):
    assert root.set(value) is True
    assert root.is_(kind)
    assert root.as_(kind) == value


def test_set_collections_round_trip(root):
    doc = {"name": "x", "items": [1, 2.5, None, {"k": "v"}]}
    assert root.set(doc)
    assert root.as_(dict) == doc
    assert root.is_(dict)
    assert root.as_(list) is None


def test_large_unsigned_integer_round_trip(root):
    big = 2**64 - 1
    root.set(big)
    assert root.as_(int) == big
    assert root.is_(int)


def test_raw_string(root):
    root.set(RawString("[1,2]"))
    assert root.is_(RawString)
    assert root.as_(RawString) == RawString("[1,2]")
    assert not root.is_(str)


def test_reading_member_does_not_create(root):
    ref = root["missing"]
    assert ref.is_unbound()
    assert root.is_null()
    assert root.contains_key("missing") is False


def test_writing_member_creates_path(root):
    assert root["a"]["b"].set("deep")
    assert root["a"]["b"].as_(str) == "deep"
    assert root.is_(dict)
    assert root.nesting() == 2
    assert root.contains_key("a")


def test_setitem(root):
    root["x"] = 5
    assert root["x"].as_(int) == 5


def test_element_proxy_pads_array(root):
    assert root[2].set("x")
    items = root.as_(list)
    assert items == [None, None, "x"]
    assert root.size() == len(items)
    assert root[0].is_null()


def test_member_on_array_is_unbound(root):
    root.set([1, 2])
    assert root["key"].set(1) is False
    assert root.as_(list) == [1, 2]


def test_add_values(root):
    values = [1, "two", [3]]
    for value in values:
        assert root.add(value)
    assert root.as_(list) == values
    assert root.size() == len(values)


def test_add_to_object_fails(root):
    root.to_object()
    assert root.add(1) is False
    assert root.size() == 0


def test_add_element(root):
    element = root.add_element()
    assert element.is_null()
    element.set("v")
    assert root.as_(list) == ["v"]


def test_remove_index_key_and_variant(root):
    root.set([10, 20, 30])
    root.remove(1)
    assert root.as_(list) == [10, 30]

    index = JsonVariant(VariantData())
    index.set(0)
    root.remove(index)
    assert root.as_(list) == [30]

    obj = JsonVariant(VariantData())
    obj.set({"a": 1, "b": 2})
    name = JsonVariant(VariantData())
    name.set("a")
    obj.remove(name)
    assert obj.as_(dict) == {"b": 2}
    obj.remove("b")
    assert obj.as_(dict) == {}


def test_remove_rejects_bool(root):
    with pytest.raises(TypeError):
        root.remove(True)


def test_getitem_rejects_bad_key(root):
    with pytest.raises(TypeError):
        root[1.5]
    with pytest.raises(TypeError):
        root[True]
    assert root.is_null()
    assert root.size() == 0


def test_getitem_with_variant_key(root):
    root.set({"k": "v", "list": [7]})
    key = JsonVariant(VariantData())
    key.set("k")
    assert root[key].as_(str) == "v"
    index = JsonVariant(VariantData())
    index.set(0)
    assert root["list"][index].as_(int) == 7


def test_to_variant_and_clear(root):
    root.set([1, 2])
    ref = root.to_variant()
    assert ref.is_null()
    assert root.is_null()
    root.set("x")
    root.clear()
    assert root.is_null()


def test_create_nested(root):
    nested = root.create_nested_array("list")
    nested.add(1)
    obj = root.create_nested_object("obj")
    obj["k"].set("v")
    assert root.as_(dict) == {"list": [1], "obj": {"k": "v"}}

    arr = JsonVariant(VariantData())
    arr.create_nested_object()["a"].set(1)
    arr.create_nested_array().add(2)
    assert arr.as_(list) == [{"a": 1}, [2]]


def test_memory_usage_is_zero(root):
    root.set([1, 2, 3])
    assert root.memory_usage() == 0


def test_shallow_copy_is_deep(root):
    src = JsonVariant(VariantData())
    src.set({"a": [1, 2]})
    root.shallow_copy(src)
    src["a"].add(3)
    assert root.as_(dict) == {"a": [1, 2]}
    assert src.as_(dict) == {"a": [1, 2, 3]}


def test_set_from_variant(root):
    src = JsonVariant(VariantData())
    src.set("text")
    assert root["copy"].set(src)
    assert root["copy"].as_(str) == "text"
    assert root["none"].set(JsonVariant())
    assert root["none"].is_null()


def test_or_default(root):
    assert (root["n"] | 5) == 5
    root["n"].set(3)
    assert (root["n"] | 5) == 3
    assert (root["n"] | "fallback") == "fallback"
    root["s"].set("abc")
    assert (root["s"] | "fallback") == "abc"
    root["f"].set(2.5)
    assert (root["f"] | 0) == 0


def test_or_variant_default(root):
    fallback = JsonVariant(VariantData())
    fallback.set("fb")
    assert (root["missing"] | fallback) is fallback
    root["present"].set(1)
    chosen = root["present"] | fallback
    assert chosen.as_(int) == 1


def test_equality(root):
    root.set(5)
    assert root == 5
    assert 5 == root
    assert root == 5.0
    assert root != 6
    assert root != "5"
    null = JsonVariant(VariantData())
    assert null == None  # noqa: E711
    assert JsonVariant() == None  # noqa: E711


def test_ordering(root):
    root.set(5)
    assert root < 6
    assert root <= 5
    assert root > 4
    assert root >= 5
    assert 4 < root
    assert not root < 5
    assert not root < "z"
    assert not root >= "z"


def test_string_ordering(root):
    root.set("b")
    assert root > "a"
    assert root < "c"
    assert root == "b"


def test_boolean_comparison(root):
    root.set(True)
    assert root == True  # noqa: E712
    assert root != 1


def test_collection_equality(root):
    root.set({"a": [1, "x"]})
    assert root == {"a": [1, "x"]}
    assert root != {"a": [1]}
    other = JsonVariant(VariantData())
    other.set({"a": [1, "x"]})
    assert root == other
    assert not root < other


def test_is_with_unsupported_kind(root):
    with pytest.raises(TypeError):
        root.is_(bytes)
    with pytest.raises(TypeError):
        root.as_(bytes)


def test_as_variant_returns_same_target(root):
    root.set("same")
    alias = root.as_(JsonVariant)
    alias.set("changed")
    assert root.as_(str) == "changed"