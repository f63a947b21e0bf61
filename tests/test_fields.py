import json

from linelog.fields import FieldList, is_zero, quote, quote_key, safe_str


class Point:
    def __init__(self, x, y):
        self.x, self.y = x, y

    def __str__(self):
        return f"({self.x}, {self.y})"


class Blank:
    def __str__(self):
        return ""


def test_render_in_insertion_order():
    f = FieldList().add("railway", "east", "stop", 5)
    assert f.render() == '{"railway":"east", "stop":5}'


def test_render_empty():
    assert FieldList().render() == "{}"


def test_render_is_valid_json():
    f = FieldList().add("env", "prod", "burning", True, "pi", 3.14, "ids", [1, 2])
    assert json.loads(f.render()) == {
        "env": "prod",
        "burning": True,
        "pi": 3.14,
        "ids": [1, 2],
    }


def test_zero_values_are_skipped():
    f = FieldList().add(
        "a", None,
        "b", "",
        "c", [],
        "d", (),
        "e", {},
        "f", 0,
        "g", False,
    )
    assert f.render() == '{"e":{}, "f":0, "g":false}'


def test_zero_value_position_does_not_matter():
    f = FieldList().add("hint", [], "x", 1, "null", None)
    assert f.render() == '{"x":1}'


def test_add_drops_trailing_key():
    f = FieldList().add("a", 1, "b")
    assert len(f) == 2
    assert f.render() == '{"a":1}'


def test_constructor_drops_trailing_key():
    assert FieldList(("a", 1, "b")) == ("a", 1)


def test_add_does_not_modify_receiver():
    base = FieldList().add("a", 1)
    left = base.add("b", 2)
    right = base.add("c", 3)

    assert base.render() == '{"a":1}'
    assert left.render() == '{"a":1, "b":2}'
    assert right.render() == '{"a":1, "c":3}'
    assert isinstance(left, FieldList)


def test_add_is_cumulative():
    a = FieldList().add("k", "v")
    assert a.add("x", 1).add("y", 2).render() == a.add("x", 1, "y", 2).render()


def test_duplicate_keys_are_kept():
    f = FieldList().add("k", 1, "k", 2)
    assert f.render() == '{"k":1, "k":2}'


def test_non_string_keys_are_quoted():
    f = FieldList().add(5, "x", None, "y")
    assert f.render() == '{"5":"x", "":"y"}'


def test_pairs():
    f = FieldList().add("a", 1, "b", 2)
    assert list(f.pairs()) == [("a", 1), ("b", 2)]


def test_export():
    f = FieldList().add(
        "a", 1,
        "", "x",
        "b", None,
        "c", "",
        "d", [],
        "e", Blank(),
        "f", Point(1, 2),
    )
    assert f.export() == [("a", "1"), ("d", "[]"), ("f", "(1, 2)")]


def test_is_zero():
    assert is_zero(None)
    assert is_zero("")
    assert is_zero([])
    assert is_zero(())
    assert not is_zero({})
    assert not is_zero(0)
    assert not is_zero(" ")


def test_quote_scalars():
    assert quote(None) == '""'
    assert quote("prod") == '"prod"'
    assert quote(3.14) == "3.14"
    assert quote(42) == "42"
    assert quote(True) == "true"
    assert quote([1, "a"]) == '[1,"a"]'
    assert quote({"a": 1}) == '{"a":1}'


def test_quote_error_uses_message():
    assert quote(EOFError("EOF")) == '"EOF"'


def test_quote_falls_back_to_str():
    assert quote(Point(1, 2)) == '"(1, 2)"'
    assert quote(float("nan")) == '"nan"'
    assert quote({(1, 2): "x"}) == json.dumps(str({(1, 2): "x"}))


def test_quote_keeps_unicode():
    assert quote("café") == '"café"'


def test_quote_key():
    assert quote_key("msg") == '"msg"'
    assert quote_key(7) == '"7"'
    assert quote_key(None) == '""'


class Unprintable:
    def __str__(self):
        raise RuntimeError("no text form")


def deeply_nested(depth):
    value = []
    for _ in range(depth):
        value = [value]
    return value


def test_quote_unprintable_value():
    assert quote(Unprintable()) == '"<unprintable Unprintable>"'
    assert quote([1, Unprintable()]) == '[1,"<unprintable Unprintable>"]'


def test_quote_deeply_nested_value():
    text = quote(deeply_nested(100_000))
    assert text == '"<unprintable list>"'


def test_render_with_unprintable_field():
    f = FieldList().add("obj", Unprintable(), "ok", 1)
    assert f.render() == '{"obj":"<unprintable Unprintable>", "ok":1}'


def test_unprintable_key_and_export():
    assert quote_key(Unprintable()) == '"<unprintable Unprintable>"'
    f = FieldList().add("obj", Unprintable())
    assert f.export() == [("obj", "<unprintable Unprintable>")]


def test_safe_str():
    assert safe_str(5) == "5"
    assert safe_str(Unprintable()) == "<unprintable Unprintable>"
