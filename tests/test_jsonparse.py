import pytest

from pipetoolkit.jsonparse import (
    JsonParseError,
    MultiParseResult,
    ParseStrategy,
    parse,
    parse_multi,
)
from pipetoolkit.jsonvalue import Json, JsonType


def _error(text, strategy=ParseStrategy.STANDARD):
    with pytest.raises(JsonParseError) as info:
        parse(text, strategy)
    return info.value.message


def test_parse_integer():
    value = parse("42")
    assert value == Json(42)
    assert value.int_value() == 42


def test_parse_negative_float():
    assert parse("-3.5").number_value() == -3.5


def test_parse_exponent():
    assert parse("1e3").number_value() == 1e3


def test_long_integer_becomes_float():
    value = parse("12345678901")
    assert value.is_number()
    assert value.number_value() == 12345678901.0


@pytest.mark.parametrize("text,expected", [("true", True), ("false", False)])
def test_parse_bools(text, expected):
    assert parse(text) == Json(expected)


def test_parse_null():
    assert parse("null").is_null()


def test_parse_string_escapes():
    assert parse('"a\\nb\\t\\"c\\/"').string_value() == 'a\nb\t"c/'


def test_parse_unicode_escape():
    assert parse('"\\u00e9"').string_value() == "\u00e9"


def test_parse_surrogate_pair():
    assert parse('"\\ud83d\\ude00"').string_value() == "\U0001F600"


def test_parse_nested_structure():
    value = parse('{"a": 1, "b": [true, null, "x"]}')
    assert value.type() is JsonType.OBJECT
    assert value["a"] == Json(1)
    assert value["b"][0].bool_value() is True
    assert value["b"][1].is_null()
    assert value["b"][2].string_value() == "x"


def test_duplicate_key_last_wins():
    assert parse('{"k": 1, "k": 2}')["k"] == Json(2)


def test_round_trip_through_dump():
    original = Json({"k": [1, 2.5, "s\n", None, True], "z": {"y": False}})
    assert parse(original.dump()) == original


def test_empty_containers():
    assert parse("[]").array_items() == ()
    assert len(parse(" { } ").object_items()) == 0


def test_leading_zero_rejected():
    assert _error("01") == "leading 0s not permitted in numbers"


def test_fraction_needs_digit():
    assert _error("1.") == "at least one digit required in fractional part"


def test_exponent_needs_digit():
    assert _error("1e+") == "at least one digit required in exponent"


def test_unexpected_end():
    assert _error("[1,2") == "unexpected end of input"


def test_bad_literal():
    assert _error("tru") == "parse error: expected true, got tru"


def test_trailing_garbage():
    assert _error("1 x") == "unexpected trailing 'x' (120)"


def test_object_key_must_be_string():
    assert _error("{1:2}").startswith("expected '\"' in object")


def test_unescaped_control_character():
    assert _error('"a\x01"').startswith("unescaped")


def test_bad_unicode_escape():
    assert _error('"\\u12"').startswith("bad \\u escape")


def test_invalid_escape():
    assert _error('"\\q"') == "invalid escape character 'q' (113)"


def test_depth_limit():
    assert parse("[" * 201 + "]" * 201).is_array()
    assert _error("[" * 202 + "]" * 202) == "exceeded maximum nesting depth"


def test_comments_allowed_with_strategy():
    assert parse("/* c */ 1 // tail", ParseStrategy.COMMENTS) == Json(1)


def test_comments_rejected_by_default():
    with pytest.raises(JsonParseError):
        parse("/* c */ 1")


def test_unterminated_comment():
    message = _error("/* 1", ParseStrategy.COMMENTS)
    assert message == "unexpected end of input inside multi-line comment"


def test_malformed_comment():
    assert _error("/x 1", ParseStrategy.COMMENTS) == "malformed comment"


def test_null_input():
    assert _error(None) == "null input"


def test_error_is_value_error():
    with pytest.raises(ValueError):
        parse("[")


def test_parse_multi_all_values():
    text = '1 [2] {"a": 3}'
    result = parse_multi(text)
    assert isinstance(result, MultiParseResult)
    assert result.values == [Json(1), Json([2]), Json({"a": 3})]
    assert result.stop_pos == len(text)
    assert result.error is None


def test_parse_multi_stops_at_error():
    text = "1 2 x"
    result = parse_multi(text)
    assert result.values == [Json(1), Json(2)]
    assert text[result.stop_pos :] == "x"
    assert result.error == "expected value, got 'x' (120)"


def test_parse_multi_empty():
    result = parse_multi("")
    assert result.values == []
    assert result.stop_pos == 0
    assert result.error is None