import pytest
from colorama import Fore

from tern_interpreter.errors import TernRuntimeError, RuntimeErrorKind
from tern_interpreter.tokens import Token, TokenType
from tern_interpreter.values import (
    Integer, Real, String, Boolean, EnumValue, FunctionValue, NULL, TRUE, FALSE,
    type_name, get_raw, get_property, to_str, formatted_str, from_python, is_truthy,
)


def prop(lexeme):
    return Token(TokenType.IDENTIFIER, lexeme, None, 1, 7)


@pytest.mark.parametrize("value, expected", [
    (Integer(1), "Int"),
    (Real(1.5), "Real"),
    (String("a"), "String"),
    (TRUE, "Bool"),
    (NULL, "Null"),
    (EnumValue("Color", ("RED",)), "Color"),
])
def test_type_names(value, expected):
    assert type_name(value) == expected


def test_string_length_property():
    assert get_property(String("abc"), prop("length")) == Integer(3)
    assert get_property(String(""), prop("length")) == Integer(0)


def test_unknown_property_names_type_and_property():
    with pytest.raises(TernRuntimeError) as excinfo:
        get_property(Integer(5), prop("length"))
    assert excinfo.value.kind == RuntimeErrorKind.UNDEFINED_PROPERTY
    assert excinfo.value.message == "Property 'length' does not exist on type 'Int'."


def test_equality_ignores_property_table():
    assert String("abc") == String("abc")
    assert String("abc") != String("abd")
    assert Integer(1) != Real(1.0)


@pytest.mark.parametrize("value, expected", [
    (TRUE, "true"),
    (FALSE, "false"),
    (NULL, "none"),
    (Integer(42), "42"),
    (Real(2.5), "2.5"),
    (String("hi"), "hi"),
])
def test_to_str(value, expected):
    assert to_str(value) == expected


def test_formatted_str_quotes_and_colors_strings():
    text = formatted_str(String("hi"))
    assert '"hi"' in text
    assert text.startswith(Fore.GREEN)
    assert formatted_str(Integer(3)).startswith(Fore.BLUE)


def test_from_python_and_get_raw():
    assert from_python(None) is NULL
    assert from_python(True) is TRUE
    assert from_python(3) == Integer(3)
    assert from_python(0.5) == Real(0.5)
    assert from_python("s") == String("s")
    assert get_raw(Integer(3)) == 3
    assert get_raw(NULL) is None
    with pytest.raises(TypeError):
        from_python([1, 2])


@pytest.mark.parametrize("value, expected", [
    (NULL, False),
    (FALSE, False),
    (Integer(0), False),
    (Real(0.0), False),
    (TRUE, True),
    (Integer(-1), True),
    (String(""), True),
])
def test_truthiness(value, expected):
    assert is_truthy(value) is expected


def test_function_property_table_is_shared_and_read_only():
    with pytest.raises(TypeError):
        FunctionValue.properties["name"] = String("f")
    assert "name" not in FunctionValue.properties


def test_enum_members_and_length():
    color = EnumValue("Color", ("RED", "GREEN", "BLUE"))
    assert get_property(color, prop("GREEN")) == Integer(1)
    assert get_property(color, prop("length")) == Integer(3)
    assert to_str(color) == "<enum Color>"
    assert get_raw(color) == {"RED": 0, "GREEN": 1, "BLUE": 2}
    assert is_truthy(EnumValue("Empty", ()))


def test_unknown_enum_member_names_the_enum():
    with pytest.raises(TernRuntimeError) as excinfo:
        get_property(EnumValue("Color", ("RED",)), prop("PINK"))
    assert excinfo.value.kind == RuntimeErrorKind.UNDEFINED_PROPERTY
    assert excinfo.value.message == "Property 'PINK' does not exist in enum 'Color'."
