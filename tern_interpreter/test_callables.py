import pytest

from tern_interpreter.callables import NativeFunction, Positional, Named
from tern_interpreter.environment import Environment
from tern_interpreter.errors import TernRuntimeError, RuntimeErrorKind
from tern_interpreter.tokens import Token, TokenType
from tern_interpreter.values import Integer, NULL

PAREN = Token(TokenType.RIGHT_PAREN, ")", None, 1, 10)


def name(lexeme):
    return Token(TokenType.IDENTIFIER, lexeme, None, 1, 3)


def make_function(params=("a", "b"), required=None):
    """A native function that hands back whatever was bound."""
    return NativeFunction("f", list(params), lambda interpreter, token, args: dict(args), required)


def bind(function, arguments):
    scope = Environment()
    for param in function.parameter_names():
        scope.define(param, NULL)
    function.bind(PAREN, arguments, scope)
    return scope.values


def test_positional_and_named_bind_the_same_values():
    f = make_function()
    positional = bind(f, [(Positional(0), Integer(1)), (Positional(1), Integer(2))])
    named = bind(f, [(Named(name("b")), Integer(2)), (Named(name("a")), Integer(1))])
    mixed = bind(f, [(Positional(0), Integer(1)), (Named(name("b")), Integer(2))])
    assert positional == named == mixed == {"a": Integer(1), "b": Integer(2)}


def test_named_after_positional_for_same_parameter_is_duplicate():
    f = make_function()
    with pytest.raises(TernRuntimeError) as excinfo:
        bind(f, [(Positional(0), Integer(1)), (Named(name("a")), Integer(2))])
    assert excinfo.value.kind == RuntimeErrorKind.DUPLICATE_ARGUMENT
    assert excinfo.value.message == "f() received multiple values for argument 'a'."


def test_same_named_argument_twice_is_duplicate():
    f = make_function()
    with pytest.raises(TernRuntimeError) as excinfo:
        bind(f, [(Named(name("b")), Integer(1)), (Named(name("b")), Integer(2))])
    assert excinfo.value.kind == RuntimeErrorKind.DUPLICATE_ARGUMENT


def test_unknown_named_argument():
    f = make_function()
    with pytest.raises(TernRuntimeError) as excinfo:
        bind(f, [(Positional(0), Integer(1)), (Named(name("zzz")), Integer(2))])
    assert excinfo.value.kind == RuntimeErrorKind.UNKNOWN_ARGUMENT
    assert excinfo.value.message == "f() got an unexpected named argument 'zzz'."


def test_named_check_does_not_see_enclosing_scopes():
    f = make_function(params=("a",))
    outer = Environment()
    outer.define("leak", Integer(0))
    scope = Environment(outer)
    scope.define("a", NULL)
    with pytest.raises(TernRuntimeError) as excinfo:
        f.bind(PAREN, [(Named(name("leak")), Integer(1))], scope)
    assert excinfo.value.kind == RuntimeErrorKind.UNKNOWN_ARGUMENT


def test_missing_required_argument():
    f = make_function()
    with pytest.raises(TernRuntimeError) as excinfo:
        bind(f, [(Named(name("b")), Integer(2))])
    assert excinfo.value.kind == RuntimeErrorKind.MISSING_ARGUMENT
    assert excinfo.value.message == "f() missing value for required argument 'a'."


def test_optional_parameters_keep_their_default():
    f = make_function(params=("a", "b"), required=1)
    assert f.min_arity == 1
    assert f.max_arity == 2
    assert bind(f, [(Positional(0), Integer(1))]) == {"a": Integer(1), "b": NULL}


def test_native_call_receives_bound_arguments():
    f = make_function()
    result = f.call(None, PAREN, [(Named(name("b")), Integer(2)), (Positional(0), Integer(1))])
    assert result == {"a": Integer(1), "b": Integer(2)}
    assert str(f) == "<native func f>"
