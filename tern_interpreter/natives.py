"""
Functions implemented in Python and exposed to Tern programs.

A NativeRegistry is built once by the driver and handed to the Interpreter,
which installs its functions as constants in the global scope.
"""
import re
import time
from typing import Dict, Iterator, Optional

from .callables import NativeFunction
from .environment import Environment
from .errors import TernRuntimeError, RuntimeErrorKind, invalid_argument_type
from .values import Integer, String, NULL, to_str, type_name


class NativeRegistry:
    def __init__(self, functions: Optional[Dict[str, NativeFunction]] = None):
        self.functions: Dict[str, NativeFunction] = dict(functions or {})

    def register(self, function: NativeFunction) -> NativeFunction:
        self.functions[function.name] = function
        return function

    def get(self, name: str) -> Optional[NativeFunction]:
        return self.functions.get(name)

    def install(self, environment: Environment):
        """Defines every registered function as a constant in the environment."""
        for name, function in self.functions.items():
            environment.define(name, function, constant=True)

    def __iter__(self) -> Iterator[NativeFunction]:
        return iter(self.functions.values())

    def __len__(self) -> int:
        return len(self.functions)

    def __contains__(self, name: str) -> bool:
        return name in self.functions


# --- Native procedures ---

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

def _print(interpreter, token, args):
    print(to_str(args["value"]))
    return NULL

def _clock(interpreter, token, args):
    return Integer(int(time.time() * 1000))

def _convert_to_int(interpreter, token, args):
    value = args["value"]
    if not isinstance(value, String):
        raise invalid_argument_type(
            token, f"int() expected an argument of type 'String' but got '{type_name(value)}'.")
    # ASCII digits only: no surrounding whitespace, underscores or other scripts.
    if INTEGER_PATTERN.fullmatch(value.value) is None:
        raise TernRuntimeError(
            token, f"Cannot cast \"{value.value}\" to integer.", RuntimeErrorKind.INVALID_ARGUMENT_VALUE)
    try:
        return Integer(int(value.value))
    except ValueError:
        # Past Python's digit limit for int().
        raise TernRuntimeError(
            token, f"Cannot cast \"{value.value}\" to integer.", RuntimeErrorKind.INVALID_ARGUMENT_VALUE)

def _type_of(interpreter, token, args):
    return String(type_name(args["value"]))

def _make_input(allow_input: bool):
    def _input(interpreter, token, args):
        if not allow_input:
            raise TernRuntimeError(
                token, "Cannot read user input without '--allow-input' permission flag.",
                RuntimeErrorKind.PERMISSION_DENIED)
        prompt = args["prompt"]
        try:
            return String(input(to_str(prompt) if prompt is not NULL else ""))
        except EOFError:
            return String("")
    return _input


def default_registry(allow_input: bool = False) -> NativeRegistry:
    """The functions every Tern program starts with."""
    registry = NativeRegistry()
    registry.register(NativeFunction("print", ["value"], _print))
    registry.register(NativeFunction("input", ["prompt"], _make_input(allow_input), required=0))
    registry.register(NativeFunction("clock", [], _clock))
    registry.register(NativeFunction("int", ["value"], _convert_to_int))
    registry.register(NativeFunction("typeOf", ["value"], _type_of))
    return registry
