"""
Runtime values.

Every value the interpreter handles is one of the variants listed in
``NativeValue``. Each variant is an immutable box around one primitive and
carries a fixed property table built when the box is created. Behaviour is
dispatched over the variant list with ``match`` rather than through methods,
so adding a variant means adding a case to each function below.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple, Union

from colorama import Fore, Style

from .tokens import Token
from .errors import undefined_property, undefined_enum_member


@dataclass(frozen=True)
class Integer:
    value: int
    properties: Dict[str, Any] = field(init=False, repr=False, compare=False, default_factory=dict)


@dataclass(frozen=True)
class Real:
    value: float
    properties: Dict[str, Any] = field(init=False, repr=False, compare=False, default_factory=dict)


@dataclass(frozen=True)
class String:
    value: str
    properties: Dict[str, Any] = field(init=False, repr=False, compare=False, default_factory=dict)

    def __post_init__(self):
        self.properties["length"] = Integer(len(self.value))


@dataclass(frozen=True)
class Boolean:
    value: bool
    properties: Dict[str, Any] = field(init=False, repr=False, compare=False, default_factory=dict)


@dataclass(frozen=True)
class Null:
    properties: Dict[str, Any] = field(init=False, repr=False, compare=False, default_factory=dict)

    @property
    def value(self) -> None:
        return None


class FunctionValue:
    """Marker base for the callable variant; see callables.TernCallable."""
    properties: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class EnumValue:
    """An enum declaration. Members read back as their 0-based index."""
    name: str
    members: Tuple[str, ...]
    properties: Dict[str, Any] = field(init=False, repr=False, compare=False, default_factory=dict)

    def __post_init__(self):
        self.properties["length"] = Integer(len(self.members))
        for index, member in enumerate(self.members):
            self.properties[member] = Integer(index)


NativeValue = Union[Integer, Real, String, Boolean, Null, FunctionValue, EnumValue]

NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def type_name(value: NativeValue) -> str:
    """The language-level type name, as used in diagnostics and typeOf()."""
    match value:
        case Integer():
            return "Int"
        case Real():
            return "Real"
        case String():
            return "String"
        case Boolean():
            return "Bool"
        case Null():
            return "Null"
        case FunctionValue():
            return "Function"
        case EnumValue(name=name):
            return name
    raise TypeError(f"Not a runtime value: {value!r}")


def get_raw(value: NativeValue) -> Any:
    """The wrapped Python primitive, for native-function interop."""
    match value:
        case Integer(value=raw) | Real(value=raw) | String(value=raw) | Boolean(value=raw):
            return raw
        case Null():
            return None
        case FunctionValue():
            return value
        case EnumValue(members=members):
            return {member: index for index, member in enumerate(members)}
    raise TypeError(f"Not a runtime value: {value!r}")


def get_property(value: NativeValue, prop: Token) -> NativeValue:
    if prop.lexeme in value.properties:
        return value.properties[prop.lexeme]
    if isinstance(value, EnumValue):
        raise undefined_enum_member(value.name, prop)
    raise undefined_property(type_name(value), prop)


def to_str(value: NativeValue) -> str:
    """Plain textual form, used by print() and string conversions."""
    match value:
        case Boolean(value=raw):
            return "true" if raw else "false"
        case Null():
            return "none"
        case Integer(value=raw) | Real(value=raw) | String(value=raw):
            return str(raw)
        case FunctionValue():
            return str(value)
        case EnumValue(name=name):
            return f"<enum {name}>"
    raise TypeError(f"Not a runtime value: {value!r}")


def formatted_str(value: NativeValue) -> str:
    """Colored form for echoing results in the REPL. Never parse this back."""
    match value:
        case Integer() | Real():
            return f"{Fore.BLUE}{to_str(value)}{Style.RESET_ALL}"
        case String():
            return f"{Fore.GREEN}\"{to_str(value)}\"{Style.RESET_ALL}"
        case Boolean():
            return f"{Fore.YELLOW}{to_str(value)}{Style.RESET_ALL}"
        case Null():
            return f"{Style.BRIGHT}{Fore.WHITE}{to_str(value)}{Style.RESET_ALL}"
    return to_str(value)


def from_python(obj: Any) -> NativeValue:
    """Wraps a Python primitive."""
    if obj is None:
        return NULL
    if isinstance(obj, bool):
        return TRUE if obj else FALSE
    if isinstance(obj, int):
        return Integer(obj)
    if isinstance(obj, float):
        return Real(obj)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, (FunctionValue, EnumValue)):
        return obj
    raise TypeError(f"Cannot wrap {type(obj).__name__} as a runtime value")


def is_truthy(value: NativeValue) -> bool:
    """none, false, 0 and 0.0 are falsey; everything else is truthy."""
    match value:
        case Null():
            return False
        case Boolean(value=raw):
            return raw
        case Integer(value=raw) | Real(value=raw):
            return raw != 0
    return True
