from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Any, Callable, Dict, Optional, Sequence, Tuple, Union, TYPE_CHECKING

from . import ast_nodes as ast
from .environment import Environment
from .errors import StrayControlSignal, duplicate_argument, unknown_argument, missing_argument
from .signals import Signal
from .tokens import Token
from .values import FunctionValue, NULL

# This is a common pattern to break circular import cycles.
# The import is only done for static type checking, not at runtime.
if TYPE_CHECKING:
    from .interpreter import Interpreter


# --- Argument references ---

@dataclass(frozen=True)
class Positional:
    """An argument supplied by position; index counts positional arguments only."""
    index: int


@dataclass(frozen=True)
class Named:
    """An argument supplied as `name: value`."""
    name: Token


ArgumentRef = Union[Positional, Named]
Arguments = Sequence[Tuple[ArgumentRef, Any]]


class TernCallable(FunctionValue, ABC):
    """
    An abstract base class for all objects that can be called like a function.
    """
    name: str

    @abstractmethod
    def parameter_names(self) -> List[str]:
        """Declared parameter names, in declaration order."""
        raise NotImplementedError

    @property
    @abstractmethod
    def min_arity(self) -> int:
        """The number of parameters that must receive a value."""
        raise NotImplementedError

    @property
    def max_arity(self) -> int:
        return len(self.parameter_names())

    @abstractmethod
    def call(self, interpreter: 'Interpreter', token: Token, arguments: Arguments) -> Any:
        """Executes the callable's logic. Arity has already been checked."""
        raise NotImplementedError

    def bind(self, token: Token, arguments: Arguments, scope: Environment):
        """
        Binds arguments into a scope that already defines every parameter
        (with its default). Positional arguments go first, in order; named
        arguments must then name a parameter that is still unset.
        """
        names = self.parameter_names()
        already_set = set()

        for ref, value in arguments:
            match ref:
                case Positional(index=index):
                    scope.define(names[index], value)
                    already_set.add(names[index])

        for ref, value in arguments:
            match ref:
                case Named(name=name):
                    if not scope.contains(name, recursive=False):
                        raise unknown_argument(name, self.name)
                    if name.lexeme in already_set:
                        raise duplicate_argument(name, self.name)
                    scope.define(name.lexeme, value)
                    already_set.add(name.lexeme)

        for name in names[:self.min_arity]:
            if name not in already_set:
                raise missing_argument(token, self.name, name)

    def __str__(self) -> str:
        return "<native func>"


class TernFunction(TernCallable):
    """
    Represents a user-defined function (or an anonymous `func` expression).
    """
    def __init__(self, declaration: Union[ast.Function, ast.Lambda], closure: Environment,
                 defaults: List[Any], name: Optional[str] = None):
        self.declaration = declaration
        self.closure = closure # The environment where the function was declared.
        self.defaults = defaults
        if name is None:
            name = declaration.name.lexeme if isinstance(declaration, ast.Function) else "<lambda>"
        self.name = name

    def parameter_names(self) -> List[str]:
        return [param.name.lexeme for param in self.declaration.params]

    @property
    def min_arity(self) -> int:
        return sum(1 for param in self.declaration.params if not param.optional)

    def call(self, interpreter: 'Interpreter', token: Token, arguments: Arguments) -> Any:
        """
        Executes the function. This involves creating a new environment for the
        function's scope, binding arguments to parameters, and then executing
        the function's body.
        """
        # It encloses the function's closure, not the caller's environment.
        environment = Environment(self.closure)
        for param, default in zip(self.declaration.params, self.defaults):
            environment.define(param.name.lexeme, default)
        self.bind(token, arguments, environment)

        completion = interpreter.execute_block(self.declaration.body, environment)
        if completion.signal is Signal.RETURN:
            return completion.value
        if not completion.is_normal:
            raise StrayControlSignal(completion.signal)

        # If no 'return' is encountered, functions implicitly return none.
        return NULL

    def __str__(self) -> str:
        return f"<func {self.name}>"


NativeProcedure = Callable[['Interpreter', Token, Dict[str, Any]], Any]


class NativeFunction(TernCallable):
    """
    A function whose body is Python code. The procedure receives the calling
    token and a mapping of parameter name to bound value; unsupplied optional
    parameters are bound to none.
    """
    def __init__(self, name: str, params: List[str], procedure: NativeProcedure,
                 required: Optional[int] = None):
        self.name = name
        self.params = params
        self.procedure = procedure
        self.required = len(params) if required is None else required

    def parameter_names(self) -> List[str]:
        return self.params

    @property
    def min_arity(self) -> int:
        return self.required

    def call(self, interpreter: 'Interpreter', token: Token, arguments: Arguments) -> Any:
        scope = Environment()
        for param in self.params:
            scope.define(param, NULL)
        self.bind(token, arguments, scope)
        return self.procedure(interpreter, token, scope.values)

    def __str__(self) -> str:
        return f"<native func {self.name}>"
