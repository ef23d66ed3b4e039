import sys
from enum import Enum, auto
from typing import Optional, TextIO

from colorama import Fore, Style

from .tokens import Token, TokenType


class ParserError(Exception):
    """A syntax-time error, optionally pinned to a token."""
    def __init__(self, token: Optional[Token], message: str):
        self.token = token
        self.message = message
        super().__init__(self.message)


class IllegalTokenError(ParserError):
    """Raised by the lexer for characters that cannot start any token."""
    def __init__(self, token: Token):
        super().__init__(token, f"Unexpected Illegal Token '{token.lexeme}' on line {token.position}")


class UnexpectedTokenError(ParserError):
    """Raised by the parser when a token cannot start an expression."""
    def __init__(self, token: Token):
        super().__init__(token, f"Unexpected Token '{token.lexeme}' on line {token.position}")


class RuntimeErrorKind(Enum):
    UNRESOLVED_IDENTIFIER = auto()
    ARITY_MISMATCH = auto()
    DUPLICATE_ARGUMENT = auto()
    UNKNOWN_ARGUMENT = auto()
    MISSING_ARGUMENT = auto()
    INVALID_ARGUMENT_TYPE = auto()
    INVALID_ARGUMENT_VALUE = auto()
    UNDEFINED_PROPERTY = auto()
    CONSTANT_REASSIGNMENT = auto()
    NOT_CALLABLE = auto()
    INVALID_OPERAND = auto()
    DIVISION_BY_ZERO = auto()
    NUMERIC_OVERFLOW = auto()
    STACK_OVERFLOW = auto()
    PERMISSION_DENIED = auto()


class TernRuntimeError(RuntimeError):
    """Custom exception for reporting runtime errors."""
    def __init__(self, token: Token, message: str, kind: RuntimeErrorKind = RuntimeErrorKind.INVALID_OPERAND):
        self.token = token
        self.message = message
        self.kind = kind
        super().__init__(self.message)


class StrayControlSignal(Exception):
    """
    A break or continue reached a function or program boundary. The resolver
    rejects such programs, so seeing this means a collaborator let one through.
    """
    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"'{kind.name.lower()}' escaped every enclosing loop.")


# --- Runtime error factories ---

def unresolved_identifier(name: Token) -> TernRuntimeError:
    return TernRuntimeError(name, f"Undefined variable '{name.lexeme}'.", RuntimeErrorKind.UNRESOLVED_IDENTIFIER)

def arity_mismatch(paren: Token, callee: str, min_arity: int, max_arity: int, got: int) -> TernRuntimeError:
    if min_arity == max_arity:
        expected = f"expected {min_arity}"
    elif got < min_arity:
        expected = f"expected at least {min_arity}"
    else:
        expected = f"expected at most {max_arity}"
    return TernRuntimeError(paren, f"{callee}() {expected} arguments but got {got}.", RuntimeErrorKind.ARITY_MISMATCH)

def duplicate_argument(name: Token, callee: str) -> TernRuntimeError:
    return TernRuntimeError(
        name, f"{callee}() received multiple values for argument '{name.lexeme}'.",
        RuntimeErrorKind.DUPLICATE_ARGUMENT)

def unknown_argument(name: Token, callee: str) -> TernRuntimeError:
    return TernRuntimeError(
        name, f"{callee}() got an unexpected named argument '{name.lexeme}'.",
        RuntimeErrorKind.UNKNOWN_ARGUMENT)

def missing_argument(paren: Token, callee: str, parameter: str) -> TernRuntimeError:
    return TernRuntimeError(
        paren, f"{callee}() missing value for required argument '{parameter}'.",
        RuntimeErrorKind.MISSING_ARGUMENT)

def invalid_argument_type(token: Token, message: str) -> TernRuntimeError:
    return TernRuntimeError(token, message, RuntimeErrorKind.INVALID_ARGUMENT_TYPE)

def undefined_property(type_name: str, prop: Token) -> TernRuntimeError:
    return TernRuntimeError(
        prop, f"Property '{prop.lexeme}' does not exist on type '{type_name}'.",
        RuntimeErrorKind.UNDEFINED_PROPERTY)

def undefined_enum_member(enum_name: str, prop: Token) -> TernRuntimeError:
    return TernRuntimeError(
        prop, f"Property '{prop.lexeme}' does not exist in enum '{enum_name}'.",
        RuntimeErrorKind.UNDEFINED_PROPERTY)

def numeric_overflow(operator: Token) -> TernRuntimeError:
    return TernRuntimeError(operator, "Numeric result out of range.", RuntimeErrorKind.NUMERIC_OVERFLOW)

def constant_reassignment(name: Token) -> TernRuntimeError:
    return TernRuntimeError(name, f"Cannot reassign to constant \"{name.lexeme}\".", RuntimeErrorKind.CONSTANT_REASSIGNMENT)


# --- Reporting ---

def _paint(text: str, color: bool) -> str:
    if not color:
        return text
    return f"{Fore.RED}{Style.BRIGHT}{text}{Style.RESET_ALL}"

def format_parser_error(error: ParserError) -> str:
    token = error.token
    if token is None:
        return f"SyntaxError: {error.message}"
    if isinstance(error, (IllegalTokenError, UnexpectedTokenError)):
        return f"SyntaxError: {error.message}"
    if token.token_type == TokenType.EOF:
        return f"[line {token.position}] Error at end: {error.message}"
    return f"[line {token.position}] Error at '{token.lexeme}': {error.message}"

def format_runtime_error(error: TernRuntimeError) -> str:
    if error.token is None:
        return f"RuntimeError: {error.message}"
    return f"RuntimeError [{error.token.line},{error.token.column}]: {error.message}"

def report_parser_error(error: ParserError, color: bool = True, stream: Optional[TextIO] = None):
    """Reports a syntax-time error to stderr."""
    print(_paint(format_parser_error(error), color), file=stream or sys.stderr)

def report_runtime_error(error: TernRuntimeError, color: bool = True, stream: Optional[TextIO] = None):
    """Reports a runtime error to stderr."""
    print(_paint(format_runtime_error(error), color), file=stream or sys.stderr)
