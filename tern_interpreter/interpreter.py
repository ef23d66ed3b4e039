import math
import operator as op
from typing import List, Any, Optional, Tuple

from . import ast_nodes as ast
from .tokens import Token, TokenType
from .errors import TernRuntimeError, RuntimeErrorKind, StrayControlSignal, arity_mismatch, numeric_overflow
from .environment import Environment
from .callables import TernCallable, TernFunction, Positional, Named, ArgumentRef
from .natives import NativeRegistry, default_registry
from .signals import Completion, Signal, NORMAL, BREAK, CONTINUE, returning
from .values import (
    Integer, Real, String, Boolean, EnumValue, NULL, TRUE, FALSE,
    get_property, is_truthy, type_name,
)

# Ints wider than this pass Python's 4300-digit str() limit and are reported as overflow.
MAX_INTEGER_BITS = 14_284


def _remainder(a, b):
    """Remainder that takes the sign of the dividend: -7 % 3 is -1."""
    if isinstance(a, int) and isinstance(b, int):
        r = abs(a) % abs(b)
        return r if a >= 0 else -r
    return math.fmod(a, b)


class Interpreter(ast.ExprVisitor, ast.StmtVisitor):
    """
    The Interpreter walks the AST and executes the code.

    Statements return a Completion instead of raising for control flow: a
    block stops at the first non-normal completion and hands it outward, loops
    consume BREAK and CONTINUE, and function calls consume RETURN. Runtime
    errors are raised as TernRuntimeError and left for the caller to report.
    """
    def __init__(self, natives: Optional[NativeRegistry] = None):
        self.natives = natives if natives is not None else default_registry()
        self.globals = Environment()
        self.natives.install(self.globals)
        self.environment = self.globals

    def interpret(self, statements: List[ast.Stmt]) -> Any:
        """
        Executes a program. Returns the value of the last top-level expression
        statement (None if there was none), which the REPL echoes.
        """
        last_value = None
        for statement in statements:
            completion = self._execute(statement)
            if not completion.is_normal:
                raise StrayControlSignal(completion.signal)
            if isinstance(statement, ast.Expression):
                last_value = completion.value
        return last_value

    def _execute(self, stmt: ast.Stmt) -> Completion:
        """Helper to execute a single statement."""
        return stmt.accept(self)

    def _evaluate(self, expr: ast.Expr) -> Any:
        """Helper to evaluate a single expression."""
        return expr.accept(self)

    def execute_block(self, statements: List[ast.Stmt], environment: Environment) -> Completion:
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                completion = self._execute(statement)
                if not completion.is_normal:
                    return completion
            return NORMAL
        finally:
            self.environment = previous

    # --- STATEMENT VISITOR METHODS ---

    def visit_expression_stmt(self, stmt: ast.Expression) -> Completion:
        return Completion(Signal.NORMAL, self._evaluate(stmt.expression))

    def visit_var_stmt(self, stmt: ast.Var) -> Completion:
        value = NULL
        if stmt.initializer is not None:
            value = self._evaluate(stmt.initializer)

        self.environment.define(stmt.name.lexeme, value, constant=stmt.is_const)
        return NORMAL

    def visit_block_stmt(self, stmt: ast.Block) -> Completion:
        return self.execute_block(stmt.statements, Environment(self.environment))

    def visit_if_stmt(self, stmt: ast.If) -> Completion:
        if is_truthy(self._evaluate(stmt.condition)):
            return self._execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            return self._execute(stmt.else_branch)
        return NORMAL

    def visit_while_stmt(self, stmt: ast.While) -> Completion:
        while is_truthy(self._evaluate(stmt.condition)):
            completion = self._execute(stmt.body)
            if completion.signal is Signal.BREAK:
                break
            if completion.signal is Signal.RETURN:
                return completion
        return NORMAL

    def visit_for_stmt(self, stmt: ast.For) -> Completion:
        previous = self.environment
        try:
            # The initializer's variables live in a scope of their own.
            self.environment = Environment(previous)
            if stmt.initializer is not None:
                self._execute(stmt.initializer)

            while stmt.condition is None or is_truthy(self._evaluate(stmt.condition)):
                completion = self._execute(stmt.body)
                if completion.signal is Signal.BREAK:
                    break
                if completion.signal is Signal.RETURN:
                    return completion
                if stmt.increment is not None:
                    self._evaluate(stmt.increment)
            return NORMAL
        finally:
            self.environment = previous

    def visit_break_stmt(self, stmt: ast.Break) -> Completion:
        return BREAK

    def visit_continue_stmt(self, stmt: ast.Continue) -> Completion:
        return CONTINUE

    def visit_function_stmt(self, stmt: ast.Function) -> Completion:
        function = TernFunction(stmt, self.environment, self._evaluate_defaults(stmt.params))
        self.environment.define(stmt.name.lexeme, function)
        return NORMAL

    def visit_return_stmt(self, stmt: ast.Return) -> Completion:
        value = NULL
        if stmt.value is not None:
            value = self._evaluate(stmt.value)
        return returning(value)

    def visit_enum_stmt(self, stmt: ast.Enum) -> Completion:
        enum = EnumValue(stmt.name.lexeme, tuple(member.lexeme for member in stmt.members))
        self.environment.define(stmt.name.lexeme, enum, constant=True)
        return NORMAL

    def _evaluate_defaults(self, params: List[ast.Param]) -> List[Any]:
        """Default values are computed once, where the function is defined."""
        return [self._evaluate(param.default) if param.default is not None else NULL for param in params]

    # --- HELPER METHODS FOR RUNTIME CHECKS ---

    def _is_equal(self, a: Any, b: Any) -> bool:
        """Defines equality in Tern. Ints and Reals compare by numeric value."""
        if self._is_number(a) and self._is_number(b):
            return a.value == b.value
        return a == b

    def _is_number(self, obj: Any) -> bool:
        return isinstance(obj, (Integer, Real))

    def _check_number_operand(self, operator: Token, operand: Any):
        if self._is_number(operand): return
        raise TernRuntimeError(operator, "Operand must be a number.", RuntimeErrorKind.INVALID_OPERAND)

    def _check_number_operands(self, operator: Token, left: Any, right: Any):
        if self._is_number(left) and self._is_number(right): return
        raise TernRuntimeError(operator, "Operands must be numbers.", RuntimeErrorKind.INVALID_OPERAND)

    def _check_divisor(self, operator: Token, right: Any):
        if right.value == 0:
            raise TernRuntimeError(operator, "Division by zero.", RuntimeErrorKind.DIVISION_BY_ZERO)

    def _integer(self, operator: Token, raw: int) -> Integer:
        if raw.bit_length() > MAX_INTEGER_BITS:
            raise numeric_overflow(operator)
        return Integer(raw)

    def _arithmetic(self, operator: Token, left: Any, right: Any, function) -> Any:
        """Int op Int stays an Int; anything involving a Real is a Real."""
        self._check_number_operands(operator, left, right)
        try:
            result = function(left.value, right.value)
            if isinstance(left, Integer) and isinstance(right, Integer):
                return self._integer(operator, result)
            return Real(float(result))
        except OverflowError:
            raise numeric_overflow(operator)

    def _power(self, operator: Token, left: Any, right: Any) -> Any:
        """Int ** Int is an Int (truncated for negative exponents); otherwise a Real."""
        self._check_number_operands(operator, left, right)
        base, exponent = left.value, right.value
        try:
            if isinstance(left, Integer) and isinstance(right, Integer):
                if exponent >= 0:
                    # Lower bound on the result's width, checked before computing it.
                    if abs(base) > 1 and exponent * (abs(base).bit_length() - 1) > MAX_INTEGER_BITS:
                        raise numeric_overflow(operator)
                    return self._integer(operator, base ** exponent)
                if base == 0:
                    raise TernRuntimeError(operator, "Division by zero.", RuntimeErrorKind.DIVISION_BY_ZERO)
                return Integer(int(math.pow(base, exponent)))
            return Real(math.pow(base, exponent))
        except OverflowError:
            raise numeric_overflow(operator)
        except ValueError:
            # Outside the real domain, e.g. a negative base with a fractional exponent.
            return Real(math.nan)

    # --- EXPRESSION VISITOR METHODS ---

    def visit_binary_expr(self, expr: ast.Binary):
        left = self._evaluate(expr.left)
        right = self._evaluate(expr.right)
        op_type = expr.operator.token_type

        if op_type == TokenType.MINUS:
            return self._arithmetic(expr.operator, left, right, op.sub)
        if op_type == TokenType.STAR:
            return self._arithmetic(expr.operator, left, right, op.mul)
        if op_type == TokenType.SLASH:
            self._check_number_operands(expr.operator, left, right)
            self._check_divisor(expr.operator, right)
            try:
                return Real(left.value / right.value)
            except OverflowError:
                raise numeric_overflow(expr.operator)
        if op_type == TokenType.PERCENT:
            self._check_number_operands(expr.operator, left, right)
            self._check_divisor(expr.operator, right)
            return self._arithmetic(expr.operator, left, right, _remainder)
        if op_type == TokenType.STAR_STAR:
            return self._power(expr.operator, left, right)
        if op_type == TokenType.PLUS:
            if self._is_number(left) and self._is_number(right):
                return self._arithmetic(expr.operator, left, right, op.add)
            if isinstance(left, String) and isinstance(right, String):
                return String(left.value + right.value)
            raise TernRuntimeError(expr.operator, "Operands must be two numbers or two strings.",
                                   RuntimeErrorKind.INVALID_OPERAND)

        if op_type == TokenType.GREATER:
            self._check_number_operands(expr.operator, left, right)
            return Boolean(left.value > right.value)
        if op_type == TokenType.GREATER_EQUAL:
            self._check_number_operands(expr.operator, left, right)
            return Boolean(left.value >= right.value)
        if op_type == TokenType.LESS:
            self._check_number_operands(expr.operator, left, right)
            return Boolean(left.value < right.value)
        if op_type == TokenType.LESS_EQUAL:
            self._check_number_operands(expr.operator, left, right)
            return Boolean(left.value <= right.value)

        if op_type == TokenType.EQUAL_EQUAL:
            return Boolean(self._is_equal(left, right))
        if op_type == TokenType.BANG_EQUAL:
            return Boolean(not self._is_equal(left, right))

        # Should be unreachable.
        return NULL

    def visit_grouping_expr(self, expr: ast.Grouping):
        return self._evaluate(expr.expression)

    def visit_literal_expr(self, expr: ast.Literal):
        return expr.value

    def visit_unary_expr(self, expr: ast.Unary):
        right = self._evaluate(expr.right)
        if expr.operator.token_type == TokenType.MINUS:
            self._check_number_operand(expr.operator, right)
            return Integer(-right.value) if isinstance(right, Integer) else Real(-right.value)

        # '!' and 'not'
        return FALSE if is_truthy(right) else TRUE

    def visit_variable_expr(self, expr: ast.Variable):
        return self.environment.get(expr.name)

    def visit_assign_expr(self, expr: ast.Assign):
        value = self._evaluate(expr.value)
        self.environment.assign(expr.name, value)
        return value

    def visit_increment_expr(self, expr: ast.Increment):
        old = self.environment.get(expr.name)
        increment = expr.operator.token_type == TokenType.PLUS_PLUS
        if not isinstance(old, Integer):
            action = "increment" if increment else "decrement"
            raise TernRuntimeError(expr.operator, f"Cannot {action} operand of type '{type_name(old)}'.",
                                   RuntimeErrorKind.INVALID_OPERAND)

        new = Integer(old.value + 1 if increment else old.value - 1)
        self.environment.assign(expr.name, new)
        return new if expr.is_prefix else old

    def visit_logical_expr(self, expr: ast.Logical):
        left = self._evaluate(expr.left)

        if expr.operator.token_type == TokenType.OR:
            if is_truthy(left):
                return left
        else: # AND
            if not is_truthy(left):
                return left

        return self._evaluate(expr.right)

    def visit_call_expr(self, expr: ast.Call):
        callee = self._evaluate(expr.callee)

        if not isinstance(callee, TernCallable):
            raise TernRuntimeError(expr.paren, f"Object of type '{type_name(callee)}' is not callable.",
                                   RuntimeErrorKind.NOT_CALLABLE)

        count = len(expr.arguments)
        if count < callee.min_arity or count > callee.max_arity:
            raise arity_mismatch(expr.paren, callee.name, callee.min_arity, callee.max_arity, count)

        arguments: List[Tuple[ArgumentRef, Any]] = []
        position = 0
        for argument in expr.arguments:
            value = self._evaluate(argument.value)
            if argument.name is None:
                arguments.append((Positional(position), value))
                position += 1
            else:
                arguments.append((Named(argument.name), value))

        try:
            return callee.call(self, expr.paren, arguments)
        except RecursionError:
            raise TernRuntimeError(expr.paren, "Maximum call stack size exceeded.", RuntimeErrorKind.STACK_OVERFLOW)

    def visit_get_expr(self, expr: ast.Get):
        obj = self._evaluate(expr.object)
        return get_property(obj, expr.name)

    def visit_lambda_expr(self, expr: ast.Lambda):
        return TernFunction(expr, self.environment, self._evaluate_defaults(expr.params))
