from typing import List, Optional

from . import ast_nodes as ast
from .errors import ParserError
from .tokens import Token


class Resolver(ast.ExprVisitor, ast.StmtVisitor):
    """
    The Resolver performs static checks the grammar cannot express: 'break'
    and 'continue' only inside loops, 'return' only inside functions, and no
    parameter or enum member declared twice. A loop does not reach through a function body,
    so a 'break' in a function defined inside a loop is still rejected.
    """
    def __init__(self):
        self.loop_depth = 0
        self.function_depth = 0
        self.errors: List[ParserError] = []

    @property
    def had_error(self) -> bool:
        return bool(self.errors)

    def resolve(self, statements: List[ast.Stmt]):
        for statement in statements:
            self._resolve_stmt(statement)

    def _resolve_stmt(self, stmt: Optional[ast.Stmt]):
        if stmt is not None:
            stmt.accept(self)

    def _resolve_expr(self, expr: Optional[ast.Expr]):
        if expr is not None:
            expr.accept(self)

    def _resolve_loop_body(self, body: ast.Stmt):
        self.loop_depth += 1
        try:
            self._resolve_stmt(body)
        finally:
            self.loop_depth -= 1

    def _resolve_function(self, params: List[ast.Param], body: List[ast.Stmt]):
        seen = set()
        for param in params:
            if param.name.lexeme in seen:
                self._report_error(param.name, f"Duplicate parameter '{param.name.lexeme}'.")
            seen.add(param.name.lexeme)
            self._resolve_expr(param.default)

        enclosing_loop_depth = self.loop_depth
        self.loop_depth = 0
        self.function_depth += 1
        try:
            self.resolve(body)
        finally:
            self.function_depth -= 1
            self.loop_depth = enclosing_loop_depth

    # --- Statements ---

    def visit_block_stmt(self, stmt: ast.Block): self.resolve(stmt.statements)
    def visit_expression_stmt(self, stmt: ast.Expression): self._resolve_expr(stmt.expression)
    def visit_var_stmt(self, stmt: ast.Var): self._resolve_expr(stmt.initializer)
    def visit_function_stmt(self, stmt: ast.Function): self._resolve_function(stmt.params, stmt.body)

    def visit_if_stmt(self, stmt: ast.If):
        self._resolve_expr(stmt.condition)
        self._resolve_stmt(stmt.then_branch)
        self._resolve_stmt(stmt.else_branch)

    def visit_while_stmt(self, stmt: ast.While):
        self._resolve_expr(stmt.condition)
        self._resolve_loop_body(stmt.body)

    def visit_for_stmt(self, stmt: ast.For):
        self._resolve_stmt(stmt.initializer)
        self._resolve_expr(stmt.condition)
        self._resolve_expr(stmt.increment)
        self._resolve_loop_body(stmt.body)

    def visit_break_stmt(self, stmt: ast.Break):
        if self.loop_depth == 0:
            self._report_error(stmt.keyword, "Can't use 'break' outside of a loop.")

    def visit_continue_stmt(self, stmt: ast.Continue):
        if self.loop_depth == 0:
            self._report_error(stmt.keyword, "Can't use 'continue' outside of a loop.")

    def visit_return_stmt(self, stmt: ast.Return):
        if self.function_depth == 0:
            self._report_error(stmt.keyword, "Can't return from top-level code.")
        self._resolve_expr(stmt.value)

    def visit_enum_stmt(self, stmt: ast.Enum):
        seen = set()
        for member in stmt.members:
            if member.lexeme == "length":
                self._report_error(
                    member, f"Cannot redeclare built-in enum member 'length' in enum '{stmt.name.lexeme}'.")
            elif member.lexeme in seen:
                self._report_error(
                    member, f"Cannot redeclare enum member '{member.lexeme}' in enum '{stmt.name.lexeme}'.")
            seen.add(member.lexeme)

    # --- Expressions ---

    def visit_binary_expr(self, expr: ast.Binary): self._resolve_expr(expr.left); self._resolve_expr(expr.right)
    def visit_logical_expr(self, expr: ast.Logical): self._resolve_expr(expr.left); self._resolve_expr(expr.right)
    def visit_grouping_expr(self, expr: ast.Grouping): self._resolve_expr(expr.expression)
    def visit_literal_expr(self, expr: ast.Literal): pass
    def visit_unary_expr(self, expr: ast.Unary): self._resolve_expr(expr.right)
    def visit_variable_expr(self, expr: ast.Variable): pass
    def visit_assign_expr(self, expr: ast.Assign): self._resolve_expr(expr.value)
    def visit_increment_expr(self, expr: ast.Increment): pass
    def visit_get_expr(self, expr: ast.Get): self._resolve_expr(expr.object)
    def visit_lambda_expr(self, expr: ast.Lambda): self._resolve_function(expr.params, expr.body)

    def visit_call_expr(self, expr: ast.Call):
        self._resolve_expr(expr.callee)
        for argument in expr.arguments:
            self._resolve_expr(argument.value)

    def _report_error(self, token: Token, message: str):
        self.errors.append(ParserError(token, message))
