from typing import List

from . import ast_nodes as ast
from .values import String, to_str

class AstPrinter(ast.ExprVisitor, ast.StmtVisitor):
    """
    Prints the AST in a Lisp-like format. Backs the `--print-ast` flag and is
    handy when debugging the parser.
    """
    def print_program(self, statements: List[ast.Stmt]) -> str:
        return "\n".join(stmt.accept(self) for stmt in statements)

    # --- Statement Visitor Methods ---

    def visit_expression_stmt(self, stmt: ast.Expression) -> str:
        return self._parenthesize("expr_stmt", stmt.expression)

    def visit_var_stmt(self, stmt: ast.Var) -> str:
        keyword = "const" if stmt.is_const else "let"
        if stmt.initializer:
            return self._parenthesize(f"{keyword} {stmt.name.lexeme}", stmt.initializer)
        return f"({keyword} {stmt.name.lexeme})"

    def visit_block_stmt(self, stmt: ast.Block) -> str:
        lines = ["(block"]
        for statement in stmt.statements:
            lines.append(f"  {statement.accept(self)}")
        lines.append(")")
        return "\n".join(lines)

    def visit_if_stmt(self, stmt: ast.If) -> str:
        parts = ["(if ", stmt.condition.accept(self), " ", stmt.then_branch.accept(self)]
        if stmt.else_branch:
            parts.append(" else ")
            parts.append(stmt.else_branch.accept(self))
        parts.append(")")
        return "".join(parts)

    def visit_while_stmt(self, stmt: ast.While) -> str:
        return f"(while {stmt.condition.accept(self)} {stmt.body.accept(self)})"

    def visit_for_stmt(self, stmt: ast.For) -> str:
        initializer = stmt.initializer.accept(self) if stmt.initializer else "_"
        condition = stmt.condition.accept(self) if stmt.condition else "_"
        increment = stmt.increment.accept(self) if stmt.increment else "_"
        return f"(for {initializer} {condition} {increment} {stmt.body.accept(self)})"

    def visit_break_stmt(self, stmt: ast.Break) -> str:
        return "(break)"

    def visit_continue_stmt(self, stmt: ast.Continue) -> str:
        return "(continue)"

    def visit_function_stmt(self, stmt: ast.Function) -> str:
        return self._function(f"func {stmt.name.lexeme}", stmt.params, stmt.body)

    def visit_return_stmt(self, stmt: ast.Return) -> str:
        if stmt.value:
            return self._parenthesize("return", stmt.value)
        return "(return)"

    def visit_enum_stmt(self, stmt: ast.Enum) -> str:
        members = " ".join(member.lexeme for member in stmt.members)
        return f"(enum {stmt.name.lexeme} {members})" if members else f"(enum {stmt.name.lexeme})"

    # --- Expression Visitor Methods ---

    def visit_binary_expr(self, expr: ast.Binary) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_grouping_expr(self, expr: ast.Grouping) -> str:
        return self._parenthesize("group", expr.expression)

    def visit_literal_expr(self, expr: ast.Literal) -> str:
        if isinstance(expr.value, String): return f'"{expr.value.value}"'
        return to_str(expr.value)

    def visit_unary_expr(self, expr: ast.Unary) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.right)

    def visit_variable_expr(self, expr: ast.Variable) -> str:
        return expr.name.lexeme

    def visit_assign_expr(self, expr: ast.Assign) -> str:
        return self._parenthesize(f"assign {expr.name.lexeme}", expr.value)

    def visit_increment_expr(self, expr: ast.Increment) -> str:
        if expr.is_prefix:
            return f"(pre{expr.operator.lexeme} {expr.name.lexeme})"
        return f"(post{expr.operator.lexeme} {expr.name.lexeme})"

    def visit_logical_expr(self, expr: ast.Logical) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_call_expr(self, expr: ast.Call) -> str:
        parts = [f"(call {expr.callee.accept(self)}"]
        for argument in expr.arguments:
            if argument.name is not None:
                parts.append(f" {argument.name.lexeme}: {argument.value.accept(self)}")
            else:
                parts.append(f" {argument.value.accept(self)}")
        parts.append(")")
        return "".join(parts)

    def visit_get_expr(self, expr: ast.Get) -> str:
        return self._parenthesize(f". {expr.name.lexeme}", expr.object)

    def visit_lambda_expr(self, expr: ast.Lambda) -> str:
        return self._function("func", expr.params, expr.body)

    # --- Helper Methods ---

    def _param(self, param: ast.Param) -> str:
        if param.optional:
            return f"{param.name.lexeme}?"
        if param.default is not None:
            return f"{param.name.lexeme} = {param.default.accept(self)}"
        return param.name.lexeme

    def _function(self, header: str, params: List[ast.Param], body: List[ast.Stmt]) -> str:
        param_str = ", ".join(self._param(p) for p in params)
        lines = [f"({header}({param_str}) {{"]
        for statement in body:
            lines.append(f"  {statement.accept(self)}")
        lines.append("})")
        return "\n".join(lines)

    def _parenthesize(self, name: str, *parts) -> str:
        """Helper to format a node and its children."""
        result = [f"({name}"]
        for part in parts:
            result.append(f" {part.accept(self)}")
        result.append(")")
        return "".join(result)
