from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Any, Optional

from .tokens import Token


# --- Visitor Pattern Definition ---

class ExprVisitor(ABC):
    @abstractmethod
    def visit_binary_expr(self, expr: 'Binary'):
        raise NotImplementedError

    @abstractmethod
    def visit_grouping_expr(self, expr: 'Grouping'):
        raise NotImplementedError

    @abstractmethod
    def visit_literal_expr(self, expr: 'Literal'):
        raise NotImplementedError

    @abstractmethod
    def visit_unary_expr(self, expr: 'Unary'):
        raise NotImplementedError

    @abstractmethod
    def visit_variable_expr(self, expr: 'Variable'):
        raise NotImplementedError

    @abstractmethod
    def visit_assign_expr(self, expr: 'Assign'):
        raise NotImplementedError

    @abstractmethod
    def visit_logical_expr(self, expr: 'Logical'):
        raise NotImplementedError

    @abstractmethod
    def visit_call_expr(self, expr: 'Call'):
        raise NotImplementedError

    @abstractmethod
    def visit_get_expr(self, expr: 'Get'):
        raise NotImplementedError

    @abstractmethod
    def visit_lambda_expr(self, expr: 'Lambda'):
        raise NotImplementedError

    @abstractmethod
    def visit_increment_expr(self, expr: 'Increment'):
        raise NotImplementedError


class StmtVisitor(ABC):
    @abstractmethod
    def visit_expression_stmt(self, stmt: 'Expression'):
        raise NotImplementedError

    @abstractmethod
    def visit_var_stmt(self, stmt: 'Var'):
        raise NotImplementedError

    @abstractmethod
    def visit_block_stmt(self, stmt: 'Block'):
        raise NotImplementedError

    @abstractmethod
    def visit_if_stmt(self, stmt: 'If'):
        raise NotImplementedError

    @abstractmethod
    def visit_while_stmt(self, stmt: 'While'):
        raise NotImplementedError

    @abstractmethod
    def visit_for_stmt(self, stmt: 'For'):
        raise NotImplementedError

    @abstractmethod
    def visit_break_stmt(self, stmt: 'Break'):
        raise NotImplementedError

    @abstractmethod
    def visit_continue_stmt(self, stmt: 'Continue'):
        raise NotImplementedError

    @abstractmethod
    def visit_function_stmt(self, stmt: 'Function'):
        raise NotImplementedError

    @abstractmethod
    def visit_return_stmt(self, stmt: 'Return'):
        raise NotImplementedError

    @abstractmethod
    def visit_enum_stmt(self, stmt: 'Enum'):
        raise NotImplementedError


# --- Abstract Base Classes for AST Nodes ---

class Expr(ABC):
    @abstractmethod
    def accept(self, visitor: ExprVisitor):
        raise NotImplementedError


class Stmt(ABC):
    @abstractmethod
    def accept(self, visitor: StmtVisitor):
        raise NotImplementedError


# --- Concrete Expression Nodes ---

@dataclass
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_binary_expr(self)


@dataclass
class Grouping(Expr):
    expression: Expr

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_grouping_expr(self)


@dataclass
class Literal(Expr):
    value: Any

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_literal_expr(self)


@dataclass
class Unary(Expr):
    operator: Token
    right: Expr

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_unary_expr(self)


@dataclass
class Variable(Expr):
    name: Token

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_variable_expr(self)


@dataclass
class Assign(Expr):
    name: Token
    value: Expr

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_assign_expr(self)


@dataclass
class Increment(Expr):
    """`++x`, `x++`, `--x` or `x--`. Only plain variables can be incremented."""
    operator: Token
    name: Token
    is_prefix: bool

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_increment_expr(self)


@dataclass
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_logical_expr(self)


@dataclass
class Argument:
    """A call argument; name is None for positional arguments."""
    name: Optional[Token]
    value: Expr


@dataclass
class Call(Expr):
    callee: Expr
    paren: Token
    arguments: List[Argument]

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_call_expr(self)


@dataclass
class Get(Expr):
    object: Expr
    name: Token

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_get_expr(self)


@dataclass
class Param:
    name: Token
    default: Optional[Expr] = None
    optional: bool = False


@dataclass
class Lambda(Expr):
    keyword: Token
    params: List[Param]
    body: List['Stmt']

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_lambda_expr(self)


# --- Concrete Statement Nodes ---

@dataclass
class Expression(Stmt):
    expression: Expr

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_expression_stmt(self)


@dataclass
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]
    is_const: bool

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_var_stmt(self)


@dataclass
class Block(Stmt):
    statements: List[Stmt]

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_block_stmt(self)


@dataclass
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_if_stmt(self)


@dataclass
class While(Stmt):
    condition: Expr
    body: Stmt

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_while_stmt(self)


@dataclass
class For(Stmt):
    initializer: Optional[Stmt]
    condition: Optional[Expr]
    increment: Optional[Expr]
    body: Stmt

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_for_stmt(self)


@dataclass
class Break(Stmt):
    keyword: Token

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_break_stmt(self)


@dataclass
class Continue(Stmt):
    keyword: Token

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_continue_stmt(self)


@dataclass
class Function(Stmt):
    name: Token
    params: List[Param]
    body: List[Stmt]

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_function_stmt(self)


@dataclass
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_return_stmt(self)


@dataclass
class Enum(Stmt):
    name: Token
    members: List[Token]

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_enum_stmt(self)
