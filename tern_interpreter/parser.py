from typing import List, Optional

from .tokens import Token, TokenType
from .errors import ParserError, UnexpectedTokenError
from . import ast_nodes as ast
from .values import Integer, Real, String, TRUE, FALSE, NULL

MAX_ARGUMENTS = 255


class Parser:
    """
    The Parser consumes a stream of tokens and produces an Abstract Syntax Tree (AST).
    Syntax errors are collected in `errors`; the parser synchronizes on the next
    statement boundary and keeps going.
    """
    def __init__(self, tokens: List[Token]):
        self.tokens: List[Token] = tokens
        self.current: int = 0
        self.errors: List[ParserError] = []

    @property
    def had_error(self) -> bool:
        return bool(self.errors)

    def parse(self) -> List[ast.Stmt]:
        """The main entry point, parses a list of statements."""
        statements: List[ast.Stmt] = []
        while not self._is_at_end():
            declaration = self._declaration()
            if declaration is not None:
                statements.append(declaration)
        return statements

    # --- GRAMMAR RULE IMPLEMENTATIONS ---

    def _declaration(self) -> Optional[ast.Stmt]:
        """
        Parses a declaration. This is the main entry point for statements.
        If a syntax error is found, it synchronizes and returns None.
        """
        try:
            if self._check(TokenType.FUNC) and self._check_next(TokenType.IDENTIFIER):
                self._advance()
                return self._function()
            if self._match(TokenType.LET):
                return self._var_declaration(is_const=False)
            if self._match(TokenType.CONST):
                return self._var_declaration(is_const=True)
            if self._match(TokenType.ENUM):
                return self._enum_declaration()
            return self._statement()
        except ParserError:
            self._synchronize()
            return None

    def _var_declaration(self, is_const: bool) -> ast.Stmt:
        """Parses a variable declaration: ('let'|'const') IDENTIFIER ('=' expression)? ';'"""
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer: Optional[ast.Expr] = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()

        if is_const and initializer is None:
            self._error(name, "Constant variables must be initialized.")

        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return ast.Var(name, initializer, is_const)

    def _enum_declaration(self) -> ast.Stmt:
        """Parses `enum IDENTIFIER '{' IDENTIFIER (',' IDENTIFIER)* ','? '}'`."""
        name = self._consume(TokenType.IDENTIFIER, "Expect enum name.")
        self._consume(TokenType.LEFT_BRACE, "Expect '{' before enum body.")

        members: List[Token] = []
        while not self._check(TokenType.RIGHT_BRACE):
            members.append(self._consume(TokenType.IDENTIFIER, "Expect enum member name."))
            if not self._match(TokenType.COMMA):
                break

        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after enum body.")
        return ast.Enum(name, members)

    def _statement(self) -> ast.Stmt:
        """Parses a statement. This includes if, while, for, break, continue, return, expression, and block statements."""
        if self._match(TokenType.FOR):
            return self._for_statement()
        if self._match(TokenType.IF):
            return self._if_statement()
        if self._match(TokenType.RETURN):
            return self._return_statement()
        if self._match(TokenType.WHILE):
            return self._while_statement()
        if self._match(TokenType.BREAK):
            keyword = self._previous()
            self._consume(TokenType.SEMICOLON, "Expect ';' after 'break'.")
            return ast.Break(keyword)
        if self._match(TokenType.CONTINUE):
            keyword = self._previous()
            self._consume(TokenType.SEMICOLON, "Expect ';' after 'continue'.")
            return ast.Continue(keyword)
        if self._match(TokenType.LEFT_BRACE):
            return ast.Block(self._block())
        return self._expression_statement()

    def _if_statement(self) -> ast.Stmt:
        """Parses an if-else statement."""
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self._statement()
        else_branch = None
        if self._match(TokenType.ELSE):
            else_branch = self._statement()

        return ast.If(condition, then_branch, else_branch)

    def _for_statement(self) -> ast.Stmt:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        # Initializer
        initializer: Optional[ast.Stmt]
        if self._match(TokenType.SEMICOLON):
            initializer = None
        elif self._match(TokenType.LET):
            initializer = self._var_declaration(is_const=False)
        else:
            initializer = self._expression_statement()

        # Condition
        condition: Optional[ast.Expr] = None
        if not self._check(TokenType.SEMICOLON):
            condition = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        # Increment
        increment: Optional[ast.Expr] = None
        if not self._check(TokenType.RIGHT_PAREN):
            increment = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self._statement()
        return ast.For(initializer, condition, increment, body)

    def _while_statement(self) -> ast.Stmt:
        """Parses a while loop."""
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after while condition.")
        body = self._statement()

        return ast.While(condition, body)

    def _return_statement(self) -> ast.Stmt:
        """Parses a return statement."""
        keyword = self._previous()
        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self._expression()

        self._consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return ast.Return(keyword, value)

    def _function(self) -> ast.Function:
        """Parses a function declaration."""
        name = self._consume(TokenType.IDENTIFIER, "Expect function name.")
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after function name.")
        parameters = self._parameters()
        self._consume(TokenType.LEFT_BRACE, "Expect '{' before function body.")
        body = self._block()
        return ast.Function(name, parameters, body)

    def _parameters(self) -> List[ast.Param]:
        """Parses `name`, `name?` and `name = default` parameters up to the closing ')'."""
        parameters: List[ast.Param] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(parameters) >= MAX_ARGUMENTS:
                    self._error(self._peek(), f"Can't have more than {MAX_ARGUMENTS} parameters.")

                param_name = self._consume(TokenType.IDENTIFIER, "Expect parameter name.")
                if self._match(TokenType.QUESTION):
                    param = ast.Param(param_name, None, optional=True)
                elif self._match(TokenType.EQUAL):
                    param = ast.Param(param_name, self._expression(), optional=True)
                else:
                    param = ast.Param(param_name)

                if parameters and parameters[-1].optional and not param.optional:
                    self._error(parameters[-1].name,
                                "Optional parameters must be declared after all required parameters.")
                parameters.append(param)

                if not self._match(TokenType.COMMA):
                    break

        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        return parameters

    def _block(self) -> List[ast.Stmt]:
        """Parses a block of statements."""
        statements: List[ast.Stmt] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            declaration = self._declaration()
            if declaration is not None:
                statements.append(declaration)

        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def _expression_statement(self) -> ast.Stmt:
        """Parses an expression statement: expression ';'"""
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ast.Expression(expr)

    def _expression(self) -> ast.Expr:
        """Parses an expression. Entry point for all expression rules."""
        return self._assignment()

    def _assignment(self) -> ast.Expr:
        """Parses an assignment expression."""
        expr = self._or()

        if self._match(TokenType.EQUAL):
            equals = self._previous()
            value = self._assignment()

            if isinstance(expr, ast.Variable):
                return ast.Assign(expr.name, value)

            self._error(equals, "Invalid assignment target.")

        return expr

    def _or(self) -> ast.Expr:
        """Parses logical OR expressions."""
        expr = self._and()
        while self._match(TokenType.OR):
            operator = self._previous()
            right = self._and()
            expr = ast.Logical(expr, operator, right)
        return expr

    def _and(self) -> ast.Expr:
        """Parses logical AND expressions."""
        expr = self._equality()
        while self._match(TokenType.AND):
            operator = self._previous()
            right = self._equality()
            expr = ast.Logical(expr, operator, right)
        return expr

    def _equality(self) -> ast.Expr:
        """Parses an equality expression (==, !=)."""
        expr = self._comparison()
        while self._match(TokenType.EQUAL_EQUAL, TokenType.BANG_EQUAL):
            operator = self._previous()
            right = self._comparison()
            expr = ast.Binary(expr, operator, right)
        return expr

    def _comparison(self) -> ast.Expr:
        """Parses comparison expressions (>, >=, <, <=)."""
        expr = self._term()
        while self._match(TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL):
            operator = self._previous()
            right = self._term()
            expr = ast.Binary(expr, operator, right)
        return expr

    def _term(self) -> ast.Expr:
        """Parses addition and subtraction expressions (+, -)."""
        expr = self._factor()
        while self._match(TokenType.MINUS, TokenType.PLUS):
            operator = self._previous()
            right = self._factor()
            expr = ast.Binary(expr, operator, right)
        return expr

    def _factor(self) -> ast.Expr:
        """Parses multiplication, division and modulus expressions (*, /, %)."""
        expr = self._exponent()
        while self._match(TokenType.SLASH, TokenType.STAR, TokenType.PERCENT):
            operator = self._previous()
            right = self._exponent()
            expr = ast.Binary(expr, operator, right)
        return expr

    def _exponent(self) -> ast.Expr:
        """Parses exponentiation (**). Left-associative: 2 ** 3 ** 2 is (2 ** 3) ** 2."""
        expr = self._unary()
        while self._match(TokenType.STAR_STAR):
            operator = self._previous()
            right = self._unary()
            expr = ast.Binary(expr, operator, right)
        return expr

    def _unary(self) -> ast.Expr:
        """Parses unary expressions (e.g., -x, !y, not z, ++i)."""
        if self._match(TokenType.PLUS_PLUS, TokenType.MINUS_MINUS):
            operator = self._previous()
            operand = self._unary()
            return self._increment(operator, operand, is_prefix=True)
        if self._match(TokenType.MINUS, TokenType.BANG, TokenType.NOT):
            operator = self._previous()
            right = self._unary()
            return ast.Unary(operator, right)
        return self._call()

    def _increment(self, operator: Token, operand: ast.Expr, is_prefix: bool) -> ast.Expr:
        if isinstance(operand, ast.Variable):
            return ast.Increment(operator, operand.name, is_prefix)
        action = "increment" if operator.token_type == TokenType.PLUS_PLUS else "decrement"
        self._error(operator, f"Invalid operand for {action} operator.")
        return operand

    def _finish_call(self, callee: ast.Expr) -> ast.Expr:
        """Helper to parse the argument list of a function call."""
        arguments: List[ast.Argument] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self._error(self._peek(), f"Can't have more than {MAX_ARGUMENTS} arguments.")

                if self._check(TokenType.IDENTIFIER) and self._check_next(TokenType.COLON):
                    name = self._advance()
                    self._advance()  # The ':'
                    argument = ast.Argument(name, self._expression())
                else:
                    argument = ast.Argument(None, self._expression())

                if arguments and arguments[-1].name is not None and argument.name is None:
                    self._error(arguments[-1].name, "Named arguments must be declared after all unnamed arguments.")
                arguments.append(argument)

                if not self._match(TokenType.COMMA):
                    break

        paren = self._consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return ast.Call(callee, paren, arguments)

    def _call(self) -> ast.Expr:
        """Parses a function call or property access."""
        expr = self._primary()

        while True:
            if self._match(TokenType.LEFT_PAREN):
                expr = self._finish_call(expr)
            elif self._match(TokenType.DOT):
                name = self._consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = ast.Get(expr, name)
            elif self._match(TokenType.PLUS_PLUS, TokenType.MINUS_MINUS):
                expr = self._increment(self._previous(), expr, is_prefix=False)
            else:
                break

        return expr

    def _primary(self) -> ast.Expr:
        """Parses primary expressions (literals, grouping, identifiers, anonymous functions)."""
        if self._match(TokenType.FALSE): return ast.Literal(FALSE)
        if self._match(TokenType.TRUE): return ast.Literal(TRUE)
        if self._match(TokenType.NONE): return ast.Literal(NULL)

        if self._match(TokenType.INTEGER):
            return ast.Literal(Integer(self._previous().literal))
        if self._match(TokenType.REAL):
            return ast.Literal(Real(self._previous().literal))
        if self._match(TokenType.STRING):
            return ast.Literal(String(self._previous().literal))

        if self._match(TokenType.IDENTIFIER):
            return ast.Variable(self._previous())

        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return ast.Grouping(expr)

        if self._match(TokenType.FUNC):
            keyword = self._previous()
            self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'func'.")
            parameters = self._parameters()
            self._consume(TokenType.LEFT_BRACE, "Expect '{' before function body.")
            return ast.Lambda(keyword, parameters, self._block())

        if self._is_at_end():
            raise self._error(self._peek(), "Expect expression.")
        error = UnexpectedTokenError(self._peek())
        self.errors.append(error)
        raise error

    # --- TOKEN CONSUMPTION & UTILITY METHODS ---

    def _match(self, *types: TokenType) -> bool:
        """
        Checks if the current token has any of the given types.
        If so, it consumes the token and returns True.
        """
        for token_type in types:
            if self._check(token_type):
                self._advance()
                return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Checks if the current token is of the given type without consuming it."""
        if self._is_at_end():
            return False
        return self._peek().token_type == token_type

    def _check_next(self, token_type: TokenType) -> bool:
        """Checks the type of the token after the current one."""
        if self._is_at_end(): return False
        if self.tokens[self.current + 1].token_type == TokenType.EOF: return False
        return self.tokens[self.current + 1].token_type == token_type

    def _advance(self) -> Token:
        """Consumes the current token and returns it."""
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        """Checks if we have run out of tokens to parse."""
        return self._peek().token_type == TokenType.EOF

    def _peek(self) -> Token:
        """Returns the current token without consuming it."""
        return self.tokens[self.current]

    def _previous(self) -> Token:
        """Returns the most recently consumed token."""
        return self.tokens[self.current - 1]

    # --- ERROR HANDLING & SYNCHRONIZATION ---

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """
        Consumes a token of a specific type. If the next token is not of the
        expected type, it raises a ParserError.
        """
        if self._check(token_type):
            return self._advance()
        raise self._error(self._peek(), message)

    def _error(self, token: Token, message: str) -> ParserError:
        """Records a ParserError and returns it so the caller can raise it."""
        error = ParserError(token, message)
        self.errors.append(error)
        return error

    def _synchronize(self):
        """
        Error recovery. Discards tokens until it finds a statement boundary,
        which helps the parser continue after a syntax error.
        """
        self._advance()
        while not self._is_at_end():
            if self._previous().token_type == TokenType.SEMICOLON:
                return

            if self._peek().token_type in [
                TokenType.FUNC,
                TokenType.LET,
                TokenType.CONST,
                TokenType.ENUM,
                TokenType.FOR,
                TokenType.IF,
                TokenType.WHILE,
                TokenType.BREAK,
                TokenType.CONTINUE,
                TokenType.RETURN
            ]:
                return

            self._advance()
