from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional

class TokenType(Enum):
    # Single-character tokens
    LEFT_PAREN = auto()     # (
    RIGHT_PAREN = auto()    # )
    LEFT_BRACE = auto()     # {
    RIGHT_BRACE = auto()    # }
    COMMA = auto()          # ,
    DOT = auto()            # .
    MINUS = auto()          # -
    PLUS = auto()           # +
    SEMICOLON = auto()      # ;
    SLASH = auto()          # /
    STAR = auto()           # *
    PERCENT = auto()        # %
    COLON = auto()          # :
    QUESTION = auto()       # ?

    # One or two character tokens
    BANG = auto()           # !
    BANG_EQUAL = auto()     # !=
    EQUAL = auto()          # =
    EQUAL_EQUAL = auto()    # ==
    GREATER = auto()        # >
    GREATER_EQUAL = auto()  # >=
    LESS = auto()           # <
    LESS_EQUAL = auto()     # <=
    STAR_STAR = auto()      # **
    PLUS_PLUS = auto()      # ++
    MINUS_MINUS = auto()    # --

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    INTEGER = auto()
    REAL = auto()

    # Keywords
    AND = auto()
    BREAK = auto()
    CONST = auto()
    CONTINUE = auto()
    ELSE = auto()
    ENUM = auto()
    FALSE = auto()
    FOR = auto()
    FUNC = auto()
    IF = auto()
    LET = auto()
    NONE = auto()
    NOT = auto()
    OR = auto()
    RETURN = auto()
    TRUE = auto()
    WHILE = auto()

    # Special
    ILLEGAL = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    token_type: TokenType
    lexeme: str
    literal: Optional[Any]
    line: int
    column: int = 0

    @property
    def position(self) -> str:
        return f"{self.line}:{self.column}"

    def __str__(self) -> str:
        return f"Token(type={self.token_type.name}, lexeme='{self.lexeme}', literal={self.literal}, at={self.position})"

# Mapping keywords to their token types
keywords = {
    "and": TokenType.AND,
    "break": TokenType.BREAK,
    "const": TokenType.CONST,
    "continue": TokenType.CONTINUE,
    "else": TokenType.ELSE,
    "enum": TokenType.ENUM,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "func": TokenType.FUNC,
    "if": TokenType.IF,
    "let": TokenType.LET,
    "none": TokenType.NONE,
    "not": TokenType.NOT,
    "or": TokenType.OR,
    "return": TokenType.RETURN,
    "true": TokenType.TRUE,
    "while": TokenType.WHILE,
}
