import pytest

from tern_interpreter.lexer import Lexer
from tern_interpreter.tokens import TokenType, Token
from tern_interpreter.errors import IllegalTokenError


def scan(source):
    lexer = Lexer(source)
    return lexer, lexer.scan_tokens()


def assert_tokens(source, expected_tokens):
    """Compares token types, lexemes and literals (positions are checked separately)."""
    lexer, tokens = scan(source)
    assert not lexer.had_error, [e.message for e in lexer.errors]

    actual_types = [token.token_type for token in tokens]
    expected_types = [token.token_type for token in expected_tokens]
    assert actual_types == expected_types

    for token, expected_token in zip(tokens, expected_tokens):
        assert token.lexeme == expected_token.lexeme, f"Mismatch at {token}"
        assert token.literal == expected_token.literal, f"Mismatch at {token}"


def test_simple_variable_declaration():
    assert_tokens("let x = 10;", [
        Token(TokenType.LET, 'let', None, 1),
        Token(TokenType.IDENTIFIER, 'x', None, 1),
        Token(TokenType.EQUAL, '=', None, 1),
        Token(TokenType.INTEGER, '10', 10, 1),
        Token(TokenType.SEMICOLON, ';', None, 1),
        Token(TokenType.EOF, '', None, 1),
    ])


def test_function_with_comments():
    source = """
    // Simple function
    func main() {
        const y = "hello"; /* block comment */
    }
    """
    assert_tokens(source, [
        Token(TokenType.FUNC, 'func', None, 3),
        Token(TokenType.IDENTIFIER, 'main', None, 3),
        Token(TokenType.LEFT_PAREN, '(', None, 3),
        Token(TokenType.RIGHT_PAREN, ')', None, 3),
        Token(TokenType.LEFT_BRACE, '{', None, 3),
        Token(TokenType.CONST, 'const', None, 4),
        Token(TokenType.IDENTIFIER, 'y', None, 4),
        Token(TokenType.EQUAL, '=', None, 4),
        Token(TokenType.STRING, '"hello"', 'hello', 4),
        Token(TokenType.SEMICOLON, ';', None, 4),
        Token(TokenType.RIGHT_BRACE, '}', None, 5),
        Token(TokenType.EOF, '', None, 6),
    ])

    _, tokens = scan(source)
    assert [t.line for t in tokens] == [3, 3, 3, 3, 3, 4, 4, 4, 4, 4, 5, 6]


def test_named_arguments_and_optional_parameters():
    assert_tokens("f(a?, b: 2 % 3)", [
        Token(TokenType.IDENTIFIER, 'f', None, 1),
        Token(TokenType.LEFT_PAREN, '(', None, 1),
        Token(TokenType.IDENTIFIER, 'a', None, 1),
        Token(TokenType.QUESTION, '?', None, 1),
        Token(TokenType.COMMA, ',', None, 1),
        Token(TokenType.IDENTIFIER, 'b', None, 1),
        Token(TokenType.COLON, ':', None, 1),
        Token(TokenType.INTEGER, '2', 2, 1),
        Token(TokenType.PERCENT, '%', None, 1),
        Token(TokenType.INTEGER, '3', 3, 1),
        Token(TokenType.RIGHT_PAREN, ')', None, 1),
        Token(TokenType.EOF, '', None, 1),
    ])


def test_integers_and_reals_are_distinct():
    assert_tokens("1.5 2 3.length", [
        Token(TokenType.REAL, '1.5', 1.5, 1),
        Token(TokenType.INTEGER, '2', 2, 1),
        Token(TokenType.INTEGER, '3', 3, 1),
        Token(TokenType.DOT, '.', None, 1),
        Token(TokenType.IDENTIFIER, 'length', None, 1),
        Token(TokenType.EOF, '', None, 1),
    ])


def test_keywords_and_single_quoted_strings():
    _, tokens = scan("break continue none not and or 'hi'")
    assert [t.token_type for t in tokens] == [
        TokenType.BREAK, TokenType.CONTINUE, TokenType.NONE, TokenType.NOT,
        TokenType.AND, TokenType.OR, TokenType.STRING, TokenType.EOF,
    ]
    assert tokens[-2].literal == "hi"


def test_columns_are_one_based_per_line():
    _, tokens = scan("let  x\n  y")
    assert (tokens[0].line, tokens[0].column) == (1, 1)
    assert (tokens[1].line, tokens[1].column) == (1, 6)
    assert (tokens[2].line, tokens[2].column) == (2, 3)
    assert tokens[2].position == "2:3"


def test_illegal_character_is_collected():
    lexer, tokens = scan("let a = 1 @ 2;")
    assert lexer.had_error
    assert len(lexer.errors) == 1
    error = lexer.errors[0]
    assert isinstance(error, IllegalTokenError)
    assert error.message == "Unexpected Illegal Token '@' on line 1:11"
    # Scanning carries on past the bad character.
    assert tokens[-2].token_type == TokenType.SEMICOLON


@pytest.mark.parametrize("source, message", [
    ('"never closed', "Unterminated string."),
    ("/* never closed", "Unterminated block comment."),
])
def test_unterminated_literals(source, message):
    lexer, _ = scan(source)
    assert [e.message for e in lexer.errors] == [message]


def test_doubled_operators():
    _, tokens = scan("a ** 2; i++; --j; 2 * -3 - 1;")
    assert [t.token_type for t in tokens] == [
        TokenType.IDENTIFIER, TokenType.STAR_STAR, TokenType.INTEGER, TokenType.SEMICOLON,
        TokenType.IDENTIFIER, TokenType.PLUS_PLUS, TokenType.SEMICOLON,
        TokenType.MINUS_MINUS, TokenType.IDENTIFIER, TokenType.SEMICOLON,
        TokenType.INTEGER, TokenType.STAR, TokenType.MINUS, TokenType.INTEGER,
        TokenType.MINUS, TokenType.INTEGER, TokenType.SEMICOLON, TokenType.EOF,
    ]


def test_enum_is_a_keyword():
    _, tokens = scan("enum Color")
    assert tokens[0].token_type == TokenType.ENUM


def test_integer_literal_past_digit_limit_is_collected():
    lexer, tokens = scan("let big = " + "9" * 5000 + ";")
    assert [e.message for e in lexer.errors] == ["Integer literal is too large."]
    assert lexer.errors[0].token.column == 11
    # Scanning carries on after the literal.
    assert tokens[-2].token_type == TokenType.SEMICOLON
