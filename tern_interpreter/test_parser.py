import pytest

from tern_interpreter.lexer import Lexer
from tern_interpreter.parser import Parser
from tern_interpreter.ast_printer import AstPrinter
from tern_interpreter.errors import UnexpectedTokenError


def parse(source_code):
    tokens = Lexer(source_code).scan_tokens()
    parser = Parser(tokens)
    return parser, parser.parse()


def normalize(text):
    return "\n".join(line.strip() for line in text.strip().split('\n'))


def run_parser_test(source_code, expected_ast_str):
    """Runs lexer -> parser -> ast_printer and compares the printed tree."""
    parser, statements = parse(source_code)
    assert not parser.had_error, [e.message for e in parser.errors]
    actual_ast_str = AstPrinter().print_program(statements)
    assert normalize(actual_ast_str) == normalize(expected_ast_str)


@pytest.mark.parametrize("source, expected", [
    ("let x = 10 * (2 + 3);", "(let x (* 10 (group (+ 2 3))))"),
    ("1 + 1 == 2;", "(expr_stmt (== (+ 1 1) 2))"),
    ("let y;", "(let y)"),
    ("const z = 1.5;", "(const z 1.5)"),
    ("a = b = 3;", "(expr_stmt (assign a (assign b 3)))"),
    ("-x % 2 != 0 and not done;", "(expr_stmt (and (!= (% (- x) 2) 0) (not done)))"),
    ("true or none;", "(expr_stmt (or true none))"),
    ("f(1, c: 3);", "(expr_stmt (call f 1 c: 3))"),
    ('"abc".length;', '(expr_stmt (. length "abc"))'),
    ("2 ** 3 ** 2;", "(expr_stmt (** (** 2 3) 2))"),
    ("-2 ** 2 * 3;", "(expr_stmt (* (** (- 2) 2) 3))"),
    ("++i;", "(expr_stmt (pre++ i))"),
    ("let j = i-- + 1;", "(let j (+ (post-- i) 1))"),
    ("enum Color { RED, GREEN, }", "(enum Color RED GREEN)"),
    ("enum Empty {}", "(enum Empty)"),
])
def test_expressions_and_declarations(source, expected):
    run_parser_test(source, expected)


def test_function_with_defaults_and_optional_parameters():
    run_parser_test("func f(a, b = 2, c?) { return a; }", """
    (func f(a, b = 2, c?) {
      (return a)
    })
    """)


def test_anonymous_function():
    run_parser_test("let g = func (n) { return n * 2; };", """
    (let g (func(n) {
      (return (* n 2))
    }))
    """)


def test_for_loop_keeps_its_clauses():
    run_parser_test("for (let i = 0; i < 3; i = i + 1) print(i);",
                    "(for (let i 0) (< i 3) (assign i (+ i 1)) (expr_stmt (call print i)))")
    run_parser_test("for (;;) { break; }", """
    (for _ _ _ (block
      (break)
    ))
    """)


def test_while_with_continue():
    run_parser_test("while (x) { continue; }", """
    (while x (block
      (continue)
    ))
    """)


@pytest.mark.parametrize("source, message", [
    ("const a;", "Constant variables must be initialized."),
    ("func f(a?, b) {}", "Optional parameters must be declared after all required parameters."),
    ("f(a: 1, 2);", "Named arguments must be declared after all unnamed arguments."),
    ("1 = 2;", "Invalid assignment target."),
    ("let x = 1", "Expect ';' after variable declaration."),
    ("break", "Expect ';' after 'break'."),
    ("++1;", "Invalid operand for increment operator."),
    ("f()--;", "Invalid operand for decrement operator."),
    ("enum E { A B }", "Expect '}' after enum body."),
    ("enum { A }", "Expect enum name."),
])
def test_syntax_errors(source, message):
    parser, _ = parse(source)
    assert parser.had_error
    assert message in [e.message for e in parser.errors]


def test_unexpected_token():
    parser, _ = parse("let x = ;")
    assert parser.had_error
    error = parser.errors[0]
    assert isinstance(error, UnexpectedTokenError)
    assert error.message == "Unexpected Token ';' on line 1:9"


def test_parser_recovers_at_statement_boundary():
    parser, statements = parse("let a = ; let b = 2;")
    assert len(parser.errors) == 1
    assert AstPrinter().print_program(statements) == "(let b 2)"


def test_parser_recovers_at_enum_declaration():
    parser, statements = parse("let a = ; enum E { A }")
    assert len(parser.errors) == 1
    assert AstPrinter().print_program(statements) == "(enum E A)"
