"""
Driver for the Tern interpreter.

Usage:
    python -m tern_interpreter [script] [--allow-input] [--no-color] [--print-ast]

With no script an interactive prompt is started. Exit codes in batch mode:
65 for syntax errors, 70 for runtime errors, 66 if the script can't be read.
"""
import argparse
import sys
from dataclasses import dataclass
from typing import Any, List, Optional

import colorama
from colorama import Fore, Style

from . import ast_nodes as ast
from .lexer import Lexer
from .parser import Parser
from .resolver import Resolver
from .interpreter import Interpreter
from .ast_printer import AstPrinter
from .natives import NativeRegistry, default_registry
from .errors import ParserError, TernRuntimeError, report_parser_error, report_runtime_error
from .values import formatted_str, to_str

EXIT_SYNTAX_ERROR = 65
EXIT_NO_INPUT = 66
EXIT_RUNTIME_ERROR = 70


@dataclass
class RuntimeOptions:
    allow_input: bool = False
    color: bool = True
    print_ast: bool = False


class Tern:
    def __init__(self, options: Optional[RuntimeOptions] = None, natives: Optional[NativeRegistry] = None):
        self.options = options or RuntimeOptions()
        if natives is None:
            natives = default_registry(allow_input=self.options.allow_input)
        self.interpreter = Interpreter(natives)
        self.had_error = False
        self.had_runtime_error = False

    def _check(self, source: str) -> Optional[List[ast.Stmt]]:
        """Scans, parses and resolves. Returns the statements, or None on syntax errors."""
        lexer = Lexer(source)
        tokens = lexer.scan_tokens()
        parser = Parser(tokens)
        statements = parser.parse()

        errors: List[ParserError] = lexer.errors + parser.errors
        if not errors:
            resolver = Resolver()
            resolver.resolve(statements)
            errors = resolver.errors

        if errors:
            for error in errors:
                report_parser_error(error, color=self.options.color)
            self.had_error = True
            return None
        return statements

    def run(self, source: str) -> Any:
        """
        Runs one chunk of source in the persistent interpreter. Returns the
        value of the last expression statement, or None.
        """
        statements = self._check(source)
        if statements is None:
            return None

        if self.options.print_ast:
            print(AstPrinter().print_program(statements))

        try:
            return self.interpreter.interpret(statements)
        except TernRuntimeError as error:
            report_runtime_error(error, color=self.options.color)
            self.had_runtime_error = True
            return None

    def run_file(self, path: str) -> int:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                source = f.read()
        except OSError as e:
            message = f"ERROR: Could not read '{path}': {e.strerror}"
            if self.options.color:
                message = f"{Fore.RED}{message}{Style.RESET_ALL}"
            print(message, file=sys.stderr)
            return EXIT_NO_INPUT

        self.run(source)
        if self.had_error: return EXIT_SYNTAX_ERROR
        if self.had_runtime_error: return EXIT_RUNTIME_ERROR
        return 0

    def run_prompt(self):
        print("Tern REPL (Ctrl+C to exit)")
        if not self.options.allow_input:
            print("INFO: input() is disabled; restart with --allow-input to enable it.")
        while True:
            try:
                line = input(">> ")
            except (KeyboardInterrupt, EOFError):
                print("\nExiting.")
                break

            if not line.strip(): continue
            value = self.run(line)
            if value is not None:
                print(formatted_str(value) if self.options.color else to_str(value))
            # A bad line shouldn't end the session.
            self.had_error = False
            self.had_runtime_error = False


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tern", description="Run a Tern script, or start the REPL.")
    parser.add_argument("script", nargs="?", help="script to run; omit to start the REPL")
    parser.add_argument("--allow-input", action="store_true", help="allow scripts to call input()")
    parser.add_argument("--no-color", dest="color", action="store_false", help="disable colored output")
    parser.add_argument("--print-ast", action="store_true", help="print the parsed program before running it")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    colorama.just_fix_windows_console()

    options = RuntimeOptions(allow_input=args.allow_input, color=args.color, print_ast=args.print_ast)
    tern = Tern(options)
    if args.script:
        return tern.run_file(args.script)
    tern.run_prompt()
    return 0


if __name__ == "__main__":
    sys.exit(main())
