"""minipas: interpreter for a small Pascal subset (programs, variables, nested procedures with parameters, integer/real
arithmetic).

Basic program flow:
    1. Lexer/Parser: pull tokens from the source text on demand and build the whole AST (core/lexer.py,
       core/parser.py). See core/parser.py for the grammar.
    2. Semantic analysis: walks the AST once, building the scope tree and binding procedure call sites
       (core/analyzer.py). Fails before anything runs.
    3. Evaluation: walks the AST again with a call stack of activation records (core/evaluator.py). The records,
       in the order they were popped, are the result of the run.

Each stage either completes or raises the first PascalError it meets; nothing is recovered or retried. Procedure
calls nest on the Python stack, so very deep call chains end in RecursionError (see lang/error.py for how that is
reported).
"""

from minipas.core.analyzer import SemanticAnalyzer
from minipas.core.evaluator import Evaluator
from minipas.core.parser import Parser


def parse(text):
    """Returns the Program AST of text."""
    return Parser(text).parse()


def interpret(text, error_handler=None):
    """Runs source text through every stage and returns the Trace of the run. error_handler, if given, is notified as
    each stage completes.
    """
    program = parse(text)
    if error_handler is not None:
        error_handler.note("parse", f"ok, program '{program.name}'")

    SemanticAnalyzer().analyze(program)
    if error_handler is not None:
        error_handler.note("analyze", "ok")

    trace = Evaluator().evaluate(program)
    if error_handler is not None:
        error_handler.note("evaluate", f"ok, {len(trace)} activation record(s)")

    return trace
