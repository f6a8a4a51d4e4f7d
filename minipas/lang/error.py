"""Error handling for minipas. Every failure of the pipeline (lex, parse, analyze, evaluate) is a PascalError: if
another type of error makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class PascalError(Exception):
    """Templates an error message so that it can be used to report a minipas error. The message format has one '{}'
    slot per offending snippet in exprs; snippets are bolded in msg and left plain in str(error).
    """
    stage = None

    def __init__(self, msg, exprs=None, line=None, col=None, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]
        exprs = [str(expr) for expr in exprs]

        super().__init__(msg.format(*exprs))
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]  # exprs[0] should be the offending snippet that caused the error

        self.line = line
        self.col = col
        self.diagnosis = diagnosis
        self.internal = internal


class UnexpectedChar(PascalError):
    """Raised by the lexer for a character that starts no token."""
    stage = "lex"

    def __init__(self, char, line=None, col=None):
        super().__init__("unexpected character '{}'", char, line, col)
        self.char = char


class UnexpectedToken(PascalError):
    """Raised by the parser when the current token is not of the expected kind."""
    stage = "parse"

    def __init__(self, token, expected):
        msg = "unexpected token '{}' of kind {}, expected {}"
        super().__init__(msg, (token.text, token.kind, expected), token.line, token.col)
        self.token = token
        self.expected = expected


class UnknownType(PascalError):
    stage = "analyze"

    def __init__(self, name, line=None, col=None, stage=None):
        super().__init__("unknown type '{}'", name, line, col)
        self.name = name
        if stage is not None:
            self.stage = stage


class UndefinedVariable(PascalError):
    """Raised by the analyzer for an unresolvable name and by the evaluator for a name absent from the active frame.
    """
    stage = "analyze"

    def __init__(self, name, line=None, col=None, stage=None):
        super().__init__("undefined variable '{}'", name, line, col)
        self.name = name
        if stage is not None:
            self.stage = stage


class VariableRedefinition(PascalError):
    stage = "analyze"

    def __init__(self, name, line=None, col=None):
        super().__init__("variable '{}' is already defined in this scope", name, line, col)
        self.name = name


class IllformedVarExpr(PascalError):
    stage = "analyze"

    def __init__(self, expr="", line=None, col=None, stage=None):
        super().__init__("ill-formed variable expression '{}'", expr, line, col)
        if stage is not None:
            self.stage = stage


class MissingArgument(PascalError):
    stage = "evaluate"

    def __init__(self, expr="", line=None, col=None):
        super().__init__("missing argument for '{}'", expr, line, col)


class UnhandledBinaryOp(PascalError):
    stage = "evaluate"

    def __init__(self, token):
        super().__init__("unhandled binary operator '{}'", token.text, token.line, token.col)
        self.token = token


class UnhandledUnaryOp(PascalError):
    stage = "evaluate"

    def __init__(self, token):
        super().__init__("unhandled unary operator '{}'", token.text, token.line, token.col)
        self.token = token


class DivisionByZero(PascalError):
    stage = "evaluate"

    def __init__(self, line=None, col=None):
        super().__init__("division by zero", line=line, col=col, diagnosis=False)


class StackUnderflow(PascalError):
    stage = "evaluate"

    def __init__(self):
        super().__init__("no activation record on the call stack", diagnosis=False)


class MissingProcedure(PascalError):
    stage = "evaluate"

    def __init__(self, name, line=None, col=None):
        super().__init__("'{}' is not a resolved procedure", name, line, col)
        self.name = name


class UnsupportedOperandTypes(PascalError):
    """Operator applied to a combination of value kinds it is not defined for. This is an implementer-level condition,
    so it is flagged internal, but it is still reported as an error value rather than aborting the process.
    """
    stage = "evaluate"

    def __init__(self, op, left, right=None):
        kinds = left.kind if right is None else f"{left.kind} and {right.kind}"
        super().__init__("operator '{}' not supported for {}", (op, kinds), diagnosis=False, internal=True)
        self.op = op
        self.operands = (left,) if right is None else (left, right)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report minipas errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"
    NOTE = "green"

    def __init__(self, fatal=True, verbose=False):
        self.fatal = fatal
        self.verbose = verbose
        self.traceback = {}

    def register_file(self, path, text=None):
        """Registers path (and the source it holds, once loaded) in traceback."""
        self.traceback[path] = text

    def remove_file(self, path):
        """Removes path from traceback. Should be called after a successful run."""
        self.traceback.pop(path, None)

    @staticmethod
    def diagnose(error, line, warning=False):
        """Returns source line with the offending snippet highlighted and underlined."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        start = max(error.col - 1, 0)
        end = start + max(len(error.expr), 1)

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def _source_line(self, error):
        """Returns (path, source line) that error points at, or (path, None) if it carries no position."""
        for path, text in self.traceback.items():
            if text is not None and error.line is not None:
                lines = text.splitlines()
                if 0 < error.line <= len(lines):
                    return path, lines[error.line - 1]
            return path, None
        return None, None

    def note(self, stage, detail):
        """Prints a progress note for a pipeline stage. Silent unless verbose."""
        if self.verbose:
            print(colored(f"{stage}: ", ErrorHandler.NOTE, attrs=["bold"]) + detail)

    def warn(self, *args, **kwargs):
        """Generates and prints warning message based on args."""
        error = PascalError(*args, **kwargs)
        print(colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg)

    def throw(self, error):
        """Reports error using self.traceback to locate its origin. error must be a PascalError."""
        error_msg = ""
        path, line = self._source_line(error)

        if path is not None and error.line is not None:
            error_msg += f"  File '{path}', line {error.line}:\n"
        elif path is not None:
            error_msg += f"  File '{path}':\n"

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        if error.stage:
            error_msg += colored(f"{error.stage} ", attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if line is not None and error.col is not None and error.diagnosis:
            print(ErrorHandler.diagnose(error, line))

        if self.fatal:
            sys.exit(1)
        self.traceback = {}  # if error occurred, reset traceback (no need if error is fatal)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(PascalError("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(PascalError("procedure calls nested too deeply, maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, PascalError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(PascalError("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
