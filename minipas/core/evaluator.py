"""Tree-walking evaluation of an analyzed Program.

The evaluator keeps an explicit call stack of activation records. Variable reads and writes only ever touch the top
record: a procedure sees its own parameters and locals, never its caller's or its lexical parent's, even when
semantic analysis accepted the reference. Every record is appended to the trace when it is popped; the trace is the
result of a run.
"""

from minipas.core.nodes import NodeVisitor
from minipas.core.records import ActivationRecord, CallStack, Trace
from minipas.core.tokens import TokenType
from minipas.core.value import Value
from minipas.lang.error import (
    IllformedVarExpr, MissingArgument, MissingProcedure, PascalError, UndefinedVariable, UnhandledBinaryOp,
    UnhandledUnaryOp,
)


class Evaluator(NodeVisitor):
    """Runs a Program. Expressions visit to a Value, statements and declarations visit to None."""
    BINARY_OPS = {
        TokenType.PLUS: lambda left, right: left + right,
        TokenType.MINUS: lambda left, right: left - right,
        TokenType.MULTIPLY: lambda left, right: left * right,
        TokenType.DIVISION: lambda left, right: left / right,
        TokenType.INTEGER_DIVISION: lambda left, right: left // right,
        TokenType.MODULUS: lambda left, right: left % right,
    }
    UNARY_OPS = {
        TokenType.PLUS: lambda operand: Value.from_int(0) + operand,
        TokenType.MINUS: lambda operand: Value.from_int(0) - operand,
    }

    def __init__(self):
        self.call_stack = CallStack()
        self.trace = Trace()

    def evaluate(self, program):
        """Runs program and returns its Trace. State from earlier runs is discarded."""
        self.call_stack = CallStack()
        self.trace = Trace()
        self.visit(program)
        return self.trace

    def _push(self, record):
        self.call_stack.push(record)

    def _pop(self):
        record = self.call_stack.pop()
        self.trace.append(record)
        return record

    def visit_Program(self, node):
        self._push(ActivationRecord(node.name, ActivationRecord.PROGRAM, 1))
        self.visit(node.block)
        self._pop()

    def visit_Block(self, node):
        for declaration in node.declarations:
            self.visit(declaration)
        self.visit(node.compound)

    def visit_VarDecl(self, node):
        pass

    def visit_Type(self, node):
        pass

    def visit_ProcedureDecl(self, node):
        pass

    def visit_Param(self, node):
        pass

    def visit_NoOp(self, node):
        pass

    def visit_Compound(self, node):
        for child in node.children:
            self.visit(child)

    def visit_Assign(self, node):
        name = node.left.name
        if not name:
            raise IllformedVarExpr(node.left.token.text, node.line, node.col, stage="evaluate")

        value = self.visit(node.right)
        if value is None:
            raise IllformedVarExpr(name, node.line, node.col, stage="evaluate")

        self.call_stack.peek()[name] = value

    def visit_Var(self, node):
        name = node.name
        record = self.call_stack.peek()
        if name not in record:
            raise UndefinedVariable(name, node.line, node.col, stage="evaluate")
        return record[name]

    def visit_ProcedureCall(self, node):
        symbol = node.proc_symbol
        if symbol is None:
            raise MissingProcedure(node.name, node.line, node.col)
        if len(node.actual_params) != len(symbol.params):
            msg = f"{node.name}: {len(symbol.params)} parameter(s), got {len(node.actual_params)}"
            raise MissingArgument(msg, node.line, node.col)

        record = ActivationRecord(symbol.name, ActivationRecord.PROCEDURE, symbol.level)  # declared casing
        for (param_name, __), actual in zip(symbol.params, node.actual_params):
            value = self.visit(actual)  # evaluated in the caller's record, which is still on top
            if value is None:
                raise MissingArgument(param_name, actual.line, actual.col)
            record[param_name] = value

        self._push(record)
        self.visit(symbol.block)
        self._pop()

    def visit_BinaryOp(self, node):
        left = self.visit(node.left)
        right = self.visit(node.right)
        if left is None or right is None:
            raise MissingArgument(node.token.text, node.line, node.col)

        op = Evaluator.BINARY_OPS.get(node.op)
        if op is None:
            raise UnhandledBinaryOp(node.token)

        try:
            return op(left, right)
        except PascalError as error:
            if error.line is None:  # value arithmetic knows nothing about source positions
                error.line, error.col = node.line, node.col
            raise

    def visit_UnaryOp(self, node):
        operand = self.visit(node.expr)
        if operand is None:
            raise MissingArgument(node.token.text, node.line, node.col)

        op = Evaluator.UNARY_OPS.get(node.op)
        if op is None:
            raise UnhandledUnaryOp(node.token)
        return op(operand)

    def visit_Num(self, node):
        return node.value
