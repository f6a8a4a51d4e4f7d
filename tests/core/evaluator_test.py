import unittest

from minipas.core.evaluator import Evaluator
from minipas.core.nodes import Assign, BinaryOp, NoOp, Num, UnaryOp, Var
from minipas.core.records import ActivationRecord
from minipas.core.tokens import Token, TokenType
from minipas.core.value import Value
from minipas.interpreter import interpret, parse
from minipas.lang.error import (
    DivisionByZero, IllformedVarExpr, MissingArgument, MissingProcedure, StackUnderflow, UnhandledBinaryOp,
    UnhandledUnaryOp, UnsupportedOperandTypes,
)


def num(value):
    return Num(Token(TokenType.INTEGER_CONST, Value.from_int(value)))


def op(kind, text):
    return Token(kind, Value.from_str(text))


def with_frame():
    evaluator = Evaluator()
    evaluator.call_stack.push(ActivationRecord("Test", ActivationRecord.PROGRAM, 1))
    return evaluator


class ExpressionTestCase(unittest.TestCase):

    def test_binary_ops(self):
        cases = {
            "1 + 2 * 3": Value.from_int(7),
            "10 * ((5 + 3) * 2) - 21": Value.from_int(139),
            "7 DIV 2": Value.from_int(3),
            "-7 DIV 2": Value.from_int(-3),
            "-7 % 2": Value.from_int(-1),
            "6 / 3": Value.from_float(2.0),
            "1 + 0.5": Value.from_float(1.5),
        }
        for case, expected in cases.items():
            trace = interpret(f"program t; var a : real; begin a := {case} end.")
            self.assertEqual(expected, trace.lookup("t", "a"), case)

    def test_unary_ops(self):
        text = """
        program t;
        var a, b, c : integer; d : real;
        begin
            a := -5;
            b := +a;
            c := - -a;
            d := -2.5
        end.
        """
        trace = interpret(text)
        expected = {"a": Value.from_int(-5), "b": Value.from_int(-5), "c": Value.from_int(-5),
                    "d": Value.from_float(-2.5)}
        for name, value in expected.items():
            self.assertEqual(value, trace.lookup("t", name), name)

    def test_division_by_zero(self):
        should_raise = ["10 DIV 0", "1 / 0", "5 % 0", "2.5 / (1 - 1)"]
        for case in should_raise:
            with self.assertRaises(DivisionByZero) as context:
                interpret(f"program t; var a : real;\nbegin a := {case} end.")
            self.assertEqual(2, context.exception.line, case)
            self.assertEqual("evaluate", context.exception.stage, case)

    def test_float_zero_divisor(self):
        trace = interpret("program t; var a : real; begin a := 1 / 0.0 end.")
        self.assertEqual(Value.from_float(float("inf")), trace.lookup("t", "a"))

    def test_unsupported_operands(self):
        text = "program t; var a : real; begin a := 7.5 DIV 2 end."
        with self.assertRaises(UnsupportedOperandTypes) as context:
            interpret(text)
        self.assertEqual((1, text.index("DIV") + 1), (context.exception.line, context.exception.col))
        self.assertTrue(context.exception.internal)

    def test_unhandled_binary_op(self):
        node = BinaryOp(num(1), op(TokenType.COMMA, ","), num(2))
        self.assertRaises(UnhandledBinaryOp, Evaluator().visit, node)

    def test_unhandled_unary_op(self):
        node = UnaryOp(op(TokenType.MULTIPLY, "*"), num(2))
        self.assertRaises(UnhandledUnaryOp, Evaluator().visit, node)

    def test_missing_operand(self):
        should_raise = [
            BinaryOp(NoOp(), op(TokenType.PLUS, "+"), num(1)),
            BinaryOp(num(1), op(TokenType.MINUS, "-"), NoOp()),
            UnaryOp(op(TokenType.MINUS, "-"), NoOp()),
        ]
        for case in should_raise:
            self.assertRaises(MissingArgument, Evaluator().visit, case)


class StatementTestCase(unittest.TestCase):

    def test_empty_stack(self):
        node = Var(Token(TokenType.IDENTIFIER, Value.from_str("a")))
        self.assertRaises(StackUnderflow, Evaluator().visit, node)

    def test_assign_without_value(self):
        evaluator = with_frame()
        node = Assign(Var(Token(TokenType.IDENTIFIER, Value.from_str("a"))), NoOp())
        with self.assertRaises(IllformedVarExpr) as context:
            evaluator.visit(node)
        self.assertEqual("evaluate", context.exception.stage)

    def test_assign_writes_top_record(self):
        evaluator = with_frame()
        evaluator.visit(Assign(Var(Token(TokenType.IDENTIFIER, Value.from_str("Count"))), num(3)))
        self.assertEqual(Value.from_int(3), evaluator.call_stack.peek()["count"])

    def test_missing_procedure(self):
        with self.assertRaises(MissingProcedure) as context:
            interpret("program t; begin nope(1) end.")
        self.assertEqual("nope", context.exception.name)

    def test_arity_mismatch(self):
        should_raise = [
            "program t; procedure q(a : integer); begin end; begin q(1, 2) end.",
            "program t; procedure q(a : integer); begin end; begin q() end.",
            "program t; procedure q; begin end; begin q(1) end.",
        ]
        for case in should_raise:
            self.assertRaises(MissingArgument, interpret, case)

    def test_evaluate_starts_fresh(self):
        program = parse("program t; var a : integer; begin a := 1 end.")
        evaluator = Evaluator()
        self.assertEqual(1, len(evaluator.evaluate(program)))
        trace = evaluator.evaluate(program)
        self.assertEqual(1, len(trace))
        self.assertEqual(0, len(evaluator.call_stack))


if __name__ == '__main__':
    unittest.main()
