import contextlib
import io
import unittest

from minipas.core.records import ActivationRecord
from minipas.core.value import Value
from minipas.interpreter import interpret
from minipas.lang.error import ErrorHandler, UndefinedVariable

ALPHA = """
program Main;
var x : integer;

procedure Alpha(a : integer; b : integer);
var x : integer;
begin
    x := (a + b) * 2
end;

begin { Main }
    Alpha(3 + 5, 7)
end. { Main }
"""

NESTED = """
program Main;

procedure Alpha(a : integer; b : integer);
var x : integer;

    procedure Beta(a : integer; b : integer);
    var x : integer;
    begin
        x := a * 10 + b * 2
    end;

begin
    x := (a + b) * 2;
    Beta(5, 10)
end;

begin
    Alpha(3 + 5, 7)
end.
"""


class InterpreterTestCase(unittest.TestCase):

    def test_empty_program(self):
        trace = interpret("program Empty; begin end.")
        self.assertEqual([ActivationRecord("Empty", ActivationRecord.PROGRAM, 1)], list(trace))

    def test_arithmetic(self):
        trace = interpret("program Main; var a : integer; begin a := 10 * ((5 + 3) * 2) - 21 end.")
        self.assertEqual(Value.from_int(139), trace.lookup("Main", "a"))
        self.assertEqual(Value.from_int(139), trace.lookup("Main", "A"))

    def test_real_arithmetic(self):
        trace = interpret("program Main; var y : real; begin y := 20 / 7 + 3.14 end.")
        y = trace.lookup("Main", "y")
        self.assertEqual(Value.FLOAT, y.kind)
        self.assertAlmostEqual(20 / 7 + 3.14, y.data)

    def test_procedure_call(self):
        trace = interpret(ALPHA)
        self.assertEqual(["Alpha", "Main"], [record.name for record in trace])

        alpha = trace.get("Alpha")
        self.assertEqual((ActivationRecord.PROCEDURE, 1), (alpha.kind, alpha.level))
        self.assertEqual({"a": Value.from_int(8), "b": Value.from_int(7), "x": Value.from_int(30)}, alpha.members)
        self.assertEqual({}, trace.get("Main").members)

    def test_trace_uses_declared_name(self):
        text = "program Main; procedure Alpha(a : integer); begin end; begin alpha(1); ALPHA(2) end."
        trace = interpret(text)
        self.assertEqual(["Alpha", "Alpha", "Main"], [record.name for record in trace])
        self.assertEqual(Value.from_int(2), trace.lookup("Alpha", "a"))
        self.assertIsNone(trace.get("alpha"))

    def test_nested_procedure_call(self):
        trace = interpret(NESTED)
        self.assertEqual(["Beta", "Alpha", "Main"], [record.name for record in trace])
        self.assertEqual(Value.from_int(70), trace.lookup("Beta", "x"))
        self.assertEqual(Value.from_int(30), trace.lookup("Alpha", "x"))
        self.assertEqual([2, 1, 1], [record.level for record in trace])

    def test_every_invocation_is_traced(self):
        text = """
        program Main;
        var n : integer;
        procedure Step(k : integer);
        begin n := k * k end;
        begin Step(1); Step(2); Step(3) end.
        """
        trace = interpret(text)
        self.assertEqual(4, len(trace))
        self.assertEqual([Value.from_int(k * k) for k in (1, 2, 3)], [record["n"] for record in trace.find("Step")])
        self.assertEqual(Value.from_int(9), trace.lookup("Step", "n"))
        self.assertIsNone(trace.lookup("Main", "n"))

    def test_assignment_stays_in_own_record(self):
        text = """
        program Main;
        var x : integer;
        procedure P;
        begin x := 5 end;
        begin x := 1; P() end.
        """
        trace = interpret(text)
        self.assertEqual(Value.from_int(5), trace.lookup("P", "x"))
        self.assertEqual(Value.from_int(1), trace.lookup("Main", "x"))

    def test_outer_variable_read_fails_at_run_time(self):
        text = """
        program Main;
        var x : integer;
        procedure P;
        begin x := x + 1 end;
        begin x := 1; P() end.
        """
        with self.assertRaises(UndefinedVariable) as context:
            interpret(text)
        self.assertEqual("evaluate", context.exception.stage)
        self.assertEqual("x", context.exception.name)

    def test_unbounded_recursion(self):
        self.assertRaises(RecursionError, interpret, "program p; procedure q; begin q() end; begin q() end.")

    def test_stage_notes(self):
        output = io.StringIO()
        with contextlib.redirect_stdout(output):
            interpret("program Main; begin end.", ErrorHandler(verbose=True))
            interpret("program Quiet; begin end.", ErrorHandler())
        output = output.getvalue()

        for stage in ["parse", "analyze", "evaluate"]:
            self.assertIn(stage, output)
        self.assertIn("ok, program 'Main'", output)
        self.assertIn("ok, 1 activation record(s)", output)
        self.assertNotIn("Quiet", output)


if __name__ == '__main__':
    unittest.main()
