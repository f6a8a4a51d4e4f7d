import contextlib
import io
import os
import tempfile
import unittest

from minipas.core.value import Value
from minipas.lang.error import DivisionByZero, ErrorHandler, PascalError
from minipas.lang.session import Session


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.error_handler = ErrorHandler(fatal=False)

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, text, name="prog.pas"):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w") as file:
            file.write(text)
        return path

    def test_run(self):
        path = self.write("program Main; var a : integer; begin a := 10 * ((5 + 3) * 2) - 21 end.")
        sess = Session(self.error_handler, path)
        self.assertIn(path, self.error_handler.traceback)

        trace = sess.run()
        self.assertIs(trace, sess.trace)
        self.assertEqual(Value.from_int(139), trace.lookup("Main", "a"))
        self.assertNotIn(path, self.error_handler.traceback)

    def test_report(self):
        path = self.write("program Main; var a : integer; begin a := 139 end.")
        sess = Session(self.error_handler, path)
        sess.run()

        output = io.StringIO()
        with contextlib.redirect_stdout(output):
            sess.report()
        self.assertIn("1: PROGRAM Main", output.getvalue())
        self.assertIn("139", output.getvalue())

    def test_failed_run(self):
        path = self.write("program Main; var a : integer;\nbegin a := 1 DIV 0 end.")
        sess = Session(self.error_handler, path)
        self.assertRaises(DivisionByZero, sess.run)
        self.assertIsNone(sess.trace)
        self.assertIn(path, self.error_handler.traceback)

        output = io.StringIO()
        with contextlib.redirect_stdout(output):
            sess.report()
        self.assertEqual("", output.getvalue())

    def test_missing_file(self):
        with self.assertRaises(PascalError) as context:
            Session(self.error_handler, os.path.join(self.tmp.name, "missing.pas"))
        self.assertIn("could not be opened", str(context.exception))
        self.assertFalse(context.exception.diagnosis)


if __name__ == '__main__':
    unittest.main()
