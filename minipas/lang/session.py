"""Session control for minipas: loads a source file, runs it through the interpreter and keeps the resulting trace.
"""

from minipas.interpreter import interpret
from minipas.lang.error import PascalError


class Session:
    """Governs one run of a minipas source file."""

    def __init__(self, error_handler, path):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path  # used for error messages
        self.trace = None

        try:
            with open(path, "r") as file:
                self.text = file.read()
        except OSError:
            raise PascalError("'{}' could not be opened", path, diagnosis=False)

        self.error_handler.register_file(path, self.text)

    def run(self):
        """Runs this session's source. Will raise any errors that are encountered, leaving self.trace unset."""
        self.trace = None
        self.trace = interpret(self.text, self.error_handler)

        self.error_handler.remove_file(self.path)  # error was not raised
        return self.trace

    def report(self):
        """Prints the trace of the last successful run, one activation record per block."""
        if self.trace is None:
            return
        for record in self.trace:
            print(record)
            print()
