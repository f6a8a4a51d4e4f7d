"""Handles interactive mode for the minipas interpreter: repeatedly asks for a file, runs it and prints the outcome.
Uses cmd as backend.
"""

import cmd

from minipas.lang.session import Session


class Shell(cmd.Cmd):
    """minipas interpreter shell. Every line that is not a command is taken as the path of a file to run."""
    intro = "minipas interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "load from file >>> "

    def __init__(self, error_handler, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.error_handler = error_handler
        self.error_handler.fatal = False
        self.sess = None

    def default(self, line):
        """Loads and runs the file at path line."""
        with self.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.sess = Session(self.error_handler, line.strip())
            self.sess.run()
            self.sess.report()

    def do_verbose(self, arg):
        """verbose [on|off]: print a note as each stage of a run completes."""
        if arg not in ("on", "off", ""):
            self.error_handler.warn("verbose expects 'on' or 'off', got '{}'", arg)
            return
        if arg:
            self.error_handler.verbose = arg == "on"
        print(f"verbose is {'on' if self.error_handler.verbose else 'off'}")

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the minipas interpreter!\n\n"
              "minipas runs programs written in a small subset of Pascal: variable declarations \n"
              "of type INTEGER or REAL, nested procedures with parameters, assignments and \n"
              "arithmetic (+ - * / DIV %).\n\n"
              "Type the path of a source file to run it. When the program finishes, every \n"
              "activation record is printed in the order it was popped off the call stack.\n"
              "'verbose on' reports each stage of a run; 'exit' quits.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
