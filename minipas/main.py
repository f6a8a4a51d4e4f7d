"""Runs minipas source files or starts the interactive shell. Also uses error handling context manager. Called from
the minipas console script.
"""

import argparse
import sys

from minipas.lang.error import ErrorHandler
from minipas.lang.session import Session
from minipas.lang.shell import Shell


def main(argv=None):
    """Runs minipas interpreter. Called from minipas console script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="minipas")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to interactive mode)", nargs="?")
        parser.add_argument("-v", "--verbose", help="print a note as each stage of a run completes",
                            action="store_true")
        parser.add_argument("--recursion-limit", help="maximum depth of the host stack (bounds procedure nesting)",
                            type=int, default=None)
        args = parser.parse_args(argv)

        error_handler.verbose = args.verbose
        if args.recursion_limit is not None:
            sys.setrecursionlimit(args.recursion_limit)

        if args.file is not None:
            sess = Session(error_handler, args.file)
            sess.run()
            sess.report()

        else:
            Shell(error_handler).cmdloop()


if __name__ == "__main__":
    main()
