"""Runs minilisp on a program given as an argument, on the forms of a source file, or in command-line mode. Also
uses error handling context manager. Called from the minilisp console script.
"""

import argparse
import os
import sys

from minilisp.lang.error import ErrorHandler
from minilisp.lang.session import Session
from minilisp.lang.shell import Shell


DEFAULT_RECURSION_LIMIT = 10000


def build_parser():
    """Returns the argument parser for the minilisp command."""
    parser = argparse.ArgumentParser(prog="minilisp", description="Evaluate minilisp programs.")
    parser.add_argument("program", help="program to evaluate (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-f", "--file", help="file whose forms are evaluated in order")
    parser.add_argument("-v", "--verbose", action="store_true", help="print each evaluation step")
    parser.add_argument("--no-color", action="store_true", help="disable colored output")
    parser.add_argument("--recursion-limit", type=int, default=DEFAULT_RECURSION_LIMIT,
                        help=f"maximum Python recursion depth (default: {DEFAULT_RECURSION_LIMIT})")
    return parser


def main(argv=None):
    """Runs minilisp interpreter. Called from minilisp executable script."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.program is not None and args.file is not None:
        parser.error("give either a program or --file, not both")

    if args.no_color:
        os.environ["NO_COLOR"] = "1"  # honored by termcolor
    sys.setrecursionlimit(args.recursion_limit)

    with ErrorHandler(verbose=args.verbose) as error_handler:
        if args.program is not None:
            sess = Session(error_handler, cmd_line=False)
            sess.add(args.program)
            sess.run()
            print(sess.pop())

        elif args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False)
            sess.run()

            for result in sess.results:
                print(result)

        else:
            Shell(Session(error_handler, cmd_line=True)).cmdloop()


if __name__ == "__main__":
    main()
