"""Uses the listlambda parser/reducer to interpret .lc files, single expressions, or run in command-line mode. Also uses
error handling context manager. Called from the listlambda console script.

Python version must be >=3.6, because error handling requires that dicts are insertion-ordered.
"""

import argparse
import sys

from listlambda.lang.error import ErrorHandler
from listlambda.lang.shell import Shell
from listlambda.lang.session import Session


def build_parser():
    parser = argparse.ArgumentParser(prog="listlambda", description="listlambda interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-e", "--expr", help="reduce a single expression and print the result")
    parser.add_argument("--trace", action="store_true", help="print every reduction step")
    parser.add_argument("--tree", action="store_true", help="print parse trees instead of reducing")
    parser.add_argument("--recursion-limit", type=int, default=None,
                        help="python recursion limit (deep or divergent terms exhaust it)")
    return parser


def main(argv=None):
    """Runs listlambda interpreter. Called from listlambda console script."""
    assert sys.version_info >= (3, 6), "listlambda cannot be run with python < 3.6"

    with ErrorHandler() as error_handler:
        parser = build_parser()
        args = parser.parse_args(argv)
        if args.expr is not None and args.file is not None:
            parser.error("FILE and -e/--expr cannot be used together")

        error_handler.verbose = args.trace
        if args.recursion_limit is not None:
            sys.setrecursionlimit(args.recursion_limit)

        if args.expr is None and args.file is None:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()
            return

        if args.expr is not None:
            sess = Session(error_handler, Session.SH_FILE, cmd_line=True)
            error_handler.fatal = True  # a single expression is not interactive
            sess.add(args.expr, 1)
        else:
            sess = Session(error_handler, args.file, cmd_line=False)

        if args.tree:
            for __, tree in sess.to_exec.values():
                print(tree.display())
            return

        sess.run(echo=True)


if __name__ == "__main__":
    main()
