"""Diagnostics for listlambda: parse errors, unreadable .lc files, divergent terms and stuck-term warnings.

Reduction never raises on its own. A term whose head cannot be applied comes back as a residual application (reported
as a warning under trace), and a term with no normal form recurses until Python gives up with RecursionError, which
ErrorHandler turns into an ordinary error. Anything else that is not a GenericException is reported as internal.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """A listlambda error or warning. msg is a template whose '{}' slots are filled with the bolded exprs; exprs[0] is
    the source text being complained about, and [start, end) is the span of it to underline. ParseError fills start
    with the offset where the failing form began.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)


class ErrorHandler:
    """Wraps parsing and reduction of .lc statements. Exceptions leaving the with block are printed as listlambda errors
    against the statement registered for the current file; RecursionError means the term diverged (or is just too
    deep for the recursion limit). When fatal, an error ends the process with status 1; the shell keeps going instead.

    verbose turns on the reduction trace (register_step) and the stuck-term warnings Session emits.
    """
    ERROR = "red"
    WARNING = "magenta"
    STEP = "cyan"

    def __init__(self, fatal=True, verbose=False):
        self.fatal = fatal
        self.verbose = verbose
        self.traceback = {}

    def register_file(self, path):
        """Registers a .lc file (or the shell's '<in>') with no statement in progress."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Marks line (the statement starting at line_num) as the one being parsed or reduced in path."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Clears path's statement once it has parsed or reduced without error."""
        self.traceback[path] = (None, None)

    def register_step(self, rule, expr):
        """Prints a single reduction step (rule is "β" or a builtin keyword) if verbose."""
        if self.verbose:
            print(colored(f"  {rule:<4} ", ErrorHandler.STEP, attrs=["bold"]) + colored(expr.expr, attrs=["dark"]))

    @staticmethod
    def diagnose(error, warning=False):
        """Returns error.expr with the span [start, end) coloured and a caret line under it, e.g. the unmatched '(' of
        '(x.' or the single item of '(x)'. An empty span still gets one caret.
        """
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self, error):
        """Returns 'file:line:col: ' for the innermost registered line, or '' if no line is registered."""
        for file, (line, line_num) in reversed(list(self.traceback.items())):
            if line:
                col = max(line.find(error.expr), 0) + error.start
                return f"{file}:{line_num}:{col}: "
        return ""

    def warn(self, *args, **kwargs):
        """Prints a warning (same args as GenericException) prefixed with 'file:line:col: '. Never exits; used for
        stuck results.
        """
        error = GenericException(*args, **kwargs)

        error_msg = colored(self._location(error), attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg

        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Prints GenericException error under the statement each registered file was on, then exits if fatal. In the
        shell the registered statements are cleared so the next line starts clean.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # dicts are insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        self.traceback = {path: (None, None) for path in self.traceback}  # reset lines (no need if error is fatal)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("normal form might exist, but maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
