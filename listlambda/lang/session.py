"""Session control for the listlambda language. Runs .lc files (one expression per logical line) or the lines typed in
command-line mode.

File format:

```
<line>     ::= <expr>? <comment>?     ; blank lines and comment-only lines are skipped
<comment>  ::= ";;" <char>*
```

A line with more '(' than ')' (or more '{' than '}') is continued on the next line.
"""

from listlambda.grammar.pure import parse
from listlambda.lang.error import GenericException
from listlambda.pure.reduction import evaluate, is_stuck


class Session:
    """Governs a listlambda session: parses statements as they are added and reduces them when run."""
    SH_FILE = "<in>"  # command-line interpreter filename
    COMMENT = ";;"

    def __init__(self, error_handler, path, cmd_line):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.to_exec = {}  # dict of line num: (statement, Expression) to reduce
        self.results = []  # reduced Expressions, in order

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    lines = file.readlines()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            for line, line_num in Session.statements(lines):
                self.add(line, line_num)

        elif not cmd_line:
            raise GenericException("'{}' is a reserved filename", Session.SH_FILE, diagnosis=False)

    @staticmethod
    def preprocess_line(line, prev=""):
        """Preprocesses a line from a file or command-line, joining it onto prev (the unfinished statement so far, if
        any). Returns the updated statement and whether it continues on the next line.
        """
        if Session.COMMENT in line:
            line = line[:line.index(Session.COMMENT)]  # get rid of comments

        line = line.strip()
        if prev:
            line = f"{prev} {line}".strip()

        return line, line.count("(") > line.count(")") or line.count("{") > line.count("}")

    @staticmethod
    def statements(lines):
        """Yields (statement, line num) for each logical statement in lines. line num is the statement's first line."""
        statement, start, add_to_prev = "", 0, False
        for line_num, line in enumerate(lines, start=1):
            if not add_to_prev:
                start = line_num
            statement, add_to_prev = Session.preprocess_line(line, statement if add_to_prev else "")
            if statement and not add_to_prev:
                yield statement, start

        if add_to_prev and statement:
            yield statement, start  # unbalanced at EOF: let the parser report it

    def add(self, expr, line_num):
        """Parses expr and adds it to the current session. Reduction is lazy and is delayed until run is called."""
        with self.error_handler:
            self.error_handler.register_line(self.path, expr, line_num)  # in case error is raised
            self.to_exec[line_num] = (expr, parse(expr))
            self.error_handler.remove_line(self.path)  # error was not raised

    def run(self, echo=False):
        """Reduces this session's pending statements in order. Results are appended to self.results and, if echo, printed
        as soon as each one is reduced, so a later statement that blows the stack does not hide earlier results.
        """
        for line_num, (expr, tree) in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, expr, line_num)

            try:
                result = evaluate(tree, self.error_handler.register_step)
            finally:
                del self.to_exec[line_num]

            if self.error_handler.verbose and is_stuck(result):
                self.error_handler.warn("'{}' is stuck: its head cannot be applied", result.expr, diagnosis=False)

            if echo:
                print(result.expr)

            self.results.append(result)
            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the most recent result."""
        return self.results.pop()
