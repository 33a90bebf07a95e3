"""Handles interactive/command-line mode for the listlambda interpreter. Uses cmd as backend."""

import cmd

from listlambda.grammar.pure import parse


class Shell(cmd.Cmd):
    """listlambda interpreter shell."""
    intro = "listlambda interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continutations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Reduces an arbitrary listlambda expression and prints the result."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt
            if not line:
                return

            self.sess.add(line, self.line_num)
            self.sess.run()

            if self.sess.results:
                print(self.sess.pop().expr)

    def do_tree(self, arg):
        """Prints the parse tree of an expression without reducing it: tree EXPR"""
        with self.sess.error_handler:
            print(parse(arg.strip()).display())

    def do_trace(self, arg):
        """Turns printing of reduction steps on or off: trace [on|off]"""
        arg = arg.strip()
        if arg in ("on", "off"):
            self.sess.error_handler.verbose = arg == "on"
        elif arg:
            print(f"trace expects 'on' or 'off', got '{arg}'")
            return
        print(f"trace is {'on' if self.sess.error_handler.verbose else 'off'}")

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if arg:
            return super().do_help(arg)
        print("Welcome to the listlambda interpreter!\n\n"
              "Expressions are identifiers, lambdas written '(x.body)', applications written\n"
              "'(f a b)' and lists written '{a b c}'. The builtins 'hd', 'tl' and 'eval' take\n"
              "a list: try '(hd {a b c})', which gives '{a}', or '(eval {(x.x) y})', which\n"
              "gives 'y'.\n\n"
              "Commands: 'tree EXPR' shows the parse tree, 'trace on|off' toggles printing\n"
              "of reduction steps, 'exit' quits. Because of these commands, a line that is\n"
              "just 'tree', 'trace', 'help', 'exit' or 'EOF' is never read as a constant.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
