import io
import unittest
from contextlib import redirect_stdout

from listlambda.lang.error import ErrorHandler
from listlambda.lang.session import Session
from listlambda.lang.shell import Shell


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.shell = Shell(Session(ErrorHandler(), Session.SH_FILE, cmd_line=True))

    def run_lines(self, *lines):
        output = io.StringIO()
        with redirect_stdout(output):
            for line in lines:
                self.shell.onecmd(line)
        return output.getvalue().splitlines()

    def test_default(self):
        self.assertEqual(["y"], self.run_lines("((x.x) y)"))
        self.assertEqual(["{b c}"], self.run_lines("(tl {a b c}) ;; comment"))

    def test_continuation(self):
        self.assertEqual([], self.run_lines("(hd {a"))
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)

        self.assertEqual(["{a}"], self.run_lines("b})"))
        self.assertEqual(Shell._tmp_prompt, self.shell.prompt)

    def test_parse_error(self):
        output = self.run_lines("(x)", "x")
        self.assertTrue(any("error" in line for line in output))
        self.assertEqual("x", output[-1])

    def test_tree(self):
        output = self.run_lines("tree (x.y)")
        self.assertEqual(["Lambda(expr='(x.y)', nodes=[", "    Constant(expr='x'),", "    Constant(expr='y')", "])"],
                         output)
        self.assertEqual({}, self.shell.sess.to_exec)

    def test_trace(self):
        self.assertEqual(["trace is on"], self.run_lines("trace on"))
        self.assertTrue(self.shell.sess.error_handler.verbose)

        output = self.run_lines("((x.x) y)")
        self.assertEqual("y", output[-1])
        self.assertGreater(len(output), 1)

        self.assertEqual(["trace is off"], self.run_lines("trace off"))
        self.assertEqual(["trace expects 'on' or 'off', got 'maybe'"], self.run_lines("trace maybe"))

    def test_help(self):
        output = "\n".join(self.run_lines("help"))
        self.assertIn("never read as a constant", output)
        for command in ["tree", "trace", "exit"]:
            self.assertIn(f"'{command}", output)

    def test_command_names_are_not_constants(self):
        self.assertEqual(["exits", "trees"], self.run_lines("exits", "trees"))

        output = io.StringIO()
        with redirect_stdout(output):
            self.assertTrue(self.shell.onecmd("exit"))  # quits instead of printing the constant
        self.assertEqual("", output.getvalue())

    def test_exit(self):
        self.assertTrue(self.shell.onecmd("exit"))
        with redirect_stdout(io.StringIO()):
            self.assertTrue(self.shell.onecmd("EOF"))


if __name__ == '__main__':
    unittest.main()
