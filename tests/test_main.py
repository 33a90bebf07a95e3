import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from listlambda.main import build_parser, main


class MainTestCase(unittest.TestCase):

    def run_main(self, *argv):
        output = io.StringIO()
        with redirect_stdout(output):
            main(list(argv))
        return output.getvalue().splitlines()

    def test_build_parser(self):
        args = build_parser().parse_args(["prog.lc", "--trace", "--recursion-limit", "5000"])
        self.assertEqual("prog.lc", args.file)
        self.assertTrue(args.trace)
        self.assertFalse(args.tree)
        self.assertEqual(5000, args.recursion_limit)
        self.assertIsNone(args.expr)

    def test_expr(self):
        self.assertEqual(["y"], self.run_main("-e", "((x.x) y)"))
        self.assertEqual(["{b c}"], self.run_main("--expr", "(eval {tl {a b c}})"))

    def test_expr_tree(self):
        self.assertEqual(["Constant(expr='x')"], self.run_main("--tree", "-e", "x"))

    def test_expr_trace(self):
        output = self.run_main("--trace", "-e", "((x.x) y)")
        self.assertEqual("y", output[-1])
        self.assertTrue(any("β" in line for line in output[:-1]))

    def test_expr_parse_error(self):
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit) as context:
                main(["-e", "(x)"])
        self.assertEqual(1, context.exception.code)

    def test_file(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "lists.lc")
            with open(path, "w", encoding="utf-8") as file:
                file.write("(hd {a b})\n;; skipped\n((f.(f {a b})) tl)\n")

            self.assertEqual(["{a}", "{b}"], self.run_main(path))
            self.assertEqual(2, len([line for line in self.run_main("--tree", path) if line.startswith("Application")]))

    def test_file_prints_results_before_divergence(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "diverges.lc")
            with open(path, "w", encoding="utf-8") as file:
                file.write("((x.x) a)\n((x.(x x)) (x.(x x)))\n")

            output = io.StringIO()
            with redirect_stdout(output):
                with self.assertRaises(SystemExit) as context:
                    main([path])

        self.assertEqual(1, context.exception.code)
        lines = output.getvalue().splitlines()
        self.assertEqual("a", lines[0])
        self.assertTrue(any("maximum recursion depth exceeded" in line for line in lines[1:]))

    def test_file_trace_interleaved(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "traced.lc")
            with open(path, "w", encoding="utf-8") as file:
                file.write("((x.x) a)\n((y.y) b)\n")

            output = self.run_main("--trace", path)

        self.assertEqual(4, len(output))
        self.assertIn("β", output[0])
        self.assertEqual("a", output[1])
        self.assertIn("β", output[2])
        self.assertEqual("b", output[3])

    def test_file_and_expr_rejected(self):
        with redirect_stderr(io.StringIO()) as errors:
            with self.assertRaises(SystemExit) as context:
                main(["prog.lc", "-e", "x"])
        self.assertEqual(2, context.exception.code)
        self.assertIn("cannot be used together", errors.getvalue())


if __name__ == '__main__':
    unittest.main()
