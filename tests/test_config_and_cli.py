from __future__ import annotations

import io
import os
import unittest
from unittest import mock

from rpn_jax.cli import build_parser, main
from rpn_jax.config import CalculatorConfig


class CalculatorConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = CalculatorConfig.from_env({})
        self.assertEqual(config, CalculatorConfig())
        self.assertEqual(config.precision, 15)
        self.assertEqual(config.display_precision, 10)
        self.assertEqual(config.operand, "decimal")
        self.assertFalse(config.parallel_evaluate)
        self.assertIsNone(config.max_workers)
        self.assertEqual(config.log_level, "WARNING")

    def test_environment_overrides(self) -> None:
        config = CalculatorConfig.from_env(
            {
                "RPN_JAX_PRECISION": "8",
                "RPN_JAX_DISPLAY_PRECISION": "3",
                "RPN_JAX_OPERAND": "Array",
                "RPN_JAX_PARALLEL_EVALUATE": "1",
                "RPN_JAX_MAX_WORKERS": "2",
                "RPN_JAX_LOG_LEVEL": "debug",
            }
        )
        self.assertEqual(config.precision, 8)
        self.assertEqual(config.display_precision, 3)
        self.assertEqual(config.operand, "array")
        self.assertTrue(config.parallel_evaluate)
        self.assertEqual(config.max_workers, 2)
        self.assertEqual(config.log_level, "DEBUG")

    def test_values_are_clamped_and_validated(self) -> None:
        config = CalculatorConfig(precision=0, display_precision=-3, max_workers=0)
        self.assertEqual((config.precision, config.display_precision, config.max_workers), (1, 0, 1))
        with self.assertRaises(ValueError):
            CalculatorConfig(operand="complex")
        with self.assertRaises(ValueError):
            CalculatorConfig(log_level="loud")

    def test_with_overrides_skips_none(self) -> None:
        config = CalculatorConfig().with_overrides(precision=None, display_precision=4)
        self.assertEqual(config.precision, 15)
        self.assertEqual(config.display_precision, 4)


class CommandLineTests(unittest.TestCase):
    def setUp(self) -> None:
        clean = {key: value for key, value in os.environ.items() if not key.startswith("RPN_JAX_")}
        patcher = mock.patch.dict(os.environ, clean, clear=True)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_one_shot_tokens(self) -> None:
        out = io.StringIO()
        status = main(["5", "2", "-", "9", "sqrt"], stdout=out)
        self.assertEqual(status, 0)
        self.assertEqual(out.getvalue(), "Stack: 3 3\n")

    def test_one_shot_reports_build_failure(self) -> None:
        out = io.StringIO()
        status = main(["1", "+"], stdout=out)
        self.assertEqual(status, 1)
        self.assertEqual(
            out.getvalue().splitlines(),
            ["Operator '+' (position 2), insufficient parameter", "Stack: 1"],
        )

    def test_one_shot_renders_arithmetic_failures_inline(self) -> None:
        out = io.StringIO()
        self.assertEqual(main(["1", "0", "/", "4"], stdout=out), 0)
        self.assertEqual(out.getvalue(), "Stack: Division by zero 4\n")

    def test_precision_flags(self) -> None:
        out = io.StringIO()
        main(["--display-precision", "3", "2", "sqrt"], stdout=out)
        self.assertEqual(out.getvalue(), "Stack: 1.414\n")

    def test_parallel_flag_can_override_the_environment_both_ways(self) -> None:
        parser = build_parser(CalculatorConfig(parallel_evaluate=True))
        self.assertTrue(parser.parse_args([]).parallel)
        self.assertFalse(parser.parse_args(["--no-parallel"]).parallel)
        self.assertTrue(build_parser(CalculatorConfig()).parse_args(["--parallel"]).parallel)

    def test_one_shot_large_literal(self) -> None:
        out = io.StringIO()
        self.assertEqual(main(["1e30", "1e30", "*"], stdout=out), 0)
        self.assertEqual(out.getvalue(), "Stack: 1" + "0" * 60 + "\n")

    def test_interactive_loop_until_quit(self) -> None:
        stdin = io.StringIO("5 2\nundo 3 *\nfoo\nquit\n1 2\n")
        out = io.StringIO()
        self.assertEqual(main([], stdin=stdin, stdout=out), 0)
        lines = out.getvalue().splitlines()
        prompt = "Enter list of numbers and operators. Supported Operators are: + - * / sqrt clear undo."
        self.assertEqual(
            lines,
            [
                prompt,
                "Stack: 5 2",
                prompt,
                "Stack: 15",
                prompt,
                "Unknown element or operator: foo",
                "Stack: 15",
                prompt,
            ],
        )

    def test_interactive_loop_ends_on_eof(self) -> None:
        out = io.StringIO()
        self.assertEqual(main([], stdin=io.StringIO("clear\n"), stdout=out), 0)
        self.assertIn("Stack: ", out.getvalue().splitlines())


if __name__ == "__main__":
    unittest.main()
