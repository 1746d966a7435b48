"""
Unit tests for the `flask calculator` CLI commands.
"""
import unittest

from flask import Flask

from app.projects.calculator import commands


def _create_test_app():
    """Minimal app with only the calculator CLI registered."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    commands.init_app(app)
    return app


class TestRunCommand(unittest.TestCase):

    def setUp(self):
        self.app = _create_test_app()
        self.runner = self.app.test_cli_runner()

    def test_compact_keys(self):
        result = self.runner.invoke(args=["calculator", "run", "2+3x4="])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), "20")

    def test_separate_keys_and_named_keys(self):
        result = self.runner.invoke(args=["calculator", "run", "1", "/", "3", "Enter"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), "0.33333333")

    def test_trace_prints_each_key(self):
        result = self.runner.invoke(args=["calculator", "run", "--trace", "2+3+"])
        self.assertEqual(result.exit_code, 0, result.output)
        lines = result.output.strip().splitlines()
        self.assertEqual(len(lines), 5)
        self.assertTrue(lines[3].endswith("5 *"))
        self.assertEqual(lines[-1], "5")

    def test_division_by_zero_exits_nonzero(self):
        result = self.runner.invoke(args=["calculator", "run", "5/0="])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error: Division by zero", result.output)

    def test_error_stops_before_remaining_keys(self):
        result = self.runner.invoke(args=["calculator", "run", "--trace", "5/0=1"])
        self.assertEqual(result.exit_code, 1)
        self.assertNotIn("    1", result.output)

    def test_unknown_key_is_usage_error(self):
        result = self.runner.invoke(args=["calculator", "run", "2%3"])
        self.assertEqual(result.exit_code, 2)
        self.assertIn("Unknown key", result.output)


if __name__ == "__main__":
    unittest.main()
