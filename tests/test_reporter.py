import io
import os
import tempfile
import unittest

from skipguard.core.reporter import ActionsReporter


class TestActionsReporter(unittest.TestCase):
    def setUp(self):
        handle, self.output_path = tempfile.mkstemp()
        os.close(handle)
        self.stream = io.StringIO()

    def tearDown(self):
        os.remove(self.output_path)

    def test_set_output_appends_to_output_file(self):
        reporter = ActionsReporter(output_path=self.output_path, stream=self.stream)
        reporter.set_output("should_skip", True)
        reporter.set_output("should_skip", False)

        with open(self.output_path, encoding="utf-8") as handle:
            self.assertEqual(handle.read(), "should_skip=true\nshould_skip=false\n")

    def test_warning_and_failure_emit_workflow_commands(self):
        reporter = ActionsReporter(stream=self.stream)
        with self.assertLogs("skipguard", level="WARNING"):
            reporter.warning("Failed to cancel run 1")
            reporter.fail("100% broken\nsecond line")

        self.assertEqual(
            self.stream.getvalue().splitlines(),
            ["::warning::Failed to cancel run 1", "::error::100%25 broken%0Asecond line"],
        )

    def test_info_is_logged_only(self):
        reporter = ActionsReporter(stream=self.stream)
        with self.assertLogs("skipguard", level="INFO") as logs:
            reporter.info("Did not find other workflow-runs to be cancelled")

        self.assertIn("Did not find other workflow-runs to be cancelled", logs.output[0])
        self.assertEqual(self.stream.getvalue(), "")

    def test_set_output_without_output_file_uses_workflow_command(self):
        reporter = ActionsReporter(stream=self.stream)
        reporter.set_output("should_skip", False)
        reporter.set_output("should_skip", True)

        self.assertEqual(
            self.stream.getvalue().splitlines(),
            ["::set-output name=should_skip::false", "::set-output name=should_skip::true"],
        )

    def test_output_file_takes_precedence_over_workflow_command(self):
        reporter = ActionsReporter(output_path=self.output_path, stream=self.stream)
        reporter.set_output("should_skip", True)

        self.assertEqual(self.stream.getvalue(), "")


if __name__ == "__main__":
    unittest.main()
