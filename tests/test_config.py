import os
import unittest
from unittest import mock

from skipguard.core.config import ActionInputs, RunnerEnvironment, SkipSettings, load_settings
from skipguard.core.exceptions import ConfigurationError

RUNNER_ENV = {
    "GITHUB_REPOSITORY": "acme/widgets",
    "GITHUB_RUN_ID": "4242",
    "INPUT_GITHUB_TOKEN": "ghs_test",
}


class TestActionInputs(unittest.TestCase):
    def test_defaults_when_inputs_are_empty(self):
        env = dict(RUNNER_ENV, INPUT_PATHS="", INPUT_CANCEL_OTHERS="")
        with mock.patch.dict(os.environ, env, clear=True):
            skip_settings = SkipSettings.from_inputs(ActionInputs())

        self.assertEqual(skip_settings.paths, [])
        self.assertEqual(skip_settings.paths_ignore, [])
        self.assertEqual(skip_settings.do_not_skip, [])
        self.assertTrue(skip_settings.cancel_others)
        self.assertTrue(skip_settings.concurrent_skipping)

    def test_parses_json_arrays_and_booleans(self):
        env = dict(
            RUNNER_ENV,
            INPUT_PATHS_IGNORE='["**/*.md", "docs/**"]',
            INPUT_PATHS='["src/**"]',
            INPUT_DO_NOT_SKIP='["pull_request", "workflow_dispatch", "schedule"]',
            INPUT_CANCEL_OTHERS="FALSE",
            INPUT_CONCURRENT_SKIPPING="yes",
        )
        with mock.patch.dict(os.environ, env, clear=True):
            skip_settings = SkipSettings.from_inputs(ActionInputs())

        self.assertEqual(skip_settings.paths_ignore, ["**/*.md", "docs/**"])
        self.assertEqual(skip_settings.paths, ["src/**"])
        self.assertEqual(
            skip_settings.do_not_skip, ["pull_request", "workflow_dispatch", "schedule"]
        )
        self.assertFalse(skip_settings.cancel_others)
        self.assertTrue(skip_settings.concurrent_skipping)

    def test_bool_with_false_default_needs_explicit_true(self):
        inputs = ActionInputs(cancel_others="yes")
        self.assertFalse(inputs.get_bool("cancel_others", False))
        inputs = ActionInputs(cancel_others="True")
        self.assertTrue(inputs.get_bool("cancel_others", False))

    def test_invalid_json_is_fatal(self):
        inputs = ActionInputs(paths="[src/**")
        with self.assertRaisesRegex(ConfigurationError, "not a valid JSON"):
            inputs.get_string_array("paths")

    def test_non_array_is_fatal(self):
        inputs = ActionInputs(paths='{"src": true}')
        with self.assertRaisesRegex(ConfigurationError, "not a JSON-array"):
            inputs.get_string_array("paths")

    def test_non_string_element_is_fatal(self):
        inputs = ActionInputs(paths_ignore='["docs/**", 3]')
        with self.assertRaisesRegex(ConfigurationError, "Element '3'"):
            inputs.get_string_array("paths_ignore")

    def test_missing_token_is_fatal(self):
        env = {k: v for k, v in RUNNER_ENV.items() if k != "INPUT_GITHUB_TOKEN"}
        with mock.patch.dict(os.environ, env, clear=True):
            with self.assertRaisesRegex(ConfigurationError, "github_token"):
                load_settings()


class TestRunnerEnvironment(unittest.TestCase):
    def test_load_settings_reads_workflow_context(self):
        env = dict(RUNNER_ENV, RUNNER_DEBUG="1", GITHUB_OUTPUT="/tmp/out")
        with mock.patch.dict(os.environ, env, clear=True):
            skip_settings, environment = load_settings()

        self.assertEqual(skip_settings.github_token, "ghs_test")
        self.assertEqual(environment.owner, "acme")
        self.assertEqual(environment.repo, "widgets")
        self.assertEqual(environment.github_run_id, 4242)
        self.assertEqual(environment.github_api_url, "https://api.github.com")
        self.assertEqual(environment.github_output, "/tmp/out")
        self.assertEqual(environment.log_level, "DEBUG")

    def test_missing_repository_is_fatal(self):
        env = {k: v for k, v in RUNNER_ENV.items() if k != "GITHUB_REPOSITORY"}
        with mock.patch.dict(os.environ, env, clear=True):
            with self.assertRaisesRegex(ConfigurationError, "repo owner"):
                load_settings()

    def test_missing_run_id_is_fatal(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            environment = RunnerEnvironment(github_repository="acme/widgets")
        with self.assertRaisesRegex(ConfigurationError, "runId"):
            environment.require_workflow_context()

    def test_non_numeric_run_id_is_fatal(self):
        env = dict(RUNNER_ENV, GITHUB_RUN_ID="latest")
        with mock.patch.dict(os.environ, env, clear=True):
            with self.assertRaises(ConfigurationError):
                load_settings()


if __name__ == "__main__":
    unittest.main()
