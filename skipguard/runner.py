"""Process entry point: wires settings, GitHub and the decision engine together."""

from __future__ import annotations

import asyncio
import logging
import sys

from skipguard.core.config import RunnerEnvironment, SkipSettings, load_settings
from skipguard.core.exceptions import ConfigurationError, RunParseError
from skipguard.core.logging import setup_logging
from skipguard.core.reporter import ActionsReporter, Reporter
from skipguard.models.decision import ActionOutcome, Fatal, Verdict
from skipguard.services.decision_engine import SkipDecisionEngine
from skipguard.services.github.github_client import GitHubClient
from skipguard.services.github.run_source import GitHubRunSource, RunSource

logger = logging.getLogger(__name__)


async def evaluate(source: RunSource, settings: SkipSettings, reporter: Reporter) -> ActionOutcome:
    engine = SkipDecisionEngine(source, settings, reporter)
    try:
        return await engine.decide()
    except RunParseError as exc:
        return Fatal(message=str(exc))


async def run_action(
    settings: SkipSettings, environment: RunnerEnvironment, reporter: Reporter
) -> ActionOutcome:
    async with GitHubClient(
        token=settings.github_token, api_url=environment.github_api_url
    ) as client:
        source = GitHubRunSource(
            client, environment.owner, environment.repo, environment.github_run_id
        )
        return await evaluate(source, settings, reporter)


def report_outcome(outcome: ActionOutcome, reporter: Reporter) -> int:
    if isinstance(outcome, Verdict):
        reporter.set_output("should_skip", outcome.should_skip)
        return 0
    reporter.fail(outcome.message)
    return 1


def main() -> None:
    setup_logging()
    try:
        settings, environment = load_settings()
    except ConfigurationError as exc:
        sys.exit(report_outcome(Fatal(message=str(exc)), ActionsReporter()))

    setup_logging(
        environment.log_level,
        json_format=environment.skipguard_log_json,
        workflow={
            "repository": environment.github_repository,
            "run_id": environment.github_run_id,
        },
    )
    reporter = ActionsReporter(output_path=environment.github_output)
    try:
        outcome = asyncio.run(run_action(settings, environment, reporter))
    except Exception as exc:
        logger.exception("Unexpected failure while deciding whether to skip")
        outcome = Fatal(message=str(exc) or exc.__class__.__name__)
    sys.exit(report_outcome(outcome, reporter))
