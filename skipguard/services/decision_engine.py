"""Ordered skip/cancel rules for one workflow run."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from opentelemetry import trace

from skipguard.core.config import SkipSettings
from skipguard.core.exceptions import RunParseError
from skipguard.core.reporter import Reporter
from skipguard.models.decision import DecisionContext, DecisionStage, Verdict
from skipguard.models.workflow_run import TriggerEvent, WorkflowRun
from skipguard.services.backtracer import HistoryBacktracer
from skipguard.services.github.exceptions import GithubError
from skipguard.services.github.run_source import RunSource

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class SkipDecisionEngine:
    """
    Decides whether the current workflow run is redundant.

    Stages run in a fixed order and the first one returning a Verdict wins:
    cancellation of outdated runs (side effect only), the ``do_not_skip``
    opt-out, duplicate detection, explicit concurrent-trigger detection and
    finally path-filtered history backtracing. Nothing here terminates the
    process; callers receive the Verdict and report it.
    """

    def __init__(
        self,
        source: RunSource,
        settings: SkipSettings,
        reporter: Reporter,
        backtracer: Optional[HistoryBacktracer] = None,
    ):
        self._source = source
        self._settings = settings
        self._reporter = reporter
        self._backtracer = backtracer or HistoryBacktracer(source, reporter)

    async def decide(self) -> Verdict:
        with tracer.start_as_current_span("skipguard.decide") as span:
            verdict = await self._evaluate()
            span.set_attribute("skipguard.stage", verdict.stage.value)
            span.set_attribute("skipguard.should_skip", verdict.should_skip)
        self._reporter.info(verdict.reason)
        return verdict

    async def _evaluate(self) -> Verdict:
        context = await self.load_context()
        if context is None:
            return Verdict(
                should_skip=False,
                stage=DecisionStage.SETUP_FAILURE,
                reason="Do not skip execution because the workflow information could not be fetched",
            )

        if self._settings.cancel_others:
            await self.cancel_outdated_runs(context)

        stages: List[Callable[[DecisionContext], Optional[Verdict]]] = [
            self.check_do_not_skip,
            self.detect_duplicate_runs,
            self.detect_concurrent_trigger,
        ]
        for stage in stages:
            verdict = stage(context)
            if verdict is not None:
                return verdict

        verdict = await self.backtrace_path_skipping(context)
        if verdict is not None:
            return verdict

        return Verdict(
            should_skip=False,
            stage=DecisionStage.DEFAULT,
            reason="Do not skip execution because we did not find a transferable run",
        )

    async def load_context(self) -> Optional[DecisionContext]:
        """Fetch the current run and its siblings; None when fetching fails."""
        try:
            current_run = await self._source.get_current_run()
            listing = await self._source.list_runs_for_workflow(current_run)
        except RunParseError:
            raise
        except Exception as exc:
            self._reporter.warning(str(exc) or type(exc).__name__)
            self._reporter.warning("Failed to fetch the required workflow information")
            return None

        logger.debug(
            "Loaded run %s with %d older and %d total sibling runs",
            current_run.run_id,
            len(listing.other_runs),
            len(listing.all_runs),
        )
        return DecisionContext(
            current_run=current_run,
            other_runs=listing.other_runs,
            all_runs=listing.all_runs,
            paths_ignore=self._settings.paths_ignore,
            paths=self._settings.paths,
            do_not_skip=self._settings.do_not_skip,
            concurrent_skipping=self._settings.concurrent_skipping,
        )

    async def cancel_outdated_runs(self, context: DecisionContext) -> List[WorkflowRun]:
        current = context.current_run
        victims = [
            run
            for run in context.other_runs
            if not run.is_completed
            and run.tree_hash != current.tree_hash
            and run.branch == current.branch
        ]
        if not victims:
            self._reporter.info("Did not find other workflow-runs to be cancelled")
            return []

        cancelled: List[WorkflowRun] = []
        for victim in victims:
            try:
                status_code = await self._source.cancel_run(victim.run_id)
            except GithubError as exc:
                self._reporter.warning(str(exc))
                status_code = None
            if status_code is None:
                self._reporter.warning(f"Failed to cancel {victim.html_url}")
                continue
            self._reporter.info(f"Cancelled {victim.html_url} with response code {status_code}")
            cancelled.append(victim)
        return cancelled

    def check_do_not_skip(self, context: DecisionContext) -> Optional[Verdict]:
        event = context.current_run.event
        if event in context.do_not_skip:
            return Verdict(
                should_skip=False,
                stage=DecisionStage.DO_NOT_SKIP,
                reason=f"Do not skip execution because the workflow was triggered with '{event}'",
            )
        return None

    def detect_duplicate_runs(self, context: DecisionContext) -> Optional[Verdict]:
        current = context.current_run
        duplicates = [run for run in context.other_runs if run.tree_hash == current.tree_hash]

        # A successful run is reused across branches; only concurrent runs are branch-bound.
        successful = next((run for run in duplicates if run.is_successful), None)
        if successful:
            return Verdict(
                should_skip=True,
                stage=DecisionStage.DUPLICATE,
                reason=(
                    "Skip execution because the exact same files have been "
                    f"successfully checked in {successful.html_url}"
                ),
            )

        if not context.concurrent_skipping:
            return None
        concurrent = next(
            (run for run in duplicates if self._is_concurrent_duplicate(run, current)), None
        )
        if concurrent:
            return Verdict(
                should_skip=True,
                stage=DecisionStage.DUPLICATE,
                reason=(
                    "Skip execution because the exact same files are "
                    f"concurrently checked in {concurrent.html_url}"
                ),
            )
        return None

    def _is_concurrent_duplicate(self, run: WorkflowRun, current: WorkflowRun) -> bool:
        if run.is_completed:
            return False
        if current.branch and run.branch and current.branch != run.branch:
            # Cross-branch skipping would undermine merge-safety checks.
            self._reporter.info(
                "The exact same files are concurrently checked on a different "
                f"branch in {run.html_url}"
            )
            return False
        return True

    def detect_concurrent_trigger(self, context: DecisionContext) -> Optional[Verdict]:
        explicit_triggers = {TriggerEvent.PULL_REQUEST.value, TriggerEvent.PUSH.value}
        if not explicit_triggers.intersection(context.do_not_skip):
            return None
        if not context.concurrent_skipping:
            return None

        current = context.current_run
        duplicate = next(
            (
                run
                for run in context.all_runs
                if run.tree_hash == current.tree_hash and run.run_id != current.run_id
            ),
            None,
        )
        if duplicate:
            return Verdict(
                should_skip=True,
                stage=DecisionStage.CONCURRENT_TRIGGER,
                reason=(
                    f"Skip execution because this is a '{current.event}'-trigger and the "
                    f"exact same files are concurrently checked in {duplicate.html_url}"
                ),
            )
        return None

    async def backtrace_path_skipping(self, context: DecisionContext) -> Optional[Verdict]:
        if not (context.paths or context.paths_ignore):
            return None
        return await self._backtracer.backtrace(context)
