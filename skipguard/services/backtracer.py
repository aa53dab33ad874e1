"""First-parent history walk for path-filtered skipping."""

from __future__ import annotations

import logging
from typing import Optional

from opentelemetry import trace

from skipguard.core.reporter import Reporter
from skipguard.models.commit import CommitDetails
from skipguard.models.decision import DecisionContext, DecisionStage, Verdict
from skipguard.models.workflow_run import WorkflowRun
from skipguard.services.github.run_source import RunSource
from skipguard.services.path_matcher import PathMatcher

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

MAX_BACKTRACE_DEPTH = 50


class HistoryBacktracer:
    """
    Walks back from the current commit through commits that only touch
    ignored or skipped paths. If such a walk reaches a tree that already has
    a successful run, everything since that run is irrelevant to the build
    outcome and the current run can be skipped.
    """

    def __init__(
        self,
        source: RunSource,
        reporter: Reporter,
        max_depth: int = MAX_BACKTRACE_DEPTH,
    ):
        self._source = source
        self._reporter = reporter
        self._max_depth = max_depth

    async def backtrace(self, context: DecisionContext) -> Optional[Verdict]:
        matcher = PathMatcher(context.paths_ignore, context.paths)
        sha: Optional[str] = context.current_run.commit_hash

        with tracer.start_as_current_span("skipguard.backtrace") as span:
            for distance in range(self._max_depth):
                span.set_attribute("skipguard.backtrace.distance", distance)
                commit = await self._source.get_commit(sha) if sha else None
                if commit is None:
                    return None

                successful_run = self._find_successful_run(commit, context)
                if successful_run:
                    return Verdict(
                        should_skip=True,
                        stage=DecisionStage.BACKTRACE,
                        reason=(
                            f"Skip execution because all changes since {successful_run.html_url} "
                            "are in ignored or skipped paths"
                        ),
                    )

                if not self._is_skippable(commit, matcher):
                    return None
                sha = commit.first_parent
                if not sha:
                    return None

        # Expected depth is 1-3 commits; this only triggers on pathological histories.
        self._reporter.warning(
            "Aborted commit-backtracing due to bad performance - "
            "Did you push an excessive number of ignored-path-commits?"
        )
        return None

    @staticmethod
    def _find_successful_run(
        commit: CommitDetails, context: DecisionContext
    ) -> Optional[WorkflowRun]:
        for run in context.other_runs:
            if run.tree_hash == commit.tree_hash and run.is_successful:
                return run
        return None

    def _is_skippable(self, commit: CommitDetails, matcher: PathMatcher) -> bool:
        changed = commit.changed_files
        if matcher.is_path_ignored(changed):
            self._reporter.info(
                f"Commit {commit.html_url} is path-ignored: All of '{changed}' "
                f"match against patterns '{matcher.paths_ignore}'"
            )
            return True
        if matcher.is_path_skipped(changed):
            self._reporter.info(
                f"Commit {commit.html_url} is path-skipped: None of '{changed}' "
                f"matches against patterns '{matcher.paths}'"
            )
            return True
        logger.debug("Commit %s touches relevant paths; stopping backtrace", commit.sha)
        return False
