"""Where the decision engine gets its workflow runs and commits from."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from pydantic import ValidationError

from skipguard.models.commit import CommitDetails
from skipguard.models.workflow_run import WorkflowRun, WorkflowRunListing

from .exceptions import GithubError
from .github_client import GitHubClient

logger = logging.getLogger(__name__)


class RunSource(Protocol):
    async def get_current_run(self) -> WorkflowRun: ...

    async def list_runs_for_workflow(self, current_run: WorkflowRun) -> WorkflowRunListing: ...

    async def get_commit(self, sha: str) -> Optional[CommitDetails]: ...

    async def cancel_run(self, run_id: int) -> Optional[int]: ...


class GitHubRunSource:
    """RunSource backed by the GitHub REST API for one repository and run."""

    def __init__(self, client: GitHubClient, owner: str, repo: str, run_id: int):
        self._client = client
        self._full_name = f"{owner}/{repo}"
        self._run_id = run_id

    async def get_current_run(self) -> WorkflowRun:
        raw = await self._client.get_workflow_run(self._full_name, self._run_id)
        return WorkflowRun.from_api(raw)

    async def list_runs_for_workflow(self, current_run: WorkflowRun) -> WorkflowRunListing:
        raw_runs = await self._client.list_workflow_runs(
            self._full_name, current_run.workflow_id
        )
        runs = [WorkflowRun.from_api(raw) for raw in raw_runs]
        logger.debug(
            "Fetched %d runs of workflow %s", len(runs), current_run.workflow_id
        )
        return WorkflowRunListing.partition(runs, current_run)

    async def get_commit(self, sha: str) -> Optional[CommitDetails]:
        if not sha:
            return None
        try:
            raw = await self._client.get_commit(self._full_name, sha)
            return CommitDetails.from_api(raw)
        except (GithubError, ValidationError) as exc:
            logger.warning("Failed to retrieve commit %s: %s", sha, exc)
            return None

    async def cancel_run(self, run_id: int) -> Optional[int]:
        try:
            return await self._client.cancel_workflow_run(self._full_name, run_id)
        except GithubError as exc:
            logger.warning("Cancel request for run %s failed: %s", run_id, exc)
            return None
