from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from skipguard.core.exceptions import RunParseError


class RunStatus(str, Enum):
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class RunConclusion(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    NEUTRAL = "neutral"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"
    TIMED_OUT = "timed_out"


class TriggerEvent(str, Enum):
    PULL_REQUEST = "pull_request"
    PUSH = "push"
    WORKFLOW_DISPATCH = "workflow_dispatch"
    SCHEDULE = "schedule"


class WorkflowRun(BaseModel):
    """Snapshot of one workflow execution as reported by the Actions API."""

    # Unknown events and statuses are kept verbatim rather than rejected.
    event: str
    tree_hash: str
    commit_hash: str
    status: str
    conclusion: Optional[str] = None
    html_url: str = ""
    branch: Optional[str] = None
    run_id: int
    workflow_id: int
    created_at: datetime

    model_config = ConfigDict(frozen=True)

    @property
    def is_completed(self) -> bool:
        return self.status == RunStatus.COMPLETED

    @property
    def is_successful(self) -> bool:
        return self.is_completed and self.conclusion == RunConclusion.SUCCESS

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "WorkflowRun":
        head_commit = raw.get("head_commit") or {}
        tree_hash = head_commit.get("tree_id")
        if not tree_hash:
            raise RunParseError(
                f"Could not find the tree hash of run {raw.get('html_url') or raw.get('id')}"
            )
        workflow_id = raw.get("workflow_id")
        if not workflow_id:
            raise RunParseError(
                f"Could not find the workflow id of run {raw.get('html_url') or raw.get('id')}"
            )
        try:
            return cls(
                event=raw.get("event") or "",
                tree_hash=tree_hash,
                commit_hash=raw.get("head_sha") or "",
                status=raw.get("status") or "",
                conclusion=raw.get("conclusion"),
                html_url=raw.get("html_url") or "",
                branch=raw.get("head_branch"),
                run_id=raw.get("id"),
                workflow_id=workflow_id,
                created_at=raw.get("created_at"),
            )
        except ValidationError as exc:
            raise RunParseError(f"Malformed workflow run {raw.get('html_url')}: {exc}") from exc


class WorkflowRunListing(BaseModel):
    """Runs of one workflow, split around the current run's creation time."""

    other_runs: List[WorkflowRun] = Field(default_factory=list)
    all_runs: List[WorkflowRun] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def partition(
        cls, runs: List[WorkflowRun], current_run: WorkflowRun
    ) -> "WorkflowRunListing":
        # Runs created after the current one are left out of other_runs to
        # avoid racing against workflows that started later.
        older = [run for run in runs if run.created_at < current_run.created_at]
        return cls(other_runs=older, all_runs=list(runs))
