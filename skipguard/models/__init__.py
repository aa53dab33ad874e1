from .commit import CommitDetails
from .decision import DecisionContext, DecisionStage, Fatal, Verdict
from .workflow_run import (
    RunConclusion,
    RunStatus,
    TriggerEvent,
    WorkflowRun,
    WorkflowRunListing,
)

__all__ = [
    "CommitDetails",
    "DecisionContext",
    "DecisionStage",
    "Fatal",
    "RunConclusion",
    "RunStatus",
    "TriggerEvent",
    "Verdict",
    "WorkflowRun",
    "WorkflowRunListing",
]
