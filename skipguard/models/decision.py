from enum import Enum
from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field

from .workflow_run import WorkflowRun


class DecisionStage(str, Enum):
    SETUP_FAILURE = "setup_failure"
    DO_NOT_SKIP = "do_not_skip"
    DUPLICATE = "duplicate"
    CONCURRENT_TRIGGER = "concurrent_trigger"
    BACKTRACE = "backtrace"
    DEFAULT = "default"


class Verdict(BaseModel):
    """Final skip decision; the first stage producing one ends the evaluation."""

    should_skip: bool
    stage: DecisionStage
    reason: str = ""

    model_config = ConfigDict(frozen=True)


class Fatal(BaseModel):
    """Unrecoverable outcome: bad configuration or unusable run data."""

    message: str

    model_config = ConfigDict(frozen=True)


ActionOutcome = Union[Verdict, Fatal]


class DecisionContext(BaseModel):
    current_run: WorkflowRun
    # Only runs created strictly before current_run.
    other_runs: List[WorkflowRun] = Field(default_factory=list)
    all_runs: List[WorkflowRun] = Field(default_factory=list)
    paths_ignore: List[str] = Field(default_factory=list)
    paths: List[str] = Field(default_factory=list)
    do_not_skip: List[str] = Field(default_factory=list)
    concurrent_skipping: bool = True

    model_config = ConfigDict(frozen=True)
