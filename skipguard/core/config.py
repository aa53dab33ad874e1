"""Action inputs and runner environment.

GitHub Actions exposes each ``with:`` input as an ``INPUT_<NAME>`` environment
variable and describes the running workflow through ``GITHUB_*`` variables.
Both are read with pydantic-settings; array inputs are strictly validated
into typed lists.
"""

from __future__ import annotations

import json
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, StrictStr, TypeAdapter, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from .exceptions import ConfigurationError

_STRING_LIST = TypeAdapter(List[StrictStr])


class ActionInputs(BaseSettings):
    """Raw, unvalidated action inputs."""

    github_token: str = ""
    paths_ignore: str = ""
    paths: str = ""
    do_not_skip: str = ""
    cancel_others: str = ""
    concurrent_skipping: str = ""

    model_config = SettingsConfigDict(
        env_prefix="INPUT_", env_ignore_empty=True, extra="ignore"
    )

    def get_string(self, name: str, required: bool = False) -> str:
        value = (getattr(self, name, "") or "").strip()
        if required and not value:
            raise ConfigurationError(f"Input required and not supplied: {name}")
        return value

    def get_bool(self, name: str, default: bool) -> bool:
        raw = self.get_string(name)
        if not raw:
            return default
        if default:
            return raw.lower() != "false"
        return raw.lower() == "true"

    def get_string_array(self, name: str) -> List[str]:
        raw = self.get_string(name)
        if not raw:
            return []
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Input '{raw}' is not a valid JSON") from exc
        if not isinstance(decoded, list):
            raise ConfigurationError(f"Input '{raw}' is not a JSON-array")
        try:
            return _STRING_LIST.validate_python(decoded)
        except ValidationError as exc:
            element = exc.errors()[0].get("input")
            raise ConfigurationError(
                f"Element '{element}' of input '{raw}' is not a string"
            ) from exc


class SkipSettings(BaseModel):
    github_token: str
    paths_ignore: List[str] = Field(default_factory=list)
    paths: List[str] = Field(default_factory=list)
    do_not_skip: List[str] = Field(default_factory=list)
    cancel_others: bool = True
    concurrent_skipping: bool = True

    @classmethod
    def from_inputs(cls, inputs: ActionInputs) -> "SkipSettings":
        return cls(
            github_token=inputs.get_string("github_token", required=True),
            paths_ignore=inputs.get_string_array("paths_ignore"),
            paths=inputs.get_string_array("paths"),
            do_not_skip=inputs.get_string_array("do_not_skip"),
            cancel_others=inputs.get_bool("cancel_others", True),
            concurrent_skipping=inputs.get_bool("concurrent_skipping", True),
        )


class RunnerEnvironment(BaseSettings):
    """Workflow context provided by the Actions runner."""

    github_repository: str = ""
    github_run_id: Optional[int] = None
    github_api_url: str = "https://api.github.com"
    github_output: Optional[str] = None
    runner_debug: str = ""
    skipguard_log_json: bool = False

    model_config = SettingsConfigDict(env_ignore_empty=True, extra="ignore")

    @property
    def owner(self) -> str:
        return self.github_repository.partition("/")[0]

    @property
    def repo(self) -> str:
        return self.github_repository.partition("/")[2]

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.runner_debug == "1" else "INFO"

    def require_workflow_context(self) -> None:
        if not self.owner:
            raise ConfigurationError("Did not find the repo owner")
        if not self.repo:
            raise ConfigurationError("Did not find the repo name")
        if not self.github_run_id:
            raise ConfigurationError("Did not find runId")


def load_settings() -> Tuple[SkipSettings, RunnerEnvironment]:
    try:
        inputs = ActionInputs()
        environment = RunnerEnvironment()
    except (ValidationError, SettingsError) as exc:
        raise ConfigurationError(f"Invalid runner configuration: {exc}") from exc
    skip_settings = SkipSettings.from_inputs(inputs)
    environment.require_workflow_context()
    return skip_settings, environment
