"""Logging setup for the action process."""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, Mapping, Optional

from opentelemetry import trace
from pythonjsonlogger import jsonlogger

JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s"
PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _trace_fields() -> Dict[str, str]:
    ctx = trace.get_current_span().get_span_context()
    if not ctx.is_valid:
        return {}
    return {
        "trace_id": trace.format_trace_id(ctx.trace_id),
        "span_id": trace.format_span_id(ctx.span_id),
    }


class WorkflowJSONFormatter(jsonlogger.JsonFormatter):
    """
    One JSON object per line, tagged with the workflow run being decided.

    ``workflow`` fields (repository, run id) are attached to every record
    so that lines from concurrent runs of the same workflow can be told
    apart. Records emitted inside a ``skipguard.*`` span also carry its
    trace and span ids.
    """

    def __init__(self, *args: Any, workflow: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        kwargs.setdefault("rename_fields", {"asctime": "timestamp", "levelname": "level"})
        super().__init__(*args, **kwargs)
        self.workflow = {key: value for key, value in (workflow or {}).items() if value is not None}

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        for key, value in self.workflow.items():
            log_record.setdefault(key, value)
        log_record.update(_trace_fields())
        log_record["level"] = record.levelname


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    workflow: Optional[Mapping[str, Any]] = None,
) -> None:
    """
    Configure the root logger on stdout, where the runner collects step logs.

    Calling it again replaces the handler, so the process can log before
    its settings are loaded and switch format afterwards.
    """
    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        handler.setFormatter(WorkflowJSONFormatter(JSON_FIELDS, workflow=workflow))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
