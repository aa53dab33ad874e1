"""Progress and result reporting through the Actions runner."""

from __future__ import annotations

import logging
import sys
from typing import Optional, Protocol, TextIO

logger = logging.getLogger("skipguard")


class Reporter(Protocol):
    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def set_output(self, name: str, value: object) -> None: ...

    def fail(self, message: str) -> None: ...


def _escape_command_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_command_property(value: str) -> str:
    return _escape_command_data(value).replace(":", "%3A").replace(",", "%2C")


class ActionsReporter:
    """
    Logs messages, raises warning/error annotations through workflow commands
    and appends step outputs to the ``$GITHUB_OUTPUT`` file, or emits them as
    ``::set-output`` commands when no output file is configured.
    """

    def __init__(self, output_path: Optional[str] = None, stream: Optional[TextIO] = None):
        self._output_path = output_path
        self._stream = stream or sys.stdout

    def info(self, message: str) -> None:
        logger.info(message)

    def warning(self, message: str) -> None:
        logger.warning(message)
        self._issue_command("warning", message)

    def fail(self, message: str) -> None:
        logger.error(message)
        self._issue_command("error", message)

    def set_output(self, name: str, value: object) -> None:
        rendered = str(value).lower() if isinstance(value, bool) else str(value)
        if self._output_path:
            with open(self._output_path, "a", encoding="utf-8") as handle:
                handle.write(f"{name}={rendered}\n")
        else:
            # Runners without an output file still read the legacy command.
            self._issue_command("set-output", rendered, name=name)
        logger.debug("Set output %s=%s", name, rendered)

    def _issue_command(self, command: str, message: str, **properties: str) -> None:
        if properties:
            rendered = ",".join(
                f"{key}={_escape_command_property(value)}" for key, value in properties.items()
            )
            command = f"{command} {rendered}"
        self._stream.write(f"::{command}::{_escape_command_data(message)}\n")
        self._stream.flush()
