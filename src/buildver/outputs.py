# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Export of resolved values to later workflow steps."""

import logging
import sys
from pathlib import Path
from typing import Mapping, Optional, TextIO

logger = logging.getLogger(__name__)


class OutputSink:
    """Writes exported variables and step outputs using GitHub Actions file commands.

    Variables are appended as `NAME=value` lines to the `GITHUB_ENV` file, step outputs to the
    `GITHUB_OUTPUT` file. Either file may be absent, e.g. when running locally, in which case the
    values are only logged.
    """

    def __init__(
        self,
        env_file: Optional[Path] = None,
        output_file: Optional[Path] = None,
        stream: Optional[TextIO] = None,
    ) -> None:
        """Create the sink.

        Args:
            env_file: file receiving exported variables.
            output_file: file receiving step outputs.
            stream: stream receiving workflow commands. Defaults to stdout.
        """
        self.env_file = env_file
        self.output_file = output_file
        self.stream = stream if stream is not None else sys.stdout
        self.failed = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "OutputSink":
        """Create a sink writing to the files named by `GITHUB_ENV` and `GITHUB_OUTPUT`."""
        env_file = environ.get("GITHUB_ENV")
        output_file = environ.get("GITHUB_OUTPUT")
        return cls(
            env_file=Path(env_file) if env_file else None,
            output_file=Path(output_file) if output_file else None,
        )

    @staticmethod
    def _append(path: Optional[Path], name: str, value: str) -> None:
        if "\n" in value or "\r" in value:
            raise ValueError(f"Multi-line value for {name} is not supported.")
        if path is None:
            return
        with path.open("a", encoding="utf-8") as f:
            f.write(f"{name}={value}\n")

    def export(self, name: str, value: str) -> None:
        """Export an environment variable to subsequent steps."""
        self._append(self.env_file, name, value)
        logger.info("Exported %s: %s", name, value)

    def set_output(self, name: str, value: str) -> None:
        """Set an output of the current step."""
        self._append(self.output_file, name, value)

    def fail(self, message: str) -> None:
        """Report a failure of the action."""
        self.failed = True
        logger.error(message)
        self.stream.write(f"::error::{message}\n")
        self.stream.flush()
