# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Caller inputs and pipeline context read from the GitHub Actions environment."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from buildver.constants import DEFAULT_RUN_ATTEMPT

logger = logging.getLogger(__name__)


class MissingRequiredInputError(ValueError):
    """Raised when a required caller input is absent or blank."""


class MissingContextError(RuntimeError):
    """Raised when the pipeline context lacks repository or run information."""


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


@dataclass(frozen=True)
class ActionInputs:
    """Parameters supplied by the workflow invoking the action.

    Args:
        image_base: base image name, e.g. `base/image`.
        image_version: base image version, e.g. `1.0.0-base-123`.
        artifact_suffix: last component of the artifact directory.
        prefix: optional prefix of the builder id.
    """

    image_base: str
    image_version: str
    artifact_suffix: str
    prefix: Optional[str] = None

    @classmethod
    def from_values(
        cls,
        image_base: Optional[str],
        image_version: Optional[str],
        artifact_suffix: Optional[str],
        prefix: Optional[str] = None,
    ) -> ActionInputs:
        """Validate raw input values.

        Args:
            image_base: base image name.
            image_version: base image version.
            artifact_suffix: last component of the artifact directory.
            prefix: optional prefix of the builder id; blank means no prefix, otherwise stripped.

        Returns:
            The validated inputs.

        Raises:
            MissingRequiredInputError: If any required input is missing or blank.
        """
        required = {
            "image_base": image_base,
            "image_version": image_version,
            "artifact_suffix": artifact_suffix,
        }
        for name, value in required.items():
            if _is_blank(value):
                raise MissingRequiredInputError(f"Input required and not supplied: {name}")
        assert image_base is not None
        assert image_version is not None
        assert artifact_suffix is not None
        return cls(
            image_base=image_base.strip(),
            image_version=image_version.strip(),
            artifact_suffix=artifact_suffix.strip(),
            prefix=(
                prefix.strip() if prefix is not None and prefix.strip() else None
            ),
        )


@dataclass(frozen=True)
class PipelineContext:
    """Repository and run information of the current workflow run.

    Args:
        repository: `owner/name` of the repository.
        ref: fully qualified ref which triggered the run.
        event_name: name of the triggering event, e.g. `push` or `pull_request`.
        sha: commit sha of the run.
        run_id: unique id of the workflow run.
        run_number: per-workflow run counter.
        run_attempt: attempt number of the run.
        commit_message: message of the head commit, empty when the event carries none.
        head_ref: head branch of a pull request, empty for other events.
    """

    repository: str
    ref: str
    event_name: str
    sha: str
    run_id: str
    run_number: str
    run_attempt: str = DEFAULT_RUN_ATTEMPT
    commit_message: str = ""
    head_ref: str = ""

    @property
    def repo_name(self) -> str:
        """Return the repository name without its owner."""
        return self.repository.rsplit("/", 1)[-1]

    @property
    def ref_lower(self) -> str:
        """Return the lower-cased ref."""
        return self.ref.lower()

    @property
    def commit_message_lower(self) -> str:
        """Return the lower-cased head commit message."""
        return self.commit_message.lower()

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> PipelineContext:
        """Build the context from GitHub Actions environment variables.

        Args:
            environ: environment mapping, usually `os.environ`.

        Returns:
            The pipeline context.

        Raises:
            MissingContextError: If the repository, ref, sha or run id is not available.
        """
        required = {
            "GITHUB_REPOSITORY": environ.get("GITHUB_REPOSITORY", ""),
            "GITHUB_REF": environ.get("GITHUB_REF", ""),
            "GITHUB_SHA": environ.get("GITHUB_SHA", ""),
            "GITHUB_RUN_ID": environ.get("GITHUB_RUN_ID", ""),
        }
        missing = [name for name, value in required.items() if _is_blank(value)]
        if missing:
            raise MissingContextError(
                f"Pipeline context unavailable, missing: {', '.join(missing)}"
            )

        payload = load_event_payload(environ.get("GITHUB_EVENT_PATH"))
        head_commit = payload.get("head_commit") or {}
        pull_request = payload.get("pull_request") or {}
        return cls(
            repository=required["GITHUB_REPOSITORY"],
            ref=required["GITHUB_REF"],
            event_name=environ.get("GITHUB_EVENT_NAME", ""),
            sha=required["GITHUB_SHA"],
            run_id=required["GITHUB_RUN_ID"],
            run_number=environ.get("GITHUB_RUN_NUMBER", ""),
            run_attempt=environ.get("GITHUB_RUN_ATTEMPT") or DEFAULT_RUN_ATTEMPT,
            commit_message=head_commit.get("message") or "",
            head_ref=(pull_request.get("head") or {}).get("ref") or "",
        )


def load_event_payload(event_path: Optional[str]) -> Dict[str, Any]:
    """Load the webhook payload of the triggering event.

    Args:
        event_path: path of the event JSON file, if any.

    Returns:
        The decoded payload, or an empty dictionary when it is missing or unreadable.
    """
    if not event_path:
        return {}
    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Could not read event payload %s: %s", event_path, e)
        return {}
    if not isinstance(payload, dict):
        logger.warning("Event payload %s is not an object.", event_path)
        return {}
    return payload
