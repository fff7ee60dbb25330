# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Unit tests for caller inputs and pipeline context."""

import json
from pathlib import Path
from typing import Dict

import pytest

from buildver.context import (
    ActionInputs,
    MissingContextError,
    MissingRequiredInputError,
    PipelineContext,
    load_event_payload,
)


def test_inputs_from_values() -> None:
    """Ensure values are stripped and a blank prefix means no prefix."""
    inputs = ActionInputs.from_values(" base/image ", "1.0.0-base-1", "out", "  ")
    assert inputs == ActionInputs("base/image", "1.0.0-base-1", "out", None)


def test_inputs_prefix_stripped() -> None:
    """Ensure the builder id prefix is stripped like the required inputs."""
    inputs = ActionInputs.from_values("base/image", "1.0.0-base-1", "out", " p ")
    assert inputs.prefix == "p"


@pytest.mark.parametrize(
    "values, missing",
    [
        ((None, "1.0.0", "out"), "image_base"),
        (("base", "", "out"), "image_version"),
        (("base", "1.0.0", "   "), "artifact_suffix"),
    ],
)
def test_inputs_missing(values: tuple, missing: str) -> None:
    """Ensure the first missing required input is named.

    Args:
        values: raw input values.
        missing: name of the missing input.
    """
    with pytest.raises(MissingRequiredInputError, match=missing):
        ActionInputs.from_values(*values)


def test_context_from_env(github_env: Dict[str, str]) -> None:
    """Ensure the context is read from GitHub Actions variables and the event payload."""
    context = PipelineContext.from_env(github_env)
    assert context.repo_name == "test-repo-container"
    assert context.ref_lower == "refs/heads/feature/test-feature"
    assert context.commit_message_lower == "feature: add new feature"
    assert context.run_attempt == "1"
    assert context.head_ref == ""


def test_context_pull_request(github_env: Dict[str, str], tmp_path: Path) -> None:
    """Ensure the pull request head ref is picked up."""
    event_path = tmp_path / "pr.json"
    event_path.write_text(
        json.dumps({"pull_request": {"head": {"ref": "hotfix/x"}}}), encoding="utf-8"
    )
    github_env.update(
        GITHUB_EVENT_NAME="pull_request",
        GITHUB_EVENT_PATH=str(event_path),
        GITHUB_RUN_ATTEMPT="3",
    )
    context = PipelineContext.from_env(github_env)
    assert context.head_ref == "hotfix/x"
    assert context.commit_message == ""
    assert context.run_attempt == "3"


@pytest.mark.parametrize(
    "name", ["GITHUB_REPOSITORY", "GITHUB_REF", "GITHUB_SHA", "GITHUB_RUN_ID"]
)
def test_context_missing(github_env: Dict[str, str], name: str) -> None:
    """Ensure missing repository or run information is fatal.

    Args:
        github_env: environment fixture.
        name: variable to remove.
    """
    del github_env[name]
    with pytest.raises(MissingContextError, match=name):
        PipelineContext.from_env(github_env)


def test_load_event_payload_unreadable(tmp_path: Path) -> None:
    """Ensure a missing or broken payload yields an empty payload."""
    assert load_event_payload(None) == {}
    assert load_event_payload(str(tmp_path / "missing.json")) == {}
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_event_payload(str(broken)) == {}
    listing = tmp_path / "list.json"
    listing.write_text("[]", encoding="utf-8")
    assert load_event_payload(str(listing)) == {}
