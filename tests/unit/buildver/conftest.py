# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Fixtures shared by the buildver unit tests."""

import json
from pathlib import Path
from typing import Dict

import pytest

from buildver.context import ActionInputs, PipelineContext


@pytest.fixture
def inputs() -> ActionInputs:
    """Return caller inputs for a feature branch build."""
    return ActionInputs(
        image_base="base/image",
        image_version="1.0.0-base-123",
        artifact_suffix="suffix",
        prefix="test-prefix",
    )


@pytest.fixture
def context() -> PipelineContext:
    """Return the context of a push to a feature branch."""
    return PipelineContext(
        repository="octo/test-repo-container",
        ref="refs/heads/feature/test-feature",
        event_name="push",
        sha="1234567abcdef",
        run_id="1234",
        run_number="1",
        run_attempt="1",
        commit_message="Feature: add new feature",
    )


@pytest.fixture
def github_env(tmp_path: Path) -> Dict[str, str]:
    """Return a GitHub Actions environment with an event payload on disk."""
    event_path = tmp_path / "event.json"
    event_path.write_text(
        json.dumps({"head_commit": {"message": "Feature: add new feature"}}),
        encoding="utf-8",
    )
    return {
        "GITHUB_REPOSITORY": "octo/test-repo-container",
        "GITHUB_REF": "refs/heads/feature/test-feature",
        "GITHUB_EVENT_NAME": "push",
        "GITHUB_SHA": "1234567abcdef",
        "GITHUB_RUN_ID": "1234",
        "GITHUB_RUN_NUMBER": "1",
        "GITHUB_EVENT_PATH": str(event_path),
        "GITHUB_ENV": str(tmp_path / "github_env"),
        "GITHUB_OUTPUT": str(tmp_path / "github_output"),
    }
