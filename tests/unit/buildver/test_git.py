# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Unit tests for the latest tag lookup."""

import subprocess
from typing import Any, List

import pytest

import buildver.git as git_utils


def test_latest_version_tag(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure the described tag is returned stripped."""
    calls: List[List[str]] = []

    def fake_run(args: List[str], **kwargs: Any) -> subprocess.CompletedProcess:
        calls.append(args)
        return subprocess.CompletedProcess(args, 0, stdout="v1.2.3\n", stderr="")

    monkeypatch.setattr(git_utils.subprocess, "run", fake_run)
    assert git_utils.latest_version_tag() == "v1.2.3"
    assert calls == [["git", "describe", "--tags", "--abbrev=0"]]


def test_latest_version_tag_no_tags(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure a failing describe means no tag."""

    def fake_run(args: List[str], **kwargs: Any) -> subprocess.CompletedProcess:
        raise subprocess.CalledProcessError(128, args, stderr="fatal: No names found")

    monkeypatch.setattr(git_utils.subprocess, "run", fake_run)
    assert git_utils.latest_version_tag() is None


def test_latest_version_tag_without_git(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure a missing git executable means no tag."""

    def fake_run(args: List[str], **kwargs: Any) -> subprocess.CompletedProcess:
        raise FileNotFoundError("git")

    monkeypatch.setattr(git_utils.subprocess, "run", fake_run)
    assert git_utils.latest_version_tag() is None
