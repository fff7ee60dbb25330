# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Build identity strings derived from the pipeline context and caller inputs."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Dict

from buildver.constants import (
    ARTIFACT_ROOT,
    BRANCH_REF_PREFIX,
    FEATURE_BRANCH_PREFIX,
    RUNTIME_HEAD_REF_PREFIXES,
    SHORT_SHA_LENGTH,
)
from buildver.context import ActionInputs, PipelineContext


@dataclass(frozen=True)
class BuildIdentity:
    """Names identifying the build of a single workflow run.

    Args:
        app_name: repository name without the `-container` suffix.
        safe_image_base: image base usable as a path or tag component.
        builder_image_version: image version of the builder variant to use.
        branch: ref name usable as a tag component.
        build_id: unique id of this build.
        builder_id: build id, prefixed when the caller supplied a prefix.
        artifact_dir: relative directory for build artifacts.
    """

    app_name: str
    safe_image_base: str
    builder_image_version: str
    branch: str
    build_id: str
    builder_id: str
    artifact_dir: str

    def as_env(self) -> Dict[str, str]:
        """Return the identity keyed by exported variable name, in export order."""
        return {
            "APP_NAME": self.app_name,
            "SAFE_IMAGE_BASE": self.safe_image_base,
            "BUILDER_IMAGE_VERSION": self.builder_image_version,
            "BUILD_ID": self.build_id,
            "BUILDER_ID": self.builder_id,
            "ARTIFACT_DIR": self.artifact_dir,
        }


def app_name(repo_name: str) -> str:
    """Strip the `-container` suffix convention from a repository name."""
    return repo_name.replace("-container", "", 1).lower()


def safe_image_base(image_base: str) -> str:
    """Replace path separators in an image base and drop one trailing dash."""
    safe = image_base.replace("/", "-")
    return safe[:-1] if safe.endswith("-") else safe


def builder_image_version(context: PipelineContext, image_version: str) -> str:
    """Select the builder image variant.

    Feature branches build with the `devel` variant. Pull requests from hotfix, bugfix and
    release branches build with the `runtime` variant. Everything else uses the image version
    as supplied.

    Args:
        context: pipeline context.
        image_version: base image version containing a `-base-` marker.

    Returns:
        The builder image version.
    """
    if context.ref.startswith(FEATURE_BRANCH_PREFIX):
        return image_version.replace("-base-", "-devel-", 1)
    if context.event_name == "pull_request" and context.head_ref.startswith(
        RUNTIME_HEAD_REF_PREFIXES
    ):
        return image_version.replace("-base-", "-runtime-", 1)
    return image_version


def branch_slug(ref: str) -> str:
    """Turn a ref into a lower-cased, dash-separated branch name."""
    return ref.replace(BRANCH_REF_PREFIX, "", 1).replace("/", "-").lower()


def build_identity(
    context: PipelineContext, inputs: ActionInputs, today: datetime.date
) -> BuildIdentity:
    """Compose the build identity of a workflow run.

    Args:
        context: pipeline context.
        inputs: caller inputs.
        today: date used in the artifact directory.

    Returns:
        The build identity.
    """
    base = safe_image_base(inputs.image_base)
    builder_version = builder_image_version(context, inputs.image_version)
    branch = branch_slug(context.ref)
    build_id = "-".join(
        (
            context.sha[:SHORT_SHA_LENGTH],
            context.run_id,
            context.run_number,
            context.run_attempt,
            branch,
            base,
            builder_version,
        )
    )
    builder_id = f"{inputs.prefix}-{build_id}" if inputs.prefix else build_id
    artifact_dir = "/".join(
        (
            ARTIFACT_ROOT,
            today.isoformat(),
            context.run_id,
            base,
            builder_version,
            inputs.artifact_suffix,
        )
    )
    return BuildIdentity(
        app_name=app_name(context.repo_name),
        safe_image_base=base,
        builder_image_version=builder_version,
        branch=branch,
        build_id=build_id,
        builder_id=builder_id,
        artifact_dir=artifact_dir,
    )
