# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Command line entry point resolving the build identity and next version of a workflow run."""

import datetime
import logging
import os
import sys
from pathlib import Path
from typing import Callable, Optional

import click

from buildver.context import (
    ActionInputs,
    MissingContextError,
    MissingRequiredInputError,
    PipelineContext,
)
from buildver.git import latest_version_tag
from buildver.identity import build_identity
from buildver.outputs import OutputSink
from buildver.resolver import resolve_next_version

logger = logging.getLogger(__name__)

TagSource = Callable[[], Optional[str]]


def run(
    inputs: ActionInputs,
    context: PipelineContext,
    sink: OutputSink,
    tag_source: TagSource,
    today: datetime.date,
    workdir: Path = Path("."),
    make_dirs: bool = True,
) -> int:
    """Export the build identity and the resolved next version of a workflow run.

    Args:
        inputs: validated caller inputs.
        context: pipeline context.
        sink: receives exported variables, step outputs and failures.
        tag_source: returns the latest version tag, or None if there is none.
        today: date used in the artifact directory.
        workdir: directory under which the artifact directory is created.
        make_dirs: whether to create the artifact directory.

    Returns:
        0 on success, 1 if a failure was reported.
    """
    identity = build_identity(context, inputs, today)
    logger.info("Branch: %s", identity.branch)
    logger.info("Run Attempt: %s", context.run_attempt)
    for name, value in identity.as_env().items():
        sink.export(name, value)

    if make_dirs:
        artifact_dir = workdir / identity.artifact_dir
        artifact_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Artifact storage created at %s", artifact_dir)

    resolution = resolve_next_version(
        tag_source(), context.commit_message_lower, context.ref_lower
    )
    resolved = {
        "CURRENT_VERSION": resolution.current_version,
        "NEXT_VERSION": resolution.next_version,
        "VERSION_BUMP_REASON": resolution.reason.value,
    }
    for name, value in resolved.items():
        sink.export(name, value)
        sink.set_output(name, value)

    if resolution.error is not None:
        sink.fail(resolution.error)
        return 1
    return 0


@click.command()
@click.option(
    "--image-base", envvar="INPUT_IMAGE_BASE", type=str, help="Base image name."
)
@click.option(
    "--image-version",
    envvar="INPUT_IMAGE_VERSION",
    type=str,
    help="Base image version, e.g. 1.0.0-base-123.",
)
@click.option(
    "--artifact-suffix",
    envvar="INPUT_ARTIFACT_SUFFIX",
    type=str,
    help="Last component of the artifact directory.",
)
@click.option(
    "--prefix", envvar="INPUT_PREFIX", type=str, help="Optional builder id prefix."
)
@click.option(
    "--repo-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Working copy to query for tags and to create artifacts in.",
)
@click.option(
    "--no-mkdir", is_flag=True, help="Do not create the artifact directory."
)
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
def main(
    image_base: Optional[str],
    image_version: Optional[str],
    artifact_suffix: Optional[str],
    prefix: Optional[str],
    repo_dir: Path,
    no_mkdir: bool,
    verbose: bool,
) -> None:
    """Resolve the build identity and next semantic version of the current workflow run."""
    logging.basicConfig(
        stream=sys.stdout, level=logging.DEBUG if verbose else logging.INFO
    )
    sink = OutputSink.from_env(os.environ)
    try:
        inputs = ActionInputs.from_values(
            image_base, image_version, artifact_suffix, prefix
        )
        context = PipelineContext.from_env(os.environ)
    except (MissingRequiredInputError, MissingContextError) as e:
        sink.fail(f"Action failed with error: {e}")
        sys.exit(1)

    try:
        exit_code = run(
            inputs,
            context,
            sink,
            tag_source=lambda: latest_version_tag(repo_dir),
            today=datetime.datetime.now(datetime.timezone.utc).date(),
            workdir=repo_dir,
            make_dirs=not no_mkdir,
        )
    except (ValueError, OSError) as e:
        sink.fail(f"Action failed with error: {e}")
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
