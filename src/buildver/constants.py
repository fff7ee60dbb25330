# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Constants shared by the version engine, the identity formatter and the CLI."""

from typing import Final, Tuple

VERSION_PREFIXES: Final[Tuple[str, ...]] = ("v", "V")

# Baseline used when no usable tag is reachable.
DEFAULT_CURRENT_VERSION: Final = "v0.0.0"
DEFAULT_NEXT_VERSION: Final = "v0.0.1"

RELEASE_BRANCH_PREFIX: Final = "refs/heads/release/v"
FEATURE_BRANCH_PREFIX: Final = "refs/heads/feature/"
BRANCH_REF_PREFIX: Final = "refs/heads/"

# Pull request head refs which build against the runtime image variant.
RUNTIME_HEAD_REF_PREFIXES: Final[Tuple[str, ...]] = ("hotfix/", "bugfix/", "release/")

INVALID_RELEASE_OVERRIDE_MESSAGE: Final = (
    "Invalid or non-incremental release version in branch name."
)

ARTIFACT_ROOT: Final = "artifacts"
DEFAULT_RUN_ATTEMPT: Final = "1"
SHORT_SHA_LENGTH: Final = 7
