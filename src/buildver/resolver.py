# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Resolve the next release version from the latest tag, commit message and ref."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import semver

from buildver.bump import BumpDecision, BumpReason, classify
from buildver.constants import (
    DEFAULT_CURRENT_VERSION,
    DEFAULT_NEXT_VERSION,
    INVALID_RELEASE_OVERRIDE_MESSAGE,
)
from buildver.version import (
    MalformedVersionError,
    Version,
    parse_release_version,
    parse_tag,
)

logger = logging.getLogger(__name__)


class InvalidReleaseOverrideError(ValueError):
    """Raised when a release branch names a malformed or non-incremental version."""

    def __init__(self, release_version: Optional[str], current: Version) -> None:
        """Record the offending release version.

        Args:
            release_version: raw version text taken from the branch name.
            current: version the release must exceed.
        """
        super().__init__(INVALID_RELEASE_OVERRIDE_MESSAGE)
        self.release_version = release_version
        self.current = current


@dataclass(frozen=True)
class VersionResolution:
    """Result of a version resolution.

    Args:
        next_version: canonical next version, e.g. `v1.2.4`.
        reason: why the next version was chosen.
        current_version: canonical baseline version, `v0.0.0` when no usable tag exists.
        error: failure message, only set when a release branch override is invalid.
    """

    next_version: str
    reason: BumpReason
    current_version: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """Return whether the resolution succeeded."""
        return self.error is None

    def as_dict(self) -> Dict[str, Optional[str]]:
        """Return the resolution keyed by the names pipeline steps consume."""
        return {
            "nextVersion": self.next_version,
            "versionBumpReason": self.reason.value,
            "currentVersion": self.current_version,
            "error": self.error,
        }


def _baseline(latest_tag: Optional[str]) -> Optional[Version]:
    try:
        return parse_tag(latest_tag)
    except MalformedVersionError as e:
        logger.warning("Ignoring malformed tag %r: %s", latest_tag, e)
        return None


def apply_release_override(
    decision: BumpDecision, current: Version
) -> semver.Version:
    """Validate the version named by a release branch against the current version.

    Args:
        decision: release branch decision carrying the raw version text.
        current: current version.

    Returns:
        The release version, pre-release and build metadata included.

    Raises:
        InvalidReleaseOverrideError: If the release version is missing, malformed, or not
            strictly greater than `current` in semantic version precedence.
    """
    if not decision.release_version:
        raise InvalidReleaseOverrideError(decision.release_version, current)
    try:
        release = parse_release_version(decision.release_version)
    except MalformedVersionError as e:
        raise InvalidReleaseOverrideError(decision.release_version, current) from e
    if release.compare(current.semver) <= 0:
        raise InvalidReleaseOverrideError(decision.release_version, current)
    return release


def resolve_next_version(
    latest_tag: Optional[str], commit_message: str, ref_name: str
) -> VersionResolution:
    """Resolve the next version and the reason for the bump.

    Without a usable tag the baseline is `v0.0.0` and the next version is `v0.0.1`, regardless
    of the commit message and ref. An invalid release branch override does not raise: the
    current version is returned unchanged with the `default` reason and the failure message in
    `error`.

    Args:
        latest_tag: most recent reachable version tag, or None if there is none.
        commit_message: head commit message.
        ref_name: fully qualified ref name.

    Returns:
        The resolved next version, reason, baseline and optional error.
    """
    logger.info("Latest tag: %s", latest_tag)
    logger.info("Commit message: %s", commit_message)
    logger.info("Source branch: %s", ref_name)

    current = _baseline(latest_tag)
    if current is None:
        return VersionResolution(
            next_version=DEFAULT_NEXT_VERSION,
            reason=BumpReason.DEFAULT,
            current_version=DEFAULT_CURRENT_VERSION,
        )
    logger.info("Parsed version: %s", current)

    decision = classify(commit_message, ref_name)
    if decision.is_release_override:
        try:
            release = apply_release_override(decision, current)
        except InvalidReleaseOverrideError as e:
            logger.error("%s (release version %r)", e, e.release_version)
            return VersionResolution(
                next_version=str(current),
                reason=BumpReason.DEFAULT,
                current_version=str(current),
                error=str(e),
            )
        logger.info("Next version from release branch: %s", release)
        return VersionResolution(
            next_version=f"v{release}",
            reason=BumpReason.RELEASE_BRANCH,
            current_version=str(current),
        )

    next_version = current.bump(decision.increment)
    logger.info(
        "Next version determined: %s (%s bump, reason: %s)",
        next_version,
        decision.increment.value,
        decision.reason.value,
    )
    return VersionResolution(
        next_version=str(next_version),
        reason=decision.reason,
        current_version=str(current),
    )
