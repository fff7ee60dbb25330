# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Parsing and incrementing of three-component semantic versions.

Tags found in the wild are loose: `v1`, `1.2` and `V1.2.3` all describe a release. This module
normalizes them into a strict `Version` triple whose canonical text form is `vMAJOR.MINOR.PATCH`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import semver

from buildver.bump import IncrementClass
from buildver.constants import VERSION_PREFIXES


class MalformedVersionError(ValueError):
    """Raised when a string does not reduce to three non-negative integer components."""


@dataclass(frozen=True, order=True)
class Version:
    """Immutable semantic version.

    Args:
        major: major component.
        minor: minor component.
        patch: patch component.
    """

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        """Reject negative components."""
        if min(self.major, self.minor, self.patch) < 0:
            raise MalformedVersionError(
                f"Version components must be non-negative: {self.semver}"
            )

    def __str__(self) -> str:
        """Return the canonical `vMAJOR.MINOR.PATCH` form."""
        return f"v{self.semver}"

    @property
    def semver(self) -> str:
        """Return the bare `MAJOR.MINOR.PATCH` form."""
        return f"{self.major}.{self.minor}.{self.patch}"

    def bump(self, increment: IncrementClass) -> Version:
        """Return the next version for the given increment class.

        Args:
            increment: which component to increase.

        Returns:
            The incremented version. Lower components are reset to zero.
        """
        if increment is IncrementClass.MAJOR:
            return Version(self.major + 1, 0, 0)
        if increment is IncrementClass.MINOR:
            return Version(self.major, self.minor + 1, 0)
        return Version(self.major, self.minor, self.patch + 1)


def _strip_prefix(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith(VERSION_PREFIXES):
        return raw[1:]
    return raw


def parse_version(raw: str) -> Version:
    """Normalize a loose version string such as `v1`, `1.2` or `V1.2.3`.

    One- and two-component shorthand is padded with zeros. Leading zeros are dropped.

    Args:
        raw: version string, optionally prefixed with `v` or `V`.

    Returns:
        The normalized version.

    Raises:
        MalformedVersionError: If there are more than three components or any component is not
            a non-negative integer.
    """
    parts = _strip_prefix(raw).split(".")
    if len(parts) > 3:
        raise MalformedVersionError(f"Too many version components: {raw!r}")
    parts += ["0"] * (3 - len(parts))
    for part in parts:
        # `str.isdigit` accepts non-ASCII digits such as superscripts.
        if not (part.isascii() and part.isdigit()):
            raise MalformedVersionError(f"Invalid version/tag format: {raw!r}")
    major, minor, patch = (int(part) for part in parts)
    return Version(major, minor, patch)


def parse_tag(tag: Optional[str]) -> Optional[Version]:
    """Normalize the latest tag, treating an empty or missing tag as absent.

    Args:
        tag: raw tag string reported by the tag source, if any.

    Returns:
        The normalized version, or None when no tag was supplied.

    Raises:
        MalformedVersionError: If the tag is present but cannot be normalized.
    """
    if tag is None or tag.strip() == "":
        return None
    return parse_version(tag)


def parse_release_version(raw: str) -> semver.Version:
    """Strictly parse the version named by a release branch.

    Unlike tags, release branch versions are not padded: they must be complete semantic versions.
    Pre-release and build metadata are kept, e.g. `2.0.0-rc.1`.

    Args:
        raw: version text following the release branch prefix, e.g. `1.2.3`.

    Returns:
        The parsed semantic version.

    Raises:
        MalformedVersionError: If `raw` is not a valid semantic version.
    """
    try:
        return semver.Version.parse(raw)
    except (TypeError, ValueError) as e:
        raise MalformedVersionError(str(e)) from e
