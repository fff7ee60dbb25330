# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Classification of a commit into a semantic version increment.

Precedence is expressed as two ordered rule tables. Within a table the first matching rule wins.
A match in `BRANCH_NAME_RULES` overrides a match in `COMMIT_MESSAGE_RULES`, and the release
branch rule is terminal: it names the next version directly instead of an increment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, unique
from typing import Callable, Final, Optional, Tuple

from buildver.constants import RELEASE_BRANCH_PREFIX

logger = logging.getLogger(__name__)


@unique
class IncrementClass(str, Enum):
    """Version component to increase for the next release."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


@unique
class BumpReason(str, Enum):
    """Why the next version was chosen."""

    DEFAULT = "default"
    COMMIT_MESSAGE = "commit message"
    BRANCH_NAME = "branch name"
    RELEASE_BRANCH = "release branch"


@dataclass(frozen=True)
class BumpDecision:
    """Outcome of classifying a commit.

    Args:
        increment: increment class to apply to the current version.
        reason: rule family which produced the decision.
        release_version: raw version text named by a release branch. Only set when
            `reason` is `BumpReason.RELEASE_BRANCH`; the increment is then unused.
    """

    increment: IncrementClass = IncrementClass.PATCH
    reason: BumpReason = BumpReason.DEFAULT
    release_version: Optional[str] = None

    @property
    def is_release_override(self) -> bool:
        """Return whether the decision names an explicit release version."""
        return self.reason is BumpReason.RELEASE_BRANCH


@dataclass(frozen=True)
class Rule:
    """Predicate on a lower-cased string paired with the decision it produces.

    Args:
        name: short label used in debug logs.
        matches: predicate on the inspected string.
        decide: builds the decision from the inspected string.
    """

    name: str
    matches: Callable[[str], bool]
    decide: Callable[[str], BumpDecision]


def _prefix_rule(
    prefixes: Tuple[str, ...], increment: IncrementClass, reason: BumpReason
) -> Rule:
    return Rule(
        name=f"startswith {prefixes}",
        matches=lambda text: text.startswith(prefixes),
        decide=lambda _: BumpDecision(increment, reason),
    )


def _substring_rule(
    needles: Tuple[str, ...], increment: IncrementClass, reason: BumpReason
) -> Rule:
    return Rule(
        name=f"contains {needles}",
        matches=lambda text: any(needle in text for needle in needles),
        decide=lambda _: BumpDecision(increment, reason),
    )


def _release_branch_decision(ref_name: str) -> BumpDecision:
    return BumpDecision(
        reason=BumpReason.RELEASE_BRANCH,
        release_version=ref_name[len(RELEASE_BRANCH_PREFIX) :],
    )


COMMIT_MESSAGE_RULES: Final[Tuple[Rule, ...]] = (
    _prefix_rule(
        ("breaking change:", "major:", "!:"),
        IncrementClass.MAJOR,
        BumpReason.COMMIT_MESSAGE,
    ),
    _prefix_rule(("feature:", "feat:"), IncrementClass.MINOR, BumpReason.COMMIT_MESSAGE),
    _prefix_rule(
        ("bugfix:", "hotfix:", "fix:"),
        IncrementClass.PATCH,
        BumpReason.COMMIT_MESSAGE,
    ),
)

BRANCH_NAME_RULES: Final[Tuple[Rule, ...]] = (
    _substring_rule(("/feature/",), IncrementClass.MINOR, BumpReason.BRANCH_NAME),
    _substring_rule(
        ("/bugfix/", "/hotfix/"), IncrementClass.PATCH, BumpReason.BRANCH_NAME
    ),
    Rule(
        name=f"startswith {RELEASE_BRANCH_PREFIX!r}",
        matches=lambda ref: ref.startswith(RELEASE_BRANCH_PREFIX),
        decide=_release_branch_decision,
    ),
)


def first_match(rules: Tuple[Rule, ...], text: str) -> Optional[BumpDecision]:
    """Evaluate `rules` top-to-bottom and return the decision of the first match.

    Args:
        rules: ordered rule table.
        text: lower-cased string to inspect.

    Returns:
        Decision of the first matching rule, or None if no rule matched.
    """
    for rule in rules:
        if rule.matches(text):
            logger.debug("Rule %s matched %r", rule.name, text)
            return rule.decide(text)
    return None


def classify(commit_message: str, ref_name: str) -> BumpDecision:
    """Choose the increment class for a commit from its message and ref.

    Args:
        commit_message: head commit message.
        ref_name: fully qualified ref, e.g. `refs/heads/feature/x`.

    Returns:
        The branch name decision if any branch rule matched, otherwise the commit message
        decision, otherwise a default patch bump.
    """
    decision = BumpDecision()
    for rules, text in (
        (COMMIT_MESSAGE_RULES, commit_message.lower()),
        (BRANCH_NAME_RULES, ref_name.lower()),
    ):
        matched = first_match(rules, text)
        if matched is not None:
            decision = matched
    return decision
