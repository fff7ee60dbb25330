"""Resolve the next release version from GitHub ref metadata and git tags.

Behavior:
- On release branches (refs/heads/release/vX.Y.Z), use vX.Y.Z if it exceeds the latest tag.
- Otherwise, bump the latest tag according to the commit message and branch name.
- If no tags exist, default to v0.0.1.
"""

from __future__ import annotations

import logging
import os
import sys

from buildver.git import latest_version_tag
from buildver.resolver import resolve_next_version


def main() -> int:
    """Resolve and print the next version for workflow consumption."""
    logging.basicConfig(stream=sys.stderr, level=logging.INFO)
    ref = os.environ.get("GITHUB_REF", "")
    commit_message = os.environ.get("COMMIT_MESSAGE", "")
    resolution = resolve_next_version(latest_version_tag(), commit_message, ref)
    print(resolution.next_version)
    if resolution.error is not None:
        print(resolution.error, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
