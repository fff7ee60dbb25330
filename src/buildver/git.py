# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Query the most recent reachable version tag of a working copy."""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


def latest_version_tag(cwd: Optional[Union[str, Path]] = None) -> Optional[str]:
    """Return the most recent tag reachable from HEAD, if any.

    Args:
        cwd: working copy to inspect. Defaults to the current directory.

    Returns:
        The tag name, or None when the repository has no reachable tags or git is unavailable.
    """
    try:
        result = subprocess.run(
            ["git", "describe", "--tags", "--abbrev=0"],
            cwd=cwd,
            check=True,
            capture_output=True,
            text=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        logger.info("No tags found in the repository.")
        return None
    tag = result.stdout.strip()
    if not tag:
        return None
    logger.info("Latest tag found: %s", tag)
    return tag
