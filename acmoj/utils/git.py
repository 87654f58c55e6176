"""Git repository helpers for repository-mode submission."""

import logging
import re
import subprocess
from pathlib import Path
from typing import Optional

from ..errors import RepositoryError


logger = logging.getLogger(__name__)

GITHUB_MIRROR = "https://hub.fastgit.org/"

_SSH_REMOTE = re.compile(r"^git@([^:]+)[:/]", re.IGNORECASE)
_GITHUB_REMOTE = re.compile(r"^https?://github\.com/", re.IGNORECASE)


def find_repository_root(start: Optional[Path] = None) -> Optional[Path]:
    """
    Search for a directory containing .git starting from start (default:
    current directory), walking up to root.
    """
    current = (start or Path.cwd()).resolve()

    while True:
        if (current / ".git").exists():
            return current

        if current == current.parent:
            return None

        current = current.parent


def normalize_remote_url(url: str) -> str:
    """Turn a remote URL into an https URL the judge can clone."""
    url = _SSH_REMOTE.sub(r"https://\1/", url.strip())
    return _GITHUB_REMOTE.sub(GITHUB_MIRROR, url)


def get_remote_url(root: Path, remote: str = "origin") -> str:
    """Read and normalize the URL of a remote of the repository at root."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", remote],
            cwd=root,
            capture_output=True,
            text=True,
        )
    except OSError as e:
        raise RepositoryError(f"cannot run git: {e}") from e

    if result.returncode != 0:
        raise RepositoryError(f"error from git: {result.stderr.strip()}")

    url = normalize_remote_url(result.stdout)
    logger.debug("remote %s of %s is %s", remote, root, url)
    return url
