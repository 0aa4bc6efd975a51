"""
Repository discovery for gbulk.
"""
import os
import logging
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDES = ('node_modules',)


def find_git_repos(base_dir: str, exclude: Optional[Iterable[str]] = None) -> List[str]:
    """Find all git working copies beneath a base directory.

    Every directory that holds a ``.git`` directory is reported, including
    repositories nested inside other repositories. Symbolic links are not
    followed and excluded directories (``node_modules`` by default) are
    never entered.

    Args:
        base_dir: Directory to search
        exclude: Directory names to skip, replacing the defaults

    Returns:
        Sorted list of repository paths, rooted at base_dir as given
    """
    excludes = set(DEFAULT_EXCLUDES if exclude is None else exclude)
    repos = set()

    if not os.path.isdir(base_dir):
        logger.warning(f"Directory not found: {base_dir}")
        return []

    for root, dirs, _ in os.walk(base_dir, followlinks=False):
        if '.git' in dirs:
            repos.add(os.path.normpath(root))
            dirs.remove('.git')
        dirs[:] = [d for d in dirs if d not in excludes]

    return sorted(repos)
