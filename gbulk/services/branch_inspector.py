"""
Branch inspection for gbulk.

All interpretation of git's textual branch output lives here so the
pull orchestration never parses command output itself.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Set

from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_BRANCHES = ('develop', 'main', 'master')

BRANCH_VV_ARGS = ['branch', '-vv']
UPSTREAM_TRACK_ARGS = ['for-each-ref', '--format=%(refname:short)|%(upstream:track)', 'refs/heads']
BRANCH_LIST_ARGS = ['branch', '-l']


def _strip_marker(line: str) -> str:
    """Drop surrounding whitespace and a leading current-branch '*'."""
    line = line.strip()
    if line.startswith('*'):
        line = line[1:].lstrip()
    return line


def parse_branch_list(output: str) -> List[str]:
    """Parse `git branch -l` output into branch names, in listed order."""
    branches = []
    for line in output.splitlines():
        name = _strip_marker(line)
        if name:
            branches.append(name)
    return branches


def parse_gone_from_branch_vv(output: str) -> Set[str]:
    """Branch names whose `git branch -vv` line carries a [gone] marker."""
    gone = set()
    for line in output.splitlines():
        if '[gone]' not in line:
            continue
        tokens = _strip_marker(line).split()
        if tokens:
            gone.add(tokens[0])
    return gone


def parse_gone_from_upstream_track(output: str) -> Set[str]:
    """Branch names from `<branch>|<track>` lines whose track says gone."""
    gone = set()
    for line in output.splitlines():
        name, sep, track = line.partition('|')
        if sep and 'gone' in track and name.strip():
            gone.add(name.strip())
    return gone


class BranchInspector:
    """
    Answers questions about a repository's local branches.

    Example:
        inspector = BranchInspector(GitClient())
        stale = inspector.find_stale_branches("/path/to/repo")
        fallback = inspector.find_fallback_branch("/path/to/repo")
    """

    def __init__(
        self,
        git_client: Optional[GitClient] = None,
        fallback_branches: Sequence[str] = DEFAULT_FALLBACK_BRANCHES
    ):
        self.git = git_client or GitClient()
        self.fallback_branches = tuple(fallback_branches)

    def find_stale_branches(self, repo_path: str) -> Set[str]:
        """
        Find local branches whose upstream is gone.

        Two detections run independently and their results are merged;
        a failure in either one only loses that detection's findings.
        """
        stale: Set[str] = set()
        detections = (
            ('branch -vv', BRANCH_VV_ARGS, parse_gone_from_branch_vv),
            ('upstream track', UPSTREAM_TRACK_ARGS, parse_gone_from_upstream_track),
        )
        for label, args, parse in detections:
            try:
                result = self.git.run(args, repo_path)
                if not result.ok:
                    logger.debug(f"{label} detection failed in {repo_path}: {result.stderr.strip()}")
                    continue
                stale |= parse(result.stdout)
            except Exception as e:
                logger.debug(f"{label} detection raised in {repo_path}: {e}")
        return stale

    def find_fallback_branch(self, repo_path: str, exclude: Iterable[str] = ()) -> Optional[str]:
        """
        First fallback branch (in priority order) present in the repository.

        Args:
            repo_path: Working copy to inspect
            exclude: Branch names that must not be chosen

        Returns:
            Branch name, or None if no candidate exists
        """
        result = self.git.run(BRANCH_LIST_ARGS, repo_path)
        if not result.ok:
            return None

        excluded = set(exclude)
        branches = parse_branch_list(result.stdout)
        for candidate in self.fallback_branches:
            if candidate in branches and candidate not in excluded:
                return candidate
        return None

    def list_local_branches(self, repo_path: str) -> List[str]:
        """
        List local branches, skipping detached-head placeholders.

        Raises:
            GitCommandError: if the branch listing fails
        """
        output = self.git.run_or_fail(BRANCH_LIST_ARGS, repo_path)
        return [b for b in parse_branch_list(output) if not b.startswith('(')]
