"""
Submodule operations for gbulk.

Used by `gbulk submodule-list` and `gbulk submodule-update`.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..config import load_config
from ..domain.operation import OperationSummary, RepoOutcome, aggregate, repo_name
from ..infra.git_client import GitClient
from ..progress import RepoStatus, StatusBoard
from .parallel import run_per_repo

logger = logging.getLogger(__name__)

PULL_ARGS = ['pull', '--autostash', '--rebase', '--no-commit']


@dataclass
class SubmoduleListing:
    """Submodule entries of one repository as reported by `git submodule`."""
    path: str
    entries: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def name(self) -> str:
        return repo_name(self.path)

    def to_dict(self) -> Dict[str, Any]:
        result = {'path': self.path, 'name': self.name, 'submodules': self.entries}
        if self.error:
            result['error'] = self.error
        return result


class SubmoduleService:
    """
    Lists and updates submodules of repositories that declare them.

    Example:
        service = SubmoduleService()
        for listing in service.list_submodules(repos):
            print(listing.name, listing.entries)
        summary = service.update_repos(repos, branch="main")
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None
    ):
        self.config = config if config is not None else load_config()
        self.git = git_client or GitClient(timeout=self.config.get('git', {}).get('timeout'))
        self.default_branch = self.config.get('submodules', {}).get('default_branch', 'main')
        self.max_workers = self.config.get('general', {}).get('max_workers') or None
        self.last_result: Optional[OperationSummary] = None

    def repos_with_submodules(self, repos: Sequence[str]) -> List[str]:
        """Filter to repositories with a .gitmodules file, keeping order."""
        return [path for path in repos if self.git.has_submodules(path)]

    def list_submodules(self, repos: Sequence[str]) -> List[SubmoduleListing]:
        """Collect `git submodule` output for every repository with submodules."""
        listings = []
        for path in self.repos_with_submodules(repos):
            result = self.git.run(['submodule'], path)
            if result.ok:
                entries = [line.strip() for line in result.stdout.splitlines() if line.strip()]
                listings.append(SubmoduleListing(path=path, entries=entries))
            else:
                listings.append(SubmoduleListing(
                    path=path,
                    error=result.stderr.strip() or f"Command failed with exit code {result.exit_code}"
                ))
        return listings

    def update_repos(
        self,
        repos: Sequence[str],
        branch: Optional[str] = None,
        board: Optional[StatusBoard] = None
    ) -> OperationSummary:
        """
        Check out ``branch`` and pull with rebase in every submodule.

        Only repositories with submodules are processed.

        Returns:
            OperationSummary with one outcome per processed repository
        """
        branch = branch or self.default_branch
        targets = self.repos_with_submodules(repos)
        board = board or StatusBoard(enabled=False)
        handles = {path: board.handle(repo_name(path)) for path in targets}

        outcomes = run_per_repo(
            targets,
            lambda path: self.update_repo(path, branch, handles[path]),
            self.max_workers
        )
        result = aggregate(outcomes, 'submodule_update')
        self.last_result = result
        return result

    def update_repo(
        self,
        repo_path: str,
        branch: str,
        status: Optional[RepoStatus] = None
    ) -> RepoOutcome:
        status = status or RepoStatus(None, repo_name(repo_path))
        outcome = self._update_submodules(repo_path, branch, status)
        if not outcome.success:
            logger.debug(f"Submodule update failed for {repo_path}: {outcome.message}")
        status.finish(outcome)
        return outcome

    def _update_submodules(self, repo_path: str, branch: str, status: RepoStatus) -> RepoOutcome:
        status.update(f"Checking out {branch} in submodules")
        checkout = self.git.run(['submodule', 'foreach', 'git', 'checkout', branch], repo_path)
        if not checkout.ok:
            return RepoOutcome(
                path=repo_path,
                success=False,
                message=checkout.stderr.strip() or f"Failed to checkout {branch} in submodules"
            )

        status.update("Pulling submodules")
        pull = self.git.run(['submodule', 'foreach', 'git', *PULL_ARGS], repo_path)
        if not pull.ok:
            return RepoOutcome(
                path=repo_path,
                success=False,
                message=pull.stderr.strip() or "Failed to pull submodules"
            )

        return RepoOutcome(path=repo_path, success=True, message="Submodules updated successfully")
