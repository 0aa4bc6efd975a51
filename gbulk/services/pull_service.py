"""
Bulk pull service for gbulk.

Brings every local branch of many repositories up to date at once:
fetch with prune, clean up branches whose upstream is gone, rebase
each branch onto its remote counterpart, return to the branch the
user was on and refresh submodules. Used by `gbulk pull-all`.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Set

from ..config import load_config
from ..domain.operation import (
    OperationSummary,
    PullOptions,
    RepoOutcome,
    aggregate,
    repo_name,
)
from ..infra.git_client import GitClient
from ..progress import RepoStatus, StatusBoard
from ..prompt import prompt_yes_no
from .branch_inspector import BranchInspector, DEFAULT_FALLBACK_BRANCHES
from .parallel import describe_error, run_per_repo

logger = logging.getLogger(__name__)

FETCH_ARGS = ['fetch', '--all', '--prune']
SUBMODULE_UPDATE_ARGS = ['submodule', 'update', '--init', '--recursive']
REBASE_ABORT_ARGS = ['rebase', '--abort']

# Rebase stderr fragments meaning "this branch has no upstream"
NO_UPSTREAM_MARKERS = ('no tracking', 'no such ref')

DETACHED_HEAD = 'HEAD'


class PullService:
    """
    Service for pulling many repositories concurrently.

    Each repository runs its steps in order; a failing step stops that
    repository only and turns into a failed outcome. Every repository
    yields exactly one outcome.

    Example:
        service = PullService()
        summary = service.pull_repos(repos, PullOptions(dry_run=True))
        print(f"{summary.successful} succeeded, {summary.failed} failed")
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None,
        inspector: Optional[BranchInspector] = None,
        confirm: Optional[Callable[[str], bool]] = None
    ):
        """
        Initialize PullService.

        Args:
            config: Configuration dict (loads default if None)
            git_client: GitClient instance (creates new if None)
            inspector: BranchInspector (built on git_client if None)
            confirm: Yes/no question callback (terminal prompt if None)
        """
        self.config = config if config is not None else load_config()
        pull_config = self.config.get('pull', {})
        self.git = git_client or GitClient(timeout=self.config.get('git', {}).get('timeout'))
        self.inspector = inspector or BranchInspector(
            self.git,
            pull_config.get('fallback_branches', DEFAULT_FALLBACK_BRANCHES)
        )
        self.remote = pull_config.get('remote', 'origin')
        self.max_workers = self.config.get('general', {}).get('max_workers') or None
        self.confirm = confirm
        self.last_result: Optional[OperationSummary] = None

    def pull_repos(
        self,
        repos: Sequence[str],
        options: PullOptions,
        board: Optional[StatusBoard] = None
    ) -> OperationSummary:
        """
        Pull all repositories concurrently and wait for every one of them.

        Args:
            repos: Repository paths, in reporting order
            options: Batch options
            board: Live status view (a silent one if None)

        Returns:
            OperationSummary with one outcome per repository, in input order
        """
        board = board or StatusBoard(enabled=False)
        handles = {path: board.handle(repo_name(path)) for path in repos}

        outcomes = run_per_repo(
            repos,
            lambda path: self.pull_repo(path, options, handles[path]),
            self.max_workers
        )
        result = aggregate(outcomes, 'pull', dry_run=options.dry_run)
        self.last_result = result
        return result

    def pull_repo(
        self,
        repo_path: str,
        options: PullOptions,
        status: Optional[RepoStatus] = None
    ) -> RepoOutcome:
        """
        Run the full pull sequence for one repository.

        Returns:
            RepoOutcome; never raises
        """
        name = repo_name(repo_path)
        status = status or RepoStatus(None, name)
        dry_run = options.dry_run

        try:
            status.update("Getting current branch")
            original_branch = self.git.current_branch(repo_path)
            restore_target = original_branch
            if original_branch == DETACHED_HEAD:
                restore_target = self.git.run_or_fail(['rev-parse', 'HEAD'], repo_path).strip()

            if dry_run:
                status.update("[DRY-RUN] Would fetch from remote")
            else:
                status.update("Fetching from remote")
                self.git.run_or_fail(FETCH_ARGS, repo_path)

            status.update("Checking for gone branches")
            stale = self.inspector.find_stale_branches(repo_path)
            if stale:
                self._remove_stale_branches(repo_path, original_branch, stale, options, status)

            status.update("Getting local branches")
            branches = self.inspector.list_local_branches(repo_path)
            if dry_run:
                status.update(f"[DRY-RUN] Would update {len(branches)} branches")
            elif self.git.rebase_in_progress(repo_path):
                # A stopped rebase is never touched
                status.warn(f"Rebase in progress in {name}, not updating branches")
            else:
                for branch in branches:
                    self._rebase_branch(repo_path, branch, status)

            self._restore_branch(repo_path, original_branch, restore_target, dry_run, status)

            if self.git.has_submodules(repo_path):
                if dry_run:
                    status.update("[DRY-RUN] Would update submodules")
                else:
                    status.update("Updating submodules")
                    self.git.run_or_fail(SUBMODULE_UPDATE_ARGS, repo_path)

            message = "Dry-run completed" if dry_run else "Pull completed successfully"
            status.succeed(message)
            return RepoOutcome(path=repo_path, success=True, message=message)

        except Exception as e:
            message = describe_error(e)
            logger.debug(f"Pull failed for {repo_path}: {message}")
            status.fail(message)
            return RepoOutcome(path=repo_path, success=False, message=message)

    def _remove_stale_branches(
        self,
        repo_path: str,
        original_branch: str,
        stale: Set[str],
        options: PullOptions,
        status: RepoStatus
    ) -> None:
        """Switch away from a stale current branch, then delete stale branches."""
        to_delete = set(stale)

        if original_branch in stale:
            fallback = self.inspector.find_fallback_branch(repo_path, exclude=stale)
            if fallback:
                if options.dry_run:
                    status.update(f"[DRY-RUN] Would switch to {fallback}")
                else:
                    status.update(f"Switching to {fallback}")
                    self.git.run_or_fail(['checkout', fallback], repo_path)
            else:
                # Checked out and nowhere to go
                to_delete.discard(original_branch)

        if not to_delete:
            return

        branches = sorted(to_delete)
        if not self._authorize(branches, options, status):
            status.update("Keeping gone branches")
            return

        for branch in branches:
            if options.dry_run:
                status.update(f"[DRY-RUN] Would delete gone branch {branch}")
            else:
                status.update(f"Deleting gone branch {branch}")
                self.git.run_or_fail(['branch', '-D', branch], repo_path)

    def _authorize(self, branches: List[str], options: PullOptions, status: RepoStatus) -> bool:
        if options.auto_confirm or options.dry_run:
            return True
        question = f"{status.name}: Delete gone branches: {', '.join(branches)}?"
        if self.confirm is not None:
            return bool(self.confirm(question))
        return prompt_yes_no(question, status.board)

    def _rebase_branch(self, repo_path: str, branch: str, status: RepoStatus) -> None:
        """Rebase one branch onto its remote counterpart; failures only warn."""
        status.update(f"Updating branch {branch}")
        result = self.git.run(
            ['rebase', '--autostash', f'{self.remote}/{branch}', branch],
            repo_path
        )
        if result.ok:
            return

        logger.debug(f"Rebase of {branch} in {repo_path} failed: {result.stderr.strip()}")
        # No rebase was stopped before the branch loop, so this one is ours
        if self.git.rebase_in_progress(repo_path):
            self.git.run(REBASE_ABORT_ARGS, repo_path)
        if not any(marker in result.stderr for marker in NO_UPSTREAM_MARKERS):
            status.warn(f"Failed to update {branch} in {status.name}")

    def _restore_branch(
        self,
        repo_path: str,
        original_branch: str,
        restore_target: str,
        dry_run: bool,
        status: RepoStatus
    ) -> None:
        current = self.git.current_branch(repo_path)
        if current == original_branch:
            return
        if not self.git.ref_exists(repo_path, restore_target):
            return

        if dry_run:
            status.update(f"[DRY-RUN] Would switch back to {original_branch}")
        else:
            status.update(f"Switching back to {original_branch}")
            self.git.run_or_fail(['checkout', restore_target], repo_path)
