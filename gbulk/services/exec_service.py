"""
Run an arbitrary git command across repositories.

Used by `gbulk exec`.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from ..config import load_config
from ..domain.operation import OperationSummary, RepoOutcome, aggregate, repo_name
from ..infra.git_client import GitClient
from ..progress import RepoStatus, StatusBoard
from .parallel import run_per_repo

logger = logging.getLogger(__name__)


class ExecService:
    """
    Runs the same git command verbatim in every repository, concurrently.

    Example:
        summary = ExecService().exec_repos(repos, ['status', '--short'])
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None
    ):
        self.config = config if config is not None else load_config()
        self.git = git_client or GitClient(timeout=self.config.get('git', {}).get('timeout'))
        self.max_workers = self.config.get('general', {}).get('max_workers') or None
        self.last_result: Optional[OperationSummary] = None

    def exec_repos(
        self,
        repos: Sequence[str],
        git_args: Sequence[str],
        board: Optional[StatusBoard] = None
    ) -> OperationSummary:
        """
        Run ``git <git_args>`` in every repository.

        Returns:
            OperationSummary with one outcome per repository, in input order
        """
        board = board or StatusBoard(enabled=False)
        handles = {path: board.handle(repo_name(path)) for path in repos}
        outcomes = run_per_repo(
            repos,
            lambda path: self.exec_repo(path, git_args, handles[path]),
            self.max_workers
        )
        result = aggregate(outcomes, 'exec')
        self.last_result = result
        return result

    def exec_repo(
        self,
        repo_path: str,
        git_args: Sequence[str],
        status: Optional[RepoStatus] = None
    ) -> RepoOutcome:
        status = status or RepoStatus(None, repo_name(repo_path))
        status.update(f"git {' '.join(git_args)}")

        result = self.git.run(git_args, repo_path)
        if result.ok:
            outcome = RepoOutcome(
                path=repo_path,
                success=True,
                message=result.stdout.strip() or "completed successfully"
            )
        else:
            outcome = RepoOutcome(
                path=repo_path,
                success=False,
                message=result.stderr.strip() or f"Command failed with exit code {result.exit_code}"
            )
        status.finish(outcome)
        return outcome
