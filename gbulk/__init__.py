"""
gbulk - Bulk git operations across multiple repositories.

gbulk discovers every git working copy beneath a base directory and
runs the same operation in all of them concurrently.

Quick Start:
    from gbulk import PullService, PullOptions, find_git_repos

    repos = find_git_repos("~/src")
    summary = PullService().pull_repos(repos, PullOptions(dry_run=True))
    for outcome in summary.outcomes:
        print(outcome.name, outcome.success, outcome.message)

Commands:
    list              - Show discovered repositories
    pull-all          - Fetch, prune gone branches, rebase every branch
    exec              - Run any git command in every repository
    submodule-list    - Show repositories with submodules
    submodule-update  - Check out and pull every submodule
"""

__version__ = "0.3.0"

from .domain import PullOptions, RepoOutcome, OperationSummary, aggregate
from .infra import GitClient, CommandResult, GitCommandError
from .services import (
    BranchInspector,
    PullService,
    ExecService,
    SubmoduleService,
)
from .discovery import find_git_repos
from .config import load_config

__all__ = [
    "__version__",
    # Domain objects
    "PullOptions",
    "RepoOutcome",
    "OperationSummary",
    "aggregate",
    # Infrastructure
    "GitClient",
    "CommandResult",
    "GitCommandError",
    # Services
    "BranchInspector",
    "PullService",
    "ExecService",
    "SubmoduleService",
    # Discovery
    "find_git_repos",
    # Configuration
    "load_config",
]
