"""
Service layer for gbulk.

Contains the logic that runs git across many repositories:
- BranchInspector: Stale branch detection, fallback branch choice
- PullService: Fetch, prune, rebase and restore for every repository
- ExecService: Arbitrary git command in every repository
- SubmoduleService: Submodule listing and update

Services are the primary API for commands to use.
"""

from .branch_inspector import BranchInspector
from .pull_service import PullService
from .exec_service import ExecService
from .submodule_service import SubmoduleService, SubmoduleListing

__all__ = [
    'BranchInspector',
    'PullService',
    'ExecService',
    'SubmoduleService',
    'SubmoduleListing',
]
