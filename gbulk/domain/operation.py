"""
Operation result domain objects for gbulk.

Provides standardized result types for bulk operations (pull-all,
exec, submodule-update) that run once per repository.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Any, Iterable, List


def repo_name(path: str) -> str:
    """Display name of a repository: the final path segment."""
    return os.path.basename(os.path.abspath(path))


@dataclass(frozen=True)
class PullOptions:
    """Options for one pull-all batch."""
    auto_confirm: bool = False
    dry_run: bool = False


@dataclass(frozen=True)
class RepoOutcome:
    """
    Terminal result of processing one repository.

    Exactly one outcome is produced per repository per batch.
    """
    path: str
    success: bool
    message: str

    @property
    def name(self) -> str:
        """Display name: the final path segment."""
        return repo_name(self.path)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'path': self.path,
            'name': self.name,
            'status': 'success' if self.success else 'failed',
            'message': self.message,
        }


@dataclass
class OperationSummary:
    """
    Summary of a bulk operation across multiple repositories.

    Outcomes keep the order in which repositories were submitted.
    """
    operation: str  # e.g., "pull", "exec", "submodule_update"
    dry_run: bool = False
    outcomes: List[RepoOutcome] = field(default_factory=list)
    successful: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def success(self) -> bool:
        """True if no failures occurred."""
        return self.failed == 0

    @property
    def errors(self) -> List[str]:
        return [f"{o.name}: {o.message}" for o in self.outcomes if not o.success]

    def add_outcome(self, outcome: RepoOutcome) -> None:
        """Add an outcome and update counts."""
        self.outcomes.append(outcome)
        if outcome.success:
            self.successful += 1
        else:
            self.failed += 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'type': 'summary',
            'operation': self.operation,
            'total': self.total,
            'successful': self.successful,
            'failed': self.failed,
            'dry_run': self.dry_run,
            'errors': self.errors,
        }


def aggregate(
    outcomes: Iterable[RepoOutcome],
    operation: str,
    dry_run: bool = False
) -> OperationSummary:
    """Collect outcomes into an OperationSummary, preserving order."""
    summary = OperationSummary(operation=operation, dry_run=dry_run)
    for outcome in outcomes:
        summary.add_outcome(outcome)
    return summary
