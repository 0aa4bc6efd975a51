"""
Domain layer for gbulk.

Contains pure domain objects with no I/O or side effects:
- PullOptions: Configuration of one pull-all batch
- RepoOutcome: Result of processing one repository
- OperationSummary: Ordered outcomes with success/failure counts

These objects are immutable where possible and provide
serialization methods for JSONL output.
"""

from .operation import PullOptions, RepoOutcome, OperationSummary, aggregate, repo_name

__all__ = [
    'PullOptions',
    'RepoOutcome',
    'OperationSummary',
    'aggregate',
    'repo_name',
]
