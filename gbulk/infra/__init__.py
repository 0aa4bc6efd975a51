"""
Infrastructure layer for gbulk.

Contains abstractions for external systems:
- GitClient: Git command execution

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient, CommandResult, GitCommandError

__all__ = [
    'GitClient',
    'CommandResult',
    'GitCommandError',
]
