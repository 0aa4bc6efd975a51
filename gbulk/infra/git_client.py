"""
Git client infrastructure for gbulk.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic
"""

import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

# State directories git keeps under .git while a rebase is stopped
REBASE_STATE_DIRS = ("rebase-merge", "rebase-apply")


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one git invocation."""
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class GitCommandError(Exception):
    """Raised by GitClient.run_or_fail when git exits non-zero."""

    def __init__(self, args: Sequence[str], cwd: str, result: CommandResult):
        message = result.stderr.strip() or f"Git command failed with exit code {result.exit_code}"
        super().__init__(message)
        self.git_args = list(args)
        self.cwd = cwd
        self.result = result


class GitClient:
    """
    Abstraction over git commands.

    Two flavours of invocation are offered:

    - ``run`` never raises; a non-zero exit code is returned as data
      and a git binary that cannot be started becomes exit code 1.
    - ``run_or_fail`` raises GitCommandError on a non-zero exit and
      returns stdout otherwise.

    Example:
        client = GitClient()
        result = client.run(["status", "--short"], "/path/to/repo")
        if result.ok:
            print(result.stdout)
    """

    def __init__(self, timeout: Optional[float] = None, executable: str = "git"):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (None or 0 waits forever)
            executable: Name or path of the git binary
        """
        self.timeout = timeout or None
        self.executable = executable

    def run(self, args: Sequence[str], cwd: str) -> CommandResult:
        """
        Run a git command.

        Args:
            args: Git arguments, e.g. ['fetch', '--all', '--prune']
            cwd: Working copy to run in

        Returns:
            CommandResult with captured output and exit code
        """
        cmd = [self.executable, *args]
        logger.debug(f"Running in '{cwd}': {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out in '{cwd}': {' '.join(cmd)}")
            return CommandResult(
                stderr=f"Git command timed out after {self.timeout}s",
                exit_code=1
            )
        except (OSError, ValueError) as e:
            logger.debug(f"Git command could not be started in '{cwd}': {e}")
            return CommandResult(stderr=str(e), exit_code=1)

        return CommandResult(
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            exit_code=result.returncode
        )

    def run_or_fail(self, args: Sequence[str], cwd: str) -> str:
        """
        Run a git command, raising GitCommandError on non-zero exit.

        Returns:
            Raw stdout of the command
        """
        result = self.run(args, cwd)
        if not result.ok:
            raise GitCommandError(args, cwd, result)
        return result.stdout

    def has_submodules(self, path: str) -> bool:
        """Check if the working copy declares submodules."""
        return (Path(path) / ".gitmodules").exists()

    def current_branch(self, path: str) -> str:
        """Get current branch name ('HEAD' when detached)."""
        return self.run_or_fail(["rev-parse", "--abbrev-ref", "HEAD"], path).strip()

    def ref_exists(self, path: str, ref: str) -> bool:
        """Check whether a ref resolves in the repository."""
        return self.run(["rev-parse", "--verify", ref], path).ok

    def rebase_in_progress(self, path: str) -> bool:
        """Check whether the working copy is in the middle of a rebase."""
        for state_dir in REBASE_STATE_DIRS:
            result = self.run(["rev-parse", "--git-path", state_dir], path)
            git_path = result.stdout.strip()
            if result.ok and git_path and (Path(path) / git_path).exists():
                return True
        return False
