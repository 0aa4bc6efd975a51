"""
Shared fixtures for gbulk tests.

FakeGitClient scripts git responses per command so orchestration can be
tested without a git binary; repo_factory builds throwaway
repositories with a local bare remote for end-to-end tests.
"""

import os
import subprocess
import threading
from pathlib import Path

import pytest

from gbulk.config import get_default_config
from gbulk.infra.git_client import CommandResult, GitClient


class FakeGitClient(GitClient):
    """GitClient that answers from a script and records every call."""

    def __init__(self, submodule_paths=()):
        super().__init__()
        self.responses = {}
        self.calls = []
        self.submodule_paths = set(submodule_paths)
        self._lock = threading.Lock()

    def script(self, args, stdout="", stderr="", exit_code=0, cwd=None, sequence=None, raises=None):
        """Register a response for ``args`` (optionally only in ``cwd``).

        ``sequence`` is a list of stdout strings returned one per call,
        the last one repeating. ``raises`` makes the call raise instead.
        """
        if raises is not None:
            value = raises
        elif sequence is not None:
            value = [CommandResult(stdout=s) for s in sequence]
        else:
            value = CommandResult(stdout=stdout, stderr=stderr, exit_code=exit_code)
        self.responses[(cwd, tuple(args))] = value

    def run(self, args, cwd):
        key = tuple(args)
        with self._lock:
            self.calls.append((cwd, list(args)))
            value = self.responses.get((cwd, key), self.responses.get((None, key)))
            if isinstance(value, list):
                value = value.pop(0) if len(value) > 1 else value[0]
        if isinstance(value, Exception):
            raise value
        return value if value is not None else CommandResult()

    def has_submodules(self, path):
        return path in self.submodule_paths

    def commands(self, cwd=None):
        return [args for call_cwd, args in self.calls if cwd is None or call_cwd == cwd]


@pytest.fixture
def fake_git():
    return FakeGitClient()


@pytest.fixture
def config():
    return get_default_config()


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory, monkeypatch):
    """Keep the user's ~/.gbulk, GBULK_* variables and git identity out of tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("GBULK_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    return home


def git(cwd, *args):
    """Run git in cwd, failing the test on error; returns stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True
    )
    return result.stdout.strip()


class RepoFactory:
    """Builds clones of bare local remotes under ``workspace``."""

    def __init__(self, root: Path):
        self.root = root
        self.workspace = root / "workspace"
        self.workspace.mkdir()
        (root / "remotes").mkdir()
        (root / "seeds").mkdir()

    def clone(self, name: str) -> Path:
        """A working copy on 'main' tracking origin/main with one commit."""
        origin = self.root / "remotes" / f"{name}.git"
        git(self.root, "init", "--bare", "-b", "main", str(origin))

        seed = self.root / "seeds" / name
        git(self.root, "init", "-b", "main", str(seed))
        (seed / "README.md").write_text(f"# {name}\n")
        git(seed, "add", "README.md")
        git(seed, "commit", "-m", "Initial commit")
        git(seed, "remote", "add", "origin", str(origin))
        git(seed, "push", "-u", "origin", "main")

        clone = self.workspace / name
        git(self.root, "clone", str(origin), str(clone))
        return clone

    def add_gone_branch(self, clone: Path, branch: str, checkout: bool = True) -> None:
        """Create a tracked branch, then delete it on the remote."""
        git(clone, "checkout", "-b", branch)
        git(clone, "push", "-u", "origin", branch)
        git(self.root / "seeds" / clone.name, "push", "origin", "--delete", branch)
        if not checkout:
            git(clone, "checkout", "main")

    def push_commit(self, name: str, filename: str = "CHANGES.md") -> None:
        """Advance origin/main from the seed repository."""
        seed = self.root / "seeds" / name
        (seed / filename).write_text("more\n")
        git(seed, "add", filename)
        git(seed, "commit", "-m", f"Add {filename}")
        git(seed, "push", "origin", "main")


@pytest.fixture
def repo_factory(tmp_path):
    return RepoFactory(tmp_path)


@pytest.fixture
def git_cmd():
    return git
