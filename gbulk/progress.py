"""
Progress reporting utilities for gbulk.

Each concurrent repository task owns one RepoStatus handle and is the only
writer of it. The StatusBoard reads all handles to draw a live view on
stderr when it is a terminal; otherwise only warnings are printed.
"""

import threading
from contextlib import contextmanager
from typing import List, Optional

from rich.console import Console, Group
from rich.live import Live
from rich.spinner import Spinner
from rich.text import Text

from .domain.operation import RepoOutcome

stderr_console = Console(stderr=True)


class RepoStatus:
    """Status handle for one repository task."""

    def __init__(self, board: Optional['StatusBoard'], name: str):
        self.board = board
        self.name = name
        self.text = "Starting"
        self.done: Optional[bool] = None  # None while in flight
        self._spinner = Spinner('dots', style='cyan')

    def update(self, text: str) -> None:
        self.text = text

    def succeed(self, text: str) -> None:
        self.text = text
        self.done = True

    def fail(self, text: str) -> None:
        self.text = text
        self.done = False

    def finish(self, outcome: RepoOutcome) -> None:
        """Mark the handle with a terminal outcome."""
        if outcome.success:
            self.succeed(outcome.message)
        else:
            self.fail(outcome.message)

    def warn(self, text: str) -> None:
        """Warnings are always shown, even without a live view."""
        line = Text()
        line.append("Warning", style="yellow")
        line.append(f": {text}")
        console = self.board.console if self.board else stderr_console
        console.print(line)

    def render(self):
        label = Text()
        label.append(self.name, style="bold")
        label.append(f" - {self.text}", style="dim")
        if self.done is None:
            self._spinner.update(text=label)
            return self._spinner
        marker = Text("✓ ", style="bold green") if self.done else Text("✗ ", style="bold red")
        return marker + label


class StatusBoard:
    """
    Live view over a set of RepoStatus handles.

    Example:
        with StatusBoard() as board:
            status = board.handle("/src/project")
            status.update("Fetching from remote")
    """

    def __init__(self, enabled: Optional[bool] = None, console: Optional[Console] = None):
        """
        Initialize StatusBoard.

        Args:
            enabled: Explicitly enable/disable the live view. None = auto-detect
            console: Console to draw on (defaults to stderr)
        """
        self.console = console or stderr_console
        self.enabled = self.console.is_terminal if enabled is None else enabled
        self.handles: List[RepoStatus] = []
        self._lock = threading.Lock()
        self._live: Optional[Live] = None

    def handle(self, name: str) -> RepoStatus:
        status = RepoStatus(self, name)
        with self._lock:
            self.handles.append(status)
        return status

    def _render(self):
        with self._lock:
            handles = list(self.handles)
        return Group(*(h.render() for h in handles))

    def __enter__(self) -> 'StatusBoard':
        if self.enabled:
            self._live = Live(
                console=self.console,
                refresh_per_second=10,
                transient=True,
                get_renderable=self._render,
            )
            self._live.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._live is not None:
            self._live.stop()
            self._live = None

    @contextmanager
    def paused(self):
        """Suspend live rendering, e.g. while waiting for operator input."""
        live = self._live
        if live is not None:
            live.stop()
        try:
            yield
        finally:
            if live is not None:
                live.start()
