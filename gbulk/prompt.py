"""
Interactive confirmation for gbulk.
"""

import threading
from typing import Optional

import click

from .progress import StatusBoard

_prompt_lock = threading.Lock()


def prompt_yes_no(message: str, board: Optional[StatusBoard] = None) -> bool:
    """Ask one yes/no question on the terminal.

    Questions from concurrent repository tasks are asked one at a time.
    An empty answer (or end of input) means "no".
    """
    with _prompt_lock:
        if board is None:
            return _ask(message)
        with board.paused():
            return _ask(message)


def _ask(message: str) -> bool:
    try:
        return click.confirm(message, default=False, err=True)
    except click.Abort:
        return False
