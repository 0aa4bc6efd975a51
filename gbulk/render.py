"""
Rendering functions for gbulk output.

This module handles all pretty-printing.
Services return data, this module makes it human-readable.
"""

from typing import List, Sequence

from rich.console import Console
from rich.text import Text

from .domain.operation import OperationSummary, repo_name
from .services.submodule_service import SubmoduleListing

console = Console()

RULE_WIDTH = 60


def render_notice(message: str) -> None:
    console.print(Text(message, style="yellow"))


def render_header(message: str) -> None:
    console.print()
    console.print(Text("→ ", style="bold cyan") + Text(message, style="bold cyan"))
    console.print()


def render_repo_list(repos: Sequence[str]) -> None:
    """Print discovered repositories, one per line."""
    console.print()
    console.print(Text("✓", style="bold green") + Text(f" Found {len(repos)} git repositories:"))
    console.print()
    for repo in repos:
        console.print(Text(f"  {repo}"))
    console.print()


def render_submodule_listings(listings: List[SubmoduleListing]) -> None:
    """Print repositories with submodules and their `git submodule` lines."""
    console.print()
    console.print(Text("✓", style="bold green") + Text(" Repositories with submodules:"))
    console.print()

    if not listings:
        console.print(Text("  No repositories with submodules found", style="yellow"))
        console.print()
        return

    for listing in listings:
        console.print(Text(f"  {listing.name}", style="green"))
        if listing.error:
            console.print(Text(f"    Error: {listing.error}", style="dim"))
        for entry in listing.entries:
            console.print(Text(f"    {entry}", style="dim"))

    console.print()


def render_results(summary: OperationSummary) -> None:
    """
    Print one line per repository outcome and a trailing count line.

    Args:
        summary: Aggregated outcomes, rendered in their stored order
    """
    console.print()
    console.print(Text("Results:", style="bold"))
    console.print("─" * RULE_WIDTH)

    for outcome in summary.outcomes:
        name = repo_name(outcome.path)
        if outcome.success:
            line = Text("✓ ", style="bold green") + Text(name, style="green")
            line.append(f" - {outcome.message}", style="dim")
        else:
            line = Text("✗ ", style="bold red") + Text(name, style="red")
            line.append(f" - {outcome.message}")
        console.print(line)

    console.print("─" * RULE_WIDTH)
    console.print()

    counts = Text("Summary:", style="bold")
    counts.append(" ")
    counts.append(str(summary.successful), style="green")
    counts.append(" succeeded, ")
    counts.append(str(summary.failed), style="red" if summary.failed else "dim")
    counts.append(" failed")
    console.print(counts)
    console.print()
