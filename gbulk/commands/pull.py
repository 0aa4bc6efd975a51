"""
Handles the 'pull-all' command: fetch, prune gone branches and rebase
every local branch in every repository.
"""

import click

from ..cli_utils import directory_option, json_option, resolve_repos
from ..domain.operation import PullOptions
from ..output import emit_summary
from ..progress import StatusBoard
from ..render import render_header, render_results
from ..services.pull_service import PullService


@click.command(name='pull-all')
@directory_option
@click.option('-y', '--yes', is_flag=True, help='Auto-confirm prompts')
@click.option('--dry-run', is_flag=True, help='Preview changes without making modifications')
@json_option
@click.pass_context
def pull_all_handler(ctx, directory, yes, dry_run, output_json):
    """Pull all repositories (fetch + rebase with auto-stash).

    For every repository, concurrently:

    \b
    1. fetch all remotes, pruning deleted remote branches
    2. offer to delete local branches whose upstream is gone
       (switching to develop/main/master first if needed)
    3. rebase every local branch onto its remote counterpart
    4. switch back to the branch that was checked out
    5. update submodules

    Use --dry-run to see what would happen without touching anything.

    \b
    Examples:
        gbulk pull-all
        gbulk pull-all --yes -d ~/src
        gbulk pull-all --dry-run
    """
    config, repos = resolve_repos(ctx, directory, output_json)
    if not repos:
        return

    options = PullOptions(
        auto_confirm=yes or bool(config.get('pull', {}).get('auto_confirm', False)),
        dry_run=dry_run,
    )

    if not output_json:
        render_header(
            f"Pulling {len(repos)} repositories{' (DRY-RUN)' if dry_run else ''}..."
        )

    service = PullService(config=config)
    with StatusBoard(enabled=False if output_json else None) as board:
        summary = service.pull_repos(repos, options, board)

    if output_json:
        emit_summary(summary)
    else:
        render_results(summary)
