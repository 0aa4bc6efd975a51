"""
Handles the 'exec' command: run a git command in every repository.
"""

import click

from ..cli_utils import directory_option, json_option, resolve_repos
from ..output import emit_summary
from ..progress import StatusBoard
from ..render import render_header, render_results
from ..services.exec_service import ExecService


@click.command(
    name='exec',
    context_settings={'ignore_unknown_options': True, 'allow_interspersed_args': False}
)
@directory_option
@json_option
@click.argument('git_args', nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def exec_handler(ctx, directory, output_json, git_args):
    """Run custom git command in all repositories.

    Everything after the options is passed to git verbatim.

    \b
    Examples:
        gbulk exec status --short
        gbulk exec -d ~/src log --oneline -1
        gbulk exec --json remote -v
    """
    config, repos = resolve_repos(ctx, directory, output_json)
    if not repos:
        return

    git_args = list(git_args)
    if not output_json:
        render_header(f"Running 'git {' '.join(git_args)}' in {len(repos)} repositories...")

    service = ExecService(config=config)
    with StatusBoard(enabled=False if output_json else None) as board:
        summary = service.exec_repos(repos, git_args, board)

    if output_json:
        emit_summary(summary)
    else:
        render_results(summary)
