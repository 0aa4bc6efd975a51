"""
Handles the 'list' command for showing discovered repositories.
"""

import click

from ..cli_utils import directory_option, json_option, resolve_repos
from ..output import emit
from ..render import render_repo_list


@click.command(name='list')
@directory_option
@json_option
@click.pass_context
def list_handler(ctx, directory, output_json):
    """List all git repositories found.

    \b
    Examples:
        gbulk list
        gbulk list -d ~/src
        gbulk list --json
    """
    _, repos = resolve_repos(ctx, directory, output_json)
    if not repos:
        return

    if output_json:
        emit({'path': repo} for repo in repos)
    else:
        render_repo_list(repos)
