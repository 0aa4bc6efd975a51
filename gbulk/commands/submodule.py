"""
Handles the 'submodule-list' and 'submodule-update' commands.
"""

import click

from ..cli_utils import directory_option, json_option, resolve_repos
from ..output import emit, emit_summary
from ..progress import StatusBoard
from ..render import render_header, render_notice, render_results, render_submodule_listings
from ..services.submodule_service import SubmoduleService


@click.command(name='submodule-list')
@directory_option
@json_option
@click.pass_context
def submodule_list_handler(ctx, directory, output_json):
    """List repositories with submodules.

    \b
    Examples:
        gbulk submodule-list
        gbulk submodule-list -d ~/src --json
    """
    config, repos = resolve_repos(ctx, directory, output_json)
    if not repos:
        return

    listings = SubmoduleService(config=config).list_submodules(repos)
    if output_json:
        emit(listings)
    else:
        render_submodule_listings(listings)


@click.command(name='submodule-update')
@directory_option
@click.option('-b', '--branch', default=None,
              help='Branch to check out in every submodule (default: main)')
@json_option
@click.pass_context
def submodule_update_handler(ctx, directory, branch, output_json):
    """Update submodules in all repositories.

    Checks out the branch in every submodule, then pulls with
    --autostash --rebase.

    \b
    Examples:
        gbulk submodule-update
        gbulk submodule-update --branch develop
    """
    config, repos = resolve_repos(ctx, directory, output_json)
    if not repos:
        return

    service = SubmoduleService(config=config)
    targets = service.repos_with_submodules(repos)
    if not targets:
        if output_json:
            click.echo("No repositories with submodules found!", err=True)
        else:
            render_notice("No repositories with submodules found!")
        return

    if not output_json:
        render_header(f"Updating submodules in {len(targets)} repositories...")

    with StatusBoard(enabled=False if output_json else None) as board:
        summary = service.update_repos(targets, branch, board)

    if output_json:
        emit_summary(summary)
    else:
        render_results(summary)
