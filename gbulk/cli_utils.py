"""
Common CLI utilities and decorators for consistent command behavior.
"""

import os
from typing import Any, Dict, List, Optional, Tuple

import click

from .config import load_config
from .discovery import find_git_repos
from .render import render_notice

NO_REPOS_MESSAGE = "No git repositories found!"


def directory_option(f):
    """Decorator adding -d/--directory to a command."""
    return click.option(
        '-d', '--directory',
        default=None,
        help='Base directory to search for repositories (default: .)'
    )(f)


def json_option(f):
    """Decorator adding --json (JSONL output) to a command."""
    return click.option('--json', 'output_json', is_flag=True, help='Output as JSONL')(f)


def get_config(ctx: click.Context) -> Dict[str, Any]:
    """Configuration loaded by the root group, or loaded now."""
    obj = ctx.ensure_object(dict)
    if obj.get('config') is None:
        obj['config'] = load_config()
    return obj['config']


def resolve_base_directory(ctx: click.Context, directory: Optional[str]) -> str:
    """Command option wins over the group option, which wins over config."""
    config = get_config(ctx)
    base = (
        directory
        or ctx.ensure_object(dict).get('directory')
        or config.get('general', {}).get('directory')
        or '.'
    )
    return os.path.expanduser(base)


def resolve_repos(
    ctx: click.Context,
    directory: Optional[str],
    output_json: bool = False
) -> Tuple[Dict[str, Any], List[str]]:
    """Discover repositories for a command.

    Prints the "no repositories" notice when discovery comes back empty.

    Returns:
        (config, repos)
    """
    config = get_config(ctx)
    base = resolve_base_directory(ctx, directory)
    exclude = config.get('discovery', {}).get('exclude_directories')
    repos = find_git_repos(base, exclude=exclude)

    if not repos:
        if output_json:
            click.echo(NO_REPOS_MESSAGE, err=True)
        else:
            render_notice(NO_REPOS_MESSAGE)

    return config, repos
