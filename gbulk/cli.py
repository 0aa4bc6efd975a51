#!/usr/bin/env python3

import sys

import click

from gbulk import __version__
from gbulk.config import load_config, configure_logging
from gbulk.exit_codes import CommandError
from gbulk.commands.list import list_handler
from gbulk.commands.pull import pull_all_handler
from gbulk.commands.exec import exec_handler
from gbulk.commands.submodule import submodule_list_handler, submodule_update_handler


@click.group()
@click.version_option(version=__version__, prog_name='gbulk')
@click.option('-d', '--directory', default=None,
              help='Base directory to search for repositories (default: .)')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, directory, debug):
    """gbulk - Bulk git operations across multiple repositories.

    Finds every git working copy below a directory and runs the same
    operation in all of them at once.
    """
    config = load_config()
    configure_logging(config, debug=debug)
    ctx.ensure_object(dict)
    ctx.obj['config'] = config
    ctx.obj['directory'] = directory


cli.add_command(list_handler)
cli.add_command(pull_all_handler)
cli.add_command(exec_handler)
cli.add_command(submodule_list_handler)
cli.add_command(submodule_update_handler)


def main():
    try:
        cli()
    except CommandError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(e.exit_code)

if __name__ == "__main__":
    main()
