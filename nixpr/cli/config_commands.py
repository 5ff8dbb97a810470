# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
CLI commands for nixpr configuration.

Users can configure:
- GitHub token and source repository
- Excluded PR authors and title prefixes
- Review workflow repository and workflow file
"""

import click
from rich.markup import escape
from rich.table import Table

from nixpr.config import get_config_path, write_default_config

from .helpers import console, get_config, print_success


def _mask(value: str) -> str:
    if len(value) <= 8:
        return '****'
    return value[:4] + '...' + value[-4:]


@click.group(name='config', invoke_without_command=True)
@click.pass_context
def config_group(ctx: click.Context):
    """Show or initialise the nixpr configuration.

    \b
    Subcommands:
        init      Write a config file with the defaults
        path      Print the config file location
    """
    # If no subcommand, show config
    if ctx.invoked_subcommand is None:
        show_config(ctx)


def show_config(ctx: click.Context):
    """Display the effective configuration."""
    config_path = get_config_path(ctx.obj.get('config_path'))
    config = get_config(ctx)

    console.print('\n[bold cyan]nixpr Configuration[/bold cyan]\n')

    table = Table(show_header=True, header_style='bold magenta')
    table.add_column('Setting', style='cyan')
    table.add_column('Value', style='green')

    token = config.github_token()
    table.add_row('github.token', escape(_mask(token)) if token else '(not set)')
    table.add_row('github.repository', escape(config.github.repository))
    table.add_row('filters.excluded_users', escape(', '.join(config.filters.excluded_users)) or '(none)')
    table.add_row('filters.excluded_prefixes', escape(', '.join(config.filters.excluded_prefixes)) or '(none)')
    table.add_row('review.repo', escape(config.review.repo))
    table.add_row('review.workflow', escape(config.review.workflow))

    console.print(table)
    if config_path.exists():
        console.print(f'\n[dim]Config file: {escape(str(config_path))}[/dim]')
    else:
        console.print(f'\n[dim]No config file at {escape(str(config_path))}, showing defaults[/dim]')


@config_group.command('init')
@click.option('--force', '-f', is_flag=True, help='Overwrite an existing config file')
@click.pass_context
def config_init(ctx: click.Context, force: bool):
    """Write a config file populated with the defaults."""
    config_path = get_config_path(ctx.obj.get('config_path'))
    if config_path.exists() and not force:
        raise click.ClickException(f'Config already exists at {config_path} (use --force to overwrite)')

    try:
        written = write_default_config(config_path)
    except OSError as e:
        raise click.ClickException(f'Failed to write config: {e}')
    print_success(f'Wrote default config to {escape(str(written))}')


@config_group.command('path')
@click.pass_context
def config_path_cmd(ctx: click.Context):
    """Print the config file location."""
    click.echo(str(get_config_path(ctx.obj.get('config_path'))))
