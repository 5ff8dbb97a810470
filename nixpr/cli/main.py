# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
nixpr CLI - Main entry point

Usage:
    nixpr run [--limit N] [--dry-run] [--force]   - Trigger reviews for new package PRs (alias: r)
    nixpr status [--limit N]                      - Show recent workflow runs (alias: s)
    nixpr logs                                    - Show logs of the latest run
    nixpr web                                     - Open the Actions page
    nixpr check <PR>                              - Show runs for one PR
    nixpr reset                                   - Forget processed PRs
    nixpr config                                  - Show/initialise configuration
"""

import click
from dotenv import load_dotenv

from nixpr import __version__
from nixpr.constants import LOG_FILE
from nixpr.utils.logging import setup_logging

from .config_commands import config_group
from .run_commands import reset, run
from .workflow_commands import check, logs, status, web


class AliasGroup(click.Group):
    """Group whose commands can be registered with short aliases, e.g. `nixpr r`."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.aliases = {}  # alias -> command name

    def add_command(self, cmd, name=None, aliases=()):
        super().add_command(cmd, name)
        name = name or cmd.name
        for alias in aliases:
            if alias in self.commands or self.aliases.get(alias, name) != name:
                raise ValueError(f'Alias {alias!r} for {name!r} is already taken')
            self.aliases[alias] = name

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def format_commands(self, ctx, formatter):
        """List each command once, with its aliases in parentheses."""
        rows = []
        for name in self.list_commands(ctx):
            cmd = self.commands[name]
            if cmd.hidden:
                continue
            shortcuts = sorted(a for a, target in self.aliases.items() if target == name)
            label = f'{name} ({", ".join(shortcuts)})' if shortcuts else name
            rows.append((label, cmd.get_short_help_str(limit=150)))

        if rows:
            with formatter.section('Commands'):
                formatter.write_dl(rows)


@click.group(cls=AliasGroup)
@click.version_option(version=__version__, prog_name='nixpr')
@click.option(
    '--config',
    'config_path',
    type=click.Path(dir_okay=False),
    envvar='NIXPR_CONFIG',
    help='Config file (default: ~/.nixpr/config.json)',
)
@click.option(
    '--state-file',
    'state_path',
    type=click.Path(dir_okay=False),
    envvar='NIXPR_STATE',
    help='Processed PR state file (default: ~/.nixpr/processed.json)',
)
@click.option(
    '--log-level',
    default='WARNING',
    show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    help='Logging level',
)
@click.option('--log-file', is_flag=True, help=f'Also write logs to {LOG_FILE}')
@click.pass_context
def cli(ctx, config_path, state_path, log_level, log_file):
    """nixpr - Automatically review NixOS/nixpkgs pull requests"""
    load_dotenv()
    setup_logging(log_level, LOG_FILE if log_file else None)

    obj = ctx.ensure_object(dict)
    obj.setdefault('config_path', config_path)
    obj.setdefault('state_path', state_path)


cli.add_command(run, aliases=('r',))
cli.add_command(status, aliases=('s',))
cli.add_command(logs)
cli.add_command(web)
cli.add_command(check)
cli.add_command(reset)
cli.add_command(config_group)


def main():
    """Main entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
