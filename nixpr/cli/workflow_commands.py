# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Read-only commands against the review workflow run history.

Commands:
    nixpr status [--limit N]
    nixpr logs
    nixpr web
    nixpr check <PR_NUMBER>
"""

import click
from rich.markup import escape

from nixpr.constants import DEFAULT_STATUS_LIMIT
from nixpr.errors import CollaboratorError

from .helpers import build_runs_table, colorize_conclusion, console, get_runner


@click.command('status')
@click.option(
    '--limit',
    '-l',
    default=DEFAULT_STATUS_LIMIT,
    show_default=True,
    type=click.IntRange(min=1, max=255),
    help='Number of runs to display',
)
@click.pass_context
def status(ctx: click.Context, limit: int):
    """Show recent workflow runs."""
    runner = get_runner(ctx)
    try:
        runs = runner.list_runs(limit)
    except CollaboratorError as e:
        raise click.ClickException(str(e))

    if not runs:
        console.print('[yellow]No workflow runs found.[/yellow]')
        return

    console.print(build_runs_table(runs))


@click.command('logs')
@click.pass_context
def logs(ctx: click.Context):
    """Show logs of the latest workflow run."""
    runner = get_runner(ctx)
    try:
        run_id, log_text = runner.latest_run_logs()
    except CollaboratorError as e:
        raise click.ClickException(str(e))

    console.print(f'[bold]Logs for run #{run_id}:[/bold]')
    # Raw log text may contain square brackets; bypass rich markup
    click.echo(log_text)


@click.command('web')
@click.pass_context
def web(ctx: click.Context):
    """Open the GitHub Actions page in a browser."""
    runner = get_runner(ctx)
    try:
        url = runner.open_web()
    except CollaboratorError as e:
        raise click.ClickException(str(e))
    console.print(f'[dim]Opened {escape(url)}[/dim]')


@click.command('check')
@click.argument('pr_number', type=click.IntRange(min=1))
@click.pass_context
def check(ctx: click.Context, pr_number: int):
    """Check review runs for a specific PR.

    \b
    Example:
        nixpr check 412345
    """
    runner = get_runner(ctx)
    console.print(f'Searching runs for PR #{pr_number}...')
    try:
        runs = runner.find_runs_for_pr(pr_number)
    except CollaboratorError as e:
        raise click.ClickException(str(e))

    if not runs:
        console.print(f'[yellow]No runs found for PR #{pr_number}[/yellow]')
        return

    for run in runs:
        console.print(f'{escape(run.created_at)} - {escape(run.status)} - {colorize_conclusion(run.conclusion_label)}')
