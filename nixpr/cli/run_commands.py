# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Triage commands.

Commands:
    nixpr run [--limit N] [--dry-run] [--force]
    nixpr reset
"""

from functools import partial

import click
from rich.markup import escape

from nixpr.classes import RunOutcome
from nixpr.constants import DEFAULT_RUN_LIMIT
from nixpr.errors import FetchError, StateError
from nixpr.triage.orchestrator import TriageOrchestrator
from nixpr.utils.github_api_tools import fetch_open_pull_requests

from .helpers import (
    build_pr_table,
    console,
    format_trigger_result,
    get_config,
    get_runner,
    get_store,
    print_error,
    print_run_summary,
    print_success,
)


@click.command('run')
@click.option(
    '--limit',
    '-l',
    default=DEFAULT_RUN_LIMIT,
    show_default=True,
    type=click.IntRange(min=1),
    help='Total number of PRs to fetch (pagination is automatic)',
)
@click.option('--dry-run', '-d', is_flag=True, help='Show matching PRs without triggering reviews')
@click.option('--force', '-f', is_flag=True, help='Re-review PRs that were already processed')
@click.pass_context
def run(ctx: click.Context, limit: int, dry_run: bool, force: bool):
    """Fetch open PRs, filter them, and trigger reviews.

    Exits with status 1 when every attempted review trigger failed.

    \b
    Examples:
        nixpr run
        nixpr run --limit 300 --dry-run
        nixpr r -l 50 --force
    """
    config = get_config(ctx)
    runner = get_runner(ctx)
    fetch_prs = partial(
        fetch_open_pull_requests,
        repository=config.github.repository,
        token=config.github_token(),
    )
    orchestrator = TriageOrchestrator(fetch_prs, config.filter_rules(), get_store(ctx), runner)

    console.print(f'[dim]Fetching up to {limit} open PRs from {escape(config.github.repository)}...[/dim]')
    try:
        report = orchestrator.run(limit=limit, dry_run=dry_run, force=force)
    except StateError as e:
        raise click.ClickException(f"Processed PR state: {e}")
    except FetchError as e:
        raise click.ClickException(str(e))

    console.print(f'\n{report.matched} of {report.fetched} PRs match filters, {report.new} new')

    if report.outcome is RunOutcome.NOTHING_TO_DO:
        console.print('[yellow]Nothing new to review.[/yellow]')
        return

    console.print(build_pr_table(report.new_prs))

    if report.outcome is RunOutcome.DRY_RUN:
        console.print('[yellow]Dry run, no reviews triggered.[/yellow]')
        return

    for result in report.results:
        if result.succeeded:
            print_success(format_trigger_result(result))
        else:
            print_error(format_trigger_result(result))

    print_run_summary(report)
    if report.triggered:
        console.print(f'[green]Marked {report.triggered} PRs as processed[/green]')
    console.print(f'[dim]Follow progress: {escape(runner.actions_url())}[/dim]')

    if report.all_failed:
        raise click.ClickException(f'All {report.failed} review triggers failed')


@click.command('reset')
@click.pass_context
def reset(ctx: click.Context):
    """Clear the list of already processed PRs."""
    try:
        get_store(ctx).clear()
    except StateError as e:
        raise click.ClickException(f'Clearing processed PRs failed: {e}')
    print_success('Processed PR list cleared.')
