# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Shared helper functions for nixpr commands
"""

from typing import List

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from nixpr.classes import PullRequest, RunReport, TriggerResult, WorkflowRun
from nixpr.config import Config, load_config
from nixpr.errors import ConfigError
from nixpr.runner import GhCliRunner, ReviewRunner
from nixpr.triage.classifier import extract_package_name
from nixpr.triage.state import ProcessedStore

# Status display colors
CONCLUSION_COLORS = {
    'success': 'green',
    'failure': 'red',
    'cancelled': 'dim',
    'skipped': 'dim',
    'running': 'yellow',
}

console = Console()


def print_success(message: str) -> None:
    """Print a standardized success message."""
    console.print(f'  [green]✓[/green] {message}')


def print_error(message: str) -> None:
    """Print a standardized error message."""
    console.print(f'  [red]✗[/red] {message}')


def colorize_conclusion(conclusion: str) -> str:
    color = CONCLUSION_COLORS.get(conclusion, 'white')
    return f'[{color}]{escape(conclusion)}[/{color}]'


# ---------------------------------------------------------------------------
# Context accessors
# ---------------------------------------------------------------------------


def get_config(ctx: click.Context) -> Config:
    """Load the config once per invocation; a malformed file aborts the command."""
    obj = ctx.ensure_object(dict)
    if 'config' not in obj:
        try:
            obj['config'] = load_config(obj.get('config_path'))
        except ConfigError as e:
            raise click.ClickException(f'Loading configuration failed: {e}')
    return obj['config']


def get_runner(ctx: click.Context) -> ReviewRunner:
    obj = ctx.ensure_object(dict)
    if 'runner' not in obj:
        config = get_config(ctx)
        obj['runner'] = GhCliRunner(repo=config.review.repo, workflow=config.review.workflow)
    return obj['runner']


def get_store(ctx: click.Context) -> ProcessedStore:
    obj = ctx.ensure_object(dict)
    if 'store' not in obj:
        obj['store'] = ProcessedStore(obj.get('state_path'))
    return obj['store']


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def build_pr_table(prs: List[PullRequest]) -> Table:
    """Build a Rich table listing PRs selected for review."""
    table = Table(show_header=True, header_style='bold magenta')
    table.add_column('PR #', style='cyan', justify='right')
    table.add_column('Package', style='green')
    table.add_column('Title', max_width=60)
    table.add_column('Author', style='yellow')

    for pr in prs:
        table.add_row(
            str(pr.number),
            escape(extract_package_name(pr.title) or 'unknown'),
            escape(pr.title),
            escape(f'@{pr.author}'),
        )

    return table


def build_runs_table(runs: List[WorkflowRun]) -> Table:
    table = Table(show_header=True, header_style='bold magenta')
    table.add_column('Run', style='cyan', justify='right')
    table.add_column('Title', max_width=60)
    table.add_column('Status')
    table.add_column('Conclusion')
    table.add_column('Created', style='dim')

    for run in runs:
        table.add_row(
            str(run.run_id) if run.run_id is not None else '-',
            escape(run.display_title),
            escape(run.status),
            colorize_conclusion(run.conclusion_label),
            escape(run.created_at),
        )

    return table


def format_trigger_result(result: TriggerResult) -> str:
    """Rich markup line for one trigger outcome; package and reason are escaped."""
    package = escape(f'[{result.package_name or "unknown"}]')
    if result.succeeded:
        return f'PR #{result.number} {package} review triggered'
    return f'PR #{result.number} {package} FAILED: {escape(result.reason or "")}'


def print_run_summary(report: RunReport) -> None:
    console.print(
        f'\n[dim]Fetched {report.fetched} • matched {report.matched} • new {report.new} '
        f'• triggered {report.triggered} • failed {report.failed}[/dim]'
    )
