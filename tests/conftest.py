# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Shared fixtures for nixpr tests."""

from typing import List, Set, Tuple

import pytest

from nixpr.classes import PullRequest, WorkflowRun
from nixpr.errors import CollaboratorError, TriggerError
from nixpr.runner.base import ReviewRunner
from nixpr.triage.state import ProcessedStore


class FakeRunner(ReviewRunner):
    """In-memory ReviewRunner recording every trigger call."""

    def __init__(self):
        self.triggered: List[int] = []
        self.fail_for: Set[int] = set()
        self.fail_reason = 'gh workflow run failed'
        self.runs: List[WorkflowRun] = []
        self.logs: Tuple[int, str] = (0, '')
        self.opened: List[str] = []

    def trigger_review(self, pr_number: int) -> None:
        if pr_number in self.fail_for:
            raise TriggerError(pr_number, self.fail_reason)
        self.triggered.append(pr_number)

    def list_runs(self, limit: int) -> List[WorkflowRun]:
        return self.runs[:limit]

    def search_runs(self) -> List[WorkflowRun]:
        return list(self.runs)

    def latest_run_logs(self) -> Tuple[int, str]:
        if not self.runs:
            raise CollaboratorError('No workflow runs found')
        return self.logs

    def actions_url(self) -> str:
        return 'https://github.com/owner/review/actions'

    def open_web(self) -> str:
        self.opened.append(self.actions_url())
        return self.actions_url()


def make_pr(number: int, title: str, author: str = 'alice') -> PullRequest:
    return PullRequest(number=number, title=title, author=author)


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def store(tmp_path):
    return ProcessedStore(tmp_path / 'state' / 'processed.json')


@pytest.fixture
def sample_prs():
    """Newest first, as the GitHub listing returns them."""
    return [
        make_pr(5005, 'rundeck: 5.18.0 -> 5.19.0'),
        make_pr(5004, 'nixos/nginx: add option', author='bob'),
        make_pr(5003, 'fastfetch-rs: init at 0.1.6', author='carol'),
        make_pr(5002, 'python312Packages.foo: 1.0 -> 2.0', author='r-ryantm'),
        make_pr(5001, 'treewide: update something', author='dave'),
        make_pr(5000, 'Fix typo in readme', author='erin'),
        make_pr(4999, 'hello: 2.12 -> 2.12.1', author='frank'),
    ]


@pytest.fixture
def pr_factory():
    return make_pr
