# The MIT License (MIT)
# Copyright © 2025 Entrius

import re
from abc import ABC, abstractmethod
from typing import List, Tuple

from nixpr.classes import WorkflowRun


class ReviewRunner(ABC):
    """Actions against the review workflow and its run history."""

    @abstractmethod
    def trigger_review(self, pr_number: int) -> None:
        """Start a review run for a PR. Raises TriggerError on failure."""

    @abstractmethod
    def list_runs(self, limit: int) -> List[WorkflowRun]:
        """Most recent runs, newest first."""

    @abstractmethod
    def search_runs(self) -> List[WorkflowRun]:
        """Runs considered when searching by PR number."""

    @abstractmethod
    def latest_run_logs(self) -> Tuple[int, str]:
        """Return (run id, log text) of the most recent run."""

    @abstractmethod
    def actions_url(self) -> str:
        ...

    @abstractmethod
    def open_web(self) -> str:
        """Open the workflow runs page in a browser and return its URL."""

    def find_runs_for_pr(self, pr_number: int) -> List[WorkflowRun]:
        """Runs whose display title mentions `#<pr_number>` (so #12 does not match #123)."""
        needle = re.compile(rf'#{pr_number}(?!\d)')
        return [run for run in self.search_runs() if needle.search(run.display_title)]
