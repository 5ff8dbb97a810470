# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Triage run: fetch -> filter -> dedupe -> trigger -> persist.

Fatal failures (StateError while loading, FetchError while fetching) propagate
before anything is written. A TriggerError only affects its own PR and is
recorded in that PR's TriggerResult.
"""

import logging
from enum import Enum
from typing import Callable, List, Optional, Set

from nixpr.classes import PullRequest, RunOutcome, RunReport, TriggerResult
from nixpr.errors import TriggerError
from nixpr.runner.base import ReviewRunner
from nixpr.triage.classifier import extract_package_name
from nixpr.triage.exclusion import FilterRules, filter_pull_requests
from nixpr.triage.state import ProcessedStore, mark_processed

FetchPullRequests = Callable[[int], List[PullRequest]]


class RunStage(Enum):
    FETCHING = "fetching"
    FILTERING = "filtering"
    DEDUPLICATING = "deduplicating"
    DRY_RUN_REPORT = "dry_run_report"
    TRIGGERING = "triggering"
    PERSISTING = "persisting"
    DONE = "done"


class TriageOrchestrator:
    """Runs one triage pass over the open PRs."""

    def __init__(
        self,
        fetch_prs: FetchPullRequests,
        rules: FilterRules,
        store: ProcessedStore,
        runner: ReviewRunner,
    ):
        self.fetch_prs = fetch_prs
        self.rules = rules
        self.store = store
        self.runner = runner
        self.stage: Optional[RunStage] = None
        self.logger = logging.getLogger(__name__)

    def _enter(self, stage: RunStage) -> None:
        self.stage = stage
        self.logger.debug(f"Entering stage: {stage.value}")

    def run(self, limit: int, dry_run: bool = False, force: bool = False) -> RunReport:
        """
        Execute a triage run.

        Args:
            limit: Total number of open PRs to fetch
            dry_run: Report matching PRs without triggering or saving anything
            force: Ignore the processed set when selecting PRs

        Returns:
            RunReport with the counts and per-PR trigger results

        Raises:
            StateError: the processed set could not be loaded or saved
            FetchError: the PR listing could not be retrieved
        """
        processed = self.store.load()

        self._enter(RunStage.FETCHING)
        all_prs = self.fetch_prs(limit)

        self._enter(RunStage.FILTERING)
        matching = filter_pull_requests(self.rules, all_prs)
        self.logger.info(f"{len(matching)} PRs match filters")

        self._enter(RunStage.DEDUPLICATING)
        new_prs = matching if force else [pr for pr in matching if pr.number not in processed]
        self.logger.info(f"{len(new_prs)} new PRs to review")

        report = RunReport(
            outcome=RunOutcome.COMPLETED,
            fetched=len(all_prs),
            matched=len(matching),
            new_prs=new_prs,
        )

        if not new_prs:
            report.outcome = RunOutcome.NOTHING_TO_DO
            self._enter(RunStage.DONE)
            return report

        if dry_run:
            report.outcome = RunOutcome.DRY_RUN
            self._enter(RunStage.DRY_RUN_REPORT)
            self._enter(RunStage.DONE)
            return report

        self._enter(RunStage.TRIGGERING)
        report.results = self._trigger_all(new_prs, processed)

        self._enter(RunStage.PERSISTING)
        if report.triggered:
            self.store.save(processed)
            self.logger.info(f"Marked {report.triggered} PRs as processed")
        else:
            self.logger.warning("No review was triggered, processed set left untouched")

        self._enter(RunStage.DONE)
        return report

    def _trigger_all(self, prs: List[PullRequest], processed: Set[int]) -> List[TriggerResult]:
        results = []
        for pr in prs:
            result = TriggerResult(number=pr.number, package_name=extract_package_name(pr.title), succeeded=False)
            try:
                self.runner.trigger_review(pr.number)
            except TriggerError as e:
                result.reason = e.reason
                self.logger.error(f"Review trigger failed for PR #{pr.number}: {e.reason}")
            else:
                result.succeeded = True
                mark_processed(processed, pr.number)

            results.append(result)
        return results
