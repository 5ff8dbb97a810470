# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Tests for the triage run: filtering, dedupe, dry run, partial trigger
failures and persistence.
"""

import json

import pytest

from nixpr.classes import RunOutcome
from nixpr.errors import FetchError, StateError
from nixpr.triage.exclusion import FilterRules
from nixpr.triage.orchestrator import RunStage, TriageOrchestrator


def _fetcher(prs, calls=None):
    def fetch(limit):
        if calls is not None:
            calls.append(limit)
        return list(prs)[:limit]

    return fetch


def _orchestrator(prs, store, runner, calls=None):
    return TriageOrchestrator(_fetcher(prs, calls), FilterRules(), store, runner)


class TestRun:
    def test_triggers_matching_prs_in_source_order(self, sample_prs, store, fake_runner):
        report = _orchestrator(sample_prs, store, fake_runner).run(limit=100)

        assert report.outcome is RunOutcome.COMPLETED
        assert fake_runner.triggered == [5005, 5003, 4999]
        assert report.fetched == 7
        assert report.matched == 3
        assert report.new == 3
        assert report.triggered == 3
        assert report.failed == 0
        assert store.load() == {5005, 5003, 4999}

    def test_package_names_reported(self, sample_prs, store, fake_runner):
        report = _orchestrator(sample_prs, store, fake_runner).run(limit=100)
        assert [r.package_name for r in report.results] == ['rundeck', 'fastfetch-rs', 'hello']

    def test_limit_passed_to_fetcher(self, sample_prs, store, fake_runner):
        calls = []
        _orchestrator(sample_prs, store, fake_runner, calls).run(limit=42)
        assert calls == [42]

    def test_stage_done_after_run(self, sample_prs, store, fake_runner):
        orchestrator = _orchestrator(sample_prs, store, fake_runner)
        orchestrator.run(limit=100)
        assert orchestrator.stage is RunStage.DONE


class TestIdempotence:
    def test_second_run_triggers_nothing(self, sample_prs, store, fake_runner):
        orchestrator = _orchestrator(sample_prs, store, fake_runner)
        orchestrator.run(limit=100)
        fake_runner.triggered.clear()

        report = orchestrator.run(limit=100)

        assert report.outcome is RunOutcome.NOTHING_TO_DO
        assert report.matched == 3
        assert report.new == 0
        assert fake_runner.triggered == []

    def test_processed_pr_stays_processed_until_reset(self, sample_prs, store, fake_runner, pr_factory):
        _orchestrator(sample_prs, store, fake_runner).run(limit=100)

        newer = [pr_factory(6000, 'zig: 0.13 -> 0.14')] + sample_prs
        fake_runner.triggered.clear()
        _orchestrator(newer, store, fake_runner).run(limit=100)
        assert fake_runner.triggered == [6000]
        assert 5005 in store.load()

        store.clear()
        fake_runner.triggered.clear()
        _orchestrator(newer, store, fake_runner).run(limit=100)
        assert fake_runner.triggered == [6000, 5005, 5003, 4999]

    def test_force_retriggers_processed(self, sample_prs, store, fake_runner):
        store.save({5005, 5003, 4999})

        report = _orchestrator(sample_prs, store, fake_runner).run(limit=100, force=True)

        assert report.new == 3
        assert fake_runner.triggered == [5005, 5003, 4999]


class TestDryRun:
    def test_reports_without_triggering_or_saving(self, sample_prs, store, fake_runner):
        report = _orchestrator(sample_prs, store, fake_runner).run(limit=100, dry_run=True)

        assert report.outcome is RunOutcome.DRY_RUN
        assert [pr.number for pr in report.new_prs] == [5005, 5003, 4999]
        assert report.results == []
        assert fake_runner.triggered == []
        assert not store.path.exists()

    def test_dry_run_respects_processed_set(self, sample_prs, store, fake_runner):
        store.save({5005})
        report = _orchestrator(sample_prs, store, fake_runner).run(limit=100, dry_run=True)
        assert [pr.number for pr in report.new_prs] == [5003, 4999]


class TestNothingToDo:
    def test_no_matching_prs(self, store, fake_runner, pr_factory):
        prs = [pr_factory(1, 'Fix typo in readme')]
        report = _orchestrator(prs, store, fake_runner).run(limit=100)

        assert report.outcome is RunOutcome.NOTHING_TO_DO
        assert report.fetched == 1
        assert report.matched == 0
        assert not store.path.exists()


class TestPartialFailure:
    def test_second_trigger_fails(self, store, fake_runner, pr_factory):
        prs = [
            pr_factory(3, 'a: 1 -> 2'),
            pr_factory(2, 'b: init at 1.0'),
            pr_factory(1, 'c: 3 -> 4'),
        ]
        fake_runner.fail_for = {2}

        report = _orchestrator(prs, store, fake_runner).run(limit=100)

        assert report.triggered == 2
        assert report.failed == 1
        assert not report.all_failed
        assert fake_runner.triggered == [3, 1]
        failed = [r for r in report.results if not r.succeeded]
        assert failed[0].number == 2
        assert failed[0].reason == 'gh workflow run failed'
        assert store.load() == {3, 1}

    def test_all_failed_leaves_store_untouched(self, store, fake_runner, pr_factory):
        prs = [pr_factory(2, 'a: 1 -> 2'), pr_factory(1, 'b: 1 -> 2')]
        fake_runner.fail_for = {1, 2}

        report = _orchestrator(prs, store, fake_runner).run(limit=100)

        assert report.all_failed
        assert report.triggered == 0
        assert not store.path.exists()

    def test_all_failed_keeps_prior_state(self, store, fake_runner, pr_factory):
        store.save({99})
        before = store.path.read_text()
        fake_runner.fail_for = {1}

        _orchestrator([pr_factory(1, 'a: 1 -> 2')], store, fake_runner).run(limit=100)

        assert store.path.read_text() == before


class TestFatalErrors:
    def test_fetch_error_aborts_without_writing(self, store, fake_runner):
        store.save({1})
        before = store.path.read_text()

        def failing_fetch(limit):
            raise FetchError(2, 'GitHub API returned 500')

        orchestrator = TriageOrchestrator(failing_fetch, FilterRules(), store, fake_runner)
        with pytest.raises(FetchError) as exc_info:
            orchestrator.run(limit=200)

        assert exc_info.value.page == 2
        assert orchestrator.stage is RunStage.FETCHING
        assert fake_runner.triggered == []
        assert store.path.read_text() == before

    def test_corrupt_state_aborts_before_fetch(self, sample_prs, store, fake_runner):
        store.path.parent.mkdir(parents=True)
        store.path.write_text('not json')
        calls = []

        with pytest.raises(StateError):
            _orchestrator(sample_prs, store, fake_runner, calls).run(limit=100)

        assert calls == []
        assert fake_runner.triggered == []
        assert store.path.read_text() == 'not json'

    def test_saved_state_is_json_list(self, sample_prs, store, fake_runner):
        _orchestrator(sample_prs, store, fake_runner).run(limit=100)
        assert json.loads(store.path.read_text()) == [4999, 5003, 5005]
