# The MIT License (MIT)
# Copyright © 2025 Entrius

import json
import logging
import subprocess
from typing import List, Tuple

import click

from nixpr.classes import WorkflowRun
from nixpr.constants import BASE_GITHUB_URL, DEFAULT_REVIEW_REPO, DEFAULT_REVIEW_WORKFLOW
from nixpr.errors import CollaboratorError, TriggerError
from nixpr.runner.base import ReviewRunner

RUN_JSON_FIELDS = 'databaseId,displayTitle,status,conclusion,createdAt'


class GhCliRunner(ReviewRunner):
    """Review workflow actions through the GitHub CLI (`gh`)."""

    def __init__(self, repo: str = DEFAULT_REVIEW_REPO, workflow: str = DEFAULT_REVIEW_WORKFLOW):
        self.repo = repo
        self.workflow = workflow
        self.logger = logging.getLogger(__name__)

    def _run_gh_command(self, cmd: List[str]) -> Tuple[bool, str]:
        """Run a gh command and return success status and output (stdout, or stderr on failure)."""
        try:
            result = subprocess.run(["gh"] + cmd, capture_output=True, text=True, check=True)
            return True, result.stdout
        except subprocess.CalledProcessError as e:
            self.logger.error(f"gh command failed: {' '.join(['gh'] + cmd)}")
            self.logger.error(f"Error: {e.stderr}")
            return False, (e.stderr or '').strip() or f"exit status {e.returncode}"
        except FileNotFoundError:
            self.logger.error("gh not found. Please install the GitHub CLI first.")
            return False, "Failed to run `gh` CLI. Is it installed?"

    def _parse_runs(self, output: str) -> List[WorkflowRun]:
        try:
            data = json.loads(output or '[]')
        except json.JSONDecodeError as e:
            raise CollaboratorError("Failed to parse workflow runs", str(e)) from e
        if not isinstance(data, list):
            raise CollaboratorError("Failed to parse workflow runs", "expected a JSON list")
        return [WorkflowRun.from_gh_json(item) for item in data]

    def trigger_review(self, pr_number: int) -> None:
        self.logger.info(f"Triggering {self.workflow} on {self.repo} for PR #{pr_number}")
        success, output = self._run_gh_command(
            ["workflow", "run", self.workflow, "--repo", self.repo, "--field", f"pr={pr_number}"]
        )
        if not success:
            raise TriggerError(pr_number, output)

    def list_runs(self, limit: int) -> List[WorkflowRun]:
        success, output = self._run_gh_command(
            ["run", "list", "--repo", self.repo, "--limit", str(limit), "--json", RUN_JSON_FIELDS]
        )
        if not success:
            raise CollaboratorError("gh run list failed", output)
        return self._parse_runs(output)

    def search_runs(self) -> List[WorkflowRun]:
        # gh's default page of recent runs
        success, output = self._run_gh_command(["run", "list", "--repo", self.repo, "--json", RUN_JSON_FIELDS])
        if not success:
            raise CollaboratorError("Failed to check PR runs", output)
        return self._parse_runs(output)

    def latest_run_logs(self) -> Tuple[int, str]:
        success, output = self._run_gh_command(
            ["run", "list", "--repo", self.repo, "--limit", "1", "--json", "databaseId", "--jq", ".[0].databaseId"]
        )
        if not success:
            raise CollaboratorError("Failed to get latest run ID", output)

        run_id = output.strip()
        if not run_id or run_id == 'null':
            raise CollaboratorError("No workflow runs found")
        if not run_id.isdigit():
            raise CollaboratorError("Failed to get latest run ID", f"unexpected output {run_id!r}")

        success, logs = self._run_gh_command(["run", "view", run_id, "--repo", self.repo, "--log"])
        if not success:
            raise CollaboratorError("gh run view failed", logs)
        return int(run_id), logs

    def actions_url(self) -> str:
        return f"{BASE_GITHUB_URL}/{self.repo}/actions"

    def open_web(self) -> str:
        url = self.actions_url()
        if click.launch(url) != 0:
            raise CollaboratorError(f"Failed to open {url}")
        return url
