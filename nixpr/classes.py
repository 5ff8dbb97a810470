# The MIT License (MIT)
# Copyright © 2025 Entrius

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class PullRequest:
    """Open pull request as listed by the GitHub REST API"""

    number: int
    title: str
    author: str

    @classmethod
    def from_github_response(cls, item: Dict[str, Any]) -> 'PullRequest':
        """Create PullRequest from a GitHub REST pulls item"""
        return cls(
            number=int(item['number']),
            title=item.get('title') or '',
            author=(item.get('user') or {}).get('login', ''),
        )

    def __str__(self) -> str:
        return f"PullRequest(#{self.number}, author={self.author})"


@dataclass(frozen=True)
class WorkflowRun:
    """A review workflow run as reported by `gh run list --json`"""

    run_id: Optional[int]
    display_title: str
    status: str
    conclusion: Optional[str]
    created_at: str

    @classmethod
    def from_gh_json(cls, item: Dict[str, Any]) -> 'WorkflowRun':
        return cls(
            run_id=item.get('databaseId'),
            display_title=item.get('displayTitle', ''),
            status=item.get('status', ''),
            conclusion=item.get('conclusion') or None,
            created_at=item.get('createdAt', ''),
        )

    @property
    def conclusion_label(self) -> str:
        return self.conclusion or 'running'


@dataclass
class TriggerResult:
    """Outcome of one review trigger"""

    number: int
    package_name: Optional[str]
    succeeded: bool
    reason: Optional[str] = None


class RunOutcome(Enum):
    """How a triage run terminated"""

    NOTHING_TO_DO = "nothing_to_do"
    DRY_RUN = "dry_run"
    COMPLETED = "completed"


@dataclass
class RunReport:
    """Summary of a triage run"""

    outcome: RunOutcome
    fetched: int = 0
    matched: int = 0
    new_prs: List[PullRequest] = field(default_factory=list)
    results: List[TriggerResult] = field(default_factory=list)

    @property
    def new(self) -> int:
        return len(self.new_prs)

    @property
    def triggered(self) -> int:
        return sum(1 for r in self.results if r.succeeded)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.succeeded)

    @property
    def all_failed(self) -> bool:
        """True when triggers were attempted and none succeeded."""
        return bool(self.results) and self.triggered == 0
