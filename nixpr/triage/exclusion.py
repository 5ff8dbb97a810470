# The MIT License (MIT)
# Copyright © 2025 Entrius

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from nixpr.classes import PullRequest
from nixpr.constants import DEFAULT_EXCLUDED_PREFIXES, DEFAULT_EXCLUDED_USERS
from nixpr.triage.classifier import is_package_pr


@dataclass(frozen=True)
class FilterRules:
    """Authors and title prefixes whose PRs are never reviewed"""

    excluded_users: Tuple[str, ...] = DEFAULT_EXCLUDED_USERS
    excluded_prefixes: Tuple[str, ...] = DEFAULT_EXCLUDED_PREFIXES

    @classmethod
    def from_lists(cls, excluded_users: Iterable[str], excluded_prefixes: Iterable[str]) -> 'FilterRules':
        return cls(excluded_users=tuple(excluded_users), excluded_prefixes=tuple(excluded_prefixes))

    def is_user_excluded(self, user: str) -> bool:
        user = user.casefold()
        return any(u.casefold() == user for u in self.excluded_users)

    def is_title_excluded(self, title: str) -> bool:
        lower = title.lower()
        return any(lower.startswith(prefix.lower()) for prefix in self.excluded_prefixes)


def is_excluded(rules: FilterRules, pr: PullRequest) -> bool:
    """Check a PR against the author and title-prefix exclusion rules."""
    return rules.is_user_excluded(pr.author) or rules.is_title_excluded(pr.title)


def filter_pull_requests(rules: FilterRules, prs: Iterable[PullRequest]) -> List[PullRequest]:
    """Keep non-excluded package PRs, preserving source order."""
    return [pr for pr in prs if not is_excluded(rules, pr) and is_package_pr(pr.title)]
