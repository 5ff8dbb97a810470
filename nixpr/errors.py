# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Error kinds raised by nixpr.

FetchError, ConfigError and StateError abort a run. TriggerError is scoped to
a single pull request and is recorded by the orchestrator without stopping
the run. CollaboratorError covers the read-only gh helpers.
"""

from typing import Optional


class NixprError(Exception):
    """Base class for all nixpr errors."""


class FetchError(NixprError):
    """The pull request listing could not be retrieved."""

    def __init__(self, page: int, cause: str):
        self.page = page
        self.cause = cause
        super().__init__(f'Failed to fetch open PRs (page {page}): {cause}')


class ConfigError(NixprError):
    """The configuration file exists but cannot be read or parsed."""


class StateError(NixprError):
    """The processed-PR state file exists but cannot be read or parsed."""


class TriggerError(NixprError):
    """Starting the review workflow for one pull request failed."""

    def __init__(self, pr_number: int, reason: str):
        self.pr_number = pr_number
        self.reason = reason
        super().__init__(f'Review trigger failed for PR #{pr_number}: {reason}')


class CollaboratorError(NixprError):
    """A status, logs, web or check helper failed."""

    def __init__(self, message: str, detail: Optional[str] = None):
        self.detail = detail
        super().__init__(f'{message}: {detail}' if detail else message)
