# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Processed-PR state.

The set of PR numbers that already had a review triggered is kept as a JSON
list at ~/.nixpr/processed.json. Inserts happen in memory; the caller saves
once after a batch, and every save rewrites the whole file.

Two nixpr processes must not run against the same state file at once; there
is no locking.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Set, Union

from nixpr.constants import STATE_FILE
from nixpr.errors import StateError

logger = logging.getLogger(__name__)


def mark_processed(processed: Set[int], pr_number: int) -> None:
    processed.add(pr_number)


class ProcessedStore:
    """File-backed set of processed PR numbers."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else STATE_FILE

    def load(self) -> Set[int]:
        """
        Load the processed set.

        Returns:
            Set of PR numbers; empty if no state file exists yet.

        Raises:
            StateError: the state file exists but is unreadable or malformed.
        """
        if not self.path.exists():
            logger.debug(f"No state file at {self.path}, starting with an empty set")
            return set()

        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except OSError as e:
            raise StateError(f"Failed to read state: {self.path}: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StateError(f"Failed to parse state: {self.path}: {e}") from e

        if not isinstance(data, list):
            raise StateError(f"Failed to parse state: {self.path}: expected a JSON list of PR numbers")

        processed = set()
        for item in data:
            # bool is an int subclass; reject it explicitly
            if isinstance(item, bool) or not isinstance(item, int) or item <= 0:
                raise StateError(f"Failed to parse state: {self.path}: invalid PR number {item!r}")
            processed.add(item)

        logger.debug(f"Loaded {len(processed)} processed PRs from {self.path}")
        return processed

    def save(self, processed: Set[int]) -> None:
        """Overwrite the state file with the given set."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StateError(f"Failed to create state directory: {self.path.parent}: {e}") from e

        content = json.dumps(sorted(processed), indent=2)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix='.processed-', suffix='.json', dir=self.path.parent)
            with os.fdopen(fd, 'w') as f:
                f.write(content)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StateError(f"Failed to write state: {self.path}: {e}") from e

        logger.debug(f"Saved {len(processed)} processed PRs to {self.path}")

    def clear(self) -> None:
        self.save(set())
