# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Classify nixpkgs PR titles.

Testable package PRs follow the nixpkgs commit convention:
    "package: init at X.Y.Z"
    "package: X.Y.Z -> A.B.C"
"""

from dataclasses import dataclass
from typing import Optional

INIT_MARKER = 'init at'
VERSION_BUMP_MARKER = '->'


@dataclass(frozen=True)
class TitleClassification:
    is_package_change: bool
    package_name: Optional[str]


def classify(title: str) -> TitleClassification:
    """Split a title on its first colon and classify the description part.

    Args:
        title (str): PR title

    Returns:
        TitleClassification: whether the title is a package init/bump, and the
        package name when the part before the colon is non-empty.
    """
    name, sep, rest = title.partition(':')
    if not sep:
        return TitleClassification(is_package_change=False, package_name=None)

    description = rest.strip().lower()
    is_change = INIT_MARKER in description or VERSION_BUMP_MARKER in description
    return TitleClassification(is_package_change=is_change, package_name=name.strip() or None)


def is_package_pr(title: str) -> bool:
    return classify(title).is_package_change


def extract_package_name(title: str) -> Optional[str]:
    """Return the part of the title before the first colon, or None."""
    return classify(title).package_name
