# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
nixpr CLI

Usage:
    nixpr run --dry-run     # Show which PRs would be reviewed
    nixpr run               # Trigger reviews for new package PRs
    nixpr status            # Recent review workflow runs
"""

from .main import cli, main

__all__ = ['cli', 'main']
