# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Review workflow collaborators.

ReviewRunner is the capability the orchestrator and the CLI depend on;
GhCliRunner implements it on top of the GitHub CLI.
"""

from .base import ReviewRunner
from .gh_interface import GhCliRunner

__all__ = ['ReviewRunner', 'GhCliRunner']
