# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
PR triage pipeline: title classification, exclusion rules, processed-PR
state and the run orchestrator.
"""

from .classifier import TitleClassification, classify, extract_package_name, is_package_pr
from .exclusion import FilterRules, filter_pull_requests, is_excluded
from .orchestrator import RunStage, TriageOrchestrator
from .state import ProcessedStore, mark_processed

__all__ = [
    'TitleClassification',
    'classify',
    'extract_package_name',
    'is_package_pr',
    'FilterRules',
    'filter_pull_requests',
    'is_excluded',
    'RunStage',
    'TriageOrchestrator',
    'ProcessedStore',
    'mark_processed',
]
