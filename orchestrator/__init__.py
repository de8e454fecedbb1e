"""
Orchestration package for the Notion sync pipeline.

Sequences a run: clear previous output → discover pages → export documents →
detect changes → report.
"""

from .change_detector import GitChangeDetector
from .sync_orchestrator import SyncOrchestrator
from .sync_report import SyncReport

__all__ = [
    'GitChangeDetector',
    'SyncOrchestrator',
    'SyncReport'
]
