"""
Pipeline Module

Scan orchestration, context and stage definitions.
"""

from .orchestrator import ScanOrchestrator
from .context import ScanContext
from .stages import ScanStageExecutor

__all__ = [
    "ScanOrchestrator",
    "ScanContext",
    "ScanStageExecutor",
]
