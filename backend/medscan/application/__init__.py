"""
Application Layer

Scan orchestration, medication lookup, and application services.
"""

from .lookup import MedicationLookup
from .pipeline import ScanOrchestrator, ScanContext
from .services import ScanService, AccountService

__all__ = [
    "MedicationLookup",
    "ScanOrchestrator",
    "ScanContext",
    "ScanService",
    "AccountService",
]
