"""
Domain Entities

Core records of the medication scanning domain.
"""

from .auth import AuthUser, AuthSession, AuthOutcome
from .medication_info import MedicationInfo, ActiveIngredient
from .records import Medication, ScanHistoryEntry, SavedMedication, UserProfile
from .scan_result import ScanResult, ScanIssue, ScanStage, StageStatus

__all__ = [
    "AuthUser",
    "AuthSession",
    "AuthOutcome",
    "MedicationInfo",
    "ActiveIngredient",
    "Medication",
    "ScanHistoryEntry",
    "SavedMedication",
    "UserProfile",
    "ScanResult",
    "ScanIssue",
    "ScanStage",
    "StageStatus",
]
