"""
Scan Result Entity

Output of one barcode, pill or imprint scan.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from enum import Enum
from datetime import datetime

from .medication_info import MedicationInfo
from .records import ScanHistoryEntry
from ..value_objects.scan_type import ScanType, MatchConfidence


class StageStatus(Enum):
    """Status of a scan stage execution."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


class ScanStage(Enum):
    """Stages of a scan."""

    PREPARE = "prepare"
    VISION = "vision"
    CLASSIFY = "classify"
    LOOKUP = "lookup"
    PERSIST = "persist"


UNKNOWN_PILL = "Unknown Pill"
NO_BARCODE_MATCH = "No medication found with this barcode."
NO_IMPRINT_DETECTED = "No imprint could be detected on this pill."


@dataclass
class ScanIssue:
    """
    Something that went wrong in a stage without stopping the scan.

    Attributes:
        stage: Stage where it happened
        message: Human-readable message
        details: Additional details
        timestamp: When it happened
    """

    stage: ScanStage
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.stage.value}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage.value,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class ScanResult:
    """
    Result of a scan, as stored in history and shown to the user.

    Attributes:
        scan_type: barcode, pill or imprint
        scan_data: What was captured (stored as ``scan_data``)
        medication: Identified medication, if the lookup matched
        result: Stored ``result`` JSON: medication info or the raw attributes
        is_successful: Stored success flag (rules differ per scan type)
        recorded: Whether a history entry was written
        history_entry: The written history entry
        issues: Non-fatal problems encountered along the way
    """

    scan_type: ScanType
    scan_data: Dict[str, Any] = field(default_factory=dict)
    medication: Optional[MedicationInfo] = None
    result: Optional[Dict[str, Any]] = None
    is_successful: bool = False

    recorded: bool = False
    history_entry: Optional[ScanHistoryEntry] = None

    issues: List[ScanIssue] = field(default_factory=list)
    stage_statuses: Dict[ScanStage, StageStatus] = field(default_factory=dict)
    request_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    total_processing_time_ms: float = 0.0

    @property
    def has_match(self) -> bool:
        return self.medication is not None and self.medication.name != UNKNOWN_PILL

    @property
    def message(self) -> Optional[str]:
        """User-facing message when there is nothing to show."""
        if self.scan_type is ScanType.BARCODE and self.medication is None:
            return NO_BARCODE_MATCH
        if self.scan_type is ScanType.IMPRINT and not self.scan_data.get("imprint"):
            return NO_IMPRINT_DETECTED
        return None

    def display_record(self) -> Optional[Dict[str, Any]]:
        """
        Record for the result screen.

        Matched scans show the medication. Unmatched pill and imprint scans
        show an "Unknown Pill" card built from what was detected.
        """
        if self.has_match:
            return self.medication.to_dict()

        image_uri = self.scan_data.get("imageUri")
        if self.scan_type is ScanType.PILL:
            return {
                "name": UNKNOWN_PILL,
                "color": self.scan_data.get("color") or "Unknown",
                "shape": self.scan_data.get("shape") or "Unknown",
                "attributes": self.scan_data.get("labels") or [],
                "matchConfidence": MatchConfidence.LOW.value,
                "imageUri": image_uri,
            }
        if self.scan_type is ScanType.IMPRINT and self.scan_data.get("imprint"):
            return {
                "name": UNKNOWN_PILL,
                "imprint": self.scan_data.get("imprint"),
                "fullText": self.scan_data.get("fullText"),
                "matchConfidence": MatchConfidence.LOW.value,
                "imageUri": image_uri,
            }
        return None

    def add_issue(self, stage: ScanStage, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.issues.append(ScanIssue(stage=stage, message=message, details=details))

    def get_user_response(self) -> Dict[str, Any]:
        """
        Formatted response for the client.

        Returns:
            Dictionary with user-facing information
        """
        response = {
            "scan_type": self.scan_type.value,
            "success": self.is_successful,
            "recorded": self.recorded,
            "scan_data": self.scan_data,
            "result": self.result,
            "medication": self.display_record(),
            "message": self.message,
        }
        if self.history_entry is not None:
            response["history_id"] = self.history_entry.id
        return response

    def get_debug_info(self) -> Dict[str, Any]:
        return {
            "request_id": self.request_id,
            "created_at": self.created_at.isoformat(),
            "total_processing_time_ms": self.total_processing_time_ms,
            "stages": {stage.value: status.value for stage, status in self.stage_statuses.items()},
            "issues": [issue.to_dict() for issue in self.issues],
        }

    def __str__(self) -> str:
        name = self.medication.name if self.medication else "no match"
        return f"ScanResult({self.scan_type.value}: {name}, successful={self.is_successful})"
