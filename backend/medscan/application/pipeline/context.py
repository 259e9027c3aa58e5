"""
Scan Context

Carries state through the scan stages.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from datetime import datetime
import uuid

from ...domain.value_objects.image_data import ImageData
from ...domain.value_objects.scan_type import ScanType
from ...domain.value_objects.vision_annotations import DominantColor, LocalizedObject
from ...domain.entities.medication_info import MedicationInfo
from ...domain.entities.records import ScanHistoryEntry
from ...domain.entities.scan_result import ScanResult, ScanIssue, ScanStage, StageStatus


@dataclass
class StageMetrics:
    """
    Timing for a single stage execution.

    Attributes:
        stage: The scan stage
        start_time: When execution started
        end_time: When execution completed
        duration_ms: Total execution time in milliseconds
    """

    stage: ScanStage
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration_ms: float = 0.0

    def start(self) -> None:
        self.start_time = datetime.now()

    def finish(self) -> None:
        self.end_time = datetime.now()
        if self.start_time:
            delta = self.end_time - self.start_time
            self.duration_ms = delta.total_seconds() * 1000


@dataclass
class ScanContext:
    """
    State of one scan as it moves through the stages.

    Each stage reads what it needs and writes its results here. A context
    is owned by a single scan and never shared.

    Attributes:
        scan_type: barcode, pill or imprint
        image: Captured photo (pill and imprint scans)
        barcode_data: Decoded barcode string (barcode scans)
        barcode_type: Barcode symbology reported by the scanner
        user_id: Signed-in user; history is only written when set
        access_token: The user's token, for row-level access on the storage backend

        full_text: OCR text (imprint scans)
        labels: Label descriptions (pill scans)
        colors: Dominant colors, most prominent first (pill scans)
        objects: Localized objects (pill scans)

        color: Classified color name
        shape: Classified shape name
        imprint: Extracted imprint

        medication: Lookup result
        history_entry: Written history entry
    """

    scan_type: ScanType
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    image: Optional[ImageData] = None
    barcode_data: Optional[str] = None
    barcode_type: Optional[str] = None
    user_id: Optional[str] = None
    access_token: Optional[str] = field(default=None, repr=False)

    # Vision results
    full_text: Optional[str] = None
    labels: List[str] = field(default_factory=list)
    colors: List[DominantColor] = field(default_factory=list)
    objects: List[LocalizedObject] = field(default_factory=list)

    # Classification results
    color: Optional[str] = None
    shape: Optional[str] = None
    imprint: Optional[str] = None

    # Lookup and persistence
    medication: Optional[MedicationInfo] = None
    history_entry: Optional[ScanHistoryEntry] = None

    issues: List[ScanIssue] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
    stage_metrics: Dict[ScanStage, StageMetrics] = field(default_factory=dict)
    stage_statuses: Dict[ScanStage, StageStatus] = field(default_factory=dict)

    def add_issue(self, stage: ScanStage, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Record a non-fatal problem; the scan carries on."""
        self.issues.append(ScanIssue(stage=stage, message=message, details=details))

    def start_stage(self, stage: ScanStage) -> None:
        self.stage_metrics[stage] = StageMetrics(stage=stage)
        self.stage_metrics[stage].start()
        self.stage_statuses[stage] = StageStatus.RUNNING

    def finish_stage(self, stage: ScanStage, status: StageStatus = StageStatus.COMPLETED) -> None:
        if stage in self.stage_metrics:
            self.stage_metrics[stage].finish()
        self.stage_statuses[stage] = status

    def skip_stage(self, stage: ScanStage) -> None:
        self.stage_statuses[stage] = StageStatus.SKIPPED

    @property
    def total_duration_ms(self) -> float:
        return sum(m.duration_ms for m in self.stage_metrics.values())

    @property
    def image_uri(self) -> Optional[str]:
        return self.image.uri if self.image else None

    @property
    def lookup_query(self) -> Optional[str]:
        """
        Catalog query for the scan, or None if nothing usable was detected.

        Pill scans search "{color} {shape} pill" with whichever attributes
        were found; imprint scans search the imprint itself.
        """
        if self.scan_type is ScanType.PILL:
            attributes = " ".join(value for value in (self.color, self.shape) if value)
            return f"{attributes} pill" if attributes else None
        if self.scan_type is ScanType.IMPRINT:
            return self.imprint
        return self.barcode_data

    @property
    def scan_data(self) -> Dict[str, Any]:
        """Captured data as stored in ``scan_history.scan_data``."""
        if self.scan_type is ScanType.BARCODE:
            return {"type": self.barcode_type, "data": self.barcode_data}
        if self.scan_type is ScanType.PILL:
            return {
                "color": self.color,
                "shape": self.shape or "unknown",
                "labels": list(self.labels),
                "imageUri": self.image_uri,
            }
        return {
            "imprint": self.imprint,
            "fullText": self.full_text,
            "imageUri": self.image_uri,
        }

    @property
    def result(self) -> Optional[Dict[str, Any]]:
        """Stored ``scan_history.result``: the medication, else the raw attributes."""
        if self.medication is not None:
            return self.medication.to_dict()
        if self.scan_type is ScanType.PILL:
            return {"color": self.color, "shape": self.shape, "labels": list(self.labels)}
        if self.scan_type is ScanType.IMPRINT:
            return {"imprint": self.imprint, "fullText": self.full_text}
        return None

    @property
    def is_successful(self) -> bool:
        """
        Stored success flag.

        Barcode: a medication (or placeholder) was produced.
        Pill: always, the detected attributes are themselves the result.
        Imprint: an imprint was extracted.
        """
        if self.scan_type is ScanType.BARCODE:
            return self.medication is not None
        if self.scan_type is ScanType.PILL:
            return True
        return self.imprint is not None

    def to_history_entry(self) -> ScanHistoryEntry:
        return ScanHistoryEntry(
            user_id=self.user_id,
            scan_type=self.scan_type.value,
            scan_data=self.scan_data,
            result=self.result,
            is_successful=self.is_successful,
        )

    def to_scan_result(self) -> ScanResult:
        return ScanResult(
            scan_type=self.scan_type,
            scan_data=self.scan_data,
            medication=self.medication,
            result=self.result,
            is_successful=self.is_successful,
            recorded=self.history_entry is not None,
            history_entry=self.history_entry,
            stage_statuses=dict(self.stage_statuses),
            issues=list(self.issues),
            request_id=self.request_id,
            created_at=self.created_at,
            total_processing_time_ms=self.total_duration_ms,
        )

    def __str__(self) -> str:
        return f"ScanContext(id={self.request_id[:8]}..., type={self.scan_type.value}, issues={len(self.issues)})"
