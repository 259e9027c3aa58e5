"""
Stored Records

Rows of the four tables kept in the hosted backend:
medications, scan_history, saved_medications and user_profiles.
Field names match the column names so rows convert without mapping.
"""

from dataclasses import dataclass, field, fields, asdict
from typing import Optional, Dict, Any, List


def _from_row(cls, row: Dict[str, Any]):
    """Build a record from a row dict, ignoring unknown columns."""
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in row.items() if k in names})


def _to_insert(record) -> Dict[str, Any]:
    """Row dict for insert: server-generated columns are left out when unset."""
    row = asdict(record)
    for generated in ("id", "created_at", "updated_at"):
        if row.get(generated) is None:
            row.pop(generated, None)
    return row


@dataclass
class Medication:
    """
    A medication row (``medications``).

    Created on confirmed identification or manual entry. Not deduplicated:
    repeated scans of the same product may create separate rows.
    """

    name: str
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    ndc: Optional[str] = None
    gtin: Optional[str] = None
    imprint: Optional[str] = None
    shape: Optional[str] = None
    color: Optional[str] = None
    size: Optional[float] = None
    manufacturer: Optional[str] = None
    active_ingredients: Optional[Any] = None
    dosage: Optional[str] = None
    route: Optional[str] = None
    packaging: Optional[str] = None
    image_url: Optional[str] = None
    verified: bool = False
    user_id: Optional[str] = None

    # Columns a caller may change; id and timestamps are server-owned
    UPDATABLE = (
        "name", "ndc", "gtin", "imprint", "shape", "color", "size",
        "manufacturer", "active_ingredients", "dosage", "route",
        "packaging", "image_url", "verified", "user_id",
    )

    # Columns accepted by search_medications and how they match
    SEARCH_FILTERS = {
        "name": "ilike",
        "ndc": "eq",
        "gtin": "eq",
        "imprint": "ilike",
        "shape": "eq",
        "color": "eq",
    }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Medication":
        return _from_row(cls, row)

    def to_insert(self) -> Dict[str, Any]:
        return _to_insert(self)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ScanHistoryEntry:
    """
    One scan attempt (``scan_history``). Written once, never updated.

    Attributes:
        user_id: Owner of the scan
        scan_type: "barcode", "pill" or "imprint"
        scan_data: What was captured (barcode data, color/shape/labels, imprint/text)
        result: The identified medication info or the raw attributes
        is_successful: Whether the scan produced a usable result
        medication_id: Linked stored medication, if any
        medication: Joined medication row when listed with history
    """

    user_id: str
    scan_type: str
    scan_data: Dict[str, Any]
    result: Optional[Dict[str, Any]] = None
    is_successful: bool = False
    medication_id: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[str] = None
    medication: Optional[Medication] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ScanHistoryEntry":
        row = dict(row)
        joined = row.pop("medications", None) or row.pop("medication", None)
        entry = _from_row(cls, row)
        if isinstance(joined, dict):
            entry.medication = Medication.from_row(joined)
        return entry

    def to_insert(self) -> Dict[str, Any]:
        row = _to_insert(self)
        row.pop("medication", None)
        return row

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["medication"] = self.medication.to_dict() if self.medication else None
        return data


@dataclass
class SavedMedication:
    """A medication the user bookmarked (``saved_medications``)."""

    user_id: str
    medication_id: str
    notes: Optional[str] = None
    reminder_enabled: bool = False
    reminder_frequency: Optional[Any] = None
    id: Optional[str] = None
    created_at: Optional[str] = None
    medication: Optional[Medication] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SavedMedication":
        row = dict(row)
        joined = row.pop("medication", None) or row.pop("medications", None)
        saved = _from_row(cls, row)
        if isinstance(joined, dict):
            saved.medication = Medication.from_row(joined)
        return saved

    def to_insert(self) -> Dict[str, Any]:
        row = _to_insert(self)
        row.pop("medication", None)
        return row

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["medication"] = self.medication.to_dict() if self.medication else None
        return data


@dataclass
class UserProfile:
    """Profile details, one per auth identity (``user_profiles``)."""

    user_id: str
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    is_healthcare_provider: bool = False
    preferences: Optional[Dict[str, Any]] = field(default=None)

    UPDATABLE = (
        "first_name", "last_name", "phone_number", "email",
        "is_healthcare_provider", "preferences",
    )

    @property
    def display_name(self) -> str:
        parts: List[str] = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or (self.email or "")

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "UserProfile":
        return _from_row(cls, row)

    def to_insert(self) -> Dict[str, Any]:
        return _to_insert(self)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
