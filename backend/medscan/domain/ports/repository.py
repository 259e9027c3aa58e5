"""
Record Repository Port

Abstract interface for the medication/scan record store.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List

from ..entities.records import Medication, ScanHistoryEntry, SavedMedication, UserProfile


class RecordRepositoryPort(ABC):
    """
    Port (interface) for the four stored tables.

    Mirrors the hosted backend's behavior: reads that fail or find nothing
    return None or an empty list, writes that fail return None or False.
    Failures are logged by the adapter.

    Implementations:
    - Supabase PostgREST (hosted)
    - SQLAlchemy (local SQLite/Postgres, tests)
    """

    # =========================================================================
    # Medications
    # =========================================================================

    @abstractmethod
    def get_medication(self, medication_id: str) -> Optional[Medication]:
        pass

    @abstractmethod
    def search_medications(self, filters: Dict[str, str]) -> List[Medication]:
        """
        Search stored medications.

        Args:
            filters: Any of name, ndc, gtin, imprint, shape, color.
                name and imprint match case-insensitive substrings, the
                rest match exactly. Empty values are ignored.
        """
        pass

    @abstractmethod
    def create_medication(self, medication: Medication) -> Optional[Medication]:
        pass

    @abstractmethod
    def update_medication(self, medication_id: str, changes: Dict[str, Any]) -> Optional[Medication]:
        pass

    @abstractmethod
    def delete_medication(self, medication_id: str) -> bool:
        pass

    # =========================================================================
    # Scan history
    # =========================================================================

    @abstractmethod
    def record_scan(self, entry: ScanHistoryEntry) -> Optional[ScanHistoryEntry]:
        """Insert one history entry. Returns the stored row, or None on failure."""
        pass

    @abstractmethod
    def get_scan_history(self, user_id: str) -> List[ScanHistoryEntry]:
        """A user's scans, most recent first, with the linked medication joined."""
        pass

    # =========================================================================
    # Profiles
    # =========================================================================

    @abstractmethod
    def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        pass

    @abstractmethod
    def update_user_profile(self, user_id: str, changes: Dict[str, Any]) -> Optional[UserProfile]:
        pass

    # =========================================================================
    # Saved medications
    # =========================================================================

    @abstractmethod
    def save_medication(self, saved: SavedMedication) -> Optional[SavedMedication]:
        pass

    @abstractmethod
    def get_saved_medications(self, user_id: str) -> List[SavedMedication]:
        """A user's saved medications with the medication joined."""
        pass

    @abstractmethod
    def remove_saved_medication(self, saved_id: str) -> bool:
        pass

    @property
    @abstractmethod
    def backend_name(self) -> str:
        pass

    def with_access_token(self, access_token: Optional[str]) -> "RecordRepositoryPort":
        """
        Repository acting on behalf of the user behind ``access_token``.

        Backends that enforce row access per user return a bound copy;
        others return themselves.
        """
        return self
