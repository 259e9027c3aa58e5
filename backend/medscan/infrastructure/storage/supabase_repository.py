"""
Supabase Record Repository

RecordRepositoryPort implementation on the hosted backend's PostgREST API
(``{SUPABASE_URL}/rest/v1/{table}``).

Filters use PostgREST operators: ``column=eq.value`` for exact matches,
``column=ilike.*value*`` for case-insensitive substrings.
"""

from typing import Optional, Dict, Any, List
import logging

import requests

from ...domain.ports.repository import RecordRepositoryPort
from ...domain.entities.records import (
    Medication,
    ScanHistoryEntry,
    SavedMedication,
    UserProfile,
)
from ...domain.exceptions import StorageError
from ...cross_cutting.error_handling import ErrorHandler
from ..utils.http import create_session, supabase_headers, error_message


logger = logging.getLogger(__name__)

MEDICATIONS = "medications"
SCAN_HISTORY = "scan_history"
SAVED_MEDICATIONS = "saved_medications"
USER_PROFILES = "user_profiles"

HISTORY_SELECT = "*,medications(*)"
SAVED_SELECT = "*,medication:medications(*)"


class SupabaseRecordRepository(RecordRepositoryPort):
    """
    Record repository backed by Supabase PostgREST.

    Row-level security on the hosted tables means reads and writes of user
    rows need the user's access token; use ``with_access_token`` to get a
    repository bound to one.
    """

    def __init__(
        self,
        url: str,
        anon_key: str,
        access_token: Optional[str] = None,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None
    ):
        self._url = url.rstrip("/")
        self._anon_key = anon_key
        self._access_token = access_token
        self._timeout = timeout
        self._session = session or create_session()

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def with_access_token(self, access_token: Optional[str]) -> "SupabaseRecordRepository":
        return SupabaseRecordRepository(
            self._url,
            self._anon_key,
            access_token=access_token,
            timeout=self._timeout,
            session=self._session,
        )

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None,
        returning: bool = False
    ) -> List[Dict[str, Any]]:
        """
        Send one PostgREST request.

        Returns:
            Rows from the response body ([] when there is none)

        Raises:
            StorageError: On transport failure, non-2xx status or a non-list body
        """
        headers = supabase_headers(self._anon_key, self._access_token)
        if returning:
            headers["Prefer"] = "return=representation"

        try:
            response = self._session.request(
                method,
                f"{self._url}/rest/v1/{table}",
                params=params,
                json=body,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise StorageError(f"Request to {table} failed: {e}", table=table)

        if not response.ok:
            raise StorageError(
                error_message(response),
                table=table,
                details={"status": response.status_code},
            )

        if not response.content:
            return []
        try:
            rows = response.json()
        except ValueError:
            raise StorageError(f"Invalid JSON from {table}", table=table)
        if not isinstance(rows, list):
            raise StorageError(f"Unexpected response shape from {table}", table=table)
        return rows

    def _single(self, rows: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        return rows[0] if rows else None

    # =========================================================================
    # Medications
    # =========================================================================

    def get_medication(self, medication_id: str) -> Optional[Medication]:
        with ErrorHandler(self.logger, "Error fetching medication", suppress=True):
            row = self._single(self._request("GET", MEDICATIONS, {"select": "*", "id": f"eq.{medication_id}"}))
            return Medication.from_row(row) if row else None
        return None

    def search_medications(self, filters: Dict[str, str]) -> List[Medication]:
        params = {"select": "*"}
        for column, mode in Medication.SEARCH_FILTERS.items():
            value = filters.get(column)
            if not value:
                continue
            params[column] = f"ilike.*{value}*" if mode == "ilike" else f"eq.{value}"

        with ErrorHandler(self.logger, "Error searching medications", suppress=True):
            return [Medication.from_row(r) for r in self._request("GET", MEDICATIONS, params)]
        return []

    def create_medication(self, medication: Medication) -> Optional[Medication]:
        with ErrorHandler(self.logger, "Error creating medication", suppress=True):
            row = self._single(self._request("POST", MEDICATIONS, body=medication.to_insert(), returning=True))
            return Medication.from_row(row) if row else None
        return None

    def update_medication(self, medication_id: str, changes: Dict[str, Any]) -> Optional[Medication]:
        body = {k: v for k, v in changes.items() if k in Medication.UPDATABLE}
        with ErrorHandler(self.logger, "Error updating medication", suppress=True):
            row = self._single(self._request(
                "PATCH", MEDICATIONS, {"id": f"eq.{medication_id}"}, body=body, returning=True
            ))
            return Medication.from_row(row) if row else None
        return None

    def delete_medication(self, medication_id: str) -> bool:
        with ErrorHandler(self.logger, "Error deleting medication", suppress=True):
            self._request("DELETE", MEDICATIONS, {"id": f"eq.{medication_id}"})
            return True
        return False

    # =========================================================================
    # Scan history
    # =========================================================================

    def record_scan(self, entry: ScanHistoryEntry) -> Optional[ScanHistoryEntry]:
        with ErrorHandler(self.logger, "Error recording scan", suppress=True):
            row = self._single(self._request("POST", SCAN_HISTORY, body=entry.to_insert(), returning=True))
            return ScanHistoryEntry.from_row(row) if row else None
        return None

    def get_scan_history(self, user_id: str) -> List[ScanHistoryEntry]:
        params = {
            "select": HISTORY_SELECT,
            "user_id": f"eq.{user_id}",
            "order": "created_at.desc",
        }
        with ErrorHandler(self.logger, "Error fetching scan history", suppress=True):
            return [ScanHistoryEntry.from_row(r) for r in self._request("GET", SCAN_HISTORY, params)]
        return []

    # =========================================================================
    # Profiles
    # =========================================================================

    def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        with ErrorHandler(self.logger, "Error fetching user profile", suppress=True):
            row = self._single(self._request("GET", USER_PROFILES, {"select": "*", "user_id": f"eq.{user_id}"}))
            return UserProfile.from_row(row) if row else None
        return None

    def update_user_profile(self, user_id: str, changes: Dict[str, Any]) -> Optional[UserProfile]:
        body = {k: v for k, v in changes.items() if k in UserProfile.UPDATABLE}
        with ErrorHandler(self.logger, "Error updating user profile", suppress=True):
            row = self._single(self._request(
                "PATCH", USER_PROFILES, {"user_id": f"eq.{user_id}"}, body=body, returning=True
            ))
            return UserProfile.from_row(row) if row else None
        return None

    # =========================================================================
    # Saved medications
    # =========================================================================

    def save_medication(self, saved: SavedMedication) -> Optional[SavedMedication]:
        with ErrorHandler(self.logger, "Error saving medication", suppress=True):
            row = self._single(self._request("POST", SAVED_MEDICATIONS, body=saved.to_insert(), returning=True))
            return SavedMedication.from_row(row) if row else None
        return None

    def get_saved_medications(self, user_id: str) -> List[SavedMedication]:
        params = {"select": SAVED_SELECT, "user_id": f"eq.{user_id}"}
        with ErrorHandler(self.logger, "Error fetching saved medications", suppress=True):
            return [SavedMedication.from_row(r) for r in self._request("GET", SAVED_MEDICATIONS, params)]
        return []

    def remove_saved_medication(self, saved_id: str) -> bool:
        with ErrorHandler(self.logger, "Error removing saved medication", suppress=True):
            self._request("DELETE", SAVED_MEDICATIONS, {"id": f"eq.{saved_id}"})
            return True
        return False

    @property
    def backend_name(self) -> str:
        return "supabase"
