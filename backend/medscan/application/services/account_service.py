"""
Account Service

Sign-in state and the user's stored records: profile, scan history,
saved medications, and the shared medications table.
"""

from typing import Optional, Dict, Any, List
import logging

from ...cross_cutting.validation import validate_credentials, validate_fields
from ...domain.entities.auth import AuthOutcome, AuthUser
from ...domain.entities.records import Medication, SavedMedication, ScanHistoryEntry, UserProfile
from ...domain.exceptions import AuthenticationRequiredError, InvalidInputError, RecordNotFoundError
from ...domain.ports.identity import IdentityProviderPort
from ...domain.ports.repository import RecordRepositoryPort


logger = logging.getLogger(__name__)


class AccountService:
    """
    Application service for identity and record operations.

    Every user-scoped call takes the caller's access token. The token is
    resolved to a user through the identity provider, and the repository is
    bound to it so the storage backend applies its per-user row access.

    Storage failures follow the repository contract (None / [] / False);
    this service turns a missing record into RecordNotFoundError and a
    missing or invalid token into AuthenticationRequiredError.

    Usage:
        service = AccountService(identity, repository)

        outcome = service.sign_in("user@example.com", "secret")
        token = outcome.session.access_token
        history = service.get_scan_history(token)
    """

    def __init__(self, identity: IdentityProviderPort, repository: RecordRepositoryPort):
        self.identity = identity
        self.repository = repository
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # =========================================================================
    # Identity
    # =========================================================================

    def sign_up(self, email: str, password: str) -> AuthOutcome:
        """
        Register a new account.

        Raises:
            InvalidInputError: If the email or password is malformed
        """
        is_valid, error = validate_credentials(email, password)
        if not is_valid:
            raise InvalidInputError(error, field_name="credentials")
        return self.identity.sign_up(email.strip(), password)

    def sign_in(self, email: str, password: str) -> AuthOutcome:
        if not email or not password:
            raise InvalidInputError("Email and password are required", field_name="credentials")
        return self.identity.sign_in(email.strip(), password)

    def sign_out(self, access_token: Optional[str]) -> AuthOutcome:
        self.require_user(access_token)
        return self.identity.sign_out(access_token)

    def get_current_user(self, access_token: Optional[str]) -> Optional[AuthUser]:
        if not access_token:
            return None
        return self.identity.get_user(access_token)

    def is_authenticated(self, access_token: Optional[str]) -> bool:
        return self.get_current_user(access_token) is not None

    def require_user(self, access_token: Optional[str]) -> AuthUser:
        """
        Resolve the caller.

        Raises:
            AuthenticationRequiredError: If there is no valid token
        """
        user = self.get_current_user(access_token)
        if user is None:
            raise AuthenticationRequiredError()
        return user

    def _records(self, access_token: Optional[str]) -> RecordRepositoryPort:
        return self.repository.with_access_token(access_token)

    # =========================================================================
    # Profile
    # =========================================================================

    def get_profile(self, access_token: Optional[str]) -> UserProfile:
        user = self.require_user(access_token)
        profile = self._records(access_token).get_user_profile(user.id)
        if profile is None:
            raise RecordNotFoundError("user_profiles", user.id)
        return profile

    def update_profile(self, access_token: Optional[str], changes: Dict[str, Any]) -> UserProfile:
        """
        Update the caller's profile.

        Raises:
            InvalidInputError: If changes name a column that cannot be updated
            RecordNotFoundError: If the user has no profile row
        """
        user = self.require_user(access_token)
        is_valid, error = validate_fields(changes, UserProfile.UPDATABLE)
        if not is_valid:
            raise InvalidInputError(error, field_name="profile")

        profile = self._records(access_token).update_user_profile(user.id, changes)
        if profile is None:
            raise RecordNotFoundError("user_profiles", user.id)
        return profile

    # =========================================================================
    # Scan history
    # =========================================================================

    def get_scan_history(self, access_token: Optional[str]) -> List[ScanHistoryEntry]:
        """The caller's scans, most recent first."""
        user = self.require_user(access_token)
        return self._records(access_token).get_scan_history(user.id)

    # =========================================================================
    # Saved medications
    # =========================================================================

    def save_medication(
        self,
        access_token: Optional[str],
        medication_id: str,
        notes: Optional[str] = None,
        reminder_enabled: bool = False,
        reminder_frequency: Optional[Any] = None
    ) -> SavedMedication:
        user = self.require_user(access_token)
        records = self._records(access_token)

        if records.get_medication(medication_id) is None:
            raise RecordNotFoundError("medications", medication_id)

        saved = records.save_medication(SavedMedication(
            user_id=user.id,
            medication_id=medication_id,
            notes=notes,
            reminder_enabled=reminder_enabled,
            reminder_frequency=reminder_frequency,
        ))
        if saved is None:
            raise InvalidInputError("Medication could not be saved", field_name="medication_id")
        return saved

    def get_saved_medications(self, access_token: Optional[str]) -> List[SavedMedication]:
        user = self.require_user(access_token)
        return self._records(access_token).get_saved_medications(user.id)

    def remove_saved_medication(self, access_token: Optional[str], saved_id: str) -> bool:
        """
        Unsave a medication.

        Only the caller's own saved entries can be removed.
        """
        user = self.require_user(access_token)
        records = self._records(access_token)

        owned = {saved.id for saved in records.get_saved_medications(user.id)}
        if saved_id not in owned:
            raise RecordNotFoundError("saved_medications", saved_id)
        return records.remove_saved_medication(saved_id)

    # =========================================================================
    # Medications
    # =========================================================================

    def get_medication(self, medication_id: str, access_token: Optional[str] = None) -> Medication:
        medication = self._records(access_token).get_medication(medication_id)
        if medication is None:
            raise RecordNotFoundError("medications", medication_id)
        return medication

    def search_medications(self, filters: Dict[str, str], access_token: Optional[str] = None) -> List[Medication]:
        """
        Search stored medications.

        Name and imprint match as case-insensitive substrings; ndc, gtin,
        shape and color match exactly. Empty filters are ignored.
        """
        is_valid, error = validate_fields(filters, Medication.SEARCH_FILTERS)
        if not is_valid:
            raise InvalidInputError(error, field_name="filters")
        active = {key: value for key, value in filters.items() if value}
        return self._records(access_token).search_medications(active)

    def create_medication(self, access_token: Optional[str], data: Dict[str, Any]) -> Medication:
        user = self.require_user(access_token)
        is_valid, error = validate_fields(data, Medication.UPDATABLE)
        if not is_valid:
            raise InvalidInputError(error, field_name="medication")
        if not data.get("name"):
            raise InvalidInputError("Medication name is required", field_name="name")

        medication = Medication(**data)
        if medication.user_id is None:
            medication.user_id = user.id

        created = self._records(access_token).create_medication(medication)
        if created is None:
            raise InvalidInputError("Medication could not be created", field_name="medication")
        return created

    def update_medication(self, access_token: Optional[str], medication_id: str, changes: Dict[str, Any]) -> Medication:
        self.require_user(access_token)
        is_valid, error = validate_fields(changes, Medication.UPDATABLE)
        if not is_valid:
            raise InvalidInputError(error, field_name="medication")

        medication = self._records(access_token).update_medication(medication_id, changes)
        if medication is None:
            raise RecordNotFoundError("medications", medication_id)
        return medication

    def delete_medication(self, access_token: Optional[str], medication_id: str) -> bool:
        self.require_user(access_token)
        records = self._records(access_token)
        if records.get_medication(medication_id) is None:
            raise RecordNotFoundError("medications", medication_id)
        return records.delete_medication(medication_id)
