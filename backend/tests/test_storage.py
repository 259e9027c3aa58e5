"""
SQL repository and local identity tests (in-memory SQLite).
"""

from medscan.domain.entities.records import Medication, SavedMedication, ScanHistoryEntry
from medscan.infrastructure.identity.local_identity import (
    ALREADY_REGISTERED,
    INVALID_CREDENTIALS,
    INVALID_TOKEN,
)
from medscan.infrastructure.storage.sql_repository import SQLRecordRepository


def history_entry(user_id, created_at, **kwargs):
    return ScanHistoryEntry(
        user_id=user_id,
        scan_type=kwargs.pop("scan_type", "pill"),
        scan_data=kwargs.pop("scan_data", {"color": "white"}),
        created_at=created_at,
        **kwargs,
    )


class TestMedications:

    def test_create_and_get(self, repository):
        created = repository.create_medication(Medication(name="Tylenol", ndc="50580-488", color="white"))

        assert created.id
        assert created.created_at
        assert repository.get_medication(created.id).name == "Tylenol"

    def test_get_missing(self, repository):
        assert repository.get_medication("no-such-id") is None

    def test_search_filters(self, repository):
        repository.create_medication(Medication(name="Tylenol Extra Strength", color="white", shape="oval"))
        repository.create_medication(Medication(name="Advil", color="brown", shape="round"))

        assert [m.name for m in repository.search_medications({"name": "tylenol"})] == ["Tylenol Extra Strength"]
        assert [m.name for m in repository.search_medications({"shape": "round"})] == ["Advil"]
        assert repository.search_medications({"color": "White"}) == []
        assert len(repository.search_medications({})) == 2

    def test_update_only_updatable_columns(self, repository):
        created = repository.create_medication(Medication(name="Advil"))

        updated = repository.update_medication(created.id, {"dosage": "200 mg", "id": "hijacked"})

        assert updated.id == created.id
        assert updated.dosage == "200 mg"

    def test_update_missing(self, repository):
        assert repository.update_medication("no-such-id", {"name": "x"}) is None

    def test_delete(self, repository):
        created = repository.create_medication(Medication(name="Advil"))

        assert repository.delete_medication(created.id) is True
        assert repository.get_medication(created.id) is None


class TestScanHistory:

    def test_most_recent_first(self, repository):
        repository.record_scan(history_entry("u1", "2024-01-01T10:00:00", scan_data={"n": 1}))
        repository.record_scan(history_entry("u1", "2024-03-01T10:00:00", scan_data={"n": 3}))
        repository.record_scan(history_entry("u1", "2024-02-01T10:00:00", scan_data={"n": 2}))
        repository.record_scan(history_entry("u2", "2024-04-01T10:00:00"))

        history = repository.get_scan_history("u1")

        assert [entry.scan_data["n"] for entry in history] == [3, 2, 1]

    def test_linked_medication_is_joined(self, repository):
        medication = repository.create_medication(Medication(name="Tylenol"))
        repository.record_scan(history_entry(
            "u1", "2024-01-01T10:00:00", medication_id=medication.id, is_successful=True,
        ))

        entry = repository.get_scan_history("u1")[0]

        assert entry.medication.name == "Tylenol"
        assert entry.to_dict()["medication"]["name"] == "Tylenol"

    def test_recorded_entry_has_id(self, repository):
        recorded = repository.record_scan(ScanHistoryEntry(
            user_id="u1", scan_type="barcode", scan_data={"type": "ean13", "data": "0002322730"},
        ))
        assert recorded.id
        assert recorded.is_successful is False

    def test_write_failure_returns_none(self, repository):
        # user_id is NOT NULL
        entry = ScanHistoryEntry(user_id=None, scan_type="pill", scan_data={})
        assert repository.record_scan(entry) is None


class TestSavedMedications:

    def test_save_list_remove(self, repository):
        medication = repository.create_medication(Medication(name="Tylenol"))

        saved = repository.save_medication(SavedMedication(
            user_id="u1", medication_id=medication.id, notes="after meals", reminder_enabled=True,
        ))
        listed = repository.get_saved_medications("u1")

        assert listed[0].id == saved.id
        assert listed[0].medication.name == "Tylenol"
        assert repository.get_saved_medications("u2") == []

        assert repository.remove_saved_medication(saved.id) is True
        assert repository.get_saved_medications("u1") == []


class TestLocalIdentity:

    def test_sign_up_creates_profile(self, identity, repository):
        outcome = identity.sign_up("Ada@Example.com ", "secret1")

        assert outcome.success
        assert outcome.user.email == "ada@example.com"
        profile = repository.get_user_profile(outcome.user.id)
        assert profile.email == "ada@example.com"

    def test_duplicate_sign_up(self, identity):
        identity.sign_up("ada@example.com", "secret1")
        outcome = identity.sign_up("ADA@example.com", "other-secret")

        assert not outcome.success
        assert outcome.message == ALREADY_REGISTERED

    def test_sign_in_and_resolve_token(self, identity):
        user = identity.sign_up("ada@example.com", "secret1").user

        outcome = identity.sign_in("ada@example.com", "secret1")

        assert outcome.success
        token = outcome.session.access_token
        assert identity.get_user(token).id == user.id

    def test_wrong_password(self, identity):
        identity.sign_up("ada@example.com", "secret1")

        outcome = identity.sign_in("ada@example.com", "wrong")

        assert not outcome.success
        assert outcome.message == INVALID_CREDENTIALS
        assert outcome.session is None

    def test_sign_out_revokes_token(self, identity):
        identity.sign_up("ada@example.com", "secret1")
        token = identity.sign_in("ada@example.com", "secret1").session.access_token

        assert identity.sign_out(token).success
        assert identity.get_user(token) is None
        assert identity.sign_out(token).message == INVALID_TOKEN

    def test_unknown_token(self, identity):
        assert identity.get_user("nope") is None
        assert identity.get_user("") is None

    def test_separate_database(self):
        repository = SQLRecordRepository("sqlite://")
        assert repository.get_scan_history("u1") == []
        assert repository.backend_name == "sql:sqlite"
