"""
Account service tests: auth gating, profile, history and saved medications.
"""

import pytest

from medscan.application.services.account_service import AccountService
from medscan.domain.entities.records import ScanHistoryEntry
from medscan.domain.exceptions import AuthenticationRequiredError, InvalidInputError, RecordNotFoundError


@pytest.fixture
def accounts(identity, repository):
    return AccountService(identity, repository)


@pytest.fixture
def token(accounts):
    accounts.sign_up("ada@example.com", "secret1")
    return accounts.sign_in("ada@example.com", "secret1").session.access_token


class TestIdentity:

    def test_malformed_credentials(self, accounts):
        with pytest.raises(InvalidInputError):
            accounts.sign_up("not-an-email", "secret1")
        with pytest.raises(InvalidInputError):
            accounts.sign_up("ada@example.com", "123")

    def test_sign_in_requires_both_fields(self, accounts):
        with pytest.raises(InvalidInputError):
            accounts.sign_in("", "secret1")

    def test_current_user(self, accounts, token):
        assert accounts.get_current_user(token).email == "ada@example.com"
        assert accounts.get_current_user(None) is None
        assert accounts.is_authenticated(token)

    def test_sign_out_requires_user(self, accounts):
        with pytest.raises(AuthenticationRequiredError):
            accounts.sign_out("bogus")


class TestProfile:

    def test_profile_created_at_sign_up(self, accounts, token):
        assert accounts.get_profile(token).email == "ada@example.com"

    def test_update_profile(self, accounts, token):
        profile = accounts.update_profile(token, {"first_name": "Ada", "last_name": "Lovelace"})
        assert profile.display_name == "Ada Lovelace"

    def test_update_rejects_unknown_fields(self, accounts, token):
        with pytest.raises(InvalidInputError):
            accounts.update_profile(token, {"user_id": "someone-else"})

    def test_anonymous(self, accounts):
        with pytest.raises(AuthenticationRequiredError):
            accounts.get_profile(None)


class TestMedicationsAndSaved:

    def test_create_defaults_owner(self, accounts, token):
        medication = accounts.create_medication(token, {"name": "Tylenol", "color": "white"})

        assert medication.user_id == accounts.get_current_user(token).id
        assert accounts.get_medication(medication.id).name == "Tylenol"

    def test_create_requires_name(self, accounts, token):
        with pytest.raises(InvalidInputError):
            accounts.create_medication(token, {"name": "", "color": "white"})

    def test_writes_require_user(self, accounts):
        with pytest.raises(AuthenticationRequiredError):
            accounts.create_medication(None, {"name": "Tylenol"})

    def test_search_ignores_empty_filters(self, accounts, token):
        accounts.create_medication(token, {"name": "Tylenol"})

        assert len(accounts.search_medications({"name": "tyl", "ndc": None, "color": ""})) == 1
        with pytest.raises(InvalidInputError):
            accounts.search_medications({"manufacturer": "x"})

    def test_update_and_delete(self, accounts, token):
        medication = accounts.create_medication(token, {"name": "Advil"})

        assert accounts.update_medication(token, medication.id, {"dosage": "200 mg"}).dosage == "200 mg"
        assert accounts.delete_medication(token, medication.id)
        with pytest.raises(RecordNotFoundError):
            accounts.get_medication(medication.id)

    def test_save_unknown_medication(self, accounts, token):
        with pytest.raises(RecordNotFoundError):
            accounts.save_medication(token, "no-such-id")

    def test_save_and_remove(self, accounts, token):
        medication = accounts.create_medication(token, {"name": "Tylenol"})
        saved = accounts.save_medication(token, medication.id, notes="at night")

        assert [s.id for s in accounts.get_saved_medications(token)] == [saved.id]
        assert accounts.remove_saved_medication(token, saved.id)
        assert accounts.get_saved_medications(token) == []

    def test_cannot_remove_someone_elses(self, accounts, token):
        medication = accounts.create_medication(token, {"name": "Tylenol"})
        saved = accounts.save_medication(token, medication.id)

        accounts.sign_up("bob@example.com", "secret2")
        other = accounts.sign_in("bob@example.com", "secret2").session.access_token

        with pytest.raises(RecordNotFoundError):
            accounts.remove_saved_medication(other, saved.id)
        assert len(accounts.get_saved_medications(token)) == 1

    def test_history_is_per_user(self, accounts, token, repository):
        user = accounts.get_current_user(token)
        repository.record_scan(ScanHistoryEntry(user_id=user.id, scan_type="pill", scan_data={}))
        repository.record_scan(ScanHistoryEntry(user_id="someone-else", scan_type="pill", scan_data={}))

        assert len(accounts.get_scan_history(token)) == 1
