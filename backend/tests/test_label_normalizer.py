"""
Label record normalization tests.
"""

from medscan.domain.services.label_normalizer import format_medication_data, parse_ingredient
from medscan.domain.value_objects.scan_type import MatchConfidence

from conftest import label_record


class TestFormatMedicationData:
    """Raw label record -> MedicationInfo"""

    def test_full_record(self):
        record = label_record(
            "Tylenol",
            "ACETAMINOPHEN",
            "NDA019872",
            ndc="50580-488",
            active_ingredient=["ACETAMINOPHEN 500 mg"],
            warnings="Liver warning",
            indications_and_usage="For minor aches",
        )
        record["openfda"]["manufacturer_name"] = ["Kenvue"]

        info = format_medication_data(record)

        assert info.name == "Tylenol"
        assert info.generic_name == "ACETAMINOPHEN"
        assert info.ndc == "50580-488"
        assert info.application_number == "NDA019872"
        assert info.manufacturer == "Kenvue"
        assert info.warnings == "Liver warning"
        assert info.indications == "For minor aches"
        assert info.active_ingredients == ["ACETAMINOPHEN"]
        assert info.active_ingredients_details[0].strength == "500 mg"
        assert info.match_confidence is MatchConfidence.HIGH

    def test_name_falls_back_to_generic(self):
        info = format_medication_data({"openfda": {"generic_name": ["IBUPROFEN"]}})
        assert info.name == "IBUPROFEN"

    def test_name_unknown(self):
        info = format_medication_data({"openfda": {}})
        assert info.name == "Unknown"
        assert info.dosage is None

    def test_missing_openfda(self):
        info = format_medication_data({"description": ["Round white tablet"]})
        assert info.name == "Unknown"
        assert info.description == "Round white tablet"

    def test_empty_lists_become_none(self):
        info = format_medication_data({"openfda": {"brand_name": []}, "warnings": []})
        assert info.name == "Unknown"
        assert info.warnings is None

    def test_none(self):
        assert format_medication_data(None) is None

    def test_unnormalizable_record_is_partial(self):
        # active_ingredient entries must be strings
        info = format_medication_data({"openfda": {"brand_name": ["Advil"]}, "active_ingredient": [42]})
        assert info.is_partial
        assert info.name == "Advil"
        assert info.match_confidence is MatchConfidence.LOW
        assert info.to_dict() == {"name": "Advil", "matchConfidence": "Low"}

    def test_serialized_keys(self):
        data = format_medication_data(label_record("Tylenol", "ACETAMINOPHEN")).to_dict()
        assert data["genericName"] == "ACETAMINOPHEN"
        assert data["brandName"] == "Tylenol"
        assert data["matchConfidence"] == "High"
        assert "imprint" not in data


class TestParseIngredient:

    def test_name_and_strength(self):
        ingredient = parse_ingredient("IBUPROFEN 200 mg")
        assert ingredient.name == "IBUPROFEN"
        assert ingredient.strength == "200 mg"

    def test_no_strength(self):
        ingredient = parse_ingredient("Purified water")
        assert ingredient.name == "Purified water"
        assert ingredient.strength == "Unknown"
