"""
Medication lookup tests against an in-memory catalog.
"""

from medscan.application.lookup.medication_lookup import (
    MedicationLookup,
    clean_code,
    dedupe_by_application_number,
)
from medscan.domain.value_objects.call_outcome import CallOutcome
from medscan.infrastructure.label_search.openfda_client import DummyLabelSearch

from conftest import label_record


STRATTERA = label_record("Strattera", "ATOMOXETINE", "NDA021411", ndc="0002-3227")


class TestSearchByNdc:
    """Product code grouping and the UPC fallback"""

    def test_code_as_scanned(self):
        catalog = DummyLabelSearch(products={'product_ndc:"00023227"': [STRATTERA]})
        lookup = MedicationLookup(catalog)

        # Dashes are stripped before any grouping is tried
        assert lookup.search_by_ndc("0002-3227") is STRATTERA
        assert len(catalog.queries) == 1

    def test_grouping_order(self):
        catalog = DummyLabelSearch(products={'product_ndc:"0002-3227"': [STRATTERA]})
        lookup = MedicationLookup(catalog)

        record = lookup.search_by_ndc("00023227")

        assert record is STRATTERA
        assert [q for _, q, _ in catalog.queries] == [
            'product_ndc:"00023227"',
            'product_ndc:"00023-227"',
            'product_ndc:"0002-3227"',
        ]
        assert all(limit == 1 for _, _, limit in catalog.queries)

    def test_first_grouping_hit_stops(self):
        catalog = DummyLabelSearch(products={'product_ndc:"50580-488"': [STRATTERA]})
        lookup = MedicationLookup(catalog)

        assert lookup.search_by_ndc("50580488") is STRATTERA
        assert len(catalog.queries) == 2

    def test_long_code_falls_back_to_free_text(self):
        upc = label_record("Advil", "IBUPROFEN", "NDA018989")
        catalog = DummyLabelSearch(labels={"305730154406": [upc]})
        lookup = MedicationLookup(catalog)

        assert lookup.search_by_ndc("305730154406") is upc
        assert catalog.queries[-1] == ("label.json", "305730154406", 10)

    def test_short_code_has_no_fallback(self):
        catalog = DummyLabelSearch()
        lookup = MedicationLookup(catalog)

        assert lookup.search_by_ndc("1234567890") is None
        assert all(endpoint == "ndc.json" for endpoint, _, _ in catalog.queries)

    def test_errors_read_as_no_match(self):
        catalog = DummyLabelSearch(responder=lambda *_: CallOutcome.error("HTTP 500"))
        lookup = MedicationLookup(catalog)

        assert lookup.search_by_ndc("305730154406") is None
        assert len(catalog.queries) == 4

    def test_clean_code(self):
        assert clean_code("0002-3227 ") == "00023227"
        assert clean_code("0 0 0 2") == "0002"


class TestSearchByName:
    """Brand and generic searches merged"""

    def test_brand_first_and_deduplicated(self):
        brand = label_record("Tylenol", "ACETAMINOPHEN", "NDA019872")
        same_app = label_record("Tylenol Extra", "ACETAMINOPHEN", "NDA019872")
        generic = label_record("Mapap", "ACETAMINOPHEN", "ANDA078569")
        catalog = DummyLabelSearch(labels={
            'openfda.brand_name:"acetaminophen"': [brand],
            'openfda.generic_name:"acetaminophen"': [same_app, generic],
        })

        results = MedicationLookup(catalog).search_by_name("acetaminophen")

        assert results == [brand, generic]

    def test_records_without_application_number_dropped(self):
        catalog = DummyLabelSearch(labels={
            'openfda.brand_name:"Foo"': [label_record("Foo")],
        })
        assert MedicationLookup(catalog).search_by_name("Foo") == []

    def test_limit(self):
        records = [label_record(f"Brand {i}", application_number=f"NDA{i:06d}") for i in range(5)]
        catalog = DummyLabelSearch(labels={'openfda.brand_name:"x"': records})

        assert len(MedicationLookup(catalog).search_by_name("x", limit=3)) == 3

    def test_one_side_failing(self):
        brand = label_record("Tylenol", "ACETAMINOPHEN", "NDA019872")

        def responder(endpoint, query, limit):
            if "generic_name" in query:
                return CallOutcome.error("timeout")
            return CallOutcome.success([brand])

        results = MedicationLookup(DummyLabelSearch(responder=responder)).search_by_name("Tylenol")
        assert results == [brand]

    def test_dedupe_helper(self):
        a = label_record("A", application_number="NDA1")
        b = label_record("B", application_number="NDA1")
        c = {"openfda": "not a dict"}
        assert dedupe_by_application_number([a, b, c]) == [a]


class TestOtherSearches:

    def test_field_queries(self):
        catalog = DummyLabelSearch()
        lookup = MedicationLookup(catalog)

        lookup.search_by_active_ingredient("ibuprofen", 5)
        lookup.get_by_manufacturer("Pfizer")
        lookup.get_by_application_number("NDA019872")

        assert catalog.queries == [
            ("label.json", 'active_ingredient:"ibuprofen"', 5),
            ("label.json", 'openfda.manufacturer_name:"Pfizer"', 10),
            ("label.json", 'openfda.application_number:"NDA019872"', 1),
        ]

    def test_empty_results(self):
        lookup = MedicationLookup(DummyLabelSearch())
        assert lookup.search_generic("nothing") == []
        assert lookup.get_by_application_number("NDA0") is None
        assert lookup.find_first("nothing") is None

    def test_find_first_normalizes(self):
        catalog = DummyLabelSearch(labels={"white round pill": [label_record("Tylenol", "ACETAMINOPHEN")]})
        info = MedicationLookup(catalog).find_first("white round pill")
        assert info.name == "Tylenol"

    def test_provider_name(self):
        assert MedicationLookup(DummyLabelSearch()).provider_name == "DummyLabelSearch"
