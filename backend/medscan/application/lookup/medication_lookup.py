"""
Medication Lookup

Resolves a medication from a product code, a name, an active ingredient
or free text against the drug-label catalog.

Every search is best-effort: failed and empty catalog calls both come back
as an empty list (searches) or None (single-record lookups). Nothing is
retried.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional
import logging
import re

from ...domain.ports.label_search import LabelSearchPort, LabelRecord
from ...domain.entities.medication_info import MedicationInfo
from ...domain.services.label_normalizer import format_medication_data, first_value
from ...domain.value_objects.call_outcome import CallOutcome


logger = logging.getLogger(__name__)

# Codes at least this long may be UPC/EAN rather than NDC
UPC_FALLBACK_MIN_LENGTH = 12

CODE_SEPARATORS = re.compile(r"[-\s]")

# Product code groupings tried in order: as scanned, 5-x, 4-x
CODE_STRATEGIES: List[Callable[[str], str]] = [
    lambda code: code,
    lambda code: f"{code[:5]}-{code[5:]}",
    lambda code: f"{code[:4]}-{code[4:]}",
]


def clean_code(code: str) -> str:
    """Strip dashes and whitespace from a scanned code."""
    return CODE_SEPARATORS.sub("", code)


def field_query(field_name: str, value: str) -> str:
    """Catalog field query, e.g. ``openfda.brand_name:"Tylenol"``."""
    return f'{field_name}:"{value}"'


def application_number(record: LabelRecord) -> Optional[str]:
    openfda = record.get("openfda")
    if not isinstance(openfda, dict):
        return None
    return first_value(openfda, "application_number")


def dedupe_by_application_number(records: List[LabelRecord]) -> List[LabelRecord]:
    """
    Keep the first record per application number.

    Records without an application number are dropped.
    """
    seen = set()
    unique = []
    for record in records:
        number = application_number(record)
        if not number or number in seen:
            continue
        seen.add(number)
        unique.append(record)
    return unique


class MedicationLookup:
    """
    Catalog searches composed from the label search port.

    Usage:
        lookup = MedicationLookup(OpenFDALabelSearch(api_key))

        record = lookup.search_by_ndc("0002-3227")
        records = lookup.search_by_name("Tylenol", limit=5)
        info = lookup.format_medication_data(record)
    """

    def __init__(self, label_search: LabelSearchPort):
        self._label_search = label_search
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _records(self, outcome: CallOutcome[List[LabelRecord]], description: str) -> List[LabelRecord]:
        # Empty and failed calls look the same to callers
        if not outcome.is_success:
            log = self.logger.warning if outcome.is_error else self.logger.info
            log(f"{description}: {outcome.reason}")
        return outcome.value_or([])

    def search_by_ndc(self, code: str) -> Optional[LabelRecord]:
        """
        Find a product by NDC (or a barcode that may carry one).

        Tries each code grouping against the product catalog and returns
        the first hit. Long codes that match nothing are retried as free
        text, since UPC/EAN barcodes are not product NDCs.

        Args:
            code: Scanned code, with or without dashes

        Returns:
            Raw catalog record, or None
        """
        cleaned = clean_code(code)
        self.logger.info(f"Searching by NDC: {cleaned}")

        for strategy in CODE_STRATEGIES:
            query = field_query("product_ndc", strategy(cleaned))
            records = self._records(self._label_search.search_products(query, limit=1), query)
            if records:
                return records[0]

        if len(cleaned) >= UPC_FALLBACK_MIN_LENGTH:
            self.logger.info("No NDC match, trying UPC/EAN as free text")
            records = self.search_generic(cleaned)
            if records:
                return records[0]

        self.logger.info(f"No results found for NDC: {code}")
        return None

    def search_by_name(self, name: str, limit: int = 10) -> List[LabelRecord]:
        """
        Search brand and generic names concurrently.

        Brand results come first; duplicates (same application number)
        keep their first occurrence.

        Args:
            name: Medication name
            limit: Maximum number of records

        Returns:
            List of raw catalog records
        """
        brand_query = field_query("openfda.brand_name", name)
        generic_query = field_query("openfda.generic_name", name)

        # Both queries share the adapter's session; see create_session
        with ThreadPoolExecutor(max_workers=2) as executor:
            brand_future = executor.submit(self._label_search.search_labels, brand_query, limit)
            generic_future = executor.submit(self._label_search.search_labels, generic_query, limit)
            brand = self._records(brand_future.result(), brand_query)
            generic = self._records(generic_future.result(), generic_query)

        unique = dedupe_by_application_number(brand + generic)
        self.logger.info(f"Name search for {name!r} found {len(unique)} result(s)")
        return unique[:limit]

    def search_by_active_ingredient(self, ingredient: str, limit: int = 10) -> List[LabelRecord]:
        query = field_query("active_ingredient", ingredient)
        return self._records(self._label_search.search_labels(query, limit), query)

    def search_generic(self, query: str, limit: int = 10) -> List[LabelRecord]:
        """Free-text label search."""
        return self._records(self._label_search.search_labels(query, limit), query)

    def get_by_application_number(self, number: str) -> Optional[LabelRecord]:
        query = field_query("openfda.application_number", number)
        records = self._records(self._label_search.search_labels(query, 1), query)
        return records[0] if records else None

    def get_by_manufacturer(self, manufacturer: str, limit: int = 10) -> List[LabelRecord]:
        query = field_query("openfda.manufacturer_name", manufacturer)
        return self._records(self._label_search.search_labels(query, limit), query)

    @staticmethod
    def format_medication_data(record: Optional[LabelRecord]) -> Optional[MedicationInfo]:
        return format_medication_data(record)

    def find_first(self, query: str, limit: int = 1) -> Optional[MedicationInfo]:
        """Free-text search, normalized first hit."""
        records = self.search_generic(query, limit)
        return format_medication_data(records[0]) if records else None

    @property
    def provider_name(self) -> str:
        return self._label_search.provider_name
