"""
Label Normalizer

Turns a raw drug-label record into a MedicationInfo.

Label records keep most values in single-element lists, under the top
level (label sections) or under ``openfda`` (harmonized identifiers).
Only the first element of each list is used.
"""

from typing import Any, Dict, List, Optional
import logging
import re

from ..entities.medication_info import MedicationInfo, ActiveIngredient
from ..value_objects.scan_type import MatchConfidence
from ...cross_cutting.error_handling import safe_call


logger = logging.getLogger(__name__)

# "ACETAMINOPHEN 500 mg" -> ("ACETAMINOPHEN", "500 mg")
INGREDIENT_PATTERN = re.compile(r"(.+?)\s+(\d+\s*\w+)")

UNKNOWN_NAME = "Unknown"
UNKNOWN_MEDICATION = "Unknown Medication"

# MedicationInfo field -> top-level label section
LABEL_SECTIONS = {
    "dosage": "dosage_and_administration",
    "description": "description",
    "indications": "indications_and_usage",
    "warnings": "warnings",
    "drug_interactions": "drug_interactions",
    "pregnancy": "pregnancy",
    "storage": "storage_and_handling",
    "package_label": "package_label_principal_display_panel",
}

# MedicationInfo field -> openfda key
OPENFDA_FIELDS = {
    "generic_name": "generic_name",
    "brand_name": "brand_name",
    "ndc": "product_ndc",
    "rxcui": "rxcui",
    "spl_id": "spl_id",
    "application_number": "application_number",
    "dosage_forms": "dosage_form",
    "route": "route",
    "manufacturer": "manufacturer_name",
}


def first_value(section: Dict[str, Any], key: str) -> Optional[Any]:
    """First element of a list-valued field, or None if absent/empty."""
    value = section.get(key)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    return value or None


def parse_ingredient(raw: str) -> ActiveIngredient:
    """Split an ingredient string into name and strength."""
    match = INGREDIENT_PATTERN.search(raw)
    if match:
        return ActiveIngredient(name=match.group(1).strip(), strength=match.group(2).strip())
    return ActiveIngredient(name=raw, strength="Unknown")


def display_name(openfda: Dict[str, Any], default: str = UNKNOWN_NAME) -> str:
    """Brand name, else generic name, else ``default``."""
    return (
        first_value(openfda, "brand_name")
        or first_value(openfda, "generic_name")
        or default
    )


def _normalize(record: Dict[str, Any]) -> MedicationInfo:
    openfda = record.get("openfda") or {}

    ingredients: List[ActiveIngredient] = [
        parse_ingredient(raw) for raw in record.get("active_ingredient") or []
    ]

    fields = {name: first_value(openfda, key) for name, key in OPENFDA_FIELDS.items()}
    fields.update(
        {name: first_value(record, key) for name, key in LABEL_SECTIONS.items()}
    )

    return MedicationInfo(
        name=display_name(openfda),
        match_confidence=MatchConfidence.HIGH,
        active_ingredients_details=ingredients,
        **fields,
    )


def format_medication_data(record: Optional[Dict[str, Any]]) -> Optional[MedicationInfo]:
    """
    Normalize a drug-label record.

    Args:
        record: Raw label record, or None

    Returns:
        MedicationInfo with High confidence. If the record cannot be
        normalized, a partial Low confidence record carrying only a name.
        None for None input.
    """
    if not record:
        return None

    try:
        return _normalize(record)
    except Exception as e:
        logger.warning(f"Could not normalize label record: {e}")
        name = safe_call(
            lambda: display_name(record.get("openfda") or {}, UNKNOWN_MEDICATION),
            default=UNKNOWN_MEDICATION,
            logger=logger,
        )
        return MedicationInfo.partial(name)
