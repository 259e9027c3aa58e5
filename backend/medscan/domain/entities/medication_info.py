"""
Medication Info Entity

Flat, display-ready view of a drug-label record.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from ..value_objects.scan_type import MatchConfidence


@dataclass
class ActiveIngredient:
    """An ingredient with its strength as printed on the label."""

    name: str
    strength: str = "Unknown"

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "strength": self.strength}


@dataclass
class MedicationInfo:
    """
    Normalized medication record produced from a drug-label search hit.

    Serialized with the key names stored in scan history
    (``genericName``, ``brandName``, ``matchConfidence``; the rest snake_case).
    """

    name: str
    match_confidence: MatchConfidence = MatchConfidence.HIGH
    generic_name: Optional[str] = None
    brand_name: Optional[str] = None
    ndc: Optional[str] = None
    rxcui: Optional[str] = None
    spl_id: Optional[str] = None
    application_number: Optional[str] = None
    active_ingredients_details: List[ActiveIngredient] = field(default_factory=list)
    dosage: Optional[str] = None
    dosage_forms: Optional[str] = None
    route: Optional[str] = None
    manufacturer: Optional[str] = None
    description: Optional[str] = None
    indications: Optional[str] = None
    warnings: Optional[str] = None
    drug_interactions: Optional[str] = None
    pregnancy: Optional[str] = None
    storage: Optional[str] = None
    package_label: Optional[str] = None
    imprint: Optional[str] = None
    is_partial: bool = False  # Only name and confidence are known

    @property
    def active_ingredients(self) -> List[str]:
        return [ingredient.name for ingredient in self.active_ingredients_details]

    @property
    def is_low_confidence(self) -> bool:
        return self.match_confidence is MatchConfidence.LOW

    @classmethod
    def partial(cls, name: str, imprint: Optional[str] = None) -> "MedicationInfo":
        """Low-confidence record carrying only a display name."""
        return cls(name=name, match_confidence=MatchConfidence.LOW, imprint=imprint, is_partial=True)

    def to_dict(self) -> Dict[str, Any]:
        if self.is_partial:
            data: Dict[str, Any] = {
                "name": self.name,
                "matchConfidence": self.match_confidence.value,
            }
            if self.imprint is not None:
                data["imprint"] = self.imprint
            return data

        data = {
            "name": self.name,
            "genericName": self.generic_name,
            "brandName": self.brand_name,
            "ndc": self.ndc,
            "rxcui": self.rxcui,
            "spl_id": self.spl_id,
            "application_number": self.application_number,
            "active_ingredients": self.active_ingredients,
            "active_ingredients_details": [i.to_dict() for i in self.active_ingredients_details],
            "dosage": self.dosage,
            "dosage_forms": self.dosage_forms,
            "route": self.route,
            "manufacturer": self.manufacturer,
            "description": self.description,
            "indications": self.indications,
            "warnings": self.warnings,
            "drug_interactions": self.drug_interactions,
            "pregnancy": self.pregnancy,
            "storage": self.storage,
            "package_label": self.package_label,
            "matchConfidence": self.match_confidence.value,
        }
        if self.imprint is not None:
            data["imprint"] = self.imprint
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MedicationInfo":
        """Rebuild from the serialized form (e.g. a stored scan result)."""
        details = [
            ActiveIngredient(name=d.get("name", ""), strength=d.get("strength", "Unknown"))
            for d in data.get("active_ingredients_details") or []
            if isinstance(d, dict)
        ]
        return cls(
            name=data.get("name") or "Unknown",
            match_confidence=MatchConfidence(data.get("matchConfidence", "High")),
            generic_name=data.get("genericName"),
            brand_name=data.get("brandName"),
            ndc=data.get("ndc"),
            rxcui=data.get("rxcui"),
            spl_id=data.get("spl_id"),
            application_number=data.get("application_number"),
            active_ingredients_details=details,
            dosage=data.get("dosage"),
            dosage_forms=data.get("dosage_forms"),
            route=data.get("route"),
            manufacturer=data.get("manufacturer"),
            description=data.get("description"),
            indications=data.get("indications"),
            warnings=data.get("warnings"),
            drug_interactions=data.get("drug_interactions"),
            pregnancy=data.get("pregnancy"),
            storage=data.get("storage"),
            package_label=data.get("package_label"),
            imprint=data.get("imprint"),
            is_partial="genericName" not in data,
        )
