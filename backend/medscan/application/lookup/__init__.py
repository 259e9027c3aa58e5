"""
Lookup Module

Medication searches over the drug-label catalog.
"""

from .medication_lookup import MedicationLookup

__all__ = [
    "MedicationLookup",
]
