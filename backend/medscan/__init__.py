"""
Medication Identification Backend

Identifies pills from photos, barcodes and imprints using external
vision and drug-label services, and records scans in a hosted backend.
Pipeline: CAPTURE → VISION → CLASSIFY → LOOKUP → PERSIST
"""

__version__ = "1.0.0"
__author__ = "MedScan Team"
