"""
Infrastructure Layer

Concrete implementations of domain ports (adapters).
Contains integrations with the vision, drug-label, storage and identity services.
"""

from .vision import GoogleVisionService, DummyVisionService, VisionServiceFactory
from .label_search import OpenFDALabelSearch, DummyLabelSearch, LabelSearchFactory
from .storage import SupabaseRecordRepository, SQLRecordRepository, RecordRepositoryFactory
from .identity import SupabaseIdentityProvider, LocalIdentityProvider, IdentityProviderFactory

__all__ = [
    # Vision
    "GoogleVisionService",
    "DummyVisionService",
    "VisionServiceFactory",
    # Label search
    "OpenFDALabelSearch",
    "DummyLabelSearch",
    "LabelSearchFactory",
    # Storage
    "SupabaseRecordRepository",
    "SQLRecordRepository",
    "RecordRepositoryFactory",
    # Identity
    "SupabaseIdentityProvider",
    "LocalIdentityProvider",
    "IdentityProviderFactory",
]
