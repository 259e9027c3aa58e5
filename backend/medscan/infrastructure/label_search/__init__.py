"""
Label Search Adapters

Implementations of LabelSearchPort.
"""

from .openfda_client import OpenFDALabelSearch, DummyLabelSearch
from .factory import LabelSearchFactory, LabelSearchType

__all__ = [
    "OpenFDALabelSearch",
    "DummyLabelSearch",
    "LabelSearchFactory",
    "LabelSearchType",
]
