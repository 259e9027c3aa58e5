"""
Label Search Port

Abstract interface for drug-label catalog queries.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..value_objects.call_outcome import CallOutcome


# A raw catalog record, as returned by the provider
LabelRecord = Dict[str, Any]


class LabelSearchPort(ABC):
    """
    Port (interface) for the drug-label catalog.

    Exposes the two primitive query shapes the lookup layer composes:
    a label search and a product-code search. Both are single requests
    that return a CallOutcome wrapping the provider's result list.
    """

    @abstractmethod
    def search_labels(self, query: str, limit: int = 10) -> CallOutcome[List[LabelRecord]]:
        """
        Query the label catalog.

        Args:
            query: Provider search expression (e.g. ``openfda.brand_name:"x"``)
                or free text
            limit: Maximum number of records

        Returns:
            SUCCESS with records, EMPTY on zero hits, ERROR on failure
        """
        pass

    @abstractmethod
    def search_products(self, query: str, limit: int = 1) -> CallOutcome[List[LabelRecord]]:
        """
        Query the product-code (NDC) catalog.

        Args:
            query: Provider search expression (e.g. ``product_ndc:"12345-678"``)
            limit: Maximum number of records
        """
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get the name of the catalog provider."""
        pass
