"""
Label Search Factory

Factory for creating drug-label search instances.
"""

from typing import Any, Dict
from enum import Enum

from ...domain.ports.label_search import LabelSearchPort
from ...config.settings import LabelSearchConfig
from .openfda_client import OpenFDALabelSearch, DummyLabelSearch


class LabelSearchType(Enum):
    """Available label search implementations."""

    OPENFDA = "openfda"
    DUMMY = "dummy"


class LabelSearchFactory:
    """
    Factory for creating label search instances.

    Usage:
        search = LabelSearchFactory.create(LabelSearchType.OPENFDA, api_key="...")
    """

    @staticmethod
    def create(search_type: LabelSearchType, **kwargs) -> LabelSearchPort:
        """
        Create a label search instance.

        Args:
            search_type: Type of search to create
            **kwargs: Additional configuration options
                For OPENFDA: api_key, base_url, timeout, session
                For DUMMY: labels, products, responder

        Returns:
            LabelSearchPort implementation
        """
        if search_type == LabelSearchType.OPENFDA:
            return OpenFDALabelSearch(
                api_key=kwargs.get("api_key"),
                base_url=kwargs.get("base_url", "https://api.fda.gov/drug"),
                timeout=kwargs.get("timeout", 30.0),
                session=kwargs.get("session"),
            )

        elif search_type == LabelSearchType.DUMMY:
            return DummyLabelSearch(
                labels=kwargs.get("labels"),
                products=kwargs.get("products"),
                responder=kwargs.get("responder"),
            )

        else:
            raise ValueError(f"Unknown label search type: {search_type}")

    @staticmethod
    def create_from_config(config: LabelSearchConfig, timeout: float = 30.0, **kwargs: Any) -> LabelSearchPort:
        """Create a label search from LabelSearchConfig."""
        options: Dict[str, Any] = {
            "api_key": config.api_key,
            "base_url": config.base_url,
            "timeout": timeout,
        }
        options.update(kwargs)
        return LabelSearchFactory.create(LabelSearchType(config.type), **options)
