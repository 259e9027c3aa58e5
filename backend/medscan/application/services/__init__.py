"""
Application Services

High-level services that coordinate domain operations.
"""

from .scan_service import ScanService
from .account_service import AccountService

__all__ = [
    "ScanService",
    "AccountService",
]
