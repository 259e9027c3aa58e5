"""
Storage Adapters

Implementations of RecordRepositoryPort.
"""

from .supabase_repository import SupabaseRecordRepository
from .sql_repository import SQLRecordRepository
from .database import create_database_engine
from .factory import RecordRepositoryFactory, StorageType

__all__ = [
    "SupabaseRecordRepository",
    "SQLRecordRepository",
    "create_database_engine",
    "RecordRepositoryFactory",
    "StorageType",
]
