"""
SQL Record Repository

RecordRepositoryPort implementation on SQLAlchemy. Used for local
development (SQLite file) and tests (in-memory SQLite).
"""

from typing import Optional, Dict, Any, List, Type
from datetime import datetime
import logging

from sqlalchemy.engine import Engine

from ...domain.ports.repository import RecordRepositoryPort
from ...domain.entities.records import (
    Medication,
    ScanHistoryEntry,
    SavedMedication,
    UserProfile,
)
from ...cross_cutting.error_handling import ErrorHandler
from .database import create_database_engine, create_session_factory
from .models import (
    Base,
    MedicationModel,
    ScanHistoryModel,
    SavedMedicationModel,
    UserProfileModel,
)


logger = logging.getLogger(__name__)


def _to_row(model: Base) -> Dict[str, Any]:
    """Column values of a model instance, timestamps as ISO strings."""
    row = {}
    for column in model.__table__.columns:
        value = getattr(model, column.name)
        if isinstance(value, datetime):
            value = value.isoformat()
        row[column.name] = value
    return row


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value)


def _new_model(model_cls: Type[Base], row: Dict[str, Any]) -> Base:
    """Model instance from an insert row; explicit timestamps are kept."""
    columns = {c.name for c in model_cls.__table__.columns}
    values = {k: v for k, v in row.items() if k in columns}
    for key in ("created_at", "updated_at"):
        if key in values:
            values[key] = _parse_timestamp(values[key])
    return model_cls(**values)


class SQLRecordRepository(RecordRepositoryPort):
    """
    Record repository backed by a SQL database.

    Follows the same failure contract as the hosted backend: errors are
    logged and surface as None, [] or False.
    """

    def __init__(self, database_url: str = "sqlite://", engine: Optional[Engine] = None):
        """
        Initialize the repository.

        Args:
            database_url: SQLAlchemy URL (ignored when ``engine`` is given)
            engine: Existing engine to share (e.g. with the local identity provider)
        """
        self._engine = engine or create_database_engine(database_url)
        self._session_factory = create_session_factory(self._engine)

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def engine(self) -> Engine:
        return self._engine

    # =========================================================================
    # Medications
    # =========================================================================

    def get_medication(self, medication_id: str) -> Optional[Medication]:
        with ErrorHandler(self.logger, "get_medication", suppress=True):
            with self._session_factory() as session:
                model = session.get(MedicationModel, medication_id)
                return Medication.from_row(_to_row(model)) if model else None
        return None

    def search_medications(self, filters: Dict[str, str]) -> List[Medication]:
        with ErrorHandler(self.logger, "search_medications", suppress=True):
            with self._session_factory() as session:
                query = session.query(MedicationModel)
                for column, mode in Medication.SEARCH_FILTERS.items():
                    value = filters.get(column)
                    if not value:
                        continue
                    field = getattr(MedicationModel, column)
                    if mode == "ilike":
                        query = query.filter(field.ilike(f"%{value}%"))
                    else:
                        query = query.filter(field == value)
                return [Medication.from_row(_to_row(m)) for m in query.all()]
        return []

    def create_medication(self, medication: Medication) -> Optional[Medication]:
        with ErrorHandler(self.logger, "create_medication", suppress=True):
            with self._session_factory() as session:
                model = _new_model(MedicationModel, medication.to_insert())
                session.add(model)
                session.commit()
                return Medication.from_row(_to_row(model))
        return None

    def update_medication(self, medication_id: str, changes: Dict[str, Any]) -> Optional[Medication]:
        with ErrorHandler(self.logger, "update_medication", suppress=True):
            with self._session_factory() as session:
                model = session.get(MedicationModel, medication_id)
                if model is None:
                    self.logger.warning(f"Medication {medication_id} not found for update")
                    return None
                for key, value in changes.items():
                    if key in Medication.UPDATABLE:
                        setattr(model, key, value)
                session.commit()
                return Medication.from_row(_to_row(model))
        return None

    def delete_medication(self, medication_id: str) -> bool:
        with ErrorHandler(self.logger, "delete_medication", suppress=True):
            with self._session_factory() as session:
                session.query(MedicationModel).filter(
                    MedicationModel.id == medication_id
                ).delete()
                session.commit()
                return True
        return False

    # =========================================================================
    # Scan history
    # =========================================================================

    def record_scan(self, entry: ScanHistoryEntry) -> Optional[ScanHistoryEntry]:
        with ErrorHandler(self.logger, "record_scan", suppress=True):
            with self._session_factory() as session:
                model = _new_model(ScanHistoryModel, entry.to_insert())
                session.add(model)
                session.commit()
                return ScanHistoryEntry.from_row(_to_row(model))
        return None

    def get_scan_history(self, user_id: str) -> List[ScanHistoryEntry]:
        with ErrorHandler(self.logger, "get_scan_history", suppress=True):
            with self._session_factory() as session:
                models = (
                    session.query(ScanHistoryModel)
                    .filter(ScanHistoryModel.user_id == user_id)
                    .order_by(ScanHistoryModel.created_at.desc())
                    .all()
                )
                entries = []
                for model in models:
                    row = _to_row(model)
                    row["medications"] = _to_row(model.medication) if model.medication else None
                    entries.append(ScanHistoryEntry.from_row(row))
                return entries
        return []

    # =========================================================================
    # Profiles
    # =========================================================================

    def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        with ErrorHandler(self.logger, "get_user_profile", suppress=True):
            with self._session_factory() as session:
                model = (
                    session.query(UserProfileModel)
                    .filter(UserProfileModel.user_id == user_id)
                    .one_or_none()
                )
                return UserProfile.from_row(_to_row(model)) if model else None
        return None

    def update_user_profile(self, user_id: str, changes: Dict[str, Any]) -> Optional[UserProfile]:
        with ErrorHandler(self.logger, "update_user_profile", suppress=True):
            with self._session_factory() as session:
                model = (
                    session.query(UserProfileModel)
                    .filter(UserProfileModel.user_id == user_id)
                    .one_or_none()
                )
                if model is None:
                    self.logger.warning(f"No profile for user {user_id}")
                    return None
                for key, value in changes.items():
                    if key in UserProfile.UPDATABLE:
                        setattr(model, key, value)
                session.commit()
                return UserProfile.from_row(_to_row(model))
        return None

    # =========================================================================
    # Saved medications
    # =========================================================================

    def save_medication(self, saved: SavedMedication) -> Optional[SavedMedication]:
        with ErrorHandler(self.logger, "save_medication", suppress=True):
            with self._session_factory() as session:
                model = _new_model(SavedMedicationModel, saved.to_insert())
                session.add(model)
                session.commit()
                return SavedMedication.from_row(_to_row(model))
        return None

    def get_saved_medications(self, user_id: str) -> List[SavedMedication]:
        with ErrorHandler(self.logger, "get_saved_medications", suppress=True):
            with self._session_factory() as session:
                models = (
                    session.query(SavedMedicationModel)
                    .filter(SavedMedicationModel.user_id == user_id)
                    .all()
                )
                saved = []
                for model in models:
                    row = _to_row(model)
                    row["medication"] = _to_row(model.medication) if model.medication else None
                    saved.append(SavedMedication.from_row(row))
                return saved
        return []

    def remove_saved_medication(self, saved_id: str) -> bool:
        with ErrorHandler(self.logger, "remove_saved_medication", suppress=True):
            with self._session_factory() as session:
                session.query(SavedMedicationModel).filter(
                    SavedMedicationModel.id == saved_id
                ).delete()
                session.commit()
                return True
        return False

    @property
    def backend_name(self) -> str:
        return f"sql:{self._engine.url.get_backend_name()}"
