"""
SQL Models

SQLAlchemy tables mirroring the hosted backend's schema, plus the two
tables the local identity provider needs.
"""

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, String, Float, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.orm import declarative_base, relationship


Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MedicationModel(Base):
    __tablename__ = "medications"

    id = Column(String(36), primary_key=True, default=new_id)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    name = Column(String, nullable=False)
    ndc = Column(String, nullable=True, index=True)
    gtin = Column(String, nullable=True)
    imprint = Column(String, nullable=True)
    shape = Column(String, nullable=True)
    color = Column(String, nullable=True)
    size = Column(Float, nullable=True)
    manufacturer = Column(String, nullable=True)
    active_ingredients = Column(JSON, nullable=True)
    dosage = Column(String, nullable=True)
    route = Column(String, nullable=True)
    packaging = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    verified = Column(Boolean, default=False, nullable=False)
    user_id = Column(String(36), nullable=True)


class ScanHistoryModel(Base):
    __tablename__ = "scan_history"

    id = Column(String(36), primary_key=True, default=new_id)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    medication_id = Column(String(36), ForeignKey("medications.id"), nullable=True)
    user_id = Column(String(36), nullable=False, index=True)
    scan_type = Column(String, nullable=False)
    scan_data = Column(JSON, nullable=False)
    result = Column(JSON, nullable=True)
    is_successful = Column(Boolean, default=False, nullable=False)

    medication = relationship("MedicationModel", lazy="joined")


class SavedMedicationModel(Base):
    __tablename__ = "saved_medications"

    id = Column(String(36), primary_key=True, default=new_id)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    user_id = Column(String(36), nullable=False, index=True)
    medication_id = Column(String(36), ForeignKey("medications.id"), nullable=False)
    notes = Column(String, nullable=True)
    reminder_enabled = Column(Boolean, default=False, nullable=False)
    reminder_frequency = Column(JSON, nullable=True)

    medication = relationship("MedicationModel", lazy="joined")


class UserProfileModel(Base):
    __tablename__ = "user_profiles"

    id = Column(String(36), primary_key=True, default=new_id)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    user_id = Column(String(36), nullable=False, unique=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    email = Column(String, nullable=True)
    is_healthcare_provider = Column(Boolean, default=False, nullable=False)
    preferences = Column(JSON, nullable=True)


# Local identity provider only

class AuthUserModel(Base):
    __tablename__ = "auth_users"

    id = Column(String(36), primary_key=True, default=new_id)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)


class AuthTokenModel(Base):
    __tablename__ = "auth_tokens"

    token = Column(String(64), primary_key=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    user_id = Column(String(36), ForeignKey("auth_users.id"), nullable=False, index=True)
    revoked = Column(Boolean, default=False, nullable=False)

    user = relationship("AuthUserModel", lazy="joined")
