"""
API Dependencies

Builds the adapters and services once per process from AppConfig and
hands them to the routers through FastAPI's dependency injection.
Tests replace them with ``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from .config.settings import AppConfig
from .application.lookup.medication_lookup import MedicationLookup
from .application.pipeline.orchestrator import ScanOrchestrator
from .application.services.scan_service import ScanService
from .application.services.account_service import AccountService
from .domain.entities.auth import AuthUser
from .domain.ports.identity import IdentityProviderPort
from .domain.ports.label_search import LabelSearchPort
from .domain.ports.repository import RecordRepositoryPort
from .domain.ports.vision_service import VisionServicePort
from .infrastructure.vision.factory import VisionServiceFactory
from .infrastructure.label_search.factory import LabelSearchFactory
from .infrastructure.storage.factory import RecordRepositoryFactory
from .infrastructure.storage.sql_repository import SQLRecordRepository
from .infrastructure.identity.factory import IdentityProviderFactory
from .infrastructure.utils.http import create_session


@lru_cache()
def get_config() -> AppConfig:
    return AppConfig.from_env()


@lru_cache()
def get_vision_service() -> VisionServicePort:
    config = get_config()
    return VisionServiceFactory.create_from_config(
        config.vision,
        timeout=config.http.timeout,
        session=create_session(config.http.user_agent),
    )


@lru_cache()
def get_label_search() -> LabelSearchPort:
    config = get_config()
    return LabelSearchFactory.create_from_config(
        config.label_search,
        timeout=config.http.timeout,
        session=create_session(config.http.user_agent),
    )


@lru_cache()
def get_repository() -> RecordRepositoryPort:
    config = get_config()
    return RecordRepositoryFactory.create_from_config(config.storage, timeout=config.http.timeout)


@lru_cache()
def get_identity_provider() -> IdentityProviderPort:
    config = get_config()
    repository = get_repository()
    # Local accounts live in the same database as the records
    if isinstance(repository, SQLRecordRepository):
        return IdentityProviderFactory.create_from_config(config.storage, engine=repository.engine)
    return IdentityProviderFactory.create_from_config(config.storage, timeout=config.http.timeout)


@lru_cache()
def get_medication_lookup() -> MedicationLookup:
    return MedicationLookup(get_label_search())


@lru_cache()
def get_scan_service() -> ScanService:
    config = get_config()
    orchestrator = ScanOrchestrator(
        vision=get_vision_service(),
        lookup=get_medication_lookup(),
        repository=get_repository(),
        image_config=config.image,
    )
    return ScanService(orchestrator)


@lru_cache()
def get_account_service() -> AccountService:
    return AccountService(get_identity_provider(), get_repository())


def get_access_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Bearer token from the Authorization header, if any."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_optional_user(
    access_token: Optional[str] = Depends(get_access_token),
    accounts: AccountService = Depends(get_account_service),
) -> Optional[AuthUser]:
    """Signed-in user, or None for anonymous requests."""
    return accounts.get_current_user(access_token)
