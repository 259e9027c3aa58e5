"""
Shared fixtures: in-memory storage, canned catalog records and small
test photos generated with Pillow.
"""

from io import BytesIO

import pytest
from PIL import Image

from medscan.application.lookup.medication_lookup import MedicationLookup
from medscan.application.pipeline.orchestrator import ScanOrchestrator
from medscan.domain.value_objects.image_data import ImageData
from medscan.domain.value_objects.vision_annotations import DominantColor, LocalizedObject, Vertex
from medscan.infrastructure.identity.local_identity import LocalIdentityProvider
from medscan.infrastructure.label_search.openfda_client import DummyLabelSearch
from medscan.infrastructure.storage.sql_repository import SQLRecordRepository
from medscan.infrastructure.vision.google_vision import DummyVisionService


def make_photo(width=64, height=48, color=(255, 255, 255), format="PNG") -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format=format)
    return buffer.getvalue()


def label_record(brand, generic=None, application_number=None, ndc=None, **sections):
    """Label record shaped like an openFDA result."""
    openfda = {"brand_name": [brand]}
    if generic:
        openfda["generic_name"] = [generic]
    if application_number:
        openfda["application_number"] = [application_number]
    if ndc:
        openfda["product_ndc"] = [ndc]
    record = {"openfda": openfda}
    for key, value in sections.items():
        record[key] = value if isinstance(value, list) else [value]
    return record


def quad(width, height):
    """Bounding quad in service order: top-left, top-right, bottom-right, bottom-left."""
    return (
        Vertex(0.1, 0.1),
        Vertex(0.1 + width, 0.1),
        Vertex(0.1 + width, 0.1 + height),
        Vertex(0.1, 0.1 + height),
    )


@pytest.fixture
def photo() -> ImageData:
    return ImageData.from_bytes(make_photo(), format="png", uri="file:///captures/pill.png")


@pytest.fixture
def repository() -> SQLRecordRepository:
    return SQLRecordRepository("sqlite://")


@pytest.fixture
def identity(repository) -> LocalIdentityProvider:
    return LocalIdentityProvider(engine=repository.engine)


@pytest.fixture
def white_round_vision() -> DummyVisionService:
    return DummyVisionService(
        colors=[DominantColor(red=250, green=250, blue=250, score=0.9)],
        labels=["Pill", "Medicine"],
        objects=[LocalizedObject(name="Pill", score=0.8, vertices=quad(0.3, 0.3))],
    )


@pytest.fixture
def catalog() -> DummyLabelSearch:
    return DummyLabelSearch(
        labels={
            "white round pill": [label_record("Tylenol", "ACETAMINOPHEN", "NDA019872")],
            "M 30": [
                label_record("Oxycodone HCl", "OXYCODONE HYDROCHLORIDE", "ANDA090895"),
                label_record("Roxicodone", "OXYCODONE HYDROCHLORIDE", "NDA021011"),
            ],
        },
        products={
            'product_ndc:"0002-322730"': [label_record("Strattera", "ATOMOXETINE", "NDA021411", ndc="0002-3227")],
        },
    )


@pytest.fixture
def orchestrator(white_round_vision, catalog, repository) -> ScanOrchestrator:
    return ScanOrchestrator(white_round_vision, MedicationLookup(catalog), repository)
