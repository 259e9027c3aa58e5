"""
End-to-end scan flow tests: dummy vision, in-memory catalog and SQLite history.
"""

from io import BytesIO
import base64

import pytest
from PIL import Image

from medscan.application.lookup.medication_lookup import MedicationLookup
from medscan.application.pipeline.orchestrator import ScanOrchestrator
from medscan.application.services.scan_service import ScanService
from medscan.domain.entities.scan_result import ScanStage, StageStatus
from medscan.domain.exceptions import InvalidImageError, InvalidInputError, UnsupportedScanTypeError
from medscan.domain.value_objects.call_outcome import CallOutcome
from medscan.domain.value_objects.image_data import ImageData
from medscan.domain.value_objects.scan_type import ScanType
from medscan.domain.value_objects.vision_annotations import DominantColor
from medscan.infrastructure.label_search.openfda_client import DummyLabelSearch
from medscan.infrastructure.vision.google_vision import DummyVisionService

from conftest import make_photo


class BrokenRepository:
    """Repository whose writes always raise."""

    backend_name = "broken"

    def with_access_token(self, access_token):
        return self

    def record_scan(self, entry):
        raise RuntimeError("database is locked")


class TestPillScan:

    def test_matched_pill(self, orchestrator, photo, catalog):
        result = orchestrator.scan_pill(photo)

        assert result.is_successful
        assert result.medication.name == "Tylenol"
        assert result.scan_data == {
            "color": "white",
            "shape": "round",
            "labels": ["Pill", "Medicine"],
            "imageUri": "file:///captures/pill.png",
        }
        assert catalog.queries == [("label.json", "white round pill", 1)]
        assert not result.recorded

    def test_color_only_query(self, catalog, repository, photo):
        vision = DummyVisionService(colors=[DominantColor(red=255, green=0, blue=0)], labels=["Medicine"])
        orchestrator = ScanOrchestrator(vision, MedicationLookup(catalog), repository)

        result = orchestrator.scan_pill(photo)

        assert catalog.queries == [("label.json", "red pill", 1)]
        assert result.is_successful
        assert result.medication is None
        assert result.result == {"color": "red", "shape": None, "labels": ["Medicine"]}
        assert result.scan_data["shape"] == "unknown"
        assert result.display_record()["name"] == "Unknown Pill"

    def test_nothing_detected_skips_lookup(self, catalog, repository, photo):
        orchestrator = ScanOrchestrator(DummyVisionService(), MedicationLookup(catalog), repository)

        result = orchestrator.scan_pill(photo)

        assert catalog.queries == []
        assert result.stage_statuses[ScanStage.LOOKUP] is StageStatus.SKIPPED
        # Pill scans count as successful even without attributes
        assert result.is_successful

    def test_vision_errors_become_issues(self, catalog, repository, photo):
        vision = DummyVisionService()
        vision.detect_colors = lambda image: CallOutcome.error("HTTP 403")
        orchestrator = ScanOrchestrator(vision, MedicationLookup(catalog), repository)

        result = orchestrator.scan_pill(photo)

        assert [issue.message for issue in result.issues] == ["Color detection failed"]
        assert result.stage_statuses[ScanStage.VISION] is StageStatus.COMPLETED

    def test_photo_is_resized_before_upload(self, catalog, repository):
        seen = []
        vision = DummyVisionService()
        vision.detect_colors = lambda image: seen.append(image) or CallOutcome.empty()
        orchestrator = ScanOrchestrator(vision, MedicationLookup(catalog), repository)

        orchestrator.scan_pill(ImageData.from_bytes(make_photo(1600, 1200), format="png", uri="big.png"))

        uploaded = Image.open(BytesIO(seen[0].bytes))
        assert uploaded.size == (800, 600)
        assert uploaded.format == "JPEG"
        assert seen[0].uri == "big.png"


class TestImprintScan:

    def test_imprint_match_carries_imprint(self, catalog, repository, photo):
        vision = DummyVisionService(text="Oxycodone HCl 30 mg\nM 30")
        orchestrator = ScanOrchestrator(vision, MedicationLookup(catalog), repository)

        result = orchestrator.scan_imprint(photo)

        assert result.is_successful
        assert result.medication.name == "Oxycodone HCl"
        assert result.medication.imprint == "M 30"
        assert result.result["imprint"] == "M 30"
        assert catalog.queries == [("label.json", "M 30", 3)]
        assert result.scan_data == {
            "imprint": "M 30",
            "fullText": "Oxycodone HCl 30 mg\nM 30",
            "imageUri": "file:///captures/pill.png",
        }

    def test_no_text_is_unsuccessful(self, catalog, repository, photo):
        orchestrator = ScanOrchestrator(DummyVisionService(), MedicationLookup(catalog), repository)

        result = orchestrator.scan_imprint(photo)

        assert not result.is_successful
        assert result.message == "No imprint could be detected on this pill."
        assert result.display_record() is None

    def test_unmatched_imprint(self, repository, photo):
        vision = DummyVisionService(text="ZZ 99")
        orchestrator = ScanOrchestrator(vision, MedicationLookup(DummyLabelSearch()), repository)

        result = orchestrator.scan_imprint(photo)

        assert result.is_successful
        assert result.result == {"imprint": "ZZ 99", "fullText": "ZZ 99"}
        assert result.display_record()["imprint"] == "ZZ 99"


class TestBarcodeScan:

    def test_ndc_barcode(self, orchestrator, catalog):
        result = orchestrator.scan_barcode("0002322730", "ean13")

        assert result.is_successful
        assert result.medication.name == "Strattera"
        assert result.scan_data == {"type": "ean13", "data": "0002322730"}
        assert result.stage_statuses[ScanStage.VISION] is StageStatus.SKIPPED

    def test_unknown_product_code(self, orchestrator):
        result = orchestrator.scan_barcode("1234567890")

        assert not result.is_successful
        assert result.medication is None
        assert result.message == "No medication found with this barcode."

    def test_non_numeric_barcode_is_partial(self, orchestrator, catalog):
        result = orchestrator.scan_barcode("ADVIL-200")

        assert result.is_successful
        assert result.medication.to_dict() == {"name": "ADVIL-200", "matchConfidence": "Low"}
        assert catalog.queries == []

    def test_empty_barcode(self, orchestrator):
        with pytest.raises(InvalidInputError):
            orchestrator.scan_barcode("   ")


class TestPersistence:

    def test_signed_in_scan_is_recorded(self, orchestrator, repository, photo):
        result = orchestrator.scan_pill(photo, user_id="user-1")

        assert result.recorded
        history = repository.get_scan_history("user-1")
        assert len(history) == 1
        assert history[0].scan_type == "pill"
        assert history[0].is_successful
        assert history[0].scan_data["color"] == "white"
        assert history[0].result["name"] == "Tylenol"
        assert result.get_user_response()["history_id"] == history[0].id

    def test_anonymous_scan_is_not_recorded(self, orchestrator, repository):
        orchestrator.scan_barcode("0002322730")

        assert repository.get_scan_history("user-1") == []

    def test_failed_write_still_returns_result(self, white_round_vision, catalog, photo):
        orchestrator = ScanOrchestrator(white_round_vision, MedicationLookup(catalog), BrokenRepository())

        result = orchestrator.scan_pill(photo, user_id="user-1")

        assert result.medication.name == "Tylenol"
        assert not result.recorded
        assert result.issues[-1].stage is ScanStage.PERSIST


class TestInputValidation:

    def test_unreadable_image(self, orchestrator):
        with pytest.raises(InvalidImageError):
            orchestrator.scan_pill(ImageData.from_bytes(b"not an image"))

    def test_barcode_scan_takes_no_image(self, orchestrator, photo):
        with pytest.raises(InvalidInputError):
            orchestrator.scan_image(ScanType.BARCODE, photo)

    def test_service_rejects_unknown_type(self, orchestrator, photo):
        with pytest.raises(UnsupportedScanTypeError):
            ScanService(orchestrator).scan("xray", photo)

    def test_service_from_base64(self, orchestrator):
        data_url = "data:image/png;base64," + base64.b64encode(make_photo()).decode()

        result = ScanService(orchestrator).scan_from_base64("PILL", data_url, uri="capture.png")

        assert result.scan_type is ScanType.PILL
        assert result.scan_data["imageUri"] == "capture.png"

    def test_service_missing_file(self, orchestrator):
        with pytest.raises(InvalidImageError):
            ScanService(orchestrator).scan_from_file("pill", "/nonexistent/pill.jpg")
