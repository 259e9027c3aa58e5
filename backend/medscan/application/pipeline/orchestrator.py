"""
Scan Orchestrator

Sequences the stages of a barcode, pill or imprint scan.
"""

from typing import List, Optional
import logging
import time

from .context import ScanContext
from .stages import (
    ScanStageExecutor,
    PrepareImageStage,
    VisionStage,
    ClassifyStage,
    LookupStage,
    PersistStage,
)
from ..lookup.medication_lookup import MedicationLookup
from ...config.settings import ImageConfig
from ...cross_cutting.logging import ScanLogger
from ...cross_cutting.validation import validate_image, validate_text
from ...domain.entities.scan_result import ScanResult
from ...domain.exceptions import InvalidImageError, InvalidInputError
from ...domain.ports.repository import RecordRepositoryPort
from ...domain.ports.vision_service import VisionServicePort
from ...domain.value_objects.image_data import ImageData
from ...domain.value_objects.scan_type import ScanType


logger = logging.getLogger(__name__)


class ScanOrchestrator:
    """
    Runs one scan through PREPARE → VISION → CLASSIFY → LOOKUP → PERSIST.

    The only branching is on the scan type: barcode scans skip the image
    stages. Each scan gets its own context, so one orchestrator can serve
    concurrent requests.

    Usage:
        orchestrator = ScanOrchestrator(vision, MedicationLookup(label_search), repository)

        result = orchestrator.scan_pill(image, user_id=user.id)
        result = orchestrator.scan_barcode("00023227", "ean13", user_id=user.id)
    """

    def __init__(
        self,
        vision: VisionServicePort,
        lookup: MedicationLookup,
        repository: RecordRepositoryPort,
        image_config: Optional[ImageConfig] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            vision: Vision service adapter
            lookup: Medication lookup over the label catalog
            repository: Storage for scan history
            image_config: Photo preparation settings
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self._vision = vision
        self._lookup = lookup
        self._repository = repository
        self._stages = self._build_stages(image_config or ImageConfig())

        self.logger.info(f"Scan orchestrator initialized with {len(self._stages)} stages")

    def _build_stages(self, image_config: ImageConfig) -> List[ScanStageExecutor]:
        """Build the ordered list of scan stages."""
        return [
            PrepareImageStage(image_config),
            VisionStage(self._vision),
            ClassifyStage(),
            LookupStage(self._lookup),
            PersistStage(self._repository),
        ]

    def run(self, context: ScanContext) -> ScanResult:
        """
        Run all stages on a prepared context.

        Args:
            context: Scan context holding the captured input

        Returns:
            ScanResult for the presentation layer
        """
        start_time = time.time()
        scan_logger = ScanLogger(context.request_id, context.scan_type.value)

        stages_failed = 0
        for stage_executor in self._stages:
            with scan_logger.stage(stage_executor.name) as outcome:
                outcome["success"] = success = stage_executor.run(context)
            if not success:
                stages_failed += 1

        result = context.to_scan_result()
        result.total_processing_time_ms = (time.time() - start_time) * 1000

        self.logger.info(
            f"Scan {context.request_id[:8]} completed: {result}, "
            f"{stages_failed} stage(s) failed, total time: {result.total_processing_time_ms:.2f}ms"
        )
        return result

    def scan_barcode(
        self,
        data: str,
        barcode_type: Optional[str] = None,
        user_id: Optional[str] = None,
        access_token: Optional[str] = None
    ) -> ScanResult:
        """
        Identify a medication from decoded barcode data.

        Raises:
            InvalidInputError: If the barcode data is empty or too long
        """
        is_valid, error = validate_text(data)
        if not is_valid:
            raise InvalidInputError(error, field_name="data")

        context = ScanContext(
            scan_type=ScanType.BARCODE,
            barcode_data=data.strip(),
            barcode_type=barcode_type,
            user_id=user_id,
            access_token=access_token,
        )
        return self.run(context)

    def scan_image(
        self,
        scan_type: ScanType,
        image: ImageData,
        user_id: Optional[str] = None,
        access_token: Optional[str] = None
    ) -> ScanResult:
        """
        Identify a medication from a photo.

        Args:
            scan_type: PILL or IMPRINT
            image: Captured photo
            user_id: Signed-in user, if any
            access_token: The user's token for the storage backend

        Raises:
            InvalidInputError: If scan_type does not take an image
            InvalidImageError: If the photo is empty or unreadable
        """
        if not scan_type.needs_image:
            raise InvalidInputError(f"{scan_type.value} scans do not take an image", field_name="scan_type")

        is_valid, error = validate_image(image)
        if not is_valid:
            raise InvalidImageError(error)

        context = ScanContext(
            scan_type=scan_type,
            image=image,
            user_id=user_id,
            access_token=access_token,
        )
        return self.run(context)

    def scan_pill(self, image: ImageData, user_id: Optional[str] = None, access_token: Optional[str] = None) -> ScanResult:
        return self.scan_image(ScanType.PILL, image, user_id, access_token)

    def scan_imprint(self, image: ImageData, user_id: Optional[str] = None, access_token: Optional[str] = None) -> ScanResult:
        return self.scan_image(ScanType.IMPRINT, image, user_id, access_token)

    @property
    def stage_names(self) -> List[str]:
        return [s.name for s in self._stages]
