"""
Scan Stage Definitions

Defines the individual scan stages and their execution logic.
"""

from abc import ABC, abstractmethod
from typing import Optional
import logging

from .context import ScanContext
from ..lookup.medication_lookup import MedicationLookup
from ...config.settings import ImageConfig
from ...cross_cutting.error_handling import ErrorHandler
from ...cross_cutting.validation import is_product_code
from ...domain.entities.medication_info import MedicationInfo
from ...domain.entities.scan_result import ScanStage, StageStatus
from ...domain.ports.repository import RecordRepositoryPort
from ...domain.ports.vision_service import VisionServicePort
from ...domain.services.color_classifier import classify_color
from ...domain.services.shape_classifier import classify_shape
from ...domain.services.imprint_extractor import extract_imprint
from ...domain.value_objects.call_outcome import CallOutcome
from ...domain.value_objects.scan_type import ScanType
from ...infrastructure.utils.image_processing import prepare_image


logger = logging.getLogger(__name__)

# Result limits for free-text lookups, per scan type
PILL_LOOKUP_LIMIT = 1
IMPRINT_LOOKUP_LIMIT = 3


class ScanStageExecutor(ABC):
    """
    Abstract base class for scan stage executors.

    Stages are fail-soft: an unexpected error is logged and recorded on the
    context, and the scan continues with what it has. Nothing is retried.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def stage(self) -> ScanStage:
        """Get the scan stage this executor handles."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Get human-readable stage name."""
        pass

    @abstractmethod
    def execute(self, context: ScanContext) -> None:
        """Read inputs from the context and write results back to it."""
        pass

    def can_execute(self, context: ScanContext) -> bool:
        return True

    def run(self, context: ScanContext) -> bool:
        """
        Run the stage.

        Returns:
            True if the stage completed (or was skipped)
        """
        if not self.can_execute(context):
            self.logger.debug(f"Stage {self.name} not applicable, skipping")
            context.skip_stage(self.stage)
            return True

        context.start_stage(self.stage)
        try:
            self.execute(context)
        except Exception as e:
            self.logger.error(f"Unexpected error in stage {self.name}: {e}", exc_info=True)
            context.add_issue(self.stage, str(e), {"error_type": e.__class__.__name__})
            context.finish_stage(self.stage, StageStatus.FAILED)
            return False

        context.finish_stage(self.stage)
        return True


def _unwrap(context: ScanContext, stage: ScanStage, outcome: CallOutcome, default, what: str):
    """Outcome value, recording failed calls as issues. Empty is not an issue."""
    if outcome.is_error:
        context.add_issue(stage, f"{what} failed", {"reason": outcome.reason})
    return outcome.value_or(default)


# =============================================================================
# Concrete Stage Executors
# =============================================================================

class PrepareImageStage(ScanStageExecutor):
    """
    Image Preparation Stage.

    Resizes the photo to a fixed width and re-encodes it as JPEG before it
    is uploaded. If that fails the original photo is sent as-is.
    """

    def __init__(self, config: Optional[ImageConfig] = None):
        super().__init__()
        self.config = config or ImageConfig()

    @property
    def stage(self) -> ScanStage:
        return ScanStage.PREPARE

    @property
    def name(self) -> str:
        return "Image Preparation"

    def can_execute(self, context: ScanContext) -> bool:
        return context.image is not None

    def execute(self, context: ScanContext) -> None:
        context.image = prepare_image(
            context.image,
            width=self.config.resize_width,
            quality=self.config.jpeg_quality,
        )


class VisionStage(ScanStageExecutor):
    """
    Vision Stage.

    Pill scans request dominant colors, labels and objects; imprint scans
    request document text. A failed request leaves its field empty.
    """

    def __init__(self, vision: VisionServicePort):
        super().__init__()
        self.vision = vision

    @property
    def stage(self) -> ScanStage:
        return ScanStage.VISION

    @property
    def name(self) -> str:
        return "Vision"

    def can_execute(self, context: ScanContext) -> bool:
        return context.scan_type.needs_image and context.image is not None

    def execute(self, context: ScanContext) -> None:
        image = context.image
        if context.scan_type is ScanType.PILL:
            context.colors = _unwrap(context, self.stage, self.vision.detect_colors(image), [], "Color detection")
            context.labels = _unwrap(context, self.stage, self.vision.detect_labels(image), [], "Label detection")
            context.objects = _unwrap(context, self.stage, self.vision.detect_objects(image), [], "Object detection")
        else:
            context.full_text = _unwrap(context, self.stage, self.vision.detect_text(image), None, "Text detection")


class ClassifyStage(ScanStageExecutor):
    """
    Classification Stage.

    Turns vision output into color and shape names (pill) or an imprint
    (imprint).
    """

    @property
    def stage(self) -> ScanStage:
        return ScanStage.CLASSIFY

    @property
    def name(self) -> str:
        return "Classification"

    def can_execute(self, context: ScanContext) -> bool:
        return context.scan_type.needs_image

    def execute(self, context: ScanContext) -> None:
        if context.scan_type is ScanType.PILL:
            context.color = classify_color(context.colors)
            context.shape = classify_shape(context.objects)
            self.logger.info(f"Pill attributes: color={context.color}, shape={context.shape}")
        else:
            context.imprint = extract_imprint(context.full_text)
            self.logger.info(f"Imprint: {context.imprint!r}")


class LookupStage(ScanStageExecutor):
    """
    Lookup Stage.

    Barcodes that look like product codes (10-13 digits) are searched by
    NDC; any other barcode becomes a low-confidence record named after the
    scanned data. Pill and imprint scans run a free-text label search.
    """

    def __init__(self, lookup: MedicationLookup):
        super().__init__()
        self.lookup = lookup

    @property
    def stage(self) -> ScanStage:
        return ScanStage.LOOKUP

    @property
    def name(self) -> str:
        return "Lookup"

    def can_execute(self, context: ScanContext) -> bool:
        return bool(context.lookup_query)

    def execute(self, context: ScanContext) -> None:
        query = context.lookup_query

        if context.scan_type is ScanType.BARCODE:
            if is_product_code(query):
                context.medication = self.lookup.format_medication_data(self.lookup.search_by_ndc(query))
            else:
                context.medication = MedicationInfo.partial(query)
            return

        if context.scan_type is ScanType.PILL:
            context.medication = self.lookup.find_first(query, PILL_LOOKUP_LIMIT)
            return

        medication = self.lookup.find_first(query, IMPRINT_LOOKUP_LIMIT)
        if medication is not None:
            medication.imprint = context.imprint
        context.medication = medication


class PersistStage(ScanStageExecutor):
    """
    Persistence Stage.

    Writes one history entry for a signed-in user. A failed write is logged
    and the scan result is still returned, marked as not recorded.
    """

    def __init__(self, repository: RecordRepositoryPort):
        super().__init__()
        self.repository = repository

    @property
    def stage(self) -> ScanStage:
        return ScanStage.PERSIST

    @property
    def name(self) -> str:
        return "Persist"

    def can_execute(self, context: ScanContext) -> bool:
        return context.user_id is not None

    def execute(self, context: ScanContext) -> None:
        repository = self.repository.with_access_token(context.access_token)

        with ErrorHandler(self.logger, "record scan", suppress=True) as handler:
            context.history_entry = repository.record_scan(context.to_history_entry())

        if handler.has_error or context.history_entry is None:
            context.add_issue(self.stage, "Scan was not saved to history", {"backend": repository.backend_name})
