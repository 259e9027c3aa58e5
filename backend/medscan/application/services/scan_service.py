"""
Scan Service

High-level application service for barcode, pill and imprint scans.
"""

from typing import Optional, Dict, Any
from pathlib import Path
import logging

from ..pipeline.orchestrator import ScanOrchestrator
from ...domain.value_objects.image_data import ImageData
from ...domain.value_objects.scan_type import ScanType
from ...domain.entities.auth import AuthUser
from ...domain.entities.scan_result import ScanResult
from ...domain.exceptions import InvalidImageError


logger = logging.getLogger(__name__)

VALID_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp", ".webp", ".gif"}


class ScanService:
    """
    Application service for scanning medications.

    This is the main entry point for external consumers. It loads the
    captured input from its source, runs the scan, and attaches the
    signed-in user (if any) so the scan is recorded in their history.

    Usage:
        service = ScanService(orchestrator)

        result = service.scan_barcode("0002-3227", "ean13", user=user, access_token=token)
        result = service.scan_from_file(ScanType.PILL, "path/to/pill.jpg")
        result = service.scan_from_base64("imprint", data_url, user=user, access_token=token)
    """

    def __init__(self, orchestrator: ScanOrchestrator):
        self.orchestrator = orchestrator
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def scan_barcode(
        self,
        data: str,
        barcode_type: Optional[str] = None,
        user: Optional[AuthUser] = None,
        access_token: Optional[str] = None
    ) -> ScanResult:
        """
        Identify a medication from decoded barcode data.

        Args:
            data: Decoded barcode string
            barcode_type: Symbology reported by the scanner (e.g. "ean13")
            user: Signed-in user, if any
            access_token: The user's access token

        Returns:
            ScanResult
        """
        self.logger.info(f"Barcode scan ({barcode_type or 'unknown type'})")
        return self.orchestrator.scan_barcode(
            data,
            barcode_type,
            user_id=user.id if user else None,
            access_token=access_token,
        )

    def scan(
        self,
        scan_type: "ScanType | str",
        image: ImageData,
        user: Optional[AuthUser] = None,
        access_token: Optional[str] = None
    ) -> ScanResult:
        """
        Identify a medication from a photo.

        Args:
            scan_type: "pill" or "imprint"
            image: Captured photo
            user: Signed-in user, if any
            access_token: The user's access token

        Returns:
            ScanResult

        Raises:
            UnsupportedScanTypeError: If scan_type is unknown
            InvalidImageError: If the photo is unusable
        """
        scan_type = ScanType.parse(scan_type)
        self.logger.info(f"Starting {scan_type.value} scan from {image.uri or 'bytes'}")

        result = self.orchestrator.scan_image(
            scan_type,
            image,
            user_id=user.id if user else None,
            access_token=access_token,
        )

        if result.has_match:
            self.logger.info(f"Scan matched: {result.medication.name}")
        else:
            self.logger.info(f"Scan found no match ({len(result.issues)} issue(s))")

        return result

    def scan_from_file(
        self,
        scan_type: "ScanType | str",
        file_path: str,
        user: Optional[AuthUser] = None,
        access_token: Optional[str] = None
    ) -> ScanResult:
        """
        Scan a photo from a file path.

        Raises:
            InvalidImageError: If the file doesn't exist or has an unsupported extension
        """
        path = Path(file_path)

        if not path.exists():
            raise InvalidImageError(f"Image file not found: {file_path}")

        if path.suffix.lower() not in VALID_EXTENSIONS:
            raise InvalidImageError(
                f"Unsupported image format: {path.suffix}. "
                f"Supported: {', '.join(sorted(VALID_EXTENSIONS))}"
            )

        try:
            image = ImageData.from_file(str(path))
        except OSError as e:
            raise InvalidImageError(f"Failed to load image: {e}")

        return self.scan(scan_type, image, user, access_token)

    def scan_from_bytes(
        self,
        scan_type: "ScanType | str",
        image_bytes: bytes,
        format: Optional[str] = None,
        uri: Optional[str] = None,
        user: Optional[AuthUser] = None,
        access_token: Optional[str] = None
    ) -> ScanResult:
        """Scan a photo from raw bytes."""
        if not image_bytes:
            raise InvalidImageError("Image bytes cannot be empty")

        image = ImageData.from_bytes(image_bytes, format=format, uri=uri)
        return self.scan(scan_type, image, user, access_token)

    def scan_from_base64(
        self,
        scan_type: "ScanType | str",
        base64_string: str,
        format: Optional[str] = None,
        uri: Optional[str] = None,
        user: Optional[AuthUser] = None,
        access_token: Optional[str] = None
    ) -> ScanResult:
        """Scan a photo from a base64 string or data URL."""
        if not base64_string:
            raise InvalidImageError("Base64 string cannot be empty")

        image = ImageData.from_base64(base64_string, format=format, uri=uri)
        return self.scan(scan_type, image, user, access_token)

    def get_user_response(self, result: ScanResult) -> Dict[str, Any]:
        return result.get_user_response()

    def get_debug_info(self, result: ScanResult) -> Dict[str, Any]:
        return result.get_debug_info()
