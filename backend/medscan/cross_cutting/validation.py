"""
Input Validation

Checks applied to scan and record inputs before any external call.
"""

from typing import Optional, Tuple, Dict, Any, Iterable
from io import BytesIO
import re

from PIL import Image as PILImage

from ..domain.value_objects.image_data import ImageData


# Formats the vision service accepts
SUPPORTED_FORMATS = {"jpeg", "jpg", "png", "bmp", "webp", "gif"}

MAX_IMAGE_DIMENSION = 8192

# Maximum upload size (10 MB)
MAX_FILE_SIZE = 10 * 1024 * 1024

# NDC, UPC-A and EAN-13 codes
PRODUCT_CODE_PATTERN = re.compile(r"[0-9]{10,13}")

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")
MIN_PASSWORD_LENGTH = 6


def validate_image(image: ImageData) -> Tuple[bool, Optional[str]]:
    """
    Validate a captured image.

    Args:
        image: ImageData to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        image_bytes = image.bytes
    except Exception as e:
        return False, f"Failed to read image: {e}"

    if not image_bytes:
        return False, "Image is empty"

    if len(image_bytes) > MAX_FILE_SIZE:
        return False, f"Image size exceeds maximum ({MAX_FILE_SIZE / 1024 / 1024:.1f} MB)"

    try:
        pil_image = PILImage.open(BytesIO(image_bytes))
        pil_image.verify()

        # verify() leaves the image unusable
        pil_image = PILImage.open(BytesIO(image_bytes))
        width, height = pil_image.size
        if width > MAX_IMAGE_DIMENSION or height > MAX_IMAGE_DIMENSION:
            return False, f"Image dimensions exceed maximum ({MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION})"

        img_format = pil_image.format.lower() if pil_image.format else "unknown"
        if img_format not in SUPPORTED_FORMATS:
            return False, f"Unsupported image format: {img_format}"
    except Exception as e:
        return False, f"Invalid image data: {e}"

    return True, None


def is_product_code(data: str) -> bool:
    """Whether barcode data looks like an NDC/UPC/EAN code (10-13 digits)."""
    return bool(PRODUCT_CODE_PATTERN.fullmatch(data or ""))


def validate_text(text: str, min_length: int = 1, max_length: int = 500) -> Tuple[bool, Optional[str]]:
    """
    Validate a search term or barcode payload.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not text or not text.strip():
        return False, "Text cannot be empty"

    if len(text) < min_length:
        return False, f"Text too short (minimum {min_length} characters)"

    if len(text) > max_length:
        return False, f"Text too long (maximum {max_length} characters)"

    return True, None


def validate_credentials(email: str, password: str) -> Tuple[bool, Optional[str]]:
    """Basic shape check for sign-up/sign-in input."""
    if not email or not EMAIL_PATTERN.fullmatch(email.strip()):
        return False, "A valid email address is required"
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        return False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return True, None


def validate_fields(changes: Dict[str, Any], allowed_keys: Iterable[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate an update payload against the columns a caller may change.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(changes, dict):
        return False, "Changes must be a dictionary"

    unknown_keys = set(changes.keys()) - set(allowed_keys)
    if unknown_keys:
        return False, f"Unknown fields: {', '.join(sorted(unknown_keys))}"

    return True, None
