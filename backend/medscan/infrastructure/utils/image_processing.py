"""
Image Processing Utilities

Prepares captured photos for the vision service with Pillow.
"""

from io import BytesIO
from typing import Tuple
import logging

from PIL import Image, ImageOps

from ...domain.value_objects.image_data import ImageData


logger = logging.getLogger(__name__)


def resize_to_width(img: Image.Image, width: int = 800) -> Tuple[Image.Image, float]:
    """
    Resize an image to a fixed width, preserving aspect ratio.

    Args:
        img: Input image
        width: Target width in pixels

    Returns:
        Tuple of (resized_image, scale_factor)
    """
    current_width, current_height = img.size
    if current_width == width or current_width == 0:
        return img, 1.0

    scale = width / current_width
    new_height = max(1, round(current_height * scale))
    resized = img.resize((width, new_height), Image.Resampling.LANCZOS)

    logger.debug(f"Resized image from {current_width}x{current_height} to {width}x{new_height}")

    return resized, scale


def to_jpeg_bytes(img: Image.Image, quality: int = 70) -> bytes:
    """Encode an image as JPEG, dropping alpha and palette modes."""
    if img.mode != "RGB":
        img = img.convert("RGB")
    buffer = BytesIO()
    img.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def prepare_image(image: ImageData, width: int = 800, quality: int = 70) -> ImageData:
    """
    Resize and re-encode a captured photo before it is sent for annotation.

    Args:
        image: Captured image
        width: Target width in pixels
        quality: JPEG quality (1-95)

    Returns:
        New ImageData with JPEG content and the original uri
    """
    with Image.open(BytesIO(image.bytes)) as img:
        # Phone cameras store rotation in EXIF
        img = ImageOps.exif_transpose(img)
        resized, _ = resize_to_width(img, width)
        data = to_jpeg_bytes(resized, quality)

    logger.debug(f"Prepared image: {len(image)} -> {len(data)} bytes")
    return image.with_bytes(data, format="jpeg")
