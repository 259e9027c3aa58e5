"""
Utility modules for the infrastructure layer.
"""

from .http import create_session, supabase_headers, error_message
from .image_processing import resize_to_width, to_jpeg_bytes, prepare_image

__all__ = [
    "create_session",
    "supabase_headers",
    "error_message",
    "resize_to_width",
    "to_jpeg_bytes",
    "prepare_image",
]
