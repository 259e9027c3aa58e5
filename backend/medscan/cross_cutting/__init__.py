"""
Cross-Cutting Concerns

Utilities and services that span across multiple layers.
"""

from .logging import setup_logging, get_logger, ScanLogger
from .validation import validate_image, validate_text, validate_credentials, is_product_code
from .error_handling import handle_exception, ErrorHandler, safe_call

__all__ = [
    "setup_logging",
    "get_logger",
    "ScanLogger",
    "validate_image",
    "validate_text",
    "validate_credentials",
    "is_product_code",
    "handle_exception",
    "ErrorHandler",
    "safe_call",
]
