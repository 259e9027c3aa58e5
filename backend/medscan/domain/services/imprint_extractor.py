"""
Pill Imprint Extractor

Picks the line of OCR text most likely to be the imprint stamped on a pill.
Multi-line imprints, score lines and manufacturer logos are not handled.
"""

from typing import Optional
import re


IMPRINT_PATTERN = re.compile(r"[A-Z0-9\-/]+")
MIN_IMPRINT_LENGTH = 2
MAX_IMPRINT_LENGTH = 10


def _has_imprint_length(value: str) -> bool:
    return MIN_IMPRINT_LENGTH <= len(value) <= MAX_IMPRINT_LENGTH


def extract_imprint(text: Optional[str]) -> Optional[str]:
    """
    Extract a pill imprint from detected text.

    First looks for a short line made only of letters, digits, dashes and
    slashes (case-insensitive). If there is none, takes the first short line.

    Args:
        text: Full OCR text, lines separated by newlines

    Returns:
        The imprint line, trimmed and in its original case, or None
    """
    if not text:
        return None

    lines = [line.strip() for line in text.splitlines()]

    for line in lines:
        upper = line.upper()
        if _has_imprint_length(upper) and IMPRINT_PATTERN.fullmatch(upper):
            return line

    for line in lines:
        if _has_imprint_length(line):
            return line

    return None
