"""
Scan Type and Match Confidence

Enumerations shared by the scan flow and stored records.
"""

from enum import Enum

from ..exceptions import UnsupportedScanTypeError


class ScanType(str, Enum):
    """How the medication was captured."""

    BARCODE = "barcode"
    PILL = "pill"
    IMPRINT = "imprint"

    @classmethod
    def parse(cls, value: "str | ScanType") -> "ScanType":
        """
        Parse a scan type name.

        Raises:
            UnsupportedScanTypeError: If the name is not a known scan type
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedScanTypeError(str(value)) from None

    @property
    def needs_image(self) -> bool:
        return self is not ScanType.BARCODE


class MatchConfidence(str, Enum):
    """How sure the lookup is that a record matches the scan."""

    HIGH = "High"
    LOW = "Low"
