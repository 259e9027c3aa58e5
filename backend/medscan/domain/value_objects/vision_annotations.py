"""
Vision Annotation Value Objects

Typed views of the vision service's colors, objects and labels.
The service omits zero-valued fields, so every numeric field defaults to 0.
"""

from dataclasses import dataclass, field
from typing import Tuple, Dict, Any, Optional


@dataclass(frozen=True)
class DominantColor:
    """
    One entry of the image's dominant color list.

    Attributes:
        red, green, blue: Channel values (0-255)
        score: Service-reported importance of the color
        pixel_fraction: Fraction of the image covered by the color
    """

    red: float = 0
    green: float = 0
    blue: float = 0
    score: float = 0.0
    pixel_fraction: float = 0.0

    @property
    def rgb(self) -> Tuple[float, float, float]:
        return (self.red, self.green, self.blue)

    @property
    def luminance(self) -> float:
        """Perceived brightness (ITU-R BT.601 weights)."""
        return 0.299 * self.red + 0.587 * self.green + 0.114 * self.blue

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DominantColor":
        """Build from ``{"color": {"red", "green", "blue"}, "score", "pixelFraction"}``."""
        color = data.get("color") or {}
        return cls(
            red=float(color.get("red", 0) or 0),
            green=float(color.get("green", 0) or 0),
            blue=float(color.get("blue", 0) or 0),
            score=float(data.get("score", 0) or 0),
            pixel_fraction=float(data.get("pixelFraction", 0) or 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "color": {"red": self.red, "green": self.green, "blue": self.blue},
            "score": self.score,
            "pixelFraction": self.pixel_fraction,
        }


@dataclass(frozen=True)
class Vertex:
    """Normalized (0-1) polygon vertex."""

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Vertex":
        return cls(x=float(data.get("x", 0) or 0), y=float(data.get("y", 0) or 0))


@dataclass(frozen=True)
class LocalizedObject:
    """
    An object found by object localization.

    Attributes:
        name: Object class name (e.g. "Pill", "Tablet", "Circle")
        score: Detection confidence
        vertices: Normalized bounding polygon, in service order
    """

    name: str
    score: float = 0.0
    vertices: Tuple[Vertex, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LocalizedObject":
        poly = data.get("boundingPoly") or {}
        return cls(
            name=str(data.get("name", "")),
            score=float(data.get("score", 0) or 0),
            vertices=tuple(
                Vertex.from_dict(v) for v in poly.get("normalizedVertices", []) or []
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "score": self.score,
            "boundingPoly": {
                "normalizedVertices": [{"x": v.x, "y": v.y} for v in self.vertices]
            },
        }


@dataclass(frozen=True)
class LabelAnnotation:
    """A descriptive label for the whole image."""

    description: str
    score: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["LabelAnnotation"]:
        description = data.get("description")
        if not description:
            return None
        return cls(description=str(description), score=float(data.get("score", 0) or 0))
