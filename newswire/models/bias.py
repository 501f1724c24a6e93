from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BiasSpectrum(str, Enum):
    """Political bias spectrum from far-left to far-right."""

    FAR_LEFT = "Far Left"
    LEFT = "Left"
    CENTER_LEFT = "Center-Left"
    CENTER = "Center"
    CENTER_RIGHT = "Center-Right"
    RIGHT = "Right"
    FAR_RIGHT = "Far Right"

    @property
    def score(self) -> float:
        """Numeric projection in [-2.0, +2.0] used for aggregate statistics."""
        return _SPECTRUM_SCORES[self]

    @property
    def short_label(self) -> str:
        return _SHORT_LABELS[self]

    @classmethod
    def from_value(cls, value: float) -> "BiasSpectrum":
        if value < -1.75:
            return cls.FAR_LEFT
        if value < -1.0:
            return cls.LEFT
        if value < -0.3:
            return cls.CENTER_LEFT
        if value <= 0.3:
            return cls.CENTER
        if value < 1.0:
            return cls.CENTER_RIGHT
        if value < 1.75:
            return cls.RIGHT
        return cls.FAR_RIGHT

    @classmethod
    def parse(cls, value: "BiasSpectrum | str") -> "BiasSpectrum":
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower().replace("_", "-")
        for member in cls:
            if text in (member.value.lower(), member.name.lower().replace("_", "-")):
                return member
        raise ValueError(f"Unknown bias '{value}'. Allowed: {[b.value for b in cls]}")


_SPECTRUM_SCORES = {
    BiasSpectrum.FAR_LEFT: -2.0,
    BiasSpectrum.LEFT: -1.5,
    BiasSpectrum.CENTER_LEFT: -0.7,
    BiasSpectrum.CENTER: 0.0,
    BiasSpectrum.CENTER_RIGHT: 0.7,
    BiasSpectrum.RIGHT: 1.5,
    BiasSpectrum.FAR_RIGHT: 2.0,
}

_SHORT_LABELS = {
    BiasSpectrum.FAR_LEFT: "FL",
    BiasSpectrum.LEFT: "L",
    BiasSpectrum.CENTER_LEFT: "CL",
    BiasSpectrum.CENTER: "C",
    BiasSpectrum.CENTER_RIGHT: "CR",
    BiasSpectrum.RIGHT: "R",
    BiasSpectrum.FAR_RIGHT: "FR",
}


@dataclass(slots=True)
class BiasRating:
    """Bias assessment attached to an article by an analysis collaborator."""

    spectrum: BiasSpectrum
    confidence: float
    source_bias: float
    content_bias: Optional[float] = None
    emotional_language_score: Optional[float] = None
    balance_score: Optional[float] = None
    reasoning: Optional[str] = None

    @property
    def is_high_confidence(self) -> bool:
        return self.confidence >= 0.8

    @property
    def confidence_label(self) -> str:
        if self.confidence >= 0.8:
            return "High"
        if self.confidence >= 0.6:
            return "Medium"
        return "Low"


def credibility_label(credibility: int) -> str:
    if credibility >= 90:
        return "High"
    if credibility >= 75:
        return "Good"
    if credibility >= 60:
        return "Fair"
    return "Low"
