from __future__ import annotations

from dataclasses import dataclass

from .bias import BiasSpectrum, credibility_label
from .category import Category


@dataclass(frozen=True, slots=True, eq=False)
class Source:
    """Configuration for one syndication feed and its bias/credibility metadata."""

    id: str
    name: str
    url: str
    category: Category
    bias: BiasSpectrum = BiasSpectrum.CENTER
    credibility: int = 70
    factuality: float = 0.75

    def __post_init__(self) -> None:
        if not 0 <= self.credibility <= 100:
            raise ValueError(f"credibility must be within [0, 100], got {self.credibility}")
        if not 0.0 <= self.factuality <= 1.0:
            raise ValueError(f"factuality must be within [0.0, 1.0], got {self.factuality}")

    @property
    def bias_score(self) -> float:
        return self.bias.score

    @property
    def credibility_label(self) -> str:
        return credibility_label(self.credibility)

    # identity is the source id
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Source):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
