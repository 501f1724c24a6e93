from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    """News categories a source can be filed under."""

    US = "US"
    WORLD = "World"
    LOCAL = "Local"
    BUSINESS = "Business"
    TECHNOLOGY = "Technology"
    ENTERTAINMENT = "Entertainment"
    SPORTS = "Sports"
    SCIENCE = "Science"
    HEALTH = "Health"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "Category | str") -> "Category":
        """Resolve a category from its value or member name (case-insensitive).

        Raises ``ValueError`` for anything that is not one of the nine categories.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text.lower() in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"Unknown category '{value}'. Allowed: {[c.value for c in cls]}")
