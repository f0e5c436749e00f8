"""
UserEmail Value Object - Normalized (trimmed, lower-cased) user email.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserEmail:
    value: str

    def __post_init__(self):
        normalized = (self.value or "").strip().lower()
        if not normalized or "@" not in normalized:
            raise ValueError(f"Invalid user email: {self.value}")
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value
