"""
UserId Value Object - MongoDB ObjectId (24 hex chars) of a user document.

ObjectId hex is case-insensitive; the value is kept lowercase, the form
str(ObjectId(...)) produces, so ids compare equal however they were spelled.
"""

import re
from dataclasses import dataclass

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


@dataclass(frozen=True)
class UserId:
    value: str  # user _id, presented as lowercase ObjectId hex string

    def __post_init__(self):
        if not self.value:
            raise ValueError("UserId cannot be empty")
        if not OBJECT_ID_PATTERN.match(self.value):
            raise ValueError(f"Invalid user id: {self.value}")
        object.__setattr__(self, "value", self.value.lower())

    def __str__(self) -> str:
        return self.value
