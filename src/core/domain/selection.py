"""Selection policies for the fetch chain.

A policy decides which element of a decoded collection seeds the next
stage. Both runners configure their own policy; they are not required to
agree.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence, TypeVar

T = TypeVar("T")


class SelectionPolicy(str, Enum):
    """Which end of a collection is carried forward."""

    FIRST = "first"
    LAST = "last"

    @classmethod
    def parse(cls, value: "str | SelectionPolicy") -> "SelectionPolicy":
        """Accept a policy or its case-insensitive name."""

        if isinstance(value, SelectionPolicy):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown selection policy {value!r} (expected one of: {choices})") from None

    def select(self, items: Sequence[T]) -> T | None:
        """Return the chosen element, or None for an empty collection."""

        if not items:
            return None
        return items[0] if self is SelectionPolicy.FIRST else items[-1]
