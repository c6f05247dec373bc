"""
Validity interval for price-list entries.

An interval runs from ``valid_from`` to ``valid_to`` inclusive. When
``valid_to`` is missing the interval is open-ended and every comparison
treats its end as ``date.max``.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from pricing_api.domain.errors import InvalidRange

OPEN_END = date.max


@dataclass(frozen=True)
class ValidityInterval:
    valid_from: date
    valid_to: Optional[date] = None

    @classmethod
    def create(cls, valid_from: date, valid_to: Optional[date] = None) -> "ValidityInterval":
        """
        Build an interval, rejecting ranges whose end is not after the start.

        Raises:
            InvalidRange: valid_to is present and valid_to <= valid_from
        """
        if valid_to is not None and valid_to <= valid_from:
            raise InvalidRange(
                f"End date must be after start date (from {valid_from.isoformat()}, to {valid_to.isoformat()})"
            )
        return cls(valid_from, valid_to)

    @property
    def effective_end(self) -> date:
        return self.valid_to if self.valid_to is not None else OPEN_END

    @property
    def is_open_ended(self) -> bool:
        return self.valid_to is None

    def contains(self, day: date) -> bool:
        return self.valid_from <= day <= self.effective_end

    def overlaps_with(self, other: "ValidityInterval") -> bool:
        """True when the two intervals share at least one day."""
        if other is None:
            return False
        return self.valid_from <= other.effective_end and other.valid_from <= self.effective_end

    def is_within(self, other: "ValidityInterval") -> bool:
        return self.valid_from >= other.valid_from and self.effective_end <= other.effective_end

    def intersection(self, other: "ValidityInterval") -> Optional["ValidityInterval"]:
        """The common part of both intervals, or None when they are disjoint."""
        if not self.overlaps_with(other):
            return None
        start = max(self.valid_from, other.valid_from)
        end = min(self.effective_end, other.effective_end)
        # A single shared day cannot be expressed as a strictly increasing interval
        if end == start:
            return ValidityInterval(start, start)
        return ValidityInterval(start, None if end == OPEN_END else end)

    def is_expired(self, today: date) -> bool:
        return self.valid_to is not None and self.valid_to < today

    def is_current(self, today: date) -> bool:
        return self.contains(today)

    def is_future(self, today: date) -> bool:
        return self.valid_from > today

    def days_count(self) -> Optional[int]:
        """Number of days covered, inclusive of both ends. None when open-ended."""
        if self.valid_to is None:
            return None
        return (self.valid_to - self.valid_from).days + 1

    def __str__(self) -> str:
        if self.valid_to is None:
            return f"from {self.valid_from.isoformat()}"
        return f"{self.valid_from.isoformat()} to {self.valid_to.isoformat()}"
