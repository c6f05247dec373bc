"""
Small immutable value types used by pricing and import.
"""
import re
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering

from pricing_api.domain.errors import InvalidArgument

SKU_MAX_LENGTH = 50
SKU_PATTERN = re.compile(r"^[A-Z0-9][A-Z0-9-]*$")

# Largest value an Integer column holds
MAX_INT32 = 2147483647


class QuantityTier(str, Enum):
    """Volume band a requested quantity falls into."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    BULK = "bulk"


@total_ordering
@dataclass(frozen=True)
class Quantity:
    """A strictly positive whole number of units."""
    value: int

    @classmethod
    def create(cls, value: int) -> "Quantity":
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidArgument(f"Quantity must be a whole number (got {value!r})")
        if value <= 0:
            raise InvalidArgument("Quantity must be greater than zero")
        if value > MAX_INT32:
            raise InvalidArgument(f"Quantity cannot exceed {MAX_INT32}")
        return cls(value)

    def meets_minimum(self, minimum: "Quantity") -> bool:
        return self.value >= minimum.value

    def tier(self) -> QuantityTier:
        if self.value <= 10:
            return QuantityTier.SMALL
        if self.value <= 100:
            return QuantityTier.MEDIUM
        if self.value <= 1000:
            return QuantityTier.LARGE
        return QuantityTier.BULK

    def __add__(self, other: "Quantity") -> "Quantity":
        return Quantity(self.value + other.value)

    def __sub__(self, other: "Quantity") -> "Quantity":
        result = self.value - other.value
        if result <= 0:
            raise InvalidArgument("Resulting quantity must be greater than zero")
        return Quantity(result)

    def __lt__(self, other: "Quantity") -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.value < other.value

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Sku:
    """
    Stock keeping unit code.

    Normalized to uppercase. Letters, digits and hyphens only, must start with
    a letter or digit, at most 50 characters.
    """
    value: str

    @classmethod
    def create(cls, value: str) -> "Sku":
        if value is None or not value.strip():
            raise InvalidArgument("SKU cannot be empty")
        normalized = value.strip().upper()
        if len(normalized) > SKU_MAX_LENGTH:
            raise InvalidArgument(f"SKU cannot exceed {SKU_MAX_LENGTH} characters")
        if not SKU_PATTERN.match(normalized):
            raise InvalidArgument(f"Invalid SKU format: {value}")
        return cls(normalized)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LeadTime:
    days: int

    @classmethod
    def create(cls, days: int) -> "LeadTime":
        if days < 0:
            raise InvalidArgument("Lead time cannot be negative")
        if days > MAX_INT32:
            raise InvalidArgument(f"Lead time cannot exceed {MAX_INT32} days")
        return cls(days)

    def __str__(self) -> str:
        return "1 day" if self.days == 1 else f"{self.days} days"
