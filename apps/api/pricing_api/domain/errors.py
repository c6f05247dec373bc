"""
Exception hierarchy for pricing and price-list import.

Row-level validation problems are never raised; they are collected as
messages on the row's validation result. The exceptions below are for
requests that cannot proceed at all.
"""


class PricingError(Exception):
    """Base class for all pricing errors."""


class InvalidArgument(PricingError, ValueError):
    """A caller-supplied value is malformed or out of range."""


class InvalidRange(InvalidArgument):
    """A validity interval whose end is not after its start."""


class UnsupportedCurrency(InvalidArgument):
    """A currency code outside the supported set."""


class CurrencyMismatch(PricingError):
    """Arithmetic or comparison attempted between amounts in different currencies."""


class PersistenceFailure(PricingError):
    """Saving an import batch failed and the whole batch was rolled back."""
