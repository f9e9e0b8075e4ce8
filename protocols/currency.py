"""Currency conversion protocol."""

from decimal import Decimal
from typing import Protocol, runtime_checkable


@runtime_checkable
class RateConverter(Protocol):
    """
    Protocol for converting amounts to the base currency.

    Used by LifetimeProcessor so lifetime values of customers ordering in
    several currencies add up. Implemented by adapters/fixed_rates.py.

    Configuration in settings.py:
        TALLYMAN = {
            "RATE_CONVERTER": "tallyman.adapters.fixed_rates.FixedRateConverter",
        }
    """

    def to_base(self, amount: Decimal, currency: str) -> Decimal:
        """
        Convert amount to the base currency.

        Args:
            amount: Amount in currency
            currency: ISO 4217 code

        Returns:
            Amount in the base currency
        """
        ...
