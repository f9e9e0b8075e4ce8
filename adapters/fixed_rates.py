"""Settings-driven RateConverter adapter."""

from decimal import Decimal, InvalidOperation

from tallyman.conf import tallyman_settings
from tallyman.exceptions import TallymanError


class FixedRateConverter:
    """
    Adapter that implements RateConverter with static rates from settings.

    Rates express how many units of the base currency one unit of the
    foreign currency is worth.

    Configuration in settings.py:
        TALLYMAN = {
            "BASE_CURRENCY": "BRL",
            "CURRENCY_RATES": {"USD": "5.10", "EUR": "5.50"},
        }
    """

    def to_base(self, amount: Decimal, currency: str) -> Decimal:
        base = tallyman_settings.BASE_CURRENCY
        if not currency or currency.upper() == base.upper():
            return amount

        rates = {k.upper(): v for k, v in tallyman_settings.CURRENCY_RATES.items()}
        rate = rates.get(currency.upper())
        if rate is None:
            raise TallymanError(
                "CURRENCY_RATE_NOT_FOUND",
                message=f"No conversion rate from {currency} to {base}",
                currency=currency,
                base_currency=base,
            )

        try:
            return amount * Decimal(str(rate))
        except InvalidOperation:
            raise TallymanError(
                "INVALID_SETTING",
                message=f"Invalid conversion rate for {currency}: {rate!r}",
                setting="CURRENCY_RATES",
            )
