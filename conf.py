"""
Tallyman configuration.

Usage in settings.py:
    TALLYMAN = {
        "ENABLE_CONTACT_REQUEST": True,
        "CONSENT_CONTACT_REASON": 3,
        "BASE_CURRENCY": "BRL",
        "CURRENCY_RATES": {"USD": "5.10", "EUR": "5.50"},
    }
"""

from dataclasses import dataclass, field
from typing import Any

from django.conf import settings


@dataclass
class TallymanSettings:
    """Tallyman configuration settings."""

    # Contact us (tallyman.contrib.contact_us)
    ENABLE_CONTACT_REQUEST: bool = True
    CONSENT_CONTACT_REASON: int | None = None

    # Connect the customer lifetime listener on app ready
    LIFETIME_LISTENER_ENABLED: bool = True

    # Order fields whose change affects the customer's lifetime value
    LIFETIME_VALUE_FIELDS: tuple[str, ...] = ("customer", "subtotal_value")

    # Currency conversion for lifetime values
    BASE_CURRENCY: str = "BRL"
    CURRENCY_RATES: dict[str, Any] = field(default_factory=dict)

    # Backends (dotted paths)
    RATE_CONVERTER: str = "tallyman.adapters.fixed_rates.FixedRateConverter"
    PAYMENT_STATUS_PROVIDER: str = (
        "tallyman.services.payment_status.PaymentStatusProvider"
    )


def get_tallyman_settings() -> TallymanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "TALLYMAN", {})
    return TallymanSettings(**{
        k: v for k, v in user_settings.items()
        if k in TallymanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_tallyman_settings(), name)


tallyman_settings = _LazySettings()
