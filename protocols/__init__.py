"""Tallyman protocols."""

from tallyman.protocols.currency import RateConverter
from tallyman.protocols.payment import PaymentStatus, PaymentStatusBackend

__all__ = [
    # Currency
    "RateConverter",
    # Payment
    "PaymentStatus",
    "PaymentStatusBackend",
]
