"""Tallyman services.

- lifetime: LifetimeProcessor, recalculate(), recalculate_all()
- payment_status: PaymentStatusProvider
"""

from tallyman.services import lifetime
from tallyman.services import payment_status

__all__ = ["lifetime", "payment_status"]
