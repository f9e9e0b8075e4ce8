"""Payment status protocol."""

from typing import Iterable, Protocol, runtime_checkable

from django.db import models
from django.utils.translation import gettext_lazy as _


class PaymentStatus(models.TextChoices):
    """Cumulative payment status of an order."""

    NONE = "none", _("Não pago")
    PARTIAL = "partial", _("Parcialmente pago")
    FULL = "full", _("Pago")


@runtime_checkable
class PaymentStatusBackend(Protocol):
    """
    Protocol for resolving how much of an order is paid.

    Configuration in settings.py:
        TALLYMAN = {
            "PAYMENT_STATUS_PROVIDER": "tallyman.services.payment_status.PaymentStatusProvider",
        }
    """

    def get_payment_status(self, order) -> PaymentStatus:
        """Status from the committed transactions of order."""
        ...

    def compute_status(self, order, transactions: Iterable) -> PaymentStatus:
        """
        Status of order as if transactions were applied.

        transactions may be unsaved or hold pending changes; they take
        precedence over their committed versions.
        """
        ...
