"""Payment status provider - how much of an order is paid."""

import logging
from decimal import Decimal
from typing import Iterable

from django.utils.module_loading import import_string

from tallyman.conf import tallyman_settings
from tallyman.models import PaymentAction, PaymentTransaction
from tallyman.protocols.payment import PaymentStatus, PaymentStatusBackend

logger = logging.getLogger(__name__)


PAID_ACTIONS = frozenset(
    {PaymentAction.CHARGE, PaymentAction.CAPTURE, PaymentAction.PURCHASE}
)


def get_payment_status_provider() -> PaymentStatusBackend:
    """Get configured PaymentStatusBackend."""
    backend_class = import_string(tallyman_settings.PAYMENT_STATUS_PROVIDER)
    return backend_class()


class PaymentStatusProvider:
    """
    Default PaymentStatusBackend.

    Paid amount = successful active charge/capture/purchase transactions
    minus successful refunds. An order is FULL once the paid amount covers
    its total_value, PARTIAL while something but not everything is paid.
    """

    def get_payment_status(self, order) -> PaymentStatus:
        return self.compute_status(order, [])

    def compute_status(self, order, transactions: Iterable) -> PaymentStatus:
        transactions = [
            tx for tx in transactions if self._belongs_to(tx, order)
        ]
        pending_ids = {tx.pk for tx in transactions if tx.pk is not None}

        committed = []
        if order.pk is not None:
            committed = list(
                PaymentTransaction.for_entity(order).exclude(pk__in=pending_ids)
            )

        paid = self._paid_amount(committed + transactions)
        if paid <= 0:
            return PaymentStatus.NONE
        if paid >= (order.total_value or Decimal("0")):
            return PaymentStatus.FULL
        return PaymentStatus.PARTIAL

    def _belongs_to(self, tx, order) -> bool:
        return (
            tx.entity_class == order._meta.label
            and tx.entity_identifier == order.pk
        )

    def _paid_amount(self, transactions) -> Decimal:
        paid = Decimal("0")
        for tx in transactions:
            if not tx.successful:
                continue
            if tx.action in PAID_ACTIONS and tx.active:
                paid += tx.amount
            elif tx.action == PaymentAction.REFUND:
                paid -= tx.amount
        return paid
