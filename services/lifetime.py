"""Lifetime service - compute and rebuild customer lifetime values.

All writes that touch >1 record use transaction.atomic().
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.utils.module_loading import import_string

from tallyman.conf import tallyman_settings
from tallyman.exceptions import TallymanError
from tallyman.lifetime import RecomputeQueue
from tallyman.models import Customer, Order
from tallyman.protocols.currency import RateConverter
from tallyman.protocols.payment import PaymentStatus, PaymentStatusBackend
from tallyman.services.payment_status import get_payment_status_provider
from tallyman.signals import lifetime_changed

logger = logging.getLogger(__name__)

LIFETIME_QUANTUM = Decimal("0.0001")


def get_rate_converter() -> RateConverter:
    """Get configured RateConverter."""
    converter_class = import_string(tallyman_settings.RATE_CONVERTER)
    return converter_class()


class LifetimeProcessor:
    """
    Computes a customer's lifetime value from committed state.

    Read-only: orders and transactions are loaded, never written.
    """

    def __init__(
        self,
        rate_converter: RateConverter | None = None,
        status_provider: PaymentStatusBackend | None = None,
    ):
        self.rate_converter = rate_converter or get_rate_converter()
        self.status_provider = status_provider or get_payment_status_provider()

    def calculate_lifetime_value(self, customer: Customer) -> Decimal:
        """
        Sum of subtotals of the customer's fully paid orders, in base currency.

        Raises:
            TallymanError: If an order's currency cannot be converted
        """
        total = Decimal("0")
        orders = Order.objects.filter(customer_id=customer.pk).order_by("pk")
        for order in orders:
            if self.status_provider.get_payment_status(order) != PaymentStatus.FULL:
                continue
            total += self.rate_converter.to_base(order.subtotal_value, order.currency)
        return total.quantize(LIFETIME_QUANTUM)


def persist_lifetimes(customers: list[Customer], using: str | None = None) -> None:
    """Save the lifetime of several customers in one batch."""
    with transaction.atomic(using=using):
        Customer.objects.using(using).bulk_update(customers, ["lifetime"])


def notify_changes(changes) -> None:
    """Send lifetime_changed for each (customer, previous, current) change."""
    for change in changes:
        lifetime_changed.send(
            sender=Customer,
            customer=change.owner,
            previous=change.previous,
            current=change.current,
        )


def recalculate(code: str, processor: LifetimeProcessor | None = None) -> Customer:
    """
    Recompute and persist one customer's lifetime value.

    Args:
        code: Customer code
        processor: LifetimeProcessor to use (default: configured backends)

    Returns:
        The customer, with lifetime up to date

    Raises:
        TallymanError: If customer not found
    """
    try:
        customer = Customer.objects.get(code=code)
    except Customer.DoesNotExist:
        raise TallymanError("CUSTOMER_NOT_FOUND", customer_code=code)

    _rebuild([customer], processor or LifetimeProcessor())
    return customer


def recalculate_all(
    codes: list[str] | None = None,
    processor: LifetimeProcessor | None = None,
) -> int:
    """
    Recompute lifetime values for active customers.

    Args:
        codes: Restrict to these customer codes (default: all active)
        processor: LifetimeProcessor to use

    Returns:
        Number of customers whose lifetime changed
    """
    qs = Customer.objects.filter(is_active=True).order_by("pk")
    if codes:
        qs = qs.filter(code__in=codes)
    return len(_rebuild(list(qs), processor or LifetimeProcessor()))


def _rebuild(customers: list[Customer], processor: LifetimeProcessor) -> list:
    queue = RecomputeQueue(value_attr="lifetime")
    for customer in customers:
        queue.enqueue(customer)

    changes = queue.drain_and_recompute(
        processor.calculate_lifetime_value, persist_lifetimes
    )
    for change in changes:
        logger.info(
            "Lifetime of %s recalculated: %s -> %s",
            change.owner.code,
            change.previous,
            change.current,
        )
    notify_changes(changes)
    return changes
