"""Pytest fixtures for Tallyman tests."""

from decimal import Decimal
from functools import partial

import pytest

from tallyman.models import Customer, Order, PaymentAction, PaymentTransaction
from tallyman.signals import lifetime_changed


def make_order(customer, ref, subtotal, total=None, currency="BRL", **kwargs):
    """Create an order; total defaults to subtotal."""
    subtotal = Decimal(subtotal)
    return Order.objects.create(
        ref=ref,
        customer=customer,
        currency=currency,
        subtotal_value=subtotal,
        total_value=Decimal(total) if total is not None else subtotal,
        **kwargs,
    )


def pay(order, amount, action=PaymentAction.CAPTURE, successful=True):
    """Record a payment transaction against order."""
    return PaymentTransaction.objects.create(
        entity_class=order._meta.label,
        entity_identifier=order.pk,
        action=action,
        amount=Decimal(amount),
        currency=order.currency,
        successful=successful,
    )


@pytest.fixture
def committed(django_capture_on_commit_callbacks):
    """
    Context manager that runs on_commit callbacks registered inside it.

    Tests run inside a transaction that never commits; this stands in for
    the commit of everything done in the block.
    """
    return partial(django_capture_on_commit_callbacks, execute=True)


@pytest.fixture
def customer(db):
    """Create a test customer."""
    return Customer.objects.create(code="CUST-001", name="John Doe")


@pytest.fixture
def customer_b(db):
    """Create a second test customer."""
    return Customer.objects.create(code="CUST-002", name="Jane Roe")


@pytest.fixture
def paid_order(customer, committed):
    """Fully paid order (subtotal 100, total 110) with its lifetime applied."""
    with committed():
        order = make_order(customer, "ORD-001", "100", total="110")
        pay(order, "110")
    return order


@pytest.fixture
def lifetime_events():
    """Collect (code, previous, current) of every lifetime_changed signal."""
    events = []

    def receiver(sender, customer, previous, current, **kwargs):
        events.append((customer.code, previous, current))

    lifetime_changed.connect(receiver, weak=False, dispatch_uid="tests.lifetime_events")
    yield events
    lifetime_changed.disconnect(dispatch_uid="tests.lifetime_events")
