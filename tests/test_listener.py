"""
Tests for CustomerLifetimeListener (Django binding).

Every write whose lifetime effect is asserted happens inside committed(),
which runs the on_commit callbacks the listener registers.
"""

from decimal import Decimal

import pytest
from django.db import transaction

from tallyman.exceptions import TallymanError
from tallyman.listeners import customer_lifetime_listener
from tallyman.models import Customer, Order, PaymentAction, PaymentTransaction

from conftest import make_order, pay


pytestmark = pytest.mark.django_db


def lifetime_of(customer) -> Decimal:
    customer.refresh_from_db()
    return customer.lifetime


class TestOrders:
    def test_fully_paid_order_counts(self, paid_order, customer):
        assert lifetime_of(customer) == Decimal("100")

    def test_unpaid_order_does_not_count(self, customer, committed, lifetime_events):
        with committed():
            make_order(customer, "ORD-001", "100")

        assert lifetime_of(customer) == Decimal("0")
        assert lifetime_events == []

    def test_subtotal_update_recomputes(self, paid_order, customer, committed, lifetime_events):
        with committed():
            paid_order.subtotal_value = Decimal("80")
            paid_order.save()

        assert lifetime_of(customer) == Decimal("80")
        assert lifetime_events == [("CUST-001", Decimal("100"), Decimal("80"))]

    def test_label_update_does_not_recompute(self, paid_order, customer, committed, lifetime_events):
        with committed() as callbacks:
            order = Order.objects.get(pk=paid_order.pk)
            order.label = "gift"
            order.save()
            other = Order.objects.get(pk=paid_order.pk)
            other.label = "urgent"
            other.save()

        assert callbacks == []
        assert lifetime_events == []
        assert customer_lifetime_listener().pending_owners() == []

    def test_moving_order_recomputes_both_customers(
        self, paid_order, customer, customer_b, committed, lifetime_events
    ):
        with committed():
            paid_order.customer = customer_b
            paid_order.save()

        assert lifetime_of(customer) == Decimal("0")
        assert lifetime_of(customer_b) == Decimal("100")
        assert sorted(code for code, _, _ in lifetime_events) == ["CUST-001", "CUST-002"]

    def test_deleting_order_recomputes(self, paid_order, customer, committed, lifetime_events):
        with committed():
            paid_order.delete()

        assert lifetime_of(customer) == Decimal("0")
        assert lifetime_events == [("CUST-001", Decimal("100"), Decimal("0"))]

    def test_deleting_order_paid_in_earlier_transaction(self, customer, committed, lifetime_events):
        with committed():
            order = make_order(customer, "ORD-001", "100")
        with committed():
            pay(order, "100")
        assert lifetime_of(Customer.objects.get(pk=customer.pk)) == Decimal("100")

        with committed():
            order.delete()

        assert lifetime_of(customer) == Decimal("0")
        assert lifetime_events[-1] == ("CUST-001", Decimal("100"), Decimal("0"))

    def test_many_orders_one_recompute(self, customer, committed, lifetime_events):
        with committed() as callbacks:
            for i in range(3):
                order = make_order(customer, f"ORD-{i}", "10")
                pay(order, "10")

        assert len(callbacks) == 1
        assert lifetime_of(customer) == Decimal("30")
        assert len(lifetime_events) == 1

    def test_deleting_customer_cascades_quietly(self, paid_order, customer, committed, lifetime_events):
        with committed():
            customer.delete()

        assert not Customer.objects.exists()
        assert not Order.objects.exists()
        assert lifetime_events == []


class TestPayments:
    def test_partial_payment_does_not_count(self, customer, committed):
        with committed():
            order = make_order(customer, "ORD-001", "100", total="110")
            pay(order, "50")

        assert lifetime_of(customer) == Decimal("0")

    def test_payment_completing_order_counts(self, customer, committed, lifetime_events):
        with committed():
            order = make_order(customer, "ORD-001", "100", total="110")
            pay(order, "50")

        with committed():
            pay(order, "60")

        assert lifetime_of(customer) == Decimal("100")
        assert lifetime_events == [("CUST-001", Decimal("0"), Decimal("100"))]

    def test_failed_payment_does_not_count(self, customer, committed):
        with committed():
            order = make_order(customer, "ORD-001", "100")
            pay(order, "100", successful=False)

        assert lifetime_of(customer) == Decimal("0")

    def test_refund_reopens_order(self, paid_order, customer, committed):
        with committed():
            pay(paid_order, "110", action=PaymentAction.REFUND)
            paid_order.subtotal_value = Decimal("100.5")
            paid_order.save()

        assert lifetime_of(customer) == Decimal("0")

    def test_payment_for_unknown_order_is_ignored(self, customer, committed):
        with committed() as callbacks:
            pay(Order(pk=999, customer=customer, currency="BRL"), "10")

        assert callbacks == []


    def test_payment_for_non_order_entity_is_ignored(self, customer, committed):
        with committed() as callbacks:
            PaymentTransaction.objects.create(
                entity_class=customer._meta.label,
                entity_identifier=customer.pk,
                action=PaymentAction.CAPTURE,
                amount=Decimal("10"),
            )

        assert callbacks == []
        assert lifetime_of(customer) == Decimal("0")


class TestTransactions:
    def test_rolled_back_changes_never_drain(self, customer, committed, lifetime_events):
        with committed() as callbacks:
            with pytest.raises(RuntimeError):
                with transaction.atomic():
                    order = make_order(customer, "ORD-001", "100")
                    pay(order, "100")
                    raise RuntimeError("abort")

        assert callbacks == []
        assert lifetime_of(customer) == Decimal("0")
        assert lifetime_events == []

    def test_next_transaction_after_rollback(self, customer, committed):
        with pytest.raises(RuntimeError):
            with transaction.atomic():
                make_order(customer, "ORD-001", "100")
                raise RuntimeError("abort")

        with committed():
            order = make_order(customer, "ORD-002", "40")
            pay(order, "40")

        assert lifetime_of(customer) == Decimal("40")

    def test_currency_conversion(self, customer, committed, settings):
        settings.TALLYMAN = {"BASE_CURRENCY": "BRL", "CURRENCY_RATES": {"USD": "5"}}

        with committed():
            order = make_order(customer, "ORD-001", "20", currency="USD")
            pay(order, "20")

        assert lifetime_of(customer) == Decimal("100")

    def test_recompute_failure_propagates(self, customer, committed):
        with pytest.raises(TallymanError) as exc_info:
            with committed():
                order = make_order(customer, "ORD-001", "20", currency="JPY")
                pay(order, "20")

        assert exc_info.value.code == "CURRENCY_RATE_NOT_FOUND"
        assert lifetime_of(customer) == Decimal("0")


class TestWiring:
    def test_disconnected_listener_does_nothing(self, customer, committed):
        listener = customer_lifetime_listener()
        listener.disconnect()
        try:
            with committed() as callbacks:
                order = make_order(customer, "ORD-001", "100")
                pay(order, "100")
        finally:
            listener.connect()

        assert callbacks == []
        assert lifetime_of(customer) == Decimal("0")
