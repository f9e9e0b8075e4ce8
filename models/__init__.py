"""Tallyman models.

- Customer: owner of the lifetime value
- Order: feeds the lifetime value through its subtotal
- PaymentTransaction: settles orders; a fully paid order counts towards lifetime
"""

from tallyman.models.customer import Customer
from tallyman.models.order import Order
from tallyman.models.payment_transaction import (
    PaymentAction,
    PaymentTransaction,
)

__all__ = [
    "Customer",
    "Order",
    "PaymentAction",
    "PaymentTransaction",
]
