"""
Tallyman signals - public event API.

Emitted signals:
- lifetime_changed: Emitted after a recomputed lifetime value is persisted
"""

from django.dispatch import Signal

# sender=Customer, customer=Customer, previous=Decimal, current=Decimal
lifetime_changed = Signal()
