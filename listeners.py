"""
Customer lifetime listener - binds the lifetime core to Django.

Django plays the host persistence layer:

    pre_save / pre_delete      -> PendingMutation -> ChangeClassifier -> queue
    post_save / post_delete    -> transaction.on_commit(drain)
    on commit                  -> RecomputeQueue.drain_and_recompute()

Commit callbacks are registered after the write so that in autocommit mode
the drain runs once the row is durable. Each (thread, database alias) has
its own transaction scope; a scope whose commit callbacks were discarded by
a rollback is dropped before it can be reused.

Connected from TallymanConfig.ready() when LIFETIME_LISTENER_ENABLED.
"""

import logging
import threading
from functools import partial

from django.db import transaction
from django.db.models.signals import post_delete, post_save, pre_delete, pre_save

from tallyman.conf import tallyman_settings
from tallyman.lifetime import ChangeClassifier, PendingMutation, RecomputeQueue
from tallyman.models import Customer, Order, PaymentTransaction
from tallyman.protocols.payment import PaymentStatus
from tallyman.services.lifetime import (
    LifetimeProcessor,
    notify_changes,
    persist_lifetimes,
)

logger = logging.getLogger(__name__)


class _TransactionScope:
    """Recompute queue and commit callbacks of one transaction."""

    def __init__(self, using: str):
        self.using = using
        self.queue = RecomputeQueue(value_attr="lifetime")
        self.callbacks: list = []
        self.needs_callback = False

    def is_stale(self) -> bool:
        """True when the queued owners belong to a transaction that will never commit."""
        if not len(self.queue):
            return False
        connection = transaction.get_connection(self.using)
        if not connection.in_atomic_block:
            # Autocommit drains right after each write; leftovers come from a failed one
            return True
        if not self.callbacks:
            return False
        pending = {id(entry[1]) for entry in connection.run_on_commit}
        return not any(id(callback) in pending for callback in self.callbacks)


class CustomerLifetimeListener:
    """
    Keeps Customer.lifetime in sync with orders and payment transactions.

    Args:
        processor: LifetimeProcessor computing the value (default: configured backends)
        value_fields: Order fields whose update affects lifetime
            (default: LIFETIME_VALUE_FIELDS setting)
    """

    def __init__(
        self,
        processor: LifetimeProcessor | None = None,
        value_fields=None,
    ):
        self.processor = processor or LifetimeProcessor()
        if value_fields is None:
            value_fields = tallyman_settings.LIFETIME_VALUE_FIELDS

        self.classifier = ChangeClassifier(
            self.processor.status_provider.compute_status,
            full_status=PaymentStatus.FULL,
        )
        self.classifier.register_primary(
            Order,
            owner_field="customer",
            value_fields=value_fields,
        )
        self.classifier.register_secondary(
            PaymentTransaction,
            resolve_parent=self._resolve_order,
            owner_field="customer",
        )
        self._local = threading.local()

    # ======================================================================
    # Wiring
    # ======================================================================

    def _receivers(self):
        related = (Order, PaymentTransaction)
        for model in related:
            yield pre_save, self._on_pre_save, model
            yield post_save, self._on_post_write, model
            yield post_delete, self._on_post_write, model
        for model in related + (Customer,):
            yield pre_delete, self._on_pre_delete, model

    def _uid(self, handler, model) -> str:
        return f"tallyman.lifetime.{handler.__name__}.{model._meta.label}.{id(self)}"

    def connect(self) -> None:
        for signal, handler, model in self._receivers():
            signal.connect(
                handler,
                sender=model,
                weak=False,
                dispatch_uid=self._uid(handler, model),
            )

    def disconnect(self) -> None:
        for signal, handler, model in self._receivers():
            signal.disconnect(sender=model, dispatch_uid=self._uid(handler, model))

    # ======================================================================
    # Pre-commit: collect
    # ======================================================================

    def _on_pre_save(self, sender, instance, raw=False, using=None, update_fields=None, **kwargs):
        if raw or not self.classifier.handles(sender):
            return
        mutation = self._mutation_for_save(sender, instance, using, update_fields)
        if mutation is not None:
            self._collect(using, mutation)

    def _on_pre_delete(self, sender, instance, using=None, **kwargs):
        if issubclass(sender, Customer):
            self._scope(using).queue.discard(instance)
            return
        if self.classifier.handles(sender):
            self._collect(using, PendingMutation.delete(instance))

    def _mutation_for_save(self, sender, instance, using, update_fields) -> PendingMutation | None:
        if instance.pk is None:
            return PendingMutation.insert(instance)

        previous = sender._default_manager.using(using).filter(pk=instance.pk).first()
        if previous is None:
            return PendingMutation.insert(instance)

        fields = [f for f in sender._meta.concrete_fields if not f.primary_key]
        if update_fields is not None:
            fields = [
                f for f in fields
                if f.name in update_fields or f.attname in update_fields
            ]
        changed = {
            f.name
            for f in fields
            if f.value_from_object(previous) != f.value_from_object(instance)
        }
        if not changed:
            return None
        return PendingMutation.update(instance, changed, previous)

    def _collect(self, using, mutation: PendingMutation) -> None:
        scope = self._scope(using)
        for owner in self.classifier.classify([mutation], using=using):
            if scope.queue.enqueue(owner):
                scope.needs_callback = True

    def _resolve_order(self, payment_transaction, using=None) -> Order | None:
        order = payment_transaction.resolve_entity(using=using)
        return order if isinstance(order, Order) else None

    def _stored_lifetime(self, customer: Customer, using: str):
        try:
            customer.refresh_from_db(using=using, fields=["lifetime"])
        except Customer.DoesNotExist:
            logger.debug("Customer %s no longer exists", customer.pk)
        return customer.lifetime

    # ======================================================================
    # Post-commit: drain
    # ======================================================================

    def _on_post_write(self, sender, instance, using=None, **kwargs):
        scope = self._scopes().get(using)
        if scope is None or not scope.needs_callback:
            return
        scope.needs_callback = False
        callback = partial(self._post_commit, scope)
        scope.callbacks.append(callback)
        transaction.on_commit(callback, using=using)

    def _post_commit(self, scope: _TransactionScope) -> None:
        scopes = self._scopes()
        if scopes.get(scope.using) is scope:
            del scopes[scope.using]
        if not len(scope.queue):
            return

        try:
            changes = scope.queue.drain_and_recompute(
                self.processor.calculate_lifetime_value,
                partial(persist_lifetimes, using=scope.using),
                current_fn=partial(self._stored_lifetime, using=scope.using),
            )
        except Exception:
            logger.exception("Customer lifetime recomputation failed")
            raise

        for change in changes:
            logger.info(
                "Lifetime of %s updated: %s -> %s",
                change.owner.code,
                change.previous,
                change.current,
            )
        notify_changes(changes)

    # ======================================================================
    # Scopes
    # ======================================================================

    def _scopes(self) -> dict:
        scopes = getattr(self._local, "scopes", None)
        if scopes is None:
            scopes = self._local.scopes = {}
        return scopes

    def _scope(self, using) -> _TransactionScope:
        scopes = self._scopes()
        scope = scopes.get(using)
        if scope is not None and scope.is_stale():
            logger.debug("Discarding lifetime queue of a rolled back transaction")
            scope = None
        if scope is None:
            scope = scopes[using] = _TransactionScope(using)
        return scope

    def pending_owners(self, using: str = "default") -> list:
        """Owners queued in the current thread's open transaction."""
        scope = self._scopes().get(using)
        return scope.queue.owners if scope else []


_listener: CustomerLifetimeListener | None = None


def customer_lifetime_listener() -> CustomerLifetimeListener:
    """Process-wide listener connected by TallymanConfig.ready()."""
    global _listener
    if _listener is None:
        _listener = CustomerLifetimeListener()
    return _listener
