"""PaymentTransaction model.

A payment transaction points at the paid entity by (entity_class,
entity_identifier) rather than a foreign key, so any model can be paid.
entity_class is the Django model label (e.g. "tallyman.Order").
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class PaymentAction(models.TextChoices):
    AUTHORIZE = "authorize", _("Autorização")
    CHARGE = "charge", _("Cobrança")
    CAPTURE = "capture", _("Captura")
    PURCHASE = "purchase", _("Compra")
    REFUND = "refund", _("Estorno")


class PaymentTransaction(models.Model):
    """Payment transaction against an entity (usually an Order)."""

    entity_class = models.CharField(
        _("classe da entidade"),
        max_length=100,
        db_index=True,
        help_text=_("Label do modelo pago (ex: tallyman.Order)"),
    )
    entity_identifier = models.PositiveBigIntegerField(
        _("identificador da entidade"),
        db_index=True,
    )

    action = models.CharField(
        _("ação"),
        max_length=20,
        choices=PaymentAction.choices,
    )
    amount = models.DecimalField(
        _("valor"),
        max_digits=19,
        decimal_places=4,
        default=Decimal("0"),
    )
    currency = models.CharField(_("moeda"), max_length=3, default="BRL")

    successful = models.BooleanField(_("bem-sucedida"), default=False)
    active = models.BooleanField(_("ativa"), default=True)

    reference = models.CharField(
        _("referência"),
        max_length=255,
        blank=True,
        help_text=_("Referência do provedor de pagamento"),
    )

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True)
    updated_at = models.DateTimeField(_("atualizado em"), auto_now=True)

    class Meta:
        verbose_name = _("transação de pagamento")
        verbose_name_plural = _("transações de pagamento")
        indexes = [
            models.Index(
                fields=["entity_class", "entity_identifier"],
                name="tallyman_tx_entity_idx",
            ),
        ]

    def __str__(self):
        return f"{self.action} {self.amount} → {self.entity_class}:{self.entity_identifier}"

    @classmethod
    def for_entity(cls, entity):
        """Transactions recorded against a model instance."""
        return cls.objects.filter(
            entity_class=entity._meta.label,
            entity_identifier=entity.pk,
        )

    def resolve_entity(self, using=None):
        """Load the paid entity, or None when it no longer exists."""
        from django.apps import apps

        try:
            model = apps.get_model(self.entity_class)
        except (LookupError, ValueError):
            return None
        return model._default_manager.using(using).filter(pk=self.entity_identifier).first()
