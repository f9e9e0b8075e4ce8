"""Order model."""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Order(models.Model):
    """
    Customer order.

    subtotal_value feeds the customer's lifetime value once the order is
    fully paid; total_value is what payments are settled against.
    """

    ref = models.CharField(_("referência"), max_length=50, unique=True)
    customer = models.ForeignKey(
        "tallyman.Customer",
        on_delete=models.CASCADE,
        related_name="orders",
        verbose_name=_("cliente"),
    )

    currency = models.CharField(
        _("moeda"),
        max_length=3,
        default="BRL",
        help_text=_("Código ISO 4217"),
    )
    subtotal_value = models.DecimalField(
        _("subtotal"),
        max_digits=19,
        decimal_places=4,
        default=Decimal("0"),
    )
    total_value = models.DecimalField(
        _("total"),
        max_digits=19,
        decimal_places=4,
        default=Decimal("0"),
    )

    # Free text, does not affect lifetime
    label = models.CharField(_("rótulo"), max_length=255, blank=True)

    created_at = models.DateTimeField(_("criado em"), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_("atualizado em"), auto_now=True)

    class Meta:
        verbose_name = _("pedido")
        verbose_name_plural = _("pedidos")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.ref} ({self.customer_id})"
