"""Customer model.

Customer.lifetime is a derived value: the base-currency sum of the subtotals
of the customer's fully paid orders. It is maintained by
tallyman.listeners.CustomerLifetimeListener and can be rebuilt with the
tallyman_recalculate_lifetime management command.
"""

import uuid as uuid_lib
from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Customer(models.Model):
    """Customer account owning orders."""

    code = models.CharField(
        _("código"),
        max_length=50,
        unique=True,
        help_text=_("Código único do cliente (ex: CLI-001)"),
    )
    uuid = models.UUIDField(default=uuid_lib.uuid4, editable=False, unique=True)
    name = models.CharField(_("nome"), max_length=200)

    # Derived (see module docstring)
    lifetime = models.DecimalField(
        _("valor vitalício"),
        max_digits=19,
        decimal_places=4,
        default=Decimal("0"),
        help_text=_("Soma dos subtotais de pedidos pagos, na moeda base"),
    )

    is_active = models.BooleanField(_("ativo"), default=True, db_index=True)

    # Extension point
    metadata = models.JSONField(_("metadados"), default=dict, blank=True)

    # Audit
    created_at = models.DateTimeField(_("criado em"), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_("atualizado em"), auto_now=True)

    class Meta:
        verbose_name = _("cliente")
        verbose_name_plural = _("clientes")
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.code})"
