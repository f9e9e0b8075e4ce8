# Initial migration for Customer, Order and PaymentTransaction

import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        help_text="Código único do cliente (ex: CLI-001)",
                        max_length=50,
                        unique=True,
                        verbose_name="código",
                    ),
                ),
                (
                    "uuid",
                    models.UUIDField(default=uuid.uuid4, editable=False, unique=True),
                ),
                ("name", models.CharField(max_length=200, verbose_name="nome")),
                (
                    "lifetime",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        help_text="Soma dos subtotais de pedidos pagos, na moeda base",
                        max_digits=19,
                        verbose_name="valor vitalício",
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(db_index=True, default=True, verbose_name="ativo"),
                ),
                (
                    "metadata",
                    models.JSONField(blank=True, default=dict, verbose_name="metadados"),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, db_index=True, verbose_name="criado em"
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(auto_now=True, verbose_name="atualizado em"),
                ),
            ],
            options={
                "verbose_name": "cliente",
                "verbose_name_plural": "clientes",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "ref",
                    models.CharField(max_length=50, unique=True, verbose_name="referência"),
                ),
                (
                    "currency",
                    models.CharField(
                        default="BRL",
                        help_text="Código ISO 4217",
                        max_length=3,
                        verbose_name="moeda",
                    ),
                ),
                (
                    "subtotal_value",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=19,
                        verbose_name="subtotal",
                    ),
                ),
                (
                    "total_value",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=19,
                        verbose_name="total",
                    ),
                ),
                (
                    "label",
                    models.CharField(blank=True, max_length=255, verbose_name="rótulo"),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, db_index=True, verbose_name="criado em"
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(auto_now=True, verbose_name="atualizado em"),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="orders",
                        to="tallyman.customer",
                        verbose_name="cliente",
                    ),
                ),
            ],
            options={
                "verbose_name": "pedido",
                "verbose_name_plural": "pedidos",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="PaymentTransaction",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "entity_class",
                    models.CharField(
                        db_index=True,
                        help_text="Label do modelo pago (ex: tallyman.Order)",
                        max_length=100,
                        verbose_name="classe da entidade",
                    ),
                ),
                (
                    "entity_identifier",
                    models.PositiveBigIntegerField(
                        db_index=True, verbose_name="identificador da entidade"
                    ),
                ),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("authorize", "Autorização"),
                            ("charge", "Cobrança"),
                            ("capture", "Captura"),
                            ("purchase", "Compra"),
                            ("refund", "Estorno"),
                        ],
                        max_length=20,
                        verbose_name="ação",
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        max_digits=19,
                        verbose_name="valor",
                    ),
                ),
                (
                    "currency",
                    models.CharField(default="BRL", max_length=3, verbose_name="moeda"),
                ),
                (
                    "successful",
                    models.BooleanField(default=False, verbose_name="bem-sucedida"),
                ),
                ("active", models.BooleanField(default=True, verbose_name="ativa")),
                (
                    "reference",
                    models.CharField(
                        blank=True,
                        help_text="Referência do provedor de pagamento",
                        max_length=255,
                        verbose_name="referência",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="criado em"),
                ),
                (
                    "updated_at",
                    models.DateTimeField(auto_now=True, verbose_name="atualizado em"),
                ),
            ],
            options={
                "verbose_name": "transação de pagamento",
                "verbose_name_plural": "transações de pagamento",
                "indexes": [
                    models.Index(
                        fields=["entity_class", "entity_identifier"],
                        name="tallyman_tx_entity_idx",
                    )
                ],
            },
        ),
    ]
