# Initial Pointman schema

from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="LoyaltyAccount",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "account_ref",
                    models.CharField(
                        help_text="Identifier of the participant in the profile system.",
                        max_length=100,
                        unique=True,
                        verbose_name="account reference",
                    ),
                ),
                ("points_balance", models.IntegerField(default=0, editable=False, verbose_name="points balance")),
                (
                    "enrolled_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now,
                        help_text="Enrollment date, used by anniversary rules.",
                        verbose_name="enrolled at",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "loyalty account",
                "verbose_name_plural": "loyalty accounts",
                "db_table": "pointman_account",
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(points_balance__gte=0),
                        name="pointman_balance_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "entry_type",
                    models.CharField(
                        choices=[("accrual", "Accrual"), ("redemption", "Redemption")],
                        max_length=20,
                        verbose_name="type",
                    ),
                ),
                (
                    "points",
                    models.IntegerField(
                        help_text="Positive for accruals, negative for redemptions.",
                        verbose_name="points",
                    ),
                ),
                ("balance_after", models.IntegerField(verbose_name="balance after")),
                ("description", models.CharField(max_length=200, verbose_name="description")),
                (
                    "reference",
                    models.CharField(
                        blank=True,
                        help_text="External reference (e.g. order:123, reward:free-coffee).",
                        max_length=100,
                        verbose_name="reference",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("created_by", models.CharField(blank=True, max_length=100, verbose_name="created by")),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="entries",
                        to="pointman.loyaltyaccount",
                        verbose_name="account",
                    ),
                ),
            ],
            options={
                "verbose_name": "ledger entry",
                "verbose_name_plural": "ledger entries",
                "db_table": "pointman_ledger_entry",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["account", "-created_at"], name="pointman_le_account_5c1f0e_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AccrualRule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, verbose_name="name")),
                (
                    "rule_type",
                    models.CharField(
                        choices=[
                            ("pointsPerDollar", "Points per amount spent"),
                            ("bonusForAmount", "Bonus above order amount"),
                            ("fixedPointsPerOrder", "Fixed points per order"),
                            ("bonusForProduct", "Bonus for product"),
                            ("firstOrderBonus", "First order bonus"),
                            ("anniversaryBonus", "Anniversary bonus"),
                            ("bonusForVariety", "Bonus for variety"),
                            ("multiplierPerDay", "Multiplier on weekday"),
                        ],
                        max_length=30,
                        verbose_name="rule type",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("points", models.IntegerField(blank=True, null=True, verbose_name="points")),
                (
                    "per_amount",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, verbose_name="per amount"),
                ),
                (
                    "amount",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Order total threshold, or distinct item count for variety bonus.",
                        max_digits=12,
                        null=True,
                        verbose_name="amount",
                    ),
                ),
                ("product_id", models.CharField(blank=True, max_length=100, verbose_name="product")),
                (
                    "day_of_week",
                    models.SmallIntegerField(
                        blank=True,
                        choices=[
                            (0, "Sunday"),
                            (1, "Monday"),
                            (2, "Tuesday"),
                            (3, "Wednesday"),
                            (4, "Thursday"),
                            (5, "Friday"),
                            (6, "Saturday"),
                        ],
                        null=True,
                        verbose_name="day of week",
                    ),
                ),
                (
                    "multiplier",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True, verbose_name="multiplier"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "accrual rule",
                "verbose_name_plural": "accrual rules",
                "db_table": "pointman_accrual_rule",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="LoyaltyTier",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.SlugField(unique=True, verbose_name="code")),
                ("name", models.CharField(max_length=100, verbose_name="name")),
                ("min_points", models.PositiveIntegerField(unique=True, verbose_name="minimum points")),
                ("icon_name", models.CharField(blank=True, max_length=50, verbose_name="icon")),
            ],
            options={
                "verbose_name": "tier",
                "verbose_name_plural": "tiers",
                "db_table": "pointman_tier",
                "ordering": ["min_points"],
            },
        ),
        migrations.CreateModel(
            name="Reward",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.SlugField(unique=True, verbose_name="code")),
                ("name", models.CharField(max_length=100, verbose_name="name")),
                ("description", models.CharField(blank=True, max_length=255, verbose_name="description")),
                ("point_cost", models.PositiveIntegerField(verbose_name="point cost")),
                (
                    "credit_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=10, verbose_name="credit amount"),
                ),
                ("icon_name", models.CharField(blank=True, max_length=50, verbose_name="icon")),
                ("color", models.CharField(blank=True, max_length=20, verbose_name="color")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
            ],
            options={
                "verbose_name": "reward",
                "verbose_name_plural": "rewards",
                "db_table": "pointman_reward",
                "ordering": ["point_cost", "name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(point_cost__gt=0),
                        name="pointman_reward_cost_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AccrualRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_ref", models.CharField(max_length=100, unique=True, verbose_name="order")),
                ("points", models.IntegerField(default=0, verbose_name="points")),
                ("order_created_at", models.DateTimeField(blank=True, null=True, verbose_name="order created at")),
                ("processed_at", models.DateTimeField(auto_now_add=True, verbose_name="processed at")),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="accrual_records",
                        to="pointman.loyaltyaccount",
                        verbose_name="account",
                    ),
                ),
                (
                    "entry",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="accrual_record",
                        to="pointman.ledgerentry",
                        verbose_name="ledger entry",
                    ),
                ),
            ],
            options={
                "verbose_name": "accrual record",
                "verbose_name_plural": "accrual records",
                "db_table": "pointman_accrual_record",
                "indexes": [
                    models.Index(fields=["account", "processed_at"], name="pointman_ac_account_8d2b4a_idx"),
                ],
            },
        ),
    ]
