"""AccrualRule model - administratively configured accrual policies."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class RuleType(models.TextChoices):
    """Accrual rule variants."""

    POINTS_PER_DOLLAR = "pointsPerDollar", _("Points per amount spent")
    BONUS_FOR_AMOUNT = "bonusForAmount", _("Bonus above order amount")
    FIXED_POINTS_PER_ORDER = "fixedPointsPerOrder", _("Fixed points per order")
    BONUS_FOR_PRODUCT = "bonusForProduct", _("Bonus for product")
    FIRST_ORDER_BONUS = "firstOrderBonus", _("First order bonus")
    ANNIVERSARY_BONUS = "anniversaryBonus", _("Anniversary bonus")
    BONUS_FOR_VARIETY = "bonusForVariety", _("Bonus for variety")
    MULTIPLIER_PER_DAY = "multiplierPerDay", _("Multiplier on weekday")


class DayOfWeek(models.IntegerChoices):
    """Weekdays, Sunday first."""

    SUNDAY = 0, _("Sunday")
    MONDAY = 1, _("Monday")
    TUESDAY = 2, _("Tuesday")
    WEDNESDAY = 3, _("Wednesday")
    THURSDAY = 4, _("Thursday")
    FRIDAY = 5, _("Friday")
    SATURDAY = 6, _("Saturday")


class AccrualRule(models.Model):
    """
    Named, independently toggleable accrual policy.

    Only the parameters relevant to ``rule_type`` are read:

    - pointsPerDollar: points, per_amount
    - bonusForAmount: points, amount
    - fixedPointsPerOrder: points
    - bonusForProduct: points, product_id
    - firstOrderBonus: points
    - anniversaryBonus: points
    - bonusForVariety: points, amount
    - multiplierPerDay: day_of_week, multiplier

    Records are compiled into typed variants by ``pointman.rules``.
    """

    name = models.CharField(_("name"), max_length=100)
    rule_type = models.CharField(
        _("rule type"),
        max_length=30,
        choices=RuleType.choices,
    )
    is_active = models.BooleanField(_("active"), default=True)

    points = models.IntegerField(_("points"), null=True, blank=True)
    per_amount = models.DecimalField(
        _("per amount"), max_digits=12, decimal_places=2, null=True, blank=True
    )
    amount = models.DecimalField(
        _("amount"),
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Order total threshold, or distinct item count for variety bonus."),
    )
    product_id = models.CharField(_("product"), max_length=100, blank=True)
    day_of_week = models.SmallIntegerField(
        _("day of week"),
        choices=DayOfWeek.choices,
        null=True,
        blank=True,
    )
    multiplier = models.DecimalField(
        _("multiplier"), max_digits=6, decimal_places=2, null=True, blank=True
    )

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "pointman_accrual_rule"
        verbose_name = _("accrual rule")
        verbose_name_plural = _("accrual rules")
        ordering = ["id"]

    def __str__(self):
        state = "" if self.is_active else " (inactive)"
        return f"{self.name} [{self.rule_type}]{state}"
