"""
AccrualRecord model - persistent replay guard for order accruals.

One row per order whose fulfillment has been accrued. Written in the same
transaction as the ledger entry, so a failed write leaves no record behind
and the order can be accrued on a later attempt.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class AccrualRecord(models.Model):
    """Proof that an order's single accrual took place."""

    order_ref = models.CharField(_("order"), max_length=100, unique=True)
    account = models.ForeignKey(
        "pointman.LoyaltyAccount",
        on_delete=models.PROTECT,
        related_name="accrual_records",
        verbose_name=_("account"),
    )
    points = models.IntegerField(_("points"), default=0)
    entry = models.OneToOneField(
        "pointman.LedgerEntry",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="accrual_record",
        verbose_name=_("ledger entry"),
    )
    order_created_at = models.DateTimeField(_("order created at"), null=True, blank=True)
    processed_at = models.DateTimeField(_("processed at"), auto_now_add=True)

    class Meta:
        db_table = "pointman_accrual_record"
        verbose_name = _("accrual record")
        verbose_name_plural = _("accrual records")
        indexes = [
            models.Index(fields=["account", "processed_at"], name="pointman_ac_account_8d2b4a_idx"),
        ]

    def __str__(self):
        return f"{self.order_ref}: {self.points}pts"
