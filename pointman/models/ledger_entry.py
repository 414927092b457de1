"""LedgerEntry model - append-only record of balance changes."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class LedgerEntryImmutable(Exception):
    """Raised when code attempts to modify or delete a ledger entry."""


class LedgerEntry(models.Model):
    """
    Immutable record of a point-affecting event.

    One entry per accrual and per redemption. ``points`` is signed:
    positive for accruals, negative for redemptions. The sum of an
    account's entries always equals its ``points_balance``.
    """

    class EntryType(models.TextChoices):
        ACCRUAL = "accrual", _("Accrual")
        REDEMPTION = "redemption", _("Redemption")

    account = models.ForeignKey(
        "pointman.LoyaltyAccount",
        on_delete=models.PROTECT,
        related_name="entries",
        verbose_name=_("account"),
    )
    entry_type = models.CharField(
        _("type"),
        max_length=20,
        choices=EntryType.choices,
    )
    points = models.IntegerField(
        _("points"),
        help_text=_("Positive for accruals, negative for redemptions."),
    )
    balance_after = models.IntegerField(_("balance after"))

    description = models.CharField(_("description"), max_length=200)
    reference = models.CharField(
        _("reference"),
        max_length=100,
        blank=True,
        help_text=_("External reference (e.g. order:123, reward:free-coffee)."),
    )

    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)
    created_by = models.CharField(_("created by"), max_length=100, blank=True)

    class Meta:
        db_table = "pointman_ledger_entry"
        verbose_name = _("ledger entry")
        verbose_name_plural = _("ledger entries")
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["account", "-created_at"], name="pointman_le_account_5c1f0e_idx"),
        ]

    def __str__(self):
        sign = "+" if self.points > 0 else ""
        return f"{sign}{self.points}pts - {self.description}"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise LedgerEntryImmutable("Ledger entries cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise LedgerEntryImmutable("Ledger entries cannot be deleted.")
