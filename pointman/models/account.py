"""LoyaltyAccount model - a loyalty participant and its point balance."""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class LoyaltyAccount(models.Model):
    """
    Loyalty participant.

    One account per ``account_ref`` (the id the profile system knows the
    participant by). ``points_balance`` is only ever changed by
    ``pointman.ledger.Ledger`` through conditional ``F()`` updates; never
    assign it and call ``save()``.
    """

    account_ref = models.CharField(
        _("account reference"),
        max_length=100,
        unique=True,
        help_text=_("Identifier of the participant in the profile system."),
    )
    points_balance = models.IntegerField(
        _("points balance"),
        default=0,
        editable=False,
    )
    enrolled_at = models.DateTimeField(
        _("enrolled at"),
        default=timezone.now,
        help_text=_("Enrollment date, used by anniversary rules."),
    )

    is_active = models.BooleanField(_("active"), default=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "pointman_account"
        verbose_name = _("loyalty account")
        verbose_name_plural = _("loyalty accounts")
        constraints = [
            models.CheckConstraint(
                condition=models.Q(points_balance__gte=0),
                name="pointman_balance_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.account_ref}: {self.points_balance}pts"
