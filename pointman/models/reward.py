"""Reward model - catalog of things points can be spent on."""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Reward(models.Model):
    """Reward catalog entry."""

    code = models.SlugField(_("code"), max_length=50, unique=True)
    name = models.CharField(_("name"), max_length=100)
    description = models.CharField(_("description"), max_length=255, blank=True)
    point_cost = models.PositiveIntegerField(_("point cost"))

    # Store credit granted on redemption (e.g. "$5 credit"); 0 for non-credit rewards
    credit_amount = models.DecimalField(
        _("credit amount"),
        max_digits=10,
        decimal_places=2,
        default=Decimal("0"),
    )

    icon_name = models.CharField(_("icon"), max_length=50, blank=True)
    color = models.CharField(_("color"), max_length=20, blank=True)
    is_active = models.BooleanField(_("active"), default=True)

    class Meta:
        db_table = "pointman_reward"
        verbose_name = _("reward")
        verbose_name_plural = _("rewards")
        ordering = ["point_cost", "name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(point_cost__gt=0),
                name="pointman_reward_cost_positive",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.point_cost}pts)"
