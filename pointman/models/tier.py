"""LoyaltyTier model - named loyalty levels."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class LoyaltyTier(models.Model):
    """
    Loyalty level unlocked once the balance reaches ``min_points``.

    Thresholds are unique, so tiers form a strict order.
    """

    code = models.SlugField(_("code"), max_length=50, unique=True)
    name = models.CharField(_("name"), max_length=100)
    min_points = models.PositiveIntegerField(_("minimum points"), unique=True)
    icon_name = models.CharField(_("icon"), max_length=50, blank=True)

    class Meta:
        db_table = "pointman_tier"
        verbose_name = _("tier")
        verbose_name_plural = _("tiers")
        ordering = ["min_points"]

    def __str__(self):
        return f"{self.name} ({self.min_points}+)"
