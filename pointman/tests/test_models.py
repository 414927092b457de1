"""Tests for Pointman models."""

from decimal import Decimal

import pytest
from django.contrib import admin
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError
from django.test import RequestFactory

from pointman.ledger import Ledger
from pointman.models import (
    AccrualRecord,
    AccrualRule,
    LedgerEntry,
    LedgerEntryImmutable,
    LoyaltyAccount,
    LoyaltyTier,
    Reward,
    RuleType,
)


pytestmark = pytest.mark.django_db


class TestLoyaltyAccount:
    def test_defaults(self, account):
        assert account.points_balance == 0
        assert account.is_active is True
        assert str(account) == "ACC-001: 0pts"

    def test_balance_cannot_go_negative(self, account):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                LoyaltyAccount.objects.filter(pk=account.pk).update(points_balance=-1)

    def test_account_ref_unique(self, account):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                LoyaltyAccount.objects.create(account_ref="ACC-001")


class TestLedgerEntry:
    """Entries are append-only."""

    def test_cannot_modify(self, funded_account):
        entry = LedgerEntry.objects.get()
        entry.points = 500

        with pytest.raises(LedgerEntryImmutable):
            entry.save()

        entry.refresh_from_db()
        assert entry.points == 50

    def test_cannot_delete(self, funded_account):
        entry = LedgerEntry.objects.get()

        with pytest.raises(LedgerEntryImmutable):
            entry.delete()

        assert LedgerEntry.objects.count() == 1

    def test_account_cannot_be_deleted_with_entries(self, funded_account):
        with pytest.raises(ProtectedError):
            with transaction.atomic():
                funded_account.delete()

    def test_str(self, funded_account):
        entry = Ledger.redeem("ACC-001", 10, "Coffee")

        assert str(entry) == "-10pts - Coffee"
        assert str(LedgerEntry.objects.last()) == "+50pts - Opening balance"


class TestConfigurationModels:
    def test_rule_str(self, per_dollar_rule):
        assert str(per_dollar_rule) == "1 point per $10 [pointsPerDollar]"

    def test_inactive_rule_str(self, db):
        rule = AccrualRule.objects.create(
            name="Old", rule_type=RuleType.FIXED_POINTS_PER_ORDER, points=5, is_active=False
        )
        assert str(rule) == "Old [fixedPointsPerOrder] (inactive)"

    def test_tier_thresholds_unique(self, tiers):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                LoyaltyTier.objects.create(code="platinum", name="Platinum", min_points=500)

    def test_tiers_ordered_by_threshold(self, db):
        LoyaltyTier.objects.create(code="gold", name="Gold", min_points=500)
        LoyaltyTier.objects.create(code="bronze", name="Bronze", min_points=0)

        assert [t.code for t in LoyaltyTier.objects.all()] == ["bronze", "gold"]

    def test_reward_cost_positive(self, db):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Reward.objects.create(code="free", name="Free", point_cost=0)

    def test_reward_defaults(self, reward):
        assert reward.credit_amount == Decimal("0")
        assert str(reward) == "Free Coffee (100pts)"


class TestAccrualRecord:
    def test_order_ref_unique(self, account):
        AccrualRecord.objects.create(order_ref="ORD-1", account=account)

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                AccrualRecord.objects.create(order_ref="ORD-1", account=account)


class TestAdmin:
    """Ledger data is read-only in the admin."""

    def test_ledger_entry_admin_read_only(self, funded_account):
        model_admin = admin.site._registry[LedgerEntry]
        request = RequestFactory().get("/")
        entry = LedgerEntry.objects.get()

        assert model_admin.has_add_permission(request) is False
        assert model_admin.has_change_permission(request, entry) is False
        assert model_admin.has_delete_permission(request, entry) is False

    def test_points_display(self, funded_account):
        model_admin = admin.site._registry[LedgerEntry]
        entry = LedgerEntry.objects.get()

        assert "+50" in model_admin.points_display(entry)
        assert model_admin.account_ref(entry) == "ACC-001"

    def test_balance_not_editable(self):
        model_admin = admin.site._registry[LoyaltyAccount]

        assert "points_balance" in model_admin.readonly_fields
