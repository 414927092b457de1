"""Tests for reward redemption."""

from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from pointman.exceptions import PointmanError
from pointman.ledger import Ledger
from pointman.models import LedgerEntry, LoyaltyAccount, Reward
from pointman.redemption import RedemptionService
from pointman.signals import points_redeemed


pytestmark = pytest.mark.django_db


class TestRedeem:
    def test_success(self, funded_account, cheap_reward):
        result = RedemptionService.redeem("ACC-001", "credit-5", created_by="portal")

        assert result.success is True
        assert result.points_spent == 30
        assert result.new_balance == 20
        entry = LedgerEntry.objects.get(pk=result.entry_id)
        assert entry.points == -30
        assert entry.description == "Redeemed $5 Credit"
        assert entry.reference == "reward:credit-5"
        assert entry.created_by == "portal"

    def test_insufficient_points(self, funded_account, reward):
        """50 points cannot buy a 100 point reward."""
        result = RedemptionService.redeem("ACC-001", "free-coffee")

        assert result.success is False
        assert result.error_code == "INSUFFICIENT_POINTS"
        assert result.new_balance == 50
        funded_account.refresh_from_db()
        assert funded_account.points_balance == 50
        assert LedgerEntry.objects.count() == 1

    def test_exact_balance(self, account, reward):
        Ledger.accrue("ACC-001", 100, "Opening")

        result = RedemptionService.redeem("ACC-001", "free-coffee")

        assert result.success is True
        assert result.new_balance == 0

    def test_unknown_reward(self, funded_account):
        result = RedemptionService.redeem("ACC-001", "yacht")

        assert result.success is False
        assert result.error_code == "UNKNOWN_REWARD"
        assert LedgerEntry.objects.count() == 1

    def test_inactive_reward(self, funded_account, cheap_reward):
        Reward.objects.filter(pk=cheap_reward.pk).update(is_active=False)

        result = RedemptionService.redeem("ACC-001", "credit-5")

        assert result.error_code == "UNKNOWN_REWARD"

    def test_unknown_account(self, db, cheap_reward):
        result = RedemptionService.redeem("GHOST", "credit-5")

        assert result.success is False
        assert result.error_code == "ACCOUNT_NOT_FOUND"

    def test_inactive_account(self, funded_account, cheap_reward):
        LoyaltyAccount.objects.filter(pk=funded_account.pk).update(is_active=False)

        result = RedemptionService.redeem("ACC-001", "credit-5")

        assert result.error_code == "ACCOUNT_NOT_FOUND"

    def test_balance_spent_between_check_and_write(self, funded_account, reward):
        """The ledger's conditional decrement has the final word."""
        # Bypassing the pre-check leaves UPDATE ... WHERE points_balance >= cost
        # as the only guard, which is what concurrent redeemers race on.
        with patch("pointman.redemption.can_afford", return_value=True):
            result = RedemptionService.redeem("ACC-001", "free-coffee")

        assert result.success is False
        assert result.error_code == "INSUFFICIENT_POINTS"
        assert result.new_balance == 50
        funded_account.refresh_from_db()
        assert funded_account.points_balance == 50

    def test_competing_redemptions_against_same_balance(self, funded_account, cheap_reward):
        """Two 30 point redemptions both pass the pre-check on a 50 point balance."""
        with patch("pointman.redemption.can_afford", return_value=True):
            first = RedemptionService.redeem("ACC-001", "credit-5")
            second = RedemptionService.redeem("ACC-001", "credit-5")

        assert first.success is True
        assert second.success is False
        assert second.error_code == "INSUFFICIENT_POINTS"
        assert second.new_balance == 20
        funded_account.refresh_from_db()
        assert funded_account.points_balance == 20
        assert Ledger.reconcile("ACC-001").consistent

    def test_write_failure_raises(self, funded_account, cheap_reward):
        with patch.object(LedgerEntry.objects, "create", side_effect=DatabaseError("gone")):
            with pytest.raises(PointmanError) as exc_info:
                RedemptionService.redeem("ACC-001", "credit-5")

        assert exc_info.value.code == "LEDGER_WRITE_FAILURE"
        funded_account.refresh_from_db()
        assert funded_account.points_balance == 50

    def test_repeated_redemptions_stop_at_zero(self, funded_account, cheap_reward):
        results = [RedemptionService.redeem("ACC-001", "credit-5") for _ in range(3)]

        assert [r.success for r in results] == [True, False, False]
        funded_account.refresh_from_db()
        assert funded_account.points_balance == 20
        assert Ledger.reconcile("ACC-001").consistent


class TestRedeemedSignal:
    def test_signal_carries_reward(self, funded_account, cheap_reward, django_capture_on_commit_callbacks):
        received = []

        def handler(sender, **kwargs):
            received.append(kwargs)

        points_redeemed.connect(handler)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                RedemptionService.redeem("ACC-001", "credit-5")
        finally:
            points_redeemed.disconnect(handler)

        assert len(received) == 1
        assert received[0]["account_ref"] == "ACC-001"
        assert received[0]["reward"].credit_amount == Decimal("5.00")
        assert received[0]["entry"].points == -30

    def test_no_signal_on_failure(self, funded_account, reward, django_capture_on_commit_callbacks):
        received = []

        def handler(sender, **kwargs):
            received.append(kwargs)

        points_redeemed.connect(handler)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                RedemptionService.redeem("ACC-001", "free-coffee")
        finally:
            points_redeemed.disconnect(handler)

        assert received == []


class TestCatalog:
    def test_active_rewards_cheapest_first(self, reward, cheap_reward):
        Reward.objects.create(code="retired", name="Retired", point_cost=10, is_active=False)

        assert [r.code for r in RedemptionService.catalog()] == ["credit-5", "free-coffee"]

    def test_get_reward(self, reward):
        assert RedemptionService.get_reward("free-coffee") == reward
        assert RedemptionService.get_reward("nope") is None
