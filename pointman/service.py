"""
Pointman public API.

CORE (essential):
    LoyaltyService.accrue_for_order(event) - Accrue points for an order event
    LoyaltyService.redeem(ref, reward)     - Redeem a reward
    LoyaltyService.balance(ref)            - Current points balance
    LoyaltyService.tier(ref)               - Tier and progress
    LoyaltyService.activity(ref)           - Ledger entries

ACCOUNTS (profile collaborator):
    LoyaltyService.enroll(ref)             - Enroll (idempotent)
    LoyaltyService.get_account(ref)        - Get account

CONFIGURATION (read-only):
    LoyaltyService.rules() / tiers() / rewards()
"""

from datetime import datetime

from pointman.accrual import AccrualOutcome, AccrualService
from pointman.ledger import Ledger
from pointman.models import AccrualRule, LedgerEntry, LoyaltyAccount, LoyaltyTier, Reward
from pointman.protocols.orders import OrderStatusEvent
from pointman.redemption import RedemptionResult, RedemptionService
from pointman.tiers import TierStatus, resolve


class LoyaltyService:
    """
    Pointman public API.

    Uses @classmethod for extensibility.
    """

    # ======================================================================
    # CORE API
    # ======================================================================

    @classmethod
    def accrue_for_order(cls, event: OrderStatusEvent) -> AccrualOutcome:
        """Run the trigger gate and accrue points for an order event."""
        return AccrualService.handle_order_event(event)

    @classmethod
    def redeem(cls, account_ref: str, reward_code: str, created_by: str = "") -> RedemptionResult:
        """Redeem a reward; user-facing failures come back in the result."""
        return RedemptionService.redeem(account_ref, reward_code, created_by=created_by)

    @classmethod
    def balance(cls, account_ref: str) -> int:
        """
        Current points balance.

        Raises:
            PointmanError: ACCOUNT_NOT_FOUND
        """
        return Ledger.balance(account_ref)

    @classmethod
    def tier(cls, account_ref: str) -> TierStatus:
        """
        Current tier, next tier and progress for an account.

        Raises:
            PointmanError: ACCOUNT_NOT_FOUND
        """
        return resolve(Ledger.balance(account_ref), cls.tiers())

    @classmethod
    def activity(cls, account_ref: str, limit: int | None = None) -> list[LedgerEntry]:
        """Ledger entries, most recent first."""
        return Ledger.activity(account_ref, limit=limit)

    # ======================================================================
    # ACCOUNTS
    # ======================================================================

    @classmethod
    def enroll(cls, account_ref: str, enrolled_at: datetime | None = None) -> LoyaltyAccount:
        """
        Enroll an account in the loyalty program.

        Idempotent - returns the existing account if already enrolled.
        """
        defaults = {"enrolled_at": enrolled_at} if enrolled_at else {}
        account, _ = LoyaltyAccount.objects.get_or_create(
            account_ref=account_ref, defaults=defaults
        )
        return account

    @classmethod
    def get_account(cls, account_ref: str) -> LoyaltyAccount | None:
        """Get active loyalty account."""
        try:
            return LoyaltyAccount.objects.get(account_ref=account_ref, is_active=True)
        except LoyaltyAccount.DoesNotExist:
            return None

    # ======================================================================
    # CONFIGURATION
    # ======================================================================

    @classmethod
    def rules(cls, only_active: bool = True) -> list[AccrualRule]:
        qs = AccrualRule.objects.all()
        if only_active:
            qs = qs.filter(is_active=True)
        return list(qs)

    @classmethod
    def tiers(cls) -> list[LoyaltyTier]:
        return list(LoyaltyTier.objects.order_by("min_points"))

    @classmethod
    def rewards(cls) -> list[Reward]:
        return RedemptionService.catalog()
