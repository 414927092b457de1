"""Redemption service - spend points on reward catalog entries."""

import logging
from dataclasses import dataclass

from django.db import transaction

from pointman.exceptions import PointmanError
from pointman.ledger import Ledger
from pointman.models import LoyaltyAccount, Reward
from pointman.signals import points_redeemed
from pointman.tiers import can_afford

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RedemptionResult:
    """Redemption result (user-facing failures carry an error_code)."""

    success: bool
    account_ref: str
    reward_code: str
    points_spent: int = 0
    new_balance: int | None = None
    entry_id: int | None = None
    error_code: str | None = None
    message: str | None = None

    @classmethod
    def failure(cls, account_ref: str, reward_code: str, error: PointmanError, balance=None):
        return cls(
            success=False,
            account_ref=account_ref,
            reward_code=reward_code,
            new_balance=balance,
            error_code=error.code,
            message=error.message,
        )


class RedemptionService:
    """
    Service for reward redemption.

    Uses @classmethod for extensibility (consistent with other services).
    """

    @classmethod
    def redeem(
        cls,
        account_ref: str,
        reward_code: str,
        created_by: str = "",
    ) -> RedemptionResult:
        """
        Redeem a reward for an account.

        The balance pre-check only avoids a pointless write; the ledger's
        conditional decrement decides.

        Args:
            account_ref: Account reference
            reward_code: Reward catalog code
            created_by: Who triggered the redemption

        Returns:
            RedemptionResult. Failures: UNKNOWN_REWARD, ACCOUNT_NOT_FOUND,
            INSUFFICIENT_POINTS (no ledger write in any of them)

        Raises:
            PointmanError: LEDGER_WRITE_FAILURE
        """
        reward = cls.get_reward(reward_code)
        if reward is None:
            error = PointmanError("UNKNOWN_REWARD", reward_code=reward_code)
            return RedemptionResult.failure(account_ref, reward_code, error)

        account = LoyaltyAccount.objects.filter(
            account_ref=account_ref, is_active=True
        ).first()
        if account is None:
            error = PointmanError("ACCOUNT_NOT_FOUND", account_ref=account_ref)
            return RedemptionResult.failure(account_ref, reward_code, error)

        if not can_afford(account.points_balance, reward.point_cost):
            error = PointmanError(
                "INSUFFICIENT_POINTS",
                available=account.points_balance,
                requested=reward.point_cost,
            )
            return RedemptionResult.failure(
                account_ref, reward_code, error, balance=account.points_balance
            )

        try:
            entry = Ledger.redeem(
                account_ref,
                reward.point_cost,
                f"Redeemed {reward.name}",
                reference=f"reward:{reward.code}",
                created_by=created_by,
            )
        except PointmanError as exc:
            if exc.code == "LEDGER_WRITE_FAILURE":
                raise
            # Balance changed between the pre-check and the write
            return RedemptionResult.failure(
                account_ref, reward_code, exc, balance=exc.data.get("available")
            )

        transaction.on_commit(
            lambda: points_redeemed.send(
                sender=entry.__class__,
                entry=entry,
                account_ref=account_ref,
                reward=reward,
            )
        )

        return RedemptionResult(
            success=True,
            account_ref=account_ref,
            reward_code=reward.code,
            points_spent=reward.point_cost,
            new_balance=entry.balance_after,
            entry_id=entry.pk,
        )

    @classmethod
    def get_reward(cls, reward_code: str) -> Reward | None:
        """Get an active reward by code."""
        try:
            return Reward.objects.get(code=reward_code, is_active=True)
        except Reward.DoesNotExist:
            return None

    @classmethod
    def catalog(cls) -> list[Reward]:
        """Active rewards, cheapest first."""
        return list(Reward.objects.filter(is_active=True))
