"""Pointman models."""

from pointman.models.account import LoyaltyAccount
from pointman.models.ledger_entry import LedgerEntry, LedgerEntryImmutable
from pointman.models.rule import AccrualRule, DayOfWeek, RuleType
from pointman.models.tier import LoyaltyTier
from pointman.models.reward import Reward
from pointman.models.accrual_record import AccrualRecord

__all__ = [
    "LoyaltyAccount",
    # Ledger
    "LedgerEntry",
    "LedgerEntryImmutable",
    # Configuration
    "AccrualRule",
    "DayOfWeek",
    "RuleType",
    "LoyaltyTier",
    "Reward",
    # Replay protection
    "AccrualRecord",
]
