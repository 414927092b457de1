"""
Ledger - the only writer of point balances.

Every mutation is one conditional UPDATE on the account row plus one
LedgerEntry insert, inside transaction.atomic(). Callers never read the
balance and write it back themselves.
"""

import logging
from dataclasses import dataclass
from typing import Iterator

from django.db import DatabaseError, transaction
from django.db.models import F, Sum
from django.utils import timezone

from pointman.exceptions import PointmanError
from pointman.models import LedgerEntry, LoyaltyAccount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reconciliation:
    """Balance vs. ledger total for one account."""

    account_ref: str
    balance: int
    ledger_total: int

    @property
    def consistent(self) -> bool:
        return self.balance == self.ledger_total

    @property
    def difference(self) -> int:
        return self.balance - self.ledger_total


class Ledger:
    """
    Append-only point ledger.

    Uses @classmethod for extensibility (consistent with other services).
    """

    @classmethod
    def accrue(
        cls,
        account_ref: str,
        points: int,
        description: str,
        reference: str = "",
        created_by: str = "",
    ) -> LedgerEntry | None:
        """
        Add points to an account.

        Args:
            account_ref: Account reference
            points: Points to add; zero or negative is a no-op
            description: Human readable reason
            reference: External reference (order:123)
            created_by: Who triggered the accrual

        Returns:
            Created LedgerEntry, or None when ``points <= 0``

        Raises:
            PointmanError: ACCOUNT_NOT_FOUND, or LEDGER_WRITE_FAILURE if the
                store rejected the write (nothing is persisted)
        """
        if points <= 0:
            return None

        try:
            with transaction.atomic():
                account = cls._get_active_account(account_ref)
                LoyaltyAccount.objects.filter(pk=account.pk).update(
                    points_balance=F("points_balance") + points,
                    updated_at=timezone.now(),
                )
                account.refresh_from_db(fields=["points_balance"])

                entry = LedgerEntry.objects.create(
                    account=account,
                    entry_type=LedgerEntry.EntryType.ACCRUAL,
                    points=points,
                    balance_after=account.points_balance,
                    description=description,
                    reference=reference,
                    created_by=created_by,
                )
        except DatabaseError as exc:
            logger.error("Accrual of %s points for %s failed: %s", points, account_ref, exc)
            raise PointmanError(
                "LEDGER_WRITE_FAILURE",
                account_ref=account_ref,
                operation="accrue",
                points=points,
            ) from exc

        logger.info(
            "Accrued %s points for %s (%s), balance %s",
            points,
            account_ref,
            reference or description,
            entry.balance_after,
        )
        return entry

    @classmethod
    def redeem(
        cls,
        account_ref: str,
        cost: int,
        description: str,
        reference: str = "",
        created_by: str = "",
    ) -> LedgerEntry:
        """
        Spend points from an account.

        The decrement only commits if the balance still covers ``cost`` at
        write time; a prior read by the caller is not relied on.

        Args:
            account_ref: Account reference
            cost: Points to spend (must be positive)
            description: What was redeemed
            reference: External reference (reward:free-coffee)
            created_by: Who triggered the redemption

        Returns:
            Created LedgerEntry

        Raises:
            PointmanError: INVALID_POINTS, ACCOUNT_NOT_FOUND,
                INSUFFICIENT_POINTS (nothing written), or LEDGER_WRITE_FAILURE
        """
        if cost <= 0:
            raise PointmanError("INVALID_POINTS", requested=cost)

        try:
            with transaction.atomic():
                account = cls._get_active_account(account_ref)
                updated = LoyaltyAccount.objects.filter(
                    pk=account.pk,
                    points_balance__gte=cost,
                ).update(
                    points_balance=F("points_balance") - cost,
                    updated_at=timezone.now(),
                )
                account.refresh_from_db(fields=["points_balance"])

                if not updated:
                    raise PointmanError(
                        "INSUFFICIENT_POINTS",
                        account_ref=account_ref,
                        available=account.points_balance,
                        requested=cost,
                    )

                entry = LedgerEntry.objects.create(
                    account=account,
                    entry_type=LedgerEntry.EntryType.REDEMPTION,
                    points=-cost,
                    balance_after=account.points_balance,
                    description=description,
                    reference=reference,
                    created_by=created_by,
                )
        except DatabaseError as exc:
            logger.error("Redemption of %s points for %s failed: %s", cost, account_ref, exc)
            raise PointmanError(
                "LEDGER_WRITE_FAILURE",
                account_ref=account_ref,
                operation="redeem",
                points=cost,
            ) from exc

        logger.info(
            "Redeemed %s points for %s (%s), balance %s",
            cost,
            account_ref,
            reference or description,
            entry.balance_after,
        )
        return entry

    # ======================================================================
    # Read side (no locks)
    # ======================================================================

    @classmethod
    def balance(cls, account_ref: str) -> int:
        """Current points balance."""
        return cls._get_active_account(account_ref).points_balance

    @classmethod
    def activity(cls, account_ref: str, limit: int | None = None) -> list[LedgerEntry]:
        """Ledger entries for an account, most recent first."""
        if limit is None:
            from pointman.conf import pointman_settings

            limit = pointman_settings.ACTIVITY_LIMIT
        account = cls._get_active_account(account_ref)
        return list(LedgerEntry.objects.filter(account=account)[:limit])

    @classmethod
    def reconcile(cls, account_ref: str) -> Reconciliation:
        """Compare the stored balance with the sum of the account's entries."""
        account = LoyaltyAccount.objects.filter(account_ref=account_ref).first()
        if account is None:
            raise PointmanError("ACCOUNT_NOT_FOUND", account_ref=account_ref)
        return cls._reconcile_account(account)

    @classmethod
    def reconcile_all(cls) -> Iterator[Reconciliation]:
        """Reconcile every account, in id order."""
        for account in LoyaltyAccount.objects.order_by("id").iterator():
            yield cls._reconcile_account(account)

    @classmethod
    def _reconcile_account(cls, account: LoyaltyAccount) -> Reconciliation:
        total = account.entries.aggregate(total=Sum("points"))["total"] or 0
        return Reconciliation(
            account_ref=account.account_ref,
            balance=account.points_balance,
            ledger_total=total,
        )

    @classmethod
    def _get_active_account(cls, account_ref: str) -> LoyaltyAccount:
        """Get active loyalty account or raise."""
        try:
            return LoyaltyAccount.objects.get(account_ref=account_ref, is_active=True)
        except LoyaltyAccount.DoesNotExist:
            raise PointmanError("ACCOUNT_NOT_FOUND", account_ref=account_ref)
