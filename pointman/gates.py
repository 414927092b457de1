"""
Pointman Gates - Validation rules for order-triggered accrual.

G1: FulfillmentTransition - Accrual only on the transition into the fulfilled status
G2: OrderStatusKnown - Status labels must belong to the configured lifecycle
G3: AccrualReplay - An order accrues at most once (persistent via DB)
"""

from dataclasses import dataclass

from django.db import IntegrityError, transaction


class GateError(Exception):
    """Gate validation error."""

    def __init__(self, gate_name: str, message: str, details: dict | None = None):
        self.gate_name = gate_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{gate_name}] {message}")


@dataclass
class GateResult:
    """Result of a gate check."""

    passed: bool
    gate_name: str
    message: str = ""


# =============================================================================
# Gates
# =============================================================================


class Gates:
    """Pointman validation gates."""

    # =========================================================================
    # G1: Fulfillment Transition
    # =========================================================================

    @classmethod
    def fulfillment_transition(
        cls,
        previous_status: str | None,
        new_status: str,
        fulfilled_status: str | None = None,
    ) -> GateResult:
        """
        G1: Accrual fires only when an order enters the fulfilled status.

        A missing ``previous_status`` means the transition cannot be
        determined; it passes and G3 guards against a second accrual.

        Args:
            previous_status: Status before the change (None if unknown)
            new_status: Status after the change
            fulfilled_status: Defaults to POINTMAN["FULFILLED_STATUS"]

        Raises:
            GateError: If status is unchanged, already fulfilled, or the new
                status is not the fulfilled one
        """
        if fulfilled_status is None:
            from pointman.conf import pointman_settings

            fulfilled_status = pointman_settings.FULFILLED_STATUS

        if previous_status == new_status:
            raise GateError(
                "G1_FulfillmentTransition",
                "Status unchanged.",
                {"status": new_status, "duplicate": new_status == fulfilled_status},
            )

        if new_status != fulfilled_status:
            raise GateError(
                "G1_FulfillmentTransition",
                f"Transition to '{new_status}' does not fulfill the order.",
                {"previous_status": previous_status, "new_status": new_status},
            )

        if previous_status is None:
            return GateResult(
                True, "G1_FulfillmentTransition", "Previous status unknown (assumed first time)"
            )

        return GateResult(True, "G1_FulfillmentTransition")

    @classmethod
    def check_fulfillment_transition(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.fulfillment_transition(*args, **kwargs)
            return True
        except GateError:
            return False

    # =========================================================================
    # G2: Order Status Known
    # =========================================================================

    @classmethod
    def order_status_known(cls, *statuses: str | None) -> GateResult:
        """
        G2: Every given status belongs to POINTMAN["ORDER_STATUSES"].

        None values (unknown previous status) are ignored.

        Raises:
            GateError: If a status label is not configured
        """
        from pointman.conf import pointman_settings

        allowed = set(pointman_settings.ORDER_STATUSES)
        unknown = [
            s for s in statuses if s is not None and (not isinstance(s, str) or s not in allowed)
        ]
        if unknown:
            raise GateError(
                "G2_OrderStatusKnown",
                f"Unknown order status: {', '.join(map(str, unknown))}",
                {"allowed": sorted(allowed)},
            )

        return GateResult(True, "G2_OrderStatusKnown")

    @classmethod
    def check_order_status_known(cls, *statuses: str | None) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.order_status_known(*statuses)
            return True
        except GateError:
            return False

    # =========================================================================
    # G3: Accrual Replay (persistent via DB)
    # =========================================================================

    @classmethod
    def accrual_replay(cls, order_ref: str, account, order_created_at=None):
        """
        G3: An order can be accrued only once.

        Records an AccrualRecord for the order. Call it inside the
        transaction that writes the ledger entry so a failed write also
        removes the record.

        Args:
            order_ref: Order identifier
            account: LoyaltyAccount the order belongs to
            order_created_at: Order creation time (kept for history)

        Returns:
            The new AccrualRecord

        Raises:
            GateError: If the order was already accrued
        """
        from pointman.models import AccrualRecord

        if not order_ref:
            raise GateError("G3_AccrualReplay", "Order reference is required.", {"replay": False})

        try:
            with transaction.atomic():
                return AccrualRecord.objects.create(
                    order_ref=order_ref,
                    account=account,
                    order_created_at=order_created_at,
                )
        except IntegrityError:
            # IntegrityError means the order was already accrued
            # Check if it actually exists (could be other DB error)
            if AccrualRecord.objects.filter(order_ref=order_ref).exists():
                raise GateError(
                    "G3_AccrualReplay",
                    "Order already accrued.",
                    {"order_ref": order_ref, "replay": True},
                )
            raise

    @classmethod
    def is_replay(cls, order_ref: str) -> bool:
        """Check if the order was already accrued (doesn't record)."""
        from pointman.models import AccrualRecord

        return AccrualRecord.objects.filter(order_ref=order_ref).exists()
