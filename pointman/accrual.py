"""
Accrual service - turns order status events into ledger accruals.

Flow:
    1. G2: status labels are known
    2. G1: the event moves the order into the fulfilled status
       (unchanged/other transitions stop here, before any rule is read)
    3. In one transaction:
       G3 replay record, rule evaluation, Ledger.accrue
    4. On commit: points_accrued signal, notification (best-effort)

Nothing re-delivers an event whose accrual failed after step 2; the error
is logged and surfaced to the caller.
"""

import logging
from dataclasses import dataclass, field

from django.db import DatabaseError, transaction
from django.utils.module_loading import import_string

from pointman.conf import pointman_settings
from pointman.evaluator import AccrualBreakdown, evaluate_breakdown
from pointman.exceptions import PointmanError
from pointman.gates import GateError, Gates
from pointman.ledger import Ledger
from pointman.models import LoyaltyAccount
from pointman.protocols.notifications import NotificationBackend, NotificationRequest
from pointman.protocols.orders import OrderHistoryBackend, OrderStatusEvent, OrderSummary
from pointman.rules import active_rules
from pointman.signals import points_accrued

logger = logging.getLogger(__name__)


ACCRUED = "accrued"
ZERO_POINTS = "zero_points"
SUPPRESSED = "suppressed"
NOT_QUALIFYING = "not_qualifying"


@dataclass(frozen=True)
class AccrualOutcome:
    """What happened to an order event."""

    status: str
    order_ref: str
    account_ref: str
    points: int = 0
    entry_id: int | None = None
    balance: int | None = None
    reason: str = ""
    breakdown: AccrualBreakdown | None = field(default=None, compare=False)

    @property
    def accrued(self) -> bool:
        return self.status == ACCRUED


def _get_order_backend() -> OrderHistoryBackend | None:
    """Get configured OrderHistoryBackend."""
    backend_path = pointman_settings.ORDER_HISTORY_BACKEND
    if backend_path:
        backend_class = import_string(backend_path)
        return backend_class()
    return None


def _get_notification_backend() -> NotificationBackend | None:
    """Get configured NotificationBackend."""
    backend_path = pointman_settings.NOTIFICATION_BACKEND
    if backend_path:
        backend_class = import_string(backend_path)
        return backend_class()
    return None


class AccrualService:
    """
    Service for order-triggered accrual.

    Uses @classmethod for extensibility (consistent with other services).
    """

    @classmethod
    def handle_order_event(cls, event: OrderStatusEvent) -> AccrualOutcome:
        """
        Process one order status event.

        Args:
            event: OrderStatusEvent from the order collaborator

        Returns:
            AccrualOutcome (accrued, zero_points, suppressed, not_qualifying)

        Raises:
            PointmanError: INVALID_ORDER_EVENT, ACCOUNT_NOT_FOUND, or
                LEDGER_WRITE_FAILURE; nothing is persisted in these cases
        """
        order = event.order
        fulfilled = pointman_settings.FULFILLED_STATUS

        # G2: Status labels
        try:
            Gates.order_status_known(event.previous_status, event.new_status)
        except GateError as exc:
            raise PointmanError(
                "INVALID_ORDER_EVENT", message=exc.message, order_ref=order.ref
            ) from exc

        # G1: Transition into fulfilled
        try:
            Gates.fulfillment_transition(event.previous_status, event.new_status, fulfilled)
        except GateError as exc:
            if exc.details.get("duplicate"):
                logger.debug("Duplicate trigger suppressed for order %s", order.ref)
                return cls._outcome(event, SUPPRESSED, reason=exc.message)
            return cls._outcome(event, NOT_QUALIFYING, reason=exc.message)

        order.validate()

        try:
            with transaction.atomic():
                account = cls._get_account(event.account_ref)

                # G3: Replay protection
                try:
                    record = Gates.accrual_replay(order.ref, account, order.created_at)
                except GateError as exc:
                    if not exc.details.get("replay"):
                        raise PointmanError(
                            "INVALID_ORDER_EVENT", message=exc.message, order_ref=order.ref
                        ) from exc
                    logger.debug("Order %s already accrued", order.ref)
                    return cls._outcome(event, SUPPRESSED, reason=exc.message)

                breakdown = evaluate_breakdown(
                    order,
                    account,
                    active_rules(),
                    cls._order_history(event),
                    fulfilled,
                )

                entry = Ledger.accrue(
                    account.account_ref,
                    breakdown.total,
                    f"Order #{order.short_ref}",
                    reference=f"order:{order.ref}",
                    created_by="pointman.accrual",
                )

                if entry is not None:
                    record.points = entry.points
                    record.entry = entry
                    record.save(update_fields=["points", "entry"])
        except PointmanError:
            logger.exception("Accrual failed for order %s (%s)", order.ref, event.account_ref)
            raise
        except DatabaseError as exc:
            logger.exception("Accrual failed for order %s (%s)", order.ref, event.account_ref)
            raise PointmanError(
                "LEDGER_WRITE_FAILURE", account_ref=event.account_ref, order_ref=order.ref
            ) from exc

        if entry is None:
            logger.info("Order %s earned no points", order.ref)
            return cls._outcome(event, ZERO_POINTS, breakdown=breakdown)

        transaction.on_commit(lambda: cls._after_accrual(event, entry))

        return cls._outcome(
            event,
            ACCRUED,
            points=entry.points,
            entry_id=entry.pk,
            balance=entry.balance_after,
            breakdown=breakdown,
        )

    @classmethod
    def _order_history(cls, event: OrderStatusEvent) -> list[OrderSummary]:
        """Account order history, including the order being processed."""
        backend = _get_order_backend()
        orders = backend.get_account_orders(event.account_ref) if backend else []
        # The backend may still hold the status from before this event
        history = [o for o in orders if o.order_ref != event.order_ref]
        history.append(
            OrderSummary(
                order_ref=event.order_ref,
                status=event.new_status,
                ordered_at=event.order.created_at,
                total=event.order.total,
            )
        )
        return history

    @classmethod
    def _after_accrual(cls, event: OrderStatusEvent, entry) -> None:
        points_accrued.send(
            sender=entry.__class__,
            entry=entry,
            account_ref=event.account_ref,
            order_ref=event.order_ref,
            points=entry.points,
        )
        cls.notify(
            NotificationRequest(
                account_ref=event.account_ref,
                title="You earned points!",
                body=f"You earned {entry.points} points for order #{event.order.short_ref}.",
                deep_link=pointman_settings.NOTIFICATION_DEEP_LINK,
            )
        )

    @classmethod
    def notify(cls, request: NotificationRequest) -> bool:
        """
        Hand a notification to the configured backend.

        Returns:
            True if the backend accepted it; failures are logged, never raised
        """
        try:
            backend = _get_notification_backend()
            if backend is None:
                return False
            backend.send(request)
            return True
        except Exception:
            logger.warning("Notification for %s failed", request.account_ref, exc_info=True)
            return False

    @classmethod
    def _get_account(cls, account_ref: str) -> LoyaltyAccount:
        try:
            return LoyaltyAccount.objects.get(account_ref=account_ref, is_active=True)
        except LoyaltyAccount.DoesNotExist:
            raise PointmanError("ACCOUNT_NOT_FOUND", account_ref=account_ref)

    @classmethod
    def _outcome(cls, event: OrderStatusEvent, status: str, **kwargs) -> AccrualOutcome:
        return AccrualOutcome(
            status=status,
            order_ref=event.order_ref,
            account_ref=event.account_ref,
            **kwargs,
        )
