"""Order protocols for the order lifecycle collaborator."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Protocol, runtime_checkable

from django.utils.dateparse import parse_datetime

from pointman.exceptions import PointmanError


@dataclass(frozen=True)
class OrderLine:
    """Order line item."""

    product_id: str
    quantity: int = 1


@dataclass(frozen=True)
class OrderSnapshot:
    """Read-only view of an order at the time of a status change."""

    ref: str
    account_ref: str
    total: Decimal
    status: str
    created_at: datetime
    items: tuple[OrderLine, ...] = ()
    completed_at: datetime | None = None  # defaults to created_at

    @property
    def short_ref(self) -> str:
        return self.ref[:6]

    @property
    def completion_date(self) -> datetime:
        return self.completed_at or self.created_at

    def validate(self) -> "OrderSnapshot":
        """
        Check the fields accrual depends on.

        Raises:
            PointmanError: INVALID_ORDER_EVENT for an empty ref or
                account_ref, or a negative total.
        """
        if not self.ref or not self.account_ref:
            raise PointmanError(
                "INVALID_ORDER_EVENT", reason="ref and account_ref are required"
            )
        try:
            negative = self.total < 0
        except InvalidOperation:
            negative = True
        if negative:
            raise PointmanError(
                "INVALID_ORDER_EVENT", reason="total must be a non-negative number", order_ref=self.ref
            )
        return self

    @classmethod
    def from_dict(cls, data: dict) -> "OrderSnapshot":
        """
        Build a snapshot from a JSON-like payload.

        Raises:
            PointmanError: INVALID_ORDER_EVENT if required fields are missing
                or malformed.
        """
        try:
            total = Decimal(str(data["total"]))
            created_at = _parse_dt(data["created_at"])
            items = tuple(
                OrderLine(
                    product_id=str(item["product_id"]),
                    quantity=int(item.get("quantity", 1)),
                )
                for item in data.get("items", [])
            )
            completed_at = data.get("completed_at")
            snapshot = cls(
                ref=str(data["ref"]),
                account_ref=str(data["account_ref"]),
                total=total,
                status=str(data["status"]),
                created_at=created_at,
                items=items,
                completed_at=_parse_dt(completed_at) if completed_at else None,
            )
        except (KeyError, TypeError, ValueError, InvalidOperation) as exc:
            raise PointmanError("INVALID_ORDER_EVENT", reason=str(exc)) from exc
        return snapshot.validate()


@dataclass(frozen=True)
class OrderStatusEvent:
    """
    Order document change, as emitted by the order collaborator.

    ``previous_status`` is None when the emitter cannot tell what the
    status was before the change.
    """

    order: OrderSnapshot
    new_status: str
    previous_status: str | None = None

    @property
    def order_ref(self) -> str:
        return self.order.ref

    @property
    def account_ref(self) -> str:
        return self.order.account_ref

    @classmethod
    def from_dict(cls, data: dict) -> "OrderStatusEvent":
        """Build an event from ``{"previous_status", "new_status", "order"}``."""
        if not isinstance(data.get("order"), dict) or not data.get("new_status"):
            raise PointmanError(
                "INVALID_ORDER_EVENT", reason="order and new_status are required"
            )
        previous_status = data.get("previous_status") or None
        if previous_status is not None and not isinstance(previous_status, str):
            raise PointmanError(
                "INVALID_ORDER_EVENT", reason="previous_status must be a string or null"
            )
        return cls(
            order=OrderSnapshot.from_dict(data["order"]),
            new_status=str(data["new_status"]),
            previous_status=previous_status,
        )


@dataclass(frozen=True)
class OrderSummary:
    """Summary of a single order in an account's history."""

    order_ref: str
    status: str
    ordered_at: datetime | None = None
    total: Decimal = field(default=Decimal("0"))


@runtime_checkable
class OrderHistoryBackend(Protocol):
    """
    Protocol for accessing an account's order history.

    Used by the accrual evaluator for first-order detection.

    Configuration in settings.py:
        POINTMAN = {
            "ORDER_HISTORY_BACKEND": "myshop.adapters.ShopOrderHistoryBackend",
        }
    """

    def get_account_orders(self, account_ref: str) -> list[OrderSummary]:
        """
        Return the account's orders.

        Args:
            account_ref: Account reference

        Returns:
            List of OrderSummary (any order)
        """
        ...


def _parse_dt(value) -> datetime:
    if isinstance(value, datetime):
        return value
    parsed = parse_datetime(str(value))
    if parsed is None:
        raise ValueError(f"invalid datetime: {value!r}")
    return parsed
