"""Pointman protocols."""

from pointman.protocols.orders import (
    OrderHistoryBackend,
    OrderLine,
    OrderSnapshot,
    OrderStatusEvent,
    OrderSummary,
)
from pointman.protocols.notifications import (
    NotificationBackend,
    NotificationRequest,
)

__all__ = [
    # Orders
    "OrderHistoryBackend",
    "OrderLine",
    "OrderSnapshot",
    "OrderStatusEvent",
    "OrderSummary",
    # Notifications
    "NotificationBackend",
    "NotificationRequest",
]
