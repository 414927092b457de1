"""
Pointman configuration.

Usage in settings.py:
    POINTMAN = {
        "FULFILLED_STATUS": "delivered",
        "NOTIFICATION_BACKEND": "myproject.push.PushNotificationBackend",
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class PointmanSettings:
    """Pointman configuration settings."""

    # Order lifecycle labels; exactly one of them is the fulfilled state
    ORDER_STATUSES: tuple[str, ...] = (
        "pending",
        "processing",
        "shipped",
        "delivered",
        "cancelled",
    )
    FULFILLED_STATUS: str = "delivered"

    # Collaborator backends (dotted paths)
    ORDER_HISTORY_BACKEND: str = "pointman.adapters.orders.AccrualRecordOrderHistoryBackend"
    NOTIFICATION_BACKEND: str = "pointman.adapters.notifications.LogNotificationBackend"

    # Where the accrual notification sends the user
    NOTIFICATION_DEEP_LINK: str = "/portal/rewards"

    # Default page size for activity listings
    ACTIVITY_LIMIT: int = 50


def get_pointman_settings() -> PointmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "POINTMAN", {})
    return PointmanSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_pointman_settings(), name)


pointman_settings = _LazySettings()
