"""Notification protocol for the push/email collaborator."""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class NotificationRequest:
    """Fire-and-forget notification for an account."""

    account_ref: str
    title: str
    body: str
    deep_link: str = ""


@runtime_checkable
class NotificationBackend(Protocol):
    """
    Protocol for delivering notifications.

    Delivery is best-effort: exceptions raised by ``send`` are logged and
    never affect the ledger.

    Configuration in settings.py:
        POINTMAN = {
            "NOTIFICATION_BACKEND": "myproject.push.PushNotificationBackend",
        }
    """

    def send(self, request: NotificationRequest) -> None:
        """Deliver (or enqueue) the notification."""
        ...
