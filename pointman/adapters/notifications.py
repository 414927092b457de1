"""Logging NotificationBackend adapter."""

import logging

from pointman.protocols.notifications import NotificationRequest

logger = logging.getLogger("pointman.notifications")


class LogNotificationBackend:
    """
    Default NotificationBackend: writes the request to the log.

    Replace it with a real push/email backend in settings.py:
        POINTMAN = {
            "NOTIFICATION_BACKEND": "myproject.push.PushNotificationBackend",
        }
    """

    def send(self, request: NotificationRequest) -> None:
        logger.info(
            "Notification for %s: %s - %s (%s)",
            request.account_ref,
            request.title,
            request.body,
            request.deep_link,
        )
