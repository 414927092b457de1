"""OrderHistoryBackend adapter backed by the engine's own accrual records."""

from pointman.conf import pointman_settings
from pointman.protocols.orders import OrderSummary


class AccrualRecordOrderHistoryBackend:
    """
    Order history derived from AccrualRecord.

    Every accrued order passed the fulfillment gate, so each record is
    reported with the fulfilled status. Orders the engine never saw
    fulfilled are not known to this backend.

    Configuration in settings.py (default):
        POINTMAN = {
            "ORDER_HISTORY_BACKEND": "pointman.adapters.orders.AccrualRecordOrderHistoryBackend",
        }
    """

    def get_account_orders(self, account_ref: str) -> list[OrderSummary]:
        """Return the account's accrued orders, oldest first."""
        from pointman.models import AccrualRecord

        fulfilled = pointman_settings.FULFILLED_STATUS
        records = AccrualRecord.objects.filter(
            account__account_ref=account_ref
        ).order_by("processed_at", "id")

        return [
            OrderSummary(
                order_ref=r.order_ref,
                status=fulfilled,
                ordered_at=r.order_created_at,
            )
            for r in records
        ]
