"""Signal receivers - connects the order collaborator's events to accrual."""

from django.dispatch import receiver

from pointman.accrual import AccrualService
from pointman.exceptions import PointmanError
from pointman.signals import accrual_failed, order_status_changed


@receiver(order_status_changed, dispatch_uid="pointman.accrue_on_status_change")
def accrue_on_status_change(sender, event, **kwargs):
    """
    Accrue points when an order reaches the fulfilled status.

    Failures never propagate into the order system: they are logged by the
    accrual service and announced through ``accrual_failed``.
    """
    try:
        return AccrualService.handle_order_event(event)
    except PointmanError as exc:
        accrual_failed.send(sender=None, event=event, error=exc)
        return None
