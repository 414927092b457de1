"""
Pointman signals - public event API.

Received signals:
- order_status_changed: Sent by the order collaborator on every order update

Emitted signals:
- points_accrued: Emitted after an accrual commits
- points_redeemed: Emitted after a redemption commits
- accrual_failed: Emitted when an order event passed the gate but could not be accrued
"""

from django.dispatch import Signal

# Inbound (sent by the order system)
order_status_changed = Signal()  # sender=any, event=OrderStatusEvent

# Outbound (emitted by services)
points_accrued = Signal()  # sender=LedgerEntry, account_ref=str, order_ref=str, points=int
points_redeemed = Signal()  # sender=LedgerEntry, account_ref=str, reward=Reward
accrual_failed = Signal()  # sender=None, event=OrderStatusEvent, error=PointmanError
