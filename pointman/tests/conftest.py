"""Pytest fixtures for Pointman tests."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from pointman.models import AccrualRule, LoyaltyAccount, LoyaltyTier, Reward, RuleType
from pointman.protocols.orders import OrderLine, OrderSnapshot, OrderStatusEvent
from pointman.tests.backends import RecordingNotificationBackend

# 2024-01-01 is a Monday (day_of_week 1, Sunday = 0)
MONDAY = datetime(2024, 1, 1, 15, 30, tzinfo=timezone.utc)


def make_order(
    ref="ORD-000001",
    account_ref="ACC-001",
    total="42.00",
    items=("SKU-1",),
    status="delivered",
    created_at=MONDAY,
    completed_at=None,
) -> OrderSnapshot:
    return OrderSnapshot(
        ref=ref,
        account_ref=account_ref,
        total=Decimal(total),
        status=status,
        created_at=created_at,
        items=tuple(OrderLine(product_id=p) for p in items),
        completed_at=completed_at,
    )


def make_event(previous_status, new_status, **order_kwargs) -> OrderStatusEvent:
    order_kwargs.setdefault("status", new_status)
    return OrderStatusEvent(
        order=make_order(**order_kwargs),
        new_status=new_status,
        previous_status=previous_status,
    )


@pytest.fixture(autouse=True)
def _reset_notifications():
    RecordingNotificationBackend.sent = []
    yield
    RecordingNotificationBackend.sent = []


@pytest.fixture
def account(db):
    """Account enrolled in June 2023."""
    return LoyaltyAccount.objects.create(
        account_ref="ACC-001",
        enrolled_at=datetime(2023, 6, 10, tzinfo=timezone.utc),
    )


@pytest.fixture
def funded_account(account):
    """Account with 50 points."""
    from pointman.ledger import Ledger

    Ledger.accrue(account.account_ref, 50, "Opening balance")
    account.refresh_from_db()
    return account


@pytest.fixture
def tiers(db):
    return [
        LoyaltyTier.objects.create(code="bronze", name="Bronze", min_points=0, icon_name="medal"),
        LoyaltyTier.objects.create(code="silver", name="Silver", min_points=100, icon_name="award"),
        LoyaltyTier.objects.create(code="gold", name="Gold", min_points=500, icon_name="crown"),
    ]


@pytest.fixture
def reward(db):
    return Reward.objects.create(code="free-coffee", name="Free Coffee", point_cost=100)


@pytest.fixture
def cheap_reward(db):
    return Reward.objects.create(
        code="credit-5",
        name="$5 Credit",
        point_cost=30,
        credit_amount=Decimal("5.00"),
    )


@pytest.fixture
def per_dollar_rule(db):
    return AccrualRule.objects.create(
        name="1 point per $10",
        rule_type=RuleType.POINTS_PER_DOLLAR,
        points=1,
        per_amount=Decimal("10"),
    )


@pytest.fixture
def first_order_rule(db):
    return AccrualRule.objects.create(
        name="Welcome bonus",
        rule_type=RuleType.FIRST_ORDER_BONUS,
        points=50,
    )
