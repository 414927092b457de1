"""
Accrual rule variants.

``AccrualRule`` records store every parameter as an optional column. They
are compiled here into one frozen dataclass per rule type, each carrying
only the parameters its type reads. A record whose parameters do not fit
its type fails compilation with INVALID_RULE_CONFIGURATION and is skipped
by the evaluator.

Additive variants implement ``contribution(context) -> int``.
``MultiplierPerDay`` implements ``applies(context) -> bool`` and scales the
additive subtotal.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable, Union

from django.utils import timezone

from pointman.exceptions import PointmanError
from pointman.models.rule import RuleType
from pointman.protocols.orders import OrderSnapshot, OrderSummary

logger = logging.getLogger(__name__)


# =============================================================================
# Evaluation context
# =============================================================================


def _local(value: datetime) -> datetime:
    if timezone.is_aware(value):
        return timezone.localtime(value)
    return value


def day_of_week(value: datetime) -> int:
    """Weekday with Sunday as 0 and Saturday as 6."""
    return (_local(value).weekday() + 1) % 7


@dataclass(frozen=True)
class AccrualContext:
    """Everything a rule may look at when scoring one order."""

    order: OrderSnapshot
    enrolled_at: datetime
    order_history: tuple[OrderSummary, ...] = ()
    fulfilled_status: str = "delivered"

    @property
    def completion_day_of_week(self) -> int:
        return day_of_week(self.order.completion_date)

    @property
    def completion_month(self) -> int:
        return _local(self.order.completion_date).month

    @property
    def enrollment_month(self) -> int:
        return _local(self.enrolled_at).month

    @property
    def distinct_products(self) -> int:
        return len({line.product_id for line in self.order.items})

    def is_first_fulfilled_order(self) -> bool:
        fulfilled = [o for o in self.order_history if o.status == self.fulfilled_status]
        return len(fulfilled) == 1 and fulfilled[0].order_ref == self.order.ref


# =============================================================================
# Variants
# =============================================================================


@dataclass(frozen=True)
class PointsPerDollar:
    rule_id: int | None
    points: int
    per_amount: Decimal

    def contribution(self, context: AccrualContext) -> int:
        return int(context.order.total // self.per_amount) * self.points


@dataclass(frozen=True)
class BonusForAmount:
    rule_id: int | None
    points: int
    amount: Decimal

    def contribution(self, context: AccrualContext) -> int:
        return self.points if context.order.total > self.amount else 0


@dataclass(frozen=True)
class FixedPointsPerOrder:
    rule_id: int | None
    points: int

    def contribution(self, context: AccrualContext) -> int:
        return self.points


@dataclass(frozen=True)
class BonusForProduct:
    rule_id: int | None
    points: int
    product_id: str

    def contribution(self, context: AccrualContext) -> int:
        if any(line.product_id == self.product_id for line in context.order.items):
            return self.points
        return 0


@dataclass(frozen=True)
class FirstOrderBonus:
    rule_id: int | None
    points: int

    def contribution(self, context: AccrualContext) -> int:
        return self.points if context.is_first_fulfilled_order() else 0


@dataclass(frozen=True)
class AnniversaryBonus:
    rule_id: int | None
    points: int

    def contribution(self, context: AccrualContext) -> int:
        if context.completion_month == context.enrollment_month:
            return self.points
        return 0


@dataclass(frozen=True)
class BonusForVariety:
    rule_id: int | None
    points: int
    amount: Decimal

    def contribution(self, context: AccrualContext) -> int:
        return self.points if context.distinct_products > self.amount else 0


@dataclass(frozen=True)
class MultiplierPerDay:
    rule_id: int | None
    day_of_week: int
    multiplier: Decimal

    def applies(self, context: AccrualContext) -> bool:
        return context.completion_day_of_week == self.day_of_week


AdditiveRule = Union[
    PointsPerDollar,
    BonusForAmount,
    FixedPointsPerOrder,
    BonusForProduct,
    FirstOrderBonus,
    AnniversaryBonus,
    BonusForVariety,
]
CompiledRule = Union[AdditiveRule, MultiplierPerDay]


# =============================================================================
# Compilation
# =============================================================================


def _invalid(record, reason: str) -> PointmanError:
    return PointmanError(
        "INVALID_RULE_CONFIGURATION",
        rule_id=getattr(record, "pk", None),
        rule_type=getattr(record, "rule_type", None),
        reason=reason,
    )


def _points(record) -> int:
    if record.points is None:
        raise _invalid(record, "points is required")
    if record.points < 0:
        raise _invalid(record, "points must not be negative")
    return int(record.points)


def _decimal(record, name: str, *, positive: bool) -> Decimal:
    value = getattr(record, name)
    if value is None:
        raise _invalid(record, f"{name} is required")
    try:
        value = Decimal(str(value))
    except InvalidOperation:
        raise _invalid(record, f"{name} is not a number")
    if positive and value <= 0:
        raise _invalid(record, f"{name} must be positive")
    if value < 0:
        raise _invalid(record, f"{name} must not be negative")
    return value


def _build_points_per_dollar(record):
    return PointsPerDollar(
        record.pk, _points(record), _decimal(record, "per_amount", positive=True)
    )


def _build_bonus_for_amount(record):
    return BonusForAmount(
        record.pk, _points(record), _decimal(record, "amount", positive=False)
    )


def _build_fixed_points(record):
    return FixedPointsPerOrder(record.pk, _points(record))


def _build_bonus_for_product(record):
    if not record.product_id:
        raise _invalid(record, "product_id is required")
    return BonusForProduct(record.pk, _points(record), str(record.product_id))


def _build_first_order_bonus(record):
    return FirstOrderBonus(record.pk, _points(record))


def _build_anniversary_bonus(record):
    return AnniversaryBonus(record.pk, _points(record))


def _build_bonus_for_variety(record):
    return BonusForVariety(
        record.pk, _points(record), _decimal(record, "amount", positive=False)
    )


def _build_multiplier_per_day(record):
    if record.day_of_week is None or not 0 <= int(record.day_of_week) <= 6:
        raise _invalid(record, "day_of_week must be between 0 (Sunday) and 6")
    return MultiplierPerDay(
        record.pk,
        int(record.day_of_week),
        _decimal(record, "multiplier", positive=True),
    )


_BUILDERS = {
    RuleType.POINTS_PER_DOLLAR.value: _build_points_per_dollar,
    RuleType.BONUS_FOR_AMOUNT.value: _build_bonus_for_amount,
    RuleType.FIXED_POINTS_PER_ORDER.value: _build_fixed_points,
    RuleType.BONUS_FOR_PRODUCT.value: _build_bonus_for_product,
    RuleType.FIRST_ORDER_BONUS.value: _build_first_order_bonus,
    RuleType.ANNIVERSARY_BONUS.value: _build_anniversary_bonus,
    RuleType.BONUS_FOR_VARIETY.value: _build_bonus_for_variety,
    RuleType.MULTIPLIER_PER_DAY.value: _build_multiplier_per_day,
}


def compile_rule(record) -> CompiledRule:
    """
    Compile one AccrualRule record into its typed variant.

    Raises:
        PointmanError: INVALID_RULE_CONFIGURATION if the type is unknown or
            its parameters are missing/out of range.
    """
    builder = _BUILDERS.get(str(record.rule_type))
    if builder is None:
        raise _invalid(record, f"unsupported rule type {record.rule_type!r}")
    return builder(record)


def compile_rules(records: Iterable) -> tuple[list[CompiledRule], list[PointmanError]]:
    """
    Compile the active records, skipping misconfigured ones.

    Returns:
        Tuple of (compiled rules, errors for skipped records)
    """
    compiled = []
    errors = []
    for record in records:
        if not record.is_active:
            continue
        try:
            compiled.append(compile_rule(record))
        except PointmanError as exc:
            logger.warning(
                "Skipping accrual rule %s (%s): %s",
                exc.data.get("rule_id"),
                exc.data.get("rule_type"),
                exc.data.get("reason"),
            )
            errors.append(exc)
    return compiled, errors


def active_rules() -> list:
    """Current active rule records, read at evaluation time."""
    from pointman.models import AccrualRule

    return list(AccrualRule.objects.filter(is_active=True).order_by("id"))
