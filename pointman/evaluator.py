"""
Accrual evaluator - scores one fulfilled order against the rule set.

Pure: reads its arguments and returns a number. Composition is two-phase:

1. Additive: every active non-multiplier rule contributes points; the
   contributions are summed.
2. Multiplicative: every active multiplierPerDay rule whose weekday matches
   the order's completion date scales the running total, in ascending
   rule id order.

The result is floored to an integer and never negative.
"""

from dataclasses import dataclass, field
from decimal import ROUND_FLOOR, Decimal
from typing import Iterable

from pointman.rules import AccrualContext, MultiplierPerDay, compile_rules


@dataclass(frozen=True)
class AccrualBreakdown:
    """How an award was put together."""

    contributions: dict[int | None, int] = field(default_factory=dict)
    multipliers: tuple[Decimal, ...] = ()
    skipped_rule_ids: tuple[int | None, ...] = ()
    subtotal: int = 0
    total: int = 0


def _rule_order(rule) -> tuple:
    return (rule.rule_id is None, rule.rule_id or 0)


def evaluate_breakdown(
    order,
    account,
    rules: Iterable,
    order_history: Iterable = (),
    fulfilled_status: str = "delivered",
) -> AccrualBreakdown:
    """
    Score an order and report each rule's part.

    Args:
        order: OrderSnapshot being fulfilled
        account: LoyaltyAccount (only ``enrolled_at`` is read)
        rules: AccrualRule records (inactive ones are ignored)
        order_history: OrderSummary list for the account
        fulfilled_status: Status label that counts as delivered

    Returns:
        AccrualBreakdown
    """
    compiled, errors = compile_rules(rules)
    context = AccrualContext(
        order=order,
        enrolled_at=account.enrolled_at,
        order_history=tuple(order_history),
        fulfilled_status=fulfilled_status,
    )

    additive = sorted(
        (r for r in compiled if not isinstance(r, MultiplierPerDay)), key=_rule_order
    )
    multipliers = sorted(
        (r for r in compiled if isinstance(r, MultiplierPerDay) and r.applies(context)),
        key=_rule_order,
    )

    contributions = {}
    subtotal = 0
    for rule in additive:
        points = max(0, rule.contribution(context))
        contributions[rule.rule_id] = points
        subtotal += points

    running = Decimal(subtotal)
    for rule in multipliers:
        running *= rule.multiplier

    total = int(running.to_integral_value(rounding=ROUND_FLOOR))

    return AccrualBreakdown(
        contributions=contributions,
        multipliers=tuple(r.multiplier for r in multipliers),
        skipped_rule_ids=tuple(e.data.get("rule_id") for e in errors),
        subtotal=subtotal,
        total=max(0, total),
    )


def evaluate(
    order,
    account,
    rules: Iterable,
    order_history: Iterable = (),
    fulfilled_status: str = "delivered",
) -> int:
    """Points awarded for ``order`` (>= 0)."""
    return evaluate_breakdown(
        order, account, rules, order_history, fulfilled_status
    ).total
