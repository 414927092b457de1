"""Tier resolver - current tier and progress derived from a balance."""

from dataclasses import dataclass
from typing import Any, Sequence


@dataclass(frozen=True)
class TierStatus:
    """Where a balance sits in the tier table."""

    current_tier: Any = None
    next_tier: Any = None
    progress_percent: float = 0.0
    points_to_next: int | None = None


def resolve(points_balance: int, tiers: Sequence) -> TierStatus:
    """
    Resolve the tier pair for a balance.

    Args:
        points_balance: Current balance
        tiers: Objects with a ``min_points`` attribute, in any order

    Returns:
        TierStatus. With an empty table both tiers are None. At the top tier
        ``next_tier`` is None and progress is 100. Below the lowest threshold
        ``current_tier`` is None and progress is measured from 0.
    """
    if not tiers:
        return TierStatus()

    ordered = sorted(tiers, key=lambda t: t.min_points)

    current = None
    upcoming = None
    for tier in ordered:
        if tier.min_points <= points_balance:
            current = tier
        else:
            upcoming = tier
            break

    if upcoming is None:
        return TierStatus(current_tier=current, progress_percent=100.0)

    floor = current.min_points if current is not None else 0
    span = upcoming.min_points - floor
    progress = (points_balance - floor) / span * 100 if span > 0 else 0.0

    return TierStatus(
        current_tier=current,
        next_tier=upcoming,
        progress_percent=min(100.0, max(0.0, progress)),
        points_to_next=upcoming.min_points - points_balance,
    )


def can_afford(points_balance: int, point_cost: int) -> bool:
    """Redemption sufficiency check."""
    return points_balance >= point_cost
