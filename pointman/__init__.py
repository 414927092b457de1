"""
Django Pointman - Loyalty points engine.

Usage:
    from pointman import LoyaltyService
    from pointman.gates import Gates, GateError, GateResult

    LoyaltyService.enroll("ACC-001")
    outcome = LoyaltyService.accrue_for_order(event)
    result = LoyaltyService.redeem("ACC-001", "free-shipping")
    status = LoyaltyService.tier("ACC-001")

    # Gates validation
    Gates.fulfillment_transition("shipped", "delivered")
    Gates.accrual_replay("ORD-123", account)
"""


def __getattr__(name):
    if name == "LoyaltyService":
        from pointman.service import LoyaltyService

        return LoyaltyService
    if name == "Gates":
        from pointman.gates import Gates

        return Gates
    if name == "GateError":
        from pointman.gates import GateError

        return GateError
    if name == "GateResult":
        from pointman.gates import GateResult

        return GateResult
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["LoyaltyService", "Gates", "GateError", "GateResult"]
__version__ = "0.1.0"
