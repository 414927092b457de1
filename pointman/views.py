"""
Pointman HTTP endpoints.

Minimal API for running the engine as a standalone service:
    POST accrue/                  - order status event (idempotent per order)
    POST redeem/                  - {"account_ref", "reward_code"}
    GET  balance/<account_ref>/
    GET  tier/<account_ref>/
    GET  activity/<account_ref>/?limit=N

Authentication is left to the including project.
"""

from __future__ import annotations

import json
import logging

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from pointman.exceptions import PointmanError
from pointman.protocols.orders import OrderStatusEvent
from pointman.service import LoyaltyService

logger = logging.getLogger("pointman.views")


ERROR_STATUS = {
    "INVALID_ORDER_EVENT": 400,
    "INVALID_POINTS": 400,
    "ACCOUNT_NOT_FOUND": 404,
    "UNKNOWN_REWARD": 404,
    "INSUFFICIENT_POINTS": 409,
    "LEDGER_WRITE_FAILURE": 503,
}


def error_response(code: str, message: str, data: dict | None = None) -> JsonResponse:
    return JsonResponse(
        {"error": {"code": code, "message": message, "data": data or {}}},
        status=ERROR_STATUS.get(code, 400),
    )


def _parse_body(request) -> dict | None:
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def _tier_dict(tier) -> dict | None:
    if tier is None:
        return None
    return {
        "code": tier.code,
        "name": tier.name,
        "min_points": tier.min_points,
        "icon_name": tier.icon_name,
    }


@method_decorator(csrf_exempt, name="dispatch")
class AccrueView(View):
    """POST an order status event."""

    def post(self, request):
        data = _parse_body(request)
        if data is None:
            return error_response("INVALID_ORDER_EVENT", "Invalid JSON")

        try:
            event = OrderStatusEvent.from_dict(data)
            outcome = LoyaltyService.accrue_for_order(event)
        except PointmanError as exc:
            return error_response(exc.code, exc.message, exc.data)

        if not outcome.accrued:
            logger.debug("Accrue endpoint: %s for order %s", outcome.status, outcome.order_ref)

        return JsonResponse(
            {
                "status": outcome.status,
                "order_ref": outcome.order_ref,
                "account_ref": outcome.account_ref,
                "points": outcome.points,
                "balance": outcome.balance,
            }
        )


@method_decorator(csrf_exempt, name="dispatch")
class RedeemView(View):
    """POST a redemption request."""

    def post(self, request):
        data = _parse_body(request)
        if data is None or not data.get("account_ref") or not data.get("reward_code"):
            return JsonResponse(
                {"error": {"code": "INVALID_REQUEST", "message": "account_ref and reward_code are required"}},
                status=400,
            )

        try:
            result = LoyaltyService.redeem(str(data["account_ref"]), str(data["reward_code"]))
        except PointmanError as exc:
            return error_response(exc.code, exc.message, exc.data)

        if not result.success:
            return error_response(
                result.error_code, result.message, {"balance": result.new_balance}
            )

        return JsonResponse(
            {
                "status": "redeemed",
                "account_ref": result.account_ref,
                "reward_code": result.reward_code,
                "points_spent": result.points_spent,
                "balance": result.new_balance,
            }
        )


class BalanceView(View):
    def get(self, request, account_ref):
        try:
            balance = LoyaltyService.balance(account_ref)
        except PointmanError as exc:
            return error_response(exc.code, exc.message, exc.data)
        return JsonResponse({"account_ref": account_ref, "balance": balance})


class TierView(View):
    def get(self, request, account_ref):
        try:
            status = LoyaltyService.tier(account_ref)
        except PointmanError as exc:
            return error_response(exc.code, exc.message, exc.data)
        return JsonResponse(
            {
                "account_ref": account_ref,
                "current_tier": _tier_dict(status.current_tier),
                "next_tier": _tier_dict(status.next_tier),
                "progress_percent": round(status.progress_percent, 2),
                "points_to_next": status.points_to_next,
            }
        )


class ActivityView(View):
    def get(self, request, account_ref):
        try:
            limit = int(request.GET["limit"]) if "limit" in request.GET else None
        except ValueError:
            limit = 0
        if limit is not None and limit < 1:
            return JsonResponse(
                {"error": {"code": "INVALID_REQUEST", "message": "limit must be a positive integer"}},
                status=400,
            )

        try:
            entries = LoyaltyService.activity(account_ref, limit=limit)
        except PointmanError as exc:
            return error_response(exc.code, exc.message, exc.data)

        return JsonResponse(
            {
                "account_ref": account_ref,
                "entries": [
                    {
                        "id": e.pk,
                        "type": e.entry_type,
                        "points": e.points,
                        "balance_after": e.balance_after,
                        "description": e.description,
                        "reference": e.reference,
                        "created_at": e.created_at.isoformat(),
                    }
                    for e in entries
                ],
            }
        )
