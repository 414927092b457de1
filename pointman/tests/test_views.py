"""Tests for the HTTP endpoints."""

import json
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.urls import reverse

from pointman.models import LedgerEntry


pytestmark = pytest.mark.django_db


def accrue_payload(previous_status="shipped", new_status="delivered", **order):
    body = {
        "ref": "ORD-000001",
        "account_ref": "ACC-001",
        "total": "42.00",
        "status": new_status,
        "created_at": "2024-01-01T15:30:00+00:00",
        "items": [{"product_id": "SKU-1"}],
    }
    body.update(order)
    return {"previous_status": previous_status, "new_status": new_status, "order": body}


def post_json(client, name, payload):
    return client.post(
        reverse(f"pointman:{name}"),
        data=json.dumps(payload),
        content_type="application/json",
    )


class TestAccrueView:
    def test_accrues(self, client, account, per_dollar_rule):
        response = post_json(client, "accrue", accrue_payload())

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "accrued"
        assert data["points"] == 4
        assert data["balance"] == 4

    def test_duplicate_is_ok(self, client, account, per_dollar_rule):
        post_json(client, "accrue", accrue_payload())
        response = post_json(client, "accrue", accrue_payload())

        assert response.status_code == 200
        assert response.json()["status"] == "suppressed"
        assert LedgerEntry.objects.count() == 1

    def test_not_qualifying(self, client, account, per_dollar_rule):
        response = post_json(client, "accrue", accrue_payload("pending", "processing"))

        assert response.status_code == 200
        assert response.json()["status"] == "not_qualifying"

    def test_invalid_json(self, client):
        response = client.post(
            reverse("pointman:accrue"), data="{not json", content_type="application/json"
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ORDER_EVENT"

    def test_malformed_event(self, client):
        response = post_json(client, "accrue", {"new_status": "delivered"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ORDER_EVENT"

    def test_unknown_status(self, client, account):
        response = post_json(client, "accrue", accrue_payload("shipped", "vanished"))

        assert response.status_code == 400

    def test_unknown_account(self, client, db):
        response = post_json(client, "accrue", accrue_payload(account_ref="GHOST"))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ACCOUNT_NOT_FOUND"

    def test_ledger_failure(self, client, account, per_dollar_rule):
        with patch.object(LedgerEntry.objects, "create", side_effect=DatabaseError("down")):
            response = post_json(client, "accrue", accrue_payload())

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "LEDGER_WRITE_FAILURE"

    def test_get_not_allowed(self, client):
        assert client.get(reverse("pointman:accrue")).status_code == 405


class TestRedeemView:
    def test_redeems(self, client, funded_account, cheap_reward):
        response = post_json(
            client, "redeem", {"account_ref": "ACC-001", "reward_code": "credit-5"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "redeemed"
        assert data["points_spent"] == 30
        assert data["balance"] == 20

    def test_insufficient(self, client, funded_account, reward):
        response = post_json(
            client, "redeem", {"account_ref": "ACC-001", "reward_code": "free-coffee"}
        )

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "INSUFFICIENT_POINTS"
        assert error["data"]["balance"] == 50

    def test_unknown_reward(self, client, funded_account):
        response = post_json(client, "redeem", {"account_ref": "ACC-001", "reward_code": "yacht"})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "UNKNOWN_REWARD"

    @pytest.mark.parametrize(
        "payload",
        [{}, {"account_ref": "ACC-001"}, {"reward_code": "credit-5"}, ["ACC-001"]],
    )
    def test_missing_fields(self, client, payload):
        response = post_json(client, "redeem", payload)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"


class TestReadViews:
    def test_balance(self, client, funded_account):
        response = client.get(reverse("pointman:balance", args=["ACC-001"]))

        assert response.status_code == 200
        assert response.json() == {"account_ref": "ACC-001", "balance": 50}

    def test_balance_unknown_account(self, client, db):
        response = client.get(reverse("pointman:balance", args=["GHOST"]))

        assert response.status_code == 404

    def test_tier(self, client, funded_account, tiers):
        response = client.get(reverse("pointman:tier", args=["ACC-001"]))

        data = response.json()
        assert data["current_tier"]["code"] == "bronze"
        assert data["next_tier"]["code"] == "silver"
        assert data["progress_percent"] == 50.0
        assert data["points_to_next"] == 50

    def test_tier_without_table(self, client, funded_account):
        data = client.get(reverse("pointman:tier", args=["ACC-001"])).json()

        assert data["current_tier"] is None
        assert data["next_tier"] is None
        assert data["progress_percent"] == 0.0

    def test_activity(self, client, funded_account):
        response = client.get(reverse("pointman:activity", args=["ACC-001"]))

        entries = response.json()["entries"]
        assert len(entries) == 1
        assert entries[0]["points"] == 50
        assert entries[0]["type"] == "accrual"

    def test_activity_invalid_limit(self, client, funded_account):
        response = client.get(reverse("pointman:activity", args=["ACC-001"]), {"limit": "many"})

        assert response.status_code == 400

    @pytest.mark.parametrize("limit", ["-1", "0"])
    def test_activity_non_positive_limit(self, client, funded_account, limit):
        response = client.get(reverse("pointman:activity", args=["ACC-001"]), {"limit": limit})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"


class TestAccrueViewValidation:
    """Malformed order events are rejected with 400, never a server error."""

    @pytest.mark.parametrize("previous_status", [5, ["shipped"], {"status": "shipped"}])
    def test_non_string_previous_status(self, client, account, per_dollar_rule, previous_status):
        payload = accrue_payload()
        payload["previous_status"] = previous_status

        response = post_json(client, "accrue", payload)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ORDER_EVENT"
        assert not LedgerEntry.objects.exists()

    @pytest.mark.parametrize("order", [{"ref": ""}, {"account_ref": ""}, {"total": "-50"}, {"total": "NaN"}])
    def test_invalid_order_fields(self, client, account, per_dollar_rule, order):
        response = post_json(client, "accrue", accrue_payload(**order))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ORDER_EVENT"
        assert not LedgerEntry.objects.exists()
