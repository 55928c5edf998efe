"""HTTP tests for the subscription, billing and job routers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from app.core.config import settings
from app.models.subscription import Subscription
from app.routers import health
from app.services.renewal_service import job_today

USER = {"X-User-Id": "42"}


def utcnow_naive():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TestHealth:
    def test_ok(self, client, monkeypatch):
        monkeypatch.setattr(health, "check_db_connection", lambda: True)
        res = client.get("/api/health")
        assert res.status_code == 200
        assert res.json() == {"status": "ok", "db": "connected"}

    def test_degraded(self, client, monkeypatch):
        monkeypatch.setattr(health, "check_db_connection", lambda: False)
        assert client.get("/health").json()["status"] == "degraded"


class TestPlans:
    def test_lists_active_plans_in_order(self, client, plans, db_session):
        plans["premium"].is_active = False
        db_session.commit()

        res = client.get("/api/plans")

        assert res.status_code == 200
        assert [p["slug"] for p in res.json()] == ["free", "pro", "pro-yearly", "lifetime"]


class TestSubscriptions:
    def test_requires_user(self, client):
        assert client.get("/api/subscriptions").status_code == 401
        assert client.get("/api/subscriptions", headers={"X-User-Id": "abc"}).status_code == 401

    def test_create_derives_next_billing_date(self, client):
        today = date.today()
        start = today - timedelta(days=10)

        res = client.post(
            "/api/subscriptions",
            json={"name": "Gym", "amount": 4500, "billing_cycle": "weekly", "start_date": start.isoformat()},
            headers=USER,
        )

        assert res.status_code == 201
        body = res.json()
        assert body["next_billing_date"] == (start + timedelta(days=14)).isoformat()
        assert body["frequency"] == 1
        assert body["auto_renew"] is True

    def test_create_rejects_unknown_cycle(self, client):
        res = client.post(
            "/api/subscriptions",
            json={"name": "Gym", "amount": 4500, "billing_cycle": "quarterly", "start_date": "2024-01-01"},
            headers=USER,
        )
        assert res.status_code == 422
        assert "billing_cycle" in res.json()["detail"]

    def test_update_frequency_recomputes(self, client):
        today = date.today()
        start = today - timedelta(days=1)
        created = client.post(
            "/api/subscriptions",
            json={"name": "Cloud", "amount": 300, "billing_cycle": "daily", "start_date": start.isoformat()},
            headers=USER,
        ).json()
        assert created["next_billing_date"] == (today + timedelta(days=1)).isoformat()

        res = client.patch(f"/api/subscriptions/{created['id']}", json={"frequency": 3}, headers=USER)

        assert res.status_code == 200
        assert res.json()["next_billing_date"] == (start + timedelta(days=3)).isoformat()

    @pytest.mark.parametrize("field", ["start_date", "billing_cycle", "frequency", "name", "auto_renew"])
    def test_update_rejects_null_for_required_fields(self, client, field):
        created = client.post(
            "/api/subscriptions",
            json={"name": "Cloud", "amount": 300, "start_date": "2024-01-01"},
            headers=USER,
        ).json()

        res = client.patch(f"/api/subscriptions/{created['id']}", json={field: None}, headers=USER)

        assert res.status_code == 422
        assert field in res.json()["detail"]
        after = client.get(f"/api/subscriptions/{created['id']}", headers=USER).json()
        assert after[field] == created[field]

    def test_update_null_clears_next_billing_date(self, client):
        created = client.post(
            "/api/subscriptions",
            json={"name": "Cloud", "amount": 300, "start_date": "2024-01-01"},
            headers=USER,
        ).json()
        assert created["next_billing_date"] is not None

        res = client.patch(f"/api/subscriptions/{created['id']}", json={"next_billing_date": None}, headers=USER)

        assert res.status_code == 200
        assert res.json()["next_billing_date"] is None

    def test_other_users_records_are_hidden(self, client):
        created = client.post(
            "/api/subscriptions",
            json={"name": "Cloud", "amount": 300, "start_date": "2024-01-01"},
            headers=USER,
        ).json()

        res = client.get(f"/api/subscriptions/{created['id']}", headers={"X-User-Id": "43"})
        assert res.status_code == 404
        assert client.get("/api/subscriptions", headers={"X-User-Id": "43"}).json() == []


class TestBillingPreview:
    def test_new_subscription(self, client, plans):
        res = client.post("/api/billing/preview", json={"plan_slug": "pro-yearly"}, headers=USER)

        assert res.status_code == 200
        assert res.json() == {
            "plan_slug": "pro-yearly",
            "plan_name": "Pro Yearly",
            "upgrade_type": "new_subscription",
            "credit_cents": 0,
            "amount_due_cents": 10000,
            "days_remaining": 0,
            "is_estimate": False,
        }

    def test_plan_change(self, client, make_user_plan):
        make_user_plan(42, "pro", expires_at=utcnow_naive() + timedelta(days=10, hours=12))

        res = client.post("/api/billing/preview", json={"plan_slug": "premium"}, headers=USER)

        body = res.json()
        assert body["upgrade_type"] == "plan_change"
        assert body["days_remaining"] == 11
        # 1000 / 30 * 11 = 366.67
        assert body["credit_cents"] == 367
        assert body["amount_due_cents"] == 1633
        assert body["is_estimate"] is True

    def test_immediate_charge(self, client, make_user_plan):
        make_user_plan(42, "pro", expires_at=utcnow_naive() + timedelta(days=20))

        body = client.post("/api/billing/preview", json={"plan_slug": "lifetime"}, headers=USER).json()

        assert body["upgrade_type"] == "immediate_charge"
        assert body["amount_due_cents"] == 30000
        assert body["credit_cents"] == 0

    def test_cancelled_plan_is_ignored(self, client, make_user_plan):
        make_user_plan(42, "pro", expires_at=utcnow_naive() + timedelta(days=20), status="cancelled")

        body = client.post("/api/billing/preview", json={"plan_slug": "premium"}, headers=USER).json()

        assert body["upgrade_type"] == "new_subscription"

    def test_lifetime_is_rejected(self, client, make_user_plan):
        make_user_plan(42, "lifetime")

        res = client.post("/api/billing/preview", json={"plan_slug": "premium"}, headers=USER)

        assert res.status_code == 400
        assert res.json()["detail"] == "You already have a lifetime subscription"

    def test_unknown_plan(self, client, plans):
        res = client.post("/api/billing/preview", json={"plan_slug": "gold"}, headers=USER)
        assert res.status_code == 404


class TestBillingChange:
    @pytest.mark.parametrize(
        "current, target, upgrade_type, action",
        [
            (None, "pro", "new_subscription", "checkout"),
            ("free", "pro", "new_subscription", "checkout"),
            ("pro", "premium", "plan_change", "update_subscription"),
            ("pro", "lifetime", "immediate_charge", "one_time_charge"),
        ],
    )
    def test_provider_action(self, client, make_user_plan, current, target, upgrade_type, action):
        if current:
            make_user_plan(42, current, expires_at=utcnow_naive() + timedelta(days=5))

        res = client.post("/api/billing/change", json={"plan_slug": target}, headers=USER)

        assert res.status_code == 200
        body = res.json()
        assert body["upgrade_type"] == upgrade_type
        assert body["provider_action"] == action
        assert body["cancels_current"] is (upgrade_type == "immediate_charge")
        assert "amount_due_cents" not in body

    def test_lifetime_is_rejected(self, client, make_user_plan):
        make_user_plan(42, "lifetime")
        res = client.post("/api/billing/change", json={"plan_slug": "pro"}, headers=USER)
        assert res.status_code == 400


class TestRenewalJob:
    def test_requires_secret(self, client, monkeypatch):
        monkeypatch.setattr(settings, "CRON_SECRET", "s3cret")
        assert client.post("/api/jobs/renewals").status_code == 401
        assert client.post("/api/jobs/renewals", headers={"X-Cron-Secret": "nope"}).status_code == 401

    def test_disabled_without_configured_secret(self, client, monkeypatch):
        monkeypatch.setattr(settings, "CRON_SECRET", "")
        assert client.post("/api/jobs/renewals", headers={"X-Cron-Secret": ""}).status_code == 401

    def test_runs_catch_up(self, client, monkeypatch, make_subscription, db_session):
        monkeypatch.setattr(settings, "CRON_SECRET", "s3cret")
        today = job_today()
        sub = make_subscription(billing_cycle="daily", next_billing_date=today - timedelta(days=3))

        res = client.post("/api/jobs/renewals", headers={"X-Cron-Secret": "s3cret"})

        assert res.status_code == 200
        assert res.json()["results"]["renewal_dates_updated"] == {"processed": 1, "updated": 1, "skipped": 0}
        db_session.expire_all()
        assert db_session.get(Subscription, sub.id).next_billing_date == today + timedelta(days=1)
