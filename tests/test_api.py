# --- START OF FILE: tests/test_api.py ---
import json
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from wellcoach.application.services.billing_service import compute_signature
from wellcoach.config import settings
from wellcoach.interfaces.api.main import app
from wellcoach.interfaces.api.security.auth import create_access_token


@pytest.fixture
def client(db) -> TestClient:
    """Provides a TestClient with startup (service wiring) executed."""
    with TestClient(app) as test_client:
        yield test_client


def auth(user_id: str = "user-a", **claims) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id, claims)}"}


TRAINING = {"workoutType": "cycling", "duration": 15, "caloriesBurned": 150}


def signed(body: dict) -> tuple:
    raw = json.dumps(body).encode()
    ts = int(time.time())
    sig = compute_signature(settings.BILLING_WEBHOOK_SECRET, ts, raw)
    return raw, {"Billing-Signature": f"t={ts},v1={sig}", "Content-Type": "application/json"}


def test_root_and_health(client: TestClient):
    assert "WellCoach API" in client.get("/").json()["message"]
    assert client.get("/health").json() == {"status": "ok"}


def test_endpoints_require_a_valid_bearer_token(client: TestClient):
    assert client.get("/api/recommendations").status_code == 401
    assert client.get("/api/dashboard", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401
    assert client.post("/api/module/training", json=TRAINING).status_code == 401


def test_first_request_creates_the_user(client: TestClient):
    r = client.get("/api/auth/user", headers=auth("user-a", email="a@example.com"))
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == "user-a"
    assert body["email"] == "a@example.com"
    assert body["subscriptionTier"] == "free"
    assert body["subscriptionStatus"] == "active"


def test_create_training_event_returns_201_and_generates_recommendations(client: TestClient):
    r = client.post("/api/module/training", json=TRAINING, headers=auth())
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["workoutType"] == "cycling"
    assert body["userId"] == "user-a"
    assert body["warnings"] == []
    assert body["recommendationsGenerated"] == 2

    recs = client.get("/api/recommendations", headers=auth()).json()
    assert [rec["recommendationType"] for rec in recs] == ["intensity_boost", "duration_increase"]
    assert recs[0]["actionData"]["targetCalories"] == pytest.approx(150 * 1.15)
    assert recs[0]["isRead"] is False

    events = client.get("/api/module/training", headers=auth()).json()
    assert [e["id"] for e in events] == [body["id"]]


def test_snake_case_input_is_accepted(client: TestClient):
    payload = {"session_type": "meditation", "mood_before": 3, "mood_after": 8}
    r = client.post("/api/module/mental", json=payload, headers=auth())
    assert r.status_code == 201
    assert r.json()["moodBefore"] == 3


def test_invalid_payload_is_400_and_nothing_is_stored(client: TestClient):
    r = client.post("/api/module/nutrition", json={"mealType": "brunch", "totalCalories": -5}, headers=auth())
    assert r.status_code == 400
    body = r.json()
    assert body["errors"]
    assert {e["field"] for e in body["errors"]} >= {"mealType", "totalCalories"}
    assert client.get("/api/module/nutrition", headers=auth()).json() == []


def test_future_event_time_is_400(client: TestClient):
    tomorrow = (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()
    r = client.post("/api/module/training", json={**TRAINING, "completedAt": tomorrow}, headers=auth())
    assert r.status_code == 400
    assert [e["field"] for e in r.json()["errors"]] == ["completedAt"]

    yesterday = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    r = client.post("/api/module/nutrition", json={"mealType": "lunch", "totalCalories": 500, "loggedAt": yesterday},
                    headers=auth())
    assert r.status_code == 201


def test_unknown_module_is_400(client: TestClient):
    r = client.post("/api/module/sleep", json={}, headers=auth())
    assert r.status_code == 400


def test_rule_engine_failure_is_a_warning_not_an_error(client: TestClient):
    broken = MagicMock()
    broken.on_event_created.side_effect = RuntimeError("boom")
    app.state.services["event_service"].engine = broken

    r = client.post("/api/module/training", json=TRAINING, headers=auth())

    assert r.status_code == 201
    assert r.json()["warnings"]
    assert len(client.get("/api/module/training", headers=auth()).json()) == 1


def test_background_generation(client: TestClient, monkeypatch):
    monkeypatch.setattr(settings, "RECOMMENDATIONS_INLINE", False)

    r = client.post(
        "/api/module/productivity",
        json={"sessionType": "deep_work", "duration": 45, "tasksCompleted": 0, "focusScore": 4},
        headers=auth(),
    )

    assert r.status_code == 201
    assert r.json()["recommendationsGenerated"] == 0
    recs = client.get("/api/recommendations", headers=auth()).json()
    assert [rec["recommendationType"] for rec in recs] == ["task_completion", "focus_improvement"]


def _sample(name: str, module: str) -> float:
    return REGISTRY.get_sample_value(name, {"module": module}) or 0.0


def test_background_generation_is_counted_in_metrics(client: TestClient, monkeypatch):
    monkeypatch.setattr(settings, "RECOMMENDATIONS_INLINE", False)
    generated = _sample("wc_recommendations_generated_total", "productivity")
    failed = _sample("wc_recommendation_failures_total", "mental")

    client.post(
        "/api/module/productivity",
        json={"sessionType": "deep_work", "duration": 45, "tasksCompleted": 0, "focusScore": 4},
        headers=auth(),
    )
    assert _sample("wc_recommendations_generated_total", "productivity") == generated + 2

    broken = MagicMock()
    broken.on_event_created.side_effect = RuntimeError("boom")
    app.state.services["event_service"].engine = broken
    r = client.post("/api/module/mental", json={"sessionType": "yoga", "moodBefore": 2, "moodAfter": 3}, headers=auth())
    assert r.status_code == 201
    assert _sample("wc_recommendation_failures_total", "mental") == failed + 1


def test_patch_recommendation_flags(client: TestClient):
    client.post("/api/module/training", json=TRAINING, headers=auth())
    rec_id = client.get("/api/recommendations", headers=auth()).json()[0]["id"]

    r = client.patch(f"/api/recommendations/{rec_id}", json={"isRead": True}, headers=auth())
    assert r.status_code == 200
    assert r.json()["isRead"] is True
    assert r.json()["isCompleted"] is False

    r = client.patch(f"/api/recommendations/{rec_id}", json={"isCompleted": True}, headers=auth())
    assert r.status_code == 200
    remaining = client.get("/api/recommendations", headers=auth()).json()
    assert rec_id not in [rec["id"] for rec in remaining]


def test_patch_of_another_users_recommendation_is_404(client: TestClient):
    client.post("/api/module/training", json=TRAINING, headers=auth("owner"))
    rec_id = client.get("/api/recommendations", headers=auth("owner")).json()[0]["id"]

    r = client.patch(f"/api/recommendations/{rec_id}", json={"isCompleted": True}, headers=auth("intruder"))
    assert r.status_code == 404
    assert client.get("/api/recommendations", headers=auth("intruder")).json() == []

    owner_recs = client.get("/api/recommendations", headers=auth("owner")).json()
    assert rec_id in [rec["id"] for rec in owner_recs]


def test_patch_unknown_recommendation_is_404(client: TestClient):
    r = client.patch("/api/recommendations/does-not-exist", json={"isRead": True}, headers=auth())
    assert r.status_code == 404


def test_dashboard_combines_analytics_and_top_three(client: TestClient):
    client.post("/api/module/training", json=TRAINING, headers=auth())
    client.post(
        "/api/module/productivity",
        json={"sessionType": "admin", "duration": 30, "tasksCompleted": 0, "focusScore": 3},
        headers=auth(),
    )

    r = client.get("/api/dashboard", headers=auth())
    assert r.status_code == 200
    body = r.json()
    assert [rec["priority"] for rec in body["recommendations"]] == [8, 7, 7]
    analytics = body["analytics"]
    assert analytics["training"]["completed"] == 1
    assert analytics["productivity"]["achieved"] == 30
    assert analytics["streakDays"] == 1
    assert 0 <= analytics["weeklyScore"] <= 100


def test_weekly_analytics_endpoint(client: TestClient):
    r = client.get("/api/dashboard/analytics", headers=auth())
    assert r.status_code == 200
    body = r.json()
    assert body["weeklyScore"] == 0
    assert body["mental"]["avgMoodBefore"] == 5.0
    assert body["nutrition"]["dailyCalorieGoal"] == 2000
    assert body["productivity"]["weeklyFocusGoal"] == 240


def test_profile_roundtrip_and_validation(client: TestClient):
    assert client.get("/api/profile", headers=auth()).json() is None

    r = client.post("/api/profile", json={"primaryGoal": "mental", "fitnessLevel": "beginner"}, headers=auth())
    assert r.status_code == 200
    assert r.json()["primaryGoal"] == "mental"

    r = client.post("/api/profile", json={"fitnessLevel": "olympian"}, headers=auth())
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "fitness_level"
    assert client.get("/api/profile", headers=auth()).json()["fitnessLevel"] == "beginner"


def test_billing_webhook_updates_subscription(client: TestClient):
    client.get("/api/auth/user", headers=auth("payer"))
    raw, headers = signed({
        "id": "evt_1",
        "type": "customer.subscription.created",
        "data": {"object": {"id": "sub_1", "customer": "cus_1", "metadata": {"userId": "payer", "tier": "premium"}}},
    })

    r = client.post("/api/webhook/billing", content=raw, headers=headers)
    assert r.status_code == 200
    assert r.json() == {"received": True}
    assert client.get("/api/auth/user", headers=auth("payer")).json()["subscriptionTier"] == "premium"

    raw, headers = signed({"type": "invoice.payment_failed", "data": {"object": {"customer": "cus_1"}}})
    client.post("/api/webhook/billing", content=raw, headers=headers)
    assert client.get("/api/auth/user", headers=auth("payer")).json()["subscriptionStatus"] == "past_due"


def test_billing_webhook_rejects_bad_signature(client: TestClient):
    raw, headers = signed({"type": "invoice.payment_succeeded", "data": {"object": {"customer": "cus_1"}}})
    headers["Billing-Signature"] = f"t={int(time.time())},v1=deadbeef"
    assert client.post("/api/webhook/billing", content=raw, headers=headers).status_code == 400
    assert client.post("/api/webhook/billing", content=raw).status_code == 400


def test_metrics_exposition(client: TestClient):
    client.post("/api/module/training", json=TRAINING, headers=auth())
    r = client.get("/metrics")
    assert r.status_code == 200
    assert "wc_events_created_total" in r.text
# --- END OF FILE ---
