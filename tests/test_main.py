"""Tests for betting_ledger.main — FastAPI routes and endpoints."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from betting_ledger.store import BettingStore


@pytest.fixture
def api_store(test_settings, persistence, events):
    s = BettingStore(persistence=persistence, config=test_settings, autosave=True)
    s.set_events(events)
    return s


@pytest.fixture
def client(api_store):
    """Test client whose lifespan builds the fixture store."""
    from betting_ledger.main import app
    with patch("betting_ledger.main.build_store", return_value=api_store):
        with TestClient(app) as c:
            yield c


def _place(client, **overrides):
    body = {"eventId": "E1", "amount": 50, "odds": 2.5, "prediction": "home", **overrides}
    return client.post("/api/bets", json=body)


class TestHealth:
    """Tests for GET /api/health."""

    def test_ok(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json()["ok"] is True


class TestState:
    """Tests for GET /api/state and /api/status."""

    def test_state_shape(self, client):
        data = client.get("/api/state").json()
        assert set(data) >= {"events", "bets", "user", "loading", "error"}
        assert data["user"]["balance"] == 100
        assert data["events"][0]["homeTeam"] == "Flamengo"

    def test_status(self, client):
        data = client.get("/api/status").json()
        assert data["is_loading"] is False
        assert data["has_errors"] is False


class TestEvents:
    """Tests for the event routes."""

    def test_list(self, client):
        data = client.get("/api/events").json()
        assert data["count"] == 2

    def test_load(self, client, test_settings):
        data = client.post("/api/events/load").json()
        assert data["count"] == test_settings.DEMO_EVENT_COUNT
        assert data["error"] is None

    def test_update_status(self, client):
        resp = client.post("/api/events/E1/status", json={"status": "live"})
        assert resp.status_code == 200
        assert resp.json()["outcome"] == "updated"

    def test_update_status_unknown(self, client):
        resp = client.post("/api/events/nope/status", json={"status": "live"})
        assert resp.status_code == 404

    def test_update_status_invalid_value(self, client):
        resp = client.post("/api/events/E1/status", json={"status": "postponed"})
        assert resp.status_code == 422


class TestBets:
    """Tests for the bet routes."""

    def test_place(self, client):
        resp = _place(client)
        assert resp.status_code == 201
        data = resp.json()
        assert data["bet"]["potentialWin"] == 125
        assert data["bet"]["status"] == "active"
        assert data["user"]["balance"] == 50

    def test_place_insufficient(self, client):
        resp = _place(client, amount=150)
        assert resp.status_code == 400
        assert resp.json()["error"] == "insufficient_balance"

    def test_place_unknown_event(self, client):
        resp = _place(client, eventId="nope", amount=5)
        assert resp.status_code == 404
        assert resp.json()["error"] == "event_not_found"

    def test_place_odds_mismatch(self, client):
        resp = _place(client, odds=9.0)
        assert resp.status_code == 400
        assert resp.json()["error"] == "odds_mismatch"

    @pytest.mark.parametrize("overrides", [
        {"amount": 0.5},
        {"amount": 1000.01},
        {"odds": 1.005},
        {"odds": 50.5},
    ])
    def test_place_outside_limits(self, client, overrides):
        resp = _place(client, **overrides)
        assert resp.status_code == 422
        assert client.get("/api/bets").json()["count"] == 0

    def test_place_nan_amount(self, client):
        body = '{"eventId": "E1", "amount": NaN, "odds": 2.5, "prediction": "home"}'
        resp = client.post("/api/bets", content=body, headers={"Content-Type": "application/json"})
        assert resp.status_code == 422
        assert client.get("/api/bets").json()["count"] == 0

    def test_place_draw_not_offered(self, client):
        resp = _place(client, eventId="E2", prediction="draw", odds=3.0, amount=5)
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_prediction"

    def test_resolve(self, client):
        bet_id = _place(client).json()["bet"]["id"]
        resp = client.post(f"/api/bets/{bet_id}/resolve", json={"result": "won"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["outcome"] == "resolved"
        assert data["user"]["balance"] == 175

    def test_resolve_twice(self, client):
        bet_id = _place(client).json()["bet"]["id"]
        client.post(f"/api/bets/{bet_id}/resolve", json={"result": "lost"})
        resp = client.post(f"/api/bets/{bet_id}/resolve", json={"result": "won"})
        assert resp.status_code == 409
        assert client.get("/api/balance").json()["balance"] == 50

    def test_resolve_unknown(self, client):
        resp = client.post("/api/bets/bet_missing/resolve", json={"result": "won"})
        assert resp.status_code == 404

    def test_list_filtered(self, client):
        first = _place(client, amount=10).json()["bet"]["id"]
        _place(client, amount=10)
        client.post(f"/api/bets/{first}/resolve", json={"result": "won"})
        assert client.get("/api/bets").json()["count"] == 2
        won = client.get("/api/bets", params={"status": "won"}).json()
        assert [b["id"] for b in won["bets"]] == [first]


class TestStats:
    """Tests for GET /api/stats."""

    def test_no_data(self, client):
        data = client.get("/api/stats").json()
        assert data["winRate"] is None
        assert data["winRateDisplay"] == "N/A"

    def test_after_loss(self, client):
        bet_id = _place(client, amount=10).json()["bet"]["id"]
        client.post(f"/api/bets/{bet_id}/resolve", json={"result": "lost"})
        data = client.get("/api/stats").json()
        assert data["winRate"] == 0
        assert data["winRateDisplay"] == "0.0%"
        assert data["lostBets"] == 1


class TestBalance:
    """Tests for the balance routes."""

    def test_deposit(self, client):
        resp = client.post("/api/balance/deposit", json={"amount": 25})
        assert resp.status_code == 200
        assert resp.json()["balance"] == 125

    @pytest.mark.parametrize("amount", [-10, 5, 5000.01, 10.005])
    def test_deposit_outside_limits(self, client, amount):
        resp = client.post("/api/balance/deposit", json={"amount": amount})
        assert resp.status_code == 422
        assert client.get("/api/balance").json()["balance"] == 100

    def test_deposit_limits_inclusive(self, client):
        assert client.post("/api/balance/deposit", json={"amount": 10}).status_code == 200
        assert client.post("/api/balance/deposit", json={"amount": 5000}).json()["balance"] == 5110

    @pytest.mark.parametrize("route", ["/api/balance/deposit", "/api/balance/withdraw"])
    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_amount_rejected(self, client, route, literal):
        resp = client.post(
            route,
            content='{"amount": ' + literal + "}",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 422
        assert resp.json()["error"] == "validation_error"
        assert client.get("/api/balance").json()["balance"] == 100

    def test_withdraw(self, client):
        assert client.post("/api/balance/withdraw", json={"amount": 40}).json()["balance"] == 60

    def test_withdraw_too_much(self, client):
        resp = client.post("/api/balance/withdraw", json={"amount": 400})
        assert resp.status_code == 400
        assert client.get("/api/balance").json()["balance"] == 100


class TestPersistenceRoutes:
    """Tests for /api/save and /api/reset."""

    def test_save(self, client):
        assert client.post("/api/save").json()["saved"] is True

    def test_reset(self, client):
        _place(client)
        data = client.post("/api/reset").json()
        assert data["bets"] == []
        assert data["events"] == []
        assert data["user"]["balance"] == 100

    def test_clear_errors(self, client):
        _place(client, eventId="nope", amount=5)
        assert client.get("/api/status").json()["has_errors"] is True
        client.post("/api/status/clear-errors")
        assert client.get("/api/status").json()["has_errors"] is False
