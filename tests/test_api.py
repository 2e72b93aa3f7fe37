"""
API tests for the validation, history and bankroll endpoints
Run with: pytest tests/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient
from scipy.stats import poisson

from bet_validator.main import app
from bet_validator.services import bankroll, history


MATCH_RESULT = {
    "home_team": "Arsenal",
    "away_team": "Chelsea",
    "odds": 2.5,
    "bankroll": 1000.0,
    "home_wins": 10, "home_draws": 5, "home_losses": 5,
    "away_wins": 6, "away_draws": 4, "away_losses": 10,
    "outcome": "1",
}

HANDICAP = {
    "home_team": "Arsenal",
    "away_team": "Chelsea",
    "odds": 1.95,
    "bankroll": 1000.0,
    "handicap": -0.5,
    "home_wins": 10, "home_draws": 5, "home_losses": 5,
    "away_wins": 6, "away_draws": 4, "away_losses": 10,
    "bet_on": "HOME",
}


CORNERS = {
    "home_team": "Arsenal",
    "away_team": "Chelsea",
    "odds": 1.9,
    "bankroll": 1000.0,
    "line": 9.5,
    "bet_type": "OVER",
    "home_favor": 120, "home_against": 80, "home_games": 20,
    "away_favor": 100, "away_against": 90, "away_games": 20,
}


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("STARTING_BANKROLL", "1000")
    monkeypatch.setattr(history, "_history", None)
    monkeypatch.setattr(bankroll, "_ledger", None)
    with TestClient(app) as c:
        yield c


class TestValidateEndpoints:

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"

    def test_match_result(self, client):
        resp = client.post("/api/validate/match-result", json=MATCH_RESULT)
        assert resp.status_code == 200

        body = resp.json()
        assert body["market"] == "MATCH_RESULT"
        assert body["match"] == "Arsenal vs Chelsea - 1"
        assert body["implied_probability"] == pytest.approx(0.4)
        assert body["calculated_probability"] == pytest.approx(0.476190, abs=1e-6)
        assert body["recommended_stake"] == pytest.approx(31.746, abs=1e-3)
        assert body["recommendation"] == "BET"
        assert body["confidence_level"] == "HIGH"
        assert body["history_id"]

    def test_over_under(self, client):
        payload = {
            "home_team": "Arsenal",
            "away_team": "Chelsea",
            "odds": 1.9,
            "bankroll": 1000.0,
            "line": 2.5,
            "bet_type": "OVER",
            "home_scored": 30, "home_conceded": 20, "home_games": 20,
            "away_scored": 25, "away_conceded": 25, "away_games": 20,
            "history_over": 12, "history_under": 8,
        }
        resp = client.post("/api/validate/over-under", json=payload)
        assert resp.status_code == 200
        assert resp.json()["match"] == "Arsenal vs Chelsea - OVER 2.5"

    def test_cards_with_referee(self, client):
        payload = {
            "home_team": "Arsenal",
            "away_team": "Chelsea",
            "odds": 1.8,
            "bankroll": 1000.0,
            "line": 4.5,
            "bet_type": "UNDER",
            "home_average": 2.0, "home_games": 10,
            "away_average": 2.5, "away_games": 10,
            "referee_average": 6.0,
        }
        resp = client.post("/api/validate/cards", json=payload)
        assert resp.status_code == 200
        assert resp.json()["market"] == "CARDS"

    def test_btts(self, client):
        payload = {
            "home_team": "Arsenal",
            "away_team": "Chelsea",
            "odds": 1.8,
            "bankroll": 1000.0,
            "home_scored": 30, "home_conceded": 20, "home_games": 20,
            "away_scored": 25, "away_conceded": 25, "away_games": 20,
            "history_yes": 11, "history_no": 9,
            "bet_type": "YES",
        }
        resp = client.post("/api/validate/btts", json=payload)
        assert resp.status_code == 200

        body = resp.json()
        assert body["market"] == "BTTS"
        assert body["match"] == "Arsenal vs Chelsea - BTTS YES"
        # 0.5 · (0.75 · 0.625) + 0.5 · (11/20)
        assert body["calculated_probability"] == pytest.approx(0.509375)
        assert body["confidence_level"] == "HIGH"

    def test_btts_empty_history_rejected(self, client):
        payload = {
            "home_team": "Arsenal", "away_team": "Chelsea", "odds": 1.8, "bankroll": 1000.0,
            "home_scored": 30, "home_conceded": 20, "home_games": 20,
            "away_scored": 25, "away_conceded": 25, "away_games": 20,
            "history_yes": 0, "history_no": 0, "bet_type": "NO",
        }
        assert client.post("/api/validate/btts", json=payload).status_code == 422

    def test_corners(self, client):
        resp = client.post("/api/validate/corners", json=CORNERS)
        assert resp.status_code == 200

        body = resp.json()
        assert body["market"] == "CORNERS"
        assert body["match"] == "Arsenal vs Chelsea - OVER 9.5"
        # λ = (6 + 4.5)/2 + (5 + 4)/2 = 9.75
        assert body["calculated_probability"] == pytest.approx(poisson.sf(9, 9.75), rel=1e-9)

    @pytest.mark.parametrize("line", [200.5, 100.5])
    def test_line_beyond_range_rejected(self, client, line):
        resp = client.post("/api/validate/corners", json={**CORNERS, "line": line})
        assert resp.status_code == 422

    def test_longest_allowed_line(self, client):
        resp = client.post("/api/validate/corners", json={**CORNERS, "line": 99.5})
        assert resp.status_code == 200
        assert resp.json()["calculated_probability"] == pytest.approx(0.0, abs=1e-12)

    def test_handicap_label(self, client):
        resp = client.post("/api/validate/handicap", json=HANDICAP)
        assert resp.status_code == 200
        assert resp.json()["match"] == "Arsenal vs Chelsea - HOME -0.5"

    @pytest.mark.parametrize("override", [
        {"odds": 1.0},
        {"bankroll": 0},
        {"home_team": "   "},
        {"home_wins": 0, "home_draws": 0, "home_losses": 0},
        {"outcome": "3"},
    ])
    def test_invalid_payload_rejected(self, client, override):
        resp = client.post("/api/validate/match-result", json={**MATCH_RESULT, **override})
        assert resp.status_code == 422


class TestHistoryEndpoints:

    def test_history_newest_first_and_filtered(self, client):
        first = client.post("/api/validate/match-result", json=MATCH_RESULT).json()
        second = client.post("/api/validate/handicap", json=HANDICAP).json()

        entries = client.get("/api/history").json()
        assert [e["id"] for e in entries] == [second["history_id"], first["history_id"]]

        handicap_only = client.get("/api/history", params={"market": "HANDICAP"}).json()
        assert [e["id"] for e in handicap_only] == [second["history_id"]]

    def test_settle_win_updates_bankroll(self, client):
        entry_id = client.post("/api/validate/match-result", json=MATCH_RESULT).json()["history_id"]

        resp = client.put(f"/api/history/{entry_id}/outcome", json={"outcome": "WIN"})
        assert resp.status_code == 200
        assert resp.json()["outcome"] == "WIN"

        ledger = client.get("/api/bankroll").json()
        assert ledger["current_bankroll"] == pytest.approx(1047.619, abs=1e-2)
        assert ledger["entries"][0]["type"] == "WIN"

        stats = client.get("/api/history/stats").json()
        assert stats == {"total": 1, "won": 1, "lost": 0, "pending": 0}

    def test_settle_twice_conflicts(self, client):
        entry_id = client.post("/api/validate/match-result", json=MATCH_RESULT).json()["history_id"]
        client.put(f"/api/history/{entry_id}/outcome", json={"outcome": "LOSS"})

        resp = client.put(f"/api/history/{entry_id}/outcome", json={"outcome": "WIN"})
        assert resp.status_code == 409

    def test_settle_unknown_entry(self, client):
        resp = client.put("/api/history/nope/outcome", json={"outcome": "WIN"})
        assert resp.status_code == 404

    def test_clear_history(self, client):
        client.post("/api/validate/match-result", json=MATCH_RESULT)
        assert client.delete("/api/history").status_code == 200
        assert client.get("/api/history").json() == []


class TestBankrollEndpoints:

    def test_initial_bankroll_from_env(self, client):
        body = client.get("/api/bankroll").json()
        assert body["initial_bankroll"] == 1000.0
        assert body["entries"] == []

    def test_deposit_and_withdraw(self, client):
        client.post("/api/bankroll/deposit", json={"amount": 500})
        body = client.post("/api/bankroll/withdraw", json={"amount": 200}).json()

        assert body["current_bankroll"] == pytest.approx(1300)
        assert body["profit_loss"] == pytest.approx(300)
        assert [e["type"] for e in body["entries"]] == ["WITHDRAWAL", "DEPOSIT"]

    def test_overdraw_rejected(self, client):
        resp = client.post("/api/bankroll/withdraw", json={"amount": 5000})
        assert resp.status_code == 400

    def test_non_positive_amount_rejected(self, client):
        resp = client.post("/api/bankroll/deposit", json={"amount": 0})
        assert resp.status_code == 422

    def test_reset(self, client):
        client.post("/api/bankroll/deposit", json={"amount": 500})
        body = client.put("/api/bankroll", json={"amount": 2000}).json()

        assert body["initial_bankroll"] == 2000
        assert body["current_bankroll"] == 2000
        assert body["entries"] == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
