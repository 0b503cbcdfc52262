"""API tests against an offline journal (no remote endpoint configured)."""

import pytest
from fastapi.testclient import TestClient

from journal.config import Settings
from journal.main import create_app


def _settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'journal.db'}",
        remote_endpoint="",
        proxy_templates=[],
        auto_refresh_minutes=0,
    )


@pytest.fixture
def client(tmp_path):
    with TestClient(create_app(_settings(tmp_path))) as client:
        yield client


def _today(client) -> str:
    return client.app.state.context.today().isoformat()


def _form(client, **overrides) -> dict:
    today = _today(client)
    form = {
        "entryDate": today,
        "exitDate": today,
        "stockCode": "bbca",
        "entryPrice": 1000,
        "exitPrice": 1200,
        "lot": 1,
        "strategy": "Breakout",
        "notes": "opening range",
    }
    form.update(overrides)
    return form


def test_health(client):
    assert client.get("/api/system/health").json() == {"status": "ok"}


def test_unknown_paths_are_not_served(client):
    assert client.get("/index.html").status_code == 404
    assert client.get("/assets/app.js").status_code == 404


def test_create_trade_offline(client):
    resp = client.post("/api/trades", json=_form(client))

    assert resp.status_code == 201
    body = resp.json()
    assert body["source"] == "local"
    assert body["message"] == "Trade saved locally (offline)"
    assert body["trade"]["stockCode"] == "BBCA"
    assert body["trade"]["netPL"] == pytest.approx(19114.28)
    assert body["trade"]["isWin"] is True
    assert body["trade"]["id"] == body["tradeId"]


def test_invalid_input_rejected_before_sync(client):
    resp = client.post("/api/trades", json=_form(client, exitDate="2000-01-01"))
    assert resp.status_code == 422
    assert client.get("/api/trades").json() == []


def test_list_and_get_trade(client):
    created = client.post("/api/trades", json=_form(client)).json()
    client.post("/api/trades", json=_form(client, strategy="Scalp", exitPrice=990))

    rows = client.get("/api/trades").json()
    assert len(rows) == 2
    assert {r["plClass"] for r in rows} == {"positive", "negative"}

    only_scalp = client.get("/api/trades", params={"strategy": "Scalp"}).json()
    assert [r["trade"]["strategy"] for r in only_scalp] == ["Scalp"]

    trade = client.get(f"/api/trades/{created['tradeId']}").json()
    assert trade["notes"] == "opening range"
    assert client.get("/api/trades/nope").status_code == 404


def test_dashboard_reflects_mutations(client):
    empty = client.get("/api/dashboard/summary").json()
    assert empty == {"totalCount": 0, "winRate": 0, "dailyPL": 0, "totalPL": 0}
    equity = client.get("/api/dashboard/equity").json()
    assert equity == [{"date": _today(client), "cumulativePL": 0}]

    client.post("/api/trades", json=_form(client))
    client.post("/api/trades", json=_form(client, strategy="Scalp", exitPrice=990))

    summary = client.get("/api/dashboard/summary").json()
    assert summary["totalCount"] == 2
    assert summary["winRate"] == pytest.approx(50.0)
    assert summary["dailyPL"] == pytest.approx(summary["totalPL"])

    equity = client.get("/api/dashboard/equity").json()
    assert equity[-1]["cumulativePL"] == pytest.approx(summary["totalPL"])

    assert client.get("/api/dashboard/win-loss").json() == {"wins": 1, "losses": 1}
    strategies = client.get("/api/dashboard/strategies").json()
    assert list(strategies) == ["Breakout", "Scalp"]
    assert strategies["Breakout"]["winRate"] == 100

    full = client.get("/api/dashboard").json()
    assert full["summary"] == summary


def test_daily_report(client):
    client.post("/api/trades", json=_form(client))
    client.post("/api/trades", json=_form(client, entryDate="2024-01-02", exitDate="2024-01-03"))

    report = client.get("/api/report/daily").json()
    assert report["date"] == _today(client)
    assert len(report["rows"]) == 1
    assert report["rows"][0]["plClass"] == "positive"

    past = client.get("/api/report/daily", params={"day": "2024-01-02"}).json()
    assert len(past["rows"]) == 1


def test_delete_is_idempotent(client):
    trade_id = client.post("/api/trades", json=_form(client)).json()["tradeId"]

    first = client.delete(f"/api/trades/{trade_id}")
    second = client.delete(f"/api/trades/{trade_id}")

    assert first.status_code == second.status_code == 200
    assert first.json()["source"] == "local"
    assert client.get(f"/api/trades/{trade_id}").status_code == 404
    assert client.get("/api/dashboard/summary").json()["totalCount"] == 0


def test_refresh_and_sync_status(client):
    client.post("/api/trades", json=_form(client))

    refreshed = client.post("/api/system/refresh").json()
    assert refreshed["source"] == "local"
    assert refreshed["count"] == 1

    status = client.get("/api/system/sync").json()
    assert status["online"] is False
    assert status["strategies"] == ["local"]
    assert status["last_source"] == "local"
    assert status["trade_count"] == 1

    scheduler = client.get("/api/system/scheduler").json()
    assert scheduler["running"] is True


def test_trades_persist_across_restart(tmp_path):
    settings = _settings(tmp_path)
    with TestClient(create_app(settings)) as first:
        trade_id = first.post("/api/trades", json=_form(first)).json()["tradeId"]

    with TestClient(create_app(settings)) as second:
        ids = [r["trade"]["id"] for r in second.get("/api/trades").json()]
    assert ids == [trade_id]
