from __future__ import annotations

from datetime import datetime, timedelta, timezone

from flask.testing import FlaskClient

from finsight.domain.profiles import active_profile


def test_get_profile_returns_default(client: FlaskClient):
    resp = client.get("/api/profile")

    assert resp.status_code == 200
    assert resp.get_json()["name"] == "Executive Account"


def test_put_profile_persists(client: FlaskClient, repository):
    profile = client.get("/api/profile").get_json()
    profile["monthlySavings"] = 2000
    profile["lifeEvents"] = [{"id": "e1", "name": "Sabbatical", "yearIndex": 4, "oneTimeImpact": -12000}]

    resp = client.put("/api/profile", json=profile)

    assert resp.status_code == 200
    stored = active_profile(repository.load())
    assert stored.monthlySavings == 2000
    assert stored.lifeEvents[0].name == "Sabbatical"


def test_profile_summary(client: FlaskClient):
    body = client.get("/api/profile/summary").get_json()

    assert body["summary"]["netWorth"] == 51500
    assert body["estimatedAnnualTax"] == round(5147 + (78000 - 44725) * 0.22, 2)
    assert body["healthLabel"] is None
    assert body["debts"][0]["payoff"]["status"] == "active"


def test_profile_projection_uses_stored_profile(client: FlaskClient):
    rows = client.post("/api/profile/projection", json={"horizonYears": 5, "shockPreset": "boom"}).get_json()

    assert len(rows) == 6
    assert rows[0]["nominalBalance"] == 51500


def test_profile_projection_without_body_uses_defaults(client: FlaskClient):
    rows = client.post("/api/profile/projection").get_json()

    assert len(rows) == 31


def test_recurring_deposits_are_applied_and_saved(client: FlaskClient, repository):
    state = repository.load()
    profile = active_profile(state)
    stale = (datetime.now(timezone.utc) - timedelta(days=31)).isoformat()
    assets = [a.model_copy(update={"lastRecurringProcessedDate": stale}) for a in profile.assets]
    repository.save(state.model_copy(update={"profiles": [profile.model_copy(update={"assets": assets})]}))

    body = client.post("/api/profile/recurring").get_json()

    assert body["depositsApplied"] == 1
    debt = [a for a in active_profile(repository.load()).assets if a.type == "debt"]
    assert debt[0].balance == -8250
