from datetime import date, datetime, timedelta, timezone
import uuid

from fastapi.testclient import TestClient
from liftlog.main import app
from liftlog.models import BodyWeightLog
from liftlog.services.body_weight import BodyWeightService, weekly_average
from conftest import auth_headers

client = TestClient(app)

def headers():
    return auth_headers(f"user-{uuid.uuid4().hex[:8]}")

def today():
    return datetime.now(timezone.utc).date()

def log(H, weight, days_ago=0, **extra):
    d = (today() - timedelta(days=days_ago)).isoformat()
    r = client.post("/measurements/weight", headers=H, json={"weight": weight, "log_date": d, **extra})
    assert r.status_code == 201, r.text
    return r.json()

def test_log_and_list_newest_first():
    H = headers()
    log(H, 80.0, days_ago=2)
    log(H, 79.5, days_ago=0, notes="after run")
    log(H, 80.4, days_ago=1)

    r = client.get("/measurements/weight", headers=H)
    assert r.status_code == 200
    assert [e["weight"] for e in r.json()] == [79.5, 80.4, 80.0]
    assert r.json()[0]["notes"] == "after run"

def test_log_date_defaults_to_today():
    H = headers()
    r = client.post("/measurements/weight", headers=H, json={"weight": 72})
    assert r.status_code == 201
    assert r.json()["log_date"] == today().isoformat()

def test_list_in_range():
    H = headers()
    for days_ago, w in [(10, 81), (5, 80), (3, 79), (0, 78)]:
        log(H, w, days_ago=days_ago)
    start = (today() - timedelta(days=6)).isoformat()
    end = (today() - timedelta(days=1)).isoformat()
    r = client.get("/measurements/weight", headers=H, params={"start": start, "end": end})
    assert [e["weight"] for e in r.json()] == [79, 80]

def test_range_start_after_end_is_rejected():
    H = headers()
    r = client.get("/measurements/weight", headers=H, params={"start": "2024-03-10", "end": "2024-03-01"})
    assert r.status_code == 422

def test_invalid_weights_rejected():
    H = headers()
    for bad in (0, -3, 5000):
        r = client.post("/measurements/weight", headers=H, json={"weight": bad})
        assert r.status_code == 422
    r = client.post(
        "/measurements/weight",
        headers={**H, "Content-Type": "application/json"},
        content='{"weight": NaN}',
    )
    assert r.status_code == 422

def test_latest_and_missing_latest():
    H = headers()
    assert client.get("/measurements/weight/latest", headers=H).status_code == 404
    log(H, 70, days_ago=3)
    newest = log(H, 69, days_ago=1)
    r = client.get("/measurements/weight/latest", headers=H)
    assert r.status_code == 200
    assert r.json()["id"] == newest["id"]

def test_summary_weekly_average():
    H = headers()
    empty = client.get("/measurements/weight/summary", headers=H).json()
    assert empty == {"latest": None, "weekly_average": None, "entries_last_7_days": 0}

    log(H, 90, days_ago=20)
    log(H, 80, days_ago=6)
    log(H, 79, days_ago=0)
    body = client.get("/measurements/weight/summary", headers=H).json()
    assert body["weekly_average"] == 79.5
    assert body["entries_last_7_days"] == 2
    assert body["latest"]["weight"] == 79

def test_update_and_delete():
    H = headers()
    entry = log(H, 85)
    r = client.patch(f"/measurements/weight/{entry['id']}", headers=H, json={"weight": 84.2})
    assert r.status_code == 200
    assert r.json()["weight"] == 84.2
    assert r.json()["log_date"] == entry["log_date"]

    r = client.delete(f"/measurements/weight/{entry['id']}", headers=H)
    assert r.status_code == 204
    assert client.get("/measurements/weight", headers=H).json() == []
    assert client.delete(f"/measurements/weight/{entry['id']}", headers=H).status_code == 404

def test_entries_are_private():
    owner, other = headers(), headers()
    entry = log(owner, 60)
    assert client.get("/measurements/weight", headers=other).json() == []
    assert client.delete(f"/measurements/weight/{entry['id']}", headers=other).status_code == 404
    assert client.patch(f"/measurements/weight/{entry['id']}", headers=other, json={"weight": 1}).status_code == 404

def test_requires_auth():
    assert client.get("/measurements/weight").status_code == 401

# --- service ---

def entry(weight, d):
    return BodyWeightLog(user_id="u", weight=weight, log_date=d)

def test_weekly_average_falls_back_to_latest():
    day = date(2024, 3, 14)
    assert weekly_average([], day) is None
    old = [entry(75, date(2024, 2, 20)), entry(76, date(2024, 2, 1))]
    assert weekly_average(old, day) == 75
    # the window includes the day exactly 7 days back
    recent = [entry(74, day), entry(76, date(2024, 3, 7)), entry(90, date(2024, 3, 6))]
    assert weekly_average(recent, day) == 75

def test_summary_ignores_future_entries(session_factory):
    db = session_factory()
    weights = BodyWeightService(db)
    weights.add("u", 70, date(2024, 3, 20))
    weights.add("u", 72, date(2024, 3, 13))
    summary = weights.summary("u", date(2024, 3, 14))
    assert summary.latest.weight == 72
    assert summary.weekly_average == 72
    assert len(weights.history("u")) == 2
    db.close()

def test_required_fields_cannot_be_cleared():
    H = headers()
    entry = log(H, 85)
    r = client.patch(f"/measurements/weight/{entry['id']}", headers=H, json={"weight": None})
    assert r.status_code == 422
    r = client.patch(f"/measurements/weight/{entry['id']}", headers=H, json={"notes": None})
    assert r.status_code == 200
