from fastapi.testclient import TestClient
from liftlog.main import app
from conftest import auth_headers

client = TestClient(app)

PROFILE = {
    "goal": "build_muscle",
    "secondary_objectives": ["improve_endurance"],
    "experience": "beginner",
    "frequency": "2-3",
    "session_length": 30,
    "equipment": ["dumbbells", "bodyweight"],
    "constraints": ["back_issues"],
}

def test_plan_lifecycle():
    H = auth_headers("planner")
    assert client.get("/plans/current", headers=H).status_code == 404

    r = client.post("/plans", headers=H, json=PROFILE)
    assert r.status_code == 201
    plan = r.json()
    assert plan["name"] == "BUILD MUSCLE Plan"
    assert plan["description"] == "Personalized 2-3 day/week beginner program"
    assert [d["label"] for d in plan["days"]] == ["Day 1: Full Body A", "Day 2: Full Body B"]
    assert all(d["duration"] == 30 for d in plan["days"])
    assert plan["progression"]["weight_increment"] == 2.5

    r = client.get("/plans/current", headers=H)
    assert r.json()["id"] == plan["id"]
    assert r.json()["days"] == plan["days"]

    assert client.post("/plans/current/advance", headers=H).json()["current_week"] == 2
    assert client.post("/plans/current/restart", headers=H).json()["current_week"] == 1
    assert client.get("/plans/current/progression", headers=H).json() == []

    assert client.delete("/plans/current", headers=H).status_code == 204
    assert client.get("/plans/current", headers=H).status_code == 404

def test_new_plan_replaces_old():
    H = auth_headers("replanner")
    first = client.post("/plans", headers=H, json=PROFILE).json()
    second = client.post("/plans", headers=H, json={**PROFILE, "frequency": "5+"}).json()
    assert first["id"] != second["id"]
    assert len(second["days"]) == 5
    assert client.get("/plans/current", headers=H).json()["id"] == second["id"]

def test_invalid_profile():
    H = auth_headers("planner")
    assert client.post("/plans", headers=H, json={**PROFILE, "goal": "fly"}).status_code == 422
    assert client.post("/plans", headers=H, json={**PROFILE, "equipment": []}).status_code == 422

def test_profile_without_eligible_exercises_still_gets_a_plan():
    H = auth_headers("cardio-only")
    r = client.post("/plans", headers=H, json={**PROFILE, "equipment": ["cardio_machines"], "secondary_objectives": []})
    assert r.status_code == 201
    days = r.json()["days"]
    assert [d["label"] for d in days] == ["Day 1: Full Body A", "Day 2: Full Body B"]
    assert all(d["exercises"] == [] for d in days)
    assert client.get("/plans/current", headers=H).json()["days"] == days
    assert client.get("/plans/current/progression", headers=H).json() == []
