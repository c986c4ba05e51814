from fastapi.testclient import TestClient
from liftlog.main import app
from liftlog.security import create_access_token
from conftest import auth_headers

client = TestClient(app)

def test_requires_auth():
    # no token -> 401s
    assert client.get("/session").status_code == 401
    assert client.post("/session", json={}).status_code == 401
    assert client.get("/workouts").status_code == 401
    assert client.get("/stats/gamification").status_code == 401

def test_garbage_token():
    r = client.get("/session", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Not authenticated"

def test_expired_token():
    token = create_access_token("u1", expires_minutes=-5)
    r = client.get("/session", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Token expired"

def test_token_without_subject():
    token = create_access_token("")
    r = client.get("/session", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401

def test_valid_token():
    r = client.get("/session", headers=auth_headers("u1"))
    assert r.status_code == 200
    assert r.json()["state"] == "idle"
