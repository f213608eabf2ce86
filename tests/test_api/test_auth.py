from fastapi.testclient import TestClient

from divecenter.main import app


def test_login_sets_session(client, seed):
    res = client.get("/api/auth/me")
    assert res.status_code == 200
    data = res.json()
    assert data["username"] == "staff_a"
    assert data["role"] == "staff"
    assert data["dive_center_id"] == seed["center_a"]


def test_login_wrong_password(seed):
    with TestClient(app) as c:
        res = c.post("/api/auth/login", json={"username": "staff_a", "password": "nope"})
        assert res.status_code == 401
        assert c.get("/api/auth/me").status_code == 401


def test_login_unknown_user(seed):
    with TestClient(app) as c:
        res = c.post("/api/auth/login", json={"username": "ghost", "password": "secret123"})
        assert res.status_code == 401


def test_logout_clears_session(client, seed):
    assert client.post("/api/auth/logout").status_code == 204
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/assignments").status_code == 401


def test_health(anon_client):
    res = anon_client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}
    assert res.headers["X-Content-Type-Options"] == "nosniff"
