from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from rentaltrust.auth.jwt import create_access_token, decode_token, get_password_hash, verify_password
from rentaltrust.core.rate_limit import LoginThrottle, throttle

REGISTRATION = {
    "username": "jsmith",
    "password": "s3cret-pass",
    "first_name": "John",
    "last_name": "Smith",
    "email": "jsmith@example.com",
    "phone": "555-123-4567",
    "user_type": "landlord",
}


def _login(client: TestClient, username: str, password: str):
    return client.post("/auth/login", data={"username": username, "password": password})


def test_password_hashing_round_trip():
    hashed = get_password_hash("changeme")
    assert hashed != "changeme"
    assert verify_password("changeme", hashed)
    assert not verify_password("wrong", hashed)


def test_access_token_carries_subject_and_type():
    payload = decode_token(create_access_token({"sub": "7"}))
    assert payload["sub"] == "7"
    assert payload["type"] == "access"
    assert "exp" in payload


def test_register_login_and_me(client):
    response = client.post("/auth/register", json=REGISTRATION)
    assert response.status_code == 201
    created = response.json()
    assert created["username"] == "jsmith"
    assert created["user_type"] == "landlord"
    assert "hashed_password" not in created
    assert "password" not in created

    login = _login(client, "jsmith", "s3cret-pass")
    assert login.status_code == 200
    token = login.json()
    assert token["token_type"] == "bearer"
    assert token["user_type"] == "landlord"

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token['access_token']}"})
    assert me.status_code == 200
    assert me.json()["id"] == created["id"]
    assert "hashed_password" not in me.json()


def test_duplicate_username_is_rejected(client):
    assert client.post("/auth/register", json=REGISTRATION).status_code == 201
    duplicate = client.post("/auth/register", json={**REGISTRATION, "email": "other@example.com"})
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "Username already exists"


def test_register_validates_payload(client):
    response = client.post("/auth/register", json={**REGISTRATION, "user_type": "admin"})
    assert response.status_code == 422
    assert response.json()["detail"] == "Validation failed."


def test_login_with_wrong_password_is_unauthorized(client):
    client.post("/auth/register", json=REGISTRATION)
    response = _login(client, "jsmith", "nope")
    assert response.status_code == 401
    assert response.json()["detail"] == "Incorrect username or password"
    assert _login(client, "nobody", "nope").status_code == 401


def test_protected_routes_require_valid_token(client):
    assert client.get("/auth/me").status_code == 401
    response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_token_for_deleted_user_is_rejected(client):
    token = create_access_token({"sub": "999"})
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_tenant_token_cannot_reach_landlord_dashboard(client):
    client.post("/auth/register", json={**REGISTRATION, "user_type": "tenant"})
    token = _login(client, "jsmith", "s3cret-pass").json()["access_token"]

    response = client.get("/dashboard", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403
    assert response.json()["detail"] == "Forbidden: Landlord access required"


def test_login_throttle_blocks_after_limit_until_window_passes():
    app = FastAPI()
    now = [1000.0]
    limiter = LoginThrottle(limit=2, window_seconds=60, clock=lambda: now[0])

    @app.post("/login", dependencies=[Depends(throttle("login", limiter=limiter))])
    def login_route():
        return {"ok": True}

    client = TestClient(app)
    assert client.post("/login").status_code == 200
    now[0] += 10
    assert client.post("/login").status_code == 200
    blocked = client.post("/login")
    assert blocked.status_code == 429
    assert blocked.headers["Retry-After"] == "50"

    now[0] += 50
    assert client.post("/login").status_code == 200

    limiter.reset()
    assert limiter.retry_after("login:elsewhere") == 0.0
