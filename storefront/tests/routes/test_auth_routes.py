from datetime import datetime, timedelta, timezone

from jose import jwt

from storefront.core.config import settings
from storefront.db.models import AdminUserOrm
from storefront.services.auth import (
    create_access_token, decode_access_token, ensure_default_admin, hash_password, verify_password
)

ADMIN_PASSWORD = "s3cret-pass"  # matches the admin_user fixture


def login(client, username="admin", password=ADMIN_PASSWORD):
    return client.post("/api/auth/login", json={"username": username, "password": password})


# --- services.auth ---

def test_password_hashing_roundtrip():
    hashed = hash_password("hunter22")
    assert hashed != "hunter22"
    assert verify_password("hunter22", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("hunter22", "not-a-hash")


def test_token_claims(admin_user):
    payload = decode_access_token(create_access_token(admin_user))
    assert payload["sub"] == "admin"
    assert payload["userId"] == admin_user.id


def test_expired_or_foreign_token_is_rejected(admin_user):
    assert decode_access_token(create_access_token(admin_user, expires_minutes=-1)) is None
    forged = jwt.encode(
        {"sub": "admin", "userId": admin_user.id, "exp": datetime.now(tz=timezone.utc) + timedelta(minutes=5)},
        "some-other-secret",
        algorithm=settings.JWT_ALGORITHM,
    )
    assert decode_access_token(forged) is None


def test_ensure_default_admin_only_when_empty(db_session, mocker):
    mocker.patch.object(settings, "ADMIN_USERNAME", "owner")
    mocker.patch.object(settings, "ADMIN_PASSWORD", "first-pass")
    created = ensure_default_admin(db_session)
    assert created.username == "owner"
    assert verify_password("first-pass", created.password_hash)
    assert ensure_default_admin(db_session) is None
    assert db_session.query(AdminUserOrm).count() == 1


# --- routes ---

def test_login_sets_session_cookie(client, admin_user):
    r = login(client)
    assert r.status_code == 200
    assert r.json()["username"] == "admin"
    assert r.json()["token_type"] == "bearer"
    assert settings.SESSION_COOKIE_NAME in r.cookies

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json() == {"id": admin_user.id, "username": "admin"}


def test_bearer_header_is_accepted(client, admin_user):
    token = create_access_token(admin_user)
    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200


def test_login_wrong_password(client, admin_user):
    r = login(client, password="nope")
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid username or password"}


def test_me_without_session(client):
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


def test_logout_clears_cookie(client, admin_user):
    login(client)
    r = client.post("/api/auth/logout")
    assert r.json() == {"success": True}
    assert client.get("/api/auth/me").status_code == 401


def test_change_username(client, db_session, admin_user):
    login(client)
    r = client.post(
        "/api/auth/change-username",
        json={"currentPassword": ADMIN_PASSWORD, "newUsername": "boss"},
    )
    assert r.status_code == 200
    assert r.json() == {"success": True, "username": "boss"}
    assert client.get("/api/auth/me").json()["username"] == "boss"
    assert login(client, username="boss").status_code == 200


def test_change_username_errors(client, db_session, admin_user):
    db_session.add(AdminUserOrm(username="taken", password_hash=hash_password("x" * 8)))
    db_session.commit()
    login(client)

    r = client.post("/api/auth/change-username", json={"currentPassword": ADMIN_PASSWORD})
    assert r.status_code == 400
    r = client.post("/api/auth/change-username", json={"currentPassword": "bad", "newUsername": "new"})
    assert r.status_code == 401
    r = client.post("/api/auth/change-username", json={"currentPassword": ADMIN_PASSWORD, "newUsername": "admin"})
    assert r.status_code == 400
    r = client.post("/api/auth/change-username", json={"currentPassword": ADMIN_PASSWORD, "newUsername": "taken"})
    assert r.status_code == 409


def test_change_password(client, admin_user):
    login(client)
    short = client.post("/api/auth/change-password", json={"currentPassword": ADMIN_PASSWORD, "newPassword": "123"})
    assert short.status_code == 400
    wrong = client.post("/api/auth/change-password", json={"currentPassword": "bad", "newPassword": "longenough"})
    assert wrong.status_code == 401

    ok = client.post("/api/auth/change-password", json={"currentPassword": ADMIN_PASSWORD, "newPassword": "longenough"})
    assert ok.json() == {"success": True}
    assert login(client, password="longenough").status_code == 200
    assert login(client).status_code == 401
