import pytest
from sqlmodel import select

from config import ApplicationConfig
from tillflow.domain.base import hash_token
from tillflow.domain.entities import AuditLog, Session

from tests.integration.helpers import OWNER, login, logout


@pytest.mark.asyncio
async def test_register_signs_owner_in(client, db_session):
    response = await client.post("/api/auth/register", json=OWNER)

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["role"] == "OWNER"
    assert body["user"]["email"] == "owner@shop.example"
    assert "token" not in body

    set_cookie = response.headers["set-cookie"].lower()
    assert f"{ApplicationConfig.SESSION_COOKIE_NAME}=" in set_cookie
    assert "httponly" in set_cookie
    assert "samesite=lax" in set_cookie
    assert "path=/" in set_cookie
    assert "expires=" in set_cookie

    token = response.cookies.get(ApplicationConfig.SESSION_COOKIE_NAME)
    assert len(token) == 64
    sessions = (await db_session.exec(select(Session))).all()
    assert [s.token_hash for s in sessions] == [hash_token(token)]

    me = await client.get("/api/me")
    assert me.status_code == 200
    assert me.json()["role"] == "OWNER"


@pytest.mark.asyncio
async def test_register_duplicate_email(owner_client):
    response = await owner_client.post("/api/auth/register", json=OWNER)

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_register_weak_password(client):
    response = await client.post("/api/auth/register", json={**OWNER, "password": "12345"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "WEAK_PASSWORD"


@pytest.mark.asyncio
async def test_login_sets_cookie_and_schedules_sweep(owner_client, sweeper):
    await logout(owner_client)
    owner_client.cookies.clear()

    response = await login(owner_client, "OWNER@shop.example", OWNER["password"])

    assert response.status_code == 200
    assert response.json()["user"]["role"] == "OWNER"
    assert response.cookies.get(ApplicationConfig.SESSION_COOKIE_NAME)
    assert [str(b) for b in sweeper.scheduled] == [response.json()["user"]["business_id"]]

    me = await owner_client.get("/api/me")
    assert me.status_code == 200


@pytest.mark.asyncio
async def test_login_wrong_password(owner_client, db_session, sweeper):
    owner_client.cookies.clear()

    response = await login(owner_client, OWNER["email"], "not-it")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"
    assert sweeper.scheduled == []
    actions = (await db_session.exec(select(AuditLog.action))).all()
    assert "LOGIN_FAILED" in actions


@pytest.mark.asyncio
async def test_unknown_email_looks_like_wrong_password(client):
    response = await login(client, "ghost@shop.example", "whatever")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_missing_credentials(client):
    response = await login(client, "", "")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_lockout_sets_retry_after(owner_client):
    owner_client.cookies.clear()
    for _ in range(3):
        await login(owner_client, OWNER["email"], "not-it")

    response = await login(owner_client, OWNER["email"], OWNER["password"])

    assert response.status_code == 429
    assert response.json()["error"]["code"] == "TOO_MANY_ATTEMPTS"
    assert int(response.headers["retry-after"]) > 0


@pytest.mark.asyncio
async def test_forwarded_for_is_ignored_by_default(owner_client, monkeypatch):
    monkeypatch.setattr(ApplicationConfig, "TRUST_PROXY_HEADERS", False)
    owner_client.cookies.clear()
    for i in range(3):
        await owner_client.post(
            "/api/auth/login",
            json={"email": OWNER["email"], "password": "not-it"},
            headers={"X-Forwarded-For": f"203.0.113.{i}"},
        )

    response = await owner_client.post(
        "/api/auth/login",
        json={"email": OWNER["email"], "password": OWNER["password"]},
        headers={"X-Forwarded-For": "203.0.113.99"},
    )

    assert response.status_code == 429


@pytest.mark.asyncio
async def test_forwarded_for_keys_throttle_when_proxy_trusted(owner_client, monkeypatch):
    monkeypatch.setattr(ApplicationConfig, "TRUST_PROXY_HEADERS", True)
    owner_client.cookies.clear()
    for _ in range(3):
        await owner_client.post(
            "/api/auth/login",
            json={"email": OWNER["email"], "password": "not-it"},
            headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
        )

    direct = await login(owner_client, OWNER["email"], OWNER["password"])
    assert direct.status_code == 200

    response = await owner_client.post(
        "/api/auth/login",
        json={"email": OWNER["email"], "password": OWNER["password"]},
        headers={"X-Forwarded-For": "203.0.113.7"},
    )
    assert response.status_code == 429


@pytest.mark.asyncio
async def test_logout_deletes_session_and_clears_cookie(owner_client, db_session):
    response = await logout(owner_client)

    assert response.status_code == 200
    assert response.json()["status"] == "signed_out"
    assert (await db_session.exec(select(Session))).all() == []

    me = await owner_client.get("/api/me")
    assert me.status_code == 401


@pytest.mark.asyncio
async def test_logout_without_session_is_ok(client):
    response = await logout(client)

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_expired_session_is_rejected(owner_client, db_session):
    session = (await db_session.exec(select(Session))).one()
    session.expires_at = session.created_at
    db_session.add(session)
    await db_session.commit()

    response = await owner_client.get("/api/me")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHENTICATED"


@pytest.mark.asyncio
async def test_forged_cookie_is_rejected(client):
    client.cookies.set(ApplicationConfig.SESSION_COOKIE_NAME, "f" * 64)

    response = await client.get("/api/me")

    assert response.status_code == 401
