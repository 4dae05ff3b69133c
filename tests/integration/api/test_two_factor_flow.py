import pyotp
import pytest

from tests.integration.helpers import OWNER, login, logout


@pytest.mark.asyncio
async def test_enroll_then_login_requires_code(owner_client):
    begun = await owner_client.post(
        "/api/two-factor/setup", json={"current_password": OWNER["password"]}
    )
    assert begun.status_code == 200
    body = begun.json()
    assert body["setup_pending"] is True
    assert body["qr_code"].startswith("data:image/png;base64,")
    secret = body["setup_secret"]
    assert pyotp.parse_uri(body["setup_uri"]).secret == secret

    confirmed = await owner_client.post(
        "/api/two-factor/confirm", json={"code": pyotp.TOTP(secret).now()}
    )
    assert confirmed.status_code == 200

    status = await owner_client.get("/api/two-factor")
    assert status.json()["enabled"] is True
    assert status.json()["setup_secret"] is None

    await logout(owner_client)

    without_code = await login(owner_client, OWNER["email"], OWNER["password"])
    assert without_code.status_code == 401
    assert without_code.json()["error"]["code"] == "TWO_FACTOR_REQUIRED"

    with_code = await login(
        owner_client, OWNER["email"], OWNER["password"], otp=pyotp.TOTP(secret).now()
    )
    assert with_code.status_code == 200


@pytest.mark.asyncio
async def test_setup_with_wrong_password(owner_client):
    response = await owner_client.post(
        "/api/two-factor/setup", json={"current_password": "nope"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "WRONG_PASSWORD"


@pytest.mark.asyncio
async def test_confirm_without_setup(owner_client):
    response = await owner_client.post("/api/two-factor/confirm", json={"code": "123456"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "TWO_FACTOR_NOT_READY"


@pytest.mark.asyncio
async def test_cancel_then_disable_is_conflict(owner_client):
    await owner_client.post("/api/two-factor/setup", json={"current_password": OWNER["password"]})

    cancelled = await owner_client.post("/api/two-factor/cancel")
    assert cancelled.status_code == 200
    assert (await owner_client.get("/api/two-factor")).json()["setup_pending"] is False

    disabled = await owner_client.post(
        "/api/two-factor/disable",
        json={"current_password": OWNER["password"], "code": "123456"},
    )
    assert disabled.status_code == 409
