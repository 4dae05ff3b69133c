import pytest

from tillflow.api.middleware import HSTS_VALUE

from tests.integration.helpers import OWNER


@pytest.mark.asyncio
async def test_request_id_is_echoed(client):
    response = await client.get("/api/me", headers={"X-Request-ID": "till-42"})

    assert response.headers["x-request-id"] == "till-42"


@pytest.mark.asyncio
async def test_request_id_is_generated(client):
    response = await client.get("/api/me")

    assert len(response.headers["x-request-id"]) == 36


@pytest.mark.asyncio
async def test_hsts_header(client):
    response = await client.get("/api/me")

    assert response.headers["strict-transport-security"] == HSTS_VALUE


@pytest.mark.asyncio
async def test_cross_origin_post_is_refused(client):
    response = await client.post(
        "/api/auth/register",
        json=OWNER,
        headers={"Origin": "https://evil.example"},
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_cross_site_fetch_is_refused(client):
    response = await client.post(
        "/api/auth/logout", headers={"Sec-Fetch-Site": "cross-site"}
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_same_origin_post_is_allowed(client):
    response = await client.post(
        "/api/auth/register",
        json=OWNER,
        headers={"Origin": "http://test", "Sec-Fetch-Site": "same-origin"},
    )

    assert response.status_code == 201


@pytest.mark.asyncio
async def test_cross_origin_get_is_allowed(client):
    response = await client.get("/api/me", headers={"Origin": "https://evil.example"})

    assert response.status_code == 401
