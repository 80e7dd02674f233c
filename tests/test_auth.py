"""Registration, login and JWT handling."""

import uuid
from datetime import timedelta

import pytest
from httpx import AsyncClient

from bizdir.core.security import create_jwt


def _registration(email: str) -> dict:
    return {
        "email": email,
        "password": "supersecret123",
        "display_name": "Naledi",
        "business": {"name": "Naledi Nails", "district": "Ngaka Modiri Molema"},
    }


@pytest.mark.asyncio
async def test_register_creates_basic_pending_business(client: AsyncClient):
    email = f"{uuid.uuid4().hex[:12]}@example.com"
    resp = await client.post("/v1/auth/register", json=_registration(email))
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == email
    assert data["user"]["role"] == "owner"

    business = data["business"]
    assert business["tier"] == "Basic"
    assert business["verification_status"] == "pending"
    assert business["adverts_remaining"] == 0
    assert business["owner_id"] == data["user"]["id"]


@pytest.mark.asyncio
async def test_duplicate_email_rejected(client: AsyncClient):
    payload = _registration(f"{uuid.uuid4().hex[:12]}@example.com")
    assert (await client.post("/v1/auth/register", json=payload)).status_code == 201
    assert (await client.post("/v1/auth/register", json=payload)).status_code == 409


@pytest.mark.asyncio
async def test_login_and_me(client: AsyncClient):
    email = f"{uuid.uuid4().hex[:12]}@example.com"
    await client.post("/v1/auth/register", json=_registration(email))

    resp = await client.post("/v1/auth/login", json={
        "email": email, "password": "supersecret123",
    })
    assert resp.status_code == 200
    token = resp.json()["access_token"]

    resp = await client.get("/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["user"]["email"] == email
    assert data["business"]["name"] == "Naledi Nails"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient):
    email = f"{uuid.uuid4().hex[:12]}@example.com"
    await client.post("/v1/auth/register", json=_registration(email))
    resp = await client.post("/v1/auth/login", json={"email": email, "password": "nope-nope"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_short_password_rejected(client: AsyncClient):
    payload = _registration(f"{uuid.uuid4().hex[:12]}@example.com")
    payload["password"] = "short"
    assert (await client.post("/v1/auth/register", json=payload)).status_code == 422


@pytest.mark.asyncio
async def test_invalid_token_rejected(client: AsyncClient):
    resp = await client.get(
        "/v1/businesses/me", headers={"Authorization": "Bearer totally-fake-token"},
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_expired_token_rejected(client: AsyncClient):
    token = create_jwt(
        subject=str(uuid.uuid4()), business_id=str(uuid.uuid4()),
        expires_delta=timedelta(minutes=-5),
    )
    resp = await client.get("/v1/businesses/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_token_for_missing_business_is_404(client: AsyncClient):
    token = create_jwt(subject=str(uuid.uuid4()), business_id=str(uuid.uuid4()))
    resp = await client.get("/v1/businesses/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 404
