"""Admin verification, moderation and platform statistics."""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from bizdir.core.entitlements import Tier
from bizdir.models.advert import Advert, AdvertPlacement, AdvertStatus
from bizdir.models.business import VerificationStatus
from bizdir.services.errors import InvalidStatusError, NotFoundError
from bizdir.services.notifications import BUSINESS_VERIFIED
from bizdir.services.verification import set_verification_status

NOTIFY = "bizdir.services.verification.send_notification"


async def _register(client: AsyncClient) -> tuple[dict, str]:
    resp = await client.post("/v1/auth/register", json={
        "email": f"{uuid.uuid4().hex[:12]}@example.com",
        "password": "password1234",
        "business": {"name": "Taung Tailors"},
    })
    assert resp.status_code == 201, resp.text
    data = resp.json()
    return {"Authorization": f"Bearer {data['access_token']}"}, data["business"]["id"]


# ── Service ──────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_verify_notifies_owner(session, make_business):
    business = await make_business(Tier.GOLD)
    with patch(NOTIFY, new_callable=AsyncMock) as notify:
        updated = await set_verification_status(session, business.id, "verified")

    assert updated.verification_status == VerificationStatus.VERIFIED
    notify.assert_awaited_once()
    event, payload = notify.await_args.args
    assert event == BUSINESS_VERIFIED
    assert payload["business_id"] == str(business.id)
    assert payload["owner_email"].endswith("@example.com")


@pytest.mark.asyncio
async def test_verification_leaves_tier_and_quota_alone(session, make_business):
    business = await make_business(Tier.GOLD)
    with patch(NOTIFY, new_callable=AsyncMock):
        updated = await set_verification_status(session, business.id, "verified")
    assert updated.tier == Tier.GOLD
    assert updated.adverts_remaining == 3


@pytest.mark.asyncio
async def test_reject_does_not_notify(session, make_business):
    business = await make_business()
    with patch(NOTIFY, new_callable=AsyncMock) as notify:
        updated = await set_verification_status(session, business.id, VerificationStatus.REJECTED)
    assert updated.verification_status == VerificationStatus.REJECTED
    notify.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("status", ["pending", "approved", "VERIFIED", ""])
async def test_only_verified_or_rejected_accepted(session, make_business, status):
    business = await make_business()
    with pytest.raises(InvalidStatusError):
        await set_verification_status(session, business.id, status)
    await session.refresh(business)
    assert business.verification_status == VerificationStatus.PENDING


@pytest.mark.asyncio
async def test_verify_unknown_business(session):
    with pytest.raises(NotFoundError):
        await set_verification_status(session, uuid.uuid4(), "verified")


# ── HTTP ─────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_admin_routes_require_admin_role(client: AsyncClient):
    headers, business_id = await _register(client)
    resp = await client.put(
        f"/v1/admin/businesses/{business_id}/status",
        json={"status": "verified"}, headers=headers,
    )
    assert resp.status_code == 403
    assert (await client.get("/v1/admin/stats", headers=headers)).status_code == 403


@pytest.mark.asyncio
async def test_verify_over_http(client: AsyncClient, admin_headers):
    _, business_id = await _register(client)

    pending = (await client.get("/v1/admin/businesses/pending", headers=admin_headers)).json()
    assert business_id in {b["id"] for b in pending}

    with patch(NOTIFY, new_callable=AsyncMock) as notify:
        resp = await client.put(
            f"/v1/admin/businesses/{business_id}/status",
            json={"status": "verified"}, headers=admin_headers,
        )
    assert resp.status_code == 200, resp.text
    assert resp.json()["verification_status"] == "verified"
    notify.assert_awaited_once()

    pending = (await client.get("/v1/admin/businesses/pending", headers=admin_headers)).json()
    assert business_id not in {b["id"] for b in pending}


@pytest.mark.asyncio
async def test_invalid_status_over_http(client: AsyncClient, admin_headers):
    _, business_id = await _register(client)
    resp = await client.put(
        f"/v1/admin/businesses/{business_id}/status",
        json={"status": "pending"}, headers=admin_headers,
    )
    assert resp.status_code == 422

    resp = await client.put(
        f"/v1/admin/businesses/{uuid.uuid4()}/status",
        json={"status": "rejected"}, headers=admin_headers,
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_advert_moderation_and_expiry_sweep(client: AsyncClient, session, make_business, admin_headers):
    business = await make_business(Tier.GOLD)
    advert = Advert(
        business_id=business.id, title="Moderate me", placement=AdvertPlacement.BANNER,
    )
    session.add(advert)
    await session.commit()

    resp = await client.put(
        f"/v1/admin/adverts/{advert.id}/status",
        json={"status": "active"}, headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == AdvertStatus.ACTIVE

    resp = await client.put(
        f"/v1/admin/adverts/{advert.id}/status",
        json={"status": "live"}, headers=admin_headers,
    )
    assert resp.status_code == 422

    resp = await client.post("/v1/admin/adverts/expire", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["expired"] >= 0


@pytest.mark.asyncio
async def test_admin_stats(client: AsyncClient, session, make_business, admin_headers):
    await make_business(Tier.SILVER, verification_status=VerificationStatus.VERIFIED)

    resp = await client.get("/v1/admin/stats", headers=admin_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert set(data["packages"]) == {"Basic", "Bronze", "Silver", "Gold"}
    assert data["packages"]["Silver"] >= 1
    assert data["businesses"]["total"] >= data["businesses"]["verified"] >= 1
    assert isinstance(data["payments"]["recent"], list)
    assert data["payments"]["total_revenue"] >= 0
