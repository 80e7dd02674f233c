"""Owner and public business views."""

import uuid

import pytest
from httpx import AsyncClient

from bizdir.core.entitlements import Tier
from bizdir.models.business import VerificationStatus
from bizdir.models.product import Product, ProductStatus
from bizdir.services.businesses import public_profile

CONTACT = {
    "phone": "+27 18 000 0000",
    "email": "hello@example.com",
    "website": "https://example.com",
}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("tier", "shows_contact", "shows_website"),
    [
        (Tier.BASIC, False, False),
        (Tier.BRONZE, True, False),
        (Tier.SILVER, True, True),
        (Tier.GOLD, True, True),
    ],
)
async def test_public_profile_masks_by_tier(make_business, tier, shows_contact, shows_website):
    business = await make_business(tier, **CONTACT)
    profile = public_profile(business)
    assert (profile.phone == CONTACT["phone"]) is shows_contact
    assert (profile.email == CONTACT["email"]) is shows_contact
    assert (profile.website == CONTACT["website"]) is shows_website
    assert profile.verified is False


@pytest.mark.asyncio
async def test_public_profile_over_http(client: AsyncClient, make_business):
    business = await make_business(
        Tier.BRONZE, verification_status=VerificationStatus.VERIFIED, **CONTACT,
    )
    resp = await client.get(f"/v1/businesses/{business.id}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["phone"] == CONTACT["phone"]
    assert data["website"] is None
    assert data["verified"] is True
    assert "adverts_remaining" not in data


@pytest.mark.asyncio
async def test_public_profile_unknown_business(client: AsyncClient):
    assert (await client.get(f"/v1/businesses/{uuid.uuid4()}")).status_code == 404


@pytest.mark.asyncio
async def test_owner_can_edit_profile_but_not_entitlements(client: AsyncClient):
    resp = await client.post("/v1/auth/register", json={
        "email": f"{uuid.uuid4().hex[:12]}@example.com",
        "password": "password1234",
        "business": {"name": "Vryburg Vets"},
    })
    headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}

    resp = await client.patch("/v1/businesses/me", json={
        "description": "Large and small animals",
        "tier": "Gold",
        "adverts_remaining": 99,
    }, headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["description"] == "Large and small animals"
    assert data["tier"] == "Basic"
    assert data["adverts_remaining"] == 0

    me = (await client.get("/v1/businesses/me", headers=headers)).json()
    assert me["entitlements"]["advert_slots"] == 0
    assert me["entitlements"]["features"]["contact"] is False


@pytest.mark.asyncio
async def test_profile_patch_rejects_null_name(client: AsyncClient):
    resp = await client.post("/v1/auth/register", json={
        "email": f"{uuid.uuid4().hex[:12]}@example.com",
        "password": "password1234",
        "business": {"name": "Delareyville Dairy"},
    })
    headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}

    for body in ({"name": None}, {"category": None}, {"district": None}):
        resp = await client.patch("/v1/businesses/me", json=body, headers=headers)
        assert resp.status_code == 422

    resp = await client.patch("/v1/businesses/me", json={"phone": None}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["name"] == "Delareyville Dairy"


@pytest.mark.asyncio
async def test_public_products_lists_active_only(client: AsyncClient, session, make_business):
    business = await make_business(Tier.SILVER)
    session.add_all([
        Product(business_id=business.id, name="Bread", price=18.0),
        Product(business_id=business.id, name="Old stock", status=ProductStatus.INACTIVE),
    ])
    await session.commit()

    resp = await client.get(f"/v1/businesses/{business.id}/products")
    assert resp.status_code == 200
    assert [p["name"] for p in resp.json()] == ["Bread"]


@pytest.mark.asyncio
async def test_public_products_empty_without_catalog(client: AsyncClient, session, make_business):
    business = await make_business(Tier.BRONZE)
    session.add(Product(business_id=business.id, name="Left over from Silver"))
    await session.commit()

    resp = await client.get(f"/v1/businesses/{business.id}/products")
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_public_products_unknown_business(client: AsyncClient):
    resp = await client.get(f"/v1/businesses/{uuid.uuid4()}/products")
    assert resp.status_code == 404
