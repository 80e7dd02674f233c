"""Product catalog gating by tier."""

import uuid

import pytest
from httpx import AsyncClient
from pydantic import ValidationError

from bizdir.core.entitlements import SILVER_PRODUCT_LIMIT, Tier
from bizdir.models.business import Business
from bizdir.models.product import Product, ProductCreate, ProductUpdate
from bizdir.services.entitlement import EntitlementOutcome, apply_tier_change
from bizdir.services.products import count_products, create_product


async def _register(client: AsyncClient, tier: Tier, session) -> dict:
    resp = await client.post("/v1/auth/register", json={
        "email": f"{uuid.uuid4().hex[:12]}@example.com",
        "password": "password1234",
        "business": {"name": "Madikwe Mechanics"},
    })
    assert resp.status_code == 201, resp.text
    data = resp.json()
    if tier is not Tier.BASIC:
        business = await session.get(Business, uuid.UUID(data["business"]["id"]))
        apply_tier_change(business, tier, "test-subscription")
        session.add(business)
        await session.commit()
    return {"Authorization": f"Bearer {data['access_token']}"}


@pytest.mark.asyncio
@pytest.mark.parametrize("tier", [Tier.BASIC, Tier.BRONZE])
async def test_products_locked_below_silver(session, make_business, tier):
    business = await make_business(tier)
    creation = await create_product(session, business.id, ProductCreate(name="Tyres"))
    assert creation.outcome is EntitlementOutcome.FEATURE_LOCKED
    assert await count_products(session, business.id) == 0


@pytest.mark.asyncio
async def test_silver_product_limit(session, make_business):
    business = await make_business(Tier.SILVER)
    session.add_all([
        Product(business_id=business.id, name=f"Item {i}")
        for i in range(SILVER_PRODUCT_LIMIT - 1)
    ])
    await session.commit()

    last = await create_product(session, business.id, ProductCreate(name="Last one", price=10))
    assert last.outcome is EntitlementOutcome.ALLOWED
    assert last.product.price == 10

    over = await create_product(session, business.id, ProductCreate(name="One too many"))
    assert over.outcome is EntitlementOutcome.QUOTA_EXCEEDED
    assert await count_products(session, business.id) == SILVER_PRODUCT_LIMIT


@pytest.mark.asyncio
async def test_gold_is_unlimited(session, make_business):
    business = await make_business(Tier.GOLD)
    session.add_all([
        Product(business_id=business.id, name=f"Item {i}")
        for i in range(SILVER_PRODUCT_LIMIT)
    ])
    await session.commit()

    creation = await create_product(session, business.id, ProductCreate(name="Twenty-first"))
    assert creation.outcome is EntitlementOutcome.ALLOWED


@pytest.mark.asyncio
async def test_product_crud_over_http(client: AsyncClient, session):
    headers = await _register(client, Tier.SILVER, session)

    resp = await client.post("/v1/products", json={
        "name": "Service package", "price": 450.0,
    }, headers=headers)
    assert resp.status_code == 201, resp.text
    product_id = resp.json()["id"]

    resp = await client.patch(f"/v1/products/{product_id}", json={
        "status": "inactive",
    }, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "inactive"
    assert resp.json()["name"] == "Service package"

    active = (await client.get("/v1/products?status=active", headers=headers)).json()
    assert active == []

    assert (await client.delete(f"/v1/products/{product_id}", headers=headers)).status_code == 204
    assert (await client.get(f"/v1/products/{product_id}", headers=headers)).status_code == 404


@pytest.mark.asyncio
async def test_product_create_forbidden_for_bronze(client: AsyncClient, session):
    headers = await _register(client, Tier.BRONZE, session)
    resp = await client.post("/v1/products", json={"name": "Nope"}, headers=headers)
    assert resp.status_code == 403
    assert "Silver" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_negative_price_rejected(client: AsyncClient, session):
    headers = await _register(client, Tier.GOLD, session)
    resp = await client.post("/v1/products", json={"name": "Refund", "price": -5}, headers=headers)
    assert resp.status_code == 422


def test_update_schema_rejects_null_name_and_status():
    with pytest.raises(ValidationError):
        ProductUpdate(name=None)
    with pytest.raises(ValidationError):
        ProductUpdate(status=None)
    assert ProductUpdate(price=None).model_dump(exclude_unset=True) == {"price": None}


@pytest.mark.asyncio
async def test_product_patch_null_name_rejected(client: AsyncClient, session):
    headers = await _register(client, Tier.SILVER, session)
    product_id = (await client.post("/v1/products", json={
        "name": "Oil change", "price": 650.0,
    }, headers=headers)).json()["id"]

    resp = await client.patch(f"/v1/products/{product_id}", json={"name": None}, headers=headers)
    assert resp.status_code == 422

    resp = await client.patch(f"/v1/products/{product_id}", json={"price": None}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["name"] == "Oil change"
    assert resp.json()["price"] is None
