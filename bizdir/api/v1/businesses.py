"""Business profile endpoints — owner view and public directory card."""

import uuid

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, field_validator

from bizdir.api.deps import OwnerBusiness, Session
from bizdir.core.entitlements import Feature, limits_for
from bizdir.models.base import reject_null, utcnow
from bizdir.models.business import Business, BusinessPublic, BusinessRead
from bizdir.models.product import ProductRead, ProductStatus
from bizdir.services.businesses import public_profile
from bizdir.services.entitlement import check_feature_access
from bizdir.services.products import list_products

router = APIRouter(prefix="/businesses", tags=["businesses"])


# ── Schemas ──────────────────────────────────────────────────

class OwnBusinessResponse(BaseModel):
    business: BusinessRead
    entitlements: dict


class BusinessProfileUpdate(BaseModel):
    """Profile edits. Tier, quota and verification are never owner-editable."""
    name: str | None = None
    category: str | None = None
    district: str | None = None
    description: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None

    @field_validator("name", "category", "district")
    @classmethod
    def reject_null_fields(cls, value):
        return reject_null(value)


# ── Routes ───────────────────────────────────────────────────

@router.get("/me", response_model=OwnBusinessResponse)
async def get_own_business(business: OwnerBusiness) -> OwnBusinessResponse:
    return OwnBusinessResponse(
        business=BusinessRead.model_validate(business),
        entitlements=limits_for(business.tier).as_dict(),
    )


@router.patch("/me", response_model=BusinessRead)
async def update_own_business(
    body: BusinessProfileUpdate,
    business: OwnerBusiness,
    session: Session,
) -> BusinessRead:
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(business, field, value)
    business.updated_at = utcnow()
    session.add(business)
    await session.commit()
    await session.refresh(business)
    return BusinessRead.model_validate(business)


@router.get("/{business_id}", response_model=BusinessPublic)
async def get_business(business_id: uuid.UUID, session: Session) -> BusinessPublic:
    """Public listing; contact details depend on the business's package."""
    business = await session.get(Business, business_id)
    if business is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Business not found")
    return public_profile(business)


@router.get("/{business_id}/products", response_model=list[ProductRead])
async def get_business_products(business_id: uuid.UUID, session: Session) -> list[ProductRead]:
    """Active catalog of a business; empty while its package has no product catalog."""
    business = await session.get(Business, business_id)
    if business is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Business not found")
    if not check_feature_access(business, Feature.PRODUCTS):
        return []
    products = await list_products(session, business.id, ProductStatus.ACTIVE)
    return [ProductRead.model_validate(p) for p in products]
