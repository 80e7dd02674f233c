"""Product catalog endpoints — Silver and Gold businesses only."""

import uuid

from fastapi import APIRouter, HTTPException, Query, status

from bizdir.api.deps import OwnerBusiness, Session
from bizdir.models.product import ProductCreate, ProductRead, ProductStatus, ProductUpdate
from bizdir.services import products as product_service
from bizdir.services.entitlement import EntitlementOutcome
from bizdir.services.errors import NotFoundError

router = APIRouter(prefix="/products", tags=["products"])

_DENIED = {
    EntitlementOutcome.FEATURE_LOCKED:
        "Product listings are available on the Silver and Gold packages.",
    EntitlementOutcome.QUOTA_EXCEEDED:
        "Product limit reached for your package. Upgrade to Gold for unlimited products.",
}


@router.get("", response_model=list[ProductRead])
async def list_products(
    business: OwnerBusiness,
    session: Session,
    status_filter: ProductStatus | None = Query(default=None, alias="status"),
) -> list[ProductRead]:
    products = await product_service.list_products(session, business.id, status_filter)
    return [ProductRead.model_validate(p) for p in products]


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreate,
    business: OwnerBusiness,
    session: Session,
) -> ProductRead:
    try:
        creation = await product_service.create_product(session, business.id, body)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    if creation.outcome is not EntitlementOutcome.ALLOWED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail=_DENIED[creation.outcome],
        )
    return ProductRead.model_validate(creation.product)


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: uuid.UUID,
    business: OwnerBusiness,
    session: Session,
) -> ProductRead:
    try:
        product = await product_service.get_owned_product(session, business.id, product_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ProductRead.model_validate(product)


@router.patch("/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: uuid.UUID,
    body: ProductUpdate,
    business: OwnerBusiness,
    session: Session,
) -> ProductRead:
    # Editing stays open after a downgrade; only new listings are gated.
    try:
        product = await product_service.update_product(session, business.id, product_id, body)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ProductRead.model_validate(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: uuid.UUID,
    business: OwnerBusiness,
    session: Session,
) -> None:
    try:
        await product_service.delete_product(session, business.id, product_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
