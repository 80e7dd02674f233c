"""Product catalog — gated by tier, capped for Silver."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from bizdir.models.base import utcnow
from bizdir.models.product import Product, ProductCreate, ProductStatus, ProductUpdate
from bizdir.services.entitlement import (
    EntitlementOutcome,
    lock_business,
    product_capacity,
)
from bizdir.services.errors import NotFoundError

logger = logging.getLogger(__name__)


@dataclass
class ProductCreation:
    outcome: EntitlementOutcome
    product: Product | None = None


async def count_products(session: AsyncSession, business_id: uuid.UUID) -> int:
    stmt = select(func.count()).select_from(Product).where(Product.business_id == business_id)
    return (await session.execute(stmt)).scalar_one()


async def create_product(
    session: AsyncSession,
    business_id: uuid.UUID,
    body: ProductCreate,
) -> ProductCreation:
    # Count-then-insert runs under the business row lock.
    business = await lock_business(session, business_id)
    outcome = product_capacity(business, await count_products(session, business_id))
    if outcome is not EntitlementOutcome.ALLOWED:
        await session.commit()  # releases the row lock, nothing is dirty
        return ProductCreation(outcome=outcome)

    try:
        product = Product(business_id=business_id, **body.model_dump())
        session.add(product)
        await session.commit()
    except Exception:
        await session.rollback()
        logger.exception("Product creation failed for business %s", business_id)
        raise

    await session.refresh(product)
    logger.info("Product %s created for business %s", product.id, business_id)
    return ProductCreation(outcome=EntitlementOutcome.ALLOWED, product=product)


async def get_owned_product(
    session: AsyncSession, business_id: uuid.UUID, product_id: uuid.UUID
) -> Product:
    stmt = select(Product).where(
        Product.id == product_id,
        Product.business_id == business_id,
    )
    result = await session.execute(stmt)
    product = result.scalar_one_or_none()
    if product is None:
        raise NotFoundError("Product")
    return product


async def list_products(
    session: AsyncSession,
    business_id: uuid.UUID,
    status: ProductStatus | None = None,
) -> list[Product]:
    stmt = select(Product).where(Product.business_id == business_id)
    if status is not None:
        stmt = stmt.where(Product.status == status)
    stmt = stmt.order_by(Product.created_at.desc())  # type: ignore[union-attr]
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def update_product(
    session: AsyncSession,
    business_id: uuid.UUID,
    product_id: uuid.UUID,
    body: ProductUpdate,
) -> Product:
    product = await get_owned_product(session, business_id, product_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(product, field, value)
    product.updated_at = utcnow()
    session.add(product)
    await session.commit()
    await session.refresh(product)
    logger.info("Product %s updated", product.id)
    return product


async def delete_product(
    session: AsyncSession,
    business_id: uuid.UUID,
    product_id: uuid.UUID,
) -> None:
    product = await get_owned_product(session, business_id, product_id)
    await session.delete(product)
    await session.commit()
    logger.info("Product %s deleted", product_id)
