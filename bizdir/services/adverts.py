"""Advert lifecycle — creation against the slot quota, moderation, expiry."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date

from sqlalchemy import func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from bizdir.models.advert import (
    Advert,
    AdvertCreate,
    AdvertPlacement,
    AdvertStatus,
    AdvertUpdate,
)
from bizdir.models.base import utcnow
from bizdir.services.entitlement import (
    EntitlementOutcome,
    consume_advert_slot,
    lock_business,
    release_advert_slot,
)
from bizdir.services.errors import InvalidStatusError, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_ACTIVE_LIMIT = 5
MAX_ACTIVE_LIMIT = 20


@dataclass
class AdvertCreation:
    outcome: EntitlementOutcome
    adverts_remaining: int
    advert: Advert | None = None


async def create_advert(
    session: AsyncSession,
    business_id: uuid.UUID,
    body: AdvertCreate,
) -> AdvertCreation:
    """Consume one slot and insert a pending advert in a single transaction."""
    business = await lock_business(session, business_id)

    outcome = consume_advert_slot(business)
    if outcome is not EntitlementOutcome.ALLOWED:
        remaining = business.adverts_remaining
        await session.commit()  # releases the row lock, nothing is dirty
        return AdvertCreation(outcome=outcome, adverts_remaining=remaining)

    try:
        advert = Advert(
            business_id=business.id,
            status=AdvertStatus.PENDING,
            **body.model_dump(),
        )
        session.add(business)
        session.add(advert)
        await session.flush()
        remaining = business.adverts_remaining
        await session.commit()
    except Exception:
        await session.rollback()
        logger.exception("Advert creation failed for business %s", business_id)
        raise

    await session.refresh(advert)
    logger.info(
        "Advert %s created for business %s (%d slots left)",
        advert.id, business_id, remaining,
    )
    return AdvertCreation(
        outcome=EntitlementOutcome.ALLOWED, adverts_remaining=remaining, advert=advert,
    )


async def get_owned_advert(
    session: AsyncSession, business_id: uuid.UUID, advert_id: uuid.UUID
) -> Advert:
    stmt = select(Advert).where(
        Advert.id == advert_id,
        Advert.business_id == business_id,
    )
    result = await session.execute(stmt)
    advert = result.scalar_one_or_none()
    if advert is None:
        raise NotFoundError("Advert")
    return advert


async def list_adverts(
    session: AsyncSession,
    business_id: uuid.UUID,
    status: AdvertStatus | None = None,
) -> list[Advert]:
    stmt = select(Advert).where(Advert.business_id == business_id)
    if status is not None:
        stmt = stmt.where(Advert.status == status)
    stmt = stmt.order_by(Advert.created_at.desc())  # type: ignore[union-attr]
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def update_advert(
    session: AsyncSession,
    business_id: uuid.UUID,
    advert_id: uuid.UUID,
    body: AdvertUpdate,
) -> Advert:
    """Apply owner edits. Any edit sends the advert back to moderation."""
    advert = await get_owned_advert(session, business_id, advert_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(advert, field, value)
    advert.status = AdvertStatus.PENDING
    advert.updated_at = utcnow()
    session.add(advert)
    await session.commit()
    await session.refresh(advert)
    logger.info("Advert %s updated, pending re-moderation", advert.id)
    return advert


async def delete_advert(
    session: AsyncSession,
    business_id: uuid.UUID,
    advert_id: uuid.UUID,
) -> int:
    """Delete an advert and hand its slot back. Returns the new slot count."""
    business = await lock_business(session, business_id)
    advert = await get_owned_advert(session, business_id, advert_id)
    try:
        await session.delete(advert)
        release_advert_slot(business)
        session.add(business)
        await session.flush()
        remaining = business.adverts_remaining
        await session.commit()
    except Exception:
        await session.rollback()
        logger.exception("Advert deletion failed for advert %s", advert_id)
        raise

    logger.info("Advert %s deleted, business %s has %d slots", advert_id, business_id, remaining)
    return remaining


def parse_advert_status(value: str | AdvertStatus) -> AdvertStatus:
    try:
        return AdvertStatus(value)
    except ValueError as exc:
        valid = ", ".join(s.value for s in AdvertStatus)
        raise InvalidStatusError(f"Invalid advert status: {value}. Must be one of: {valid}") from exc


async def set_advert_status(
    session: AsyncSession,
    advert_id: uuid.UUID,
    status: str | AdvertStatus,
) -> Advert:
    """Admin moderation: approve, reject or expire an advert."""
    new_status = parse_advert_status(status)
    advert = await session.get(Advert, advert_id)
    if advert is None:
        raise NotFoundError("Advert")
    advert.status = new_status
    advert.updated_at = utcnow()
    session.add(advert)
    await session.commit()
    await session.refresh(advert)
    logger.info("Advert %s moderated: %s", advert_id, new_status)
    return advert


async def expire_old_adverts(session: AsyncSession, today: date) -> int:
    """Mark active adverts whose end date has passed as expired."""
    stmt = (
        update(Advert)
        .where(
            Advert.status == AdvertStatus.ACTIVE,
            Advert.end_date.is_not(None),  # type: ignore[union-attr]
            Advert.end_date < today,  # type: ignore[operator]
        )
        .values(status=AdvertStatus.EXPIRED, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    await session.commit()
    expired = result.rowcount or 0
    if expired:
        logger.info("Expired %d adverts past their end date", expired)
    return expired


async def active_adverts(
    session: AsyncSession,
    placement: AdvertPlacement,
    today: date,
    limit: int = DEFAULT_ACTIVE_LIMIT,
) -> list[Advert]:
    """Live adverts for a placement, in random rotation."""
    if limit < 1 or limit > MAX_ACTIVE_LIMIT:
        limit = DEFAULT_ACTIVE_LIMIT
    stmt = (
        select(Advert)
        .where(
            Advert.placement == placement,
            Advert.status == AdvertStatus.ACTIVE,
            or_(Advert.start_date.is_(None), Advert.start_date <= today),  # type: ignore[union-attr,operator]
            or_(Advert.end_date.is_(None), Advert.end_date >= today),  # type: ignore[union-attr,operator]
        )
        .order_by(func.random())
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
