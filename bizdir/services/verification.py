"""Admin verification of business listings."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from bizdir.models.base import utcnow
from bizdir.models.business import Business, VerificationStatus
from bizdir.models.user import User
from bizdir.services.errors import InvalidStatusError, NotFoundError
from bizdir.services.notifications import BUSINESS_VERIFIED, send_notification

logger = logging.getLogger(__name__)

# Statuses an administrator may set; "pending" is only ever the initial state.
DECISION_STATUSES = (VerificationStatus.VERIFIED, VerificationStatus.REJECTED)


def parse_decision(value: str | VerificationStatus) -> VerificationStatus:
    try:
        status = VerificationStatus(value)
    except ValueError:
        status = None
    if status not in DECISION_STATUSES:
        raise InvalidStatusError('Invalid status. Must be "verified" or "rejected"')
    return status


async def set_verification_status(
    session: AsyncSession,
    business_id: uuid.UUID,
    status: str | VerificationStatus,
) -> Business:
    """Record an admin decision. Verified businesses get a notification."""
    decision = parse_decision(status)
    business = await session.get(Business, business_id)
    if business is None:
        raise NotFoundError("Business")

    business.verification_status = decision
    business.updated_at = utcnow()
    session.add(business)
    await session.commit()
    await session.refresh(business)
    logger.info("Business %s verification set to %s", business_id, decision)

    if decision is VerificationStatus.VERIFIED:
        owner = await session.get(User, business.owner_id)
        await send_notification(BUSINESS_VERIFIED, {
            "business_id": str(business.id),
            "business_name": business.name,
            "owner_email": owner.email if owner else None,
        })
    return business


async def pending_businesses(session: AsyncSession) -> list[Business]:
    stmt = (
        select(Business)
        .where(Business.verification_status == VerificationStatus.PENDING)
        .order_by(Business.created_at.asc())  # type: ignore[union-attr]
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
