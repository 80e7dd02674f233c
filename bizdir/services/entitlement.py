"""Entitlement engine — tier changes, advert quota and feature gates.

Every function that reads and then writes ``adverts_remaining`` or ``tier``
expects the Business row to have been loaded through ``lock_business`` in the
caller's transaction.
"""

from __future__ import annotations

import logging
import uuid
from enum import StrEnum

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from bizdir.core.entitlements import Feature, Tier, limits_for, parse_feature, parse_tier
from bizdir.models.base import utcnow
from bizdir.models.business import Business
from bizdir.services.errors import NotFoundError

logger = logging.getLogger(__name__)


class EntitlementOutcome(StrEnum):
    ALLOWED = "allowed"
    QUOTA_EXCEEDED = "quota_exceeded"
    FEATURE_LOCKED = "feature_locked"


def business_for_update(business_id: uuid.UUID):
    """``SELECT … FOR UPDATE`` on a single business row."""
    return select(Business).where(Business.id == business_id).with_for_update()


async def lock_business(session: AsyncSession, business_id: uuid.UUID) -> Business:
    """Load a business holding its row lock until commit / rollback.

    ``populate_existing`` makes sure an instance already in the identity map
    is refreshed from the locked row rather than served stale.
    """
    stmt = business_for_update(business_id).execution_options(populate_existing=True)
    result = await session.execute(stmt)
    business = result.scalar_one_or_none()
    if business is None:
        raise NotFoundError("Business")
    return business


def apply_tier_change(
    business: Business,
    new_tier: str | Tier,
    subscription_reference: str | None,
) -> None:
    """Move a business onto ``new_tier``, resetting its advert quota.

    The quota is overwritten with the tier's allotment, never added to, so
    repeated upgrade/downgrade cycles cannot accumulate slots.
    """
    tier = parse_tier(new_tier)
    previous = business.tier
    business.tier = tier
    business.subscription_reference = subscription_reference
    business.adverts_remaining = limits_for(tier).advert_slots
    business.updated_at = utcnow()
    logger.info(
        "Business %s tier %s -> %s (adverts_remaining=%d)",
        business.id, previous, tier, business.adverts_remaining,
    )


def consume_advert_slot(business: Business) -> EntitlementOutcome:
    if business.adverts_remaining <= 0:
        return EntitlementOutcome.QUOTA_EXCEEDED
    business.adverts_remaining -= 1
    business.updated_at = utcnow()
    return EntitlementOutcome.ALLOWED


def release_advert_slot(business: Business) -> None:
    # No ceiling: a business that downgraded can end up above its tier's
    # nominal allotment after deleting older adverts.
    business.adverts_remaining += 1
    business.updated_at = utcnow()


def grant_advert_slot(business: Business) -> None:
    """Add one purchased slot on top of whatever the business has left."""
    business.adverts_remaining += 1
    business.updated_at = utcnow()


def check_feature_access(business: Business, feature: str | Feature) -> bool:
    """Whether the business's tier unlocks ``feature``.

    Raises InvalidFeatureError for names outside the Feature enum.
    """
    return limits_for(business.tier).allows(parse_feature(feature))


def product_capacity(business: Business, current_count: int) -> EntitlementOutcome:
    """Whether one more product fits under the business's tier."""
    limits = limits_for(business.tier)
    if not limits.can_list_products:
        return EntitlementOutcome.FEATURE_LOCKED
    if limits.product_limit is not None and current_count >= limits.product_limit:
        return EntitlementOutcome.QUOTA_EXCEEDED
    return EntitlementOutcome.ALLOWED
