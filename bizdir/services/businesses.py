"""Business views and the admin summary."""

from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from bizdir.core.entitlements import Feature, Tier
from bizdir.models.business import Business, BusinessPublic, VerificationStatus
from bizdir.models.payment import Payment, PaymentRead, PaymentStatus
from bizdir.services.entitlement import check_feature_access

RECENT_PAYMENTS = 5


def public_profile(business: Business) -> BusinessPublic:
    """Directory card. Contact details and website only where the tier shows them."""
    show_contact = check_feature_access(business, Feature.CONTACT)
    show_website = check_feature_access(business, Feature.WEBSITE)
    return BusinessPublic(
        id=business.id,
        name=business.name,
        category=business.category,
        district=business.district,
        description=business.description,
        address=business.address,
        phone=business.phone if show_contact else None,
        email=business.email if show_contact else None,
        website=business.website if show_website else None,
        tier=business.tier,
        verified=business.verification_status == VerificationStatus.VERIFIED,
    )


async def admin_summary(session: AsyncSession) -> dict:
    by_status = dict((await session.execute(
        select(Business.verification_status, func.count())
        .group_by(Business.verification_status)
    )).all())

    by_tier = dict((await session.execute(
        select(Business.tier, func.count())
        .where(Business.verification_status == VerificationStatus.VERIFIED)
        .group_by(Business.tier)
    )).all())

    recent = (await session.execute(
        select(Payment)
        .order_by(Payment.created_at.desc())  # type: ignore[union-attr]
        .limit(RECENT_PAYMENTS)
    )).scalars().all()

    revenue = (await session.execute(
        select(func.coalesce(func.sum(Payment.amount), 0))
        .where(Payment.status == PaymentStatus.COMPLETED)
    )).scalar_one()

    return {
        "businesses": {
            "total": sum(by_status.values()),
            **{s.value: by_status.get(s, 0) for s in VerificationStatus},
        },
        "packages": {t.value: by_tier.get(t, 0) for t in Tier},
        "payments": {
            "recent": [PaymentRead.model_validate(p) for p in recent],
            "total_revenue": float(revenue or 0),
        },
    }
