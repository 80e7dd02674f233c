"""Payments — initiation, gateway redirect and processor-driven finalization.

Flow:
  1. Owner initiates an upgrade or an extra advert slot → pending Payment
  2. Owner is redirected to the gateway checkout URL
  3. Gateway posts a notification to the webhook → ``finalize_payment``
     moves the payment to completed/failed and applies the business effect
     in the same transaction

A payment is finalized at most once. Re-delivered notifications are reported
as ``ALREADY_FINALIZED`` and change nothing.
"""

from __future__ import annotations

import hashlib
import json
import logging
import secrets
import time
import uuid
from enum import StrEnum
from urllib.parse import urlencode

from sqlalchemy import case, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from bizdir.core.config import Settings, get_settings
from bizdir.core.entitlements import InvalidTierError, Tier, parse_tier
from bizdir.core.pricing import ADVERT_SLOT_PRICE, is_purchasable, upgrade_price
from bizdir.models.base import utcnow
from bizdir.models.business import Business
from bizdir.models.payment import Payment, PaymentStatus, PaymentType
from bizdir.services.entitlement import apply_tier_change, grant_advert_slot, lock_business
from bizdir.services.errors import NotFoundError

logger = logging.getLogger(__name__)

# Processor status that marks a successful payment; anything else is a failure.
PROCESSOR_COMPLETE = "COMPLETE"

_REFERENCE_ATTEMPTS = 5


class PaymentOutcome(StrEnum):
    COMPLETED = "completed"
    FAILED = "failed"
    ALREADY_FINALIZED = "already_finalized"


def make_reference(prefix: str, now: float | None = None) -> str:
    """``<prefix>_<unix timestamp>_<4 random digits>``, e.g. MPBH_1718000000_4821."""
    timestamp = int(now if now is not None else time.time())
    return f"{prefix}_{timestamp}_{secrets.randbelow(9000) + 1000}"


async def generate_reference(session: AsyncSession, prefix: str) -> str:
    for _ in range(_REFERENCE_ATTEMPTS):
        reference = make_reference(prefix)
        existing = await session.execute(
            select(Payment.id).where(Payment.reference == reference)
        )
        if existing.scalar_one_or_none() is None:
            return reference
    raise RuntimeError("Could not generate a unique payment reference")


def payment_succeeded(processor_status: str | None) -> bool:
    return (processor_status or "").strip().upper() == PROCESSOR_COMPLETE


async def initiate_payment(
    session: AsyncSession,
    business: Business,
    payment_type: PaymentType,
    package_type: str | Tier | None = None,
) -> Payment:
    """Create a pending payment for an upgrade or one extra advert slot.

    Raises InvalidTierError when an upgrade targets a tier that is not for sale.
    """
    if payment_type == PaymentType.UPGRADE:
        if package_type is None:
            raise InvalidTierError("Package type is required for upgrades")
        tier = parse_tier(package_type)
        if not is_purchasable(tier):
            raise InvalidTierError(f"{tier} package cannot be purchased")
        amount = upgrade_price(tier)
    else:
        # Slot purchases are recorded against the tier held at purchase time.
        tier = business.tier
        amount = ADVERT_SLOT_PRICE

    settings = get_settings()
    payment = Payment(
        business_id=business.id,
        reference=await generate_reference(session, settings.payment_reference_prefix),
        amount=amount,
        payment_type=payment_type,
        package_type=tier,
        status=PaymentStatus.PENDING,
    )
    session.add(payment)
    await session.commit()
    await session.refresh(payment)

    logger.info(
        "Payment initiated: id=%s business=%s amount=%.2f type=%s package=%s",
        payment.id, business.id, amount, payment_type, tier,
    )
    return payment


def build_checkout_url(
    payment: Payment,
    business: Business,
    settings: Settings | None = None,
) -> str:
    """Gateway redirect URL for a pending payment (PayFast field names)."""
    settings = settings or get_settings()
    if payment.payment_type == PaymentType.UPGRADE:
        item_name = f"Upgrade to {payment.package_type} Package"
        item_description = f"Membership upgrade for business ID: {business.id}"
    else:
        item_name = "Additional Advert Slot"
        item_description = f"Additional advert slot for business ID: {business.id}"

    fields = {
        "merchant_id": settings.payfast_merchant_id,
        "merchant_key": settings.payfast_merchant_key,
        "return_url": f"{settings.frontend_url}/dashboard/payment-return?reference={payment.reference}",
        "cancel_url": f"{settings.frontend_url}/dashboard/payment-cancel?reference={payment.reference}",
        "notify_url": f"{settings.api_url}/v1/payments/webhook",
        "email_address": business.email or "",
        "m_payment_id": payment.reference,
        "amount": f"{payment.amount:.2f}",
        "item_name": item_name,
        "item_description": item_description,
    }
    fields = {k: v for k, v in fields.items() if v != ""}

    if settings.payfast_passphrase:
        to_sign = urlencode({**fields, "passphrase": settings.payfast_passphrase})
        fields["signature"] = hashlib.md5(to_sign.encode()).hexdigest()  # noqa: S324

    return f"{settings.payfast_url}?{urlencode(fields)}"


async def finalize_payment(
    session: AsyncSession,
    reference: str,
    *,
    succeeded: bool,
    transaction_id: str | None = None,
    raw_payload: dict | None = None,
    subscription_id: str | None = None,
) -> PaymentOutcome:
    """Apply a processor notification to a pending payment.

    The payment row and its business row are both locked; the status change,
    processor data and business effect commit together or not at all.
    """
    stmt = (
        select(Payment)
        .where(Payment.reference == reference)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    payment = result.scalar_one_or_none()
    if payment is None:
        await session.commit()
        raise NotFoundError("Payment")

    if payment.status.is_final:
        status = payment.status
        await session.commit()
        logger.info("Payment %s already %s, ignoring notification", reference, status)
        return PaymentOutcome.ALREADY_FINALIZED

    payment_id = payment.id
    try:
        business = await lock_business(session, payment.business_id)

        if succeeded:
            payment.status = PaymentStatus.COMPLETED
            if payment.payment_type == PaymentType.UPGRADE:
                apply_tier_change(
                    business, payment.package_type, subscription_id or payment.reference,
                )
            else:
                grant_advert_slot(business)
            session.add(business)
        else:
            payment.status = PaymentStatus.FAILED

        payment.transaction_id = transaction_id
        payment.processor_response = json.dumps(raw_payload or {}, default=str)
        payment.updated_at = utcnow()
        session.add(payment)
        await session.commit()
    except Exception:
        await session.rollback()
        logger.exception("Payment finalization failed for payment %s (%s)", payment_id, reference)
        raise

    outcome = PaymentOutcome.COMPLETED if succeeded else PaymentOutcome.FAILED
    logger.info(
        "Payment %s finalized: status=%s transaction_id=%s", reference, outcome, transaction_id,
    )
    return outcome


async def get_payment_by_reference(session: AsyncSession, reference: str) -> Payment:
    result = await session.execute(select(Payment).where(Payment.reference == reference))
    payment = result.scalar_one_or_none()
    if payment is None:
        raise NotFoundError("Payment")
    return payment


async def payment_history(
    session: AsyncSession,
    business_id: uuid.UUID,
    limit: int = 10,
    offset: int = 0,
) -> list[Payment]:
    stmt = (
        select(Payment)
        .where(Payment.business_id == business_id)
        .order_by(Payment.created_at.desc())  # type: ignore[union-attr]
        .limit(limit)
        .offset(offset)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def payment_statistics(session: AsyncSession, business_id: uuid.UUID) -> dict:
    completed = Payment.status == PaymentStatus.COMPLETED
    stmt = select(
        func.coalesce(func.sum(case((completed, Payment.amount), else_=0)), 0),
        func.count(case((completed, 1))),
        func.count(case((Payment.status == PaymentStatus.FAILED, 1))),
        func.max(case((completed, Payment.created_at))),
    ).where(Payment.business_id == business_id)
    total_spent, successful, failed, last_payment = (await session.execute(stmt)).one()
    return {
        "total_spent": float(total_spent or 0),
        "successful_payments": int(successful or 0),
        "failed_payments": int(failed or 0),
        "last_payment_date": last_payment,
    }
