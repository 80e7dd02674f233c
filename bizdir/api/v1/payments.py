"""Payment endpoints — package catalog, initiation, processor webhook, history."""

import logging
import uuid
from datetime import datetime

from fastapi import APIRouter, HTTPException, Query, Request, status
from pydantic import BaseModel, ConfigDict, ValidationError

from bizdir.api.deps import OwnerBusiness, Session
from bizdir.core.config import get_settings
from bizdir.core.entitlements import InvalidTierError
from bizdir.core.pricing import package_catalog
from bizdir.core.security import verify_signature
from bizdir.models.payment import PaymentRead, PaymentType
from bizdir.services import payments as payment_service
from bizdir.services.errors import NotFoundError
from bizdir.services.payments import PaymentOutcome

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])

SIGNATURE_HEADER = "X-Payment-Signature"


# ── Schemas ──────────────────────────────────────────────────

class InitiatePaymentRequest(BaseModel):
    payment_type: PaymentType
    package_type: str | None = None


class InitiatePaymentResponse(BaseModel):
    payment_id: uuid.UUID
    reference: str
    amount: float
    payment_url: str


class WebhookNotification(BaseModel):
    """Processor notification. Unknown fields are kept for the audit record."""
    model_config = ConfigDict(extra="allow")

    reference: str
    payment_status: str
    transaction_id: str | None = None
    subscription_id: str | None = None


class WebhookResponse(BaseModel):
    status: str
    outcome: PaymentOutcome


class PaymentStatistics(BaseModel):
    total_spent: float
    successful_payments: int
    failed_payments: int
    last_payment_date: datetime | None


class PaymentHistoryResponse(BaseModel):
    payments: list[PaymentRead]
    statistics: PaymentStatistics


# ── Routes ───────────────────────────────────────────────────

@router.get("/packages")
async def list_packages() -> list[dict]:
    return package_catalog()


@router.post(
    "/initiate",
    response_model=InitiatePaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def initiate_payment(
    body: InitiatePaymentRequest,
    business: OwnerBusiness,
    session: Session,
) -> InitiatePaymentResponse:
    """Create a pending payment and return the gateway checkout URL."""
    try:
        payment = await payment_service.initiate_payment(
            session, business, body.payment_type, body.package_type,
        )
    except InvalidTierError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(exc),
        ) from exc

    return InitiatePaymentResponse(
        payment_id=payment.id,
        reference=payment.reference,
        amount=payment.amount,
        payment_url=payment_service.build_checkout_url(payment, business),
    )


@router.post("/webhook", response_model=WebhookResponse)
async def payment_webhook(request: Request, session: Session) -> WebhookResponse:
    """Processor notification. Idempotent: re-deliveries are acknowledged and ignored."""
    raw = await request.body()

    secret = get_settings().payment_webhook_secret
    if secret:
        signature = request.headers.get(SIGNATURE_HEADER, "")
        if not signature or not verify_signature(secret, raw, signature):
            logger.warning("Rejected payment webhook with bad signature")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid signature",
            )

    try:
        notification = WebhookNotification.model_validate_json(raw)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc

    try:
        outcome = await payment_service.finalize_payment(
            session,
            notification.reference,
            succeeded=payment_service.payment_succeeded(notification.payment_status),
            transaction_id=notification.transaction_id,
            raw_payload=notification.model_dump(),
            subscription_id=notification.subscription_id,
        )
    except NotFoundError as exc:
        logger.warning("Webhook for unknown payment reference %s", notification.reference)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    if outcome is PaymentOutcome.ALREADY_FINALIZED:
        return WebhookResponse(status="ignored", outcome=outcome)
    return WebhookResponse(status="ok", outcome=outcome)


@router.get("/history", response_model=PaymentHistoryResponse)
async def get_payment_history(
    business: OwnerBusiness,
    session: Session,
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> PaymentHistoryResponse:
    payments = await payment_service.payment_history(session, business.id, limit, offset)
    stats = await payment_service.payment_statistics(session, business.id)
    return PaymentHistoryResponse(
        payments=[PaymentRead.model_validate(p) for p in payments],
        statistics=PaymentStatistics(**stats),
    )


@router.get("/{reference}", response_model=PaymentRead)
async def get_payment(
    reference: str,
    business: OwnerBusiness,
    session: Session,
) -> PaymentRead:
    """Status lookup for the gateway return page."""
    try:
        payment = await payment_service.get_payment_by_reference(session, reference)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if payment.business_id != business.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return PaymentRead.model_validate(payment)
