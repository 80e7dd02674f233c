"""Administrator endpoints — verification, advert moderation, platform stats."""

import uuid
from datetime import date

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from bizdir.api.deps import Admin, Session
from bizdir.models.advert import AdvertRead, AdvertStatus
from bizdir.models.business import BusinessRead, VerificationStatus
from bizdir.models.payment import PaymentRead
from bizdir.services import adverts as advert_service
from bizdir.services import verification
from bizdir.services.businesses import admin_summary
from bizdir.services.errors import InvalidStatusError, NotFoundError

router = APIRouter(prefix="/admin", tags=["admin"])


# ── Schemas ──────────────────────────────────────────────────

class VerificationUpdate(BaseModel):
    # Plain str so out-of-range values reach the service and get its message.
    status: str


class AdvertStatusUpdate(BaseModel):
    status: str


class ExpireResponse(BaseModel):
    expired: int


class PaymentSummary(BaseModel):
    recent: list[PaymentRead]
    total_revenue: float


class AdminStats(BaseModel):
    businesses: dict[str, int]
    packages: dict[str, int]
    payments: PaymentSummary


# ── Routes ───────────────────────────────────────────────────

@router.get("/businesses/pending", response_model=list[BusinessRead])
async def list_pending_businesses(admin: Admin, session: Session) -> list[BusinessRead]:
    businesses = await verification.pending_businesses(session)
    return [BusinessRead.model_validate(b) for b in businesses]


@router.put("/businesses/{business_id}/status", response_model=BusinessRead)
async def set_business_status(
    business_id: uuid.UUID,
    body: VerificationUpdate,
    admin: Admin,
    session: Session,
) -> BusinessRead:
    """Verify or reject a listing. Only "verified" and "rejected" are accepted."""
    try:
        business = await verification.set_verification_status(
            session, business_id, body.status,
        )
    except InvalidStatusError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(exc),
        ) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return BusinessRead.model_validate(business)


@router.put("/adverts/{advert_id}/status", response_model=AdvertRead)
async def set_advert_status(
    advert_id: uuid.UUID,
    body: AdvertStatusUpdate,
    admin: Admin,
    session: Session,
) -> AdvertRead:
    try:
        advert = await advert_service.set_advert_status(session, advert_id, body.status)
    except InvalidStatusError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(exc),
        ) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return AdvertRead.model_validate(advert)


@router.post("/adverts/expire", response_model=ExpireResponse)
async def expire_adverts(admin: Admin, session: Session) -> ExpireResponse:
    """Run the advert expiry sweep now instead of waiting for the cron job."""
    expired = await advert_service.expire_old_adverts(session, date.today())
    return ExpireResponse(expired=expired)


@router.get("/stats", response_model=AdminStats)
async def get_admin_stats(admin: Admin, session: Session) -> AdminStats:
    return AdminStats(**await admin_summary(session))
