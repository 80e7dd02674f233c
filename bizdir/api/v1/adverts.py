"""Advert endpoints — every create spends one slot, every delete returns one."""

import uuid
from datetime import date

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from bizdir.api.deps import OwnerBusiness, Session
from bizdir.models.advert import (
    AdvertCreate,
    AdvertPlacement,
    AdvertRead,
    AdvertStatus,
    AdvertUpdate,
)
from bizdir.services import adverts as advert_service
from bizdir.services.adverts import DEFAULT_ACTIVE_LIMIT
from bizdir.services.entitlement import EntitlementOutcome
from bizdir.services.errors import NotFoundError

router = APIRouter(prefix="/adverts", tags=["adverts"])

QUOTA_EXCEEDED_DETAIL = "No advert slots remaining. Please upgrade your package."


# ── Schemas ──────────────────────────────────────────────────

class AdvertCreated(BaseModel):
    advert: AdvertRead
    adverts_remaining: int


class AdvertDeleted(BaseModel):
    adverts_remaining: int


# ── Routes ───────────────────────────────────────────────────

@router.get("", response_model=list[AdvertRead])
async def list_adverts(
    business: OwnerBusiness,
    session: Session,
    status_filter: AdvertStatus | None = Query(default=None, alias="status"),
) -> list[AdvertRead]:
    adverts = await advert_service.list_adverts(session, business.id, status_filter)
    return [AdvertRead.model_validate(a) for a in adverts]


@router.post("", response_model=AdvertCreated, status_code=status.HTTP_201_CREATED)
async def create_advert(
    body: AdvertCreate,
    business: OwnerBusiness,
    session: Session,
) -> AdvertCreated:
    """Create a pending advert, spending one of the business's advert slots."""
    try:
        creation = await advert_service.create_advert(session, business.id, body)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    if creation.outcome is EntitlementOutcome.QUOTA_EXCEEDED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail=QUOTA_EXCEEDED_DETAIL,
        )

    return AdvertCreated(
        advert=AdvertRead.model_validate(creation.advert),
        adverts_remaining=creation.adverts_remaining,
    )


@router.get("/active/{placement}", response_model=list[AdvertRead])
async def list_active_adverts(
    placement: AdvertPlacement,
    session: Session,
    limit: int = DEFAULT_ACTIVE_LIMIT,
) -> list[AdvertRead]:
    """Public rotation feed for one placement."""
    adverts = await advert_service.active_adverts(session, placement, date.today(), limit)
    return [AdvertRead.model_validate(a) for a in adverts]


@router.get("/{advert_id}", response_model=AdvertRead)
async def get_advert(
    advert_id: uuid.UUID,
    business: OwnerBusiness,
    session: Session,
) -> AdvertRead:
    try:
        advert = await advert_service.get_owned_advert(session, business.id, advert_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return AdvertRead.model_validate(advert)


@router.patch("/{advert_id}", response_model=AdvertRead)
async def update_advert(
    advert_id: uuid.UUID,
    body: AdvertUpdate,
    business: OwnerBusiness,
    session: Session,
) -> AdvertRead:
    try:
        advert = await advert_service.update_advert(session, business.id, advert_id, body)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return AdvertRead.model_validate(advert)


@router.delete("/{advert_id}", response_model=AdvertDeleted)
async def delete_advert(
    advert_id: uuid.UUID,
    business: OwnerBusiness,
    session: Session,
) -> AdvertDeleted:
    """Delete an advert; its slot goes back to the business."""
    try:
        remaining = await advert_service.delete_advert(session, business.id, advert_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return AdvertDeleted(adverts_remaining=remaining)
