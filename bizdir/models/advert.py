"""Advert model — quota-consuming promotional slot owned by a business."""

import uuid
from datetime import date, datetime
from enum import StrEnum

from pydantic import field_validator
from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from bizdir.models.base import TimestampMixin, new_uuid, reject_null


class AdvertStatus(StrEnum):
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"
    EXPIRED = "expired"


class AdvertPlacement(StrEnum):
    SIDEBAR = "sidebar"
    BANNER = "banner"
    FEATURED = "featured"


class Advert(TimestampMixin, SQLModel, table=True):
    __tablename__ = "adverts"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    business_id: uuid.UUID = Field(foreign_key="businesses.id", nullable=False, index=True)

    title: str = Field(max_length=255, nullable=False)
    description: str | None = Field(default=None, sa_column=Column(Text))
    url: str | None = Field(default=None, max_length=2048)
    placement: AdvertPlacement = Field(nullable=False, index=True)
    start_date: date | None = Field(default=None)
    end_date: date | None = Field(default=None)
    status: AdvertStatus = Field(default=AdvertStatus.PENDING, index=True)


# ── Pydantic schemas ─────────────────────────────────────────

class AdvertCreate(SQLModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    url: str | None = Field(default=None, max_length=2048)
    placement: AdvertPlacement
    start_date: date | None = None
    end_date: date | None = None


class AdvertUpdate(SQLModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    url: str | None = Field(default=None, max_length=2048)
    placement: AdvertPlacement | None = None
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("title", "placement")
    @classmethod
    def reject_null_fields(cls, value):
        return reject_null(value)


class AdvertRead(SQLModel):
    id: uuid.UUID
    business_id: uuid.UUID
    title: str
    description: str | None
    url: str | None
    placement: AdvertPlacement
    start_date: date | None
    end_date: date | None
    status: AdvertStatus
    created_at: datetime
    updated_at: datetime
