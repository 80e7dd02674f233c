"""Product model — catalog entry, available from Silver upwards."""

import uuid
from datetime import datetime
from enum import StrEnum

from pydantic import field_validator
from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from bizdir.models.base import TimestampMixin, new_uuid, reject_null


class ProductStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Product(TimestampMixin, SQLModel, table=True):
    __tablename__ = "products"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    business_id: uuid.UUID = Field(foreign_key="businesses.id", nullable=False, index=True)

    name: str = Field(max_length=255, nullable=False)
    description: str | None = Field(default=None, sa_column=Column(Text))
    price: float | None = Field(default=None)
    status: ProductStatus = Field(default=ProductStatus.ACTIVE, index=True)


# ── Pydantic schemas ─────────────────────────────────────────

class ProductCreate(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    status: ProductStatus = ProductStatus.ACTIVE


class ProductUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    status: ProductStatus | None = None

    @field_validator("name", "status")
    @classmethod
    def reject_null_fields(cls, value):
        return reject_null(value)


class ProductRead(SQLModel):
    id: uuid.UUID
    business_id: uuid.UUID
    name: str
    description: str | None
    price: float | None
    status: ProductStatus
    created_at: datetime
    updated_at: datetime
