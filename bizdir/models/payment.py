"""Payment model — one row per payment attempt."""

import uuid
from datetime import datetime
from enum import StrEnum

from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from bizdir.core.entitlements import Tier
from bizdir.models.base import TimestampMixin, new_uuid


class PaymentType(StrEnum):
    UPGRADE = "upgrade"
    ADVERT = "advert"


class PaymentStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_final(self) -> bool:
        return self is not PaymentStatus.PENDING


class Payment(TimestampMixin, SQLModel, table=True):
    __tablename__ = "payments"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    business_id: uuid.UUID = Field(foreign_key="businesses.id", nullable=False, index=True)
    reference: str = Field(max_length=64, unique=True, nullable=False, index=True)

    amount: float = Field(nullable=False)
    payment_type: PaymentType = Field(nullable=False)
    package_type: Tier = Field(nullable=False)
    status: PaymentStatus = Field(default=PaymentStatus.PENDING, index=True)

    transaction_id: str | None = Field(default=None, max_length=255)
    # Raw processor notification, JSON text
    processor_response: str | None = Field(default=None, sa_column=Column(Text))


# ── Pydantic schemas ─────────────────────────────────────────

class PaymentRead(SQLModel):
    id: uuid.UUID
    business_id: uuid.UUID
    reference: str
    amount: float
    payment_type: PaymentType
    package_type: Tier
    status: PaymentStatus
    transaction_id: str | None
    created_at: datetime
    updated_at: datetime
