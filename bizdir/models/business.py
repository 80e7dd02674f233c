"""Business model — the aggregate that carries tier, verification and quota."""

import uuid
from enum import StrEnum

from sqlalchemy import CheckConstraint, Text
from sqlmodel import Column, Field, SQLModel

from bizdir.core.entitlements import Tier
from bizdir.models.base import TimestampMixin, new_uuid


class VerificationStatus(StrEnum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class Business(TimestampMixin, SQLModel, table=True):
    __tablename__ = "businesses"
    __table_args__ = (
        CheckConstraint("adverts_remaining >= 0", name="ck_businesses_adverts_remaining"),
    )

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    owner_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)

    name: str = Field(max_length=255, nullable=False)
    category: str = Field(default="", max_length=100)
    district: str = Field(default="", max_length=100)
    description: str | None = Field(default=None, sa_column=Column(Text))
    address: str | None = Field(default=None, max_length=500)
    phone: str | None = Field(default=None, max_length=50)
    email: str | None = Field(default=None, max_length=320)
    website: str | None = Field(default=None, max_length=2048)

    # Package / entitlement state
    tier: Tier = Field(default=Tier.BASIC, index=True)
    verification_status: VerificationStatus = Field(
        default=VerificationStatus.PENDING, index=True,
    )
    adverts_remaining: int = Field(default=0, nullable=False)
    subscription_reference: str | None = Field(default=None, max_length=255)


# ── Pydantic schemas ─────────────────────────────────────────

class BusinessCreate(SQLModel):
    name: str = Field(max_length=255)
    category: str = Field(default="", max_length=100)
    district: str = Field(default="", max_length=100)
    description: str | None = None
    address: str | None = Field(default=None, max_length=500)
    phone: str | None = Field(default=None, max_length=50)
    email: str | None = Field(default=None, max_length=320)
    website: str | None = Field(default=None, max_length=2048)


class BusinessRead(SQLModel):
    """Owner / admin view, including entitlement state."""
    id: uuid.UUID
    owner_id: uuid.UUID
    name: str
    category: str
    district: str
    description: str | None
    address: str | None
    phone: str | None
    email: str | None
    website: str | None
    tier: Tier
    verification_status: VerificationStatus
    adverts_remaining: int
    subscription_reference: str | None


class BusinessPublic(SQLModel):
    """Directory view. Contact and website are blanked unless the tier shows them."""
    id: uuid.UUID
    name: str
    category: str
    district: str
    description: str | None
    address: str | None
    phone: str | None = None
    email: str | None = None
    website: str | None = None
    tier: Tier
    verified: bool
