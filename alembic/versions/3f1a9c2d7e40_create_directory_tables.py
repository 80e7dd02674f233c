"""create users, businesses, payments, adverts and products

Revision ID: 3f1a9c2d7e40
Revises: 
Create Date: 2026-10-18 09:12:44.201733

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7e40'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# Enum columns store member names, matching SQLModel's default mapping.
tier = sa.Enum("BASIC", "BRONZE", "SILVER", "GOLD", name="tier")
user_role = sa.Enum("OWNER", "ADMIN", name="userrole")
verification_status = sa.Enum("PENDING", "VERIFIED", "REJECTED", name="verificationstatus")
payment_type = sa.Enum("UPGRADE", "ADVERT", name="paymenttype")
payment_status = sa.Enum("PENDING", "COMPLETED", "FAILED", name="paymentstatus")
advert_placement = sa.Enum("SIDEBAR", "BANNER", "FEATURED", name="advertplacement")
advert_status = sa.Enum("PENDING", "ACTIVE", "REJECTED", "EXPIRED", name="advertstatus")
product_status = sa.Enum("ACTIVE", "INACTIVE", name="productstatus")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "businesses",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("owner_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("district", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("website", sa.String(2048), nullable=True),
        sa.Column("tier", tier, nullable=False),
        sa.Column("verification_status", verification_status, nullable=False),
        sa.Column("adverts_remaining", sa.Integer(), nullable=False),
        sa.Column("subscription_reference", sa.String(255), nullable=True),
        sa.CheckConstraint("adverts_remaining >= 0", name="ck_businesses_adverts_remaining"),
    )
    op.create_index("ix_businesses_owner_id", "businesses", ["owner_id"])
    op.create_index("ix_businesses_tier", "businesses", ["tier"])
    op.create_index(
        "ix_businesses_verification_status", "businesses", ["verification_status"],
    )

    op.create_table(
        "payments",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("business_id", sa.Uuid(), sa.ForeignKey("businesses.id"), nullable=False),
        sa.Column("reference", sa.String(64), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("payment_type", payment_type, nullable=False),
        sa.Column("package_type", tier, nullable=False),
        sa.Column("status", payment_status, nullable=False),
        sa.Column("transaction_id", sa.String(255), nullable=True),
        sa.Column("processor_response", sa.Text(), nullable=True),
    )
    op.create_index("ix_payments_business_id", "payments", ["business_id"])
    op.create_index("ix_payments_reference", "payments", ["reference"], unique=True)
    op.create_index("ix_payments_status", "payments", ["status"])

    op.create_table(
        "adverts",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("business_id", sa.Uuid(), sa.ForeignKey("businesses.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("url", sa.String(2048), nullable=True),
        sa.Column("placement", advert_placement, nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("status", advert_status, nullable=False),
    )
    op.create_index("ix_adverts_business_id", "adverts", ["business_id"])
    op.create_index("ix_adverts_placement", "adverts", ["placement"])
    op.create_index("ix_adverts_status", "adverts", ["status"])

    op.create_table(
        "products",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("business_id", sa.Uuid(), sa.ForeignKey("businesses.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("status", product_status, nullable=False),
    )
    op.create_index("ix_products_business_id", "products", ["business_id"])
    op.create_index("ix_products_status", "products", ["status"])


def downgrade() -> None:
    op.drop_table("products")
    op.drop_table("adverts")
    op.drop_table("payments")
    op.drop_table("businesses")
    op.drop_table("users")
    for enum in (
        product_status, advert_status, advert_placement, payment_status,
        payment_type, verification_status, user_role, tier,
    ):
        enum.drop(op.get_bind(), checkfirst=True)
