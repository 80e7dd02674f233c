"""Import all models so SQLModel.metadata picks them up."""

from bizdir.models.advert import (
    Advert,
    AdvertCreate,
    AdvertPlacement,
    AdvertRead,
    AdvertStatus,
    AdvertUpdate,
)
from bizdir.models.business import (
    Business,
    BusinessCreate,
    BusinessPublic,
    BusinessRead,
    VerificationStatus,
)
from bizdir.models.payment import Payment, PaymentRead, PaymentStatus, PaymentType
from bizdir.models.product import (
    Product,
    ProductCreate,
    ProductRead,
    ProductStatus,
    ProductUpdate,
)
from bizdir.models.user import User, UserRead, UserRole

__all__ = [
    "Advert",
    "AdvertCreate",
    "AdvertPlacement",
    "AdvertRead",
    "AdvertStatus",
    "AdvertUpdate",
    "Business",
    "BusinessCreate",
    "BusinessPublic",
    "BusinessRead",
    "Payment",
    "PaymentRead",
    "PaymentStatus",
    "PaymentType",
    "Product",
    "ProductCreate",
    "ProductRead",
    "ProductStatus",
    "ProductUpdate",
    "User",
    "UserRead",
    "UserRole",
    "VerificationStatus",
]
