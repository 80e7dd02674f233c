"""Package tiers and the features / limits each one unlocks.

Single source of truth for tier entitlements. Tiers are ordered and their
feature sets nest (Gold ⊇ Silver ⊇ Bronze ⊇ Basic). Anything coming in from
the outside world goes through ``parse_tier`` / ``parse_feature`` so an unknown
name is rejected at the boundary instead of quietly resolving to "no access".
"""

from dataclasses import dataclass
from enum import StrEnum


class Tier(StrEnum):
    BASIC = "Basic"
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)


_TIER_ORDER: list[Tier] = [Tier.BASIC, Tier.BRONZE, Tier.SILVER, Tier.GOLD]


class Feature(StrEnum):
    CONTACT = "contact"
    WEBSITE = "website"
    PRODUCTS = "products"
    FEATURED_LISTING = "featured_listing"
    SOCIAL_BOOST = "social_boost"


class InvalidTierError(ValueError):
    """A tier name outside the closed set of package tiers."""


class InvalidFeatureError(ValueError):
    """A feature name outside the closed set of gated features."""


# Advert slots granted when a business moves onto Gold.
GOLD_ADVERT_SLOTS = 3

# Silver businesses may list at most this many products.
SILVER_PRODUCT_LIMIT = 20


@dataclass(frozen=True)
class TierLimits:
    advert_slots: int
    product_limit: int | None  # None = unlimited
    can_list_products: bool
    can_show_contact: bool
    can_show_website: bool
    featured_listing: bool
    social_boost: bool

    def allows(self, feature: Feature) -> bool:
        match feature:
            case Feature.CONTACT:
                return self.can_show_contact
            case Feature.WEBSITE:
                return self.can_show_website
            case Feature.PRODUCTS:
                return self.can_list_products
            case Feature.FEATURED_LISTING:
                return self.featured_listing
            case Feature.SOCIAL_BOOST:
                return self.social_boost
        raise InvalidFeatureError(f"Unknown feature: {feature!r}")

    def as_dict(self) -> dict:
        return {
            "advert_slots": self.advert_slots,
            "product_limit": self.product_limit,
            "features": {f.value: self.allows(f) for f in Feature},
        }


ENTITLEMENTS: dict[Tier, TierLimits] = {
    Tier.BASIC: TierLimits(
        advert_slots=0,
        product_limit=0,
        can_list_products=False,
        can_show_contact=False,
        can_show_website=False,
        featured_listing=False,
        social_boost=False,
    ),
    Tier.BRONZE: TierLimits(
        advert_slots=0,
        product_limit=0,
        can_list_products=False,
        can_show_contact=True,
        can_show_website=False,
        featured_listing=False,
        social_boost=False,
    ),
    Tier.SILVER: TierLimits(
        advert_slots=1,
        product_limit=SILVER_PRODUCT_LIMIT,
        can_list_products=True,
        can_show_contact=True,
        can_show_website=True,
        featured_listing=True,
        social_boost=False,
    ),
    Tier.GOLD: TierLimits(
        advert_slots=GOLD_ADVERT_SLOTS,
        product_limit=None,
        can_list_products=True,
        can_show_contact=True,
        can_show_website=True,
        featured_listing=True,
        social_boost=True,
    ),
}


def parse_tier(value: str | Tier) -> Tier:
    try:
        return Tier(value)
    except ValueError as exc:
        valid = ", ".join(t.value for t in Tier)
        raise InvalidTierError(
            f"Invalid package type: {value}. Must be one of: {valid}"
        ) from exc


def parse_feature(value: str | Feature) -> Feature:
    try:
        return Feature(value)
    except ValueError as exc:
        valid = ", ".join(f.value for f in Feature)
        raise InvalidFeatureError(
            f"Invalid feature: {value}. Must be one of: {valid}"
        ) from exc


def limits_for(tier: str | Tier) -> TierLimits:
    """Return the limits for a tier. Raises InvalidTierError on unknown tiers."""
    return ENTITLEMENTS[parse_tier(tier)]
