"""Centralized package pricing.

Single source of truth for what upgrades and extra advert slots cost (ZAR).
Exposed via GET /v1/payments/packages for the pricing page.
"""

from bizdir.core.entitlements import Tier, limits_for

# Monthly price of each purchasable tier. Basic and Bronze are assigned, not bought.
PACKAGE_PRICES: dict[Tier, float] = {
    Tier.SILVER: 500.0,
    Tier.GOLD: 1000.0,
}

ADVERT_SLOT_PRICE: float = 100.0

PACKAGE_FEATURES: dict[Tier, list[str]] = {
    Tier.BASIC: [
        "Business listing",
        "Community reviews",
    ],
    Tier.BRONZE: [
        "Everything in Basic",
        "Contact information shown",
    ],
    Tier.SILVER: [
        "Everything in Bronze",
        "Website link",
        "Product catalog (up to 20 products)",
        "Featured in category searches",
        "1 advert slot per month",
    ],
    Tier.GOLD: [
        "Everything in Silver",
        "Unlimited products",
        "Priority listing in search results",
        "Social media promotion",
        f"{limits_for(Tier.GOLD).advert_slots} advert slots per month",
    ],
}


def is_purchasable(tier: Tier) -> bool:
    return tier in PACKAGE_PRICES


def upgrade_price(tier: Tier) -> float:
    return PACKAGE_PRICES[tier]


def package_catalog() -> list[dict]:
    """Tier catalog in display order, with prices and limits."""
    return [
        {
            "id": tier.value.lower(),
            "name": tier.value,
            "price": PACKAGE_PRICES.get(tier, 0.0),
            "billing_cycle": "monthly" if is_purchasable(tier) else "once",
            "features": PACKAGE_FEATURES[tier],
            "limits": limits_for(tier).as_dict(),
        }
        for tier in Tier
    ]
