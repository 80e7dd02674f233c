"""Periodic job — expire active adverts whose end date has passed."""

from __future__ import annotations

import logging
from datetime import date

from bizdir.core.database import async_session_factory
from bizdir.services.adverts import expire_old_adverts

logger = logging.getLogger(__name__)


async def expire_adverts(ctx: dict) -> dict:
    """Cron job body. ``ctx["today"]`` overrides the current date in tests."""
    today = ctx.get("today") or date.today()
    async with async_session_factory() as session:
        expired = await expire_old_adverts(session, today)

    logger.info("Advert expiry: %d adverts expired as of %s", expired, today)
    return {"expired": expired}
