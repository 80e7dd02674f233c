"""ARQ worker entrypoint."""

import asyncio

from arq import cron
from arq.connections import RedisSettings

from bizdir.core.config import get_settings
from bizdir.workers.expiry import expire_adverts


def _redis_settings() -> RedisSettings:
    """Parse REDIS_URL into ARQ RedisSettings."""
    settings = get_settings()
    # redis://host:port/db
    rest = settings.redis_url.split("://", 1)[-1]
    host_port, _, db = rest.partition("/")
    host, _, port = host_port.partition(":")
    return RedisSettings(
        host=host or "localhost",
        port=int(port) if port else 6379,
        database=int(db) if db else 0,
    )


async def startup(ctx: dict) -> None:
    """Called when the worker starts."""
    from bizdir.core.database import init_db
    await init_db()


class WorkerSettings:
    """ARQ worker configuration."""
    functions = [expire_adverts]
    # Daily sweep shortly after midnight
    cron_jobs = [cron(expire_adverts, hour=0, minute=5, run_at_startup=True)]
    on_startup = startup
    redis_settings = _redis_settings()
    max_jobs = 10
    job_timeout = 300


if __name__ == "__main__":
    from arq import run_worker
    asyncio.run(run_worker(WorkerSettings))  # type: ignore[arg-type]
