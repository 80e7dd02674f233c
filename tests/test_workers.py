"""ARQ worker wiring."""

from bizdir.workers.expiry import expire_adverts
from bizdir.workers.main import WorkerSettings, _redis_settings


def test_expiry_registered_as_cron():
    assert expire_adverts in WorkerSettings.functions
    [job] = WorkerSettings.cron_jobs
    assert job.coroutine is expire_adverts
    assert job.hour == 0


def test_redis_settings_parsed_from_url(monkeypatch):
    from bizdir.core.config import get_settings
    monkeypatch.setattr(get_settings(), "redis_url", "redis://cache.internal:6380/3")
    settings = _redis_settings()
    assert settings.host == "cache.internal"
    assert settings.port == 6380
    assert settings.database == 3
