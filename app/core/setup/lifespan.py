# app/core/setup/lifespan.py

from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI
from redis.asyncio import Redis

from app.core.config import settings


# =======================================
# LIFESPAN EVENTS
# =======================================
@asynccontextmanager
async def run_lifespan(app: FastAPI):
    """
    FastAPI lifespan context:
    - Startup: create tables (dev), cleanup old logs, set timezone, connect redis, start scheduler
    - Shutdown: stop scheduler, close redis
    """
    from app.infra.database.init_db import create_tables
    from app.core.middleware.logging import cleanup_old_logs
    from app.core.tasks.cron_jobs import cleanup_old_reports, purge_expired_sessions
    from app.infra.database.session import set_utc_timezone

    print(f"\n[STARTUP INFO] (i) Environment: {settings.APP_ENV}\n", flush=True)
    if settings.APP_ENV == "development":
        await create_tables()

    # --- General startup tasks ---
    cleanup_old_logs()  # Cleanup old log files
    await set_utc_timezone()  # Ensure DB session uses UTC timezone
    app.state.redis = Redis.from_url(settings.REDIS_URL)

    # --- Scheduler for recurring jobs ---
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        purge_expired_sessions,
        trigger="interval",
        hours=settings.EXPIRED_SESSION_PURGE_INTERVAL_HOURS,
        id="purge_expired_sessions",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    scheduler.add_job(
        cleanup_old_reports,
        trigger="interval",
        hours=settings.REPORT_CLEANUP_INTERVAL_HOURS,
        id="cleanup_old_reports",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    scheduler.start()
    print(
        f"[STARTUP INFO] (i) Expired session purge scheduled every "
        f"{settings.EXPIRED_SESSION_PURGE_INTERVAL_HOURS} hour(s)\n", flush=True
    )

    # --- Yield control to app ---
    yield

    # --- Shutdown tasks ---
    scheduler.shutdown()
    await app.state.redis.aclose()
    print("[SHUTDOWN INFO] Scheduler shut down\n", flush=True)
