import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from ..config import get_settings
from ..db.session import SessionLocal
from ..services import booking_service

logger = logging.getLogger(__name__)


def advance_booking_statuses() -> int:
    with SessionLocal() as db:
        changed = booking_service.sweep_booking_statuses(db)
    if changed:
        logger.info("Advanced booking statuses", extra={"changed": changed})
    return changed


def get_scheduler() -> AsyncIOScheduler:
    settings = get_settings()
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        advance_booking_statuses,
        "interval",
        minutes=settings.status_sweep_minutes,
        id="advance_booking_statuses",
        max_instances=1,
        coalesce=True,
    )
    return scheduler
