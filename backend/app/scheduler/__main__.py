"""Scheduler entry point: python -m app.scheduler"""
import signal
import sys
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from app.core.config import settings
from app.core.logging import setup_logging, get_logger
from app.scheduler.renewal_updater import run_renewal_catch_up

logger = get_logger("scheduler")


def build_scheduler() -> BlockingScheduler:
    """The scheduler and its jobs. Owned by this process, one per process."""
    scheduler = BlockingScheduler(timezone=settings.SCHEDULER_TIMEZONE)

    # Daily: renewal date catch-up
    scheduler.add_job(
        run_renewal_catch_up,
        CronTrigger(
            hour=settings.SCHEDULER_RENEWAL_HOUR,
            minute=settings.SCHEDULER_RENEWAL_MINUTE,
            timezone=settings.SCHEDULER_TIMEZONE,
        ),
        id="renewal_updater",
        max_instances=1,
        coalesce=True,
    )
    return scheduler


def main():
    setup_logging(debug=settings.DEBUG, process_name="scheduler")
    scheduler = build_scheduler()

    def signal_handler(sig, frame):
        logger.info("Scheduler received stop signal")
        scheduler.shutdown(wait=False)
        sys.exit(0)

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    logger.info(
        f"Scheduler started: renewal catch-up at "
        f"{settings.SCHEDULER_RENEWAL_HOUR:02d}:{settings.SCHEDULER_RENEWAL_MINUTE:02d} "
        f"{settings.SCHEDULER_TIMEZONE}"
    )
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")


if __name__ == "__main__":
    main()
