import logging
from datetime import date

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from config import MONTHLY_RENT_CRON_DAY, MONTHLY_RENT_CRON_HOUR, SCHEDULER_TIMEZONE
from database.init import SessionLocal
from services.payment_service import PaymentService

logger = logging.getLogger(__name__)


class BackgroundTasks:
    def __init__(self):
        self.scheduler = AsyncIOScheduler(timezone=SCHEDULER_TIMEZONE)
        self.payment_service = PaymentService()

        self.scheduler.add_job(
            self.generate_monthly_rent,
            CronTrigger(day=MONTHLY_RENT_CRON_DAY, hour=MONTHLY_RENT_CRON_HOUR, minute=0),
            id="monthly_rent_generation",
            replace_existing=True,
        )

    def start(self):
        self.scheduler.start()
        logger.info("Background tasks scheduled: %s", [job.id for job in self.scheduler.get_jobs()])

    def shutdown(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Background tasks stopped")

    async def generate_monthly_rent(self, as_of: date = None):
        """Create this month's rent obligations; safe to run more than once."""
        db = SessionLocal()
        try:
            created = self.payment_service.generate_monthly_obligations(db, as_of or date.today())
            logger.info("Monthly rent generation job created %s obligations", len(created))
            return len(created)
        except Exception:
            logger.exception("Monthly rent generation job failed")
            raise
        finally:
            SessionLocal.remove()
