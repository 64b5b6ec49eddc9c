"""Expired reservation sweep scheduler."""
import logging
import asyncio
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from ticker_registry.core.config import settings
from ticker_registry.services.ticker_service import RegistryService
from ticker_registry.stores import StorageUnavailableError


logger = logging.getLogger(__name__)


class ReservationSweeper:
    """Runs cleanup_expired_reservations on a fixed cadence."""

    JOB_ID = "cleanup_expired_reservations"

    def __init__(self, registry: RegistryService, interval_minutes: int = None):
        self.registry = registry
        self.interval_minutes = interval_minutes or settings.cleanup_interval_minutes
        self.scheduler = AsyncIOScheduler()

    async def sweep(self) -> int:
        """Single sweep pass. Storage failures are logged and retried next tick."""
        try:
            removed = await self.registry.cleanup_expired_reservations()
            if removed:
                logger.info(f"Swept {removed} expired ticker reservations")
            else:
                logger.debug("No expired ticker reservations")
            return removed
        except StorageUnavailableError as e:
            logger.error(f"Error sweeping expired reservations: {e}", exc_info=True)
            return 0

    def start(self):
        """Start the scheduler with the sweep job."""
        logger.info(f"Starting reservation sweeper: every {self.interval_minutes} minutes")

        self.scheduler.add_job(
            self.sweep,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id=self.JOB_ID,
            replace_existing=True
        )

        self.scheduler.start()
        logger.info("Reservation sweeper started")

    def shutdown(self):
        if self.scheduler.running:
            logger.info("Shutting down reservation sweeper...")
            self.scheduler.shutdown(wait=False)

    async def run(self):
        """Run the sweeper indefinitely."""
        self.start()

        try:
            # Keep running
            while True:
                await asyncio.sleep(1)
        except (KeyboardInterrupt, SystemExit, asyncio.CancelledError):
            self.shutdown()


async def main():
    """Standalone sweeper for registries on a shared store (sql or redis)."""
    from ticker_registry.api.dependencies import build_registry_service

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if settings.store_backend == "memory":
        logger.warning("Standalone sweeper with the memory store only sees its own process")

    registry = await build_registry_service()
    sweeper = ReservationSweeper(registry)
    await sweeper.run()


if __name__ == "__main__":
    asyncio.run(main())
