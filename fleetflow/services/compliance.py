# fleetflow/services/compliance.py
"""Driver compliance sweep.

Drivers whose license expired before today are suspended while the
``block_expired_license`` rule is on. The sweep only ever moves drivers into
``suspended``; lifting a suspension is a manual edit.
"""
import asyncio
import logging
from datetime import date
from typing import Callable, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from fleetflow import crud
from fleetflow.errors import FleetFlowError
from fleetflow.models.driver import DriverModel
from fleetflow.models.enums import DriverStatus
from fleetflow.models.system_config import SystemConfig

logger = logging.getLogger(__name__)


def drivers_to_suspend(drivers: Iterable[DriverModel], today: date) -> List[DriverModel]:
    return [
        d for d in drivers
        if d.license_expired(today) and d.status != DriverStatus.suspended
    ]


async def suspend_drivers(db: AsyncIOMotorDatabase, drivers: Iterable[DriverModel]) -> List[str]:
    suspended = []
    for driver in drivers:
        await crud.driver.update(db, driver.id, values={"status": DriverStatus.suspended})
        logger.info(
            "Driver %s (%s) suspended: license expired %s",
            driver.id, driver.name, driver.license_expiry.isoformat(),
        )
        suspended.append(driver.id)
    return suspended


async def run_compliance_sweep(
    db: AsyncIOMotorDatabase, config: SystemConfig, today: Optional[date] = None
) -> List[str]:
    """Suspend every driver holding an expired license. Returns the suspended ids."""
    if not config.block_expired_license:
        return []
    today = today or date.today()
    drivers = await crud.driver.get_multi(db, query={"status": {"$ne": DriverStatus.suspended.value}})
    return await suspend_drivers(db, drivers_to_suspend(drivers, today))


async def sweep_driver(
    db: AsyncIOMotorDatabase, config: SystemConfig, driver: DriverModel, today: Optional[date] = None
) -> DriverModel:
    """Apply the sweep to one freshly written driver and return its current state."""
    if not config.block_expired_license:
        return driver
    if drivers_to_suspend([driver], today or date.today()):
        await suspend_drivers(db, [driver])
        return driver.model_copy(update={"status": DriverStatus.suspended})
    return driver


class ComplianceWatcher:
    """Background task re-running the sweep while the application is up.

    With change streams enabled the sweep runs on every change to the
    ``drivers`` collection and the stream is reopened after a storage error.
    Otherwise it runs every ``interval`` seconds.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        config_source: Callable[[], SystemConfig],
        *,
        use_change_streams: bool = False,
        interval: float = 300,
    ):
        self.db = db
        self.config_source = config_source
        self.use_change_streams = use_change_streams
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    async def run_once(self) -> List[str]:
        try:
            return await run_compliance_sweep(self.db, self.config_source())
        except FleetFlowError as e:
            logger.error("Compliance sweep failed: %s", e)
            return []

    async def _poll(self):
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval)

    async def _watch(self):
        await self.run_once()
        while True:
            try:
                async with crud.driver.watch(self.db) as stream:
                    logger.info("Watching drivers for license compliance")
                    async for _ in stream:
                        # our own suspensions come back as updates; the sweep ignores them
                        await self.run_once()
            except PyMongoError as e:
                logger.warning("Driver change stream interrupted, reopening in %ss: %s", self.interval, e)
                await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self._task is None:
            loop = self._watch() if self.use_change_streams else self._poll()
            self._task = asyncio.create_task(loop)

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
