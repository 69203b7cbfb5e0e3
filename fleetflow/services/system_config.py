# fleetflow/services/system_config.py
"""Settings provider: the process-wide ``SystemConfig`` record.

The record lives in the ``settings`` collection under a fixed id. Stored
fields are merged over the defaults so a partially populated or missing
document still yields a complete configuration.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError as SchemaError
from pymongo.errors import PyMongoError

from fleetflow.errors import OperationFailed, ValidationError
from fleetflow.models.system_config import SYSTEM_CONFIG_ID, SystemConfig

logger = logging.getLogger(__name__)

READ_ONLY_FIELDS = ("version", "last_updated", "updated_by")


def validate_config(config: SystemConfig) -> None:
    if config.acquisition_cost_default < 0:
        raise ValidationError("Acquisition cost cannot be negative.")
    if config.license_expiry_alert_days < 0:
        raise ValidationError("License expiry alert days must be at least 0.")
    if config.maintenance_reminder_days < 0:
        raise ValidationError("Maintenance reminder days must be at least 0.")
    if config.rate_per_kg < 0:
        raise ValidationError("Freight rate per kg cannot be negative.")
    if not config.company_name or not config.company_name.strip():
        raise ValidationError("Company name is required.")


class SettingsProvider:
    def __init__(self):
        self.current = SystemConfig()

    def apply(self, document: Optional[Dict[str, Any]]) -> SystemConfig:
        """Merge a stored document over the defaults and make it current."""
        values = SystemConfig().model_dump()
        if document:
            values.update({k: v for k, v in document.items() if k != "_id"})
        self.current = SystemConfig.model_validate(values)
        return self.current

    async def load(self, db: AsyncIOMotorDatabase) -> SystemConfig:
        try:
            document = await db.settings.find_one({"_id": SYSTEM_CONFIG_ID})
        except PyMongoError as e:
            logger.error("Settings read failed, keeping last known configuration: %s", e)
            return self.current
        try:
            return self.apply(document)
        except SchemaError as e:
            logger.error("Stored settings are invalid, keeping last known configuration: %s", e)
            return self.current

    async def _save(self, db: AsyncIOMotorDatabase, config: SystemConfig) -> SystemConfig:
        document = config.model_dump()
        try:
            await db.settings.replace_one({"_id": SYSTEM_CONFIG_ID}, document, upsert=True)
        except PyMongoError as e:
            raise OperationFailed("Failed to save settings", details=str(e))
        self.current = config
        return config

    async def update(
        self, db: AsyncIOMotorDatabase, changes: Dict[str, Any], updated_by: Optional[str] = None
    ) -> SystemConfig:
        base = await self.load(db)
        values = base.model_dump()
        values.update({k: v for k, v in changes.items() if k not in READ_ONLY_FIELDS})
        values["last_updated"] = datetime.utcnow()
        values["updated_by"] = updated_by
        try:
            config = SystemConfig.model_validate(values)
        except SchemaError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"])
            raise ValidationError(
                message="Invalid settings",
                details=f"{field}: {error['msg']}",
            )
        validate_config(config)
        logger.info("System configuration updated by %s: %s", updated_by, sorted(changes))
        return await self._save(db, config)

    async def reset(self, db: AsyncIOMotorDatabase, updated_by: Optional[str] = None) -> SystemConfig:
        config = SystemConfig(last_updated=datetime.utcnow(), updated_by=updated_by)
        logger.warning("System configuration reset to defaults by %s", updated_by)
        return await self._save(db, config)


settings_provider = SettingsProvider()
