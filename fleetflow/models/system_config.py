# fleetflow/models/system_config.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

SYSTEM_CONFIG_ID = "systemConfig"

class SystemConfig(BaseModel):
    """Business rules and display settings shared by every workflow."""
    company_name: str = "FleetFlow Logistics"
    currency: str = "$"
    default_region: str = "Central Hub"
    acquisition_cost_default: float = 25000
    rate_per_kg: float = 0.5

    # rule toggles
    auto_reset_driver: bool = True
    block_expired_license: bool = True
    prevent_overload: bool = True
    enable_roi: bool = True
    require_driver: bool = True
    require_maintenance: bool = False
    allow_cancel_after_dispatch: bool = False  # stored and editable, not consulted by cancellation

    license_expiry_alert_days: int = 30
    maintenance_reminder_days: int = 7

    version: str = "1.0.0"
    last_updated: Optional[datetime] = None
    updated_by: Optional[str] = None

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)
